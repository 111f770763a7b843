"""Chain data client: provider calls + reshaping into the internal records.

Parsing lives in plain functions so it can be exercised with recorded
payloads; ChainDataClient only wires providers and settings together.
"""
import asyncio
import logging
from decimal import Decimal
from typing import List, Optional

import httpx

from ..config import Settings
from ..models import (SUN_PER_TRX, AccountSnapshot, Direction, SecurityFlags, TokenBalance,
                      TransferEvent, format_units)
from ..utils.address import display_address, normalize_address
from .blacklist import BlacklistOracle, constant_call_failure, decode_uint_word
from .trongrid import TronGrid
from .tronscan import TronScan

logger = logging.getLogger(__name__)

TRUTHY = {"true", "1", "yes", "y", "on"}
FALSY = {"false", "0", "no", "n", "off", ""}
KNOWN_FLAGS = ("is_black_list", "has_fraud_transaction", "fraud_token_creator", "send_ad_by_memo")


def coerce_flag(value) -> Optional[bool]:
    """True/1/"true"/"yes" -> True. Returns None for values that aren't flag-like."""
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value != 0
    if isinstance(value, str):
        s = value.strip().lower()
        if s in TRUTHY:
            return True
        if s in FALSY:
            return False
        return None
    if value is None:
        return False
    return None


def _pick_account(payload) -> dict:
    if not isinstance(payload, dict):
        return {}
    if "data" in payload:
        inner = payload.get("data")
        if isinstance(inner, dict):
            return inner
        if isinstance(inner, list) and inner:
            return inner[0] if isinstance(inner[0], dict) else {}
        return {}
    return payload  # already a flat object


def _usdt_raw(trc20_entries, contract: str) -> Optional[int]:
    # TronGrid: [{"<contract>": "<raw>"}, ...]
    target = normalize_address(contract)
    for entry in trc20_entries or []:
        if not isinstance(entry, dict):
            continue
        for key, raw in entry.items():
            if normalize_address(key) == target:
                try:
                    return int(str(raw))
                except ValueError:
                    return None
    return None


def parse_account(payload, tx_count: Optional[int], usdt_contract: str, usdt_decimals: int) -> AccountSnapshot:
    acct = _pick_account(payload)
    tokens = []

    trx_raw = acct.get("balance")
    # unknown or empty account: TronGrid omits "balance"
    if not isinstance(trx_raw, int):
        trx_raw = 0
    trx_balance = Decimal(trx_raw) / SUN_PER_TRX
    tokens.append(TokenBalance("TRX", "TRON", trx_raw, 6, token_type="native"))

    usdt_balance = Decimal(0)
    usdt_raw = _usdt_raw(acct.get("trc20"), usdt_contract)
    if usdt_raw is not None:
        usdt_balance = format_units(usdt_raw, usdt_decimals)
        tokens.insert(0, TokenBalance("USDT", "Tether USD", usdt_raw, usdt_decimals,
                                      usd_value=usdt_balance))

    return AccountSnapshot(
        created_at=acct.get("create_time") or acct.get("createTime"),
        latest_activity=acct.get("latest_opration_time") or acct.get("latest_operation_time"),
        trx_balance=trx_balance,
        usdt_balance=usdt_balance,
        tx_count=tx_count,
        tokens=tuple(tokens),
    )


def parse_tx_count(payload) -> Optional[int]:
    if not isinstance(payload, dict):
        return None
    for key in ("totalTransactionCount", "transactions", "total_transaction_count"):
        val = payload.get(key)
        if isinstance(val, int):
            return val
        if isinstance(val, str) and val.isdigit():
            return int(val)
    return None


def transfer_direction(frm: str, to: str, self_addr: str) -> Direction:
    me = normalize_address(self_addr)
    if to and normalize_address(to) == me:
        return Direction.IN
    if frm and normalize_address(frm) == me:
        return Direction.OUT
    return Direction.OTHER


def parse_transfers(payload, self_addr: str, usdt_contract: str, decimals: int, limit: int) -> List[TransferEvent]:
    items = payload.get("data", []) if isinstance(payload, dict) else []
    if not isinstance(items, list):
        items = []
    target = normalize_address(usdt_contract)

    out = []
    for it in items:
        if not isinstance(it, dict):
            continue
        contract = (it.get("token_info") or {}).get("address") or it.get("contract_address")
        if contract and normalize_address(contract) != target:
            continue
        frm = (it.get("from") or it.get("transfer_from") or "").strip()
        to = (it.get("to") or it.get("transfer_to") or "").strip()
        try:
            amount = format_units(str(it.get("value")), decimals)
        except (ValueError, TypeError, ArithmeticError):
            amount = None
        out.append(TransferEvent(
            timestamp=it.get("block_timestamp") or it.get("timestamp"),
            direction=transfer_direction(frm, to, self_addr),
            token_symbol=(it.get("token_info") or {}).get("symbol") or "USDT",
            amount=amount,
            tx_hash=it.get("transaction_id") or it.get("hash") or "",
            from_address=display_address(frm),
            to_address=display_address(to),
        ))
    out.sort(key=lambda ev: ev.timestamp or 0, reverse=True)
    return out[:limit]


def parse_security(security, blacklist_index) -> SecurityFlags:
    flags = {name: False for name in KNOWN_FLAGS}
    if isinstance(security, dict):
        for key, val in security.items():
            b = coerce_flag(val)
            if key in flags:
                flags[key] = bool(b)
            elif b is not None and isinstance(val, (bool, str)):
                flags[key] = b

    usdt = usdc = False
    ts = None
    entries = blacklist_index.get("data") if isinstance(blacklist_index, dict) else None
    for entry in entries or []:
        if not isinstance(entry, dict):
            continue
        token = str(entry.get("tokenName") or entry.get("token_name") or entry.get("tokenAbbr") or "").upper()
        if "USDT" in token:
            usdt = True
        elif "USDC" in token:
            usdc = True
        t = entry.get("time") or entry.get("blackTime") or entry.get("timestamp")
        if isinstance(t, int) and (ts is None or t < ts):
            ts = t

    flags["usdt_blacklisted"] = usdt
    flags["usdc_blacklisted"] = usdc
    return SecurityFlags(flags=flags, blacklist_timestamp=ts)


class ChainDataClient:
    # the four reads behind a summary; safe to run concurrently
    def __init__(self, settings: Settings, http: httpx.AsyncClient):
        self.settings = settings
        self.grid = TronGrid(http, settings.trongrid_base, settings.trongrid_api_key)
        self.scan = TronScan(http, settings.tronscan_base, settings.tronscan_api_key)
        self.oracle = BlacklistOracle(self.grid, settings.usdt_contract, settings.owner_address)
        self._usdt_decimals = None

    async def fetch_blacklist_status(self, address: str) -> bool:
        return await self.oracle.is_blacklisted(address)

    async def fetch_token_decimals(self, contract: str, owner: str) -> int:
        owner = self.settings.owner_address or owner
        resp = await self.grid.trigger_constant_contract(owner, contract, "decimals()")
        failure = constant_call_failure(resp if isinstance(resp, dict) else {})
        if failure:
            logger.warning("decimals() on %s unusable (%s); using %d", contract, failure,
                           self.settings.usdt_default_decimals)
            return self.settings.usdt_default_decimals
        return decode_uint_word(resp["constant_result"][0])

    def usdt_decimals(self, owner: str):
        # read once per client; the snapshot and transfer fetches share the answer
        if self._usdt_decimals is None:
            self._usdt_decimals = asyncio.ensure_future(
                self.fetch_token_decimals(self.settings.usdt_contract, owner))
        return asyncio.shield(self._usdt_decimals)

    async def fetch_account_snapshot(self, address: str) -> AccountSnapshot:
        contract = self.settings.usdt_contract
        acct, info, decimals = await asyncio.gather(
            self.grid.account_overview(address),
            self.scan.account_info(address),
            self.usdt_decimals(address),
        )
        return parse_account(acct, parse_tx_count(info), contract, decimals)

    async def fetch_recent_transfers(self, address: str, limit: Optional[int] = None) -> List[TransferEvent]:
        limit = limit or self.settings.recent_transfers_limit
        contract = self.settings.usdt_contract
        payload, decimals = await asyncio.gather(
            self.grid.account_trc20_transfers(address, limit=limit, contract_address=contract),
            self.usdt_decimals(address),
        )
        return parse_transfers(payload, address, contract, decimals, limit)

    async def fetch_security_flags(self, address: str) -> SecurityFlags:
        security, index = await asyncio.gather(
            self.scan.check_account_security(address),
            self.scan.check_stablecoin_blacklist(address),
        )
        return parse_security(security, index)
