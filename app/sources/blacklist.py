import logging
from dataclasses import dataclass
from typing import Optional, Sequence

from ..errors import ContractCallAmbiguous
from ..utils.address import abi_encode_address
from .trongrid import TronGrid

logger = logging.getLogger(__name__)

# Fixed order: the first selector returning a decodable word wins
BLACKLIST_SELECTORS = (
    "isBlackListed(address)",
    "isBlacklisted(address)",
    "getBlackListStatus(address)",
    "isBlackList(address)",
)


def _decode_message(msg: str) -> str:
    # TronGrid sometimes hex-encodes the error message
    try:
        return bytes.fromhex(msg).decode("utf-8", "replace")
    except ValueError:
        return msg


def constant_call_failure(resp: dict) -> Optional[str]:
    """Why a triggerconstantcontract answer is unusable, or None when it is usable."""
    res = resp.get("result") or {}
    if not res.get("result"):
        msg = _decode_message(str(res.get("message") or res.get("code") or "no result"))
        return msg
    msg = _decode_message(str(res.get("message") or ""))
    if "REVERT" in msg.upper():
        return msg
    ret = ((resp.get("transaction") or {}).get("ret") or [{}])[0].get("ret")
    if ret == "REVERT":
        return "REVERT opcode executed"
    words = resp.get("constant_result") or []
    if not words or not (words[0] or "").strip():
        return "empty constant_result"
    try:
        int(words[0].replace("0x", ""), 16)
    except ValueError:
        return f"undecodable word {words[0]!r}"
    return None


def decode_bool_word(word: str) -> bool:
    # 0...01 -> True, 0...00 -> False; only the last bit matters
    h = (word or "").strip().lower().replace("0x", "")
    if not h:
        return False
    return bool(int(h[-2:], 16) & 1)


def decode_uint_word(word: str) -> int:
    h = (word or "").strip().lower().replace("0x", "")
    return int(h, 16) if h else 0


@dataclass(frozen=True)
class BlacklistOracle:
    """Asks a TRC-20 contract whether an address is blacklisted, one selector at a time."""

    grid: TronGrid
    contract: str
    owner_address: str = ""
    selectors: Sequence[str] = BLACKLIST_SELECTORS

    async def query(self, address_b58: str) -> bool:
        """Raises ContractCallAmbiguous when no selector gives a usable answer.

        UpstreamError (HTTP/transport/JSON) is not caught here: a node that
        can't be reached is not an ambiguous answer.
        """
        param = abi_encode_address(address_b58)
        owner = self.owner_address or address_b58
        attempts = []
        for selector in self.selectors:
            resp = await self.grid.trigger_constant_contract(owner, self.contract, selector, param)
            failure = constant_call_failure(resp if isinstance(resp, dict) else {})
            if failure is None:
                flagged = decode_bool_word(resp["constant_result"][0])
                logger.debug("%s(%s) -> %s", selector, address_b58, flagged)
                return flagged
            attempts.append(f"{selector}: {failure}")
        raise ContractCallAmbiguous(self.contract, attempts)

    async def is_blacklisted(self, address_b58: str) -> bool:
        try:
            return await self.query(address_b58)
        except ContractCallAmbiguous as e:
            logger.warning("blacklist read ambiguous for %s, treating as not blacklisted (%s)",
                           address_b58, "; ".join(e.attempts))
            return False
