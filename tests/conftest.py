"""Shared fixtures: settings pointed at tmp dirs, a fake chain client, sample payloads."""
from __future__ import annotations

from decimal import Decimal
from pathlib import Path

import pytest

from app.config import Settings
from app.errors import UpstreamError
from app.models import AccountSnapshot, Direction, SecurityFlags, TokenBalance, TransferEvent

# USDT TRC-20 contract: a real base58check address, hex 41a614f8...d13c
USDT = "TR7NHqjeKQxGTCi8q8ZY4pL8otSzgjLj6t"
USDT_HEX = "41a614f803b6fd780986a42c78ec9c7f77e6ded13c"
WALLET = USDT
OTHER = "TOtherCounterpartyAddressXXXXXXXXX"


class FakeChainClient:
    """Stands in for ChainDataClient; records every call so tests can assert no I/O happened."""

    def __init__(self, blacklisted=False, snapshot=None, transfers=None, flags=None, errors=None):
        self.blacklisted = blacklisted
        self.snapshot = snapshot if snapshot is not None else AccountSnapshot()
        self.transfers = transfers if transfers is not None else []
        self.flags = flags if flags is not None else SecurityFlags()
        self.errors = errors or {}
        self.calls: list[tuple[str, str]] = []

    async def _answer(self, name, address, value):
        self.calls.append((name, address))
        if name in self.errors:
            raise self.errors[name]
        return value

    async def fetch_blacklist_status(self, address):
        return await self._answer("blacklist", address, self.blacklisted)

    async def fetch_account_snapshot(self, address):
        return await self._answer("snapshot", address, self.snapshot)

    async def fetch_recent_transfers(self, address, limit=None):
        return await self._answer("transfers", address, self.transfers)

    async def fetch_security_flags(self, address):
        return await self._answer("flags", address, self.flags)


@pytest.fixture()
def settings(tmp_path: Path) -> Settings:
    return Settings(
        trongrid_base="https://grid.test",
        tronscan_base="https://scan.test",
        static_dir=tmp_path / "public",
        snapshot_dir=tmp_path / "snapshots",
        http_timeout=5.0,
    )


@pytest.fixture()
def sample_snapshot() -> AccountSnapshot:
    return AccountSnapshot(
        created_at=1600000000000,
        latest_activity=1700000000000,
        trx_balance=Decimal("12.5"),
        usdt_balance=Decimal("250"),
        tx_count=42,
        tokens=(
            TokenBalance("USDT", "Tether USD", 250_000_000, 6, usd_value=Decimal("250")),
            TokenBalance("TRX", "TRON", 12_500_000, 6, token_type="native"),
        ),
    )


@pytest.fixture()
def sample_transfers() -> list[TransferEvent]:
    return [
        TransferEvent(1700000002000, Direction.IN, "USDT", Decimal("10"), "aa" * 32, OTHER, WALLET),
        TransferEvent(1700000001000, Direction.OUT, "USDT", Decimal("3.5"), "bb" * 32, WALLET, OTHER),
    ]


@pytest.fixture()
def fake_client(sample_snapshot, sample_transfers) -> FakeChainClient:
    return FakeChainClient(snapshot=sample_snapshot, transfers=sample_transfers)


@pytest.fixture()
def upstream_error() -> UpstreamError:
    return UpstreamError("tronscan", "HTTP 503 from https://scan.test/api", "<html>busy</html>")
