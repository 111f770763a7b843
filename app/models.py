from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Dict, List, Optional, Tuple

NETWORK = "TRON"
SUN_PER_TRX = 1_000_000


def format_units(raw, decimals: int) -> Decimal:
    """Raw integer amount -> Decimal in token units (1_000_000 @ 6 -> 1)."""
    return Decimal(int(raw)) / (Decimal(10) ** int(decimals))


def to_number(d: Optional[Decimal]):
    return float(d) if d is not None else None


class RiskStatus(str, Enum):
    SAFE = "Safe"
    NEEDS_REVIEW = "Needs Review"
    BLACKLISTED = "Blacklisted"


class Direction(str, Enum):
    IN = "in"
    OUT = "out"
    OTHER = "other"


@dataclass(frozen=True)
class TokenBalance:
    symbol: str
    name: str
    raw_amount: int
    decimals: int
    token_type: str = "TRC20"
    usd_value: Optional[Decimal] = None

    @property
    def formatted_amount(self) -> Decimal:
        return format_units(self.raw_amount, self.decimals)

    def to_dict(self) -> dict:
        return {
            "symbol": self.symbol,
            "name": self.name,
            "token_type": self.token_type,
            "raw_amount": str(self.raw_amount),
            "decimals": self.decimals,
            "formatted_amount": to_number(self.formatted_amount),
            "usd_value": to_number(self.usd_value),
        }


@dataclass(frozen=True)
class TransferEvent:
    timestamp: Optional[int]
    direction: Direction
    token_symbol: str
    amount: Optional[Decimal]
    tx_hash: str
    from_address: str = ""
    to_address: str = ""

    def to_dict(self) -> dict:
        return {
            "timestamp": self.timestamp,
            "direction": self.direction.value,
            "token_symbol": self.token_symbol,
            "amount": to_number(self.amount),
            "tx_hash": self.tx_hash,
            "from": self.from_address,
            "to": self.to_address,
        }


@dataclass(frozen=True)
class SecurityFlags:
    flags: Dict[str, bool] = field(default_factory=dict)
    blacklist_timestamp: Optional[int] = None

    def is_set(self, name: str) -> bool:
        return bool(self.flags.get(name, False))

    def with_flags(self, **extra: bool) -> "SecurityFlags":
        merged = dict(self.flags)
        merged.update(extra)
        return SecurityFlags(flags=merged, blacklist_timestamp=self.blacklist_timestamp)


@dataclass(frozen=True)
class AccountSnapshot:
    created_at: Optional[int] = None
    latest_activity: Optional[int] = None
    trx_balance: Optional[Decimal] = None
    usdt_balance: Optional[Decimal] = None
    tx_count: Optional[int] = None
    tokens: Tuple[TokenBalance, ...] = ()


@dataclass(frozen=True)
class RiskResult:
    score: int
    status: RiskStatus
    reasons: Tuple[str, ...]

    def to_dict(self) -> dict:
        return {"score": self.score, "status": self.status.value, "reasons": list(self.reasons)}


@dataclass
class FetchOutcome:
    blacklisted: bool
    snapshot: Optional[AccountSnapshot] = None
    transfers: Optional[List[TransferEvent]] = None
    flags: Optional[SecurityFlags] = None
    degraded: List[str] = field(default_factory=list)
