from decimal import Decimal
from typing import List, Optional

from ..models import NETWORK, AccountSnapshot, RiskResult, SecurityFlags, TransferEvent, to_number

SOURCE = "trongrid+tronscan"


def _usd_total(snapshot: Optional[AccountSnapshot]):
    # only the USDT leg is priced
    if snapshot is None:
        return None
    total = sum((t.usd_value for t in snapshot.tokens if t.usd_value is not None), Decimal(0))
    return to_number(total)


def assemble_summary(address: str, risk: RiskResult, blacklisted: bool,
                     snapshot: Optional[AccountSnapshot], transfers: Optional[List[TransferEvent]],
                     flags: Optional[SecurityFlags], profile: str = "default",
                     degraded: Optional[List[str]] = None) -> dict:
    """Merge the fetch results and the risk verdict into the response body.

    Anything that could not be fetched is null (or an empty list), never 0,
    so the UI can tell "unknown" from "zero".
    """
    recent = list(transfers or [])
    return {
        "address": address,
        "network": NETWORK,
        "status": risk.status.value,
        "risk": {"score": risk.score, "reasons": list(risk.reasons)},
        "totals": {"usd": _usd_total(snapshot)},
        "tokens": [t.to_dict() for t in snapshot.tokens] if snapshot else [],
        "blacklisted": blacklisted,
        "blacklist_timestamp": flags.blacklist_timestamp if flags else None,
        "transactions": {
            "recent": [ev.to_dict() for ev in recent],
            "count_returned": len(recent) if transfers is not None else None,
        },
        "security": dict(flags.flags) if flags else None,
        "meta": {
            "created_at": snapshot.created_at if snapshot else None,
            "latest_activity": snapshot.latest_activity if snapshot else None,
            "tx_count": snapshot.tx_count if snapshot else None,
            "trx_balance": to_number(snapshot.trx_balance) if snapshot else None,
            "source": SOURCE,
            "profile": profile,
            "degraded": list(degraded or []),
        },
    }
