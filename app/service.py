import asyncio
import logging

from .config import Settings
from .errors import UpstreamError
from .models import FetchOutcome, SecurityFlags
from .risk_engine.core import score_risk
from .risk_engine.summary import assemble_summary
from .risk_engine.weights import get_profile
from .utils.address import validate_address

logger = logging.getLogger(__name__)


async def gather_wallet_data(address: str, client, settings: Settings) -> FetchOutcome:
    """Fan out the four reads and join them.

    The blacklist read decides the request: if it fails, so does the call.
    Snapshot, transfers and explorer flags degrade to None unless
    settings.strict_upstream is on.
    """
    blacklisted, snapshot, transfers, flags = await asyncio.gather(
        client.fetch_blacklist_status(address),
        client.fetch_account_snapshot(address),
        client.fetch_recent_transfers(address, settings.recent_transfers_limit),
        client.fetch_security_flags(address),
        return_exceptions=True,
    )
    if isinstance(blacklisted, BaseException):
        raise blacklisted

    outcome = FetchOutcome(blacklisted=blacklisted)
    for name, value in (("snapshot", snapshot), ("transfers", transfers), ("flags", flags)):
        if isinstance(value, BaseException):
            if settings.strict_upstream or not isinstance(value, UpstreamError):
                raise value
            logger.warning("%s unavailable for %s, continuing without it: %s", name, address, value)
            outcome.degraded.append(f"{name} ({value.provider})")
            continue
        setattr(outcome, name, value)
    return outcome


async def check_wallet(address: str, client, settings: Settings) -> dict:
    address = validate_address(address)
    profile = get_profile(settings.risk_profile)

    data = await gather_wallet_data(address, client, settings)

    snap = data.snapshot
    transfers = data.transfers or []
    risk = score_risk(
        data.flags or SecurityFlags(),
        data.blacklisted,
        transfer_count=len(transfers),
        tx_count=snap.tx_count if snap else None,
        usdt_balance=snap.usdt_balance if snap else None,
        profile=profile,
    )
    logger.info("checked %s: score=%s status=%s degraded=%s",
                address, risk.score, risk.status.value, data.degraded or "-")
    return assemble_summary(address, risk, data.blacklisted, snap, data.transfers, data.flags,
                            profile=profile.name, degraded=data.degraded)
