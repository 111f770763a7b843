from decimal import Decimal
from typing import List, Optional

from ..models import RiskResult, RiskStatus, SecurityFlags
from .weights import (DEFAULT_PROFILE, ELEVATED_ACTIVITY_REASON, LOW_ACTIVITY_REASON,
                      NO_FLAGS_REASON, RiskProfile)


def classify(score: int, blacklisted: bool, profile: RiskProfile = DEFAULT_PROFILE) -> RiskStatus:
    if blacklisted and profile.blacklist_override:
        return RiskStatus.BLACKLISTED
    return RiskStatus.NEEDS_REVIEW if score >= profile.review_threshold else RiskStatus.SAFE


def score_risk(flags: SecurityFlags, blacklisted: bool, transfer_count: int, tx_count: Optional[int],
               usdt_balance: Optional[Decimal] = None, profile: RiskProfile = DEFAULT_PROFILE) -> RiskResult:
    """Combine the on-chain blacklist read, explorer flags and activity into a RiskResult.

    Pure function. The on-chain blacklist is absorbing: score 100, status
    Blacklisted, nothing else evaluated. Otherwise each rule that fires adds
    its weight and its reason (in rule order); the total is clamped to 0..100.
    An unknown tx_count or USDT balance never fires the activity rules.
    """
    if blacklisted and profile.blacklist_override:
        return RiskResult(100, RiskStatus.BLACKLISTED, (profile.blacklist_reason,))

    score = 0
    reasons: List[str] = []

    for rule in profile.rules:
        if flags.is_set(rule.flag):
            score += rule.weight
            reasons.append(rule.reason)

    if profile.activity_rules:
        if tx_count is not None and tx_count < profile.low_activity_tx_count:
            score += profile.low_activity_weight
            reasons.append(LOW_ACTIVITY_REASON)

        if (transfer_count >= profile.elevated_activity_threshold
                and usdt_balance is not None and usdt_balance > 0):
            score = max(score, profile.elevated_activity_floor)
            reasons.append(ELEVATED_ACTIVITY_REASON)

    score = int(min(max(score, 0), 100))
    if not reasons:
        reasons.append(NO_FLAGS_REASON)
    return RiskResult(score, classify(score, blacklisted, profile), tuple(reasons))
