from dataclasses import dataclass
from typing import Dict, Tuple


@dataclass(frozen=True)
class RiskRule:
    flag: str
    weight: int
    reason: str


@dataclass(frozen=True)
class RiskProfile:
    name: str
    rules: Tuple[RiskRule, ...]
    blacklist_override: bool = True
    blacklist_reason: str = "USDT contract reports this address is blacklisted"
    low_activity_tx_count: int = 3          # tx_count below this -> "Low activity"
    low_activity_weight: int = 5
    elevated_activity_threshold: int = 10   # recent USDT transfers
    elevated_activity_floor: int = 60
    review_threshold: int = 60
    activity_rules: bool = True


FLAG_RULES = (
    RiskRule("is_black_list", 70, "Address appears on a blacklist"),
    RiskRule("has_fraud_transaction", 40, "History of fraud-flagged transactions"),
    RiskRule("fraud_token_creator", 20, "Creator of suspicious tokens"),
    RiskRule("send_ad_by_memo", 10, "Sent frequent advertising memos"),
)

LOW_ACTIVITY_REASON = "Low activity"
ELEVATED_ACTIVITY_REASON = "Frequent recent USDT transfers suggest elevated risk"
NO_FLAGS_REASON = "No obvious risk flags detected"

DEFAULT_PROFILE = RiskProfile(name="default", rules=FLAG_RULES)
FLAGS_ONLY_PROFILE = RiskProfile(name="flags_only", rules=FLAG_RULES, activity_rules=False)

PROFILES: Dict[str, RiskProfile] = {p.name: p for p in (DEFAULT_PROFILE, FLAGS_ONLY_PROFILE)}


def get_profile(name: str) -> RiskProfile:
    try:
        return PROFILES[(name or "default").strip().lower()]
    except KeyError:
        raise ValueError(f"unknown risk profile {name!r}; choose one of {sorted(PROFILES)}") from None
