import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

from dotenv import load_dotenv
load_dotenv()

ROOT_DIR = Path(__file__).resolve().parent.parent

TRONGRID = "https://api.trongrid.io"
TRONSCAN_BASE = "https://apilist.tronscanapi.com"
USDT_CONTRACT = "TR7NHqjeKQxGTCi8q8ZY4pL8otSzgjLj6t"


def _env_bool(name: str, default: bool = False) -> bool:
    raw = (os.getenv(name) or "").strip().lower()
    if not raw:
        return default
    return raw in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class Settings:
    trongrid_base: str = TRONGRID
    trongrid_api_key: str = ""
    tronscan_base: str = TRONSCAN_BASE
    tronscan_api_key: str = ""
    usdt_contract: str = USDT_CONTRACT
    # owner for constant calls; empty means the queried address
    owner_address: str = ""
    http_timeout: float = 15.0
    recent_transfers_limit: int = 20
    usdt_default_decimals: int = 6
    risk_profile: str = "default"
    strict_upstream: bool = False
    static_dir: Path = ROOT_DIR / "public"
    snapshot_dir: Path = Path("/tmp/tron_risk_snapshots")
    snapshot_ttl_minutes: int = 120
    log_level: str = "INFO"


def load_settings() -> Settings:
    return Settings(
        trongrid_base=os.getenv("TRONGRID_BASE", TRONGRID).rstrip("/"),
        trongrid_api_key=os.getenv("TRONGRID_API_KEY", ""),
        tronscan_base=os.getenv("TRONSCAN_BASE", TRONSCAN_BASE).rstrip("/"),
        tronscan_api_key=os.getenv("TRONSCAN_API_KEY", ""),
        usdt_contract=os.getenv("USDT_CONTRACT", USDT_CONTRACT),
        owner_address=os.getenv("OWNER_ADDRESS", ""),
        http_timeout=float(os.getenv("HTTP_TIMEOUT", "15")),
        recent_transfers_limit=int(os.getenv("RECENT_TRANSFERS_LIMIT", "20")),
        usdt_default_decimals=int(os.getenv("USDT_DEFAULT_DECIMALS", "6")),
        risk_profile=os.getenv("RISK_PROFILE", "default").strip().lower(),
        strict_upstream=_env_bool("STRICT_UPSTREAM"),
        static_dir=Path(os.getenv("STATIC_DIR", str(ROOT_DIR / "public"))),
        snapshot_dir=Path(os.getenv("SNAPSHOT_DIR", "/tmp/tron_risk_snapshots")),
        snapshot_ttl_minutes=int(os.getenv("SNAPSHOT_TTL_MINUTES", "120")),
        log_level=os.getenv("LOG_LEVEL", "INFO"),
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return load_settings()
