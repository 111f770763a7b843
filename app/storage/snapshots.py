import os, json, hashlib, time, logging
from pathlib import Path
from tempfile import NamedTemporaryFile
from typing import Optional

logger = logging.getLogger(__name__)


class SnapshotCache:
    # short-lived copy of the last summary per address, read by the PDF export
    def __init__(self, directory: Path, ttl_minutes: int = 120):
        self.directory = Path(directory)
        self.ttl_minutes = ttl_minutes

    def _fname(self, address: str) -> Path:
        # hashed file name, addresses never reach the filesystem
        h = hashlib.sha256(address.strip().encode("utf-8")).hexdigest()
        return self.directory / f"{h}.json"

    def save(self, address: str, payload: dict) -> str:
        self.directory.mkdir(parents=True, exist_ok=True)
        self.prune()
        path = self._fname(address)
        # unique temp name per writer, then atomic replace
        with NamedTemporaryFile("w", encoding="utf-8", dir=self.directory, prefix=path.stem,
                                suffix=".tmp", delete=False) as f:
            json.dump(payload, f, ensure_ascii=False, separators=(",", ":"), default=str)
        try:
            os.replace(f.name, path)
        except OSError:
            Path(f.name).unlink(missing_ok=True)
            raise
        return str(path)

    def _is_fresh(self, path: Path) -> bool:
        if self.ttl_minutes <= 0:
            return True
        try:
            age = time.time() - path.stat().st_mtime
            return age <= self.ttl_minutes * 60
        except FileNotFoundError:
            return False

    def prune(self) -> int:
        """Delete expired snapshots and stale temp files; returns how many went."""
        if self.ttl_minutes <= 0 or not self.directory.is_dir():
            return 0
        removed = 0
        for path in list(self.directory.glob("*.json")) + list(self.directory.glob("*.tmp")):
            if not self._is_fresh(path):
                path.unlink(missing_ok=True)
                removed += 1
        if removed:
            logger.debug("pruned %d expired snapshots from %s", removed, self.directory)
        return removed

    def load(self, address: str) -> Optional[dict]:
        path = self._fname(address)
        if not path.exists():
            return None
        if not self._is_fresh(path):
            logger.debug("snapshot expired: %s", path)
            path.unlink(missing_ok=True)
            return None
        try:
            with open(path, "r", encoding="utf-8") as f:
                return json.load(f)
        except (OSError, ValueError) as e:
            logger.warning("unreadable snapshot %s: %s", path, e)
            return None

    def clear(self, address: str) -> None:
        self._fname(address).unlink(missing_ok=True)
