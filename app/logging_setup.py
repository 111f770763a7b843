import logging

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Root logger with a single stream handler; httpx/httpcore kept quiet."""
    lvl = getattr(logging, (level or "").upper(), None)
    if not isinstance(lvl, int):
        lvl = logging.INFO

    root = logging.getLogger()
    if not any(getattr(h, "_tron_risk", False) for h in root.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._tron_risk = True
        root.addHandler(handler)
    root.setLevel(lvl)

    for noisy in ("httpx", "httpcore"):
        logging.getLogger(noisy).setLevel(logging.WARNING)
