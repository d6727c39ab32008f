import logging

from signoff.config import settings

_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: str | None = None) -> None:
    resolved = (level or settings.log_level or "INFO").upper()
    logging.basicConfig(level=resolved, format=_FORMAT)
    logging.getLogger("signoff").setLevel(resolved)
    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)
