import logging

from devevents.core.config import get_log_level

_configured = False


def configure_logging(level: str | None = None) -> None:
    """Configure root logging once per process."""
    global _configured
    if _configured:
        return

    logging.basicConfig(
        level=level or get_log_level(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    _configured = True
