"""Logging configuration helpers."""

import logging

_LOG_FORMAT = "%(levelname)s: %(name)s: [%(session_id)s] %(message)s"
_NOISY_LOGGERS = ("httpx", "google_genai")


class _SessionIdFilter(logging.Filter):
    """Fill in ``session_id`` for records logged outside a session."""

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "session_id"):
            record.session_id = "-"
        return True


def configure_logging(level: str | int = logging.INFO) -> None:
    """Attach one stream handler to the ``merry_style`` logger.

    Repeated calls only update the level. Per-request logs from httpx and
    google-genai are raised to WARNING so they don't drown session events.
    """
    logger = logging.getLogger("merry_style")
    logger.setLevel(level)
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
    if logger.handlers:
        return
    handler = logging.StreamHandler()
    handler.addFilter(_SessionIdFilter())
    handler.setFormatter(logging.Formatter(_LOG_FORMAT))
    logger.addHandler(handler)
    logger.propagate = False
