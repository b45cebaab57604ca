import logging

from app.config import settings

_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

def configure_logging(level: str | None = None) -> None:
    root = logging.getLogger()
    if getattr(root, "_taskhub_configured", False):
        return

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(_FORMAT))
    root.addHandler(handler)
    root.setLevel((level or settings.log_level).upper())
    root._taskhub_configured = True  # type: ignore[attr-defined]
