import logging
import sys

from billbook.settings import settings

TEXT_FORMAT = "%(asctime)s %(levelname)s [%(surface)s] %(name)s: %(message)s"
JSON_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"

# Library loggers kept quiet whatever the application level is.
# sqlalchemy.engine echoes every statement at INFO; PIL traces PNG chunks
# at DEBUG each time a QR code is embedded in an invoice.
LIBRARY_LEVELS = {
    "sqlalchemy.engine": logging.WARNING,
    "alembic": logging.WARNING,
    "PIL": logging.INFO,
}
WEB_LIBRARY_LEVELS = {
    "uvicorn.access": logging.WARNING,
}

_surface = "cli"


class _SurfaceFilter(logging.Filter):
    """Tags each record with the entry point (``cli`` or ``web``) that emitted it."""

    def __init__(self, surface: str) -> None:
        super().__init__()
        self.surface = surface

    def filter(self, record: logging.LogRecord) -> bool:
        record.surface = self.surface
        return True


def _formatter() -> logging.Formatter:
    if settings.log_json:
        from pythonjsonlogger.json import JsonFormatter

        return JsonFormatter(
            fmt=JSON_FORMAT,
            rename_fields={"asctime": "timestamp", "levelname": "level"},
            static_fields={"app": "billbook"},
        )
    return logging.Formatter(TEXT_FORMAT)


def configure_logging(surface: str = "cli") -> None:
    """Configure the root logger for the ``cli`` or ``web`` entry point.

    Call once at startup. Call ``reconfigure()`` after the Alembic migrations,
    whose ``fileConfig`` replaces the root handlers.
    """
    global _surface
    _surface = surface
    level = getattr(logging, settings.log_level.upper(), logging.INFO)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(_formatter())
    handler.addFilter(_SurfaceFilter(surface))

    root = logging.getLogger()
    root.setLevel(level)
    root.handlers.clear()
    root.addHandler(handler)

    levels = dict(LIBRARY_LEVELS)
    if surface == "web":
        levels.update(WEB_LIBRARY_LEVELS)
    for name, library_level in levels.items():
        logging.getLogger(name).setLevel(library_level)


def reconfigure() -> None:
    """Re-apply the configuration for the surface set up last."""
    configure_logging(_surface)
