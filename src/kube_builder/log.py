import logging

from rich.logging import RichHandler

from .settings import AppSettings, get_settings

ROOT_LOGGER = "kube_builder"

_configured = False


def configure_logging(settings: AppSettings | None = None) -> logging.Logger:
    """
    Silent by default. With RICH_LOGGING enabled the package logger renders
    through rich at LOG_LEVEL and stops propagating to the root logger.
    """
    global _configured

    settings = settings or get_settings()
    root = logging.getLogger(ROOT_LOGGER)
    for handler in list(root.handlers):
        if isinstance(handler, (logging.NullHandler, RichHandler)):
            root.removeHandler(handler)

    if settings.RICH_LOGGING:
        root.setLevel(settings.LOG_LEVEL.upper())
        root.addHandler(RichHandler(rich_tracebacks=settings.RICH_TRACEBACKS, show_path=False))
        root.propagate = False
    else:
        root.setLevel(logging.NOTSET)
        root.addHandler(logging.NullHandler())
        root.propagate = True

    _configured = True
    return root


def get_logger(name: str) -> logging.Logger:
    """Returns a child of the package logger."""
    if not _configured:
        configure_logging()
    if not name.startswith(ROOT_LOGGER):
        name = f"{ROOT_LOGGER}.{name}"
    return logging.getLogger(name)
