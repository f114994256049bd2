import logging

from rich.console import Console
from rich.logging import RichHandler

BASE_LOGGER_NAME = "exa_cli"


def configure_logging(level: int | str = logging.WARNING) -> logging.Logger:
    """Send the CLI's log records to stderr so stdout stays pipeable."""
    logger = logging.getLogger(BASE_LOGGER_NAME)
    logger.setLevel(level)

    if not any(isinstance(handler, RichHandler) for handler in logger.handlers):
        handler = RichHandler(console=Console(stderr=True), show_path=False, rich_tracebacks=False)
        handler.setFormatter(logging.Formatter("%(message)s"))
        logger.addHandler(handler)

    logger.propagate = False

    return logger
