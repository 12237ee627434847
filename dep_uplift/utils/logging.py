"""Logging utilities for dep-uplift."""

import logging
from typing import Any

from rich.console import Console
from rich.logging import RichHandler
from rich.theme import Theme

ROOT_LOGGER_NAME = "dep_uplift"


def _build_handler() -> RichHandler:
    """Setup rich console handler with custom theme."""
    # Reports go to stdout, so log records are kept on stderr
    console = Console(
        stderr=True,
        theme=Theme({
            "info": "cyan",
            "warning": "yellow",
            "error": "red",
            "critical": "red bold",
            "debug": "dim",
        }),
    )

    handler = RichHandler(
        console=console,
        show_time=True,
        show_path=False,
        markup=False,
    )
    handler.setFormatter(logging.Formatter(fmt="%(name)s: %(message)s", datefmt="[%X]"))
    return handler


def _root_logger() -> logging.Logger:
    root = logging.getLogger(ROOT_LOGGER_NAME)
    if not any(isinstance(handler, RichHandler) for handler in root.handlers):
        root.addHandler(_build_handler())
        root.setLevel(logging.WARNING)
        root.propagate = False
    return root


class DepUpliftLogger:
    """Thin wrapper routing component loggers through the package's rich handler."""

    def __init__(self, name: str) -> None:
        _root_logger()
        self.logger = logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")

    def info(self, msg: str, **kwargs: Any) -> None:
        """Log info message."""
        self.logger.info(msg, extra=kwargs)

    def warning(self, msg: str, **kwargs: Any) -> None:
        """Log warning message."""
        self.logger.warning(msg, extra=kwargs)

    def error(self, msg: str, **kwargs: Any) -> None:
        """Log error message."""
        self.logger.error(msg, extra=kwargs)

    def debug(self, msg: str, **kwargs: Any) -> None:
        """Log debug message."""
        self.logger.debug(msg, extra=kwargs)


def setup_logging(level: int = logging.INFO, verbose: bool = False) -> None:
    """Setup logging configuration for dep-uplift.

    Args:
        level: Logging level
        verbose: Enable verbose logging
    """
    if verbose:
        level = logging.DEBUG

    root = _root_logger()
    root.setLevel(level)

    # Keep asyncio's debug chatter out of verbose runs
    logging.getLogger("asyncio").setLevel(logging.WARNING)


def get_logger(name: str) -> DepUpliftLogger:
    """Get a dep-uplift logger instance.

    Args:
        name: Logger name

    Returns:
        Configured logger instance
    """
    return DepUpliftLogger(name)
