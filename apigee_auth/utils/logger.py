"""Logging configuration for the Apigee auth tool."""

import logging
import sys
from pathlib import Path
from typing import Optional


# Component to log file mapping
COMPONENT_LOG_FILES = {
    'auth': 'auth.log',
    'storage': 'storage.log',
    'main': 'main.log',
}


def _get_component_from_logger_name(name: str) -> str:
    """Determine component from logger name.

    Args:
        name: Logger name (e.g., 'apigee_auth.auth.authenticator')

    Returns:
        Component name or 'main' if no match
    """
    if '.auth' in name:
        return 'auth'
    elif '.storage' in name:
        return 'storage'
    else:
        return 'main'


class ComponentFilter(logging.Filter):
    """Filter that only allows records from a specific component."""

    def __init__(self, component: str):
        """Initialize component filter.

        Args:
            component: Component name (auth, storage, main)
        """
        super().__init__()
        self.component = component

    def filter(self, record: logging.LogRecord) -> bool:
        """Check if record belongs to this component."""
        return _get_component_from_logger_name(record.name) == self.component


def setup_logging(
    log_level: str = "INFO",
    log_to_console: bool = True,
    log_dir: Optional[Path] = None
) -> None:
    """Configure logging for the application.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_to_console: Whether to log to console (default: True)
        log_dir: Directory for component log files (default: no log files)
    """
    numeric_level = getattr(logging, log_level.upper(), logging.INFO)

    detailed_formatter = logging.Formatter(
        fmt='[%(asctime)s] [%(levelname)s] [%(name)s] %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )
    console_formatter = logging.Formatter(
        fmt='[%(levelname)s] %(message)s'
    )

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)
    root_logger.handlers.clear()

    # Console shows WARNING+ unless DEBUG is requested; status lines are printed by main
    if log_to_console:
        console_handler = logging.StreamHandler(sys.stderr)
        console_level = logging.DEBUG if numeric_level == logging.DEBUG else logging.WARNING
        console_handler.setLevel(console_level)
        console_handler.setFormatter(console_formatter)
        root_logger.addHandler(console_handler)

    if log_dir:
        log_directory = Path(log_dir)
        log_directory.mkdir(parents=True, exist_ok=True)

        for component, filename in COMPONENT_LOG_FILES.items():
            handler = logging.FileHandler(log_directory / filename, mode='a', encoding='utf-8')
            handler.setLevel(numeric_level)
            handler.setFormatter(detailed_formatter)
            handler.addFilter(ComponentFilter(component))
            root_logger.addHandler(handler)

    # Suppress noisy third-party loggers
    logging.getLogger("playwright").setLevel(logging.WARNING)
    logging.getLogger("asyncio").setLevel(logging.WARNING)
