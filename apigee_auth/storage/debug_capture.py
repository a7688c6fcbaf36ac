"""Dump page markup and a screenshot when a login run fails."""

import logging
from pathlib import Path
from typing import List

from ..auth.page_driver import PageDriver


logger = logging.getLogger(__name__)


DEBUG_HTML_FILE = "debug.html"
DEBUG_SCREENSHOT_FILE = "debug.png"


def capture_debug_artifacts(driver: PageDriver, output_directory: Path) -> List[Path]:
    """Save ``debug.html`` and ``debug.png`` for the current page.

    Each artifact is attempted independently. Failures are logged and do not
    propagate, so the error that triggered the capture stays the one reported.

    Args:
        driver: Driver for the page to capture
        output_directory: Directory for the artifacts

    Returns:
        List of files actually written
    """
    output_directory = Path(output_directory)
    written = []

    html_path = output_directory / DEBUG_HTML_FILE
    try:
        markup = driver.page_markup()
        with open(html_path, 'w', encoding='utf-8') as f:
            f.write(markup)
        written.append(html_path)
    except Exception as e:
        logger.warning(f"Could not save page markup to {html_path}: {e}")

    screenshot_path = output_directory / DEBUG_SCREENSHOT_FILE
    try:
        driver.screenshot(str(screenshot_path))
        written.append(screenshot_path)
    except Exception as e:
        logger.warning(f"Could not save screenshot to {screenshot_path}: {e}")

    if written:
        logger.info(f"Debug artifacts saved: {', '.join(str(p) for p in written)}")
    return written
