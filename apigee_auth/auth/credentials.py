"""Collect the request headers Apigee APIs expect from a logged-in page."""

import logging
from typing import Dict

from .page_driver import PageDriver


logger = logging.getLogger(__name__)


CSRF_SELECTOR = "csrf"
CSRF_ATTRIBUTE = "data"
CSRF_HEADER = "x-apigee-csrf"


def build_credential_set(driver: PageDriver) -> Dict[str, str]:
    """Build the header mapping from the session cookies and CSRF marker.

    The mapping always holds ``x-requested-with`` and ``cookie``;
    ``x-apigee-csrf`` is added only when the marker element is present.

    Args:
        driver: Page driver on the loaded Apigee main page

    Returns:
        Dict of header name to value, in output order
    """
    headers = {"x-requested-with": "XMLHttpRequest"}

    cookies = driver.read_cookies()
    headers["cookie"] = ";".join(f"{name}={value}" for name, value in cookies)
    logger.info(f"Collected {len(cookies)} cookies: {', '.join(name for name, _ in cookies)}")

    csrf = driver.read_attribute(CSRF_SELECTOR, CSRF_ATTRIBUTE)
    if csrf is not None:
        headers[CSRF_HEADER] = csrf
        logger.info("Collected CSRF token")
    else:
        logger.warning("CSRF marker not found, header will be omitted")

    return headers
