"""Read the user's default Apigee organization from the landing page."""

import logging
from typing import Optional

from .errors import WaitTimeout
from .page_driver import PageDriver, ScriptCondition


logger = logging.getLogger(__name__)


ORG_ELEMENT_ID = "user-org"
DEFAULT_ORG_TIMEOUT_MS = 10000


def resolve_user_org(
    driver: PageDriver,
    timeout_ms: int = DEFAULT_ORG_TIMEOUT_MS,
    element_id: str = ORG_ELEMENT_ID,
) -> Optional[str]:
    """Wait for the org element to be populated and return its text.

    Args:
        driver: Page driver on the Apigee main page
        timeout_ms: How long to wait for the element text
        element_id: DOM id of the org element

    Returns:
        Organization name, or None if it never appeared
    """
    condition = ScriptCondition(
        f'document.getElementById("{element_id}") && document.getElementById("{element_id}").innerText.trim()'
    )
    try:
        driver.wait_for_condition(condition, timeout_ms, f"#{element_id} was not populated")
    except WaitTimeout:
        logger.info(f"Org element #{element_id} not populated within {timeout_ms} ms")
        return None

    text = driver.read_inner_text(f"#{element_id}")
    if text is None:
        return None
    return text.strip() or None
