"""Classify the rendered login page from text snippets in its markup."""

from enum import Enum
from typing import Iterable, Sequence, Tuple, Union


class PageState(Enum):
    """Known login page shapes inferred from page text."""

    ACCOUNT_DELETED = "account_deleted"
    UNKNOWN_ACCOUNT = "unknown_account"
    CONFIRM = "confirm"
    INVALID_CREDENTIALS = "invalid_credentials"
    UNKNOWN = "unknown"


Rule = Tuple[PageState, Tuple[str, ...]]

# Checked after the password field failed to show up
PASSWORD_STAGE_RULES: Sequence[Rule] = (
    (PageState.ACCOUNT_DELETED, ("Account deleted",)),
    (PageState.UNKNOWN_ACCOUNT, ("Couldn't find", "Couldn't sign")),
)

# Checked after the CSRF marker failed to show up post sign-in.
# Order matters: a confirmation screen also mentions signing in.
APP_LOAD_STAGE_RULES: Sequence[Rule] = (
    (PageState.CONFIRM, ("Confirm",)),
    (PageState.INVALID_CREDENTIALS, ("Couldn't sign", "Sign in", "Wrong password")),
)


def page_has_text(markup: str, candidates: Union[str, Iterable[str]]) -> bool:
    """Check whether any candidate appears in the markup, ignoring case.

    Args:
        markup: Page markup (typically ``document.body.innerHTML``)
        candidates: One snippet or a list of snippets

    Returns:
        bool: True if at least one snippet is present
    """
    if isinstance(candidates, str):
        candidates = [candidates]

    haystack = (markup or "").lower()
    return any(text.lower() in haystack for text in candidates)


def classify_page_state(markup: str, rules: Sequence[Rule]) -> PageState:
    """Return the first state whose snippets appear in the markup.

    Args:
        markup: Page markup
        rules: Ordered ``(state, snippets)`` pairs

    Returns:
        PageState: Matching state, or ``PageState.UNKNOWN``
    """
    for state, needles in rules:
        if page_has_text(markup, needles):
            return state
    return PageState.UNKNOWN
