"""Thin driver over a Playwright page exposing what the login flow needs."""

import logging
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, Tuple, Union
from playwright.sync_api import Page, Error as PlaywrightError, TimeoutError as PlaywrightTimeoutError

from .errors import ElementNotFound, NavigationError, WaitTimeout
from .page_state import page_has_text


logger = logging.getLogger(__name__)


DEFAULT_SETTLE_DELAY_MS = 2000
DEFAULT_CLICK_TIMEOUT_MS = 5000


@dataclass(frozen=True)
class SelectorCondition:
    """Satisfied once an element matching ``selector`` is attached (and visible)."""

    selector: str
    visible: bool = True


@dataclass(frozen=True)
class ScriptCondition:
    """Satisfied once ``expression`` evaluates truthy in the page."""

    expression: str


WaitCondition = Union[SelectorCondition, ScriptCondition]


@dataclass(frozen=True)
class SettlePolicy:
    """Pause applied after a click so the page can navigate or re-render.

    The login UI gives no completion signal after a button click, so the
    driver waits a fixed amount of page time instead.
    """

    delay_ms: int = DEFAULT_SETTLE_DELAY_MS

    def settle(self, page: Page) -> None:
        if self.delay_ms > 0:
            page.wait_for_timeout(self.delay_ms)


def xpath_literal(text: str) -> str:
    """Quote text as an XPath 1.0 string literal.

    XPath has no escape sequences, so text holding both quote kinds is
    assembled with ``concat()``.
    """
    if "'" not in text:
        return f"'{text}'"
    if '"' not in text:
        return f'"{text}"'
    parts = text.split("'")
    return "concat(" + ", \"'\", ".join(f"'{part}'" for part in parts) + ")"


@dataclass(frozen=True)
class TextMatcher:
    """One strategy for locating a clickable element by its visible text."""

    name: str
    template: str

    def xpath(self, text: str) -> str:
        return self.template.format(literal=xpath_literal(text))


INPUT_VALUE_MATCHER = TextMatcher("input value", "//input[@value={literal}]")
ELEMENT_TEXT_MATCHER = TextMatcher("element text", "//*[text()={literal}]")
PARENT_OF_TEXT_MATCHER = TextMatcher("parent of element text", "//*[text()={literal}]/..")

# Tried in order; the first tier with any hit wins
DEFAULT_MATCHERS: Tuple[TextMatcher, ...] = (
    INPUT_VALUE_MATCHER,
    ELEMENT_TEXT_MATCHER,
    PARENT_OF_TEXT_MATCHER,
)


class PageDriver:
    """Page operations used by the login flow, hiding Playwright specifics."""

    def __init__(
        self,
        page: Page,
        settle_policy: Optional[SettlePolicy] = None,
        matchers: Sequence[TextMatcher] = DEFAULT_MATCHERS,
        click_timeout_ms: int = DEFAULT_CLICK_TIMEOUT_MS,
    ):
        """Initialize driver.

        Args:
            page: Playwright page to drive
            settle_policy: Pause applied after each click (default: 2000 ms)
            matchers: Ordered element lookup strategies for ``click_by_text``
            click_timeout_ms: How long a matched element may take to become clickable
        """
        self.page = page
        self.settle_policy = settle_policy or SettlePolicy()
        self.matchers = tuple(matchers)
        self.click_timeout_ms = click_timeout_ms

    def navigate(self, url: str) -> None:
        """Load ``url`` in the page.

        Raises:
            NavigationError: If the page could not be loaded
        """
        logger.debug(f"Navigating to {url}")
        try:
            self.page.goto(url)
        except PlaywrightError as e:
            raise NavigationError(str(e)) from e
        logger.debug(f"  Loaded: {self.page.url}")

    def type_into(self, selector: str, text: str) -> None:
        """Focus the field matching ``selector`` and type ``text`` into it.

        Raises:
            ElementNotFound: If no element matches ``selector``
        """
        element = self.page.query_selector(selector)
        if element is None:
            raise ElementNotFound(f"Could not find field {selector} to fill out.")
        element.focus()
        self.page.keyboard.type(text)

    def click_by_text(self, candidates: Union[str, Iterable[str]], optional: bool = False) -> bool:
        """Click the first element whose text matches one of ``candidates``.

        Args:
            candidates: Button text, or texts in order of preference
            optional: Return False instead of raising when nothing matches

        Returns:
            bool: True if an element was clicked

        Raises:
            ElementNotFound: If nothing matches and ``optional`` is False, or the
                matched element did not become clickable in time
        """
        if isinstance(candidates, str):
            candidates = [candidates]
        candidates = list(candidates)

        for matcher in self.matchers:
            for text in candidates:
                locator = self.page.locator(f"xpath={matcher.xpath(text)}")
                if locator.count() > 0:
                    logger.debug(f"  Clicking '{text}' (matched by {matcher.name})")
                    try:
                        locator.last.click(timeout=self.click_timeout_ms)
                    except PlaywrightTimeoutError as e:
                        raise ElementNotFound(f"Could not click {text} button.") from e
                    self.settle_policy.settle(self.page)
                    return True

        if optional:
            logger.debug(f"  No {candidates} element found, skipping")
            return False

        raise ElementNotFound(f"Could not find {', '.join(candidates)} button to click on.")

    def wait_for_condition(self, condition: WaitCondition, timeout_ms: int, message: str) -> None:
        """Block until ``condition`` holds or ``timeout_ms`` elapses.

        Args:
            condition: Selector or script condition
            timeout_ms: Timeout in milliseconds
            message: Human readable error used on timeout

        Raises:
            WaitTimeout: If the condition was not satisfied in time
        """
        try:
            if isinstance(condition, SelectorCondition):
                state = "visible" if condition.visible else "attached"
                self.page.wait_for_selector(condition.selector, state=state, timeout=timeout_ms)
            else:
                self.page.wait_for_function(condition.expression, timeout=timeout_ms)
        except PlaywrightTimeoutError as e:
            logger.debug(f"  Wait for {condition} timed out after {timeout_ms} ms")
            raise WaitTimeout(message) from e

    def page_markup(self) -> str:
        """Return the current ``document.body.innerHTML``."""
        return self.page.evaluate("() => document.body.innerHTML") or ""

    def contains_text(self, candidates: Union[str, Iterable[str]]) -> bool:
        """Check the rendered page for any of ``candidates``, ignoring case."""
        return page_has_text(self.page_markup(), candidates)

    def read_cookies(self) -> List[Tuple[str, str]]:
        """Snapshot the browser context's cookie jar as ``(name, value)`` pairs."""
        return [(cookie["name"], cookie["value"]) for cookie in self.page.context.cookies()]

    def read_attribute(self, selector: str, name: str) -> Optional[str]:
        element = self.page.query_selector(selector)
        if element is None:
            return None
        return element.get_attribute(name)

    def read_inner_text(self, selector: str) -> Optional[str]:
        element = self.page.query_selector(selector)
        if element is None:
            return None
        return element.inner_text()

    def screenshot(self, path: str) -> None:
        self.page.screenshot(path=path, full_page=True)
