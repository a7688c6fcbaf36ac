"""Playwright browser session owned by a single login run."""

import logging
from typing import Optional
from playwright.sync_api import sync_playwright, Browser, BrowserContext, Page, Playwright

from .page_driver import DEFAULT_CLICK_TIMEOUT_MS, PageDriver, SettlePolicy


logger = logging.getLogger(__name__)


class BrowserSession:
    """Launches Chromium with one fresh context and page, and closes it once.

    Use as a context manager; ``close()`` is safe to call more than once and
    only releases the browser the first time.
    """

    WINDOW_SIZE_ARG = "--window-size=1920,1080"
    EXTRA_HEADERS = {"accept-language": "en-US,en;q=0.8"}

    def __init__(
        self,
        headless: bool = True,
        settle_policy: Optional[SettlePolicy] = None,
        click_timeout_ms: int = DEFAULT_CLICK_TIMEOUT_MS,
    ):
        """Initialize session.

        Args:
            headless: Run browser in headless mode (default: True)
            settle_policy: Pause applied by the driver after each click
            click_timeout_ms: How long the driver waits for a matched button to be clickable
        """
        self.headless = headless
        self.settle_policy = settle_policy
        self.click_timeout_ms = click_timeout_ms

        self._playwright: Optional[Playwright] = None
        self._browser: Optional[Browser] = None
        self._context: Optional[BrowserContext] = None
        self._page: Optional[Page] = None
        self._closed = False

    def open(self) -> PageDriver:
        """Launch the browser and return a driver for its page."""
        logger.info(f"Browser mode: {'headless' if self.headless else 'headed'}")
        logger.debug("Launching Chromium browser...")
        self._playwright = sync_playwright().start()
        self._browser = self._playwright.chromium.launch(
            headless=self.headless,
            args=[self.WINDOW_SIZE_ARG],
        )

        # Present as regular Chrome; some sign-in pages reject HeadlessChrome
        probe = self._browser.new_page()
        user_agent = probe.evaluate("() => navigator.userAgent")
        probe.close()

        logger.debug("Creating browser context...")
        self._context = self._browser.new_context(
            no_viewport=True,
            ignore_https_errors=True,
            user_agent=user_agent.replace("HeadlessChrome", "Chrome"),
            extra_http_headers=self.EXTRA_HEADERS,
        )
        self._page = self._context.new_page()

        return PageDriver(
            self._page,
            settle_policy=self.settle_policy,
            click_timeout_ms=self.click_timeout_ms,
        )

    def close(self) -> None:
        """Close the browser and stop Playwright."""
        if self._closed:
            return
        self._closed = True

        logger.debug("Closing browser...")
        try:
            if self._browser is not None:
                self._browser.close()
        finally:
            if self._playwright is not None:
                self._playwright.stop()

    def __enter__(self) -> PageDriver:
        return self.open()

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
