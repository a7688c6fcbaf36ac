import pytest

from apigee_auth.auth import session as session_module
from apigee_auth.auth.page_driver import PageDriver, SettlePolicy
from apigee_auth.auth.session import BrowserSession


class FakeProbePage:
    def __init__(self):
        self.closed = False

    def evaluate(self, expression):
        return "Mozilla/5.0 (X11; Linux x86_64) HeadlessChrome/120.0.0.0 Safari/537.36"

    def close(self):
        self.closed = True


class FakeBrowserContext:
    def __init__(self, kwargs):
        self.kwargs = kwargs

    def new_page(self):
        return object()


class FakeBrowser:
    def __init__(self):
        self.probe = FakeProbePage()
        self.contexts = []
        self.close_count = 0

    def new_page(self):
        return self.probe

    def new_context(self, **kwargs):
        context = FakeBrowserContext(kwargs)
        self.contexts.append(context)
        return context

    def close(self):
        self.close_count += 1


class FakeChromium:
    def __init__(self, browser):
        self.browser = browser
        self.launch_kwargs = None

    def launch(self, **kwargs):
        self.launch_kwargs = kwargs
        return self.browser


class FakePlaywright:
    def __init__(self):
        self.browser = FakeBrowser()
        self.chromium = FakeChromium(self.browser)
        self.stop_count = 0

    def stop(self):
        self.stop_count += 1


@pytest.fixture
def playwright(monkeypatch):
    fake = FakePlaywright()

    class Starter:
        def start(self):
            return fake

    monkeypatch.setattr(session_module, "sync_playwright", lambda: Starter())
    return fake


def test_open_configures_browser(playwright):
    session = BrowserSession(headless=True, settle_policy=SettlePolicy(500))

    driver = session.open()

    assert isinstance(driver, PageDriver)
    assert driver.settle_policy.delay_ms == 500
    assert driver.click_timeout_ms == 5000
    assert playwright.chromium.launch_kwargs == {"headless": True, "args": ["--window-size=1920,1080"]}
    assert playwright.browser.probe.closed

    context_kwargs = playwright.browser.contexts[-1].kwargs
    assert context_kwargs["user_agent"].startswith("Mozilla/5.0")
    assert "HeadlessChrome" not in context_kwargs["user_agent"]
    assert "Chrome/120.0.0.0" in context_kwargs["user_agent"]
    assert context_kwargs["ignore_https_errors"] is True
    assert context_kwargs["extra_http_headers"] == {"accept-language": "en-US,en;q=0.8"}


def test_close_releases_once(playwright):
    session = BrowserSession()
    session.open()

    session.close()
    session.close()

    assert playwright.browser.close_count == 1
    assert playwright.stop_count == 1


def test_context_manager_closes_on_error(playwright):
    with pytest.raises(RuntimeError):
        with BrowserSession(headless=False):
            raise RuntimeError("boom")

    assert playwright.chromium.launch_kwargs["headless"] is False
    assert playwright.browser.close_count == 1


def test_close_before_open_is_harmless():
    BrowserSession().close()


def test_open_passes_click_timeout(playwright):
    driver = BrowserSession(click_timeout_ms=1500).open()

    assert driver.click_timeout_ms == 1500
