import pytest
from playwright.sync_api import Error as PlaywrightError, TimeoutError as PlaywrightTimeoutError

from apigee_auth.auth.errors import ElementNotFound, NavigationError, WaitTimeout
from apigee_auth.auth.page_driver import SelectorCondition
from apigee_auth.auth.page_state import page_has_text
from apigee_auth.utils.config import AuthOptions


class FakeDriver:
    """Scripted stand-in for PageDriver used by the login flow tests.

    ``waits`` maps a selector to the outcomes of successive waits on it;
    the last outcome repeats once the list is exhausted.
    """

    def __init__(
        self,
        waits=None,
        markup="",
        buttons=("Next",),
        org_text="my-org",
        cookies=(("SID", "abc"), ("HSID", "def")),
        csrf="token-123",
        navigate_error=None,
    ):
        self.waits = {key: list(value) for key, value in (waits or {}).items()}
        self.markup = markup
        self.buttons = set(buttons)
        self.org_text = org_text
        self.cookies = list(cookies)
        self.csrf = csrf
        self.navigate_error = navigate_error

        self.navigations = []
        self.typed = []
        self.clicks = []
        self.screenshots = []
        self.script_conditions = []

    def navigate(self, url):
        self.navigations.append(url)
        if self.navigate_error is not None:
            raise NavigationError(self.navigate_error)

    def type_into(self, selector, text):
        self.typed.append((selector, text))

    def click_by_text(self, candidates, optional=False):
        if isinstance(candidates, str):
            candidates = [candidates]
        for text in candidates:
            if text in self.buttons:
                self.clicks.append(text)
                return True
        if optional:
            return False
        raise ElementNotFound(f"Could not find {', '.join(candidates)} button to click on.")

    def wait_for_condition(self, condition, timeout_ms, message):
        if isinstance(condition, SelectorCondition):
            outcomes = self.waits.get(condition.selector, [True])
            satisfied = outcomes.pop(0) if len(outcomes) > 1 else outcomes[0]
        else:
            self.script_conditions.append(condition.expression)
            satisfied = bool((self.org_text or "").strip())
        if not satisfied:
            raise WaitTimeout(message)

    def page_markup(self):
        return self.markup

    def contains_text(self, candidates):
        return page_has_text(self.markup, candidates)

    def read_cookies(self):
        return list(self.cookies)

    def read_attribute(self, selector, name):
        if selector == "csrf" and name == "data":
            return self.csrf
        return None

    def read_inner_text(self, selector):
        if selector == "#user-org":
            return self.org_text
        return None

    def screenshot(self, path):
        self.screenshots.append(path)
        with open(path, "wb") as f:
            f.write(b"png")


class FakeSession:
    """Counts how often the browser session is opened and released."""

    def __init__(self, driver):
        self.driver = driver
        self.open_count = 0
        self.close_count = 0

    def open(self):
        self.open_count += 1
        return self.driver

    def close(self):
        self.close_count += 1


class FakeElement:
    def __init__(self, attributes=None, text=""):
        self.attributes = attributes or {}
        self.text = text
        self.focused = False

    def focus(self):
        self.focused = True

    def get_attribute(self, name):
        return self.attributes.get(name)

    def inner_text(self):
        return self.text


class FakeKeyboard:
    def __init__(self):
        self.typed = []

    def type(self, text):
        self.typed.append(text)


class FakeLocator:
    def __init__(self, page, xpath):
        self.page = page
        self.xpath = xpath

    def count(self):
        return self.page.matches.get(self.xpath, 0)

    @property
    def last(self):
        return self

    def click(self, timeout=None):
        self.page.click_timeouts.append(timeout)
        if self.page.click_error is not None:
            raise PlaywrightTimeoutError(self.page.click_error)
        self.page.clicked.append(self.xpath)


class FakeContext:
    def __init__(self, cookies):
        self._cookies = cookies

    def cookies(self):
        return list(self._cookies)


class FakePage:
    """Minimal subset of the Playwright sync Page API used by PageDriver.

    ``matches`` maps an XPath expression to how many elements it selects;
    ``visible`` lists selectors that ``wait_for_selector`` finds.
    """

    def __init__(self, matches=None, elements=None, visible=(), markup="", cookies=(), goto_error=None,
                 function_ready=True, click_error=None):
        self.matches = dict(matches or {})
        self.elements = dict(elements or {})
        self.visible = set(visible)
        self.markup = markup
        self.context = FakeContext(list(cookies))
        self.goto_error = goto_error
        self.function_ready = function_ready
        self.click_error = click_error

        self.url = "about:blank"
        self.keyboard = FakeKeyboard()
        self.clicked = []
        self.click_timeouts = []
        self.waited_ms = []
        self.selector_waits = []
        self.function_waits = []
        self.screenshots = []

    def goto(self, url):
        if self.goto_error is not None:
            raise PlaywrightError(self.goto_error)
        self.url = url

    def query_selector(self, selector):
        return self.elements.get(selector)

    def locator(self, selector):
        assert selector.startswith("xpath=")
        return FakeLocator(self, selector[len("xpath="):])

    def wait_for_timeout(self, timeout):
        self.waited_ms.append(timeout)

    def wait_for_selector(self, selector, state="visible", timeout=None):
        self.selector_waits.append((selector, state, timeout))
        if selector not in self.visible:
            raise PlaywrightTimeoutError(f"Timeout {timeout}ms exceeded waiting for {selector}")

    def wait_for_function(self, expression, timeout=None):
        self.function_waits.append((expression, timeout))
        if not self.function_ready:
            raise PlaywrightTimeoutError(f"Timeout {timeout}ms exceeded")

    def evaluate(self, expression):
        return self.markup

    def screenshot(self, path=None, full_page=False):
        self.screenshots.append((path, full_page))


@pytest.fixture
def options(tmp_path):
    return AuthOptions(
        username="someone@example.com",
        password="hunter2",
        output_directory=tmp_path,
    )
