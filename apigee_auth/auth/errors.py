"""Errors raised during the Apigee login flow.

``LoginError`` and its subclasses are classified failures: the message is
meant for the user and no traceback is shown. ``DriverError`` covers browser
plumbing problems that the login flow converts into classified errors.
"""


class LoginError(Exception):
    """Base class for user-actionable login failures."""

    @property
    def kind(self) -> str:
        return type(self).__name__


class PageLoadError(LoginError):
    """Apigee page could not be loaded."""


class WaitTimeout(LoginError):
    """A wait condition was not satisfied within its timeout."""


class FieldTimeout(WaitTimeout):
    """A login form field never became visible."""


class AppLoadTimeout(WaitTimeout):
    """The Apigee application did not finish loading after sign-in."""


class AccountDeleted(LoginError):
    """The Google account has been deleted."""

    def __init__(self, username: str):
        super().__init__(f"The account {username} was deleted.")
        self.username = username


class UnknownAccount(LoginError):
    """The username is not a known Google account."""

    def __init__(self, message: str = "Could not sign in, check that account is valid"):
        super().__init__(message)


class InvalidCredentials(LoginError):
    """The password was rejected."""

    def __init__(self, message: str = "Could not sign in, check that password is valid."):
        super().__init__(message)


class OrgResolutionFailed(LoginError):
    """The default organization never showed up on the landing page."""

    def __init__(self, message: str = "Could not determine default user org."):
        super().__init__(message)


class ElementNotFound(LoginError):
    """A required element could not be found on the page."""


class DriverError(Exception):
    """Browser-level failure that is not meaningful to the user on its own."""


class NavigationError(DriverError):
    """Navigation to a URL failed."""
