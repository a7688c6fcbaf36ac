"""Browser-driven Apigee sign-in that exports session headers."""

import logging
import traceback
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional, Tuple

from .credentials import CSRF_SELECTOR, build_credential_set
from .errors import (
    AccountDeleted,
    AppLoadTimeout,
    FieldTimeout,
    InvalidCredentials,
    LoginError,
    NavigationError,
    OrgResolutionFailed,
    PageLoadError,
    UnknownAccount,
    WaitTimeout,
)
from .org_resolver import resolve_user_org
from .page_driver import PageDriver, SelectorCondition, SettlePolicy
from .page_state import APP_LOAD_STAGE_RULES, PASSWORD_STAGE_RULES, PageState, classify_page_state
from .session import BrowserSession
from ..storage.debug_capture import capture_debug_artifacts
from ..storage.header_writer import HeaderWriter
from ..utils.config import AuthOptions


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FlowOutcome:
    """Result of one login run: either success or a single failure."""

    success: bool
    org_id: Optional[str] = None
    output_path: Optional[Path] = None
    error_kind: Optional[str] = None
    message: Optional[str] = None
    unexpected: bool = False
    trace: Optional[str] = None

    @classmethod
    def succeeded(cls, org_id: str, output_path: Path) -> "FlowOutcome":
        return cls(success=True, org_id=org_id, output_path=output_path)

    @classmethod
    def failed(cls, error: BaseException, trace: Optional[str] = None) -> "FlowOutcome":
        return cls(
            success=False,
            error_kind=type(error).__name__,
            message=str(error),
            unexpected=not isinstance(error, LoginError),
            trace=trace,
        )

    @property
    def exit_code(self) -> int:
        return 0 if self.success else 1


def default_session_factory(options: AuthOptions) -> BrowserSession:
    return BrowserSession(
        headless=options.headless,
        settle_policy=SettlePolicy(options.settle_delay_ms),
        click_timeout_ms=options.timeouts.click_ms,
    )


class ApigeeAuthenticator:
    """Signs in to Apigee with a Google account and saves the API auth headers."""

    EMAIL_FIELD = 'input[type="email"]'
    PASSWORD_FIELD = 'input[type=password]'
    NEXT_BUTTON = ['Next']
    ACCEPT_BUTTON = ['Accept']

    def __init__(
        self,
        options: AuthOptions,
        session_factory: Callable[[AuthOptions], BrowserSession] = default_session_factory,
        writer: Optional[HeaderWriter] = None,
    ):
        """Initialize authenticator.

        Args:
            options: Options for this run
            session_factory: Creates the browser session (default: Playwright Chromium)
            writer: Auth file writer (default: writes into options.output_directory)
        """
        self.options = options
        self.session_factory = session_factory
        self.writer = writer or HeaderWriter(options.output_directory)

    def run(self) -> FlowOutcome:
        """Run the whole login and always release the browser.

        Failures are logged below WARNING; reporting them to the user is left
        to the caller through the returned outcome.

        Returns:
            FlowOutcome: Success with org and output file, or the failure
        """
        session = self.session_factory(self.options)
        driver: Optional[PageDriver] = None
        try:
            driver = session.open()
            org_id, output_path = self.authenticate(driver)
            return FlowOutcome.succeeded(org_id, output_path)
        except LoginError as e:
            logger.info(f"Authentication failed: {e}")
            self._capture_debug(driver)
            return FlowOutcome.failed(e)
        except Exception as e:
            logger.info(f"Authentication failed with exception: {e}", exc_info=True)
            trace = traceback.format_exc()
            self._capture_debug(driver)
            return FlowOutcome.failed(e, trace=trace)
        finally:
            session.close()

    def authenticate(self, driver: PageDriver) -> Tuple[str, Path]:
        """Drive the sign-in pages until the Apigee main page is loaded.

        Args:
            driver: Driver for a fresh browser page

        Returns:
            Tuple of the default org name and the auth file written

        Raises:
            LoginError: For any recognized failure
        """
        timeouts = self.options.timeouts

        # Step 1: Load Apigee, which redirects to Google sign-in
        logger.info(f"Step 1: Navigating to {self.options.app_url}")
        self._load_app(driver)

        # Step 2-3: Username
        logger.info("Step 2: Entering username...")
        self._wait_for_field(
            driver, self.EMAIL_FIELD, timeouts.email_field_ms,
            'Could not find username text field to fill out.', FieldTimeout,
        )
        logger.debug('Filling in username ...')
        driver.type_into(self.EMAIL_FIELD, self.options.username)
        logger.debug('Clicking Next  ...')
        driver.click_by_text(self.NEXT_BUTTON)

        # Step 4: Password prompt, or a page explaining why there is none
        logger.info("Step 3: Waiting for password field...")
        try:
            self._wait_for_field(
                driver, self.PASSWORD_FIELD, timeouts.password_field_ms,
                'Could not find password text field to fill out.', FieldTimeout,
            )
        except FieldTimeout:
            state = classify_page_state(driver.page_markup(), PASSWORD_STAGE_RULES)
            logger.debug(f"  Password field missing, page looks like: {state.value}")
            if state is PageState.ACCOUNT_DELETED:
                raise AccountDeleted(self.options.username)
            if state is PageState.UNKNOWN_ACCOUNT:
                raise UnknownAccount()
            raise

        # Step 5: Password
        logger.debug('Filling in password ...')
        driver.type_into(self.PASSWORD_FIELD, self.options.password)
        logger.debug('Clicking Next  ...')
        driver.click_by_text(self.NEXT_BUTTON)

        # Step 6: Terms are only shown the first time an account signs in
        logger.info("Step 4: Accepting terms if needed...")
        driver.click_by_text(self.ACCEPT_BUTTON, optional=True)

        # Step 7: Apigee app, or a page explaining why not
        try:
            self._wait_for_field(
                driver, CSRF_SELECTOR, timeouts.app_loaded_ms,
                'Apigee page did not load', AppLoadTimeout,
            )
        except AppLoadTimeout:
            state = classify_page_state(driver.page_markup(), APP_LOAD_STAGE_RULES)
            logger.debug(f"  CSRF marker missing, page looks like: {state.value}")
            if state is PageState.CONFIRM:
                logger.info("  Confirmation screen shown, continuing")
            elif state is PageState.INVALID_CREDENTIALS:
                raise InvalidCredentials()
            else:
                raise

        # Step 8-9: Reload so the CSRF-bearing main page is the active one
        logger.info("Step 5: Reloading Apigee main page...")
        self._load_app(driver)
        logger.debug('Waiting for Apigee main page to load ...')
        self._wait_for_field(
            driver, CSRF_SELECTOR, timeouts.app_ready_ms,
            'Apigee application did not load', AppLoadTimeout,
        )

        # Step 10: Default org
        logger.info("Step 6: Resolving default org...")
        org_id = resolve_user_org(driver, timeouts.user_org_ms)
        if not org_id:
            raise OrgResolutionFailed()
        logger.info(f"  Org: {org_id}")

        # Step 11: Headers
        logger.info("Step 7: Saving auth headers...")
        headers = build_credential_set(driver)
        output_path = self.writer.write(headers, self.options.output_format)

        logger.info("✓ Authentication completed successfully")
        return org_id, output_path

    def _load_app(self, driver: PageDriver) -> None:
        try:
            driver.navigate(self.options.app_url)
        except NavigationError as e:
            raise PageLoadError(f"Could not load Apigee page. {e}") from e

    def _wait_for_field(
        self,
        driver: PageDriver,
        selector: str,
        timeout_ms: int,
        message: str,
        error_cls: type,
    ) -> None:
        try:
            driver.wait_for_condition(SelectorCondition(selector), timeout_ms, message)
        except WaitTimeout as e:
            raise error_cls(message) from e

    def _capture_debug(self, driver: Optional[PageDriver]) -> None:
        if not self.options.debug or driver is None:
            return
        logger.info("Capturing debug artifacts...")
        capture_debug_artifacts(driver, self.options.output_directory)
