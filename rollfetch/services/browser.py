"""Playwright-backed browser session."""

import logging
from typing import Any, List, Optional

from playwright.sync_api import Browser, BrowserContext, Page, Playwright
from playwright.sync_api import TimeoutError as PlaywrightTimeoutError
from playwright.sync_api import sync_playwright

from rollfetch.core.config import settings
from rollfetch.core.exceptions import BrowserSessionError
from rollfetch.interfaces.browser_session import BrowserSession

logger = logging.getLogger(__name__)


class PlaywrightBrowserSession(BrowserSession):
    """One Chromium page, reused for every roll number in a run."""

    def __init__(
        self,
        playwright: Playwright,
        browser: Browser,
        context: BrowserContext,
        page: Page,
    ):
        self._playwright = playwright
        self._browser = browser
        self._context = context
        self.page = page
        self._closed = False

    @classmethod
    def launch(
        cls,
        headless: bool = True,
        args: Optional[List[str]] = None,
        user_agent: Optional[str] = None,
        navigation_timeout_ms: Optional[int] = None,
    ) -> "PlaywrightBrowserSession":
        """
        Start Playwright, launch Chromium and open a page.

        Args:
            headless: Run the browser without a window
            args: Extra Chromium command line arguments
            user_agent: User agent for the browser context
            navigation_timeout_ms: Default navigation timeout for the page

        Returns:
            A ready-to-use browser session

        Raises:
            BrowserSessionError: If any step fails. Whatever was already
                started is shut down before the error propagates.
        """
        playwright = None
        browser = None
        try:
            playwright = sync_playwright().start()
            browser = playwright.chromium.launch(
                headless=headless, args=list(args or [])
            )
            context = browser.new_context(user_agent=user_agent)
            page = context.new_page()
            if navigation_timeout_ms is not None:
                page.set_default_navigation_timeout(navigation_timeout_ms)
        except Exception as e:
            logger.error("Failed to launch browser: %s", e, exc_info=True)
            if browser is not None:
                try:
                    browser.close()
                except Exception as close_exc:
                    logger.warning("Error closing browser: %s", close_exc)
            if playwright is not None:
                try:
                    playwright.stop()
                except Exception as stop_exc:
                    logger.warning("Error stopping Playwright: %s", stop_exc)
            raise BrowserSessionError(
                f"Failed to launch browser: {str(e)}"
            ) from e

        logger.info("Browser session started (headless=%s)", headless)
        return cls(playwright, browser, context, page)

    def navigate(self, url: str, wait_until: str = "networkidle") -> None:
        self.page.goto(url, wait_until=wait_until)

    def wait_for_element(
        self, selector: str, timeout_ms: Optional[int] = None
    ) -> bool:
        try:
            self.page.wait_for_selector(selector, timeout=timeout_ms)
        except PlaywrightTimeoutError:
            return False
        return True

    def set_field_value(self, selector: str, value: str) -> None:
        field = self.page.locator(selector)
        field.fill("")
        field.press_sequentially(value)

    def click(self, selector: str) -> None:
        self.page.click(selector)

    def evaluate_script(self, script: str, arg: Any = None) -> Any:
        return self.page.evaluate(script, arg)

    def read_attribute(self, selector: str, name: str) -> Optional[str]:
        element = self.page.query_selector(selector)
        if element is None:
            return None
        return element.get_attribute(name)

    def current_url(self) -> Optional[str]:
        url = self.page.url
        # Playwright reports a fresh page as about:blank
        if not url or url == "about:blank":
            return None
        return url

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        for label, closer in (
            ("browser context", self._context.close),
            ("browser", self._browser.close),
            ("Playwright", self._playwright.stop),
        ):
            try:
                closer()
            except Exception as e:
                logger.warning("Error closing %s: %s", label, e)
        logger.info("Browser session closed")


def open_browser_session() -> PlaywrightBrowserSession:
    """Launch a browser session configured from settings."""
    return PlaywrightBrowserSession.launch(
        headless=settings.BROWSER_HEADLESS,
        args=settings.BROWSER_ARGS,
        user_agent=settings.USER_AGENT,
        navigation_timeout_ms=settings.NAVIGATION_TIMEOUT_MS,
    )
