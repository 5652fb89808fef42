from contextlib import contextmanager

from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import TimeoutError as PlaywrightTimeoutError
from playwright.sync_api import sync_playwright

from gigcheck import config
from gigcheck.page import Page, PageError, PageTimeout
from gigcheck.static import StaticSession

COUNT_ABOVE_JS = "([selector, count]) => document.querySelectorAll(selector).length > count"
OPACITY_JS = "el => window.getComputedStyle(el).opacity"


class PlaywrightPage(Page):
    """A browser tab driven through Playwright's sync API."""

    def __init__(self, page, navigation_timeout=None):
        self._page = page
        self.navigation_timeout = navigation_timeout or config.NAVIGATION_TIMEOUT_MS

    @property
    def url(self):
        return self._page.url

    @contextmanager
    def _translate_errors(self, what):
        try:
            yield
        except PlaywrightTimeoutError as e:
            raise PageTimeout(f"Timed out {what}: {e}") from e
        except PlaywrightError as e:
            raise PageError(f"Failed {what}: {e}") from e

    def goto(self, url):
        with self._translate_errors(f"loading {url}"):
            self._page.goto(url, wait_until="networkidle", timeout=self.navigation_timeout)

    def wait_for_selector(self, selector, timeout, state="attached"):
        with self._translate_errors(f"waiting for {selector} to be {state}"):
            self._page.wait_for_selector(selector, timeout=timeout, state=state)

    def wait_for_count(self, selector, count, timeout):
        with self._translate_errors(f"waiting for more than {count} {selector}"):
            self._page.wait_for_function(COUNT_ABOVE_JS, arg=[selector, count], timeout=timeout)

    def content(self):
        with self._translate_errors("reading page content"):
            return self._page.content()

    def find(self, selector):
        with self._translate_errors(f"finding {selector}"):
            return self._page.query_selector(selector)

    def is_visible(self, handle):
        with self._translate_errors("checking visibility"):
            return handle.is_visible()

    def opacity(self, handle):
        with self._translate_errors("reading opacity"):
            value = handle.evaluate(OPACITY_JS)
        try:
            return float(value)
        except (TypeError, ValueError):
            return 1.0

    def click(self, handle):
        with self._translate_errors("clicking"):
            handle.click()

    def close(self):
        try:
            self._page.close()
        except PlaywrightError:
            pass


class BrowserSession:
    """
    One long-lived Chromium session for the whole run. The browser is only
    launched when the first page is requested, so runs that only touch
    static sites never start it.
    """

    def __init__(self, headless=True, navigation_timeout=None):
        self.headless = headless
        self.navigation_timeout = navigation_timeout
        self._playwright = None
        self._browser = None
        self._context = None

    def _ensure_started(self):
        if self._context is not None:
            return
        self._playwright = sync_playwright().start()
        self._browser = self._playwright.chromium.launch(
            headless=self.headless,
            args=["--disable-blink-features=AutomationControlled"],
        )
        self._context = self._browser.new_context(
            viewport=config.BROWSER_VIEWPORT,
            user_agent=config.BROWSER_USER_AGENT,
        )

    @contextmanager
    def page(self):
        """Open a tab for the duration of one operation; always closed on exit."""
        self._ensure_started()
        page = PlaywrightPage(self._context.new_page(), self.navigation_timeout)
        try:
            yield page
        finally:
            page.close()

    def close(self):
        if self._browser is not None:
            self._browser.close()
        if self._playwright is not None:
            self._playwright.stop()
        self._playwright = self._browser = self._context = None

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()


class SessionPool:
    """The sessions used by one run: a browser and a plain HTTP session."""

    def __init__(self, debug=False, browser=None, static=None):
        self.browser = browser or BrowserSession(headless=not debug)
        self.static = static or StaticSession()

    def for_site(self, site):
        return self.static if site.static else self.browser

    def close(self):
        self.browser.close()
        self.static.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()
