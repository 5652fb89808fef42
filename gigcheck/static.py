from contextlib import contextmanager

import requests
from bs4 import BeautifulSoup

from gigcheck import config
from gigcheck.page import Page, PageError, PageTimeout


class StaticPage(Page):
    """
    A server-rendered page fetched with requests. The markup never changes
    after loading, so there is nothing to click and nothing to wait for.
    """

    def __init__(self, session, request_timeout=None):
        self._session = session
        self.request_timeout = request_timeout or config.STATIC_REQUEST_TIMEOUT
        self.url = None
        self._html = ""
        self._soup = BeautifulSoup("", "html.parser")

    def goto(self, url):
        try:
            resp = self._session.get(url, timeout=self.request_timeout)
            resp.raise_for_status()
        except requests.exceptions.Timeout as e:
            raise PageTimeout(f"Timed out loading {url}: {e}") from e
        except requests.exceptions.RequestException as e:
            raise PageError(f"Failed loading {url}: {e}") from e

        self.url = resp.url
        self._html = resp.text
        self._soup = BeautifulSoup(self._html, "html.parser")

    def wait_for_selector(self, selector, timeout, state="attached"):
        present = self._soup.select_one(selector) is not None
        if state == "hidden":
            if present:
                raise PageTimeout(f"{selector} is still present on {self.url}")
        elif not present:
            raise PageTimeout(f"{selector} not found on {self.url}")

    def wait_for_count(self, selector, count, timeout):
        raise PageTimeout(f"Static page {self.url} never loads more {selector}")

    def content(self):
        return self._html

    def find(self, selector):
        return self._soup.select_one(selector)

    def is_visible(self, handle):
        return True

    def opacity(self, handle):
        return 1.0

    def click(self, handle):
        raise PageError(f"Cannot click elements on static page {self.url}")


class StaticSession:
    def __init__(self, headers=None):
        self._session = requests.Session()
        self._session.headers.update(headers or config.STATIC_HEADERS)

    @contextmanager
    def page(self):
        page = StaticPage(self._session)
        try:
            yield page
        finally:
            page.close()

    def close(self):
        self._session.close()
