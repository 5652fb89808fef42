from contextlib import contextmanager

import pytest
from bs4 import BeautifulSoup

from gigcheck.page import Page, PageError, PageTimeout


class FakeWeb:
    """
    Scripted websites shared by all fake pages of a test.
    pages maps a URL to its markup, or to a list of markups: each load more
    click moves to the next one, staying on the last.
    """

    def __init__(self):
        self.pages = {}
        self.failing = set()
        self.visits = []
        self.listing_reads = 0
        self.clicks = 0
        self.opened = 0
        self.closed = 0
        self.button_visible = True
        self.button_opacity = 1.0
        self.loader_shows = True


class FakePage(Page):
    def __init__(self, web):
        self.web = web
        self.url = None
        self._passes = [""]
        self._pass_index = 0

    def _soup(self):
        return BeautifulSoup(self.content(), "html.parser")

    def goto(self, url):
        self.web.visits.append(url)
        if url in self.web.failing:
            raise PageTimeout(f"Timed out loading {url}")
        if url not in self.web.pages:
            raise PageError(f"404 for {url}")
        markup = self.web.pages[url]
        self._passes = markup if isinstance(markup, list) else [markup]
        self._pass_index = 0
        self.url = url

    def content(self):
        return self._passes[min(self._pass_index, len(self._passes) - 1)]

    def wait_for_selector(self, selector, timeout, state="attached"):
        present = self._soup().select_one(selector) is not None
        if state == "visible":
            if not self.web.loader_shows:
                raise PageTimeout(f"{selector} never became visible")
        elif state == "hidden":
            if present:
                raise PageTimeout(f"{selector} never went away")
        elif not present:
            raise PageTimeout(f"{selector} not found on {self.url}")

    def wait_for_count(self, selector, count, timeout):
        if len(self._soup().select(selector)) <= count:
            raise PageTimeout(f"No more than {count} {selector} on {self.url}")

    def find(self, selector):
        return self._soup().select_one(selector)

    def is_visible(self, handle):
        return self.web.button_visible

    def opacity(self, handle):
        return self.web.button_opacity

    def click(self, handle):
        self.web.clicks += 1
        self._pass_index += 1

    def query_all(self, selector, extractor, *args):
        if extractor.__name__ == "extract_event_row":
            self.web.listing_reads += 1
        return super().query_all(selector, extractor, *args)


class FakeSession:
    def __init__(self, web):
        self.web = web

    @contextmanager
    def page(self):
        self.web.opened += 1
        try:
            yield FakePage(self.web)
        finally:
            self.web.closed += 1


class FakeSessions:
    def __init__(self, web):
        self.session = FakeSession(web)
        self.closed = False

    def for_site(self, site):
        return self.session

    def close(self):
        self.closed = True


@pytest.fixture
def web():
    return FakeWeb()


@pytest.fixture
def sessions(web):
    return FakeSessions(web)
