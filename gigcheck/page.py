"""
The page capability the harvest and detail code is written against.

Backends implement navigation, waiting and interaction. Reading rows is the
same everywhere: the current markup is parsed with BeautifulSoup and a pure
extractor function is applied to each matched element.
"""

from bs4 import BeautifulSoup


class PageError(Exception):
    """A navigation, wait or interaction on a page failed."""


class PageTimeout(PageError):
    """A wait on a page did not complete in time."""


class Page:
    url = None

    def goto(self, url):
        raise NotImplementedError

    def wait_for_selector(self, selector, timeout, state="attached"):
        """Wait for selector to be attached, visible or hidden. Raises PageTimeout."""
        raise NotImplementedError

    def wait_for_count(self, selector, count, timeout):
        """Wait until more than count elements match selector. Raises PageTimeout."""
        raise NotImplementedError

    def content(self):
        raise NotImplementedError

    def find(self, selector):
        raise NotImplementedError

    def is_visible(self, handle):
        raise NotImplementedError

    def opacity(self, handle):
        raise NotImplementedError

    def click(self, handle):
        raise NotImplementedError

    def close(self):
        pass

    def query_all(self, selector, extractor, *args):
        soup = BeautifulSoup(self.content(), "html.parser")
        return [extractor(el, *args) for el in soup.select(selector)]

    def query_one(self, selector, extractor, *args):
        soup = BeautifulSoup(self.content(), "html.parser")
        el = soup.select_one(selector)
        return extractor(el, *args) if el is not None else None


def element_text(el):
    return el.get_text().strip()


def element_href(el):
    return el.get("href")
