"""
CSS selector configuration for venue websites.

A site either lists everything on one page (SinglePageSelectors) or needs a
visit to each event's detail page to read its description (TwoPageSelectors).
The variant is decided once, when the registry is loaded, by parse_selectors().
"""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class DescriptionSelector:
    """
    How to read a description on a detail page hosted on a given domain.
    Venue sites often link out to several ticketing sites, each needing its
    own selectors. When lineup is set, every link it matches is followed and
    the artist_description element of that page is read as well.
    """
    domain: str
    description: str
    lineup: str = None
    artist_description: str = None


@dataclass(frozen=True)
class SinglePageSelectors:
    """Selectors for a site whose listing rows carry the full description."""
    event: str
    name: str
    date: str
    load_more_link: str = None
    load_more_loader: str = None

    def is_two_page(self):
        return False


@dataclass(frozen=True)
class TwoPageSelectors(SinglePageSelectors):
    """Selectors for a site whose descriptions live on per-event detail pages."""
    detail_link: str = None
    description: tuple = ()

    def is_two_page(self):
        return True


@dataclass(frozen=True)
class WebsiteConfig:
    url: str
    selectors: SinglePageSelectors
    # Server-rendered pages that can be read without a browser
    static: bool = False


@dataclass
class BandConfig:
    name: str
    genres: list
    sites: list
    filter: list = field(default_factory=list)
    website_configs: list = field(default_factory=list)


def parse_description_selector(raw):
    return DescriptionSelector(
        domain=raw["domain"],
        description=raw["description"],
        lineup=raw.get("lineup"),
        artist_description=raw.get("artist_description"),
    )


def parse_selectors(raw):
    """
    Build the selector variant for a raw selector dict.
    The presence of a detail_link selector makes it a two-page site.
    """
    common = {
        "event": raw["event"],
        "name": raw["name"],
        "date": raw["date"],
        "load_more_link": raw.get("load_more_link"),
        "load_more_loader": raw.get("load_more_loader"),
    }
    if raw.get("detail_link"):
        return TwoPageSelectors(
            **common,
            detail_link=raw["detail_link"],
            description=tuple(parse_description_selector(d) for d in raw.get("description", [])),
        )
    return SinglePageSelectors(**common)


def parse_website_config(raw):
    return WebsiteConfig(
        url=raw["url"],
        selectors=parse_selectors(raw["selectors"]),
        static=raw.get("static", False),
    )
