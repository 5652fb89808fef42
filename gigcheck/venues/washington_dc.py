"""Selector configs for Washington, DC area venues."""

# Venues that book through DICE share the same widget markup
DICE_WIDGET = {
    "event": "article",
    "date": "time",
    "name": ".dice_event-title",
}

SITES = {
    "cometPingPong": {
        "url": "https://www.cometpingpong.com/livemusic",
        "selectors": DICE_WIDGET,
    },
    "quarryHouseTavern": {
        "url": "https://www.quarryhousetavern.com/music",
        "selectors": DICE_WIDGET,
    },
    "unionStage": {
        "url": "https://www.unionstagepresents.com",
        # Server-rendered cards, no load more control
        "static": True,
        "selectors": {
            "event": "[data-venue]",
            "date": ".date",
            "name": "a h4",
            "detail_link": ".card-body > a",
            "description": [
                {"domain": "unionstagepresents.com", "description": ".about-show"},
                {"domain": "ticketweb.com", "description": ".event-detail"},
                {"domain": "eventbrite.com", "description": ".event-details"},
            ],
        },
    },
    "madamsOrgan": {
        "url": "https://www.madamsorgan.com/events/",
        "selectors": {
            "event": "article",
            "date": ".mec-date-details",
            "name": ".mec-event-title",
            "detail_link": ".mec-booking-button",
            "load_more_link": ".mec-load-more-button",
            "description": [
                {"domain": "madamsorgan.com", "description": "article"},
            ],
        },
    },
    "ramsHead": {
        "url": "https://www.ramsheadonstage.com/events",
        "selectors": {
            "event": "#eventsList .entry",
            "name": ".title",
            "date": ".date",
            "detail_link": ".title a",
            "load_more_link": "#loadMoreEvents",
            "description": [
                {"domain": "ramsheadonstage.com", "description": ".event_detail"},
            ],
        },
    },
    "dc9": {
        "url": "https://dc9.club/events/",
        "selectors": {
            "event": ".listing__details",
            "name": ".listing__title",
            "date": ".listingDateTime",
            "detail_link": ".listing__titleLink",
            "load_more_link": "a.pagination-next",
            "load_more_loader": ".listings-block .loading",
            "description": [
                {
                    "domain": "dc9.club",
                    "description": "section.singleListing",
                    "lineup": ".artistBlock a",
                    "artist_description": ".artist",
                },
            ],
        },
    },
}
