from gigcheck.utils.text import normalize_whitespace

# Unit separator; never part of scraped names or dates
KEY_SEPARATOR = "\x1f"


def identity_key(event):
    """
    Build the key used to recognize the same event across load-more passes
    and across runs: normalized name and date.
    """
    name = normalize_whitespace(event.get("name"))
    date = normalize_whitespace(event.get("date"))
    return f"{name}{KEY_SEPARATOR}{date}"


def events_match(a, b):
    """Same real-world event: equal identity key and equal detail link."""
    return identity_key(a) == identity_key(b) and a.get("detail_link") == b.get("detail_link")


def is_resolved(event):
    """An event is resolved once it has a relevance value or recorded errors."""
    return event.get("relevance") is not None or bool(event.get("errors"))


def count_events(sites):
    return sum(len(site.get("events") or []) for site in sites)


def add_error(target, message):
    """Append an error message to a site result or event dict."""
    target["errors"] = [*(target.get("errors") or []), message]
