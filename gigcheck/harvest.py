"""
Read the event listing of a venue site, following "load more" controls.

Every pass re-reads the whole listing rather than only the rows a click
added: some sites append to the list, others re-render all of it. The newest
read is kept as the result and identity keys of rows already seen are tracked
across passes.
"""

import time
from dataclasses import dataclass, field

from gigcheck import config
from gigcheck.page import PageError
from gigcheck.pipeline.io import console_log
from gigcheck.pipeline.metrics import SiteMetrics
from gigcheck.utils.events import count_events, identity_key
from gigcheck.utils.text import normalize_whitespace


@dataclass
class HarvestState:
    """Accumulator carried from one listing pass to the next."""
    events: list = field(default_factory=list)
    errors: list = field(default_factory=list)
    discovered_keys: set = field(default_factory=set)
    depth: int = 0
    row_count: int = 0


def extract_event_row(el, selectors, page_index):
    """
    Read one listing row. Only the element and the arguments are used so the
    same function works against any backend's markup.
    """
    name_el = el.select_one(selectors.name)
    date_el = el.select_one(selectors.date)

    event = {
        "name": normalize_whitespace(name_el.get_text()) if name_el else None,
        "date": normalize_whitespace(date_el.get_text()) if date_el else None,
        "page": page_index,
    }

    if selectors.is_two_page():
        link_el = el.select_one(selectors.detail_link)
        event["detail_link"] = link_el.get("href") if link_el else None
    else:
        event["description"] = el.get_text().strip()

    return event


def read_listing(page, selectors, state):
    """
    Re-read the whole listing, replacing the previous pass's rows.
    Returns the rows whose identity key no earlier pass had seen.
    """
    state.events = page.query_all(selectors.event, extract_event_row, selectors, state.depth)
    state.row_count = len(state.events)

    new_rows = [event for event in state.events if identity_key(event) not in state.discovered_keys]
    state.discovered_keys.update(identity_key(event) for event in new_rows)
    return new_rows


def find_load_more(page, selector):
    """Return the load more control if it can be clicked, otherwise None."""
    button = page.find(selector)
    if button is None:
        return None
    if not page.is_visible(button):
        return None
    if page.opacity(button) <= 0:
        return None
    return button


def wait_for_more_events(page, selectors, before_count, timeout):
    if selectors.load_more_loader:
        page.wait_for_selector(selectors.load_more_loader, timeout, state="visible")
        page.wait_for_selector(selectors.load_more_loader, timeout, state="hidden")
    else:
        page.wait_for_count(selectors.event, before_count, timeout)


def next_page(page, site, state, timeout, max_depth):
    """
    Trigger one "load more" cycle.
    Returns True when more events were loaded and the listing should be read
    again, False when harvesting is finished. Failures are recorded in
    state.errors.
    """
    selectors = site.selectors
    if state.depth >= max_depth or not selectors.load_more_link:
        return False

    try:
        button = find_load_more(page, selectors.load_more_link)
    except PageError as e:
        state.errors.append(f"Could not find load more button on {site.url}: {e}")
        return False

    if button is None:
        return False

    try:
        page.click(button)
        wait_for_more_events(page, selectors, state.row_count, timeout)
    except PageError as e:
        if selectors.load_more_loader:
            state.errors.append(f"Error waiting for load more loader on {site.url}: {e}")
        else:
            state.errors.append(f"Error waiting for more events to load on {site.url}: {e}")
        return False

    state.depth += 1
    return True


def harvest(page, site, timeout, discovered_keys=(), depth=0, max_depth=None, log_func=None):
    """
    Collect the events listed on an already loaded page.
    Reading starts at pass `depth`; at most max_depth - depth + 1 reads of
    the listing are made. Rows of one read are kept as read, in page order.
    Raises PageError if the event rows never appear.
    Returns {"events": [...], "errors": [...]}.
    """
    log = log_func or console_log
    if max_depth is None:
        max_depth = config.MAX_DEPTH

    state =HarvestState(discovered_keys=set(discovered_keys), depth=depth)
    while True:
        page.wait_for_selector(site.selectors.event, timeout)
        new_rows = read_listing(page, site.selectors, state)
        log(f"    page {state.depth + 1}: {len(new_rows)} new of {state.row_count} events", "DEBUG")
        if not next_page(page, site, state, timeout, max_depth):
            break

    return {"events": state.events, "errors": state.errors}


def harvest_site(session, site, timeout, log_func=None):
    """
    Load a site's listing page and harvest its events.
    Errors never escape: they end up in the site result's errors.
    """
    log = log_func or console_log
    result = {"url": site.url, "events": [], "errors": []}

    try:
        with session.page() as page:
            page.goto(site.url)
            harvested = harvest(page, site, timeout, log_func=log)
        result["events"] = harvested["events"]
        result["errors"] = harvested["errors"]
        if result["errors"]:
            log(f"  {site.url}: unable to load all events", "WARNING")
    except Exception as e:
        log(f"  ERROR: Failed to fetch events from {site.url}: {e}", "ERROR")
        result["errors"].append(f"Error fetching events from {site.url}: {e}")

    return result


def load_all_event_summaries(website_configs, sessions, timeout, log_func=None):
    """
    Harvest every configured site, one after the other.
    Returns (site_results, metrics_by_url).
    """
    log = log_func or console_log
    sites = []
    metrics_by_url = {}

    for site in website_configs:
        log(f"Fetching events from {site.url}...")
        metrics = SiteMetrics(url=site.url)
        start_time = time.time()

        data = harvest_site(sessions.for_site(site), site, timeout, log_func=log)

        metrics.event_count = len(data["events"])
        metrics.errors = len(data["errors"])
        metrics.error_messages.extend(data["errors"])
        metrics.duration_ms = (time.time() - start_time) * 1000
        log(f"  Found {metrics.event_count} events")

        sites.append(data)
        metrics_by_url[site.url] = metrics

    load_error_count = sum(len(site["errors"]) for site in sites)
    if load_error_count > 0:
        log(f"{load_error_count} errors found while loading events", "WARNING")
    else:
        log(f"{count_events(sites)} remote events found")

    return sites, metrics_by_url
