"""
Work out which events are relevant to a band.

Single-page sites already carry each event's description. Two-page sites need
a visit to every event's detail page, and optionally to the bio page of every
artist on its lineup. Detail visits are capped per run so a venue isn't hit
with a burst of requests; the next run picks up where this one stopped.
"""

from dataclasses import dataclass
from urllib.parse import urljoin

from gigcheck import config
from gigcheck.page import PageError, element_href, element_text
from gigcheck.pipeline.io import console_log
from gigcheck.utils.events import add_error, is_resolved
from gigcheck.utils.text import find_text_snippets, matches_filter


@dataclass
class DetailResult:
    success: bool
    error_count: int = 0


def determine_show_relevance(genres, description):
    return find_text_snippets(description, genres)


def find_description_selector(selectors, detail_url):
    """Pick the description selector whose domain appears in the absolute detail URL."""
    if not detail_url:
        return None
    return next((s for s in selectors.description if s.domain in detail_url), None)


def describe_event(event, index):
    return f"({index}) {event.get('name')} on {event.get('date')}"


def record_event_error(site_result, event, message):
    add_error(site_result, message)
    add_error(event, message)


def fetch_lineup_descriptions(page, selector, event, site_result, index, timeout, log):
    """
    Follow every lineup link on the current detail page and read the artist
    description found there. A failing link is recorded and skipped.
    Returns (descriptions, error_count).
    """
    descriptions = []
    error_count = 0

    base_url = page.url
    links = page.query_all(selector.lineup, element_href)
    for link in links:
        if not link or not selector.artist_description:
            continue

        try:
            page.goto(urljoin(base_url, link))
            page.wait_for_selector(selector.artist_description, timeout)
            text = page.query_one(selector.artist_description, element_text)
        except PageError as e:
            error_count += 1
            record_event_error(
                site_result,
                event,
                f"Error fetching lineup description for event {describe_event(event, index)} at {link}: {e}",
            )
            log(f"    Error fetching lineup description for {event.get('name')}", "WARNING")
            continue

        if text:
            descriptions.append(text)

    return descriptions, error_count


def resolve_details(session, event, site, site_result, band, timeout, index=0, log_func=None):
    """
    Load the detail page of a two-page site event (and its lineup pages) and
    set the event's relevance from the combined descriptions.

    Any failure that leaves the event without a description is recorded on
    the event, which then counts as resolved and won't be fetched again.
    """
    log = log_func or console_log
    link = event.get("detail_link")
    # Listing hrefs are often relative; domains only show up once resolved
    url = urljoin(site.url, link) if link else None

    selector = find_description_selector(site.selectors, url)
    if selector is None:
        record_event_error(
            site_result,
            event,
            f"Could not find a description selector for event {describe_event(event, index)} at {link}",
        )
        log(f"  Could not find a description selector for event {event.get('name')}", "ERROR")
        return DetailResult(success=False, error_count=1)

    log(f"  Retrieving event {event.get('name')} {event.get('date')}")
    error_count = 0
    descriptions = []

    try:
        with session.page() as page:
            page.goto(url)
            page.wait_for_selector(selector.description, timeout)

            description = page.query_one(selector.description, element_text)
            if description:
                descriptions.append(description)

            if selector.lineup:
                lineup, lineup_errors = fetch_lineup_descriptions(
                    page, selector, event, site_result, index, timeout, log
                )
                descriptions.extend(lineup)
                error_count += lineup_errors
    except Exception as e:
        error_count += 1
        record_event_error(
            site_result,
            event,
            f"Error fetching event {describe_event(event, index)} at {url}: {e}",
        )
        log(f"  Error fetching event {event.get('name')}: {e}", "ERROR")
        return DetailResult(success=False, error_count=error_count)

    if not descriptions:
        error_count += 1
        record_event_error(
            site_result,
            event,
            f"No description found for event {describe_event(event, index)} at {site.url}",
        )
        log(f"  No description found for event {event.get('name')}", "ERROR")
        return DetailResult(success=False, error_count=error_count)

    event["relevance"] = determine_show_relevance(band.genres, "\n".join(descriptions))
    return DetailResult(success=True, error_count=error_count)


def find_resume_offset(events):
    """Index of the first event without relevance or errors, -1 if none."""
    return next((i for i, event in enumerate(events) if not is_resolved(event)), -1)


def get_event_details(sessions, site, site_result, band, limit=config.DETAIL_LIMIT,
                      timeout=config.DEFAULT_TIMEOUT_MS, filters=None, log_func=None):
    """
    Determine the relevance of the unresolved events of one site, in place.

    Starts at the first unresolved event. Two-page sites only process the
    next `limit` events; single-page sites need no extra requests, so all
    remaining events are processed.
    Returns (count, error_count).
    """
    log = log_func or console_log
    if filters is None:
        filters = config.DEFAULT_EVENT_FILTERS

    events = site_result.get("events") or []
    if not events:
        log(f"No events found for site {site_result['url']}")
        return 0, 0

    offset = find_resume_offset(events)
    if offset == -1:
        log(f"All events already have relevance scores for site {site_result['url']}")
        return 0, 0

    two_page = site.selectors.is_two_page()
    remaining = len(events) - offset
    count = min(limit, remaining) if two_page else remaining
    end = offset + count
    error_count = 0

    log(f"Fetching details for events ({offset} - {end}) / {len(events)} from {site_result['url']}")

    for index in range(offset, end):
        event = events[index]
        if is_resolved(event):
            continue

        if matches_filter(event.get("name"), filters):
            event["relevance"] = []
            continue

        if two_page:
            result = resolve_details(
                sessions.for_site(site), event, site, site_result, band, timeout, index=index, log_func=log
            )
            error_count += result.error_count
        elif event.get("description"):
            event["relevance"] = determine_show_relevance(band.genres, event["description"])
        else:
            error_count += 1
            add_error(site_result, f"No detail link found for event {describe_event(event, index)} at {site_result['url']}")
            log(f"  No detail link found for event {event.get('name')}", "ERROR")

    return count, error_count


def get_relevance_for_events(sites, band, sessions, limit, timeout, log_func=None, metrics_by_url=None):
    """
    Fill in relevance for every site result that is missing it.
    Returns the number of event detail slots used.
    """
    log = log_func or console_log
    configs = {site.url: site for site in band.website_configs}
    filters = [*band.filter, *config.DEFAULT_EVENT_FILTERS]
    detail_count = 0

    for site_result in sites:
        site = configs.get(site_result["url"])
        if site is None:
            add_error(site_result, f"Unable to find config for site {site_result['url']}")
            log(f"Unable to find config for site {site_result['url']}", "ERROR")
            continue

        count, error_count = get_event_details(
            sessions, site, site_result, band, limit=limit, timeout=timeout, filters=filters, log_func=log
        )
        detail_count += count

        metrics = (metrics_by_url or {}).get(site.url)
        if metrics is not None:
            metrics.details_fetched = count
            metrics.errors += error_count

    log(f"{detail_count} event details fetched")
    return detail_count
