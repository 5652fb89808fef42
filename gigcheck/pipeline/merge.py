"""
Reconcile a fresh harvest with the results saved by the previous run.

All functions return new data and leave their inputs untouched, so they can
be applied in any order and re-run on the same inputs with the same outcome.
"""

import copy

from gigcheck.utils.events import events_match
from gigcheck.utils.text import normalize_whitespace


def find_previous_site(previous, url):
    return next((site for site in previous if site.get("url") == url), None)


def find_matching_event(event, previous_site):
    if not previous_site:
        return None
    return next((prev for prev in previous_site.get("events") or [] if events_match(prev, event)), None)


def normalize_event(event):
    out = copy.deepcopy(event)
    out["name"] = normalize_whitespace(event.get("name"))
    out["date"] = normalize_whitespace(event.get("date"))
    return out


def normalize_site_results(sites):
    """Normalize event names and dates so they can be matched against the previous run."""
    return [
        {**copy.deepcopy(site), "events": [normalize_event(e) for e in site.get("events") or []]}
        for site in sites
    ]


def clean_event(event):
    """
    Prepare an event for storage: normalize name and date, drop the
    description (only needed to compute relevance) and unset relevance.
    """
    out = normalize_event(event)
    out.pop("description", None)
    if out.get("relevance") is None:
        out.pop("relevance", None)
    return out


def clean_site_results(sites):
    return [
        {**copy.deepcopy(site), "events": [clean_event(e) for e in site.get("events") or []]}
        for site in sites
    ]


def carry_forward_relevance(sites, previous):
    """
    Copy relevance and errors from the previous run onto matching events so
    they aren't fetched again.
    Returns new site results.
    """
    merged = copy.deepcopy(sites)

    for site in merged:
        previous_site = find_previous_site(previous, site.get("url"))
        if not previous_site:
            continue

        for event in site.get("events") or []:
            match = find_matching_event(event, previous_site)
            if not match:
                continue
            for key in ("relevance", "errors"):
                if match.get(key) is not None:
                    event[key] = copy.deepcopy(match[key])
                else:
                    event.pop(key, None)

    return merged


def find_new_events(sites, previous):
    """
    Find events that weren't in the previous run, per site.
    Sites the previous run didn't know about count as entirely new.
    """
    new_sites = []
    for site in sites:
        previous_site = find_previous_site(previous, site.get("url"))
        events = [
            copy.deepcopy(event)
            for event in site.get("events") or []
            if find_matching_event(event, previous_site) is None
        ]
        new_sites.append({**copy.deepcopy(site), "events": events})
    return new_sites


def find_relevant_events(sites):
    """Flatten events with at least one relevance snippet, tagged with their site url."""
    return [
        {**copy.deepcopy(event), "url": site.get("url")}
        for site in sites
        for event in site.get("events") or []
        if event.get("relevance")
    ]


def reconcile(sites, previous):
    """
    Clean the current results for storage and compute the new events delta.
    Returns (sites_to_write, new_events).
    """
    sites_to_write = clean_site_results(sites)
    new_events = find_new_events(sites_to_write, previous)
    return sites_to_write, new_events
