#!/usr/bin/env python3
"""
Check venue websites for gigs relevant to a band.

Every run harvests the event listings of the band's configured venues,
carries forward what earlier runs already learned about each event, looks up
the relevance of events that are still unknown (a limited number of detail
pages per site per run), then reports the events not seen before and saves
the results for the next run.
"""

import argparse
import json
import sys
from pathlib import Path

from gigcheck import config
from gigcheck.browser import SessionPool
from gigcheck.details import get_relevance_for_events
from gigcheck.harvest import load_all_event_summaries
from gigcheck.pipeline.io import (
    RunLog,
    SnapshotWriteError,
    console_log,
    load_previous_results,
    save_results,
    save_run_log,
)
from gigcheck.pipeline.merge import (
    carry_forward_relevance,
    find_relevant_events,
    normalize_site_results,
    reconcile,
)
from gigcheck.registry import get_band_config
from gigcheck.utils.events import count_events


def report_events(new_events, sites_to_write, log, debug=False):
    """Report the new events and every event relevant to the band."""
    log(f"{count_events(new_events)} new events found")
    if debug:
        log(json.dumps(new_events, indent=2), "DEBUG")

    relevant = find_relevant_events(sites_to_write)
    if relevant:
        log(f"Found {len(relevant)} relevant events:")
        for event in relevant:
            log(f"  {event['name']} | {event['date']} | {event['url']}")
            for snippet in event["relevance"]:
                log(f"      {snippet}")
    else:
        log("No relevant events found")
    return relevant


def report_errors(sites_to_write, log):
    errors = [error for site in sites_to_write for error in site.get("errors") or []]
    if errors:
        log(f"{len(errors)} errors found", "ERROR")
        for error in errors:
            log(f"  {error}", "ERROR")
    return errors


def log_summary(metrics_by_url, log):
    log("")
    log("=" * 84)
    log("SITE SUMMARY")
    log("=" * 84)
    log(f"{'Site':<44} {'Events':>7} {'New':>5} {'Details':>8} {'Errors':>7} {'Time':>8}")
    log("-" * 84)
    for url in sorted(metrics_by_url.keys()):
        m = metrics_by_url[url]
        time_str = f"{m.duration_ms:.0f}ms"
        log(f"{url[:44]:<44} {m.event_count:>7} {m.new_events:>5} {m.details_fetched:>8} {m.errors:>7} {time_str:>8}")
    log("-" * 84)
    total_events = sum(m.event_count for m in metrics_by_url.values())
    total_new = sum(m.new_events for m in metrics_by_url.values())
    total_details = sum(m.details_fetched for m in metrics_by_url.values())
    total_errors = sum(m.errors for m in metrics_by_url.values())
    log(f"{'TOTAL':<44} {total_events:>7} {total_new:>5} {total_details:>8} {total_errors:>7}")
    log("=" * 84)


def search(band, results_path, limit=config.DETAIL_LIMIT, timeout=config.DEFAULT_TIMEOUT_MS,
           debug=False, log_func=None, sessions=None):
    """
    Find new events for a band.
    Raises SnapshotWriteError if the results can't be saved.
    Returns the new events, grouped by site.
    """
    log = log_func or console_log

    log("Starting gig search...")
    log(f"  band={band.name} sites={', '.join(band.sites)} file={results_path} limit={limit} timeout={timeout}")

    previous = load_previous_results(results_path)
    log(f"{count_events(previous)} previous gigs loaded")

    owns_sessions = sessions is None
    if owns_sessions:
        sessions = SessionPool(debug=debug)

    try:
        sites, metrics_by_url = load_all_event_summaries(band.website_configs, sessions, timeout, log_func=log)

        # Names and dates must be normalized before they can be matched
        # against the previous run.
        sites = normalize_site_results(sites)
        sites = carry_forward_relevance(sites, previous)

        get_relevance_for_events(
            sites, band, sessions, limit, timeout, log_func=log, metrics_by_url=metrics_by_url
        )
    finally:
        if owns_sessions:
            sessions.close()

    sites_to_write, new_events = reconcile(sites, previous)
    for site in new_events:
        metrics = metrics_by_url.get(site["url"])
        if metrics is not None:
            metrics.new_events = len(site["events"])

    report_events(new_events, sites_to_write, log, debug=debug)
    report_errors(sites_to_write, log)

    save_results(sites_to_write, results_path)
    log(f"{count_events(sites_to_write)} events saved to {results_path}")

    log_summary(metrics_by_url, log)
    return new_events


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Check available gigs in a specified location.")
    parser.add_argument(
        "-b", "--band", required=True,
        help="The name of the band to search for. This must match the name of a band config.",
    )
    parser.add_argument(
        "-f", "--file", type=Path, default=config.RESULTS_PATH,
        help="Path to the file containing the list of gigs from previous runs.",
    )
    parser.add_argument(
        "-t", "--timeout", type=int, default=config.DEFAULT_TIMEOUT_MS,
        help="Timeout in milliseconds for the browser to wait for each page to load.",
    )
    parser.add_argument(
        "-l", "--limit", type=int, default=config.DEFAULT_LIMIT,
        help="Limit the number of gig details to check for each site.",
    )
    parser.add_argument(
        "-d", "--debug", action="store_true",
        help="Show the browser window and print the full list of new events.",
    )
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    log = RunLog()
    exit_code = 0

    try:
        band = get_band_config(args.band, log_func=log)
    except ValueError as e:
        log(f"Error: {e}", "ERROR")
        band = None
        exit_code = 1

    if band is not None:
        try:
            search(band, args.file, limit=args.limit, timeout=args.timeout, debug=args.debug, log_func=log)
        except SnapshotWriteError as e:
            log(f"Error writing file: {e}", "ERROR")
            exit_code = 1

    try:
        save_run_log(log, config.LOG_PATH, retention_days=config.LOG_RETENTION_DAYS)
    except OSError as e:
        print(f"Warning: Could not save run log: {e}")

    return exit_code


if __name__ == "__main__":
    sys.exit(main())
