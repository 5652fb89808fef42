import json
import os
import re
from datetime import datetime, timedelta, timezone
from pathlib import Path

from gigcheck.pipeline.validate import validate_site_result


class SnapshotWriteError(Exception):
    """The results snapshot could not be written."""


def utc_timestamp():
    return datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M:%S")


def console_log(message, level="INFO"):
    print(message)


class RunLog:
    """Log a message to both console and log buffer."""

    def __init__(self):
        self.lines = []

    def __call__(self, message, level="INFO"):
        print(message)
        self.lines.append(f"[{utc_timestamp()}] [{level}] {message}")


def trim_log_by_time(log_path, retention_days=14):
    """
    Remove log entries older than retention_days.
    Returns list of lines to keep.
    """
    if not log_path.exists():
        return []

    cutoff = datetime.now(timezone.utc) - timedelta(days=retention_days)
    cutoff_str = cutoff.strftime("%Y-%m-%d %H:%M:%S")

    kept_lines = []
    current_entry_recent = False

    with open(log_path, "r") as f:
        for line in f:
            match = re.match(r"\[(\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2})\]", line)
            if match:
                current_entry_recent = match.group(1) >= cutoff_str

            if current_entry_recent:
                kept_lines.append(line)

    return kept_lines


def save_run_log(run_log, log_path, retention_days=14):
    """Append this run's entries to the log file, dropping expired ones."""
    existing_log = trim_log_by_time(log_path, retention_days=retention_days)
    log_content = existing_log + ["\n--- New Run ---\n"] + [line + "\n" for line in run_log.lines]

    log_path.parent.mkdir(parents=True, exist_ok=True)
    with open(log_path, "w") as f:
        f.writelines(log_content)


def load_previous_results(path):
    """
    Load the site results saved by the previous run.
    A missing or unreadable file means there is no previous state.
    Returns list of site results.
    """
    try:
        path = Path(path)
        if path.exists():
            with open(path, "r") as f:
                data = json.load(f)
            if isinstance(data, list):
                return [site for site in data if validate_site_result(site)]
    except (OSError, TypeError, ValueError):
        pass
    return []


def save_results(sites, path):
    """
    Overwrite the results file with the given site results.
    The file is written next to its destination and then swapped in, so a
    failed write leaves the previous results untouched.
    Raises SnapshotWriteError if the file can't be written.
    """
    path = Path(path)
    tmp_path = path.with_name(path.name + ".tmp")
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(tmp_path, "w") as f:
            json.dump(sites, f, indent=2)
        os.replace(tmp_path, path)
    except (OSError, TypeError, ValueError) as e:
        tmp_path.unlink(missing_ok=True)
        raise SnapshotWriteError(f"Could not write results to {path}: {e}") from e
