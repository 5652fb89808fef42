import os
import re
from pathlib import Path
from dotenv import load_dotenv

load_dotenv()

REPO_ROOT = Path(__file__).resolve().parents[1]
RESULTS_PATH = Path(os.environ.get("GIG_CHECK_RESULTS", REPO_ROOT / "gigs.json"))
LOG_PATH = Path(os.environ.get("GIG_CHECK_LOG", REPO_ROOT / "gig-check-log.txt"))
LOG_RETENTION_DAYS = 14

# Milliseconds, per wait operation
DEFAULT_TIMEOUT_MS = int(os.environ.get("GIG_CHECK_TIMEOUT", "10000"))
NAVIGATION_TIMEOUT_MS = int(os.environ.get("GIG_CHECK_NAVIGATION_TIMEOUT", "30000"))

# Max two-page detail fetches per site per run
DEFAULT_LIMIT = int(os.environ.get("GIG_CHECK_LIMIT", "40"))
DETAIL_LIMIT = 5

MAX_DEPTH = int(os.environ.get("GIG_CHECK_MAX_DEPTH", "6"))
SNIPPET_CONTEXT_LENGTH = int(os.environ.get("GIG_CHECK_SNIPPET_CONTEXT", "40"))

BROWSER_USER_AGENT = "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/131.0.0.0 Safari/537.36"
BROWSER_VIEWPORT = {"width": 1920, "height": 1080}

STATIC_HEADERS = {
    "User-Agent": BROWSER_USER_AGENT,
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.9",
    "Connection": "keep-alive",
}
STATIC_REQUEST_TIMEOUT = 30

# Events matching these are never worth a detail fetch
DEFAULT_EVENT_FILTERS = [
    re.compile(r"private event", re.IGNORECASE),
    re.compile(r"cancelled", re.IGNORECASE),
    re.compile(r"postponed", re.IGNORECASE),
    re.compile(r"open mic", re.IGNORECASE),
]
