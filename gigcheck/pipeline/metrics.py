from dataclasses import dataclass, field


@dataclass
class SiteMetrics:
    """Track harvest metrics for each site."""
    url: str
    event_count: int = 0
    new_events: int = 0
    details_fetched: int = 0
    errors: int = 0
    error_messages: list = field(default_factory=list)
    duration_ms: float = 0.0
