def validate_site_result(site):
    """Check that a saved site result has the shape the reconciler expects."""
    if not isinstance(site, dict) or not isinstance(site.get("url"), str):
        return False
    events = site.get("events", [])
    if not isinstance(events, list):
        return False
    return all(isinstance(event, dict) for event in events)
