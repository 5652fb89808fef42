from gigcheck.bands import moongold
from gigcheck.pipeline.io import console_log
from gigcheck.selectors import BandConfig, parse_website_config
from gigcheck.venues import washington_dc

BANDS = {
    "moongold": moongold.BAND,
}


def get_website_configs():
    """Build the site registry, keyed by site identifier."""
    raw_sites = {}
    raw_sites.update(washington_dc.SITES)
    return {name: parse_website_config(raw) for name, raw in raw_sites.items()}


def get_band_config(band, log_func=None):
    """
    Load the config for the named band and join its site identifiers against
    the site registry. Unknown sites are skipped with a warning.
    Raises ValueError for an unknown band.
    """
    log = log_func or console_log

    raw = BANDS.get(band.lower())
    if raw is None:
        raise ValueError(f"No config found for band {band}")

    registry = get_website_configs()
    website_configs = []
    for site in raw["sites"]:
        website = registry.get(site)
        if website is None:
            log(f"Unable to find {raw['name']} website config for {site}", "WARNING")
            continue
        website_configs.append(website)

    return BandConfig(
        name=raw["name"],
        genres=list(raw["genres"]),
        sites=list(raw["sites"]),
        filter=list(raw.get("filter", [])),
        website_configs=website_configs,
    )
