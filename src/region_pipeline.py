import logging
import time

from src.config import Config, Region
from src.download_sources import fetch_region
from src.models import NO_DATA, SUCCESS, RegionResult
from src.normalize_channels import filter_by_keywords


def process_region(region: Region, cfg: Config, session, sleep=time.sleep) -> RegionResult:
    """Fetch (normalized per source) -> keyword filter for one region."""
    fetched = fetch_region(region, cfg, session, sleep=sleep)
    if not fetched.channels:
        return RegionResult(region=region, outcome=NO_DATA, reason=fetched.reason)

    source = fetched.source
    keywords = source.keywords if source.keywords is not None else cfg.keywords
    channels = filter_by_keywords(fetched.channels, keywords)

    logging.info("%s: %d channels from %s", region.name, len(channels), source.name)
    return RegionResult(region=region, channels=channels, outcome=SUCCESS, reason="ok", source=source.name)
