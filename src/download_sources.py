#!/usr/bin/env python3
# ==============================================================================
# [FILE] src/download_sources.py
# [PROJECT] ChannelAtlas
# [ROLE] Per-region source fetch: retry, linear backoff, source fallback
# [VERSION] v1.1
# [UPDATED] 2026-10-17
# ==============================================================================

"""
Sources are tried in configured order (a region api_url override goes first).
Each source gets up to scraper.retries attempts:
- OK with a recognised, non-empty body -> stop retrying this source
- OK but recognised as empty            -> next source
- 404                                   -> next source, no retry
- anything else                         -> sleep backoff_ms * attempt, retry

A source whose records all lack a stream URL counts as empty. Never raises.
Exhaustion returns an empty FetchResult.
"""

from __future__ import annotations

import json
import logging
import time
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Tuple

from functions.http import AttemptStatus, build_headers, get_source
from functions.m3u import is_playlist, parse_m3u
from src.config import Config, Region, SourceSpec
from src.models import Channel
from src.normalize_channels import API, PLAYLIST, normalize_all

JSON_LIST_KEYS = ("channels", "items", "data")


@dataclass
class FetchResult:
    records: List[dict] = field(default_factory=list)
    channels: List[Channel] = field(default_factory=list)
    source: Optional[SourceSpec] = None
    shape: Optional[str] = None
    reason: str = ""


def sources_for(region: Region, cfg: Config) -> Tuple[SourceSpec, ...]:
    sources = cfg.sources
    if region.api_url:
        override = SourceSpec(name="override", url=region.api_url, code_case="asis", format="auto")
        sources = (override,) + sources
    return sources


def backoff_seconds(cfg: Config, attempt: int) -> float:
    return cfg.scraper.backoff_ms * attempt / 1000.0


def _json_records(body: str) -> Optional[list]:
    try:
        data = json.loads(body)
    except ValueError:
        return None
    if isinstance(data, list):
        return [r for r in data if isinstance(r, dict)]
    if isinstance(data, dict):
        for k in JSON_LIST_KEYS:
            if isinstance(data.get(k), list):
                return [r for r in data[k] if isinstance(r, dict)]
    return None


def decode_body(body: str, source: SourceSpec, region_code: str) -> Tuple[Optional[list], Optional[str]]:
    """
    Returns (records, shape). records is None when the body is not in a
    recognised format for this source.
    """
    if source.format in ("m3u", "auto") and is_playlist(body):
        return parse_m3u(body, region_code), PLAYLIST
    if source.format in ("json", "auto"):
        records = _json_records(body)
        if records is not None:
            return records, API
    return None, None


def fetch_from_source(
    region: Region,
    source: SourceSpec,
    cfg: Config,
    session,
    sleep: Callable[[float], None] = time.sleep,
) -> FetchResult:
    url = source.url_for(region.code)
    headers = build_headers(cfg.scraper.user_agent, cfg.scraper.accept)
    timeout_sec = cfg.scraper.timeout_ms / 1000.0
    max_attempts = cfg.scraper.retries

    logging.info("Trying %s for %s: %s", source.name, region.name, url)
    reason = "no attempts"
    for attempt in range(1, max_attempts + 1):
        result = get_source(session, url, headers, timeout_sec)

        if result.status is AttemptStatus.NOT_FOUND:
            logging.warning("Region %s (%s) not available on %s", region.name, region.code, source.name)
            return FetchResult(reason=f"{source.name}: not found")

        if result.status is AttemptStatus.OK:
            records, shape = decode_body(result.body, source, region.code)
            if records:
                logging.info("Fetched %d records for %s from %s", len(records), region.name, source.name)
                return FetchResult(records=records, source=source, shape=shape, reason="ok")
            if records is not None:
                logging.warning("Empty catalog for %s on %s", region.name, source.name)
                return FetchResult(reason=f"{source.name}: empty")
            reason = "unrecognised response format"
        else:
            reason = result.reason

        logging.error(
            "Fetch failed for %s (%s) on %s - attempt %d/%d: %s",
            region.name, region.code, source.name, attempt, max_attempts, reason,
        )
        if attempt < max_attempts:
            sleep(backoff_seconds(cfg, attempt))

    return FetchResult(reason=f"{source.name}: {reason}")


def fetch_region(
    region: Region,
    cfg: Config,
    session,
    sleep: Callable[[float], None] = time.sleep,
) -> FetchResult:
    reasons = []
    for source in sources_for(region, cfg):
        result = fetch_from_source(region, source, cfg, session, sleep=sleep)
        if not result.records:
            reasons.append(result.reason)
            continue

        # a source only wins when at least one record carries a stream URL
        result.channels = normalize_all(
            result.records,
            region.code,
            shape=result.shape,
            default_category=source.default_category,
        )
        if result.channels:
            return result
        logging.warning("No records with a stream URL for %s on %s", region.name, source.name)
        reasons.append(f"{source.name}: no records with a stream URL")

    logging.warning("All sources exhausted for %s (%s)", region.name, region.code)
    return FetchResult(reason="; ".join(reasons) or "no sources configured")
