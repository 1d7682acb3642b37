"""
ChannelAtlas — Channel normalization and keyword filtering

Raw records come in two shapes:
- playlist: dicts produced by functions.m3u.parse_m3u (already channel-shaped)
- api: channel objects from a JSON API (Pluto-style, nested stitched URLs / logos)

Each canonical field has an ordered chain of accessors. The first accessor that
returns a non-empty value wins; otherwise the field default applies.
"""

from __future__ import annotations

import logging
from typing import Callable, Dict, Iterable, List, Optional, Sequence, Tuple

from functions.m3u import generated_id
from src.models import Channel

Accessor = Callable[[dict], object]

PLAYLIST = "playlist"
API = "api"


def key(name: str) -> Accessor:
    def get(raw: dict):
        return raw.get(name)
    get.__name__ = f"key[{name}]"
    return get


def path(*names) -> Accessor:
    """Nested lookup; integers index into lists."""
    def get(raw):
        cur = raw
        for n in names:
            if isinstance(n, int):
                if not isinstance(cur, list) or len(cur) <= n:
                    return None
                cur = cur[n]
            else:
                if not isinstance(cur, dict):
                    return None
                cur = cur.get(n)
        return cur
    get.__name__ = "path[" + ".".join(str(n) for n in names) + "]"
    return get


def string_key(name: str) -> Accessor:
    def get(raw: dict):
        v = raw.get(name)
        return v if isinstance(v, str) else None
    get.__name__ = f"str[{name}]"
    return get


PLAYLIST_FIELDS: Dict[str, Tuple[Accessor, ...]] = {
    "stream_url": (key("streamUrl"), key("url")),
    "id": (key("id"),),
    "name": (key("name"),),
    "number": (key("number"),),
    "category": (key("category"),),
    "logo": (key("logo"),),
    "language": (key("language"),),
    "summary": (key("summary"),),
    "featured": (key("featured"),),
}

API_FIELDS: Dict[str, Tuple[Accessor, ...]] = {
    "stream_url": (path("stitched", "urls", 0, "url"), string_key("url"), key("stream"), key("streamUrl")),
    "id": (key("_id"), key("id"), key("slug")),
    "name": (key("name"), key("title")),
    "number": (key("number"),),
    "category": (key("category"), key("genre")),
    "logo": (path("logo", "path"), path("colorLogoPNG", "path"), string_key("logo")),
    "language": (key("language"),),
    "summary": (key("summary"), key("description")),
    "featured": (key("featured"),),
}

FIELD_CHAINS = {PLAYLIST: PLAYLIST_FIELDS, API: API_FIELDS}

DEFAULT_NAMES = {PLAYLIST: "Unknown", API: "Unknown Channel"}


def first_value(raw: dict, chain: Sequence[Accessor]):
    for accessor in chain:
        val = accessor(raw)
        if isinstance(val, str):
            val = val.strip()
        if val is not None and val != "":
            return val
    return None


def _as_int(val) -> int:
    try:
        return int(val)
    except (TypeError, ValueError):
        return 0


def normalize(
    raw: dict,
    region_code: str,
    shape: str = API,
    default_category: str = "General",
    position: int = 0,
) -> Optional[Channel]:
    """Map one raw record to a Channel; None when no stream URL resolves."""
    if not isinstance(raw, dict):
        return None
    fields = FIELD_CHAINS[shape]

    stream_url = first_value(raw, fields["stream_url"])
    if not isinstance(stream_url, str) or not stream_url:
        logging.debug("Dropped record without stream URL in %s: %s", region_code, raw.get("name") or raw.get("id"))
        return None

    channel_id = first_value(raw, fields["id"])
    featured = first_value(raw, fields["featured"])
    return Channel(
        id=str(channel_id) if channel_id is not None else generated_id(region_code, position, stream_url),
        name=str(first_value(raw, fields["name"]) or DEFAULT_NAMES[shape]),
        stream_url=stream_url,
        region=region_code,
        number=_as_int(first_value(raw, fields["number"])),
        category=str(first_value(raw, fields["category"]) or default_category),
        logo=str(first_value(raw, fields["logo"]) or ""),
        language=str(first_value(raw, fields["language"]) or "en"),
        summary=str(first_value(raw, fields["summary"]) or ""),
        featured=str(featured).lower() == "true",
    )


def normalize_all(
    records: Iterable[dict],
    region_code: str,
    shape: str = API,
    default_category: str = "General",
) -> List[Channel]:
    out: List[Channel] = []
    dropped = 0
    for i, raw in enumerate(records):
        ch = normalize(raw, region_code, shape=shape, default_category=default_category, position=i)
        if ch is None:
            dropped += 1
            continue
        out.append(ch)
    if dropped:
        logging.info("Normalized %d channels for %s (%d dropped without stream URL)", len(out), region_code, dropped)
    return out


def matches_keyword(ch: Channel, keywords: Sequence[str]) -> bool:
    haystacks = (ch.name.lower(), ch.id.lower(), ch.stream_url.lower())
    return any(k.lower() in h for k in keywords for h in haystacks)


def filter_by_keywords(channels: List[Channel], keywords: Sequence[str]) -> List[Channel]:
    """
    Keep channels whose name, id or stream URL contains a keyword.
    An empty match falls back to the full list.
    """
    keywords = [k for k in (keywords or []) if k]
    if not keywords or not channels:
        return channels

    matched = [ch for ch in channels if matches_keyword(ch, keywords)]
    if matched:
        logging.info("Filtered %d channels matching %s from %d total", len(matched), keywords, len(channels))
        return matched

    logging.info("No channels matching %s, keeping all %d channels", keywords, len(channels))
    return channels
