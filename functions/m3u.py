#!/usr/bin/env python3
# ==============================================================================
# [FILE] functions/m3u.py
# [PROJECT] ChannelAtlas
# [ROLE] M3U parsing and rendering helpers
# [VERSION] v1.1
# [UPDATED] 2026-10-17
# ==============================================================================

import re
import uuid

HEADER = "#EXTM3U"
CACHE_DIRECTIVE = "#EXT-X-ALLOW-CACHE:NO"
EXTINF = "#EXTINF"

ATTR_RX = re.compile(r'([\w-]+)="([^"]*)"')


def generated_id(region_code: str, position: int, stream_url: str) -> str:
    """Deterministic id for records that carry none (unique per region/position)."""
    return str(uuid.uuid5(uuid.NAMESPACE_URL, f"{region_code}:{position}:{stream_url}"))


def _attrs(extinf: str) -> dict:
    return {k: v.strip() for k, v in ATTR_RX.findall(extinf)}


def _display_name(extinf: str) -> str:
    # text after the first comma that follows the last attribute
    matches = list(ATTR_RX.finditer(extinf))
    start = matches[-1].end() if matches else len(EXTINF)
    tail = extinf[start:]
    if "," not in tail:
        return ""
    return tail.split(",", 1)[1].strip()


def is_playlist(document: str) -> bool:
    if not document:
        return False
    return any(line.strip().lstrip("\ufeff").startswith(HEADER) for line in document.splitlines())


def parse_m3u(document: str, region_code: str) -> list:
    """
    Parse #EXTINF + URL pairs into raw channel records.

    Documents without the #EXTM3U header yield [] (upstream error pages are
    common). A #EXTINF entry without a following URL is dropped.
    """
    if not is_playlist(document):
        return []

    entries = []
    pending = None
    position = 0
    for line in document.splitlines():
        line = line.strip()
        if not line:
            continue
        if line.startswith(EXTINF):
            pending = line
            continue
        if line.startswith("#"):
            continue
        if pending is None:
            continue

        attrs = _attrs(pending)
        entries.append({
            "id": attrs.get("tvg-id") or generated_id(region_code, position, line),
            "name": _display_name(pending) or attrs.get("tvg-name") or "Unknown",
            "logo": attrs.get("tvg-logo", ""),
            "category": attrs.get("group-title", ""),
            "streamUrl": line,
            "region": region_code,
        })
        position += 1
        pending = None
    return entries


def _attr_value(value) -> str:
    return str(value).replace('"', "'")


def render_m3u(channels) -> str:
    blocks = []
    for ch in channels:
        if not ch.stream_url:
            continue
        name = _attr_value(ch.name)
        blocks.append(
            f'#EXTINF:-1 tvg-id="{_attr_value(ch.id)}" tvg-name="{name}" tvg-logo="{_attr_value(ch.logo)}" '
            f'group-title="{_attr_value(ch.category)}",{name}\n{ch.stream_url}\n'
        )
    return f"{HEADER}\n{CACHE_DIRECTIVE}\n\n" + "\n".join(blocks)
