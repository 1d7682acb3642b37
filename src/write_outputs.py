#!/usr/bin/env python3
# ==============================================================================
# [FILE] src/write_outputs.py
# [PROJECT] ChannelAtlas
# [ROLE] Per-region .m3u / .json artifacts and run-level stats.json
# [VERSION] v1.1
# [UPDATED] 2026-10-17
# ==============================================================================

import json
import logging
from pathlib import Path
from typing import List, Optional

from functions.m3u import render_m3u
from functions.paths import region_output_path, run_output_path
from src.config import Config
from src.models import RegionResult, RunStatistics


def write_text(path: Path, text: str) -> None:
    """Write via a sibling .tmp file so a failed write never leaves a truncated artifact."""
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp = path.with_name(path.name + ".tmp")
    try:
        tmp.write_text(text, encoding="utf-8")
        tmp.replace(path)
    except OSError:
        tmp.unlink(missing_ok=True)
        raise


def write_json(path: Path, obj: dict) -> None:
    write_text(path, json.dumps(obj, indent=2, ensure_ascii=False) + "\n")


def region_document(result: RegionResult, cfg: Config, generated_at: str) -> dict:
    r = result.region
    return {
        "region": {"code": r.code, "name": r.name, "flag": r.flag},
        "metadata": {
            "generatedAt": generated_at,
            "totalChannels": len(result.channels),
            "version": cfg.output.version,
            "source": result.source or "",
        },
        "channels": [ch.to_dict() for ch in result.channels],
    }


def write_m3u(result: RegionResult, cfg: Config) -> Optional[Path]:
    path = region_output_path(cfg.output.dir, result.region.code, "m3u")
    try:
        write_text(path, render_m3u(result.channels))
    except OSError as e:
        logging.error("M3U write failed for %s: %s", result.region.code, e)
        return None
    return path


def write_region_json(result: RegionResult, cfg: Config, generated_at: str) -> Optional[Path]:
    path = region_output_path(cfg.output.dir, result.region.code, "json")
    try:
        write_json(path, region_document(result, cfg, generated_at))
    except OSError as e:
        logging.error("JSON write failed for %s: %s", result.region.code, e)
        return None
    return path


def write_region_outputs(result: RegionResult, cfg: Config, generated_at: str) -> List[Path]:
    written = []
    if "m3u" in cfg.output.formats:
        written.append(write_m3u(result, cfg))
    if "json" in cfg.output.formats:
        written.append(write_region_json(result, cfg, generated_at))
    written = [p for p in written if p]
    for p in written:
        logging.info("Wrote %s (%d channels)", p.name, len(result.channels))
    return written


def write_statistics(stats: RunStatistics, cfg: Config) -> Optional[Path]:
    path = run_output_path(cfg.output.dir, "stats.json")
    try:
        write_json(path, stats.to_dict())
    except OSError as e:
        logging.error("Statistics write failed: %s", e)
        return None
    return path
