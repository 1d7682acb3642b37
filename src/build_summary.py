#!/usr/bin/env python3
# ==============================================================================
# [FILE]     src/build_summary.py
# [PROJECT]  ChannelAtlas
# [ROLE]     Render SUMMARY.md from run statistics
# [VERSION]  v1.0
# [UPDATED]  2026-10-17
# ==============================================================================

"""
ChannelAtlas — Summary document

Inputs
- RunStatistics from the run aggregator

Outputs
- <output.dir>/SUMMARY.md (one row per attempted region, links to artifacts)
"""

import logging
from pathlib import Path
from typing import Optional

from functions.paths import run_output_path
from src.config import Config
from src.models import RunStatistics


def render_summary(stats: RunStatistics, cfg: Config) -> str:
    lines = [
        "# Channel Catalog",
        "",
        f"Generated: {stats.generated_at}",
        "",
        f"- Regions: {stats.successful}/{stats.total_regions} with channels"
        f" ({stats.no_data} without data, {stats.errors} errors)",
        f"- Channels: {stats.total_channels}",
        "",
        "| Region | Channels | Categories | Files |",
        "|---|---:|---:|---|",
    ]
    for code, info in stats.regions.items():
        if info["channels"]:
            files = " ".join(f"[{fmt}]({code.lower()}.{fmt})" for fmt in cfg.output.formats)
        else:
            files = "-"
        label = f"{info['flag']} {info['name']}".strip()
        lines.append(f"| {label} | {info['channels']} | {info['categories']} | {files} |")
    lines.append("")
    return "\n".join(lines)


def write_summary(stats: RunStatistics, cfg: Config) -> Optional[Path]:
    path = run_output_path(cfg.output.dir, "SUMMARY.md")
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(render_summary(stats, cfg), encoding="utf-8")
    except OSError as e:
        logging.error("Summary write failed: %s", e)
        return None
    logging.info("Wrote %s", path.name)
    return path
