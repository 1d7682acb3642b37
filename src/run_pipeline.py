#!/usr/bin/env python3
# ==============================================================================
# [FILE] src/run_pipeline.py
# [PROJECT] ChannelAtlas
# [ROLE] Main entrypoint - run all active regions, write artifacts and stats
# [VERSION] v1.1
# [UPDATED] 2026-10-17
# ==============================================================================

"""
Exit Behavior
- 0: at least one region produced channels (partial failures are logged only)
- 2: no active regions, no region produced data, or fatal config error
     (details in logs/run_pipeline.error.json)
"""

from __future__ import annotations

import argparse
import logging
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, List, Optional

import requests

from functions.paths import DEFAULT_CONFIG, LOGS_DIR, resolve
from src.build_summary import write_summary
from src.config import Config, ConfigError, load_config
from src.models import ERROR, NO_DATA, SUCCESS, RegionResult, RunStatistics
from src.region_pipeline import process_region
from src.write_outputs import write_json, write_region_outputs, write_statistics

__app__ = "ChannelAtlas"
__component__ = "run_pipeline"
__version__ = "1.1.0"

LOG_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"


@dataclass
class RunReport:
    results: List[RegionResult] = field(default_factory=list)
    statistics: Optional[RunStatistics] = None

    @property
    def successful(self) -> int:
        return sum(1 for r in self.results if r.outcome == SUCCESS)

    @property
    def exit_code(self) -> int:
        return 0 if self.successful else 2


def utc_now() -> str:
    return datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


def compute_statistics(results: List[RegionResult], generated_at: str) -> RunStatistics:
    regions = {}
    for r in results:
        regions[r.region.code] = {
            "name": r.region.name,
            "flag": r.region.flag,
            "outcome": r.outcome,
            "source": r.source or "",
            "channels": len(r.channels),
            "categories": len({ch.category for ch in r.channels}),
        }
    return RunStatistics(
        generated_at=generated_at,
        total_regions=len(results),
        successful=sum(1 for r in results if r.outcome == SUCCESS),
        no_data=sum(1 for r in results if r.outcome == NO_DATA),
        errors=sum(1 for r in results if r.outcome == ERROR),
        total_channels=sum(len(r.channels) for r in results),
        regions=regions,
    )


def run(
    cfg: Config,
    session=None,
    sleep: Callable[[float], None] = time.sleep,
    clock: Callable[[], str] = utc_now,
) -> RunReport:
    report = RunReport()
    regions = cfg.active_regions
    if not regions:
        logging.error("No active regions configured")
        return report

    session = session or requests.Session()
    generated_at = clock()
    logging.info("Processing %d regions", len(regions))

    for i, region in enumerate(regions):
        if i:
            sleep(cfg.scraper.request_delay_ms / 1000.0)
        logging.info("[%d/%d] %s %s (%s)", i + 1, len(regions), region.flag, region.name, region.code)
        try:
            result = process_region(region, cfg, session, sleep=sleep)
        except Exception as e:
            logging.exception("Region %s (%s) failed", region.name, region.code)
            result = RegionResult(region=region, outcome=ERROR, reason=f"{type(e).__name__}: {e}")

        if result.ok:
            write_region_outputs(result, cfg, generated_at)
        else:
            logging.warning("%s: no data (%s)", region.name, result.reason)
        report.results.append(result)

    logging.info(
        "Run complete: %d success, %d no data, %d errors",
        report.successful,
        sum(1 for r in report.results if r.outcome == NO_DATA),
        sum(1 for r in report.results if r.outcome == ERROR),
    )

    if not report.successful:
        logging.error("No region produced any channels")
        return report

    report.statistics = compute_statistics(report.results, generated_at)
    if cfg.statistics:
        write_statistics(report.statistics, cfg)
    if cfg.summary:
        write_summary(report.statistics, cfg)
    return report


def setup_logging(cfg: Optional[Config] = None) -> None:
    # basicConfig is a no-op once the root logger has handlers; open no file then
    if logging.getLogger().handlers:
        return
    handlers = [logging.StreamHandler()]
    level = logging.INFO
    if cfg:
        level = getattr(logging, cfg.log_level, logging.INFO)
        if cfg.log_file:
            log_path = resolve(cfg.log_file)
            log_path.parent.mkdir(parents=True, exist_ok=True)
            handlers.append(logging.FileHandler(log_path, encoding="utf-8"))
    logging.basicConfig(level=level, format=LOG_FORMAT, handlers=handlers)


def write_error(e: Exception) -> None:
    err = {
        "timestamp_utc": utc_now(),
        "component": __component__,
        "version": __version__,
        "error_type": type(e).__name__,
        "error": str(e),
    }
    try:
        write_json(LOGS_DIR / f"{__component__}.error.json", err)
    except OSError as oe:
        logging.error("Could not write error file: %s", oe)


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Build per-region channel playlists.")
    parser.add_argument("--config", default=str(DEFAULT_CONFIG), help="Path to channelatlas.yml")
    args = parser.parse_args(argv)

    try:
        cfg = load_config(Path(args.config))
    except ConfigError as e:
        setup_logging()
        logging.error("Config error: %s", e)
        write_error(e)
        return 2

    setup_logging(cfg)
    logging.info("%s %s started", __app__, __version__)

    if not cfg.active_regions:
        logging.error("No active regions in %s", args.config)
        return 2

    with requests.Session() as session:
        report = run(cfg, session=session)
    return report.exit_code


if __name__ == "__main__":
    raise SystemExit(main())
