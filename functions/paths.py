#!/usr/bin/env python3
# ==============================================================================
# [FILE] functions/paths.py
# [PROJECT] ChannelAtlas
# [ROLE] Path helpers for config, outputs, logs
# [VERSION] v1.2
# [UPDATED] 2026-10-17
# ==============================================================================

from pathlib import Path

BASE_DIR = Path(__file__).resolve().parent.parent
DEFAULT_CONFIG = BASE_DIR / "config" / "channelatlas.yml"
LOGS_DIR = BASE_DIR / "logs"


def resolve(path) -> Path:
    """Relative paths are taken from the project root."""
    p = Path(path)
    return p if p.is_absolute() else BASE_DIR / p


def region_output_path(output_dir, region_code: str, extension: str) -> Path:
    return resolve(output_dir) / f"{region_code.lower()}.{extension}"


def run_output_path(output_dir, filename: str) -> Path:
    return resolve(output_dir) / filename
