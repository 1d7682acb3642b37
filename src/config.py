#!/usr/bin/env python3
# ==============================================================================
# [FILE] src/config.py
# [PROJECT] ChannelAtlas
# [ROLE] Load config/channelatlas.yml into an immutable Config object
# [VERSION] v1.0
# [UPDATED] 2026-10-17
# ==============================================================================

"""
Config keys (channelatlas.yml)
- regions[]: code, name, flag, active, api_url (alias: apiUrl)
- scraper: retries, timeout_ms (alias: timeout), backoff_ms, request_delay_ms,
  user_agent (alias: userAgent), accept
- sources[]: name, url ({code} placeholder), code_case, format, default_category, keywords
- filter.keywords
- output: dir, formats, version
- features: statistics, summary
- logging: level, file
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Tuple

import yaml

from functions.http import DEFAULT_ACCEPT, DEFAULT_USER_AGENT

CODE_CASES = ("lower", "upper", "asis")
SOURCE_FORMATS = ("m3u", "json", "auto")
OUTPUT_FORMATS = ("m3u", "json")

IPTV_ORG_URL = "https://raw.githubusercontent.com/iptv-org/iptv/master/streams/{code}.m3u"


class ConfigError(ValueError):
    pass


@dataclass(frozen=True)
class Region:
    code: str
    name: str
    flag: str = ""
    active: bool = True
    api_url: Optional[str] = None


@dataclass(frozen=True)
class SourceSpec:
    name: str
    url: str
    code_case: str = "lower"
    format: str = "m3u"
    default_category: str = "General"
    keywords: Optional[Tuple[str, ...]] = None

    def url_for(self, region_code: str) -> str:
        if self.code_case == "lower":
            code = region_code.lower()
        elif self.code_case == "upper":
            code = region_code.upper()
        else:
            code = region_code
        return self.url.replace("{code}", code)


@dataclass(frozen=True)
class ScraperSettings:
    retries: int = 3
    timeout_ms: int = 15000
    backoff_ms: int = 2000
    request_delay_ms: int = 500
    user_agent: str = DEFAULT_USER_AGENT
    accept: str = DEFAULT_ACCEPT


@dataclass(frozen=True)
class OutputSettings:
    dir: str = "outputs"
    formats: Tuple[str, ...] = OUTPUT_FORMATS
    version: str = "1.0"


@dataclass(frozen=True)
class Config:
    regions: Tuple[Region, ...]
    sources: Tuple[SourceSpec, ...]
    scraper: ScraperSettings = field(default_factory=ScraperSettings)
    output: OutputSettings = field(default_factory=OutputSettings)
    keywords: Tuple[str, ...] = ()
    statistics: bool = True
    summary: bool = True
    log_level: str = "INFO"
    log_file: Optional[str] = None

    @property
    def active_regions(self) -> Tuple[Region, ...]:
        return tuple(r for r in self.regions if r.active)


def _section(raw: dict, key: str) -> dict:
    val = raw.get(key) or {}
    if not isinstance(val, dict):
        raise ConfigError(f"'{key}' must be a mapping")
    return val


def _int(section: dict, *keys, default: int) -> int:
    for k in keys:
        if section.get(k) is not None:
            try:
                return int(section[k])
            except (TypeError, ValueError):
                raise ConfigError(f"'{k}' must be an integer, got {section[k]!r}")
    return default


def _bool(value, what: str) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.strip().lower() in ("true", "false"):
        return value.strip().lower() == "true"
    raise ConfigError(f"'{what}' must be true or false, got {value!r}")


def _region(item: dict) -> Region:
    code = str(item.get("code") or "").strip()
    if not code:
        raise ConfigError(f"region without code: {item!r}")
    return Region(
        code=code,
        name=str(item.get("name") or code),
        flag=str(item.get("flag") or ""),
        active=_bool(item.get("active", True), f"{code}.active"),
        api_url=item.get("api_url") or item.get("apiUrl") or None,
    )


def _source(item: dict) -> SourceSpec:
    name = str(item.get("name") or "").strip()
    url = str(item.get("url") or "").strip()
    if not name or not url:
        raise ConfigError(f"source needs name and url: {item!r}")
    code_case = str(item.get("code_case", "lower")).lower()
    if code_case not in CODE_CASES:
        raise ConfigError(f"source {name}: code_case must be one of {CODE_CASES}")
    fmt = str(item.get("format", "m3u")).lower()
    if fmt not in SOURCE_FORMATS:
        raise ConfigError(f"source {name}: format must be one of {SOURCE_FORMATS}")
    keywords = item.get("keywords")
    return SourceSpec(
        name=name,
        url=url,
        code_case=code_case,
        format=fmt,
        default_category=str(item.get("default_category") or "General"),
        keywords=tuple(str(k) for k in keywords) if keywords is not None else None,
    )


def build_config(raw: dict) -> Config:
    if not isinstance(raw, dict):
        raise ConfigError("config root must be a mapping")

    regions = tuple(_region(r) for r in (raw.get("regions") or []))

    sources_raw = raw.get("sources")
    if sources_raw:
        sources = tuple(_source(s) for s in sources_raw)
    else:
        sources = (SourceSpec(name="iptv-org", url=IPTV_ORG_URL),)

    sc = _section(raw, "scraper")
    scraper = ScraperSettings(
        retries=max(1, _int(sc, "retries", default=3)),
        timeout_ms=_int(sc, "timeout_ms", "timeout", default=15000),
        backoff_ms=_int(sc, "backoff_ms", default=2000),
        request_delay_ms=_int(sc, "request_delay_ms", "delay", default=500),
        user_agent=sc.get("user_agent") or sc.get("userAgent") or DEFAULT_USER_AGENT,
        accept=sc.get("accept") or DEFAULT_ACCEPT,
    )

    out = _section(raw, "output")
    formats = tuple(str(f).lower() for f in (out.get("formats") or OUTPUT_FORMATS))
    unknown = [f for f in formats if f not in OUTPUT_FORMATS]
    if unknown:
        raise ConfigError(f"unknown output formats: {unknown}")
    output = OutputSettings(
        dir=str(out.get("dir") or "outputs"),
        formats=formats,
        version=str(out.get("version") or "1.0"),
    )

    features = _section(raw, "features")
    log = _section(raw, "logging")
    return Config(
        regions=regions,
        sources=sources,
        scraper=scraper,
        output=output,
        keywords=tuple(str(k) for k in (_section(raw, "filter").get("keywords") or [])),
        statistics=_bool(features.get("statistics", True), "features.statistics"),
        summary=_bool(features.get("summary", True), "features.summary"),
        log_level=str(log.get("level") or "INFO").upper(),
        log_file=log.get("file") or None,
    )


def load_config(path: Path) -> Config:
    try:
        with Path(path).open("r", encoding="utf-8") as f:
            raw = yaml.safe_load(f) or {}
    except FileNotFoundError:
        raise ConfigError(f"config file not found: {path}")
    except yaml.YAMLError as e:
        raise ConfigError(f"config file {path} is not valid YAML: {e}")
    return build_config(raw)
