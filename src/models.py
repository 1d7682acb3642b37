#!/usr/bin/env python3
# ==============================================================================
# [FILE] src/models.py
# [PROJECT] ChannelAtlas
# [ROLE] Channel, RegionResult, RunStatistics records
# [VERSION] v1.0
# [UPDATED] 2026-10-17
# ==============================================================================

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from src.config import Region

SUCCESS = "success"
NO_DATA = "no_data"
ERROR = "error"


@dataclass(frozen=True)
class Channel:
    id: str
    name: str
    stream_url: str
    region: str
    number: int = 0
    category: str = "General"
    logo: str = ""
    language: str = "en"
    summary: str = ""
    featured: bool = False

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "number": self.number,
            "category": self.category,
            "logo": self.logo,
            "streamUrl": self.stream_url,
            "region": self.region,
            "language": self.language,
            "summary": self.summary,
            "featured": self.featured,
        }


@dataclass
class RegionResult:
    region: Region
    channels: List[Channel] = field(default_factory=list)
    outcome: str = NO_DATA
    reason: str = ""
    source: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.outcome == SUCCESS and bool(self.channels)


@dataclass(frozen=True)
class RunStatistics:
    generated_at: str
    total_regions: int
    successful: int
    no_data: int
    errors: int
    total_channels: int
    regions: Dict[str, dict]

    def to_dict(self) -> dict:
        return {
            "generatedAt": self.generated_at,
            "totalRegions": self.total_regions,
            "successful": self.successful,
            "noData": self.no_data,
            "errors": self.errors,
            "totalChannels": self.total_channels,
            "regions": self.regions,
        }
