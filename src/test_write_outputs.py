import json
from pathlib import Path

from src.build_summary import render_summary
from src.config import Region
from src.models import SUCCESS, Channel, RegionResult
from src.run_pipeline import compute_statistics
from src.write_outputs import write_region_outputs


def _result(cfg, channels):
    return RegionResult(region=cfg.regions[0], channels=channels, outcome=SUCCESS, reason="ok", source="iptv-org")


def _channels():
    return [
        Channel(id="a", name="Pluto TV News", stream_url="https://x.test/a", region="us", category="News"),
        Channel(id="b", name="Pluto TV Movies", stream_url="https://x.test/b", region="us", category="Movies"),
    ]


def test_writes_both_formats(make_config):
    cfg = make_config()
    paths = write_region_outputs(_result(cfg, _channels()), cfg, "2026-10-17T00:00:00Z")

    assert [p.name for p in paths] == ["us.m3u", "us.json"]

    doc = json.loads(paths[1].read_text(encoding="utf-8"))
    assert doc["region"] == {"code": "us", "name": "United States", "flag": "US"}
    assert doc["metadata"] == {
        "generatedAt": "2026-10-17T00:00:00Z",
        "totalChannels": 2,
        "version": "1.0",
        "source": "iptv-org",
    }
    assert doc["channels"][0]["streamUrl"] == "https://x.test/a"
    assert list(doc["channels"][0]) == [
        "id", "name", "number", "category", "logo", "streamUrl", "region", "language", "summary", "featured",
    ]

    m3u = paths[0].read_text(encoding="utf-8")
    assert m3u.count("#EXTINF") == 2


def test_only_configured_formats(make_config):
    cfg = make_config(output={"dir": make_config().output.dir, "formats": ["json"]})
    paths = write_region_outputs(_result(cfg, _channels()), cfg, "t")
    assert [p.name for p in paths] == ["us.json"]


def test_write_failure_is_isolated(make_config, tmp_path):
    blocker = tmp_path / "blocked"
    blocker.write_text("not a directory", encoding="utf-8")
    cfg = make_config(output={"dir": str(blocker / "out")})

    assert write_region_outputs(_result(cfg, _channels()), cfg, "t") == []


def test_statistics_and_summary(make_config):
    cfg = make_config()
    ok = _result(cfg, _channels())
    empty = RegionResult(region=Region(code="ca", name="Canada", flag="CA"), reason="not found")

    stats = compute_statistics([ok, empty], "t")

    assert stats.total_regions == 2
    assert stats.successful == 1
    assert stats.no_data == 1
    assert stats.total_channels == 2
    assert stats.regions["us"]["categories"] == 2
    assert stats.regions["ca"]["channels"] == 0

    text = render_summary(stats, cfg)
    assert "| US United States | 2 | 2 | [m3u](us.m3u) [json](us.json) |" in text
    assert "| CA Canada | 0 | 0 | - |" in text


def test_failed_write_keeps_previous_artifact(make_config, monkeypatch):
    cfg = make_config()
    first = write_region_outputs(_result(cfg, _channels()), cfg, "t1")
    before = {p.name: p.read_bytes() for p in first}

    def disk_full(self, target):
        raise OSError(28, "No space left on device")

    monkeypatch.setattr(Path, "replace", disk_full)
    assert write_region_outputs(_result(cfg, _channels()[:1]), cfg, "t2") == []

    out = Path(cfg.output.dir)
    assert {p.name: p.read_bytes() for p in first} == before
    assert sorted(p.name for p in out.iterdir()) == ["us.json", "us.m3u"]
