import pytest

from src.config import build_config


class FakeResponse:
    def __init__(self, status_code=200, text=""):
        self.status_code = status_code
        self.text = text


class FakeSession:
    """Replays queued responses (or exceptions) per URL and records every call."""

    def __init__(self, routes=None):
        self.routes = {url: list(items) for url, items in (routes or {}).items()}
        self.calls = []

    def get(self, url, headers=None, timeout=None):
        self.calls.append({"url": url, "headers": headers, "timeout": timeout})
        queue = self.routes.get(url)
        if not queue:
            return FakeResponse(404, "Not Found")
        item = queue.pop(0) if len(queue) > 1 else queue[0]
        if isinstance(item, Exception):
            raise item
        return item

    def urls(self):
        return [c["url"] for c in self.calls]


class SleepRecorder:
    def __init__(self):
        self.delays = []

    def __call__(self, seconds):
        self.delays.append(seconds)


@pytest.fixture
def sleeps():
    return SleepRecorder()


@pytest.fixture
def make_config(tmp_path):
    def make(**overrides):
        raw = {
            "regions": [{"code": "us", "name": "United States", "flag": "US", "active": True}],
            "sources": [{
                "name": "iptv-org",
                "url": "https://example.test/streams/{code}.m3u",
                "code_case": "lower",
                "format": "m3u",
            }],
            "filter": {"keywords": ["pluto"]},
            "output": {"dir": str(tmp_path / "outputs")},
        }
        raw.update(overrides)
        return build_config(raw)
    return make


PLAYLIST_3 = """#EXTM3U
#EXTINF:-1 tvg-id="PlutoTVNews.us" tvg-logo="https://img.test/news.png" group-title="News",Pluto TV News
https://service-stitcher.clusters.pluto.tv/news.m3u8
#EXTINF:-1 tvg-id="Movies.us" group-title="Movies",Pluto TV Movies
https://stream.test/movies.m3u8
#EXTINF:-1 tvg-id="LocalOne.us" group-title="Local",Local One
https://stream.test/local.m3u8
"""


@pytest.fixture
def playlist_3():
    return PLAYLIST_3
