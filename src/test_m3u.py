from functions.m3u import generated_id, parse_m3u, render_m3u
from src.models import Channel


def test_parse_pairs_in_input_order(playlist_3):
    entries = parse_m3u(playlist_3, "us")

    assert [e["id"] for e in entries] == ["PlutoTVNews.us", "Movies.us", "LocalOne.us"]
    assert entries[0] == {
        "id": "PlutoTVNews.us",
        "name": "Pluto TV News",
        "logo": "https://img.test/news.png",
        "category": "News",
        "streamUrl": "https://service-stitcher.clusters.pluto.tv/news.m3u8",
        "region": "us",
    }
    assert entries[1]["logo"] == ""


def test_missing_header_is_soft_fail():
    body = '#EXTINF:-1 tvg-id="a",A\nhttps://x.test/a.m3u8\n'
    assert parse_m3u(body, "us") == []
    assert parse_m3u("<html>rate limited</html>", "us") == []
    assert parse_m3u("", "us") == []


def test_extinf_without_url_is_dropped():
    body = "\n".join([
        "#EXTM3U",
        '#EXTINF:-1 tvg-id="orphan",Orphan',
        '#EXTINF:-1 tvg-id="ok",Kept',
        "https://x.test/ok.m3u8",
        '#EXTINF:-1 tvg-id="tail",Tail',
    ])
    entries = parse_m3u(body, "us")
    assert [e["id"] for e in entries] == ["ok"]


def test_comment_and_blank_lines_between_extinf_and_url():
    body = "#EXTM3U\n#EXTINF:-1 tvg-id=\"a\",A\n\n#EXTVLCOPT:http-user-agent=foo\nhttps://x.test/a.m3u8\n"
    entries = parse_m3u(body, "us")
    assert len(entries) == 1
    assert entries[0]["streamUrl"] == "https://x.test/a.m3u8"


def test_name_precedence():
    body = "\n".join([
        "#EXTM3U",
        '#EXTINF:-1 tvg-name="Attr Name" tvg-id="a",Trailing Name',
        "https://x.test/a",
        '#EXTINF:-1 tvg-name="Attr Name" tvg-id="b",',
        "https://x.test/b",
        '#EXTINF:-1 tvg-id="c"',
        "https://x.test/c",
    ])
    names = [e["name"] for e in parse_m3u(body, "us")]
    assert names == ["Trailing Name", "Attr Name", "Unknown"]


def test_attributes_in_any_order_and_commas_in_values():
    body = '#EXTM3U\n#EXTINF:-1 group-title="News, Weather" tvg-id="w1",Weather, Live\nhttps://x.test/w\n'
    entry = parse_m3u(body, "us")[0]
    assert entry["category"] == "News, Weather"
    assert entry["name"] == "Weather, Live"


def test_missing_id_is_generated_and_unique():
    body = "#EXTM3U\n#EXTINF:-1,One\nhttps://x.test/same\n#EXTINF:-1,Two\nhttps://x.test/same\n"
    entries = parse_m3u(body, "us")
    ids = [e["id"] for e in entries]
    assert all(ids)
    assert len(set(ids)) == 2
    assert ids[0] == generated_id("us", 0, "https://x.test/same")
    # stable across runs
    assert parse_m3u(body, "us")[0]["id"] == ids[0]


def test_render_quotes_and_skips_missing_url():
    channels = [
        Channel(id="a", name='The "Best" TV', stream_url="https://x.test/a", region="us", category="News", logo="l.png"),
        Channel(id="b", name="No URL", stream_url="", region="us"),
        Channel(id="c", name="Other", stream_url="https://x.test/c", region="us"),
    ]
    text = render_m3u(channels)

    assert text.startswith("#EXTM3U\n#EXT-X-ALLOW-CACHE:NO\n\n")
    assert '#EXTINF:-1 tvg-id="a" tvg-name="The \'Best\' TV" tvg-logo="l.png" group-title="News",The \'Best\' TV\nhttps://x.test/a\n' in text
    assert "No URL" not in text
    assert "https://x.test/a\n\n#EXTINF" in text
    assert text.index('tvg-id="a"') < text.index('tvg-id="c"')


def test_render_quotes_in_every_attribute_round_trip():
    ch = Channel(
        id='id"1', name="Kids", stream_url="https://x.test/k", region="us",
        category='Kids "Jr"', logo='https://img.test/"k".png',
    )
    text = render_m3u([ch])

    assert 'tvg-id="id\'1"' in text
    assert 'group-title="Kids \'Jr\'"' in text
    entry = parse_m3u(text, "us")[0]
    assert entry["category"] == "Kids 'Jr'"
    assert entry["logo"] == "https://img.test/'k'.png"
    assert entry["name"] == "Kids"
