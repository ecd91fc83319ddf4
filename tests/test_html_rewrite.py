from __future__ import annotations

from bs4 import BeautifulSoup

from processing.html import rewrite_html

BASE = "https://example.com/docs/index.html"


def _soup(html: str) -> BeautifulSoup:
    return BeautifulSoup(rewrite_html(html, BASE), "html.parser")


def test_relative_urls_are_resolved():
    soup = _soup(
        "<html><head></head><body>"
        '<a href="guide.html">g</a>'
        '<a href="#top">t</a>'
        '<a href="javascript:void(0)">j</a>'
        '<a href="//cdn.example.net/x">c</a>'
        '<img src="../img/logo.png">'
        '<img src="data:image/png;base64,AAAA">'
        '<form action="/search"></form>'
        "</body></html>"
    )
    hrefs = [a["href"] for a in soup.find_all("a")]
    assert hrefs == [
        "https://example.com/docs/guide.html",
        "#top",
        "javascript:void(0)",
        "//cdn.example.net/x",
    ]
    srcs = [img["src"] for img in soup.find_all("img")]
    assert srcs == ["https://example.com/img/logo.png", "data:image/png;base64,AAAA"]
    assert soup.form["action"] == "https://example.com/search"


def test_base_is_first_in_head():
    soup = _soup("<html><head><title>x</title></head><body></body></html>")
    first = soup.head.find(True)
    assert first.name == "base"
    assert first["href"] == BASE


def test_head_is_created_when_missing():
    soup = _soup("<p>fragment</p>")
    assert soup.find("head").find("base")["href"] == BASE
    assert soup.p.get_text() == "fragment"


def test_targets_and_frame_options_are_removed():
    soup = _soup(
        '<html><head><meta http-equiv="X-Frame-Options" content="DENY"></head>'
        '<body><a href="https://a.test" target="_blank">a</a></body></html>'
    )
    assert soup.find("meta") is None
    assert not soup.a.has_attr("target")


def test_source_maps_are_dropped():
    soup = _soup(
        "<html><head>"
        '<link rel="stylesheet" href="https://a.test/site.css.map">'
        '<script src="https://a.test/app.js.map"></script>'
        "<style>body{}\n/*# sourceMappingURL=site.css.map */</style>"
        "<script>var a = 1;\n//# sourceMappingURL=app.js.map</script>"
        "</head><body></body></html>"
    )
    assert soup.find("link") is None
    scripts = soup.find_all("script")
    assert len(scripts) == 1
    assert "sourceMappingURL" not in scripts[0].string
    assert "var a = 1;" in scripts[0].string
    assert "sourceMappingURL" not in soup.style.string
