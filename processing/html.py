from __future__ import annotations

import re
from urllib.parse import urljoin

from bs4 import BeautifulSoup

_SOURCE_MAP = re.compile(
    r"/\*\s*#\s*sourceMappingURL=[^*]*\*/|//\s*#\s*sourceMappingURL=[^\r\n]*",
    re.IGNORECASE,
)

# attribute -> prefixes left untouched
_KEEP_PREFIXES: dict[str, tuple[str, ...]] = {
    "href": ("http", "//", "#", "javascript:"),
    "src": ("http", "//", "data:"),
    "action": ("http", "//"),
}


def _absolutize(soup: BeautifulSoup, base_url: str) -> None:
    for attr, keep in _KEEP_PREFIXES.items():
        for tag in soup.find_all(attrs={attr: True}):
            value = tag.get(attr)
            if not isinstance(value, str) or value.startswith(keep):
                continue
            try:
                tag[attr] = urljoin(base_url, value)
            except ValueError:
                continue


def _is_map_ref(value: object) -> bool:
    return isinstance(value, str) and ".map" in value


def rewrite_html(html: str, base_url: str) -> str:
    """Prepare a fetched page for display outside its origin.

    Relative links are resolved against ``base_url``, a ``<base>`` element is
    added, and framing/source-map leftovers that only produce errors when the
    page is shown embedded are removed.
    """
    soup = BeautifulSoup(html, "html.parser")

    _absolutize(soup, base_url)

    for tag in soup.find_all(attrs={"target": True}):
        del tag["target"]

    for meta in soup.find_all("meta"):
        if str(meta.get("http-equiv", "")).lower() == "x-frame-options":
            meta.decompose()

    for tag in soup.find_all("link"):
        if _is_map_ref(tag.get("href")):
            tag.decompose()
    for tag in soup.find_all("script"):
        if _is_map_ref(tag.get("src")):
            tag.decompose()
        elif tag.string:
            tag.string = _SOURCE_MAP.sub("", tag.string)
    for tag in soup.find_all("style"):
        if tag.string:
            tag.string = _SOURCE_MAP.sub("", tag.string)

    head = soup.find("head")
    if head is None:
        head = soup.new_tag("head")
        if soup.html is not None:
            soup.html.insert(0, head)
        else:
            soup.insert(0, head)
    base = soup.new_tag("base", href=base_url)
    head.insert(0, base)

    return str(soup)
