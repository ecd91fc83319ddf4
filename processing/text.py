from __future__ import annotations

import re

from bs4 import BeautifulSoup

_WS = re.compile(r"\s+")


def _norm(s: str) -> str:
    return _WS.sub(" ", s).strip()


def html_to_text(html: str) -> str:
    soup = BeautifulSoup(html, "html.parser")
    for tag in soup(["script", "style", "noscript"]):
        tag.decompose()
    return _norm(soup.get_text(" "))


def extract_title(html: str) -> str | None:
    """Best title for a page: <title>, then og:title, then the first <h1>."""
    soup = BeautifulSoup(html, "html.parser")

    if soup.title and soup.title.string:
        t = _norm(str(soup.title.string))
        if t:
            return t

    meta = soup.find("meta", attrs={"property": "og:title"})
    if meta and meta.get("content"):
        t = _norm(str(meta["content"]))
        if t:
            return t

    h1 = soup.find("h1")
    if h1:
        t = _norm(h1.get_text(" "))
        if t:
            return t
    return None
