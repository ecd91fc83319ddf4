from __future__ import annotations

import re
from urllib.parse import urlsplit

_SCHEMES = ("http://", "https://")
_BAD_CHARS = re.compile(r"[\s\x00-\x1f\x7f]")
_HOST_FORBIDDEN = re.compile(r"[<>\"{}|\\^`\[\]]")


class UrlValidationError(ValueError):
    """Base class for URLs rejected before any request is made."""


class EmptyUrlError(UrlValidationError):
    def __init__(self) -> None:
        super().__init__("URL cannot be empty")


class UnsupportedSchemeError(UrlValidationError):
    def __init__(self) -> None:
        super().__init__("URL must start with http:// or https://")


class MalformedUrlError(UrlValidationError):
    def __init__(self, detail: str) -> None:
        self.detail = detail
        super().__init__(f"Invalid URL: {detail}")


def _check_host(url: str) -> None:
    try:
        parts = urlsplit(url)
        parts.port  # raises ValueError on a bad port
    except ValueError as e:
        raise MalformedUrlError(str(e)) from e

    netloc = parts.netloc
    if not netloc or not parts.hostname:
        raise MalformedUrlError("empty host")

    host_part = netloc.rsplit("@", 1)[-1]
    if host_part.startswith("["):
        if "]" not in host_part:
            raise MalformedUrlError("invalid IPv6 address")
        return
    host = host_part.split(":", 1)[0]
    if _HOST_FORBIDDEN.search(host):
        raise MalformedUrlError("invalid domain character")


def validate_url(url: str) -> None:
    """Raise a ``UrlValidationError`` unless ``url`` is a usable http(s) URL.

    The scheme check is a literal, case-sensitive prefix test.
    """
    if not url:
        raise EmptyUrlError()
    if not url.startswith(_SCHEMES):
        raise UnsupportedSchemeError()
    # path and query may contain spaces, the host may not
    authority = re.split(r"[/?#]", url.split("//", 1)[1], maxsplit=1)[0]
    if _BAD_CHARS.search(authority):
        raise MalformedUrlError("whitespace or control character in host")
    _check_host(url)


def normalize_url(text: str) -> str:
    """Turn address-bar input into a URL, defaulting to https."""
    url = text.strip()
    if not url:
        return ""
    if url.startswith(_SCHEMES):
        return url
    return f"https://{url}"
