from __future__ import annotations

import os
from dataclasses import dataclass

DEFAULT_TIMEOUT = 30.0
DEFAULT_MAX_REDIRECTS = 10
DEFAULT_UA = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/124.0.0.0 Safari/537.36"
)
DEFAULT_ACCEPT_LANGUAGE = "ja,en-US;q=0.9,en;q=0.8"


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        value = float(raw)
    except ValueError:
        return default
    return value if value > 0 else default


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        value = int(raw)
    except ValueError:
        return default
    return value if value >= 0 else default


@dataclass(frozen=True)
class FetchConfig:
    timeout: float = DEFAULT_TIMEOUT
    max_redirects: int = DEFAULT_MAX_REDIRECTS
    user_agent: str = DEFAULT_UA
    accept_language: str = DEFAULT_ACCEPT_LANGUAGE

    @classmethod
    def from_env(cls) -> FetchConfig:
        return cls(
            timeout=_env_float("TEXTPROXY_TIMEOUT", DEFAULT_TIMEOUT),
            max_redirects=_env_int("TEXTPROXY_MAX_REDIRECTS", DEFAULT_MAX_REDIRECTS),
            user_agent=os.getenv("TEXTPROXY_USER_AGENT") or DEFAULT_UA,
            accept_language=os.getenv("TEXTPROXY_ACCEPT_LANGUAGE") or DEFAULT_ACCEPT_LANGUAGE,
        )

    def headers(self) -> dict[str, str]:
        return {
            "User-Agent": self.user_agent,
            "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
            "Accept-Language": self.accept_language,
            "Connection": "keep-alive",
            "Upgrade-Insecure-Requests": "1",
        }
