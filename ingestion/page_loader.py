from __future__ import annotations

import asyncio
from dataclasses import dataclass

import httpx
import structlog

from charset.resolver import decode_and_report
from ingestion.config import FetchConfig

_logger = structlog.get_logger(__name__)


class FetchError(Exception):
    """The request never produced a response (DNS, connect, TLS, timeout, redirects)."""


@dataclass(frozen=True)
class FetchResult:
    content: str
    url: str
    status: int


@dataclass(frozen=True)
class RawResponse:
    headers: dict[str, str]
    body: bytes
    status: int
    final_url: str


async def _get(
    url: str, config: FetchConfig, transport: httpx.AsyncBaseTransport | None
) -> RawResponse:
    async with httpx.AsyncClient(
        follow_redirects=True,
        max_redirects=config.max_redirects,
        timeout=config.timeout,
        headers=config.headers(),
        transport=transport,
    ) as client:
        resp = await client.get(url)
        return RawResponse(
            headers={k.lower(): v for k, v in resp.headers.items()},
            body=resp.content,
            status=resp.status_code,
            final_url=str(resp.url),
        )


async def fetch_url(
    url: str,
    *,
    config: FetchConfig | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
    logger=None,
) -> FetchResult:
    """
    Fetch a URL and return its body decoded to text.

    The whole body is buffered before decoding. Any HTTP status, 4xx/5xx
    included, is a result; only transport failures raise ``FetchError``.
    ``url`` is expected to have passed ``validate_url`` already.
    """
    cfg = config or FetchConfig.from_env()
    log = logger or _logger

    try:
        raw = await asyncio.wait_for(_get(url, cfg, transport), timeout=cfg.timeout)
    except asyncio.TimeoutError as e:
        log.warning("fetch_failed", url=url, error="timeout")
        raise FetchError(f"request timed out after {cfg.timeout:g}s") from e
    except (httpx.HTTPError, httpx.InvalidURL) as e:
        log.warning("fetch_failed", url=url, error=str(e))
        raise FetchError(str(e) or e.__class__.__name__) from e

    content_type = raw.headers.get("content-type", "")
    content_encoding = raw.headers.get("content-encoding", "")
    decoded = decode_and_report(raw.body, content_type, log=log, url=raw.final_url)
    log.info(
        "fetch_complete",
        url=url,
        final_url=raw.final_url,
        status=raw.status,
        content_type=content_type,
        content_encoding=content_encoding,
        charset=decoded.encoding.name,
        charset_source=decoded.source,
        decode_warning=decoded.replaced,
        size_bytes=len(raw.body),
    )
    return FetchResult(content=decoded.text, url=raw.final_url, status=raw.status)
