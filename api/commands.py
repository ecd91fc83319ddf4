"""Operations the host application invokes.

Every failure is collapsed into a ``CommandError`` carrying a single
human-readable message; callers never see the underlying exception types.
"""

from __future__ import annotations

import webbrowser
from collections.abc import Callable

import httpx
import structlog

from ingestion import page_loader
from ingestion.config import FetchConfig
from ingestion.page_loader import FetchError, FetchResult
from ingestion.validation import UrlValidationError, validate_url

logger = structlog.get_logger(__name__)


class CommandError(Exception):
    def __init__(self, message: str, *, invalid_input: bool = False) -> None:
        super().__init__(message)
        self.message = message
        self.invalid_input = invalid_input


class ExternalOpenError(Exception):
    pass


async def fetch_url(
    url: str,
    *,
    config: FetchConfig | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> FetchResult:
    try:
        validate_url(url)
    except UrlValidationError as e:
        raise CommandError(str(e), invalid_input=True) from e
    try:
        return await page_loader.fetch_url(url, config=config, transport=transport)
    except FetchError as e:
        raise CommandError(str(e)) from e


def _open(url: str, opener: Callable[[str], bool]) -> None:
    try:
        opened = opener(url)
    except (webbrowser.Error, OSError) as e:
        raise ExternalOpenError(str(e)) from e
    if opened is False:
        raise ExternalOpenError("no application available to open the URL")


def open_external_url(url: str, *, opener: Callable[[str], bool] | None = None) -> None:
    try:
        validate_url(url)
    except UrlValidationError as e:
        raise CommandError(str(e), invalid_input=True) from e
    try:
        _open(url, opener or webbrowser.open)
    except ExternalOpenError as e:
        logger.warning("external_open_failed", url=url, error=str(e))
        raise CommandError(f"Failed to open URL: {e}") from e
