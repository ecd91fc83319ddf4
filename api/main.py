from __future__ import annotations

from typing import Any

from fastapi import FastAPI, HTTPException
from fastapi.responses import HTMLResponse, Response
from pydantic import BaseModel

from api import commands
from api.log import configure_logging
from processing.html import rewrite_html
from processing.text import extract_title, html_to_text

configure_logging()

app = FastAPI(title="textproxy", version="0.1.0")


def _http_error(e: commands.CommandError) -> HTTPException:
    return HTTPException(status_code=400 if e.invalid_input else 502, detail=e.message)


async def _fetch(url: str) -> commands.FetchResult:
    try:
        return await commands.fetch_url(url)
    except commands.CommandError as e:
        raise _http_error(e) from e


@app.get("/healthz")
def healthz() -> dict[str, str]:
    return {"status": "ok"}


class FetchOut(BaseModel):
    content: str
    url: str
    status: int


@app.get("/fetch", response_model=FetchOut)
async def fetch(url: str) -> FetchOut:
    res = await _fetch(url)
    return FetchOut(content=res.content, url=res.url, status=res.status)


class OpenRequest(BaseModel):
    url: str


@app.post("/open")
def open_url(body: OpenRequest) -> dict[str, bool]:
    try:
        commands.open_external_url(body.url)
    except commands.CommandError as e:
        raise HTTPException(status_code=400, detail=e.message) from e
    return {"opened": True}


_NO_BODY_STATUSES = frozenset({204, 304})


@app.get("/render", response_class=HTMLResponse)
async def render(url: str) -> Response:
    res = await _fetch(url)
    if res.status in _NO_BODY_STATUSES:
        return Response(status_code=res.status)
    # upstream status is kept so the shell can decide how to present errors
    return HTMLResponse(rewrite_html(res.content, res.url), status_code=res.status)


@app.get("/preview")
async def preview(url: str) -> dict[str, Any]:
    res = await _fetch(url)
    return {
        "url": res.url,
        "status": res.status,
        "title": extract_title(res.content),
        "text": html_to_text(res.content),
    }
