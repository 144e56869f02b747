"""FastAPI application serving the live log viewer and its JSON feed."""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Sequence

from fastapi import FastAPI, Request
from fastapi.responses import HTMLResponse, JSONResponse, Response
from fastapi.templating import Jinja2Templates
from starlette.exceptions import HTTPException as StarletteHTTPException

from .buffer import LogBuffer, LogLevel
from .config import DEFAULT_POLL_INTERVALS_MS

TEMPLATES_DIR = Path(__file__).resolve().parent / "templates"


def parse_since(raw: Optional[str]) -> int:
    if raw is None:
        return 0
    try:
        return int(raw)
    except ValueError:
        return 0


def parse_level(raw: Optional[str]) -> Optional[LogLevel]:
    # Unknown names degrade to "all levels" rather than an empty feed.
    return LogLevel.parse(raw)


def create_app(
    buffer: LogBuffer,
    *,
    title: str = "Live Log",
    poll_intervals: Sequence[int] = DEFAULT_POLL_INTERVALS_MS,
    default_interval_ms: int = 1000,
) -> FastAPI:
    app = FastAPI(title=title, docs_url=None, redoc_url=None, openapi_url=None)
    templates = Jinja2Templates(directory=str(TEMPLATES_DIR))

    @app.exception_handler(StarletteHTTPException)
    async def _http_error(request: Request, exc: StarletteHTTPException) -> Response:
        return Response(status_code=exc.status_code)

    @app.get("/", response_class=HTMLResponse)
    async def index(request: Request):
        return templates.TemplateResponse(
            request,
            "index.html",
            {
                "title": title,
                "poll_intervals": list(poll_intervals),
                "default_interval_ms": default_interval_ms,
            },
        )

    # Plain def so Starlette runs it in its threadpool, off the event loop.
    @app.get("/logs")
    def logs(request: Request) -> JSONResponse:
        since = parse_since(request.query_params.get("since"))
        level = parse_level(request.query_params.get("level"))
        entries = buffer.query_since(since, level)
        return JSONResponse(
            [entry.as_dict() for entry in entries],
            headers={"Cache-Control": "no-store"},
        )

    return app
