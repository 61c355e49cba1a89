# ABOUTME: ASGI web entry point rendering the weather search screen.
# ABOUTME: Starlette app with an HTML page and a small JSON API driving one WeatherSearchScreen.
# ABOUTME: Single-user: every client shares that one screen, its search text and its dropdown.

import contextlib
import html
import json
import logging

import httpx
from starlette.applications import Starlette
from starlette.requests import Request
from starlette.responses import HTMLResponse, JSONResponse
from starlette.routing import Route

from weather_search.config import Settings, configure_logging
from weather_search.deps import create_http_client
from weather_search.models import ScreenView
from weather_search.screen import WeatherSearchScreen

logger = logging.getLogger(__name__)

SEARCH_PLACEHOLDER = "Search location..."


def render_page(view: ScreenView) -> str:
    """Render the screen as a self-contained HTML page driven by query parameters."""
    esc = html.escape
    parts = [
        "<!doctype html>",
        '<html><head><meta charset="utf-8">',
        '<meta name="viewport" content="width=device-width, initial-scale=1">',
        "<title>Weather</title></head><body>",
        '<form method="get" action="/">',
        f'<input name="q" placeholder="{esc(SEARCH_PLACEHOLDER)}" value="{esc(view.search_text)}">',
        "</form>",
    ]
    if view.dropdown:
        parts.append('<ul class="dropdown">')
        for item in view.dropdown:
            parts.append(f'<li><a href="/?select={item.id}">{esc(item.label)}</a></li>')
        parts.append("</ul>")
    if view.notice:
        parts.append(
            f'<div class="notice" role="alert"><strong>{esc(view.notice.title)}</strong> '
            f'<span>{esc(view.notice.message)}</span> <a href="/?dismiss=1">OK</a></div>'
        )
    parts.append(f'<h1 class="location">{esc(view.location_label)}</h1>')
    parts.append('<ul class="forecast">')
    for row in view.rows:
        icon = f'<img src="{esc(row.icon_url)}" alt="{esc(row.description)}">' if row.icon_url else ""
        parts.append(
            f'<li><span class="date">{row.date.isoformat()}</span> '
            f'<span class="description">{esc(row.description)}</span> {icon} '
            f'<span class="temperature">{esc(row.temperature)}</span></li>'
        )
    parts.append("</ul></body></html>")
    return "\n".join(parts)


async def _mounted_screen(request: Request) -> WeatherSearchScreen:
    screen = request.app.state.screen
    await screen.mount()
    return screen


async def _read_json(request: Request) -> dict | None:
    try:
        data = await request.json()
    except json.JSONDecodeError:
        return None
    return data if isinstance(data, dict) else None


async def page(request: Request) -> HTMLResponse:
    screen = await _mounted_screen(request)
    params = request.query_params
    if "dismiss" in params:
        screen.dismiss_notice()
    if "select" in params:
        try:
            await screen.select_candidate_by_id(int(params["select"]))
        except (ValueError, LookupError):
            logger.info("Ignoring selection of unknown candidate %r", params["select"])
    if "q" in params and params["q"] != screen.state.search_text:
        await screen.change_text(params["q"])
    return HTMLResponse(render_page(screen.render()))


async def get_state(request: Request) -> JSONResponse:
    screen = await _mounted_screen(request)
    return JSONResponse(screen.render().model_dump(mode="json"))


async def post_search(request: Request) -> JSONResponse:
    data = await _read_json(request)
    if data is None or not isinstance(data.get("text"), str):
        return JSONResponse({"error": "Expected a JSON body with a 'text' string"}, status_code=400)
    screen = await _mounted_screen(request)
    await screen.change_text(data["text"])
    return JSONResponse(screen.render().model_dump(mode="json"))


async def post_select(request: Request) -> JSONResponse:
    data = await _read_json(request)
    candidate_id = data.get("id") if data is not None else None
    if not isinstance(candidate_id, int) or isinstance(candidate_id, bool):
        return JSONResponse({"error": "Expected a JSON body with an integer 'id'"}, status_code=400)
    screen = await _mounted_screen(request)
    try:
        await screen.select_candidate_by_id(candidate_id)
    except LookupError as e:
        return JSONResponse({"error": str(e)}, status_code=404)
    return JSONResponse(screen.render().model_dump(mode="json"))


async def post_dismiss(request: Request) -> JSONResponse:
    screen = await _mounted_screen(request)
    screen.dismiss_notice()
    return JSONResponse(screen.render().model_dump(mode="json"))


def create_app(settings: Settings | None = None, http_client: httpx.AsyncClient | None = None) -> Starlette:
    """Build the ASGI app; an injected http_client is used as-is and left open on shutdown.

    The app holds a single WeatherSearchScreen, so it serves one user at a time.
    """
    settings = settings or Settings.from_env()
    configure_logging(settings.log_level)

    @contextlib.asynccontextmanager
    async def lifespan(app: Starlette):
        client = http_client if http_client is not None else create_http_client(settings)
        app.state.screen = WeatherSearchScreen(client, settings)
        try:
            yield
        finally:
            if http_client is None:
                await client.aclose()

    return Starlette(
        routes=[
            Route("/", page),
            Route("/api/state", get_state),
            Route("/api/search", post_search, methods=["POST"]),
            Route("/api/select", post_select, methods=["POST"]),
            Route("/api/dismiss", post_dismiss, methods=["POST"]),
        ],
        lifespan=lifespan,
    )


app = create_app()
