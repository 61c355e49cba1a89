# ABOUTME: Tests for the Starlette web surface of the weather search screen.
# ABOUTME: Drives the HTML page and JSON API through TestClient with a mocked Open-Meteo client.

from unittest.mock import AsyncMock

import httpx
import pytest
from starlette.testclient import TestClient

from weather_search.config import GEOCODING_URL, Settings
from weather_search.models import ScreenStatus, ScreenView
from weather_search.web import create_app, render_page


def _routing_client(geocode_payload: dict, forecast_payload: dict | None) -> AsyncMock:
    """Mock client; a None forecast payload makes the forecast endpoint fail."""
    mock = AsyncMock(spec=httpx.AsyncClient)

    async def get(url, params=None, **kwargs):
        if url == GEOCODING_URL:
            return httpx.Response(200, json=geocode_payload, request=httpx.Request("GET", url))
        if forecast_payload is None:
            raise httpx.ConnectError("down")
        return httpx.Response(200, json=forecast_payload, request=httpx.Request("GET", url))

    mock.get.side_effect = get
    return mock


@pytest.fixture
def web_client(geocode_payload, forecast_payload):
    app = create_app(Settings(), http_client=_routing_client(geocode_payload, forecast_payload))
    with TestClient(app) as client:
        yield client


class TestPage:
    def test_first_render_loads_default_location(self, web_client):
        """The first page view mounts the screen and shows the default forecast.

        Implementation: GET / with mocked geocoding and a two-day forecast.
        Passing implies: The search field, 'Oslo' label and rounded temperatures are rendered.
        """
        resp = web_client.get("/")

        assert resp.status_code == 200
        assert 'placeholder="Search location..."' in resp.text
        assert '<h1 class="location">Oslo</h1>' in resp.text
        assert "15°C" in resp.text
        assert "Sunny" in resp.text
        assert 'src="https://openweathermap.org/img/wn/01d@2x.png"' in resp.text

    def test_search_and_select_via_query_params(self, web_client):
        """Query params drive the search dropdown and the selection.

        Implementation: GET /?q=Berlin then follows the select link for id 2.
        Passing implies: The dropdown row reads 'Berlin,Germany' and selection relabels the page.
        """
        resp = web_client.get("/", params={"q": "Berlin"})
        assert '<a href="/?select=2">Berlin,Germany</a>' in resp.text

        resp = web_client.get("/", params={"select": "2"})
        assert '<h1 class="location">Berlin</h1>' in resp.text
        assert 'class="dropdown"' not in resp.text

    def test_short_query_shows_no_dropdown(self, web_client):
        """A two-character query renders without a dropdown.

        Implementation: GET /?q=Os.
        Passing implies: Short queries never show candidates.
        """
        resp = web_client.get("/", params={"q": "Os"})
        assert 'class="dropdown"' not in resp.text


class TestApi:
    def test_state_after_mount(self, web_client):
        """GET /api/state returns the rendered screen as JSON.

        Implementation: Reads the state once after the implicit mount.
        Passing implies: Rows carry date, description, icon and temperature.
        """
        data = web_client.get("/api/state").json()

        assert data["status"] == "forecast_loaded"
        assert data["location_label"] == "Oslo"
        assert data["rows"][0] == {
            "date": "2024-08-20",
            "description": "Sunny",
            "icon_url": "https://openweathermap.org/img/wn/01d@2x.png",
            "temperature": "15°C",
        }

    def test_search_select_flow(self, web_client):
        """POST /api/search then /api/select updates the screen.

        Implementation: Searches 'Berlin' and selects id 2.
        Passing implies: The JSON API exposes the same flow as the page.
        """
        data = web_client.post("/api/search", json={"text": "Berlin"}).json()
        assert [item["label"] for item in data["dropdown"]] == ["Oslo,Norway", "Berlin,Germany"]

        data = web_client.post("/api/select", json={"id": 2}).json()
        assert data["location_label"] == "Berlin"
        assert data["dropdown"] == []

    def test_select_unknown_candidate_is_404(self, web_client):
        """Selecting an id that is not in the dropdown returns 404.

        Implementation: POST /api/select without a prior search.
        Passing implies: Invalid selections are reported, not silently ignored.
        """
        resp = web_client.post("/api/select", json={"id": 42})
        assert resp.status_code == 404

    def test_boolean_id_is_400(self, web_client):
        """A JSON boolean is not accepted as a candidate id.

        Implementation: Searches 'Berlin' so id 1 is in the dropdown, then posts {"id": true}.
        Passing implies: true is rejected instead of selecting candidate 1.
        """
        web_client.post("/api/search", json={"text": "Berlin"})
        resp = web_client.post("/api/select", json={"id": True})

        assert resp.status_code == 400
        data = web_client.get("/api/state").json()
        assert data["location_label"] == "Oslo"
        assert len(data["dropdown"]) == 2

    def test_bad_body_is_400(self, web_client):
        """Malformed JSON bodies are rejected.

        Implementation: Posts invalid JSON and a wrong field type.
        Passing implies: Input validation happens before touching the screen.
        """
        assert web_client.post("/api/search", content=b"not json").status_code == 400
        assert web_client.post("/api/search", json={"text": 3}).status_code == 400


class TestFailures:
    def test_weather_failure_shows_alert(self, geocode_payload):
        """A failing forecast endpoint renders an alert instead of an error page.

        Implementation: Forecast endpoint raises ConnectError on mount; then the notice is dismissed.
        Passing implies: Weather failures surface as 'Failed to load weather data' and the page still renders.
        """
        app = create_app(Settings(), http_client=_routing_client(geocode_payload, None))
        with TestClient(app) as client:
            resp = client.get("/")
            assert resp.status_code == 200
            assert 'role="alert"' in resp.text
            assert "<strong>Error</strong>" in resp.text
            assert "Failed to load weather data" in resp.text

            data = client.post("/api/dismiss").json()
            assert data["notice"] is None
            assert data["status"] == "idle"


def test_render_page_escapes_text():
    """render_page escapes user-provided text.

    Implementation: Renders a view whose search text contains markup.
    Passing implies: Search text cannot inject HTML into the page.
    """
    view = ScreenView(status=ScreenStatus.IDLE, location_label="Oslo", search_text='<b>"x"</b>')
    page = render_page(view)
    assert "<b>" not in page
    assert "&lt;b&gt;" in page
