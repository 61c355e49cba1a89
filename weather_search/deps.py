# ABOUTME: Factory for the shared httpx.AsyncClient used by the Open-Meteo clients.
# ABOUTME: Requests are neither retried nor cancelled; the timeout comes from Settings.

import httpx

from weather_search.config import Settings


def create_http_client(settings: Settings | None = None) -> httpx.AsyncClient:
    """Create an httpx client with the configured timeout (None waits indefinitely)."""
    settings = settings or Settings()
    return httpx.AsyncClient(timeout=httpx.Timeout(settings.http_timeout))
