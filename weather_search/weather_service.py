# ABOUTME: Service layer for Open-Meteo geocoding and daily forecast calls.
# ABOUTME: Parses responses into models and turns every failure into a FetchFailed subclass.

from datetime import date

import httpx

from weather_search.config import Settings
from weather_search.errors import GeocodeFetchFailed, LocationNotFound, WeatherFetchFailed
from weather_search.models import DailyForecast, LocationCandidate

DAILY_PARAMS = "temperature_2m_max,temperature_2m_min,weathercode"
DAILY_COLUMNS = ("temperature_2m_max", "temperature_2m_min", "weathercode")


async def search_locations(
    client: httpx.AsyncClient, query: str, settings: Settings | None = None
) -> list[LocationCandidate]:
    """Look up location candidates for free text, in the service's relevance order."""
    settings = settings or Settings()
    try:
        resp = await client.get(
            settings.geocoding_url,
            params={"name": query, "count": settings.geocoding_count, "language": settings.geocoding_language},
        )
        resp.raise_for_status()
        data = resp.json()
        results = data.get("results") or []
        return [LocationCandidate.model_validate(r) for r in results]
    except (httpx.HTTPError, ValueError, TypeError, AttributeError) as e:
        # pydantic ValidationError and JSON decode errors are both ValueErrors
        raise GeocodeFetchFailed(f"Geocoding failed for '{query}': {e}") from e


async def resolve_location(
    client: httpx.AsyncClient, name: str, settings: Settings | None = None
) -> LocationCandidate:
    """Geocode a place name and return the best match."""
    candidates = await search_locations(client, name, settings)
    if not candidates:
        raise LocationNotFound(name)
    return candidates[0]


async def get_daily_forecast(
    client: httpx.AsyncClient,
    latitude: float,
    longitude: float,
    settings: Settings | None = None,
) -> list[DailyForecast]:
    """Fetch the service's default daily forecast window for a coordinate pair."""
    settings = settings or Settings()
    try:
        resp = await client.get(
            settings.forecast_url,
            params={
                "latitude": latitude,
                "longitude": longitude,
                "daily": DAILY_PARAMS,
                "timezone": settings.timezone,
            },
        )
        resp.raise_for_status()
        data = resp.json()
    except (httpx.HTTPError, ValueError) as e:
        raise WeatherFetchFailed(f"Forecast request failed: {e}") from e

    daily = data.get("daily") if isinstance(data, dict) else None
    if not isinstance(daily, dict):
        raise WeatherFetchFailed("Forecast response has no daily data")
    try:
        return parse_daily_data(daily)
    except (KeyError, TypeError, ValueError) as e:
        raise WeatherFetchFailed(f"Malformed daily forecast: {e}") from e


def parse_daily_data(raw: dict) -> list[DailyForecast]:
    """Zip Open-Meteo's parallel daily arrays into DailyForecast rows.

    Every column must be present and as long as ``time``; anything less is rejected
    rather than returned as a partial forecast.
    """
    dates = raw["time"]
    columns = {key: raw[key] for key in DAILY_COLUMNS}
    for key, col in columns.items():
        if len(col) != len(dates):
            raise ValueError(f"column '{key}' has {len(col)} values for {len(dates)} days")

    return [
        DailyForecast(
            date=date.fromisoformat(d),
            temperature_2m_max=columns["temperature_2m_max"][i],
            temperature_2m_min=columns["temperature_2m_min"][i],
            weathercode=columns["weathercode"][i],
        )
        for i, d in enumerate(dates)
    ]
