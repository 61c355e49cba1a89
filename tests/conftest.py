# ABOUTME: Shared test fixtures for the weather search test suite.
# ABOUTME: Provides Open-Meteo geocoding and daily forecast payloads used across tests.

import pytest


@pytest.fixture
def geocode_payload() -> dict:
    """Geocoding response with Oslo ranked before Berlin."""
    return {
        "results": [
            {
                "id": 1,
                "name": "Oslo",
                "admin1": "Oslo",
                "admin2": "Norway",
                "latitude": 59.91273,
                "longitude": 10.74609,
                "country": "Norway",
            },
            {
                "id": 2,
                "name": "Berlin",
                "admin1": "Berlin",
                "admin2": "Germany",
                "latitude": 52.52437,
                "longitude": 13.41053,
                "country": "Germany",
            },
        ]
    }


@pytest.fixture
def forecast_payload() -> dict:
    """Forecast response with two days, weather codes given as strings."""
    return {
        "latitude": 59.9,
        "longitude": 10.75,
        "timezone": "Europe/Oslo",
        "daily": {
            "time": ["2024-08-20", "2024-08-21"],
            "temperature_2m_max": [20, 22],
            "temperature_2m_min": [10, 12],
            "weathercode": ["0", "2"],
        },
    }
