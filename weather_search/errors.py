# ABOUTME: Exception types raised by the Open-Meteo clients.
# ABOUTME: Each carries the user-facing alert text shown by the search screen.


class FetchFailed(Exception):
    """A remote lookup failed; no distinction between network, status or parsing errors."""

    title = "Error"
    message = "Failed to load data"

    def __init__(self, detail: str | None = None):
        super().__init__(detail or self.message)


class GeocodeFetchFailed(FetchFailed):
    message = "Failed to load location data"


class LocationNotFound(GeocodeFetchFailed):
    """Geocoding succeeded but returned no candidates to take coordinates from."""

    def __init__(self, name: str):
        super().__init__(f"No location found for '{name}'")
        self.name = name


class WeatherFetchFailed(FetchFailed):
    message = "Failed to load weather data"
