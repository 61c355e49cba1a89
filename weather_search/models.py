# ABOUTME: Pydantic BaseModels for geocoding candidates, daily forecasts and screen state.
# ABOUTME: Defines the immutable types passed between the Open-Meteo clients and the search screen.

from datetime import date
from enum import Enum

from pydantic import BaseModel, ConfigDict


class LocationCandidate(BaseModel):
    """One location match returned by the geocoding API."""

    model_config = ConfigDict(frozen=True)

    id: int
    name: str
    latitude: float
    longitude: float
    admin1: str | None = None
    admin2: str | None = None
    country: str | None = None


class DailyForecast(BaseModel):
    """One day of the daily forecast, keyed by date."""

    model_config = ConfigDict(frozen=True)

    date: date
    temperature_2m_max: float
    temperature_2m_min: float
    weathercode: int


class WeatherPresentation(BaseModel):
    """Human-readable description and icon for a weather code."""

    model_config = ConfigDict(frozen=True)

    description: str
    icon_url: str | None = None


class ForecastRow(BaseModel):
    """A forecast day ready for display."""

    date: date
    description: str
    icon_url: str | None = None
    temperature: str


class DropdownItem(BaseModel):
    id: int
    label: str


class Notice(BaseModel):
    """Transient alert shown to the user after a failed fetch."""

    model_config = ConfigDict(frozen=True)

    title: str
    message: str


class ScreenStatus(str, Enum):
    IDLE = "idle"
    SEARCHING = "searching"
    DROPDOWN_OPEN = "dropdown_open"
    LOADING_FORECAST = "loading_forecast"
    FORECAST_LOADED = "forecast_loaded"
    ERROR = "error"


class ScreenState(BaseModel):
    """Immutable snapshot of the search screen.

    ``location_label`` is what the header shows; ``forecast_label`` is the location the
    current ``forecast`` belongs to. Both sequence counters grow on every request issued
    so late responses can be recognised and dropped.
    """

    model_config = ConfigDict(frozen=True)

    status: ScreenStatus = ScreenStatus.IDLE
    location_label: str = ""
    forecast_label: str | None = None
    search_text: str = ""
    candidates: tuple[LocationCandidate, ...] = ()
    forecast: tuple[DailyForecast, ...] = ()
    dropdown_visible: bool = False
    notice: Notice | None = None
    search_seq: int = 0
    forecast_seq: int = 0


class ScreenView(BaseModel):
    """What the screen shows for a given state."""

    status: ScreenStatus
    location_label: str
    search_text: str
    dropdown: list[DropdownItem] = []
    rows: list[ForecastRow] = []
    notice: Notice | None = None
