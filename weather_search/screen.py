# ABOUTME: Search/display orchestrator: screen state reducer, async controller and row rendering.
# ABOUTME: Drives geocoding then forecast lookups and drops responses superseded by newer requests.

import logging
import math

import httpx
from pydantic import BaseModel, ConfigDict

from weather_search.config import Settings
from weather_search.errors import FetchFailed, GeocodeFetchFailed, WeatherFetchFailed
from weather_search.models import (
    DailyForecast,
    DropdownItem,
    ForecastRow,
    LocationCandidate,
    Notice,
    ScreenState,
    ScreenStatus,
    ScreenView,
)
from weather_search.weather_codes import describe_weather_code
from weather_search.weather_service import get_daily_forecast, resolve_location, search_locations

logger = logging.getLogger(__name__)

TEMPERATURE_UNIT = "°C"

LOCATION_NOTICE = Notice(title=GeocodeFetchFailed.title, message=GeocodeFetchFailed.message)
WEATHER_NOTICE = Notice(title=WeatherFetchFailed.title, message=WeatherFetchFailed.message)


class Event(BaseModel):
    model_config = ConfigDict(frozen=True)


class TextChanged(Event):
    text: str


class SearchSucceeded(Event):
    seq: int
    candidates: tuple[LocationCandidate, ...]


class SearchFailed(Event):
    seq: int


class CandidateSelected(Event):
    candidate: LocationCandidate


class ForecastRequested(Event):
    label: str


class ForecastSucceeded(Event):
    seq: int
    label: str
    days: tuple[DailyForecast, ...]


class ForecastFailed(Event):
    seq: int


class NoticeDismissed(Event):
    pass


def transition(state: ScreenState, event: Event, min_query_length: int | None = None) -> ScreenState:
    """Apply one event to the screen state and return the next state.

    Result events whose sequence number is no longer the latest issued return ``state``
    itself, unchanged. ``min_query_length`` defaults to ``Settings().min_query_length``.
    """
    if min_query_length is None:
        min_query_length = Settings().min_query_length
    if isinstance(event, TextChanged):
        update = {
            "search_text": event.text,
            "search_seq": state.search_seq + 1,
            "candidates": (),
            "dropdown_visible": False,
        }
        if len(event.text) >= min_query_length:
            update["status"] = ScreenStatus.SEARCHING
        elif state.status in (ScreenStatus.SEARCHING, ScreenStatus.DROPDOWN_OPEN):
            update["status"] = ScreenStatus.IDLE
        return state.model_copy(update=update)

    if isinstance(event, SearchSucceeded):
        if event.seq != state.search_seq:
            return state
        return state.model_copy(
            update={
                "candidates": tuple(event.candidates),
                "dropdown_visible": True,
                "status": ScreenStatus.DROPDOWN_OPEN,
            }
        )

    if isinstance(event, SearchFailed):
        if event.seq != state.search_seq:
            return state
        update = {"notice": LOCATION_NOTICE, "candidates": (), "dropdown_visible": False}
        if state.status == ScreenStatus.SEARCHING:
            update["status"] = _settled_status(state)
        return state.model_copy(update=update)

    if isinstance(event, CandidateSelected):
        return state.model_copy(
            update={
                "location_label": event.candidate.name,
                "search_text": event.candidate.name,
                "candidates": (),
                "dropdown_visible": False,
                "search_seq": state.search_seq + 1,
                "forecast_seq": state.forecast_seq + 1,
                "status": ScreenStatus.LOADING_FORECAST,
            }
        )

    if isinstance(event, ForecastRequested):
        return state.model_copy(
            update={
                "location_label": event.label,
                "forecast_seq": state.forecast_seq + 1,
                "status": ScreenStatus.LOADING_FORECAST,
            }
        )

    if isinstance(event, ForecastSucceeded):
        if event.seq != state.forecast_seq:
            return state
        update = {
            "forecast": tuple(event.days),
            "forecast_label": event.label,
            "location_label": event.label,
        }
        if state.status == ScreenStatus.LOADING_FORECAST:
            update["status"] = ScreenStatus.FORECAST_LOADED
        return state.model_copy(update=update)

    if isinstance(event, ForecastFailed):
        if event.seq != state.forecast_seq:
            return state
        update = {"notice": WEATHER_NOTICE}
        if state.forecast_label is not None:
            update["location_label"] = state.forecast_label
        if state.status == ScreenStatus.LOADING_FORECAST:
            update["status"] = ScreenStatus.ERROR
        return state.model_copy(update=update)

    if isinstance(event, NoticeDismissed):
        update = {"notice": None}
        if state.status == ScreenStatus.ERROR:
            update["status"] = _settled_status(state)
        return state.model_copy(update=update)

    raise TypeError(f"Unknown screen event: {event!r}")


def _settled_status(state: ScreenState) -> ScreenStatus:
    return ScreenStatus.FORECAST_LOADED if state.forecast else ScreenStatus.IDLE


def format_candidate(candidate: LocationCandidate) -> str:
    """Dropdown text for a candidate: its admin regions, e.g. ``Berlin,Germany``."""
    regions = [r for r in (candidate.admin1, candidate.admin2) if r]
    return ",".join(regions) if regions else candidate.name


def average_temperature(temperature_max: float, temperature_min: float) -> int:
    """Mean of the daily max and min, rounded half-up."""
    return math.floor((temperature_max + temperature_min) / 2 + 0.5)


def format_temperature(value: int) -> str:
    return f"{value}{TEMPERATURE_UNIT}"


def secure_icon_url(url: str | None) -> str | None:
    if url and url.startswith("http://"):
        return "https://" + url[len("http://") :]
    return url


def render_forecast(days) -> list[ForecastRow]:
    rows = []
    for day in days:
        presentation = describe_weather_code(day.weathercode)
        rows.append(
            ForecastRow(
                date=day.date,
                description=presentation.description,
                icon_url=secure_icon_url(presentation.icon_url),
                temperature=format_temperature(average_temperature(day.temperature_2m_max, day.temperature_2m_min)),
            )
        )
    return rows


def render(state: ScreenState) -> ScreenView:
    """Project a state onto what the user sees."""
    dropdown = []
    if state.dropdown_visible:
        dropdown = [DropdownItem(id=c.id, label=format_candidate(c)) for c in state.candidates]
    return ScreenView(
        status=state.status,
        location_label=state.location_label,
        search_text=state.search_text,
        dropdown=dropdown,
        rows=render_forecast(state.forecast),
        notice=state.notice,
    )


class WeatherSearchScreen:
    """Owns the screen state and runs the lookups triggered by user input.

    All state changes go through :meth:`dispatch` on the event loop. Requests are never
    cancelled; a response only applies if no newer request of the same kind was issued
    after it.
    """

    def __init__(self, http_client: httpx.AsyncClient, settings: Settings | None = None):
        self.http_client = http_client
        self.settings = settings or Settings()
        self.mounted = False
        self._state = ScreenState(location_label=self.settings.default_location)

    @property
    def state(self) -> ScreenState:
        return self._state

    def dispatch(self, event: Event) -> ScreenState:
        previous = self._state
        self._state = transition(previous, event, self.settings.min_query_length)
        if self._state is previous and getattr(event, "seq", None) is not None:
            logger.debug("Dropped stale %s (seq %s)", type(event).__name__, event.seq)
        else:
            logger.debug("%s: %s -> %s", type(event).__name__, previous.status.value, self._state.status.value)
        return self._state

    def render(self) -> ScreenView:
        return render(self._state)

    async def mount(self) -> None:
        """Load the forecast for the default location, once."""
        if self.mounted:
            return
        self.mounted = True
        await self.load_location(self.settings.default_location)

    async def load_location(self, name: str) -> None:
        """Geocode a place name, then load the forecast for its best match."""
        seq = self.dispatch(ForecastRequested(label=name)).forecast_seq
        try:
            location = await resolve_location(self.http_client, name, self.settings)
            days = await get_daily_forecast(self.http_client, location.latitude, location.longitude, self.settings)
        except FetchFailed as e:
            logger.warning("Loading forecast for '%s' failed: %s", name, e)
            self.dispatch(ForecastFailed(seq=seq))
            return
        self.dispatch(ForecastSucceeded(seq=seq, label=name, days=tuple(days)))

    async def change_text(self, text: str) -> None:
        """Record new search text and look up candidates once it is long enough."""
        seq = self.dispatch(TextChanged(text=text)).search_seq
        if len(text) < self.settings.min_query_length:
            return
        try:
            candidates = await search_locations(self.http_client, text, self.settings)
        except FetchFailed as e:
            logger.warning("Location search for '%s' failed: %s", text, e)
            self.dispatch(SearchFailed(seq=seq))
            return
        self.dispatch(SearchSucceeded(seq=seq, candidates=tuple(candidates)))

    async def select_candidate(self, candidate: LocationCandidate) -> None:
        """Show the candidate's name immediately and load its forecast."""
        seq = self.dispatch(CandidateSelected(candidate=candidate)).forecast_seq
        try:
            days = await get_daily_forecast(
                self.http_client, candidate.latitude, candidate.longitude, self.settings
            )
        except FetchFailed as e:
            logger.warning("Loading forecast for '%s' failed: %s", candidate.name, e)
            self.dispatch(ForecastFailed(seq=seq))
            return
        self.dispatch(ForecastSucceeded(seq=seq, label=candidate.name, days=tuple(days)))

    async def select_candidate_by_id(self, candidate_id: int) -> None:
        if self._state.dropdown_visible:
            for candidate in self._state.candidates:
                if candidate.id == candidate_id:
                    await self.select_candidate(candidate)
                    return
        raise LookupError(f"No candidate with id {candidate_id} in the dropdown")

    def dismiss_notice(self) -> None:
        self.dispatch(NoticeDismissed())
