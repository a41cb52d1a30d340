# ABOUTME: Pydantic models for locations, weather bundles, and the orchestrator's session state.
# ABOUTME: All models are frozen; a new resolution replaces them wholesale instead of mutating fields.

from datetime import date, datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class Coordinate(BaseModel):
    """A point on the globe in decimal degrees."""

    model_config = ConfigDict(frozen=True)

    latitude: float = Field(ge=-90, le=90)
    longitude: float = Field(ge=-180, le=180)


class LocationQuery(BaseModel):
    """Structured place query, as submitted from the refinement dialog."""

    model_config = ConfigDict(frozen=True)

    city: str
    state: str | None = None
    country: str | None = None


class ResolvedLocation(BaseModel):
    """One concrete geocoding result with its timezone."""

    model_config = ConfigDict(frozen=True)

    display_name: str
    matched_name: str
    admin_region: str | None = None
    country_code: str | None = None
    country: str | None = None
    coordinate: Coordinate
    timezone: str

    @property
    def label(self) -> str:
        return ", ".join(p for p in (self.display_name, self.admin_region, self.country_code or self.country) if p)


class CurrentConditions(BaseModel):
    model_config = ConfigDict(frozen=True)

    temperature_c: int
    feels_like_c: int
    condition: str
    humidity: int = Field(ge=0, le=100)
    wind_speed_mph: int = Field(ge=0)
    precipitation_probability: int = Field(ge=0, le=100)
    timezone: str


class DailySummary(BaseModel):
    """One day of the forecast; calendar_date is the date in the location's timezone."""

    model_config = ConfigDict(frozen=True)

    calendar_date: date
    high_c: int
    low_c: int
    condition: str
    precipitation_probability: int = Field(ge=0, le=100)
    sunrise: str
    sunset: str


class HourlyRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    instant: datetime
    local_hour: str
    temperature_c: int
    feels_like_c: int
    condition: str
    precipitation_probability: int = Field(ge=0, le=100)


class WeatherBundle(BaseModel):
    """Current conditions, daily run and hourly series generated together for one location."""

    model_config = ConfigDict(frozen=True)

    timezone: str
    generated_at: datetime
    current: CurrentConditions
    daily: tuple[DailySummary, ...]
    hourly: tuple[HourlyRecord, ...]


class Phase(str, Enum):
    IDLE = "idle"
    RESOLVING = "resolving"
    NOT_FOUND = "not_found"
    DISAMBIGUATING = "disambiguating"
    REFINING = "refining"
    READY = "ready"


class SessionState(BaseModel):
    """Everything the UI reads. Replaced as a whole on every transition."""

    model_config = ConfigDict(frozen=True)

    phase: Phase = Phase.IDLE
    sequence: int = 0
    location: ResolvedLocation | None = None
    bundle: WeatherBundle | None = None
    candidates: tuple[ResolvedLocation, ...] = ()
    pending_refinement: ResolvedLocation | None = None
    selected_date: date | None = None
    selected_hours: tuple[HourlyRecord, ...] = ()
    hourly_error: str | None = None
    error: str | None = None
    notice: str | None = None
    message: str | None = None

    @property
    def loading(self) -> bool:
        return self.phase is Phase.RESOLVING

    @property
    def refinement_pending(self) -> bool:
        return self.pending_refinement is not None

    @property
    def is_ready(self) -> bool:
        return self.phase is Phase.READY and self.bundle is not None
