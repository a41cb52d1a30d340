# ABOUTME: Resolution Orchestrator sequencing geocoding, disambiguation, refinement and synthesis.
# ABOUTME: Owns the single SessionState; every intent swaps it whole, and stale results are discarded by sequence number.

import logging
import random
from collections.abc import Awaitable, Callable
from datetime import date

from skycast.clock import CivilDateTime, Clock, SystemClock, is_valid_timezone
from skycast.config import Settings
from skycast.errors import (
    GeocodingFailure,
    GeolocationError,
    GeolocationUnsupported,
    HourlyWindowUnavailable,
    LocationNotFound,
    SynthesisFailure,
)
from skycast.geocoding import Geocoder, needs_refinement, normalize_country, title_case
from skycast.hourly import select_hours_for_day
from skycast.models import Coordinate, DailySummary, LocationQuery, Phase, ResolvedLocation, SessionState
from skycast.synthesizer import WeatherSynthesizer

logger = logging.getLogger(__name__)

Locator = Callable[[], Awaitable[Coordinate]]


async def unsupported_locator() -> Coordinate:
    raise GeolocationUnsupported("Geolocation is not supported by this client.")


class Orchestrator:
    """State machine for one viewing session.

    Intents (submit_city, select_candidate, submit_refinement, skip_refinement,
    request_geolocation, submit_coordinate) each take a new sequence number. A
    result is only committed while its number is still the latest, so a slow
    response can never overwrite the effect of a newer intent. select_day and
    clear_day are synchronous reads of the active bundle and keep the phase.
    """

    def __init__(
        self,
        geocoder: Geocoder,
        synthesizer: WeatherSynthesizer,
        *,
        clock: Clock | None = None,
        locator: Locator | None = None,
        default_city: str = "London",
    ):
        self._geocoder = geocoder
        self._synthesizer = synthesizer
        self._clock = clock or SystemClock()
        self._locator = locator or unsupported_locator
        self.default_city = default_city
        self._sequence = 0
        self._state = SessionState()

    @classmethod
    def from_settings(cls, settings: Settings, *, clock: Clock | None = None, locator: Locator | None = None):
        rng = random.Random(settings.random_seed)
        clock = clock or SystemClock()
        geocoder = Geocoder(
            rng=rng,
            default_timezone=settings.default_timezone,
            latency_seconds=settings.latency_seconds,
        )
        synthesizer = WeatherSynthesizer(
            rng=rng,
            clock=clock,
            forecast_days=settings.forecast_days,
            latency_seconds=settings.latency_seconds,
        )
        return cls(geocoder, synthesizer, clock=clock, locator=locator, default_city=settings.default_city)

    @property
    def state(self) -> SessionState:
        return self._state

    # Location intents

    async def start(self) -> SessionState:
        """Load the default city if nothing has been resolved yet."""
        if self._state.phase is not Phase.IDLE or self._state.bundle is not None:
            return self._state
        previous = self._state
        token = self._begin(f"default city {self.default_city!r}")
        return await self._resolve_text(token, self.default_city, previous, is_default=True)

    async def submit_city(self, text: str) -> SessionState:
        previous = self._state
        token = self._begin(f"city {text!r}")
        return await self._resolve_text(token, text, previous)

    async def select_candidate(self, location: ResolvedLocation) -> SessionState:
        token = self._begin(f"candidate {location.label!r}")
        return await self._activate(token, location)

    async def submit_refinement(self, query: LocationQuery) -> SessionState:
        previous = self._state
        pending = previous.pending_refinement
        if previous.phase is not Phase.REFINING or pending is None:
            return self._reject("No location is awaiting refinement.")

        token = self._begin(f"refinement {query.city!r}/{query.state!r}/{query.country!r}")
        try:
            results = await self._geocoder.resolve(query)
        except Exception as e:
            return self._geocoding_failed(token, previous, e)
        if token != self._sequence:
            return self._discard(token)

        if not results:
            logger.info("Refinement for %r matched nothing, keeping the typed details", query.city)
            return await self._activate(token, self._typed_location(query, pending))
        if len(results) == 1:
            return await self._activate(token, results[0])
        return self._disambiguate(token, results)

    async def skip_refinement(self) -> SessionState:
        pending = self._state.pending_refinement
        if self._state.phase is not Phase.REFINING or pending is None:
            return self._reject("No location is awaiting refinement.")
        token = self._begin(f"skip refinement for {pending.display_name!r}")
        return await self._activate(token, pending)

    async def request_geolocation(self) -> SessionState:
        """Locate the device; on failure post a notice and fall back to the default city if nothing is shown."""
        previous = self._state
        token = self._begin("geolocation")
        try:
            coordinate = await self._locator()
        except Exception as e:
            if token != self._sequence:
                return self._discard(token)
            error = e if isinstance(e, GeolocationError) else GeolocationError(str(e) or type(e).__name__)
            logger.warning("Geolocation failed (code %s): %s", error.code, error.message)
            notice = f"Could not get your location: {error.message}"
            if previous.bundle is not None:
                return self._settle(token, previous, notice=notice)
            self._set(self._state.model_copy(update={"notice": notice}))
            return await self._resolve_text(token, self.default_city, previous, is_default=True)
        if token != self._sequence:
            return self._discard(token)
        return await self._resolve_coordinate(token, coordinate, previous)

    async def submit_coordinate(self, coordinate: Coordinate) -> SessionState:
        previous = self._state
        token = self._begin(f"coordinate {coordinate.latitude:.4f},{coordinate.longitude:.4f}")
        return await self._resolve_coordinate(token, coordinate, previous)

    # Day intents

    def select_day(self, day: DailySummary, calendar_date: date | None = None) -> SessionState:
        """Filter the active hourly series to one day. Failures stay local to the hourly panel."""
        state = self._state
        target = calendar_date or day.calendar_date
        try:
            if state.bundle is None or state.location is None:
                raise HourlyWindowUnavailable("No forecast is loaded yet.")
            hours = select_hours_for_day(state.bundle.hourly, state.location.timezone, target, now=self._clock.now())
        except HourlyWindowUnavailable as e:
            logger.warning("Hourly window unavailable for %s: %s", target, e)
            update = {"selected_date": target, "selected_hours": (), "hourly_error": str(e)}
        else:
            update = {"selected_date": target, "selected_hours": tuple(hours), "hourly_error": None}
        self._state = state.model_copy(update=update)
        return self._state

    def clear_day(self) -> SessionState:
        self._state = self._state.model_copy(update={"selected_date": None, "selected_hours": (), "hourly_error": None})
        return self._state

    def local_time(self) -> CivilDateTime:
        """Current wall-clock time at the active location."""
        location = self._state.location
        tz_name = location.timezone if location else self._geocoder.default_timezone
        if not is_valid_timezone(tz_name):
            tz_name = self._geocoder.default_timezone
        return CivilDateTime.at(self._clock.now(), tz_name)

    # Internals

    async def _resolve_text(
        self, token: int, text: str, previous: SessionState, is_default: bool = False
    ) -> SessionState:
        try:
            candidates = await self._geocoder.resolve(text)
        except Exception as e:
            return self._geocoding_failed(token, previous, e)
        if token != self._sequence:
            return self._discard(token)

        if not candidates:
            missing = LocationNotFound(f'Could not find a location matching "{text.strip()}".')
            logger.info("Request %d: %s", token, missing)
            return self._commit(
                token,
                SessionState(phase=Phase.NOT_FOUND, sequence=token, notice=self._state.notice, error=str(missing)),
            )
        # The configured default place is taken as-is: first registry match, no dialogs.
        if is_default:
            return await self._activate(token, candidates[0])
        if len(candidates) > 1:
            return self._disambiguate(token, candidates)
        candidate = candidates[0]
        if needs_refinement(candidate):
            return self._commit(
                token,
                self._state.model_copy(update={"phase": Phase.REFINING, "pending_refinement": candidate}),
            )
        return await self._activate(token, candidate)

    async def _resolve_coordinate(self, token: int, coordinate: Coordinate, previous: SessionState) -> SessionState:
        try:
            location = await self._geocoder.resolve_from_coordinate(coordinate)
        except Exception as e:
            return self._geocoding_failed(token, previous, e)
        if token != self._sequence:
            return self._discard(token)
        return await self._activate(token, location)

    async def _activate(self, token: int, location: ResolvedLocation) -> SessionState:
        try:
            bundle = await self._synthesizer.synthesize(location.coordinate, location.timezone)
        except Exception as e:
            if token != self._sequence:
                return self._discard(token)
            failure = e if isinstance(e, SynthesisFailure) else SynthesisFailure(str(e) or type(e).__name__)
            logger.exception("Weather synthesis failed for %s", location.label)
            return self._commit(
                token,
                SessionState(
                    phase=Phase.IDLE,
                    sequence=token,
                    notice=self._state.notice,
                    error=f"Failed to fetch weather data: {failure}",
                ),
            )
        return self._commit(
            token,
            SessionState(
                phase=Phase.READY,
                sequence=token,
                location=location,
                bundle=bundle,
                notice=self._state.notice,
                message=f"Displaying weather for {location.label}.",
            ),
        )

    def _disambiguate(self, token: int, candidates: list[ResolvedLocation]) -> SessionState:
        return self._commit(
            token,
            self._state.model_copy(update={"phase": Phase.DISAMBIGUATING, "candidates": tuple(candidates)}),
        )

    @staticmethod
    def _typed_location(query: LocationQuery, pending: ResolvedLocation) -> ResolvedLocation:
        city = title_case(query.city) or pending.display_name
        state = title_case(query.state or "") or None
        country = title_case(query.country or "") or None
        return ResolvedLocation(
            display_name=city,
            matched_name=city,
            admin_region=state,
            country_code=normalize_country(query.country),
            country=country,
            coordinate=pending.coordinate,
            timezone=pending.timezone,
        )

    def _begin(self, description: str) -> int:
        self._sequence += 1
        logger.info("Request %d: resolving %s", self._sequence, description)
        self._set(
            self._state.model_copy(
                update={
                    "phase": Phase.RESOLVING,
                    "sequence": self._sequence,
                    "candidates": (),
                    "pending_refinement": None,
                    "error": None,
                    "notice": None,
                    "message": None,
                }
            )
        )
        return self._sequence

    def _geocoding_failed(self, token: int, previous: SessionState, exc: Exception) -> SessionState:
        if token != self._sequence:
            return self._discard(token)
        failure = exc if isinstance(exc, GeocodingFailure) else GeocodingFailure(str(exc) or type(exc).__name__)
        logger.warning("Request %d: geocoding failed: %s", token, failure)
        # A notice posted earlier in this request (geolocation fallback) survives the failure.
        return self._settle(
            token,
            previous,
            error=f"Location lookup failed: {failure}. Please try again.",
            notice=self._state.notice,
        )

    def _settle(self, token: int, previous: SessionState, *, error: str | None = None, notice: str | None = None):
        """Go back to the last settled state, untouched apart from the given error/notice."""
        phase = previous.phase
        if phase is Phase.RESOLVING:
            phase = Phase.READY if previous.bundle is not None else Phase.IDLE
        restored = previous.model_copy(
            update={"phase": phase, "sequence": token, "error": error, "notice": notice, "message": None}
        )
        return self._commit(token, restored)

    def _reject(self, message: str) -> SessionState:
        logger.info("Ignoring intent in phase %s: %s", self._state.phase.value, message)
        self._state = self._state.model_copy(update={"error": message})
        return self._state

    def _commit(self, token: int, state: SessionState) -> SessionState:
        if token != self._sequence:
            return self._discard(token)
        self._set(state)
        return state

    def _discard(self, token: int) -> SessionState:
        logger.debug("Discarding result of request %d, superseded by %d", token, self._sequence)
        return self._state

    def _set(self, state: SessionState) -> None:
        if state.phase is not self._state.phase:
            logger.info("Session %s -> %s", self._state.phase.value, state.phase.value)
        self._state = state
