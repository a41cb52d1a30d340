# ABOUTME: Geocoding Resolver mapping place-name queries and coordinates to ResolvedLocations.
# ABOUTME: Looks up the static place registry; unknown names fall back to a synthesized best-effort candidate.

import asyncio
import logging
import random

from skycast.clock import is_valid_timezone
from skycast.models import Coordinate, LocationQuery, ResolvedLocation
from skycast.places import COUNTRY_ALIASES, PLACES, Place

logger = logging.getLogger(__name__)

CURRENT_LOCATION_NAME = "Current Location"
UNKNOWN_QUERY = "unknown"

# Cities whose single registry entry is never sent through refinement.
WELL_KNOWN_CITIES = frozenset({"london", "new york", "tokyo", "paris", "berlin"})

FALLBACK_LATITUDE_RANGE = (-55.0, 65.0)
FALLBACK_LONGITUDE_RANGE = (-180.0, 180.0)


def title_case(text: str) -> str:
    """Title-case each word, leaving deliberately mixed-case words (e.g. "Île-de-France") alone."""
    words = []
    for word in text.split():
        if word.islower() or word.isupper():
            word = word[:1].upper() + word[1:].lower()
        words.append(word)
    return " ".join(words)


def normalize_country(value: str | None) -> str | None:
    """Map a country name, alias or code to an uppercase 2-letter code, or None if unrecognized."""
    if not value or not value.strip():
        return None
    cleaned = value.strip()
    alias = COUNTRY_ALIASES.get(cleaned.lower())
    if alias:
        return alias
    if len(cleaned) == 2 and cleaned.isalpha():
        return cleaned.upper()
    return None


def needs_refinement(candidate: ResolvedLocation) -> bool:
    """Whether a lone candidate is incomplete enough to ask the user for state/country."""
    if candidate.admin_region and candidate.country_code:
        return False
    return candidate.matched_name.lower() not in WELL_KNOWN_CITIES


def _degrees_apart(a: float, b: float, wrap: float | None = None) -> float:
    diff = abs(a - b)
    if wrap is not None:
        diff = min(diff, wrap - diff)
    return diff


class Geocoder:
    """Resolves text, structured queries and coordinates against a place registry."""

    def __init__(
        self,
        places: tuple[Place, ...] = PLACES,
        *,
        rng: random.Random | None = None,
        default_timezone: str = "UTC",
        latency_seconds: float = 0.0,
    ):
        if not is_valid_timezone(default_timezone):
            raise ValueError(f"default timezone {default_timezone!r} is not a valid IANA id")
        self.places = places
        self.default_timezone = default_timezone
        self.latency_seconds = latency_seconds
        self._rng = rng or random.Random()

    async def resolve(self, query: str | LocationQuery) -> list[ResolvedLocation]:
        """Return every candidate for a text or structured query. Empty means not found."""
        await self._pause()
        if isinstance(query, LocationQuery):
            return self._resolve_structured(query)
        return self._resolve_text(query)

    async def resolve_from_coordinate(self, coordinate: Coordinate) -> ResolvedLocation:
        """Nearest registry entry within its tolerance, else a generic "Current Location"."""
        await self._pause()
        best: Place | None = None
        best_distance = 0.0
        for place in self.places:
            distance = max(
                _degrees_apart(place.latitude, coordinate.latitude),
                _degrees_apart(place.longitude, coordinate.longitude, wrap=360.0),
            )
            if distance <= place.tolerance and (best is None or distance < best_distance):
                best, best_distance = place, distance

        if best is not None:
            return self._to_location(best, best.name)

        logger.info("No registered place near %.4f,%.4f", coordinate.latitude, coordinate.longitude)
        return ResolvedLocation(
            display_name=CURRENT_LOCATION_NAME,
            matched_name=CURRENT_LOCATION_NAME,
            coordinate=coordinate,
            timezone=self.default_timezone,
        )

    def _resolve_text(self, text: str) -> list[ResolvedLocation]:
        name = text.strip()
        if not name or name.lower() == UNKNOWN_QUERY:
            return []

        matches = self._city_matches(name)
        if matches:
            return [self._to_location(place, name) for place in matches]

        logger.info("No registry entry for %r, synthesizing a best-effort candidate", name)
        coordinate = Coordinate(
            latitude=round(self._rng.uniform(*FALLBACK_LATITUDE_RANGE), 4),
            longitude=round(self._rng.uniform(*FALLBACK_LONGITUDE_RANGE), 4),
        )
        display = title_case(name)
        return [
            ResolvedLocation(
                display_name=display,
                matched_name=display,
                coordinate=coordinate,
                timezone=self.default_timezone,
            )
        ]

    def _resolve_structured(self, query: LocationQuery) -> list[ResolvedLocation]:
        city = query.city.strip()
        if not city or city.lower() == UNKNOWN_QUERY:
            return []

        city_matches = self._city_matches(city)
        filtered = [p for p in city_matches if self._matches_details(p, query, strict=True)]
        # A lone city match is kept when it only fails on details it has no record of.
        if not filtered and len(city_matches) == 1 and self._matches_details(city_matches[0], query, strict=False):
            filtered = city_matches
        return [self._to_location(place, city) for place in filtered]

    def _city_matches(self, name: str) -> list[Place]:
        key = name.strip().lower()
        return [place for place in self.places if place.name.lower() == key]

    @staticmethod
    def _matches_details(place: Place, query: LocationQuery, strict: bool) -> bool:
        state = (query.state or "").strip().lower()
        if state:
            if place.admin_region is None:
                if strict:
                    return False
            elif state not in {place.admin_region.lower(), (place.admin_code or "").lower()}:
                return False

        country = (query.country or "").strip()
        if country:
            if place.country_code is None:
                if strict:
                    return False
            elif normalize_country(country) != place.country_code and country.lower() != (place.country or "").lower():
                return False
        return True

    def _to_location(self, place: Place, query_text: str) -> ResolvedLocation:
        tz = place.timezone
        if not is_valid_timezone(tz):
            logger.warning("Registry timezone %r for %s is invalid, using %s", tz, place.name, self.default_timezone)
            tz = self.default_timezone
        return ResolvedLocation(
            display_name=title_case(place.name),
            matched_name=title_case(query_text.strip()),
            admin_region=title_case(place.admin_region) if place.admin_region else None,
            country_code=place.country_code.upper() if place.country_code else None,
            country=place.country,
            coordinate=Coordinate(latitude=place.latitude, longitude=place.longitude),
            timezone=tz,
        )

    async def _pause(self) -> None:
        if self.latency_seconds > 0:
            await asyncio.sleep(self.latency_seconds)
