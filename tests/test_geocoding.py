# ABOUTME: Contract tests for the geocoding resolver.
# ABOUTME: Covers text and structured lookups, fallbacks, reverse lookup, and name normalization.

import random

import pytest

from skycast.geocoding import (
    CURRENT_LOCATION_NAME,
    Geocoder,
    needs_refinement,
    normalize_country,
    title_case,
)
from skycast.models import Coordinate, LocationQuery
from skycast.places import PLACES


class TestTextQuery:
    @pytest.mark.asyncio
    async def test_london_returns_three_candidates(self, geocoder):
        """"London" matches three registry entries, each with its own timezone.

        Implementation: Resolves the text "London".
        Passing implies: Same-name cities in different countries are all offered.
        """
        results = await geocoder.resolve("London")

        assert len(results) == 3
        assert {r.timezone for r in results} == {"Europe/London", "America/Toronto", "America/New_York"}
        assert {r.country_code for r in results} == {"GB", "CA", "US"}

    @pytest.mark.asyncio
    async def test_match_is_case_insensitive(self, geocoder):
        """Lookup ignores case and surrounding whitespace.

        Implementation: Resolves "  pARIS ".
        Passing implies: Users need not type exact casing.
        """
        results = await geocoder.resolve("  pARIS ")

        assert len(results) == 1
        assert results[0].display_name == "Paris"
        assert results[0].matched_name == "Paris"
        assert results[0].timezone == "Europe/Paris"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("query", ["", "   ", "Unknown", "UNKNOWN"])
    async def test_empty_or_unknown_returns_nothing(self, geocoder, query):
        """Empty and explicitly unknown input is the not-found signal.

        Implementation: Resolves blank and "unknown" strings.
        Passing implies: The orchestrator can report not-found.
        """
        assert await geocoder.resolve(query) == []

    @pytest.mark.asyncio
    async def test_unregistered_name_synthesizes_one_candidate(self, geocoder):
        """An unknown name yields one best-effort candidate with the default timezone.

        Implementation: Resolves a city that is not in the registry.
        Passing implies: The pipeline never dead-ends on an unrecognized name.
        """
        results = await geocoder.resolve("atlantis")

        assert len(results) == 1
        candidate = results[0]
        assert candidate.display_name == "Atlantis"
        assert candidate.timezone == "UTC"
        assert candidate.admin_region is None
        assert candidate.country_code is None
        assert -55 <= candidate.coordinate.latitude <= 65

    @pytest.mark.asyncio
    async def test_fallback_coordinates_are_seedable(self):
        """Two geocoders with the same seed synthesize the same fallback coordinate.

        Implementation: Resolves the same unknown name with two seeded geocoders.
        Passing implies: Fallback generation is reproducible in tests.
        """
        a = await Geocoder(rng=random.Random(5)).resolve("Atlantis")
        b = await Geocoder(rng=random.Random(5)).resolve("Atlantis")
        assert a[0].coordinate == b[0].coordinate

    @pytest.mark.asyncio
    async def test_default_timezone_is_configurable(self):
        geocoder = Geocoder(default_timezone="Europe/Berlin")
        results = await geocoder.resolve("Atlantis")
        assert results[0].timezone == "Europe/Berlin"

    def test_invalid_default_timezone_rejected(self):
        with pytest.raises(ValueError):
            Geocoder(default_timezone="Not/AZone")


class TestStructuredQuery:
    @pytest.mark.asyncio
    async def test_country_code_narrows(self, geocoder):
        """A country code narrows "London" to the Canadian entry.

        Implementation: Resolves LocationQuery(city="London", country="ca").
        Passing implies: Refinement details filter the registry.
        """
        results = await geocoder.resolve(LocationQuery(city="London", country="ca"))

        assert len(results) == 1
        assert results[0].admin_region == "Ontario"
        assert results[0].timezone == "America/Toronto"

    @pytest.mark.asyncio
    async def test_state_abbreviation_narrows(self, geocoder):
        results = await geocoder.resolve(LocationQuery(city="london", state="KY"))
        assert [r.admin_region for r in results] == ["Kentucky"]

    @pytest.mark.asyncio
    async def test_country_alias_narrows(self, geocoder):
        results = await geocoder.resolve(LocationQuery(city="London", country="United Kingdom"))
        assert [r.country_code for r in results] == ["GB"]

    @pytest.mark.asyncio
    async def test_country_filter_can_leave_several(self, geocoder):
        """A filter that matches several entries returns all of them.

        Implementation: Resolves Springfield in the US.
        Passing implies: The orchestrator can re-enter disambiguation.
        """
        results = await geocoder.resolve(LocationQuery(city="Springfield", country="US"))
        assert len(results) == 3

    @pytest.mark.asyncio
    async def test_unregistered_city_returns_nothing(self, geocoder):
        """Structured queries never synthesize a fallback candidate.

        Implementation: Resolves a structured query for an unknown city.
        Passing implies: The orchestrator sees zero refined results.
        """
        assert await geocoder.resolve(LocationQuery(city="Atlantis", state="Ocean")) == []

    @pytest.mark.asyncio
    async def test_conflicting_details_return_nothing(self, geocoder):
        assert await geocoder.resolve(LocationQuery(city="Paris", country="US")) == []

    @pytest.mark.asyncio
    async def test_lone_match_widened_when_detail_unrecorded(self, geocoder):
        """A lone city match survives a state filter it has no record for.

        Implementation: Resolves Monaco (no admin region in the registry) with a state.
        Passing implies: Over-narrowing a single candidate widens back to it.
        """
        results = await geocoder.resolve(LocationQuery(city="Monaco", state="Monte Carlo"))
        assert [r.display_name for r in results] == ["Monaco"]

    @pytest.mark.asyncio
    async def test_lone_match_not_widened_on_contradiction(self, geocoder):
        assert await geocoder.resolve(LocationQuery(city="Monaco", country="FR")) == []


class TestReverseLookup:
    @pytest.mark.asyncio
    async def test_round_trip_keeps_timezone(self, geocoder):
        """Resolving every registered place and reverse-resolving its coordinate keeps the timezone.

        Implementation: Loops over all registry names, resolves, then reverse-resolves each result.
        Passing implies: Text and coordinate lookups agree on the location's zone.
        """
        for name in {p.name for p in PLACES}:
            for candidate in await geocoder.resolve(name):
                back = await geocoder.resolve_from_coordinate(candidate.coordinate)
                assert back.timezone == candidate.timezone, name
                assert back.display_name == candidate.display_name

    @pytest.mark.asyncio
    async def test_nearby_point_matches_within_tolerance(self, geocoder):
        point = Coordinate(latitude=51.55, longitude=-0.08)
        result = await geocoder.resolve_from_coordinate(point)
        assert result.display_name == "London"
        assert result.country_code == "GB"

    @pytest.mark.asyncio
    async def test_approximate_entry_has_wider_tolerance(self, geocoder):
        """Approximate entries match from further away than exact ones.

        Implementation: Reverse-resolves a point 0.3 degrees from Reykjavik.
        Passing implies: Per-entry tolerance is honoured.
        """
        result = await geocoder.resolve_from_coordinate(Coordinate(latitude=64.4466, longitude=-21.9426))
        assert result.display_name == "Reykjavik"
        assert result.timezone == "Atlantic/Reykjavik"

    @pytest.mark.asyncio
    async def test_miss_returns_current_location(self, geocoder):
        """A point far from every entry becomes "Current Location" with the default timezone.

        Implementation: Reverse-resolves a point in the South Atlantic.
        Passing implies: Reverse lookup never fails outright.
        """
        point = Coordinate(latitude=-40.0, longitude=-20.0)
        result = await geocoder.resolve_from_coordinate(point)

        assert result.display_name == CURRENT_LOCATION_NAME
        assert result.coordinate == point
        assert result.timezone == "UTC"


class TestNormalization:
    def test_title_case(self):
        assert title_case("new york") == "New York"
        assert title_case("LONDON") == "London"
        assert title_case("Île-de-France") == "Île-de-France"
        assert title_case("  san   jose ") == "San Jose"

    def test_normalize_country(self):
        assert normalize_country("gb") == "GB"
        assert normalize_country("United States") == "US"
        assert normalize_country("uk") == "GB"
        assert normalize_country("Greece") is None
        assert normalize_country("") is None
        assert normalize_country(None) is None


class TestNeedsRefinement:
    @pytest.mark.asyncio
    async def test_complete_candidate_is_not_refined(self, geocoder):
        [paris] = await geocoder.resolve("Paris")
        assert not needs_refinement(paris)

    @pytest.mark.asyncio
    async def test_candidate_missing_region_is_refined(self, geocoder):
        [monaco] = await geocoder.resolve("Monaco")
        assert needs_refinement(monaco)

    @pytest.mark.asyncio
    async def test_fallback_candidate_is_refined(self, geocoder):
        [atlantis] = await geocoder.resolve("Atlantis")
        assert needs_refinement(atlantis)

    @pytest.mark.asyncio
    async def test_well_known_city_is_never_refined(self, geocoder):
        """Well-known names skip refinement even when details are missing.

        Implementation: Strips region and country from a London candidate.
        Passing implies: The refinement policy whitelists well-known cities.
        """
        london = (await geocoder.resolve("London"))[0]
        bare = london.model_copy(update={"admin_region": None, "country_code": None})
        assert not needs_refinement(bare)
