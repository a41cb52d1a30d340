# ABOUTME: Agent tool definitions that turn chat requests into session intents.
# ABOUTME: Each tool drives the Orchestrator and returns a compact view of the resulting session state.

from pydantic import ValidationError
from pydantic_ai import ModelRetry, RunContext

from skycast.agent import agent
from skycast.deps import SkyCastDeps
from skycast.models import Coordinate, LocationQuery, SessionState


def describe(state: SessionState) -> dict:
    """Flatten the session state into what the model needs to answer; the full hourly series is left out."""
    view: dict = {"phase": state.phase.value}
    for key in ("error", "notice", "message"):
        if getattr(state, key):
            view[key] = getattr(state, key)

    if state.candidates:
        view["candidates"] = [
            {"option": i, "label": c.label, "timezone": c.timezone} for i, c in enumerate(state.candidates, start=1)
        ]
    if state.pending_refinement is not None:
        view["refinement_pending"] = state.pending_refinement.display_name

    if state.location is not None and state.bundle is not None:
        view["location"] = {"label": state.location.label, "timezone": state.location.timezone}
        view["current"] = state.bundle.current.model_dump(mode="json")
        view["daily"] = [
            {"day_index": i, **day.model_dump(mode="json")} for i, day in enumerate(state.bundle.daily)
        ]

    if state.selected_date is not None:
        view["selected_date"] = state.selected_date.isoformat()
        view["hourly"] = [hour.model_dump(mode="json", exclude={"instant"}) for hour in state.selected_hours]
        if state.hourly_error:
            view["hourly_error"] = state.hourly_error
    return view


@agent.tool
async def search_city(ctx: RunContext[SkyCastDeps], city_name: str) -> dict:
    """Look up a city and load its weather, or report candidates/refinement when it is ambiguous.

    Args:
        ctx: Agent run context with the session.
        city_name: Name of the city as the user typed it (e.g. "London", "Springfield").
    """
    return describe(await ctx.deps.session.submit_city(city_name))


@agent.tool
async def choose_location(ctx: RunContext[SkyCastDeps], option_number: int) -> dict:
    """Pick one of the listed candidates after an ambiguous search.

    Args:
        ctx: Agent run context with the session.
        option_number: The 1-based option number from the candidates list.
    """
    candidates = ctx.deps.session.state.candidates
    if not candidates:
        raise ModelRetry("There are no candidates to choose from. Call search_city first.")
    if not 1 <= option_number <= len(candidates):
        raise ModelRetry(f"option_number must be between 1 and {len(candidates)}.")
    return describe(await ctx.deps.session.select_candidate(candidates[option_number - 1]))


@agent.tool
async def refine_location(ctx: RunContext[SkyCastDeps], state: str | None = None, country: str | None = None) -> dict:
    """Add state/county and country details to a location that needs refinement.

    Args:
        ctx: Agent run context with the session.
        state: State, province or county (e.g. "Ontario", "KY").
        country: Country name or 2-letter code (e.g. "Canada", "US").
    """
    session = ctx.deps.session
    pending = session.state.pending_refinement
    if pending is None:
        raise ModelRetry("No location is awaiting refinement.")
    query = LocationQuery(city=pending.matched_name, state=state, country=country)
    return describe(await session.submit_refinement(query))


@agent.tool
async def skip_refinement(ctx: RunContext[SkyCastDeps]) -> dict:
    """Use the pending location as-is without extra details.

    Args:
        ctx: Agent run context with the session.
    """
    if ctx.deps.session.state.pending_refinement is None:
        raise ModelRetry("No location is awaiting refinement.")
    return describe(await ctx.deps.session.skip_refinement())


@agent.tool
async def use_coordinates(ctx: RunContext[SkyCastDeps], latitude: float, longitude: float) -> dict:
    """Load weather for a position given as decimal degrees.

    Args:
        ctx: Agent run context with the session.
        latitude: Latitude between -90 and 90.
        longitude: Longitude between -180 and 180.
    """
    try:
        coordinate = Coordinate(latitude=latitude, longitude=longitude)
    except ValidationError as e:
        raise ModelRetry(f"Invalid coordinates: {e.errors()[0]['msg']}") from e
    return describe(await ctx.deps.session.submit_coordinate(coordinate))


@agent.tool
async def get_hourly_forecast(ctx: RunContext[SkyCastDeps], day_index: int) -> dict:
    """Get the hour-by-hour forecast for one day of the loaded forecast.

    Args:
        ctx: Agent run context with the session.
        day_index: Index into the daily list; 0 is today at the location.
    """
    session = ctx.deps.session
    bundle = session.state.bundle
    if bundle is None:
        raise ModelRetry("No forecast is loaded. Call search_city first.")
    if not 0 <= day_index < len(bundle.daily):
        raise ModelRetry(f"day_index must be between 0 and {len(bundle.daily) - 1}.")
    return describe(session.select_day(bundle.daily[day_index]))
