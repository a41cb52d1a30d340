# ABOUTME: Pydantic AI agent that acts as the conversational front end of a SkyCast session.
# ABOUTME: Configures system instructions, the OpenRouter model factory, and imports tool registrations.

from pydantic_ai import Agent, RunContext
from pydantic_ai.models.openrouter import OpenRouterModel
from pydantic_ai.providers.openrouter import OpenRouterProvider

from skycast.config import Settings, get_settings
from skycast.deps import SkyCastDeps


def create_model(settings: Settings | None = None) -> OpenRouterModel:
    """Build the OpenRouter chat model; needs OPENROUTER_API_KEY to be set."""
    settings = settings or get_settings()
    provider = OpenRouterProvider(api_key=settings.openrouter_api_key)
    return OpenRouterModel(settings.openrouter_model, provider=provider)


agent = Agent(
    deps_type=SkyCastDeps,
    retries=2,
    system_prompt=(
        "You are SkyCast, a weather assistant. You show current conditions, a multi-day forecast and "
        "an hourly breakdown for one location at a time, using only the session tools.\n\n"
        "When answering questions:\n"
        "1. Call search_city with the place the user names. Never invent coordinates.\n"
        "2. If the result lists candidates, show them numbered and ask which one the user means, "
        "then call choose_location with that number.\n"
        "3. If a refinement is pending, ask for the state/county and country. Call refine_location with "
        "what the user gives you, or skip_refinement if they do not know.\n"
        "4. If the user shares their position, call use_coordinates.\n"
        "5. For hour-by-hour questions call get_hourly_forecast with the day's index from the daily list "
        "(0 is today at the location). An empty list for today means the remaining hours have passed.\n"
        "6. Present temperatures in Celsius, wind in mph, precipitation chance in percent.\n"
        "7. Times are local to the location, not to the user.\n"
        "8. Pass errors and notices from the tools on to the user in plain words.\n"
    ),
)


@agent.instructions
def add_location_time(ctx: RunContext[SkyCastDeps]) -> str:
    """Tell the model which location is active and what time it is there."""
    session = ctx.deps.session
    now = session.local_time()
    location = session.state.location
    where = location.label if location else "no location yet"
    return f"Active location: {where}. Local date and time there: {now.date.isoformat()} {now.hhmm()}."


async def ask(prompt: str, deps: SkyCastDeps, settings: Settings | None = None) -> str:
    """Run one user message through the agent with the configured OpenRouter model."""
    result = await agent.run(prompt, deps=deps, model=create_model(settings))
    return result.output


# Import tools module to register @agent.tool decorators
import skycast.tools  # noqa: E402, F401
