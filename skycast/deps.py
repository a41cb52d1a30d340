# ABOUTME: Dependency container for the SkyCast assistant agent using Pydantic BaseModel.
# ABOUTME: Holds the Orchestrator whose session the tools drive.

from pydantic import BaseModel, ConfigDict

from skycast.clock import Clock
from skycast.config import Settings, get_settings
from skycast.orchestrator import Locator, Orchestrator


class SkyCastDeps(BaseModel):
    """Dependencies injected into agent tools via RunContext."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    session: Orchestrator


def create_deps(settings: Settings | None = None, *, clock: Clock | None = None, locator: Locator | None = None):
    """Build deps around a fresh session configured from settings (or the environment)."""
    settings = settings or get_settings()
    return SkyCastDeps(session=Orchestrator.from_settings(settings, clock=clock, locator=locator))
