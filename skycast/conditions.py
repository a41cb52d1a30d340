# ABOUTME: Condition Generator producing sky-condition labels for synthesized weather.
# ABOUTME: Labels come from a fixed set so downstream icon selection can rely on them.

import random

CONDITION_LABELS = (
    "Sunny",
    "Partly Cloudy",
    "Cloudy",
    "Rainy",
    "Showers",
    "Thunderstorm",
    "Snowy",
    "Foggy",
    "Windy",
)


class ConditionGenerator:
    """Draws a label uniformly from CONDITION_LABELS using the supplied random source."""

    def __init__(self, rng: random.Random, labels: tuple[str, ...] = CONDITION_LABELS):
        if not labels:
            raise ValueError("labels must not be empty")
        self._rng = rng
        self.labels = labels

    def pick(self) -> str:
        return self._rng.choice(self.labels)
