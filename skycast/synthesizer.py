# ABOUTME: Weather Synthesizer generating current, daily and hourly weather for one location.
# ABOUTME: Hourly temperatures follow a cosine diurnal curve derived from the matching day's high/low.

import asyncio
import logging
import math
import random
from datetime import date, datetime, time, timedelta, timezone

from skycast.clock import Clock, SystemClock, load_zone
from skycast.conditions import ConditionGenerator
from skycast.models import Coordinate, CurrentConditions, DailySummary, HourlyRecord, WeatherBundle

logger = logging.getLogger(__name__)

BASE_TEMPERATURE_RANGE = (5.0, 25.0)
CURRENT_JITTER = 2.0
FEELS_LIKE_JITTER = 4.0
DAY_BASE_JITTER = 4.0
HIGH_SPREAD = (2.0, 6.0)
LOW_SPREAD = (4.0, 10.0)
HOURLY_JITTER = 1.0
HOURLY_FEELS_LIKE_JITTER = 3.0
GLOBAL_AMPLITUDE = 5.0
PEAK_HOUR = 15

SUNRISE_WINDOW = (time(5, 30), time(7, 30))
SUNSET_WINDOW = (time(17, 30), time(20, 30))

ONE_HOUR = timedelta(hours=1)


def diurnal_factor(local_hour: float) -> float:
    """Cosine of the day cycle: 1.0 at PEAK_HOUR, -1.0 twelve hours earlier (pre-dawn)."""
    return math.cos(2 * math.pi * (local_hour - PEAK_HOUR) / 24)


def top_of_hour(instant: datetime, tz_name: str) -> datetime:
    """Start of the local hour containing instant, returned in UTC."""
    local = instant.astimezone(load_zone(tz_name))
    return local.replace(minute=0, second=0, microsecond=0).astimezone(timezone.utc)


class WeatherSynthesizer:
    """Builds internally consistent weather bundles from a seedable random source."""

    def __init__(
        self,
        *,
        rng: random.Random | None = None,
        clock: Clock | None = None,
        forecast_days: int = 10,
        latency_seconds: float = 0.0,
    ):
        if forecast_days < 1:
            raise ValueError("forecast_days must be at least 1")
        self._rng = rng or random.Random()
        self._clock = clock or SystemClock()
        self._conditions = ConditionGenerator(self._rng)
        self.forecast_days = forecast_days
        self.latency_seconds = latency_seconds

    async def synthesize(self, coordinate: Coordinate, tz_name: str) -> WeatherBundle:
        if self.latency_seconds > 0:
            await asyncio.sleep(self.latency_seconds)
        return self.build_bundle(coordinate, tz_name)

    def build_bundle(self, coordinate: Coordinate, tz_name: str) -> WeatherBundle:
        zone = load_zone(tz_name)
        now = self._clock.now()
        base = self._rng.uniform(*BASE_TEMPERATURE_RANGE)
        today = now.astimezone(zone).date()

        daily = tuple(self._daily(today + timedelta(days=i), base) for i in range(self.forecast_days))
        start = top_of_hour(now, tz_name)
        hourly = tuple(self._hourly(start + i * ONE_HOUR, tz_name, daily, base) for i in range(self.forecast_days * 24))

        logger.debug(
            "Synthesized %d days / %d hours for %.4f,%.4f (%s), base %.1f°C",
            len(daily),
            len(hourly),
            coordinate.latitude,
            coordinate.longitude,
            tz_name,
            base,
        )
        return WeatherBundle(
            timezone=tz_name,
            generated_at=now,
            current=self._current(base, tz_name),
            daily=daily,
            hourly=hourly,
        )

    def _current(self, base: float, tz_name: str) -> CurrentConditions:
        temperature = base + self._rng.uniform(-CURRENT_JITTER, CURRENT_JITTER)
        return CurrentConditions(
            temperature_c=round(temperature),
            feels_like_c=round(temperature + self._rng.uniform(-FEELS_LIKE_JITTER, FEELS_LIKE_JITTER)),
            condition=self._conditions.pick(),
            humidity=self._rng.randint(30, 95),
            wind_speed_mph=self._rng.randint(0, 25),
            precipitation_probability=self._rng.randint(0, 100),
            timezone=tz_name,
        )

    def _daily(self, day: date, base: float) -> DailySummary:
        day_base = base + self._rng.uniform(-DAY_BASE_JITTER, DAY_BASE_JITTER)
        high = round(day_base + self._rng.uniform(*HIGH_SPREAD))
        low = round(high - self._rng.uniform(*LOW_SPREAD))
        if low >= high:
            low = high - 1
        return DailySummary(
            calendar_date=day,
            high_c=high,
            low_c=low,
            condition=self._conditions.pick(),
            precipitation_probability=self._rng.randint(0, 100),
            sunrise=self._time_between(*SUNRISE_WINDOW),
            sunset=self._time_between(*SUNSET_WINDOW),
        )

    def _hourly(self, instant: datetime, tz_name: str, daily: tuple[DailySummary, ...], base: float) -> HourlyRecord:
        local = instant.astimezone(load_zone(tz_name))
        hour = local.hour + local.minute / 60
        day = next((d for d in daily if d.calendar_date == local.date()), None)

        if day is not None:
            mean = (day.high_c + day.low_c) / 2
            amplitude = (day.high_c - day.low_c) / 2
            raw = mean + amplitude * diurnal_factor(hour) + self._rng.uniform(-HOURLY_JITTER, HOURLY_JITTER)
            temperature = min(max(round(raw), day.low_c), day.high_c)
        else:
            raw = base + GLOBAL_AMPLITUDE * diurnal_factor(hour) + self._rng.uniform(-HOURLY_JITTER, HOURLY_JITTER)
            temperature = round(raw)

        return HourlyRecord(
            instant=instant,
            local_hour=f"{local.hour:02d}:00",
            temperature_c=temperature,
            feels_like_c=round(
                temperature + self._rng.uniform(-HOURLY_FEELS_LIKE_JITTER, HOURLY_FEELS_LIKE_JITTER)
            ),
            condition=self._conditions.pick(),
            precipitation_probability=self._rng.randint(0, 100),
        )

    def _time_between(self, earliest: time, latest: time) -> str:
        start = earliest.hour * 60 + earliest.minute
        end = latest.hour * 60 + latest.minute
        minutes = self._rng.randint(start, end)
        return f"{minutes // 60:02d}:{minutes % 60:02d}"
