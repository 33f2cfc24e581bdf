"""Weather observation domain model - pure data, no I/O."""
import sys
from dataclasses import dataclass
from datetime import datetime, timedelta
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional


# Age reported for observations without a timestamp, older than any real age
UNKNOWN_AGE_MINUTES = sys.maxsize

KELVIN_OFFSET = 273.15
KNOTS_PER_MPS = 1.942615


def round_half_away_from_zero(value: float) -> int:
    """Round to the nearest integer, with halves going away from zero."""
    return int(Decimal(value).quantize(Decimal(1), rounding=ROUND_HALF_UP))


def celsius_to_fahrenheit(celsius: float) -> float:
    return celsius * 9.0 / 5.0 + 32.0


def wind_chill_celsius(celsius: float, wind_knots: float) -> float:
    """
    Compute a wind chilled temperature.

    Uses the North American wind chill index, which is only defined for
    temperatures at or below 10°C and winds of at least 4.8 km/h. Outside
    that range the temperature is returned unchanged.

    Args:
        celsius: Air temperature in Celsius
        wind_knots: Wind speed in knots

    Returns:
        Perceived temperature in Celsius
    """
    wind_kmh = 1.85 * wind_knots

    if celsius > 10.0:
        return celsius
    if wind_kmh < 4.8:
        return celsius

    wind_factor = wind_kmh ** 0.16
    return (
        13.12
        + 0.6215 * celsius
        - 11.37 * wind_factor
        + 0.3965 * celsius * wind_factor
    )


@dataclass(frozen=True)
class Observation:
    """A single weather reading, as produced by weather_parser."""
    temperature_celsius: float
    wind_knots: float = 0.0
    station_name: Optional[str] = None
    observed_at: Optional[datetime] = None  # local time

    def _celsius(self, correct_for_wind_chill: bool) -> float:
        if correct_for_wind_chill:
            return wind_chill_celsius(self.temperature_celsius, self.wind_knots)
        return self.temperature_celsius

    def get_celsius(self, correct_for_wind_chill: bool = False) -> int:
        """Temperature in Celsius, rounded for display."""
        return round_half_away_from_zero(self._celsius(correct_for_wind_chill))

    def get_fahrenheit(self, correct_for_wind_chill: bool = False) -> int:
        """
        Temperature in Fahrenheit, rounded for display.

        Wind chill is computed on the Celsius value before converting.
        """
        return round_half_away_from_zero(
            celsius_to_fahrenheit(self._celsius(correct_for_wind_chill))
        )

    def __str__(self) -> str:
        if self.observed_at is not None:
            time_string = self.observed_at.strftime("%Y %b %d %H:%M %Z")
        else:
            time_string = "<none>"
        return "%.1fC, %.1fkts at %s on %s" % (
            self.temperature_celsius,
            self.wind_knots,
            self.station_name,
            time_string,
        )


def age_minutes(observation: Observation, now: datetime) -> int:
    """
    How many whole minutes old is this observation?

    Negative if the observation time is ahead of ``now``.

    Args:
        observation: Observation to check
        now: Current time, timezone aware

    Returns:
        Age in minutes (floored), or UNKNOWN_AGE_MINUTES if the observation
        has no timestamp
    """
    if observation.observed_at is None:
        return UNKNOWN_AGE_MINUTES
    return (now - observation.observed_at) // timedelta(minutes=1)


def try_replace(
    current: Optional[Observation],
    candidate: Observation,
    now: datetime
) -> Observation:
    """Return candidate if it is strictly fresher than current, else current."""
    if current is None:
        return candidate
    if age_minutes(candidate, now) < age_minutes(current, now):
        return candidate
    return current
