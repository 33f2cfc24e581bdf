"""Presentation logic for an observation - pure functions for testability."""
from dataclasses import dataclass
from datetime import datetime
from typing import NamedTuple, Optional

from observation import Observation, age_minutes
from time_strings import to_hours_string

# Observations older than this are shown with the excuse instead of metadata
MAX_WEATHER_AGE_MINUTES = 150

DEGREE_MARK = "°"
WIND_CHILL_MARK = "*"
NO_TEMPERATURE = "--"


@dataclass
class DisplayOptions:
    """User configurable display settings."""
    show_metadata: bool = False
    use_24_hour_clock: bool = True
    use_celsius: bool = True
    apply_wind_chill: bool = False
    force_excuse: bool = False


class PresentationResult(NamedTuple):
    temperature_text: str
    subtext_text: str


def _metadata_text(observation: Observation, use_24_hour_clock: bool) -> str:
    """Observation time and station name, e.g. "15:42 Hjo"."""
    parts = []
    if observation.observed_at is not None:
        parts.append(to_hours_string(observation.observed_at, use_24_hour_clock))
    if observation.station_name is not None:
        parts.append(observation.station_name)
    return " ".join(parts)


def present(
    observation: Optional[Observation],
    excuse: str,
    options: DisplayOptions,
    now: datetime
) -> PresentationResult:
    """
    Compute the temperature and subtext strings to display.

    Args:
        observation: Weather to show, or None if there is none
        excuse: Status to show when there is nothing better to say
        options: Display settings
        now: Current time, used to decide whether the observation is too old

    Returns:
        PresentationResult: Temperature string and subtext string
    """
    if observation is None:
        return PresentationResult(NO_TEMPERATURE + DEGREE_MARK, excuse)

    if options.show_metadata:
        subtext = _metadata_text(observation, options.use_24_hour_clock)
    else:
        subtext = ""

    if age_minutes(observation, now) > MAX_WEATHER_AGE_MINUTES or options.force_excuse:
        subtext = excuse

    if options.use_celsius:
        chilled = observation.get_celsius(options.apply_wind_chill)
        unchilled = observation.get_celsius(False)
    else:
        chilled = observation.get_fahrenheit(options.apply_wind_chill)
        unchilled = observation.get_fahrenheit(False)

    # An asterisk tells the user that wind chill changed the number
    mark = WIND_CHILL_MARK if chilled != unchilled else DEGREE_MARK
    return PresentationResult(f"{chilled}{mark}", subtext)
