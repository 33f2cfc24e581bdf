"""Parse OpenWeather current weather JSON into Observation values."""
import json
import math
from typing import Any, Optional

from observation import KELVIN_OFFSET, KNOTS_PER_MPS, Observation
from station_names import prettify_station_name
from time_strings import to_local


class ParseError(Exception):
    """Base class for weather payloads that can't be turned into an Observation.

    ``str(error)`` is a short status line suitable for showing to the user.
    """
    pass


class NoStationsNearby(ParseError):
    """The weather service has no station close to the requested location."""

    def __init__(self):
        super().__init__("No weather stations nearby")


class UpstreamMessage(ParseError):
    """The weather service reported an error of its own."""

    def __init__(self, text: str):
        super().__init__(text)
        self.text = text


class MissingTemperature(ParseError):
    def __init__(self, station_name: Optional[str] = None):
        super().__init__("No temperature" + _from_station(station_name))
        self.station_name = station_name


class MalformedTemperature(ParseError):
    def __init__(self, raw_value: str, station_name: Optional[str] = None):
        super().__init__(
            f"Broken temperature <{raw_value}>" + _from_station(station_name)
        )
        self.raw_value = raw_value
        self.station_name = station_name


class MalformedPayload(ParseError):
    def __init__(self, message: str = "Error parsing weather data"):
        super().__init__(message)


NOT_FOUND_MESSAGE = "Error: Not found city"
UPSTREAM_ERROR_PREFIX = "Error: "


def _from_station(station_name: Optional[str]) -> str:
    if station_name is None:
        return ""
    return f" from {station_name}"


def _to_float(value: Any) -> float:
    """Convert a JSON number (or numeric string) to float, rejecting booleans."""
    if isinstance(value, bool):
        raise TypeError(f"Expected a number, got {value!r}")
    number = float(value)
    if not math.isfinite(number):
        raise ValueError(f"Expected a finite number, got {value!r}")
    return number


def _raw_text(value: Any) -> str:
    if isinstance(value, str):
        return value
    return json.dumps(value)


def _classify_message(message: Any) -> ParseError:
    if not isinstance(message, str):
        return MalformedPayload()
    text = message
    if text == NOT_FOUND_MESSAGE:
        return NoStationsNearby()
    if text.startswith(UPSTREAM_ERROR_PREFIX):
        text = "Weather service error: " + text[len(UPSTREAM_ERROR_PREFIX):]
    return UpstreamMessage(text)


def parse_observation(payload: dict) -> Observation:
    """
    Turn a decoded current weather response into an Observation.

    Recognized fields are ``message``, ``dt``, ``name``, ``main.temp``
    (Kelvin) and ``wind.speed`` (m/s). Everything else is ignored and the
    payload is never modified.

    Args:
        payload: Decoded JSON object

    Returns:
        Observation: The parsed weather

    Raises:
        ParseError: One of its subclasses, describing what was wrong
    """
    if not isinstance(payload, dict):
        raise MalformedPayload()

    # An error response never carries weather data worth looking at
    if "message" in payload:
        raise _classify_message(payload["message"])

    observed_at = None
    if payload.get("dt") is not None:
        try:
            observed_at = to_local(int(_to_float(payload["dt"])))
        except (TypeError, ValueError, OverflowError, OSError):
            raise MalformedPayload()

    station_name = None
    if payload.get("name") is not None:
        station_name = prettify_station_name(str(payload["name"]))

    main = payload.get("main")
    if main is None:
        raise MissingTemperature(station_name)
    if not isinstance(main, dict):
        raise MalformedPayload()
    if "temp" not in main:
        raise MissingTemperature(station_name)
    try:
        kelvin = _to_float(main["temp"])
    except (TypeError, ValueError):
        raise MalformedTemperature(_raw_text(main["temp"]), station_name)

    wind_knots = 0.0
    wind = payload.get("wind")
    if wind is not None:
        if not isinstance(wind, dict):
            raise MalformedPayload()
        if wind.get("speed") is not None:
            try:
                wind_knots = _to_float(wind["speed"]) * KNOTS_PER_MPS
            except (TypeError, ValueError):
                raise MalformedPayload()

    return Observation(
        temperature_celsius=kelvin - KELVIN_OFFSET,
        wind_knots=wind_knots,
        station_name=station_name,
        observed_at=observed_at,
    )


def parse_observation_text(text: str) -> Observation:
    """Decode JSON text and parse it with parse_observation()."""
    try:
        payload = json.loads(text)
    except ValueError:
        raise MalformedPayload("Bad data from weather server")
    return parse_observation(payload)
