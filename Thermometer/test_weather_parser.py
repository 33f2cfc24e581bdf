"""Tests for weather_parser module."""
import copy
import time
import pytest
from datetime import datetime, timezone
from observation import Observation
from weather_parser import (
    MalformedPayload,
    MalformedTemperature,
    MissingTemperature,
    NoStationsNearby,
    ParseError,
    UpstreamMessage,
    parse_observation,
    parse_observation_text,
)


# From: http://api.openweathermap.org/data/2.5/weather?lat=35&lon=139
WARABO_JSON = (
    '{"coord":{"lon":139,"lat":35},"sys":{"country":"JP","sunrise":1381005770,'
    '"sunset":1381047672},"weather":[{"id":500,"main":"Rain","description":"light rain",'
    '"icon":"10n"}],"base":"gdps stations","main":{"temp":293.717,"temp_min":293.717,'
    '"temp_max":293.717,"pressure":1010.22,"sea_level":1035.21,"grnd_level":1010.22,'
    '"humidity":100},"wind":{"speed":3.04,"deg":49.0001},"rain":{"3h":2},'
    '"clouds":{"all":92},"dt":1381081014,"id":1848899,"name":"Warabo","cod":200}'
)


def create_weather(name, centigrades, wind_mps, timestamp=None):
    """Parse a minimal payload like the ones OpenWeather sends."""
    if timestamp is None:
        timestamp = int(time.time())
    return parse_observation({
        "main": {"temp": centigrades + 273.15},
        "wind": {"speed": wind_mps},
        "name": name,
        "dt": timestamp,
    })


def payload_with_temperature(temperature):
    main = {}
    if temperature is not None:
        main["temp"] = temperature
    return {"main": main, "wind": {"speed": 0}, "name": "Monkey"}


def test_parse_json_weather():
    """Test parsing a real response."""
    weather = parse_observation_text(WARABO_JSON)

    assert isinstance(weather, Observation)
    assert weather.get_celsius(False) == 21
    assert weather.get_fahrenheit(False) == 69
    assert weather.station_name == "Warabo"
    assert weather.observed_at == datetime(2013, 10, 6, 17, 36, 54, tzinfo=timezone.utc)
    assert weather.observed_at.tzinfo is not None
    assert weather.wind_knots == pytest.approx(5.90, abs=0.02)


def test_parse_json_error():
    with pytest.raises(NoStationsNearby) as exc_info:
        parse_observation_text('{"message":"Error: Not found city","cod":"404"}')

    assert str(exc_info.value) == "No weather stations nearby"


def test_parse_upstream_error_prefix_rewritten():
    with pytest.raises(UpstreamMessage) as exc_info:
        parse_observation({"message": "Error: Out of cheese", "cod": "500"})

    assert str(exc_info.value) == "Weather service error: Out of cheese"
    assert exc_info.value.text == "Weather service error: Out of cheese"


def test_parse_upstream_error_without_prefix():
    with pytest.raises(UpstreamMessage) as exc_info:
        parse_observation({"cod": 401, "message": "Invalid API key"})

    assert str(exc_info.value) == "Invalid API key"


@pytest.mark.parametrize("message", [None, 404, ["Error: Not found city"]])
def test_non_string_message(message):
    with pytest.raises(MalformedPayload) as exc_info:
        parse_observation({"message": message, "cod": "404"})

    assert str(exc_info.value) == "Error parsing weather data"


def test_message_takes_priority_over_data():
    """A payload with a message is never parsed as weather."""
    payload = {"message": "Error: Not found city", "main": {"temp": 280.0}, "name": "Hjo"}

    with pytest.raises(NoStationsNearby):
        parse_observation(payload)


@pytest.mark.parametrize("centigrades", [-40, -5, 0, 5, 10, 21, 35])
def test_temperature_conversions(centigrades):
    weather = parse_observation({"main": {"temp": centigrades + 273.15}})

    assert weather.get_celsius(False) == centigrades
    assert weather.get_fahrenheit(False) == round(centigrades * 9 / 5 + 32)


def test_no_wind_is_calm():
    weather = parse_observation({"main": {"temp": 280.0}})

    assert weather.wind_knots == 0.0
    assert weather.station_name is None
    assert weather.observed_at is None


def test_wind_without_speed_is_calm():
    weather = parse_observation({"main": {"temp": 280.0}, "wind": {"deg": 90}})
    assert weather.wind_knots == 0.0


def test_wind_speed_in_knots():
    weather = parse_observation({"main": {"temp": 280.0}, "wind": {"speed": 10}})
    assert weather.wind_knots == pytest.approx(19.42615)


def test_no_temperature():
    with pytest.raises(MissingTemperature) as exc_info:
        parse_observation(payload_with_temperature(None))

    assert str(exc_info.value) == "No temperature from Monkey"
    assert exc_info.value.station_name == "Monkey"


def test_no_main_block():
    with pytest.raises(MissingTemperature) as exc_info:
        parse_observation({"name": "GRIS FLASKA", "dt": 1381081014})

    # The station name is prettified before it's used in the message
    assert str(exc_info.value) == "No temperature from Gris Flaska"


def test_no_temperature_without_station():
    with pytest.raises(MissingTemperature) as exc_info:
        parse_observation({})

    assert str(exc_info.value) == "No temperature"


def test_empty_temperature():
    with pytest.raises(MalformedTemperature) as exc_info:
        parse_observation(payload_with_temperature(""))

    assert str(exc_info.value).startswith("Broken temperature <>")
    assert exc_info.value.raw_value == ""


def test_broken_temperature():
    with pytest.raises(MalformedTemperature) as exc_info:
        parse_observation(payload_with_temperature("flaska"))

    assert str(exc_info.value) == "Broken temperature <flaska> from Monkey"
    assert exc_info.value.raw_value == "flaska"


@pytest.mark.parametrize("temperature", [None, True, [], {}])
def test_non_numeric_temperature_values(temperature):
    payload = {"main": {"temp": temperature}}

    with pytest.raises(MalformedTemperature):
        parse_observation(payload)


def test_numeric_string_temperature():
    weather = parse_observation(payload_with_temperature("283.15"))
    assert weather.get_celsius() == 10


@pytest.mark.parametrize("payload", [
    {"main": "warm"},
    {"main": {"temp": 280.0}, "wind": "breezy"},
    {"main": {"temp": 280.0}, "wind": {"speed": "fast"}},
    {"main": {"temp": 280.0}, "dt": "yesterday"},
])
def test_malformed_payload(payload):
    with pytest.raises(MalformedPayload) as exc_info:
        parse_observation(payload)

    assert str(exc_info.value) == "Error parsing weather data"


@pytest.mark.parametrize("text", ["", "not json", "{\"main\":", "[1, 2]", "null"])
def test_malformed_text(text):
    with pytest.raises(MalformedPayload):
        parse_observation_text(text)


def test_all_errors_are_parse_errors():
    for error_class in (NoStationsNearby, UpstreamMessage, MissingTemperature,
                        MalformedTemperature, MalformedPayload):
        assert issubclass(error_class, ParseError)


def test_parse_does_not_mutate_input():
    payload = {
        "main": {"temp": 280.0},
        "wind": {"speed": 3.0},
        "name": "  BROMMA FLYGPLATS ",
        "dt": 1381081014,
    }
    original = copy.deepcopy(payload)

    parse_observation(payload)

    assert payload == original


def test_parse_is_deterministic():
    assert parse_observation_text(WARABO_JSON) == parse_observation_text(WARABO_JSON)


def test_station_names_are_prettified():
    assert create_weather("Gris flaska", 0, 0).station_name == "Gris flaska"
    assert create_weather("GRIS FLASKA", 0, 0).station_name == "Gris Flaska"
    assert create_weather("gris flaska", 0, 0).station_name == "Gris Flaska"
    assert create_weather(
        "Coeur d'Alene, Coeur d'Alene Air Terminal", 0, 0
    ).station_name == "Coeur d'Alene Air Terminal"
    assert create_weather("ANGELHOLM (SWE-A", 0, 0).station_name == "Angelholm"


def test_blank_station_name_is_absent():
    assert create_weather("   ", 0, 0).station_name is None
