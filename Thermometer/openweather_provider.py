"""OpenWeather Current Weather API provider implementation."""
import logging
import requests
from weather_provider import WeatherProviderBase, WeatherProviderError
from weather_parser import parse_observation, MalformedPayload
from observation import Observation


def censor_appid(url: str) -> str:
    """Hide the API key in a URL so that it can be logged."""
    appid_index = url.find("APPID=")
    if appid_index < 0:
        return url
    return url[:appid_index] + "APPID=XXXXXX"


class OpenWeatherProvider(WeatherProviderBase):
    """
    Weather provider using the OpenWeather Current Weather API.

    Makes exactly one request per call; the response is handed to
    weather_parser, which decides whether it's usable.
    """

    BASE_URL = "https://api.openweathermap.org/data/2.5/weather"

    def __init__(
        self,
        api_key: str,
        lat: float,
        lon: float,
        timeout: int = 60
    ):
        """
        Initialize OpenWeather provider.

        Args:
            api_key: OpenWeather API key, may be empty
            lat: Latitude (-90 to 90)
            lon: Longitude (-180 to 180)
            timeout: HTTP request timeout in seconds
        """
        self.api_key = api_key
        self.lat = lat
        self.lon = lon
        self.timeout = timeout

    def _params(self) -> dict:
        # Temperatures come back in Kelvin unless "units" is given
        return {
            "lat": f"{self.lat:.4f}",
            "lon": f"{self.lon:.4f}",
            "APPID": self.api_key,
        }

    def request_url(self) -> str:
        """The full request URL, API key included."""
        request = requests.Request("GET", self.BASE_URL, params=self._params())
        return request.prepare().url

    def get_current(self) -> Observation:
        """
        Fetch current weather from the OpenWeather Current Weather API.

        Returns:
            Observation: Current weather information

        Raises:
            WeatherProviderError: If the API request fails
            ParseError: If the response can't be parsed into an Observation
        """
        logging.info(f"Fetching weather data from: {censor_appid(self.request_url())}")

        try:
            response = requests.get(self.BASE_URL, params=self._params(), timeout=self.timeout)
        except requests.exceptions.ConnectionError as e:
            logging.error(f"Network probably down: {e}")
            raise WeatherProviderError("Network down")
        except requests.exceptions.RequestException as e:
            logging.error(f"Network error during API request: {e}")
            raise WeatherProviderError("Weather service error")

        logging.info(f"API response status: {response.status_code}")

        if not response.ok:
            logging.error(f"API request failed with status {response.status_code}")
            self._handle_error_response(response)

        try:
            data = response.json()
        except ValueError:
            logging.warning(f"Bad data from weather server: {response.text[:500]}")
            raise MalformedPayload("Bad data from weather server")
        logging.debug(f"API response (truncated): {str(data)[:500]}...")

        observation = parse_observation(data)
        logging.info(f"Successfully parsed weather data: {observation}")
        return observation

    def _handle_error_response(self, response: requests.Response) -> None:
        """Raise the most specific error we can find in an error response."""
        try:
            error_data = response.json()
        except ValueError:
            # Not JSON, use HTTP status
            logging.error(f"Non-JSON error response: HTTP {response.status_code}, body: {response.text[:500]}")
            raise WeatherProviderError(f"Weather service error (HTTP {response.status_code})")

        logging.error(f"OpenWeather API error response: {error_data}")
        if isinstance(error_data, dict) and "message" in error_data:
            # Raises NoStationsNearby or UpstreamMessage
            parse_observation(error_data)
        raise WeatherProviderError(f"Weather service error (HTTP {response.status_code})")
