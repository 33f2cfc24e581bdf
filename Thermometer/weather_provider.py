"""Weather provider abstraction - the fetcher that feeds the parser."""
from abc import ABC, abstractmethod
from observation import Observation


class WeatherProviderBase(ABC):
    """Abstract base class for weather observation providers."""

    @abstractmethod
    def get_current(self) -> Observation:
        """
        Fetch and parse the current weather observation.

        Returns:
            Observation: Current weather at the provider's location

        Raises:
            WeatherProviderError: If the weather could not be downloaded
            ParseError: If the weather service sent something unusable
        """
        pass


class WeatherProviderError(Exception):
    """Exception raised when a weather provider fails to download data."""
    pass
