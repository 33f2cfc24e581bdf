"""Weather service with fetch scheduling and a most-recent-wins cache."""
import logging
import threading
from datetime import datetime, timedelta
from enum import Enum
from typing import Callable, Optional
from weather_provider import WeatherProviderBase, WeatherProviderError
from weather_parser import ParseError
from observation import Observation, UNKNOWN_AGE_MINUTES, age_minutes, try_replace
from weather_presenter import DisplayOptions, PresentationResult, present
from time_strings import minutes_to_time_old_string


def local_now() -> datetime:
    return datetime.now().astimezone()


class FetchState(Enum):
    IDLE = "idle"
    FETCHING = "fetching"
    COOLDOWN = "cooldown"


class WeatherService:
    """
    Service that decides when to ask a weather provider for new data.

    The state machine goes Idle -> Fetching -> Cooldown(until) -> Idle on
    success, and Idle -> Fetching -> Idle on failure. How long a successful
    fetch stays valid depends on how old the observation was: half its age,
    but never less than min_valid_minutes or more than max_valid_minutes.
    """

    def __init__(
        self,
        provider: WeatherProviderBase,
        min_valid_minutes: int = 30,
        max_valid_minutes: int = 60,
        clock: Callable[[], datetime] = local_now,
        initial_status: str = "Waiting for weather data..."
    ):
        """
        Initialize weather service.

        Args:
            provider: Weather provider to use
            min_valid_minutes: Shortest wait after a successful fetch
            max_valid_minutes: Longest wait after a successful fetch
            clock: Returns the current time, timezone aware
            initial_status: Excuse to show before anything has been fetched
        """
        self.provider = provider
        self.min_valid_minutes = min_valid_minutes
        self.max_valid_minutes = max_valid_minutes
        self.clock = clock

        self._lock = threading.Lock()
        self._fetching = False
        self._cooldown_until: Optional[datetime] = None
        self._observation: Optional[Observation] = None
        self._status = initial_status

    @property
    def state(self) -> FetchState:
        with self._lock:
            return self._current_state(self.clock())

    @property
    def cooldown_until(self) -> Optional[datetime]:
        """When the current Cooldown ends, or None if not cooling down."""
        with self._lock:
            if self._current_state(self.clock()) is FetchState.COOLDOWN:
                return self._cooldown_until
            return None

    @property
    def observation(self) -> Optional[Observation]:
        with self._lock:
            return self._observation

    @property
    def status(self) -> str:
        with self._lock:
            return self._status

    def _current_state(self, now: datetime) -> FetchState:
        if self._fetching:
            return FetchState.FETCHING
        if self._cooldown_until is not None and now < self._cooldown_until:
            return FetchState.COOLDOWN
        return FetchState.IDLE

    def fetch_valid_minutes(self, observation_age: int) -> int:
        """If weather is 80 minutes old, wait 40 minutes until the next fetch."""
        return max(self.min_valid_minutes, min(self.max_valid_minutes, observation_age // 2))

    def update(self) -> Optional[Observation]:
        """
        Fetch new weather unless a fetch is running or cooling down.

        Returns:
            The cached observation if a fetch succeeded, otherwise None
        """
        with self._lock:
            now = self.clock()
            state = self._current_state(now)
            if state is FetchState.FETCHING:
                logging.debug("Fetch already in progress, skipping")
                return None
            if state is FetchState.COOLDOWN:
                minutes_left = (self._cooldown_until - now) // timedelta(minutes=1)
                logging.debug(f"Last successful fetch valid for {minutes_left} more minutes, skipping")
                return None
            self._fetching = True
            self._cooldown_until = None

        try:
            candidate = self.provider.get_current()
        except WeatherProviderError as e:
            logging.warning(f"Weather fetch failed: {e}")
            self._finish_failed(str(e))
            return None
        except ParseError as e:
            logging.warning(f"Error parsing weather: {e}")
            self._finish_failed(str(e))
            return None
        except Exception:
            self._finish_failed("Weather fetch failed")
            raise

        with self._lock:
            now = self.clock()
            candidate_age = age_minutes(candidate, now)
            valid_minutes = self.fetch_valid_minutes(candidate_age)
            self._cooldown_until = now + timedelta(minutes=valid_minutes)
            self._fetching = False

            replacement = try_replace(self._observation, candidate, now)
            if replacement is not candidate:
                logging.info(f"Ignoring observation not newer than the one we have: {candidate}")
                return self._observation

            self._observation = candidate
            self._status = self._describe(candidate, candidate_age)
            logging.info(f"New weather: {candidate}, next fetch in {valid_minutes} minutes")
            return candidate

    def _finish_failed(self, status: str) -> None:
        with self._lock:
            self._fetching = False
            self._status = status

    @staticmethod
    def _describe(observation: Observation, observation_age: int) -> str:
        if observation_age == UNKNOWN_AGE_MINUTES:
            description = "Undated weather"
        else:
            description = f"{minutes_to_time_old_string(observation_age)} weather"
        if observation.station_name is not None:
            description += f" from {observation.station_name}"
        return description

    def present(self, options: DisplayOptions) -> PresentationResult:
        """Present the cached observation, or the status if there is none."""
        with self._lock:
            observation = self._observation
            status = self._status
            now = self.clock()
        return present(observation, status, options, now)
