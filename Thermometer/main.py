"""Command line thermometer showing the outdoor temperature."""
import argparse
import logging
import os
import signal
import sys
import time
from typing import Tuple

from dotenv import load_dotenv

from weather_service import WeatherService
from openweather_provider import OpenWeatherProvider
from weather_presenter import DisplayOptions, PresentationResult
from time_strings import is_fahrenheit

BASE_DIR = os.path.dirname(os.path.abspath(__file__))
DEFAULT_LOG_FILE = os.path.join(BASE_DIR, "thermometer.log")


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser("Outdoor thermometer")
    parser.add_argument("--log-file", default=DEFAULT_LOG_FILE)
    parser.add_argument("--show-metadata", action="store_true", help="Show observation time and station name")
    parser.add_argument("--12-hour", dest="use_12_hour", action="store_true", help="Show times as 3:42PM")
    parser.add_argument("--fahrenheit", action="store_true", help="Overrides WEATHER_UNITS")
    parser.add_argument("--wind-chill", action="store_true")
    parser.add_argument("--force-excuse", action="store_true", help="Always show the status line")
    parser.add_argument("--refresh", type=float, default=60.0, help="Seconds between display refreshes")
    parser.add_argument("--timeout", type=int, default=60, help="HTTP timeout in seconds")
    parser.add_argument("--once", action="store_true", help="Fetch and print once, then exit")
    parser.add_argument("--verbose", action="store_true")
    return parser.parse_args(argv)


def setup_logging(log_file: str, verbose: bool) -> None:
    log_level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(levelname)s - %(message)s",
        handlers=[
            logging.StreamHandler(sys.stdout),
            logging.FileHandler(log_file)
        ]
    )


def load_config() -> Tuple[str, float, float, str]:
    load_dotenv()
    api_key = os.getenv("WEATHER_API_KEY")
    lat = os.getenv("WEATHER_LAT")
    lon = os.getenv("WEATHER_LON")
    units = os.getenv("WEATHER_UNITS", "Celsius")

    if api_key is None:
        raise SystemExit("Missing WEATHER_API_KEY in environment")
    if not lat or not lon:
        raise SystemExit("Missing WEATHER_LAT/WEATHER_LON in environment")

    try:
        lat_val = float(lat)
        lon_val = float(lon)
    except ValueError as exc:
        raise SystemExit(f"Invalid coordinates: {exc}") from exc

    logging.info("Configuration loaded: lat=%s lon=%s units=%s", lat_val, lon_val, units)
    return api_key, lat_val, lon_val, units


def build_display_options(args: argparse.Namespace, units: str) -> DisplayOptions:
    return DisplayOptions(
        show_metadata=args.show_metadata,
        use_24_hour_clock=not args.use_12_hour,
        use_celsius=not (args.fahrenheit or is_fahrenheit(units)),
        apply_wind_chill=args.wind_chill,
        force_excuse=args.force_excuse,
    )


def build_weather_service(api_key: str, lat: float, lon: float, args: argparse.Namespace) -> WeatherService:
    provider = OpenWeatherProvider(
        api_key=api_key,
        lat=lat,
        lon=lon,
        timeout=args.timeout,
    )
    service = WeatherService(provider=provider)
    logging.info("Weather service ready")
    return service


def format_display(result: PresentationResult) -> str:
    if not result.subtext_text:
        return result.temperature_text
    return f"{result.temperature_text}  {result.subtext_text}"


def weather_loop(service: WeatherService, options: DisplayOptions, args: argparse.Namespace) -> None:
    last_line = None
    while True:
        service.update()
        line = format_display(service.present(options))
        if line != last_line:
            print(line, flush=True)
            logging.info("Displaying: <%s>", line)
            last_line = line

        if args.once:
            return
        time.sleep(max(args.refresh, 1.0))


def signal_handler(signum, frame):
    logging.info("Received signal %s, shutting down", signum)
    raise KeyboardInterrupt()


def main(argv=None) -> None:
    args = parse_args(argv)
    setup_logging(args.log_file, args.verbose)
    api_key, lat, lon, units = load_config()

    options = build_display_options(args, units)
    service = build_weather_service(api_key, lat, lon, args)

    signal.signal(signal.SIGINT, signal_handler)
    signal.signal(signal.SIGTERM, signal_handler)

    try:
        weather_loop(service, options, args)
    except KeyboardInterrupt:
        logging.info("Stopping thermometer")


if __name__ == "__main__":
    main()
