"""CLI entry point for the weather bridge.

Every option can also be set through the environment (or a .env file);
command-line flags win over environment values.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from typing import Optional, Sequence

from common.config import env_bool, env_str, load_env_file
from common.logging_config import configure_logging

from .app import run_bridge
from .config import (
    DEFAULT_CHANNEL,
    DEFAULT_INTERVAL_SECS,
    BridgeSettings,
    MQTTConnectionSettings,
    PublishingSettings,
)
from .core.domain.units import TemperatureUnit
from .core.pipeline.fetcher import ErrorPolicy
from .weather.location import (
    CityId,
    CityName,
    LocationSpecifier,
    ZipCode,
    parse_coordinates,
    parse_pair,
)

logger = logging.getLogger(__name__)


def _positive_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not an integer: {value!r}")
    if number <= 0:
        raise argparse.ArgumentTypeError(f"must be positive: {number}")
    return number


def _port(value: str) -> int:
    number = _positive_int(value)
    if number > 65535:
        raise argparse.ArgumentTypeError(f"invalid port: {number}")
    return number


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="weather-bridge",
        description="Publish OpenWeatherMap current conditions to an MQTT broker",
    )

    p.add_argument("--api-key", default=env_str("API_KEY"), help="OpenWeatherMap API key [env: API_KEY]")

    loc = p.add_mutually_exclusive_group()
    loc.add_argument("--city-id", default=None, help="OpenWeatherMap city id [env: CITY_ID]")
    loc.add_argument("--city-name", default=None, help="CITY[,COUNTRY] [env: CITY_NAME]")
    loc.add_argument("--coordinates", default=None, help="LAT,LON [env: COORDINATES]")
    loc.add_argument("--zip-code", default=None, help="ZIP[,COUNTRY] [env: ZIP_CODE]")

    p.add_argument(
        "--units",
        choices=TemperatureUnit.choices(),
        default=env_str("UNITS", TemperatureUnit.CELSIUS.value),
        help="temperature unit of the published values [env: UNITS]",
    )
    p.add_argument(
        "--interval",
        type=_positive_int,
        default=env_str("INTERVAL_SECS", str(DEFAULT_INTERVAL_SECS)),
        help="seconds between API requests [env: INTERVAL_SECS]",
    )
    p.add_argument("--api-base", default=env_str("API_BASE"), help="override the API base URL [env: API_BASE]")
    p.add_argument(
        "--abort-on-api-error",
        action="store_true",
        default=env_bool("ABORT_ON_API_ERROR"),
        help="stop on the first failed API request [env: ABORT_ON_API_ERROR]",
    )

    p.add_argument("--device-name", default=env_str("DEVICE_NAME"), help="device id in topics [env: DEVICE_NAME]")
    p.add_argument("--topic-prefix", default=env_str("TOPIC_PREFIX"), help="prefix for all topics [env: TOPIC_PREFIX]")
    p.add_argument("--channel-thermometer", default=env_str("CHANNEL_THERMOMETER", DEFAULT_CHANNEL))
    p.add_argument("--channel-barometer", default=env_str("CHANNEL_BAROMETER", DEFAULT_CHANNEL))
    p.add_argument("--channel-hygrometer", default=env_str("CHANNEL_HYGROMETER", DEFAULT_CHANNEL))

    p.add_argument("--mqtt-host", default=env_str("MQTT_HOST"), help="broker host [env: MQTT_HOST]")
    p.add_argument("--mqtt-port", type=_port, default=env_str("MQTT_PORT", "1883"))
    p.add_argument("--mqtt-user", default=env_str("MQTT_USER"))
    p.add_argument("--mqtt-password", default=env_str("MQTT_PASSWORD"))
    p.add_argument("--mqtt-id", default=env_str("MQTT_ID", "weather"), help="MQTT client id [env: MQTT_ID]")
    p.add_argument("--mqtt-keepalive", type=_positive_int, default=env_str("MQTT_KEEPALIVE", "30"))

    p.add_argument("-v", "--verbose", action="count", default=0, help="increase log verbosity (repeatable)")
    return p


def resolve_location(args: argparse.Namespace) -> Optional[LocationSpecifier]:
    """Pick the location from flags first, then from the environment."""
    city_id = args.city_id
    city_name = args.city_name
    coordinates = args.coordinates
    zip_code = args.zip_code
    if not any((city_id, city_name, coordinates, zip_code)):
        city_id = env_str("CITY_ID")
        city_name = env_str("CITY_NAME")
        coordinates = env_str("COORDINATES")
        zip_code = env_str("ZIP_CODE")

    if city_id:
        return CityId(city_id)
    if city_name:
        return CityName(*parse_pair(city_name))
    if coordinates:
        return parse_coordinates(coordinates)
    if zip_code:
        return ZipCode(*parse_pair(zip_code))
    return None


def build_settings(args: argparse.Namespace, parser: argparse.ArgumentParser) -> BridgeSettings:
    if not args.api_key:
        parser.error("an API key is required (--api-key or API_KEY)")
    if not args.device_name:
        parser.error("a device name is required (--device-name or DEVICE_NAME)")
    if not args.mqtt_host:
        parser.error("an MQTT host is required (--mqtt-host or MQTT_HOST)")

    try:
        location = resolve_location(args)
    except ValueError as e:
        parser.error(str(e))
    if location is None:
        parser.error("a location is required (--city-id, --city-name, --coordinates or --zip-code)")
    # UNITS from the environment bypasses argparse choices.
    if args.units not in TemperatureUnit.choices():
        parser.error(f"invalid units {args.units!r} (choose from {', '.join(TemperatureUnit.choices())})")

    return BridgeSettings(
        api_key=args.api_key,
        location=location,
        publishing=PublishingSettings(
            device_name=args.device_name,
            topic_prefix=args.topic_prefix,
            channel_thermometer=args.channel_thermometer,
            channel_barometer=args.channel_barometer,
            channel_hygrometer=args.channel_hygrometer,
        ),
        mqtt=MQTTConnectionSettings(
            host=args.mqtt_host,
            port=args.mqtt_port,
            client_id=args.mqtt_id,
            username=args.mqtt_user,
            password=args.mqtt_password,
            keepalive=args.mqtt_keepalive,
        ),
        units=TemperatureUnit(args.units),
        interval_secs=args.interval,
        error_policy=ErrorPolicy.ABORT if args.abort_on_api_error else ErrorPolicy.CONTINUE,
        api_base=args.api_base,
        verbosity=args.verbose,
    )


def main(argv: Optional[Sequence[str]] = None) -> None:
    load_env_file()
    parser = build_parser()
    args = parser.parse_args(argv)
    settings = build_settings(args, parser)

    configure_logging(settings.verbosity)
    logger.info("Weather bridge started")
    logger.info(
        "Config: device=%s, units=%s, interval=%ss, policy=%s, broker=%s:%d",
        settings.publishing.device_name,
        settings.units.value,
        settings.interval_secs,
        settings.error_policy.value,
        settings.mqtt.host,
        settings.mqtt.port,
    )

    try:
        outcome = asyncio.run(run_bridge(settings))
    except KeyboardInterrupt:
        logger.info("Interrupted, shutting down")
        return

    sys.exit(f"Error: {outcome.message}")


if __name__ == "__main__":
    main()
