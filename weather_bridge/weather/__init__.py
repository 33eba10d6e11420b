"""Weather source - cliente OpenWeatherMap."""

from .client import DEFAULT_BASE_URL, OpenWeatherMapClient
from .location import CityId, CityName, Coordinates, LocationSpecifier, ZipCode

__all__ = [
    "DEFAULT_BASE_URL",
    "OpenWeatherMapClient",
    "CityId",
    "CityName",
    "Coordinates",
    "LocationSpecifier",
    "ZipCode",
]
