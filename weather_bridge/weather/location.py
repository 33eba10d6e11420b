"""Location specifiers for the OpenWeatherMap current-weather endpoint."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class CityId:
    """Recommended by OpenWeatherMap; ids are listed in
    http://bulk.openweathermap.org/sample/city.list.json.gz
    """
    city_id: str

    def to_params(self) -> list[tuple[str, str]]:
        return [("id", self.city_id)]


@dataclass(frozen=True)
class CityName:
    city: str
    country: str = ""

    def to_params(self) -> list[tuple[str, str]]:
        if not self.country:
            return [("q", self.city)]
        return [("q", f"{self.city},{self.country}")]


@dataclass(frozen=True)
class Coordinates:
    lat: float
    lon: float

    def to_params(self) -> list[tuple[str, str]]:
        return [("lat", f"{self.lat}"), ("lon", f"{self.lon}")]


@dataclass(frozen=True)
class ZipCode:
    zip: str
    country: str = ""

    def to_params(self) -> list[tuple[str, str]]:
        if not self.country:
            return [("zip", self.zip)]
        return [("zip", f"{self.zip},{self.country}")]


LocationSpecifier = CityId | CityName | Coordinates | ZipCode


def parse_coordinates(value: str) -> Coordinates:
    """Parse ``"LAT,LON"``."""
    parts = [p.strip() for p in value.split(",")]
    if len(parts) != 2:
        raise ValueError(f"expected LAT,LON, got {value!r}")
    lat, lon = float(parts[0]), float(parts[1])
    if not -90.0 <= lat <= 90.0:
        raise ValueError(f"latitude out of range: {lat}")
    if not -180.0 <= lon <= 180.0:
        raise ValueError(f"longitude out of range: {lon}")
    return Coordinates(lat, lon)


def parse_pair(value: str) -> tuple[str, str]:
    """Split ``"NAME[,COUNTRY]"`` into (name, country)."""
    name, _, country = value.partition(",")
    return name.strip(), country.strip()
