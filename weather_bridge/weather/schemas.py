"""Schemas Pydantic de la respuesta de OpenWeatherMap (current weather).

Only ``main`` is required; the rest is kept for diagnostics and tolerated
when missing, since OpenWeatherMap omits fields such as ``visibility`` or
``rain`` depending on the station.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field, field_validator


class Coordinates(BaseModel):
    lat: float
    lon: float


class Main(BaseModel):
    temp: float = Field(..., gt=0)  # kelvin (OpenWeatherMap "standard" units)
    temp_min: Optional[float] = None
    temp_max: Optional[float] = None
    pressure: float = Field(..., gt=0)  # hPa
    sea_level: Optional[float] = None
    grnd_level: Optional[float] = None
    humidity: float = Field(..., ge=0.0, le=100.0)
    temp_kf: Optional[float] = None

    @field_validator("temp", "pressure", "humidity")
    @classmethod
    def validate_finite(cls, v):
        if v != v:  # NaN check
            raise ValueError("Value is NaN")
        if v == float("inf") or v == float("-inf"):
            raise ValueError("Value is infinite")
        return v


class Weather(BaseModel):
    id: int
    main: str
    description: str
    icon: str


class Wind(BaseModel):
    speed: float
    deg: Optional[float] = None
    gust: Optional[float] = None


class Clouds(BaseModel):
    all: int


class Sys(BaseModel):
    country: Optional[str] = None
    sunrise: Optional[int] = None
    sunset: Optional[int] = None


class WeatherReportCurrent(BaseModel):
    main: Main
    coord: Optional[Coordinates] = None
    weather: list[Weather] = Field(default_factory=list)
    base: Optional[str] = None
    visibility: Optional[int] = None
    wind: Optional[Wind] = None
    clouds: Optional[Clouds] = None
    dt: Optional[int] = None
    sys: Optional[Sys] = None
    id: Optional[int] = None
    name: Optional[str] = None


class ErrorReport(BaseModel):
    """Cuerpo de error de OpenWeatherMap, p.ej. {"cod": 401, "message": "Invalid API key"}."""
    cod: int
    message: str
