"""OpenWeatherMap client: the HTTP-backed IWeatherSource."""

from __future__ import annotations

import logging
from typing import Optional

import httpx
from pydantic import ValidationError

from ..core.domain.errors import SourceError
from ..core.domain.interfaces import IWeatherSource
from ..core.domain.measurement import Measurement
from .location import LocationSpecifier
from .schemas import ErrorReport, WeatherReportCurrent

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.openweathermap.org/data/2.5/"
DEFAULT_TIMEOUT = 10.0  # seconds


class OpenWeatherMapClient(IWeatherSource):
    """Fetches current weather for one fixed location.

    Every failure (network, HTTP body that is not a weather report,
    OpenWeatherMap error report) is raised as SourceError, so the fetch
    loop's error policy applies to all of them.
    """

    def __init__(
        self,
        location: LocationSpecifier,
        api_key: str,
        base_url: Optional[str] = None,
        timeout: float = DEFAULT_TIMEOUT,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        base = base_url or DEFAULT_BASE_URL
        if not base.endswith("/"):
            base += "/"
        self._url = base + "weather"
        self._params = location.to_params() + [("APPID", api_key)]
        self._location = location
        self._client = http_client or httpx.AsyncClient(timeout=timeout)

    @property
    def url(self) -> str:
        return self._url

    async def fetch_current(self) -> Measurement:
        try:
            response = await self._client.get(self._url, params=self._params)
        except httpx.HTTPError as e:
            raise SourceError(f"Request to {self._url} failed: {e}") from e

        body = response.text
        logger.debug("[OWM] HTTP %d (%d bytes) for %s", response.status_code, len(body), self._location)
        return self._parse(body)

    @staticmethod
    def _parse(body: str) -> Measurement:
        try:
            report = WeatherReportCurrent.model_validate_json(body)
        except ValidationError as bad_error:
            try:
                parsed = ErrorReport.model_validate_json(body)
            except ValidationError:
                raise SourceError(str(bad_error)) from bad_error
            raise SourceError(
                f'Error code {parsed.cod} with message "{parsed.message}"'
            ) from bad_error

        main = report.main
        return Measurement.create(main.temp, main.pressure, main.humidity)

    async def aclose(self) -> None:
        await self._client.aclose()
