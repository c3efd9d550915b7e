"""HTTP client for a Nominatim-compatible geocoding service."""

from __future__ import annotations

import logging

import httpx

from ...config import settings
from ...errors import CoordinateValidationError, GeocodingError
from ...models.domain import GeocodeResult
from ..geospatial import validate_coordinates

logger = logging.getLogger(__name__)


class NominatimGeocoder:
    """Forward geocoding of free-text addresses.

    Results are a convenience for filling in coordinates; assignment never
    depends on them. Failures are reported once and never retried.
    """

    def __init__(
        self,
        base_url: str | None = None,
        user_agent: str | None = None,
        timeout: float | None = None,
        client: httpx.Client | None = None,
    ) -> None:
        self.base_url = (base_url or settings.geocoder_base_url).rstrip("/")
        self.user_agent = user_agent or settings.geocoder_user_agent
        self.timeout = timeout if timeout is not None else settings.geocoder_timeout_seconds
        self._client = client

    def _get_client(self) -> httpx.Client:
        return httpx.Client(timeout=httpx.Timeout(self.timeout, connect=5.0))

    def geocode(self, query: str) -> GeocodeResult:
        text = (query or "").strip()
        if not text:
            raise ValueError("Missing query param q")

        params = {"q": text, "format": "json", "limit": "1"}
        headers = {"User-Agent": self.user_agent}
        client = self._client or self._get_client()
        try:
            response = client.get(f"{self.base_url}/search", params=params, headers=headers)
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPStatusError as exc:
            logger.warning(f"Geocoding returned HTTP {exc.response.status_code} for {text!r}")
            raise GeocodingError("Geocoding failed") from exc
        except httpx.HTTPError as exc:
            logger.warning(f"Geocoding service unreachable: {exc}")
            raise GeocodingError(f"Geocoding service unreachable: {exc}") from exc
        except ValueError as exc:
            raise GeocodingError("Geocoding service returned invalid JSON") from exc
        finally:
            if self._client is None:
                client.close()

        if not isinstance(data, list) or not data:
            return GeocodeResult(found=False)

        first = data[0]
        try:
            lat, lng = validate_coordinates(float(first["lat"]), float(first["lon"]))
        except (KeyError, TypeError, ValueError, CoordinateValidationError) as exc:
            raise GeocodingError(f"Geocoding result has unusable coordinates: {exc}") from exc

        return GeocodeResult(
            found=True,
            lat=lat,
            lng=lng,
            display_name=str(first.get("display_name") or ""),
        )
