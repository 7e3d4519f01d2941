"""
Reverse geocoding client (Kakao Local API).

Resolves a coordinate to district / sub-district names. Lookups never raise:
on any failure the returned AddressInfo has None fields.
"""

import logging
from dataclasses import dataclass
from typing import Optional

import httpx

from course_pipeline.config import settings

logger = logging.getLogger(__name__)


class GeocodingError(Exception):
    """Reverse geocoding request failed."""
    pass


@dataclass(frozen=True)
class AddressInfo:
    """District-level and sub-district-level names of a coordinate."""
    district_name: Optional[str] = None
    sub_district_name: Optional[str] = None


class KakaoGeocodingClient:
    """
    Async client for Kakao coord2address.

    Uses the lot-number address (`address`) rather than the road address,
    which is missing for many coordinates.

    Usage:
        client = KakaoGeocodingClient()
        info = await client.lookup(lon=129.16, lat=35.16)
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        address_url: Optional[str] = None,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = api_key if api_key is not None else settings.kakao_rest_api_key
        self.address_url = address_url or settings.kakao_address_url
        self.timeout = timeout
        self._transport = transport

    async def lookup(self, lon: float, lat: float) -> AddressInfo:
        """
        Reverse-geocode a coordinate.

        Args:
            lon: Longitude (x)
            lat: Latitude (y)

        Returns:
            AddressInfo; fields are None when the lookup fails or finds nothing
        """
        try:
            document = await self._fetch_document(lon, lat)
        except GeocodingError as e:
            logger.warning(f"Reverse geocoding failed: x={lon}, y={lat}: {e}")
            return AddressInfo()

        if document is None:
            logger.warning(f"No address found: x={lon}, y={lat}")
            return AddressInfo()

        return extract_address_info(document)

    async def _fetch_document(self, lon: float, lat: float) -> Optional[dict]:
        if not self.api_key:
            raise GeocodingError("KAKAO_REST_API_KEY not configured")

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.get(
                    self.address_url,
                    params={"x": lon, "y": lat, "input_coord": "WGS84"},
                    headers={"Authorization": f"KakaoAK {self.api_key}"},
                )
        except httpx.HTTPError as e:
            raise GeocodingError(str(e)) from e

        if response.status_code != 200:
            raise GeocodingError(f"API error: {response.status_code} - {response.text[:200]}")

        try:
            documents = response.json().get("documents")
        except ValueError as e:
            raise GeocodingError(f"Invalid JSON: {e}") from e

        if isinstance(documents, list) and documents:
            return documents[0]
        return None


def extract_address_info(document: dict) -> AddressInfo:
    """Pull district / sub-district names out of a coord2address document."""
    address = document.get("address") or {}
    return AddressInfo(
        district_name=_blank_to_none(address.get("region_2depth_name")),
        sub_district_name=_blank_to_none(address.get("region_3depth_name")),
    )


def _blank_to_none(value: Optional[str]) -> Optional[str]:
    if value is None or not str(value).strip():
        return None
    return str(value).strip()
