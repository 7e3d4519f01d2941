"""
Area and theme classification.

Maps a course start point to one Area and any number of Themes through the
static membership tables in features.courses.constants. Classification never
fails: no match resolves to Area.ETC / an empty theme set.
"""

import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, Optional

from course_pipeline.features.courses.constants import (
    Area,
    Theme,
    AREA_DISTRICTS,
    AREA_OVERRIDES,
    THEME_DISTRICTS,
)
from .client import AddressInfo

logger = logging.getLogger(__name__)

ReverseGeocode = Callable[[float, float], Awaitable[AddressInfo]]


def area_for(district_name: Optional[str], sub_district_name: Optional[str] = None) -> Area:
    """
    Area for a district (and optional sub-district).

    The (district, sub-district) overrides are checked first, then the first
    area listing the district. No match gives Area.ETC.
    """
    if not district_name:
        return Area.ETC

    if sub_district_name:
        override = AREA_OVERRIDES.get((district_name, sub_district_name))
        if override is not None:
            return override

    for area, districts in AREA_DISTRICTS.items():
        if district_name in districts:
            return area

    logger.warning(
        f"No area matches district: districtName='{district_name}', "
        f"subDistrictName='{sub_district_name}'"
    )
    return Area.ETC


def themes_for(district_name: Optional[str]) -> frozenset[Theme]:
    """All themes whose table lists the district (possibly none)."""
    if not district_name:
        return frozenset()
    return frozenset(
        theme
        for theme, districts in THEME_DISTRICTS.items()
        if district_name in districts
    )


@dataclass(frozen=True)
class Classification:
    """Area, themes and the address they were derived from."""
    area: Area
    themes: frozenset[Theme]
    address: AddressInfo


class GeoClassifier:
    """
    Classifies course start points via a reverse-geocoding collaborator.

    Usage:
        classifier = GeoClassifier(KakaoGeocodingClient().lookup)
        result = await classifier.classify(lat, lon)
    """

    def __init__(self, reverse_geocode: ReverseGeocode):
        """
        Args:
            reverse_geocode: async (lon, lat) -> AddressInfo
        """
        self.reverse_geocode = reverse_geocode

    async def classify(
        self,
        lat: float,
        lon: float,
        fallback_district: Optional[str] = None
    ) -> Classification:
        """
        Classify a coordinate; one reverse-geocoding call per invocation.

        Args:
            lat, lon: Start point of the course
            fallback_district: District used when geocoding returns none
                (e.g. the district token of the feed's locale field)
        """
        address = await self.reverse_geocode(lon, lat)
        if address is None:
            address = AddressInfo()

        district = address.district_name or fallback_district
        return Classification(
            area=area_for(district, address.sub_district_name),
            themes=themes_for(district),
            address=address,
        )
