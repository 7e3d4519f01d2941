"""
Reverse geocoding and area/theme classification.

Usage:
    from course_pipeline.features.geocoding import GeoClassifier, KakaoGeocodingClient
"""

from .client import AddressInfo, GeocodingError, KakaoGeocodingClient, extract_address_info
from .classifier import Classification, GeoClassifier, area_for, themes_for

__all__ = [
    "AddressInfo",
    "GeocodingError",
    "KakaoGeocodingClient",
    "extract_address_info",
    "Classification",
    "GeoClassifier",
    "area_for",
    "themes_for",
]
