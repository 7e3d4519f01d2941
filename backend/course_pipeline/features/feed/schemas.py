"""
Course feed schemas.

Pydantic models for the course list response. Item fields are raw,
unvalidated strings; the reconciler validates them field by field.
"""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .config import FeedConfig


class FeedItem(BaseModel):
    """One course as reported by the feed."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    external_id: Optional[str] = Field(default=None, alias="crsIdx")
    name: Optional[str] = Field(default=None, alias="crsKorNm")
    distance: Optional[str] = Field(default=None, alias="crsDstnc")
    required_time: Optional[str] = Field(default=None, alias="crsTotlRqrmHour")
    level: Optional[str] = Field(default=None, alias="crsLevel")
    tour_info: Optional[str] = Field(default=None, alias="crsTourInfo")
    locale: Optional[str] = Field(default=None, alias="sigun")
    gpx_url: Optional[str] = Field(default=None, alias="gpxpath")

    @field_validator("*", mode="before")
    @classmethod
    def coerce_to_str(cls, v: Any) -> Optional[str]:
        """The provider sends numbers for some fields; keep everything as text."""
        if v is None:
            return None
        return str(v)

    @property
    def district(self) -> Optional[str]:
        """Second token of the locale ("부산 해운대구" -> "해운대구")."""
        if not self.locale:
            return None
        tokens = self.locale.split()
        index = FeedConfig.LOCALE_DISTRICT_TOKEN
        return tokens[index] if len(tokens) > index else None


class FeedPage(BaseModel):
    """One page of the course list."""
    total_count: int = 0
    items: list[FeedItem] = []


def parse_feed_body(payload: dict) -> FeedPage:
    """
    Build a FeedPage from the provider envelope.

    Envelope: {"response": {"header": ..., "body": {"totalCount": n,
    "items": {"item": [...]}}}}. `items` may be an empty string when the
    page is empty, and `item` a single object when it holds one course.

    Raises:
        KeyError / TypeError / ValueError: If the envelope is malformed
    """
    body = payload["response"]["body"]
    total_count = int(body.get("totalCount") or 0)

    items = body.get("items")
    raw_items: Any = items.get("item") if isinstance(items, dict) else None
    if raw_items is None:
        raw_items = []
    elif isinstance(raw_items, dict):
        raw_items = [raw_items]
    elif not isinstance(raw_items, list):
        raise TypeError(f"Unexpected items type: {type(raw_items).__name__}")

    return FeedPage(
        total_count=total_count,
        items=[FeedItem.model_validate(item) for item in raw_items],
    )
