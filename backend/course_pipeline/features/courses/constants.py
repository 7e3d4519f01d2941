"""
Course enums and area/theme membership tables.

District names are the reverse-geocoder's district-level names
(region_2depth_name), so they stay in Korean.
"""

from enum import Enum
from typing import Optional


class CourseLevel(str, Enum):
    """Course difficulty."""
    EASY = "EASY"
    MEDIUM = "MEDIUM"
    HARD = "HARD"

    @classmethod
    def from_feed_value(cls, value: Optional[str]) -> "CourseLevel":
        """
        Map the feed's level code ("1"/"2"/"3") to a level.

        Raises:
            ValueError: If the code is not recognised
        """
        if value is None:
            raise ValueError("Course level is missing")
        try:
            return FEED_LEVEL_CODES[value.strip()]
        except KeyError:
            raise ValueError(f"Unexpected course level value: {value!r}") from None


FEED_LEVEL_CODES: dict[str, CourseLevel] = {
    "1": CourseLevel.EASY,
    "2": CourseLevel.MEDIUM,
    "3": CourseLevel.HARD,
}


class Area(str, Enum):
    """Area bucket a course belongs to (exactly one per course)."""
    HAEUN_GWANGAN = "HAEUN_GWANGAN"
    SONGJEONG_GIJANG = "SONGJEONG_GIJANG"
    SEOMYEON_DONGNAE = "SEOMYEON_DONGNAE"
    WONDOSIM = "WONDOSIM"
    SOUTHERN_COAST = "SOUTHERN_COAST"
    WESTERN_NAKDONGRIVER = "WESTERN_NAKDONGRIVER"
    NORTHERN_BUSAN = "NORTHERN_BUSAN"
    ETC = "ETC"


class Theme(str, Enum):
    """Theme tags (a course may have any number)."""
    SEA = "SEA"
    RIVERSIDE = "RIVERSIDE"
    MOUNTAIN = "MOUNTAIN"
    DOWNTOWN = "DOWNTOWN"
    ETC = "ETC"


# Area -> districts. First match wins; a district appears in at most one area.
AREA_DISTRICTS: dict[Area, tuple[str, ...]] = {
    Area.HAEUN_GWANGAN: ("해운대구", "수영구"),
    Area.SONGJEONG_GIJANG: ("송정동", "기장군"),
    Area.SEOMYEON_DONGNAE: ("부산진구", "동래구", "연제구"),
    Area.WONDOSIM: ("중구", "동구", "서구", "영도구"),
    Area.SOUTHERN_COAST: ("남구",),
    Area.WESTERN_NAKDONGRIVER: ("사상구", "강서구", "사하구"),
    Area.NORTHERN_BUSAN: ("금정구", "북구"),
    Area.ETC: (),
}

# (district, sub-district) pairs classified as their own area regardless of
# AREA_DISTRICTS: Songjeong-dong is administratively in Haeundae-gu but
# treated as part of the Songjeong/Gijang zone.
AREA_OVERRIDES: dict[tuple[str, str], Area] = {
    ("해운대구", "송정동"): Area.SONGJEONG_GIJANG,
}

# Theme -> districts. Non-exclusive: a district may carry several themes.
THEME_DISTRICTS: dict[Theme, tuple[str, ...]] = {
    Theme.SEA: ("해운대구", "수영구", "기장군", "남구"),
    Theme.RIVERSIDE: ("사상구", "강서구", "사하구", "금정구", "북구"),
    Theme.MOUNTAIN: ("부산진구", "금정구", "남구"),
    Theme.DOWNTOWN: ("부산진구", "동래구", "연제구", "중구", "동구", "서구", "영도구"),
    Theme.ETC: (),
}
