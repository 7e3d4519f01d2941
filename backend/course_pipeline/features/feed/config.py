"""
Course feed configuration constants.

Environment-driven values (URL, key, page size, region) live in Settings.
"""


class FeedConfig:
    """Fixed request parameters of the course feed."""

    # Course list endpoint, relative to settings.feed_base_url
    COURSE_LIST_ENDPOINT = "/courseList"

    MOBILE_OS = "ETC"
    RESPONSE_TYPE = "json"

    # Board division: walking/running courses only (cycling is "DNBW")
    BOARD_DIVISION = "DNWW"

    # Result codes the provider uses for success
    SUCCESS_CODES = ("0000", "00")

    # Index of the district token in the locale field ("부산 해운대구")
    LOCALE_DISTRICT_TOKEN = 1
