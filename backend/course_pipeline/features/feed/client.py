"""
Course feed API client.

Fetches pages of the public running-course list and the GPX files the
feed links to.
"""

import logging
from typing import Optional

import httpx
from pydantic import ValidationError

from course_pipeline.config import settings
from .config import FeedConfig
from .schemas import FeedPage, parse_feed_body

logger = logging.getLogger(__name__)


# =============================================================================
# Exceptions
# =============================================================================

class FeedError(Exception):
    """Base course feed error."""
    pass


class FeedAPIError(FeedError):
    """Transport failure or non-success response from the feed."""
    pass


class FeedFormatError(FeedError):
    """Feed responded, but the body is not a usable course list."""
    pass


class GpxDownloadError(FeedError):
    """GPX file linked from the feed could not be downloaded."""
    pass


# =============================================================================
# Feed Client
# =============================================================================

class CourseFeedClient:
    """
    Async client for the course list API.

    Usage:
        client = CourseFeedClient()
        page = await client.fetch_page(page_no=1, page_size=50)
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        service_key: Optional[str] = None,
        mobile_app: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = (base_url or settings.feed_base_url).rstrip("/")
        self.service_key = service_key if service_key is not None else settings.feed_service_key
        self.mobile_app = mobile_app or settings.feed_mobile_app
        self.timeout = timeout or settings.feed_timeout_seconds
        self._transport = transport

    async def fetch_page(self, page_no: int, page_size: int) -> FeedPage:
        """
        Fetch one page of the course list.

        Raises:
            FeedAPIError: On transport failure or non-success status
            FeedFormatError: If the body cannot be parsed
        """
        params = {
            "numOfRows": page_size,
            "pageNo": page_no,
            "MobileOS": FeedConfig.MOBILE_OS,
            "MobileApp": self.mobile_app,
            "serviceKey": self.service_key or "",
            "_type": FeedConfig.RESPONSE_TYPE,
            "brdDiv": FeedConfig.BOARD_DIVISION,
        }

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.get(
                    f"{self.base_url}{FeedConfig.COURSE_LIST_ENDPOINT}",
                    params=params,
                )
        except httpx.HTTPError as e:
            raise FeedAPIError(f"Request failed: page={page_no}: {e}") from e

        if response.status_code != 200:
            raise FeedAPIError(
                f"API error: {response.status_code} - {response.text[:200]}"
            )

        try:
            payload = response.json()
        except ValueError as e:
            # The provider answers with an XML error document on bad keys
            raise FeedFormatError(f"Non-JSON response: {response.text[:200]}") from e

        _check_result_code(payload)

        try:
            page = parse_feed_body(payload)
        except (KeyError, TypeError, ValueError, ValidationError) as e:
            raise FeedFormatError(f"Malformed course list: page={page_no}: {e}") from e

        logger.debug(
            f"Fetched feed page: pageNo={page_no}, items={len(page.items)}, "
            f"totalCount={page.total_count}"
        )
        return page


def _check_result_code(payload: dict) -> None:
    try:
        header = payload["response"]["header"]
    except (KeyError, TypeError):
        return
    if not isinstance(header, dict):
        return

    code = header.get("resultCode")
    if code is not None and str(code) not in FeedConfig.SUCCESS_CODES:
        raise FeedAPIError(f"Feed error: resultCode={code}, message={header.get('resultMsg')}")


# =============================================================================
# GPX Download
# =============================================================================

class GpxDownloader:
    """Downloads GPX files by URL."""

    def __init__(
        self,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.timeout = timeout or settings.feed_timeout_seconds
        self._transport = transport

    async def download(self, url: str) -> bytes:
        """
        Fetch raw GPX bytes.

        Raises:
            GpxDownloadError: On transport failure or non-200 status
        """
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout,
                transport=self._transport,
                follow_redirects=True,
            ) as client:
                response = await client.get(url)
        except httpx.HTTPError as e:
            raise GpxDownloadError(f"Download failed: {url}: {e}") from e

        if response.status_code != 200:
            raise GpxDownloadError(f"Download failed: {url}: status={response.status_code}")

        return response.content
