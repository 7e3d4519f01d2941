"""
Tests for CourseFeedClient, feed schemas and GpxDownloader.
"""

import asyncio

import httpx
import pytest

from course_pipeline.features.feed import (
    CourseFeedClient,
    FeedAPIError,
    FeedFormatError,
    FeedItem,
    GpxDownloader,
    GpxDownloadError,
    parse_feed_body,
)


BASE_URL = "https://feed.test/Durunubi"

ITEM_A1 = {
    "crsIdx": "A1",
    "crsKorNm": "광안리 해변길",
    "crsDstnc": 9,
    "crsTotlRqrmHour": "120",
    "crsLevel": "1",
    "crsTourInfo": "광안대교 야경",
    "sigun": "부산 수영구",
    "gpxpath": "https://gpx.test/A1.gpx",
}


def _envelope(items, total_count, result_code="0000"):
    return {
        "response": {
            "header": {"resultCode": result_code, "resultMsg": "OK"},
            "body": {
                "items": items,
                "numOfRows": 50,
                "pageNo": 1,
                "totalCount": total_count,
            },
        }
    }


def _client(handler):
    return CourseFeedClient(
        base_url=BASE_URL,
        service_key="secret",
        mobile_app="tests",
        transport=httpx.MockTransport(handler),
    )


# =============================================================================
# Test Schemas
# =============================================================================

class TestFeedItem:

    def test_aliases_and_number_coercion(self):
        item = FeedItem.model_validate(ITEM_A1)
        assert item.external_id == "A1"
        assert item.distance == "9"
        assert item.gpx_url == "https://gpx.test/A1.gpx"

    def test_district_from_locale(self):
        assert FeedItem.model_validate(ITEM_A1).district == "수영구"
        assert FeedItem(locale="부산").district is None
        assert FeedItem().district is None


class TestParseFeedBody:

    def test_item_list(self):
        page = parse_feed_body(_envelope({"item": [ITEM_A1, ITEM_A1]}, 2))
        assert page.total_count == 2
        assert len(page.items) == 2

    def test_single_item_object(self):
        page = parse_feed_body(_envelope({"item": ITEM_A1}, 1))
        assert [item.external_id for item in page.items] == ["A1"]

    def test_empty_items_string(self):
        page = parse_feed_body(_envelope("", 0))
        assert page.items == []

    def test_missing_body(self):
        with pytest.raises(KeyError):
            parse_feed_body({"response": {}})


# =============================================================================
# Test Client
# =============================================================================

class TestFetchPage:

    def test_request_parameters(self):
        seen = []

        def handler(request):
            seen.append(request)
            return httpx.Response(200, json=_envelope({"item": [ITEM_A1]}, 1))

        page = asyncio.run(_client(handler).fetch_page(page_no=3, page_size=50))

        assert page.items[0].name == "광안리 해변길"
        request = seen[0]
        assert request.url.path == "/Durunubi/courseList"
        params = request.url.params
        assert params["pageNo"] == "3"
        assert params["numOfRows"] == "50"
        assert params["MobileOS"] == "ETC"
        assert params["MobileApp"] == "tests"
        assert params["serviceKey"] == "secret"
        assert params["_type"] == "json"
        assert params["brdDiv"] == "DNWW"

    def test_non_200_is_api_error(self):
        client = _client(lambda request: httpx.Response(500, text="boom"))
        with pytest.raises(FeedAPIError):
            asyncio.run(client.fetch_page(1, 50))

    def test_error_result_code_is_api_error(self):
        client = _client(lambda request: httpx.Response(200, json=_envelope("", 0, result_code="30")))
        with pytest.raises(FeedAPIError):
            asyncio.run(client.fetch_page(1, 50))

    def test_xml_error_document_is_format_error(self):
        client = _client(lambda request: httpx.Response(
            200, text="<OpenAPI_ServiceResponse><cmmMsgHeader/></OpenAPI_ServiceResponse>"
        ))
        with pytest.raises(FeedFormatError):
            asyncio.run(client.fetch_page(1, 50))

    def test_malformed_body_is_format_error(self):
        client = _client(lambda request: httpx.Response(200, json={"response": {"header": {}}}))
        with pytest.raises(FeedFormatError):
            asyncio.run(client.fetch_page(1, 50))

    def test_transport_error_is_api_error(self):
        def handler(request):
            raise httpx.ConnectTimeout("timeout", request=request)

        with pytest.raises(FeedAPIError):
            asyncio.run(_client(handler).fetch_page(1, 50))


class TestGpxDownloader:

    def test_returns_bytes(self):
        downloader = GpxDownloader(transport=httpx.MockTransport(
            lambda request: httpx.Response(200, content=b"<gpx/>")
        ))
        assert asyncio.run(downloader.download("https://gpx.test/A1.gpx")) == b"<gpx/>"

    def test_404_raises(self):
        downloader = GpxDownloader(transport=httpx.MockTransport(
            lambda request: httpx.Response(404)
        ))
        with pytest.raises(GpxDownloadError):
            asyncio.run(downloader.download("https://gpx.test/missing.gpx"))
