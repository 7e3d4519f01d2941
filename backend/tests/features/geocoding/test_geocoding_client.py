"""
Tests for KakaoGeocodingClient (HTTP mocked with httpx.MockTransport).
"""

import asyncio

import httpx

from course_pipeline.features.geocoding import AddressInfo, KakaoGeocodingClient


ADDRESS_URL = "https://geo.test/v2/local/geo/coord2address.json"

KAKAO_RESPONSE = {
    "meta": {"total_count": 1},
    "documents": [
        {
            "road_address": None,
            "address": {
                "address_name": "부산 해운대구 송정동 123",
                "region_1depth_name": "부산",
                "region_2depth_name": "해운대구",
                "region_3depth_name": "송정동",
            },
        }
    ],
}


def _client(handler, api_key="test-key"):
    return KakaoGeocodingClient(
        api_key=api_key,
        address_url=ADDRESS_URL,
        transport=httpx.MockTransport(handler),
    )


class TestLookup:

    def test_parses_district_and_sub_district(self):
        info = asyncio.run(_client(lambda request: httpx.Response(200, json=KAKAO_RESPONSE)).lookup(129.199, 35.178))
        assert info == AddressInfo("해운대구", "송정동")

    def test_request_shape(self):
        seen = []

        def handler(request):
            seen.append(request)
            return httpx.Response(200, json=KAKAO_RESPONSE)

        asyncio.run(_client(handler).lookup(129.199, 35.178))

        request = seen[0]
        assert request.headers["Authorization"] == "KakaoAK test-key"
        assert request.url.params["x"] == "129.199"
        assert request.url.params["y"] == "35.178"

    def test_no_documents_gives_empty_info(self):
        info = asyncio.run(
            _client(lambda request: httpx.Response(200, json={"documents": []})).lookup(0.0, 0.0)
        )
        assert info == AddressInfo(None, None)

    def test_http_error_gives_empty_info(self):
        info = asyncio.run(
            _client(lambda request: httpx.Response(401, json={"msg": "bad key"})).lookup(129.0, 35.0)
        )
        assert info == AddressInfo(None, None)

    def test_transport_error_gives_empty_info(self):
        def handler(request):
            raise httpx.ConnectError("down", request=request)

        info = asyncio.run(_client(handler).lookup(129.0, 35.0))
        assert info == AddressInfo(None, None)

    def test_missing_api_key_gives_empty_info(self):
        calls = []

        def handler(request):
            calls.append(request)
            return httpx.Response(200, json=KAKAO_RESPONSE)

        info = asyncio.run(_client(handler, api_key="").lookup(129.0, 35.0))
        assert info == AddressInfo(None, None)
        assert calls == []
