"""
Tests for GPXParserService.

Covers track/route precedence, sequencing across segments, missing
elevation and malformed documents.
"""

import pytest

from course_pipeline.features.gpx import GPXParserService, GpxParseError, PointSource


# =============================================================================
# Test Data
# =============================================================================

GPX_HEADER = (
    '<?xml version="1.0" encoding="UTF-8"?>\n'
    '<gpx version="1.1" creator="test" xmlns="http://www.topografix.com/GPX/1/1">\n'
)
GPX_FOOTER = "</gpx>\n"


def _gpx(body: str) -> bytes:
    return (GPX_HEADER + body + GPX_FOOTER).encode("utf-8")


def _trkpt(lat, lon, ele=None, tag="trkpt"):
    ele_xml = f"<ele>{ele}</ele>" if ele is not None else ""
    return f'<{tag} lat="{lat}" lon="{lon}">{ele_xml}</{tag}>'


TWO_SEGMENT_TRACK = _gpx(
    "<trk><name>Gwangalli</name>"
    "<trkseg>"
    + _trkpt(35.1530, 129.1186, 5.0)
    + _trkpt(35.1535, 129.1190, 6.5)
    + "</trkseg><trkseg>"
    + _trkpt(35.1540, 129.1195, 8.0)
    + "</trkseg></trk>"
)

ROUTE_ONLY = _gpx(
    "<rte>"
    + _trkpt(35.10, 129.00, 1.0, tag="rtept")
    + _trkpt(35.11, 129.01, 2.0, tag="rtept")
    + "</rte>"
)

TRACK_AND_ROUTE = _gpx(
    "<rte>"
    + _trkpt(35.10, 129.00, 1.0, tag="rtept")
    + "</rte>"
    "<trk><trkseg>"
    + _trkpt(35.20, 129.20, 3.0)
    + _trkpt(35.21, 129.21, 4.0)
    + "</trkseg></trk>"
)

EMPTY_TRACK_WITH_ROUTE = _gpx(
    "<rte>"
    + _trkpt(35.10, 129.00, 1.0, tag="rtept")
    + "</rte>"
    "<trk><trkseg></trkseg></trk>"
)


# =============================================================================
# Test Parsing
# =============================================================================

class TestTrackParsing:
    """Track points across segments."""

    def test_points_in_document_order(self):
        points = GPXParserService.parse(TWO_SEGMENT_TRACK)
        assert [(p.lat, p.lon) for p in points] == [
            (35.1530, 129.1186),
            (35.1535, 129.1190),
            (35.1540, 129.1195),
        ]

    def test_sequence_is_contiguous_across_segments(self):
        points = GPXParserService.parse(TWO_SEGMENT_TRACK)
        assert [p.sequence for p in points] == [1, 2, 3]

    def test_elevation_read(self):
        points = GPXParserService.parse(TWO_SEGMENT_TRACK)
        assert [p.elevation for p in points] == [5.0, 6.5, 8.0]

    def test_missing_elevation_defaults_to_zero(self):
        content = _gpx("<trk><trkseg>" + _trkpt(35.0, 129.0) + "</trkseg></trk>")
        points = GPXParserService.parse(content)
        assert points[0].elevation == 0.0

    def test_utf8_bom_accepted(self):
        points = GPXParserService.parse(b"\xef\xbb\xbf" + TWO_SEGMENT_TRACK)
        assert len(points) == 3


class TestTrackRoutePrecedence:
    """Track wins over route; route is the fallback."""

    def test_route_only(self):
        parsed = GPXParserService.read(ROUTE_ONLY)
        assert parsed.source == PointSource.ROUTE
        assert [p.sequence for p in parsed.points] == [1, 2]
        assert parsed.points[1].lat == 35.11

    def test_track_preferred_over_route(self):
        parsed = GPXParserService.read(TRACK_AND_ROUTE)
        assert parsed.source == PointSource.TRACK
        assert [p.lat for p in parsed.points] == [35.20, 35.21]

    def test_empty_track_falls_back_to_route(self):
        parsed = GPXParserService.read(EMPTY_TRACK_WITH_ROUTE)
        assert parsed.source == PointSource.ROUTE
        assert len(parsed.points) == 1

    def test_no_points_is_empty_not_error(self):
        parsed = GPXParserService.read(_gpx("<metadata><name>empty</name></metadata>"))
        assert parsed.source == PointSource.NONE
        assert parsed.points == []


class TestMalformed:
    """Invalid documents raise GpxParseError."""

    def test_not_xml(self):
        with pytest.raises(GpxParseError):
            GPXParserService.parse(b"this is not gpx")

    def test_parse_error_is_value_error(self):
        with pytest.raises(ValueError):
            GPXParserService.parse(b"<gpx><trk><trkseg><trkpt")

    @pytest.mark.parametrize("point", [
        '<trkpt lon="129.1"><ele>1</ele></trkpt>',
        '<trkpt lat="abc" lon="129.1"><ele>1</ele></trkpt>',
    ], ids=["missing_lat", "non_numeric_lat"])
    def test_point_without_valid_lat(self, point):
        with pytest.raises(GpxParseError):
            GPXParserService.parse(_gpx("<trk><trkseg>" + point + "</trkseg></trk>"))

    def test_unknown_declared_encoding(self):
        content = (
            b'<?xml version="1.0" encoding="no-such-charset"?>'
            b'<gpx version="1.1" creator="test"></gpx>'
        )
        with pytest.raises(GpxParseError):
            GPXParserService.parse(content)


class TestEncoding:
    """Bytes are decoded with the encoding the XML declaration names."""

    def test_latin1_declared_document(self):
        content = (
            '<?xml version="1.0" encoding="ISO-8859-1"?>\n'
            '<gpx version="1.1" creator="test" xmlns="http://www.topografix.com/GPX/1/1">'
            "<trk><name>Café</name><trkseg>"
            + _trkpt(35.10, 129.00, 1.0)
            + _trkpt(35.11, 129.01, 2.0)
            + "</trkseg></trk></gpx>"
        ).encode("latin-1")

        points = GPXParserService.parse(content)

        assert [p.sequence for p in points] == [1, 2]
        assert points[1].lat == 35.11

    def test_no_declaration_defaults_to_utf8(self):
        content = (
            '<gpx version="1.1" creator="test" xmlns="http://www.topografix.com/GPX/1/1">'
            "<trk><name>광안리</name><trkseg>" + _trkpt(35.15, 129.11, 3.0) + "</trkseg></trk></gpx>"
        ).encode("utf-8")

        assert len(GPXParserService.parse(content)) == 1
