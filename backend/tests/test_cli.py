"""
Tests for the click CLI (commands that need no network or database).
"""

import json

from click.testing import CliRunner

from course_pipeline.cli import cli


GPX = (
    '<?xml version="1.0" encoding="UTF-8"?>'
    '<gpx version="1.1" creator="test" xmlns="http://www.topografix.com/GPX/1/1"><trk><trkseg>'
    '<trkpt lat="35.0" lon="129.000"><ele>1</ele></trkpt>'
    '<trkpt lat="35.0" lon="129.001"><ele>2</ele></trkpt>'
    '<trkpt lat="35.005" lon="129.002"><ele>3</ele></trkpt>'
    '<trkpt lat="35.0" lon="129.003"><ele>4</ele></trkpt>'
    '<trkpt lat="35.0" lon="129.004"><ele>5</ele></trkpt>'
    "</trkseg></trk></gpx>"
)


class TestSimplifyCommand:

    def test_prints_simplified_points(self, tmp_path):
        gpx_file = tmp_path / "spike.gpx"
        gpx_file.write_text(GPX, encoding="utf-8")

        result = CliRunner().invoke(cli, ["simplify", str(gpx_file), "--tolerance", "0.001"])

        assert result.exit_code == 0, result.output
        points = json.loads(result.stdout[result.stdout.index("["):])
        assert [p["sequence"] for p in points] == [1, 2, 3]
        assert [p["ele"] for p in points] == [1.0, 3.0, 5.0]

    def test_empty_gpx_fails(self, tmp_path):
        gpx_file = tmp_path / "empty.gpx"
        gpx_file.write_text(
            '<?xml version="1.0"?><gpx version="1.1" creator="t" '
            'xmlns="http://www.topografix.com/GPX/1/1"></gpx>',
            encoding="utf-8",
        )

        result = CliRunner().invoke(cli, ["simplify", str(gpx_file)])

        assert result.exit_code != 0
        assert "No track or route points" in result.output
