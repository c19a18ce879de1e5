#!/usr/bin/env python3
"""
Tests for loading locations from delimited text, GPX and URLs.
"""

from pathlib import Path
from unittest.mock import MagicMock, patch

import gpxpy.gpx
import pytest
import requests

from spanmap.loader import load_nodes, parse_coordinate, parse_delimited, parse_gpx
from spanmap.spanning_tree import build_minimum_spanning_tree

FIXTURES = Path(__file__).parent / "fixtures"

GPX_WAYPOINTS = """<?xml version="1.0"?>
<gpx version="1.1" creator="spanmap-tests" xmlns="http://www.topografix.com/GPX/1/1">
  <wpt lat="-31.4135" lon="-64.1811">
    <ele>390</ele>
    <name>Cordoba</name>
    <desc>Capital city</desc>
    <type>Centro</type>
  </wpt>
  <wpt lat="-32.8895" lon="-68.8458">
    <name>Mendoza</name>
  </wpt>
  <wpt lat="-33.2950" lon="-66.3356">
  </wpt>
</gpx>
"""


class TestParseCoordinate:
    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("-31.4135", -31.4135),
            ("-31,4135", -31.4135),
            (" 64,5 ", 64.5),
            ("0", 0.0),
        ],
    )
    def test_valid(self, raw, expected):
        assert parse_coordinate(raw) == pytest.approx(expected)

    @pytest.mark.parametrize("raw", ["", "abc", "nan", "inf", "-31,41,35"])
    def test_invalid(self, raw):
        assert parse_coordinate(raw) is None


class TestParseDelimited:
    def test_fields_and_decimal_comma(self):
        nodes = parse_delimited(["2;Rio Cuarto;Cordoba;157010;active;-33,1232;-64,3493"])

        assert len(nodes) == 1
        node = nodes[0]
        assert node.id == "2"
        assert node.lat == pytest.approx(-33.1232)
        assert node.lng == pytest.approx(-64.3493)
        assert node.metadata == {
            "name": "Rio Cuarto",
            "region": "Cordoba",
            "population": "157010",
            "status": "active",
        }
        assert node.name == "Rio Cuarto"

    def test_skips_invalid_and_empty_rows(self):
        lines = [
            "id;name;region;population;status;lat;lng",
            "1;A;R;10;active;-31,4;-64,2",
            "",
            "2;B;R;10;active;;",
            "3;C;R;10;active",
            "4;D;R;10;active;x;-64",
            "5;E;R;10;active;-32.0;-65.0",
        ]
        nodes = parse_delimited(lines)
        assert [node.id for node in nodes] == ["1", "5"]

    def test_custom_delimiter(self):
        nodes = parse_delimited(["1|A|R|10|active|1.5|2.5"], delimiter="|")
        assert nodes[0].lat == 1.5
        assert nodes[0].lng == 2.5

    def test_fixture_file(self):
        with open(FIXTURES / "localities.csv", encoding="utf-8", newline="") as f:
            nodes = parse_delimited(f)

        assert [node.id for node in nodes] == ["1", "2", "3", "4", "5", "7"]
        assert nodes[-1].lat == pytest.approx(-33.2950)


class TestParseGpx:
    def test_waypoints_become_nodes(self):
        nodes = parse_gpx(GPX_WAYPOINTS)

        assert [node.id for node in nodes] == [0, 1, 2]
        assert [node.name for node in nodes] == ["Cordoba", "Mendoza", "2"]
        cordoba = nodes[0]
        assert cordoba.lat == pytest.approx(-31.4135)
        assert cordoba.lng == pytest.approx(-64.1811)
        assert cordoba.get("region") == "Centro"
        assert cordoba.get("description") == "Capital city"
        assert cordoba.get("elevation") == pytest.approx(390.0)
        assert nodes[1].get("region") is None
        assert nodes[2].name == "2"

    def test_repeated_names_get_distinct_ids(self):
        gpx = """<?xml version="1.0"?>
<gpx version="1.1" creator="spanmap-tests" xmlns="http://www.topografix.com/GPX/1/1">
  <wpt lat="45.0" lon="7.0"><name>Fuel</name></wpt>
  <wpt lat="45.5" lon="7.5"><name>Fuel</name></wpt>
  <wpt lat="46.0" lon="7.2"><name>Camp</name></wpt>
</gpx>
"""
        nodes = parse_gpx(gpx)

        assert len({node.id for node in nodes}) == 3
        assert [node.name for node in nodes] == ["Fuel", "Fuel", "Camp"]
        assert len(build_minimum_spanning_tree(nodes)) == 2

    def test_malformed_gpx(self):
        with pytest.raises(gpxpy.gpx.GPXException):
            parse_gpx("<gpx><wpt lat='oops'")


class TestLoadNodes:
    def test_loads_delimited_file(self):
        nodes = load_nodes(str(FIXTURES / "localities.csv"))
        assert len(nodes) == 6

    def test_loads_gpx_file(self, tmp_path):
        path = tmp_path / "places.GPX"
        path.write_text(GPX_WAYPOINTS, encoding="utf-8")
        nodes = load_nodes(str(path))
        assert len(nodes) == 3

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_nodes(str(tmp_path / "missing.csv"))

    @patch("spanmap.loader.requests.get")
    def test_loads_url(self, mock_get):
        response = MagicMock()
        response.text = "1;A;R;10;active;-31,4;-64,2\n2;B;R;10;active;-32,4;-64,2\n"
        mock_get.return_value = response

        nodes = load_nodes("https://example.org/data.csv", timeout=5)

        mock_get.assert_called_once_with("https://example.org/data.csv", timeout=5)
        response.raise_for_status.assert_called_once_with()
        assert [node.id for node in nodes] == ["1", "2"]

    @patch("spanmap.loader.requests.get")
    def test_loads_gpx_url(self, mock_get):
        response = MagicMock()
        response.text = GPX_WAYPOINTS
        mock_get.return_value = response

        nodes = load_nodes("https://example.org/points.gpx?download=1")
        assert len(nodes) == 3

    @patch("spanmap.loader.requests.get")
    def test_http_error_propagates(self, mock_get):
        response = MagicMock()
        response.raise_for_status.side_effect = requests.exceptions.HTTPError("404")
        mock_get.return_value = response

        with pytest.raises(requests.exceptions.RequestException):
            load_nodes("http://example.org/missing.csv")

    def test_non_utf8_file(self, tmp_path):
        path = tmp_path / "latin1.csv"
        path.write_bytes("1;Córdoba;Córdoba;10;active;-31,4;-64,2\n".encode("latin-1"))
        with pytest.raises(UnicodeDecodeError):
            load_nodes(str(path))
