import json

import pytest

from fleetgeo.geo import calculate_total_distance
from fleetgeo.tracks.loader import load_coordinates


def test_load_json_list(tmp_path):
    path = tmp_path / "log.json"
    path.write_text(
        json.dumps([{"latitude": 0.0, "longitude": 0.0}, {"latitude": 0.0, "longitude": 1.0}, "junk"]),
        encoding="utf-8",
    )
    records = load_coordinates(path)
    assert len(records) == 2
    assert calculate_total_distance(records) == 111.195


def test_load_json_object_with_coordinates_key(tmp_path):
    path = tmp_path / "log.json"
    path.write_text(json.dumps({"coordinates": [{"latitude": 1.0, "longitude": 2.0}]}), encoding="utf-8")
    assert load_coordinates(path) == [{"latitude": 1.0, "longitude": 2.0}]


def test_load_json_rejects_unexpected_shape(tmp_path):
    path = tmp_path / "log.json"
    path.write_text(json.dumps({"points": []}), encoding="utf-8")
    with pytest.raises(ValueError, match="coordinates"):
        load_coordinates(path)


def test_load_csv_converts_numbers_and_keeps_bad_cells(tmp_path):
    path = tmp_path / "log.csv"
    path.write_text(
        "id,latitude,longitude,accuracy\n"
        "a,35.0,139.0,12\n"
        "b,n/a,139.1,\n",
        encoding="utf-8",
    )
    records = load_coordinates(path)

    # Unparsable cells stay strings so validation drops the fix later.
    assert records[0] == {"id": "a", "latitude": 35.0, "longitude": 139.0, "accuracy": 12.0}
    assert records[1]["latitude"] == "n/a"
    assert records[1]["accuracy"] is None
