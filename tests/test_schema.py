import itertools

import pytest

from tripcarbon.core.errors import MissingColumnError
from tripcarbon.ingest.schema import (
      TRIP_FIELDS
    , VEHICLE_FIELDS
    , find_header
    , normalize_header
    , resolve_columns
)


def test_normalize_header_ignores_case_punctuation_and_spaces():
    assert normalize_header("Current Vehicle No.") == "currentvehicleno"
    assert normalize_header("  distance_KM ") == "distancekm"
    assert normalize_header("Trip-Started@At") == "tripstartedat"


def test_find_header_returns_original_header_text():
    headers = ["ID", "Vehicle_Number", "Running Distance (km)"]
    assert find_header(headers, ["vehiclenumber"]) == "Vehicle_Number"


def test_find_header_is_exact_after_normalization():
    # no edit-distance matching
    assert find_header(["Vehicle Numbr"], ["vehiclenumber"]) is None


def test_find_header_prefers_candidate_priority_over_column_position():
    headers = ["Distance", "Running Distance"]
    assert find_header(headers, ["runningdistance", "distance"]) == "Running Distance"


def test_trip_resolution_is_independent_of_column_order():
    headers = ["Vehicle No", "Source", "Destination", "Total Distance", "Trip Started At", "Extra"]
    expected = resolve_columns(dict.fromkeys(headers, ""), TRIP_FIELDS, file_label="Trips").columns

    for perm in itertools.permutations(headers):
        got = resolve_columns(dict.fromkeys(perm, ""), TRIP_FIELDS, file_label="Trips").columns
        assert got == expected


def test_missing_required_column_lists_available_and_expected():
    row = {"Vehicle No": "", "Source": "", "Destination": "", "Trip Started At": ""}

    with pytest.raises(MissingColumnError) as info:
        resolve_columns(row, TRIP_FIELDS, file_label="Trips")

    msg = str(info.value)
    assert msg.startswith("Trips CSV Error")
    assert "distance" in msg
    assert "[Vehicle No, Source, Destination, Trip Started At]" in msg
    assert "runningdistance" in msg
    assert info.value.field_label == "distance"


def test_missing_optional_columns_are_reported_not_raised():
    row = dict.fromkeys(["Vehicle No", "Source", "Destination", "Distance", "Trip Started At"], "")

    res = resolve_columns(row, TRIP_FIELDS, file_label="Trips")

    assert res.columns["assignment_uid"] is None
    assert res.columns["completed_at"] is None
    assert {s.name for s in res.missing_optional} == {"assignment_uid", "consignment_note_uid", "completed_at"}


def test_vehicle_category_column_is_optional():
    res = resolve_columns({"Reg No": "", "Model": ""}, VEHICLE_FIELDS, file_label="Vehicles")

    assert res.columns == {"vehicle_id": "Reg No", "category": None}
    assert [s.name for s in res.missing_optional] == ["category"]
