import io
import json

import pytest

from tripcarbon.app.pipeline import ReportPipeline, resume_report
from tripcarbon.core.models import JobState, PendingClassificationBundle
from tripcarbon.report.templates import sample_template


def test_duplicate_legs_collapse_into_one_heavy_trip(make_csv, trip_headers, vehicles_csv):
    trips = make_csv(
          trip_headers
        , [
              ("V1", "A", "B", 100, "2024-03-01 08:00", "2024-03-01 12:00", "AS1", "CN1")
            , ("V1", "A", "B", 120, "2024-03-01 09:30", "2024-03-01 14:00", "AS2", "CN2")
        ]
    )

    outcome = ReportPipeline().generate(trips, vehicles_csv)

    assert outcome.state is JobState.COMPLETED
    assert outcome.notes == []
    assert len(outcome.rows) == 1
    row = outcome.rows[0]
    assert row.physical_trip_id == "PT-0001"
    assert row.distance_km == 120.0
    assert row.vehicle_category == "HGV"
    assert row.emissions_kg_co2e == pytest.approx(120 * 1.26)
    assert row.assignment_uids == "AS1, AS2"
    assert row.consignment_note_uids == "CN1, CN2"
    assert row.completed_at == "2024-03-01 14:00"


def test_unreadable_timestamp_row_is_dropped_with_one_note(make_csv, trips_csv, vehicles_csv):
    trips = trips_csv + b"V1,A,B,300,N/A,,AS9,CN9\n"

    outcome = ReportPipeline().generate(trips, vehicles_csv)

    assert outcome.state is JobState.COMPLETED
    assert len(outcome.notes) == 1
    assert outcome.notes[0].startswith("1 rows were skipped")
    assert "Trip Started At" in outcome.notes[0]
    assert max(r.distance_km for r in outcome.rows) == 120.0


def test_vehicles_without_category_column_use_fallback(make_csv, trips_csv):
    vehicles = make_csv(("Vehicle No", "Model"), [("V1", "Tata 1618"), ("V2", "Eicher")])

    outcome = ReportPipeline().generate(trips_csv, vehicles)

    assert outcome.state is JobState.COMPLETED
    assert {r.vehicle_category for r in outcome.rows} == {"HGV"}
    assert len(outcome.notes) == 1
    assert "vehicle category" in outcome.notes[0]


def test_missing_optional_trip_columns_become_notes(make_csv, vehicles_csv):
    trips = make_csv(
          ("Vehicle No", "Source", "Destination", "Distance", "Trip Started At")
        , [("V1", "A", "B", 10, "2024-03-01 08:00")]
    )

    outcome = ReportPipeline().generate(trips, vehicles_csv)

    assert outcome.state is JobState.COMPLETED
    assert len(outcome.notes) == 3
    row = outcome.rows[0]
    assert row.assignment_uids == ""
    assert row.consignment_note_uids == ""
    assert row.completed_at == "N/A"


def test_regeneration_is_idempotent(trips_csv, vehicles_csv):
    pipeline = ReportPipeline()

    first = pipeline.generate(trips_csv, vehicles_csv)
    second = pipeline.generate(trips_csv, vehicles_csv)

    assert first.rows == second.rows
    assert [r.physical_trip_id for r in first.rows] == ["PT-0001", "PT-0002"]


def test_column_order_does_not_change_the_report(make_csv, trip_headers, vehicles_csv):
    rows = [
          ("V1", "A", "B", 100, "2024-03-01 08:00", "2024-03-01 12:00", "AS1", "CN1")
        , ("V2", "B", "C", 50, "2024-03-02 08:00", "", "AS2", "CN2")
    ]
    forward = make_csv(trip_headers, rows)
    backward = make_csv(trip_headers[::-1], [r[::-1] for r in rows])

    a = ReportPipeline().generate(forward, vehicles_csv)
    b = ReportPipeline().generate(backward, vehicles_csv)

    assert a.rows == b.rows


def test_trailing_delimiter_rows_keep_columns_aligned(make_csv):
    trips = (
        b"Vehicle Number,Source,Destination,Running Distance,Trip Started At\n"
        b"V1,A,B,100,2024-03-01 08:00,\n"
        b"V1,A,B,120,2024-03-01 09:30,\n"
    )
    vehicles = make_csv(("Vehicle No", "Vehicle Type"), [("V1", "Heavy")])

    outcome = ReportPipeline().generate(trips, vehicles)

    assert outcome.state is JobState.COMPLETED
    assert not any("skipped" in note for note in outcome.notes)
    assert len(outcome.rows) == 1
    row = outcome.rows[0]
    assert (row.vehicle_id, row.source, row.destination) == ("V1", "A", "B")
    assert row.distance_km == 120.0
    assert row.vehicle_category == "HGV"


def test_unknown_vehicle_pauses_then_resumes_with_supplied_category(make_csv, trips_csv):
    vehicles = make_csv(("Vehicle No", "Vehicle Type"), [("V1", "Heavy")])
    pipeline = ReportPipeline()

    paused = pipeline.generate(trips_csv, vehicles)

    assert paused.state is JobState.PAUSED
    assert paused.pending_vehicle_ids == ["V2"]
    assert paused.rows == []
    assert pipeline.pending is not None

    done = pipeline.resume({"V2": "LGV"})

    assert done.state is JobState.COMPLETED
    assert pipeline.pending is None
    by_vehicle = {r.vehicle_id: r.vehicle_category for r in done.rows}
    assert by_vehicle == {"V1": "HGV", "V2": "LGV"}


def test_unrecognised_registry_category_pauses(make_csv, trips_csv):
    vehicles = make_csv(("Vehicle No", "Vehicle Type"), [("V1", "Heavy"), ("V2", "Tractor")])

    outcome = ReportPipeline().generate(trips_csv, vehicles)

    assert outcome.state is JobState.PAUSED
    assert outcome.pending_vehicle_ids == ["V2"]


def test_manual_category_wins_over_registry(make_csv, trips_csv):
    vehicles = make_csv(("Vehicle No", "Vehicle Type"), [("V1", "Heavy")])
    pipeline = ReportPipeline()
    pipeline.generate(trips_csv, vehicles)

    done = pipeline.resume({"V1": "MGV", "V2": "MGV"})

    assert {r.vehicle_category for r in done.rows} == {"MGV"}


def test_resume_without_every_category_fails_and_drops_bundle(make_csv, trips_csv):
    vehicles = make_csv(("Vehicle No", "Vehicle Type"), [("V1", "Heavy")])
    pipeline = ReportPipeline()
    pipeline.generate(trips_csv, vehicles)

    outcome = pipeline.resume({})

    assert outcome.state is JobState.FAILED
    assert "V2" in outcome.error
    assert outcome.rows == []
    assert pipeline.pending is None


def test_resume_when_not_paused_fails():
    outcome = ReportPipeline().resume({"V1": "HGV"})

    assert outcome.state is JobState.FAILED


def test_new_generate_discards_pending_bundle(make_csv, trips_csv, vehicles_csv):
    pipeline = ReportPipeline()
    pipeline.generate(trips_csv, make_csv(("Vehicle No", "Vehicle Type"), [("V1", "Heavy")]))
    assert pipeline.state is JobState.PAUSED

    outcome = pipeline.generate(trips_csv, vehicles_csv)

    assert outcome.state is JobState.COMPLETED
    assert pipeline.pending is None


def test_reset_returns_to_idle(make_csv, trips_csv):
    pipeline = ReportPipeline()
    pipeline.generate(trips_csv, make_csv(("Vehicle No", "Vehicle Type"), [("V1", "Heavy")]))

    pipeline.reset()

    assert pipeline.state is JobState.IDLE
    assert pipeline.pending is None


def test_serialized_bundle_resumes_like_the_pipeline(make_csv, trips_csv):
    pipeline = ReportPipeline()
    pipeline.generate(trips_csv, make_csv(("Vehicle No", "Vehicle Type"), [("V1", "Heavy")]))
    restored = PendingClassificationBundle.from_dict(json.loads(json.dumps(pipeline.pending.to_dict())))

    rows = resume_report(restored, {"V2": "MGV"})

    assert rows == pipeline.resume({"V2": "MGV"}).rows


@pytest.mark.parametrize(
      "trips, vehicles, fragment"
    , [
          (None, b"Vehicle No\nV1\n", "Please upload both")
        , (b"", b"Vehicle No\nV1\n", "empty")
        , (b"Vehicle No,Source\n", b"Vehicle No\nV1\n", "empty")
    ]
)
def test_input_problems_fail_with_message(trips, vehicles, fragment):
    outcome = ReportPipeline().generate(trips, vehicles)

    assert outcome.state is JobState.FAILED
    assert fragment in outcome.error
    assert outcome.rows == []


def test_missing_required_trip_column_fails(make_csv, vehicles_csv):
    trips = make_csv(("Vehicle No", "Source", "Destination", "Trip Started At"), [("V1", "A", "B", "2024-03-01")])

    outcome = ReportPipeline().generate(trips, vehicles_csv)

    assert outcome.state is JobState.FAILED
    assert "distance" in outcome.error
    assert "Available columns: [Vehicle No, Source, Destination, Trip Started At]" in outcome.error


def test_missing_vehicle_id_column_in_registry_fails(trips_csv, make_csv):
    outcome = ReportPipeline().generate(trips_csv, make_csv(("Model", "Type"), [("Tata", "HGV")]))

    assert outcome.state is JobState.FAILED
    assert outcome.error.startswith("Vehicles CSV Error")


def test_accepts_paths_and_text_streams(tmp_path, trips_csv, vehicles_csv):
    trips_path = tmp_path / "trips.csv"
    trips_path.write_bytes(trips_csv)

    outcome = ReportPipeline().generate(trips_path, io.StringIO(vehicles_csv.decode("utf-8")))

    assert outcome.state is JobState.COMPLETED
    assert len(outcome.rows) == 2


def test_sample_templates_produce_a_clean_report():
    _, trips = sample_template("trips")
    _, vehicles = sample_template("vehicles")

    outcome = ReportPipeline().generate(trips.encode("utf-8"), vehicles.encode("utf-8"))

    assert outcome.state is JobState.COMPLETED
    assert outcome.notes == []
    assert [r.vehicle_category for r in outcome.rows] == ["HGV", "MGV", "HGV"]
