# tripcarbon/app/pipeline.py
# -*- coding: utf-8 -*-
"""
Report pipeline (orchestrator)
==============================

Sequences the stages and owns the suspend/resume state:

    trips.csv ──► read ─► resolve headers ─► consolidate ─┐
    vehicles.csv ► read ─► resolve headers ─► registry ───┴► classify ─► calculate
                                                              │
                                                              └─ ambiguous? ─► PAUSED

Job states
----------
    IDLE ─► RUNNING ─► COMPLETED
                   ├─► PAUSED (pending bundle) ── resume(categories) ─► COMPLETED | FAILED
                   └─► FAILED

A new `generate` discards any pending bundle; `reset` returns to IDLE.

Usage
-----
    pipeline = ReportPipeline()
    outcome = pipeline.generate("trips.csv", "vehicles.csv")
    if outcome.state is JobState.PAUSED:
        outcome = pipeline.resume({vid: "HGV" for vid in outcome.pending_vehicle_ids})
"""

from __future__ import annotations

from typing import List, Optional

from tripcarbon.core.config import ReportDefaults, get_report_defaults
from tripcarbon.core.errors import ClassificationError, InputFileError, ReportError
from tripcarbon.core.models import (
      JobState
    , PendingClassificationBundle
    , PipelineOutcome
    , ReportRow
)
from tripcarbon.core.types import CsvSource
from tripcarbon.emissions.calculator import calculate_report_rows
from tripcarbon.infra.logging import get_logger, log_banner
from tripcarbon.ingest.csv_reader import read_csv_rows
from tripcarbon.ingest.schema import TRIP_FIELDS, VEHICLE_FIELDS, resolve_columns
from tripcarbon.trips.consolidator import consolidate_trips
from tripcarbon.vehicles.classifier import (
      ManualCategories
    , apply_manual_categories
    , build_registry
    , classify_vehicles
)

log = get_logger(__name__)


# ────────────────────────────────────────────────────────────────────────────────
# Stateless continuation
# ────────────────────────────────────────────────────────────────────────────────

def resume_report(
      bundle: PendingClassificationBundle
    , categories: ManualCategories
    , *
    , defaults: Optional[ReportDefaults] = None
) -> List[ReportRow]:
    """
    Finish a paused report from its bundle and the caller's categories.

    Raises
    ------
    ClassificationError
        If a category is unrecognised or an ambiguous vehicle is still missing.
    """
    final = apply_manual_categories(bundle.categories, bundle.ambiguous_vehicle_ids, categories)
    return calculate_report_rows(bundle.trips, final, defaults=defaults)


# ────────────────────────────────────────────────────────────────────────────────
# Stateful orchestrator
# ────────────────────────────────────────────────────────────────────────────────

class ReportPipeline:
    """
    One report-generation flow, driven by discrete caller actions.

    Attributes
    ----------
    state : JobState
        Where the flow currently is.
    pending : Optional[PendingClassificationBundle]
        Saved work while PAUSED, None otherwise.
    """

    def __init__(self, defaults: Optional[ReportDefaults] = None) -> None:
        self.defaults = defaults or get_report_defaults()
        self.state = JobState.IDLE
        self.pending: Optional[PendingClassificationBundle] = None

    # ── caller actions ─────────────────────────────────────────────────────────

    def generate(
          self
        , trips: Optional[CsvSource]
        , vehicles: Optional[CsvSource]
    ) -> PipelineOutcome:
        """
        Run the pipeline on a trips file and a vehicles file.

        Any pending classification from an earlier call is discarded.
        """
        if self.pending is not None:
            log.info("generate: discarding pending classification for %d vehicles", len(self.pending.ambiguous_vehicle_ids))
        self.pending = None
        self.state = JobState.RUNNING
        log_banner(log, "Generating emissions report", char="-")

        try:
            return self._run(trips, vehicles)
        except ReportError as exc:
            return self._fail(exc)

    def resume(self, categories: ManualCategories) -> PipelineOutcome:
        """
        Continue a PAUSED flow with caller-supplied vehicle categories.

        Manual categories take priority over the registry for the same vehicle.
        The pending bundle is consumed whatever the result.
        """
        if self.state is not JobState.PAUSED or self.pending is None:
            return self._fail(ClassificationError("There is no report waiting for vehicle categories."))

        bundle = self.pending
        self.pending = None
        self.state = JobState.RUNNING

        try:
            rows = resume_report(bundle, categories, defaults=self.defaults)
        except ReportError as exc:
            return self._fail(exc)

        self.state = JobState.COMPLETED
        return PipelineOutcome(state=self.state, rows=rows, notes=list(bundle.notes))

    def reset(self) -> None:
        """Drop any pending work and return to IDLE."""
        self.pending = None
        self.state = JobState.IDLE
        log.debug("reset: pipeline back to idle")

    # ── internals ──────────────────────────────────────────────────────────────

    def _run(
          self
        , trips: Optional[CsvSource]
        , vehicles: Optional[CsvSource]
    ) -> PipelineOutcome:
        if trips is None or vehicles is None:
            raise InputFileError("Please upload both trips and vehicles CSV files.")

        notes: List[str] = []

        vehicle_rows = read_csv_rows(vehicles, file_label="Vehicles")
        trip_rows = read_csv_rows(trips, file_label="Trips")

        # ── vehicles: headers + registry ──────────────────────────────────────
        vehicle_schema = resolve_columns(vehicle_rows[0], VEHICLE_FIELDS, file_label="Vehicles")
        has_category_column = vehicle_schema.columns.get("category") is not None
        if not has_category_column:
            notes.append(
                "The 'vehicle category' column was not found in your vehicles file. "
                f"All vehicles have been assumed to be '{self.defaults.fallback_category}' "
                "for a conservative emission estimate."
            )
        registry = build_registry(vehicle_rows, vehicle_schema.columns)

        # ── trips: headers + consolidation ────────────────────────────────────
        trip_schema = resolve_columns(trip_rows[0], TRIP_FIELDS, file_label="Trips")
        for spec in trip_schema.missing_optional:
            fallback = (
                f"'{self.defaults.missing_timestamp_text}'" if spec.name == "completed_at" else "blank"
            )
            notes.append(
                f"No {spec.label} column was found in your trips file; "
                f"it is shown as {fallback} in the report."
            )

        consolidation = consolidate_trips(trip_rows, trip_schema.columns)
        if consolidation.skipped_rows:
            notes.append(
                f"{consolidation.skipped_rows} rows were skipped from the trips file because a required "
                f"value was missing or unreadable (e.g. the date in the "
                f"'{trip_schema.columns['trip_start']}' column)."
            )

        # ── classification ────────────────────────────────────────────────────
        classification = classify_vehicles(
              (t.vehicle_id for t in consolidation.trips)
            , registry
            , has_category_column=has_category_column
            , fallback=self.defaults.fallback_category
        )

        for note in notes:
            log.warning("assumption: %s", note)

        if classification.ambiguous_vehicle_ids:
            self.pending = PendingClassificationBundle(
                  trips=consolidation.trips
                , categories=classification.categories
                , ambiguous_vehicle_ids=classification.ambiguous_vehicle_ids
                , notes=notes
            )
            self.state = JobState.PAUSED
            log.info(
                  "generate: paused, %d vehicles need a category: %s"
                , len(classification.ambiguous_vehicle_ids)
                , classification.ambiguous_vehicle_ids
            )
            return PipelineOutcome(
                  state=self.state
                , notes=list(notes)
                , pending_vehicle_ids=list(classification.ambiguous_vehicle_ids)
            )

        rows = calculate_report_rows(consolidation.trips, classification.categories, defaults=self.defaults)
        self.state = JobState.COMPLETED
        return PipelineOutcome(state=self.state, rows=rows, notes=notes)

    def _fail(self, exc: ReportError) -> PipelineOutcome:
        self.pending = None
        self.state = JobState.FAILED
        log.error("report failed: %s", exc)
        return PipelineOutcome(state=self.state, error=str(exc))
