from __future__ import annotations

# ── models & errors ─────────────────────────────────────────────────────────────
from .core.errors import ClassificationError, InputFileError, MissingColumnError, ReportError
from .core.models import (
      REPORT_COLUMNS
    , ConsolidatedTrip
    , JobState
    , PendingClassificationBundle
    , PipelineOutcome
    , ReportRow
)

# ── pipeline (public API) ───────────────────────────────────────────────────────
from .app.pipeline import ReportPipeline, resume_report
from .vehicles.categories import VehicleCategory, get_emission_factor, normalise_category

# ── report helpers ──────────────────────────────────────────────────────────────
from .report.export import report_to_csv_text, vehicle_summary_to_csv_text, write_report_csv
from .report.summary import summarize_by_category, summarize_by_vehicle, summarize_report
from .report.templates import sample_template

__all__ = [
    # models & errors
      "REPORT_COLUMNS", "ConsolidatedTrip", "JobState", "PendingClassificationBundle",
      "PipelineOutcome", "ReportRow",
      "ReportError", "InputFileError", "MissingColumnError", "ClassificationError",
    # pipeline
      "ReportPipeline", "resume_report",
      "VehicleCategory", "get_emission_factor", "normalise_category",
    # report helpers
      "report_to_csv_text", "write_report_csv", "vehicle_summary_to_csv_text",
      "summarize_report", "summarize_by_vehicle", "summarize_by_category",
      "sample_template",
]
