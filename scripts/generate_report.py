#!/usr/bin/env python3
# scripts/generate_report.py
# -*- coding: utf-8 -*-
"""
Build the emissions report from a trips CSV and a vehicles CSV.

    python scripts/generate_report.py `
        --trips data/trips.csv `
        --vehicles data/vehicles.csv `
        --category TRK-9=HGV `
        --out out/emissions_report.csv `
        --pretty

Exit codes: 0 report written, 1 failed, 2 vehicles still need a category.
"""

from __future__ import annotations

# --- path bootstrap (must be the first lines of the file) ---
from pathlib import Path
import sys
ROOT = Path(__file__).resolve().parents[1]  # repo root (one level above /scripts)
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))
# ------------------------------------------------------------

import argparse
import json
import logging
from dataclasses import asdict
from typing import Callable, Dict, List, Optional, Sequence

from tripcarbon.app.pipeline import ReportPipeline
from tripcarbon.core.models import JobState, PipelineOutcome
from tripcarbon.infra.logging import get_current_log_path, init_logging
from tripcarbon.report.export import vehicle_summary_to_csv_text, write_report_csv
from tripcarbon.report.summary import summarize_by_category, summarize_by_vehicle, summarize_report
from tripcarbon.vehicles.categories import VehicleCategory, category_label

log = logging.getLogger(__name__)


def _parse_category_arg(text: str) -> tuple:
    if "=" not in text:
        raise argparse.ArgumentTypeError(f"expected VEHICLE_ID=CATEGORY, got {text!r}")
    vehicle_id, category = text.split("=", 1)
    return vehicle_id.strip(), category.strip()


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        description="Reconcile a trips CSV with a vehicles CSV and write a per-trip CO₂e report."
    )
    p.add_argument("--trips", type=Path, required=True, help="Trips (trip-event log) CSV.")
    p.add_argument("--vehicles", type=Path, required=True, help="Vehicles (registry) CSV.")
    p.add_argument(
          "--out"
        , type=Path
        , default=Path("out") / "emissions_report.csv"
        , help="Report CSV path. Default: out/emissions_report.csv"
    )
    p.add_argument(
          "--vehicle-summary-out"
        , type=Path
        , default=None
        , help="Optional per-vehicle summary CSV path."
    )
    p.add_argument(
          "--category"
        , dest="categories"
        , type=_parse_category_arg
        , action="append"
        , default=[]
        , metavar="VEHICLE_ID=CATEGORY"
        , help="Category for a vehicle the registry cannot classify (repeatable). "
               "Overrides the registry for that vehicle when the run pauses."
    )
    p.add_argument(
          "--interactive"
        , action="store_true"
        , help="Prompt for the category of every vehicle still unclassified."
    )

    # UX
    p.add_argument("--pretty", action="store_true", help="Pretty-print JSON.")
    p.add_argument("--write-log", action="store_true", help="Also write a per-run log file under logs/.")
    p.add_argument("--log-level", default="INFO", choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    return p


def _prompt_categories(
      vehicle_ids: Sequence[str]
    , reader: Callable[[str], str] = input
) -> Dict[str, str]:
    choices = ", ".join(f"{c.value} ({category_label(c)})" for c in VehicleCategory)
    answers: Dict[str, str] = {}
    for vehicle_id in vehicle_ids:
        answers[vehicle_id] = reader(f"Category for vehicle {vehicle_id} [{choices}]: ").strip()
    return answers


def _dump(payload: dict, pretty: bool) -> None:
    if pretty:
        print(json.dumps(payload, ensure_ascii=False, indent=2))
    else:
        print(json.dumps(payload, ensure_ascii=False, separators=(",", ":")))


def _completed_payload(outcome: PipelineOutcome, out: Path, vehicle_out: Optional[Path]) -> dict:
    vehicles = summarize_by_vehicle(outcome.rows)
    write_report_csv(outcome.rows, out)
    if vehicle_out is not None:
        vehicle_out.parent.mkdir(parents=True, exist_ok=True)
        with open(vehicle_out, "w", encoding="utf-8", newline="") as fh:
            fh.write(vehicle_summary_to_csv_text(vehicles))

    return {
          "status": outcome.state.value
        , "report_csv": str(out)
        , "vehicle_summary_csv": str(vehicle_out) if vehicle_out else None
        , "summary": asdict(summarize_report(outcome.rows))
        , "by_category": [asdict(c) for c in summarize_by_category(outcome.rows)]
        , "assumption_notes": outcome.notes
    }


def main(
      argv: Optional[List[str]] = None
    , *
    , reader: Callable[[str], str] = input
) -> int:
    args = _build_parser().parse_args(argv)

    init_logging(
          level=args.log_level
        , force=True
        , write_output=args.write_log
    )
    if get_current_log_path():
        log.info("Log file → %s", get_current_log_path())

    pipeline = ReportPipeline()
    outcome = pipeline.generate(args.trips, args.vehicles)

    if outcome.state is JobState.PAUSED:
        supplied = dict(args.categories)
        still_missing = [v for v in outcome.pending_vehicle_ids if v not in supplied]
        if still_missing and args.interactive:
            supplied.update(_prompt_categories(still_missing, reader=reader))
            still_missing = []

        if still_missing:
            _dump(
                {
                      "status": outcome.state.value
                    , "pending_vehicle_ids": outcome.pending_vehicle_ids
                    , "missing": still_missing
                    , "assumption_notes": outcome.notes
                    , "hint": "Re-run with --category VEHICLE_ID=CATEGORY or --interactive."
                }
                , args.pretty
            )
            return 2

        outcome = pipeline.resume(supplied)

    if outcome.state is JobState.FAILED:
        _dump({"status": outcome.state.value, "error": outcome.error}, args.pretty)
        return 1

    _dump(_completed_payload(outcome, args.out, args.vehicle_summary_out), args.pretty)
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
