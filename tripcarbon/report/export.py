# tripcarbon/report/export.py
# -*- coding: utf-8 -*-
"""
CSV export
==========

Text handed to download/export collaborators:

- UTF-8 with a byte-order mark
- RFC 4180 quoting: only fields containing a comma, quote or newline are quoted,
  quotes are doubled
- CRLF line endings
- numbers with a fixed number of decimals (two by default)

Public API
----------
- report_to_csv_text(rows) -> str
- write_report_csv(rows, path) -> Path
- vehicle_summary_to_csv_text(vehicles) -> str
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, List, Mapping, Optional, Sequence

import pandas as pd

from tripcarbon.core.config import ReportDefaults, get_report_defaults
from tripcarbon.core.models import REPORT_COLUMNS, ReportRow
from tripcarbon.core.types import StrPath
from tripcarbon.infra.logging import get_logger
from tripcarbon.report.summary import VehicleSummary

log = get_logger(__name__)

_BOM = "\ufeff"

REPORT_NUMERIC_COLUMNS = (
      "Running Distance (km)"
    , "Emission Factor (kg CO₂e/km)"
    , "Calculated Carbon Emissions (kg CO₂e)"
)

VEHICLE_SUMMARY_COLUMNS = (
      "Vehicle No."
    , "Total Trips"
    , "Total Distance (km)"
    , "Total Emissions (kg CO₂e)"
    , "Efficiency (kg CO₂e/km)"
)


def records_to_csv_text(
      records: Iterable[Mapping[str, object]]
    , columns: Sequence[str]
    , *
    , decimals: Optional[Mapping[str, int]] = None
    , include_bom: bool = True
) -> str:
    """
    Render dict records as CSV text in `columns` order.

    `decimals` maps a column to the number of decimals its floats are printed with.
    """
    df = pd.DataFrame(list(records), columns=list(columns))
    for col, places in (decimals or {}).items():
        df[col] = df[col].map(lambda x, p=places: f"{float(x):.{p}f}")

    text = df.to_csv(index=False, lineterminator="\r\n")
    return (_BOM + text) if include_bom else text


def report_to_csv_text(
      rows: Sequence[ReportRow]
    , *
    , include_bom: bool = True
    , defaults: Optional[ReportDefaults] = None
) -> str:
    d = defaults or get_report_defaults()
    return records_to_csv_text(
          (r.to_record() for r in rows)
        , REPORT_COLUMNS
        , decimals={col: d.export_decimals for col in REPORT_NUMERIC_COLUMNS}
        , include_bom=include_bom
    )


def write_report_csv(
      rows: Sequence[ReportRow]
    , path: StrPath
    , *
    , defaults: Optional[ReportDefaults] = None
) -> Path:
    """
    Write the report CSV to `path` (parent directories created). Returns the path.
    """
    d = defaults or get_report_defaults()
    out = Path(path)
    out.parent.mkdir(parents=True, exist_ok=True)
    # the utf-8-sig codec writes the BOM itself
    text = report_to_csv_text(rows, include_bom=False, defaults=d)
    # newline="" keeps the CRLF terminators as rendered
    with open(out, "w", encoding=d.csv_encoding, newline="") as fh:
        fh.write(text)
    log.info("write_report_csv: %d rows → %s", len(rows), out)
    return out


def vehicle_summary_to_csv_text(
      vehicles: Sequence[VehicleSummary]
    , *
    , include_bom: bool = True
) -> str:
    records: List[dict] = [
        dict(zip(
              VEHICLE_SUMMARY_COLUMNS
            , (v.vehicle_id, v.trip_count, v.total_distance_km, v.total_emissions_kg, v.efficiency_kg_per_km)
        ))
        for v in vehicles
    ]
    return records_to_csv_text(
          records
        , VEHICLE_SUMMARY_COLUMNS
        , decimals={
              "Total Distance (km)": 2
            , "Total Emissions (kg CO₂e)": 2
            , "Efficiency (kg CO₂e/km)": 3
        }
        , include_bom=include_bom
    )
