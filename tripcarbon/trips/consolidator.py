# tripcarbon/trips/consolidator.py
# -*- coding: utf-8 -*-
"""
Trip consolidation
==================

Trip logs record one row per *leg* or per status update, so a single physical
movement often appears several times. Rows are merged on the consolidation key

    (vehicle_id, source, destination, calendar date of trip start)

A vehicle's several logged legs between the same two places on the same day
are the same physical trip.

Merge rules
-----------
- distance_km      → maximum of the merged rows
- completed_at     → latest parsable completion timestamp
- assignment / consignment-note UIDs → union

Rows that cannot be keyed (blank required value, unparsable distance or
trip-start timestamp) are skipped and only counted.

Public API
----------
- parse_distance(text) -> Optional[float]
- parse_timestamp(text) -> Optional[pandas.Timestamp]
- consolidate_trips(rows, columns) -> ConsolidationResult
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from datetime import datetime
from typing import Dict, Iterable, List, Optional, Set

import pandas as pd

from tripcarbon.core.models import ConsolidatedTrip, ConsolidationKey
from tripcarbon.core.types import ColumnResolution, RawRow
from tripcarbon.infra.logging import get_logger

log = get_logger(__name__)

_LEADING_NUMBER = re.compile(r"^[-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?")
_HAS_DIGIT = re.compile(r"\d")


# ────────────────────────────────────────────────────────────────────────────────
# Cell parsers
# ────────────────────────────────────────────────────────────────────────────────

def parse_distance(text: Optional[str]) -> Optional[float]:
    """
    Parse a distance cell in km.

    Accepts '120', '120.5', '1,400' and values with a trailing unit
    ('120 km'). Returns None for blanks, non-numbers and non-finite values.
    """
    if text is None:
        return None
    cleaned = str(text).strip().replace(",", "")
    match = _LEADING_NUMBER.match(cleaned)
    if not match:
        return None
    value = float(match.group(0))
    return value if math.isfinite(value) else None


def parse_timestamp(text: Optional[str]) -> Optional[pd.Timestamp]:
    """
    Parse a timestamp cell; None when blank or unreadable.

    Relative words ('today', 'now') carry no digits and are rejected.
    """
    if text is None:
        return None
    cleaned = str(text).strip()
    if not _HAS_DIGIT.search(cleaned):
        return None
    try:
        ts = pd.to_datetime(cleaned, errors="coerce")
    except (TypeError, ValueError, OverflowError):
        return None
    if ts is None or pd.isna(ts):
        return None
    return ts


def _comparable(ts: pd.Timestamp) -> datetime:
    # Aware and naive timestamps cannot be compared; aware ones are pinned to UTC.
    if ts.tzinfo is not None:
        ts = ts.tz_convert("UTC").tz_localize(None)
    return ts.to_pydatetime()


def _split_uids(text: Optional[str]) -> Set[str]:
    if not text:
        return set()
    return {part.strip() for part in str(text).split(",") if part.strip()}


# ────────────────────────────────────────────────────────────────────────────────
# Consolidation
# ────────────────────────────────────────────────────────────────────────────────

@dataclass
class ConsolidationResult:
    """
    trips : List[ConsolidatedTrip]
        One per consolidation key, in first-seen order.
    skipped_rows : int
        Rows dropped for a blank required value or an unparsable number/date.
    """
    trips: List[ConsolidatedTrip]
    skipped_rows: int


def consolidate_trips(
      rows: Iterable[RawRow]
    , columns: ColumnResolution
) -> ConsolidationResult:
    """
    Merge raw trip rows into physical trips.

    Parameters
    ----------
    rows : Iterable[RawRow]
        Trip rows in file order.
    columns : ColumnResolution
        Resolved trip columns. Required keys: vehicle_id, distance, source,
        destination, trip_start. Optional keys may be absent or None.
    """
    vehicle_col = columns["vehicle_id"]
    distance_col = columns["distance"]
    source_col = columns["source"]
    destination_col = columns["destination"]
    start_col = columns["trip_start"]
    assignment_col = columns.get("assignment_uid")
    consignment_col = columns.get("consignment_note_uid")
    completed_col = columns.get("completed_at")

    trips: Dict[ConsolidationKey, ConsolidatedTrip] = {}
    skipped = 0
    total = 0

    for idx, row in enumerate(rows):
        total += 1
        vehicle_id = row.get(vehicle_col, "")
        source = row.get(source_col, "")
        destination = row.get(destination_col, "")
        start_text = row.get(start_col, "")

        if not (vehicle_id and source and destination and start_text):
            skipped += 1
            log.debug("consolidate_trips: row %d skipped (blank required value)", idx)
            continue

        distance = parse_distance(row.get(distance_col))
        if distance is None:
            skipped += 1
            log.debug("consolidate_trips: row %d skipped (distance=%r)", idx, row.get(distance_col))
            continue

        started = parse_timestamp(start_text)
        if started is None:
            skipped += 1
            log.debug("consolidate_trips: row %d skipped (trip start=%r)", idx, start_text)
            continue

        completed_text = row.get(completed_col, "") if completed_col else ""
        completed_ts = parse_timestamp(completed_text)
        completed = _comparable(completed_ts) if completed_ts is not None else None

        assignment_uids = _split_uids(row.get(assignment_col)) if assignment_col else set()
        consignment_uids = _split_uids(row.get(consignment_col)) if consignment_col else set()

        key: ConsolidationKey = (vehicle_id, source, destination, started.date())
        trip = trips.get(key)
        if trip is None:
            trips[key] = ConsolidatedTrip(
                  vehicle_id=vehicle_id
                , source=source
                , destination=destination
                , trip_date=started.date()
                , distance_km=distance
                , completed_at=completed
                , completed_at_text=completed_text if completed is not None else None
                , assignment_uids=assignment_uids
                , consignment_note_uids=consignment_uids
            )
        else:
            trip.merge(
                  distance_km=distance
                , completed_at=completed
                , completed_at_text=completed_text
                , assignment_uids=assignment_uids
                , consignment_note_uids=consignment_uids
            )

    log.info(
          "consolidate_trips: %d rows → %d physical trips (%d skipped)"
        , total
        , len(trips)
        , skipped
    )
    return ConsolidationResult(trips=list(trips.values()), skipped_rows=skipped)
