# tripcarbon/emissions/calculator.py
# -*- coding: utf-8 -*-
"""
Distance × factor → report rows.

    emissions_kg_co2e = distance_km × ef_kg_per_km(category)

Physical trip ids are assigned sequentially in consolidation order
(PT-0001, PT-0002, ...), so the same input always yields the same ids.
"""

from __future__ import annotations

import math
from typing import List, Mapping, Optional, Sequence

from tripcarbon.core.config import ReportDefaults, get_report_defaults
from tripcarbon.core.models import ConsolidatedTrip, ReportRow
from tripcarbon.infra.logging import get_logger
from tripcarbon.vehicles.categories import get_emission_factor

log = get_logger(__name__)


def format_trip_id(seq: int, defaults: Optional[ReportDefaults] = None) -> str:
    d = defaults or get_report_defaults()
    return f"{d.trip_id_prefix}{seq:0{d.trip_id_width}d}"


def calculate_report_rows(
      trips: Sequence[ConsolidatedTrip]
    , categories: Mapping[str, str]
    , *
    , defaults: Optional[ReportDefaults] = None
) -> List[ReportRow]:
    """
    Build one ReportRow per consolidated trip.

    Parameters
    ----------
    trips : Sequence[ConsolidatedTrip]
        Consolidated trips in consolidation order.
    categories : Mapping[str, str]
        Final vehicle id → category code. Every trip's vehicle must be present.

    Returns
    -------
    List[ReportRow]
        Rows whose distance or emissions are not finite are left out.

    Raises
    ------
    KeyError
        If a trip's vehicle has no category.
    """
    d = defaults or get_report_defaults()
    rows: List[ReportRow] = []

    for seq, trip in enumerate(trips, start=1):
        category = categories[trip.vehicle_id]
        factor = get_emission_factor(category)
        emissions = trip.distance_km * factor

        if not (math.isfinite(trip.distance_km) and math.isfinite(emissions)):
            log.debug(
                  "calculate_report_rows: dropping %s (distance=%r, emissions=%r)"
                , trip.key
                , trip.distance_km
                , emissions
            )
            continue

        rows.append(
            ReportRow(
                  physical_trip_id=format_trip_id(seq, d)
                , assignment_uids=d.uid_separator.join(sorted(trip.assignment_uids))
                , consignment_note_uids=d.uid_separator.join(sorted(trip.consignment_note_uids))
                , vehicle_id=trip.vehicle_id
                , source=trip.source
                , destination=trip.destination
                , distance_km=trip.distance_km
                , completed_at=trip.completed_at_text or d.missing_timestamp_text
                , vehicle_category=category
                , emission_factor=factor
                , emissions_kg_co2e=emissions
            )
        )

    log.info(
          "calculate_report_rows: %d rows, %.2f kg CO₂e total"
        , len(rows)
        , sum(r.emissions_kg_co2e for r in rows)
    )
    return rows
