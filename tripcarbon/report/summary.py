# tripcarbon/report/summary.py
# -*- coding: utf-8 -*-
"""
Report aggregates for dashboards.

- summarize_report: headline KPIs (totals, trip and vehicle counts)
- summarize_by_vehicle: per-vehicle trips, distance, emissions, efficiency
- summarize_by_category: emissions per vehicle category
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Dict, List, Sequence

from tripcarbon.core.models import ReportRow


def _finite(x: float) -> float:
    return x if math.isfinite(x) else 0.0


@dataclass(frozen=True)
class ReportSummary:
    total_emissions_kg: float
    total_distance_km: float
    total_trips: int
    total_vehicles: int


@dataclass(frozen=True)
class VehicleSummary:
    """
    efficiency_kg_per_km is total emissions / total distance (0 when no distance).
    """
    vehicle_id: str
    trip_count: int
    total_distance_km: float
    total_emissions_kg: float
    efficiency_kg_per_km: float


@dataclass(frozen=True)
class CategorySummary:
    vehicle_category: str
    emissions_kg: float


def summarize_report(rows: Sequence[ReportRow]) -> ReportSummary:
    return ReportSummary(
          total_emissions_kg=sum(_finite(r.emissions_kg_co2e) for r in rows)
        , total_distance_km=sum(_finite(r.distance_km) for r in rows)
        , total_trips=len(rows)
        , total_vehicles=len({r.vehicle_id for r in rows})
    )


def summarize_by_vehicle(rows: Sequence[ReportRow]) -> List[VehicleSummary]:
    """Per-vehicle aggregates, highest emitter first."""
    stats: Dict[str, List[float]] = {}
    for r in rows:
        acc = stats.setdefault(r.vehicle_id, [0, 0.0, 0.0])
        acc[0] += 1
        acc[1] += _finite(r.distance_km)
        acc[2] += _finite(r.emissions_kg_co2e)

    out = [
        VehicleSummary(
              vehicle_id=vehicle_id
            , trip_count=int(count)
            , total_distance_km=distance
            , total_emissions_kg=emissions
            , efficiency_kg_per_km=emissions / distance if distance > 0 else 0.0
        )
        for vehicle_id, (count, distance, emissions) in stats.items()
    ]
    return sorted(out, key=lambda v: v.total_emissions_kg, reverse=True)


def summarize_by_category(rows: Sequence[ReportRow]) -> List[CategorySummary]:
    """Emissions per category, highest first."""
    totals: Dict[str, float] = {}
    for r in rows:
        key = r.vehicle_category or "UNKNOWN"
        totals[key] = totals.get(key, 0.0) + _finite(r.emissions_kg_co2e)

    return sorted(
          (CategorySummary(vehicle_category=k, emissions_kg=v) for k, v in totals.items())
        , key=lambda c: c.emissions_kg
        , reverse=True
    )
