# tripcarbon/core/models.py
# -*- coding: utf-8 -*-

"""
Core domain models (pure dataclasses).

    - ConsolidatedTrip: one physical trip merged from duplicate log rows
    - ReportRow: one emissions-annotated line of the final report
    - PendingClassificationBundle: saved state while waiting for manual categories
    - JobState / PipelineOutcome: what a pipeline call hands back to its caller

No pandas, no IO. Safe to import from anywhere.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Set, Tuple


# ────────────────────────────────────────────────────────────────────────────────
# Export header order
# ────────────────────────────────────────────────────────────────────────────────

REPORT_COLUMNS: Tuple[str, ...] = (
      "Physical Trip ID"
    , "Assignment UIDs"
    , "Consignment Note UIDs"
    , "Vehicle No."
    , "Source"
    , "Destination"
    , "Running Distance (km)"
    , "Representative Trip Completed At"
    , "Vehicle Category"
    , "Emission Factor (kg CO₂e/km)"
    , "Calculated Carbon Emissions (kg CO₂e)"
)

ConsolidationKey = Tuple[str, str, str, date]


# ────────────────────────────────────────────────────────────────────────────────
# Consolidated (physical) trip
# ────────────────────────────────────────────────────────────────────────────────

@dataclass
class ConsolidatedTrip:
    """
    A physical trip merged from every raw row sharing its consolidation key.

    Attributes
    ----------
    vehicle_id, source, destination : str
        Key parts, as read from the trips file.
    trip_date : date
        Calendar date of the trip start timestamp.
    distance_km : float
        Largest distance seen among the merged rows.
    completed_at : Optional[datetime]
        Latest completion timestamp seen (naive; aware values are stored in UTC).
    completed_at_text : Optional[str]
        Cell text the latest completion timestamp was parsed from.
    assignment_uids, consignment_note_uids : Set[str]
        Union of the UIDs of every merged row.
    """

    vehicle_id: str
    source: str
    destination: str
    trip_date: date
    distance_km: float
    completed_at: Optional[datetime] = None
    completed_at_text: Optional[str] = None
    assignment_uids: Set[str] = field(default_factory=set)
    consignment_note_uids: Set[str] = field(default_factory=set)

    @property
    def key(self) -> ConsolidationKey:
        return (self.vehicle_id, self.source, self.destination, self.trip_date)

    def merge(
          self
        , *
        , distance_km: float
        , completed_at: Optional[datetime] = None
        , completed_at_text: Optional[str] = None
        , assignment_uids: Iterable[str] = ()
        , consignment_note_uids: Iterable[str] = ()
    ) -> None:
        """
        Fold another raw row of the same physical trip into this one.

        Distance only grows, the completion timestamp only moves later,
        UID sets only grow.
        """
        if distance_km > self.distance_km:
            self.distance_km = distance_km

        if completed_at is not None and (self.completed_at is None or completed_at > self.completed_at):
            self.completed_at = completed_at
            self.completed_at_text = completed_at_text

        self.assignment_uids.update(assignment_uids)
        self.consignment_note_uids.update(consignment_note_uids)

    def to_dict(self) -> Dict[str, Any]:
        return {
              "vehicle_id": self.vehicle_id
            , "source": self.source
            , "destination": self.destination
            , "trip_date": self.trip_date.isoformat()
            , "distance_km": self.distance_km
            , "completed_at": self.completed_at.isoformat() if self.completed_at else None
            , "completed_at_text": self.completed_at_text
            , "assignment_uids": sorted(self.assignment_uids)
            , "consignment_note_uids": sorted(self.consignment_note_uids)
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ConsolidatedTrip":
        completed_at = data.get("completed_at")
        return cls(
              vehicle_id=data["vehicle_id"]
            , source=data["source"]
            , destination=data["destination"]
            , trip_date=date.fromisoformat(data["trip_date"])
            , distance_km=float(data["distance_km"])
            , completed_at=datetime.fromisoformat(completed_at) if completed_at else None
            , completed_at_text=data.get("completed_at_text")
            , assignment_uids=set(data.get("assignment_uids") or ())
            , consignment_note_uids=set(data.get("consignment_note_uids") or ())
        )


# ────────────────────────────────────────────────────────────────────────────────
# Final report row
# ────────────────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class ReportRow:
    """
    One line of the emissions report. Built only by the emission calculator.
    """

    physical_trip_id: str
    assignment_uids: str
    consignment_note_uids: str
    vehicle_id: str
    source: str
    destination: str
    distance_km: float
    completed_at: str
    vehicle_category: str
    emission_factor: float
    emissions_kg_co2e: float

    def to_record(self) -> Dict[str, Any]:
        """Return the row keyed by the export headers, in export order."""
        values = (
              self.physical_trip_id
            , self.assignment_uids
            , self.consignment_note_uids
            , self.vehicle_id
            , self.source
            , self.destination
            , self.distance_km
            , self.completed_at
            , self.vehicle_category
            , self.emission_factor
            , self.emissions_kg_co2e
        )
        return dict(zip(REPORT_COLUMNS, values))


# ────────────────────────────────────────────────────────────────────────────────
# Suspend / resume state
# ────────────────────────────────────────────────────────────────────────────────

@dataclass
class PendingClassificationBundle:
    """
    Everything needed to finish a report once manual categories arrive.

    Attributes
    ----------
    trips : List[ConsolidatedTrip]
        Consolidated trips, in consolidation order.
    categories : Dict[str, str]
        Vehicle id → category code for vehicles the registry did resolve.
    ambiguous_vehicle_ids : List[str]
        Vehicle ids that still need a category, sorted.
    notes : List[str]
        Assumption notes collected before the pause.
    """

    trips: List[ConsolidatedTrip]
    categories: Dict[str, str]
    ambiguous_vehicle_ids: List[str]
    notes: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
              "trips": [t.to_dict() for t in self.trips]
            , "categories": dict(self.categories)
            , "ambiguous_vehicle_ids": list(self.ambiguous_vehicle_ids)
            , "notes": list(self.notes)
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PendingClassificationBundle":
        return cls(
              trips=[ConsolidatedTrip.from_dict(t) for t in data.get("trips", [])]
            , categories=dict(data.get("categories") or {})
            , ambiguous_vehicle_ids=list(data.get("ambiguous_vehicle_ids") or [])
            , notes=list(data.get("notes") or [])
        )


class JobState(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    COMPLETED = "completed"
    PAUSED = "paused"
    FAILED = "failed"


@dataclass
class PipelineOutcome:
    """
    Result of one `generate` or `resume` call.

    Exactly one of these is meaningful, depending on `state`:
        COMPLETED → rows (+ notes)
        PAUSED    → pending_vehicle_ids (+ notes)
        FAILED    → error
    """

    state: JobState
    rows: List[ReportRow] = field(default_factory=list)
    notes: List[str] = field(default_factory=list)
    pending_vehicle_ids: List[str] = field(default_factory=list)
    error: Optional[str] = None
