# tripcarbon/vehicles/classifier.py
# -*- coding: utf-8 -*-
"""
Vehicle classification
======================

Two passes:

1. Automatic: vehicle id → raw category text from the vehicle registry,
   normalised with `normalise_category`.
2. Manual fallback: every vehicle appearing in the consolidated trips whose
   category is missing or UNKNOWN is *ambiguous*; the pipeline pauses and asks
   the caller for those categories.

Policy
------
- Registry without a category column: every vehicle gets the configured
  fallback category (HGV). Nothing is ambiguous.
- Registry with a category column: a vehicle absent from the registry, or
  whose category is not recognised, is ambiguous.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Union

from tripcarbon.core.config import get_report_defaults
from tripcarbon.core.errors import ClassificationError
from tripcarbon.core.types import ColumnResolution, RawRow
from tripcarbon.infra.logging import get_logger
from tripcarbon.vehicles.categories import VehicleCategory, normalise_category

log = get_logger(__name__)

ManualCategories = Mapping[str, Union[str, VehicleCategory]]


def build_registry(
      rows: Iterable[RawRow]
    , columns: ColumnResolution
) -> Dict[str, str]:
    """
    Vehicle id → raw category text. Empty when no category column resolved.

    A vehicle id listed twice keeps its last value; blank ids are ignored.
    """
    category_col = columns.get("category")
    if category_col is None:
        return {}

    id_col = columns["vehicle_id"]
    registry: Dict[str, str] = {}
    for row in rows:
        vehicle_id = row.get(id_col, "")
        if vehicle_id:
            registry[vehicle_id] = row.get(category_col, "")

    log.info("build_registry: %d vehicles with a category entry", len(registry))
    return registry


@dataclass
class ClassificationResult:
    """
    categories : Dict[str, str]
        Vehicle id → category code, for vehicles resolved automatically.
    ambiguous_vehicle_ids : List[str]
        Sorted ids that need a manual category.
    """
    categories: Dict[str, str]
    ambiguous_vehicle_ids: List[str]


def classify_vehicles(
      vehicle_ids: Iterable[str]
    , registry: Mapping[str, str]
    , *
    , has_category_column: bool
    , fallback: Optional[str] = None
) -> ClassificationResult:
    """
    Resolve every vehicle id seen in the trips.

    Parameters
    ----------
    vehicle_ids : Iterable[str]
        Vehicle ids of the consolidated trips (duplicates allowed).
    registry : Mapping[str, str]
        Output of `build_registry`.
    has_category_column : bool
        Whether the registry file had a category column at all.
    fallback : Optional[str]
        Category applied to everything when `has_category_column` is False.
        Defaults to ReportDefaults.fallback_category.
    """
    fallback_code = normalise_category(fallback or get_report_defaults().fallback_category).value

    categories: Dict[str, str] = {}
    ambiguous = set()

    for vehicle_id in vehicle_ids:
        if vehicle_id in categories or vehicle_id in ambiguous:
            continue
        if not has_category_column:
            categories[vehicle_id] = fallback_code
            continue

        category = normalise_category(registry.get(vehicle_id))
        if category is VehicleCategory.UNKNOWN:
            ambiguous.add(vehicle_id)
        else:
            categories[vehicle_id] = category.value

    log.info(
          "classify_vehicles: %d resolved, %d ambiguous"
        , len(categories)
        , len(ambiguous)
    )
    return ClassificationResult(categories=categories, ambiguous_vehicle_ids=sorted(ambiguous))


def apply_manual_categories(
      categories: Mapping[str, str]
    , ambiguous_vehicle_ids: Sequence[str]
    , manual: ManualCategories
) -> Dict[str, str]:
    """
    Merge caller-supplied categories over the automatic ones.

    Manual values win for the same vehicle id. Each manual value goes through
    `normalise_category`; 'UNKNOWN' may be chosen explicitly.

    Raises
    ------
    ClassificationError
        If a manual value is not recognised, or an ambiguous vehicle is left
        without a category.
    """
    merged: Dict[str, str] = dict(categories)

    unrecognised = []
    for vehicle_id, raw in manual.items():
        category = normalise_category(raw)
        is_explicit_unknown = str(getattr(raw, "value", raw)).strip().upper() == VehicleCategory.UNKNOWN.value
        if category is VehicleCategory.UNKNOWN and not is_explicit_unknown:
            unrecognised.append(f"{vehicle_id}={raw!r}")
            continue
        merged[str(vehicle_id)] = category.value

    if unrecognised:
        raise ClassificationError(
            "Could not understand the vehicle category given for: "
            f"{', '.join(unrecognised)}. Use one of: {', '.join(c.value for c in VehicleCategory)}."
        )

    missing = [v for v in ambiguous_vehicle_ids if v not in merged]
    if missing:
        raise ClassificationError(
            f"A vehicle category is still required for: {', '.join(missing)}."
        )

    log.info("apply_manual_categories: %d manual categories applied", len(manual))
    return merged
