# tripcarbon/vehicles/categories.py
# -*- coding: utf-8 -*-
"""
Vehicle category → emission factor
==================================

Freight vehicles are grouped in three goods-vehicle classes plus an UNKNOWN
sentinel. Each class has a single planning-level, distance-based factor
(kg CO₂e per km, tank-to-wheel, unladen/laden average).

| code    | label                 | kg CO₂e / km |
|---------|-----------------------|--------------|
| LGV     | Light Goods Vehicle   | 0.34         |
| MGV     | Medium Goods Vehicle  | 0.42         |
| HGV     | Heavy Goods Vehicle   | 1.26         |
| UNKNOWN | fallback              | 0.50         |

Free-text registry values ('Heavy Goods Vehicle', 'hgv-2axle', 'LCV light')
are normalised with `normalise_category`.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, Tuple, Union

from tripcarbon.infra.logging import get_logger

log = get_logger(__name__)


class VehicleCategory(str, Enum):
    LGV = "LGV"
    MGV = "MGV"
    HGV = "HGV"
    UNKNOWN = "UNKNOWN"


@dataclass(frozen=True)
class CategoryFactor:
    category: VehicleCategory
    ef_kg_per_km: float
    label: str


# Edit factors here; the rest of the code reads them through `get_emission_factor`.
_FACTORS: Dict[VehicleCategory, CategoryFactor] = {
      VehicleCategory.LGV: CategoryFactor(VehicleCategory.LGV, 0.34, "Light Goods Vehicle")
    , VehicleCategory.MGV: CategoryFactor(VehicleCategory.MGV, 0.42, "Medium Goods Vehicle")
    , VehicleCategory.HGV: CategoryFactor(VehicleCategory.HGV, 1.26, "Heavy Goods Vehicle")
    , VehicleCategory.UNKNOWN: CategoryFactor(VehicleCategory.UNKNOWN, 0.5, "Unknown (default)")
}

# Checked in order: the first keyword found in the lowercased text wins.
_KEYWORDS: Tuple[Tuple[str, VehicleCategory], ...] = (
      ("heavy", VehicleCategory.HGV)
    , ("hgv", VehicleCategory.HGV)
    , ("medium", VehicleCategory.MGV)
    , ("mgv", VehicleCategory.MGV)
    , ("light", VehicleCategory.LGV)
    , ("lgv", VehicleCategory.LGV)
)


def normalise_category(raw: Union[str, VehicleCategory, None]) -> VehicleCategory:
    """
    Map a free-text category to a VehicleCategory.

    1. exact canonical code, case-insensitive ('hgv' → HGV)
    2. keyword substring ('Heavy Goods Vehicle' → HGV, 'lgv-van' → LGV)
    3. otherwise UNKNOWN
    """
    if isinstance(raw, VehicleCategory):
        return raw
    if raw is None:
        return VehicleCategory.UNKNOWN

    text = str(raw).strip()
    try:
        return VehicleCategory(text.upper())
    except ValueError:
        pass

    lowered = text.lower()
    for keyword, category in _KEYWORDS:
        if keyword in lowered:
            return category

    if text:
        log.debug("normalise_category: %r not recognised → UNKNOWN", raw)
    return VehicleCategory.UNKNOWN


def get_emission_factor(category: Union[str, VehicleCategory]) -> float:
    """
    Return kg CO₂e per km for a category (code or VehicleCategory).

    Raises
    ------
    KeyError
        If `category` is a string that is not a canonical code.
    """
    try:
        key = VehicleCategory(category)
    except ValueError:
        raise KeyError(
            f"Unknown vehicle category={category!r}; known codes: {[c.value for c in VehicleCategory]}"
        ) from None
    return _FACTORS[key].ef_kg_per_km


def category_label(category: Union[str, VehicleCategory]) -> Optional[str]:
    try:
        return _FACTORS[VehicleCategory(category)].label
    except ValueError:
        return None
