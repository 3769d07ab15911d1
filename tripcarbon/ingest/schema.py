# tripcarbon/ingest/schema.py
# -*- coding: utf-8 -*-
"""
Header resolution for loosely-structured CSV exports.

The exports come from different systems, so the same logical field shows up as
'Vehicle Number', 'vehicle_no', 'Current Vehicle No.' and so on. Matching is a
single pure function over a static candidate table:

    normalize("Current Vehicle No.") == normalize("currentvehicleno") == "currentvehicleno"

Only case, punctuation and whitespace are ignored. There is no edit-distance
fuzziness: a header either normalizes to a candidate or it does not.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List, Mapping, Optional, Sequence, Tuple

from tripcarbon.core.errors import MissingColumnError
from tripcarbon.core.types import ColumnResolution
from tripcarbon.infra.logging import get_logger

log = get_logger(__name__)

_NON_ALNUM = re.compile(r"[^a-z0-9]")


# ────────────────────────────────────────────────────────────────────────────────
# Candidate tables
# ────────────────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class FieldSpec:
    """
    A logical field and the header names accepted for it, in priority order.

    name : str
        Key used in ColumnResolution ('vehicle_id', 'distance', ...).
    label : str
        Human wording used in messages ('vehicle identifier').
    candidates : Tuple[str, ...]
        Acceptable header names; normalized before comparison.
    required : bool
        Whether a miss aborts the report.
    """
    name: str
    label: str
    candidates: Tuple[str, ...]
    required: bool = True


TRIP_FIELDS: Tuple[FieldSpec, ...] = (
      FieldSpec(
          "vehicle_id"
        , "vehicle identifier"
        , ("vehiclenumber", "vehicleno", "regno", "currentvehicleno", "vehicleid", "registrationnumber")
    )
    , FieldSpec(
          "distance"
        , "distance"
        , ("runningdistance", "totaldistance", "distance", "distance_km", "distancekm")
    )
    , FieldSpec("source", "source", ("source", "origin", "from"))
    , FieldSpec("destination", "destination", ("destination", "dest", "to"))
    , FieldSpec(
          "trip_start"
        , "trip start time"
        , ("tripstartedat", "trip started at", "tripstarttime", "tripstart", "starttime", "date_time", "date")
    )
    , FieldSpec(
          "assignment_uid"
        , "assignment UID"
        , ("assignmentuid", "assignment uid", "assignmentid", "assignment_id", "assignment")
        , required=False
    )
    , FieldSpec(
          "consignment_note_uid"
        , "consignment note UID"
        , ("consignmentnoteuid", "consignment note uid", "consignmentnoteid", "cnuid", "consignmentnote", "lrnumber")
        , required=False
    )
    , FieldSpec(
          "completed_at"
        , "trip completion time"
        , ("tripcompletedat", "trip completed at", "completedat", "tripendedat", "tripendtime", "endtime")
        , required=False
    )
)

VEHICLE_FIELDS: Tuple[FieldSpec, ...] = (
      FieldSpec(
          "vehicle_id"
        , "vehicle identifier"
        , (
              "vehiclenumber", "vehicle no", "reg no", "vehicleid", "registration"
            , "current vehicle no", "currentvehicleno", "registrationnumber"
        )
    )
    , FieldSpec(
          "category"
        , "vehicle category"
        , ("class", "vehicle_class", "type", "vehicle_type", "category", "vehiclecategory")
        , required=False
    )
)


# ────────────────────────────────────────────────────────────────────────────────
# Matching
# ────────────────────────────────────────────────────────────────────────────────

def normalize_header(text: str) -> str:
    """Lowercase and drop every character that is not a-z or 0-9."""
    return _NON_ALNUM.sub("", str(text).lower())


def find_header(
      headers: Sequence[str]
    , candidates: Sequence[str]
) -> Optional[str]:
    """
    Return the actual header matching the highest-priority candidate, or None.

    Candidates are scanned in order, so the result does not depend on the
    column order of the file.
    """
    normalized = {}
    for header in headers:
        normalized.setdefault(normalize_header(header), header)

    for candidate in candidates:
        hit = normalized.get(normalize_header(candidate))
        if hit is not None:
            return hit
    return None


@dataclass
class SchemaResolution:
    """
    Outcome of resolving one file's headers.

    columns : ColumnResolution
        Logical field → header (None for missing optional fields).
    missing_optional : List[FieldSpec]
        Optional fields that did not resolve; the caller turns these into notes.
    """
    columns: ColumnResolution
    missing_optional: List[FieldSpec]


def resolve_columns(
      sample_row: Mapping[str, str]
    , fields: Sequence[FieldSpec]
    , *
    , file_label: str
) -> SchemaResolution:
    """
    Resolve every field of `fields` against the headers of `sample_row`.

    Raises
    ------
    MissingColumnError
        On the first required field without a matching header.
    """
    headers = list(sample_row.keys())
    columns: ColumnResolution = {}
    missing: List[FieldSpec] = []

    for spec in fields:
        header = find_header(headers, spec.candidates)
        if header is None:
            if spec.required:
                raise MissingColumnError(
                      file_label=file_label
                    , field_label=spec.label
                    , available=headers
                    , expected=spec.candidates
                )
            missing.append(spec)
        columns[spec.name] = header

    log.debug("resolve_columns: %s → %s", file_label, columns)
    return SchemaResolution(columns=columns, missing_optional=missing)
