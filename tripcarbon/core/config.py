# tripcarbon/core/config.py
# -*- coding: utf-8 -*-

"""
Report configuration models and globals.

Pure configuration structures, safe to import from anywhere.

Current contents
----------------
- ReportDefaults: fallbacks and formatting used across the pipeline
"""

from __future__ import annotations

from dataclasses import dataclass


# ────────────────────────────────────────────────────────────────────────────────
# Report defaults
# ────────────────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class ReportDefaults:
    """
    Defaults applied when the input files leave something unspecified.

    Attributes
    ----------
    fallback_category : str
        Category code applied to every vehicle when the registry has no
        category column. HGV is the most conservative (highest) factor.
    trip_id_prefix : str
        Prefix of the sequential physical trip id (e.g. 'PT-0001').
    trip_id_width : int
        Zero-padding width of the trip id counter.
    uid_separator : str
        Separator used when joining merged UID sets into one string.
    missing_timestamp_text : str
        Text shown when a trip has no completion timestamp.
    export_decimals : int
        Decimal places for numbers in exported CSVs.
    csv_encoding : str
        Codec of written report files; 'utf-8-sig' emits the BOM.
    """

    fallback_category: str = "HGV"
    trip_id_prefix: str = "PT-"
    trip_id_width: int = 4
    uid_separator: str = ", "
    missing_timestamp_text: str = "N/A"
    export_decimals: int = 2
    csv_encoding: str = "utf-8-sig"


# ────────────────────────────────────────────────────────────────────────────────
# Singleton-style instance
# ────────────────────────────────────────────────────────────────────────────────

REPORT_DEFAULTS = ReportDefaults()


def get_report_defaults() -> ReportDefaults:
    """
    Return the global report defaults.
    """
    return REPORT_DEFAULTS
