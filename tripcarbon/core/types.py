# tripcarbon/core/types.py
# -*- coding: utf-8 -*-

"""
Shared type aliases.

Contents
--------
- StrPath: str or pathlib.Path
- RawRow: one parsed CSV line, header → cell text
- ColumnResolution: logical field → actual CSV header (None if unresolved)
- CsvSource: anything the CSV reader accepts
"""

from __future__ import annotations

from pathlib import Path
from typing import IO, Dict, Optional, Union


StrPath = Union[str, Path]
"""Path representation accepted by IO helpers (string or Path)."""

RawRow = Dict[str, str]
"""A CSV record with headers unknown ahead of time. Cells are stripped strings."""

ColumnResolution = Dict[str, Optional[str]]
"""Logical field name → header found in the file, or None for a missing optional field."""

CsvSource = Union[StrPath, bytes, IO[str], IO[bytes]]
"""A filesystem path, raw CSV bytes, or an open text/binary stream."""
