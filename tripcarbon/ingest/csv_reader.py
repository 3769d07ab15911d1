# tripcarbon/ingest/csv_reader.py
# -*- coding: utf-8 -*-
"""
CSV → RawRow loader
===================

Reads a CSV with a header row into a list of plain `Dict[str, str]` rows.
Every cell is read as text (no type inference, no NA guessing) and stripped,
so downstream code decides what "missing" or "unparsable" means.
Rows ending in a trailing delimiter keep their cells under the right headers.

Accepted sources
----------------
- a filesystem path (str / Path)
- raw bytes (UTF-8, BOM tolerated)
- an open text or binary stream
"""

from __future__ import annotations

import io
from pathlib import Path
from typing import List

import pandas as pd

from tripcarbon.core.errors import InputFileError
from tripcarbon.core.types import CsvSource, RawRow
from tripcarbon.infra.logging import get_logger

log = get_logger(__name__)

_BOM = "\ufeff"


def _load_frame(
      source: CsvSource
    , *
    , file_label: str
) -> pd.DataFrame:
    if isinstance(source, (str, Path)):
        path = Path(source)
        if not path.is_file():
            raise InputFileError(f"The {file_label.lower()} CSV file was not found at '{path}'.")
        handle = path
    elif isinstance(source, (bytes, bytearray)):
        handle = io.BytesIO(bytes(source))
    else:
        handle = source

    try:
        return pd.read_csv(
              handle
            , dtype=str
            , index_col=False
            , keep_default_na=False
            , skip_blank_lines=True
            , encoding="utf-8-sig"
        )
    except pd.errors.EmptyDataError:
        raise InputFileError(
            f"The {file_label.lower()} CSV file appears to be empty or is not a valid CSV."
        ) from None
    except (pd.errors.ParserError, UnicodeDecodeError) as exc:
        raise InputFileError(
            f"The {file_label.lower()} CSV file could not be parsed: {exc}"
        ) from exc


def read_csv_rows(
      source: CsvSource
    , *
    , file_label: str = "Input"
) -> List[RawRow]:
    """
    Parse `source` into RawRow dicts, in file order.

    Parameters
    ----------
    source : CsvSource
        Path, bytes or stream holding the CSV text.
    file_label : str
        Human label used in error messages ('Trips', 'Vehicles').

    Raises
    ------
    InputFileError
        If the file is missing, unparsable, or has no data rows.
    """
    df = _load_frame(source, file_label=file_label)

    # Text streams bypass the utf-8-sig decoder, so the BOM can survive in the first header.
    df.columns = [str(c).lstrip(_BOM) for c in df.columns]
    df = df.fillna("").apply(lambda col: col.astype(str).str.strip())
    df = df[(df != "").any(axis=1)]

    if df.empty:
        raise InputFileError(
            f"The {file_label.lower()} CSV file appears to be empty or is not a valid CSV."
        )

    rows: List[RawRow] = df.to_dict(orient="records")
    log.info(
          "read_csv_rows: %s file → %d rows, %d columns"
        , file_label
        , len(rows)
        , len(df.columns)
    )
    return rows
