"""Shared fixtures: small trips / vehicles CSVs built in memory."""

from __future__ import annotations

import logging
from typing import Callable, Sequence

import pytest


TRIP_HEADERS = (
      "Vehicle Number"
    , "Source"
    , "Destination"
    , "Running Distance"
    , "Trip Started At"
    , "Trip Completed At"
    , "Assignment UID"
    , "Consignment Note UID"
)


def _csv_bytes(headers: Sequence[str], rows: Sequence[Sequence[object]]) -> bytes:
    lines = [",".join(headers)]
    lines += [",".join(str(v) for v in row) for row in rows]
    return ("\n".join(lines) + "\n").encode("utf-8")


@pytest.fixture
def make_csv() -> Callable[[Sequence[str], Sequence[Sequence[object]]], bytes]:
    """Build CSV bytes from headers and rows (values must not contain commas)."""
    return _csv_bytes


@pytest.fixture
def trips_csv() -> bytes:
    """Two legs of one V1 trip plus a V2 trip on another day."""
    return _csv_bytes(
          TRIP_HEADERS
        , [
              ("V1", "A", "B", 100, "2024-03-01 08:00", "2024-03-01 12:00", "AS1", "CN1")
            , ("V1", "A", "B", 120, "2024-03-01 09:30", "2024-03-01 14:00", "AS2", "CN2")
            , ("V2", "B", "C", 40.5, "2024-03-02 07:00", "", "AS3", "CN3")
        ]
    )


@pytest.fixture
def vehicles_csv() -> bytes:
    return _csv_bytes(
          ("Vehicle No", "Vehicle Type")
        , [("V1", "Heavy"), ("V2", "Medium Goods Vehicle")]
    )


@pytest.fixture
def trip_headers() -> Sequence[str]:
    return TRIP_HEADERS


@pytest.fixture(autouse=True)
def _restore_root_logging():
    """Scripts call init_logging(force=True); put pytest's handlers back afterwards."""
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
