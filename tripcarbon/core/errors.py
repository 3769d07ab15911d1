# tripcarbon/core/errors.py
# -*- coding: utf-8 -*-

"""
Fatal errors raised by the report pipeline.

Every message is written for the end user: the pipeline surfaces it verbatim.
"""

from __future__ import annotations

from typing import Iterable, Sequence


class ReportError(ValueError):
    """Base class for errors that abort a report generation."""


class InputFileError(ReportError):
    """An input file is missing, unreadable, or has no data rows."""


class MissingColumnError(ReportError):
    """A required logical field could not be matched to any CSV header."""

    def __init__(
          self
        , *
        , file_label: str
        , field_label: str
        , available: Sequence[str]
        , expected: Iterable[str]
    ) -> None:
        self.file_label = file_label
        self.field_label = field_label
        self.available = list(available)
        self.expected = list(expected)
        super().__init__(
            f"{file_label} CSV Error: Could not find a {field_label} column. "
            f"Available columns: [{', '.join(self.available)}]. "
            f"Expected one of: {', '.join(self.expected)}."
        )


class ClassificationError(ReportError):
    """Manual vehicle categories are missing or cannot be understood."""
