"""Enrollment identifier patterns, parsing, and construction.

Identifiers look like ``25MBY2501``:
- ``25``: two-digit calendar year at allocation time (informational only).
- ``MBY``: literal marker.
- ``2501``: numeric suffix, zero-padded to 4 digits, grows past 9999.

INVARIANT: The numeric suffix is the only ordered component. Two identifiers
in the same cohort are compared by suffix, never by year or string order.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date

DEFAULT_MARKER = "MBY"
MIN_DIGITS = 4

_TRAILING_DIGITS = re.compile(r"(\d+)$")


def year_prefix(today: date) -> str:
    """Two-digit year for *today* (``2025`` -> ``"25"``)."""
    return f"{today.year % 100:02d}"


def format_identifier(
    year: str,
    sequence: int,
    *,
    marker: str = DEFAULT_MARKER,
    min_digits: int = MIN_DIGITS,
) -> str:
    """Render ``{year}{marker}{sequence}`` with the suffix zero-padded.

    Padding is a minimum width, so ``10000`` is rendered in full.
    """
    if sequence < 0:
        msg = f"Sequence must be non-negative, got {sequence}"
        raise ValueError(msg)
    return f"{year}{marker}{sequence:0{min_digits}d}"


def parse_suffix(identifier: str | None) -> int:
    """Extract the trailing numeric suffix of *identifier*.

    Malformed values (no trailing digits, empty, None) parse as ``0`` so they
    can never become the maximum of a cohort.

    Examples:
        >>> parse_suffix("25MBY2501")
        2501
        >>> parse_suffix("garbage")
        0
    """
    if not identifier:
        return 0
    match = _TRAILING_DIGITS.search(identifier.strip())
    if match is None:
        return 0
    return int(match.group(1))


def identifier_pattern(
    marker: str = DEFAULT_MARKER, min_digits: int = MIN_DIGITS
) -> re.Pattern[str]:
    """Compiled pattern for well-formed identifiers with *marker*."""
    return re.compile(rf"^\d{{2}}{re.escape(marker)}\d{{{min_digits},}}$")


def validate_identifier(
    identifier: str,
    *,
    marker: str = DEFAULT_MARKER,
    min_digits: int = MIN_DIGITS,
) -> bool:
    """Check whether *identifier* is well-formed."""
    return identifier_pattern(marker, min_digits).match(identifier) is not None


@dataclass(frozen=True)
class EnrollmentId:
    """A candidate or committed identifier, kept in parsed form."""

    year: str
    sequence: int
    marker: str = DEFAULT_MARKER
    min_digits: int = MIN_DIGITS

    def __str__(self) -> str:
        return format_identifier(
            self.year, self.sequence, marker=self.marker, min_digits=self.min_digits
        )

    def next(self) -> EnrollmentId:
        """Same year and marker, suffix + 1."""
        return EnrollmentId(
            year=self.year,
            sequence=self.sequence + 1,
            marker=self.marker,
            min_digits=self.min_digits,
        )
