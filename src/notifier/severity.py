"""Alert severity levels."""

from __future__ import annotations

from enum import IntEnum


class Severity(IntEnum):
    """Alert severity — ordered so comparisons work naturally.

    ``UNKNOWN`` is the zero value and is never valid, so a severity that was
    never set is caught instead of silently sent as the lowest level.
    """

    UNKNOWN = 0
    INFO = 1
    WARNING = 2
    CRITICAL = 3

    @classmethod
    def is_valid(cls, value: int) -> bool:
        """Return True if *value* is one of the real severities."""
        return _SEVERITY_UNKNOWN < int(value) < _SEVERITY_SENTINEL

    def valid(self) -> bool:
        return Severity.is_valid(self)


_SEVERITY_UNKNOWN = 0
_SEVERITY_SENTINEL = 4


def severity_label(value: int) -> str:
    """Display form of a severity: its name, or ``UNKNOWN(<n>)`` if invalid."""
    if not Severity.is_valid(value):
        return f"UNKNOWN({int(value)})"
    return Severity(value).name


ALLOWED_SEVERITIES: tuple[str, ...] = tuple(
    severity_label(v) for v in range(_SEVERITY_UNKNOWN + 1, _SEVERITY_SENTINEL)
)
