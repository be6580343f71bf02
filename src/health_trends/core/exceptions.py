"""Error taxonomy.

Missing measurements are not errors: a window or day without a positive
sample is represented by a sentinel (``None`` in base units, ``0`` or a dash
in display units). Only structural violations raise.
"""

from typing import Any


class HealthTrendsError(Exception):
    """Base class for pipeline errors."""


class UnsupportedUnitError(HealthTrendsError):
    """A metric kind was paired with a unit outside its conversion table."""

    def __init__(self, kind: Any, unit: Any) -> None:
        self.kind = getattr(kind, "value", kind)
        self.unit = getattr(unit, "value", unit)
        super().__init__(f"Unsupported unit {self.unit!r} for metric {self.kind!r}")

    def to_log_dict(self) -> dict[str, Any]:
        """Convert to dict for structured logging."""
        return {"error_type": "unsupported_unit", "kind": self.kind, "unit": self.unit}
