"""Unit conversion between base and display units.

Samples, averages and targets stay in the metric's base unit (kg, mg/dL,
km, ...). Conversion happens only at the display boundary and never rounds;
rounding is the display mapper's job.
"""

from health_trends.models.metric import DisplayUnit, MetricKind
from health_trends.models.policy import get_policy


def to_display(base_value: float, kind: MetricKind, unit: DisplayUnit) -> float:
    """Convert a base-unit value to a display unit.

    Args:
        base_value: Value in the kind's base unit
        kind: Metric kind
        unit: Target display unit

    Returns:
        Value in display unit

    Raises:
        UnsupportedUnitError: If the unit is not valid for the kind
    """
    return base_value * get_policy(kind).factor(unit)


def to_base(display_value: float, kind: MetricKind, unit: DisplayUnit) -> float:
    """Convert a display-unit value back to the base unit.

    Raises:
        UnsupportedUnitError: If the unit is not valid for the kind
    """
    return display_value / get_policy(kind).factor(unit)


def units_for(kind: MetricKind) -> tuple[DisplayUnit, ...]:
    """Display units valid for a kind, base unit first."""
    return get_policy(kind).display_units


def base_unit(kind: MetricKind) -> DisplayUnit:
    """Canonical unit a kind is stored and aggregated in."""
    return get_policy(kind).base_unit


def is_supported(kind: MetricKind, unit: DisplayUnit) -> bool:
    """Check a kind/unit pairing without raising."""
    return unit in get_policy(kind).factors
