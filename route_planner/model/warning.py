"""Warning - Track point warnings for route editing tools.

Warnings point editors at geometry worth a second look:
- Sharp turn (large bearing change)
- Steep gradient on the outgoing section
- Noisy geometry (large curvature-proxy cost metric)
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class Warning(ABC):
    """Abstract base class for point warnings.

    Subclasses store specific parameters and compute message as property.
    Use isinstance() to check warning type.

    Attributes:
        sequence_index: Point the warning refers to
    """

    sequence_index: int

    @property
    @abstractmethod
    def message(self) -> str:
        """Human-readable warning message."""

    def __str__(self) -> str:
        return self.message


@dataclass(frozen=True)
class SharpTurnWarning(Warning):
    """Bearing change above the sharp-turn threshold."""

    bearing_change_deg: float
    threshold_deg: float
    warning_type: str = "SharpTurnWarning"

    @property
    def message(self) -> str:
        return (
            f"Sharp turn at point {self.sequence_index}: direction changes by "
            f"{self.bearing_change_deg:.0f}° (threshold {self.threshold_deg:.0f}°)"
        )


@dataclass(frozen=True)
class SteepGradientWarning(Warning):
    """Outgoing gradient steeper than the threshold, up or down."""

    gradient_pct: float
    threshold_pct: float
    warning_type: str = "SteepGradientWarning"

    @property
    def message(self) -> str:
        direction = "climb" if self.gradient_pct > 0 else "descent"
        return (
            f"Steep {direction} after point {self.sequence_index}: gradient {self.gradient_pct:.1f}% "
            f"exceeds {self.threshold_pct:.0f}%"
        )


@dataclass(frozen=True)
class NoisyGeometryWarning(Warning):
    """Cost metric large for the outgoing segment, suggesting GPS noise or a missing point.

    The ratio compares the cost metric with the squared outgoing length, so
    the check does not depend on how far apart the points are.
    """

    cost_metric_m2: float
    outgoing_length_m: float
    threshold_ratio: float
    warning_type: str = "NoisyGeometryWarning"

    @property
    def ratio(self) -> float:
        return self.cost_metric_m2 / self.outgoing_length_m**2

    @property
    def message(self) -> str:
        return (
            f"Noisy geometry at point {self.sequence_index}: cost metric {self.cost_metric_m2:.0f}m² "
            f"is {self.ratio:.1f}x the squared {self.outgoing_length_m:.1f}m outgoing section "
            f"(limit {self.threshold_ratio:.1f}x) - consider smoothing"
        )
