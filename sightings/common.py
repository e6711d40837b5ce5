# common.py
"""Objects that are shared across multiple modules."""
from __future__ import annotations

from typing import TYPE_CHECKING, Callable, List, Sequence, Tuple

if TYPE_CHECKING:
    from sightings.sighting import Sighting
    from sightings.target import VisionTarget

# A pixel coordinate (x, y); x grows right, y grows down.
Point = Tuple[float, float]

# Takes a batch of sightings and returns the ones deemed valid, in order.
SightingFilter = Callable[[List["Sighting"]], Sequence["Sighting"]]

# Called once per frame to decide which targets a pipeline feeds.
TargetLogic = Callable[[], Sequence["VisionTarget"]]


class ConfigurationError(ValueError):
    """Raised when a camera, target or pipeline is set up inconsistently."""


class CalibrationError(RuntimeError):
    """Raised when a calibration sighting lacks the values it needs."""
