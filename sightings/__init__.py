"""Sighting geometry package – re-export high-level API."""
from .camera import SightingCamera                # noqa: F401
from .common import CalibrationError, ConfigurationError  # noqa: F401
from .config import CameraConfig, VisionSetup, load_setup  # noqa: F401
from .container import SightingContainer          # noqa: F401
from .sighting import Sighting                    # noqa: F401
from .target import VisionTarget                  # noqa: F401
from .targeting import (                          # noqa: F401
    DynamicTargets, FixedTargets, Pipeline, TargetPolicy,
)
