import math

import pytest

from sightings.config import CameraConfig
from sightings.target import VisionTarget


@pytest.fixture
def flat_camera() -> CameraConfig:
    """320x240 camera at ground level with no mounting offsets or angles."""
    return CameraConfig(
        vertical_fov=math.radians(53.13),
        horizontal_fov=math.radians(54.0),
        pixel_width=320,
        pixel_height=240,
    )


@pytest.fixture
def target() -> VisionTarget:
    return VisionTarget("Rocket", height=20.0, aspect_ratio=1.0)
