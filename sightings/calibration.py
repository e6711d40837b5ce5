# calibration.py
"""
Setup-time helpers: recover field of view and mounting angles from a sighting
at a known location. None of these run per frame.
"""
from __future__ import annotations

import math
from typing import Tuple

from sightings.camera_math import pixel_center
from sightings.common import CalibrationError
from sightings.sighting import Sighting
from sightings.target import VisionTarget


def _fov_from_focal(coord: float, dimension_px: float, tangent: float) -> float:
    offset = coord - pixel_center(dimension_px)
    if offset == 0.0 or tangent == 0.0:
        raise CalibrationError(
            f"Pixel {coord} and angle tangent {tangent} give no field of view; "
            "use a target off the image centre line"
        )
    focal = offset / tangent
    return 2.0 * math.atan((dimension_px / 2.0) / focal)


def calc_fov(coord: float, dimension_px: float, angle: float) -> float:
    """
    Field of view along one axis from a known angle <-> pixel correspondence.

    Use the x coordinate and image width for the horizontal FOV, the y
    coordinate and image height for the vertical one. ``angle`` must be
    measured carefully; a pixel on the centre line gives no information and
    raises ``CalibrationError``.
    """
    return _fov_from_focal(coord, dimension_px, math.tan(angle))


def calc_fov_from_offset(
    coord: float,
    dimension_px: float,
    forward_distance: float,
    orth_distance: float,
) -> float:
    """
    Field of view from a target at a known position in front of the camera.

    ``orth_distance`` is measured along the axis of interest: right of the
    lens for horizontal FOV, above the lens for vertical FOV.
    """
    if forward_distance == 0.0:
        raise CalibrationError("Calibration target must be in front of the camera")
    return _fov_from_focal(coord, dimension_px, orth_distance / forward_distance)


def x_placement_angle(sighting_yaw: float, camera_distance: float, camera_offset: float) -> float:
    """
    Horizontal mounting angle (clockwise positive) of a camera whose target
    sits straight ahead of the robot's centre.
    """
    return -math.asin(camera_offset / camera_distance) - sighting_yaw


def y_placement_angle(sighting_pitch: float, height_diff: float, camera_distance: float) -> float:
    """Vertical mounting angle (up positive) from a target of known height."""
    return math.atan2(height_diff, camera_distance) - sighting_pitch


def configure_placement(
    target: VisionTarget,
    distance: float,
    horizontal_offset: float,
    vertical_offset: float,
    sighting: Sighting,
) -> Tuple[float, float]:
    """
    Solve ``(horizontal_angle, vertical_angle)`` for a camera mount.

    The robot centre must be aligned with ``target`` at ``distance``, and
    ``sighting`` must be the only valid sighting of it, already processed by
    a camera configured with zero mounting angles.
    """
    if sighting.camera_yaw is None or sighting.camera_pitch is None:
        raise CalibrationError("Camera yaw or camera pitch is not available on the sighting")

    horizontal = x_placement_angle(sighting.camera_yaw, distance, horizontal_offset)
    vertical = y_placement_angle(
        sighting.camera_pitch, target.height - vertical_offset, distance
    )
    return horizontal, vertical
