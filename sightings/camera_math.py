# camera_math.py
"""
Pinhole-camera trigonometry used to turn pixel positions into robot-relative
measurements.

Every function here is pure. Degenerate geometry surfaces as the exception
Python raises for it (``ZeroDivisionError`` / ``ValueError``) or as a
non-finite float; ``SightingContainer`` turns either into an unset field.

Conventions
-----------
* Angles are radians.
* Horizontal angles are positive to the right, vertical angles positive up.
* Robot frame: origin at the robot centre, +x right, +y forward.
"""
from __future__ import annotations

import math
from typing import Tuple

from shapely.geometry import LineString
from shapely.geometry import Point as ShapelyPoint

from sightings.common import Point

# |sin(robot pitch)| below this means the sighting is level with the lens
_MIN_PITCH_SINE = 1e-12


# ------------------------------------------------------------------ #
#   P I X E L   < - >   A N G L E
# ------------------------------------------------------------------ #
def focal_length_px(dimension_px: float, fov: float) -> float:
    """Pinhole focal length, in pixels, along one image axis."""
    return (dimension_px / 2.0) / math.tan(fov / 2.0)


def pixel_center(dimension_px: float) -> float:
    # Pixels are indexed 0 .. dimension_px - 1
    return dimension_px / 2.0 - 0.5


def pixel_to_angle(coord: float, dimension_px: float, fov: float) -> float:
    """
    Horizontal angle from the optical axis to pixel column ``coord``.

    Parameters
    ----------
    coord        : float  pixel x coordinate
    dimension_px : float  image width in pixels (320 for a 320x240 stream)
    fov          : float  horizontal field of view, radians

    Returns a positive angle for pixels right of centre.
    """
    return math.atan((coord - pixel_center(dimension_px)) / focal_length_px(dimension_px, fov))


def pixel_to_pitch(coord: float, dimension_px: float, fov: float) -> float:
    """Vertical counterpart of :func:`pixel_to_angle`; positive above centre."""
    return math.atan((pixel_center(dimension_px) - coord) / focal_length_px(dimension_px, fov))


def angle_to_pixel(angle: float, dimension_px: float, fov: float) -> float:
    """Inverse of :func:`pixel_to_angle`."""
    return pixel_center(dimension_px) + focal_length_px(dimension_px, fov) * math.tan(angle)


def vertical_fov_from_horizontal(hfov: float, width_px: float, height_px: float) -> float:
    """Vertical FOV of a square-pixel sensor with the given horizontal FOV."""
    if width_px <= 0 or height_px <= 0 or hfov <= 0:
        raise ValueError("width, height and horizontal FOV must be positive")
    return 2.0 * math.atan((height_px / width_px) * math.tan(hfov / 2.0))


# ------------------------------------------------------------------ #
#   D I S T A N C E   /   P O S I T I O N
# ------------------------------------------------------------------ #
def pitch_to_distance(
    camera_pitch: float,
    camera_tilt: float,
    target_height: float,
    camera_height: float,
) -> float:
    """
    Floor distance from the lens to the target, from the target's pitch.

    ``camera_tilt`` is the mounting pitch of the camera (up positive). A robot
    pitch of 0 or pi (to within float rounding) raises ``ZeroDivisionError``.
    """
    robot_pitch = camera_pitch + camera_tilt
    sine = math.sin(robot_pitch)
    if abs(sine) < _MIN_PITCH_SINE:
        raise ZeroDivisionError(f"robot pitch {robot_pitch!r} is level with the camera")
    d_height = target_height - camera_height
    straight_line = d_height / sine
    return straight_line * math.cos(robot_pitch)


def polar_to_robot_cartesian(
    camera_distance: float,
    camera_yaw: float,
    horizontal_offset: float,
    depth_offset: float,
    yaw_offset: float,
) -> Tuple[float, float]:
    """Place a camera-relative (distance, yaw) sighting on the robot's x/y plane."""
    yaw = camera_yaw + yaw_offset
    x = camera_distance * math.sin(yaw) + horizontal_offset
    y = camera_distance * math.cos(yaw) + depth_offset
    return x, y


def cartesian_to_robot_yaw(x: float, y: float) -> float:
    """
    Angle from the robot's forward axis to ``(x, y)``, clockwise positive.

    Matches ``atan(x / y)`` for ``y >= 0``, adds pi behind the robot on the
    right (``x >= 0``) and subtracts pi behind it on the left. ``x + 0.0``
    folds -0.0 into the ``x >= 0`` case.
    """
    return math.atan2(x + 0.0, y + 0.0)


# ------------------------------------------------------------------ #
#   A S P E C T   R A T I O   /   R O T A T I O N
# ------------------------------------------------------------------ #
def relative_aspect_ratio(observed_ratio: float, target_ratio: float) -> float:
    return observed_ratio / target_ratio


def rotation_from_aspect_ratio(relative_ratio: float) -> float:
    """
    Estimate how far the target is turned away from the camera.

    A sighting at least as wide as the real target counts as facing the
    camera (0.0). Ratios below -1 raise ``ValueError``.
    """
    if relative_ratio >= 1.0:
        return 0.0
    return max(math.acos(relative_ratio), 0.0)


# ------------------------------------------------------------------ #
#   P L A N A R   H E L P E R S
# ------------------------------------------------------------------ #
def point_segment_distance(p: Point, a: Point, b: Point) -> float:
    """Distance from point ``p`` to the segment ``a``-``b``."""
    segment = ShapelyPoint(a) if tuple(a) == tuple(b) else LineString([a, b])
    return float(ShapelyPoint(p).distance(segment))
