# sighting.py
"""
A single detected region in one frame.

Pixel-space values are filled in as soon as the sighting is built from a
contour. Robot-relative values stay ``None`` until a ``SightingContainer``
runs its transform sequence over the sighting.
"""
from __future__ import annotations

import copy
from typing import List, Optional, Sequence, Tuple

import cv2
import numpy as np
from shapely.geometry import MultiPoint, Polygon
from shapely.geometry.base import BaseGeometry
from shapely.validation import make_valid

from sightings.camera_math import point_segment_distance
from sightings.common import Point

_DERIVED_FIELDS = (
    "camera_yaw",
    "camera_pitch",
    "camera_distance",
    "robot_distance",
    "robot_yaw",
    "robot_rotation",
    "relative_aspect_ratio",
    "robot_position",
)


def _as_point_list(points) -> List[Point]:
    arr = np.asarray(points, dtype=np.float64).reshape(-1, 2)
    return [(float(x), float(y)) for x, y in arr]


def _region_from_points(points: Sequence[Point]) -> BaseGeometry:
    if len(points) < 3:
        return MultiPoint(points).convex_hull
    poly = Polygon(points)
    return poly if poly.is_valid else make_valid(poly)


class Sighting:
    def __init__(self, contour) -> None:
        """
        Build a sighting from an ordered boundary polygon.

        ``contour`` is either a sequence of ``(x, y)`` pairs or an OpenCV
        contour array of shape ``(N, 1, 2)``.
        """
        self.raw_points: List[Point] = _as_point_list(contour)
        if not self.raw_points:
            raise ValueError("Cannot build a sighting from an empty contour")

        pts = np.asarray(self.raw_points, dtype=np.float32).reshape(-1, 1, 2)
        x, y, w, h = cv2.boundingRect(pts)
        self.region: BaseGeometry = _region_from_points(self.raw_points)
        self.raw_sighting_count = 1
        self._set_pixel_fields(x, y, w, h, float(cv2.contourArea(pts)))

        # Each derived value is independent; None means "not computed".
        self.camera_yaw: Optional[float] = None
        self.camera_pitch: Optional[float] = None
        self.camera_distance: Optional[float] = None
        self.robot_distance: Optional[float] = None
        self.robot_yaw: Optional[float] = None
        self.robot_rotation: Optional[float] = None
        self.relative_aspect_ratio: Optional[float] = None
        self.robot_position: Optional[Tuple[float, float]] = None

    @classmethod
    def from_rect(cls, x: float, y: float, width: float, height: float) -> "Sighting":
        """Synthetic, fully solid rectangular sighting."""
        if width <= 0 or height <= 0:
            raise ValueError(f"Rectangle size must be positive, got {width}x{height}")
        corners = [(x, y), (x + width, y), (x + width, y + height), (x, y + height)]
        sighting = cls(corners)
        sighting._set_pixel_fields(x, y, width, height, float(width * height))
        return sighting

    # ------------------------------------------------------------------ #
    #   P I X E L   F I E L D S
    # ------------------------------------------------------------------ #
    def _set_pixel_fields(self, x: float, y: float, w: float, h: float, area: float) -> None:
        self.top_left_x = x
        self.top_left_y = y
        self.width = w
        self.height = h
        self.area = area
        self.center_x = x + w / 2.0
        self.center_y = y + h / 2.0
        self.solidity = area / (w * h)
        self.aspect_ratio = w / h

    @property
    def bounding_rect(self) -> Tuple[float, float, float, float]:
        return (self.top_left_x, self.top_left_y, self.width, self.height)

    @property
    def is_processed(self) -> bool:
        """True if any robot-relative value has been computed."""
        return any(getattr(self, name) is not None for name in _DERIVED_FIELDS)

    def clear_derived(self) -> None:
        for name in _DERIVED_FIELDS:
            setattr(self, name, None)

    # ------------------------------------------------------------------ #
    #   M E R G E
    # ------------------------------------------------------------------ #
    def merge(self, other: "Sighting") -> "Sighting":
        """
        Absorb ``other`` (another fragment of the same physical target).

        Pixel-space values are recomputed from the union. Every derived value
        is cleared, so merging belongs in a pre-processing filter only.
        Returns ``self``.
        """
        if other is self:
            raise ValueError("A sighting cannot be merged with itself")

        self.raw_sighting_count += other.raw_sighting_count
        self.raw_points.extend(other.raw_points)
        self.region = self.region.union(other.region)

        left = min(self.top_left_x, other.top_left_x)
        top = min(self.top_left_y, other.top_left_y)
        right = max(self.top_left_x + self.width, other.top_left_x + other.width)
        bottom = max(self.top_left_y + self.height, other.top_left_y + other.height)
        self._set_pixel_fields(left, top, right - left, bottom - top, self.area + other.area)

        self.clear_derived()
        return self

    # ------------------------------------------------------------------ #
    #   P I X E L   D I S T A N C E
    # ------------------------------------------------------------------ #
    def distance_to(self, other: "Sighting") -> float:
        """
        Approximate pixel gap between the two boundaries.

        For every pair of boundary segments the first endpoint of each is
        measured against the other segment; the smallest of those distances is
        returned. Closest points strictly inside both segments are missed.
        """
        best = float("inf")
        base_pts = self.raw_points
        goal_pts = other.raw_points
        for i, base_a in enumerate(base_pts):
            base_b = base_pts[(i + 1) % len(base_pts)]
            for j, goal_a in enumerate(goal_pts):
                goal_b = goal_pts[(j + 1) % len(goal_pts)]
                best = min(
                    best,
                    point_segment_distance(goal_a, base_a, base_b),
                    point_segment_distance(base_a, goal_a, goal_b),
                )
        return best

    # ------------------------------------------------------------------ #
    #   M I S C
    # ------------------------------------------------------------------ #
    def copy(self) -> "Sighting":
        """Independent copy; the shapely region is immutable and shared."""
        dup = copy.copy(self)
        dup.raw_points = list(self.raw_points)
        return dup

    def __str__(self) -> str:
        return (
            f"({self.top_left_x}, {self.top_left_y}) to "
            f"({self.top_left_x + self.width}, {self.top_left_y + self.height})"
        )

    def __repr__(self) -> str:
        return (
            f"<Sighting center=({self.center_x:.1f}, {self.center_y:.1f}) "
            f"size={self.width}x{self.height} count={self.raw_sighting_count}>"
        )
