# container.py
"""Per camera x target storage and the pixel -> robot transform sequence."""
from __future__ import annotations

import logging
import math
from typing import Callable, List, Optional, Sequence, Tuple

from sightings import camera_math
from sightings.config import CameraConfig
from sightings.sighting import Sighting
from sightings.target import VisionTarget

logger = logging.getLogger(__name__)

_NUMERIC_ERRORS = (ZeroDivisionError, ValueError, OverflowError)


def _finite_or_none(fn: Callable[[], float], what: str, sighting: Sighting) -> Optional[float]:
    """Evaluate ``fn``; degenerate geometry becomes ``None``."""
    try:
        value = fn()
    except _NUMERIC_ERRORS as exc:
        logger.debug("[Container] %s unavailable for %r: %s", what, sighting, exc)
        return None
    if not math.isfinite(value):
        logger.debug("[Container] %s unavailable for %r: non-finite %s", what, sighting, value)
        return None
    return value


class SightingContainer:
    """
    Sightings of one target seen by one camera.

    ``update`` replaces the processed collection with a new tuple in a single
    assignment, so concurrent readers always see a complete frame.
    """

    def __init__(self, camera: CameraConfig, target: VisionTarget) -> None:
        self.camera = camera
        self.target = target
        self._raw: Tuple[Sighting, ...] = ()        # pre-filtered, pre-transform
        self._processed: Tuple[Sighting, ...] = ()  # transformed, post-filtered

    # ------------------------------------------------------------------ #
    #   P U B L I C   A P I
    # ------------------------------------------------------------------ #
    def update(self, detections: Sequence[object]) -> None:
        """
        Run one frame's detections through the full sequence.

        ``detections`` holds contours (ordered polygons) and/or ``Sighting``
        objects. Sightings are copied with their derived fields cleared, so a
        batch (or another container's output) can feed several containers.
        """
        batch = [self._fresh(d) for d in detections]
        raw = self.target.validate_raw(batch)
        self._raw = tuple(raw)

        self._calculate_camera_pitches(raw)
        self._calculate_camera_distances(raw)
        self._calculate_camera_yaws(raw)
        self._placement_adjust_cartesian(raw)
        self._calculate_relative_aspect_ratios(raw)
        self._calculate_rotations(raw)

        processed = self.target.validate_processed(list(raw))
        seen = {id(s) for s in raw}
        if any(id(s) not in seen for s in processed):
            logger.warning(
                "[Container] Post-processing filter for %r returned sightings it was "
                "not given; merged sightings lose their computed values",
                self.target.name,
            )
        self._processed = tuple(processed)

    def get_processed(self) -> List[Sighting]:
        """Validated sightings from the most recent frame."""
        return list(self._processed)

    def set_sightings(self, sightings: Sequence[Sighting]) -> None:
        """Overwrite the processed collection (for cameras doing their own math)."""
        self._processed = tuple(sightings)

    def count(self) -> int:
        return len(self._processed)

    @property
    def raw_sightings(self) -> List[Sighting]:
        return list(self._raw)

    def __len__(self) -> int:
        return self.count()

    def __repr__(self) -> str:
        return f"<SightingContainer target={self.target.name!r} count={self.count()}>"

    # ------------------------------------------------------------------ #
    #   T R A N S F O R M   S T E P S   (order matters)
    # ------------------------------------------------------------------ #
    @staticmethod
    def _fresh(detection: object) -> Sighting:
        if isinstance(detection, Sighting):
            sighting = detection.copy()
            sighting.clear_derived()
            return sighting
        return Sighting(detection)

    def _calculate_camera_pitches(self, batch: List[Sighting]) -> None:
        cam = self.camera
        for s in batch:
            s.camera_pitch = _finite_or_none(
                lambda: camera_math.pixel_to_pitch(s.center_y, cam.pixel_height, cam.vertical_fov),
                "camera pitch", s,
            )

    def _calculate_camera_distances(self, batch: List[Sighting]) -> None:
        cam = self.camera
        for s in batch:
            if s.camera_pitch is None:
                continue
            s.camera_distance = _finite_or_none(
                lambda: camera_math.pitch_to_distance(
                    s.camera_pitch, cam.vertical_angle, self.target.height, cam.vertical_offset
                ),
                "camera distance", s,
            )

    def _calculate_camera_yaws(self, batch: List[Sighting]) -> None:
        cam = self.camera
        for s in batch:
            s.camera_yaw = _finite_or_none(
                lambda: camera_math.pixel_to_angle(s.center_x, cam.pixel_width, cam.horizontal_fov),
                "camera yaw", s,
            )

    def _placement_adjust_cartesian(self, batch: List[Sighting]) -> None:
        """Treat the camera as a point on the robot and re-express each
        sighting relative to the robot's centre."""
        cam = self.camera
        for s in batch:
            if s.camera_distance is None or s.camera_yaw is None:
                continue
            try:
                x, y = camera_math.polar_to_robot_cartesian(
                    s.camera_distance,
                    s.camera_yaw,
                    cam.horizontal_offset,
                    cam.depth_offset,
                    cam.horizontal_angle,
                )
            except _NUMERIC_ERRORS as exc:
                logger.debug("[Container] robot position unavailable for %r: %s", s, exc)
                continue
            if not (math.isfinite(x) and math.isfinite(y)):
                logger.debug("[Container] robot position unavailable for %r: non-finite", s)
                continue
            s.robot_position = (x, y)
            s.robot_distance = _finite_or_none(lambda: math.hypot(x, y), "robot distance", s)
            s.robot_yaw = _finite_or_none(
                lambda: camera_math.cartesian_to_robot_yaw(x, y), "robot yaw", s
            )

    def _calculate_relative_aspect_ratios(self, batch: List[Sighting]) -> None:
        for s in batch:
            s.relative_aspect_ratio = _finite_or_none(
                lambda: camera_math.relative_aspect_ratio(s.aspect_ratio, self.target.aspect_ratio),
                "relative aspect ratio", s,
            )

    def _calculate_rotations(self, batch: List[Sighting]) -> None:
        """Aspect-ratio based rotation; unreliable for multi-piece targets."""
        for s in batch:
            if s.relative_aspect_ratio is None:
                continue
            s.robot_rotation = _finite_or_none(
                lambda: camera_math.rotation_from_aspect_ratio(s.relative_aspect_ratio),
                "robot rotation", s,
            )
