# config.py
"""Typed configuration blobs for cameras, plus JSON setup loading."""
from __future__ import annotations

import json
import logging
import math
from dataclasses import MISSING, dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from sightings.camera_math import vertical_fov_from_horizontal
from sightings.common import ConfigurationError
from sightings.target import VisionTarget

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CameraConfig:
    """
    Intrinsic and mounting parameters of one camera.

    Angles are radians. Offsets share whatever linear unit the targets'
    heights use.
    """
    vertical_fov: float
    horizontal_fov: float
    pixel_width: int
    pixel_height: int
    horizontal_offset: float = 0.0  # right of robot centre is positive
    vertical_offset: float = 0.0    # lens height off the ground
    depth_offset: float = 0.0       # forward of robot centre is positive
    horizontal_angle: float = 0.0   # mounting yaw, clockwise positive
    vertical_angle: float = 0.0     # mounting tilt, up positive

    def __post_init__(self) -> None:
        if self.pixel_width <= 0 or self.pixel_height <= 0:
            raise ConfigurationError(
                f"Pixel size must be positive, got {self.pixel_width}x{self.pixel_height}"
            )
        for name in ("vertical_fov", "horizontal_fov"):
            fov = getattr(self, name)
            if not 0.0 < fov < math.pi:
                raise ConfigurationError(f"{name} must be in (0, pi) radians, got {fov}")

    @classmethod
    def from_degrees(
        cls,
        horizontal_fov_deg: float,
        pixel_width: int,
        pixel_height: int,
        vertical_fov_deg: Optional[float] = None,
        *,
        horizontal_offset: float = 0.0,
        vertical_offset: float = 0.0,
        depth_offset: float = 0.0,
        horizontal_angle_deg: float = 0.0,
        vertical_angle_deg: float = 0.0,
    ) -> "CameraConfig":
        """Build from data-sheet style degree values.

        Without ``vertical_fov_deg`` the vertical FOV is derived from the
        horizontal one and the pixel aspect.
        """
        hfov = math.radians(horizontal_fov_deg)
        if vertical_fov_deg is None:
            try:
                vfov = vertical_fov_from_horizontal(hfov, pixel_width, pixel_height)
            except ValueError as exc:
                raise ConfigurationError(str(exc)) from exc
        else:
            vfov = math.radians(vertical_fov_deg)
        return cls(
            vertical_fov=vfov,
            horizontal_fov=hfov,
            pixel_width=pixel_width,
            pixel_height=pixel_height,
            horizontal_offset=horizontal_offset,
            vertical_offset=vertical_offset,
            depth_offset=depth_offset,
            horizontal_angle=math.radians(horizontal_angle_deg),
            vertical_angle=math.radians(vertical_angle_deg),
        )

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "CameraConfig":
        """
        Build from a plain mapping. Angle keys may carry a ``_deg`` suffix
        instead of being given in radians.
        """
        known = {f.name for f in fields(cls)}
        values: Dict[str, Any] = {}
        for key, value in data.items():
            if key.endswith("_deg") and key[: -len("_deg")] in known:
                values[key[: -len("_deg")]] = math.radians(float(value))
            elif key in known:
                values[key] = value
            else:
                raise ConfigurationError(f"Unknown camera setting {key!r}")

        if "vertical_fov" not in values and {"horizontal_fov", "pixel_width", "pixel_height"} <= values.keys():
            try:
                values["vertical_fov"] = vertical_fov_from_horizontal(
                    float(values["horizontal_fov"]),
                    values["pixel_width"],
                    values["pixel_height"],
                )
            except ValueError as exc:
                raise ConfigurationError(str(exc)) from exc

        missing = [
            f.name for f in fields(cls)
            if f.name not in values and f.default is MISSING
        ]
        if missing:
            raise ConfigurationError(f"Missing camera settings: {', '.join(missing)}")
        return cls(**values)


@dataclass
class VisionSetup:
    """Cameras and targets loaded from a setup file, keyed by name."""
    cameras: Dict[str, CameraConfig] = field(default_factory=dict)
    targets: Dict[str, VisionTarget] = field(default_factory=dict)


def _target_from_dict(name: str, data: Mapping[str, Any]) -> VisionTarget:
    unknown = set(data) - {"height", "aspect_ratio"}
    if unknown:
        raise ConfigurationError(f"Unknown setting(s) for target {name!r}: {sorted(unknown)}")
    try:
        return VisionTarget(name, float(data["height"]), float(data["aspect_ratio"]))
    except KeyError as exc:
        raise ConfigurationError(f"Target {name!r} is missing {exc.args[0]!r}") from exc


def load_setup(path: str | Path) -> VisionSetup:
    """
    Read a JSON setup file of the form::

        {
          "cameras": {"front": {"horizontal_fov_deg": 54, "pixel_width": 320, ...}},
          "targets": {"rocket": {"height": 28.75, "aspect_ratio": 1.0}}
        }
    """
    path = Path(path).expanduser().resolve()
    try:
        with path.open("r", encoding="utf-8") as fp:
            raw = json.load(fp)
    except json.JSONDecodeError as exc:
        raise ConfigurationError(f"JSON error in {path}: {exc}") from exc

    if not isinstance(raw, dict):
        raise ConfigurationError(f"{path} must contain a JSON object")

    setup = VisionSetup()
    for name, cam in (raw.get("cameras") or {}).items():
        setup.cameras[name] = CameraConfig.from_dict(cam)
    for name, tgt in (raw.get("targets") or {}).items():
        setup.targets[name] = _target_from_dict(name, tgt)

    logger.info(
        "[Config] Loaded %d camera(s) and %d target(s) from %s",
        len(setup.cameras), len(setup.targets), path,
    )
    return setup
