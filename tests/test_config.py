import json
import math
from pathlib import Path

import pytest

from sightings.common import ConfigurationError
from sightings.config import CameraConfig, load_setup


def _write_json(path: Path, obj: dict) -> None:
    path.write_text(json.dumps(obj))


def test_camera_config_defaults_to_flat_centered_mount() -> None:
    cam = CameraConfig(vertical_fov=0.9, horizontal_fov=1.0, pixel_width=320, pixel_height=240)
    assert cam.horizontal_offset == 0.0
    assert cam.vertical_angle == 0.0


@pytest.mark.parametrize(
    "kwargs",
    [
        {"pixel_width": 0},
        {"pixel_height": -240},
        {"vertical_fov": 0.0},
        {"horizontal_fov": math.pi},
    ],
)
def test_camera_config_rejects_bad_intrinsics(kwargs: dict) -> None:
    base = {"vertical_fov": 0.9, "horizontal_fov": 1.0, "pixel_width": 320, "pixel_height": 240}
    with pytest.raises(ConfigurationError):
        CameraConfig(**{**base, **kwargs})


def test_camera_config_is_immutable() -> None:
    cam = CameraConfig(vertical_fov=0.9, horizontal_fov=1.0, pixel_width=320, pixel_height=240)
    with pytest.raises(AttributeError):
        cam.pixel_width = 640  # type: ignore[misc]


def test_from_degrees_derives_vertical_fov() -> None:
    cam = CameraConfig.from_degrees(54.0, 320, 240, vertical_angle_deg=10.0, vertical_offset=7.28)
    assert cam.horizontal_fov == pytest.approx(math.radians(54.0))
    assert math.tan(cam.vertical_fov / 2) == pytest.approx(0.75 * math.tan(cam.horizontal_fov / 2))
    assert cam.vertical_angle == pytest.approx(math.radians(10.0))
    assert cam.vertical_offset == 7.28


def test_from_degrees_with_explicit_vertical_fov() -> None:
    cam = CameraConfig.from_degrees(54.0, 320, 240, 53.13)
    assert cam.vertical_fov == pytest.approx(math.radians(53.13))


def test_from_degrees_rejects_zero_fov() -> None:
    with pytest.raises(ConfigurationError):
        CameraConfig.from_degrees(0.0, 320, 240)


def test_load_setup(tmp_path: Path) -> None:
    path = tmp_path / "setup.json"
    _write_json(path, {
        "cameras": {
            "front": {
                "horizontal_fov_deg": 54.0,
                "vertical_fov_deg": 53.13,
                "pixel_width": 320,
                "pixel_height": 240,
                "horizontal_offset": 12.0,
                "vertical_offset": 7.28125,
            },
            "side": {"horizontal_fov": 1.2, "pixel_width": 640, "pixel_height": 480},
        },
        "targets": {"rocket": {"height": 28.75, "aspect_ratio": 1.0}},
    })

    setup = load_setup(path)

    front = setup.cameras["front"]
    assert front.horizontal_fov == pytest.approx(math.radians(54.0))
    assert front.vertical_fov == pytest.approx(math.radians(53.13))
    assert front.horizontal_offset == 12.0
    side = setup.cameras["side"]
    assert math.tan(side.vertical_fov / 2) == pytest.approx(0.75 * math.tan(0.6))
    rocket = setup.targets["rocket"]
    assert rocket.name == "rocket"
    assert rocket.height == 28.75
    assert not rocket.has_pre_filter


def test_load_setup_missing_file(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        load_setup(tmp_path / "nope.json")


def test_load_setup_bad_json(tmp_path: Path) -> None:
    path = tmp_path / "setup.json"
    path.write_text("{ not json")
    with pytest.raises(ConfigurationError, match="JSON error"):
        load_setup(path)


def test_load_setup_unknown_camera_key(tmp_path: Path) -> None:
    path = tmp_path / "setup.json"
    _write_json(path, {"cameras": {"c": {"horizontal_fov": 1.0, "pixel_width": 1, "pixel_height": 1, "zoom": 2}}})
    with pytest.raises(ConfigurationError, match="zoom"):
        load_setup(path)


def test_load_setup_missing_camera_key(tmp_path: Path) -> None:
    path = tmp_path / "setup.json"
    _write_json(path, {"cameras": {"c": {"pixel_width": 320, "pixel_height": 240}}})
    with pytest.raises(ConfigurationError, match="horizontal_fov"):
        load_setup(path)


def test_load_setup_incomplete_target(tmp_path: Path) -> None:
    path = tmp_path / "setup.json"
    _write_json(path, {"targets": {"cargo": {"height": 20.0}}})
    with pytest.raises(ConfigurationError, match="aspect_ratio"):
        load_setup(path)
