import threading
from typing import Any, List

import numpy as np

from sightings.camera import SightingCamera
from sightings.config import CameraConfig
from sightings.sighting import Sighting
from sightings.target import VisionTarget
from sightings.targeting import Pipeline


class _ListPipeline(Pipeline):
    """Treats the 'frame' as the list of contours already found in it."""

    def process(self, frame: Any) -> List[Any]:
        return list(frame)


def _square(x: int, y: int, size: int = 10) -> np.ndarray:
    return np.array(
        [[[x, y]], [[x + size, y]], [[x + size, y + size]], [[x, y + size]]], dtype=np.int32
    )


def test_process_frame_feeds_every_supported_target(flat_camera: CameraConfig) -> None:
    rocket = VisionTarget("Rocket", 28.75, 1.0)
    cargo = VisionTarget("Cargo", 20.01, 1.0)
    rocket.set_pre_processing_filter(lambda batch: [s for s in batch if s.area > 200])
    pipeline = _ListPipeline()
    pipeline.add_supported_targets(rocket, cargo)
    camera = SightingCamera(flat_camera)
    camera.add_pipeline(pipeline)

    camera.process_frame([_square(20, 20), _square(100, 30, size=20)])

    assert camera.sighting_count(cargo) == 2
    assert camera.sighting_count(rocket) == 1
    rocket_s = camera.get_sightings(rocket)[0]
    cargo_s = camera.get_sightings(cargo)[1]
    assert rocket_s is not cargo_s
    assert rocket_s.camera_distance != cargo_s.camera_distance
    assert set(camera.targets()) == {rocket, cargo}


def test_unseen_target_has_no_sightings(flat_camera: CameraConfig) -> None:
    camera = SightingCamera(flat_camera)
    ghost = VisionTarget("Ghost", 1.0, 1.0)
    assert camera.sighting_count(ghost) == 0
    assert camera.get_sightings(ghost) == []


def test_dynamic_target_logic_picks_targets_per_frame(flat_camera: CameraConfig) -> None:
    low = VisionTarget("Low", 5.0, 1.0)
    high = VisionTarget("High", 50.0, 1.0)
    arm_up = {"value": False}
    pipeline = _ListPipeline()
    pipeline.set_target_logic(lambda: [high] if arm_up["value"] else [low])
    camera = SightingCamera(flat_camera)
    camera.add_pipeline(pipeline)

    camera.process_frame([_square(20, 20)])
    assert camera.sighting_count(low) == 1
    assert camera.sighting_count(high) == 0

    arm_up["value"] = True
    camera.process_frame([_square(20, 20), _square(60, 20)])
    assert camera.sighting_count(high) == 2
    # Targets not active this frame keep their last result.
    assert camera.sighting_count(low) == 1


def test_update_target_without_pipeline(flat_camera: CameraConfig, target: VisionTarget) -> None:
    camera = SightingCamera(flat_camera)
    camera.update_target(target, [Sighting.from_rect(10, 10, 4, 4)])
    assert camera.sighting_count(target) == 1
    assert camera.container_for(target).count() == 1


def test_first_touch_creates_one_container(flat_camera: CameraConfig, target: VisionTarget) -> None:
    camera = SightingCamera(flat_camera)
    barrier = threading.Barrier(8)
    found = []

    def worker() -> None:
        barrier.wait()
        found.append(camera.container_for(target))

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert len(found) == 8
    assert all(c is found[0] for c in found)


def test_readers_never_see_a_partial_frame(flat_camera: CameraConfig, target: VisionTarget) -> None:
    camera = SightingCamera(flat_camera)
    small = [Sighting.from_rect(10, 10, 4, 4)]
    large = [Sighting.from_rect(10 + 10 * i, 10, 4, 4) for i in range(5)]
    camera.update_target(target, small)
    done = threading.Event()
    sizes = set()
    complete = set()

    def reader() -> None:
        while not done.is_set():
            batch = camera.get_sightings(target)
            sizes.add(len(batch))
            complete.add(all(s.camera_yaw is not None for s in batch))

    t = threading.Thread(target=reader)
    t.start()
    for i in range(200):
        camera.update_target(target, large if i % 2 else small)
    done.set()
    t.join()

    assert sizes <= {1, 5}
    assert complete <= {True}
