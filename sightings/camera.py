# camera.py
"""Routes one camera's pipeline output into per-target sighting containers."""

from __future__ import annotations

import logging
import threading
from typing import Any, Dict, List, Sequence

from sightings.config import CameraConfig
from sightings.container import SightingContainer
from sightings.sighting import Sighting
from sightings.targeting import Pipeline
from sightings.target import VisionTarget

logger = logging.getLogger(__name__)


class SightingCamera:
    """
    Frame-source agnostic camera: whoever grabs frames calls
    ``process_frame``; any thread may read sightings at the same time.
    """

    def __init__(self, config: CameraConfig) -> None:
        self.config = config
        self.pipelines: List[Pipeline] = []
        self._containers: Dict[VisionTarget, SightingContainer] = {}
        self._lock = threading.Lock()

    # ------------------------------------------------------------------ #
    #   S E T U P
    # ------------------------------------------------------------------ #
    def add_pipeline(self, pipeline: Pipeline) -> None:
        self.pipelines.append(pipeline)

    def container_for(self, target: VisionTarget) -> SightingContainer:
        """Return the container for ``target``, creating it on first use."""
        container = self._containers.get(target)
        if container is not None:
            return container
        with self._lock:
            container = self._containers.get(target)
            if container is None:
                container = SightingContainer(self.config, target)
                self._containers[target] = container
                logger.debug("[Camera] Tracking new target %r", target.name)
        return container

    # ------------------------------------------------------------------ #
    #   P R O C E S S I N G
    # ------------------------------------------------------------------ #
    def process_frame(self, frame: Any) -> None:
        """Run every pipeline on ``frame`` and update its active targets."""
        for pipeline in self.pipelines:
            detections = [Sighting(c) for c in pipeline.process(frame)]
            for target in pipeline.supported_targets():
                self.update_target(target, detections)

    def update_target(self, target: VisionTarget, detections: Sequence[Any]) -> None:
        self.container_for(target).update(detections)

    # ------------------------------------------------------------------ #
    #   Q U E R I E S
    # ------------------------------------------------------------------ #
    def sighting_count(self, target: VisionTarget) -> int:
        container = self._containers.get(target)
        return container.count() if container is not None else 0

    def get_sightings(self, target: VisionTarget) -> List[Sighting]:
        """Validated sightings of ``target`` from the last frame ([] if never seen)."""
        container = self._containers.get(target)
        return container.get_processed() if container is not None else []

    def targets(self) -> List[VisionTarget]:
        return list(self._containers)

    def __repr__(self) -> str:
        return f"<SightingCamera {self.config.pixel_width}x{self.config.pixel_height} targets={len(self._containers)}>"
