# targeting.py
"""Which targets a vision pipeline's output is stored against, per frame."""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, List, Optional, Sequence

from sightings.common import ConfigurationError, TargetLogic
from sightings.target import VisionTarget


class TargetPolicy(ABC):
    @abstractmethod
    def active_targets(self) -> List[VisionTarget]:
        """Targets to update for the current frame."""


class FixedTargets(TargetPolicy):
    """The same targets every frame. Order is kept and duplicates ignored."""

    def __init__(self, targets: Sequence[VisionTarget] = ()) -> None:
        self._targets: List[VisionTarget] = []
        self.add(*targets)

    def add(self, *targets: VisionTarget) -> None:
        for target in targets:
            if target not in self._targets:
                self._targets.append(target)

    def remove(self, *targets: VisionTarget) -> None:
        for target in targets:
            if target in self._targets:
                self._targets.remove(target)

    def active_targets(self) -> List[VisionTarget]:
        return list(self._targets)

    def __repr__(self) -> str:
        return f"<FixedTargets {[t.name for t in self._targets]}>"


class DynamicTargets(TargetPolicy):
    """
    Asks a function each frame which targets apply, e.g. a camera on an arm
    that should only look for some targets in some poses.
    """

    def __init__(self, logic: Optional[TargetLogic]) -> None:
        if logic is None or not callable(logic):
            raise ConfigurationError(
                "Dynamic targeting needs a callable target logic function"
            )
        self._logic = logic

    def active_targets(self) -> List[VisionTarget]:
        return list(self._logic())

    def __repr__(self) -> str:
        return f"<DynamicTargets logic={self._logic!r}>"


class Pipeline(ABC):
    """
    Turns a frame into contours that become sightings of its targets.

    By default the output feeds a fixed list of targets (see
    ``add_supported_targets``). ``set_target_logic`` switches to a per-frame
    decision; ``use_fixed_targets`` switches back.
    """

    def __init__(self) -> None:
        self._fixed = FixedTargets()
        self._policy: TargetPolicy = self._fixed

    @abstractmethod
    def process(self, frame: Any) -> List[Any]:
        """Return the contours (ordered polygons) found in ``frame``."""

    # ------------------------------------------------------------------ #
    #   T A R G E T S
    # ------------------------------------------------------------------ #
    @property
    def policy(self) -> TargetPolicy:
        return self._policy

    def add_supported_targets(self, *targets: VisionTarget) -> None:
        self._fixed.add(*targets)

    def remove_supported_targets(self, *targets: VisionTarget) -> None:
        self._fixed.remove(*targets)

    def set_target_logic(self, logic: TargetLogic) -> None:
        """Advanced: choose targets per frame. Fails fast without a callable."""
        self._policy = DynamicTargets(logic)

    def use_fixed_targets(self) -> None:
        self._policy = self._fixed

    def supported_targets(self) -> List[VisionTarget]:
        return self._policy.active_targets()
