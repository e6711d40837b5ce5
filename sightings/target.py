# target.py
"""Real-world description of something the cameras search for."""
from __future__ import annotations

from typing import List, Optional, Sequence

from sightings.common import ConfigurationError, SightingFilter
from sightings.sighting import Sighting


class VisionTarget:
    """
    A physical target of known height and shape.

    Two optional filters weed out invalid sightings: the pre-processing
    filter sees pixel-space values only and is the one place where fragments
    may be merged; the post-processing filter runs after every robot-relative
    value has been computed. An unset filter passes its batch through.
    """

    def __init__(self, name: str, height: float, aspect_ratio: float) -> None:
        """
        Parameters
        ----------
        name         : str    debugging label
        height       : float  height of the target's centre off the ground
        aspect_ratio : float  real-world width / height
        """
        self.name = name
        self.height = float(height)
        self.aspect_ratio = float(aspect_ratio)
        self._pre_filter: Optional[SightingFilter] = None
        self._post_filter: Optional[SightingFilter] = None

    # ------------------------------------------------------------------ #
    #   F I L T E R   S E T U P
    # ------------------------------------------------------------------ #
    @staticmethod
    def _check_filter(fn: Optional[SightingFilter]) -> Optional[SightingFilter]:
        if fn is not None and not callable(fn):
            raise ConfigurationError(f"Sighting filter must be callable, got {type(fn).__name__}")
        return fn

    def set_pre_processing_filter(self, fn: Optional[SightingFilter]) -> None:
        """Attach (or with ``None`` remove) the pixel-space filter."""
        self._pre_filter = self._check_filter(fn)

    def set_post_processing_filter(self, fn: Optional[SightingFilter]) -> None:
        """Attach (or with ``None`` remove) the filter run after processing.

        It must not merge sightings: merging clears the computed values and
        nothing downstream recomputes them.
        """
        self._post_filter = self._check_filter(fn)

    @property
    def has_pre_filter(self) -> bool:
        return self._pre_filter is not None

    @property
    def has_post_filter(self) -> bool:
        return self._post_filter is not None

    # ------------------------------------------------------------------ #
    #   V A L I D A T I O N   (called by SightingContainer)
    # ------------------------------------------------------------------ #
    def validate_raw(self, sightings: Sequence[Sighting]) -> List[Sighting]:
        if self._pre_filter is None:
            return list(sightings)
        return list(self._pre_filter(list(sightings)))

    def validate_processed(self, sightings: Sequence[Sighting]) -> List[Sighting]:
        if self._post_filter is None:
            return list(sightings)
        return list(self._post_filter(list(sightings)))

    def __repr__(self) -> str:
        return (
            f"<VisionTarget {self.name!r} height={self.height} "
            f"aspect_ratio={self.aspect_ratio}>"
        )
