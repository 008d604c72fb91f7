"""Tuneable parameters of the face engine."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class FaceFinderConfig:
    """Parameters for face discovery.

    Attributes
    ----------
    max_membranes_per_cell : int
        A traced face with more boundary membranes than this is taken to be
        the unbounded region around the tissue: its membranes are marked
        ``PERIMETER`` and no cell is kept.  This is a heuristic; a genuinely
        large cell would be pruned too.
    """

    max_membranes_per_cell: int = 20

    def __post_init__(self) -> None:
        if self.max_membranes_per_cell < 1:
            raise ValueError("max_membranes_per_cell must be >= 1")


DEFAULT_CONFIG = FaceFinderConfig()
