"""Exceptions raised by the face engine."""

from __future__ import annotations


class TopologyError(Exception):
    """Base class for face-topology failures."""


class BrokenTopologyError(TopologyError, RuntimeError):
    """The invariant "every membrane has two valid face sides" is violated.

    Raised when a face trace does not close within its step bound, or when
    a merge cannot find a boundary membrane to retrace from.  The cell index
    cannot be repaired locally; callers should rebuild all faces.
    """


class DegenerateFaceError(TopologyError, ValueError):
    """An empty face was handed to the boundary stitcher."""
