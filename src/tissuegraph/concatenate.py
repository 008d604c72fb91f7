"""Boundary polygons of traced faces.

Membrane polylines are stored source→target, independently of the sense in
which a face trace walks them.  The stitcher therefore joins them greedily
by nearest endpoints instead of relying on the trace direction.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, List, Optional, Sequence

from .errors import DegenerateFaceError
from .geometry import mean_point, sq_distance
from .models import MembranePart, Point

if TYPE_CHECKING:
    from .junction_graph import JunctionGraph


def membrane_centroid(graph: "JunctionGraph", face: Sequence[MembranePart]) -> Point:
    """Topological centroid of a face: the mean of its membrane endpoints.

    A face made of a single membrane (a solitary cell closed on itself) uses
    the mean of that membrane's pixels instead.
    """
    if not face:
        raise DegenerateFaceError("Cannot compute the centroid of an empty face")

    if len({m.id for m in face}) == 1:
        return mean_point(graph.membrane_pixels(face[0]))

    sx = 0.0
    sy = 0.0
    for membrane in face:
        source = graph.position(membrane.source_id)
        target = graph.position(membrane.target_id)
        sx += source[0] + target[0]
        sy += source[1] + target[1]
    n = 2.0 * len(face)
    return (sx / n, sy / n)


def stitch_boundary(
    graph: "JunctionGraph",
    face: Sequence[MembranePart],
    centroid: Optional[Point] = None,
) -> tuple[Point, ...]:
    """Concatenate the polylines of *face* into one centroid-relative loop.

    The first two polylines are oriented by the closest of their four
    endpoint pairings; every later polyline is flipped when its far end is
    closer to the current tail.  A join point present on both sides is kept
    once.

    The face is treated as a cycle and stitched from the first membrane
    followed by a different one, so a trace that starts by walking a
    dangling membrane out and back still yields a closed loop.
    """
    if not face:
        raise DegenerateFaceError("Cannot stitch the boundary of an empty face")
    if centroid is None:
        centroid = membrane_centroid(graph, face)
    face = _start_at_join(face)

    points: List[Point] = list(graph.membrane_pixels(face[0]))
    for index, membrane in enumerate(face[1:]):
        pixels = list(graph.membrane_pixels(membrane))
        if index == 0:
            _orient_first_pair(points, pixels)
        else:
            tail = points[-1]
            if sq_distance(tail, pixels[-1]) < sq_distance(tail, pixels[0]):
                pixels.reverse()
        _cat(points, pixels)

    cx, cy = centroid
    return tuple((x - cx, y - cy) for x, y in points)


def _start_at_join(face: Sequence[MembranePart]) -> List[MembranePart]:
    n = len(face)
    for index in range(n):
        if face[index].id != face[(index + 1) % n].id:
            return list(face[index:]) + list(face[:index])
    return list(face)


def _orient_first_pair(first: List[Point], second: List[Point]) -> None:
    a1b1 = sq_distance(first[0], second[0])
    a1b2 = sq_distance(first[0], second[-1])
    a2b1 = sq_distance(first[-1], second[0])
    a2b2 = sq_distance(first[-1], second[-1])
    smallest = min(a1b1, a1b2, a2b1, a2b2)

    if smallest == a1b1:
        first.reverse()
    elif smallest == a1b2:
        first.reverse()
        second.reverse()
    elif smallest == a2b1:
        pass
    else:
        second.reverse()


def _cat(points: List[Point], pixels: List[Point]) -> None:
    start = 1 if points[-1] == pixels[0] else 0
    points.extend(pixels[start:])
