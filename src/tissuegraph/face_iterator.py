"""Rotational face tracing.

A face boundary is walked by always taking the sharpest turn in one
rotational sense at every junction: the rightmost turn for a clockwise
trace, the leftmost for a counter-clockwise one.  Because incident
membranes of a planar embedding are ordered by their true angle, this
visits exactly the membranes bounding one face, without any
point-in-polygon test.

Junctions of degree 1 make the walk turn back over the same membrane, so a
dangling branch is traversed on both of its sides as part of the face that
surrounds it.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Iterator, List, Optional, Tuple

from .errors import BrokenTopologyError
from .geometry import angle
from .models import MembranePart

if TYPE_CHECKING:
    from .junction_graph import JunctionGraph

# (membrane id, traversed source→target)
DirectedMembrane = Tuple[int, bool]


@dataclass(frozen=True)
class FaceStep:
    """One membrane of a traced face.

    *forward* tells whether the trace walked the membrane from its source to
    its target.  *is_cw* tells which side field belongs to the traced face:
    ``cell_id_cw`` when true, ``cell_id_ccw`` otherwise.
    """

    membrane: MembranePart
    forward: bool
    is_cw: bool


class FaceIterator:
    """Iterate the membranes of the face on one side of *start_id*.

    The face on the ``cw`` side of the start membrane is walked, starting
    with the start membrane traversed source→target.  Iteration stops when
    the walk comes back to that directed membrane.
    """

    def __init__(
        self,
        graph: "JunctionGraph",
        start_id: int,
        cw: bool = True,
        max_steps: Optional[int] = None,
    ) -> None:
        start = graph.membrane(start_id)
        self.graph = graph
        self.cw = cw
        self.start: DirectedMembrane = (start.id, True)
        self.next: DirectedMembrane = self.start
        self.pivot = start.target_id
        self.started = False
        self._steps = 0
        # Every side of every membrane is visited at most once per face.
        self._max_steps = 2 * len(graph.membranes) if max_steps is None else max_steps

    def __iter__(self) -> Iterator[FaceStep]:
        return self

    def has_next(self) -> bool:
        return not self.started or self.next != self.start

    def __next__(self) -> FaceStep:
        if not self.has_next():
            raise StopIteration
        self._steps += 1
        if self._steps > self._max_steps:
            raise BrokenTopologyError(
                f"Face trace from membrane {self.start[0]} did not close after "
                f"{self._max_steps} steps"
            )

        membrane_id, forward = self.next
        membrane = self.graph.membranes[membrane_id]
        step = FaceStep(membrane, forward, forward == self.cw)
        self._advance(membrane, forward)
        return step

    def _advance(self, membrane: MembranePart, forward: bool) -> None:
        self.started = True
        graph = self.graph
        pivot = self.pivot
        edges = graph.junctions[pivot].membrane_ids
        incoming_far = membrane.other_end(pivot)

        if len(edges) == 1:
            # Dead end: walk back over the same membrane.
            back = forward if membrane.is_loop() else not forward
            self.next = (membrane.id, back)
            self.pivot = incoming_far
            return

        pivot_pos = graph.position(pivot)
        far_pos = graph.position(incoming_far)
        bound = float("inf") if self.cw else float("-inf")
        chosen = None
        for candidate_id in edges:
            if candidate_id == membrane.id:
                continue
            candidate = graph.membranes[candidate_id]
            theta = angle(pivot_pos, far_pos, graph.position(candidate.other_end(pivot)))
            if (theta < bound) if self.cw else (theta > bound):
                bound = theta
                chosen = candidate

        if chosen is None:
            raise BrokenTopologyError(
                f"Junction {pivot} lists no membrane to continue the face trace"
            )
        self.next = (chosen.id, chosen.source_id == pivot)
        self.pivot = chosen.other_end(pivot)


def iterate_cw(graph: "JunctionGraph", start_id: int) -> FaceIterator:
    return FaceIterator(graph, start_id, cw=True)


def iterate_ccw(graph: "JunctionGraph", start_id: int) -> FaceIterator:
    return FaceIterator(graph, start_id, cw=False)


def trace_face(graph: "JunctionGraph", start_id: int, cw: bool) -> List[FaceStep]:
    """Collect the full boundary of the face on one side of a membrane."""
    return list(FaceIterator(graph, start_id, cw))
