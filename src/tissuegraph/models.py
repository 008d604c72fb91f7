from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Tuple, Union

Point = Tuple[float, float]


class FaceSide(Enum):
    """Face-side states that are not a concrete cell id."""

    UNINITIALIZED = "uninitialized"
    PERIMETER = "perimeter"

    def __repr__(self) -> str:
        return f"FaceSide.{self.name}"


UNINITIALIZED = FaceSide.UNINITIALIZED
PERIMETER = FaceSide.PERIMETER

# A face side is either a sentinel or the id of a Cell.
FaceId = Union[int, FaceSide]


def is_cell_id(value: FaceId) -> bool:
    return not isinstance(value, FaceSide)


@dataclass
class Junction:
    id: int
    timepoint: int
    x: float
    y: float
    membrane_ids: list[int] = field(default_factory=list)

    def position(self) -> Point:
        return (self.x, self.y)

    def degree(self) -> int:
        return len(self.membrane_ids)


@dataclass
class MembranePart:
    """Edge of the junction graph.

    *pixels* is the polyline from the source junction to the target
    junction.  ``cell_id_cw`` / ``cell_id_ccw`` hold the face lying on
    either side of the source→target direction.
    """

    id: int
    source_id: int
    target_id: int
    pixels: tuple[Point, ...] = field(default_factory=tuple)
    cell_id_cw: FaceId = UNINITIALIZED
    cell_id_ccw: FaceId = UNINITIALIZED

    def endpoints(self) -> tuple[int, int]:
        return (self.source_id, self.target_id)

    def is_loop(self) -> bool:
        return self.source_id == self.target_id

    def other_end(self, junction_id: int) -> int:
        if self.source_id != junction_id:
            return self.source_id
        return self.target_id

    def side(self, cw: bool) -> FaceId:
        return self.cell_id_cw if cw else self.cell_id_ccw

    def set_side(self, cw: bool, value: FaceId) -> None:
        if cw:
            self.cell_id_cw = value
        else:
            self.cell_id_ccw = value

    def reset_sides(self) -> None:
        self.cell_id_cw = UNINITIALIZED
        self.cell_id_ccw = UNINITIALIZED


@dataclass
class Cell:
    """A face of the junction graph.

    *boundary* is stored relative to the centroid (*x*, *y*).
    """

    id: int
    timepoint: int
    x: float
    y: float
    membranes: tuple[int, ...] = field(default_factory=tuple)
    boundary: tuple[Point, ...] = field(default_factory=tuple)

    def centroid(self) -> Point:
        return (self.x, self.y)

    def membrane_ids(self) -> tuple[int, ...]:
        return self.membranes

    def membrane_count(self) -> int:
        return len(self.membranes)

    def boundary_polygon(self, absolute: bool = False) -> list[Point]:
        if not absolute:
            return list(self.boundary)
        return [(px + self.x, py + self.y) for px, py in self.boundary]
