from __future__ import annotations

import threading
from typing import Dict, Iterable, List, Optional, Sequence

from .models import (
    PERIMETER,
    UNINITIALIZED,
    FaceId,
    FaceSide,
    Junction,
    MembranePart,
    Point,
)


class JunctionGraph:
    """Planar graph of junctions linked by membrane parts.

    Junctions and membranes live in dictionaries keyed by integer ids that
    are never reused.  Each junction keeps the ids of its incident
    membranes (its rotation) in insertion order; a self-loop appears once.

    ``lock`` is the exclusive boundary shared with the face engine: every
    rebuild, split and merge holds it for its whole duration.
    """

    VERSION = "1.0"

    def __init__(self, space_units: str = "pixel", time_units: str = "frame") -> None:
        self.junctions: Dict[int, Junction] = {}
        self.membranes: Dict[int, MembranePart] = {}
        self.space_units = space_units
        self.time_units = time_units
        self.lock = threading.RLock()
        self._next_junction_id = 0
        self._next_membrane_id = 0

    # ── Construction ────────────────────────────────────────────────

    def add_junction(self, timepoint: int, x: float, y: float) -> int:
        junction = Junction(self._next_junction_id, timepoint, float(x), float(y))
        self.junctions[junction.id] = junction
        self._next_junction_id += 1
        return junction.id

    def add_membrane(
        self,
        source_id: int,
        target_id: int,
        pixels: Optional[Sequence[Point]] = None,
    ) -> int:
        """Link two junctions and return the new membrane id.

        *pixels* is the polyline from source to target; when omitted it is
        the two junction positions.
        """
        source = self.junction(source_id)
        target = self.junction(target_id)
        if pixels is None:
            polyline = (source.position(), target.position())
        else:
            polyline = tuple((float(px), float(py)) for px, py in pixels)
            if not polyline:
                raise ValueError("A membrane polyline needs at least one point")

        membrane = MembranePart(self._next_membrane_id, source_id, target_id, polyline)
        self.membranes[membrane.id] = membrane
        self._next_membrane_id += 1
        source.membrane_ids.append(membrane.id)
        if target_id != source_id:
            target.membrane_ids.append(membrane.id)
        return membrane.id

    # ── Removal / editing ───────────────────────────────────────────

    def remove_membrane(self, membrane_id: int) -> MembranePart:
        membrane = self.membrane(membrane_id)
        for junction_id in set(membrane.endpoints()):
            self.junctions[junction_id].membrane_ids.remove(membrane_id)
        del self.membranes[membrane_id]
        return membrane

    def remove_junction(self, junction_id: int) -> Junction:
        junction = self.junction(junction_id)
        for membrane_id in list(junction.membrane_ids):
            self.remove_membrane(membrane_id)
        del self.junctions[junction_id]
        return junction

    def prune_solitary_junctions(self) -> List[int]:
        """Remove junctions without any membrane; return their ids."""
        solitary = [j.id for j in self.junctions.values() if not j.membrane_ids]
        for junction_id in solitary:
            del self.junctions[junction_id]
        return solitary

    def move_junction(self, junction_id: int, x: float, y: float) -> None:
        """Move a junction and drag the matching polyline ends with it."""
        junction = self.junction(junction_id)
        junction.x = float(x)
        junction.y = float(y)
        for membrane in self.incident(junction_id):
            pixels = list(membrane.pixels)
            if membrane.source_id == junction_id:
                pixels[0] = junction.position()
            if membrane.target_id == junction_id:
                pixels[-1] = junction.position()
            membrane.pixels = tuple(pixels)

    # ── Queries ─────────────────────────────────────────────────────

    def junction(self, junction_id: int) -> Junction:
        try:
            return self.junctions[junction_id]
        except KeyError:
            raise KeyError(f"No junction with id {junction_id!r}") from None

    def membrane(self, membrane_id: int) -> MembranePart:
        try:
            return self.membranes[membrane_id]
        except KeyError:
            raise KeyError(f"No membrane with id {membrane_id!r}") from None

    def incident(self, junction_id: int) -> List[MembranePart]:
        return [self.membranes[mid] for mid in self.junction(junction_id).membrane_ids]

    def junction_across(self, membrane_id: int, junction_id: int) -> int:
        return self.membrane(membrane_id).other_end(junction_id)

    def get_membrane(self, a: int, b: int) -> Optional[MembranePart]:
        """Return the membrane linking *a* and *b* in either direction."""
        for membrane in self.incident(a):
            if {membrane.source_id, membrane.target_id} == {a, b}:
                return membrane
        return None

    def position(self, junction_id: int) -> Point:
        return self.junction(junction_id).position()

    def membrane_pixels(self, membrane: MembranePart) -> tuple[Point, ...]:
        if membrane.pixels:
            return membrane.pixels
        return (self.position(membrane.source_id), self.position(membrane.target_id))

    def reset_faces(self) -> None:
        for membrane in self.membranes.values():
            membrane.reset_sides()

    def __len__(self) -> int:
        return len(self.junctions)

    def validate(self) -> List[str]:
        errors: List[str] = []
        for membrane in self.membranes.values():
            for junction_id in membrane.endpoints():
                junction = self.junctions.get(junction_id)
                if junction is None:
                    errors.append(
                        f"Membrane {membrane.id} references missing junction {junction_id}"
                    )
                elif membrane.id not in junction.membrane_ids:
                    errors.append(
                        f"Junction {junction_id} does not list membrane {membrane.id}"
                    )
        for junction in self.junctions.values():
            for membrane_id in junction.membrane_ids:
                if membrane_id not in self.membranes:
                    errors.append(
                        f"Junction {junction.id} references missing membrane {membrane_id}"
                    )
        return errors

    # ── Serialisation ───────────────────────────────────────────────

    def to_dict(self) -> dict:
        junctions_payload = [
            {
                "id": j.id,
                "timepoint": j.timepoint,
                "position": {"x": j.x, "y": j.y},
            }
            for j in sorted(self.junctions.values(), key=lambda j: j.id)
        ]
        membranes_payload = [
            {
                "id": m.id,
                "source": m.source_id,
                "target": m.target_id,
                "pixels": [list(p) for p in m.pixels],
                "cell_cw": face_id_to_json(m.cell_id_cw),
                "cell_ccw": face_id_to_json(m.cell_id_ccw),
            }
            for m in sorted(self.membranes.values(), key=lambda m: m.id)
        ]
        return {
            "version": self.VERSION,
            "units": {"space": self.space_units, "time": self.time_units},
            "junctions": junctions_payload,
            "membranes": membranes_payload,
        }

    @classmethod
    def from_dict(cls, payload: dict) -> "JunctionGraph":
        units = payload.get("units", {})
        graph = cls(units.get("space", "pixel"), units.get("time", "frame"))
        for item in payload.get("junctions", []):
            pos = item.get("position", {})
            junction = Junction(item["id"], item.get("timepoint", 0), pos["x"], pos["y"])
            graph.junctions[junction.id] = junction
        for item in payload.get("membranes", []):
            membrane = MembranePart(
                id=item["id"],
                source_id=item["source"],
                target_id=item["target"],
                pixels=tuple((p[0], p[1]) for p in item.get("pixels", [])),
                cell_id_cw=face_id_from_json(item.get("cell_cw")),
                cell_id_ccw=face_id_from_json(item.get("cell_ccw")),
            )
            graph.membranes[membrane.id] = membrane
            graph.junctions[membrane.source_id].membrane_ids.append(membrane.id)
            if not membrane.is_loop():
                graph.junctions[membrane.target_id].membrane_ids.append(membrane.id)
        graph._next_junction_id = max(graph.junctions, default=-1) + 1
        graph._next_membrane_id = max(graph.membranes, default=-1) + 1
        return graph


def face_id_to_json(value: FaceId):
    if isinstance(value, FaceSide):
        return value.value
    return value


def face_id_from_json(value) -> FaceId:
    if value is None or value == UNINITIALIZED.value:
        return UNINITIALIZED
    if value == PERIMETER.value:
        return PERIMETER
    return int(value)


def build_junction_graph(
    positions: Iterable[Point],
    links: Iterable[tuple[int, int]],
    timepoint: int = 0,
) -> JunctionGraph:
    """Build a graph from a list of positions and index pairs.

    Junction ids follow the order of *positions*; membrane ids the order
    of *links*.
    """
    graph = JunctionGraph()
    for x, y in positions:
        graph.add_junction(timepoint, x, y)
    for a, b in links:
        graph.add_membrane(a, b)
    return graph
