"""Junction graph constructors for examples, demos and tests."""

from __future__ import annotations

import math
from typing import Dict, List, Set, Tuple

from .junction_graph import JunctionGraph, build_junction_graph
from .models import Point

HEXAGON_POSITIONS: Tuple[Point, ...] = (
    (10.0, 0.0),
    (20.0, 10.0),
    (20.0, 20.0),
    (10.0, 30.0),
    (0.0, 20.0),
    (0.0, 10.0),
)


def build_hexagon(timepoint: int = 0) -> JunctionGraph:
    """Six junctions A..F (ids 0..5) linked in a ring: one hexagonal cell."""
    links = [(i, (i + 1) % 6) for i in range(6)]
    return build_junction_graph(HEXAGON_POSITIONS, links, timepoint)


def build_three_hexagons(timepoint: int = 0) -> JunctionGraph:
    """Three touching hexagons.

    Junction ids, in order: A B C D E F (first hexagon), G H I J (second,
    sharing B-C), K L M N (third, sharing H-I).  Membrane ids follow the
    order ab bc cd de ef fa, bg gh hi ij jc, hk kl lm mn ni.
    """
    positions = list(HEXAGON_POSITIONS) + [
        (30.0, 0.0), (40.0, 10.0), (40.0, 20.0), (30.0, 30.0),
        (70.0, -10.0), (80.0, 10.0), (80.0, 20.0), (70.0, 30.0),
    ]
    a, b, c, d, e, f, g, h, i, j, k, l, m, n = range(14)
    links = [
        (a, b), (b, c), (c, d), (d, e), (e, f), (f, a),
        (b, g), (g, h), (h, i), (i, j), (j, c),
        (h, k), (k, l), (l, m), (m, n), (n, i),
    ]
    return build_junction_graph(positions, links, timepoint)


def build_hex_tissue(rings: int, size: float = 10.0, timepoint: int = 0) -> JunctionGraph:
    """Build a honeycomb of hexagonal cells around a central cell.

    rings=0 produces a single hexagon, rings=1 seven hexagons, etc.  Cells
    have flat tops; a junction shared by neighbouring cells is created once,
    and so is a membrane shared by two cells.
    """
    if rings < 0:
        raise ValueError("rings must be >= 0")

    graph = JunctionGraph()
    junction_ids: Dict[Tuple[float, float], int] = {}
    linked: Set[Tuple[int, int]] = set()
    offsets = [
        (size * math.cos(math.pi * k / 3), size * math.sin(math.pi * k / 3))
        for k in range(6)
    ]

    for cx, cy in _cell_centres(rings, size):
        ring = [
            _get_junction_id(graph, junction_ids, (cx + dx, cy + dy), timepoint)
            for dx, dy in offsets
        ]
        for a, b in zip(ring, ring[1:] + ring[:1]):
            key = (min(a, b), max(a, b))
            if key not in linked:
                linked.add(key)
                graph.add_membrane(a, b)

    return graph


def hex_cell_count(rings: int) -> int:
    if rings < 0:
        raise ValueError("rings must be >= 0")
    return 1 + 3 * rings * (rings + 1)


def hex_perimeter_count(rings: int) -> int:
    """Number of membranes on the outer contour of a honeycomb."""
    if rings < 0:
        raise ValueError("rings must be >= 0")
    return 6 * (2 * rings + 1)


def _get_junction_id(
    graph: JunctionGraph,
    junction_ids: Dict[Tuple[float, float], int],
    position: Point,
    timepoint: int,
) -> int:
    key = (round(position[0], 6), round(position[1], 6))
    if key not in junction_ids:
        junction_ids[key] = graph.add_junction(timepoint, key[0], key[1])
    return junction_ids[key]


def _cell_centres(rings: int, size: float) -> List[Point]:
    """Centres of every cell within *rings* steps of the central one."""
    centres: List[Point] = []
    for column in range(-rings, rings + 1):
        for row in range(max(-rings, -column - rings), min(rings, rings - column) + 1):
            centres.append((
                1.5 * size * column,
                math.sqrt(3) * size * (row + column / 2),
            ))
    return centres
