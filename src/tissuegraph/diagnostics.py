from __future__ import annotations

from collections import defaultdict
from typing import Dict, List, Set

from .cell_graph import CellGraph
from .geometry import signed_area
from .junction_graph import JunctionGraph
from .models import PERIMETER, UNINITIALIZED, is_cell_id


def check_closure(junctions: JunctionGraph) -> List[str]:
    """Every membrane side must name a cell or the perimeter."""
    errors: List[str] = []
    for membrane in junctions.membranes.values():
        for label, value in (("cw", membrane.cell_id_cw), ("ccw", membrane.cell_id_ccw)):
            if value is UNINITIALIZED:
                errors.append(f"Membrane {membrane.id} has an uninitialized {label} side")
    return errors


def check_duality(junctions: JunctionGraph, cells: CellGraph) -> List[str]:
    """Cell membrane lists must match the membrane side ids exactly."""
    errors: List[str] = []
    referenced: Dict[int, Set[int]] = defaultdict(set)
    for membrane in junctions.membranes.values():
        for value in (membrane.cell_id_cw, membrane.cell_id_ccw):
            if not is_cell_id(value):
                continue
            if value not in cells:
                errors.append(f"Membrane {membrane.id} references missing cell {value}")
            referenced[value].add(membrane.id)

    for cell in cells:
        listed = set(cell.membranes)
        missing = sorted(mid for mid in listed if mid not in junctions.membranes)
        if missing:
            errors.append(f"Cell {cell.id} lists missing membranes {missing}")
        if listed != referenced.get(cell.id, set()):
            errors.append(
                f"Cell {cell.id} lists membranes {sorted(listed)} but is referenced by "
                f"{sorted(referenced.get(cell.id, set()))}"
            )
    return errors


def cell_areas(cells: CellGraph) -> Dict[int, float]:
    """Unsigned area of each cell boundary polygon."""
    return {cell.id: abs(signed_area(cell.boundary)) for cell in cells}


def topology_report(junctions: JunctionGraph, cells: CellGraph) -> dict:
    counts = [cell.membrane_count() for cell in cells]
    areas = list(cell_areas(cells).values())
    perimeter = sum(
        1 for m in junctions.membranes.values()
        if m.cell_id_cw is PERIMETER or m.cell_id_ccw is PERIMETER
    )
    errors = junctions.validate() + check_closure(junctions) + check_duality(junctions, cells)
    return {
        "junctions": len(junctions.junctions),
        "membranes": len(junctions.membranes),
        "cells": len(cells),
        "perimeter_membranes": perimeter,
        "min_membranes": min(counts) if counts else 0,
        "max_membranes": max(counts) if counts else 0,
        "min_area": min(areas) if areas else 0.0,
        "max_area": max(areas) if areas else 0.0,
        "errors": errors,
    }
