from __future__ import annotations

import json
from pathlib import Path
from typing import Optional, Tuple, Union

from .cell_graph import CellGraph
from .junction_graph import JunctionGraph


PathLike = Union[str, Path]


def tissue_to_dict(junctions: JunctionGraph, cells: Optional[CellGraph] = None) -> dict:
    data = {"junction_graph": junctions.to_dict()}
    if cells is not None:
        data["cell_graph"] = cells.to_dict()
    return data


def tissue_from_dict(payload: dict) -> Tuple[JunctionGraph, CellGraph]:
    junctions = JunctionGraph.from_dict(payload.get("junction_graph", {}))
    cells = CellGraph.from_dict(payload.get("cell_graph", {}))
    return junctions, cells


def tissue_to_json(
    junctions: JunctionGraph,
    cells: Optional[CellGraph] = None,
    indent: int = 2,
) -> str:
    return json.dumps(tissue_to_dict(junctions, cells), indent=indent, sort_keys=True)


def save_json(junctions: JunctionGraph, path: PathLike, cells: Optional[CellGraph] = None) -> None:
    Path(path).write_text(tissue_to_json(junctions, cells), encoding="utf-8")


def load_json(path: PathLike) -> Tuple[JunctionGraph, CellGraph]:
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    return tissue_from_dict(data)
