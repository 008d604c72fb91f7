from __future__ import annotations

from typing import Dict, Iterator, Optional, Sequence

from .models import Cell, Point


class CellGraph:
    """Index of the cells traced from a :class:`JunctionGraph`.

    Cells only hold membrane ids; the junction graph stays the source of
    truth for topology and geometry.
    """

    VERSION = "1.0"

    def __init__(self) -> None:
        self.cells: Dict[int, Cell] = {}
        self._next_id = 0

    def add_cell(
        self,
        timepoint: int,
        x: float,
        y: float,
        membranes: Sequence[int] = (),
        boundary: Sequence[Point] = (),
    ) -> Cell:
        cell = Cell(self._next_id, timepoint, x, y, tuple(membranes), tuple(boundary))
        self.cells[cell.id] = cell
        self._next_id += 1
        return cell

    def remove_cell(self, cell_id: int) -> Cell:
        try:
            return self.cells.pop(cell_id)
        except KeyError:
            raise KeyError(f"No cell with id {cell_id!r}") from None

    def get(self, cell_id: int) -> Optional[Cell]:
        return self.cells.get(cell_id)

    def clear(self) -> None:
        self.cells.clear()

    def __len__(self) -> int:
        return len(self.cells)

    def __iter__(self) -> Iterator[Cell]:
        return iter(list(self.cells.values()))

    def __contains__(self, cell_id: object) -> bool:
        return cell_id in self.cells

    def to_dict(self) -> dict:
        return {
            "version": self.VERSION,
            "cells": [
                {
                    "id": c.id,
                    "timepoint": c.timepoint,
                    "position": {"x": c.x, "y": c.y},
                    "membranes": list(c.membranes),
                    "boundary": [list(p) for p in c.boundary],
                }
                for c in sorted(self.cells.values(), key=lambda c: c.id)
            ],
        }

    @classmethod
    def from_dict(cls, payload: dict) -> "CellGraph":
        graph = cls()
        for item in payload.get("cells", []):
            pos = item.get("position", {})
            cell = Cell(
                id=item["id"],
                timepoint=item.get("timepoint", 0),
                x=pos["x"],
                y=pos["y"],
                membranes=tuple(item.get("membranes", [])),
                boundary=tuple((p[0], p[1]) for p in item.get("boundary", [])),
            )
            graph.cells[cell.id] = cell
        graph._next_id = max(graph.cells, default=-1) + 1
        return graph
