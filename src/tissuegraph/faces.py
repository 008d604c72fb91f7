"""Face discovery and topology maintenance.

:class:`FaceFinder` derives the cells of a :class:`JunctionGraph` and keeps
them in step with edits:

1. **Full rebuild**: every unset side of every membrane is traced; each
   trace becomes a cell.  Cells with more membranes than the configured
   threshold are taken to be the region around the tissue and turned into
   ``PERIMETER`` sides.
2. **Split**: a membrane is inserted between two junctions lying on a
   common face, and the face is replaced by the two faces on either side of
   the new membrane.
3. **Merge**: a membrane separating two faces is removed and the two
   cells are replaced by one.

Each operation runs under the junction graph lock and either completes or
raises before the graph is touched.
"""

from __future__ import annotations

import logging
from typing import Iterable, List, Optional, Set, Tuple

from .cell_graph import CellGraph
from .concatenate import membrane_centroid, stitch_boundary
from .config import DEFAULT_CONFIG, FaceFinderConfig
from .errors import BrokenTopologyError
from .face_iterator import FaceStep, trace_face
from .junction_graph import JunctionGraph
from .models import PERIMETER, UNINITIALIZED, Cell, FaceId, MembranePart, is_cell_id

logger = logging.getLogger(__name__)


class FaceFinder:
    """Cell index maintenance for one junction graph."""

    def __init__(
        self,
        junctions: JunctionGraph,
        cells: Optional[CellGraph] = None,
        config: Optional[FaceFinderConfig] = None,
    ) -> None:
        self.junctions = junctions
        self.cells = cells if cells is not None else CellGraph()
        self.config = config or DEFAULT_CONFIG
        self.max_membranes_per_cell = self.config.max_membranes_per_cell

    # ── Full rebuild ────────────────────────────────────────────────

    def rebuild_all_faces(self, max_membranes_per_cell: Optional[int] = None) -> CellGraph:
        """Trace every face of the junction graph from scratch.

        *max_membranes_per_cell* overrides the configured pruning threshold
        and is kept for later splits.
        """
        if max_membranes_per_cell is not None:
            if max_membranes_per_cell < 1:
                raise ValueError("max_membranes_per_cell must be >= 1")
            self.max_membranes_per_cell = max_membranes_per_cell

        with self.junctions.lock:
            self.junctions.reset_faces()
            self.cells.clear()

            for membrane in list(self.junctions.membranes.values()):
                if membrane.cell_id_cw is UNINITIALIZED:
                    self._make_cell(self._trace(membrane.id, cw=True))
                if membrane.cell_id_ccw is UNINITIALIZED:
                    self._make_cell(self._trace(membrane.id, cw=False))

            traced = len(self.cells)
            oversized = [
                cell for cell in self.cells
                if cell.membrane_count() > self.max_membranes_per_cell
            ]
            for cell in oversized:
                self._prune(cell)

        logger.info(
            "Traced %d faces over %d membranes; %d cells kept, %d pruned as perimeter",
            traced, len(self.junctions.membranes), len(self.cells), len(oversized),
        )
        return self.cells

    # ── Split ───────────────────────────────────────────────────────

    def split_face(self, source_id: int, target_id: int) -> Optional[int]:
        """Link two junctions of a common face, splitting that face in two.

        Returns the id of the new membrane, or ``None`` when the junctions
        do not share a face (or are already linked).  Nothing is modified
        in that case.
        """
        with self.junctions.lock:
            self.junctions.junction(source_id)
            self.junctions.junction(target_id)
            if source_id == target_id:
                logger.info("Cannot link junction %d to itself", source_id)
                return None
            if self.junctions.get_membrane(source_id, target_id) is not None:
                logger.info("Junctions %d and %d are already linked", source_id, target_id)
                return None

            shared = self._find_shared_face(source_id, target_id)
            if shared is None:
                logger.info(
                    "Junctions %d and %d do not share a face; not splitting",
                    source_id, target_id,
                )
                return None
            found, found_cw = shared
            old_side = found.side(found_cw)

            membrane_id = self.junctions.add_membrane(source_id, target_id)
            try:
                cw_steps = self._trace(membrane_id, cw=True)
                ccw_steps = self._trace(membrane_id, cw=False)
            except BrokenTopologyError:
                self.junctions.remove_membrane(membrane_id)
                raise

            replaced = _previous_sides(cw_steps) | _previous_sides(ccw_steps)
            replaced.discard(UNINITIALIZED)
            new_cells = [self._make_cell(cw_steps), self._make_cell(ccw_steps)]

            for old_id in replaced:
                if is_cell_id(old_id) and old_id in self.cells:
                    self.cells.remove_cell(old_id)

            if PERIMETER in replaced:
                for cell in new_cells:
                    if cell.membrane_count() > self.max_membranes_per_cell:
                        self._prune(cell)

        logger.debug(
            "Split face %s (found via membrane %d, %s) with membrane %d -> cells %s",
            old_side, found.id, "cw" if found_cw else "ccw",
            membrane_id, [c.id for c in new_cells if c.id in self.cells],
        )
        return membrane_id

    def _find_shared_face(self, source_id: int, target_id: int) -> Optional[Tuple[MembranePart, bool]]:
        for membrane in self.junctions.incident(source_id):
            for cw in (True, False):
                for step in self._trace(membrane.id, cw):
                    if target_id in step.membrane.endpoints():
                        return membrane, cw
        return None

    # ── Merge ───────────────────────────────────────────────────────

    def merge_faces(self, membrane_id: int) -> Optional[int]:
        """Remove a membrane and fuse the faces on its two sides.

        Returns the id of the merged cell, or ``None`` when the merged face
        is the perimeter or when nothing is left to bound it.

        Raises :class:`BrokenTopologyError` if the membrane sides are not
        consistent with the cell index; the graph is left unchanged then.
        """
        with self.junctions.lock:
            membrane = self.junctions.membrane(membrane_id)
            sides = {membrane.cell_id_cw, membrane.cell_id_ccw}
            if UNINITIALIZED in sides:
                raise BrokenTopologyError(
                    f"Membrane {membrane_id} has an unassigned side; rebuild faces first"
                )
            removed_cells = {fid for fid in sides if is_cell_id(fid)}
            missing = sorted(fid for fid in removed_cells if fid not in self.cells)
            if missing:
                raise BrokenTopologyError(
                    f"Membrane {membrane_id} references missing cells {missing}"
                )

            endpoints = set(membrane.endpoints())
            seed = self._find_seed(membrane, sides)
            has_neighbours = any(
                len(self.junctions.junctions[jid].membrane_ids) > 1 for jid in endpoints
            )
            if seed is None and has_neighbours:
                raise BrokenTopologyError(
                    f"No membrane next to membrane {membrane_id} borders cells "
                    f"{sorted(removed_cells)}"
                )

            for cell_id in removed_cells:
                self.cells.remove_cell(cell_id)
            self.junctions.remove_membrane(membrane_id)
            if seed is None:
                logger.debug("Removed isolated membrane %d", membrane_id)
                return None

            perimeter = PERIMETER in sides
            seed_membrane, seed_cw = seed
            merged = self._retrace(seed_membrane.id, seed_cw, perimeter)

            # Removing a bridge leaves faces with two boundary pieces.
            for jid in endpoints:
                for other in self.junctions.incident(jid):
                    for cw in (True, False):
                        if other.side(cw) in removed_cells:
                            self._retrace(other.id, cw, perimeter)

        logger.debug(
            "Merged cells %s across membrane %d into %s",
            sorted(removed_cells), membrane_id,
            "perimeter" if merged is None else f"cell {merged}",
        )
        return merged

    def _find_seed(
        self,
        membrane: MembranePart,
        sides: Set[FaceId],
    ) -> Optional[Tuple[MembranePart, bool]]:
        endpoints = list(dict.fromkeys(membrane.endpoints()))
        for cw in (True, False):
            for jid in endpoints:
                for other in self.junctions.incident(jid):
                    if other.id == membrane.id:
                        continue
                    if other.side(cw) in sides:
                        return other, cw
        return None

    def _retrace(self, membrane_id: int, cw: bool, perimeter: bool) -> Optional[int]:
        steps = self._trace(membrane_id, cw)
        if perimeter:
            _assign(steps, PERIMETER)
            return None
        return self._make_cell(steps).id

    # ── Connect (split or merge) ────────────────────────────────────

    def connect_junctions(self, a: int, b: int) -> Optional[int]:
        """Toggle the link between two junctions.

        When a membrane already links *a* and *b* it is removed and its two
        faces merged; ``None`` is returned.  Otherwise the junctions are
        linked with :meth:`split_face` and the new membrane id (or ``None``)
        is returned.
        """
        with self.junctions.lock:
            existing = self.junctions.get_membrane(a, b)
            if existing is not None:
                self.merge_faces(existing.id)
                return None
            return self.split_face(a, b)

    # ── Helpers ─────────────────────────────────────────────────────

    def _trace(self, membrane_id: int, cw: bool) -> List[FaceStep]:
        return trace_face(self.junctions, membrane_id, cw)

    def _make_cell(self, steps: List[FaceStep]) -> Cell:
        face = [step.membrane for step in steps]
        centroid = membrane_centroid(self.junctions, face)
        boundary = stitch_boundary(self.junctions, face, centroid)
        cell = self.cells.add_cell(
            self._timepoint(face[0]),
            centroid[0],
            centroid[1],
            membranes=list(dict.fromkeys(m.id for m in face)),
            boundary=boundary,
        )
        _assign(steps, cell.id)
        return cell

    def _prune(self, cell: Cell) -> None:
        for membrane_id in cell.membranes:
            membrane = self.junctions.membranes[membrane_id]
            if membrane.cell_id_cw == cell.id:
                membrane.cell_id_cw = PERIMETER
            if membrane.cell_id_ccw == cell.id:
                membrane.cell_id_ccw = PERIMETER
        self.cells.remove_cell(cell.id)
        logger.debug("Pruned cell %d with %d membranes", cell.id, cell.membrane_count())

    def _timepoint(self, membrane: MembranePart) -> int:
        return self.junctions.junctions[membrane.source_id].timepoint


def _assign(steps: Iterable[FaceStep], value: FaceId) -> None:
    for step in steps:
        step.membrane.set_side(step.is_cw, value)


def _previous_sides(steps: Iterable[FaceStep]) -> Set[FaceId]:
    return {step.membrane.side(step.is_cw) for step in steps}


def find_faces(
    junctions: JunctionGraph,
    max_membranes_per_cell: int = DEFAULT_CONFIG.max_membranes_per_cell,
) -> CellGraph:
    """Return a new :class:`CellGraph` with every face of *junctions*."""
    finder = FaceFinder(junctions)
    return finder.rebuild_all_faces(max_membranes_per_cell)
