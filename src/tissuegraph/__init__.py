"""tissuegraph — cells of a planar junction graph.

Public API is organised into layers:

- **Core** — models, junction and cell containers
- **Faces** — rotational face tracing, boundary stitching, split / merge
- **Building** — example graphs and honeycomb tissues
- **I/O & diagnostics** — JSON persistence, invariant checks, rendering
"""

# ── Core ────────────────────────────────────────────────────────────
from .models import (
    PERIMETER,
    UNINITIALIZED,
    Cell,
    FaceId,
    FaceSide,
    Junction,
    MembranePart,
    is_cell_id,
)
from .junction_graph import JunctionGraph, build_junction_graph
from .cell_graph import CellGraph
from .config import DEFAULT_CONFIG, FaceFinderConfig
from .errors import BrokenTopologyError, DegenerateFaceError, TopologyError

# ── Faces ───────────────────────────────────────────────────────────
from .geometry import angle, signed_area
from .face_iterator import FaceIterator, FaceStep, iterate_ccw, iterate_cw, trace_face
from .concatenate import membrane_centroid, stitch_boundary
from .faces import FaceFinder, find_faces

# ── Building ────────────────────────────────────────────────────────
from .builders import (
    build_hex_tissue,
    build_hexagon,
    build_three_hexagons,
    hex_cell_count,
    hex_perimeter_count,
)

# ── I/O & diagnostics ───────────────────────────────────────────────
from .io import load_json, save_json, tissue_from_dict, tissue_to_dict, tissue_to_json
from .diagnostics import cell_areas, check_closure, check_duality, topology_report
from .logging_config import setup_logging
from .render import render_png

__all__ = [
    # Core
    "PERIMETER",
    "UNINITIALIZED",
    "Cell",
    "FaceId",
    "FaceSide",
    "Junction",
    "MembranePart",
    "is_cell_id",
    "JunctionGraph",
    "build_junction_graph",
    "CellGraph",
    "DEFAULT_CONFIG",
    "FaceFinderConfig",
    "BrokenTopologyError",
    "DegenerateFaceError",
    "TopologyError",
    # Faces
    "angle",
    "signed_area",
    "FaceIterator",
    "FaceStep",
    "iterate_cw",
    "iterate_ccw",
    "trace_face",
    "membrane_centroid",
    "stitch_boundary",
    "FaceFinder",
    "find_faces",
    # Building
    "build_hex_tissue",
    "build_hexagon",
    "build_three_hexagons",
    "hex_cell_count",
    "hex_perimeter_count",
    # I/O & diagnostics
    "load_json",
    "save_json",
    "tissue_from_dict",
    "tissue_to_dict",
    "tissue_to_json",
    "cell_areas",
    "check_closure",
    "check_duality",
    "topology_report",
    "setup_logging",
    # Rendering (requires matplotlib)
    "render_png",
]
