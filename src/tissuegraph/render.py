from __future__ import annotations

from pathlib import Path
from typing import Optional

from .cell_graph import CellGraph
from .junction_graph import JunctionGraph
from .models import PERIMETER


def render_png(
    junctions: JunctionGraph,
    cells: Optional[CellGraph],
    output_path: str | Path,
    cell_color: str = "#5aa9e6",
    cell_alpha: float = 0.3,
    membrane_color: str = "#2b2b2b",
    perimeter_color: str = "#d1495b",
    junction_color: str = "#2b2b2b",
    junction_size: float = 8.0,
    show_centroids: bool = True,
    padding: float = 2.0,
    dpi: int = 150,
) -> None:
    """Render membranes, junctions and cell boundaries to a PNG.

    Requires matplotlib; imported lazily to keep core package lightweight.
    """
    try:
        import matplotlib.pyplot as plt
        from matplotlib.patches import Polygon
    except ImportError as exc:  # pragma: no cover - requires optional dep
        raise RuntimeError(
            "matplotlib is required for rendering. Install with `pip install matplotlib`."
        ) from exc

    if not junctions.junctions:
        raise ValueError("Cannot render an empty junction graph.")

    fig, ax = plt.subplots()

    for cell in cells or ():
        points = cell.boundary_polygon(absolute=True)
        if len(points) < 3:
            continue
        ax.add_patch(Polygon(points, closed=True, facecolor=cell_color, alpha=cell_alpha))
        if show_centroids:
            ax.scatter(cell.x, cell.y, s=junction_size, c=cell_color, marker="x", zorder=3)

    for membrane in junctions.membranes.values():
        pixels = junctions.membrane_pixels(membrane)
        xs, ys = zip(*pixels)
        on_perimeter = PERIMETER in (membrane.cell_id_cw, membrane.cell_id_ccw)
        ax.plot(
            xs, ys,
            color=perimeter_color if on_perimeter else membrane_color,
            linewidth=1.0,
        )

    xs = [j.x for j in junctions.junctions.values()]
    ys = [j.y for j in junctions.junctions.values()]
    ax.scatter(xs, ys, s=junction_size, c=junction_color, zorder=4)

    ax.set_aspect("equal", "box")
    ax.set_xlim(min(xs) - padding, max(xs) + padding)
    ax.set_ylim(min(ys) - padding, max(ys) + padding)
    ax.axis("off")

    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    fig.savefig(output_path, dpi=dpi, bbox_inches="tight", pad_inches=0)
    plt.close(fig)
