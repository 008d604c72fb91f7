"""Tests for full face discovery."""

import logging

import pytest

from tissuegraph.builders import (
    HEXAGON_POSITIONS,
    build_hex_tissue,
    build_hexagon,
    build_three_hexagons,
    hex_cell_count,
    hex_perimeter_count,
)
from tissuegraph.config import FaceFinderConfig
from tissuegraph.diagnostics import check_closure, check_duality
from tissuegraph.faces import FaceFinder, find_faces
from tissuegraph.geometry import signed_area
from tissuegraph.junction_graph import JunctionGraph, build_junction_graph
from tissuegraph.models import PERIMETER, is_cell_id


def cell_at(cells, x, y):
    for cell in cells:
        if cell.x == pytest.approx(x) and cell.y == pytest.approx(y):
            return cell
    raise AssertionError(f"no cell centred at ({x}, {y})")


def assert_consistent(graph, cells):
    assert check_closure(graph) == []
    assert check_duality(graph, cells) == []


class TestHexagon:
    def test_inner_and_outer_faces(self):
        graph = build_hexagon()
        cells = find_faces(graph)
        assert len(cells) == 2
        for cell in cells:
            assert cell.membrane_count() == 6
            assert cell.centroid() == pytest.approx((10.0, 15.0))
        for membrane in graph.membranes.values():
            assert is_cell_id(membrane.cell_id_cw)
            assert is_cell_id(membrane.cell_id_ccw)
            assert membrane.cell_id_cw != membrane.cell_id_ccw
        assert_consistent(graph, cells)

    def test_threshold_prunes_everything(self):
        graph = build_hexagon()
        cells = find_faces(graph, max_membranes_per_cell=5)
        assert len(cells) == 0
        for membrane in graph.membranes.values():
            assert membrane.cell_id_cw is PERIMETER
            assert membrane.cell_id_ccw is PERIMETER

    def test_timepoint_comes_from_junctions(self):
        graph = build_hexagon(timepoint=3)
        assert {cell.timepoint for cell in find_faces(graph)} == {3}


class TestThreeHexagons:
    def test_three_cells_and_perimeter(self):
        graph = build_three_hexagons()
        cells = find_faces(graph, max_membranes_per_cell=10)
        assert len(cells) == 3
        first = cell_at(cells, 10.0, 15.0)
        second = cell_at(cells, 30.0, 15.0)
        third = cell_at(cells, 380.0 / 6, 80.0 / 6)
        assert first.membrane_count() == second.membrane_count() == third.membrane_count() == 6
        assert set(first.membranes) == {0, 1, 2, 3, 4, 5}
        assert set(second.membranes) == {1, 6, 7, 8, 9, 10}
        assert set(third.membranes) == {8, 11, 12, 13, 14, 15}
        assert_consistent(graph, cells)

    def test_shared_membranes_separate_two_cells(self):
        graph = build_three_hexagons()
        find_faces(graph, max_membranes_per_cell=10)
        for shared in (1, 8):
            membrane = graph.membrane(shared)
            assert is_cell_id(membrane.cell_id_cw)
            assert is_cell_id(membrane.cell_id_ccw)
            assert membrane.cell_id_cw != membrane.cell_id_ccw

    def test_outer_membranes_touch_perimeter(self):
        graph = build_three_hexagons()
        find_faces(graph, max_membranes_per_cell=10)
        on_perimeter = {
            m.id for m in graph.membranes.values()
            if PERIMETER in (m.cell_id_cw, m.cell_id_ccw)
        }
        assert on_perimeter == set(graph.membranes) - {1, 8}

    def test_interior_side_is_counter_clockwise(self):
        # Junctions of the first hexagon run counter-clockwise in a y-up
        # frame, so the cell lies on the ccw side of A->B.
        graph = build_three_hexagons()
        cells = find_faces(graph, max_membranes_per_cell=10)
        first = cell_at(cells, 10.0, 15.0)
        assert graph.membrane(0).cell_id_ccw == first.id
        assert graph.membrane(0).cell_id_cw is PERIMETER

    def test_default_threshold_keeps_outer_face(self):
        graph = build_three_hexagons()
        cells = find_faces(graph)
        assert len(cells) == 4
        assert max(cell.membrane_count() for cell in cells) == 14
        assert_consistent(graph, cells)


class TestSpecialFaces:
    def test_dangling_membrane_belongs_to_surrounding_cell(self):
        graph = build_hexagon()
        tip = graph.add_junction(0, 10, 10)
        spur = graph.add_membrane(0, tip)
        cells = find_faces(graph)
        assert len(cells) == 2
        membrane = graph.membrane(spur)
        assert membrane.cell_id_cw == membrane.cell_id_ccw
        inner = cells.get(membrane.cell_id_cw)
        assert inner.membrane_count() == 7
        assert_consistent(graph, cells)

    def test_dangling_first_membrane_gives_closed_boundaries(self):
        positions = list(HEXAGON_POSITIONS) + [(14.0, 8.0)]
        links = [(0, 6)] + [(i, (i + 1) % 6) for i in range(6)]
        graph = build_junction_graph(positions, links)
        cells = find_faces(graph)
        assert len(cells) == 2
        for cell in cells:
            assert cell.boundary[0] == pytest.approx(cell.boundary[-1])
            assert abs(signed_area(cell.boundary)) == pytest.approx(400.0)
        assert_consistent(graph, cells)

    def test_solitary_loop(self):
        graph = JunctionGraph()
        j = graph.add_junction(0, 0, 0)
        mid = graph.add_membrane(j, j, [(0, 0), (10, 0), (10, 10), (0, 10), (0, 0)])
        cells = find_faces(graph)
        assert len(cells) == 2
        membrane = graph.membrane(mid)
        assert membrane.cell_id_cw != membrane.cell_id_ccw
        for cell in cells:
            assert cell.membranes == (mid,)
            assert cell.centroid() == pytest.approx((4.0, 4.0))

    def test_disjoint_components(self):
        graph = build_hexagon()
        a = graph.add_junction(0, 100, 0)
        b = graph.add_junction(0, 110, 0)
        c = graph.add_junction(0, 105, 10)
        graph.add_membrane(a, b)
        graph.add_membrane(b, c)
        graph.add_membrane(c, a)
        cells = find_faces(graph)
        assert len(cells) == 4
        assert_consistent(graph, cells)

    def test_empty_graph(self):
        assert len(find_faces(JunctionGraph())) == 0


class TestHoneycomb:
    @pytest.mark.parametrize("rings", [1, 2])
    def test_cell_count(self, rings):
        graph = build_hex_tissue(rings)
        cells = find_faces(graph, max_membranes_per_cell=10)
        assert len(cells) == hex_cell_count(rings)
        assert all(cell.membrane_count() == 6 for cell in cells)
        assert_consistent(graph, cells)

    def test_outer_contour_kept_below_threshold(self):
        # One ring has an 18-membrane contour; the default threshold keeps it.
        graph = build_hex_tissue(1)
        assert hex_perimeter_count(1) == 18
        assert len(find_faces(graph)) == hex_cell_count(1) + 1

    def test_outer_contour_pruned_above_threshold(self):
        graph = build_hex_tissue(2)
        cells = find_faces(graph)
        assert len(cells) == hex_cell_count(2)
        perimeter = [
            m for m in graph.membranes.values()
            if PERIMETER in (m.cell_id_cw, m.cell_id_ccw)
        ]
        assert len(perimeter) == hex_perimeter_count(2)


class TestFaceFinder:
    def test_rebuild_is_repeatable(self):
        graph = build_three_hexagons()
        finder = FaceFinder(graph, config=FaceFinderConfig(max_membranes_per_cell=10))
        first = sorted(sorted(c.membranes) for c in finder.rebuild_all_faces())
        second = sorted(sorted(c.membranes) for c in finder.rebuild_all_faces())
        assert first == second
        assert len(finder.cells) == 3

    def test_override_threshold_is_kept(self):
        finder = FaceFinder(build_hexagon())
        finder.rebuild_all_faces(max_membranes_per_cell=5)
        assert finder.max_membranes_per_cell == 5

    def test_invalid_threshold(self):
        finder = FaceFinder(build_hexagon())
        with pytest.raises(ValueError, match="max_membranes_per_cell"):
            finder.rebuild_all_faces(max_membranes_per_cell=0)

    def test_rebuild_logs_summary(self, caplog):
        caplog.set_level(logging.INFO, logger="tissuegraph")
        find_faces(build_three_hexagons(), max_membranes_per_cell=10)
        assert "3 cells kept, 1 pruned as perimeter" in caplog.text
