"""Tests for the junction graph container."""

import pytest

from tissuegraph.builders import build_hexagon
from tissuegraph.junction_graph import JunctionGraph, build_junction_graph
from tissuegraph.models import PERIMETER, UNINITIALIZED, FaceSide, is_cell_id


class TestConstruction:
    def test_ids_are_sequential(self):
        graph = JunctionGraph()
        a = graph.add_junction(0, 0, 0)
        b = graph.add_junction(0, 10, 0)
        assert (a, b) == (0, 1)
        assert graph.add_membrane(a, b) == 0
        assert len(graph) == 2

    def test_default_pixels_are_endpoints(self):
        graph = JunctionGraph()
        a = graph.add_junction(0, 0, 0)
        b = graph.add_junction(0, 10, 5)
        membrane = graph.membrane(graph.add_membrane(a, b))
        assert membrane.pixels == ((0.0, 0.0), (10.0, 5.0))
        assert membrane.cell_id_cw is UNINITIALIZED
        assert membrane.cell_id_ccw is UNINITIALIZED

    def test_rotation_lists_incident_membranes(self):
        graph = build_hexagon()
        assert graph.junction(0).membrane_ids == [0, 5]
        assert graph.junction(1).membrane_ids == [0, 1]
        assert graph.junction(0).degree() == 2

    def test_self_loop_listed_once(self):
        graph = JunctionGraph()
        j = graph.add_junction(0, 0, 0)
        mid = graph.add_membrane(j, j, [(0, 0), (10, 0), (10, 10), (0, 0)])
        assert graph.junction(j).membrane_ids == [mid]
        assert graph.membrane(mid).is_loop()

    def test_unknown_junction_raises(self):
        graph = JunctionGraph()
        graph.add_junction(0, 0, 0)
        with pytest.raises(KeyError, match="No junction"):
            graph.add_membrane(0, 7)

    def test_empty_polyline_rejected(self):
        graph = JunctionGraph()
        a = graph.add_junction(0, 0, 0)
        b = graph.add_junction(0, 1, 0)
        with pytest.raises(ValueError, match="at least one point"):
            graph.add_membrane(a, b, [])


class TestQueries:
    def test_get_membrane_either_direction(self):
        graph = build_hexagon()
        assert graph.get_membrane(0, 1).id == 0
        assert graph.get_membrane(1, 0).id == 0
        assert graph.get_membrane(0, 3) is None

    def test_junction_across(self):
        graph = build_hexagon()
        assert graph.junction_across(0, 0) == 1
        assert graph.junction_across(0, 1) == 0

    def test_membrane_lookup_raises(self):
        with pytest.raises(KeyError, match="No membrane"):
            build_hexagon().membrane(42)


class TestEditing:
    def test_remove_membrane_updates_rotations(self):
        graph = build_hexagon()
        graph.remove_membrane(0)
        assert 0 not in graph.membranes
        assert graph.junction(0).membrane_ids == [5]
        assert graph.junction(1).membrane_ids == [1]
        assert graph.validate() == []

    def test_remove_junction_drops_incident_membranes(self):
        graph = build_hexagon()
        graph.remove_junction(0)
        assert set(graph.membranes) == {1, 2, 3, 4}
        assert graph.validate() == []

    def test_prune_solitary_junctions(self):
        graph = build_hexagon()
        lonely = graph.add_junction(0, 50, 50)
        assert graph.prune_solitary_junctions() == [lonely]
        assert lonely not in graph.junctions

    def test_ids_not_reused(self):
        graph = build_hexagon()
        graph.remove_membrane(5)
        assert graph.add_membrane(5, 0) == 6

    def test_move_junction_drags_polylines(self):
        graph = build_hexagon()
        graph.move_junction(1, 25, 10)
        assert graph.membrane(0).pixels[-1] == (25.0, 10.0)
        assert graph.membrane(1).pixels[0] == (25.0, 10.0)

    def test_validate_reports_dangling_reference(self):
        graph = build_hexagon()
        graph.junction(2).membrane_ids.append(99)
        errors = graph.validate()
        assert any("missing membrane 99" in e for e in errors)


class TestFaceSides:
    def test_sentinels_are_not_cell_ids(self):
        assert not is_cell_id(PERIMETER)
        assert not is_cell_id(UNINITIALIZED)
        assert is_cell_id(0)
        assert isinstance(PERIMETER, FaceSide)

    def test_reset_faces(self):
        graph = build_junction_graph([(0, 0), (1, 0)], [(0, 1)])
        membrane = graph.membrane(0)
        membrane.set_side(True, 3)
        membrane.set_side(False, PERIMETER)
        assert membrane.side(True) == 3
        assert membrane.side(False) is PERIMETER
        graph.reset_faces()
        assert membrane.side(True) is UNINITIALIZED
        assert membrane.side(False) is UNINITIALIZED
