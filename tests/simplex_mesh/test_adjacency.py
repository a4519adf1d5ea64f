from __future__ import annotations

import numpy as np

from simplex_mesh.adjacency import NO_CELL, cells_around, vertex_to_cell_map
from simplex_mesh.mesh import Mesh


def test_vertex_to_cell_map(two_triangle_square):
    table, counts = vertex_to_cell_map(two_triangle_square)

    assert table.shape == (4, 2)
    assert counts.tolist() == [2, 1, 2, 1]
    assert table.tolist() == [[0, 1], [0, NO_CELL], [0, 1], [1, NO_CELL]]


def test_cells_around(two_triangle_square):
    table, counts = vertex_to_cell_map(two_triangle_square)
    assert cells_around(table, counts, 0).tolist() == [0, 1]
    assert cells_around(table, counts, 3).tolist() == [1]


def test_unreferenced_vertex_has_no_cells():
    mesh = Mesh(np.zeros((4, 2)), [[0, 1], [1, 2]])
    table, counts = vertex_to_cell_map(mesh)

    assert counts.tolist() == [1, 2, 1, 0]
    assert cells_around(table, counts, 3).size == 0
    assert np.all(table[3] == NO_CELL)


def test_map_lists_cells_in_ascending_order(junction_mesh):
    table, counts = vertex_to_cell_map(junction_mesh)
    assert cells_around(table, counts, 0).tolist() == [0, 1, 2]
    assert cells_around(table, counts, 1).tolist() == [0, 1, 2]
    assert counts.sum() == junction_mesh.cells.size


def test_map_of_empty_mesh():
    table, counts = vertex_to_cell_map(Mesh.empty(1))
    assert table.shape == (0, 0)
    assert counts.shape == (0,)
