from __future__ import annotations

import numpy as np
import pytest

from simplex_mesh.connectivity import (
    connectivity,
    permutation_sign,
    relative_orientation,
)
from simplex_mesh.generators import mesh_rectangle
from simplex_mesh.mesh import Mesh
from simplex_mesh.skeleton import skeleton


@pytest.mark.parametrize(
    "perm, expected",
    [([0, 1, 2], 1), ([1, 0, 2], -1), ([1, 2, 0], 1), ([2, 1, 0], -1), ([], 1)],
)
def test_permutation_sign(perm, expected):
    assert permutation_sign(perm) == expected


@pytest.mark.parametrize(
    "face, expected",
    [
        ((0, 1), 3),
        ((1, 0), -3),
        ((0, 2), -2),
        ((2, 0), 2),
        ((1, 2), 1),
        ((0, 3), 0),
    ],
)
def test_relative_orientation_triangle(face, expected):
    assert relative_orientation(face, (0, 1, 2)) == expected


def test_relative_orientation_edge():
    assert relative_orientation((0,), (0, 1)) == -2
    assert relative_orientation((1,), (0, 1)) == 1
    assert relative_orientation((2,), (0, 1)) == 0


def test_relative_orientation_wrong_arity():
    assert relative_orientation((0, 1, 2), (0, 1, 2)) == 0
    assert relative_orientation((0,), (0, 1, 2)) == 0


def test_sign_connectivity(two_triangle_square):
    edges = skeleton(two_triangle_square, 1)
    D = connectivity(edges, two_triangle_square)

    assert D.shape == (2, 5)
    assert D.toarray().tolist() == [[1, -1, 1, 0, 0], [0, 1, 0, -1, 1]]


def test_local_index_connectivity(two_triangle_square):
    edges = skeleton(two_triangle_square, 1)
    D = connectivity(edges, two_triangle_square, op=lambda r: r)
    assert D.toarray().tolist() == [[3, -2, 1, 0, 0], [0, 3, 0, -2, 1]]


def test_vertex_edge_connectivity(two_triangle_square):
    verts = skeleton(two_triangle_square, 0)
    edges = skeleton(two_triangle_square, 1)
    D = connectivity(verts, edges)

    assert D.shape == (5, 4)
    # Every edge (a, b) with a < b runs from a to b.
    for row, (a, b) in zip(D.toarray().tolist(), edges.cells.tolist()):
        assert row[a] == -1
        assert row[b] == 1
        assert sum(abs(x) for x in row) == 2


def test_boundary_of_boundary_vanishes():
    mesh = mesh_rectangle(1.0, 1.0, 0.5)
    verts = skeleton(mesh, 0)
    edges = skeleton(mesh, 1)

    d0 = connectivity(verts, edges)
    d1 = connectivity(edges, mesh)
    assert (d1 @ d0).count_nonzero() == 0


def test_connectivity_with_unrelated_cells():
    verts = np.zeros((4, 2))
    faces = Mesh(verts, [[2, 3]])
    cells = Mesh(verts, [[0, 1, 2]])
    D = connectivity(faces, cells)

    assert D.shape == (1, 1)
    assert D.nnz == 0


def test_connectivity_handles_unequal_vertex_buffers(two_triangle_square):
    # A face mesh over a shorter prefix of the vertex buffer.
    faces = Mesh(two_triangle_square.vertices[:3], [[0, 2]])
    D = connectivity(faces, two_triangle_square)
    assert D.toarray().tolist() == [[-1], [1]]


def test_column_sums_of_oriented_manifold():
    mesh = mesh_rectangle(1.0, 1.0, 0.25)
    edges = skeleton(mesh, 1)
    D = connectivity(edges, mesh)

    abs_sums = np.asarray(abs(D).sum(axis=0)).ravel()
    assert abs_sums.max() <= 2
    signed = np.asarray(D.sum(axis=0)).ravel()
    assert np.all(np.abs(signed) <= 1)
