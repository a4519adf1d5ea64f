from __future__ import annotations

import numpy as np
import pytest

from simplex_mesh.exceptions import InvalidArgumentError
from simplex_mesh.mesh import Mesh
from simplex_mesh.skeleton import boundary, interior, isoriented, skeleton


def _as_tuples(mesh):
    return [tuple(c) for c in mesh.cells.tolist()]


def test_edges_of_two_triangles(two_triangle_square):
    edges = skeleton(two_triangle_square, 1)

    assert edges.dimension == 1
    assert _as_tuples(edges) == [(0, 1), (0, 2), (1, 2), (0, 3), (2, 3)]
    # Vertex buffer is shared, not copied.
    assert edges.vertices is two_triangle_square.vertices


def test_vertices_skeleton_in_first_appearance_order(two_triangle_square):
    verts = skeleton(two_triangle_square, 0)
    assert _as_tuples(verts) == [(0,), (1,), (2,), (3,)]


def test_unreferenced_vertices_are_not_in_vertex_skeleton():
    verts = np.zeros((5, 2))
    mesh = Mesh(verts, [[4, 1]])
    assert _as_tuples(skeleton(mesh, 0)) == [(4,), (1,)]


def test_top_dimension_returns_mesh_itself(two_triangle_square):
    assert skeleton(two_triangle_square, 2) is two_triangle_square


def test_faces_of_single_tetrahedron():
    verts = np.array(
        [[0.0, 0.0, 0.0], [1.0, 0.0, 0.0], [0.0, 1.0, 0.0], [0.0, 0.0, 1.0]]
    )
    tet = Mesh(verts, [[0, 1, 2, 3]])

    faces = skeleton(tet, 2)
    assert _as_tuples(faces) == [(0, 1, 2), (0, 1, 3), (0, 2, 3), (1, 2, 3)]
    assert skeleton(tet, 1).numcells == 6


def test_skeleton_sorts_indices():
    verts = np.zeros((3, 2))
    mesh = Mesh(verts, [[2, 0, 1]])
    assert _as_tuples(skeleton(mesh, 1)) == [(0, 2), (1, 2), (0, 1)]


def test_skeleton_predicate_filters_candidates(two_triangle_square):
    edges = skeleton(two_triangle_square, 1, pred=lambda e: 0 in e)
    assert _as_tuples(edges) == [(0, 1), (0, 2), (0, 3)]

    # With a predicate the top dimension is rebuilt, not returned as is.
    tris = skeleton(two_triangle_square, 2, pred=lambda c: 3 in c)
    assert tris is not two_triangle_square
    assert _as_tuples(tris) == [(0, 2, 3)]


def test_skeleton_of_empty_mesh():
    edges = skeleton(Mesh.empty(2), 1)
    assert edges.numcells == 0
    assert edges.dimension == 1


@pytest.mark.parametrize("dim", [-1, 3])
def test_skeleton_dimension_out_of_range(two_triangle_square, dim):
    with pytest.raises(InvalidArgumentError):
        skeleton(two_triangle_square, dim)


def test_boundary_and_interior(two_triangle_square):
    bnd = boundary(two_triangle_square)
    assert _as_tuples(bnd) == [(0, 1), (1, 2), (0, 3), (2, 3)]

    inner = interior(two_triangle_square)
    assert _as_tuples(inner) == [(0, 2)]


def test_interior_with_explicit_edges(two_triangle_square):
    edges = skeleton(two_triangle_square, 1, pred=lambda e: 2 in e)
    inner = interior(two_triangle_square, edges)
    assert _as_tuples(inner) == [(0, 2)]

    with pytest.raises(InvalidArgumentError):
        interior(two_triangle_square, skeleton(two_triangle_square, 0))


def test_closed_surface_has_empty_boundary(tetra_surface):
    assert boundary(tetra_surface).numcells == 0
    assert interior(tetra_surface).numcells == 6


def test_boundary_of_segment_mesh():
    verts = np.array([[0.0], [1.0], [2.0]])
    line = Mesh(verts, [[0, 1], [1, 2]])
    assert _as_tuples(boundary(line)) == [(0,), (2,)]


def test_boundary_of_vertices_raises():
    mesh = Mesh(np.zeros((2, 2)), [[0], [1]])
    with pytest.raises(InvalidArgumentError):
        boundary(mesh)


def test_junction_edge_is_interior(junction_mesh):
    assert (0, 1) in _as_tuples(interior(junction_mesh))
    assert (0, 1) not in _as_tuples(boundary(junction_mesh))


def test_isoriented(two_triangle_square, tetra_surface):
    assert isoriented(two_triangle_square)
    assert isoriented(tetra_surface)

    # Flipping a single cell breaks consistency along the shared edge.
    bad = Mesh(two_triangle_square.vertices, [[0, 1, 2], [2, 0, 3]])
    assert not isoriented(bad)

    # Flipping every cell keeps it.
    assert isoriented(-two_triangle_square)


def test_unoriented_tetra_surface():
    verts = np.array(
        [[0.0, 0.0, 0.0], [1.0, 0.0, 0.0], [0.0, 1.0, 0.0], [0.0, 0.0, 1.0]]
    )
    surf = Mesh(verts, [[0, 1, 2], [0, 1, 3], [1, 2, 3], [0, 2, 3]])
    assert not isoriented(surf)
