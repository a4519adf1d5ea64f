from __future__ import annotations

import numpy as np
import pytest

from simplex_mesh.mesh import Mesh


@pytest.fixture
def simple_triangle_mesh():
    """
    Provides a Mesh instance with a single triangle:
        v0 = [0, 0, 0]
        v1 = [1, 0, 0]
        v2 = [0, 1, 0]
    """
    verts = np.array(
        [
            [0.0, 0.0, 0.0],  # v0
            [1.0, 0.0, 0.0],  # v1
            [0.0, 1.0, 0.0],  # v2
        ]
    )
    cells = np.array([[0, 1, 2]])  # One triangle
    return Mesh(verts, cells)


@pytest.fixture
def two_triangle_square():
    """
    Unit square split into two triangles along the diagonal (0-2):
      v3 (0,1) ---- v2 (1,1)
        |  \\           |
        |    \\         |
        |      \\       |
      v0 (0,0) ---- v1 (1,0)
    Triangles: [0,1,2] and [0,2,3], both counter-clockwise.
    Boundary edges: (0,1),(1,2),(2,3),(0,3)
    Interior edge: (0,2)
    """
    verts = np.array(
        [
            [0.0, 0.0, 0.0],  # v0
            [1.0, 0.0, 0.0],  # v1
            [1.0, 1.0, 0.0],  # v2
            [0.0, 1.0, 0.0],  # v3
        ],
        dtype=float,
    )
    cells = np.array([[0, 1, 2], [0, 2, 3]], dtype=int)
    return Mesh(verts, cells)


@pytest.fixture
def tetra_surface():
    """
    Closed, outward oriented tetrahedron surface (no boundary).
    Vertices: (0,0,0),(1,0,0),(0,1,0),(0,0,1)
    Faces: (0,2,1),(0,1,3),(1,2,3),(0,3,2)
    """
    verts = np.array(
        [
            [0.0, 0.0, 0.0],  # 0
            [1.0, 0.0, 0.0],  # 1
            [0.0, 1.0, 0.0],  # 2
            [0.0, 0.0, 1.0],  # 3
        ],
        dtype=float,
    )
    cells = np.array([[0, 2, 1], [0, 1, 3], [1, 2, 3], [0, 3, 2]], dtype=int)
    return Mesh(verts, cells)


@pytest.fixture
def junction_mesh():
    """
    Three triangles hanging off the common edge (0,1), a non-manifold junction.
    """
    verts = np.array(
        [
            [0.0, 0.0, 0.0],
            [1.0, 0.0, 0.0],
            [0.5, 1.0, 0.0],
            [0.5, 0.0, 1.0],
            [0.5, -1.0, 0.0],
        ],
        dtype=float,
    )
    cells = np.array([[0, 1, 2], [0, 1, 3], [0, 1, 4]], dtype=int)
    return Mesh(verts, cells)
