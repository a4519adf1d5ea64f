"""Welding of meshes.

Vertices of the second mesh that coincide (up to ``sqrt(eps)`` of the
coordinate dtype) with a vertex referenced by a cell of the first mesh are
merged into that vertex; all other vertices are appended. Cells keep the
order in which they appear in the inputs.
"""
from __future__ import annotations

import logging
from typing import Any, List

import numpy as np
from scipy.spatial import cKDTree

from .config import weld_tolerance
from .exceptions import InvalidArgumentError
from .mesh import Mesh
from .skeleton import skeleton

_LOGGER = logging.getLogger(__name__)


def weld(*meshes: Mesh) -> Mesh:
    """Build a mesh by welding together the inputs.

    More than two meshes are folded pairwise from left to right.

    Args:
        *meshes (Mesh): At least two meshes of equal dimension and embedding
            dimension.

    Returns:
        Mesh: The welded mesh.

    Raises:
        InvalidArgumentError: If fewer than two meshes are given or they are
            incompatible.
    """
    if len(meshes) < 2:
        raise InvalidArgumentError(f"weld requires at least two meshes; got {len(meshes)}")
    welded = _weld_pair(meshes[0], meshes[1])
    for mesh in meshes[2:]:
        welded = _weld_pair(welded, mesh)
    return welded


def _weld_pair(mesh1: Mesh, mesh2: Mesh) -> Mesh:
    if mesh1.dimension != mesh2.dimension:
        _LOGGER.error(
            "weld: dimension mismatch (%d vs %d)", mesh1.dimension, mesh2.dimension
        )
        raise InvalidArgumentError("cannot weld meshes of different dimension")
    if mesh1.universedimension != mesh2.universedimension:
        _LOGGER.error(
            "weld: embedding dimension mismatch (%d vs %d)",
            mesh1.universedimension,
            mesh2.universedimension,
        )
        raise InvalidArgumentError("cannot weld meshes of different embedding dimension")

    tol = weld_tolerance(mesh1.coordtype)

    # Only vertices referenced by a cell of mesh1 can absorb vertices of mesh2.
    verts1 = skeleton(mesh1, 0)
    indcs = verts1.cells[:, 0]
    cntrs = mesh1.vertices[indcs]

    nv1 = mesh1.numvertices
    nv2 = mesh2.numvertices
    V2 = np.asarray(mesh2.vertices, dtype=mesh1.coordtype)

    idmap = nv1 + np.arange(nv2, dtype=int)
    num_equal_vertices = 0
    appended: List[int] = []

    candidates: Any = None
    if indcs.shape[0] and nv2:
        tree = cKDTree(cntrs)
        candidates = tree.query_ball_point(V2, r=tol)

    for j in range(nv2):
        found = False
        if candidates is not None:
            # First match wins. Candidates are visited in used-vertex order, so
            # with several vertices of mesh1 within tol the earliest one is
            # taken; another spatial index may pick a different one.
            for i in sorted(candidates[j]):
                if np.linalg.norm(cntrs[i] - V2[j]) < tol:
                    idmap[j] = indcs[i]
                    num_equal_vertices += 1
                    found = True
                    break
        if not found:
            idmap[j] -= num_equal_vertices
            appended.append(j)

    V = np.concatenate([mesh1.vertices, V2[np.asarray(appended, dtype=int)]], axis=0)
    F = np.concatenate([mesh1.cells, idmap[mesh2.cells]], axis=0)

    _LOGGER.info(
        "weld: %d of %d vertices matched (tol=%.3g); result has %d vertices, %d cells",
        num_equal_vertices,
        nv2,
        tol,
        V.shape[0],
        F.shape[0],
    )
    return Mesh(V, F)
