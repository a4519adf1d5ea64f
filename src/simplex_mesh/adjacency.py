"""Vertex-to-cell adjacency index.

The index is a dense ``(n_vertices, max_degree)`` table whose row `v` lists,
in cell order, the cells incident to vertex `v`; unused slots hold
`NO_CELL`. It backs the connectivity and cell-pairing queries.
"""
from __future__ import annotations

import logging
from typing import Any, Tuple
from numpy.typing import NDArray

import numpy as np

from .mesh import Mesh

_LOGGER = logging.getLogger(__name__)

NO_CELL = -1


def vertex_to_cell_map(mesh: Mesh) -> Tuple[NDArray[Any], NDArray[Any]]:
    """Compute the cells adjacent to each vertex.

    Args:
        mesh (Mesh): Mesh whose cells are indexed.

    Returns:
        Tuple[NDArray[Any], NDArray[Any]]:
            - table: int array (n_vertices, max_degree); ``table[v, k]`` is the
              index of the k-th cell adjacent to vertex `v`, `NO_CELL` past
              ``counts[v]``.
            - counts: int array (n_vertices,) with the number of adjacent cells.
    """
    n_verts = mesh.numvertices
    cells = mesh.cells

    # First pass: degrees, to size the table.
    counts: NDArray[Any] = np.bincount(cells.ravel(), minlength=n_verts).astype(int)
    width = int(counts.max()) if n_verts else 0

    table: NDArray[Any] = np.full((n_verts, width), NO_CELL, dtype=int)
    fill = np.zeros(n_verts, dtype=int)
    for i, cell in enumerate(cells.tolist()):
        for v in cell:
            table[v, fill[v]] = i
            fill[v] += 1

    _LOGGER.debug(
        "vertex_to_cell_map: %d vertices, %d cells, max degree %d",
        n_verts,
        cells.shape[0],
        width,
    )
    return table, counts


def cells_around(table: NDArray[Any], counts: NDArray[Any], v: int) -> NDArray[Any]:
    """Return the cells adjacent to vertex `v` from a vertex-to-cell map."""
    return table[v, : counts[v]]
