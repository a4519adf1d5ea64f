"""Relative orientation and oriented connectivity matrices.

``connectivity(kcells, mcells)`` relates the cells of two meshes sharing a
vertex buffer, typically a skeleton and the mesh it was extracted from. Entry
``(j, i)`` is ``op(r)`` where ``r`` is the signed local index of k-cell `i` as
a face of m-cell `j` (zero when not a face). With ``op=np.sign`` this is the
graph version of the exterior derivative.
"""
from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Sequence, Tuple

import numpy as np
import scipy.sparse as sp

from .adjacency import cells_around, vertex_to_cell_map
from .mesh import Mesh

_LOGGER = logging.getLogger(__name__)


def permutation_sign(perm: Sequence[int]) -> int:
    """Return +1 for an even permutation of ``0..n-1`` and -1 for an odd one."""
    sign = 1
    n = len(perm)
    for a in range(n):
        for b in range(a + 1, n):
            if perm[a] > perm[b]:
                sign = -sign
    return sign


def relative_orientation(face: Sequence[int], cell: Sequence[int]) -> int:
    """Signed local index of `face` in `cell`.

    Let `i` be the 1-based position in `cell` of the one vertex not in `face`.
    The induced face is `cell` with that position removed, oriented with sign
    ``(-1)**(i-1)``. The result is ``i`` times that sign times the sign of the
    permutation taking the induced face onto `face`.

    Args:
        face: Vertex indices of the candidate face (length n).
        cell: Vertex indices of the cell (length n+1).

    Returns:
        int: The signed local index, or 0 if `face` is not a face of `cell`.
    """
    face = tuple(int(v) for v in face)
    cell = tuple(int(v) for v in cell)
    if len(face) + 1 != len(cell):
        return 0

    missing = [k for k, v in enumerate(cell) if v not in face]
    if len(missing) != 1:
        return 0
    pos = missing[0]

    induced = cell[:pos] + cell[pos + 1 :]
    try:
        perm = [face.index(v) for v in induced]
    except ValueError:
        return 0
    if sorted(perm) != list(range(len(face))):
        return 0

    s = -1 if pos % 2 else 1
    return s * permutation_sign(perm) * (pos + 1)


def connectivity(
    kcells: Mesh,
    mcells: Mesh,
    op: Callable[[int], Any] = np.sign,
) -> sp.csr_matrix:
    """Build the connectivity matrix between two meshes.

    Args:
        kcells (Mesh): Mesh of faces (columns).
        mcells (Mesh): Mesh of cells (rows), on the same vertex buffer.
        op (Callable[[int], Any]): Applied to each relative orientation.
            ``np.sign`` (default) gives a +-1/0 incidence matrix; an identity
            keeps the local indices.

    Returns:
        sp.csr_matrix: Integer matrix of shape (numcells(mcells), numcells(kcells)).
    """
    vtok, nk = vertex_to_cell_map(kcells)
    vtom, nm = vertex_to_cell_map(mcells)

    if kcells.numvertices != mcells.numvertices:
        _LOGGER.debug(
            "connectivity: vertex buffers differ in size (%d vs %d); using the common range.",
            kcells.numvertices,
            mcells.numvertices,
        )
    n_common = min(kcells.numvertices, mcells.numvertices)

    kc = kcells.cells.tolist()
    mc = mcells.cells.tolist()

    entries: Dict[Tuple[int, int], int] = {}
    for v in range(n_common):
        for i in cells_around(vtok, nk, v).tolist():
            for j in cells_around(vtom, nm, v).tolist():
                if (j, i) in entries:
                    continue
                entries[(j, i)] = int(op(relative_orientation(kc[i], mc[j])))

    nonzero = [(j, i, val) for (j, i), val in entries.items() if val != 0]
    rows = np.array([e[0] for e in nonzero], dtype=int)
    cols = np.array([e[1] for e in nonzero], dtype=int)
    vals = np.array([e[2] for e in nonzero], dtype=int)

    D = sp.coo_matrix(
        (vals, (rows, cols)), shape=(mcells.numcells, kcells.numcells), dtype=int
    ).tocsr()
    _LOGGER.debug(
        "connectivity: shape=%s nnz=%d (candidate pairs=%d)",
        D.shape,
        int(D.nnz),
        len(entries),
    )
    return D
