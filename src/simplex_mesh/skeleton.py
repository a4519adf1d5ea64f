"""Skeleton extraction and the topology queries built on it.

``skeleton(mesh, k)`` returns the distinct k-dimensional sub-simplices of the
cells of `mesh`, each stored with its vertex indices sorted ascending, in
order of first appearance. The result shares the vertex array of `mesh`; at
the top dimension (without a predicate) it *is* `mesh`, so mutating one
mutates the other.
"""
from __future__ import annotations

import itertools
import logging
from typing import Any, Callable, Optional, Tuple

import numpy as np

from .connectivity import connectivity
from .exceptions import InvalidArgumentError
from .mesh import Mesh

_LOGGER = logging.getLogger(__name__)


def skeleton(
    mesh: Mesh,
    dim: int,
    pred: Optional[Callable[[Tuple[int, ...]], bool]] = None,
) -> Mesh:
    """Return the mesh of `dim`-dimensional sub-cells of `mesh`.

    For example the edges of a surface mesh are ``skeleton(mesh, 1)``.

    Args:
        mesh (Mesh): Source mesh of dimension D.
        dim (int): Requested dimension, ``0 <= dim <= D``.
        pred (Optional[Callable]): If given, only sub-cells for which
            ``pred(indices)`` is true are kept. `indices` is the tuple as
            enumerated from the parent cell, before sorting.

    Returns:
        Mesh: The skeleton, sharing `mesh.vertices`.

    Raises:
        InvalidArgumentError: If `dim` is out of range.
    """
    meshdim = mesh.dimension
    if not 0 <= dim <= meshdim:
        _LOGGER.error("skeleton: dim=%d outside [0, %d]", dim, meshdim)
        raise InvalidArgumentError(
            f"skeleton dimension must satisfy 0 <= dim <= {meshdim}; got {dim}"
        )

    if pred is None and dim == meshdim:
        return mesh

    # (n_cells * C(D+1, dim+1), dim+1) in cell order, combinations lexicographic.
    combos = np.array(list(itertools.combinations(range(meshdim + 1), dim + 1)), dtype=int)
    candidates = mesh.cells[:, combos].reshape(-1, dim + 1)

    if pred is not None:
        keep = np.fromiter(
            (bool(pred(tuple(c))) for c in candidates.tolist()),
            dtype=bool,
            count=candidates.shape[0],
        )
        candidates = candidates[keep]

    candidates = np.sort(candidates, axis=1)
    if candidates.shape[0] == 0:
        simplices = np.zeros((0, dim + 1), dtype=int)
    else:
        _, first = np.unique(candidates, axis=0, return_index=True)
        simplices = candidates[np.sort(first)]

    _LOGGER.debug(
        "skeleton: dim=%d from D=%d -> %d unique of %d candidates",
        dim,
        meshdim,
        simplices.shape[0],
        candidates.shape[0],
    )
    return Mesh(mesh.vertices, simplices, copy=False)


def _incidence_counts(edges: Mesh, mesh: Mesh) -> Any:
    conn = connectivity(edges, mesh)
    return np.asarray(abs(conn).sum(axis=0)).ravel()


def boundary(mesh: Mesh) -> Mesh:
    """Return the boundary of `mesh` as a mesh of one dimension lower.

    The boundary consists of the (D-1)-cells adjacent to fewer than two cells.

    Raises:
        InvalidArgumentError: If `mesh` is 0-dimensional.
    """
    D = mesh.dimension
    if D < 1:
        _LOGGER.error("boundary: vertices have no boundary (D=%d)", D)
        raise InvalidArgumentError("boundary requires a mesh of dimension >= 1")

    edges = skeleton(mesh, D - 1)
    sums = _incidence_counts(edges, mesh)
    bnd = Mesh(mesh.vertices, edges.cells[sums < 2], copy=False)
    _LOGGER.debug("boundary: %d of %d faces", bnd.numcells, edges.numcells)
    return bnd


def interior(mesh: Mesh, edges: Optional[Mesh] = None) -> Mesh:
    """Return the (D-1)-cells adjacent to at least two cells of `mesh`.

    More than two neighbouring cells occur on non-manifold junctions; such
    faces are included.

    Args:
        mesh (Mesh): Mesh of dimension D >= 1.
        edges (Optional[Mesh]): Faces to select from; ``skeleton(mesh, D-1)``
            if None.
    """
    D = mesh.dimension
    if D < 1:
        raise InvalidArgumentError("interior requires a mesh of dimension >= 1")
    if edges is None:
        edges = skeleton(mesh, D - 1)
    elif edges.dimension != D - 1:
        _LOGGER.error(
            "interior: edges of dimension %d for mesh of dimension %d",
            edges.dimension,
            D,
        )
        raise InvalidArgumentError("edges must have dimension one less than mesh")

    nn = _incidence_counts(edges, mesh)
    return Mesh(mesh.vertices, edges.cells[nn > 1], copy=False)


def isoriented(mesh: Mesh) -> bool:
    """Return True if all cells are consistently oriented.

    Every (D-1)-cell must have a signed incidence sum over its adjacent cells
    of absolute value at most one.
    """
    D = mesh.dimension
    if D < 1:
        return True
    edges = skeleton(mesh, D - 1)
    conn = connectivity(edges, mesh)
    sums = np.asarray(conn.sum(axis=0)).ravel()
    return bool(np.all(np.abs(sums) <= 1))
