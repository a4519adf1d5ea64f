"""Predicate-driven sub-mesh selection.

The predicate factories below capture the topology (or geometry) of a mesh
once and answer membership queries for single cells, vertices or simplices.
"""
from __future__ import annotations

import logging
from typing import Callable, Tuple, Union

import numpy as np
from scipy.spatial import cKDTree

from .charts import Simplex, chart
from .config import weld_tolerance
from .exceptions import InvalidArgumentError
from .intersection import intersection
from .mesh import Mesh
from .skeleton import _incidence_counts, boundary, skeleton

_LOGGER = logging.getLogger(__name__)


def submesh(selector: Union[Callable[[Tuple[int, ...]], bool], Mesh], mesh: Mesh) -> Mesh:
    """Return the mesh of cells of `mesh` picked out by `selector`.

    `selector` is either a predicate over cell tuples or another mesh of the
    same dimension. A mesh selects the cells of `mesh` that overlap one of
    its own cells (see `overlap_gpredicate`).

    The result shares the vertex array of `mesh` and keeps cell order.
    """
    if isinstance(selector, Mesh):
        overlaps = overlap_gpredicate(selector)

        def pred(cell: Tuple[int, ...]) -> bool:
            return overlaps(chart(mesh, cell))

    else:
        pred = selector
    keep = [i for i, cell in enumerate(mesh.cells.tolist()) if pred(tuple(cell))]
    sub = Mesh(mesh.vertices, mesh.cells[np.asarray(keep, dtype=int)], copy=False)
    _LOGGER.debug("submesh: kept %d of %d cells", sub.numcells, mesh.numcells)
    return sub


def interior_tpredicate(mesh: Mesh) -> Callable[[Tuple[int, ...]], bool]:
    """Predicate over (D-1)-cells: true if shared by at least two cells of `mesh`."""
    D = mesh.dimension
    if D < 1:
        raise InvalidArgumentError("interior_tpredicate requires a mesh of dimension >= 1")
    edges = skeleton(mesh, D - 1)
    nn = _incidence_counts(edges, mesh)
    inside = {tuple(e) for e, n in zip(edges.cells.tolist(), nn.tolist()) if n > 1}

    def pred(cell: Tuple[int, ...]) -> bool:
        return tuple(sorted(int(v) for v in cell)) in inside

    return pred


def interior_vpredicate(mesh: Mesh) -> Callable[[int], bool]:
    """Predicate over vertex indices: true if the vertex is not on the boundary."""
    bverts = set(boundary(mesh).cells.ravel().tolist())

    def pred(v: int) -> bool:
        return int(v) not in bverts

    return pred


def overlap_gpredicate(mesh: Mesh) -> Callable[[Simplex], bool]:
    """Predicate over simplices: true if it overlaps a cell of `mesh`.

    Overlap means an intersection of positive measure. Candidate cells are
    found through a KD-tree over the cell centers.
    """
    charts = [chart(mesh, c) for c in mesh.cells]
    tol = weld_tolerance(np.float64)
    if not charts:
        return lambda s: False

    centers = np.array([ch.center for ch in charts])
    radii = np.array([np.linalg.norm(ch.vertices - ch.center, axis=1).max() for ch in charts])
    tree = cKDTree(centers)
    rmax = float(radii.max())

    def pred(s: Simplex) -> bool:
        if s.dimension != mesh.dimension:
            raise InvalidArgumentError(
                f"expected a {mesh.dimension}-simplex; got dimension {s.dimension}"
            )
        c = s.center
        r = float(np.linalg.norm(s.vertices - c, axis=1).max())
        for j in tree.query_ball_point(c, r + rmax + tol):
            parts = intersection(s, charts[j])
            if sum(p.volume for p in parts) > tol * max(charts[j].volume, tol):
                return True
        return False

    return pred
