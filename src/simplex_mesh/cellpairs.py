"""Cell pairs across shared faces.

For every face (a (D-1)-cell, as produced by `skeleton`) the cells of the mesh
containing it are collected through the vertex-to-cell map and emitted as
pairs of cell indices:

  - one neighbour (boundary face): ``(cell, -k)`` where ``k`` is the local
    index of the face in that cell;
  - two neighbours: one pair; if the first neighbour found sees the face
    positively and the second negatively they are swapped, so in an
    oriented mesh the negatively oriented cell comes first;
  - three or more (junction): every pair of neighbours, in lexicographic
    order, optionally dropping the first one.
"""
from __future__ import annotations

import itertools
import logging
from typing import Any, List, Sequence, Tuple
from numpy.typing import NDArray

import numpy as np

from .adjacency import cells_around, vertex_to_cell_map
from .connectivity import relative_orientation
from .exceptions import InvalidArgumentError, TopologyError
from .mesh import Mesh

_LOGGER = logging.getLogger(__name__)


def _common_cells(table: NDArray[Any], counts: NDArray[Any], face: Sequence[int]) -> List[int]:
    """Cells containing every vertex of `face`, in the order of the first vertex."""
    first = cells_around(table, counts, face[0]).tolist()
    others = [set(cells_around(table, counts, v).tolist()) for v in face[1:]]
    nbd = [c for c in first if all(c in s for s in others)]
    return list(dict.fromkeys(nbd))


def _oriented_pair(
    face: Sequence[int], c1: int, c2: int, cells: Sequence[Sequence[int]]
) -> Tuple[int, int]:
    r1 = relative_orientation(face, cells[c1])
    r2 = relative_orientation(face, cells[c2])
    if r1 > 0 and r2 < 0:
        return c2, c1
    return c1, c2


def cell_pairs(
    mesh: Mesh,
    edges: Mesh,
    drop_junction_pair: bool = False,
) -> NDArray[Any]:
    """Compute the pairs of cells of `mesh` sharing each face in `edges`.

    Args:
        mesh (Mesh): Mesh of dimension D.
        edges (Mesh): Faces of dimension D-1 on the same vertex buffer.
        drop_junction_pair (bool): On junctions (faces shared by three or more
            cells) skip the first pair. This avoids linearly dependent
            relations downstream, e.g. in boundary element assembly.

    Returns:
        NDArray[Any]: Int array of shape (n_pairs, 2). Boundary faces have a
        negative local index in the second column.

    Raises:
        InvalidArgumentError: On a dimension mismatch or if `edges` reference
            vertices outside `mesh`.
        TopologyError: If a face has no adjacent cell.
    """
    if edges.dimension + 1 != mesh.dimension:
        _LOGGER.error(
            "cell_pairs: edges of dimension %d for mesh of dimension %d",
            edges.dimension,
            mesh.dimension,
        )
        raise InvalidArgumentError(
            "cell_pairs requires dimension(edges) + 1 == dimension(mesh)"
        )
    if edges.numcells and int(edges.cells.max()) >= mesh.numvertices:
        raise InvalidArgumentError("edges reference vertices outside of mesh")

    ndrops = 1 if drop_junction_pair else 0
    table, counts = vertex_to_cell_map(mesh)
    cells = mesh.cells.tolist()

    pairs: List[Tuple[int, int]] = []
    n_boundary = 0
    n_junction = 0
    for e, face in enumerate(edges.cells.tolist()):
        nbd = _common_cells(table, counts, face)
        n = len(nbd)

        if n == 0:
            _LOGGER.error("cell_pairs: face %d %s has no adjacent cell.", e, face)
            raise TopologyError(f"face {e} {tuple(face)} has no adjacent cell in mesh")

        if n == 1:
            c = nbd[0]
            s = relative_orientation(face, cells[c])
            pairs.append((c, -abs(s)))
            n_boundary += 1
        elif n == 2:
            pairs.append(_oriented_pair(face, nbd[0], nbd[1], cells))
        else:
            n_junction += 1
            for c1, c2 in itertools.islice(itertools.combinations(nbd, 2), ndrops, None):
                pairs.append(_oriented_pair(face, c1, c2, cells))

    if n_junction:
        _LOGGER.warning(
            "cell_pairs: %d junction face(s) shared by more than two cells.",
            n_junction,
        )
    _LOGGER.debug(
        "cell_pairs: faces=%d pairs=%d boundary=%d junction=%d",
        edges.numcells,
        len(pairs),
        n_boundary,
        n_junction,
    )
    return np.array(pairs, dtype=int).reshape(-1, 2)
