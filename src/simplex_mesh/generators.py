"""Structured mesh generators."""
from __future__ import annotations

import logging
from typing import Optional

import numpy as np

from .exceptions import InvalidArgumentError
from .mesh import Mesh

_LOGGER = logging.getLogger(__name__)


def _divisions(length: float, delta: float) -> int:
    if length <= 0.0 or delta <= 0.0:
        raise InvalidArgumentError("length and delta must be positive")
    return max(1, int(round(length / delta)))


def mesh_segment(length: float, delta: float, udim: int = 3, dtype: Optional[type] = None) -> Mesh:
    """Mesh the segment [0, length] along the x axis with cells of size ~delta."""
    if udim < 1:
        raise InvalidArgumentError("udim must be >= 1")
    n = _divisions(length, delta)
    verts = np.zeros((n + 1, udim), dtype=dtype or float)
    verts[:, 0] = np.linspace(0.0, length, n + 1)
    cells = np.stack([np.arange(n), np.arange(1, n + 1)], axis=1)
    return Mesh(verts, cells)


def mesh_rectangle(
    width: float, height: float, delta: float, udim: int = 3, dtype: Optional[type] = None
) -> Mesh:
    """Triangulate the rectangle [0, width] x [0, height].

    Grid vertex (i, j) at ``(i*width/nx, j*height/ny)`` is stored in row
    ``i*(ny+1) + j``; every quad is split along its diagonal into two
    counter-clockwise triangles.
    """
    if udim < 2:
        raise InvalidArgumentError("udim must be >= 2")
    nx = _divisions(width, delta)
    ny = _divisions(height, delta)

    X, Y = np.meshgrid(
        np.linspace(0.0, width, nx + 1), np.linspace(0.0, height, ny + 1), indexing="ij"
    )
    verts = np.zeros(((nx + 1) * (ny + 1), udim), dtype=dtype or float)
    verts[:, 0] = X.ravel()
    verts[:, 1] = Y.ravel()

    cells = []
    for i in range(nx):
        for j in range(ny):
            v00 = i * (ny + 1) + j
            v10 = v00 + ny + 1
            cells.append((v00, v10, v10 + 1))
            cells.append((v00, v10 + 1, v00 + 1))

    _LOGGER.debug("mesh_rectangle: %dx%d grid -> %d triangles", nx, ny, len(cells))
    return Mesh(verts, np.array(cells, dtype=int))
