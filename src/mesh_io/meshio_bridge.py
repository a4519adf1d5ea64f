"""Conversion between `Mesh` and meshio, and file round-trips through meshio."""
from __future__ import annotations

import logging
from typing import Any, Optional

import meshio
import numpy as np

from simplex_mesh.exceptions import InvalidArgumentError, MeshParseError
from simplex_mesh.mesh import Mesh

_LOGGER = logging.getLogger(__name__)

# Simplex dimension -> meshio cell type.
CELL_TYPES = {0: "vertex", 1: "line", 2: "triangle", 3: "tetra"}
_DIMENSIONS = {name: dim for dim, name in CELL_TYPES.items()}


def to_meshio(mesh: Mesh) -> meshio.Mesh:
    """Convert a Mesh into a meshio.Mesh with a single cell block."""
    cell_type = CELL_TYPES.get(mesh.dimension)
    if cell_type is None:
        raise InvalidArgumentError(f"no meshio cell type for dimension {mesh.dimension}")
    return meshio.Mesh(points=np.asarray(mesh.vertices), cells=[(cell_type, mesh.cells)])


def from_meshio(m: meshio.Mesh, cell_type: Optional[str] = None) -> Mesh:
    """Convert a meshio.Mesh into a Mesh.

    Args:
        m: The meshio mesh.
        cell_type: meshio cell type to extract ("line", "triangle", ...). If
            None, the highest-dimensional simplex type present is used. All
            blocks of that type are concatenated in order.

    Raises:
        MeshParseError: If no block of the requested type exists.
    """
    present = [block.type for block in m.cells if block.type in _DIMENSIONS]
    if cell_type is None:
        if not present:
            raise MeshParseError("meshio mesh has no simplex cell blocks")
        cell_type = max(present, key=lambda t: _DIMENSIONS[t])
    elif cell_type not in present:
        raise MeshParseError(f"meshio mesh has no {cell_type!r} cells")

    blocks = [np.asarray(b.data, dtype=int) for b in m.cells if b.type == cell_type]
    cells = np.concatenate(blocks, axis=0)
    _LOGGER.debug("from_meshio: %d %s cells from %d block(s)", cells.shape[0], cell_type, len(blocks))
    return Mesh(np.asarray(m.points, dtype=float), cells)


def write_mesh(mesh: Mesh, filename: str, file_format: Optional[str] = None, **kwargs: Any) -> None:
    """Write a mesh to any format supported by meshio.

    Raises:
        Exception: If the underlying meshio writer fails.
    """
    try:
        to_meshio(mesh).write(filename, file_format=file_format, **kwargs)
    except Exception:
        _LOGGER.exception("write_mesh failed for '%s'.", filename)
        raise
    _LOGGER.info(
        "Mesh written to '%s' (vertices=%d, cells=%d)", filename, mesh.numvertices, mesh.numcells
    )


def read_mesh(filename: str, cell_type: Optional[str] = None, file_format: Optional[str] = None) -> Mesh:
    """Read a mesh from any format supported by meshio."""
    try:
        m = meshio.read(filename, file_format=file_format)
    except Exception:
        _LOGGER.exception("read_mesh failed for '%s'.", filename)
        raise
    mesh = from_meshio(m, cell_type)
    _LOGGER.info(
        "Mesh read from '%s' (vertices=%d, cells=%d)", filename, mesh.numvertices, mesh.numcells
    )
    return mesh
