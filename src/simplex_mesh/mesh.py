"""Module defining the Mesh class for simplicial meshes.

This module provides:
  - The `Mesh` container (vertex buffer, cell buffer, cell lookup).
  - Orientation utilities (`flip`, `flip_orientation`, unary minus).
  - Affine utilities (translate, mirror, rotate) in copy and in-place form.

A mesh of dimension D stores its cells as an integer array of shape
(n_cells, D+1) indexing rows of a float vertex array of shape (n_vertices, U).
Swapping the first two indices of a cell flips its orientation.
"""
from __future__ import annotations

import copy
import logging
from typing import Any, Dict, Optional, Sequence, Tuple, Union
from numpy.typing import NDArray

import numpy as np
from scipy.spatial.transform import Rotation

from .config import default_dtype
from .exceptions import InvalidArgumentError

_LOGGER = logging.getLogger(__name__)

CellLike = Union[Sequence[int], NDArray[Any]]


class Mesh:
    """Simplicial mesh: an ordered vertex buffer and an ordered cell buffer.

    Args:
        vertices (NDArray[Any]): Vertex coordinates, shape (n_vertices, U).
        cells (NDArray[Any]): Vertex indices per cell, shape (n_cells, D+1).
        dtype (Optional[Any]): Coordinate dtype. If None, floating input keeps
            its dtype and anything else is converted to the configured
            default dtype.
        copy (bool): Copy the input buffers, so the in-place methods never
            touch the caller's arrays. With False a floating vertex array
            of the right dtype is stored as is and shared with the caller.
            Skeletons and submeshes use this to share their parent's
            vertex buffer.

    Attributes:
        vertices (NDArray[Any]): Vertex array, shape (n_vertices, U).
        cells (NDArray[Any]): Cell array, shape (n_cells, D+1).
        cell_index (Dict[Tuple[int, ...], int]): Exact cell tuple -> row in
            `cells`. For duplicated cells the last row wins.

    Raises:
        InvalidArgumentError: If the arrays are not 2D or a cell references a
            vertex outside ``[0, n_vertices)``.
    """

    vertices: NDArray[Any]
    cells: NDArray[Any]
    cell_index: Dict[Tuple[int, ...], int]

    def __init__(
        self,
        vertices: Any,
        cells: Any,
        dtype: Optional[Any] = None,
        copy: bool = True,
    ) -> None:
        verts = np.asarray(vertices)
        if dtype is not None:
            verts = verts.astype(dtype, copy=copy)
        elif not np.issubdtype(verts.dtype, np.floating):
            verts = verts.astype(default_dtype())
        elif copy:
            verts = verts.copy()
        cls = np.array(cells, dtype=int) if copy else np.asarray(cells, dtype=int)

        if verts.ndim != 2:
            _LOGGER.error("Mesh: vertices must be 2D, got shape %s", verts.shape)
            raise InvalidArgumentError(
                f"vertices must have shape (n_vertices, U); got {verts.shape}"
            )
        if cls.ndim != 2 or cls.shape[1] < 1:
            _LOGGER.error("Mesh: cells must be 2D, got shape %s", cls.shape)
            raise InvalidArgumentError(
                f"cells must have shape (n_cells, D+1); got {cls.shape}. "
                "Use Mesh.empty() for meshes without cells."
            )
        n_verts = verts.shape[0]
        if cls.size and (cls.min() < 0 or cls.max() >= n_verts):
            _LOGGER.error("Mesh: cells reference vertices outside [0, %d).", n_verts)
            raise InvalidArgumentError(
                f"cells contain vertex indices outside [0, {n_verts})"
            )

        self.vertices = verts
        self.cells = cls
        self._rebuild_index()

        _LOGGER.debug(
            "Mesh built: %d vertices (U=%d), %d cells (D=%d)",
            n_verts,
            verts.shape[1],
            cls.shape[0],
            cls.shape[1] - 1,
        )

    @classmethod
    def empty(cls, dim: int, udim: Optional[int] = None, dtype: Optional[Any] = None) -> Mesh:
        """Return a mesh without vertices and cells.

        Args:
            dim: Dimension of the (absent) cells.
            udim: Embedding dimension; defaults to ``dim + 1``.
            dtype: Coordinate dtype; the configured default if None.
        """
        if dim < 0:
            raise InvalidArgumentError(f"mesh dimension must be >= 0; got {dim}")
        udim = dim + 1 if udim is None else udim
        dt = default_dtype() if dtype is None else dtype
        return cls(np.zeros((0, udim), dtype=dt), np.zeros((0, dim + 1), dtype=int))

    def _rebuild_index(self) -> None:
        self.cell_index = {tuple(c): i for i, c in enumerate(self.cells.tolist())}

    # -------------------------------------------------------------------------
    # Accessors
    # -------------------------------------------------------------------------
    @property
    def numvertices(self) -> int:
        """Number of vertices in the buffer (including unreferenced ones)."""
        return int(self.vertices.shape[0])

    @property
    def numcells(self) -> int:
        """Number of cells in the mesh."""
        return int(self.cells.shape[0])

    @property
    def dimension(self) -> int:
        """Dimension of the cells (not of the surrounding space)."""
        return int(self.cells.shape[1]) - 1

    @property
    def universedimension(self) -> int:
        """Number of coordinates per vertex."""
        return int(self.vertices.shape[1])

    @property
    def coordtype(self) -> np.dtype:
        """Dtype of the vertex coordinates."""
        return self.vertices.dtype

    def vertex(self, i: int) -> NDArray[Any]:
        """Return the coordinates of vertex `i`."""
        return self.vertices[i]

    def vertices_of(self, cell: CellLike) -> NDArray[Any]:
        """Return the coordinates of the vertices in `cell`, shape (len(cell), U)."""
        return self.vertices[np.asarray(cell, dtype=int)]

    def index_of(self, cell: CellLike) -> Optional[int]:
        """Return the row of the exact tuple `cell`, or None if absent."""
        return self.cell_index.get(tuple(int(v) for v in cell))

    def vertexarray(self) -> NDArray[Any]:
        """Return a copy of the vertex array."""
        return np.array(self.vertices, copy=True)

    def cellarray(self) -> NDArray[Any]:
        """Return a copy of the cell array."""
        return np.array(self.cells, copy=True)

    def copy(self) -> Mesh:
        """Return a deep copy of the mesh."""
        return copy.deepcopy(self)

    def __repr__(self) -> str:
        return (
            f"Mesh(numvertices={self.numvertices}, numcells={self.numcells}, "
            f"dimension={self.dimension}, universedimension={self.universedimension})"
        )

    # -------------------------------------------------------------------------
    # Affine maps
    # -------------------------------------------------------------------------
    def _as_vector(self, v: Any, name: str) -> NDArray[Any]:
        arr = np.asarray(v, dtype=self.coordtype).reshape(-1)
        if arr.shape[0] != self.universedimension:
            _LOGGER.error(
                "%s: vector of length %d does not match U=%d",
                name,
                arr.shape[0],
                self.universedimension,
            )
            raise InvalidArgumentError(
                f"{name}: expected a vector of length {self.universedimension}; "
                f"got {arr.shape[0]}"
            )
        return arr

    def translate(self, v: Any) -> Mesh:
        """Return a new mesh translated over vector `v`."""
        vec = self._as_vector(v, "translate")
        return Mesh(self.vertices + vec, self.cells.copy(), copy=False)

    def translate_inplace(self, v: Any) -> Mesh:
        """Translate the mesh over vector `v` in place and return it."""
        vec = self._as_vector(v, "translate_inplace")
        self.vertices += vec
        return self

    def mirror(self, normal: Any, anchor: Any) -> Mesh:
        """Return a copy mirrored across the plane through `anchor` with unit `normal`."""
        return self.copy().mirror_inplace(normal, anchor)

    def mirror_inplace(self, normal: Any, anchor: Any) -> Mesh:
        """Mirror every vertex across a plane in place and return the mesh.

        Args:
            normal: Unit normal of the mirror plane.
            anchor: A point on the mirror plane.
        """
        n = self._as_vector(normal, "mirror")
        a = self._as_vector(anchor, "mirror")
        self.vertices[...] = mirror_point(self.vertices, n, a)
        return self

    def rotate(self, v: Any) -> Mesh:
        """Return a copy rotated about axis ``v/|v|`` by angle ``|v|``."""
        return self.copy().rotate_inplace(v)

    def rotate_inplace(self, v: Any) -> Mesh:
        """Rotate a mesh embedded in 3D space in place and return it.

        The rotation axis is ``v/|v|`` and the angle (radians) is ``|v|``,
        right-handed. A zero vector leaves the mesh unchanged.

        Raises:
            InvalidArgumentError: If the mesh is not embedded in 3D.
        """
        if self.universedimension != 3:
            _LOGGER.error("rotate: requires U=3, mesh has U=%d", self.universedimension)
            raise InvalidArgumentError("rotation is only defined for meshes in 3D space")
        rotvec = self._as_vector(v, "rotate").astype(float)
        if not self.numvertices:
            return self
        rotated = Rotation.from_rotvec(rotvec).apply(self.vertices.astype(float))
        self.vertices[...] = rotated
        _LOGGER.debug("rotate: angle=%.6g rad", float(np.linalg.norm(rotvec)))
        return self

    # -------------------------------------------------------------------------
    # Orientation
    # -------------------------------------------------------------------------
    def flip_orientation_inplace(self) -> Mesh:
        """Change the orientation of every cell in place and return the mesh.

        Raises:
            InvalidArgumentError: If the cells have fewer than two vertices.
        """
        if self.cells.shape[1] < 2:
            _LOGGER.error("flip_orientation: cells of arity %d", self.cells.shape[1])
            raise InvalidArgumentError("cells with fewer than 2 vertices have no orientation")
        self.cells[:, [0, 1]] = self.cells[:, [1, 0]]
        self._rebuild_index()
        return self

    def flip_orientation(self) -> Mesh:
        """Return a mesh of opposite orientation."""
        return self.copy().flip_orientation_inplace()

    def __neg__(self) -> Mesh:
        return self.flip_orientation()


def flip(cell: CellLike) -> CellLike:
    """Change the orientation of a cell by interchanging its first two indices.

    Tuples come back as tuples, anything else as an integer array.
    """
    if len(cell) < 2:
        raise InvalidArgumentError("cells with fewer than 2 vertices have no orientation")
    if isinstance(cell, tuple):
        return (cell[1], cell[0]) + cell[2:]
    out = np.array(cell, dtype=int, copy=True)
    out[[0, 1]] = out[[1, 0]]
    return out


def mirror_point(vertex: Any, normal: Any, anchor: Any) -> NDArray[Any]:
    """Mirror a vertex (or a stack of vertices) across a plane.

    The plane is given by its unit `normal` and a contained point `anchor`:
    ``v' = v - 2((v - anchor) . n) n``.
    """
    v = np.asarray(vertex)
    n = np.asarray(normal)
    h = (v - anchor) @ n
    return v - 2.0 * np.multiply.outer(h, n)
