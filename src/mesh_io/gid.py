"""Module providing a reader for GiD ASCII triangle meshes.

Expected layout::

    MESH dimension 3 ElemType Triangle Nnode 3
    Coordinates
        1  0.0 0.0 0.0
        ...
    End Coordinates

    Elements
        1  1 2 3
        ...
    End Elements

Both blocks end at the first line that does not have exactly four fields.
Vertex and element ids in the file are 1-based.
"""
from __future__ import annotations

import logging
import os
from typing import IO, Any, Iterator, List, Tuple, Union

import numpy as np

from simplex_mesh.exceptions import InvalidArgumentError, MeshParseError
from simplex_mesh.mesh import Mesh

_LOGGER = logging.getLogger(__name__)

Source = Union[str, "os.PathLike[str]", IO[str]]


def load_gid_mesh(source: Source) -> Mesh:
    """Load a GiD triangle mesh from a path or an open text stream.

    Args:
        source: File path or text stream.

    Returns:
        Mesh: Triangle mesh in 3D space with 0-based cells.

    Raises:
        MeshParseError: If the file does not follow the layout above.
    """
    if isinstance(source, (str, os.PathLike)):
        with open(source, "r") as f:
            return _parse_gid(f, str(source))
    return _parse_gid(source, getattr(source, "name", "<stream>"))


def _parse_gid(stream: IO[str], name: str) -> Mesh:
    lines: Iterator[Tuple[int, str]] = enumerate(stream, start=1)

    header = next(lines, None)
    if header is None:
        raise MeshParseError(f"{name}: empty GiD file")
    _LOGGER.debug("load_gid_mesh: header %r", header[1].strip())

    coords = next(lines, None)
    if coords is None or not coords[1].strip().lower().startswith("coordinates"):
        raise MeshParseError(f"{name}: expected 'Coordinates' on line 2")

    vertices: List[List[float]] = []
    for lineno, line in lines:
        fields = line.split()
        if len(fields) != 4:
            break
        vertices.append(_numbers(fields[1:4], float, name, lineno))

    for lineno, line in lines:
        if not line.strip():
            continue
        if not line.strip().lower().startswith("elements"):
            raise MeshParseError(f"{name}:{lineno}: expected 'Elements', got {line.strip()!r}")
        break
    else:
        raise MeshParseError(f"{name}: missing 'Elements' block")

    triangles: List[List[int]] = []
    for lineno, line in lines:
        fields = line.split()
        if len(fields) != 4:
            break
        triangles.append([i - 1 for i in _numbers(fields[1:4], int, name, lineno)])

    try:
        mesh = Mesh(
            np.array(vertices, dtype=float).reshape(-1, 3),
            np.array(triangles, dtype=int).reshape(-1, 3),
        )
    except InvalidArgumentError as err:
        _LOGGER.error("load_gid_mesh: inconsistent mesh in %s: %s", name, err)
        raise MeshParseError(f"{name}: {err}") from err

    _LOGGER.info(
        "Loaded GiD mesh from %s with %d vertices and %d triangles",
        name,
        mesh.numvertices,
        mesh.numcells,
    )
    return mesh


def _numbers(fields: List[str], kind: Any, name: str, lineno: int) -> List[Any]:
    try:
        return [kind(f) for f in fields]
    except ValueError as err:
        _LOGGER.error("load_gid_mesh: %s:%d malformed number in %s", name, lineno, fields)
        raise MeshParseError(f"{name}:{lineno}: malformed number in {fields}") from err
