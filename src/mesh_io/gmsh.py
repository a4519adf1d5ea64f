"""Module providing a reader for Gmsh (MSH 2 ASCII) triangle meshes.

Only elements of type 2 (3-node triangle) are read. When a physical name is
given, only triangles whose first tag equals that physical entity are kept.
"""
from __future__ import annotations

import logging
import os
from typing import IO, Dict, Iterator, List, Optional, Union

import numpy as np

from simplex_mesh.exceptions import InvalidArgumentError, MeshParseError
from simplex_mesh.mesh import Mesh

_LOGGER = logging.getLogger(__name__)

Source = Union[str, "os.PathLike[str]", IO[str]]

TRIANGLE = 2


def read_gmsh_mesh(source: Source, physical: Optional[str] = None) -> Mesh:
    """Read the nodes and triangles of a .msh file into a Mesh.

    Args:
        source: File path or text stream.
        physical: Optional name of a physical entity to restrict to.

    Returns:
        Mesh: Triangle mesh in 3D space with 0-based cells.

    Raises:
        MeshParseError: If a section is missing or a count does not match.
        InvalidArgumentError: If `physical` is not a string.
    """
    if physical is not None and not isinstance(physical, str):
        raise InvalidArgumentError("physical must be the name of a physical entity")
    if isinstance(source, (str, os.PathLike)):
        with open(source, "r") as f:
            return _GmshParser(f, str(source)).parse(physical)
    return _GmshParser(source, getattr(source, "name", "<stream>")).parse(physical)


class _GmshParser:
    def __init__(self, stream: IO[str], name: str) -> None:
        self._lines: Iterator[str] = (line.strip() for line in stream)
        self._name = name
        self._lineno = 0

    def _next(self) -> str:
        try:
            line = next(self._lines)
        except StopIteration:
            raise self._fail("unexpected end of file") from None
        self._lineno += 1
        return line

    def _seek(self, marker: str) -> None:
        while self._next() != marker:
            pass

    def _count(self) -> int:
        line = self._next()
        try:
            return int(line.split()[0])
        except (ValueError, IndexError) as err:
            raise self._fail(f"expected a count, got {line!r}") from err

    def _fail(self, msg: str) -> MeshParseError:
        _LOGGER.error("read_gmsh_mesh: %s:%d: %s", self._name, self._lineno, msg)
        return MeshParseError(f"{self._name}:{self._lineno}: {msg}")

    def _physical_tag(self, physical: str) -> int:
        while True:
            line = self._next()
            if line == "$PhysicalNames":
                break
            if line == "$Nodes":
                raise self._fail("mesh file does not define physical entities")

        n_physical = self._count()
        _LOGGER.info("Mesh file defines %d physical entities", n_physical)
        for i in range(n_physical):
            fields = self._next().split(maxsplit=2)
            if len(fields) != 3:
                raise self._fail("malformed physical name line")
            if fields[2].strip().strip('"') == physical:
                _LOGGER.info(
                    "Target entity %r is %d out of %d.", physical, i + 1, n_physical
                )
                return int(fields[1])
        raise self._fail(f"physical entity {physical!r} not found")

    def parse(self, physical: Optional[str]) -> Mesh:
        entity_tag = 0 if physical is None else self._physical_tag(physical)

        self._seek("$Nodes")
        n_nodes = self._count()
        vertices = np.zeros((n_nodes, 3), dtype=float)
        node_index: Dict[int, int] = {}
        for i in range(n_nodes):
            fields = self._next().split()
            if len(fields) < 4:
                raise self._fail(f"node line has {len(fields)} fields, expected 4")
            try:
                node_index[int(fields[0])] = i
                vertices[i] = [float(x) for x in fields[1:4]]
            except ValueError as err:
                raise self._fail("malformed node line") from err

        if self._next() != "$EndNodes":
            raise self._fail(f"expected {n_nodes} nodes before $EndNodes")

        self._seek("$Elements")
        n_elements = self._count()
        triangles: List[List[int]] = []
        n_seen = 0
        while True:
            line = self._next()
            if line == "$EndElements":
                break
            n_seen += 1
            try:
                d = [int(x) for x in line.split()]
            except ValueError as err:
                raise self._fail("malformed element line") from err
            if len(d) < 4:
                raise self._fail(f"element line has {len(d)} fields")
            if d[1] != TRIANGLE:
                continue
            if entity_tag == 0 or d[3] == entity_tag:
                try:
                    triangles.append([node_index[t] for t in d[-3:]])
                except KeyError as err:
                    raise self._fail(f"element references unknown node {err.args[0]}") from err

        if n_seen != n_elements:
            raise self._fail(f"expected {n_elements} elements, found {n_seen}")

        mesh = Mesh(vertices, np.array(triangles, dtype=int).reshape(-1, 3))
        _LOGGER.info(
            "Loaded Gmsh mesh from %s with %d vertices and %d triangles",
            self._name,
            mesh.numvertices,
            mesh.numcells,
        )
        return mesh
