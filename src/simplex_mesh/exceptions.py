"""Mesh module exceptions."""


class MeshError(Exception):
    """Base exception for mesh operations."""

    pass


class InvalidArgumentError(MeshError, ValueError):
    """Arguments are inconsistent (dimension mismatch, index out of range)."""

    pass


class TopologyError(MeshError, RuntimeError):
    """Mesh topology violates an internal-consistency requirement."""

    pass


class DegenerateGeometryError(MeshError, ValueError):
    """Input geometry is degenerate (e.g., parallel lines, zero-area cell)."""

    pass


class MeshParseError(MeshError, ValueError):
    """A mesh file could not be parsed."""

    pass
