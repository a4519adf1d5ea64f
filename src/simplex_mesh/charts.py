"""Simplex charts: geometric realizations of cells.

A chart maps reference coordinates ``u`` (``u_i >= 0``, ``sum(u) <= 1``) onto
``v0 + sum_i u_i (v_{i+1} - v0)``. The chart kind is selected by dimension:

  - `PointChart` (D = 0)
  - `SegmentChart` (D = 1): Gauss-Legendre rules on [0, 1]
  - `TriangleChart` (D = 2): collapsed Gauss-Jacobi (Stroud) rules

Each kind provides ``cartesian`` (parametrization), ``jacobian`` and
``reference_rule`` (quadrature lookup); `quadpoints` combines them and
`quadpoints_table` tabulates a function over many charts and rules.
"""
from __future__ import annotations

import logging
import math
from typing import Any, Callable, List, NamedTuple, Sequence, Tuple
from numpy.typing import NDArray

import numpy as np
from numpy.polynomial.legendre import leggauss
from scipy.special import roots_jacobi

from .exceptions import DegenerateGeometryError, InvalidArgumentError
from .mesh import Mesh

_LOGGER = logging.getLogger(__name__)


class Simplex:
    """Flat simplex spanned by D+1 vertices in U-dimensional space.

    Args:
        vertices (NDArray[Any]): Vertex coordinates, shape (D+1, U).

    Attributes:
        vertices (NDArray[Any]): Vertex coordinates, shape (D+1, U).
        tangents (NDArray[Any]): Edge vectors ``v_{i+1} - v0``, shape (D, U).
    """

    vertices: NDArray[Any]
    tangents: NDArray[Any]

    def __init__(self, vertices: Any) -> None:
        verts = np.asarray(vertices, dtype=float)
        if verts.ndim != 2 or verts.shape[0] < 1:
            raise InvalidArgumentError(
                f"simplex vertices must have shape (D+1, U); got {verts.shape}"
            )
        if verts.shape[0] - 1 > verts.shape[1]:
            raise InvalidArgumentError(
                f"a {verts.shape[0] - 1}-simplex cannot live in {verts.shape[1]}D space"
            )
        self.vertices = verts
        self.tangents = verts[1:] - verts[0]

    @property
    def dimension(self) -> int:
        return int(self.vertices.shape[0]) - 1

    @property
    def universedimension(self) -> int:
        return int(self.vertices.shape[1])

    @property
    def jacobian(self) -> float:
        """Ratio of the simplex volume to the reference simplex volume."""
        if self.dimension == 0:
            return 1.0
        gram = self.tangents @ self.tangents.T
        return float(np.sqrt(max(np.linalg.det(gram), 0.0)))

    @property
    def volume(self) -> float:
        """Length, area or volume of the simplex (1 for a point)."""
        return self.jacobian / math.factorial(self.dimension)

    @property
    def center(self) -> NDArray[Any]:
        return self.vertices.mean(axis=0)

    @property
    def normal(self) -> NDArray[Any]:
        """Unit normal of a simplex of codimension one.

        Raises:
            InvalidArgumentError: If the codimension is not one.
            DegenerateGeometryError: If the simplex has zero volume.
        """
        D, U = self.dimension, self.universedimension
        if U - D != 1:
            raise InvalidArgumentError("normal is only defined for codimension 1")
        if U == 3:
            n = np.cross(self.tangents[0], self.tangents[1])
        elif U == 2:
            t = self.tangents[0]
            n = np.array([t[1], -t[0]])
        else:
            n = np.array([1.0])
        nrm = float(np.linalg.norm(n))
        if nrm == 0.0:
            raise DegenerateGeometryError("degenerate simplex has no normal")
        return n / nrm

    def cartesian(self, u: Any) -> NDArray[Any]:
        """Map reference coordinates `u` (length D) to a point in space."""
        uu = np.asarray(u, dtype=float).reshape(-1)
        if uu.shape[0] != self.dimension:
            raise InvalidArgumentError(
                f"expected {self.dimension} reference coordinates; got {uu.shape[0]}"
            )
        return self.vertices[0] + uu @ self.tangents

    def barycentric(self, u: Any) -> NDArray[Any]:
        """Return the D+1 barycentric coordinates of reference point `u`."""
        uu = np.asarray(u, dtype=float).reshape(-1)
        return np.concatenate([[1.0 - uu.sum()], uu])

    def translate(self, t: Any) -> Simplex:
        """Return the simplex translated over `t`."""
        return type(self)(self.vertices + np.asarray(t, dtype=float))

    def reference_rule(self, order: int) -> Tuple[NDArray[Any], NDArray[Any]]:
        """Quadrature points (n, D) and weights (n,) on the reference simplex."""
        raise InvalidArgumentError(
            f"no quadrature rule for simplices of dimension {self.dimension}"
        )

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.vertices.tolist()})"


class PointChart(Simplex):
    def reference_rule(self, order: int) -> Tuple[NDArray[Any], NDArray[Any]]:
        return np.zeros((1, 0)), np.ones(1)


class SegmentChart(Simplex):
    def reference_rule(self, order: int) -> Tuple[NDArray[Any], NDArray[Any]]:
        """Gauss-Legendre rule with `order` points, mapped to [0, 1]."""
        if order < 1:
            raise InvalidArgumentError("quadrature order must be >= 1")
        x, w = leggauss(order)
        return ((x + 1.0) / 2.0)[:, None], w / 2.0


class TriangleChart(Simplex):
    def reference_rule(self, order: int) -> Tuple[NDArray[Any], NDArray[Any]]:
        """Conical product rule with `order` points per direction.

        Uses ``u = t``, ``v = s(1 - t)`` with Gauss-Jacobi(1, 0) nodes in `t`
        and Gauss-Legendre nodes in `s`; exact for degree ``2*order - 1``.
        """
        if order < 1:
            raise InvalidArgumentError("quadrature order must be >= 1")
        xt, wt = roots_jacobi(order, 1.0, 0.0)
        xs, ws = leggauss(order)
        t = (xt + 1.0) / 2.0
        s = (xs + 1.0) / 2.0
        T, S = np.meshgrid(t, s, indexing="ij")
        WT, WS = np.meshgrid(wt / 4.0, ws / 2.0, indexing="ij")
        u = np.stack([T.ravel(), (S * (1.0 - T)).ravel()], axis=1)
        return u, (WT * WS).ravel()


_CHARTS = {0: PointChart, 1: SegmentChart, 2: TriangleChart}


def simplex(*vertices: Any) -> Simplex:
    """Build the chart of the simplex with the given vertices.

    Accepts either the vertices as separate arguments or a single (D+1, U)
    array.
    """
    if len(vertices) == 1 and np.ndim(vertices[0]) == 2:
        verts = np.asarray(vertices[0], dtype=float)
    else:
        verts = np.asarray(vertices, dtype=float)
    kind = _CHARTS.get(verts.shape[0] - 1, Simplex)
    return kind(verts)


def chart(mesh: Mesh, cell: Any) -> Simplex:
    """Return the chart of `cell` (vertex indices into `mesh`)."""
    return simplex(mesh.vertices_of(cell))


def quadpoints(ch: Simplex, order: int) -> List[Tuple[NDArray[Any], float]]:
    """Return ``(point, weight)`` pairs of a quadrature rule on `ch`.

    Weights include the Jacobian, so a function is integrated as
    ``sum(w * f(p) for p, w in quadpoints(ch, order))``.
    """
    u, w = ch.reference_rule(order)
    J = ch.jacobian
    _LOGGER.debug(
        "quadpoints: %s order=%d -> %d points (J=%.6g)",
        type(ch).__name__,
        order,
        w.shape[0],
        J,
    )
    return [(ch.cartesian(u[i]), float(w[i] * J)) for i in range(w.shape[0])]


class WeightPointValue(NamedTuple):
    """One quadrature node: Jacobian-scaled weight, point and function value."""

    weight: float
    point: NDArray[Any]
    value: Any


def quadpoints_table(
    f: Callable[[NDArray[Any]], Any],
    charts: Sequence[Simplex],
    orders: Sequence[int],
) -> List[List[List[WeightPointValue]]]:
    """Tabulate `f` at the quadrature nodes of every chart for every rule.

    Args:
        f (Callable[[NDArray[Any]], Any]): Evaluated once per node.
        charts (Sequence[Simplex]): Charts to integrate over.
        orders (Sequence[int]): Quadrature orders, one table row per order.

    Returns:
        List[List[List[WeightPointValue]]]: ``table[i][j]`` holds the nodes
        of ``quadpoints(charts[j], orders[i])`` with ``f`` applied, so
        ``sum(n.weight * n.value for n in table[i][j])`` integrates `f` over
        ``charts[j]`` with rule ``orders[i]``.
    """
    table = [
        [[WeightPointValue(w, p, f(p)) for p, w in quadpoints(ch, order)] for ch in charts]
        for order in orders
    ]
    _LOGGER.debug("quadpoints_table: %d rules x %d charts", len(orders), len(charts))
    return table
