"""Simplex intersection by Sutherland-Hodgman clipping.

The subject polygon is clipped against the half-plane to the left of every
edge of the (convex) clipper polygon. The clipped polygon is convex and is
fan-triangulated from its first vertex. Triangles in 3D space are clipped in
the plane of the clipper (both inputs are assumed coplanar). Collinear
segments intersect in their common sub-segment.
"""
from __future__ import annotations

import logging
from typing import Any, List
from numpy.typing import NDArray

import numpy as np

from .charts import Simplex, simplex
from .config import weld_tolerance
from .exceptions import DegenerateGeometryError, InvalidArgumentError

_LOGGER = logging.getLogger(__name__)


def _cross2(a: NDArray[Any], b: NDArray[Any]) -> float:
    return float(a[0] * b[1] - a[1] * b[0])


def leftof(p: Any, a: Any, b: Any) -> bool:
    """Return True if 2D point `p` lies on or to the left of the line a -> b."""
    p, a, b = (np.asarray(x, dtype=float) for x in (p, a, b))
    return _cross2(b - a, p - a) >= 0.0


def intersect_lines(a: Any, b: Any, p: Any, q: Any) -> NDArray[Any]:
    """Return the intersection of the 2D lines through a, b and through p, q.

    Raises:
        DegenerateGeometryError: If the lines are parallel.
    """
    a, b, p, q = (np.asarray(x, dtype=float) for x in (a, b, p, q))
    d1 = b - a
    d2 = q - p
    denom = _cross2(d1, d2)
    if denom == 0.0:
        raise DegenerateGeometryError("cannot intersect parallel lines")
    s = _cross2(p - a, d2) / denom
    return a + s * d1


def _signed_area(poly: NDArray[Any]) -> float:
    x, y = poly[:, 0], poly[:, 1]
    return 0.5 * float(np.dot(x, np.roll(y, -1)) - np.dot(np.roll(x, -1), y))


def sutherland_hodgman_2d(subject: Any, clipper: Any) -> NDArray[Any]:
    """Clip polygon `subject` against convex polygon `clipper` in the plane.

    Args:
        subject: Subject polygon vertices, shape (n, 2).
        clipper: Convex clipper polygon vertices, shape (m, 2). A clockwise
            clipper is traversed in reverse.

    Returns:
        NDArray[Any]: Vertices of the clipped polygon, shape (k, 2), possibly
        empty.
    """
    clip = np.asarray(clipper, dtype=float)
    if clip.shape[0] >= 3 and _signed_area(clip) < 0.0:
        clip = clip[::-1]

    clipped: List[NDArray[Any]] = list(np.asarray(subject, dtype=float))
    b = clip[-1]
    for a in clip:
        inp = clipped
        clipped = []
        if not inp:
            break
        q = inp[-1]
        for p in inp:
            if leftof(p, b, a):
                if not leftof(q, b, a):
                    clipped.append(intersect_lines(q, p, b, a))
                clipped.append(p)
            elif leftof(q, b, a):
                clipped.append(intersect_lines(q, p, b, a))
            q = p
        b = a

    _LOGGER.debug("sutherland_hodgman_2d: %d clipped vertices", len(clipped))
    return np.array(clipped, dtype=float).reshape(-1, 2)


def _plane_frame(clip: NDArray[Any]) -> NDArray[Any]:
    """Orthonormal in-plane basis (2, 3) of a 3D polygon, oriented with it."""
    e1 = clip[1] - clip[0]
    n = np.cross(e1, clip[2] - clip[0])
    nn = float(np.linalg.norm(n))
    ne = float(np.linalg.norm(e1))
    if nn == 0.0 or ne == 0.0:
        raise DegenerateGeometryError("clipper polygon does not span a plane")
    e1 = e1 / ne
    e2 = np.cross(n / nn, e1)
    return np.stack([e1, e2])


def sutherland_hodgman(subject: Any, clipper: Any) -> NDArray[Any]:
    """Clip polygon `subject` against convex polygon `clipper` in 2D or 3D.

    In 3D both polygons are projected onto the plane of the clipper, using
    the clipper's first vertex as origin, clipped there and mapped back.

    Returns:
        NDArray[Any]: Clipped polygon, shape (k, U).
    """
    subj = np.asarray(subject, dtype=float)
    clip = np.asarray(clipper, dtype=float)
    U = clip.shape[1]
    if subj.shape[1] != U:
        raise InvalidArgumentError("subject and clipper live in spaces of different dimension")
    if U == 2:
        return sutherland_hodgman_2d(subj, clip)
    if U != 3:
        raise InvalidArgumentError(f"clipping is not supported in {U}D space")

    origin = clip[0]
    frame = _plane_frame(clip)
    clipped = sutherland_hodgman_2d((subj - origin) @ frame.T, (clip - origin) @ frame.T)
    return origin + clipped @ frame


def _dedup_ring(poly: NDArray[Any], atol: float) -> NDArray[Any]:
    """Drop consecutive (and wrap-around) duplicate vertices."""
    kept: List[NDArray[Any]] = []
    for p in poly:
        if kept and np.allclose(p, kept[-1], rtol=0.0, atol=atol):
            continue
        kept.append(p)
    while len(kept) > 1 and np.allclose(kept[0], kept[-1], rtol=0.0, atol=atol):
        kept.pop()
    return np.array(kept, dtype=float).reshape(-1, poly.shape[1])


def _intersect_segments(P: Simplex, Q: Simplex, tol: float) -> List[Simplex]:
    q0 = Q.vertices[0]
    d = Q.vertices[1] - q0
    L = float(np.linalg.norm(d))
    if L == 0.0 or P.volume == 0.0:
        return []
    e = d / L

    rel = P.vertices - q0
    s = rel @ e
    off = rel - np.outer(s, e)
    if float(np.max(np.linalg.norm(off, axis=1))) > tol * max(L, 1.0):
        return []

    lo = max(float(s.min()), 0.0)
    hi = min(float(s.max()), L)
    if hi - lo <= tol * L:
        return []
    ends = [q0 + lo * e, q0 + hi * e]
    if s[0] > s[1]:
        ends.reverse()
    return [simplex(*ends)]


def intersection(P: Simplex, Q: Simplex) -> List[Simplex]:
    """Intersect two simplices of equal dimension.

    Triangles are clipped with `sutherland_hodgman` (P clipped by Q) and the
    result fan-triangulated from its first vertex: ``[v0, v1, v2], [v0, v2,
    v3], ...``. Segments must be collinear to overlap.

    Args:
        P (Simplex): Subject simplex.
        Q (Simplex): Clipper simplex.

    Returns:
        List[Simplex]: Simplices covering the intersection; empty if the
        inputs do not overlap.

    Raises:
        InvalidArgumentError: On dimension mismatch or unsupported dimension.
    """
    if P.dimension != Q.dimension or P.universedimension != Q.universedimension:
        _LOGGER.error(
            "intersection: incompatible simplices (D=%d,U=%d) vs (D=%d,U=%d)",
            P.dimension,
            P.universedimension,
            Q.dimension,
            Q.universedimension,
        )
        raise InvalidArgumentError("cannot intersect simplices of different dimensions")

    tol = weld_tolerance(np.float64)
    if P.dimension == 1:
        return _intersect_segments(P, Q, tol)
    if P.dimension != 2:
        raise InvalidArgumentError(
            f"intersection is not supported for {P.dimension}-simplices"
        )
    if Q.volume == 0.0 or P.volume == 0.0:
        return []

    clipped = sutherland_hodgman(P.vertices, Q.vertices)
    scale = max(float(np.ptp(Q.vertices, axis=0).max()), 1.0)
    ring = _dedup_ring(clipped, tol * scale)
    if ring.shape[0] < 3:
        return []

    parts = [simplex(ring[0], ring[i], ring[i + 1]) for i in range(1, ring.shape[0] - 1)]
    _LOGGER.debug(
        "intersection: clipped polygon with %d vertices -> %d triangles",
        ring.shape[0],
        len(parts),
    )
    return parts
