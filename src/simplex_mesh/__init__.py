"""The simplex_mesh package provides simplicial meshes and their topology.

This package offers:
  - A Mesh container for vertices and simplicial cells.
  - Skeleton extraction, connectivity matrices and cell pairs.
  - Welding of meshes with tolerance-based vertex matching.
  - Simplex charts, quadrature and simplex intersection.

Submodules:
  - mesh: Mesh class and affine/orientation utilities.
  - skeleton: skeleton, boundary, interior, isoriented.
  - adjacency: vertex-to-cell map.
  - connectivity: relative orientation and connectivity matrices.
  - cellpairs: cell pairs across shared faces.
  - weld: mesh welding.
  - charts: simplex charts and quadrature points.
  - intersection: Sutherland-Hodgman clipping and simplex intersection.
  - submesh: predicate-driven sub-meshes.
  - generators: structured segment and rectangle meshes.

File readers live in the companion package `mesh_io`.
"""

from .config import (
    config,
    configure,
    use,
    default_dtype,
    weld_tolerance,
    set_log_level,
)
from .exceptions import (
    MeshError,
    InvalidArgumentError,
    TopologyError,
    DegenerateGeometryError,
    MeshParseError,
)

from simplex_mesh.mesh import Mesh, flip, mirror_point
from simplex_mesh.adjacency import vertex_to_cell_map
from simplex_mesh.connectivity import connectivity, relative_orientation
from simplex_mesh.skeleton import skeleton, boundary, interior, isoriented
from simplex_mesh.cellpairs import cell_pairs
from simplex_mesh.weld import weld
from simplex_mesh.charts import (
    Simplex,
    PointChart,
    SegmentChart,
    TriangleChart,
    simplex,
    chart,
    quadpoints,
    quadpoints_table,
    WeightPointValue,
)
from simplex_mesh.intersection import (
    leftof,
    intersect_lines,
    sutherland_hodgman_2d,
    sutherland_hodgman,
    intersection,
)
from simplex_mesh.submesh import (
    submesh,
    interior_tpredicate,
    interior_vpredicate,
    overlap_gpredicate,
)
from simplex_mesh.generators import mesh_segment, mesh_rectangle

__all__ = [
    # Core classes
    "Mesh",
    "Simplex",
    "PointChart",
    "SegmentChart",
    "TriangleChart",
    # Mesh utilities
    "flip",
    "mirror_point",
    "mesh_segment",
    "mesh_rectangle",
    # Topology
    "skeleton",
    "boundary",
    "interior",
    "isoriented",
    "vertex_to_cell_map",
    "connectivity",
    "relative_orientation",
    "cell_pairs",
    "submesh",
    "interior_tpredicate",
    "interior_vpredicate",
    "overlap_gpredicate",
    # Geometry
    "weld",
    "simplex",
    "chart",
    "quadpoints",
    "quadpoints_table",
    "WeightPointValue",
    "leftof",
    "intersect_lines",
    "sutherland_hodgman_2d",
    "sutherland_hodgman",
    "intersection",
    # Errors
    "MeshError",
    "InvalidArgumentError",
    "TopologyError",
    "DegenerateGeometryError",
    "MeshParseError",
    # Configuration
    "config",
    "configure",
    "use",
    "default_dtype",
    "weld_tolerance",
    "set_log_level",
]
