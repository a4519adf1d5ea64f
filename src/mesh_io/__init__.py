"""The mesh_io package contains mesh file readers and writers for simplex_mesh.

Submodules:
  - gid: load_gid_mesh for GiD ASCII triangle meshes.
  - gmsh: read_gmsh_mesh for Gmsh MSH 2 ASCII triangle meshes.
  - meshio_bridge: conversion to/from meshio and file round-trips.
"""

from mesh_io.gid import load_gid_mesh
from mesh_io.gmsh import read_gmsh_mesh
from mesh_io.meshio_bridge import from_meshio, read_mesh, to_meshio, write_mesh

__all__ = [
    "load_gid_mesh",
    "read_gmsh_mesh",
    "from_meshio",
    "read_mesh",
    "to_meshio",
    "write_mesh",
]
