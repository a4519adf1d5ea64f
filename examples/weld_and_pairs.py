"""Weld two rectangles, inspect their topology and write the result.

Run from the repository root:

    python examples/weld_and_pairs.py rect.vtu
"""
import argparse
import logging

import numpy as np

from simplex_mesh import (
    boundary,
    cell_pairs,
    connectivity,
    isoriented,
    mesh_rectangle,
    skeleton,
    weld,
)
from mesh_io import write_mesh


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("output", help="output file, any meshio format (e.g. .vtu)")
    parser.add_argument("--delta", type=float, default=0.25, help="grid spacing")
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO)

    left = mesh_rectangle(1.0, 1.0, args.delta)
    right = left.translate([1.0, 0.0, 0.0])
    mesh = weld(left, right)

    edges = skeleton(mesh, 1)
    pairs = cell_pairs(mesh, edges)
    n_boundary = int(np.count_nonzero(pairs[:, 1] < 0))

    print(f"vertices={mesh.numvertices} cells={mesh.numcells} edges={edges.numcells}")
    print(f"interior pairs={pairs.shape[0] - n_boundary} boundary pairs={n_boundary}")
    print(f"boundary edges={boundary(mesh).numcells} oriented={isoriented(mesh)}")

    # d1 @ d0 vanishes on any simplicial complex.
    d0 = connectivity(skeleton(mesh, 0), edges)
    d1 = connectivity(edges, mesh)
    print(f"nnz(d1 @ d0)={(d1 @ d0).count_nonzero()}")

    write_mesh(mesh, args.output)


if __name__ == "__main__":
    main()
