#!/usr/bin/env python3
"""
RUN_HEAT_CUBE: Steady Heat Conduction in a Unit Cube
====================================================

Walks through the pipeline one stage at a time on demos/data/cube.dat:
a unit cube split into 6 tetrahedra, bottom face held at 100, uniform
heat source Q = 10, conductivity k = 1.

Run with:
    python demos/run_heat_cube.py
"""

import sys
from pathlib import Path

import numpy as np

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from mini_fem3d.elements import create_local_systems
from mini_fem3d.formulations import HeatTransfer
from mini_fem3d.gid import read_input, write_output
from mini_fem3d.kernel.assemble import assembly
from mini_fem3d.kernel.boundary import (
    apply_dirichlet_boundary_conditions,
    apply_neumann_boundary_conditions,
    merge_results_with_dirichlet,
)
from mini_fem3d.kernel.matrix import Matrix, Vector
from mini_fem3d.kernel.solve import solve_system
from mini_fem3d.post import results_table


def print_header(text: str):
    """Print a formatted section header."""
    print("\n" + "=" * 60)
    print(f"  {text}")
    print("=" * 60)


def main():
    base = Path(__file__).parent / "data" / "cube"

    print_header("STEP 1: Read Mesh")
    mesh = read_input(base)
    print(mesh.report())

    print_header("STEP 2: Local Systems")
    systems = create_local_systems(mesh, HeatTransfer())
    for s in systems:
        print(f"  Element {s.element_id}: nodes {[i + 1 for i in s.index_map]}, "
              f"trace(K) = {np.trace(s.K.data):.4f}, b = {s.b.get(0):.4f}")

    print_header("STEP 3: Assembly")
    n = mesh.num_nodes
    K = Matrix(n, n)
    b = Vector(n)
    assembly(K, b, [(s.index_map, s.K, s.b) for s in systems])
    print(f"  K is {K.nrows}x{K.ncols}, symmetric: {np.allclose(K.data, K.data.T)}")
    print(f"  Row sums (should be ~0): {np.abs(K.data.sum(axis=1)).max():.2e}")

    print_header("STEP 4: Boundary Conditions")
    apply_neumann_boundary_conditions(b, mesh.neumann_conditions)
    eliminated = apply_dirichlet_boundary_conditions(K, b, mesh.dirichlet_conditions)
    print(f"  Eliminated nodes: {[i + 1 for i in eliminated]}")
    print(f"  Reduced system: {K.nrows}x{K.ncols}")

    print_header("STEP 5: Solve")
    X = solve_system(K, b)
    T = merge_results_with_dirichlet(X, n, mesh.dirichlet_conditions)

    print(results_table(mesh, T.data).to_string(index=False))

    out = write_output(base, T.data)
    print(f"\nResults written to {out}")


if __name__ == "__main__":
    main()
