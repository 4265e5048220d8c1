# mini_fem3d - Tetrahedral Finite Element Assembly and Solve
"""
MINI-FEM3D: Steady 3D Scalar Field Solver
=========================================

This package provides:
- A dense matrix/vector kernel with a Cholesky-based inverse
- Linear tetrahedron local systems (heat transfer and a second model equation)
- Global assembly, Neumann augmentation and Dirichlet condensation
- GiD .dat input and .post.res output

ARCHITECTURE:
-------------
    kernel/          Model-agnostic algebra (matrix, ops, dof, assemble, boundary, solve)
    model.py         Node, Element, Condition, ProblemData, Mesh
    formulations.py  Pluggable element coefficients
    elements.py      Local system builder (Jacobian, volume, B, A)
    gid.py           File formats
    solve.py         Pipeline entry points (solve_mesh, run)
    post.py          Results table (pandas)
    viz.py           Field plot (matplotlib)
    cli.py           Command line
"""

from .kernel import Matrix, Vector, DimensionMismatchError, calculate_inverse, solve_system
from .model import Node, Element, Condition, ProblemData, Mesh, MeshError
from .formulations import FORMULATIONS, HeatTransfer, SecondEquation, get_formulation
from .config import CONFIG, DEGENERACY_EPSILON, SolverConfig
from .gid import InputFormatError, read_input, read_output, write_input, write_output
from .solve import RunResult, run, solve_mesh

__version__ = "0.1.0"
