# mini_fem3d/kernel - Dense linear algebra and system plumbing
"""
KERNEL: THE MODEL-AGNOSTIC FOUNDATION
=====================================

Everything in here works on plain matrices, vectors and index maps. It
does not know what a tetrahedron is or which physical model produced the
local matrices:

    matrix.py     Matrix / Vector containers
    ops.py        products, determinant, Cholesky inverse
    dof.py        node id -> global index
    assemble.py   scatter-add of local systems
    boundary.py   Neumann / Dirichlet application, result merge
    solve.py      reduced system solve
"""

from .matrix import Matrix, Vector
from .ops import (
    DimensionMismatchError,
    transpose,
    product_matrix_by_matrix,
    product_scalar_by_matrix,
    product_matrix_by_vector,
    determinant,
    get_minor,
    cofactor_matrix,
    calculate_inverse,
)
from .dof import DOFManager, DOF_SCALAR
from .assemble import assembly, assemble_global_K, assemble_global_b, add_nodal_value
from .boundary import (
    apply_neumann_boundary_conditions,
    apply_dirichlet_boundary_conditions,
    merge_results_with_dirichlet,
)
from .solve import solve_system

__all__ = [
    'Matrix', 'Vector', 'DimensionMismatchError',
    'transpose', 'product_matrix_by_matrix', 'product_scalar_by_matrix',
    'product_matrix_by_vector', 'determinant', 'get_minor', 'cofactor_matrix',
    'calculate_inverse',
    'DOFManager', 'DOF_SCALAR',
    'assembly', 'assemble_global_K', 'assemble_global_b', 'add_nodal_value',
    'apply_neumann_boundary_conditions', 'apply_dirichlet_boundary_conditions',
    'merge_results_with_dirichlet',
    'solve_system',
]
