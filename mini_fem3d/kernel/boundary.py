# mini_fem3d/kernel/boundary.py
"""
BOUNDARY CONDITIONS: Neumann Augmentation and Dirichlet Condensation
====================================================================

NEUMANN:
--------
A prescribed flux at a node is added straight into the right-hand side:

    b[idx] += value

Addition commutes, so the order of the conditions does not matter.

DIRICHLET (static condensation):
--------------------------------
A node with a known value T̄ is removed from the system. Its column
carries T̄ over to the right-hand side before it disappears:

    b[r] -= T̄ · K[r, idx]     for every current row r
    remove row idx and column idx from K, entry idx from b

After each removal every later index shifts down by one, so conditions
are processed in increasing original index and the current position is

    idx = original_idx - removed_so_far

The conditions are sorted here rather than trusted to arrive sorted,
which also keeps the surviving rows in increasing node order. That is the
order merge_results_with_dirichlet consumes the reduced solution in.
"""

import logging
from typing import List, Sequence

from .assemble import add_nodal_value
from .dof import DOF_SCALAR, DOFManager
from .matrix import Matrix, Vector
from .ops import DimensionMismatchError

logger = logging.getLogger(__name__)


def apply_neumann_boundary_conditions(
    b: Vector,
    conditions: Sequence,
    dof: DOFManager = DOF_SCALAR
) -> None:
    """Add each Neumann value to b at its node's index (in-place)."""
    for cond in conditions:
        add_nodal_value(b, dof.idx(cond.node.id), cond.value)


def _sorted_dirichlet(conditions: Sequence, dof: DOFManager) -> list:
    indexed = sorted(((dof.idx(cond.node.id), cond) for cond in conditions), key=lambda item: item[0])
    for (i, _), (j, cond) in zip(indexed, indexed[1:]):
        if i == j:
            raise ValueError(f"Node {cond.node.id} has more than one Dirichlet condition")
    return indexed


def add_column_to_RHS(K: Matrix, b: Vector, col: int, value: float) -> None:
    """b[r] -= value · K[r, col] for every row of K (in-place)."""
    b.data -= value * K.data[:, col]


def apply_dirichlet_boundary_conditions(
    K: Matrix,
    b: Vector,
    conditions: Sequence,
    dof: DOFManager = DOF_SCALAR
) -> List[int]:
    """
    Condense the known Dirichlet values out of K and b (in-place).

    Parameters:
    -----------
    K : Matrix
        Assembled global matrix, n × n
    b : Vector
        Global right-hand side with Neumann contributions applied, size n
    conditions : sequence of Condition
        Dirichlet conditions, in any order
    dof : DOFManager
        Node id to index mapping

    Returns:
    --------
    List[int]
        Original indices that were eliminated, in increasing order.
        Afterwards K is (n - m) × (n - m) and b has n - m entries.

    Raises:
    -------
    ValueError
        If a node carries more than one Dirichlet condition
    """
    eliminated = []
    for removed, (original, cond) in enumerate(_sorted_dirichlet(conditions, dof)):
        idx = original - removed

        add_column_to_RHS(K, b, idx, cond.value)

        K.remove_row(idx)
        K.remove_column(idx)
        b.remove_row(idx)

        eliminated.append(original)

    logger.debug("Condensed %d Dirichlet nodes, %d unknowns remain", len(eliminated), b.size)
    return eliminated


def merge_results_with_dirichlet(
    X: Vector,
    n: int,
    conditions: Sequence,
    dof: DOFManager = DOF_SCALAR
) -> Vector:
    """
    Expand the reduced solution back to all n indices.

    Walks indices 0..n-1 in order: a Dirichlet index gets its prescribed
    value, any other index takes the next unused entry of X.

    Raises:
    -------
    DimensionMismatchError
        If X does not have exactly n - len(conditions) entries
    """
    prescribed = {dof.idx(cond.node.id): cond.value for cond in conditions}
    if X.size != n - len(prescribed):
        raise DimensionMismatchError(
            f"Reduced solution has {X.size} entries, expected {n - len(prescribed)} "
            f"({n} nodes, {len(prescribed)} Dirichlet)"
        )

    full = Vector(n)
    cont_X = 0
    for i in range(n):
        if i in prescribed:
            full.set(prescribed[i], i)
        else:
            full.set(X.get(cont_X), i)
            cont_X += 1
    return full
