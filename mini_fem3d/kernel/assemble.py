# mini_fem3d/kernel/assemble.py
"""
ASSEMBLY: Global Matrix and Vector Scatter-Add
==============================================

PURPOSE:
--------
Builds the global system K·T = b from element contributions. Each element
hands over its index map (global row of each of its nodes), its 4×4 local
matrix and its length-4 local vector:

    for each element:
        for each (a, b) in local K:
            K[map[a], map[b]] += K_local[a, b]
        for each a:
            b[map[a]] += b_local[a]

Adding (never overwriting) is what makes nodes shared between elements
collect the contribution of every element around them.

All local systems must be computed before assembly starts: the scatter-add
mutates the shared global K and b and is not safe for concurrent writers.

USAGE:
------
    contributions = [(dof.element_dof_map(e.node_ids), ke, be) for ...]
    K = Matrix(n, n)
    b = Vector(n)
    assembly(K, b, contributions)
"""

from typing import List, Optional, Sequence, Tuple

from .matrix import Matrix, Vector
from .ops import DimensionMismatchError


def _check_local_sizes(
    index_map: Sequence[int],
    ke: Optional[Matrix] = None,
    be: Optional[Vector] = None
) -> None:
    n = len(index_map)
    if ke is not None and ke.shape != (n, n):
        raise DimensionMismatchError(
            f"Local matrix shape {ke.shape} doesn't match index map length {n}"
        )
    if be is not None and be.size != n:
        raise DimensionMismatchError(
            f"Local vector size {be.size} doesn't match index map length {n}"
        )


def assembly_K(K: Matrix, ke: Matrix, index_map: Sequence[int]) -> None:
    """Scatter-add one local matrix into K (in-place)."""
    _check_local_sizes(index_map, ke=ke)
    for a, ia in enumerate(index_map):
        for b, ib in enumerate(index_map):
            K.add(ke.get(a, b), ia, ib)


def assembly_b(b: Vector, be: Vector, index_map: Sequence[int]) -> None:
    """Scatter-add one local vector into b (in-place)."""
    _check_local_sizes(index_map, be=be)
    for a, ia in enumerate(index_map):
        b.add(be.get(a), ia)


def assembly(
    K: Matrix,
    b: Vector,
    contributions: List[Tuple[Sequence[int], Matrix, Vector]]
) -> None:
    """
    Zero K and b, then scatter-add every element contribution (in-place).

    Parameters:
    -----------
    K : Matrix
        Global matrix, already sized ndof × ndof
    b : Vector
        Global right-hand side, already sized ndof
    contributions : list of (index_map, ke, be)
        One entry per element; index_map holds the global index of each
        local row/column of ke and be
    """
    K.init()
    b.init()

    for index_map, ke, be in contributions:
        assembly_K(K, ke, index_map)
        assembly_b(b, be, index_map)


def assemble_global_K(ndof: int, contributions: List[Tuple[Sequence[int], Matrix]]) -> Matrix:
    """Build a fresh ndof × ndof matrix from (index_map, ke) pairs."""
    K = Matrix(ndof, ndof)
    for index_map, ke in contributions:
        assembly_K(K, ke, index_map)
    return K


def assemble_global_b(ndof: int, contributions: List[Tuple[Sequence[int], Vector]]) -> Vector:
    """Build a fresh length-ndof vector from (index_map, be) pairs."""
    b = Vector(ndof)
    for index_map, be in contributions:
        assembly_b(b, be, index_map)
    return b


def add_nodal_value(b: Vector, index: int, value: float) -> None:
    """Add a point contribution (e.g. a prescribed flux) to b (in-place)."""
    b.add(value, index)
