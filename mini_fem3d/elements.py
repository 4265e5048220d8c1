# mini_fem3d/elements.py
"""
LINEAR TETRAHEDRON: Local Matrix and Vector
===========================================

PURPOSE:
--------
Builds the 4×4 local matrix and length-4 local vector of one tetrahedral
element. This is where the element geometry enters the problem.

DERIVATION:
-----------
The reference tetrahedron (ξ, η, ζ) maps onto the element through

    x = x1 + ξ(x2 - x1) + η(x3 - x1) + ζ(x4 - x1)     (same for y, z)

so the Jacobian matrix has the edge vectors e1 = P2 - P1, e2 = P3 - P1,
e3 = P4 - P1 as its columns:

        [x2-x1  x3-x1  x4-x1]
    Jm = [y2-y1  y3-y1  y4-y1]        J = det(Jm)
        [z2-z1  z3-z1  z4-z1]

The linear shape functions have constant reference gradients, the
columns of

        [-1  1  0  0]
    B = [-1  0  1  0]
        [-1  0  0  1]

and physical gradients are Jm⁻ᵀ·B = (1/J)·A·B, where A is the cofactor
matrix of Jm. Its columns are the cross products e2×e3, e3×e1, e1×e2.

For heat conduction this gives

    K_local = (k·V / J²) · Bᵀ·Aᵀ·A·B
    b_local = (Q·J / 24) · [1, 1, 1, 1]

The scalar prefactors come from a formulation (see formulations.py),
the Bᵀ·Aᵀ·A·B structure is shared.

DEGENERATE ELEMENTS:
--------------------
Coplanar or coincident nodes give J = 0 (and V = 0). Both are replaced by
a small epsilon instead of raising, so a bad element produces large but
finite numbers rather than NaN. This is an approximation and is logged.
"""

import logging
import math
from dataclasses import dataclass
from typing import List

import numpy as np

from .config import DEGENERACY_EPSILON
from .formulations import HeatTransfer
from .kernel.dof import DOF_SCALAR, DOFManager
from .kernel.matrix import Matrix, Vector
from .kernel.ops import (
    cofactor_matrix,
    determinant,
    product_matrix_by_matrix,
    product_scalar_by_matrix,
    transpose,
)
from .model import Element, Mesh, ProblemData

logger = logging.getLogger(__name__)

SHAPE_DERIVATIVES = np.array([
    [-1.0, 1.0, 0.0, 0.0],
    [-1.0, 0.0, 1.0, 0.0],
    [-1.0, 0.0, 0.0, 1.0],
])


def _guard(value: float, epsilon: float, what: str, element: Element) -> float:
    if value == 0 or math.isnan(value):
        logger.debug("Element %s has %s %r, using %.1e", element.id, what, value, epsilon)
        return epsilon
    return value


def jacobian_matrix(element: Element) -> Matrix:
    """3×3 matrix whose columns are the edge vectors from node 1 to nodes 2, 3, 4."""
    p1, p2, p3, p4 = (np.array(n.coords, dtype=float) for n in element.nodes)
    return Matrix.from_array(np.column_stack([p2 - p1, p3 - p1, p4 - p1]))


def calculate_local_jacobian(element: Element, epsilon: float = DEGENERACY_EPSILON) -> float:
    """
    Signed Jacobian of the element (6 × signed volume).

    Zero or NaN is replaced by epsilon.
    """
    J = determinant(jacobian_matrix(element))
    return _guard(J, epsilon, "Jacobian", element)


def calculate_local_volume(element: Element, epsilon: float = DEGENERACY_EPSILON) -> float:
    """
    Element volume, |det(Jm)| / 6, always non-negative.

    Zero or NaN is replaced by epsilon.
    """
    V = abs(determinant(jacobian_matrix(element))) / 6.0
    return _guard(V, epsilon, "volume", element)


def calculate_B() -> Matrix:
    return Matrix.from_array(SHAPE_DERIVATIVES)


def calculate_local_A(element: Element) -> Matrix:
    """
    Cofactor matrix of the Jacobian matrix, J·Jm⁻ᵀ.

    Columns are e2×e3, e3×e1 and e1×e2 for the edge vectors e1, e2, e3.
    Defined even when the element is degenerate.
    """
    return cofactor_matrix(jacobian_matrix(element))


def create_local_K(
    element: Element,
    problem: ProblemData,
    formulation=HeatTransfer(),
    epsilon: float = DEGENERACY_EPSILON
) -> Matrix:
    """
    4×4 local matrix c_K · Bᵀ·Aᵀ·A·B.

    Multiplied right to left: A·B, Aᵀ·(A·B), Bᵀ·(...), then scaled.
    """
    volume = calculate_local_volume(element, epsilon)
    J = calculate_local_jacobian(element, epsilon)

    B = calculate_B()
    A = calculate_local_A(element)

    AB = product_matrix_by_matrix(A, B)
    AtAB = product_matrix_by_matrix(transpose(A), AB)
    BtAtAB = product_matrix_by_matrix(transpose(B), AtAB)

    return product_scalar_by_matrix(formulation.stiffness_coefficient(problem, volume, J), BtAtAB)


def create_local_b(
    element: Element,
    problem: ProblemData,
    formulation=HeatTransfer(),
    epsilon: float = DEGENERACY_EPSILON
) -> Vector:
    """Length-4 local vector, the same load share for each node."""
    J = calculate_local_jacobian(element, epsilon)
    return Vector.from_array(np.full(4, formulation.load_coefficient(problem, J)))


@dataclass
class LocalSystem:
    """One element's contribution, ready to be scattered into the global system."""
    element_id: int
    index_map: List[int]
    K: Matrix
    b: Vector


def create_local_systems(
    mesh: Mesh,
    formulation=HeatTransfer(),
    epsilon: float = DEGENERACY_EPSILON,
    dof: DOFManager = DOF_SCALAR
) -> List[LocalSystem]:
    """
    Local systems for every element of the mesh, in element order.

    Elements are independent of each other; all of them are built before
    any assembly happens.
    """
    systems = []
    for element in mesh.elements:
        logger.debug("Creating local system for element %s", element.id)
        systems.append(LocalSystem(
            element_id=element.id,
            index_map=dof.element_dof_map(element.node_ids),
            K=create_local_K(element, mesh.problem, formulation, epsilon),
            b=create_local_b(element, mesh.problem, formulation, epsilon),
        ))
    return systems
