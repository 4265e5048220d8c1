# File: tests/test_local_system.py
"""
Local system builder: Jacobian, volume, B, A, local K and local b.

The unit tetrahedron (0,0,0), (1,0,0), (0,1,0), (0,0,1) is the reference
element itself: J = 1, V = 1/6, A = I, so K_local = (k/6)·BᵀB and
b_local = Q/24 at every node.
"""

import math

import numpy as np
import pytest

from conftest import make_two_tetrahedra, make_unit_tetrahedron
from mini_fem3d.config import DEGENERACY_EPSILON
from mini_fem3d.elements import (
    SHAPE_DERIVATIVES,
    calculate_B,
    calculate_local_A,
    calculate_local_jacobian,
    calculate_local_volume,
    create_local_b,
    create_local_K,
    create_local_systems,
    jacobian_matrix,
)
from mini_fem3d.formulations import FORMULATIONS, HeatTransfer, SecondEquation, get_formulation
from mini_fem3d.model import Element, Node, ProblemData

BTB = SHAPE_DERIVATIVES.T @ SHAPE_DERIVATIVES


def make_element(coords, ids=(1, 2, 3, 4)) -> Element:
    return Element(1, tuple(Node(i, *c) for i, c in zip(ids, coords)))


def reference_K(coords, k: float) -> np.ndarray:
    """k·V·GᵀG with G the physical shape function gradients."""
    p = np.array(coords, dtype=float)
    Jm = np.column_stack([p[1] - p[0], p[2] - p[0], p[3] - p[0]])
    G = np.linalg.inv(Jm).T @ SHAPE_DERIVATIVES
    V = abs(np.linalg.det(Jm)) / 6.0
    return k * V * G.T @ G


UNIT = [(0, 0, 0), (1, 0, 0), (0, 1, 0), (0, 0, 1)]
SKEWED = [(0.1, -0.2, 0.3), (1.4, 0.1, 0.0), (0.3, 1.2, 0.4), (0.2, 0.5, 1.7)]


class TestGeometry:

    def test_unit_tetrahedron(self):
        e = make_element(UNIT)
        assert calculate_local_jacobian(e) == pytest.approx(1.0)
        assert calculate_local_volume(e) == pytest.approx(1.0 / 6.0)
        np.testing.assert_allclose(calculate_local_A(e).data, np.eye(3), atol=1e-15)

    def test_jacobian_matrix_columns_are_edges(self):
        e = make_element(SKEWED)
        Jm = jacobian_matrix(e).data
        p = np.array(SKEWED)
        np.testing.assert_allclose(Jm[:, 0], p[1] - p[0])
        np.testing.assert_allclose(Jm[:, 2], p[3] - p[0])

    def test_swapping_nodes_flips_jacobian_not_volume(self):
        e = make_element(SKEWED)
        swapped = make_element([SKEWED[0], SKEWED[2], SKEWED[1], SKEWED[3]])
        assert calculate_local_jacobian(swapped) == pytest.approx(-calculate_local_jacobian(e))
        assert calculate_local_volume(swapped) == pytest.approx(calculate_local_volume(e))

    def test_volume_is_sixth_of_jacobian(self):
        e = make_element(SKEWED)
        assert calculate_local_volume(e) == pytest.approx(abs(calculate_local_jacobian(e)) / 6.0)

    def test_B_is_constant(self):
        np.testing.assert_array_equal(
            calculate_B().data,
            [[-1, 1, 0, 0], [-1, 0, 1, 0], [-1, 0, 0, 1]],
        )

    def test_A_columns_are_cross_products(self):
        p = np.array(SKEWED)
        e1, e2, e3 = p[1] - p[0], p[2] - p[0], p[3] - p[0]
        A = calculate_local_A(make_element(SKEWED)).data
        np.testing.assert_allclose(A[:, 0], np.cross(e2, e3), atol=1e-12)
        np.testing.assert_allclose(A[:, 1], np.cross(e3, e1), atol=1e-12)
        np.testing.assert_allclose(A[:, 2], np.cross(e1, e2), atol=1e-12)


class TestLocalK:

    def test_unit_tetrahedron(self):
        K = create_local_K(make_element(UNIT), ProblemData(k=2.0, Q=0.0))
        np.testing.assert_allclose(K.data, (2.0 / 6.0) * BTB, atol=1e-14)

    def test_scaled_tetrahedron(self):
        # Doubling the size: V × 8, gradients × 1/2 -> K × 2
        coords = [tuple(2 * c for c in p) for p in UNIT]
        K = create_local_K(make_element(coords), ProblemData(k=1.0, Q=0.0))
        np.testing.assert_allclose(K.data, (1.0 / 3.0) * BTB, atol=1e-14)

    def test_matches_gradient_formula(self):
        K = create_local_K(make_element(SKEWED), ProblemData(k=3.5, Q=0.0))
        np.testing.assert_allclose(K.data, reference_K(SKEWED, 3.5), rtol=1e-10, atol=1e-12)

    def test_symmetric_with_zero_row_sums(self):
        K = create_local_K(make_element(SKEWED), ProblemData(k=1.0, Q=0.0)).data
        np.testing.assert_allclose(K, K.T, atol=1e-12)
        np.testing.assert_allclose(K.sum(axis=1), 0.0, atol=1e-12)
        assert K.shape == (4, 4)

    def test_orientation_does_not_change_stiffness(self):
        e = make_element(SKEWED)
        swapped = make_element([SKEWED[0], SKEWED[2], SKEWED[1], SKEWED[3]])
        problem = ProblemData(k=1.0, Q=0.0)
        K = create_local_K(e, problem).data
        Ks = create_local_K(swapped, problem).data
        perm = [0, 2, 1, 3]
        np.testing.assert_allclose(Ks, K[np.ix_(perm, perm)], atol=1e-12)


class TestLocalB:

    def test_unit_tetrahedron(self):
        b = create_local_b(make_element(UNIT), ProblemData(k=1.0, Q=12.0))
        np.testing.assert_allclose(b.data, [0.5, 0.5, 0.5, 0.5])

    def test_load_sums_to_source_times_volume(self):
        e = make_element(SKEWED)
        b = create_local_b(e, ProblemData(k=1.0, Q=4.0))
        assert b.data.sum() == pytest.approx(4.0 * calculate_local_volume(e))


class TestDegenerateElement:
    """Coplanar nodes: J = 0 is replaced by epsilon, nothing turns into NaN."""

    COPLANAR = [(0, 0, 0), (1, 0, 0), (0, 1, 0), (1, 1, 0)]

    def test_jacobian_and_volume_fall_back_to_epsilon(self):
        e = make_element(self.COPLANAR)
        assert calculate_local_jacobian(e) == DEGENERACY_EPSILON
        assert calculate_local_volume(e) == DEGENERACY_EPSILON

    def test_local_system_is_finite(self):
        e = make_element(self.COPLANAR)
        problem = ProblemData(k=1.0, Q=1.0)
        K = create_local_K(e, problem)
        b = create_local_b(e, problem)
        assert np.all(np.isfinite(K.data))
        assert np.all(np.isfinite(b.data))
        np.testing.assert_allclose(b.data, DEGENERACY_EPSILON / 24.0)

    def test_coincident_nodes(self):
        e = make_element([(1, 1, 1)] * 4)
        assert calculate_local_jacobian(e, epsilon=1e-3) == 1e-3
        K = create_local_K(e, ProblemData(k=1.0, Q=0.0), epsilon=1e-3)
        np.testing.assert_array_equal(K.data, np.zeros((4, 4)))

    def test_nan_coordinate(self):
        e = make_element([(0, 0, 0), (1, 0, 0), (0, 1, 0), (0, 0, math.nan)])
        assert calculate_local_jacobian(e) == DEGENERACY_EPSILON
        assert calculate_local_volume(e) == DEGENERACY_EPSILON


class TestFormulations:

    def test_second_equation_coefficients(self):
        e = make_element(SKEWED)
        problem = ProblemData(k=5.0, Q=7.0)
        J = calculate_local_jacobian(e)
        A = calculate_local_A(e).data
        structure = SHAPE_DERIVATIVES.T @ A.T @ A @ SHAPE_DERIVATIVES

        K = create_local_K(e, problem, SecondEquation())
        b = create_local_b(e, problem, SecondEquation())
        np.testing.assert_allclose(K.data, structure / (3360.0 * J), rtol=1e-12)
        np.testing.assert_allclose(b.data, J / 105.0)

    def test_lookup(self):
        assert isinstance(get_formulation("heat_transfer"), HeatTransfer)
        assert set(FORMULATIONS) == {"heat_transfer", "second_equation"}
        with pytest.raises(ValueError, match="Unknown formulation"):
            get_formulation("elasticity")


def test_create_local_systems_index_maps():
    mesh = make_two_tetrahedra(k=1.0, Q=1.0)
    systems = create_local_systems(mesh)
    assert [s.element_id for s in systems] == [1, 2]
    assert systems[0].index_map == [0, 1, 2, 3]
    assert systems[1].index_map == [1, 2, 3, 4]
    for s in systems:
        assert s.K.shape == (4, 4)
        assert s.b.size == 4


def test_unit_mesh_helper_matches_reference():
    mesh = make_unit_tetrahedron(k=6.0, Q=0.0)
    (system,) = create_local_systems(mesh)
    np.testing.assert_allclose(system.K.data, BTB, atol=1e-14)
