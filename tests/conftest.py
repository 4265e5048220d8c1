# tests/conftest.py
"""Shared meshes for the test suite."""

import numpy as np
import pytest

from mini_fem3d.model import Condition, Element, Mesh, Node, ProblemData


def make_unit_tetrahedron(k: float = 1.0, Q: float = 0.0) -> Mesh:
    """
    One element on the reference tetrahedron:
    (0,0,0), (1,0,0), (0,1,0), (0,0,1). J = 1, V = 1/6.
    """
    mesh = Mesh(ProblemData(k=k, Q=Q))
    coords = [(0.0, 0.0, 0.0), (1.0, 0.0, 0.0), (0.0, 1.0, 0.0), (0.0, 0.0, 1.0)]
    for i, (x, y, z) in enumerate(coords, start=1):
        mesh.insert_node(Node(i, x, y, z))
    mesh.insert_element(Element(1, tuple(mesh.get_node(i) for i in (1, 2, 3, 4))))
    return mesh


def make_two_tetrahedra(k: float = 1.0, Q: float = 0.0) -> Mesh:
    """
    Two elements sharing the face (2, 3, 4):
        element 1: nodes 1 2 3 4 (unit tetrahedron)
        element 2: nodes 2 3 4 5 with node 5 at (1, 1, 1), J = 2
    """
    mesh = make_unit_tetrahedron(k=k, Q=Q)
    mesh.insert_node(Node(5, 1.0, 1.0, 1.0))
    mesh.insert_element(Element(2, tuple(mesh.get_node(i) for i in (2, 3, 4, 5))))
    return mesh


# Unit cube split into 6 positively oriented tetrahedra around the
# diagonal from node 1 (0,0,0) to node 8 (1,1,1).
CUBE_COORDS = [
    (0.0, 0.0, 0.0), (1.0, 0.0, 0.0), (0.0, 1.0, 0.0), (1.0, 1.0, 0.0),
    (0.0, 0.0, 1.0), (1.0, 0.0, 1.0), (0.0, 1.0, 1.0), (1.0, 1.0, 1.0),
]
CUBE_ELEMENTS = [
    (1, 2, 4, 8),
    (1, 2, 8, 6),
    (1, 3, 8, 4),
    (1, 3, 7, 8),
    (1, 5, 6, 8),
    (1, 5, 8, 7),
]
CUBE_BOTTOM = [1, 2, 3, 4]
CUBE_TOP = [5, 6, 7, 8]


def make_cube(k: float = 1.0, Q: float = 0.0, bottom_value: float = 100.0) -> Mesh:
    mesh = Mesh(ProblemData(k=k, Q=Q))
    for i, (x, y, z) in enumerate(CUBE_COORDS, start=1):
        mesh.insert_node(Node(i, x, y, z))
    for e, ids in enumerate(CUBE_ELEMENTS, start=1):
        mesh.insert_element(Element(e, tuple(mesh.get_node(i) for i in ids)))
    for i in CUBE_BOTTOM:
        mesh.insert_dirichlet_condition(Condition(mesh.get_node(i), bottom_value))
    return mesh


CUBE_DAT = """1.0 0.0 100.0 0.0
8 6 4 0
Coordinates
1 0.0 0.0 0.0
2 1.0 0.0 0.0
3 0.0 1.0 0.0
4 1.0 1.0 0.0
5 0.0 0.0 1.0
6 1.0 0.0 1.0
7 0.0 1.0 1.0
8 1.0 1.0 1.0
EndCoordinates
Elements
1 1 2 4 8
2 1 2 8 6
3 1 3 8 4
4 1 3 7 8
5 1 5 6 8
6 1 5 8 7
EndElements
Dirichlet
1
2
3
4
EndDirichlet
Neumann
EndNeumann
"""

# One element, one Dirichlet node (1, T = 10), one Neumann node (4, 0.5),
# k = 2, Q = 12. Reduced K = (k/6)·I, so T_r = 10 + 3·(Q/24 + flux_r).
SINGLE_DAT = """2.0 12.0 10.0 0.5
4 1 1 1
Coordinates
1 0.0 0.0 0.0
2 1.0 0.0 0.0
3 0.0 1.0 0.0
4 0.0 0.0 1.0
EndCoordinates
Elements
1 1 2 3 4
EndElements
Dirichlet
1
EndDirichlet
Neumann
4
EndNeumann
"""
SINGLE_EXPECTED = np.array([10.0, 11.5, 11.5, 13.0])


@pytest.fixture
def unit_tet():
    return make_unit_tetrahedron(k=2.0, Q=12.0)


@pytest.fixture
def two_tets():
    return make_two_tetrahedra(k=1.5, Q=3.0)


@pytest.fixture
def cube():
    return make_cube()


@pytest.fixture
def single_dat(tmp_path):
    """Base name (no extension) of the single-element input file."""
    base = tmp_path / "single"
    (tmp_path / "single.dat").write_text(SINGLE_DAT)
    return base


@pytest.fixture
def cube_dat(tmp_path):
    base = tmp_path / "cube"
    (tmp_path / "cube.dat").write_text(CUBE_DAT)
    return base
