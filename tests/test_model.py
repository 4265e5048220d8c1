# File: tests/test_model.py
"""
Mesh container: insertion checks, lookups and the text report.
"""

import pytest

from conftest import make_unit_tetrahedron
from mini_fem3d.model import Condition, Element, Mesh, MeshError, Node, ProblemData


class TestInsertion:

    def test_duplicate_node_id(self):
        mesh = make_unit_tetrahedron()
        with pytest.raises(MeshError, match="Duplicate node id 2"):
            mesh.insert_node(Node(2, 5.0, 5.0, 5.0))

    def test_element_needs_four_nodes(self):
        nodes = tuple(Node(i, 0.0, 0.0, float(i)) for i in range(1, 4))
        with pytest.raises(MeshError, match="exactly 4 nodes"):
            Element(1, nodes)

    def test_element_with_foreign_node(self):
        mesh = make_unit_tetrahedron()
        stranger = Node(9, 0.0, 0.0, 0.0)
        nodes = (mesh.get_node(1), mesh.get_node(2), mesh.get_node(3), stranger)
        with pytest.raises(MeshError, match="node 9"):
            mesh.insert_element(Element(2, nodes))

    def test_duplicate_conditions(self):
        mesh = make_unit_tetrahedron()
        node = mesh.get_node(3)
        mesh.insert_dirichlet_condition(Condition(node, 1.0))
        mesh.insert_neumann_condition(Condition(node, 1.0))
        with pytest.raises(MeshError):
            mesh.insert_dirichlet_condition(Condition(node, 2.0))
        with pytest.raises(MeshError):
            mesh.insert_neumann_condition(Condition(node, 2.0))
        assert (mesh.num_dirichlet, mesh.num_neumann) == (1, 1)


class TestLookup:

    def test_counts_and_positions(self):
        mesh = make_unit_tetrahedron(k=3.0, Q=-1.0)
        mesh.insert_dirichlet_condition(Condition(mesh.get_node(2), 7.0))
        assert (mesh.num_nodes, mesh.num_elements) == (4, 1)
        assert mesh.get_element(0).id == 1
        assert mesh.get_dirichlet_condition(0).node.id == 2
        assert mesh.does_node_have_dirichlet_condition(2)
        assert not mesh.does_node_have_dirichlet_condition(1)
        assert mesh.dirichlet_value(2) == 7.0

    def test_unknown_node(self):
        with pytest.raises(MeshError, match="No node with id 42"):
            make_unit_tetrahedron().get_node(42)

    def test_nodes_sorted_by_id(self):
        mesh = Mesh(ProblemData(k=1.0, Q=0.0))
        for i in (3, 1, 2):
            mesh.insert_node(Node(i, float(i), 0.0, 0.0))
        assert [n.id for n in mesh.nodes] == [1, 2, 3]
        mesh.check_node_ids()


def test_report_lists_everything():
    mesh = make_unit_tetrahedron(k=2.0, Q=12.0)
    mesh.insert_dirichlet_condition(Condition(mesh.get_node(1), 10.0))
    text = mesh.report()
    assert "Number of nodes: 4" in text
    assert "Number of elements: 1" in text
    assert "Problem data: k= 2.0, Q= 12.0" in text
    assert "Node: 4, x= 0.0, y= 0.0, z= 1.0" in text
    assert "Element: 1, Node 1= 1, Node 2= 2, Node 3= 3, Node 4= 4" in text
    assert "Condition 1: 1, Value= 10.0" in text
