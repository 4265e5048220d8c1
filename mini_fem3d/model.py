# mini_fem3d/model.py
"""
MESH MODEL: Nodes, Tetrahedra and Boundary Conditions
=====================================================

PURPOSE:
--------
Plain data structures for a 3D tetrahedral mesh:

- Node: a point in space with a stable 1-based identifier
- Element: a tetrahedron, an ordered 4-tuple of nodes
- Condition: a (node, value) pair, used for Dirichlet and Neumann lists
- ProblemData: the named problem constants (k, Q)
- Mesh: owns all of the above

Node ORDER inside an element matters: it fixes the orientation (sign) of
the Jacobian. Element node lists are never reordered.

The mesh relies on node ids being exactly 1..num_nodes, since global
indices are computed as id - 1. check_node_ids() enforces it.
"""

from dataclasses import dataclass
from typing import Dict, List, Tuple


class MeshError(ValueError):
    """Raised when the mesh content breaks an invariant."""
    pass


@dataclass(frozen=True)
class Node:
    """
    A mesh node.

    Parameters:
    -----------
    id : int
        1-based identifier, stable for the lifetime of the mesh
    x, y, z : float
        Coordinates
    """
    id: int
    x: float
    y: float
    z: float

    @property
    def coords(self) -> Tuple[float, float, float]:
        return (self.x, self.y, self.z)


@dataclass(frozen=True)
class Element:
    """
    A linear tetrahedron.

    Parameters:
    -----------
    id : int
        Element identifier
    nodes : tuple of 4 Node
        Ordered corner nodes (the mesh owns the nodes, the element only
        refers to them)
    """
    id: int
    nodes: Tuple[Node, Node, Node, Node]

    def __post_init__(self):
        if len(self.nodes) != 4:
            raise MeshError(f"Element {self.id} needs exactly 4 nodes, got {len(self.nodes)}")
        # Accept any sequence, store a tuple
        object.__setattr__(self, 'nodes', tuple(self.nodes))

    @property
    def node_ids(self) -> List[int]:
        return [n.id for n in self.nodes]


@dataclass(frozen=True)
class Condition:
    """A prescribed value at a node (field value for Dirichlet, flux for Neumann)."""
    node: Node
    value: float


@dataclass(frozen=True)
class ProblemData:
    """
    Problem constants.

    k : float
        Diffusion / thermal conductivity coefficient
    Q : float
        Volumetric source term
    """
    k: float
    Q: float


class Mesh:
    """
    Container for one problem: nodes, elements and both condition lists.

    Populated once (usually by gid.read_input) and read-only afterwards.

    Examples:
    ---------
    >>> mesh = Mesh(ProblemData(k=1.0, Q=0.0))
    >>> n1 = mesh.insert_node(Node(1, 0.0, 0.0, 0.0))
    >>> mesh.get_node(1) is n1
    True
    """

    def __init__(self, problem: ProblemData):
        self.problem = problem
        self._nodes: Dict[int, Node] = {}
        self._elements: List[Element] = []
        self._dirichlet: List[Condition] = []
        self._neumann: List[Condition] = []
        self._dirichlet_by_node: Dict[int, Condition] = {}
        self._neumann_nodes = set()

    # --- population -------------------------------------------------------

    def insert_node(self, node: Node) -> Node:
        if node.id in self._nodes:
            raise MeshError(f"Duplicate node id {node.id}")
        self._nodes[node.id] = node
        return node

    def insert_element(self, element: Element) -> Element:
        for node in element.nodes:
            if self._nodes.get(node.id) != node:
                raise MeshError(f"Element {element.id} refers to node {node.id}, which is not in the mesh")
        self._elements.append(element)
        return element

    def insert_dirichlet_condition(self, condition: Condition) -> Condition:
        node_id = condition.node.id
        if node_id in self._dirichlet_by_node:
            raise MeshError(f"Node {node_id} already has a Dirichlet condition")
        self._dirichlet.append(condition)
        self._dirichlet_by_node[node_id] = condition
        return condition

    def insert_neumann_condition(self, condition: Condition) -> Condition:
        node_id = condition.node.id
        if node_id in self._neumann_nodes:
            raise MeshError(f"Node {node_id} already has a Neumann condition")
        self._neumann.append(condition)
        self._neumann_nodes.add(node_id)
        return condition

    # --- queries ----------------------------------------------------------

    @property
    def num_nodes(self) -> int:
        return len(self._nodes)

    @property
    def num_elements(self) -> int:
        return len(self._elements)

    @property
    def num_dirichlet(self) -> int:
        return len(self._dirichlet)

    @property
    def num_neumann(self) -> int:
        return len(self._neumann)

    @property
    def nodes(self) -> List[Node]:
        """Nodes in increasing id order."""
        return [self._nodes[i] for i in sorted(self._nodes)]

    @property
    def elements(self) -> List[Element]:
        return list(self._elements)

    @property
    def dirichlet_conditions(self) -> List[Condition]:
        return list(self._dirichlet)

    @property
    def neumann_conditions(self) -> List[Condition]:
        return list(self._neumann)

    def get_node(self, node_id: int) -> Node:
        try:
            return self._nodes[node_id]
        except KeyError:
            raise MeshError(f"No node with id {node_id}") from None

    def get_element(self, position: int) -> Element:
        return self._elements[position]

    def get_dirichlet_condition(self, position: int) -> Condition:
        return self._dirichlet[position]

    def get_neumann_condition(self, position: int) -> Condition:
        return self._neumann[position]

    def does_node_have_dirichlet_condition(self, node_id: int) -> bool:
        return node_id in self._dirichlet_by_node

    def dirichlet_value(self, node_id: int) -> float:
        return self._dirichlet_by_node[node_id].value

    def check_node_ids(self) -> None:
        """
        Raises MeshError unless node ids are exactly 1..num_nodes.
        """
        expected = set(range(1, self.num_nodes + 1))
        if set(self._nodes) != expected:
            missing = sorted(expected - set(self._nodes))[:5]
            extra = sorted(set(self._nodes) - expected)[:5]
            raise MeshError(
                f"Node ids must be 1..{self.num_nodes} without gaps "
                f"(missing: {missing}, out of range: {extra})"
            )

    def report(self) -> str:
        """Human-readable listing of the mesh content."""
        lines = [
            "Quantities",
            "***********************",
            f"Number of nodes: {self.num_nodes}",
            f"Number of elements: {self.num_elements}",
            f"Number of dirichlet boundary conditions: {self.num_dirichlet}",
            f"Number of neumann boundary conditions: {self.num_neumann}",
            "",
            f"Problem data: k= {self.problem.k}, Q= {self.problem.Q}",
            "",
            "List of nodes",
            "**********************",
        ]
        for n in self.nodes:
            lines.append(f"Node: {n.id}, x= {n.x}, y= {n.y}, z= {n.z}")

        lines += ["", "List of elements", "**********************"]
        for e in self._elements:
            ids = ", ".join(f"Node {i + 1}= {nid}" for i, nid in enumerate(e.node_ids))
            lines.append(f"Element: {e.id}, {ids}")

        for title, conditions in (("Dirichlet", self._dirichlet), ("Neumann", self._neumann)):
            lines += ["", f"List of {title} boundary conditions", "**********************"]
            for i, c in enumerate(conditions, start=1):
                lines.append(f"Condition {i}: {c.node.id}, Value= {c.value}")

        return "\n".join(lines) + "\n"
