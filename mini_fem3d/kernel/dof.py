# mini_fem3d/kernel/dof.py
"""
DOF MANAGER: Node Identifier to Global Index Mapping
====================================================

PURPOSE:
--------
Node identifiers in the input are 1-based and gap-free (1..num_nodes).
Global matrix rows are 0-based. This module owns that translation so the
`id - 1` arithmetic lives in exactly one place:

    Scalar field (temperature):  1 DOF/node  ->  index = id - 1

The manager is written for any number of DOFs per node so a vector
field could reuse the same assembly and boundary code.

USAGE:
------
    dof = DOFManager()                 # scalar field, ids start at 1
    dof.idx(1)                         # -> 0
    dof.element_dof_map([3, 1, 4, 2])  # -> [2, 0, 3, 1]
"""

from dataclasses import dataclass
from typing import List


@dataclass(frozen=True)
class DOFManager:
    """
    Maps (node_id, local_dof) to a global row/column index.

    Attributes:
    -----------
    dof_per_node : int
        Unknowns per node (1 for a scalar field)
    first_id : int
        Identifier of the first node (1 for GiD meshes)

    Examples:
    ---------
    >>> dof = DOFManager(dof_per_node=1)
    >>> dof.idx(5)
    4
    >>> dof.ndof(8)
    8
    """
    dof_per_node: int = 1
    first_id: int = 1

    def idx(self, node_id: int, local_dof: int = 0) -> int:
        return self.dof_per_node * (node_id - self.first_id) + local_dof

    def ndof(self, n_nodes: int) -> int:
        return self.dof_per_node * n_nodes

    def node_dofs(self, node_id: int) -> List[int]:
        base = self.idx(node_id)
        return list(range(base, base + self.dof_per_node))

    def element_dof_map(self, node_ids: List[int]) -> List[int]:
        """
        Flattened global indices for an element's nodes, in node order.

        This is the map used to scatter a local matrix into the global one.
        """
        result = []
        for node_id in node_ids:
            result.extend(self.node_dofs(node_id))
        return result


DOF_SCALAR = DOFManager(dof_per_node=1, first_id=1)
