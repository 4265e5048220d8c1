# mini_fem3d/post.py
"""Tabular views of a solved nodal field."""

from typing import Any, Dict

import numpy as np
import pandas as pd

from .model import Mesh


def results_table(mesh: Mesh, values) -> pd.DataFrame:
    """
    One row per node with its coordinates and solved value.

    Parameters:
    -----------
    mesh : Mesh
        The solved mesh
    values : array-like
        Nodal field, values[i] belongs to node i + 1

    Returns:
    --------
    pd.DataFrame
        Columns: node_id, x, y, z, value, dirichlet
    """
    values = np.asarray(values, dtype=float)
    if values.shape != (mesh.num_nodes,):
        raise ValueError(f"Expected {mesh.num_nodes} values, got shape {values.shape}")

    rows = []
    for node in mesh.nodes:
        rows.append({
            'node_id': node.id,
            'x': node.x,
            'y': node.y,
            'z': node.z,
            'value': values[node.id - 1],
            'dirichlet': mesh.does_node_have_dirichlet_condition(node.id),
        })
    return pd.DataFrame(rows, columns=['node_id', 'x', 'y', 'z', 'value', 'dirichlet'])


def field_summary(values) -> Dict[str, Any]:
    """Min / max / mean of the field and the node ids where the extremes occur."""
    values = np.asarray(values, dtype=float)
    if values.size == 0:
        raise ValueError("Empty field")
    return {
        'min': float(values.min()),
        'max': float(values.max()),
        'mean': float(values.mean()),
        'min_node': int(values.argmin()) + 1,
        'max_node': int(values.argmax()) + 1,
    }
