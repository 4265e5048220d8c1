# mini_fem3d/viz.py
"""Matplotlib view of a nodal field on the mesh nodes."""

from typing import Optional

import matplotlib.pyplot as plt
import numpy as np

from .model import Mesh


def plot_nodal_field(
    mesh: Mesh,
    values,
    outpath: Optional[str] = None,
    ax=None,
    title: str = "Temperature",
    cmap: str = "coolwarm",
):
    """
    3D scatter of the mesh nodes coloured by their field value.

    Dirichlet nodes are drawn with a black edge so the prescribed values
    stand out from the solved ones.

    Parameters:
    -----------
    mesh : Mesh
        Mesh the field belongs to
    values : array-like
        Nodal field, values[i] belongs to node i + 1
    outpath : str, optional
        Save the figure here and close it
    ax : Axes3D, optional
        Axes to draw on; a new figure is created when omitted

    Returns:
    --------
    (fig, ax)
    """
    values = np.asarray(values, dtype=float)
    nodes = mesh.nodes
    xyz = np.array([n.coords for n in nodes], dtype=float).reshape(-1, 3)
    fixed = np.array([mesh.does_node_have_dirichlet_condition(n.id) for n in nodes], dtype=bool)

    if ax is None:
        fig = plt.figure(figsize=(7, 6))
        ax = fig.add_subplot(111, projection='3d')
    else:
        fig = ax.figure

    sc = ax.scatter(
        xyz[:, 0], xyz[:, 1], xyz[:, 2],
        c=values, cmap=cmap, s=40,
        edgecolors=['black' if f else 'none' for f in fixed],
        depthshade=False,
    )
    fig.colorbar(sc, ax=ax, shrink=0.7, label=title)

    ax.set_xlabel('x')
    ax.set_ylabel('y')
    ax.set_zlabel('z')
    ax.set_title(f"{title} ({mesh.num_nodes} nodes, {mesh.num_elements} elements)")

    if outpath:
        fig.savefig(outpath, dpi=150, bbox_inches='tight')
        plt.close(fig)

    return fig, ax
