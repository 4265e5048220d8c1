# mini_fem3d/solve.py
"""
PIPELINE: From Mesh to Nodal Field
==================================

    create_local_systems   one 4×4 K and length-4 b per element
    assembly               scatter-add into global K (n×n) and b (n)
    Neumann                b[idx] += flux
    Dirichlet              condense known values out of K and b
    solve_system           X = K⁻¹·b on the reduced system
    merge                  re-insert the Dirichlet values, length n again

solve_mesh() runs the numerical part on an in-memory Mesh. run() wraps
it with file input/output and turns every expected failure into a
RunResult instead of an exception.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import numpy as np

from .config import CONFIG, SolverConfig
from .elements import create_local_systems
from .formulations import get_formulation
from .gid import InputFormatError, read_input, write_output
from .kernel.assemble import assembly
from .kernel.boundary import (
    apply_dirichlet_boundary_conditions,
    apply_neumann_boundary_conditions,
    merge_results_with_dirichlet,
)
from .kernel.dof import DOF_SCALAR
from .kernel.matrix import Matrix, Vector
from .kernel.ops import DimensionMismatchError
from .kernel.solve import solve_system
from .model import Mesh, MeshError

logger = logging.getLogger(__name__)


def solve_mesh(mesh: Mesh, config: SolverConfig = CONFIG) -> np.ndarray:
    """
    Solve the boundary value problem described by a mesh.

    Args:
        mesh: Populated mesh (node ids 1..n)
        config: Formulation, solve method and degeneracy epsilon

    Returns:
        values: Field value per node, values[i] belongs to node i + 1

    Raises:
        MeshError: If node ids are not exactly 1..n
        DimensionMismatchError: If the system sizes are inconsistent
    """
    mesh.check_node_ids()
    formulation = get_formulation(config.formulation)
    dof = DOF_SCALAR
    n = dof.ndof(mesh.num_nodes)

    logger.info("Creating local systems for %d elements (%s)", mesh.num_elements, formulation.name)
    local_systems = create_local_systems(mesh, formulation, config.epsilon, dof)

    logger.info("Performing assembly")
    K = Matrix(n, n)
    b = Vector(n)
    assembly(K, b, [(s.index_map, s.K, s.b) for s in local_systems])

    logger.info("Applying %d Neumann boundary conditions", mesh.num_neumann)
    apply_neumann_boundary_conditions(b, mesh.neumann_conditions, dof)

    logger.info("Applying %d Dirichlet boundary conditions", mesh.num_dirichlet)
    apply_dirichlet_boundary_conditions(K, b, mesh.dirichlet_conditions, dof)

    logger.info("Solving global system")
    X = solve_system(K, b, method=config.method, epsilon=config.epsilon, cond_limit=config.cond_limit)

    logger.info("Preparing results")
    full = merge_results_with_dirichlet(X, n, mesh.dirichlet_conditions, dof)
    return full.to_numpy()


@dataclass
class RunResult:
    """
    Outcome of one file-to-file run.

    ok : bool
        True if the field was solved and written
    reason : str
        Empty if ok, error message otherwise
    values : np.ndarray or None
        Nodal field (node i + 1 at position i)
    mesh : Mesh or None
        The mesh that was read, when reading succeeded
    output_path : Path or None
        The written .post.res file
    """
    ok: bool
    reason: str = ""
    values: Optional[np.ndarray] = None
    mesh: Optional[Mesh] = None
    output_path: Optional[Path] = None


def run(filename, config: SolverConfig = CONFIG) -> RunResult:
    """
    Read <filename>.dat, solve, write <filename>.post.res.

    Expected failures (missing, unreadable or malformed input, mesh
    inconsistencies, dimension mismatches, an unwritable output) come back
    as ok=False with a reason.
    """
    try:
        mesh = read_input(filename, config.input_extension)
    except FileNotFoundError as e:
        return RunResult(ok=False, reason=f"input not found: {e.filename}")
    except (InputFormatError, MeshError) as e:
        return RunResult(ok=False, reason=f"invalid input: {e}")
    except OSError as e:
        return RunResult(ok=False, reason=f"cannot read input: {e}")

    try:
        values = solve_mesh(mesh, config)
    except MeshError as e:
        return RunResult(ok=False, reason=f"invalid mesh: {e}", mesh=mesh)
    except DimensionMismatchError as e:
        return RunResult(ok=False, reason=f"dimension mismatch: {e}", mesh=mesh)

    logger.info("Writing output file")
    try:
        output_path = write_output(filename, values, config.output_extension)
    except OSError as e:
        return RunResult(ok=False, reason=f"cannot write output: {e}", values=values, mesh=mesh)
    return RunResult(ok=True, values=values, mesh=mesh, output_path=output_path)
