# mini_fem3d/gid.py
"""
GiD FILE FORMATS: .dat Input and .post.res Results
==================================================

INPUT (<name>.dat), whitespace-separated tokens in a fixed order:

    k  Q  dirichlet_value  neumann_value
    num_nodes  num_elements  num_dirichlet  num_neumann
    Coordinates
    <node_id> <x> <y> <z>                  × num_nodes
    EndCoordinates
    Elements
    <element_id> <n1> <n2> <n3> <n4>       × num_elements
    EndElements
    Dirichlet
    <node_id>                              × num_dirichlet
    EndDirichlet
    Neumann
    <node_id>                              × num_neumann
    EndNeumann

Every Dirichlet node gets the same header value, and so does every
Neumann node.

OUTPUT (<name>.post.res):

    GiD Post Results File 1.0
    Result "Temperature" "Load Case 1" 1 Scalar OnNodes
    ComponentNames "T"
    Values
    <node_id>     <value>                  × num_nodes, increasing id
    End values
"""

import logging
from pathlib import Path
from typing import Dict, Iterator, Optional, Union

import numpy as np

from .model import Condition, Element, Mesh, MeshError, Node, ProblemData

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]

INPUT_EXTENSION = ".dat"
OUTPUT_EXTENSION = ".post.res"

RESULTS_HEADER = (
    "GiD Post Results File 1.0\n"
    'Result "Temperature" "Load Case 1" 1 Scalar OnNodes\n'
    'ComponentNames "T"\n'
    "Values\n"
)
RESULTS_FOOTER = "End values\n"


class InputFormatError(ValueError):
    """Raised when a .dat or .post.res file is truncated or malformed."""
    pass


class _Tokens:
    """Sequential reader over the whitespace-separated tokens of a file."""

    def __init__(self, text: str, source: str):
        self._it: Iterator[str] = iter(text.split())
        self._source = source
        self._count = 0

    def next(self, what: str) -> str:
        try:
            token = next(self._it)
        except StopIteration:
            raise InputFormatError(
                f"{self._source}: unexpected end of file after {self._count} tokens while reading {what}"
            ) from None
        self._count += 1
        return token

    def number(self, kind, what: str):
        token = self.next(what)
        try:
            return kind(token)
        except ValueError:
            raise InputFormatError(f"{self._source}: expected {what}, got '{token}'") from None

    def marker(self, expected: str) -> None:
        token = self.next(f"section marker '{expected}'")
        if token != expected:
            logger.warning("%s: expected section marker '%s', found '%s'", self._source, expected, token)


def _with_extension(filename: PathLike, extension: str) -> Path:
    return Path(f"{filename}{extension}")


def read_input(filename: PathLike, extension: str = INPUT_EXTENSION) -> Mesh:
    """
    Read <filename>.dat into a Mesh.

    Parameters:
    -----------
    filename : str or Path
        Base name without extension
    extension : str
        Input extension (default '.dat')

    Raises:
    -------
    FileNotFoundError
        If the file does not exist
    InputFormatError
        If the file is not text, is truncated or a token does not parse
    MeshError
        If an element or condition refers to an unknown node
    """
    path = _with_extension(filename, extension)
    try:
        text = path.read_text()
    except UnicodeDecodeError as e:
        raise InputFormatError(f"{path}: not a text file ({e.reason} at byte {e.start})") from None
    tokens = _Tokens(text, str(path))

    k = tokens.number(float, "k")
    Q = tokens.number(float, "Q")
    dirichlet_value = tokens.number(float, "Dirichlet value")
    neumann_value = tokens.number(float, "Neumann value")

    num_nodes = tokens.number(int, "number of nodes")
    num_elements = tokens.number(int, "number of elements")
    num_dirichlet = tokens.number(int, "number of Dirichlet nodes")
    num_neumann = tokens.number(int, "number of Neumann nodes")

    mesh = Mesh(ProblemData(k=k, Q=Q))

    tokens.marker("Coordinates")
    for _ in range(num_nodes):
        node_id = tokens.number(int, "node id")
        x = tokens.number(float, "x coordinate")
        y = tokens.number(float, "y coordinate")
        z = tokens.number(float, "z coordinate")
        mesh.insert_node(Node(node_id, x, y, z))
    tokens.marker("EndCoordinates")

    tokens.marker("Elements")
    for _ in range(num_elements):
        element_id = tokens.number(int, "element id")
        node_ids = [tokens.number(int, "element node id") for _ in range(4)]
        mesh.insert_element(Element(element_id, tuple(mesh.get_node(i) for i in node_ids)))
    tokens.marker("EndElements")

    tokens.marker("Dirichlet")
    for _ in range(num_dirichlet):
        node_id = tokens.number(int, "Dirichlet node id")
        mesh.insert_dirichlet_condition(Condition(mesh.get_node(node_id), dirichlet_value))
    tokens.marker("EndDirichlet")

    tokens.marker("Neumann")
    for _ in range(num_neumann):
        node_id = tokens.number(int, "Neumann node id")
        mesh.insert_neumann_condition(Condition(mesh.get_node(node_id), neumann_value))
    tokens.marker("EndNeumann")

    logger.info(
        "Read %s: %d nodes, %d elements, %d Dirichlet, %d Neumann",
        path, num_nodes, num_elements, num_dirichlet, num_neumann
    )
    return mesh


def write_input(
    filename: PathLike,
    mesh: Mesh,
    dirichlet_value: Optional[float] = None,
    neumann_value: Optional[float] = None,
    extension: str = INPUT_EXTENSION
) -> Path:
    """
    Write a mesh as <filename>.dat.

    The format stores one value per condition kind, so every condition of
    a kind must share it. When not given, the value is taken from the
    mesh (0.0 for an empty list).

    Raises:
    -------
    MeshError
        If conditions of one kind carry different values
    """
    def shared_value(conditions, given, kind):
        values = {c.value for c in conditions}
        if given is None:
            if len(values) > 1:
                raise MeshError(f"{kind} conditions have different values; the .dat format needs one")
            return values.pop() if values else 0.0
        if values - {given}:
            raise MeshError(f"{kind} conditions do not all have value {given}")
        return given

    dirichlet_value = shared_value(mesh.dirichlet_conditions, dirichlet_value, "Dirichlet")
    neumann_value = shared_value(mesh.neumann_conditions, neumann_value, "Neumann")

    lines = [
        f"{float(mesh.problem.k)!r} {float(mesh.problem.Q)!r} {float(dirichlet_value)!r} {float(neumann_value)!r}",
        f"{mesh.num_nodes} {mesh.num_elements} {mesh.num_dirichlet} {mesh.num_neumann}",
        "Coordinates",
    ]
    lines += [f"{n.id} {float(n.x)!r} {float(n.y)!r} {float(n.z)!r}" for n in mesh.nodes]
    lines += ["EndCoordinates", "Elements"]
    lines += [f"{e.id} " + " ".join(str(i) for i in e.node_ids) for e in mesh.elements]
    lines += ["EndElements", "Dirichlet"]
    lines += [str(c.node.id) for c in mesh.dirichlet_conditions]
    lines += ["EndDirichlet", "Neumann"]
    lines += [str(c.node.id) for c in mesh.neumann_conditions]
    lines += ["EndNeumann"]

    path = _with_extension(filename, extension)
    path.write_text("\n".join(lines) + "\n")
    return path


def write_output(filename: PathLike, values, extension: str = OUTPUT_EXTENSION) -> Path:
    """
    Write the nodal field as <filename>.post.res.

    values[i] belongs to node i + 1. Values are written in shortest
    round-trip form, so read_output recovers them exactly.
    """
    values = np.asarray(values, dtype=float)
    path = _with_extension(filename, extension)

    with open(path, "w") as res_file:
        res_file.write(RESULTS_HEADER)
        for i, value in enumerate(values):
            res_file.write(f"{i + 1}     {float(value)!r}\n")
        res_file.write(RESULTS_FOOTER)

    logger.info("Wrote %d nodal values to %s", len(values), path)
    return path


def read_output(path: PathLike) -> Dict[int, float]:
    """
    Parse a .post.res file written by write_output.

    Returns:
    --------
    Dict[int, float]
        node_id -> value
    """
    path = Path(path)
    lines = path.read_text().splitlines()
    try:
        start = lines.index("Values") + 1
        end = lines.index("End values")
    except ValueError:
        raise InputFormatError(f"{path}: missing 'Values' / 'End values' block") from None

    results = {}
    for line in lines[start:end]:
        parts = line.split()
        if len(parts) != 2:
            raise InputFormatError(f"{path}: malformed result line '{line}'")
        try:
            results[int(parts[0])] = float(parts[1])
        except ValueError:
            raise InputFormatError(f"{path}: malformed result line '{line}'") from None
    return results
