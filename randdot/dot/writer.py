"""Graphviz dot rendering of adjacency relations.

Output shape (directed):

    digraph G {
    1;
    1->2;
    2;
    }

Undirected graphs use the ``graph`` keyword and the ``--`` arc. Vertices are
rendered 1-based. For each vertex the lower triangle (diagonal included) is
scanned first; directed graphs additionally scan the strict upper triangle.
Undirected edges are symmetric, so the lower triangle alone emits each of
them exactly once.
"""

import logging
from pathlib import Path
from typing import Iterator

import numpy as np

from randdot.errors import InvalidParameters, IoFailure
from randdot.graph.types import AdjacencyRelation
from randdot.graph.validation import validate_adjacency

log = logging.getLogger(__name__)

DEFAULT_OUTPUT = Path("RandomGraph.txt")

GRAPH_NAME = "G"
STATEMENT_END = ";\n"
CLOSING = "}"


def header_for(adj: AdjacencyRelation) -> str:
    keyword = "graph" if adj.constraints.undirected else "digraph"
    return f"{keyword} {GRAPH_NAME} {{\n"


def arc_for(adj: AdjacencyRelation) -> str:
    return "--" if adj.constraints.undirected else "->"


def _check_renderable(adj: AdjacencyRelation) -> None:
    if adj.n < 0:
        raise InvalidParameters(f"vertex count must be >= 0, got {adj.n}")
    errors = validate_adjacency(adj)
    if errors:
        raise InvalidParameters(
            "adjacency relation violates its constraints: " + "; ".join(errors)
        )


def iter_dot_statements(adj: AdjacencyRelation) -> Iterator[str]:
    """Yield the dot text of `adj` chunk by chunk, in emission order.

    Yields the header, then per vertex its declaration followed by its
    outgoing edge statements in column order, then the closing marker.

    Raises:
        InvalidParameters: If n < 0 or the relation breaks its constraints.
    """
    _check_renderable(adj)

    n = adj.n
    arc = arc_for(adj)
    directed = not adj.constraints.undirected
    matrix = adj.matrix

    yield header_for(adj)
    for row in range(n):
        label = row + 1
        yield f"{label}{STATEMENT_END}"
        for col in np.flatnonzero(matrix[row, : row + 1]):
            yield f"{label}{arc}{int(col) + 1}{STATEMENT_END}"
        if directed:
            for col in np.flatnonzero(matrix[row, row + 1 :]):
                yield f"{label}{arc}{int(col) + row + 2}{STATEMENT_END}"
    yield CLOSING


def render_dot(adj: AdjacencyRelation) -> str:
    """Render `adj` as a complete dot document string."""
    return "".join(iter_dot_statements(adj))


def write_dot_file(
    adj: AdjacencyRelation, path: Path | str = DEFAULT_OUTPUT
) -> Path:
    """Write `adj` to `path` in dot format.

    The file is truncated (or created) and then written statement by
    statement; it is closed before this function returns.

    Args:
        adj: The relation to write.
        path: Output file path.

    Returns:
        The output path.

    Raises:
        InvalidParameters: If the relation cannot be rendered. The file is
            left untouched in that case.
        IoFailure: If the file cannot be created, written or closed.
    """
    path = Path(path)
    statements = iter_dot_statements(adj)
    # Pull the header first so validation errors surface before the
    # file is truncated.
    header = next(statements)

    try:
        with open(path, "w", encoding="utf-8") as f:
            f.write(header)
            for chunk in statements:
                f.write(chunk)
    except OSError as exc:
        raise IoFailure(f"cannot write dot file {path}: {exc}") from exc

    log.info("Dot file written to %s (%d vertices)", path, adj.n)
    return path
