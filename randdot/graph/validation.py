"""Structural validation of adjacency relations against their constraints."""

import numpy as np

from randdot.graph.types import AdjacencyRelation


def validate_adjacency(adj: AdjacencyRelation) -> list[str]:
    """Check an adjacency relation against its own constraint set.

    Checks (cheapest first):
    1. Non-negative vertex count and n * n cells
    2. No self-loops when NO_SELF_LOOP is set
    3. Symmetry when UNDIRECTED is set

    Args:
        adj: The relation to check.

    Returns:
        List of error strings (empty = valid relation).
    """
    errors: list[str] = []

    if adj.n < 0:
        errors.append(f"Negative vertex count: {adj.n}")
        return errors
    if adj.cells.ndim != 1 or adj.cells.shape[0] != adj.n * adj.n:
        errors.append(
            f"Cell array shape {adj.cells.shape} does not match "
            f"{adj.n} vertices (expected ({adj.n * adj.n},))"
        )
        return errors

    matrix = adj.matrix

    if adj.constraints.no_self_loop:
        loops = int(np.count_nonzero(np.diagonal(matrix)))
        if loops:
            errors.append(f"Self-loops detected: {loops} diagonal cells set")

    if adj.constraints.undirected:
        asymmetric = int(np.count_nonzero(matrix != matrix.T)) // 2
        if asymmetric:
            errors.append(
                f"Undirected relation is not symmetric: "
                f"{asymmetric} unmatched cell pairs"
            )

    return errors
