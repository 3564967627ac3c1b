"""Uniform random simple graph sampler with an exact edge count.

Edges are placed by rejection sampling: a (row, column) pair is drawn
uniformly from [0, n) x [0, n) and rejected if the cell is already set or
violates the constraint set. Undirected edges are only accepted through
their lower-triangle cell, so every valid slot has the same draw weight.
Once few valid slots remain empty, the sampler switches to drawing the
remaining edges uniformly from the enumerated empty slots, which bounds
the number of draws near saturation.
"""

import logging

import numpy as np

from randdot.errors import InvalidParameters, ResourceExhausted
from randdot.graph.types import AdjacencyRelation, Constraints

log = logging.getLogger(__name__)

# Switch to slot enumeration once fewer than this fraction of valid slots
# is still empty.
DEFAULT_DENSE_FRACTION = 0.25


def max_edges(n: int, constraints: Constraints) -> int:
    """Maximum number of logical edges admissible under a constraint set.

    Args:
        n: Number of vertices.
        constraints: Active constraint flags.

    Returns:
        n^2, n(n-1), n(n+1)/2 or n(n-1)/2 depending on directedness and
        whether self-loops are allowed.
    """
    constraints = Constraints(constraints)
    if n < 0:
        raise InvalidParameters(f"vertex count must be >= 0, got {n}")
    if constraints.undirected:
        if constraints.no_self_loop:
            return n * (n - 1) // 2
        return n * (n + 1) // 2
    if constraints.no_self_loop:
        return n * (n - 1)
    return n * n


def validate_parameters(n: int, m: int, constraints: Constraints) -> None:
    """Reject invalid vertex/edge counts before any allocation happens.

    Raises:
        InvalidParameters: If n < 0, m < 0 or m > max_edges(n, constraints).
    """
    if n < 0:
        raise InvalidParameters(f"vertex count must be >= 0, got {n}")
    if m < 0:
        raise InvalidParameters(f"edge count must be >= 0, got {m}")
    limit = max_edges(n, constraints)
    if m > limit:
        raise InvalidParameters(
            f"edge count {m} exceeds the maximum of {limit} for {n} vertices "
            f"({describe_constraints(constraints)})"
        )


def describe_constraints(constraints: Constraints) -> str:
    """Human readable summary, e.g. 'undirected, no self-loops'."""
    constraints = Constraints(constraints)
    kind = "undirected" if constraints.undirected else "directed"
    loops = "no self-loops" if constraints.no_self_loop else "self-loops allowed"
    return f"{kind}, {loops}"


def allocate_cells(n: int) -> np.ndarray:
    """Allocate a zero-filled flat n * n boolean cell array.

    Raises:
        ResourceExhausted: If the array cannot be allocated.
    """
    try:
        return np.zeros(n * n, dtype=np.bool_)
    except (MemoryError, ValueError) as exc:
        raise ResourceExhausted(
            f"cannot allocate adjacency relation for {n} vertices "
            f"({n * n} cells)"
        ) from exc


def valid_slots(n: int, constraints: Constraints) -> np.ndarray:
    """Flat cell indices of every valid slot, one per logical edge.

    Undirected graphs use the lower triangle (diagonal included unless
    self-loops are forbidden) as the canonical representative of each edge.
    """
    constraints = Constraints(constraints)
    mask = np.ones((n, n), dtype=np.bool_)
    if constraints.undirected:
        mask = np.tril(mask)
    if constraints.no_self_loop:
        np.fill_diagonal(mask, False)
    return np.flatnonzero(mask)


def _fill_from_empty_slots(
    cells: np.ndarray,
    n: int,
    count: int,
    constraints: Constraints,
    rng: np.random.Generator,
) -> None:
    """Place `count` edges drawn uniformly from the still-empty valid slots.

    Raises:
        ResourceExhausted: If the slot index arrays cannot be allocated.
    """
    try:
        slots = valid_slots(n, constraints)
        empty = slots[~cells[slots]]
        chosen = rng.choice(empty, size=count, replace=False)
    except MemoryError as exc:
        raise ResourceExhausted(
            f"cannot enumerate empty slots for {n} vertices"
        ) from exc
    cells[chosen] = True
    if constraints.undirected:
        rows, cols = np.divmod(chosen, n)
        cells[cols * n + rows] = True


def sample_graph(
    n: int,
    m: int,
    constraints: Constraints,
    rng: np.random.Generator,
    dense_fraction: float = DEFAULT_DENSE_FRACTION,
) -> AdjacencyRelation:
    """Sample a uniformly random simple graph with exactly m edges.

    Args:
        n: Number of vertices (>= 0).
        m: Number of logical edges (0 <= m <= max_edges(n, constraints)).
        constraints: Directedness and self-loop policy.
        rng: Explicit random source; the sampler never touches global state.
        dense_fraction: Empty-slot fraction below which the remaining edges
            are drawn from the enumerated empty slots. 0 disables the switch.

    Returns:
        Read-only AdjacencyRelation with exactly m logical edges.

    Raises:
        InvalidParameters: If the counts violate the constraint-specific bound.
        ResourceExhausted: If the n * n cell array or the empty-slot index
            arrays cannot be allocated.
    """
    constraints = Constraints(constraints)
    validate_parameters(n, m, constraints)

    cells = allocate_cells(n)
    total_slots = max_edges(n, constraints)
    undirected = constraints.undirected
    no_self_loop = constraints.no_self_loop

    remaining = m
    draws = 0
    rejections = 0
    while remaining > 0:
        empty_slots = total_slots - (m - remaining)
        if empty_slots < dense_fraction * total_slots:
            log.debug(
                "Switching to slot enumeration: %d of %d slots empty, "
                "%d edges left",
                empty_slots,
                total_slots,
                remaining,
            )
            _fill_from_empty_slots(cells, n, remaining, constraints, rng)
            remaining = 0
            break

        r = int(rng.integers(n))
        c = int(rng.integers(n))
        draws += 1
        # Undirected edges are only placed through their lower-triangle cell
        if (
            cells[r * n + c]
            or (no_self_loop and r == c)
            or (undirected and c > r)
        ):
            rejections += 1
            continue

        log.debug("(%d,%d)", r, c)
        cells[r * n + c] = True
        if undirected:
            cells[c * n + r] = True
        remaining -= 1

    cells.setflags(write=False)
    log.info(
        "Sampled graph (n=%d, edges=%d, %s) in %d draws, %d rejected",
        n,
        m,
        describe_constraints(constraints),
        draws,
        rejections,
    )
    return AdjacencyRelation(cells=cells, n=n, constraints=constraints)
