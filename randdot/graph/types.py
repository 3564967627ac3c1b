"""Graph data structures: constraint flags and the adjacency relation."""

import enum
from dataclasses import dataclass

import numpy as np


class Constraints(enum.IntFlag):
    """Structural constraints a sampled graph must satisfy.

    The empty set (NONE) means a directed graph with self-loops permitted.
    """

    NONE = 0x00
    UNDIRECTED = 0x01
    NO_SELF_LOOP = 0x02

    @property
    def undirected(self) -> bool:
        return bool(self & Constraints.UNDIRECTED)

    @property
    def no_self_loop(self) -> bool:
        return bool(self & Constraints.NO_SELF_LOOP)


@dataclass(frozen=True)
class AdjacencyRelation:
    """Immutable container for a sampled adjacency relation.

    Cells are stored in one flat row-major boolean array of length n * n,
    so cell (i, j) lives at index i * n + j. Uses frozen=True but omits
    slots=True since numpy arrays don't interact well with __slots__.
    """

    cells: np.ndarray  # bool array of length n * n, row-major
    n: int  # number of vertices
    constraints: Constraints

    @property
    def matrix(self) -> np.ndarray:
        """(n, n) view over the flat cell array (no copy)."""
        return self.cells.reshape(self.n, self.n)

    def has_edge(self, i: int, j: int) -> bool:
        return bool(self.cells[i * self.n + j])

    def edge_count(self) -> int:
        """Number of logical edges.

        For undirected graphs an off-diagonal edge occupies two cells but
        counts once; a self-loop occupies a single diagonal cell.
        """
        total = int(np.count_nonzero(self.cells))
        if not self.constraints.undirected:
            return total
        loops = int(np.count_nonzero(np.diagonal(self.matrix)))
        return (total - loops) // 2 + loops
