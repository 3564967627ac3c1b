"""Run configuration dataclasses — all frozen and slotted for immutability."""

from dataclasses import dataclass, field

from randdot.dot.writer import DEFAULT_OUTPUT
from randdot.graph.sampler import DEFAULT_DENSE_FRACTION
from randdot.graph.types import Constraints


@dataclass(frozen=True, slots=True)
class GraphConfig:
    """Random graph parameters."""

    n_vertices: int = 0
    n_edges: int = 0
    undirected: bool = False
    no_self_loop: bool = False
    dense_fraction: float = DEFAULT_DENSE_FRACTION  # slot enumeration threshold

    def __post_init__(self) -> None:
        if self.n_vertices < 0:
            raise ValueError(
                f"n_vertices must be >= 0, got {self.n_vertices}"
            )
        if self.n_edges < 0:
            raise ValueError(f"n_edges must be >= 0, got {self.n_edges}")
        if not 0.0 <= self.dense_fraction <= 1.0:
            raise ValueError(
                f"dense_fraction must be in [0, 1], got {self.dense_fraction}"
            )

    @property
    def constraints(self) -> Constraints:
        flags = Constraints.NONE
        if self.undirected:
            flags |= Constraints.UNDIRECTED
        if self.no_self_loop:
            flags |= Constraints.NO_SELF_LOOP
        return flags


@dataclass(frozen=True, slots=True)
class RunConfig:
    """Top-level configuration for one generation run.

    seed=None means the random source is seeded from OS entropy at run time.
    """

    graph: GraphConfig = field(default_factory=GraphConfig)
    seed: int | None = None
    output: str = str(DEFAULT_OUTPUT)
    description: str = ""  # free-text label, shown in logs and --dry-run

    def __post_init__(self) -> None:
        if not self.output:
            raise ValueError("output path must not be empty")
        if self.seed is not None and self.seed < 0:
            raise ValueError(f"seed must be >= 0, got {self.seed}")
