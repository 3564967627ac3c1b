"""Random simple graph sampling under directedness/self-loop constraints."""

from randdot.graph.sampler import (
    DEFAULT_DENSE_FRACTION,
    describe_constraints,
    max_edges,
    sample_graph,
    valid_slots,
    validate_parameters,
)
from randdot.graph.types import AdjacencyRelation, Constraints
from randdot.graph.validation import validate_adjacency

__all__ = [
    "AdjacencyRelation",
    "Constraints",
    "DEFAULT_DENSE_FRACTION",
    "describe_constraints",
    "max_edges",
    "sample_graph",
    "valid_slots",
    "validate_adjacency",
    "validate_parameters",
]
