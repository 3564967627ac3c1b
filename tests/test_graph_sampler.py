"""Tests for random graph sampling, edge-count bounds, and validation."""

from unittest.mock import patch

import numpy as np
import pytest

from randdot.errors import InvalidParameters, ResourceExhausted
from randdot.graph import sampler
from randdot.graph.sampler import (
    max_edges,
    sample_graph,
    valid_slots,
    validate_parameters,
)
from randdot.graph.types import AdjacencyRelation, Constraints
from randdot.graph.validation import validate_adjacency

ALL_CONSTRAINTS = [
    Constraints.NONE,
    Constraints.NO_SELF_LOOP,
    Constraints.UNDIRECTED,
    Constraints.UNDIRECTED | Constraints.NO_SELF_LOOP,
]


class TestMaxEdges:
    """Tests for the constraint-specific edge bound."""

    def test_directed_with_self_loops(self) -> None:
        assert max_edges(5, Constraints.NONE) == 25

    def test_directed_no_self_loop(self) -> None:
        assert max_edges(5, Constraints.NO_SELF_LOOP) == 20

    def test_undirected_with_self_loops(self) -> None:
        assert max_edges(5, Constraints.UNDIRECTED) == 15

    def test_undirected_no_self_loop(self) -> None:
        flags = Constraints.UNDIRECTED | Constraints.NO_SELF_LOOP
        assert max_edges(5, flags) == 10

    @pytest.mark.parametrize("constraints", ALL_CONSTRAINTS)
    def test_zero_vertices(self, constraints: Constraints) -> None:
        assert max_edges(0, constraints) == 0

    @pytest.mark.parametrize("constraints", ALL_CONSTRAINTS)
    def test_matches_valid_slot_count(self, constraints: Constraints) -> None:
        for n in range(6):
            assert len(valid_slots(n, constraints)) == max_edges(n, constraints)

    def test_accepts_plain_int_flags(self) -> None:
        assert max_edges(4, 0x03) == 6


class TestParameterValidation:
    """Invalid counts are rejected before any allocation."""

    def test_negative_vertices(self) -> None:
        with pytest.raises(InvalidParameters, match="vertex count"):
            validate_parameters(-1, 0, Constraints.NONE)

    def test_negative_edges(self) -> None:
        with pytest.raises(InvalidParameters, match="edge count"):
            validate_parameters(3, -1, Constraints.NONE)

    def test_undirected_bound_is_not_the_directed_bound(self) -> None:
        """N=2, M=5 undirected fits under N^2 but exceeds N(N+1)/2 = 3."""
        rng = np.random.default_rng(0)
        with pytest.raises(InvalidParameters, match="exceeds the maximum of 3"):
            sample_graph(2, 5, Constraints.UNDIRECTED, rng)

    def test_no_self_loop_bound(self) -> None:
        rng = np.random.default_rng(0)
        with pytest.raises(InvalidParameters):
            sample_graph(3, 7, Constraints.NO_SELF_LOOP, rng)

    def test_rejection_happens_before_allocation(self) -> None:
        rng = np.random.default_rng(0)
        with patch("randdot.graph.sampler.allocate_cells") as alloc:
            with pytest.raises(InvalidParameters):
                sample_graph(2, 5, Constraints.UNDIRECTED, rng)
        alloc.assert_not_called()

    def test_invalid_parameters_is_a_value_error(self) -> None:
        with pytest.raises(ValueError):
            validate_parameters(-3, 0, Constraints.NONE)


class TestSampleGraph:
    """Tests for the sampled adjacency relation."""

    @pytest.mark.parametrize("constraints", ALL_CONSTRAINTS)
    def test_exact_edge_count(self, constraints: Constraints) -> None:
        rng = np.random.default_rng(42)
        adj = sample_graph(20, 37, constraints, rng)
        assert adj.edge_count() == 37

    @pytest.mark.parametrize("constraints", ALL_CONSTRAINTS)
    def test_result_satisfies_constraints(
        self, constraints: Constraints
    ) -> None:
        rng = np.random.default_rng(7)
        adj = sample_graph(15, 40, constraints, rng)
        assert validate_adjacency(adj) == []

    def test_undirected_is_symmetric(self) -> None:
        rng = np.random.default_rng(3)
        adj = sample_graph(30, 100, Constraints.UNDIRECTED, rng)
        assert np.array_equal(adj.matrix, adj.matrix.T)

    def test_no_self_loop_diagonal_empty(self) -> None:
        rng = np.random.default_rng(3)
        adj = sample_graph(10, 80, Constraints.NO_SELF_LOOP, rng)
        assert not np.diagonal(adj.matrix).any()

    @pytest.mark.parametrize("constraints", ALL_CONSTRAINTS)
    def test_saturation_fills_every_valid_slot(
        self, constraints: Constraints
    ) -> None:
        n = 6
        rng = np.random.default_rng(11)
        adj = sample_graph(n, max_edges(n, constraints), constraints, rng)

        expected = np.ones((n, n), dtype=bool)
        if constraints.no_self_loop:
            np.fill_diagonal(expected, False)
        assert np.array_equal(adj.matrix, expected)

    def test_complete_triangle(self) -> None:
        flags = Constraints.UNDIRECTED | Constraints.NO_SELF_LOOP
        adj = sample_graph(3, 3, flags, np.random.default_rng(1))
        assert adj.edge_count() == 3
        for i, j in [(0, 1), (0, 2), (1, 2)]:
            assert adj.has_edge(i, j) and adj.has_edge(j, i)

    def test_zero_vertices_returns_empty_relation(self) -> None:
        rng = np.random.default_rng(0)
        adj = sample_graph(0, 0, Constraints.NONE, rng)
        assert adj.n == 0
        assert adj.cells.shape == (0,)
        assert adj.edge_count() == 0

    def test_zero_vertices_draws_nothing(self) -> None:
        rng = np.random.default_rng(0)
        state = rng.bit_generator.state
        sample_graph(0, 0, Constraints.NONE, rng)
        assert rng.bit_generator.state == state

    def test_zero_edges(self) -> None:
        adj = sample_graph(8, 0, Constraints.NONE, np.random.default_rng(0))
        assert not adj.cells.any()

    def test_cells_are_flat_and_read_only(self) -> None:
        adj = sample_graph(5, 4, Constraints.NONE, np.random.default_rng(0))
        assert adj.cells.shape == (25,)
        assert adj.cells.dtype == np.bool_
        with pytest.raises(ValueError):
            adj.cells[0] = True

    def test_same_seed_same_graph(self) -> None:
        a = sample_graph(25, 60, Constraints.NONE, np.random.default_rng(5))
        b = sample_graph(25, 60, Constraints.NONE, np.random.default_rng(5))
        assert np.array_equal(a.cells, b.cells)

    def test_pure_rejection_sampling(self) -> None:
        """dense_fraction=0 never switches to slot enumeration."""
        rng = np.random.default_rng(9)
        with patch("randdot.graph.sampler._fill_from_empty_slots") as fill:
            adj = sample_graph(
                5, 25, Constraints.NONE, rng, dense_fraction=0.0
            )
        fill.assert_not_called()
        assert adj.cells.all()

    def test_dense_fallback_used_near_saturation(self) -> None:
        rng = np.random.default_rng(9)
        flags = Constraints.UNDIRECTED | Constraints.NO_SELF_LOOP
        adj = sample_graph(40, 770, flags, rng, dense_fraction=0.5)
        assert adj.edge_count() == 770
        assert validate_adjacency(adj) == []

    def test_dense_fraction_one_enumerates_everything(self) -> None:
        rng = np.random.default_rng(2)
        adj = sample_graph(
            12, 30, Constraints.UNDIRECTED, rng, dense_fraction=1.0
        )
        assert adj.edge_count() == 30
        assert np.array_equal(adj.matrix, adj.matrix.T)

    def test_allocation_failure_raises_resource_exhausted(self) -> None:
        rng = np.random.default_rng(0)
        with patch(
            "randdot.graph.sampler.np.zeros", side_effect=MemoryError
        ):
            with pytest.raises(ResourceExhausted):
                sample_graph(10, 5, Constraints.NONE, rng)

    def test_fallback_allocation_failure_raises_resource_exhausted(
        self,
    ) -> None:
        rng = np.random.default_rng(0)
        with patch(
            "randdot.graph.sampler.np.ones", side_effect=MemoryError
        ):
            with pytest.raises(ResourceExhausted):
                sample_graph(
                    10, 5, Constraints.NONE, rng, dense_fraction=1.0
                )

    def test_fallback_index_failure_raises_resource_exhausted(self) -> None:
        rng = np.random.default_rng(0)
        with patch(
            "randdot.graph.sampler.np.flatnonzero", side_effect=MemoryError
        ):
            with pytest.raises(ResourceExhausted):
                sample_graph(
                    10, 5, Constraints.UNDIRECTED, rng, dense_fraction=1.0
                )


class TestValidateAdjacency:
    """Validation catches hand-built relations that break their constraints."""

    def test_detects_asymmetry(self) -> None:
        cells = np.zeros(9, dtype=bool)
        cells[0 * 3 + 1] = True
        adj = AdjacencyRelation(cells=cells, n=3, constraints=Constraints.UNDIRECTED)
        errors = validate_adjacency(adj)
        assert any("not symmetric" in e for e in errors)

    def test_detects_self_loop(self) -> None:
        cells = np.zeros(4, dtype=bool)
        cells[3] = True
        adj = AdjacencyRelation(
            cells=cells, n=2, constraints=Constraints.NO_SELF_LOOP
        )
        errors = validate_adjacency(adj)
        assert any("Self-loops" in e for e in errors)

    def test_detects_shape_mismatch(self) -> None:
        adj = AdjacencyRelation(
            cells=np.zeros(5, dtype=bool), n=2, constraints=Constraints.NONE
        )
        errors = validate_adjacency(adj)
        assert any("does not match" in e for e in errors)

    def test_valid_directed_relation(self) -> None:
        cells = np.array([True, True, False, True])
        adj = AdjacencyRelation(cells=cells, n=2, constraints=Constraints.NONE)
        assert validate_adjacency(adj) == []


class TestEdgeCount:
    """Logical edge counting."""

    def test_undirected_counts_pairs_once(self) -> None:
        # Edges 0--1 and self-loop 2--2
        m = np.zeros((3, 3), dtype=bool)
        m[0, 1] = m[1, 0] = True
        m[2, 2] = True
        adj = AdjacencyRelation(
            cells=m.ravel(), n=3, constraints=Constraints.UNDIRECTED
        )
        assert adj.edge_count() == 2

    def test_directed_counts_cells(self) -> None:
        m = np.zeros((3, 3), dtype=bool)
        m[0, 1] = m[1, 0] = True
        adj = AdjacencyRelation(cells=m.ravel(), n=3, constraints=Constraints.NONE)
        assert adj.edge_count() == 2


def _slot_frequencies(
    n: int,
    m: int,
    constraints: Constraints,
    trials: int,
    seed: int,
    dense_fraction: float = sampler.DEFAULT_DENSE_FRACTION,
) -> np.ndarray:
    """Fraction of trials in which each canonical slot received an edge."""
    slots = valid_slots(n, constraints)
    counts = np.zeros(len(slots))
    rng = np.random.default_rng(seed)
    for _ in range(trials):
        adj = sample_graph(n, m, constraints, rng, dense_fraction=dense_fraction)
        counts += adj.cells[slots]
    return counts / trials


class TestSlotDistribution:
    """Every valid slot is equally likely to receive an edge."""

    @pytest.mark.parametrize("constraints", ALL_CONSTRAINTS)
    def test_single_edge_uniform_over_slots(
        self, constraints: Constraints
    ) -> None:
        expected = 1 / max_edges(3, constraints)
        freqs = _slot_frequencies(3, 1, constraints, trials=6000, seed=123)
        assert np.all(np.abs(freqs - expected) < 0.2 * expected), freqs

    def test_undirected_pair_not_favoured_over_self_loops(self) -> None:
        """With two vertices the pair 1--2 is one of three slots."""
        rng = np.random.default_rng(2024)
        trials = 6000
        pairs = 0
        for _ in range(trials):
            adj = sample_graph(2, 1, Constraints.UNDIRECTED, rng)
            pairs += adj.has_edge(1, 0)
        assert abs(pairs / trials - 1 / 3) < 0.03

    def test_uniform_when_switching_to_enumeration_mid_run(self) -> None:
        """Three edges by rejection, the last one from the empty-slot list."""
        constraints = Constraints.UNDIRECTED
        with patch(
            "randdot.graph.sampler._fill_from_empty_slots",
            wraps=sampler._fill_from_empty_slots,
        ) as fill:
            freqs = _slot_frequencies(
                3, 4, constraints, trials=3000, seed=77, dense_fraction=0.6
            )
        assert fill.call_count == 3000
        assert all(call.args[2] == 1 for call in fill.call_args_list)
        expected = 4 / max_edges(3, constraints)
        assert np.all(np.abs(freqs - expected) < 0.1 * expected), freqs
