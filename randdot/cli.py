"""Command-line entry point for generating random dot graphs.

Chains the run stages into a single command:
seeding -> graph sampling -> dot file writing.

Usage:
    randdot 10 20
    randdot 10 20 --type undirected --no-self-loop --output graph.dot
    randdot --config run.json --seed 42 --verbose
"""

import argparse
import logging
import re
import sys
import time
from contextlib import contextmanager
from dataclasses import replace
from pathlib import Path
from typing import Generator

from dacite import DaciteError

from randdot.config import DEFAULT_CONFIG, RunConfig, config_from_json, config_hash
from randdot.dot import write_dot_file
from randdot.errors import InvalidParameters, IoFailure, ResourceExhausted
from randdot.graph import (
    describe_constraints,
    max_edges,
    sample_graph,
    validate_parameters,
)
from randdot.reproducibility import make_rng

log = logging.getLogger(__name__)

INT_MAX = 2**31 - 1

EXIT_INVALID = 1
EXIT_RESOURCE = 3
EXIT_IO = 4

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


def filter_input(text: str) -> int:
    """Parse a count the lenient way: clamp into [0, INT_MAX].

    Only the leading decimal integer is read; text without one yields 0.
    """
    match = _LEADING_INT.match(text)
    if match is None:
        return 0
    value = int(match.group(1))
    if value > INT_MAX:
        return INT_MAX
    if value < 0:
        return 0
    return value


@contextmanager
def stage_timer(name: str) -> Generator[None, None, None]:
    """Context manager that logs stage start and elapsed time."""
    log.info("Starting: %s", name)
    t0 = time.monotonic()
    yield
    elapsed = time.monotonic() - t0
    log.info("Completed: %s in %.3fs", name, elapsed)


def run_generation(config: RunConfig) -> Path:
    """Sample one graph and write it as a dot file.

    Args:
        config: Full run configuration.

    Returns:
        Path to the written dot file.

    Raises:
        InvalidParameters: Before any work if the counts are out of bounds.
        ResourceExhausted: If the adjacency relation cannot be allocated.
        IoFailure: If the output file cannot be written.
    """
    graph_cfg = config.graph
    constraints = graph_cfg.constraints
    validate_parameters(graph_cfg.n_vertices, graph_cfg.n_edges, constraints)

    log.info("Config hash: %s", config_hash(config))
    if config.description:
        log.info("Description: %s", config.description)

    with stage_timer("Seeding"):
        rng, seed = make_rng(config.seed)

    with stage_timer("Graph Sampling"):
        adj = sample_graph(
            graph_cfg.n_vertices,
            graph_cfg.n_edges,
            constraints,
            rng,
            dense_fraction=graph_cfg.dense_fraction,
        )

    with stage_timer("Dot Writing"):
        path = write_dot_file(adj, config.output)

    log.info("Graph written to %s (seed=%d)", path, seed)
    return path


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="randdot",
        description="Generate a random simple graph in Graphviz dot format",
    )
    parser.add_argument(
        "vertices",
        nargs="?",
        type=filter_input,
        help="Number of vertices (clamped to [0, INT_MAX])",
    )
    parser.add_argument(
        "edges",
        nargs="?",
        type=filter_input,
        help="Number of edges (default 0, clamped to [0, INT_MAX])",
    )
    parser.add_argument(
        "--type",
        choices=("directed", "undirected"),
        default=None,
        help="Graph type (default: directed)",
    )
    parser.add_argument(
        "--no-self-loop",
        action="store_true",
        help="Forbid edges from a vertex to itself",
    )
    parser.add_argument(
        "--output",
        type=str,
        default=None,
        help=f"Output file (default: {DEFAULT_CONFIG.output})",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Random seed (default: drawn from OS entropy)",
    )
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Path to run config JSON file; command-line values override it",
    )
    parser.add_argument(
        "--clamp-edges",
        action="store_true",
        help="Clamp the edge count to the maximum instead of failing",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Show the run plan without generating anything",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable DEBUG-level logging",
    )
    return parser


def config_from_args(args: argparse.Namespace) -> RunConfig:
    """Merge command-line values over the config file (or defaults).

    Raises:
        ValueError: If the merged config is invalid.
    """
    if args.config is not None:
        config = config_from_json(Path(args.config).read_text())
    else:
        config = DEFAULT_CONFIG

    graph = config.graph
    graph_overrides: dict = {}
    if args.vertices is not None:
        graph_overrides["n_vertices"] = args.vertices
        # A bare vertex count means "no edges" unless edges are given too
        graph_overrides["n_edges"] = 0
    if args.edges is not None:
        graph_overrides["n_edges"] = args.edges
    if args.type is not None:
        graph_overrides["undirected"] = args.type == "undirected"
    if args.no_self_loop:
        graph_overrides["no_self_loop"] = True
    if graph_overrides:
        graph = replace(graph, **graph_overrides)

    if args.clamp_edges:
        limit = max_edges(graph.n_vertices, graph.constraints)
        if graph.n_edges > limit:
            log.warning(
                "Edge count %d clamped to maximum %d", graph.n_edges, limit
            )
            graph = replace(graph, n_edges=limit)

    overrides: dict = {"graph": graph}
    if args.output is not None:
        overrides["output"] = args.output
    if args.seed is not None:
        overrides["seed"] = args.seed
    return replace(config, **overrides)


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)

    # Configure logging
    log_level = logging.DEBUG if args.verbose else logging.INFO
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.vertices is None and args.config is None:
        parser.error("Missing parameters: the vertex count is required")

    try:
        config = config_from_args(args)
    except (OSError, ValueError, TypeError, DaciteError) as exc:
        print(f"Error: invalid configuration: {exc}", file=sys.stderr)
        sys.exit(EXIT_INVALID)

    graph = config.graph
    if args.dry_run:
        limit = max_edges(graph.n_vertices, graph.constraints)
        print(f"Config hash: {config_hash(config)}")
        print(f"Graph:       n={graph.n_vertices}, m={graph.n_edges} "
              f"(max {limit}), {describe_constraints(graph.constraints)}")
        print(f"Seed:        {config.seed if config.seed is not None else 'OS entropy'}")
        print(f"Output:      {config.output}")
        if config.description:
            print(f"Description: {config.description}")
        print("\n[dry-run] Config loaded successfully. Exiting.")
        return

    try:
        run_generation(config)
    except InvalidParameters as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(EXIT_INVALID)
    except ResourceExhausted as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(EXIT_RESOURCE)
    except IoFailure as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(EXIT_IO)


if __name__ == "__main__":
    main()
