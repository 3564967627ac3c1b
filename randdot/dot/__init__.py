"""Graphviz dot output for sampled graphs."""

from randdot.dot.writer import (
    DEFAULT_OUTPUT,
    iter_dot_statements,
    render_dot,
    write_dot_file,
)

__all__ = [
    "DEFAULT_OUTPUT",
    "iter_dot_statements",
    "render_dot",
    "write_dot_file",
]
