"""Random simple graph generation with Graphviz dot output."""

__version__ = "1.0.0"
