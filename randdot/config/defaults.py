"""Default configuration — single source of truth for default run parameters."""

from randdot.config.experiment import RunConfig

# Empty directed graph with self-loops allowed, written to RandomGraph.txt
# with an OS-entropy seed.
DEFAULT_CONFIG = RunConfig()
