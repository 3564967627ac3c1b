"""Run configuration system with frozen, hashable, serializable dataclasses."""

from randdot.config.experiment import GraphConfig, RunConfig
from randdot.config.defaults import DEFAULT_CONFIG
from randdot.config.hashing import config_hash
from randdot.config.serialization import (
    config_from_dict,
    config_from_json,
    config_to_dict,
    config_to_json,
)

__all__ = [
    "GraphConfig",
    "RunConfig",
    "DEFAULT_CONFIG",
    "config_hash",
    "config_from_dict",
    "config_from_json",
    "config_to_dict",
    "config_to_json",
]
