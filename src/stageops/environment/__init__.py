"""
Per-region env file storage and propagation.
"""

from .envfile import EnvMap, parse_env, serialize_env
from .propagator import EnvPropagator, RegionEnv, RegionWrite
from .store import EnvConfigStore

__all__ = [
    "EnvMap",
    "parse_env",
    "serialize_env",
    "EnvConfigStore",
    "EnvPropagator",
    "RegionEnv",
    "RegionWrite",
]
