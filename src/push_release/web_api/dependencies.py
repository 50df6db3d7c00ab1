"""
Request dependencies.

The relay configuration and the orchestrators are built once per process on
first use; tests replace :func:`get_orchestrators` through
``app.dependency_overrides``.
"""
from functools import lru_cache

from push_release.api import Orchestrators, build_orchestrators
from push_release.core.config import RelayConfig, load_config


@lru_cache(maxsize=1)
def get_relay_config() -> RelayConfig:
    return load_config()


@lru_cache(maxsize=1)
def get_orchestrators() -> Orchestrators:
    return build_orchestrators(get_relay_config())
