"""push_release: webhook relay from CI release pipelines to on-chain release registries."""

__all__ = [
    "__version__",
    "build_orchestrators",
    "load_config",
    "RelayConfig",
]
__version__ = "0.1.0"

from push_release.api import build_orchestrators  # noqa: E402, F401
from push_release.core.config import RelayConfig, load_config  # noqa: E402, F401
