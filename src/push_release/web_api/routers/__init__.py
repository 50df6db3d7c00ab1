"""
API Routers
===========
Each router handles a specific domain of the API.
"""
from . import health, push

__all__ = ["health", "push"]
