"""
deployment/ - REST surface
"""

from .api import create_app, create_hydrostatics_router

__all__ = [
    "create_app",
    "create_hydrostatics_router",
]
