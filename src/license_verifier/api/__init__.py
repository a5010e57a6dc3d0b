"""Application factory for the license status endpoint."""
from .app import create_app

__all__ = ["create_app"]
