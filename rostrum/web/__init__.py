"""Web interface for the Rostrum debate arena."""

from .api import create_app

__all__ = ["create_app"]
