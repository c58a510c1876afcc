"""Text generation: provider abstraction and model manager."""

from .manager import ModelManager

__all__ = ["ModelManager"]
