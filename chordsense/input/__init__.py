"""Input layer - Audio file loading."""

from .loader import AudioLoader

__all__ = ["AudioLoader"]
