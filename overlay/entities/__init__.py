"""
Entity classes for the overlay.
"""
from .horn import Horn, HornConfig

__all__ = ["Horn", "HornConfig"]
