"""
Overlay systems - frame driving and collection management.
"""
from .frame_driver import FrameDriver

__all__ = ["FrameDriver"]
