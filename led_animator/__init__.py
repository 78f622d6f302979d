"""LED Animator - Pixel Matrix Animation Editor

Layered animations for a fixed LED matrix, exported as firmware headers,
raw bitmaps and lossless project files.
"""

__version__ = '1.0.0'

from . import core

__all__ = ['core']
