import random
import string
from typing import Tuple

from PIL import Image


_ID_ALPHABET = string.digits + string.ascii_lowercase


def generate_layer_id(name: str) -> str:
    suffix = ''.join(random.choices(_ID_ALPHABET, k=10))
    return f"{name}-{suffix}"


def to_int(value, default: int = 0) -> int:
    """Best-effort integer conversion for values read from imported files"""
    if isinstance(value, bool):
        return int(value)
    try:
        return int(value)
    except (TypeError, ValueError, OverflowError):
        pass
    try:
        return int(float(value))
    except (TypeError, ValueError, OverflowError):
        return default


def create_background(size: Tuple[int, int], color: Tuple[int, int, int] = (0, 0, 0)) -> Image.Image:
    return Image.new('RGB', size, color)
