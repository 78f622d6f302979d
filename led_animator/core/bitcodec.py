"""
Bit packing of merged frames

Two independent layouts, both scanning rows top to bottom and columns left to right:
- bytes: one bit per cell, LSB-first within each byte
- words: one 32-bit word per row, column 0 at bit 31
"""

from typing import List, Sequence

from .config import GridConfig, DEFAULT_CONFIG
from .grid import Grid


WORD_BITS = 32
WORD_MASK = 0xFFFFFFFF


def bytes_per_frame(config: GridConfig = DEFAULT_CONFIG) -> int:
    return (config.cell_count + 7) // 8


def pack_bytes(grid: Grid) -> List[int]:
    """Pack a grid into ceil(W*H/8) bytes; cell (0, 0) is bit 0 of byte 0"""
    data = [0] * ((grid.width * grid.height + 7) // 8)
    bit_index = 0
    for y in range(grid.height):
        for x in range(grid.width):
            if grid.rows[y][x]:
                data[bit_index >> 3] |= 1 << (bit_index & 7)
            bit_index += 1
    return data


def pack_words(grid: Grid) -> List[int]:
    """Pack each row into one word, left column in the most significant bit"""
    words = []
    for y in range(grid.height):
        value = 0
        for x in range(min(grid.width, WORD_BITS)):
            if grid.rows[y][x]:
                value |= 1 << (WORD_BITS - 1 - x)
        words.append(value & WORD_MASK)
    return words


def unpack_words(words: Sequence[int], src_width: int, src_height: int,
                 config: GridConfig = DEFAULT_CONFIG) -> Grid:
    """
    Rebuild a grid from row words written for a possibly different matrix size

    Source dimensions are clamped into the live grid, so extra columns and rows are
    ignored and missing ones stay unlit.
    """
    grid = Grid.empty(config)
    width = max(1, min(int(src_width), config.width, WORD_BITS))
    height = max(1, min(int(src_height), config.height))
    for y in range(min(height, len(words))):
        value = int(words[y]) & WORD_MASK
        for x in range(width):
            if (value >> (WORD_BITS - 1 - x)) & 1:
                grid.rows[y][x] = True
    return grid


def unpack_bytes(data: Sequence[int], src_width: int, src_height: int,
                 config: GridConfig = DEFAULT_CONFIG) -> Grid:
    """
    Rebuild a grid from an LSB-first bit stream laid out for src_width x src_height

    Bits that land outside the live grid, and reads past the end of `data`, are ignored.
    """
    grid = Grid.empty(config)
    bit_index = 0
    total_bits = len(data) * 8
    for y in range(max(0, int(src_height))):
        for x in range(max(0, int(src_width))):
            if bit_index >= total_bits:
                return grid
            byte = int(data[bit_index >> 3]) & 0xFF
            if (byte >> (bit_index & 7)) & 1:
                grid.set(x, y, True)
            bit_index += 1
    return grid
