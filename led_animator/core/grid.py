"""
Grid primitive - fixed-size boolean pixel matrix for one frame of one layer
"""

from typing import FrozenSet, Iterator, List, Optional, Sequence, Tuple

from .config import GridConfig, DEFAULT_CONFIG


Point = Tuple[int, int]
Overflow = FrozenSet[Point]

EMPTY_OVERFLOW: Overflow = frozenset()


class Grid:
    """
    Boolean matrix of config.height rows by config.width columns

    Writes outside the matrix are ignored; reads outside it return False.
    """

    def __init__(self, width: int = DEFAULT_CONFIG.width, height: int = DEFAULT_CONFIG.height,
                 rows: Optional[List[List[bool]]] = None):
        self.width = width
        self.height = height
        if rows is None:
            rows = [[False] * width for _ in range(height)]
        self.rows = rows

    @classmethod
    def empty(cls, config: GridConfig = DEFAULT_CONFIG) -> 'Grid':
        return cls(config.width, config.height)

    @classmethod
    def from_int_rows(cls, data: Sequence[Sequence[int]], config: GridConfig = DEFAULT_CONFIG) -> 'Grid':
        """
        Build a grid from a 0/1 matrix, reading only what fits inside config bounds

        Missing rows or columns stay unlit.
        """
        grid = cls.empty(config)
        for y, row in enumerate(data[:config.height]):
            if not isinstance(row, (list, tuple)):
                continue
            for x, value in enumerate(row[:config.width]):
                if value:
                    grid.rows[y][x] = True
        return grid

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def get(self, x: int, y: int) -> bool:
        if self.in_bounds(x, y):
            return self.rows[y][x]
        return False

    def set(self, x: int, y: int, value: bool = True):
        if self.in_bounds(x, y):
            self.rows[y][x] = bool(value)

    def is_blank(self) -> bool:
        return not any(any(row) for row in self.rows)

    def lit_cells(self) -> Iterator[Point]:
        """Yield (x, y) for every lit cell in row-major order"""
        for y, row in enumerate(self.rows):
            for x, on in enumerate(row):
                if on:
                    yield x, y

    def lit_count(self) -> int:
        return sum(sum(1 for on in row if on) for row in self.rows)

    def to_int_rows(self) -> List[List[int]]:
        return [[1 if on else 0 for on in row] for row in self.rows]

    def copy(self) -> 'Grid':
        """Create a deep copy of this grid"""
        return Grid(self.width, self.height, [list(row) for row in self.rows])

    def __eq__(self, other):
        if not isinstance(other, Grid):
            return NotImplemented
        return self.width == other.width and self.height == other.height and self.rows == other.rows

    # Mutable, so never usable as a dict key or set member
    __hash__ = None

    def __repr__(self):
        return f"Grid({self.width}x{self.height}, lit={self.lit_count()})"


def format_point(point: Point) -> str:
    x, y = point
    return f"{x},{y}"


def parse_point(key: str) -> Optional[Point]:
    """Parse an "x,y" overflow key; returns None when either part is not an integer"""
    parts = str(key).split(',')
    if len(parts) != 2:
        return None
    try:
        return int(parts[0].strip()), int(parts[1].strip())
    except ValueError:
        return None


def overflow_from_keys(keys) -> Overflow:
    points = set()
    for key in keys or []:
        point = parse_point(key)
        if point is not None:
            points.add(point)
    return frozenset(points)


def overflow_to_keys(overflow: Overflow) -> List[str]:
    # Sorted so serialized projects are stable between saves
    return [format_point(p) for p in sorted(overflow, key=lambda p: (p[1], p[0]))]
