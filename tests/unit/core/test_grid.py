import pytest

from led_animator.core.config import GridConfig
from led_animator.core.grid import (Grid, format_point, overflow_from_keys, overflow_to_keys,
                                    parse_point)


def test_empty_grid_dimensions(config):
    grid = Grid.empty(config)
    assert grid.width == 27 and grid.height == 9
    assert len(grid.rows) == 9 and all(len(row) == 27 for row in grid.rows)
    assert grid.is_blank()


def test_set_out_of_bounds_is_ignored(config):
    grid = Grid.empty(config)
    grid.set(-1, 0, True)
    grid.set(27, 0, True)
    grid.set(0, 9, True)
    assert grid.is_blank()
    assert grid.get(100, 100) is False


def test_copy_is_independent(origin_grid):
    clone = origin_grid.copy()
    clone.set(5, 5, True)
    assert origin_grid.get(5, 5) is False
    assert clone != origin_grid


def test_lit_cells_row_major(config):
    grid = Grid.empty(config)
    grid.set(4, 2, True)
    grid.set(1, 0, True)
    grid.set(0, 2, True)
    assert list(grid.lit_cells()) == [(1, 0), (0, 2), (4, 2)]
    assert grid.lit_count() == 3


def test_int_rows_fit_into_bounds():
    small = GridConfig(width=3, height=2)
    grid = Grid.from_int_rows([[1, 0, 1, 1, 1], [0, 1], [1, 1, 1]], small)
    assert grid.to_int_rows() == [[1, 0, 1], [0, 1, 0]]


def test_point_keys():
    assert format_point((3, -2)) == "3,-2"
    assert parse_point("3,-2") == (3, -2)
    assert parse_point(" 4 , 5 ") == (4, 5)
    assert parse_point("a,b") is None
    assert parse_point("1,2,3") is None


def test_overflow_keys_skip_malformed_and_dedupe():
    overflow = overflow_from_keys(["1,2", "1,2", "x,1", "-30,4"])
    assert overflow == frozenset({(1, 2), (-30, 4)})
    assert overflow_to_keys(overflow) == ["1,2", "-30,4"]


def test_grid_is_unhashable(origin_grid):
    with pytest.raises(TypeError):
        hash(origin_grid)
