from led_animator.core.bitcodec import (bytes_per_frame, pack_bytes, pack_words, unpack_bytes,
                                        unpack_words)
from led_animator.core.config import GridConfig
from led_animator.core.grid import Grid


def test_bytes_per_frame(config):
    assert bytes_per_frame(config) == 31
    assert bytes_per_frame(GridConfig(width=4, height=2)) == 1
    assert bytes_per_frame(GridConfig(width=3, height=3)) == 2


def test_origin_cell_packing(origin_grid):
    data = pack_bytes(origin_grid)
    assert len(data) == 31
    assert data[0] == 0x01
    assert not any(data[1:])

    words = pack_words(origin_grid)
    assert len(words) == 9
    assert words[0] == 0x80000000
    assert not any(words[1:])


def test_byte_packing_is_lsb_first(config):
    grid = Grid.empty(config)
    grid.set(7, 0, True)
    grid.set(8, 0, True)
    grid.set(0, 1, True)  # bit 27
    data = pack_bytes(grid)
    assert data[0] == 0x80
    assert data[1] == 0x01
    assert data[3] == 0x08


def test_word_packing_last_column(config):
    grid = Grid.empty(config)
    grid.set(26, 4, True)
    assert pack_words(grid)[4] == 1 << 5


def test_round_trips(config, pattern_grid):
    assert unpack_bytes(pack_bytes(pattern_grid), config.width, config.height, config) == pattern_grid
    assert unpack_words(pack_words(pattern_grid), config.width, config.height, config) == pattern_grid


def test_unpack_words_from_wider_taller_source(config):
    words = [0xFFFFFFFF] * 12
    grid = unpack_words(words, 32, 12, config)
    assert grid.lit_count() == config.width * config.height


def test_unpack_words_from_smaller_source(config):
    grid = unpack_words([0xFFFFFFFF, 0xFFFFFFFF], 4, 2, config)
    assert set(grid.lit_cells()) == {(x, y) for y in range(2) for x in range(4)}


def test_unpack_words_masks_to_32_bits(config):
    grid = unpack_words([(1 << 40) | 0x80000000], 27, 1, config)
    assert list(grid.lit_cells()) == [(0, 0)]


def test_unpack_bytes_with_other_source_width(config):
    # 4 wide source: bit 4 is cell (0, 1)
    grid = unpack_bytes([0b00010001], 4, 2, config)
    assert set(grid.lit_cells()) == {(0, 0), (0, 1)}


def test_unpack_bytes_short_data(config):
    grid = unpack_bytes([0xFF], config.width, config.height, config)
    assert set(grid.lit_cells()) == {(x, 0) for x in range(8)}
    assert unpack_bytes([], config.width, config.height, config).is_blank()
