"""Sprite drawing and the draw-pending protocol."""

from __future__ import annotations

import numpy as np
import pytest

from chip8vm import Interpreter, OutOfRangeError
from chip8vm.font import glyph_address, glyph_bitmap


def _draw_glyph_zero(load_words, x: int = 0, y: int = 0) -> Interpreter:
    # LD I, 0x000 ; LD V0, x ; LD V1, y ; DRW V0, V1, 5
    vm = load_words(0xA000 | glyph_address(0), 0x6000 | x, 0x6100 | y, 0xD015)
    for _ in range(4):
        vm.step()
    return vm


def test_glyph_zero_matches_font_bits(load_words) -> None:
    vm = _draw_glyph_zero(load_words)
    fb = vm.framebuffer()

    expected = np.zeros((32, 64), dtype=bool)
    expected[:5, :8] = np.array(glyph_bitmap(0), dtype=bool)
    assert np.array_equal(fb, expected)
    assert vm.registers[0xF] == 0
    assert vm.pc == 0x208
    assert vm.is_draw_pending()


def test_second_draw_erases_and_sets_flag(load_words) -> None:
    # Second DRW at the same spot, then loop.
    vm = load_words(0xA000, 0x6000, 0x6100, 0xD015, 0xD015)
    for _ in range(4):
        vm.step()
    assert vm.registers[0xF] == 0

    vm.step()
    assert vm.registers[0xF] == 1
    assert not vm.framebuffer().any()


def test_partial_overlap_sets_flag(load_words) -> None:
    # Draw "0" at (0, 0), then "0" again one column right: shared lit pixels turn off.
    vm = load_words(0xA000, 0x6000, 0x6100, 0xD015, 0x6001, 0xD015)
    for _ in range(6):
        vm.step()
    assert vm.registers[0xF] == 1
    assert vm.display.get(0, 0) is True
    assert vm.display.get(1, 0) is False


def test_drawing_wraps_columns_and_rows(load_words) -> None:
    # Glyph "0" with its top-left pixel at (63, 31).
    vm = _draw_glyph_zero(load_words, x=63, y=31)
    display = vm.display

    # Row 0 of the glyph (0xF0) lands on row 31: columns 63, 0, 1, 2.
    for col in (63, 0, 1, 2):
        assert display.get(col, 31)
    assert not display.get(3, 31)
    # Rows 1..4 wrap to rows 0..3; 0x90 lights columns 63 and 2.
    for row in (0, 1, 2):
        assert display.get(63, row)
        assert display.get(2, row)
        assert not display.get(0, row)
    assert vm.registers[0xF] == 0


def test_coordinates_reduced_modulo_display_size(load_words) -> None:
    # V0 = 64 + 4, V1 = 32 + 2 behaves as (4, 2).
    vm = _draw_glyph_zero(load_words, x=68, y=34)
    assert vm.display.get(4, 2)
    assert vm.display.get(7, 2)
    assert vm.framebuffer().sum() == 14


def test_draw_with_flag_register_as_coordinate(load_words) -> None:
    # VF = 10 is used as X before the draw resets it.
    vm = load_words(0xA000, 0x6F0A, 0x6100, 0xDF15)
    for _ in range(4):
        vm.step()
    assert vm.display.get(10, 0)
    assert not vm.display.get(0, 0)


def test_zero_row_draw_clears_flag_and_marks_dirty(load_words) -> None:
    vm = load_words(0x6FFF, 0xD010)
    vm.step()
    vm.clear_draw_pending()
    vm.step()
    assert vm.registers[0xF] == 0
    assert vm.is_draw_pending()
    assert not vm.framebuffer().any()


def test_sprite_past_end_of_memory_draws_nothing(vm: Interpreter) -> None:
    vm.load(bytes([0xD0, 0x15]))
    vm.index = 0xFFE

    with pytest.raises(OutOfRangeError):
        vm.step()
    assert not vm.framebuffer().any()
    assert not vm.is_draw_pending()
    assert vm.pc == 0x200


def test_draw_pending_protocol(load_words) -> None:
    vm = load_words(0x00E0, 0x6000)
    assert not vm.is_draw_pending()

    vm.step()
    assert vm.is_draw_pending()
    vm.clear_draw_pending()
    assert not vm.is_draw_pending()

    # Non-drawing instructions leave it alone.
    vm.step()
    assert not vm.is_draw_pending()


def test_framebuffer_view_is_read_only(load_words) -> None:
    vm = _draw_glyph_zero(load_words)
    fb = vm.framebuffer()
    assert fb.shape == (32, 64)
    with pytest.raises(ValueError):
        fb[0, 0] = False
    assert vm.display.get(0, 0)
