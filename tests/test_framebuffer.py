import pytest

from galtonboard.font import glyph
from galtonboard.framebuffer import FrameBuffer, RenderArea

BLANK_SCREEN = bytes(128 * 64 // 8)


def lit_pixels(fb):
    return {
        (x, y)
        for y in range(fb.height)
        for x in range(fb.width)
        if fb.get_pixel(x, y)
    }


def test_full_render_area_covers_buffer():
    fb = FrameBuffer()
    assert RenderArea().buffer_length() == len(fb.to_bytes())


def test_render_area_single_cell():
    area = RenderArea(start_column=5, end_column=5, start_page=2, end_page=2)
    assert area.buffer_length() == 1


def test_new_buffer_is_blank():
    fb = FrameBuffer()
    assert fb.to_bytes() == BLANK_SCREEN
    assert lit_pixels(fb) == set()


def test_set_pixel_round_trip():
    fb = FrameBuffer()
    fb.set_pixel(3, 10, True)
    assert fb.get_pixel(3, 10)
    assert lit_pixels(fb) == {(3, 10)}
    fb.set_pixel(3, 10, False)
    assert not fb.get_pixel(3, 10)
    assert fb.to_bytes() == BLANK_SCREEN


def test_pixel_memory_layout():
    fb = FrameBuffer()
    fb.set_pixel(3, 10)
    data = fb.to_bytes()
    assert data[fb.width + 3] == 0x04
    assert sum(1 for b in data if b) == 1


@pytest.mark.parametrize("x, y", [(-1, 0), (0, -1), (128, 0), (0, 64)])
def test_set_pixel_out_of_range(x, y):
    fb = FrameBuffer()
    with pytest.raises(ValueError):
        fb.set_pixel(x, y, True)


def test_invalid_size_rejected():
    with pytest.raises(ValueError):
        FrameBuffer(128, 30)


def test_clear():
    fb = FrameBuffer()
    fb.draw_line(0, 0, 127, 63, True)
    assert fb.get_pixel(0, 0)
    fb.clear()
    assert fb.to_bytes() == BLANK_SCREEN
    assert lit_pixels(fb) == set()


def test_horizontal_line():
    fb = FrameBuffer()
    fb.draw_line(10, 20, 30, 20, True)
    assert lit_pixels(fb) == {(x, 20) for x in range(10, 31)}


def test_vertical_line_reversed():
    fb = FrameBuffer()
    fb.draw_line(7, 40, 7, 5, True)
    assert lit_pixels(fb) == {(7, y) for y in range(5, 41)}


def test_diagonal_line():
    fb = FrameBuffer()
    fb.draw_line(0, 0, 15, 15, True)
    assert lit_pixels(fb) == {(i, i) for i in range(16)}


def test_line_endpoints_and_erase():
    fb = FrameBuffer()
    fb.draw_line(2, 3, 50, 17, True)
    assert fb.get_pixel(2, 3) and fb.get_pixel(50, 17)
    fb.draw_line(2, 3, 50, 17, False)
    assert fb.to_bytes() == BLANK_SCREEN


def test_draw_char_writes_glyph():
    fb = FrameBuffer()
    fb.draw_char(0, 0, "A")
    assert fb.to_bytes()[:8] == glyph("A")


def test_draw_char_uses_page_of_y():
    fb = FrameBuffer()
    fb.draw_char(4, 9, "b")
    data = fb.to_bytes()
    assert data[fb.width + 4:fb.width + 12] == glyph("B")
    assert data[:fb.width] == bytes(fb.width)


def test_draw_char_out_of_bounds_ignored():
    fb = FrameBuffer()
    fb.draw_char(121, 0, "A")
    fb.draw_char(0, 57, "A")
    assert fb.to_bytes() == BLANK_SCREEN
    assert lit_pixels(fb) == set()


def test_draw_string():
    fb = FrameBuffer()
    fb.draw_string(0, 0, "AB")
    assert fb.to_bytes()[:16] == glyph("A") + glyph("B")


def test_draw_string_clips_at_right_edge():
    fb = FrameBuffer()
    fb.draw_string(120, 0, "AB")
    data = fb.to_bytes()
    assert data[120:128] == glyph("A")
    assert data[128:] == bytes(len(data) - 128)


def test_draw_string_start_out_of_bounds_ignored():
    fb = FrameBuffer()
    fb.draw_string(0, 60, "HELLO")
    assert fb.to_bytes() == BLANK_SCREEN
    assert lit_pixels(fb) == set()


def test_render_text_shape():
    fb = FrameBuffer(16, 8)
    fb.set_pixel(2, 1)
    rows = fb.render_text().split("\n")
    assert len(rows) == 8
    assert all(len(row) == 16 for row in rows)
    assert rows[1][2] == "#"
    assert fb.render_text().count("#") == 1