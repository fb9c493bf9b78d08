"""Page-organised monochrome frame buffer in the SSD1306 memory layout."""

from __future__ import annotations

from dataclasses import dataclass

from galtonboard.font import GLYPH_WIDTH, glyph

PAGE_HEIGHT = 8
DEFAULT_WIDTH = 128
DEFAULT_HEIGHT = 64
DEFAULT_PAGES = DEFAULT_HEIGHT // PAGE_HEIGHT


@dataclass(frozen=True)
class RenderArea:
    """A rectangle of columns and pages to update on the display."""

    start_column: int = 0
    end_column: int = DEFAULT_WIDTH - 1
    start_page: int = 0
    end_page: int = DEFAULT_PAGES - 1

    def buffer_length(self) -> int:
        """Number of buffer bytes covered by this area."""
        return (self.end_column - self.start_column + 1) * (
            self.end_page - self.start_page + 1
        )


class FrameBuffer:
    """One bit per pixel; each byte is a vertical run of 8 pixels in a page."""

    def __init__(self, width: int = DEFAULT_WIDTH, height: int = DEFAULT_HEIGHT) -> None:
        if width <= 0 or height <= 0 or height % PAGE_HEIGHT:
            raise ValueError(
                f"invalid size {width}x{height}: height must be a positive multiple of {PAGE_HEIGHT}"
            )
        self.width = width
        self.height = height
        self.pages = height // PAGE_HEIGHT
        self.buffer = bytearray(self.pages * width)

    def __len__(self) -> int:
        return len(self.buffer)

    def clear(self) -> None:
        """Turn every pixel off."""
        self.buffer[:] = bytes(len(self.buffer))

    def _locate(self, x: int, y: int) -> tuple[int, int]:
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise ValueError(f"pixel ({x}, {y}) outside {self.width}x{self.height}")
        return (y // PAGE_HEIGHT) * self.width + x, 1 << (y % PAGE_HEIGHT)

    def get_pixel(self, x: int, y: int) -> bool:
        """Whether the pixel at (x, y) is on."""
        index, mask = self._locate(x, y)
        return bool(self.buffer[index] & mask)

    def set_pixel(self, x: int, y: int, set: bool = True) -> None:
        """Turn the pixel at (x, y) on or off."""
        index, mask = self._locate(x, y)
        if set:
            self.buffer[index] |= mask
        else:
            self.buffer[index] &= ~mask & 0xFF

    def draw_line(self, x0: int, y0: int, x1: int, y1: int, set: bool = True) -> None:
        """Draw a line between two points with Bresenham's algorithm."""
        dx = abs(x1 - x0)
        dy = -abs(y1 - y0)
        sx = 1 if x0 < x1 else -1
        sy = 1 if y0 < y1 else -1
        error = dx + dy
        while True:
            self.set_pixel(x0, y0, set)
            if x0 == x1 and y0 == y1:
                break
            error2 = 2 * error
            if error2 >= dy:
                error += dy
                x0 += sx
            if error2 <= dx:
                error += dx
                y0 += sy

    def draw_char(self, x: int, y: int, character: str | bytes | int) -> None:
        """Copy a glyph into the page containing y, starting at column x.

        Characters that would not fit entirely are silently skipped.
        """
        if x > self.width - GLYPH_WIDTH or y > self.height - PAGE_HEIGHT:
            return
        page = int(y / PAGE_HEIGHT)
        start = page * self.width + x
        if start < 0:
            raise ValueError(f"character position ({x}, {y}) outside the buffer")
        self.buffer[start:start + GLYPH_WIDTH] = glyph(character)

    def draw_string(self, x: int, y: int, text: str) -> None:
        """Draw text left to right, eight columns per character."""
        if x > self.width - GLYPH_WIDTH or y > self.height - PAGE_HEIGHT:
            return
        for character in text:
            self.draw_char(x, y, character)
            x += GLYPH_WIDTH

    def to_bytes(self) -> bytes:
        """A snapshot of the buffer contents."""
        return bytes(self.buffer)

    def render_text(self) -> str:
        """The image as rows of '#' (on) and '.' (off)."""
        return "\n".join(
            "".join("#" if self.get_pixel(x, y) else "." for x in range(self.width))
            for y in range(self.height)
        )