# galtonboard

A small Galton board simulation. Up to 99 balls drop, one every few
frames, through ten rows of pins. At each pin row a ball is pushed two
pixels left or right at random, and when it passes the bottom it lands in
one of eleven bins. The bins grow into a histogram. Everything is drawn
into a 128x64 monochrome framebuffer that uses the page layout of an
SSD1306 OLED controller.

## Installing

    pip install .

To run the tests as well:

    pip install ".[test]"
    pytest

## Running

    galtonboard

By default this runs until every ball has been dropped and has landed.
It then prints the last frame as text (`#` for a lit pixel, `.` for an
unlit one) and a line with the count in each bin:

    histogram: 0 1 4 ...

Options:

- `--seed N` seeds the random number generator, so runs can be repeated.
- `--frames N` runs exactly `N` frames instead of running until all balls
  have landed. `N` must not be negative.
- `--bias {none,a,b}` presses button A or B before the run starts.
  With A every deflection goes to the left. With B a deflection to the left
  is turned to the right half of the time, so balls lean right.
- `--quiet` prints only the histogram line.

## Using it as a library

- `galtonboard.framebuffer.FrameBuffer(width=128, height=64)` is a
  page-organised pixel buffer with one bit per pixel. The height must be a
  positive multiple of 8. It has `clear`, `get_pixel`, `set_pixel`,
  `draw_line` (Bresenham), `draw_char`, `draw_string`, `to_bytes` and
  `render_text`. Pixel access outside the buffer raises `ValueError`.
  Characters that would not fit are skipped. `RenderArea` describes a
  column and page window, and `buffer_length()` gives the number of bytes
  it covers.
- `galtonboard.font` holds the built-in 8x8 font, which covers `A`–`Z` and
  `0`–`9`. Every other character is drawn blank. `glyph_index` maps a
  character to its index in `FONT` without case folding. `glyph` returns
  its eight column bytes and folds `a`–`z` to upper case.
- `galtonboard.ssd1306` builds SSD1306 command streams. `init_commands`
  and `scroll_commands` return the raw command bytes. `Display` and
  `BitmapDisplay` write command and data transfers to any object that has
  `write(address, data)`. `RecordingBus` is such an object and keeps every
  write in its `writes` list as `(address, bytes)` pairs.
- `galtonboard.board.GaltonBoard(rng=None)` holds the simulation. It takes
  any object with `randrange`, such as `random.Random`.
  - `step()` draws one frame into `board.screen`, moving each falling ball
    once. Every few frames it drops a new ball. It returns the screen.
  - `draw_frame(screen)` does the drawing and moving on a framebuffer you
    supply, but does not drop new balls.
  - `press_button(gpio)` simulates the two buttons, A on GPIO 5 and B on
    GPIO 6.
  - `histogram` holds the bin counts, and `finished` becomes true once all
    balls have landed.

Example:

```python
import random
from galtonboard.board import GaltonBoard

board = GaltonBoard(random.Random(1))
while not board.finished:
    screen = board.step()

print(screen.render_text())
print(board.histogram)
```

## What it does not do

The package does not talk to a real display or to real buttons. The
`ssd1306` classes only produce the bytes that would go over I2C, and they
hand them to the bus object you pass in. The `galtonboard` command shows
its result as text in the terminal. It does not animate the frames.