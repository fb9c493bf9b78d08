"""Galton board simulation drawn on an SSD1306-sized frame buffer."""

from __future__ import annotations

import argparse
import random
import sys
from dataclasses import dataclass
from typing import Protocol

from galtonboard.framebuffer import FrameBuffer
from galtonboard.ssd1306 import HEIGHT, WIDTH

BUTTON_A = 5
BUTTON_B = 6

PIN_SPACING = 4
ROWS = 10
Y_START = 5
STEP = 2
X_BASE = (WIDTH // 2) - ((ROWS // 2) * PIN_SPACING)
MAX_BALLS = 99
BINS = ROWS + 1
LANDING_Y = 50
SPAWN_INTERVAL = 5


class RandomSource(Protocol):
    """The one random call the board needs."""

    def randrange(self, stop: int) -> int: ...


@dataclass
class Ball:
    """A ball's position on the display and whether it is still falling."""

    x: int = 0
    y: int = 0
    active: bool = False


def _c_remainder(value: int, divisor: int) -> int:
    """Remainder with the sign of the dividend, as integer division truncates."""
    remainder = abs(value) % divisor
    return remainder if value >= 0 else -remainder


def _c_divide(value: int, divisor: int) -> int:
    """Integer division truncating toward zero."""
    quotient = abs(value) // abs(divisor)
    return quotient if (value >= 0) == (divisor > 0) else -quotient


class GaltonBoard:
    """Balls falling through rows of pins into a histogram of bins."""

    def __init__(self, rng: RandomSource | None = None) -> None:
        self.rng: RandomSource = rng if rng is not None else random.Random()
        self.balls = [Ball() for _ in range(MAX_BALLS)]
        self.histogram = [0] * BINS
        self.bias_left = False
        self.bias_right = False
        self.timer = 0
        self.ball_count = 0
        self.screen = FrameBuffer(WIDTH, HEIGHT)

    @property
    def finished(self) -> bool:
        """True once every ball has been dropped and has landed."""
        return self.ball_count >= MAX_BALLS and not any(b.active for b in self.balls)

    def press_button(self, gpio: int) -> None:
        """Button A sends every ball left; button B leans them to the right."""
        if gpio == BUTTON_A:
            self.bias_left = True
            self.bias_right = False
        if gpio == BUTTON_B:
            self.bias_right = True
            self.bias_left = False

    def _coin(self) -> int:
        return self.rng.randrange(2)

    def update_ball(self, ball: Ball) -> None:
        """Move a ball one step down, deflecting it at pin rows, and bin it on landing."""
        at_pin_row = (
            _c_remainder(ball.y - Y_START, PIN_SPACING) <= 1
            and ball.y >= 4
            and ball.y <= ROWS * PIN_SPACING
        )
        if at_pin_row:
            direction = 1 if self._coin() else -1
            if self.bias_left and direction == 1:
                direction = -direction
            if self.bias_right and direction == -1 and self._coin() == 0:
                direction = -direction
            ball.x = (ball.x + STEP * direction) & 0xFF

        ball.y = (ball.y + STEP) & 0xFF

        if ball.y > LANDING_Y:
            index = _c_divide(ball.x - X_BASE, PIN_SPACING)
            if 0 <= index <= ROWS:
                self.histogram[index] = (self.histogram[index] + 1) & 0xFF
            ball.active = False

    def spawn_ball(self) -> Ball | None:
        """Activate the first free ball at the top centre; None if all are in use."""
        for ball in self.balls:
            if not ball.active:
                ball.x = WIDTH // 2
                ball.y = 0
                ball.active = True
                return ball
        return None

    def draw_pins(self, screen: FrameBuffer, rows: int = ROWS) -> None:
        """Draw a triangle of pins, one more pin in each row."""
        centre = screen.width // 2
        for row in range(rows):
            pins = row + 1
            y = row * PIN_SPACING + Y_START
            x_start = centre - 2 * (pins - 1)
            for pin in range(pins):
                screen.set_pixel(x_start + pin * PIN_SPACING, y, True)

    def draw_ball(self, screen: FrameBuffer, ball: Ball) -> None:
        screen.set_pixel(ball.x, ball.y, True)

    def draw_histogram(self, screen: FrameBuffer) -> None:
        """Draw each bin as a vertical bar rising from the bottom row."""
        y_base = screen.height - 1
        for index, count in enumerate(self.histogram):
            if count <= 0:
                continue
            x = X_BASE + index * PIN_SPACING
            for y in range(y_base, y_base - count, -1):
                if y >= 0:
                    screen.set_pixel(x, y, True)

    def draw_frame(self, screen: FrameBuffer) -> None:
        """Draw one frame, moving each falling ball after it is drawn."""
        screen.clear()
        screen.draw_string(105, 4, str(self.ball_count))
        screen.draw_string(0, 5, "Desbal")
        screen.draw_string(2, 15, "Botoes")
        screen.draw_string(0, 25, "|A|B|")
        self.draw_pins(screen, ROWS)
        for ball in self.balls:
            if ball.active:
                self.draw_ball(screen, ball)
                self.update_ball(ball)
        self.draw_histogram(screen)

    def step(self) -> FrameBuffer:
        """Advance one frame and drop a new ball every few frames."""
        self.draw_frame(self.screen)
        if self.ball_count < MAX_BALLS:
            due = self.timer > SPAWN_INTERVAL
            self.timer += 1
            if due:
                self.spawn_ball()
                self.timer = 0
                self.ball_count += 1
        return self.screen


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="galtonboard", description="Simulate a Galton board on a 128x64 screen."
    )
    parser.add_argument("--seed", type=int, default=None, help="random seed")
    parser.add_argument(
        "--frames",
        type=int,
        default=None,
        help="number of frames to run (default: until every ball has landed)",
    )
    parser.add_argument(
        "--bias",
        choices=("none", "a", "b"),
        default="none",
        help="press button A or B before starting",
    )
    parser.add_argument(
        "--quiet", action="store_true", help="print only the histogram counts"
    )
    args = parser.parse_args(argv)
    if args.frames is not None and args.frames < 0:
        parser.error("--frames must not be negative")
    return args


def main(argv: list[str] | None = None) -> int:
    """Run the simulation and print the last frame and the bin counts."""
    args = _parse_args(argv)
    board = GaltonBoard(random.Random(args.seed))
    if args.bias == "a":
        board.press_button(BUTTON_A)
    elif args.bias == "b":
        board.press_button(BUTTON_B)

    frames = 0
    while (args.frames is None and not board.finished) or (
        args.frames is not None and frames < args.frames
    ):
        board.step()
        frames += 1

    if not args.quiet:
        sys.stdout.write(board.screen.render_text() + "\n")
    sys.stdout.write("histogram: " + " ".join(map(str, board.histogram)) + "\n")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())