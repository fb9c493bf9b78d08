"""Command sequences and I2C framing for an SSD1306 OLED controller."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Protocol, Union

from galtonboard.framebuffer import (
    DEFAULT_HEIGHT,
    DEFAULT_WIDTH,
    PAGE_HEIGHT,
    FrameBuffer,
    RenderArea,
)

WIDTH = DEFAULT_WIDTH
HEIGHT = DEFAULT_HEIGHT
DEFAULT_ADDRESS = 0x3C
I2C_CLOCK_KHZ = 400

COMMAND_CONTROL = 0x80
DATA_CONTROL = 0x40

SET_MEMORY_MODE = 0x20
SET_COLUMN_ADDRESS = 0x21
SET_PAGE_ADDRESS = 0x22
SET_HORIZONTAL_SCROLL = 0x26
SET_SCROLL = 0x2E
SET_DISPLAY_START_LINE = 0x40
SET_CONTRAST = 0x81
SET_CHARGE_PUMP = 0x8D
SET_SEGMENT_REMAP = 0xA0
SET_ENTIRE_ON = 0xA4
SET_ALL_ON = 0xA5
SET_NORMAL_DISPLAY = 0xA6
SET_INVERSE_DISPLAY = 0xA7
SET_MUX_RATIO = 0xA8
SET_DISPLAY = 0xAE
SET_COMMON_OUTPUT_DIRECTION = 0xC0
SET_COMMON_OUTPUT_DIRECTION_FLIP = 0xC0
SET_DISPLAY_OFFSET = 0xD3
SET_DISPLAY_CLOCK_DIVIDE_RATIO = 0xD5
SET_PRECHARGE = 0xD9
SET_COMMON_PIN_CONFIGURATION = 0xDA
SET_VCOMH_DESELECT_LEVEL = 0xDB
WRITE_MODE = 0xFE
READ_MODE = 0xFF


class I2CBus(Protocol):
    """Anything that can write a block of bytes to an I2C address."""

    def write(self, address: int, data: bytes) -> None: ...


@dataclass
class RecordingBus:
    """An I2C bus that keeps every write as an (address, bytes) pair."""

    writes: list[tuple[int, bytes]] = field(default_factory=list)

    def write(self, address: int, data: bytes) -> None:
        self.writes.append((address, bytes(data)))


def init_commands(width: int = WIDTH, height: int = HEIGHT) -> bytes:
    """The power-up command sequence for a panel of the given size."""
    pin_configuration = 0x12 if (width, height) == (128, 64) else 0x02
    return bytes((
        SET_DISPLAY, SET_MEMORY_MODE, 0x00,
        SET_DISPLAY_START_LINE, SET_SEGMENT_REMAP | 0x01,
        SET_MUX_RATIO, height - 1,
        SET_COMMON_OUTPUT_DIRECTION | 0x08, SET_DISPLAY_OFFSET, 0x00,
        SET_COMMON_PIN_CONFIGURATION, pin_configuration,
        SET_DISPLAY_CLOCK_DIVIDE_RATIO, 0x80,
        SET_PRECHARGE, 0xF1,
        SET_VCOMH_DESELECT_LEVEL, 0x30,
        SET_CONTRAST, 0xFF,
        SET_ENTIRE_ON, SET_NORMAL_DISPLAY,
        SET_CHARGE_PUMP, 0x14,
        SET_SCROLL | 0x00,
        SET_DISPLAY | 0x01,
    ))


def scroll_commands(enabled: bool) -> bytes:
    """Commands that configure horizontal scrolling and switch it on or off."""
    return bytes((
        SET_HORIZONTAL_SCROLL | 0x00, 0x00, 0x00, 0x00, 0x03, 0x00, 0xFF,
        SET_SCROLL | (0x01 if enabled else 0x00),
    ))


Buffer = Union[bytes, bytearray, memoryview, FrameBuffer]


class Display:
    """A 128x64 panel driven one command per I2C transfer."""

    def __init__(self, bus: I2CBus, address: int = DEFAULT_ADDRESS) -> None:
        self.bus = bus
        self.address = address
        self.width = WIDTH
        self.height = HEIGHT

    def send_command(self, command: int) -> None:
        self.bus.write(self.address, bytes((COMMAND_CONTROL, command)))

    def send_command_list(self, commands: Iterable[int]) -> None:
        for command in commands:
            self.send_command(command)

    def send_buffer(self, data: Buffer) -> None:
        """Send display RAM data, prefixed with the data control byte."""
        payload = data.to_bytes() if isinstance(data, FrameBuffer) else bytes(data)
        self.bus.write(self.address, bytes((DATA_CONTROL,)) + payload)

    def init(self) -> None:
        self.send_command_list(init_commands(self.width, self.height))

    def scroll(self, enabled: bool) -> None:
        self.send_command_list(scroll_commands(enabled))

    def render(self, buffer: Buffer, area: RenderArea) -> None:
        """Select the area's window and send its share of the buffer."""
        data = buffer.to_bytes() if isinstance(buffer, FrameBuffer) else bytes(buffer)
        length = area.buffer_length()
        if length > len(data):
            raise ValueError(f"area needs {length} bytes, buffer holds {len(data)}")
        self.send_command_list((
            SET_COLUMN_ADDRESS, area.start_column, area.end_column,
            SET_PAGE_ADDRESS, area.start_page, area.end_page,
        ))
        self.send_buffer(data[:length])


class BitmapDisplay:
    """A panel with its own RAM image, for showing whole bitmaps."""

    def __init__(
        self,
        bus: I2CBus,
        width: int = WIDTH,
        height: int = HEIGHT,
        external_vcc: bool = False,
        address: int = DEFAULT_ADDRESS,
    ) -> None:
        self.bus = bus
        self.width = width
        self.height = height
        self.pages = height // PAGE_HEIGHT
        self.external_vcc = external_vcc
        self.address = address
        self.bufsize = self.pages * width + 1
        self.ram_buffer = bytearray(self.bufsize)
        self.ram_buffer[0] = DATA_CONTROL

    def command(self, command: int) -> None:
        self.bus.write(self.address, bytes((COMMAND_CONTROL, command)))

    def config(self) -> None:
        """Send the bitmap-mode configuration sequence."""
        for command in (
            SET_DISPLAY | 0x00,
            SET_MEMORY_MODE, 0x01,
            SET_DISPLAY_START_LINE | 0x00,
            SET_SEGMENT_REMAP | 0x01,
            SET_MUX_RATIO, HEIGHT - 1,
            SET_COMMON_OUTPUT_DIRECTION | 0x08,
            SET_DISPLAY_OFFSET, 0x00,
            SET_COMMON_PIN_CONFIGURATION, 0x12,
            SET_DISPLAY_CLOCK_DIVIDE_RATIO, 0x80,
            SET_PRECHARGE, 0xF1,
            SET_VCOMH_DESELECT_LEVEL, 0x30,
            SET_CONTRAST, 0xFF,
            SET_ENTIRE_ON,
            SET_NORMAL_DISPLAY,
            SET_CHARGE_PUMP, 0x14,
            SET_DISPLAY | 0x01,
        ):
            self.command(command)

    def send_data(self) -> None:
        """Address the whole panel and send the RAM image."""
        for command in (
            SET_COLUMN_ADDRESS, 0, self.width - 1,
            SET_PAGE_ADDRESS, 0, self.pages - 1,
        ):
            self.command(command)
        self.bus.write(self.address, bytes(self.ram_buffer))

    def draw_bitmap(self, bitmap: bytes) -> None:
        """Copy a bitmap into RAM, sending the image after each byte copied."""
        size = self.bufsize - 1
        if len(bitmap) < size:
            raise ValueError(f"bitmap needs {size} bytes, got {len(bitmap)}")
        for index, value in enumerate(bitmap[:size], start=1):
            self.ram_buffer[index] = value
            self.send_data()