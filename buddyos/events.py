"""The interrupt message queue and the dispatch of input device bytes."""

from __future__ import annotations

import threading
from collections import deque
from dataclasses import dataclass
from enum import IntEnum

from buddyos.gui import Gui
from buddyos.ps2 import Ps2Keyboard, Ps2Mouse
from buddyos.tty import Tty

INTR_QUEUE_SIZE = 4096
"""Default number of messages the interrupt queue holds."""


class IntrMessageType(IntEnum):
    """Sources of interrupt messages."""

    KEYBOARD = 0
    MOUSE = 1


@dataclass(frozen=True)
class IntrMessage:
    """One byte received from an input device."""

    type: IntrMessageType
    data: int


class InterruptQueue:
    """A bounded first-in first-out queue of interrupt messages."""

    def __init__(self, capacity: int = INTR_QUEUE_SIZE) -> None:
        if capacity <= 0:
            raise ValueError("capacity must be positive")
        self.capacity = capacity
        self._lock = threading.Lock()
        self._items: deque[IntrMessage] = deque()

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)

    def push(self, message: IntrMessage) -> bool:
        """Append ``message``; return ``False`` and drop it when the queue is full."""
        with self._lock:
            if len(self._items) >= self.capacity:
                return False
            self._items.append(message)
            return True

    def try_pop(self) -> IntrMessage | None:
        """Remove and return the oldest message, or ``None`` if there is none."""
        with self._lock:
            return self._items.popleft() if self._items else None


class InputDispatcher:
    """Turns keyboard bytes into terminal input and mouse bytes into pointer motion."""

    def __init__(self, tty: Tty, gui: Gui) -> None:
        self.tty = tty
        self.gui = gui
        self.keyboard = Ps2Keyboard()
        self.mouse = Ps2Mouse()

    def dispatch(self, message: IntrMessage) -> None:
        """Hand ``message`` to the handler for its source."""
        if message.type == IntrMessageType.KEYBOARD:
            self.on_keyboard(message.data)
        elif message.type == IntrMessageType.MOUSE:
            self.on_mouse(message.data)

    def on_keyboard(self, data: int) -> None:
        """Feed a scan-code byte; a completed character is written to the terminal."""
        event = self.keyboard.put_byte(data)
        if event is None:
            return
        key = self.keyboard.process_keyevent(event)
        if not key.raw:
            self.tty.puts(key.ch)

    def on_mouse(self, data: int) -> None:
        """Feed a mouse byte; a completed packet moves the pointer (y grows downward)."""
        event = self.mouse.put_byte(data)
        if event is not None:
            self.gui.mouse_move(event.dx, -event.dy)