"""Terminal multiplexing text output to a set of devices."""

from __future__ import annotations

import threading
from abc import ABC, abstractmethod
from typing import TextIO

_PRINT_BUFFER = 1024
_INPUT_BUFFER = 256


class KernelPanic(Exception):
    """Raised after a panic message has been written to every terminal device."""


class TtyDevice(ABC):
    """Something a terminal writes its output to."""

    @abstractmethod
    def write(self, text: str) -> None:
        """Output ``text``."""

    def flush(self) -> None:
        """Push buffered output out; nothing to do by default."""


class StreamDevice(TtyDevice):
    """A terminal device writing to a text stream, like a serial line."""

    def __init__(self, stream: TextIO) -> None:
        self.stream = stream

    def write(self, text: str) -> None:
        self.stream.write(text)

    def flush(self) -> None:
        self.stream.flush()


class Tty:
    """A terminal: sends output to its devices and collects typed input."""

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._devices: list[TtyDevice] = []
        self._input: list[str] = []

    @property
    def devices(self) -> tuple[TtyDevice, ...]:
        """Registered devices, most recently registered first."""
        with self._lock:
            return tuple(self._devices)

    @property
    def input(self) -> str:
        """Characters received so far."""
        with self._lock:
            return "".join(self._input)

    def register_device(self, device: TtyDevice) -> None:
        """Add ``device`` in front of the others."""
        with self._lock:
            self._devices.insert(0, device)

    def unregister_device(self, device: TtyDevice) -> None:
        """Remove ``device``; a device that is not registered is ignored."""
        with self._lock:
            for index, registered in enumerate(self._devices):
                if registered is device:
                    del self._devices[index]
                    break

    def _puts_nolock(self, text: str) -> None:
        for device in self._devices:
            device.write(text)

    def puts(self, text: str) -> None:
        """Write ``text`` to every device."""
        with self._lock:
            self._puts_nolock(text)

    def printf(self, fmt: str, *args: object) -> None:
        """Format with ``%`` and write, truncated to the print buffer size."""
        text = fmt % args
        self.puts(text[:_PRINT_BUFFER - 1])

    def on_read(self, ch: str) -> None:
        """Append a received character while the input buffer has room."""
        with self._lock:
            if len(self._input) < _INPUT_BUFFER - 1:
                self._input.append(ch)

    def panic(self, message: str, file: str, func: str, line: int) -> None:
        """Write a panic report to every device, flush them and raise ``KernelPanic``."""
        with self._lock:
            text = f"[{file}:{func}:{line}] {message}\n"[:_PRINT_BUFFER - 1]
            self._puts_nolock(text)
            for device in self._devices:
                device.flush()
        raise KernelPanic(text)