"""Hobby-kernel core as plain objects: buddy allocator, paging, PS/2 input, framebuffer GUI and TTY."""

__version__ = "0.1.0"