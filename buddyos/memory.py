"""Kernel memory manager: dynamic memory, its page tables and the MMIO window."""

from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import Iterable

from buddyos.buddy import BuddyAllocator
from buddyos.memmap import (
    DYNMEM_START_VIRT,
    IOMAP_START_VIRT,
    IOMAP_VIRT_SIZE,
    PAGE_SIZE,
    MmapEntry,
    build_dynamic_map,
    format_memory_map,
)
from buddyos.paging import KERNEL_PAGE_FLAG, ConstructResult, PageTables, construct_dynamic

MMIO_MAX_FREE_RANGES = 24
"""Most separate free stretches the MMIO window can be split into."""

_IOMAP_END_VIRT = IOMAP_START_VIRT + IOMAP_VIRT_SIZE


class MmioSpaceError(Exception):
    """The MMIO virtual window is exhausted or too fragmented."""


@dataclass
class _FreeRange:
    begin: int
    end: int


def _hex18(value: int) -> str:
    # Alternate-form hex zero-padded to 18 characters; zero carries no prefix.
    return f"{value:#018x}" if value else "0" * 18


def _page_floor(value: int) -> int:
    return value // PAGE_SIZE * PAGE_SIZE


def _page_ceil(value: int) -> int:
    return -(-value // PAGE_SIZE) * PAGE_SIZE


class MemoryManager:
    """Owns dynamic memory, built from the boot memory map, and the MMIO window.

    Dynamic memory is mapped contiguously at ``DYNMEM_START_VIRT``; the first
    pages of it hold its own page tables and the rest is handed out by a buddy
    allocator.
    """

    def __init__(self, entries: Iterable[MmapEntry]) -> None:
        self._lock = threading.RLock()
        self.boot_map: tuple[MmapEntry, ...] = tuple(entries)
        self.dynamic_map: tuple[MmapEntry, ...] = tuple(build_dynamic_map(self.boot_map))
        if not self.dynamic_map:
            raise ValueError("the memory map holds no usable dynamic memory")

        self.construct_result: ConstructResult = construct_dynamic(self.dynamic_map)
        result = self.construct_result
        self._buddy = BuddyAllocator(
            DYNMEM_START_VIRT + result.dyn_pagetable_len,
            result.dyn_total_len - result.dyn_pagetable_len,
        )
        self.page_tables = PageTables(self.dynamic_map, self)
        self._mmio_free = [_FreeRange(IOMAP_START_VIRT, _IOMAP_END_VIRT)]

    @property
    def used(self) -> int:
        """Bytes of dynamic memory currently allocated."""
        with self._lock:
            return self._buddy.used

    def alloc(self, length: int) -> int | None:
        """Allocate ``length`` bytes of dynamic memory; ``None`` when none is left."""
        with self._lock:
            return self._buddy.alloc(length)

    def dealloc(self, addr: int, length: int) -> None:
        """Return ``length`` bytes at ``addr`` to dynamic memory."""
        with self._lock:
            self._buddy.dealloc(addr, length)

    def free_mmio_ranges(self) -> list[tuple[int, int]]:
        """The free stretches of the MMIO window as ``(begin, end)`` pairs, in order."""
        with self._lock:
            return [(r.begin, r.end) for r in self._mmio_free]

    def mmio_alloc_mapping(self, begin_phys: int, end_phys: int) -> int:
        """Map physical ``[begin_phys, end_phys)`` into the MMIO window.

        The range is widened to whole pages; the virtual address of the first
        mapped page is returned.
        """
        with self._lock:
            aligned_begin_phys = _page_floor(begin_phys)
            aligned_len = _page_ceil(end_phys - aligned_begin_phys)

            for index, free in enumerate(self._mmio_free):
                length = free.end - free.begin
                if length < aligned_len:
                    continue
                begin = free.begin
                if length == aligned_len:
                    del self._mmio_free[index]
                else:
                    free.begin += aligned_len
                break
            else:
                raise MmioSpaceError("mmio virtual memory space is run out")

            self.page_tables.map_range(begin, begin + aligned_len, aligned_begin_phys, KERNEL_PAGE_FLAG)
            return begin

    def _new_range(self, index: int, begin: int, end: int) -> None:
        if len(self._mmio_free) >= MMIO_MAX_FREE_RANGES:
            raise MmioSpaceError("mmio virtual memory space is too fragmented")
        self._mmio_free.insert(index, _FreeRange(begin, end))

    def mmio_dealloc_mapping(self, begin_virt: int, end_virt: int) -> None:
        """Unmap ``[begin_virt, end_virt)``, widened to whole pages, and free it."""
        with self._lock:
            aligned_begin = _page_floor(begin_virt)
            aligned_len = _page_ceil(end_virt - aligned_begin)
            aligned_end = aligned_begin + aligned_len

            ranges = self._mmio_free
            for index, node in enumerate(ranges):
                if aligned_begin >= node.begin:
                    continue
                before = ranges[index - 1] if index > 0 else None
                before_end = before.end if before is not None else IOMAP_START_VIRT
                if not (before_end <= aligned_begin and aligned_end <= node.begin):
                    raise ValueError("invalid mmio address")

                if aligned_end == node.begin:
                    node.begin = aligned_begin
                elif before is not None and before.end == aligned_begin:
                    before.end += aligned_len
                else:
                    self._new_range(index, aligned_begin, aligned_end)
                    break

                if before is not None and before.end == node.begin:
                    before.end = node.end
                    del ranges[index]
                break
            else:
                raise ValueError("invalid mmio address")

            self.page_tables.unmap_range(aligned_begin, aligned_end)

    def boot_map_report(self) -> str:
        """The memory map handed over at boot, as text."""
        return format_memory_map(self.boot_map, "System Memory Map")

    def dynamic_map_report(self) -> str:
        """The dynamic memory map, as text."""
        return format_memory_map(self.dynamic_map, "Dynamic Memory Map")

    def dynmem_report(self) -> str:
        """A summary of the dynamic memory allocator's layout and usage."""
        with self._lock:
            b = self._buddy
            rule = "=========================================\n"
            return "".join([
                "===dynamic memory allocator infomation===\n",
                f"metadata address     : {_hex18(b.start_addr)}\n",
                f"metadata size        : {_hex18(b.metadata_len)}\n",
                f"count of unit blocks : {_hex18(b.units)}\n",
                f"total bitmap level   : {b.levels}\n",
                rule,
                f"start address        : {_hex18(b.start_addr + b.data_offset)}\n",
                f"dynmem size          : {_hex18(b.total_len - b.data_offset)}\n",
                f"used size            : {_hex18(b.used)}\n",
                rule,
            ])