"""Physical memory maps and the layout constants of the kernel address space."""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import IntEnum
from typing import Iterable

PAGE_SIZE = 0x1000
"""Size of a page in bytes."""

DYNMEM_START_PHYS_MINIMUM = 0x00800000
"""Lowest physical address handed to the dynamic memory allocator."""

DYNMEM_START_VIRT = 0x00200000
"""Virtual address at which dynamic memory is mapped, contiguously."""

KERNEL_SIZE = 0x00400000
KERNEL_START_PHYS = 0x00200000
KERNEL_START_VIRT = 0xFFFFFFFF80000000

KSTACK_SIZE = 0x00200000
KSTACK_START_VIRT = 0xFFFFFFFF8F000000

IOMAP_VIRT_SIZE = 0x0000007F00000000
IOMAP_START_VIRT = 0xFFFFFF8000000000
"""Start of the virtual window used for memory-mapped I/O."""

MMAP_MAX_ENTRIES = 128
"""Most entries a memory map may hold."""


class EntryType(IntEnum):
    """Kinds of memory-map entries reported by the boot loader."""

    AVAILABLE = 1
    RESERVED = 2
    ACPI_RECLAIMABLE = 3
    ACPI_NVS = 4
    BADRAM = 5


_TYPE_NAMES = {
    EntryType.AVAILABLE: "Available",
    EntryType.RESERVED: "Reserved",
    EntryType.ACPI_RECLAIMABLE: "AcpiReclaimable",
    EntryType.ACPI_NVS: "AcpiNvs",
    EntryType.BADRAM: "BadRAM",
}


@dataclass(frozen=True)
class MmapEntry:
    """A physical range ``[base, base + length)`` of a given type.

    ``type`` is an :class:`EntryType` or any other integer the firmware reported.
    """

    base: int
    length: int
    type: int

    @property
    def end(self) -> int:
        return self.base + self.length


def entry_type_name(entry_type: int) -> str | None:
    """Display name of an entry type, or ``None`` if the type is unknown."""
    return _TYPE_NAMES.get(entry_type)


def build_dynamic_map(entries: Iterable[MmapEntry]) -> list[MmapEntry]:
    """Derive the map of memory usable for dynamic allocation.

    Entries are sorted by base; available ones are shrunk to whole pages,
    kept above ``DYNMEM_START_PHYS_MINIMUM`` and clear of earlier entries.
    Everything else, and whatever shrinks to nothing, is dropped.
    """
    ordered = sorted(entries, key=lambda entry: entry.base)
    if len(ordered) > MMAP_MAX_ENTRIES:
        raise ValueError(f"memory map has more than {MMAP_MAX_ENTRIES} entries")

    result: list[MmapEntry] = []
    prev_end = DYNMEM_START_PHYS_MINIMUM
    for entry in ordered:
        if entry.type != EntryType.AVAILABLE:
            continue
        start = -(-entry.base // PAGE_SIZE) * PAGE_SIZE
        end = entry.end // PAGE_SIZE * PAGE_SIZE
        start = max(start, prev_end)
        if start >= end:
            continue
        result.append(replace(entry, base=start, length=end - start))
        prev_end = end
    return result


def format_memory_map(entries: Iterable[MmapEntry], title: str) -> str:
    """Render a memory map as a titled list of ranges, one line per entry."""
    entries = list(entries)
    lines = [f"{title}: {len(entries)} entries\n"]
    for entry in entries:
        name = entry_type_name(entry.type)
        label = name if name is not None else f"(unknown:{int(entry.type)})"
        lines.append(f"    [0x{entry.base:016x}, 0x{entry.end:016x}) {label}\n")
    return "".join(lines)