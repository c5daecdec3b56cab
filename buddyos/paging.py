"""Four-level x86-64 page tables for the dynamic memory and MMIO windows."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntFlag
from typing import Iterable, Protocol, Sequence

from buddyos.memmap import DYNMEM_START_VIRT, PAGE_SIZE, MmapEntry

PAGETABLE_LENGTH = 512
HUGE_PAGE_SIZE = 0x00200000
PAGE_MASK_ADDR = 0x000FFFFFFFFFF000

_U64 = (1 << 64) - 1
_SIGN = 0xFFFF800000000000
_SHIFTS = (39, 30, 21, 12)
_NAMES = ("PML4E", " PDPE", "  PDE", "   PT")


class PageFlag(IntFlag):
    """Bits of a page-table entry."""

    PRESENT = 1 << 0
    WRITABLE = 1 << 1
    USER = 1 << 2
    WRITE_THROUGH = 1 << 3
    NO_CACHE = 1 << 4
    ACCESSED = 1 << 5
    DIRTY = 1 << 6
    HUGE = 1 << 7
    GLOBAL = 1 << 8
    NO_EXECUTE = 1 << 63


KERNEL_PAGE_FLAG = PageFlag.PRESENT | PageFlag.WRITABLE

_FLAG_ORDER = (
    PageFlag.PRESENT,
    PageFlag.WRITABLE,
    PageFlag.USER,
    PageFlag.WRITE_THROUGH,
    PageFlag.NO_CACHE,
    PageFlag.ACCESSED,
    PageFlag.DIRTY,
    PageFlag.HUGE,
    PageFlag.GLOBAL,
    PageFlag.NO_EXECUTE,
)


@dataclass(frozen=True)
class PageIndex:
    """Indices of a virtual address into the four table levels."""

    pl4i: int = 0
    pdpi: int = 0
    pdti: int = 0
    ptei: int = 0

    @classmethod
    def from_virt(cls, virt: int) -> PageIndex:
        return cls(
            pl4i=(virt >> 39) & 0x1FF,
            pdpi=(virt >> 30) & 0x1FF,
            pdti=(virt >> 21) & 0x1FF,
            ptei=(virt >> 12) & 0x1FF,
        )

    def _next_pl4(self) -> PageIndex:
        if self.pl4i + 1 < PAGETABLE_LENGTH:
            return PageIndex(self.pl4i + 1, self.pdpi, self.pdti, self.ptei)
        raise OverflowError("page index overflow")

    def _next_pdpt(self) -> PageIndex:
        if self.pdpi + 1 < PAGETABLE_LENGTH:
            return PageIndex(self.pl4i, self.pdpi + 1, self.pdti, self.ptei)
        return PageIndex(self.pl4i, 0, self.pdti, self.ptei)._next_pl4()

    def next_pdt(self) -> PageIndex:
        """Index of the next 2 MiB region; the page-table index is kept."""
        if self.pdti + 1 < PAGETABLE_LENGTH:
            return PageIndex(self.pl4i, self.pdpi, self.pdti + 1, self.ptei)
        return PageIndex(self.pl4i, self.pdpi, 0, self.ptei)._next_pdpt()

    def next_page(self) -> PageIndex:
        """Index of the next 4 KiB page."""
        if self.ptei + 1 < PAGETABLE_LENGTH:
            return PageIndex(self.pl4i, self.pdpi, self.pdti, self.ptei + 1)
        return PageIndex(self.pl4i, self.pdpi, self.pdti, 0).next_pdt()


@dataclass(frozen=True)
class ConstructResult:
    """Size of the dynamic memory and how much of it holds its own page tables."""

    dyn_total_len: int
    dyn_pagetable_len: int


def virt_to_phys_dynmem(virt: int, entries: Iterable[MmapEntry]) -> int:
    """Physical address behind a dynamic-memory virtual address."""
    offset = virt - DYNMEM_START_VIRT
    if offset >= 0:
        total = 0
        for entry in entries:
            end_offset = total + entry.length
            if offset < end_offset:
                return entry.base + (offset - total)
            total = end_offset
    raise ValueError(f"dynmem: invalid virtual address {virt:#x}")


def phys_to_virt_dynmem(phys: int, entries: Iterable[MmapEntry]) -> int:
    """Dynamic-memory virtual address of a physical address."""
    total = 0
    for entry in entries:
        if entry.base <= phys < entry.base + entry.length:
            return DYNMEM_START_VIRT + total + (phys - entry.base)
        total += entry.length
    raise ValueError(f"dynmem: invalid physical address {phys:#x}")


def format_page_flags(entry: int) -> str:
    """Names of the flags set in a page-table entry, or ``"0"`` when none is."""
    names = [flag.name for flag in _FLAG_ORDER if entry & flag]
    return " | ".join(names) if names else "0"


class _Factory:
    """Counts the page tables needed to map dynamic memory page by page."""

    def __init__(self) -> None:
        # The first three pages become PDPT 0, PDT 0 and PT 0, already using
        # PML4:0, PDPT:0, PDT:1 and PT:[0, 2].
        self.next_indices = [1, 1, 2, 3]
        self.metapages = 3

    def place(self, level: int) -> None:
        if level == 0 and self.next_indices[0] >= PAGETABLE_LENGTH // 2:
            raise OverflowError("dynamic memory exceeds the lower half of the address space")
        if self.next_indices[level] >= PAGETABLE_LENGTH:
            self.metapages += 1
            self.next_indices[level] = 0
            self.place(level - 1)
        self.next_indices[level] += 1


def construct_dynamic(entries: Iterable[MmapEntry]) -> ConstructResult:
    """Work out the dynamic memory size and the pages its page tables take up."""
    pages = sum(-(-entry.length // PAGE_SIZE) for entry in entries)
    if pages < 3:
        return ConstructResult(pages * PAGE_SIZE, 0)

    factory = _Factory()
    remaining = pages - 3
    while remaining:
        room = PAGETABLE_LENGTH - factory.next_indices[3]
        if room <= 0:
            factory.place(3)
            remaining -= 1
        else:
            take = min(room, remaining)
            factory.next_indices[3] += take
            remaining -= take
    return ConstructResult(pages * PAGE_SIZE, factory.metapages * PAGE_SIZE)


class PageAllocator(Protocol):
    def alloc(self, length: int) -> int | None: ...

    def dealloc(self, addr: int, length: int) -> None: ...


def _c_hex(value: int, width: int = 0, zero_pad: bool = False) -> str:
    """Hexadecimal in the alternate form, where zero carries no prefix."""
    if zero_pad:
        return f"{value:#0{width}x}" if value else "0" * max(width, 1)
    return (f"{value:#x}" if value else "0").rjust(width)


class PageTables:
    """A page-table hierarchy whose lower tables come from dynamic memory.

    ``entries`` is the dynamic memory map; ``allocator`` hands out page-sized
    blocks at dynamic-memory virtual addresses.
    """

    def __init__(self, entries: Sequence[MmapEntry], allocator: PageAllocator) -> None:
        self.entries = tuple(entries)
        self.allocator = allocator
        self._root = [0] * PAGETABLE_LENGTH
        self._tables: dict[int, list[int]] = {}

    def _get_or_alloc(self, upper: list[int], index: int, flags: int) -> list[int]:
        if upper[index] & PageFlag.PRESENT:
            return self._tables[upper[index] & PAGE_MASK_ADDR]
        virt = self.allocator.alloc(PAGE_SIZE)
        if virt is None:
            raise MemoryError("no memory left for a page table")
        phys = virt_to_phys_dynmem(virt, self.entries)
        table = [0] * PAGETABLE_LENGTH
        self._tables[phys] = table
        upper[index] = phys | flags
        return table

    def _get_present(self, upper: list[int], index: int) -> list[int]:
        if not upper[index] & PageFlag.PRESENT:
            raise ValueError("address is not mapped")
        return self._tables[upper[index] & PAGE_MASK_ADDR]

    def _free(self, upper: list[int], index: int) -> None:
        phys = upper[index] & PAGE_MASK_ADDR
        del self._tables[phys]
        self.allocator.dealloc(phys_to_virt_dynmem(phys, self.entries), PAGE_SIZE)
        upper[index] = 0

    def map_range(self, begin_virt: int, end_virt: int, phys: int, flags: int) -> None:
        """Map ``[begin_virt, end_virt)`` onto physical memory starting at ``phys``.

        Whole aligned 2 MiB stretches become huge pages. All addresses must be
        page aligned.
        """
        flags = int(flags)
        if not flags & PageFlag.PRESENT:
            raise ValueError("mapping flags must include PRESENT")
        if begin_virt % PAGE_SIZE or end_virt % PAGE_SIZE or phys % PAGE_SIZE:
            raise ValueError("addresses must be page aligned")

        it = PageIndex.from_virt(begin_virt)
        offset = 0
        while begin_virt + offset < end_virt:
            pdpt = self._get_or_alloc(self._root, it.pl4i, flags)
            pdt = self._get_or_alloc(pdpt, it.pdpi, flags)

            if (not pdt[it.pdti] & PageFlag.PRESENT and it.ptei == 0
                    and end_virt - begin_virt - offset >= HUGE_PAGE_SIZE):
                pdt[it.pdti] = (phys + offset) | flags | PageFlag.HUGE
                offset += HUGE_PAGE_SIZE
                it = it.next_pdt()
            else:
                if pdt[it.pdti] & PageFlag.HUGE:
                    raise ValueError(f"{begin_virt + offset:#x} is already mapped by a huge page")
                pt = self._get_or_alloc(pdt, it.pdti, flags)
                if pt[it.ptei] & PageFlag.PRESENT:
                    raise ValueError(f"{begin_virt + offset:#x} is already mapped")
                pt[it.ptei] = (phys + offset) | flags
                offset += PAGE_SIZE
                it = it.next_page()

    def unmap_range(self, begin_virt: int, end_virt: int) -> None:
        """Remove the mappings of ``[begin_virt, end_virt)``.

        A table is released when the last entry of it has been unmapped and
        it has become empty.
        """
        it = PageIndex.from_virt(begin_virt)
        offset = 0
        while begin_virt + offset < end_virt:
            pdpt = self._get_present(self._root, it.pl4i)
            pdt = self._get_present(pdpt, it.pdpi)
            pt: list[int] | None = None

            if not pdt[it.pdti] & PageFlag.PRESENT:
                raise ValueError(f"{begin_virt + offset:#x} is not mapped")
            if pdt[it.pdti] & PageFlag.HUGE:
                if it.ptei != 0:
                    raise ValueError(f"{begin_virt + offset:#x} is inside a huge page")
                pdt[it.pdti] = 0
                step = HUGE_PAGE_SIZE
                nxt = it.next_pdt()
            else:
                pt = self._get_present(pdt, it.pdti)
                pt[it.ptei] = 0
                step = PAGE_SIZE
                nxt = it.next_page()

            if it.ptei > nxt.ptei and pt is not None and not any(e & PageFlag.PRESENT for e in pt):
                self._free(pdt, it.pdti)
            if it.pdti > nxt.pdti and not any(e & PageFlag.PRESENT for e in pdt):
                self._free(pdpt, it.pdpi)
            if it.pdpi > nxt.pdpi and not any(e & PageFlag.PRESENT for e in pdpt):
                self._free(self._root, it.pl4i)

            offset += step
            it = nxt

    def _describe(self, table: list[int], depth: int, pagesize: int, virt: int, out: list[str]) -> None:
        leaf_begin: int | None = None
        for idx in range(PAGETABLE_LENGTH + 1):
            entry = table[idx] if idx < PAGETABLE_LENGTH else 0
            present = idx < PAGETABLE_LENGTH and bool(entry & PageFlag.PRESENT)
            leaf = present and (depth == 3 or bool(entry & PageFlag.HUGE))

            if leaf_begin is not None:
                prev = table[idx - 1] & PAGE_MASK_ADDR
                if not leaf or prev + pagesize != entry & PAGE_MASK_ADDR:
                    phys = table[leaf_begin] & PAGE_MASK_ADDR
                    length = (idx - leaf_begin) * pagesize
                    v_raw = ((virt << 9 | leaf_begin) << _SHIFTS[depth]) & _U64
                    v_ext = v_raw | _SIGN if v_raw & _SIGN else v_raw
                    out.append(
                        f"{_NAMES[depth]} {_c_hex(v_ext, 18, True)}-"
                        f"{_c_hex((v_ext + length) & _U64, 18, True)} to "
                        f"{_c_hex(phys)}-{_c_hex(phys + length)}\n"
                    )
                    leaf_begin = idx if leaf else None

            if leaf:
                if leaf_begin is None:
                    leaf_begin = idx
                continue
            if not present:
                continue

            phys = entry & PAGE_MASK_ADDR
            out.append(f"{_NAMES[depth]} {_c_hex(idx, 7)} to {_c_hex(phys)}: {format_page_flags(entry)}\n")
            self._describe(self._tables[phys], depth + 1, pagesize >> 9, virt << 9 | idx, out)

    def describe(self) -> str:
        """List the tables and the contiguous runs of mapped pages."""
        out: list[str] = []
        self._describe(self._root, 0, 0x0000008000000000, 0, out)
        return "".join(out)