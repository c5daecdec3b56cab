"""Binary buddy allocator managing an address range in page-sized units."""

from __future__ import annotations

from dataclasses import dataclass

BUDDY_UNIT = 4096
"""Size in bytes of the smallest block the allocator hands out."""

# Each level's bitmap header (bits pointer + free count) in the managed region.
_BITMAP_HEADER_SIZE = 16


@dataclass(frozen=True)
class Slice:
    """An allocated block: its start address and its length in bytes."""

    addr: int
    length: int


def _div_ceil(value: int, divisor: int) -> int:
    return -(-value // divisor)


def _level_for_size(size: int) -> int:
    """Smallest level whose block size holds ``size`` (a multiple of the unit)."""
    return (size // BUDDY_UNIT - 1).bit_length()


def _metadata_layout(data_len: int) -> tuple[int, int, int]:
    """Return (metadata_len, units, levels) for a data region of ``data_len`` bytes."""
    if data_len <= BUDDY_UNIT:
        raise ValueError(f"region of {data_len} bytes is too small for the buddy allocator")

    units = _div_ceil(data_len, BUDDY_UNIT)
    levels = units.bit_length()
    bits = sum(_div_ceil(units >> level, 8) for level in range(levels))
    metadata_len = levels * _BITMAP_HEADER_SIZE + bits
    if metadata_len >= data_len:
        raise ValueError("buddy metadata does not fit in the region")
    return metadata_len, units, levels


class BuddyAllocator:
    """Buddy allocator over ``[start_addr, start_addr + total_len)``.

    The first ``data_offset`` bytes of the range are reserved for metadata;
    blocks are handed out from the rest.  Each level keeps a bitmap of free
    blocks, level ``n`` holding blocks of ``BUDDY_UNIT << n`` bytes.
    """

    def __init__(self, start_addr: int, total_len: int) -> None:
        first_metadata_len, _, _ = _metadata_layout(total_len)
        data_offset = _div_ceil(first_metadata_len, BUDDY_UNIT) * BUDDY_UNIT
        metadata_len, units, levels = _metadata_layout(total_len - data_offset)
        if metadata_len >= data_offset:
            raise ValueError("buddy metadata does not fit in its reserved pages")

        self.start_addr = start_addr
        self.total_len = total_len
        self.metadata_len = metadata_len
        self.data_offset = data_offset
        self.units = units
        self.levels = levels
        self.used = 0

        # Free-block bitmaps, one integer per level.  At levels with an odd
        # block count the last block has no buddy and starts out free.
        self._free = [
            (1 << (count - 1)) if count % 2 else 0
            for count in (units >> level for level in range(levels))
        ]

    @property
    def data_addr(self) -> int:
        """Address of the first allocatable byte."""
        return self.start_addr + self.data_offset

    @property
    def data_len(self) -> int:
        """Length in bytes of the allocatable area."""
        return self.total_len - self.data_offset

    def alloc_slice(self, length: int) -> Slice | None:
        """Allocate at least ``length`` bytes; return ``None`` when no block fits."""
        if length <= 0:
            raise ValueError("allocation length must be positive")

        aligned_len = _div_ceil(length, BUDDY_UNIT) * BUDDY_UNIT
        level_fit = _level_for_size(aligned_len)
        if level_fit >= self.levels:
            return None

        for level in range(level_fit, self.levels):
            mask = self._free[level]
            if not mask:
                continue

            block = (mask & -mask).bit_length() - 1
            self._free[level] = mask & ~(1 << block)

            below_block = block
            for below in reversed(range(level_fit, level)):
                below_block *= 2
                self._free[below] |= 1 << (below_block + 1)

            allocated_len = BUDDY_UNIT << level_fit
            self.used += allocated_len
            return Slice(self.data_addr + block * (BUDDY_UNIT << level), allocated_len)

        return None

    def alloc(self, length: int) -> int | None:
        """Allocate at least ``length`` bytes and return the address, or ``None``."""
        block = self.alloc_slice(length)
        return None if block is None else block.addr

    def dealloc(self, addr: int, length: int) -> None:
        """Release the block covering ``[addr, addr + length)``, rounded out to units."""
        if length == 0:
            return

        data_addr = self.data_addr
        data_end = data_addr + self.data_len

        aligned_addr = addr // BUDDY_UNIT * BUDDY_UNIT
        aligned_end = _div_ceil(addr + length, BUDDY_UNIT) * BUDDY_UNIT
        aligned_len = aligned_end - aligned_addr

        if not (data_addr <= aligned_addr < data_end and data_addr < aligned_end <= data_end):
            raise ValueError(f"address range {addr:#x}+{length:#x} is outside the allocator")

        level_fit = _level_for_size(aligned_len)
        if level_fit >= self.levels:
            raise ValueError(f"length {length:#x} is larger than any block")

        block = (aligned_addr - data_addr) // (BUDDY_UNIT << level_fit)
        level = level_fit
        while True:
            bit = 1 << block
            if self._free[level] & bit:
                raise ValueError(f"block at {aligned_addr:#x} is already free")
            self._free[level] |= bit

            buddy_bit = 1 << (block ^ 1)
            if not self._free[level] & buddy_bit:
                break
            if level + 1 >= self.levels:
                break

            self._free[level] &= ~(bit | buddy_bit)
            block //= 2
            level += 1

        self.used -= BUDDY_UNIT << level_fit