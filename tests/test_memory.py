import pytest

from buddyos.memmap import (
    DYNMEM_START_VIRT,
    IOMAP_START_VIRT,
    IOMAP_VIRT_SIZE,
    PAGE_SIZE,
    EntryType,
    MmapEntry,
    build_dynamic_map,
)
from buddyos.memory import MMIO_MAX_FREE_RANGES, MemoryManager, MmioSpaceError

IOMAP_END = IOMAP_START_VIRT + IOMAP_VIRT_SIZE
MMIO_PHYS = 0xFD000000

ENTRIES = [
    MmapEntry(0x0, 0x9F000, EntryType.AVAILABLE),
    MmapEntry(0xF0000, 0x10000, EntryType.RESERVED),
    MmapEntry(0x100000, 0x1F00000, EntryType.AVAILABLE),
]


@pytest.fixture
def manager():
    return MemoryManager(ENTRIES)


def test_dynamic_map_is_derived_from_boot_map(manager):
    assert list(manager.dynamic_map) == build_dynamic_map(ENTRIES)
    assert manager.construct_result.dyn_total_len == sum(e.length for e in manager.dynamic_map)


def test_no_usable_memory_is_an_error():
    with pytest.raises(ValueError):
        MemoryManager([MmapEntry(0x0, 0x9F000, EntryType.AVAILABLE)])


def test_alloc_is_page_aligned_and_inside_dynmem(manager):
    start = DYNMEM_START_VIRT + manager.construct_result.dyn_pagetable_len
    end = DYNMEM_START_VIRT + manager.construct_result.dyn_total_len
    before = manager.used
    addr = manager.alloc(PAGE_SIZE)
    assert addr % PAGE_SIZE == 0
    assert start <= addr < end
    assert manager.used == before + PAGE_SIZE
    manager.dealloc(addr, PAGE_SIZE)
    assert manager.used == before


def test_mmio_alloc_uses_start_of_window(manager):
    virt = manager.mmio_alloc_mapping(MMIO_PHYS, MMIO_PHYS + 3 * PAGE_SIZE)
    assert virt == IOMAP_START_VIRT
    assert manager.free_mmio_ranges() == [(IOMAP_START_VIRT + 3 * PAGE_SIZE, IOMAP_END)]
    assert "PML4E" in manager.page_tables.describe()


def test_mmio_unaligned_request_takes_whole_page(manager):
    virt = manager.mmio_alloc_mapping(MMIO_PHYS + 0x123, MMIO_PHYS + 0x200)
    assert virt == IOMAP_START_VIRT
    assert manager.free_mmio_ranges() == [(IOMAP_START_VIRT + PAGE_SIZE, IOMAP_END)]


def test_mmio_round_trip_restores_window(manager):
    virt = manager.mmio_alloc_mapping(MMIO_PHYS, MMIO_PHYS + 3 * PAGE_SIZE)
    manager.mmio_dealloc_mapping(virt, virt + 3 * PAGE_SIZE)
    assert manager.free_mmio_ranges() == [(IOMAP_START_VIRT, IOMAP_END)]


def test_mmio_free_ranges_merge(manager):
    a = manager.mmio_alloc_mapping(MMIO_PHYS, MMIO_PHYS + PAGE_SIZE)
    b = manager.mmio_alloc_mapping(MMIO_PHYS + PAGE_SIZE, MMIO_PHYS + 2 * PAGE_SIZE)
    c = manager.mmio_alloc_mapping(MMIO_PHYS + 2 * PAGE_SIZE, MMIO_PHYS + 3 * PAGE_SIZE)
    assert (a, b - a, c - b) == (IOMAP_START_VIRT, PAGE_SIZE, PAGE_SIZE)

    manager.mmio_dealloc_mapping(a, a + PAGE_SIZE)
    assert len(manager.free_mmio_ranges()) == 2
    manager.mmio_dealloc_mapping(c, c + PAGE_SIZE)
    assert len(manager.free_mmio_ranges()) == 2
    manager.mmio_dealloc_mapping(b, b + PAGE_SIZE)
    assert manager.free_mmio_ranges() == [(IOMAP_START_VIRT, IOMAP_END)]


def test_mmio_free_ranges_stay_sorted_and_disjoint(manager):
    addrs = [manager.mmio_alloc_mapping(MMIO_PHYS, MMIO_PHYS + PAGE_SIZE) for _ in range(8)]
    for addr in addrs[::3]:
        manager.mmio_dealloc_mapping(addr, addr + PAGE_SIZE)
    ranges = manager.free_mmio_ranges()
    for (b1, e1), (b2, e2) in zip(ranges, ranges[1:]):
        assert b1 < e1 < b2 < e2


def test_mmio_dealloc_of_free_space_is_rejected(manager):
    virt = manager.mmio_alloc_mapping(MMIO_PHYS, MMIO_PHYS + PAGE_SIZE)
    with pytest.raises(ValueError):
        manager.mmio_dealloc_mapping(virt + 4 * PAGE_SIZE, virt + 5 * PAGE_SIZE)


def test_mmio_too_fragmented(manager):
    addrs = [manager.mmio_alloc_mapping(MMIO_PHYS, MMIO_PHYS + PAGE_SIZE) for _ in range(60)]
    with pytest.raises(MmioSpaceError):
        for addr in addrs[::2]:
            manager.mmio_dealloc_mapping(addr, addr + PAGE_SIZE)
    assert len(manager.free_mmio_ranges()) == MMIO_MAX_FREE_RANGES


def test_dynmem_report_used_line_matches(manager):
    addr = manager.alloc(2 * PAGE_SIZE)
    report = manager.dynmem_report()
    assert report.startswith("===dynamic memory allocator infomation===\n")
    used_line = next(line for line in report.splitlines() if line.startswith("used size"))
    assert int(used_line.split(":")[1].strip(), 16) == manager.used
    manager.dealloc(addr, 2 * PAGE_SIZE)


def test_map_reports_have_titles(manager):
    assert manager.boot_map_report().startswith("System Memory Map: 3 entries\n")
    assert manager.dynamic_map_report().startswith(
        f"Dynamic Memory Map: {len(manager.dynamic_map)} entries\n"
    )