import pytest
from hypothesis import given, strategies as st

from buddyos.buddy import BuddyAllocator
from buddyos.memmap import (
    DYNMEM_START_PHYS_MINIMUM,
    DYNMEM_START_VIRT,
    IOMAP_START_VIRT,
    PAGE_SIZE,
    EntryType,
    MmapEntry,
    build_dynamic_map,
)
from buddyos.paging import (
    KERNEL_PAGE_FLAG,
    ConstructResult,
    PageFlag,
    PageIndex,
    PageTables,
    construct_dynamic,
    format_page_flags,
    phys_to_virt_dynmem,
    virt_to_phys_dynmem,
)

DYN_MAP = build_dynamic_map([MmapEntry(DYNMEM_START_PHYS_MINIMUM, 0x400000, EntryType.AVAILABLE)])

SPLIT_MAP = [
    MmapEntry(0x800000, 4 * PAGE_SIZE, EntryType.AVAILABLE),
    MmapEntry(0x2000000, 8 * PAGE_SIZE, EntryType.AVAILABLE),
]

MMIO_PHYS = 0xFD000000


def make_tables():
    allocator = BuddyAllocator(DYNMEM_START_VIRT, 0x400000)
    return PageTables(DYN_MAP, allocator), allocator


def test_page_index_of_iomap_start():
    assert PageIndex.from_virt(IOMAP_START_VIRT) == PageIndex(0x1FF, 0, 0, 0)


def test_page_index_of_dynmem_start():
    assert PageIndex.from_virt(DYNMEM_START_VIRT) == PageIndex(0, 0, 1, 0)


@given(st.integers(0, 511), st.integers(0, 511), st.integers(0, 511), st.integers(0, 511))
def test_page_index_from_composed_address(a, b, c, d):
    virt = (a << 39) | (b << 30) | (c << 21) | (d << 12)
    assert PageIndex.from_virt(virt) == PageIndex(a, b, c, d)


def test_next_page_carries():
    assert PageIndex(0, 0, 0, 511).next_page() == PageIndex(0, 0, 1, 0)
    assert PageIndex(0, 0, 511, 511).next_page() == PageIndex(0, 1, 0, 0)


def test_next_pdt_keeps_page_index():
    assert PageIndex(0, 0, 511, 5).next_pdt() == PageIndex(0, 1, 0, 5)


def test_next_page_overflow():
    with pytest.raises(OverflowError):
        PageIndex(511, 511, 511, 511).next_page()


@given(st.integers(0, 12 * PAGE_SIZE - 1))
def test_virt_phys_round_trip(offset):
    virt = DYNMEM_START_VIRT + offset
    phys = virt_to_phys_dynmem(virt, SPLIT_MAP)
    assert any(e.base <= phys < e.end for e in SPLIT_MAP)
    assert phys_to_virt_dynmem(phys, SPLIT_MAP) == virt


def test_virt_to_phys_crosses_entries():
    assert virt_to_phys_dynmem(DYNMEM_START_VIRT + 4 * PAGE_SIZE, SPLIT_MAP) == SPLIT_MAP[1].base


def test_invalid_dynmem_addresses():
    with pytest.raises(ValueError):
        virt_to_phys_dynmem(DYNMEM_START_VIRT + 12 * PAGE_SIZE, SPLIT_MAP)
    with pytest.raises(ValueError):
        virt_to_phys_dynmem(DYNMEM_START_VIRT - PAGE_SIZE, SPLIT_MAP)
    with pytest.raises(ValueError):
        phys_to_virt_dynmem(0x1000000, SPLIT_MAP)


def test_format_page_flags():
    assert format_page_flags(KERNEL_PAGE_FLAG) == "PRESENT | WRITABLE"
    assert format_page_flags(PageFlag.NO_EXECUTE | PageFlag.HUGE) == "HUGE | NO_EXECUTE"
    assert format_page_flags(0) == "0"


def test_construct_small_map():
    entries = [MmapEntry(DYNMEM_START_PHYS_MINIMUM, 16 * PAGE_SIZE, EntryType.AVAILABLE)]
    assert construct_dynamic(entries) == ConstructResult(16 * PAGE_SIZE, 3 * PAGE_SIZE)


def test_construct_needs_new_table_after_full_page_table():
    full = [MmapEntry(DYNMEM_START_PHYS_MINIMUM, 512 * PAGE_SIZE, EntryType.AVAILABLE)]
    over = [MmapEntry(DYNMEM_START_PHYS_MINIMUM, 513 * PAGE_SIZE, EntryType.AVAILABLE)]
    assert construct_dynamic(full).dyn_pagetable_len == 3 * PAGE_SIZE
    assert construct_dynamic(over).dyn_pagetable_len == 4 * PAGE_SIZE


def test_construct_too_few_pages():
    entries = [MmapEntry(DYNMEM_START_PHYS_MINIMUM, 2 * PAGE_SIZE, EntryType.AVAILABLE)]
    assert construct_dynamic(entries) == ConstructResult(2 * PAGE_SIZE, 0)


@given(st.lists(st.integers(0, 3000), min_size=1, max_size=5))
def test_construct_total_length_and_growth(page_counts):
    entries = [MmapEntry(i << 32, n * PAGE_SIZE, EntryType.AVAILABLE) for i, n in enumerate(page_counts)]
    result = construct_dynamic(entries)
    assert result.dyn_total_len == sum(page_counts) * PAGE_SIZE
    assert result.dyn_pagetable_len <= result.dyn_total_len
    bigger = entries + [MmapEntry(99 << 32, 600 * PAGE_SIZE, EntryType.AVAILABLE)]
    assert construct_dynamic(bigger).dyn_pagetable_len >= result.dyn_pagetable_len


def test_map_small_pages_allocates_three_tables():
    tables, allocator = make_tables()
    tables.map_range(IOMAP_START_VIRT, IOMAP_START_VIRT + 0x3000, MMIO_PHYS, KERNEL_PAGE_FLAG)
    assert allocator.used == 3 * PAGE_SIZE
    text = tables.describe()
    assert "   PT 0xffffff8000000000-0xffffff8000003000 to 0xfd000000-0xfd003000\n" in text
    assert "PML4E   0x1ff to " in text


def test_unmap_small_pages_keeps_tables_within_boundary():
    tables, allocator = make_tables()
    tables.map_range(IOMAP_START_VIRT, IOMAP_START_VIRT + 0x3000, MMIO_PHYS, KERNEL_PAGE_FLAG)
    tables.unmap_range(IOMAP_START_VIRT, IOMAP_START_VIRT + 0x3000)
    assert allocator.used == 3 * PAGE_SIZE
    assert "   PT " not in tables.describe()


def test_map_huge_page():
    tables, allocator = make_tables()
    tables.map_range(IOMAP_START_VIRT, IOMAP_START_VIRT + 0x200000, MMIO_PHYS, KERNEL_PAGE_FLAG)
    assert allocator.used == 2 * PAGE_SIZE
    line = "  PDE 0xffffff8000000000-0xffffff8000200000 to 0xfd000000-0xfd200000\n"
    assert line in tables.describe()
    tables.unmap_range(IOMAP_START_VIRT, IOMAP_START_VIRT + 0x200000)
    assert line not in tables.describe()


def test_unmap_last_entry_frees_page_table():
    tables, allocator = make_tables()
    begin = IOMAP_START_VIRT + PAGE_SIZE
    end = IOMAP_START_VIRT + 0x200000
    tables.map_range(begin, end, MMIO_PHYS, KERNEL_PAGE_FLAG)
    assert allocator.used == 3 * PAGE_SIZE
    tables.unmap_range(begin, end)
    assert allocator.used == 2 * PAGE_SIZE


def test_map_twice_is_rejected():
    tables, _ = make_tables()
    tables.map_range(IOMAP_START_VIRT, IOMAP_START_VIRT + PAGE_SIZE, MMIO_PHYS, KERNEL_PAGE_FLAG)
    with pytest.raises(ValueError):
        tables.map_range(IOMAP_START_VIRT, IOMAP_START_VIRT + PAGE_SIZE, MMIO_PHYS, KERNEL_PAGE_FLAG)


def test_map_requires_present_flag():
    tables, _ = make_tables()
    with pytest.raises(ValueError):
        tables.map_range(IOMAP_START_VIRT, IOMAP_START_VIRT + PAGE_SIZE, MMIO_PHYS, PageFlag.WRITABLE)


def test_map_requires_alignment():
    tables, _ = make_tables()
    with pytest.raises(ValueError):
        tables.map_range(IOMAP_START_VIRT + 1, IOMAP_START_VIRT + PAGE_SIZE, MMIO_PHYS, KERNEL_PAGE_FLAG)


def test_unmap_unmapped_is_rejected():
    tables, _ = make_tables()
    with pytest.raises(ValueError):
        tables.unmap_range(IOMAP_START_VIRT, IOMAP_START_VIRT + PAGE_SIZE)


def test_map_fails_when_allocator_is_exhausted():
    allocator = BuddyAllocator(DYNMEM_START_VIRT, 3 * PAGE_SIZE)
    tables = PageTables(DYN_MAP, allocator)
    with pytest.raises(MemoryError):
        tables.map_range(IOMAP_START_VIRT, IOMAP_START_VIRT + PAGE_SIZE, MMIO_PHYS, KERNEL_PAGE_FLAG)


def test_empty_tables_describe_nothing():
    tables, _ = make_tables()
    assert tables.describe() == ""