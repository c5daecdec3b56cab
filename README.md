# buddyos

buddyos is a small hobby-kernel core made of plain Python objects. It covers
the parts of a kernel that do not need real hardware: memory management,
page tables, PS/2 input decoding, a framebuffer window system and a
terminal. You drive them from ordinary code and tests, and you can inspect
them the same way.

## Modules

- `buddyos.buddy`: `BuddyAllocator(start_addr, total_len)` is a binary buddy
  allocator with 4096-byte units (`BUDDY_UNIT`).
  - `alloc_slice(length)` returns a `Slice(addr, length)`, or `None` when no
    block fits. `alloc(length)` returns only the address.
  - `dealloc(addr, length)` frees a block and merges free buddies.
  - The attribute `used` counts the bytes allocated.
  - A zero allocation length, a double free or an address outside the
    allocator raises `ValueError`.
- `buddyos.memmap` works on boot memory maps.
  - `MmapEntry` and `EntryType` describe the entries. `entry_type_name` gives
    an entry type's display name.
  - `build_dynamic_map` keeps the page-aligned available memory that lies
    above `DYNMEM_START_PHYS_MINIMUM`.
  - `format_memory_map` renders a map as text.
- `buddyos.paging` models 4-level x86-64 page tables.
  - `PageFlag` holds the entry flags and `format_page_flags` names the flags
    that are set.
  - `PageIndex` splits a virtual address into table indices.
  - `virt_to_phys_dynmem` and `phys_to_virt_dynmem` translate addresses.
  - `construct_dynamic` works out how many pages the tables for dynamic
    memory need.
  - `PageTables` has `map_range`, `unmap_range` and `describe`. `map_range`
    uses 2 MiB huge pages where it can.
- `buddyos.memory`: `MemoryManager(entries)` joins these parts.
  - Dynamic memory: `alloc`, `dealloc`, `used`.
  - The MMIO window: `mmio_alloc_mapping`, `mmio_dealloc_mapping`,
    `free_mmio_ranges`. When the window is exhausted or too fragmented it
    raises `MmioSpaceError`.
  - Text reports: `boot_map_report`, `dynamic_map_report`, `dynmem_report`.
- `buddyos.keycode` and `buddyos.ps2`: PS/2 input.
  - `Keycode` is an `IntEnum` of keys.
  - `Ps2Keyboard.put_byte` decodes scan-code set 1 into `KeyEvent`s.
  - `Ps2Keyboard.process_keyevent` tracks shift, ctrl, alt and the lock keys,
    and returns a `KeyChar`.
  - `Ps2Mouse.put_byte` assembles 3-byte packets into `MouseEvent`s.
- `buddyos.font`: `glyph(code)` returns the 16 row bytes of an 8x16 glyph,
  for codes 0 to 255.
- `buddyos.shapes` has `Point`, `Size` and `Rect`. `Rect` offers `contains`,
  `intersect` and `union`.
- `buddyos.graphic`:
  - `Framebuffer(width, height, pitch=None)` holds 32-bit pixels. `pitch` is
    counted in pixels. `pixel(x, y)` reads a pixel back.
  - `Graphic` draws on a framebuffer with an offset and a clipping rectangle:
    pixels, filled and outlined rectangles, font characters, strings (with or
    without wrapping) and `bitblt`.
- `buddyos.gui`: `Gui(framebuffer)` is a tiny window system.
  - It has `new_window`, `mouse_move`, `draw_all`, `invalidate` and `redraw`.
  - It draws a mouse pointer.
  - A `Window` can have a `proc` that receives `WindowMessage.PAINT`.
- `buddyos.tty`: `Tty` sends output to its registered `TtyDevice`s.
  - Output: `puts` and `printf` (`%`-formatting).
  - Input: `on_read` collects characters into `input`.
  - `panic` writes a report, flushes every device and raises `KernelPanic`.
  - `StreamDevice` writes to any text stream.
- `buddyos.tty_window`: `TtyWindow(gui, tty)` is an 80x25 text console in a
  window. `lines()` returns its rows.
- `buddyos.events`:
  - `InterruptQueue` is a bounded FIFO of `IntrMessage`s. `push` returns
    `False` when the queue is full, and `try_pop` returns `None` when it is
    empty.
  - `InputDispatcher` sends keyboard bytes to the terminal as characters and
    mouse bytes to the GUI pointer.

## Examples

```python
from buddyos.buddy import BuddyAllocator

heap = BuddyAllocator(0x10000000, 0x200000)
block = heap.alloc_slice(5000)   # rounded up to 8192 bytes
assert block.length == 8192
heap.dealloc(block.addr, block.length)
assert heap.used == 0
```

```python
from buddyos.graphic import Framebuffer
from buddyos.gui import Gui
from buddyos.tty import Tty
from buddyos.tty_window import TtyWindow

fb = Framebuffer(1024, 768)
gui = Gui(fb)
tty = Tty()
console = TtyWindow(gui, tty)
tty.puts("hello\n")
gui.draw_all()
print(console.lines()[0].rstrip())   # hello
```

## What it does not do

buddyos is a library of in-memory models. It does not boot. It does not talk
to real devices, interrupt controllers or a real MMU, and it does not show
anything on a screen: the framebuffer is a list of pixel values that you read
back with `Framebuffer.pixel`. There is no command-line program. You feed the
input bytes yourself, for example through `InputDispatcher`.

## Tests

Install the `test` extra and run `pytest`.