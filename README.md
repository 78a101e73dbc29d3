# riscvkit

Tools for working with small RISC-V processor designs: encoding tables, an ELF
loader, a hex memory-file writer, a model of a memory-mapped console, and a set of
reference test programs with their expected behaviour.

## Installation

```
pip install .
```

The package needs nothing outside the Python standard library.

## Converting an ELF file to a hex file

```
elf2hex program.elf 0 64K program.hex
```

The arguments are the input ELF file, the base address of the hex image, the length
of the image and the output file. Both numbers are read like `strtoull` with base 0:
decimal by default, octal with a leading `0`, hexadecimal with `0x` or `0X`. The
length may end in `K`, `M` or `G` (powers of 1024). On bad arguments, an unreadable
ELF file or an output file that cannot be opened, an error and the usage text go to
standard error and the exit status is 1.

The output has, for each loadable section that starts no later than
`base + length`, a line `@<word address>` (relative to the base, in hex) followed by
one 32-bit little-endian word per line in lower-case hex without padding. Bytes that
are in memory but not in the file are written as `0`. The file ends with
`@<length / 4>`.

The same is available from Python through `riscvkit.hexfile`:
`parse_number(text)`, `parse_length(text)` (both raise `ValueError` on bad input),
`hex_lines(sections, base_address, length)` which yields the lines, and
`write_hex(sections, base_address, length, stream)`. `main(argv=None)` is the
command itself and returns its exit status.

## Modules

### `riscvkit.csr`

Status, interrupt, page-table and other register constants (`MSTATUS_IE`,
`MIP_MTIP`, `PTE_V`, …), the `PrivilegeLevel` and `Cause` enums, and the `CSRS`
mapping of register names to numbers. `csr_number(name)` (case-insensitive) and
`csr_name(number)` look registers up and raise `KeyError` for unknown ones.
`pte_table`, `pte_ur`, `pte_uw`, `pte_ux`, `pte_sr`, `pte_sw`, `pte_sx` test the
type field of a page-table entry, and `pte_check_perm(pte, supervisor, store, fetch)`
checks an access, a store taking precedence over a fetch.

### `riscvkit.opcodes`

`INSTRUCTIONS` is the table of `Instruction(name, match, mask)` entries;
`Instruction.matches(word)` tests `word & mask == match`. `lookup(name)` finds an
entry by name (`fence.i` and `fence_i` both work) and raises `KeyError` otherwise.
`decode(word)` returns the matching instruction with the most fixed bits, or `None`.

```python
from riscvkit.opcodes import decode
print(decode(0x00A00513).name)  # addi
```

### `riscvkit.elf`

`read_elf(path)` and `parse_elf(data)` read little-endian 32- or 64-bit ELF files and
return an `ElfFile` with `bit_width` and `sections`: one `Section(base,
section_size, data_size, data)` per non-empty `PT_LOAD` program header, in header
order, placed at its physical address. `load_elf(path, size)` and
`load_elf_bytes(data, size)` lay the sections out in a zero-filled `size`-byte
`bytearray`. Every problem (unreadable file, bad magic, unknown class, truncated
headers or segments, a segment that does not fit the image) raises `ElfError`, a
`ValueError`.

`memory_lines(image)` yields `(address, words)` for each 64-byte line of an image,
`words` being sixteen little-endian 32-bit values; a short last line is padded with
zeros.

```python
from riscvkit.elf import load_elf, memory_lines

image = load_elf("program.elf", 1 << 16)
for address, words in memory_lines(image):
    ...
```

### `riscvkit.mmio`

`MmioConsole` models the three device registers at `PUT_ADDR` (`0xF000FFF0`),
`GET_ADDR` (`0xF000FFF4`) and `FINISH_ADDR` (`0xF000FFF8`). Create it with optional
`stdin` bytes or text. `putchar(c)` records `c` in `writes`; `getchar()` hands out the
input bytes and then -1; `exit(code)` sets `exit_code`. `store(address, value)` and
`load(address)` go through the registers by address and raise `ValueError` for a
wrong direction or an unmapped address. `output` is the low byte of every write,
`text` is that output decoded as Latin-1, and `finished` tells whether `exit` was
called.

### `riscvkit.workloads`

The reference test programs, run against an `MmioConsole` with 32-bit `int`
arithmetic:

- `run_simple(name)`: the result of the straight-line programs `add`, `sub`, `and`,
  `or`, `xor`, `andoni`, `foo` and `mul`.
- `multiply(x, y)`: shift-and-add multiplication.
- `hello`, `thelie`: print fixed text.
- `mul_check`: prints `Ok` and exits with 0 if `2 * 3 == 6`.
- `reverse`: echoes up to 256 input characters in reverse, then a newline.
- `thuemorse(console, n=128)`: the Thue–Morse sequence as `0`/`1`, then a newline.
- `mandelbrot(console, steps=30)`: a fixed-point Mandelbrot picture, `0` inside.
- `matmul`, `matmul_threaded`: 16×16 matrix products that print their sums and
  comparisons, set the finish register to 0 on a match, and return the product.
- `multicore`: two half-array sums checked against 28, printing `Success` or
  `Failure`.

```python
from riscvkit.mmio import MmioConsole
from riscvkit.workloads import thuemorse

console = MmioConsole()
thuemorse(console, 128)
print(console.text)
```

## What it does not do

riscvkit does not simulate or connect to a processor. It does not send memory lines
to a board or start a program there, it does not compile the test programs for a
core, and the two-hart workloads run their harts one after the other in Python. Use
the workloads' console output as the reference to compare a processor's output
against.

## Running the tests

```
pip install .[test]
pytest
```