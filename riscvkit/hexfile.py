"""Writing an address range of an ELF image as a word-per-line hex memory file."""

from __future__ import annotations

import string
import sys
from collections.abc import Iterable, Iterator, Sequence
from typing import TextIO

from riscvkit.elf import ElfError, Section, read_elf

__all__ = ["parse_number", "parse_length", "hex_lines", "write_hex", "main"]

_MASK64 = (1 << 64) - 1
_WHITESPACE = " \t\n\v\f\r"
_DIGITS = {8: "01234567", 10: string.digits, 16: string.hexdigits}
_SUFFIXES = {"K": 1024, "M": 1024 * 1024, "G": 1024 * 1024 * 1024}

_USAGE = """\
Usage: {prog} <elf-file> <base-address> <length> <output-hex>
This program converts a specified address range from an ELF file into a hex file
  elf-file        input ELF file to convert to a hex file
  base-address    base address of output hex file
                    This value is interpreted as decimal by default, but it can also be
                    interpreted as octal with a '0' prefix or hex with a '0x' or '0X' prefix
  length          intended length of output hex file
                    This value can use a K, M, or G suffix
  output-hex      filename for output hex file
"""


def _scan_unsigned(text: str) -> tuple[int, str]:
    """Read an unsigned 64-bit number from the start of ``text``; return it and the rest."""
    s = text.lstrip(_WHITESPACE)
    i = 0
    negative = False
    if s[:1] in ("+", "-") and s:
        negative = s[0] == "-"
        i = 1
    if s[i : i + 2].lower() == "0x" and s[i + 2 : i + 3] and s[i + 2] in _DIGITS[16]:
        base = 16
        i += 2
    elif s[i : i + 1] == "0":
        base = 8
    else:
        base = 10
    start = i
    allowed = _DIGITS[base]
    while i < len(s) and s[i] in allowed:
        i += 1
    if i == start:
        return 0, text
    value = int(s[start:i], base)
    if value > _MASK64:
        value = _MASK64
    elif negative:
        value = -value & _MASK64
    return value, s[i:]


def parse_number(text: str) -> int:
    """Parse a decimal, ``0``-prefixed octal or ``0x``-prefixed hex number."""
    value, rest = _scan_unsigned(text)
    if rest:
        raise ValueError(f"expected a number: {text!r}")
    return value


def parse_length(text: str) -> int:
    """Parse a number with an optional K, M or G (binary) suffix."""
    value, rest = _scan_unsigned(text)
    if rest in _SUFFIXES:
        return (value * _SUFFIXES[rest]) & _MASK64
    if rest:
        raise ValueError(
            f"expected a number with an optional suffix K, M, or G: {text!r}"
        )
    return value


def _word_at(data: bytes, offset: int) -> int:
    chunk = data[offset : offset + 4].ljust(4, b"\x00")
    return int.from_bytes(chunk, "little")


def hex_lines(
    sections: Iterable[Section], base_address: int, length: int
) -> Iterator[str]:
    """Yield the lines of a hex file covering ``length`` bytes from ``base_address``.

    Each section contributes an ``@<word address>`` line followed by one
    32-bit word per line; the file ends with ``@<length in words>``.
    """
    end = (base_address + length) & _MASK64
    for section in sections:
        if end < section.base:
            continue
        if section.base < base_address:
            offset = base_address - section.base
            hex_addr = 0
        else:
            offset = 0
            hex_addr = section.base - base_address
        yield f"@{hex_addr >> 2:x}"
        while section.base + offset < end and offset < section.data_size:
            yield f"{_word_at(section.data, offset):x}"
            offset += 4
        while section.base + offset < end and offset < section.section_size:
            yield "0"
            offset += 4
    yield f"@{length >> 2:x}"


def write_hex(
    sections: Iterable[Section], base_address: int, length: int, stream: TextIO
) -> None:
    """Write the hex file for the given range to ``stream``."""
    for line in hex_lines(sections, base_address, length):
        stream.write(line + "\n")


def main(argv: Sequence[str] | None = None) -> int:
    """Convert an address range of an ELF file to a hex file; return the exit status."""
    prog = "elf2hex"
    args = list(sys.argv[1:] if argv is None else argv)
    err = sys.stderr
    usage = _USAGE.format(prog=prog)

    if len(args) != 4:
        err.write("ERROR: Incorrect command line arguments\n" + usage)
        return 1
    elf_filename, base_text, length_text, hex_filename = args

    try:
        base_address = parse_number(base_text)
    except ValueError:
        err.write("ERROR: base-address expected to be a number\n" + usage)
        return 1
    try:
        length = parse_length(length_text)
    except ValueError:
        err.write(
            "ERROR: length expected to be a number with an optional prefix K, M, or G\n"
            + usage
        )
        return 1

    try:
        elf = read_elf(elf_filename)
    except ElfError as exc:
        err.write(f"ERROR: {exc}\nERROR: failed opening ELF file\n")
        return 1

    try:
        with open(hex_filename, "w", encoding="ascii") as hex_file:
            write_hex(elf.sections, base_address, length, hex_file)
    except OSError:
        err.write(f'ERROR: unable to open "{hex_filename}" for writing\n')
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())