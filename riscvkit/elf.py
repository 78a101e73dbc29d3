"""Reading ELF program headers and building flat memory images from them."""

from __future__ import annotations

import os
import struct
from collections.abc import Iterator
from dataclasses import dataclass

__all__ = [
    "ElfError",
    "Section",
    "ElfFile",
    "parse_elf",
    "read_elf",
    "load_elf_bytes",
    "load_elf",
    "memory_lines",
]

_MAGIC = b"\x7fELF"
_EI_CLASS = 4
_ELFCLASS32 = 1
_ELFCLASS64 = 2
_PT_LOAD = 1

_EHDR32_SIZE = 52
_EHDR64_SIZE = 64

_PHDR32 = struct.Struct("<8I")
_PHDR64 = struct.Struct("<IIQQQQQQ")

_LINE_BYTES = 64
_LINE_WORDS = struct.Struct("<16I")


class ElfError(ValueError):
    """Raised when a file cannot be read as a loadable ELF image."""


@dataclass(frozen=True)
class Section:
    """A loadable segment: ``section_size`` bytes at ``base``, the first ``data_size`` from the file."""

    base: int
    section_size: int
    data_size: int
    data: bytes


@dataclass(frozen=True)
class ElfFile:
    """The loadable segments of a 32- or 64-bit ELF file."""

    bit_width: int
    sections: tuple[Section, ...]


@dataclass(frozen=True)
class _ProgramHeader:
    type: int
    offset: int
    paddr: int
    filesz: int
    memsz: int


def _program_headers(data: bytes) -> tuple[int, list[_ProgramHeader]]:
    if len(data) < _EHDR32_SIZE:
        raise ElfError("file too small to be a valid elf file")
    if data[:4] != _MAGIC:
        raise ElfError("file is not an elf file")

    elf_class = data[_EI_CLASS]
    if elf_class == _ELFCLASS32:
        bit_width, phdr = 32, _PHDR32
        (phoff,) = struct.unpack_from("<I", data, 28)
        (phnum,) = struct.unpack_from("<H", data, 44)
    elif elf_class == _ELFCLASS64:
        if len(data) < _EHDR64_SIZE:
            raise ElfError("file too small to be a valid elf file")
        bit_width, phdr = 64, _PHDR64
        (phoff,) = struct.unpack_from("<Q", data, 32)
        (phnum,) = struct.unpack_from("<H", data, 56)
    else:
        raise ElfError("file is neither 32-bit nor 64-bit")

    if len(data) < phoff + phnum * phdr.size:
        raise ElfError("file too small for expected number of program header tables")

    headers = []
    for raw in phdr.iter_unpack(data[phoff : phoff + phnum * phdr.size]):
        if bit_width == 32:
            p_type, offset, _vaddr, paddr, filesz, memsz, _flags, _align = raw
        else:
            p_type, _flags, offset, _vaddr, paddr, filesz, memsz, _align = raw
        headers.append(_ProgramHeader(p_type, offset, paddr, filesz, memsz))
    return bit_width, headers


def parse_elf(data: bytes) -> ElfFile:
    """Parse ELF bytes and return their non-empty PT_LOAD segments in header order."""
    data = bytes(data)
    bit_width, headers = _program_headers(data)
    sections = []
    for header in headers:
        if header.type != _PT_LOAD or header.memsz == 0:
            continue
        if header.memsz < header.filesz:
            raise ElfError("file size is larger than memory size")
        if header.filesz > 0 and header.offset + header.filesz > len(data):
            raise ElfError("file section overflow")
        sections.append(
            Section(
                base=header.paddr,
                section_size=header.memsz,
                data_size=header.filesz,
                data=data[header.offset : header.offset + header.filesz],
            )
        )
    return ElfFile(bit_width=bit_width, sections=tuple(sections))


def _read_file(path: str | os.PathLike[str]) -> bytes:
    try:
        with open(path, "rb") as handle:
            return handle.read()
    except OSError as exc:
        raise ElfError(f'failed opening file "{os.fspath(path)}"') from exc


def read_elf(path: str | os.PathLike[str]) -> ElfFile:
    """Read and parse the ELF file at ``path``."""
    return parse_elf(_read_file(path))


def load_elf_bytes(data: bytes, size: int) -> bytearray:
    """Place the loadable segments of ``data`` at their physical addresses in a ``size``-byte image."""
    image = bytearray(size)
    for section in parse_elf(data).sections:
        base = section.base
        if section.data_size > 0:
            if base + section.data_size > size:
                raise ElfError("file section will overflow output buffer")
            image[base : base + section.data_size] = section.data
        if section.section_size > section.data_size:
            if base + section.section_size > size:
                raise ElfError("zeros at end of file section will overflow output buffer")
            image[base + section.data_size : base + section.section_size] = bytes(
                section.section_size - section.data_size
            )
    return image


def load_elf(path: str | os.PathLike[str], size: int) -> bytearray:
    """Load the ELF file at ``path`` into a ``size``-byte memory image."""
    return load_elf_bytes(_read_file(path), size)


def memory_lines(image: bytes) -> Iterator[tuple[int, tuple[int, ...]]]:
    """Split an image into 64-byte lines of sixteen little-endian 32-bit words.

    Yields ``(address, words)``; a short final line is padded with zeros.
    """
    for address in range(0, len(image), _LINE_BYTES):
        chunk = bytes(image[address : address + _LINE_BYTES])
        chunk = chunk.ljust(_LINE_BYTES, b"\x00")
        yield address, _LINE_WORDS.unpack(chunk)