import struct

import pytest

from riscvkit.elf import (
    ElfError,
    ElfFile,
    Section,
    load_elf,
    load_elf_bytes,
    memory_lines,
    parse_elf,
    read_elf,
)

PT_LOAD = 1
PT_NOTE = 4


def build_elf(segments, elf_class=32):
    """Build ELF bytes; segments are (type, paddr, payload, memsz)."""
    if elf_class == 32:
        ehdr_size, phdr_size = 52, 32
    else:
        ehdr_size, phdr_size = 64, 56
    phoff = ehdr_size
    data_offset = phoff + phdr_size * len(segments)
    ident = (b"\x7fELF" + bytes([1 if elf_class == 32 else 2, 1, 1])).ljust(16, b"\x00")

    phdrs = b""
    payloads = b""
    for p_type, paddr, payload, memsz in segments:
        offset = data_offset + len(payloads)
        if elf_class == 32:
            phdrs += struct.pack(
                "<8I", p_type, offset, paddr, paddr, len(payload), memsz, 5, 4
            )
        else:
            phdrs += struct.pack(
                "<IIQQQQQQ", p_type, 5, offset, paddr, paddr, len(payload), memsz, 4
            )
        payloads += payload

    if elf_class == 32:
        ehdr = struct.pack(
            "<16sHHIIIIIHHHHHH",
            ident, 2, 243, 1, 0, phoff, 0, 0, ehdr_size, phdr_size, len(segments), 40, 0, 0,
        )
    else:
        ehdr = struct.pack(
            "<16sHHIQQQIHHHHHH",
            ident, 2, 243, 1, 0, phoff, 0, 0, ehdr_size, phdr_size, len(segments), 64, 0, 0,
        )
    return ehdr + phdrs + payloads


def test_parse_32bit_sections():
    payload = b"\x13\x00\x00\x00\x6f\x00\x00\x00"
    elf = parse_elf(build_elf([(PT_LOAD, 0x100, payload, 16)]))
    assert isinstance(elf, ElfFile)
    assert elf.bit_width == 32
    assert elf.sections == (
        Section(base=0x100, section_size=16, data_size=len(payload), data=payload),
    )


def test_parse_64bit_sections():
    payload = b"abcd"
    elf = parse_elf(build_elf([(PT_LOAD, 0x40, payload, 4)], elf_class=64))
    assert elf.bit_width == 64
    assert [s.base for s in elf.sections] == [0x40]
    assert elf.sections[0].data == payload


def test_non_load_and_empty_segments_skipped():
    data = build_elf(
        [
            (PT_NOTE, 0x0, b"note", 4),
            (PT_LOAD, 0x10, b"", 0),
            (PT_LOAD, 0x20, b"keep", 8),
        ]
    )
    elf = parse_elf(data)
    assert [(s.base, s.data) for s in elf.sections] == [(0x20, b"keep")]


def test_too_small():
    with pytest.raises(ElfError, match="too small"):
        parse_elf(b"\x7fELF" + bytes(10))


def test_not_elf():
    data = bytearray(build_elf([(PT_LOAD, 0, b"x", 1)]))
    data[0] = 0
    with pytest.raises(ElfError, match="not an elf"):
        parse_elf(bytes(data))


def test_bad_class():
    data = bytearray(build_elf([(PT_LOAD, 0, b"x", 1)]))
    data[4] = 3
    with pytest.raises(ElfError, match="neither"):
        parse_elf(bytes(data))


def test_truncated_program_headers():
    data = build_elf([(PT_LOAD, 0, b"", 4), (PT_LOAD, 8, b"", 4)])
    with pytest.raises(ElfError, match="program header"):
        parse_elf(data[:60])


def test_filesz_larger_than_memsz():
    with pytest.raises(ElfError, match="larger than memory"):
        parse_elf(build_elf([(PT_LOAD, 0, b"abcdefgh", 4)]))


def test_section_overflow():
    data = build_elf([(PT_LOAD, 0, b"abcdefgh", 8)])
    with pytest.raises(ElfError, match="section overflow"):
        parse_elf(data[:-4])


def test_load_places_data_and_zero_fills():
    payload = b"\x01\x02\x03\x04"
    data = build_elf([(PT_LOAD, 8, payload, 12)])
    image = load_elf_bytes(data, 32)
    assert len(image) == 32
    assert image[8:12] == payload
    assert image[12:20] == bytes(8)
    assert image[:8] == bytes(8)


def test_load_overflow_of_file_data():
    data = build_elf([(PT_LOAD, 30, b"abcd", 4)])
    with pytest.raises(ElfError, match="overflow output buffer"):
        load_elf_bytes(data, 32)


def test_load_overflow_of_zeros():
    data = build_elf([(PT_LOAD, 24, b"ab", 16)])
    with pytest.raises(ElfError, match="zeros"):
        load_elf_bytes(data, 32)


def test_read_and_load_from_path(tmp_path):
    payload = b"\xaa\xbb\xcc\xdd"
    path = tmp_path / "prog.elf"
    path.write_bytes(build_elf([(PT_LOAD, 4, payload, 4)]))
    assert read_elf(path).sections[0].data == payload
    assert load_elf(path, 16)[4:8] == payload


def test_missing_file(tmp_path):
    with pytest.raises(ElfError, match="failed opening"):
        read_elf(tmp_path / "absent.elf")


def test_memory_lines_words_and_addresses():
    image = bytearray(128)
    image[0:4] = struct.pack("<I", 7)
    image[64:68] = struct.pack("<I", 9)
    lines = list(memory_lines(image))
    assert [address for address, _ in lines] == [0, 64]
    assert all(len(words) == 16 for _, words in lines)
    assert lines[0][1][0] == 7
    assert lines[1][1][0] == 9


def test_memory_lines_pads_short_tail():
    image = bytes(64) + struct.pack("<I", 5) + b"\x01\x00"
    lines = list(memory_lines(image))
    assert len(lines) == 2
    assert lines[1][1][:2] == (5, 1)
    assert lines[1][1][2:] == (0,) * 14


def test_memory_lines_round_trip():
    image = bytes(range(256))
    rebuilt = b"".join(struct.pack("<16I", *words) for _, words in memory_lines(image))
    assert rebuilt == image