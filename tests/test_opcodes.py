import pytest

from riscvkit.opcodes import INSTRUCTIONS, Instruction, decode, lookup


@pytest.mark.parametrize(
    "name, match, mask",
    [
        ("add", 0x33, 0xFE00707F),
        ("addi", 0x13, 0x707F),
        ("amoswap_w", 0x800202F, 0xF800707F),
        ("c_mv", 0x0, 0xF003),
        ("fence_i", 0x100F, 0x707F),
        ("hrts", 0x20500073, 0xFFFFFFFF),
        ("lr_w", 0x1000202F, 0xF9F0707F),
        ("sfence_vm", 0x10100073, 0xFFF07FFF),
        ("xori", 0x4013, 0x707F),
    ],
)
def test_lookup_values(name, match, mask):
    insn = lookup(name)
    assert (insn.match, insn.mask) == (match, mask)
    assert insn.name == name


def test_lookup_accepts_dotted_and_upper_case():
    assert lookup("FENCE.I") == lookup("fence_i")


def test_lookup_unknown_raises():
    with pytest.raises(KeyError):
        lookup("nosuchop")


def test_matches():
    add = Instruction("add", 0x33, 0xFE00707F)
    assert add.matches(0x00A58533)
    assert not add.matches(0x40B50533)


@pytest.mark.parametrize(
    "word, name",
    [
        (0x00A58533, "add"),
        (0x40B50533, "sub"),
        (0x00000013, "addi"),
        (0x00000073, "scall"),
        (0x00100073, "sbreak"),
        (0x10200073, "wfi"),
        (0x0000006F, "jal"),
        (0x02B50533, "mul"),
    ],
)
def test_decode_known_words(word, name):
    insn = decode(word)
    assert insn.name == name
    assert insn.matches(word)


def test_every_match_decodes_to_itself():
    for insn in INSTRUCTIONS:
        assert decode(insn.match) == insn, insn.name


def test_decode_unknown_returns_none():
    assert decode(0xFFFFFFFF) is None