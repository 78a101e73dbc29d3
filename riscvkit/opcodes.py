"""Instruction match/mask encodings and a simple table-driven decoder."""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType


@dataclass(frozen=True)
class Instruction:
    """An instruction encoding: a word belongs to it when ``word & mask == match``."""

    name: str
    match: int
    mask: int

    def matches(self, word: int) -> bool:
        """True if ``word`` is an encoding of this instruction."""
        return (word & self.mask) == self.match


_TABLE = (
    ("add", 0x33, 0xFE00707F),
    ("addi", 0x13, 0x707F),
    ("addiw", 0x1B, 0x707F),
    ("addw", 0x3B, 0xFE00707F),
    ("amoadd_d", 0x302F, 0xF800707F),
    ("amoadd_w", 0x202F, 0xF800707F),
    ("amoand_d", 0x6000302F, 0xF800707F),
    ("amoand_w", 0x6000202F, 0xF800707F),
    ("amomax_d", 0xA000302F, 0xF800707F),
    ("amomax_w", 0xA000202F, 0xF800707F),
    ("amomaxu_d", 0xE000302F, 0xF800707F),
    ("amomaxu_w", 0xE000202F, 0xF800707F),
    ("amomin_d", 0x8000302F, 0xF800707F),
    ("amomin_w", 0x8000202F, 0xF800707F),
    ("amominu_d", 0xC000302F, 0xF800707F),
    ("amominu_w", 0xC000202F, 0xF800707F),
    ("amoor_d", 0x4000302F, 0xF800707F),
    ("amoor_w", 0x4000202F, 0xF800707F),
    ("amoswap_d", 0x800302F, 0xF800707F),
    ("amoswap_w", 0x800202F, 0xF800707F),
    ("amoxor_d", 0x2000302F, 0xF800707F),
    ("amoxor_w", 0x2000202F, 0xF800707F),
    ("and", 0x7033, 0xFE00707F),
    ("andi", 0x7013, 0x707F),
    ("auipc", 0x17, 0x7F),
    ("beq", 0x63, 0x707F),
    ("bge", 0x5063, 0x707F),
    ("bgeu", 0x7063, 0x707F),
    ("blt", 0x4063, 0x707F),
    ("bltu", 0x6063, 0x707F),
    ("bne", 0x1063, 0x707F),
    ("c_add", 0x1000, 0xF003),
    ("c_add3", 0xA000, 0xE063),
    ("c_addi", 0xC002, 0xE003),
    ("c_addi4spn", 0xA001, 0xE003),
    ("c_addiw", 0xE002, 0xE003),
    ("c_addw", 0x9000, 0xF003),
    ("c_and3", 0xA060, 0xE063),
    ("c_beqz", 0x4002, 0xE003),
    ("c_bnez", 0x6002, 0xE003),
    ("c_j", 0x2, 0xE003),
    ("c_jal", 0x2002, 0xE003),
    ("c_ld", 0xE000, 0xE003),
    ("c_ldsp", 0xE001, 0xE003),
    ("c_li", 0x8002, 0xE003),
    ("c_lui", 0xA002, 0xE003),
    ("c_lw", 0xC000, 0xE003),
    ("c_lwsp", 0xC001, 0xE003),
    ("c_mv", 0x0, 0xF003),
    ("c_or3", 0xA040, 0xE063),
    ("c_sd", 0x6000, 0xE003),
    ("c_sdsp", 0x6001, 0xE003),
    ("c_slli", 0x1, 0xE003),
    ("c_slliw", 0x8001, 0xE003),
    ("c_srai", 0x2000, 0xE003),
    ("c_srli", 0x2001, 0xE003),
    ("c_sub", 0x8000, 0xF003),
    ("c_sub3", 0xA020, 0xE063),
    ("c_sw", 0x4000, 0xE003),
    ("c_swsp", 0x4001, 0xE003),
    ("csrrc", 0x3073, 0x707F),
    ("csrrci", 0x7073, 0x707F),
    ("csrrs", 0x2073, 0x707F),
    ("csrrsi", 0x6073, 0x707F),
    ("csrrw", 0x1073, 0x707F),
    ("csrrwi", 0x5073, 0x707F),
    ("div", 0x2004033, 0xFE00707F),
    ("divu", 0x2005033, 0xFE00707F),
    ("divuw", 0x200503B, 0xFE00707F),
    ("divw", 0x200403B, 0xFE00707F),
    ("fadd_d", 0x2000053, 0xFE00007F),
    ("fadd_s", 0x53, 0xFE00007F),
    ("fclass_d", 0xE2001053, 0xFFF0707F),
    ("fclass_s", 0xE0001053, 0xFFF0707F),
    ("fcvt_d_l", 0xD2200053, 0xFFF0007F),
    ("fcvt_d_lu", 0xD2300053, 0xFFF0007F),
    ("fcvt_d_s", 0x42000053, 0xFFF0007F),
    ("fcvt_d_w", 0xD2000053, 0xFFF0007F),
    ("fcvt_d_wu", 0xD2100053, 0xFFF0007F),
    ("fcvt_l_d", 0xC2200053, 0xFFF0007F),
    ("fcvt_l_s", 0xC0200053, 0xFFF0007F),
    ("fcvt_lu_d", 0xC2300053, 0xFFF0007F),
    ("fcvt_lu_s", 0xC0300053, 0xFFF0007F),
    ("fcvt_s_d", 0x40100053, 0xFFF0007F),
    ("fcvt_s_l", 0xD0200053, 0xFFF0007F),
    ("fcvt_s_lu", 0xD0300053, 0xFFF0007F),
    ("fcvt_s_w", 0xD0000053, 0xFFF0007F),
    ("fcvt_s_wu", 0xD0100053, 0xFFF0007F),
    ("fcvt_w_d", 0xC2000053, 0xFFF0007F),
    ("fcvt_w_s", 0xC0000053, 0xFFF0007F),
    ("fcvt_wu_d", 0xC2100053, 0xFFF0007F),
    ("fcvt_wu_s", 0xC0100053, 0xFFF0007F),
    ("fdiv_d", 0x1A000053, 0xFE00007F),
    ("fdiv_s", 0x18000053, 0xFE00007F),
    ("fence", 0xF, 0x707F),
    ("fence_i", 0x100F, 0x707F),
    ("feq_d", 0xA2002053, 0xFE00707F),
    ("feq_s", 0xA0002053, 0xFE00707F),
    ("fld", 0x3007, 0x707F),
    ("fle_d", 0xA2000053, 0xFE00707F),
    ("fle_s", 0xA0000053, 0xFE00707F),
    ("flt_d", 0xA2001053, 0xFE00707F),
    ("flt_s", 0xA0001053, 0xFE00707F),
    ("flw", 0x2007, 0x707F),
    ("fmadd_d", 0x2000043, 0x600007F),
    ("fmadd_s", 0x43, 0x600007F),
    ("fmax_d", 0x2A001053, 0xFE00707F),
    ("fmax_s", 0x28001053, 0xFE00707F),
    ("fmin_d", 0x2A000053, 0xFE00707F),
    ("fmin_s", 0x28000053, 0xFE00707F),
    ("fmsub_d", 0x2000047, 0x600007F),
    ("fmsub_s", 0x47, 0x600007F),
    ("fmul_d", 0x12000053, 0xFE00007F),
    ("fmul_s", 0x10000053, 0xFE00007F),
    ("fmv_d_x", 0xF2000053, 0xFFF0707F),
    ("fmv_s_x", 0xF0000053, 0xFFF0707F),
    ("fmv_x_d", 0xE2000053, 0xFFF0707F),
    ("fmv_x_s", 0xE0000053, 0xFFF0707F),
    ("fnmadd_d", 0x200004F, 0x600007F),
    ("fnmadd_s", 0x4F, 0x600007F),
    ("fnmsub_d", 0x200004B, 0x600007F),
    ("fnmsub_s", 0x4B, 0x600007F),
    ("fsd", 0x3027, 0x707F),
    ("fsgnj_d", 0x22000053, 0xFE00707F),
    ("fsgnj_s", 0x20000053, 0xFE00707F),
    ("fsgnjn_d", 0x22001053, 0xFE00707F),
    ("fsgnjn_s", 0x20001053, 0xFE00707F),
    ("fsgnjx_d", 0x22002053, 0xFE00707F),
    ("fsgnjx_s", 0x20002053, 0xFE00707F),
    ("fsqrt_d", 0x5A000053, 0xFFF0007F),
    ("fsqrt_s", 0x58000053, 0xFFF0007F),
    ("fsub_d", 0xA000053, 0xFE00007F),
    ("fsub_s", 0x8000053, 0xFE00007F),
    ("fsw", 0x2027, 0x707F),
    ("hrts", 0x20500073, 0xFFFFFFFF),
    ("jal", 0x6F, 0x7F),
    ("jalr", 0x67, 0x707F),
    ("lb", 0x3, 0x707F),
    ("lbu", 0x4003, 0x707F),
    ("ld", 0x3003, 0x707F),
    ("lh", 0x1003, 0x707F),
    ("lhu", 0x5003, 0x707F),
    ("lr_d", 0x1000302F, 0xF9F0707F),
    ("lr_w", 0x1000202F, 0xF9F0707F),
    ("lui", 0x37, 0x7F),
    ("lw", 0x2003, 0x707F),
    ("lwu", 0x6003, 0x707F),
    ("mrth", 0x30600073, 0xFFFFFFFF),
    ("mrts", 0x30500073, 0xFFFFFFFF),
    ("mul", 0x2000033, 0xFE00707F),
    ("mulh", 0x2001033, 0xFE00707F),
    ("mulhsu", 0x2002033, 0xFE00707F),
    ("mulhu", 0x2003033, 0xFE00707F),
    ("mulw", 0x200003B, 0xFE00707F),
    ("or", 0x6033, 0xFE00707F),
    ("ori", 0x6013, 0x707F),
    ("rem", 0x2006033, 0xFE00707F),
    ("remu", 0x2007033, 0xFE00707F),
    ("remuw", 0x200703B, 0xFE00707F),
    ("remw", 0x200603B, 0xFE00707F),
    ("sb", 0x23, 0x707F),
    ("sbreak", 0x100073, 0xFFFFFFFF),
    ("sc_d", 0x1800302F, 0xF800707F),
    ("sc_w", 0x1800202F, 0xF800707F),
    ("scall", 0x73, 0xFFFFFFFF),
    ("sd", 0x3023, 0x707F),
    ("sfence_vm", 0x10100073, 0xFFF07FFF),
    ("sh", 0x1023, 0x707F),
    ("sll", 0x1033, 0xFE00707F),
    ("slli", 0x1013, 0xFC00707F),
    ("slliw", 0x101B, 0xFE00707F),
    ("sllw", 0x103B, 0xFE00707F),
    ("slt", 0x2033, 0xFE00707F),
    ("slti", 0x2013, 0x707F),
    ("sltiu", 0x3013, 0x707F),
    ("sltu", 0x3033, 0xFE00707F),
    ("sra", 0x40005033, 0xFE00707F),
    ("srai", 0x40005013, 0xFC00707F),
    ("sraiw", 0x4000501B, 0xFE00707F),
    ("sraw", 0x4000503B, 0xFE00707F),
    ("sret", 0x10000073, 0xFFFFFFFF),
    ("srl", 0x5033, 0xFE00707F),
    ("srli", 0x5013, 0xFC00707F),
    ("srliw", 0x501B, 0xFE00707F),
    ("srlw", 0x503B, 0xFE00707F),
    ("sub", 0x40000033, 0xFE00707F),
    ("subw", 0x4000003B, 0xFE00707F),
    ("sw", 0x2023, 0x707F),
    ("wfi", 0x10200073, 0xFFFFFFFF),
    ("xor", 0x4033, 0xFE00707F),
    ("xori", 0x4013, 0x707F),
)

INSTRUCTIONS: tuple[Instruction, ...] = tuple(
    Instruction(name, match, mask) for name, match, mask in _TABLE
)

_BY_NAME = MappingProxyType({insn.name: insn for insn in INSTRUCTIONS})


def lookup(name: str) -> Instruction:
    """Return the instruction called ``name`` (``fence.i`` and ``fence_i`` both work)."""
    key = name.strip().lower().replace(".", "_")
    try:
        return _BY_NAME[key]
    except KeyError:
        raise KeyError(f"unknown instruction {name!r}") from None


def decode(word: int) -> Instruction | None:
    """Return the instruction that ``word`` encodes, or None if none matches.

    When several encodings match, the one with the most fixed bits wins.
    """
    candidates = [insn for insn in INSTRUCTIONS if insn.matches(word)]
    if not candidates:
        return None
    return max(candidates, key=lambda insn: bin(insn.mask).count("1"))