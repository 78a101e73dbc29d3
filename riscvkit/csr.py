"""Control and status register numbers, status bits and page-table helpers."""

from __future__ import annotations

from enum import IntEnum
from types import MappingProxyType

MSTATUS_IE = 0x00000001
MSTATUS_PRV = 0x00000006
MSTATUS_IE1 = 0x00000008
MSTATUS_PRV1 = 0x00000030
MSTATUS_IE2 = 0x00000040
MSTATUS_PRV2 = 0x00000180
MSTATUS_IE3 = 0x00000200
MSTATUS_PRV3 = 0x00000C00
MSTATUS_FS = 0x00003000
MSTATUS_XS = 0x0000C000
MSTATUS_MPRV = 0x00010000
MSTATUS_VM = 0x003E0000
MSTATUS32_SD = 0x80000000
MSTATUS64_SD = 0x8000000000000000

SSTATUS_IE = 0x00000001
SSTATUS_PIE = 0x00000008
SSTATUS_PS = 0x00000010
SSTATUS_FS = 0x00003000
SSTATUS_XS = 0x0000C000
SSTATUS_MPRV = 0x00010000
SSTATUS_TIE = 0x01000000
SSTATUS32_SD = 0x80000000
SSTATUS64_SD = 0x8000000000000000

MIP_SSIP = 0x00000002
MIP_HSIP = 0x00000004
MIP_MSIP = 0x00000008
MIP_STIP = 0x00000020
MIP_HTIP = 0x00000040
MIP_MTIP = 0x00000080

SIP_SSIP = MIP_SSIP
SIP_STIP = MIP_STIP

VM_MBARE = 0
VM_MBB = 1
VM_MBBID = 2
VM_SV32 = 8
VM_SV39 = 9
VM_SV48 = 10

UA_RV32 = 0
UA_RV64 = 4
UA_RV128 = 8

IRQ_SOFT = 0
IRQ_TIMER = 1
IRQ_HOST = 2
IRQ_COP = 3

IMPL_ROCKET = 1

DEFAULT_MTVEC = 0x100

PTE_V = 0x001
PTE_TYPE = 0x01E
PTE_R = 0x020
PTE_D = 0x040
PTE_SOFT = 0x380

PTE_TYPE_TABLE = 0x00
PTE_TYPE_TABLE_GLOBAL = 0x02
PTE_TYPE_URX_SR = 0x04
PTE_TYPE_URWX_SRW = 0x06
PTE_TYPE_UR_SR = 0x08
PTE_TYPE_URW_SRW = 0x0A
PTE_TYPE_URX_SRX = 0x0C
PTE_TYPE_URWX_SRWX = 0x0E
PTE_TYPE_SR = 0x10
PTE_TYPE_SRW = 0x12
PTE_TYPE_SRX = 0x14
PTE_TYPE_SRWX = 0x16
PTE_TYPE_SR_GLOBAL = 0x18
PTE_TYPE_SRW_GLOBAL = 0x1A
PTE_TYPE_SRX_GLOBAL = 0x1C
PTE_TYPE_SRWX_GLOBAL = 0x1E

PTE_PPN_SHIFT = 10


class PrivilegeLevel(IntEnum):
    """Privilege modes."""

    U = 0
    S = 1
    H = 2
    M = 3


class Cause(IntEnum):
    """Synchronous exception cause codes."""

    MISALIGNED_FETCH = 0x0
    FAULT_FETCH = 0x1
    ILLEGAL_INSTRUCTION = 0x2
    BREAKPOINT = 0x3
    MISALIGNED_LOAD = 0x4
    FAULT_LOAD = 0x5
    MISALIGNED_STORE = 0x6
    FAULT_STORE = 0x7
    USER_ECALL = 0x8
    SUPERVISOR_ECALL = 0x9
    HYPERVISOR_ECALL = 0xA
    MACHINE_ECALL = 0xB


CSRS = MappingProxyType(
    {
        "fflags": 0x1,
        "frm": 0x2,
        "fcsr": 0x3,
        "cycle": 0xC00,
        "time": 0xC01,
        "instret": 0xC02,
        "stats": 0xC0,
        "uarch0": 0xCC0,
        "uarch1": 0xCC1,
        "uarch2": 0xCC2,
        "uarch3": 0xCC3,
        "uarch4": 0xCC4,
        "uarch5": 0xCC5,
        "uarch6": 0xCC6,
        "uarch7": 0xCC7,
        "uarch8": 0xCC8,
        "uarch9": 0xCC9,
        "uarch10": 0xCCA,
        "uarch11": 0xCCB,
        "uarch12": 0xCCC,
        "uarch13": 0xCCD,
        "uarch14": 0xCCE,
        "uarch15": 0xCCF,
        "sstatus": 0x100,
        "stvec": 0x101,
        "sie": 0x104,
        "sscratch": 0x140,
        "sepc": 0x141,
        "sip": 0x144,
        "sptbr": 0x180,
        "sasid": 0x181,
        "cyclew": 0x900,
        "timew": 0x901,
        "instretw": 0x902,
        "stime": 0xD01,
        "scause": 0xD42,
        "sbadaddr": 0xD43,
        "stimew": 0xA01,
        "mstatus": 0x300,
        "mtvec": 0x301,
        "mtdeleg": 0x302,
        "mie": 0x304,
        "mtimecmp": 0x321,
        "mscratch": 0x340,
        "mepc": 0x341,
        "mcause": 0x342,
        "mbadaddr": 0x343,
        "mip": 0x344,
        "mtime": 0x701,
        "mcpuid": 0xF00,
        "mimpid": 0xF01,
        "mhartid": 0xF10,
        "mtohost": 0x780,
        "mfromhost": 0x781,
        "mreset": 0x782,
        "send_ipi": 0x783,
        "cycleh": 0xC80,
        "timeh": 0xC81,
        "instreth": 0xC82,
        "cyclehw": 0x980,
        "timehw": 0x981,
        "instrethw": 0x982,
        "stimeh": 0xD81,
        "stimehw": 0xA81,
        "mtimecmph": 0x361,
        "mtimeh": 0x741,
    }
)

_NAMES_BY_NUMBER = MappingProxyType({number: name for name, number in CSRS.items()})


def csr_number(name: str) -> int:
    """Return the address of the CSR called ``name``; KeyError if unknown."""
    try:
        return CSRS[name.lower()]
    except KeyError:
        raise KeyError(f"unknown CSR {name!r}") from None


def csr_name(number: int) -> str:
    """Return the name of the CSR at ``number``; KeyError if unknown."""
    try:
        return _NAMES_BY_NUMBER[number]
    except KeyError:
        raise KeyError(f"unknown CSR number {number:#x}") from None


def _type_bit(table: int, pte: int) -> bool:
    return bool((table >> (pte & 0x1F)) & 1)


def pte_table(pte: int) -> bool:
    """True if the entry points to a next-level page table."""
    return _type_bit(0x0000000A, pte)


def pte_ur(pte: int) -> bool:
    """True if user mode may read through the entry."""
    return _type_bit(0x0000AAA0, pte)


def pte_uw(pte: int) -> bool:
    """True if user mode may write through the entry."""
    return _type_bit(0x00008880, pte)


def pte_ux(pte: int) -> bool:
    """True if user mode may execute through the entry."""
    return _type_bit(0x0000A0A0, pte)


def pte_sr(pte: int) -> bool:
    """True if supervisor mode may read through the entry."""
    return _type_bit(0xAAAAAAA0, pte)


def pte_sw(pte: int) -> bool:
    """True if supervisor mode may write through the entry."""
    return _type_bit(0x88888880, pte)


def pte_sx(pte: int) -> bool:
    """True if supervisor mode may execute through the entry."""
    return _type_bit(0xA0A0A000, pte)


def pte_check_perm(pte: int, supervisor: bool, store: bool, fetch: bool) -> bool:
    """Check an access against the entry; a store takes precedence over a fetch."""
    if store:
        return pte_sw(pte) if supervisor else pte_uw(pte)
    if fetch:
        return pte_sx(pte) if supervisor else pte_ux(pte)
    return pte_sr(pte) if supervisor else pte_ur(pte)