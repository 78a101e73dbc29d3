"""RISC-V CSR and opcode tables, ELF loading, hex memory files, an MMIO console model and reference workloads."""

__version__ = "0.1.0"

__all__ = ["csr", "opcodes", "elf", "hexfile", "mmio", "workloads"]