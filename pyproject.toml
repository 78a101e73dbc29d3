[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "riscvkit"
version = "0.1.0"
description = "RISC-V CSR and opcode tables, ELF loading, hex memory files and reference workloads"
requires-python = ">=3.10"
dependencies = []
keywords = ["riscv", "elf", "hex", "fpga", "csr", "opcodes", "mmio"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Embedded Systems",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
elf2hex = "riscvkit.hexfile:main"

[tool.hatch.build.targets.wheel]
packages = ["riscvkit"]

[tool.pytest.ini_options]
addopts = "-ra"
