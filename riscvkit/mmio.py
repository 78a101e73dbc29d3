"""A memory-mapped console: character output, character input and a finish register."""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field

__all__ = ["PUT_ADDR", "GET_ADDR", "FINISH_ADDR", "MmioConsole"]

PUT_ADDR = 0xF000FFF0
GET_ADDR = 0xF000FFF4
FINISH_ADDR = 0xF000FFF8


@dataclass
class MmioConsole:
    """The console device seen by programs through its three registers.

    ``stdin`` holds the bytes that ``getchar`` hands out; once they are used
    up it returns -1. Every value passed to ``putchar`` is kept in ``writes``.
    """

    stdin: bytes | str = b""
    writes: list[int] = field(default_factory=list)
    exit_code: int | None = None
    _pending: deque[int] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        data = self.stdin.encode("utf-8") if isinstance(self.stdin, str) else bytes(self.stdin)
        self._pending = deque(data)

    @property
    def output(self) -> bytes:
        """The low byte of every value written, as a program's terminal would see it."""
        return bytes(value & 0xFF for value in self.writes)

    @property
    def text(self) -> str:
        """The output decoded one character per byte."""
        return self.output.decode("latin-1")

    @property
    def finished(self) -> bool:
        """True once a value has been written to the finish register."""
        return self.exit_code is not None

    def putchar(self, c: int) -> int:
        """Write ``c`` to the output register and return it."""
        self.writes.append(c)
        return c

    def getchar(self) -> int:
        """Read the next input byte, or -1 when there is none."""
        return self._pending.popleft() if self._pending else -1

    def exit(self, code: int) -> int:
        """Write ``code`` to the finish register and return it."""
        self.exit_code = code
        return code

    def store(self, address: int, value: int) -> None:
        """Store a word at a device address."""
        if address == PUT_ADDR:
            self.putchar(value)
        elif address == FINISH_ADDR:
            self.exit(value)
        elif address == GET_ADDR:
            raise ValueError(f"register at {address:#x} is read-only")
        else:
            raise ValueError(f"no device register at {address:#x}")

    def load(self, address: int) -> int:
        """Load a word from a device address."""
        if address == GET_ADDR:
            return self.getchar()
        if address in (PUT_ADDR, FINISH_ADDR):
            raise ValueError(f"register at {address:#x} is write-only")
        raise ValueError(f"no device register at {address:#x}")