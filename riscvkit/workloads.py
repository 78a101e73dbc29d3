"""Small benchmark programs for the core, run against a memory-mapped console.

The arithmetic follows 32-bit two's-complement ``int`` semantics: products and
sums wrap, and division truncates toward zero.
"""

from __future__ import annotations

from types import MappingProxyType

from riscvkit.mmio import MmioConsole

__all__ = [
    "run_simple",
    "multiply",
    "hello",
    "mul_check",
    "reverse",
    "thuemorse",
    "thelie",
    "mandelbrot",
    "matmul",
    "matmul_threaded",
    "multicore",
]

_SIZE = 16
_REVERSE_LIMIT = 256
_THELIE_LENGTH = 1434
_FIXED_ONE = 8192
_MANDELBROT_ITERATIONS = 100

_SIMPLE_RESULTS = MappingProxyType(
    {
        "add": 5 + 6,
        "sub": 13 - 6,
        "and": 99 & 47,
        "or": 99 | 47,
        "xor": 99 ^ 47,
        "andoni": 99 ^ 47,
        "foo": 99 ^ 47,
        "mul": 6 * 7,
    }
)

_THELIE_ART = (
    "                   .MMM.\n"
    "                     .OMM                       MM?\n"
    "                      ~MMM                              .  ..\n"
    "                    =MM~MM8                    . :ZMMMMMMMMM:\n"
    "                   MM8  +MM.       . :OMMMMMMMD+....NMMD.  :MM\n"
    "                .MM8.    MMO .MMM8,.  .     .. NMMD..  MMMMMMM\n"
    "         .MMN  'MO       .MM.  ..MMM. .   OMMM . .?MMMMMMMMMMM\n"
    "    MMD=.  :M.  8.       .,ZM .MMM. .$MMM.... MMMMMMMMMMMMMMMM\n"
    "    MMMI.. ...  MM.. ....   .$ ..MMMO. ...MMMMMMMMMMMMMMMM7\n"
    "    MD .MMM8.. ...MMMM...   NMMO .   8MMMMMMMMMMMMMMMM .    IM\n"
    "    MD     ...ZMMMMMMMMMMMD.. ..~MMMMMMMMMMMMMMMM?.   ..MMMMMM\n"
    "    MD                    ..MMMMMMMMMMMMMMMMN .  . OMMMMMMMMMM\n"
    "    MD                   .MMMMMMMMMMMMMM8  .  .NMMMMMMMMMMMMMM\n"
    "    MD                   .MMMMMMMMMM. .   +MMMMMMMMMMMMMMMM~..\n"
    "    MD                   .MMMMMI.  .. MMMMMMMMMMMMMMMM8 ...,MM\n"
    "    MD                   .M.. .  ?MMMMMMMMMMMMMMMM.....DMMMMMM\n"
    "    MD                       $MMMMMMMMMMMMMMMM.. . MMMMMMMMMMM\n"
    "    MD                   .MMMMMMMMMMMMMMMI. ..7MMMMMMMMMMMMMMM\n"
    "    MD                   .MMMMMMMMMMM   . MMMMMMMMMMMMMMMM\n"
    "    MD                   .MMMMMM~ .  $MMMMMMMMMMMMMMMM\n"
    "    MD                   .MM,. ..8MMMMMMMMMMMMMMMM\n"
    "    MD                    ..:MMMMMMMMMMMMMMMM?\n"
    "    MM                   .MMMMMMMMMMMMMMN\n"
    "     MM                  .MMMMMMMMMM\n"
    "      .MMM=..            .MMMMMM\n"
    "          '77MMMMMMMMMMMMMM7\n"
)


def _wrap32(value: int) -> int:
    """Reduce ``value`` to a signed 32-bit integer."""
    value &= 0xFFFFFFFF
    return value - (1 << 32) if value & 0x80000000 else value


def _cdiv(a: int, b: int) -> int:
    """Integer division truncating toward zero, wrapped to 32 bits."""
    quotient = abs(a) // abs(b)
    return _wrap32(-quotient if (a < 0) != (b < 0) else quotient)


def _putstr(console: MmioConsole, text: str) -> None:
    for ch in text:
        console.putchar(ord(ch))


def run_simple(name: str) -> int:
    """Return the value ``main`` returns for one of the straight-line arithmetic programs."""
    try:
        return _SIMPLE_RESULTS[name]
    except KeyError:
        raise KeyError(f"unknown program {name!r}") from None


def multiply(x: int, y: int) -> int:
    """Multiply by shifting and adding, with 32-bit wraparound."""
    x = _wrap32(x)
    y = _wrap32(y)
    result = 0
    for shift in range(32):
        if (y >> shift) & 1:
            result = _wrap32(result + _wrap32(x << shift))
    return result


def hello(console: MmioConsole) -> int:
    """Print a greeting."""
    _putstr(console, "Hello, world!\n")
    return 0


def mul_check(console: MmioConsole) -> int:
    """Check that 2 * 3 is 6, print the verdict and set the finish register."""
    if multiply(2, 3) == 6:
        _putstr(console, "Ok")
        console.exit(0)
    else:
        _putstr(console, "Jello, world!\n")
        console.exit(1)
    return 0


def reverse(console: MmioConsole) -> int:
    """Read up to 256 characters and print them back in reverse, then a newline."""
    buffer: list[int] = []
    c = console.getchar()
    while c != -1 and len(buffer) < _REVERSE_LIMIT:
        byte = c & 0xFF
        buffer.append(byte - 0x100 if byte & 0x80 else byte)
        c = console.getchar()
    for value in reversed(buffer):
        console.putchar(value)
    console.putchar(ord("\n"))
    return 0


def _parity(x: int) -> int:
    result = 0
    while x != 0:
        result = (result + (x - 2 * _cdiv(x, 2))) % 2
        x = _cdiv(x, 2)
    return result


def thuemorse(console: MmioConsole, n: int = 128) -> None:
    """Print the first ``n`` terms of the Thue-Morse sequence, then a newline."""
    for i in range(n):
        console.putchar(ord("0") + _parity(i))
    console.putchar(10)


def thelie(console: MmioConsole) -> int:
    """Print the picture."""
    _putstr(console, _THELIE_ART[:_THELIE_LENGTH])
    return 0


def _fx_mul(x: int, y: int) -> int:
    t = _wrap32(x * y)
    return _cdiv(_wrap32(t + _FIXED_ONE // 2), _FIXED_ONE)


def _fx_div(x: int, y: int) -> int:
    t = _wrap32(x * _FIXED_ONE)
    return _cdiv(_wrap32(t + _cdiv(y, 2)), y)


def _fx(x: int) -> int:
    return _wrap32(x * _FIXED_ONE)


def _inside(a: int, b: int) -> bool:
    xn = yn = 0
    limit = _fx(4)
    for _ in range(_MANDELBROT_ITERATIONS):
        xn2 = _fx_mul(xn, xn)
        yn2 = _fx_mul(yn, yn)
        if _wrap32(xn2 + yn2) > limit:
            return False
        xn, yn = (
            _wrap32(_wrap32(xn2 - yn2) + a),
            _wrap32(_fx_mul(_fx(2), _fx_mul(xn, yn)) + b),
        )
    return True


def mandelbrot(console: MmioConsole, steps: int = 30) -> None:
    """Draw the Mandelbrot set in fixed point: '0' inside, '1' outside."""
    xmin, xmax = _fx(-2), _fx(1)
    deltax = _fx_div(_wrap32(xmax - xmin), _fx(2 * steps))
    ymin, ymax = _fx(-1), _fx(1)
    deltay = _fx_div(_wrap32(ymax - ymin), _fx(steps))
    for i in range(steps):
        y = _wrap32(ymin + _fx_mul(_fx(i), deltay))
        for j in range(2 * steps):
            x = _wrap32(xmin + _fx_mul(_fx(j), deltax))
            console.putchar(ord("0") if _inside(x, y) else ord("1"))
        console.putchar(10)


def _expected_product() -> list[list[int]]:
    return [[i * (120 + 16 * j) for j in range(_SIZE)] for i in range(_SIZE)]


def _operands() -> tuple[list[list[int]], list[list[int]]]:
    a = [[i] * _SIZE for i in range(_SIZE)]
    b = [[i + j for j in range(_SIZE)] for i in range(_SIZE)]
    return a, b


def _compute_rows(
    console: MmioConsole,
    a: list[list[int]],
    b: list[list[int]],
    c: list[list[int]],
    rows: range,
) -> None:
    for i in rows:
        for j in range(_SIZE):
            total = 0
            for k in range(_SIZE):
                total = _wrap32(total + multiply(a[i][k], b[k][j]))
            console.putchar(total)
            c[i][j] = total


def _arrays_equal(
    console: MmioConsole,
    expected: list[list[int]],
    actual: list[list[int]],
    rows: int,
) -> bool:
    for exp_row, act_row in zip(expected[:rows], actual[:rows]):
        for exp, act in zip(exp_row, act_row):
            console.putchar(exp)
            console.putchar(act)
            if exp != act:
                return False
    return True


def matmul(console: MmioConsole) -> list[list[int]]:
    """Multiply two 16x16 matrices, print each sum and the comparison, and report the check.

    Returns the product; the finish register gets 0 if it matches the expected table.
    """
    a, b = _operands()
    c = [[0] * _SIZE for _ in range(_SIZE)]
    _compute_rows(console, a, b, c, range(_SIZE))
    console.exit(0 if _arrays_equal(console, _expected_product(), c, _SIZE) else 1)
    return c


def matmul_threaded(console: MmioConsole) -> list[list[int]]:
    """Split the matrix product between two harts sharing memory.

    Hart 0 computes rows 0-7, hart 1 rows 8-15 and then raises a flag; hart 0
    waits for the flag and checks the first two rows. The harts run in that order.
    """
    a, b = _operands()
    c = [[0] * _SIZE for _ in range(_SIZE)]
    _compute_rows(console, a, b, c, range(0, _SIZE // 2))
    _compute_rows(console, a, b, c, range(_SIZE // 2, _SIZE))
    flag = sum(range(4))
    if flag != 0:
        matched = _arrays_equal(console, _expected_product(), c, 2)
        console.exit(0 if matched else 1)
    return c


def multicore(console: MmioConsole) -> None:
    """Two harts each sum half of an array; hart 0 checks the total and reports."""
    input_data = list(range(8))
    acc_thread0 = sum(input_data[:4])
    flag = sum(input_data[4:])
    if flag + acc_thread0 == 28:
        _putstr(console, "Success\n")
    else:
        _putstr(console, "Failure\n")