import pytest

from riscvkit.mmio import MmioConsole
from riscvkit.workloads import (
    hello,
    mandelbrot,
    matmul,
    matmul_threaded,
    mul_check,
    multicore,
    multiply,
    reverse,
    run_simple,
    thelie,
    thuemorse,
)

EXPECTED_ROW_1 = [120, 136, 152, 168, 184, 200, 216, 232, 248, 264, 280, 296, 312, 328, 344, 360]
EXPECTED_ROW_15 = [1800, 2040, 2280, 2520, 2760, 3000, 3240, 3480, 3720, 3960, 4200, 4440, 4680, 4920, 5160, 5400]


@pytest.mark.parametrize(
    "name, value",
    [("add", 11), ("sub", 7), ("and", 35), ("or", 111), ("xor", 76),
     ("andoni", 76), ("foo", 76), ("mul", 42)],
)
def test_run_simple(name, value):
    assert run_simple(name) == value


def test_run_simple_unknown():
    with pytest.raises(KeyError):
        run_simple("nope")


@pytest.mark.parametrize(
    "x, y, product",
    [(2, 3, 6), (6, 7, 42), (-3, 7, -21), (5, -4, -20), (0, 99, 0), (65536, 65536, 0)],
)
def test_multiply(x, y, product):
    assert multiply(x, y) == product


def test_hello():
    console = MmioConsole()
    assert hello(console) == 0
    assert console.text == "Hello, world!\n"


def test_mul_check():
    console = MmioConsole()
    assert mul_check(console) == 0
    assert console.text == "Ok"
    assert console.exit_code == 0


def test_reverse_short():
    console = MmioConsole(stdin="abc")
    assert reverse(console) == 0
    assert console.text == "cba\n"


def test_reverse_empty():
    console = MmioConsole()
    reverse(console)
    assert console.text == "\n"


def test_reverse_limit_consumes_one_extra():
    console = MmioConsole(stdin=b"x" * 256 + b"yz")
    reverse(console)
    assert console.output == b"x" * 256 + b"\n"
    assert console.getchar() == ord("z")


def test_reverse_high_byte_is_signed_char():
    console = MmioConsole(stdin=b"\xff")
    reverse(console)
    assert console.writes == [-1, 10]
    assert console.output == b"\xff\n"


def test_thuemorse():
    console = MmioConsole()
    thuemorse(console, 128)
    text = console.text
    assert len(text) == 129
    assert text.startswith("0110100110010110")
    assert text.endswith("\n")
    assert set(text[:-1]) == {"0", "1"}


def test_thelie():
    console = MmioConsole()
    assert thelie(console) == 0
    text = console.text
    assert text.startswith("                   .MMM.\n")
    assert len(text) <= 1434
    assert sum(1 for line in text.split("\n") if line.startswith("    MD")) == 13


def test_mandelbrot_shape_and_points():
    console = MmioConsole()
    mandelbrot(console, 30)
    rows = console.text.split("\n")
    assert rows[-1] == ""
    rows = rows[:-1]
    assert len(rows) == 30
    assert all(len(row) == 60 and set(row) <= {"0", "1"} for row in rows)
    assert rows[15][40] == "0"
    assert rows[15][59] == "1"


def test_matmul():
    console = MmioConsole()
    c = matmul(console)
    assert c[0] == [0] * 16
    assert c[1] == EXPECTED_ROW_1
    assert c[15] == EXPECTED_ROW_15
    assert console.exit_code == 0
    assert console.writes[:16] == [0] * 16
    assert len(console.writes) == 256 + 2 * 256


def test_matmul_threaded():
    console = MmioConsole()
    c = matmul_threaded(console)
    assert c[1] == EXPECTED_ROW_1
    assert c[15] == EXPECTED_ROW_15
    assert console.exit_code == 0
    assert len(console.writes) == 256 + 2 * 32
    assert console.writes[128:144] == [960, 1088, 1216, 1344, 1472, 1600, 1728, 1856,
                                      1984, 2112, 2240, 2368, 2496, 2624, 2752, 2880]


def test_multicore():
    console = MmioConsole()
    multicore(console)
    assert console.text == "Success\n"