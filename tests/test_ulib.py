import io

import pytest

from xv6kit import ulib


@pytest.mark.parametrize("s,n", [("hello", 3), ("hello", 6), ("hello", 100), ("", 5), ("abcdefghijklmnop", 14)])
def test_safestrcpy_truncates_to_buffer(s, n):
    result = ulib.safestrcpy(s, n)
    assert len(result) == min(len(s), n - 1)
    assert s.startswith(result)


def test_safestrcpy_nonpositive_size():
    assert ulib.safestrcpy("abc", 0) == ""
    assert ulib.safestrcpy("abc", -4) == ""


def test_safestrcpy_stops_at_nul():
    result = ulib.safestrcpy("ab\0cd", 10)
    assert "\0" not in result
    assert "cd" not in result
    assert "ab".startswith(result) and len(result) == len("ab")


def test_strncpy_pads_with_nul():
    result = ulib.strncpy("abc", 6)
    assert len(result) == 6
    assert result.rstrip("\0") == "abc"


def test_strncpy_truncates_without_terminator():
    assert ulib.strncpy("abcdef", 3) == "abcdef"[:3]


@pytest.mark.parametrize("p,q", [("abc", "abd"), ("a", "ab"), ("", "x"), ("Zeta", "alpha")])
def test_strcmp_ordering(p, q):
    assert ulib.strcmp(p, q) < 0
    assert ulib.strcmp(q, p) == -ulib.strcmp(p, q)


def test_strcmp_equal_and_prefix():
    assert ulib.strcmp("same", "same") == 0
    assert ulib.strcmp("a", "ab") == -ord("b")
    assert ulib.strcmp("ab\0x", "ab\0y") == 0


@pytest.mark.parametrize("n", [0, 7, 42, 10000, 2147483647])
def test_atoi_round_trip(n):
    assert ulib.atoi(str(n)) == n


def test_atoi_stops_at_non_digit():
    assert ulib.atoi("42xyz") == ulib.atoi("42")
    assert ulib.atoi("") == 0
    assert ulib.atoi("-5") == ulib.atoi("")


def test_gets_reads_one_line():
    text = "ab\ncd"
    stream = io.StringIO(text)
    line = ulib.gets(stream, 100)
    assert line.endswith("\n")
    assert line + stream.read() == text


def test_gets_stops_at_carriage_return():
    stream = io.StringIO("xy\rz")
    assert ulib.gets(stream, 100) + stream.read() == "xy\rz"
    assert ulib.gets(io.StringIO("xy\rz"), 100).endswith("\r")


def test_gets_respects_limit():
    line = ulib.gets(io.StringIO("abcdef"), 4)
    assert len(line) == 3
    assert "abcdef".startswith(line)


def test_gets_at_eof():
    assert ulib.gets(io.StringIO(""), 10) == ""


@pytest.mark.parametrize("v", [0, 1, -1, 255, -2147483648, 2147483647, 123456])
def test_format_int_signed_decimal_round_trip(v):
    assert int(ulib.format_int(v, 10, True)) == v


@pytest.mark.parametrize("v", [0, 255, -1, 0xDEADBEEF])
def test_format_int_unsigned_hex(v):
    text = ulib.format_int(v, 16, False)
    assert int(text, 16) == v & 0xFFFFFFFF
    assert text == text.upper()


def test_format_int_bad_base():
    with pytest.raises(ValueError):
        ulib.format_int(5, 17, False)


def test_xv6_format_conversions():
    assert int(ulib.xv6_format("%d", -5)) == -5
    assert int(ulib.xv6_format("%x", 4096), 16) == 4096
    assert ulib.xv6_format("%c", 65) == chr(65)
    assert ulib.xv6_format("[%s]", "word") == "[" + "word" + "]"


def test_xv6_format_special_cases():
    assert ulib.xv6_format("%s", None) == "(null)"
    assert ulib.xv6_format("100%%") == "100%"
    assert ulib.xv6_format("%q") == "%q"
    assert ulib.xv6_format("abc%") == "abc"


def test_xv6_format_missing_argument():
    with pytest.raises(TypeError):
        ulib.xv6_format("%d %d", 1)


def test_fprintf_writes_formatted_text():
    out = io.StringIO()
    ulib.fprintf(out, "%s %d\n", "n", 12)
    assert out.getvalue() == ulib.xv6_format("%s %d\n", "n", 12)
    assert out.getvalue().startswith("n ")