"""Small string, input and formatting helpers of the user library."""

from __future__ import annotations

import itertools

_DIGITS = "0123456789ABCDEF"
_MASK32 = 0xFFFFFFFF


def _cstr(s):
    """The part of s before the first NUL."""
    return s.partition("\0")[0]


def _to_int32(value):
    value &= _MASK32
    return value - (1 << 32) if value & 0x80000000 else value


def safestrcpy(src, n):
    """Text a NUL-terminated copy into a buffer of n bytes would hold."""
    if n <= 0:
        return ""
    return _cstr(src)[: n - 1]


def strncpy(src, n):
    """Exactly n characters of src, NUL-padded; not NUL-terminated if src is long."""
    if n <= 0:
        return ""
    return _cstr(src)[:n].ljust(n, "\0")


def strcmp(p, q):
    """Difference of the first differing characters, or 0 if equal."""
    for a, b in itertools.zip_longest(_cstr(p), _cstr(q), fillvalue="\0"):
        if a != b:
            return ord(a) - ord(b)
    return 0


def atoi(s):
    """Value of the leading decimal digits of s, as a 32-bit int."""
    digits = "".join(itertools.takewhile(lambda c: c in "0123456789", s))
    return _to_int32(int(digits)) if digits else 0


def gets(stream, max_len):
    """Read one line (kept with its '\\n' or '\\r') of at most max_len - 1 characters."""
    chars = []
    while len(chars) + 1 < max_len:
        c = stream.read(1)
        if not c:
            break
        chars.append(c)
        if c in ("\n", "\r"):
            break
    return "".join(chars)


def format_int(value, base, signed):
    """Render a 32-bit integer in base 2..16 with upper-case digits."""
    if not 2 <= base <= 16:
        raise ValueError(f"unsupported base {base}")
    xx = _to_int32(value)
    negative = signed and xx < 0
    x = (-xx if negative else xx) & _MASK32
    digits = []
    while True:
        x, r = divmod(x, base)
        digits.append(_DIGITS[r])
        if x == 0:
            break
    if negative:
        digits.append("-")
    return "".join(reversed(digits))


def xv6_format(fmt, *args):
    """Format with %d, %x, %p, %s, %c and %%; other sequences print as written."""
    values = iter(args)

    def next_arg():
        try:
            return next(values)
        except StopIteration:
            raise TypeError(f"not enough arguments for format {fmt!r}") from None

    out = []
    pending = False
    for c in _cstr(fmt):
        if not pending:
            if c == "%":
                pending = True
            else:
                out.append(c)
            continue
        pending = False
        if c == "d":
            out.append(format_int(next_arg(), 10, True))
        elif c in ("x", "p"):
            out.append(format_int(next_arg(), 16, False))
        elif c == "s":
            s = next_arg()
            out.append("(null)" if s is None else _cstr(str(s)))
        elif c == "c":
            v = next_arg()
            out.append(v[:1] if isinstance(v, str) else chr(v & 0xFF))
        elif c == "%":
            out.append("%")
        else:
            out.append("%" + c)
    return "".join(out)


def fprintf(stream, fmt, *args):
    """Write formatted text to a text stream."""
    stream.write(xv6_format(fmt, *args))