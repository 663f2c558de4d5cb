"""Simple grep supporting only the ^ . * $ operators."""

from __future__ import annotations

import sys

_BUFSIZE = 1024


def match(regex, text):
    """True if regex matches anywhere in text."""
    if regex.startswith("^"):
        return _match_here(regex[1:], text)
    return any(_match_here(regex, text[i:]) for i in range(len(text) + 1))


def _match_here(regex, text):
    if not regex:
        return True
    if len(regex) > 1 and regex[1] == "*":
        return _match_star(regex[0], regex[2:], text)
    if regex == "$":
        return text == ""
    if text and regex[0] in (".", text[0]):
        return _match_here(regex[1:], text[1:])
    return False


def _match_star(c, regex, text):
    i = 0
    while True:
        if _match_here(regex, text[i:]):
            return True
        if i < len(text) and (text[i] == c or c == "."):
            i += 1
        else:
            return False


def grep(pattern, stream):
    """Yield the newline-terminated lines of stream that match pattern.

    Input is read into a buffer of limited size; a chunk that holds no
    newline is dropped, and a final line without a newline is never shown.
    """
    pending = ""
    while True:
        chunk = stream.read(_BUFSIZE - 1 - len(pending))
        if not chunk:
            break
        pending += chunk
        *lines, rest = pending.split("\n")
        for line in lines:
            if match(pattern, line):
                yield line + "\n"
        pending = rest if lines else ""


def main(argv=None):
    """Search the named files, or standard input, for a pattern."""
    args = sys.argv[1:] if argv is None else list(argv)
    if not args:
        sys.stderr.write("usage: grep pattern [file ...]\n")
        return 1
    pattern, *paths = args
    if not paths:
        sys.stdout.writelines(grep(pattern, sys.stdin))
        return 0
    for path in paths:
        try:
            stream = open(path, encoding="latin-1", newline="")
        except OSError:
            sys.stdout.write(f"grep: cannot open {path}\n")
            return 1
        with stream:
            sys.stdout.writelines(grep(pattern, stream))
    return 0