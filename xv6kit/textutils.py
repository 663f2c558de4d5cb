"""Small file utilities: wc, cat, echo and ls."""

from __future__ import annotations

import enum
import os
import stat
import sys
from dataclasses import dataclass

DIRSIZ = 14
_BUFSIZE = 512
_WC_SPACE = " \r\t\n\v\0"


class FileType(enum.IntEnum):
    """Kind of a file-system object."""

    DIR = 1
    FILE = 2
    DEV = 3


@dataclass(frozen=True)
class WordCount:
    """Line, word and character totals."""

    lines: int = 0
    words: int = 0
    chars: int = 0

    def format(self, name):
        """The wc report line for a file of the given name."""
        return f"{self.lines} {self.words} {self.chars} {name}"


def _chunks(stream):
    while chunk := stream.read(_BUFSIZE):
        yield chunk


def word_count(stream):
    """Count lines, words and characters in a text or binary stream."""
    lines = words = chars = 0
    in_word = False
    for chunk in _chunks(stream):
        text = chunk.decode("latin-1") if isinstance(chunk, bytes) else chunk
        for c in text:
            chars += 1
            if c == "\n":
                lines += 1
            if c in _WC_SPACE:
                in_word = False
            elif not in_word:
                words += 1
                in_word = True
    return WordCount(lines, words, chars)


def cat(stream, out):
    """Copy everything from stream to out."""
    for chunk in _chunks(stream):
        out.write(chunk)


def echo(args):
    """The line echo prints for args: space separated, newline ended."""
    return " ".join(args) + "\n" if args else ""


def fmtname(path):
    """Last path component, blank-padded to DIRSIZ unless already that long."""
    name = path.rpartition("/")[2]
    if len(name) >= DIRSIZ:
        return name
    return name.ljust(DIRSIZ)


def _file_type(st):
    if stat.S_ISDIR(st.st_mode):
        return FileType.DIR
    if stat.S_ISREG(st.st_mode):
        return FileType.FILE
    return FileType.DEV


def _entry_line(path, st):
    return f"{fmtname(path)} {int(_file_type(st))} {st.st_ino} {st.st_size}"


def ls(path):
    """Listing lines for path; raises OSError if it cannot be examined."""
    st = os.stat(path)
    kind = _file_type(st)
    if kind is FileType.FILE:
        return [_entry_line(path, st)]
    if kind is not FileType.DIR:
        return []
    if len(path) + 1 + DIRSIZ + 1 > _BUFSIZE:
        return ["ls: path too long"]
    lines = []
    for name in (".", "..", *sorted(os.listdir(path))):
        full = f"{path}/{name}"
        try:
            entry = os.stat(full)
        except OSError:
            lines.append(f"ls: cannot stat {full}")
            continue
        lines.append(_entry_line(full, entry))
    return lines


def wc_main(argv=None):
    """Report counts for the named files, or for standard input."""
    args = sys.argv[1:] if argv is None else list(argv)
    if not args:
        sys.stdout.write(word_count(sys.stdin.buffer).format("") + "\n")
        return 0
    for path in args:
        try:
            stream = open(path, "rb")
        except OSError:
            sys.stdout.write(f"wc: cannot open {path}\n")
            return 1
        with stream:
            sys.stdout.write(word_count(stream).format(path) + "\n")
    return 0


def cat_main(argv=None):
    """Copy the named files, or standard input, to standard output."""
    args = sys.argv[1:] if argv is None else list(argv)
    sys.stdout.flush()
    if not args:
        cat(sys.stdin.buffer, sys.stdout.buffer)
        sys.stdout.buffer.flush()
        return 0
    for path in args:
        try:
            stream = open(path, "rb")
        except OSError:
            sys.stdout.write(f"cat: cannot open {path}\n")
            return 1
        with stream:
            cat(stream, sys.stdout.buffer)
        sys.stdout.buffer.flush()
    return 0


def echo_main(argv=None):
    """Print the arguments."""
    args = sys.argv[1:] if argv is None else list(argv)
    sys.stdout.write(echo(args))
    return 0


def ls_main(argv=None):
    """List the named paths, or the current directory."""
    args = sys.argv[1:] if argv is None else list(argv)
    for path in args or ["."]:
        try:
            lines = ls(path)
        except OSError:
            sys.stderr.write(f"ls: cannot open {path}\n")
            continue
        for line in lines:
            sys.stdout.write(line + "\n")
    return 0