"""Command-line parser of the shell: tokenizer and command tree."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Union

from xv6kit.ulib import safestrcpy

WHITESPACE = " \t\r\n\v"
SYMBOLS = "<|>&;()"
MAXARGS = 10
BINPATHLEN = 20


class ShellSyntaxError(ValueError):
    """Raised when a command line cannot be parsed."""


class OpenMode(enum.IntFlag):
    """Flags for opening a file."""

    RDONLY = 0x000
    WRONLY = 0x001
    RDWR = 0x002
    CREATE = 0x200


@dataclass
class ExecCmd:
    """Run a program with arguments."""

    argv: list = field(default_factory=list)


@dataclass
class RedirCmd:
    """Run a command with one file descriptor redirected to a file."""

    cmd: "Command"
    file: str
    mode: OpenMode
    fd: int


@dataclass
class PipeCmd:
    """Connect the output of left to the input of right."""

    left: "Command"
    right: "Command"


@dataclass
class ListCmd:
    """Run left, wait for it, then run right."""

    left: "Command"
    right: "Command"


@dataclass
class BackCmd:
    """Run a command in the background."""

    cmd: "Command"


Command = Union[ExecCmd, RedirCmd, PipeCmd, ListCmd, BackCmd]


class Tokenizer:
    """Splits a command line into shell tokens."""

    def __init__(self, text):
        self.text = text.partition("\0")[0]
        self.pos = 0

    def _skip_whitespace(self):
        while self.pos < len(self.text) and self.text[self.pos] in WHITESPACE:
            self.pos += 1

    @property
    def at_end(self):
        """True once every character has been consumed."""
        return self.pos >= len(self.text)

    @property
    def rest(self):
        """The text not yet consumed."""
        return self.text[self.pos:]

    def peek(self, toks):
        """Skip whitespace; tell whether the next character is one of toks."""
        self._skip_whitespace()
        return not self.at_end and self.text[self.pos] in toks

    def gettoken(self):
        """Consume one token and return (kind, text).

        kind is "" at the end of input, "a" for a word, "+" for ">>",
        and the symbol itself for any other operator.
        """
        self._skip_whitespace()
        start = self.pos
        if self.at_end:
            kind = ""
        else:
            c = self.text[start]
            if c in "|();&<":
                self.pos += 1
                kind = c
            elif c == ">":
                self.pos += 1
                kind = ">"
                if self.text[self.pos:self.pos + 1] == ">":
                    kind = "+"
                    self.pos += 1
            else:
                kind = "a"
                while (self.pos < len(self.text)
                       and self.text[self.pos] not in WHITESPACE
                       and self.text[self.pos] not in SYMBOLS):
                    self.pos += 1
        word = self.text[start:self.pos]
        self._skip_whitespace()
        return kind, word


def parse_cmd(text):
    """Parse a whole command line into a command tree."""
    tokens = Tokenizer(text)
    cmd = _parse_line(tokens)
    tokens.peek("")
    if not tokens.at_end:
        raise ShellSyntaxError(f"leftovers: {tokens.rest}")
    return cmd


def _parse_line(tokens):
    cmd = _parse_pipe(tokens)
    while tokens.peek("&"):
        tokens.gettoken()
        cmd = BackCmd(cmd)
    if tokens.peek(";"):
        tokens.gettoken()
        cmd = ListCmd(cmd, _parse_line(tokens))
    return cmd


def _parse_pipe(tokens):
    cmd = _parse_exec(tokens)
    if tokens.peek("|"):
        tokens.gettoken()
        cmd = PipeCmd(cmd, _parse_pipe(tokens))
    return cmd


def _parse_redirs(cmd, tokens):
    while tokens.peek("<>"):
        kind, _ = tokens.gettoken()
        file_kind, file = tokens.gettoken()
        if file_kind != "a":
            raise ShellSyntaxError("missing file for redirection")
        if kind == "<":
            cmd = RedirCmd(cmd, file, OpenMode.RDONLY, 0)
        else:
            cmd = RedirCmd(cmd, file, OpenMode.WRONLY | OpenMode.CREATE, 1)
    return cmd


def _parse_block(tokens):
    if not tokens.peek("("):
        raise ShellSyntaxError("parseblock")
    tokens.gettoken()
    cmd = _parse_line(tokens)
    if not tokens.peek(")"):
        raise ShellSyntaxError("syntax - missing )")
    tokens.gettoken()
    return _parse_redirs(cmd, tokens)


def _parse_exec(tokens):
    if tokens.peek("("):
        return _parse_block(tokens)
    exec_cmd = ExecCmd()
    cmd = _parse_redirs(exec_cmd, tokens)
    while not tokens.peek("|)&;"):
        kind, word = tokens.gettoken()
        if kind == "":
            break
        if kind != "a":
            raise ShellSyntaxError("syntax")
        exec_cmd.argv.append(word)
        if len(exec_cmd.argv) >= MAXARGS:
            raise ShellSyntaxError("too many args")
        cmd = _parse_redirs(cmd, tokens)
    return cmd


def bin_path(name):
    """Path under /bin at which the shell looks for a program."""
    prefix = "/bin/"
    return prefix + safestrcpy(name, BINPATHLEN - len(prefix) - 1)


def cd_target(line):
    """Directory named by a "cd" line (its last character dropped), else None."""
    if not line.startswith("cd "):
        return None
    return line[:-1][3:]