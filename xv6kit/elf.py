"""ELF executable file and program header records."""

from __future__ import annotations

import enum
import struct
from dataclasses import dataclass
from typing import ClassVar

ELF_MAGIC = 0x464C457F  # "\x7fELF" read as a little-endian word
ELF_PROG_LOAD = 1


class ProgramFlags(enum.IntFlag):
    """Flag bits of a program header."""

    EXEC = 1
    WRITE = 2
    READ = 4


class ElfFormatError(ValueError):
    """Raised when bytes do not hold a valid ELF structure."""


@dataclass
class ElfHeader:
    """ELF file header."""

    magic: int = ELF_MAGIC
    elf: bytes = bytes(12)
    type: int = 0
    machine: int = 0
    version: int = 0
    entry: int = 0
    phoff: int = 0
    shoff: int = 0
    flags: int = 0
    ehsize: int = 0
    phentsize: int = 0
    phnum: int = 0
    shentsize: int = 0
    shnum: int = 0
    shstrndx: int = 0

    _STRUCT: ClassVar[struct.Struct] = struct.Struct("<I12sHHIIIIIHHHHHH")
    SIZE: ClassVar[int] = _STRUCT.size

    @classmethod
    def from_bytes(cls, data):
        """Parse a header from the start of data."""
        if len(data) < cls.SIZE:
            raise ElfFormatError(f"ELF header needs {cls.SIZE} bytes, got {len(data)}")
        header = cls(*cls._STRUCT.unpack_from(data))
        if header.magic != ELF_MAGIC:
            raise ElfFormatError(f"bad ELF magic {header.magic:#x}")
        return header

    def to_bytes(self):
        """Encode the header in little-endian byte order."""
        if len(self.elf) > 12:
            raise ElfFormatError("ident field longer than 12 bytes")
        return self._STRUCT.pack(
            self.magic, self.elf, self.type, self.machine, self.version,
            self.entry, self.phoff, self.shoff, self.flags, self.ehsize,
            self.phentsize, self.phnum, self.shentsize, self.shnum, self.shstrndx,
        )


@dataclass
class ProgramHeader:
    """ELF program section header."""

    type: int = 0
    off: int = 0
    vaddr: int = 0
    paddr: int = 0
    filesz: int = 0
    memsz: int = 0
    flags: int = 0
    align: int = 0

    _STRUCT: ClassVar[struct.Struct] = struct.Struct("<8I")
    SIZE: ClassVar[int] = _STRUCT.size

    @classmethod
    def from_bytes(cls, data):
        """Parse a program header from the start of data."""
        if len(data) < cls.SIZE:
            raise ElfFormatError(f"program header needs {cls.SIZE} bytes, got {len(data)}")
        return cls(*cls._STRUCT.unpack_from(data))

    def to_bytes(self):
        """Encode the program header in little-endian byte order."""
        return self._STRUCT.pack(
            self.type, self.off, self.vaddr, self.paddr,
            self.filesz, self.memsz, self.flags, self.align,
        )

    @property
    def loadable(self):
        """True for a segment that is to be loaded into memory."""
        return self.type == ELF_PROG_LOAD

    @property
    def permissions(self):
        """The header's flags as ProgramFlags."""
        return ProgramFlags(self.flags & 0x7)


def program_headers(data):
    """Return the program headers of the ELF image held in data."""
    header = ElfHeader.from_bytes(data)
    offsets = (header.phoff + i * ProgramHeader.SIZE for i in range(header.phnum))
    return [ProgramHeader.from_bytes(data[off:off + ProgramHeader.SIZE]) for off in offsets]