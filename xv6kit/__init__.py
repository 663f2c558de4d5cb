"""Models of a small x86 teaching Unix: paging, ELF headers, allocator, shell parser, utilities and shared regions."""

__version__ = "0.1.0"

__all__ = [
    "elf",
    "grep",
    "mmu",
    "shared",
    "shell",
    "textutils",
    "ulib",
    "umalloc",
    "vm",
]