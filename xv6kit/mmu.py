"""x86 memory-management, segment, memory-layout and trap definitions."""

from __future__ import annotations

MASK32 = 0xFFFFFFFF
MASK64 = 0xFFFFFFFFFFFFFFFF

# Memory layout.
EXTMEM = 0x100000
PHYSTOP = 0xE000000
DEVSPACE = 0xFE000000
KERNBASE = 0x80000000
KERNLINK = KERNBASE + EXTMEM

# System parameters.
NPROC = 64
KSTACKSIZE = 4096
NCPU = 8
NOFILE = 16
NFILE = 100
NINODE = 50
NDEV = 10
ROOTDEV = 1
MAXARG = 32
MAXOPBLOCKS = 10
LOGSIZE = MAXOPBLOCKS * 3
NBUF = MAXOPBLOCKS * 3
FSSIZE = 1000

# Eflags and control-register bits.
FL_IF = 0x00000200
CR0_PE = 0x00000001
CR0_WP = 0x00010000
CR0_PG = 0x80000000
CR4_PSE = 0x00000010

# Segment selectors.
SEG_KCODE = 1
SEG_KDATA = 2
SEG_UCODE = 3
SEG_UDATA = 4
SEG_TSS = 5
NSEGS = 6

DPL_USER = 0x3

# Application segment type bits.
STA_X = 0x8
STA_W = 0x2
STA_R = 0x2

# System segment type bits.
STS_T32A = 0x9
STS_IG32 = 0xE
STS_TG32 = 0xF

# Paging.
NPDENTRIES = 1024
NPTENTRIES = 1024
PGSIZE = 4096
PTXSHIFT = 12
PDXSHIFT = 22

PTE_P = 0x001
PTE_W = 0x002
PTE_U = 0x004
PTE_PS = 0x080

# Processor-defined traps.
T_DIVIDE = 0
T_DEBUG = 1
T_NMI = 2
T_BRKPT = 3
T_OFLOW = 4
T_BOUND = 5
T_ILLOP = 6
T_DEVICE = 7
T_DBLFLT = 8
T_TSS = 10
T_SEGNP = 11
T_STACK = 12
T_GPFLT = 13
T_PGFLT = 14
T_FPERR = 16
T_ALIGN = 17
T_MCHK = 18
T_SIMDERR = 19

T_SYSCALL = 64
T_DEFAULT = 500
T_IRQ0 = 32

IRQ_TIMER = 0
IRQ_KBD = 1
IRQ_COM1 = 4
IRQ_IDE = 14
IRQ_ERROR = 19
IRQ_SPURIOUS = 31

_SYSTEM_BIT = 1 << 44


def seg(type_, base, lim, dpl):
    """Build a 32-bit, 4 KiB-granular segment descriptor."""
    base &= MASK32
    lim &= MASK32
    desc = (
        ((lim >> 12) & 0xFFFF)
        | (base & 0xFFFF) << 16
        | ((base >> 16) & 0xFF) << 32
        | type_ << 40
        | 1 << 44
        | dpl << 45
        | 1 << 47
        | (lim >> 28) << 48
        | 1 << 54
        | 1 << 55
        | (base >> 24) << 56
    )
    return desc & MASK64


def seg16(type_, base, lim, dpl):
    """Build a byte-granular segment descriptor."""
    base &= MASK32
    lim &= MASK32
    desc = (
        (lim & 0xFFFF)
        | (base & 0xFFFF) << 16
        | ((base >> 16) & 0xFF) << 32
        | type_ << 40
        | 1 << 44
        | dpl << 45
        | 1 << 47
        | (lim >> 16) << 48
        | 1 << 54
        | (base >> 24) << 56
    )
    return desc & MASK64


def seg_cls(desc):
    """Return the descriptor with its system bit cleared."""
    return desc & ~_SYSTEM_BIT & MASK64


def seg_asm(type_, base, lim):
    """Return the 8 bytes the assembler segment macro emits."""
    base &= MASK32
    lim &= MASK32
    words = ((lim >> 12) & 0xFFFF, base & 0xFFFF)
    tail = (
        (base >> 16) & 0xFF,
        0x90 | type_,
        0xC0 | ((lim >> 28) & 0xF),
        (base >> 24) & 0xFF,
    )
    head = b"".join(word.to_bytes(2, "little") for word in words)
    return head + bytes(tail)


def set_gate(istrap, sel, off, dpl):
    """Build an interrupt (istrap false) or trap (istrap true) gate descriptor."""
    off &= MASK32
    gate = off & 0xFFFF
    gate |= (sel & 0xFFFF) << 16
    gate |= (STS_TG32 if istrap else STS_IG32) << 40
    gate |= dpl << 45
    gate |= 1 << 47
    gate |= (off >> 16) << 48
    return gate & MASK64


def pdx(va):
    """Page-directory index of a virtual address."""
    return ((va & MASK32) >> PDXSHIFT) & 0x3FF


def ptx(va):
    """Page-table index of a virtual address."""
    return ((va & MASK32) >> PTXSHIFT) & 0x3FF


def pgaddr(d, t, o):
    """Build a virtual address from directory index, table index and offset."""
    return (d << PDXSHIFT | t << PTXSHIFT | o) & MASK32


def pg_round_up(sz):
    """Round up to a page boundary (32-bit arithmetic)."""
    return ((sz + PGSIZE - 1) & ~(PGSIZE - 1)) & MASK32


def pg_round_down(a):
    """Round down to a page boundary."""
    return (a & ~(PGSIZE - 1)) & MASK32


def pte_addr(pte):
    """Physical address held in a page-table entry."""
    return (pte & MASK32) & ~0xFFF


def pte_flags(pte):
    """Flag bits held in a page-table entry."""
    return (pte & MASK32) & 0xFFF


def v2p(a):
    """Kernel virtual address to physical address."""
    return (a - KERNBASE) & MASK32


def p2v(a):
    """Physical address to kernel virtual address."""
    return (a + KERNBASE) & MASK32