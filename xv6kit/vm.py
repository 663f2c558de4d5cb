"""Two-level x86 page tables over a simulated pool of physical pages."""

from __future__ import annotations

import struct

from xv6kit.mmu import (
    DEVSPACE,
    EXTMEM,
    KERNBASE,
    KERNLINK,
    MASK32,
    NPDENTRIES,
    PDXSHIFT,
    PGSIZE,
    PHYSTOP,
    PTE_P,
    PTE_U,
    PTE_W,
    p2v,
    pdx,
    pg_round_down,
    pg_round_up,
    pte_addr,
    pte_flags,
    ptx,
    v2p,
)

_WORD = struct.Struct("<I")


class OutOfMemory(MemoryError):
    """Raised when no physical page is left or a request cannot be met."""


class KernelPanic(RuntimeError):
    """Raised where the kernel would stop with a panic."""


class PhysicalMemory:
    """A range of physical pages handed out one page at a time."""

    def __init__(self, start, end):
        start = pg_round_up(start)
        end = pg_round_down(end)
        if end <= start:
            raise ValueError("physical range holds no whole page")
        self.start = start
        self.end = end
        self._pages = {}
        self._free = list(range(start, end, PGSIZE))

    @property
    def available(self):
        """Number of pages not handed out."""
        return len(self._free)

    def kalloc(self):
        """Hand out one zeroed page and return its physical address."""
        if not self._free:
            raise OutOfMemory("out of physical pages")
        pa = self._free.pop()
        self._pages[pa] = bytearray(PGSIZE)
        return pa

    def kfree(self, pa):
        """Return the page at pa to the pool."""
        if pa % PGSIZE or not self.start <= pa < self.end:
            raise KernelPanic("kfree")
        if pa not in self._pages:
            raise KernelPanic("kfree: page is not allocated")
        del self._pages[pa]
        self._free.append(pa)

    def _locate(self, pa):
        base = pa - pa % PGSIZE
        page = self._pages.get(base)
        if page is None:
            raise ValueError(f"physical address {pa:#x} is not allocated")
        return page, pa - base

    def read(self, pa, n):
        """Read n bytes starting at physical address pa."""
        out = bytearray()
        while n > 0:
            page, off = self._locate(pa)
            chunk = min(n, PGSIZE - off)
            out += page[off:off + chunk]
            pa += chunk
            n -= chunk
        return bytes(out)

    def write(self, pa, data):
        """Write data starting at physical address pa."""
        view = memoryview(bytes(data))
        pos = 0
        while pos < len(view):
            page, off = self._locate(pa)
            chunk = min(len(view) - pos, PGSIZE - off)
            page[off:off + chunk] = view[pos:pos + chunk]
            pa += chunk
            pos += chunk

    def _load_word(self, pa):
        page, off = self._locate(pa)
        return _WORD.unpack_from(page, off)[0]

    def _store_word(self, pa, value):
        page, off = self._locate(pa)
        _WORD.pack_into(page, off, value & MASK32)


class PageTable:
    """A page directory with its page tables, all held in physical memory."""

    def __init__(self, memory):
        self.memory = memory
        self.pgdir = memory.kalloc()
        self._kernel_data = None

    def walk(self, va, alloc=False):
        """Physical address of the PTE for va, or None if there is no page table.

        With alloc true a missing page table is created.
        """
        mem = self.memory
        pde_pa = self.pgdir + 4 * pdx(va)
        pde = mem._load_word(pde_pa)
        if pde & PTE_P:
            pgtab = pte_addr(pde)
        else:
            if not alloc:
                return None
            pgtab = mem.kalloc()
            mem._store_word(pde_pa, pgtab | PTE_P | PTE_W | PTE_U)
        return pgtab + 4 * ptx(va)

    def map_pages(self, va, size, pa, perm):
        """Map [va, va+size) to physical pages starting at pa."""
        if size <= 0:
            raise ValueError("mapping size must be positive")
        mem = self.memory
        a = pg_round_down(va)
        last = pg_round_down(va + size - 1)
        while True:
            pte = self.walk(a, True)
            if mem._load_word(pte) & PTE_P:
                raise KernelPanic("remap")
            mem._store_word(pte, pa | perm | PTE_P)
            if a == last:
                break
            a += PGSIZE
            pa = (pa + PGSIZE) & MASK32

    def init_uvm(self, init):
        """Load init, which must be shorter than a page, at address 0."""
        if len(init) >= PGSIZE:
            raise KernelPanic("inituvm: more than a page")
        page = self.memory.kalloc()
        self.map_pages(0, PGSIZE, page, PTE_W | PTE_U)
        self.memory.write(page, init)

    def alloc_uvm(self, oldsz, newsz):
        """Grow user memory from oldsz to newsz; return the new size."""
        if newsz >= KERNBASE:
            raise OutOfMemory("size reaches into kernel space")
        if newsz < oldsz:
            return oldsz
        mem = self.memory
        for a in range(pg_round_up(oldsz), newsz, PGSIZE):
            try:
                page = mem.kalloc()
            except OutOfMemory:
                self.dealloc_uvm(newsz, oldsz)
                raise
            try:
                self.map_pages(a, PGSIZE, page, PTE_W | PTE_U)
            except OutOfMemory:
                self.dealloc_uvm(newsz, oldsz)
                mem.kfree(page)
                raise
        return newsz

    def dealloc_uvm(self, oldsz, newsz):
        """Shrink user memory from oldsz to newsz; return the new size."""
        if newsz >= oldsz:
            return oldsz
        mem = self.memory
        a = pg_round_up(newsz)
        while a < oldsz:
            pte = self.walk(a)
            if pte is None:
                a = ((pdx(a) + 1) << PDXSHIFT) - PGSIZE
            else:
                entry = mem._load_word(pte)
                if entry & PTE_P:
                    pa = pte_addr(entry)
                    if pa == 0:
                        raise KernelPanic("kfree")
                    mem.kfree(pa)
                    mem._store_word(pte, 0)
            a += PGSIZE
        return newsz

    def free(self):
        """Release every user page, every page table and the directory."""
        if self.pgdir is None:
            raise KernelPanic("freevm: no pgdir")
        mem = self.memory
        self.dealloc_uvm(KERNBASE, 0)
        for i in range(NPDENTRIES):
            pde = mem._load_word(self.pgdir + 4 * i)
            if pde & PTE_P:
                mem.kfree(pte_addr(pde))
        mem.kfree(self.pgdir)
        self.pgdir = None

    def clear_pteu(self, uva):
        """Make the page holding uva inaccessible to user code."""
        pte = self.walk(uva)
        if pte is None:
            raise KernelPanic("clearpteu")
        mem = self.memory
        mem._store_word(pte, mem._load_word(pte) & ~PTE_U)

    def copy_uvm(self, sz):
        """Return a new page table holding a copy of the first sz bytes."""
        mem = self.memory
        if self._kernel_data is None:
            child = PageTable(mem)
        else:
            child = setup_kvm(mem, self._kernel_data)
        try:
            for i in range(0, sz, PGSIZE):
                pte = self.walk(i)
                if pte is None:
                    raise KernelPanic("copyuvm: pte should exist")
                entry = mem._load_word(pte)
                if not entry & PTE_P:
                    raise KernelPanic("copyuvm: page not present")
                page = mem.kalloc()
                mem.write(page, mem.read(pte_addr(entry), PGSIZE))
                try:
                    child.map_pages(i, PGSIZE, page, pte_flags(entry))
                except OutOfMemory:
                    mem.kfree(page)
                    raise
        except OutOfMemory:
            child.free()
            raise
        return child

    def uva2ka(self, uva):
        """Physical address of the user page holding uva, or None."""
        pte = self.walk(uva)
        if pte is None:
            return None
        entry = self.memory._load_word(pte)
        if not entry & PTE_P or not entry & PTE_U:
            return None
        return pte_addr(entry)

    def _user_spans(self, va, n):
        while n > 0:
            va0 = pg_round_down(va)
            pa0 = self.uva2ka(va0)
            if pa0 is None:
                raise ValueError(f"user address {va:#x} is not accessible")
            chunk = min(PGSIZE - (va - va0), n)
            yield pa0 + (va - va0), chunk
            n -= chunk
            va = va0 + PGSIZE

    def copyout(self, va, data):
        """Copy data into user memory at va."""
        view = memoryview(bytes(data))
        pos = 0
        for pa, chunk in self._user_spans(va, len(view)):
            self.memory.write(pa, view[pos:pos + chunk])
            pos += chunk

    def copyin(self, va, n):
        """Read n bytes of user memory starting at va."""
        return b"".join(self.memory.read(pa, chunk) for pa, chunk in self._user_spans(va, n))


def setup_kvm(memory, data_start):
    """Build a page table holding the kernel's mappings.

    data_start is the page-aligned kernel virtual address where the
    kernel's writable data begins.
    """
    if p2v(PHYSTOP) > DEVSPACE:
        raise KernelPanic("PHYSTOP too high")
    if data_start % PGSIZE or not KERNLINK < data_start < p2v(PHYSTOP):
        raise ValueError(f"bad kernel data address {data_start:#x}")
    kmap = (
        (KERNBASE, 0, EXTMEM, PTE_W),
        (KERNLINK, v2p(KERNLINK), v2p(data_start), 0),
        (data_start, v2p(data_start), PHYSTOP, PTE_W),
        (DEVSPACE, DEVSPACE, 0, PTE_W),
    )
    table = PageTable(memory)
    table._kernel_data = data_start
    try:
        for virt, phys_start, phys_end, perm in kmap:
            table.map_pages(virt, (phys_end - phys_start) & MASK32, phys_start, perm)
    except OutOfMemory:
        table.free()
        raise
    return table