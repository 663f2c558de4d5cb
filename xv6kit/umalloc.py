"""First-fit free-list allocator over a heap grown in large steps."""

from __future__ import annotations

HEADER_SIZE = 8
MIN_UNITS = 4096
_BASE = 0
_HEAP_START = 0x1000


class Allocator:
    """Hands out addresses from a simulated heap of at most limit bytes."""

    def __init__(self, limit):
        if limit < 0:
            raise ValueError("limit must not be negative")
        self._limit = limit
        self._brk = _HEAP_START
        self._size = {}
        self._ptr = {}
        self._freep = None
        self._allocated = set()

    def malloc(self, nbytes):
        """Return the address of a block of at least nbytes bytes."""
        if nbytes < 0:
            raise ValueError("size must not be negative")
        nunits = (nbytes + HEADER_SIZE - 1) // HEADER_SIZE + 1
        if self._freep is None:
            self._ptr[_BASE] = _BASE
            self._size[_BASE] = 0
            self._freep = _BASE
        prevp = self._freep
        p = self._ptr[prevp]
        while True:
            if self._size[p] >= nunits:
                if self._size[p] == nunits:
                    self._ptr[prevp] = self._ptr[p]
                else:
                    self._size[p] -= nunits
                    p += self._size[p] * HEADER_SIZE
                    self._size[p] = nunits
                self._freep = prevp
                addr = p + HEADER_SIZE
                self._allocated.add(addr)
                return addr
            if p == self._freep:
                p = self._morecore(nunits)
            prevp, p = p, self._ptr[p]

    def free(self, addr):
        """Give back a block that malloc returned."""
        if addr not in self._allocated:
            raise ValueError(f"address {addr:#x} is not an allocated block")
        self._allocated.remove(addr)
        self._release(addr - HEADER_SIZE)

    def free_units(self):
        """Total size, in header units, of the blocks on the free list."""
        if self._freep is None:
            return 0
        total = 0
        p = self._ptr[_BASE]
        while p != _BASE:
            total += self._size[p]
            p = self._ptr[p]
        return total

    def _release(self, bp):
        size, ptr = self._size, self._ptr
        p = self._freep
        while not (p < bp < ptr[p]):
            if p >= ptr[p] and (bp > p or bp < ptr[p]):
                break
            p = ptr[p]
        if bp + size[bp] * HEADER_SIZE == ptr[p]:
            size[bp] += size[ptr[p]]
            ptr[bp] = ptr[ptr[p]]
        else:
            ptr[bp] = ptr[p]
        if p + size[p] * HEADER_SIZE == bp:
            size[p] += size[bp]
            ptr[p] = ptr[bp]
        else:
            ptr[p] = bp
        self._freep = p

    def _morecore(self, nunits):
        nunits = max(nunits, MIN_UNITS)
        nbytes = nunits * HEADER_SIZE
        if self._brk + nbytes > _HEAP_START + self._limit:
            raise MemoryError("heap limit reached")
        hp = self._brk
        self._brk += nbytes
        self._size[hp] = nunits
        self._release(hp)
        return self._freep