import pytest

from xv6kit import mmu


def _base_of(desc):
    return ((desc >> 16) & 0xFFFF) | ((desc >> 32) & 0xFF) << 16 | (desc >> 56) << 24


@pytest.mark.parametrize("va", [0, 0x1234, 0x00401ABC, mmu.KERNBASE, 0xFFFFFFFF, mmu.DEVSPACE + 17])
def test_pgaddr_reassembles_address(va):
    assert mmu.pgaddr(mmu.pdx(va), mmu.ptx(va), va & 0xFFF) == va


@pytest.mark.parametrize("va", [0, 0x3FF000, mmu.KERNLINK, 0xFFFFFFFF])
def test_indexes_are_in_range(va):
    assert 0 <= mmu.pdx(va) < mmu.NPDENTRIES
    assert 0 <= mmu.ptx(va) < mmu.NPTENTRIES


@pytest.mark.parametrize("a", [0, 1, 4095, 4096, 4097, 123456, mmu.PHYSTOP - 3])
def test_rounding_invariants(a):
    down = mmu.pg_round_down(a)
    up = mmu.pg_round_up(a)
    assert down % mmu.PGSIZE == 0 and up % mmu.PGSIZE == 0
    assert down <= a <= up
    assert a - down < mmu.PGSIZE
    assert up - a < mmu.PGSIZE


def test_round_up_of_aligned_value_is_identity():
    assert mmu.pg_round_up(mmu.KERNBASE) == mmu.KERNBASE
    assert mmu.pg_round_down(mmu.KERNBASE) == mmu.KERNBASE


@pytest.mark.parametrize("pa", [0, mmu.EXTMEM, mmu.PHYSTOP, 0x1234567])
def test_v2p_p2v_round_trip(pa):
    assert mmu.v2p(mmu.p2v(pa)) == pa


def test_v2p_of_kernbase_is_zero():
    assert mmu.v2p(mmu.KERNBASE) == 0
    assert mmu.p2v(mmu.EXTMEM) == mmu.KERNLINK


@pytest.mark.parametrize("pte", [0, 0x00403007, 0xFFFFFFFF, 0x80000FFF])
def test_pte_split(pte):
    assert mmu.pte_addr(pte) | mmu.pte_flags(pte) == pte
    assert mmu.pte_flags(pte) < 0x1000
    assert mmu.pte_addr(pte) % mmu.PGSIZE == 0


def test_kernel_code_segment_value():
    assert mmu.seg(mmu.STA_X | mmu.STA_R, 0, 0xFFFFFFFF, 0) == 0x00CF9A000000FFFF


@pytest.mark.parametrize(
    "type_,base,lim",
    [(mmu.STA_X | mmu.STA_R, 0, 0xFFFFFFFF), (mmu.STA_W, 0, 0xFFFFFFFF), (mmu.STA_W, 0x12345678, 0x0FFFF000)],
)
def test_seg_asm_matches_seg(type_, base, lim):
    assert mmu.seg_asm(type_, base, lim) == mmu.seg(type_, base, lim, 0).to_bytes(8, "little")


@pytest.mark.parametrize("base", [0, 0x12345678, 0xFFFFFFFF])
def test_seg_base_recoverable(base):
    desc = mmu.seg(mmu.STA_W, base, 0xFFFFFFFF, mmu.DPL_USER)
    assert _base_of(desc) == base
    assert (desc >> 45) & 3 == mmu.DPL_USER


def test_seg16_fields():
    base, lim = 0x12345678, 0x67
    desc = mmu.seg16(mmu.STS_T32A, base, lim, 0)
    assert desc & 0xFFFF == lim
    assert _base_of(desc) == base
    assert (desc >> 40) & 0xF == mmu.STS_T32A
    assert desc >> 54 & 1 == 1
    assert desc >> 55 & 1 == 0


def test_seg_cls_clears_only_system_bit():
    desc = mmu.seg16(mmu.STS_T32A, 0x1000, 0x67, 0)
    cleared = mmu.seg_cls(desc)
    assert (cleared >> 44) & 1 == 0
    assert cleared | (1 << 44) == desc


@pytest.mark.parametrize("istrap,expected_type", [(True, mmu.STS_TG32), (False, mmu.STS_IG32)])
def test_set_gate_fields(istrap, expected_type):
    off = 0x80105A3C
    sel = mmu.SEG_KCODE << 3
    gate = mmu.set_gate(istrap, sel, off, mmu.DPL_USER)
    assert (gate & 0xFFFF) | (gate >> 48) << 16 == off
    assert (gate >> 16) & 0xFFFF == sel
    assert (gate >> 40) & 0xF == expected_type
    assert (gate >> 45) & 3 == mmu.DPL_USER
    assert (gate >> 47) & 1 == 1