"""
Tests for the storage collaborators: BoundedArena and DynamicBitset.
"""

import numpy as np
import pytest

from primetab.arena import ArenaExhaustedError, BoundedArena
from primetab.bitset import DynamicBitset


class TestBoundedArena:
    """Bump allocation with LIFO release."""

    def test_allocate_zeroed_block(self):
        arena = BoundedArena(64)
        block = arena.allocate(16)
        assert block.dtype == np.uint8
        assert block.size == 16
        assert np.all(block == 0)
        assert arena.used == 16
        assert arena.available == 48

    def test_exhaustion_leaves_state_unchanged(self):
        arena = BoundedArena(10)
        arena.allocate(6)
        with pytest.raises(ArenaExhaustedError) as excinfo:
            arena.allocate(5)
        assert excinfo.value.requested == 5
        assert excinfo.value.available == 4
        assert excinfo.value.capacity == 10
        assert arena.used == 6

    def test_release_is_lifo(self):
        arena = BoundedArena(32)
        a = arena.allocate(8)
        b = arena.allocate(8)
        with pytest.raises(ValueError):
            arena.release(a)
        arena.release(b)
        arena.release(a)
        assert arena.used == 0

    def test_release_empty_arena(self):
        with pytest.raises(ValueError):
            BoundedArena(8).release(np.zeros(1, dtype=np.uint8))

    def test_reused_block_is_rezeroed(self):
        arena = BoundedArena(8)
        block = arena.allocate(8)
        block[:] = 0xFF
        arena.release(block)
        assert np.all(arena.allocate(8) == 0)

    def test_lease_releases_on_exception(self):
        arena = BoundedArena(8)
        with pytest.raises(RuntimeError):
            with arena.lease(8):
                assert arena.used == 8
                raise RuntimeError("boom")
        assert arena.used == 0

    def test_zero_byte_allocation(self):
        arena = BoundedArena(0)
        block = arena.allocate(0)
        assert block.size == 0
        arena.release(block)

    def test_reset(self):
        arena = BoundedArena(16)
        arena.allocate(4)
        arena.allocate(4)
        arena.reset()
        assert arena.used == 0
        assert arena.available == 16

    def test_negative_sizes_rejected(self):
        with pytest.raises(ValueError):
            BoundedArena(-1)
        with pytest.raises(ValueError):
            BoundedArena(8).allocate(-1)


class TestDynamicBitset:
    """test/set contract with 1 meaning 'excluded'."""

    def test_starts_all_zero(self):
        bits = DynamicBitset(20)
        assert bits.size() == 20
        assert len(bits) == 20
        assert bits.nbytes == 3
        assert not any(bits.test(i) for i in range(20))

    def test_set_is_idempotent(self):
        bits = DynamicBitset(10)
        bits.set(7)
        bits.set(7)
        assert bits.test(7)
        assert bits.count() == 1

    def test_bit_layout_little_endian(self):
        bits = DynamicBitset(16)
        bits.set(0)
        bits.set(9)
        assert bits._bytes.tolist() == [0x01, 0x02]

    @pytest.mark.parametrize("i", [-1, 10, 100])
    def test_out_of_range(self, i):
        bits = DynamicBitset(10)
        with pytest.raises(IndexError):
            bits.test(i)
        with pytest.raises(IndexError):
            bits.set(i)

    def test_set_multiples_matches_set(self):
        a = DynamicBitset(101)
        b = DynamicBitset(101)
        a.set_multiples(9, 3)
        for j in range(9, 101, 3):
            b.set(j)
        assert np.array_equal(a._bytes, b._bytes)

    def test_set_multiples_start_past_end(self):
        bits = DynamicBitset(10)
        bits.set_multiples(12, 3)
        assert bits.count() == 0

    def test_set_multiples_rejects_bad_step(self):
        with pytest.raises(ValueError):
            DynamicBitset(10).set_multiples(0, 0)

    def test_zero_indices(self):
        bits = DynamicBitset(12)
        for i in (0, 4, 6, 11):
            bits.set(i)
        assert bits.zero_indices().tolist() == [1, 2, 3, 5, 7, 8, 9, 10]
        assert bits.zero_indices(5).tolist() == [5, 7, 8, 9, 10]

    def test_count_zeros(self):
        bits = DynamicBitset(12)
        for i in (0, 4, 6, 11):
            bits.set(i)
        assert bits.count_zeros() == 8
        assert bits.count_zeros(5) == 5
        assert bits.count() == 4

    def test_fill_zero_indices_into_narrow_dtype(self):
        bits = DynamicBitset(20)
        bits.set_multiples(4, 2)
        out = np.zeros(16, dtype=np.uint8)
        k = bits.fill_zero_indices(out, 2)
        assert out[:k].tolist() == [2, 3, 5, 7, 9, 11, 13, 15, 17, 19]
        assert np.all(out[k:] == 0)

    def test_fill_zero_indices_too_short(self):
        bits = DynamicBitset(20)
        out = np.zeros(5, dtype=np.int64)
        with pytest.raises(ValueError):
            bits.fill_zero_indices(out)
        assert np.all(out == 0)

    def test_iter_zero_indices_matches_zero_indices(self):
        """Chunk boundaries do not drop or repeat indices."""
        bits = DynamicBitset(1000)
        bits.set_multiples(0, 3)
        bits.set_multiples(5, 7)
        chunks = [c.copy() for c in bits.iter_zero_indices(2, chunk_bits=64)]
        assert all(c.size <= 64 for c in chunks)
        assert np.array_equal(np.concatenate(chunks), bits.zero_indices(2))

    def test_iter_zero_indices_all_set(self):
        bits = DynamicBitset(10)
        bits.set_multiples(0, 1)
        assert list(bits.iter_zero_indices()) == []

    def test_padding_bits_ignored(self):
        """Bits past size() in the last byte never show up."""
        bits = DynamicBitset(3)
        assert bits.zero_indices().tolist() == [0, 1, 2]

    def test_arena_storage_released(self):
        arena = BoundedArena(4)
        with DynamicBitset(32, arena) as bits:
            assert arena.used == 4
            bits.set(31)
        assert arena.used == 0

    def test_arena_too_small(self):
        arena = BoundedArena(3)
        with pytest.raises(ArenaExhaustedError):
            DynamicBitset(25, arena)
        assert arena.used == 0

    def test_release_twice(self):
        arena = BoundedArena(2)
        bits = DynamicBitset(16, arena)
        bits.release()
        bits.release()
        assert arena.used == 0
        assert 'released' in repr(bits)


if __name__ == '__main__':
    pytest.main([__file__, '-v'])
