"""Tests for memory and register operations."""

import jax.numpy as jnp
import pytest
from octick import create_state, execute, load_program, OutOfRangeAccess, PROGRAM_START, FONT_START
from octick.constants import FONT_DATA, MAX_PROGRAM_SIZE
from octick.state import read_block, write_block


class TestBasicMemory:
    """Test basic memory operations."""

    def test_set_basic(self, fresh_state):
        """6XNN - Set VX = NN."""
        state = execute(fresh_state, 0x600A)
        assert state.V[0] == 0xA

    def test_add_basic(self, fresh_state):
        """7XNN - Add NN to VX."""
        state = fresh_state.replace(V=fresh_state.V.at[1].set(0x10))
        state = execute(state, 0x7105)
        assert state.V[1] == 0x15

    def test_add_wraps_without_flag(self, fresh_state):
        """7XNN - Overflow wraps and leaves VF untouched."""
        state = fresh_state.replace(V=fresh_state.V.at[1].set(0xFF).at[15].set(0x33))
        state = execute(state, 0x7102)
        assert state.V[1] == 0x01
        assert state.V[15] == 0x33


class TestIndexRegister:
    """Test I register operations."""

    def test_set_index_basic(self, fresh_state):
        """ANNN - Set I register to NNN."""
        state = execute(fresh_state, 0xA123)
        assert state.I == 0x123

    def test_set_index_maximum(self, fresh_state):
        state = execute(fresh_state, 0xAFFF)
        assert state.I == 0xFFF


class TestRandom:
    """CXNN."""

    def test_random_respects_mask(self, fresh_state):
        state = fresh_state
        for _ in range(10):
            state = execute(state, 0xC00F)
            assert int(state.V[0]) & 0xF0 == 0

    def test_random_zero_mask(self, fresh_state):
        state = execute(fresh_state.replace(V=fresh_state.V.at[3].set(9)), 0xC300)
        assert state.V[3] == 0

    def test_random_advances_key(self, fresh_state):
        state = execute(fresh_state, 0xC0FF)
        assert not jnp.array_equal(state.rng, fresh_state.rng)

    def test_random_is_reproducible(self):
        first = execute(create_state(), 0xC0FF)
        second = execute(create_state(), 0xC0FF)
        assert first.V[0] == second.V[0]


class TestMemoryLayout:
    """Font table and program loading."""

    def test_font_loaded_at_start(self, fresh_state):
        assert jnp.array_equal(fresh_state.memory[FONT_START:FONT_START + 80], FONT_DATA)

    def test_initial_registers(self, fresh_state):
        assert fresh_state.pc == PROGRAM_START
        assert fresh_state.I == 0
        assert not fresh_state.V.any()
        assert fresh_state.stack.depth == 0

    def test_load_program(self, fresh_state):
        state = load_program(fresh_state, bytes([0x6A, 0x02, 0x12, 0x02]))
        assert list(state.memory[PROGRAM_START:PROGRAM_START + 4]) == [0x6A, 0x02, 0x12, 0x02]

    def test_load_program_too_large(self, fresh_state):
        with pytest.raises(OutOfRangeAccess):
            load_program(fresh_state, bytes(MAX_PROGRAM_SIZE + 1))

    def test_load_program_fills_memory(self, fresh_state):
        state = load_program(fresh_state, bytes([0xAB]) * MAX_PROGRAM_SIZE)
        assert state.memory[-1] == 0xAB

    def test_block_access_bounds(self, fresh_state):
        assert read_block(fresh_state, 4094, 2).shape == (2,)
        with pytest.raises(OutOfRangeAccess):
            read_block(fresh_state, 4095, 2)
        with pytest.raises(OutOfRangeAccess):
            write_block(fresh_state, 4094, [1, 2, 3])
