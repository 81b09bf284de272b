"""Test configuration and fixtures for CHIP-8 machine tests."""

import pytest
import jax.numpy as jnp
from octick import create_state, System, SystemConfig


@pytest.fixture
def fresh_state():
    """Provide a fresh machine state for each test."""
    return create_state()


@pytest.fixture
def modern_state():
    """Provide a fresh state in modern mode."""
    return create_state(modern_mode=True)


@pytest.fixture
def legacy_state():
    """Provide a fresh state in legacy mode."""
    return create_state(modern_mode=False)


@pytest.fixture
def make_system():
    """Build a System running the given program words."""
    def _make(words=(), **config):
        system = System(SystemConfig(**config))
        system.load_rom(words_to_bytes(words))
        return system
    return _make


def words_to_bytes(words) -> bytes:
    """Encode instruction words big-endian."""
    return b"".join(word.to_bytes(2, "big") for word in words)


def setup_sprite_in_memory(state, address, sprite_bytes):
    """Helper to put sprite data in memory."""
    return state.replace(
        memory=state.memory.at[address:address+len(sprite_bytes)].set(
            jnp.array(sprite_bytes, dtype=jnp.uint8)
        )
    )
