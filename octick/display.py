"""Framebuffer sprite blitting."""

import jax.numpy as jnp

from octick.constants import SCREEN_WIDTH, SCREEN_HEIGHT, SPRITE_WIDTH

# Bit position of each sprite column, most significant bit leftmost
_COLUMN_SHIFTS = jnp.arange(SPRITE_WIDTH - 1, -1, -1)


def create_display() -> jnp.ndarray:
    """Blank framebuffer indexed as display[x, y]."""
    return jnp.zeros((SCREEN_WIDTH, SCREEN_HEIGHT), dtype=jnp.bool_)


def clear_display(display: jnp.ndarray) -> jnp.ndarray:
    return jnp.zeros_like(display)


def draw_sprite(display: jnp.ndarray, x: int, y: int, sprite) -> tuple[jnp.ndarray, bool]:
    """XOR sprite rows onto the display at (x, y).

    Every pixel wraps independently, columns modulo 64 and rows modulo 32.
    Collision is reported only when a lit pixel is switched off.

    Args:
        display: Boolean framebuffer of shape (64, 32)
        x: Column of the sprite's left edge
        y: Row of the sprite's top edge
        sprite: Sequence of row bytes, at most 32 rows

    Returns:
        Tuple of (new display, collision)
    """
    sprite = jnp.asarray(sprite, dtype=jnp.uint8).reshape(-1)
    if sprite.shape[0] > SCREEN_HEIGHT:
        raise ValueError(f"Sprite has {sprite.shape[0]} rows, at most {SCREEN_HEIGHT} allowed")

    rows = (int(y) + jnp.arange(sprite.shape[0])) % SCREEN_HEIGHT
    cols = (int(x) + jnp.arange(SPRITE_WIDTH)) % SCREEN_WIDTH
    cells = (cols[None, :], rows[:, None])

    bits = ((sprite[:, None] >> _COLUMN_SHIFTS[None, :]) & 1).astype(jnp.bool_)
    old = display[cells]
    new = old ^ bits

    collision = bool(jnp.any(old & bits))
    return display.at[cells].set(new), collision
