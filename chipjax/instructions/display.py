"""CHIP-8 display operations."""

import jax.numpy as jnp
from chipjax.state import EmulatorState
from chipjax.decode import DecodedInstruction
from chipjax.constants import SCREEN_WIDTH, SCREEN_HEIGHT, ADDRESS_MASK, FLAG_REGISTER

# Pre-computed coordinate grids for display operations
xx, yy = jnp.meshgrid(jnp.arange(SCREEN_WIDTH), jnp.arange(SCREEN_HEIGHT), indexing='ij')


def execute_display(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """DXYN - XOR an 8xN sprite from memory[I] onto the screen at (VX, VY).

    The origin wraps around the screen, the sprite itself is clipped at the
    right and bottom edges. VF is set when any lit pixel is turned off.
    """
    sprite_x = jnp.astype(state.V[instruction.x], jnp.int32) % SCREEN_WIDTH
    sprite_y = jnp.astype(state.V[instruction.y], jnp.int32) % SCREEN_HEIGHT

    in_sprite = (xx >= sprite_x) & (xx < sprite_x + 8) & (yy >= sprite_y) & (yy < sprite_y + instruction.n)

    row_offset = jnp.where(in_sprite, yy - sprite_y, 0)
    bit_offset = jnp.where(in_sprite, 7 - (xx - sprite_x), 0)
    sprite_bytes = state.memory[(state.I + row_offset) & ADDRESS_MASK]
    sprite = (((sprite_bytes >> bit_offset) & 1) == 1) & in_sprite

    return state.replace(
        display=state.display ^ sprite,
        V=state.V.at[FLAG_REGISTER].set(jnp.astype(jnp.any(state.display & sprite), jnp.uint8))
    )
