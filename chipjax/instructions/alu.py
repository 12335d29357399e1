"""CHIP-8 ALU operations (8xxx)."""

import jax.numpy as jnp
from chipjax.state import EmulatorState
from chipjax.decode import DecodedInstruction
from chipjax.constants import FLAG_REGISTER


def alu_set(vx: int, vy: int) -> tuple[int, int]:
    """8XY0 - Set: VX = VY."""
    return vy, jnp.zeros((), dtype=jnp.uint8)


def alu_or(vx: int, vy: int) -> tuple[int, int]:
    """8XY1 - Binary OR: VX |= VY."""
    return vx | vy, jnp.zeros((), dtype=jnp.uint8)


def alu_and(vx: int, vy: int) -> tuple[int, int]:
    """8XY2 - Binary AND: VX &= VY."""
    return vx & vy, jnp.zeros((), dtype=jnp.uint8)


def alu_xor(vx: int, vy: int) -> tuple[int, int]:
    """8XY3 - Logical XOR: VX ^= VY."""
    return vx ^ vy, jnp.zeros((), dtype=jnp.uint8)


def alu_add(vx: int, vy: int) -> tuple[int, int]:
    """8XY4 - Add: VX += VY, set carry flag."""
    result = jnp.astype(vx, jnp.int32) + jnp.astype(vy, jnp.int32)
    carry = jnp.astype(result > 255, jnp.uint8)
    return jnp.astype(result & 0xFF, jnp.uint8), carry


def alu_sub_xy(vx: int, vy: int) -> tuple[int, int]:
    """8XY5 - Subtract: VX -= VY, VF = 1 when there is no borrow."""
    no_borrow = jnp.astype(vx >= vy, jnp.uint8)
    result = (vx - vy) & 0xFF
    return result, no_borrow


def alu_shift_right(vx: int, vy: int) -> tuple[int, int]:
    """8XY6 - Shift right: VX >>= 1."""
    shifted_bit = vx & 1
    result = vx >> 1
    return result, shifted_bit


def alu_sub_yx(vx: int, vy: int) -> tuple[int, int]:
    """8XY7 - Subtract: VX = VY - VX, VF = 1 when there is no borrow."""
    no_borrow = jnp.astype(vy >= vx, jnp.uint8)
    result = (vy - vx) & 0xFF
    return result, no_borrow


def alu_shift_left(vx: int, vy: int) -> tuple[int, int]:
    """8XYE - Shift left: VX <<= 1."""
    shifted_bit = (vx & 0x80) >> 7
    result = (vx << 1) & 0xFF
    return result, shifted_bit


def make_alu_instruction(operation, writes_flag: bool, reads_vy_in_legacy: bool = False):
    """Factory for 8XYN instructions.

    The flag is written after the result, so VF holds the flag even when X is F.
    Legacy shifts take their source from VY instead of VX.
    """
    def alu_instruction(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
        vx = state.V[instruction.x]
        vy = state.V[instruction.y]
        if reads_vy_in_legacy and not state.modern_mode:
            vx = vy

        result, flag = operation(vx, vy)

        new_V = state.V.at[instruction.x].set(result)
        if writes_flag:
            new_V = new_V.at[FLAG_REGISTER].set(flag)
        return state.replace(V=new_V)
    alu_instruction.__doc__ = operation.__doc__
    return alu_instruction


execute_alu_set = make_alu_instruction(alu_set, writes_flag=False)
execute_alu_or = make_alu_instruction(alu_or, writes_flag=False)
execute_alu_and = make_alu_instruction(alu_and, writes_flag=False)
execute_alu_xor = make_alu_instruction(alu_xor, writes_flag=False)
execute_alu_add = make_alu_instruction(alu_add, writes_flag=True)
execute_alu_sub_xy = make_alu_instruction(alu_sub_xy, writes_flag=True)
execute_alu_shift_right = make_alu_instruction(alu_shift_right, writes_flag=True, reads_vy_in_legacy=True)
execute_alu_sub_yx = make_alu_instruction(alu_sub_yx, writes_flag=True)
execute_alu_shift_left = make_alu_instruction(alu_shift_left, writes_flag=True, reads_vy_in_legacy=True)
