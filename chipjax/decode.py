"""CHIP-8 instruction decoding."""

from enum import IntEnum

import numpy as np
import jax.numpy as jnp
from chex import dataclass


class Operation(IntEnum):
    """Concrete operation selected by an opcode word."""
    NO_OP = 0
    CLEAR_SCREEN = 1
    RETURN = 2
    JUMP = 3
    CALL = 4
    SKIP_EQ_IMM = 5
    SKIP_NE_IMM = 6
    SKIP_EQ_REG = 7
    LOAD_IMM = 8
    ADD_IMM = 9
    MOVE = 10
    OR = 11
    AND = 12
    XOR = 13
    ADD = 14
    SUB = 15
    SHIFT_RIGHT = 16
    SUB_REVERSE = 17
    SHIFT_LEFT = 18
    SKIP_NE_REG = 19
    LOAD_INDEX = 20
    JUMP_OFFSET = 21
    RANDOM = 22
    DRAW = 23
    SKIP_IF_KEY = 24
    SKIP_IF_NOT_KEY = 25
    READ_DELAY = 26
    WAIT_KEY = 27
    WRITE_DELAY = 28
    WRITE_SOUND = 29
    ADD_INDEX = 30
    FONT_ADDRESS = 31
    BCD = 32
    STORE_REGS = 33
    LOAD_REGS = 34


# (family, field mask, field value, operation). Family 0x0 matches on NN only,
# 0x5 and 0x9 ignore the low nibble.
_PATTERNS = [
    (0x0, 0x00FF, 0x00E0, Operation.CLEAR_SCREEN),
    (0x0, 0x00FF, 0x00EE, Operation.RETURN),
    (0x1, 0x0000, 0x0000, Operation.JUMP),
    (0x2, 0x0000, 0x0000, Operation.CALL),
    (0x3, 0x0000, 0x0000, Operation.SKIP_EQ_IMM),
    (0x4, 0x0000, 0x0000, Operation.SKIP_NE_IMM),
    (0x5, 0x0000, 0x0000, Operation.SKIP_EQ_REG),
    (0x6, 0x0000, 0x0000, Operation.LOAD_IMM),
    (0x7, 0x0000, 0x0000, Operation.ADD_IMM),
    (0x8, 0x000F, 0x0000, Operation.MOVE),
    (0x8, 0x000F, 0x0001, Operation.OR),
    (0x8, 0x000F, 0x0002, Operation.AND),
    (0x8, 0x000F, 0x0003, Operation.XOR),
    (0x8, 0x000F, 0x0004, Operation.ADD),
    (0x8, 0x000F, 0x0005, Operation.SUB),
    (0x8, 0x000F, 0x0006, Operation.SHIFT_RIGHT),
    (0x8, 0x000F, 0x0007, Operation.SUB_REVERSE),
    (0x8, 0x000F, 0x000E, Operation.SHIFT_LEFT),
    (0x9, 0x0000, 0x0000, Operation.SKIP_NE_REG),
    (0xA, 0x0000, 0x0000, Operation.LOAD_INDEX),
    (0xB, 0x0000, 0x0000, Operation.JUMP_OFFSET),
    (0xC, 0x0000, 0x0000, Operation.RANDOM),
    (0xD, 0x0000, 0x0000, Operation.DRAW),
    (0xE, 0x00FF, 0x009E, Operation.SKIP_IF_KEY),
    (0xE, 0x00FF, 0x00A1, Operation.SKIP_IF_NOT_KEY),
    (0xF, 0x00FF, 0x0007, Operation.READ_DELAY),
    (0xF, 0x00FF, 0x000A, Operation.WAIT_KEY),
    (0xF, 0x00FF, 0x0015, Operation.WRITE_DELAY),
    (0xF, 0x00FF, 0x0018, Operation.WRITE_SOUND),
    (0xF, 0x00FF, 0x001E, Operation.ADD_INDEX),
    (0xF, 0x00FF, 0x0029, Operation.FONT_ADDRESS),
    (0xF, 0x00FF, 0x0033, Operation.BCD),
    (0xF, 0x00FF, 0x0055, Operation.STORE_REGS),
    (0xF, 0x00FF, 0x0065, Operation.LOAD_REGS),
]


def _build_operation_table() -> np.ndarray:
    """Map every 16-bit word to its Operation; unmatched words stay NO_OP."""
    words = np.arange(0x10000, dtype=np.uint32)
    families = words >> 12
    table = np.full(0x10000, Operation.NO_OP, dtype=np.uint8)
    for family, mask, value, operation in _PATTERNS:
        table[(families == family) & ((words & mask) == value)] = operation
    return table


OPERATION_TABLE = jnp.asarray(_build_operation_table())


@dataclass(frozen=True)
class DecodedInstruction:
    """Decoded CHIP-8 instruction with extracted operands."""
    raw: int
    opcode: int     # First nibble
    x: int          # Second nibble (VX register)
    y: int          # Third nibble (VY register)
    n: int          # Fourth nibble (4-bit immediate)
    nn: int         # Last byte (8-bit immediate)
    nnn: int        # Last 12 bits (12-bit address)
    operation: int  # Operation tag


def decode(instruction: int) -> DecodedInstruction:
    """Decode 16-bit instruction into components."""
    return DecodedInstruction(
        raw=instruction,
        opcode=(instruction & 0xF000) >> 12,
        x=(instruction & 0x0F00) >> 8,
        y=(instruction & 0x00F0) >> 4,
        n=instruction & 0x000F,
        nn=instruction & 0x00FF,
        nnn=instruction & 0x0FFF,
        operation=OPERATION_TABLE[instruction],
    )
