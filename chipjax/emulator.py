"""Main CHIP-8 emulator execution engine."""

from functools import partial

import jax
import jax.lax
import jax.numpy as jnp
from chipjax.state import EmulatorState
from chipjax.decode import decode, Operation
from chipjax.constants import PROGRAM_START, MAX_PROGRAM_SIZE, MEMORY_SIZE, ADDRESS_MASK
from chipjax.errors import ProgramTooLargeError
from chipjax.instructions.system import no_op, execute_clear_screen, execute_return
from chipjax.instructions.control_flow import (
    execute_jump, execute_call, execute_skip_if_equal_immediate,
    execute_skip_if_not_equal_immediate, execute_skip_if_equal_register,
    execute_skip_if_not_equal_register, execute_jump_with_offset,
    execute_skip_if_key, execute_skip_if_not_key
)
from chipjax.instructions.alu import (
    execute_alu_set, execute_alu_or, execute_alu_and, execute_alu_xor, execute_alu_add,
    execute_alu_sub_xy, execute_alu_shift_right, execute_alu_sub_yx, execute_alu_shift_left
)
from chipjax.instructions.memory import execute_set, execute_add, execute_set_index, execute_random
from chipjax.instructions.display import execute_display
from chipjax.instructions.misc import (
    execute_get_delay_timer, execute_wait_for_key, execute_set_delay_timer,
    execute_set_sound_timer, execute_add_to_index, execute_font_character,
    execute_bcd_conversion, execute_store_registers, execute_load_registers
)

HANDLERS = {
    Operation.NO_OP: no_op,
    Operation.CLEAR_SCREEN: execute_clear_screen,
    Operation.RETURN: execute_return,
    Operation.JUMP: execute_jump,
    Operation.CALL: execute_call,
    Operation.SKIP_EQ_IMM: execute_skip_if_equal_immediate,
    Operation.SKIP_NE_IMM: execute_skip_if_not_equal_immediate,
    Operation.SKIP_EQ_REG: execute_skip_if_equal_register,
    Operation.LOAD_IMM: execute_set,
    Operation.ADD_IMM: execute_add,
    Operation.MOVE: execute_alu_set,
    Operation.OR: execute_alu_or,
    Operation.AND: execute_alu_and,
    Operation.XOR: execute_alu_xor,
    Operation.ADD: execute_alu_add,
    Operation.SUB: execute_alu_sub_xy,
    Operation.SHIFT_RIGHT: execute_alu_shift_right,
    Operation.SUB_REVERSE: execute_alu_sub_yx,
    Operation.SHIFT_LEFT: execute_alu_shift_left,
    Operation.SKIP_NE_REG: execute_skip_if_not_equal_register,
    Operation.LOAD_INDEX: execute_set_index,
    Operation.JUMP_OFFSET: execute_jump_with_offset,
    Operation.RANDOM: execute_random,
    Operation.DRAW: execute_display,
    Operation.SKIP_IF_KEY: execute_skip_if_key,
    Operation.SKIP_IF_NOT_KEY: execute_skip_if_not_key,
    Operation.READ_DELAY: execute_get_delay_timer,
    Operation.WAIT_KEY: execute_wait_for_key,
    Operation.WRITE_DELAY: execute_set_delay_timer,
    Operation.WRITE_SOUND: execute_set_sound_timer,
    Operation.ADD_INDEX: execute_add_to_index,
    Operation.FONT_ADDRESS: execute_font_character,
    Operation.BCD: execute_bcd_conversion,
    Operation.STORE_REGS: execute_store_registers,
    Operation.LOAD_REGS: execute_load_registers,
}

_BRANCHES = [HANDLERS[operation] for operation in sorted(Operation)]


def execute(state: EmulatorState, instruction: int) -> EmulatorState:
    """Execute single CHIP-8 instruction."""
    decoded_instruction = decode(instruction)
    return jax.lax.switch(decoded_instruction.operation, _BRANCHES, state, decoded_instruction)


def _pack_u16(high: jnp.uint8, low: jnp.uint8) -> jnp.uint16:
    """Pack two bytes into uint16."""
    return (high.astype(jnp.uint16) << 8) | low.astype(jnp.uint16)


def fetch(state: EmulatorState) -> tuple[EmulatorState, jnp.uint16]:
    """Fetch next instruction from memory and advance PC past it."""
    instruction = _pack_u16(
        state.memory[state.pc & ADDRESS_MASK],
        state.memory[(state.pc + 1) & ADDRESS_MASK]
    )
    return state.replace(pc=state.pc + 2), instruction


@jax.jit
def step(state: EmulatorState) -> tuple[EmulatorState, jnp.uint16]:
    """Fetch and execute one instruction. Returns the new state and the opcode word."""
    state, instruction = fetch(state)
    return execute(state, instruction), instruction


def tick_timers(state: EmulatorState) -> EmulatorState:
    """Decrement delay and sound timers by one, stopping at zero."""
    return state.replace(
        delay_timer=jnp.where(state.delay_timer > 0, state.delay_timer - 1, state.delay_timer),
        sound_timer=jnp.where(state.sound_timer > 0, state.sound_timer - 1, state.sound_timer),
    )


def _run_instruction(state, _):
    return step(state)


@partial(jax.jit, static_argnums=1)
def run_frame(state: EmulatorState, instructions_per_frame: int) -> EmulatorState:
    """Run one display frame: a batch of instructions, then one timer tick."""
    state, _ = jax.lax.scan(_run_instruction, state, length=instructions_per_frame)
    return tick_timers(state)


def run_frames(state: EmulatorState, num_frames: int, instructions_per_frame: int,
               progress: bool = False) -> tuple[EmulatorState, jnp.ndarray]:
    """Run ``num_frames`` frames headless.

    Returns the final state and the stacked framebuffers, shape
    ``(num_frames, SCREEN_WIDTH, SCREEN_HEIGHT)``.
    """
    def frame(state, _):
        state = run_frame(state, instructions_per_frame)
        return state, state.display

    if progress:
        from chipjax.logging import frame_progress
        frame = frame_progress(num_frames, desc=f"Emulating {num_frames:,} frames")(frame)

    @jax.jit
    def _run(state):
        return jax.lax.scan(frame, state, jnp.arange(num_frames))

    return _run(state)


def load_program(state: EmulatorState, program: bytes) -> EmulatorState:
    """Copy program bytes into memory starting at 0x200.

    The rest of the program area is cleared. Raises ProgramTooLargeError,
    without touching the state, when the program does not fit.
    """
    if len(program) > MAX_PROGRAM_SIZE:
        raise ProgramTooLargeError(len(program))
    program_array = jnp.array(list(program), dtype=jnp.uint8)
    new_memory = state.memory.at[PROGRAM_START:MEMORY_SIZE].set(0)
    new_memory = new_memory.at[PROGRAM_START:PROGRAM_START + len(program)].set(program_array)
    return state.replace(memory=new_memory)


def load_rom(state: EmulatorState, filename: str) -> EmulatorState:
    """Load ROM file into CHIP-8 memory starting at 0x200."""
    with open(filename, 'rb') as f:
        rom_data = f.read()
    return load_program(state, rom_data)
