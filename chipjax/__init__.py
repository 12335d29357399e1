"""CHIP-8 emulator package."""

from chipjax.state import EmulatorState, create_state
from chipjax.emulator import execute, fetch, step, tick_timers, run_frame, run_frames, load_program, load_rom
from chipjax.decode import DecodedInstruction, Operation, decode
from chipjax.constants import *
from chipjax.errors import ChipJaxError, LoadError, ProgramTooLargeError
from chipjax.config import EmulatorConfig
from chipjax.machine import Machine, RunState

__all__ = [
    "EmulatorState",
    "create_state",
    "fetch",
    "execute",
    "step",
    "tick_timers",
    "run_frame",
    "run_frames",
    "load_program",
    "load_rom",
    "DecodedInstruction",
    "Operation",
    "decode",
    "PROGRAM_START",
    "FONT_START",
    "SCREEN_WIDTH",
    "SCREEN_HEIGHT",
    "MAX_PROGRAM_SIZE",
    "STACK_SIZE",
    "ChipJaxError",
    "LoadError",
    "ProgramTooLargeError",
    "EmulatorConfig",
    "Machine",
    "RunState",
]
