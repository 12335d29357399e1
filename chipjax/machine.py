"""Stateful owner of a CHIP-8 emulator state.

``Machine`` holds one immutable ``EmulatorState`` and swaps it for the result
of each pure transition. It adds what the functional core leaves to the
caller: the run state, the last decoded instruction and logging.

A Machine is not thread safe. A host that drives it from several threads must
serialize every call.
"""

from enum import Enum
from typing import Iterable, Optional

import jax
import jax.numpy as jnp
import numpy as np

from chipjax.config import EmulatorConfig
from chipjax.constants import NUM_KEYS
from chipjax.decode import DecodedInstruction, Operation, decode
from chipjax.emulator import step, tick_timers, load_program
from chipjax.logging import ConsoleLogger
from chipjax.state import EmulatorState, create_state


class RunState(Enum):
    RUNNING = "running"
    PAUSED = "paused"
    HALTED = "halted"


class Machine:
    """A CHIP-8 machine driven one instruction at a time.

    The host sets the keypad, calls ``step`` a number of times per frame,
    then ``tick_timers`` once, then renders ``framebuffer``.
    """

    def __init__(self, config: Optional[EmulatorConfig] = None, logger: Optional[ConsoleLogger] = None):
        self.config = config or EmulatorConfig()
        self.logger = logger or ConsoleLogger(log_level=self.config.log_level)
        self.state = create_state(jax.random.PRNGKey(self.config.seed), modern_mode=self.config.modern_mode)
        self.run_state = RunState.RUNNING
        self.current_instruction: Optional[DecodedInstruction] = None

    # -- lifecycle -----------------------------------------------------------

    def load(self, program: bytes) -> None:
        """Copy a raw program to 0x200. Raises ProgramTooLargeError, leaving the machine unchanged."""
        self.state = load_program(self.state, bytes(program))
        self.logger.info(f"Loaded {len(program)} byte program")

    def load_file(self, filename: str) -> None:
        with open(filename, "rb") as f:
            program = f.read()
        self.load(program)

    def reset(self) -> None:
        """Restore power-on state, keeping the loaded program and the run state."""
        memory = self.state.memory
        self.state = create_state(jax.random.PRNGKey(self.config.seed), modern_mode=self.config.modern_mode)
        self.state = self.state.replace(memory=memory)
        self.current_instruction = None
        self.logger.info("Machine reset")

    def seed(self, seed: int) -> None:
        """Re-seed the random source used by CXNN."""
        self.state = self.state.replace(rng=jax.random.PRNGKey(seed))

    # -- execution -----------------------------------------------------------

    def step(self) -> bool:
        """Execute one instruction. Returns False, doing nothing, unless running."""
        if self.run_state is not RunState.RUNNING:
            return False

        address = int(self.state.pc)
        stack_depth = int(self.state.stack.pointer)
        self.state, instruction = step(self.state)
        self.current_instruction = decode(int(instruction))

        if self.logger.is_enabled_for("DEBUG"):
            self.logger.debug(f"0x{address:04X}: {self.current_instruction.raw:04X}")
        self._check_stack(address, stack_depth)
        return True

    def _check_stack(self, address: int, stack_depth: int) -> None:
        operation = int(self.current_instruction.operation)
        if stack_depth == int(self.state.stack.pointer):
            if operation == Operation.CALL:
                self.logger.warning(f"Stack overflow at 0x{address:04X}, call ignored")
            elif operation == Operation.RETURN:
                self.logger.warning(f"Stack underflow at 0x{address:04X}, return ignored")

    def tick_timers(self) -> None:
        """Decrement both timers once. Call at 60 Hz."""
        if self.run_state is not RunState.RUNNING:
            return
        self.state = tick_timers(self.state)

    def run_frame(self, instructions_per_frame: Optional[int] = None) -> None:
        """Run one frame worth of instructions, then tick the timers."""
        if instructions_per_frame is None:
            instructions_per_frame = self.config.instructions_per_frame
        for _ in range(instructions_per_frame):
            self.step()
        self.tick_timers()

    # -- run state -----------------------------------------------------------

    def _transition(self, run_state: RunState) -> None:
        if self.run_state is RunState.HALTED or self.run_state is run_state:
            return
        self.logger.info(f"{self.run_state.value} -> {run_state.value}")
        self.run_state = run_state

    def pause(self) -> None:
        self._transition(RunState.PAUSED)

    def resume(self) -> None:
        self._transition(RunState.RUNNING)

    def toggle_pause(self) -> None:
        if self.run_state is RunState.RUNNING:
            self.pause()
        else:
            self.resume()

    def halt(self) -> None:
        self._transition(RunState.HALTED)

    @property
    def halted(self) -> bool:
        return self.run_state is RunState.HALTED

    # -- input ---------------------------------------------------------------

    def set_key(self, key: int, pressed: bool) -> None:
        if not 0 <= key < NUM_KEYS:
            raise ValueError(f"Key must be in 0..{NUM_KEYS - 1}, got {key}")
        self.state = self.state.replace(keypad=self.state.keypad.at[key].set(pressed))

    def set_keypad(self, pressed: Iterable[bool]) -> None:
        keypad = jnp.asarray(list(pressed), dtype=jnp.bool_)
        if keypad.shape != (NUM_KEYS,):
            raise ValueError(f"Expected {NUM_KEYS} key states, got {keypad.shape[0]}")
        self.state = self.state.replace(keypad=keypad)

    # -- read-only views -----------------------------------------------------

    @property
    def memory(self) -> np.ndarray:
        return np.asarray(self.state.memory)

    @property
    def registers(self) -> list[int]:
        return [int(v) for v in self.state.V]

    @property
    def index_register(self) -> int:
        return int(self.state.I)

    @property
    def program_counter(self) -> int:
        return int(self.state.pc)

    @property
    def call_stack(self) -> list[int]:
        depth = int(self.state.stack.pointer)
        return [int(address) for address in self.state.stack.data[:depth]]

    @property
    def framebuffer(self) -> np.ndarray:
        """Pixels as a (64, 32) boolean array indexed [x, y]."""
        return np.asarray(self.state.display)

    @property
    def delay_timer(self) -> int:
        return int(self.state.delay_timer)

    @property
    def sound_timer(self) -> int:
        return int(self.state.sound_timer)

    @property
    def sound_active(self) -> bool:
        return self.sound_timer > 0

    @property
    def keypad(self) -> list[bool]:
        return [bool(k) for k in self.state.keypad]
