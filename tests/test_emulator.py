"""Tests for the fetch/execute cycle, program loading and timers."""

import jax.numpy as jnp
import pytest
from chipjax import (
    fetch, step, tick_timers, run_frame, run_frames, load_program, load_rom,
    MAX_PROGRAM_SIZE, PROGRAM_START, ProgramTooLargeError, LoadError,
)

# 0x200: V0 = 10, 0x202: delay = V0, 0x204: V1 += 1, 0x206: jump 0x204
COUNTER_PROGRAM = bytes([0x60, 0x0A, 0xF0, 0x15, 0x71, 0x01, 0x12, 0x04])


class TestFetch:
    """Test instruction fetch."""

    def test_fetch_big_endian(self, fresh_state):
        state = load_program(fresh_state, bytes([0x12, 0x34]))

        state, instruction = fetch(state)

        assert instruction == 0x1234
        assert state.pc == PROGRAM_START + 2

    def test_fetch_wraps_address(self, fresh_state):
        state = fresh_state.replace(
            pc=jnp.asarray(0xFFF, dtype=jnp.uint16),
            memory=fresh_state.memory.at[0xFFF].set(0xAB),
        )

        _, instruction = fetch(state)

        assert instruction == 0xABF0  # low byte from 0x000, font glyph 0

    def test_step_executes_one_instruction(self, fresh_state):
        state = load_program(fresh_state, bytes([0x60, 0x05, 0x61, 0x06]))

        state, instruction = step(state)

        assert instruction == 0x6005
        assert state.V[0] == 5
        assert state.V[1] == 0
        assert state.pc == 0x202

    @pytest.mark.filterwarnings("error::FutureWarning")
    def test_step_writes_registers_as_bytes(self, fresh_state):
        # 6AFE, CBFF, 7A01, DAB1 through the compiled step
        state = load_program(fresh_state, bytes([0x6A, 0xFE, 0xCB, 0xFF, 0x7A, 0x01, 0xDA, 0xB1]))

        for _ in range(4):
            state, _ = step(state)

        assert state.V[0xA] == 0xFF
        assert state.V.dtype == jnp.uint8
        assert state.V[0xF] == 0

    @pytest.mark.filterwarnings("error::FutureWarning")
    def test_run_frame_without_dtype_warnings(self, fresh_state):
        state = load_program(fresh_state, bytes([0x60, 0x0A, 0xC1, 0x0F, 0x12, 0x00]))

        state = run_frame(state, 8)

        assert state.V[0] == 0x0A
        assert state.V[1] <= 0x0F

    def test_skip_over_next_instruction(self, fresh_state):
        # 3000 skips 6107 since V0 == 0
        state = load_program(fresh_state, bytes([0x30, 0x00, 0x61, 0x07, 0x62, 0x08]))

        state, _ = step(state)
        state, _ = step(state)

        assert state.V[1] == 0
        assert state.V[2] == 8


class TestLoading:
    """Test program loading."""

    def test_load_program(self, fresh_state):
        state = load_program(fresh_state, bytes([0xDE, 0xAD, 0xBE, 0xEF]))
        assert [int(v) for v in state.memory[0x200:0x204]] == [0xDE, 0xAD, 0xBE, 0xEF]
        assert (state.memory[:0x200] == fresh_state.memory[:0x200]).all()

    def test_load_max_size(self, fresh_state):
        program = bytes([0xAA]) * MAX_PROGRAM_SIZE
        state = load_program(fresh_state, program)
        assert state.memory[0xFFF] == 0xAA

    def test_load_too_large(self, fresh_state):
        with pytest.raises(ProgramTooLargeError) as excinfo:
            load_program(fresh_state, bytes(MAX_PROGRAM_SIZE + 1))
        assert excinfo.value.size == MAX_PROGRAM_SIZE + 1
        assert excinfo.value.limit == 3584
        assert isinstance(excinfo.value, LoadError)

    def test_reload_clears_previous_program(self, fresh_state):
        state = load_program(fresh_state, bytes([1, 2, 3, 4]))
        state = load_program(state, bytes([9]))
        assert [int(v) for v in state.memory[0x200:0x204]] == [9, 0, 0, 0]

    def test_load_rom(self, fresh_state, tmp_path):
        rom = tmp_path / "counter.ch8"
        rom.write_bytes(COUNTER_PROGRAM)

        state = load_rom(fresh_state, str(rom))

        assert bytes(int(v) for v in state.memory[0x200:0x208]) == COUNTER_PROGRAM


class TestTimers:
    """Test the 60 Hz timer tick."""

    def test_tick_decrements_both(self, fresh_state):
        state = fresh_state.replace(
            delay_timer=jnp.asarray(5, dtype=jnp.uint8),
            sound_timer=jnp.asarray(2, dtype=jnp.uint8),
        )

        state = tick_timers(state)

        assert state.delay_timer == 4
        assert state.sound_timer == 1

    def test_tick_at_zero_stays_zero(self, fresh_state):
        state = tick_timers(fresh_state)
        assert state.delay_timer == 0
        assert state.sound_timer == 0

    def test_tick_reaches_zero_after_k_ticks(self, fresh_state):
        state = fresh_state.replace(delay_timer=jnp.asarray(3, dtype=jnp.uint8))
        seen = []
        for _ in range(6):
            state = tick_timers(state)
            seen.append(int(state.delay_timer))
        assert seen == [2, 1, 0, 0, 0, 0]


class TestFrames:
    """Test frame batching."""

    def test_run_frame(self, fresh_state):
        state = load_program(fresh_state, COUNTER_PROGRAM)

        state = run_frame(state, 8)

        assert state.V[1] == 3
        assert state.delay_timer == 9
        assert state.pc == 0x204

    def test_run_frames_returns_each_display(self, fresh_state):
        state = load_program(fresh_state, COUNTER_PROGRAM)

        state, displays = run_frames(state, 3, 8)

        assert displays.shape == (3, 64, 32)
        assert state.V[1] == 11
        assert state.delay_timer == 7
