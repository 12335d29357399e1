"""Tests for the pygame frontend that do not need a window."""

import numpy as np
import pygame
import pytest
from chipjax.frontend import KEY_MAP, handle_event, square_wave
from chipjax import RunState


class TestKeyMap:

    def test_covers_every_key(self):
        assert sorted(KEY_MAP.values()) == list(range(16))

    def test_layout_corners(self):
        assert KEY_MAP[pygame.K_1] == 0x1
        assert KEY_MAP[pygame.K_4] == 0xC
        assert KEY_MAP[pygame.K_x] == 0x0
        assert KEY_MAP[pygame.K_v] == 0xF


class TestHandleEvent:

    def test_key_down_and_up(self, machine):
        handle_event(machine, pygame.event.Event(pygame.KEYDOWN, key=pygame.K_q))
        assert machine.keypad[0x4]

        handle_event(machine, pygame.event.Event(pygame.KEYUP, key=pygame.K_q))
        assert not machine.keypad[0x4]

    def test_unmapped_key_ignored(self, machine):
        handle_event(machine, pygame.event.Event(pygame.KEYDOWN, key=pygame.K_p))
        assert not any(machine.keypad)

    def test_space_toggles_pause(self, machine):
        handle_event(machine, pygame.event.Event(pygame.KEYDOWN, key=pygame.K_SPACE))
        assert machine.run_state is RunState.PAUSED

        handle_event(machine, pygame.event.Event(pygame.KEYDOWN, key=pygame.K_SPACE))
        assert machine.run_state is RunState.RUNNING

    @pytest.mark.parametrize("event", [
        pygame.event.Event(pygame.QUIT),
        pygame.event.Event(pygame.KEYDOWN, key=pygame.K_ESCAPE),
    ])
    def test_quit_halts(self, machine, event):
        handle_event(machine, event)
        assert machine.halted


class TestSquareWave:

    def test_shape_and_amplitude(self):
        wave = square_wave(440.0, 0.25)
        assert wave.dtype == np.int16
        assert wave.shape == (44100, 2)
        assert wave.max() == 8191
        assert wave.min() == -8191

    def test_channels_match(self):
        wave = square_wave(1000.0, 0.5, sample_rate=8000)
        assert (wave[:, 0] == wave[:, 1]).all()
