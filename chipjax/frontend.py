"""Interactive pygame frontend: window, keyboard and beeper.

Keyboard layout::

    CHIP-8 keypad     keyboard
    1 2 3 C           1 2 3 4
    4 5 6 D           Q W E R
    7 8 9 E           A S D F
    A 0 B F           Z X C V

Space toggles pause, Escape or closing the window quits.
"""

import numpy as np
import pygame

from chipjax.config import EmulatorConfig
from chipjax.constants import SCREEN_WIDTH, SCREEN_HEIGHT
from chipjax.machine import Machine, RunState
from chipjax.rendering import framebuffer_to_rgb, create_color_scheme

KEY_MAP = {
    pygame.K_1: 0x1, pygame.K_2: 0x2, pygame.K_3: 0x3, pygame.K_4: 0xC,
    pygame.K_q: 0x4, pygame.K_w: 0x5, pygame.K_e: 0x6, pygame.K_r: 0xD,
    pygame.K_a: 0x7, pygame.K_s: 0x8, pygame.K_d: 0x9, pygame.K_f: 0xE,
    pygame.K_z: 0xA, pygame.K_x: 0x0, pygame.K_c: 0xB, pygame.K_v: 0xF,
}

SAMPLE_RATE = 44100


def handle_event(machine: Machine, event: pygame.event.Event) -> None:
    """Apply one pygame event to the machine's keypad and run state."""
    if event.type == pygame.QUIT:
        machine.halt()
    elif event.type == pygame.KEYDOWN:
        if event.key == pygame.K_ESCAPE:
            machine.halt()
        elif event.key == pygame.K_SPACE:
            machine.toggle_pause()
        elif event.key in KEY_MAP:
            machine.set_key(KEY_MAP[event.key], True)
    elif event.type == pygame.KEYUP:
        if event.key in KEY_MAP:
            machine.set_key(KEY_MAP[event.key], False)


def square_wave(frequency: float, volume: float, sample_rate: int = SAMPLE_RATE) -> np.ndarray:
    """One period-aligned second of a 16-bit stereo square wave."""
    period = max(2, int(sample_rate / frequency))
    samples = np.arange(sample_rate - sample_rate % period)
    amplitude = int(32767 * volume)
    wave = np.where((samples % period) < period // 2, amplitude, -amplitude).astype(np.int16)
    return np.column_stack([wave, wave])


class Beeper:
    """Plays a looping tone while the sound timer is non-zero."""

    def __init__(self, config: EmulatorConfig):
        pygame.mixer.init(frequency=SAMPLE_RATE, size=-16, channels=2)
        self.sound = pygame.sndarray.make_sound(square_wave(config.beep_frequency, config.volume))
        self.playing = False

    def update(self, active: bool) -> None:
        if active and not self.playing:
            self.sound.play(loops=-1)
        elif not active and self.playing:
            self.sound.stop()
        self.playing = active


def run(machine: Machine, title: str = "chipjax") -> None:
    """Drive the machine at ``config.fps`` until it halts."""
    config = machine.config
    on_color, off_color = create_color_scheme(config.color_scheme)

    pygame.init()
    screen = pygame.display.set_mode((SCREEN_WIDTH * config.scale, SCREEN_HEIGHT * config.scale))
    pygame.display.set_caption(title)
    clock = pygame.time.Clock()
    beeper = Beeper(config)

    try:
        while not machine.halted:
            for event in pygame.event.get():
                handle_event(machine, event)

            machine.run_frame(config.instructions_per_frame)
            beeper.update(machine.sound_active and machine.run_state is RunState.RUNNING)

            rgb = framebuffer_to_rgb(machine.framebuffer, config.scale, on_color, off_color)
            pygame.surfarray.blit_array(screen, rgb.swapaxes(0, 1))
            pygame.display.flip()
            clock.tick(config.fps)
    finally:
        pygame.quit()
