"""Emulator configuration shared by the machine and its frontends."""

from typing import Any, Mapping

from chex import dataclass


@dataclass(frozen=True)
class EmulatorConfig:
    """Runtime settings.

    Attributes:
        instructions_per_second: CPU clock rate
        fps: Display and timer rate, 60 on real hardware
        scale: Screen pixels per CHIP-8 pixel
        color_scheme: Name of a scheme from ``chipjax.rendering``
        modern_mode: Shift on VX and keep I on FX55/FX65 when True,
            COSMAC VIP behavior when False
        seed: Seed for the CXNN random source
        beep_frequency: Tone played while the sound timer runs, in Hz
        volume: Tone volume between 0 and 1
        log_level: Console logger threshold
    """
    instructions_per_second: int = 500
    fps: int = 60
    scale: int = 20
    color_scheme: str = "original"
    modern_mode: bool = True
    seed: int = 0
    beep_frequency: float = 440.0
    volume: float = 0.25
    log_level: str = "INFO"

    @property
    def instructions_per_frame(self) -> int:
        return max(1, self.instructions_per_second // self.fps)

    @classmethod
    def from_mapping(cls, values: Mapping[str, Any]) -> "EmulatorConfig":
        """Build a config from a mapping, ignoring keys that are not settings."""
        known = cls.__dataclass_fields__.keys()
        return cls(**{key: value for key, value in values.items() if key in known})
