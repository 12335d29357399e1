"""
chipjax command line: play a CHIP-8 program or record it headless.

    python main.py rom=games/pong.ch8
    python main.py rom=games/pong.ch8 scale=10 color_scheme=amber
    python main.py rom=games/pong.ch8 mode=record record.frames=1200 record.output=pong.mp4
"""

import sys
from pathlib import Path

import hydra
from omegaconf import DictConfig, OmegaConf

from chipjax import EmulatorConfig, Machine, LoadError, run_frames
from chipjax.logging import ConsoleLogger
from chipjax.rendering import create_video, save_frame


def play(machine: Machine, rom: str) -> None:
    from chipjax.frontend import run

    run(machine, title=f"chipjax - {Path(rom).name}")


def record(machine: Machine, cfg: DictConfig, logger: ConsoleLogger) -> None:
    config = machine.config
    final_state, displays = run_frames(
        machine.state, cfg.record.frames, config.instructions_per_frame, progress=True
    )
    machine.state = final_state

    output = cfg.record.output
    if Path(output).suffix.lower() in (".png", ".jpg", ".jpeg", ".bmp", ".gif"):
        save_frame(displays[-1], output, scale=config.scale, color_scheme=config.color_scheme)
    else:
        create_video(displays, output, fps=config.fps, scale=config.scale,
                     color_scheme=config.color_scheme, persistence=cfg.record.persistence)
    logger.info(f"Saved {output} ({cfg.record.frames} frames)")


@hydra.main(version_base=None, config_path="conf", config_name="config")
def main(cfg: DictConfig) -> None:
    config = EmulatorConfig.from_mapping(OmegaConf.to_container(cfg))
    logger = ConsoleLogger(log_level=config.log_level)
    machine = Machine(config, logger)

    try:
        machine.load_file(hydra.utils.to_absolute_path(cfg.rom))
    except (OSError, LoadError) as e:
        logger.error(f"Unable to load {cfg.rom}: {e}")
        sys.exit(1)

    if cfg.mode == "play":
        play(machine, cfg.rom)
    elif cfg.mode == "record":
        record(machine, cfg, logger)
    else:
        logger.error(f"Unknown mode '{cfg.mode}', expected 'play' or 'record'")
        sys.exit(2)


if __name__ == "__main__":
    main()
