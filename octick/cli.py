"""Headless command-line runner."""

import argparse
import sys

from pydantic import ValidationError

from octick.config import ErrorPolicy, SystemConfig
from octick.errors import Chip8Error
from octick.logging import StatsCallback, run_with_progress
from octick.rendering import display_to_text, save_frame
from octick.system import System


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="octick", description="Run a CHIP-8 ROM headlessly"
    )
    parser.add_argument("rom", help="Path to the ROM image")
    parser.add_argument(
        "--cycles", type=int, default=2000,
        help="Maximum number of ticks to run (default: 2000)",
    )
    parser.add_argument(
        "--ips", type=float, default=700.0,
        help="Instructions per second used to derive tick duration (default: 700)",
    )
    parser.add_argument(
        "--error-policy", choices=[p.value for p in ErrorPolicy], default=ErrorPolicy.HALT.value,
        help="What to do when an instruction fails (default: halt)",
    )
    parser.add_argument("--delay-timer", type=int, default=0, help="Initial delay timer value")
    parser.add_argument("--sound-timer", type=int, default=0, help="Initial sound timer value")
    parser.add_argument("--legacy", action="store_true", help="Use legacy shift and load/store behavior")
    parser.add_argument("--seed", type=int, default=0, help="Random seed for RND")
    parser.add_argument("--snapshot", help="Save the final frame as an image")
    parser.add_argument("--ascii", action="store_true", help="Print the final frame as text")
    parser.add_argument("--trace", action="store_true", help="Log every executed instruction")
    parser.add_argument("--log-level", default="INFO", help="Console log level (default: INFO)")
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    if args.ips <= 0:
        print("octick: --ips must be positive", file=sys.stderr)
        return 2

    try:
        config = SystemConfig(
            delay_timer=args.delay_timer,
            sound_timer=args.sound_timer,
            error_policy=args.error_policy,
            modern_mode=not args.legacy,
            seed=args.seed,
            log_level="DEBUG" if args.trace else args.log_level.upper(),
            trace=args.trace,
        )
    except ValidationError as err:
        print(f"octick: invalid configuration\n{err}", file=sys.stderr)
        return 2

    stats = StatsCallback()
    system = System(config, callbacks=[stats])
    try:
        system.load_rom_file(args.rom)
        ticks = run_with_progress(system, args.cycles, 1000.0 / args.ips, desc=args.rom)
    except Chip8Error as err:
        system.logger.error(f"{err.__class__.__name__}: {err.message}")
        return 1

    system.logger.info(f"Ran {ticks} ticks, halted={system.halted}, stats={stats.get_statistics()}")
    frame = system.consume_frame()
    if args.ascii:
        print(display_to_text(frame))
    if args.snapshot:
        save_frame(frame, args.snapshot)
        system.logger.info(f"Saved frame to {args.snapshot}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
