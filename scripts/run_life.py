#!/usr/bin/env python3
"""
Terminal Life Runner

Builds a LifeEngine from command-line options (falling back to APGLIFE_*
environment variables) and prints the grid after every generation.
Stands in for a graphical renderer: it only reads grid.iter_coords()
and calls engine.step().
"""

import sys
import argparse
import os
import json
import time
import logging
from pathlib import Path

# Add src to path
sys.path.insert(0, os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), 'src'))

from apglife import CellState, LifeConfig, LifeEngine, LifeError

logger = logging.getLogger(__name__)

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def render(engine):
    """Render the grid as text, one row per line."""
    rows = [[' '] * engine.width for _ in range(engine.height)]
    for (x, y), state in engine.grid.iter_coords():
        rows[y][x] = '█' if state == CellState.ALIVE else '·'
    return '\n'.join(''.join(row) for row in rows)


def show_frame(engine):
    print(f"\ngeneration {engine.generation}")
    print(render(engine))


def run_simulation(config, steps=50, delay=0.1, quiet=False):
    """Run the simulation and return per-generation metrics."""
    engine = LifeEngine(config)

    logger.info(f"Grid size: {engine.width}x{engine.height}")
    if engine.apg is not None:
        logger.info(f"Pattern: {engine.apg.pattern.name} period {engine.apg.period}")
    logger.info(f"Initial live cells: {engine.population()}")

    populations = [engine.population()]
    for step in range(steps):
        if not quiet:
            show_frame(engine)
            time.sleep(delay)

        engine.step()
        populations.append(engine.population())

        if engine.is_extinct():
            logger.info(f"Grid went extinct at generation {engine.generation}")
            break

    # Final generation
    if not quiet:
        show_frame(engine)

    logger.info(f"Final live cells: {populations[-1]} after {engine.generation} generations")

    return {
        "width": engine.width,
        "height": engine.height,
        "pattern": config.pattern,
        "generations": engine.generation,
        "populations": populations,
    }


def parse_args(argv=None):
    """Parse command-line options; the log level defaults to APGLIFE_LOG_LEVEL."""
    parser = argparse.ArgumentParser(description="Conway's Game of Life in the terminal")
    parser.add_argument("--width", type=int, help="Grid width (default: APGLIFE_WIDTH or 64)")
    parser.add_argument("--height", type=int, help="Grid height (default: APGLIFE_HEIGHT or 64)")
    parser.add_argument("--pattern", help="APG code, e.g. xq4_153 (default: APGLIFE_PATTERN)")
    parser.add_argument("--steps", type=int, default=50, help="Generations to run")
    parser.add_argument("--delay", type=float, default=0.1, help="Seconds between frames")
    parser.add_argument("--quiet", action="store_true", help="Do not print frames")
    parser.add_argument("--output", type=Path, help="Write population history as JSON")
    parser.add_argument("--log-level", type=str.upper, choices=LOG_LEVELS,
                        default=os.getenv('APGLIFE_LOG_LEVEL', 'INFO').upper(),
                        help="Logging level")

    args = parser.parse_args(argv)

    # argparse does not check defaults against choices
    if args.log_level not in LOG_LEVELS:
        parser.error(f"invalid log level {args.log_level!r} (choose from {', '.join(LOG_LEVELS)})")

    return args


if __name__ == "__main__":
    args = parse_args()

    # Configure logging
    logging.basicConfig(level=args.log_level,
                        format='%(asctime)s - %(levelname)s - %(message)s')

    try:
        env_config = LifeConfig.from_env()
        config = LifeConfig(
            width=args.width if args.width is not None else env_config.width,
            height=args.height if args.height is not None else env_config.height,
            pattern=args.pattern if args.pattern is not None else env_config.pattern,
        )
        results = run_simulation(config, steps=args.steps, delay=args.delay, quiet=args.quiet)

        if args.output:
            with open(args.output, 'w') as f:
                json.dump(results, f, indent=2)
            logger.info(f"Population history saved to: {args.output}")

    except LifeError as e:
        logger.error(f"Simulation failed: {e}")
        sys.exit(1)
