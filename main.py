"""Main entry point for the AMF colonization simulation.

Runs the simulation headless: advances a session for a fixed number of
frames, logs periodic statistics, and optionally exports a snapshot.
"""

import argparse
import logging
import sys
from typing import List, Optional

from mycorrhiza.config.session import DEFAULT_TICK_SECONDS, FRAME_RATE

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(levelname)s:%(name)s:%(message)s",
)

logger = logging.getLogger(__name__)

SEPARATOR_WIDTH = 60


def run_headless(
    ticks: int,
    dt: float,
    stats_interval: int,
    seed: Optional[int] = None,
    speed: float = 1.0,
    parameter_overrides: Optional[dict] = None,
    extra_plants: int = 0,
    export_path: Optional[str] = None,
):
    """Run the simulation in headless mode (no visualization).

    Args:
        ticks: Number of frames to simulate
        dt: Real seconds per frame, before the speed multiplier
        stats_interval: Log stats every N frames (0 disables)
        seed: Optional random seed for deterministic behavior
        speed: Playback speed multiplier
        parameter_overrides: Parameter changes applied before the run
        extra_plants: Plants to add at random spots before the run
        export_path: Optional filename for the final snapshot

    Returns:
        The session after the run
    """
    from mycorrhiza.session import SimulationSession

    session = SimulationSession(seed=seed)
    if parameter_overrides:
        session.update_parameters(parameter_overrides)
    for _ in range(extra_plants):
        session.add_plant()
    session.set_speed(speed)

    logger.info("=" * SEPARATOR_WIDTH)
    logger.info("AMF COLONIZATION SIMULATION - HEADLESS")
    logger.info("=" * SEPARATOR_WIDTH)
    logger.info("Seed: %d", session.seed)
    logger.info("Parameters: %s", session.parameters.to_dict())

    session.toggle_play()
    for frame in range(1, ticks + 1):
        session.tick(dt)
        if stats_interval and frame % stats_interval == 0:
            _log_stats(session, frame)

    logger.info("=" * SEPARATOR_WIDTH)
    logger.info("Finished %d frames (%.2f simulated seconds)", ticks, session.time)
    _log_stats(session, ticks)

    if export_path:
        session.export_to_file(export_path)
    return session


def _log_stats(session, frame: int) -> None:
    stats = session.stats()
    flow = session.nutrient_flow_stats()
    germinated = sum(1 for spore in session.spores if spore.germinated)
    logger.info(
        "[frame %d] spores %d (%d germinated) | hyphae %d | roots %d (%d colonized) | "
        "flows P%d C%d W%d",
        frame,
        stats["sporeCount"],
        germinated,
        stats["hyphalCount"],
        stats["rootCount"],
        stats["colonizedRoots"],
        flow.phosphorus_count,
        flow.carbohydrate_count,
        flow.water_count,
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Arbuscular Mycorrhizal Fungi Colonization Simulation",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Ten simulated seconds at 60 fps
  python main.py --ticks 600

  # Reproducible dry-soil run with an extra plant, exporting a snapshot
  python main.py --seed 42 --soil-moisture 0.3 --add-plants 1 --export run.json

  # Dense spores, fast playback
  python main.py --ticks 3000 --spore-density 2.0 --speed 3
        """,
    )

    parser.add_argument("--ticks", type=int, default=600, help="Frames to simulate (default: 600)")
    parser.add_argument(
        "--dt",
        type=float,
        default=DEFAULT_TICK_SECONDS,
        help=f"Seconds per frame (default: 1/{FRAME_RATE})",
    )
    parser.add_argument(
        "--speed", type=float, default=1.0, help="Playback speed multiplier, 0.1-5 (default: 1)"
    )
    parser.add_argument(
        "--stats-interval",
        type=int,
        default=60,
        help="Log stats every N frames, 0 to disable (default: 60)",
    )
    parser.add_argument(
        "--seed", type=int, default=None, help="Random seed for deterministic behavior (optional)"
    )
    parser.add_argument(
        "--export",
        type=str,
        default=None,
        metavar="FILENAME",
        help="Export the final snapshot to a JSON file",
    )
    parser.add_argument("--add-plants", type=int, default=0, help="Extra plants at random spots")

    parser.add_argument("--spore-density", type=float, default=None)
    parser.add_argument("--soil-moisture", type=float, default=None)
    parser.add_argument("--nutrients", type=float, default=None)
    parser.add_argument("--root-health", type=float, default=None)
    parser.add_argument("--growth-rate", type=float, default=None)
    parser.add_argument("--colonization-rate", type=float, default=None)
    parser.add_argument("--branching-factor", type=float, default=None)

    return parser


_PARAMETER_FLAGS = (
    "spore_density",
    "soil_moisture",
    "nutrients",
    "root_health",
    "growth_rate",
    "colonization_rate",
    "branching_factor",
)


def main(argv: Optional[List[str]] = None) -> int:
    """Parse command-line arguments and run the simulation."""
    args = build_parser().parse_args(argv)

    overrides = {
        name: getattr(args, name) for name in _PARAMETER_FLAGS if getattr(args, name) is not None
    }

    from mycorrhiza.exceptions import MycorrhizaError

    logger.info("Configuration: %d frames, stats every %d frames", args.ticks, args.stats_interval)
    if args.export:
        logger.info("Snapshot will be exported to: %s", args.export)

    try:
        run_headless(
            args.ticks,
            args.dt,
            args.stats_interval,
            seed=args.seed,
            speed=args.speed,
            parameter_overrides=overrides,
            extra_plants=args.add_plants,
            export_path=args.export,
        )
    except MycorrhizaError as exc:
        logger.error("Simulation failed: %s", exc)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
