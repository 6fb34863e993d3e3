"""
Launch Telemetry Simulation - CLI

The single entry point for headless mission runs, CSV export and plot
generation.
"""

import argparse
import logging
import os
import sys
from typing import List, Optional, Tuple

from launch_sim.config import SimulationConfig
from launch_sim.main import run_mission
from launch_sim.plotting import generate_all_plots

logger = logging.getLogger(__name__)


def parse_scheduled_command(text: str) -> Tuple[float, str]:
    """Parse ``T=TOKEN`` into (mission_time, token)."""
    at, sep, token = text.partition('=')
    if not sep or not token.strip():
        raise argparse.ArgumentTypeError(f"expected T=TOKEN, got {text!r}")
    try:
        t = float(at)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid command time {at!r}")
    if t < 0:
        raise argparse.ArgumentTypeError(f"command time must be >= 0, got {t:g}")
    return t, token.strip()


def parse_args(argv: Optional[List[str]] = None):
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Launch Telemetry Simulation",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter
    )
    parser.add_argument(
        "--duration", "-d",
        type=float,
        default=None,
        help="Mission time to simulate in seconds (default: max simulation time)"
    )
    parser.add_argument(
        "--speed", "-s",
        type=float,
        default=1.0,
        help="Playback speed multiplier"
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Random seed for reproducible telemetry"
    )
    parser.add_argument(
        "--command", "-c",
        dest="commands",
        type=parse_scheduled_command,
        action="append",
        default=[],
        metavar="T=TOKEN",
        help="Send TOKEN at mission time T, e.g. 30=abort or "
             "'90=emergency:structural_stress: Reduce Thrust' (repeatable)"
    )
    parser.add_argument(
        "--csv",
        type=str,
        default=None,
        help="Write the telemetry log to this CSV file"
    )
    parser.add_argument(
        "--output-dir", "-o",
        type=str,
        default="plots",
        help="Directory to save output plots"
    )
    parser.add_argument(
        "--no-plots",
        action="store_true",
        help="Skip plot generation"
    )
    parser.add_argument(
        "--realtime",
        action="store_true",
        help="Tick on the wall clock instead of as fast as possible"
    )
    parser.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Suppress verbose output"
    )
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None):
    """Main execution flow."""
    args = parse_args(argv)

    # Configure logging
    logging.basicConfig(
        level=logging.WARNING if args.quiet else logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    config = SimulationConfig(seed=args.seed, verbose=not args.quiet)

    try:
        # 1. Run Simulation
        logger.info("Starting simulation...")
        final, log, reason = run_mission(
            duration=args.duration,
            speed=args.speed,
            config=config,
            commands=args.commands,
            realtime=args.realtime,
        )

        # 2. Print Summary
        if not args.quiet:
            print("\n" + "=" * 60)
            print("SIMULATION SUMMARY")
            print("=" * 60)
            print(f"Termination reason: {reason}")
            print(f"Final time: {final['timestamp']:.2f} s")
            print(f"Final altitude: {final['position']['y']/1000:.2f} km")
            print(f"Final velocity: {final['velocity']['total']:.2f} m/s")
            print(f"Mission phase: {final['missionPhase']}")
            print("=" * 60 + "\n")

        # 3. Export
        if args.csv:
            log.to_csv(args.csv)
            logger.info(f"Telemetry written to {args.csv}")

        # 4. Generate Plots
        if not args.no_plots and len(log.time) > 0:
            plot_dir = os.path.abspath(args.output_dir)
            logger.info(f"Generating plots in {plot_dir}")
            generate_all_plots(log, plot_dir)

    except Exception as e:
        logger.error(f"Simulation failed: {e}", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
