"""
Command-line interface for the interactive CHOMP shell.

Usage:
    chomp-shell gui [session.yaml]
    chomp-shell run [session.yaml] [--iterations 100]
    chomp-shell validate session.yaml [--verbose]
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

import numpy as np

from .config import OptimizerConfig, SessionConfig, load_session_config, reference_session_config
from .core.session import Session
from .plugins import discover_all_plugins
from .settings import default_session_file, get_settings

Logger = logging.getLogger(__name__)


def configure_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format="%(message)s")


def add_optional_config_argument(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "config",
        type=Path,
        nargs="?",
        help="Session YAML file (defaults to CHOMP_SHELL_SESSION_FILE or the reference session).",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="chomp-shell",
        description="Interactive CHOMP trials for a point vehicle in the plane.",
    )
    parser.add_argument("--verbose", action="store_true", help="Enable verbose logging.")
    subparsers = parser.add_subparsers(dest="command", required=True)

    gui_parser = subparsers.add_parser(
        "gui",
        help="Open the interactive window (drag obstacles with the left button, right-click to add).",
    )
    add_optional_config_argument(gui_parser)

    run_parser = subparsers.add_parser(
        "run",
        help="Run optimizer iterations without a window and print a summary.",
    )
    add_optional_config_argument(run_parser)
    run_parser.add_argument(
        "--iterations",
        type=int,
        default=100,
        help="Number of optimizer iterations (default: 100).",
    )

    validate_parser = subparsers.add_parser(
        "validate",
        help="Validate a session file and print a summary.",
    )
    validate_parser.add_argument("config", type=Path, help="Session YAML file.")

    return parser


def resolve_session_config(config_path: Optional[Path]) -> SessionConfig:
    """Load ``config_path`` or fall back to the settings-driven default session."""
    if config_path is None:
        config_path = default_session_file()
    if config_path is not None:
        return load_session_config(config_path)
    config = reference_session_config()
    config.optimizer = OptimizerConfig(name=get_settings().optimizer)
    return config


def summarize_configuration(config: SessionConfig, source: Optional[Path] = None) -> str:
    lines = [
        f"Session: {source if source is not None else '<reference>'}",
        f"  Title: {config.title}",
        f"  Start: {config.start} | Goal: {config.goal}",
        f"  Waypoints: {config.num_waypoints} (initial: {config.initial_trajectory})",
        f"  Optimizer: {config.optimizer.name} {config.optimizer.params or ''}".rstrip(),
        f"  Obstacles ({len(config.obstacles)}):",
    ]
    for idx, obstacle in enumerate(config.obstacles):
        lines.append(f"    {idx}. center={obstacle.center} R={obstacle.radius}")
    return "\n".join(lines)


def summarize_session(session: Session) -> str:
    low, high = session.trajectory.bounding_box()
    waypoints = session.trajectory.waypoints
    lines = [
        f"Iterations: {session.iterations}",
        f"Bounding box: ({low[0]:.3f}, {low[1]:.3f}) - ({high[0]:.3f}, {high[1]:.3f})",
    ]
    obstacles = session.obstacles.as_array()
    if obstacles.shape[0] > 0:
        deltas = waypoints[:, None, :] - obstacles[None, :, :2]
        clearance = np.linalg.norm(deltas, axis=2) - obstacles[None, :, 2]
        lines.append(f"Minimum obstacle clearance: {float(clearance.min()):.3f}")
    for idx, point in enumerate(waypoints):
        lines.append(f"  q{idx + 1}: ({point[0]:.3f}, {point[1]:.3f})")
    return "\n".join(lines)


def _config_missing(config_path: Optional[Path]) -> bool:
    if config_path is not None and not config_path.exists():
        Logger.error("Configuration file not found: %s", config_path)
        return True
    return False


def gui_command(args: argparse.Namespace) -> int:
    if _config_missing(args.config):
        return 2
    try:
        session = Session.from_config(resolve_session_config(args.config))
    except Exception as exc:  # pylint: disable=broad-except
        Logger.error("Could not start session: %s", exc)
        if Logger.isEnabledFor(logging.DEBUG):
            Logger.exception("Stack trace")
        return 1
    from .gui import run as run_gui  # Local import to avoid Qt initialization unless needed

    return run_gui(session, interval_ms=get_settings().frame_interval_ms)


def run_command(args: argparse.Namespace) -> int:
    if _config_missing(args.config):
        return 2
    if args.iterations < 0:
        Logger.error("--iterations must be non-negative")
        return 2
    try:
        session = Session.from_config(resolve_session_config(args.config))
        for _ in range(args.iterations):
            session.iterate()
    except Exception as exc:  # pylint: disable=broad-except
        Logger.error("Run failed: %s", exc)
        if Logger.isEnabledFor(logging.DEBUG):
            Logger.exception("Stack trace")
        return 1
    print(summarize_session(session))
    return 0


def validate_command(args: argparse.Namespace) -> int:
    if _config_missing(args.config):
        return 2
    try:
        config = load_session_config(args.config)
        print(summarize_configuration(config, source=args.config))
        Session.from_config(config)
    except Exception as exc:  # pylint: disable=broad-except
        Logger.error("Validation failed: %s", exc)
        if Logger.isEnabledFor(logging.DEBUG):
            Logger.exception("Stack trace")
        return 1
    Logger.info("Validation succeeded.")
    return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.verbose)
    discover_all_plugins()

    if args.command == "gui":
        return gui_command(args)
    if args.command == "run":
        return run_command(args)
    if args.command == "validate":
        return validate_command(args)

    parser.print_help()
    return 1


if __name__ == "__main__":
    sys.exit(main())
