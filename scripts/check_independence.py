#!/usr/bin/env python3
"""
Vector Independence Check

This script asks for a system of two 2D or three 3D vectors, prints them and
reports whether they are linearly independent.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Dict, List, Optional

import yaml

# Add parent directory to path
sys.path.append(str(Path(__file__).resolve().parent.parent))

from vecindep.config import load_config
from vecindep.console import ConsoleSession
from vecindep.report import IndependenceReport, Timer

LOG_FORMAT = "[%(asctime)s] [%(levelname)s] [%(name)s] %(message)s"

logger = logging.getLogger("check_independence")


def setup_logging(verbose: bool = False) -> None:
    """Send log records to stderr so they never mix with the dialogue."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format=LOG_FORMAT,
        handlers=[
            logging.StreamHandler(sys.stderr),
        ],
    )


def apply_overrides(config: Dict, args: argparse.Namespace) -> Dict:
    """Update configuration with command-line arguments.

    Args:
        config: Configuration dictionary
        args: Parsed command-line arguments

    Returns:
        The updated configuration
    """
    if args.max_retries is not None:
        config["input"]["max_retries"] = args.max_retries
    if args.precision is not None:
        config["display"]["precision"] = args.precision
    if args.language is not None:
        config["display"]["language"] = args.language
    return config


def run_check(
    config: Dict,
    size: Optional[int] = None,
    stdin=None,
    stdout=None,
    report_path: Optional[str] = None,
) -> IndependenceReport:
    """Run one interactive independence check.

    Args:
        config: Configuration dictionary
        size: System size; prompted for when None
        stdin: Input stream (defaults to sys.stdin)
        stdout: Output stream (defaults to sys.stdout)
        report_path: Optional path of a JSON report to write

    Returns:
        The report of the run
    """
    session = ConsoleSession(
        stdin=stdin,
        stdout=stdout,
        language=config["display"]["language"],
        max_retries=config["input"]["max_retries"],
        precision=config["display"]["precision"],
    )

    with Timer("Independence check") as timer:
        checker, independent = session.run(
            size=size, epsilon=config["checker"]["epsilon"]
        )

    report = IndependenceReport.from_checker(
        checker, rejected_lines=session.rejected_lines, runtime_s=timer.elapsed
    )
    logger.info(
        f"System of {int(checker.size)} vectors is "
        f"{'independent' if independent else 'dependent'} "
        f"(det={report.determinant:.6g})"
    )
    logger.debug("\n" + report.summary())

    if report_path:
        report.save(report_path)

    return report


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Vector Independence Check")
    parser.add_argument(
        "--size", "-s", dest="size", type=int, default=None,
        choices=[2, 3],
        help="System size (asked interactively if omitted)"
    )
    parser.add_argument(
        "--input", "-i", dest="input_path", default=None,
        help="Read answers from this file instead of standard input"
    )
    parser.add_argument(
        "--config", "-c", dest="config_path", default=None,
        help="Path to configuration file"
    )
    parser.add_argument(
        "--max-retries", dest="max_retries", type=int, default=None,
        help="Give up after this many invalid lines for one prompt"
    )
    parser.add_argument(
        "--precision", dest="precision", type=int, default=None,
        help="Digits shown after the decimal point"
    )
    parser.add_argument(
        "--language", "-l", dest="language", default=None,
        choices=["en", "uk"],
        help="Language of prompts and verdict"
    )
    parser.add_argument(
        "--report", "-r", dest="report_path", default=None,
        help="Write a JSON report to this path"
    )
    parser.add_argument(
        "--verbose", "-v", dest="verbose", action="store_true",
        help="Enable debug logging"
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main function to parse arguments and run the check."""
    args = build_parser().parse_args(argv)
    setup_logging(args.verbose)

    try:
        config = apply_overrides(load_config(args.config_path), args)
    except (OSError, ValueError, yaml.YAMLError) as e:
        logger.error(f"Could not load configuration: {e}")
        return 1

    try:
        if args.input_path:
            with open(args.input_path, "r", encoding="utf-8-sig") as f:
                run_check(config, size=args.size, stdin=f, report_path=args.report_path)
        else:
            run_check(config, size=args.size, report_path=args.report_path)
    except ValueError as e:
        logger.error(str(e))
        return 1
    except EOFError as e:
        logger.error(f"Input ended early: {e}")
        return 1
    except Exception as e:
        logger.exception(f"Error running independence check: {e}")
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
