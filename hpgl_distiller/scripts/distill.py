#!/usr/bin/env python3
"""
Distill an HPGL file for a vinyl cutter.

Reads the full HPGL produced by e.g. ``pstoedit -f plot-hpgl`` and
writes only the commands a simple cutter understands.

Usage:
    hpgl-distiller -i output.hpgl -o distilled.hpgl
    hpgl-distiller -i output.hpgl -o /dev/ttyS1 -s 2
    hpgl-distiller -i output.hpgl -o distilled.hpgl -b -x 100 -y 100
    python -m hpgl_distiller.scripts.distill -i output.hpgl -o distilled.hpgl -d

Exit codes:
    0  success
    1  missing or invalid configuration (no input, no output, bad config)
    2  input too large to hold in memory
    3  input cannot be opened
    4  output cannot be opened
    5  input read short of its declared size
    6  write to the output failed
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Sequence

from hpgl_distiller import __version__
from hpgl_distiller.configs.loader import DistillerConfig, load_config, slew_ms_to_us
from hpgl_distiller.distiller import Distiller
from hpgl_distiller.errors import ConfigError, DistillerError, OutputWriteError
from hpgl_distiller.utils import fs
from hpgl_distiller.utils.logging_config import push_context, setup_logging, shutdown

logger = logging.getLogger(__name__)

APP_NAME = "hpgl-distiller"

EPILOG = """\
Pipeline:
  1. pstoedit -f plot-hpgl somefile.eps output.hpgl
  2. hpgl-distiller -i output.hpgl -o distilled.hpgl
  3. cat distilled.hpgl > /dev/ttyS1   (for a serial port cutter)
"""


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=APP_NAME,
        description="HPGL Distiller (for vinyl cutters): strip HPGL commands "
        "a simple cutter does not understand.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=EPILOG,
    )
    parser.add_argument(
        "-i",
        "--input",
        help="File containing the full HPGL to be distilled",
    )
    parser.add_argument(
        "-o",
        "--output",
        help="File (or device) the distilled HPGL is written to; overwritten",
    )
    parser.add_argument(
        "-I",
        "--init",
        dest="init_string",
        help="HPGL sequence prepended to the output (default from config, 'IN;PU;')",
    )
    parser.add_argument(
        "-s",
        "--slew",
        type=float,
        help="Delay between commands per unit of head travel, in ms",
    )
    parser.add_argument(
        "-b",
        "--bounding-box",
        action="store_true",
        help="Determine bounding box and normalise to origin (use with -x/-y)",
    )
    parser.add_argument("-x", "--x-offset", type=int, help="Offset applied to all X values")
    parser.add_argument("-y", "--y-offset", type=int, help="Offset applied to all Y values")
    parser.add_argument("-c", "--config", help="Configuration file (YAML)")
    parser.add_argument(
        "-d",
        "--debug",
        action="store_true",
        help="Enable debugging output (per-command trace)",
    )
    parser.add_argument("--log-file", help="Also write logs to this file")
    parser.add_argument("--log-json", action="store_true", help="Log JSON lines")
    parser.add_argument(
        "-v",
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    return parser


def resolve_config(args: argparse.Namespace) -> DistillerConfig:
    """Load the config file and apply command-line overrides."""
    base = load_config(args.config)
    return base.with_overrides(
        init_string=args.init_string,
        slew_us=slew_ms_to_us(args.slew) if args.slew is not None else None,
        normalize=True if args.bounding_box else None,
        x_offset=args.x_offset,
        y_offset=args.y_offset,
        log_level="DEBUG" if args.debug else None,
        log_json=True if args.log_json else None,
        log_file=args.log_file,
    )


def run(args: argparse.Namespace) -> int:
    """Distil ``args.input`` into ``args.output``.  Returns an exit code."""
    try:
        config = resolve_config(args)
    except FileNotFoundError as exc:
        setup_logging(context={"app": APP_NAME})
        logger.error("%s", exc)
        return ConfigError.exit_code
    except ConfigError as exc:
        setup_logging(context={"app": APP_NAME})
        logger.error("%s", exc)
        return exc.exit_code

    setup_logging(
        config.logging.level,
        config.logging.file,
        json=config.logging.json,
        context={"app": APP_NAME},
    )

    try:
        if args.input is None:
            raise ConfigError("Input filename is missing (use -i)")
        if args.output is None:
            raise ConfigError("Output filename is missing (use -o)")

        push_context(input=args.input)
        data = fs.read_document(args.input)

        # open_sink raises OutputOpenError; an OSError here comes from a
        # write or from the final flush on close.
        try:
            with fs.open_sink(args.output) as sink:
                result = Distiller(config).run(data, sink)
        except OSError as exc:
            raise OutputWriteError(
                f"Write to '{args.output}' failed ({exc.strerror or exc})"
            ) from exc

    except DistillerError as exc:
        logger.error("%s", exc)
        return exc.exit_code
    except KeyboardInterrupt:
        logger.warning("Interrupted")
        return 130

    logger.info(
        "Wrote %d commands to %s", result.accepted, args.output,
    )
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        return run(args)
    finally:
        shutdown()


if __name__ == "__main__":
    sys.exit(main())
