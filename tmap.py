#!/usr/bin/env python3
"""tmap: Builds Terrestria level descriptions from color-coded map images."""
import argparse
import logging
import os
import sys

from tmap_lib import schema
from tmap_lib.assembler import build_map_from_file
from tmap_lib.config import load_config
from tmap_lib.errors import MapBuilderError
from tmap_lib.log_utils import setup_logging


def non_negative_int(value: str) -> int:
    number = int(value)
    if number < 0:
        raise argparse.ArgumentTypeError(f"must not be negative: {value}")
    return number


def get_cli_args(argv=None):
    """Configures and parses command-line arguments."""
    p = argparse.ArgumentParser(description="Terrestria map builder")
    p.add_argument("-f", "--file", required=True, help="Bitmap image file.")
    p.add_argument(
        "-o", "--output", help="Write the map JSON to a file instead of stdout."
    )
    p.add_argument("-c", "--config", metavar="FILE", help="INI file with palette overrides.")
    g_map = p.add_argument_group("Map Contents")
    g_map.add_argument(
        "--round-rocks", type=non_negative_int, default=0, help="Number of round rocks."
    )
    g_map.add_argument(
        "--square-rocks", type=non_negative_int, default=0, help="Number of square rocks."
    )
    g_map.add_argument("--gems", type=non_negative_int, default=0, help="Number of gems.")
    # Logging arguments
    g_log = p.add_argument_group("Logging & Output")
    g_log.add_argument(
        "-v", "--verbose", action="store_true", help="Enable INFO logging."
    )
    g_log.add_argument(
        "--color-logs", action="store_true", help="Enable colored logging."
    )
    g_log.add_argument(
        "--log-file", metavar="FILE", help="Redirect log output to a file."
    )
    g_log.add_argument(
        "-d",
        "--debug",
        nargs="?",
        const="all",
        dest="debug_topics",
        metavar="TOPICS",
        help="Enable DEBUG logging (all,main,classify,span,assemble,config,bitmap).",
    )
    return p.parse_args(argv)


def main(argv=None) -> int:
    """Main entry point for the tmap CLI."""
    args = get_cli_args(argv)
    log_level = logging.INFO if args.verbose else logging.WARNING
    if args.debug_topics:
        log_level = logging.DEBUG

    setup_logging(
        log_level,
        args.color_logs,
        args.debug_topics,
        args.log_file,
        context=os.path.basename(args.file),
    )
    log = logging.getLogger("tmap.main")
    log.debug("Arguments received: %s", vars(args))

    try:
        config = load_config(args.config)
        map_data = build_map_from_file(
            args.file, args.round_rocks, args.square_rocks, args.gems, config=config
        )
    except (MapBuilderError, FileNotFoundError) as e:
        log.critical("%s", e)
        return 1

    if args.output:
        try:
            schema.save_json(map_data, args.output)
        except IOError as e:
            log.critical("Could not write map file: %s", e)
            return 1
        log.info("Saved map to '%s'", args.output)
    else:
        sys.stdout.write(schema.dumps(map_data))
        sys.stdout.write("\n")

    log.info("--- Build complete. ---")
    return 0


if __name__ == "__main__":
    sys.exit(main())
