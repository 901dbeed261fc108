from __future__ import annotations

from pathlib import Path
from typing import Literal

import typed_argparse as tap

from clear_tools.commands.common import generate_script
from clear_tools.common import main_func, setup_logging
from clear_tools.config import Config
from clear_tools.script import DEFAULT_SCRIPT_PATH


class Args(tap.TypedArgs):
    config: Path = tap.arg(
        positional=True,
        metavar="CONFIG",
        help="Path to JSON configuration file (or TOML, if ending with .toml)",
    )
    output: Path = tap.arg(
        default=DEFAULT_SCRIPT_PATH,
        metavar="SCRIPT",
        help="Write the removal script to this path",
    )
    threads: int = tap.arg(
        default=1,
        help="Scan this many users in parallel; does not affect the generated script",
    )

    ####################################################################################
    # Logging

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = tap.arg(
        default="INFO",
        help="Verbosity level for console logging",
    )


@main_func
def main(args: Args) -> int:
    log = setup_logging("run", log_level=args.log_level)

    if not (conf := Config.load(args.config)):
        log.critical("aborting due to config error")
        return 1

    return generate_script(
        log,
        conf.to_options(),
        output=args.output,
        threads=args.threads,
    )
