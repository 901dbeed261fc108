from __future__ import annotations

import logging
from pathlib import Path
from typing import Literal

import typed_argparse as tap

from clear_tools.commands.common import generate_script
from clear_tools.common import main_func, setup_logging
from clear_tools.config import DEFAULT_SIZE_LIMIT, Options, load_user_ids
from clear_tools.script import DEFAULT_SCRIPT_PATH

DEFAULT_ROOT = "/mnt/disk2/labs-tools/"
DEFAULT_USERS_FILE = "users.json"


class Args(tap.TypedArgs):
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


def ask(question: str, default: str) -> str:
    answer = input(f"{question} [{default}]: ").strip()

    return answer or default


def ask_size_limit(log: logging.Logger, default: int) -> int:
    while True:
        answer = ask("Size limit in MB", str(default))
        try:
            value = int(answer)
        except ValueError:
            value = -1

        if value >= 0:
            return value

        log.error("size limit must be a non-negative whole number, not %r", answer)


def ask_yes_no(log: logging.Logger, question: str, *, default: bool = False) -> bool:
    choices = "Y/n" if default else "y/N"
    while True:
        answer = input(f"{question} [{choices}]: ").strip().lower()
        if not answer:
            return default
        elif answer in ("y", "yes"):
            return True
        elif answer in ("n", "no"):
            return False

        log.error("please answer yes or no, not %r", answer)


def prompt_options(log: logging.Logger) -> Options | None:
    root = Path(ask("Root folder containing user folders", DEFAULT_ROOT))
    users_file = Path(ask("JSON file listing user IDs", DEFAULT_USERS_FILE))
    if (user_ids := load_user_ids(users_file)) is None:
        return None

    size_limit = ask_size_limit(log, DEFAULT_SIZE_LIMIT)
    delete_common = ask_yes_no(log, "Delete 'common' folders?")

    return Options(
        root_path=root.expanduser(),
        user_ids=tuple(user_ids),
        size_threshold_mb=size_limit,
        delete_common=delete_common,
    )


@main_func
def main(args: Args) -> int:
    log = setup_logging("interactive", log_level=args.log_level)

    try:
        options = prompt_options(log)
    except EOFError:
        log.critical("no input; aborting")
        return 1

    if options is None:
        log.critical("aborting due to config error")
        return 1

    return generate_script(
        log,
        options,
        output=args.output,
        threads=args.threads,
    )
