from __future__ import annotations

import logging
from pathlib import Path

from clear_tools.config import Options
from clear_tools.pipeline import run


def generate_script(
    log: logging.Logger,
    options: Options,
    *,
    output: Path,
    threads: int,
) -> int:
    log.info("root folder: %s", options.root_path)
    log.info("number of users: %i", len(options.user_ids))
    log.info("size limit: %i MB", options.size_threshold_mb)
    log.info("delete common folders: %s", "yes" if options.delete_common else "no")

    if threads < 1:
        log.critical("--threads must be at least 1, not %i", threads)
        return 1
    elif not options.check():
        log.critical("aborting due to configuration error")
        return 1

    try:
        run(options, output, threads=threads)
    except OSError as error:
        log.critical("failed to write removal script %s: %s", output, error)
        return 1

    log.info("removal script written to %s", output)
    log.info("please review the script before running it")

    return 0
