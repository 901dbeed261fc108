from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path

from clear_tools.common import pretty_size
from clear_tools.config import Options
from clear_tools.resolver import resolve_user
from clear_tools.scanner import Candidate, scan
from clear_tools.script import RemovalScript

_LOG = logging.getLogger("pipeline")


@dataclass
class UserPlan:
    user_id: str
    common: Path | None = None
    candidates: list[Candidate] = field(default_factory=list[Candidate])


@dataclass
class Summary:
    files: int = 0
    common_dirs: int = 0
    size_bytes: int = 0
    skipped_users: int = 0


def plan_user(options: Options, user_id: str) -> UserPlan | None:
    """Collects the removal directives for a single user, or None if skipped."""
    _LOG.info("processing user %s", user_id)
    ctx = resolve_user(
        options.root_path,
        user_id,
        delete_common=options.delete_common,
    )
    if ctx is None:
        return None

    plan = UserPlan(user_id=user_id)
    if ctx.common is not None:
        _LOG.info("scheduling removal of %s", ctx.common.path)
        plan.common = ctx.common.path

    for target in ctx.targets:
        _LOG.info("scanning %s folder %s", target.label, target.path)
        candidates = sorted(
            scan(target.path, options.size_threshold_mb),
            key=lambda it: it.path,
        )
        _LOG.info("found %i large files in %s", len(candidates), target.path)

        plan.candidates.extend(candidates)

    return plan


def plan_users(options: Options, *, threads: int = 1) -> Iterator[UserPlan | None]:
    """Returns a plan (or None) per user, in the order the users were specified."""
    if threads < 1:
        raise ValueError(f"threads must be at least 1, not {threads}")
    elif threads == 1:
        return (plan_user(options, user_id) for user_id in options.user_ids)

    return _plan_users_threaded(options, threads)


def _plan_users_threaded(options: Options, threads: int) -> Iterator[UserPlan | None]:
    with ThreadPoolExecutor(max_workers=threads) as executor:
        yield from executor.map(lambda it: plan_user(options, it), options.user_ids)


def write_plans(script: RemovalScript, plans: Iterable[UserPlan | None]) -> Summary:
    summary = Summary()
    for plan in plans:
        if plan is None:
            summary.skipped_users += 1
            continue

        if plan.common is not None:
            script.append_remove_tree(plan.common)
            summary.common_dirs += 1

        for candidate in plan.candidates:
            script.append_remove_file(candidate.path)
            summary.files += 1
            summary.size_bytes += candidate.size_bytes

    return summary


def run(options: Options, script_path: Path, *, threads: int = 1) -> Summary:
    """Writes a removal script for all users and marks it executable.

    Raises OSError if the script could not be written or made executable, and
    ValueError if `threads` is less than 1.
    """
    plans = plan_users(options, threads=threads)
    with RemovalScript.open(script_path) as script:
        script.write_header()
        summary = write_plans(script, plans)
        script.finalize()

    _LOG.info(
        "found %i large files totaling %s",
        summary.files,
        pretty_size(summary.size_bytes),
    )
    if options.delete_common:
        _LOG.info("found %i common folders", summary.common_dirs)
    if summary.skipped_users:
        _LOG.warning(
            "skipped %i of %i users",
            summary.skipped_users,
            len(options.user_ids),
        )

    return summary
