from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

# Folders scanned file-by-file for large files, in the order they are processed
SCAN_LABELS = ("jupyter", "dify")
# Folder removed in its entirety when `delete_common` is set
COMMON_LABEL = "common"

_LOG = logging.getLogger("resolver")


def is_folder(path: Path) -> bool:
    """Returns true if path is a folder; inaccessible paths are logged and treated as
    missing."""
    try:
        return path.is_dir()
    except OSError as error:
        _LOG.warning("cannot access %s: %s", path, error)
        return False


@dataclass(frozen=True)
class ScanTarget:
    label: str
    path: Path
    exists: bool

    @staticmethod
    def new(user_dir: Path, label: str) -> ScanTarget:
        path = user_dir / label

        return ScanTarget(label=label, path=path, exists=is_folder(path))


@dataclass
class UserContext:
    user_id: str
    user_dir: Path
    # The `common` folder, if it is to be removed recursively
    common: ScanTarget | None = None
    targets: list[ScanTarget] = field(default_factory=list[ScanTarget])


def is_valid_user_id(user_id: str) -> bool:
    if not user_id or user_id in (".", ".."):
        return False

    return not any(sep in user_id for sep in (os.sep, os.altsep) if sep)


def resolve_user(
    root: Path,
    user_id: str,
    *,
    delete_common: bool,
) -> UserContext | None:
    """Returns the folders to process for a user, or None if the user is skipped."""
    if not is_valid_user_id(user_id):
        _LOG.warning("skipping invalid user ID %r", user_id)
        return None

    user_dir = root / user_id
    if not is_folder(user_dir):
        _LOG.warning("user folder does not exist: %s", user_dir)
        return None

    ctx = UserContext(user_id=user_id, user_dir=user_dir)
    if delete_common:
        common = ScanTarget.new(user_dir, COMMON_LABEL)
        if common.exists:
            ctx.common = common
        else:
            _LOG.info("user %s has no %s folder", user_id, COMMON_LABEL)

    for label in SCAN_LABELS:
        target = ScanTarget.new(user_dir, label)
        if target.exists:
            ctx.targets.append(target)
        else:
            _LOG.info("user %s has no %s folder; skipping", user_id, label)

    return ctx
