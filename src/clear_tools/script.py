from __future__ import annotations

import os
import stat
from pathlib import Path
from types import TracebackType
from typing import TextIO

from clear_tools.common import shell_quote

DEFAULT_SCRIPT_PATH = Path("/tmp/clear_tools.sh")  # noqa: S108

HEADER = (
    "#!/bin/bash",
    "# Auto-generated cleanup script; review before running",
    "",
)

_EXEC_BITS = stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH


class RemovalScript:
    """Append-only writer for a bash script listing files/folders to be removed.

    The script is only made executable by `finalize`, so an interrupted run leaves a
    script that cannot be executed directly.
    """

    def __init__(self, path: Path, handle: TextIO) -> None:
        self.path = path
        self.files = 0
        self.trees = 0
        self._handle = handle

    @classmethod
    def open(cls, path: Path) -> RemovalScript:
        handle = path.open("w", encoding="utf-8", newline="\n")
        try:
            # Clear executable bits left over from a previous run
            mode = stat.S_IMODE(os.fstat(handle.fileno()).st_mode)
            os.fchmod(handle.fileno(), mode & ~_EXEC_BITS)
        except OSError:
            handle.close()
            raise

        return cls(path, handle)

    def write_header(self) -> None:
        for line in HEADER:
            self._write(line)

    def append_remove_file(self, path: Path) -> None:
        self._write(f"rm {shell_quote(path.absolute())}")
        self.files += 1

    def append_remove_tree(self, path: Path) -> None:
        self._write(f"rm -rf {shell_quote(path.absolute())}")
        self.trees += 1

    def finalize(self) -> None:
        """Closes the script and marks it as executable."""
        self.close()

        mode = stat.S_IMODE(self.path.stat().st_mode)
        self.path.chmod(mode | _EXEC_BITS)

    def close(self) -> None:
        if not self._handle.closed:
            self._handle.close()

    def _write(self, line: str) -> None:
        print(line, file=self._handle)

    def __enter__(self) -> RemovalScript:
        return self

    def __exit__(
        self,
        typ: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()
