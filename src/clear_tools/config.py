from __future__ import annotations

import dataclasses
import json
import logging
from pathlib import Path
from typing import Annotated

import tomli
from koda_validate import (
    CoercionErr,
    DataclassValidator,
    IntValidator,
    Invalid,
    ListValidator,
    Min,
    StringValidator,
    Valid,
    Validator,
)

DEFAULT_TOOLS_PATH = Path("/mnt/dolphin-fs/cc-labs-tools/labs/")
DEFAULT_SIZE_LIMIT = 50

_LOG = logging.getLogger("config")


class PathValidator(Validator[Path]):
    def __call__(self, val: object) -> Valid[Path] | Invalid:
        if isinstance(val, Path) and val:
            return Valid(val.expanduser())
        elif isinstance(val, str) and val:
            return Valid(Path(val).expanduser())

        return Invalid(CoercionErr({str, Path}, Path), val, self)


@dataclasses.dataclass(frozen=True)
class Options:
    root_path: Path
    user_ids: tuple[str, ...]
    size_threshold_mb: int = DEFAULT_SIZE_LIMIT
    delete_common: bool = False

    def check(self) -> bool:
        """Checks that the options can be acted upon; logs an error if not."""
        try:
            is_dir = self.root_path.is_dir()
        except OSError as error:
            _LOG.error("Cannot access root folder %s: %s", self.root_path, error)
            return False

        if not is_dir:
            _LOG.error("Root folder does not exist: %s", self.root_path)
            return False
        elif not self.user_ids:
            _LOG.error("No users specified; add one or more user IDs")
            return False
        elif self.size_threshold_mb < 0:
            _LOG.error("Invalid size limit %i", self.size_threshold_mb)
            return False

        return True


@dataclasses.dataclass
class Config:
    users: list[str]
    tools_path: Annotated[Path, PathValidator()] = DEFAULT_TOOLS_PATH
    size_limit: Annotated[int, IntValidator(Min(0))] = DEFAULT_SIZE_LIMIT
    delete_common: bool = False

    @classmethod
    def load(cls, filepath: Path) -> Config | None:
        data = read_document(filepath)
        if data is None:
            return None

        validator = DataclassValidator(Config, fail_on_unknown_keys=True)
        result = validator(data)
        if not isinstance(result, Valid):
            _LOG.error("Config file %s is invalid: %s", filepath, result.err_type)
            return None

        return result.val

    def to_options(self) -> Options:
        return Options(
            root_path=self.tools_path,
            user_ids=tuple(self.users),
            size_threshold_mb=self.size_limit,
            delete_common=self.delete_common,
        )


def read_document(filepath: Path) -> object | None:
    """Reads a JSON document, or a TOML document if the filename ends with `.toml`."""
    try:
        text = filepath.read_text(encoding="utf-8")
    except OSError as error:
        _LOG.error("Failed to read %s: %s", filepath, error)
        return None

    try:
        if filepath.suffix.lower() == ".toml":
            return tomli.loads(text)

        return json.loads(text)
    except ValueError as error:
        _LOG.error("Failed to parse %s: %s", filepath, error)
        return None


def load_user_ids(filepath: Path) -> list[str] | None:
    """Loads a file containing a list of user IDs, e.g. `["123456", "789012"]`."""
    data = read_document(filepath)
    if data is None:
        return None

    result = ListValidator(StringValidator())(data)
    if not isinstance(result, Valid):
        _LOG.error("User list in %s is invalid: %s", filepath, result.err_type)
        return None

    return result.val
