from __future__ import annotations

import json
import logging
from pathlib import Path

import pytest

from clear_tools.config import (
    DEFAULT_TOOLS_PATH,
    Config,
    Options,
    load_user_ids,
)


def write_json(path: Path, data: object) -> Path:
    path.write_text(json.dumps(data))

    return path


########################################################################################


def test_config__defaults(tmp_path: Path) -> None:
    path = write_json(tmp_path / "config.json", {"users": ["123456", "789012"]})

    assert Config.load(path) == Config(
        users=["123456", "789012"],
        tools_path=DEFAULT_TOOLS_PATH,
        size_limit=50,
        delete_common=False,
    )


def test_config__all_fields(tmp_path: Path) -> None:
    path = write_json(
        tmp_path / "config.json",
        {
            "tools_path": "/data/",
            "users": ["u1"],
            "size_limit": 0,
            "delete_common": True,
        },
    )

    conf = Config.load(path)
    assert conf is not None
    assert conf.to_options() == Options(
        root_path=Path("/data"),
        user_ids=("u1",),
        size_threshold_mb=0,
        delete_common=True,
    )


def test_config__toml(tmp_path: Path) -> None:
    path = tmp_path / "config.toml"
    path.write_text('tools_path = "/data"\nusers = ["u1", "u2"]\nsize_limit = 100\n')

    assert Config.load(path) == Config(
        users=["u1", "u2"],
        tools_path=Path("/data"),
        size_limit=100,
    )


@pytest.mark.parametrize(
    "data",
    [
        {},
        {"users": "u1"},
        {"users": [1, 2]},
        {"users": ["u1"], "size_limit": -1},
        {"users": ["u1"], "size_limit": "50"},
        {"users": ["u1"], "delete_common": "yes"},
        {"users": ["u1"], "tools_path": ""},
        {"users": ["u1"], "unknown_key": True},
        ["u1"],
    ],
)
def test_config__invalid(
    tmp_path: Path,
    caplog: pytest.LogCaptureFixture,
    data: object,
) -> None:
    path = write_json(tmp_path / "config.json", data)

    with caplog.at_level(logging.ERROR):
        assert Config.load(path) is None

    assert "is invalid" in caplog.text


def test_config__unparsable(tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
    path = tmp_path / "config.json"
    path.write_text('{"users": ["u1"],')

    with caplog.at_level(logging.ERROR):
        assert Config.load(path) is None

    assert "Failed to parse" in caplog.text


def test_config__missing(tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.ERROR):
        assert Config.load(tmp_path / "config.json") is None

    assert "Failed to read" in caplog.text


########################################################################################


def test_options__check(tmp_path: Path) -> None:
    assert Options(root_path=tmp_path, user_ids=("u1",)).check()


def test_options__check_missing_root(
    tmp_path: Path,
    caplog: pytest.LogCaptureFixture,
) -> None:
    with caplog.at_level(logging.ERROR):
        assert not Options(root_path=tmp_path / "missing", user_ids=("u1",)).check()

    assert str(tmp_path / "missing") in caplog.text


def test_options__check_root_is_file(tmp_path: Path) -> None:
    (tmp_path / "file").touch()

    assert not Options(root_path=tmp_path / "file", user_ids=("u1",)).check()


def test_options__check_no_users(
    tmp_path: Path,
    caplog: pytest.LogCaptureFixture,
) -> None:
    with caplog.at_level(logging.ERROR):
        assert not Options(root_path=tmp_path, user_ids=()).check()

    assert "No users specified" in caplog.text


########################################################################################


def test_load_user_ids(tmp_path: Path) -> None:
    path = write_json(tmp_path / "users.json", ["123456", "789012"])

    assert load_user_ids(path) == ["123456", "789012"]


@pytest.mark.parametrize("data", [{"users": ["u1"]}, [1], "u1"])
def test_load_user_ids__invalid(tmp_path: Path, data: object) -> None:
    path = write_json(tmp_path / "users.json", data)

    assert load_user_ids(path) is None


def test_load_user_ids__missing(tmp_path: Path) -> None:
    assert load_user_ids(tmp_path / "users.json") is None


def test_options__check_inaccessible_root(
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
    caplog: pytest.LogCaptureFixture,
) -> None:
    def fake_is_dir(self: Path) -> bool:
        raise PermissionError(13, "Permission denied", str(self))

    monkeypatch.setattr(Path, "is_dir", fake_is_dir)

    with caplog.at_level(logging.ERROR):
        assert not Options(root_path=tmp_path / "labs", user_ids=("u1",)).check()

    assert f"Cannot access root folder {tmp_path / 'labs'}" in caplog.text
