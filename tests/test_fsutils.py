from pathlib import Path

import pytest

from zerolaunch.errors import AppIOError
from zerolaunch.fsutils import (
    get_default_remote_data_dir_path,
    read_dir_or_create,
    read_or_create_bytes,
    read_or_create_str,
)


def test_read_or_create_str_creates_missing_file(tmp_path):
    target = tmp_path / "a" / "b" / "config.json"
    result = read_or_create_str(target, "{}")
    assert result == "{}"
    assert target.read_text(encoding="utf-8") == "{}"


def test_read_or_create_str_returns_existing(tmp_path):
    target = tmp_path / "config.json"
    target.write_text("existing", encoding="utf-8")
    assert read_or_create_str(target, "ignored") == "existing"
    assert target.read_text(encoding="utf-8") == "existing"


def test_read_or_create_str_default_is_empty(tmp_path):
    target = tmp_path / "empty.txt"
    assert read_or_create_str(target) == ""
    assert target.exists()


def test_read_or_create_str_keeps_line_endings(tmp_path):
    target = tmp_path / "crlf.txt"
    target.write_bytes(b"one\r\ntwo")
    assert read_or_create_str(target) == "one\r\ntwo"


def test_read_or_create_str_rejects_invalid_utf8(tmp_path):
    target = tmp_path / "bad.txt"
    target.write_bytes(b"\xff\xfe\xfa")
    with pytest.raises(AppIOError):
        read_or_create_str(target)


def test_read_or_create_str_on_directory_fails(tmp_path):
    with pytest.raises(AppIOError):
        read_or_create_str(tmp_path)


def test_read_or_create_bytes_roundtrip(tmp_path):
    target = tmp_path / "deep" / "blob.bin"
    payload = bytes(range(10))
    assert read_or_create_bytes(target, payload) == payload
    assert read_or_create_bytes(target, b"other") == payload
    assert target.read_bytes() == payload


def test_read_or_create_bytes_default_empty(tmp_path):
    target = tmp_path / "blob.bin"
    assert read_or_create_bytes(target) == b""
    assert target.read_bytes() == b""


def test_read_dir_or_create_creates_directory(tmp_path):
    target = tmp_path / "x" / "y"
    assert read_dir_or_create(target) == []
    assert target.is_dir()


def test_read_dir_or_create_lists_entries(tmp_path):
    (tmp_path / "one.txt").write_text("1")
    (tmp_path / "two.txt").write_text("2")
    names = {p.name for p in read_dir_or_create(tmp_path)}
    assert names == {"one.txt", "two.txt"}


def test_read_dir_or_create_on_file_fails(tmp_path):
    target = tmp_path / "file.txt"
    target.write_text("data")
    with pytest.raises(AppIOError):
        read_dir_or_create(target)


def test_default_data_dir_uses_appdata(tmp_path, monkeypatch):
    monkeypatch.setenv("APPDATA", str(tmp_path))
    assert get_default_remote_data_dir_path() == str(tmp_path / "ZeroLaunch-rs")


def test_default_data_dir_falls_back_to_xdg(tmp_path, monkeypatch):
    monkeypatch.delenv("APPDATA", raising=False)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))
    result = Path(get_default_remote_data_dir_path())
    assert result.parent == tmp_path
    assert result.name == "ZeroLaunch-rs"