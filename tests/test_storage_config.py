import json

import pytest

from zerolaunch.errors import SerdeError
from zerolaunch.fsutils import get_default_remote_data_dir_path
from zerolaunch.storage_config import (
    LocalConfig,
    LocalSaveConfig,
    PartialLocalConfig,
    PartialLocalSaveConfig,
    PartialWebDAVConfig,
    StorageDestination,
    WebDAVConfig,
)


@pytest.fixture(autouse=True)
def _appdata(tmp_path, monkeypatch):
    monkeypatch.setenv("APPDATA", str(tmp_path))


def test_local_config_defaults():
    config = LocalConfig()
    assert config.storage_destination is StorageDestination.LOCAL
    assert config.save_to_local_per_update == 4
    assert config.local_save_config.destination_dir == get_default_remote_data_dir_path()
    assert config.webdav_save_config.to_partial() == PartialWebDAVConfig("", "", "", "")


@pytest.mark.parametrize(
    "name, expected",
    [
        ("WebDAV", StorageDestination.WEBDAV),
        ("Local", StorageDestination.LOCAL),
        ("OneDrive", StorageDestination.ONEDRIVE),
    ],
)
def test_destination_serialised_names(name, expected):
    partial = PartialLocalConfig.from_dict({"storage_destination": name})
    assert partial.storage_destination is expected
    assert partial.to_dict()["storage_destination"] == name


def test_to_dict_shape():
    data = LocalConfig().to_partial().to_dict()
    assert list(data) == [
        "storage_destination",
        "local_save_config",
        "webdav_save_config",
        "save_to_local_per_update",
    ]
    assert data["storage_destination"] == "Local"
    assert data["save_to_local_per_update"] == 4


def test_dict_round_trip_through_json():
    partial = LocalConfig().to_partial()
    restored = PartialLocalConfig.from_dict(json.loads(json.dumps(partial.to_dict())))
    assert restored == partial


def test_from_dict_missing_fields_are_none():
    partial = PartialLocalConfig.from_dict({})
    assert partial == PartialLocalConfig()


def test_update_only_changes_set_fields():
    config = LocalConfig()
    before_dir = config.local_save_config.destination_dir
    config.update(PartialLocalConfig(storage_destination=StorageDestination.WEBDAV))
    assert config.storage_destination is StorageDestination.WEBDAV
    assert config.save_to_local_per_update == 4
    assert config.local_save_config.destination_dir == before_dir


def test_update_mutates_nested_config_in_place(tmp_path):
    config = LocalConfig()
    shared = config.local_save_config
    new_dir = str(tmp_path / "sync")
    config.update(
        PartialLocalConfig(
            local_save_config=PartialLocalSaveConfig(destination_dir=new_dir),
            save_to_local_per_update=0,
        )
    )
    assert shared.destination_dir == new_dir
    assert config.save_to_local_per_update == 0


def test_webdav_update_and_partial_round_trip():
    password = "password"
    config = WebDAVConfig()
    config.update(PartialWebDAVConfig(host_url="https://dav.example.com", password=password))
    assert config.host_url == "https://dav.example.com"
    assert config.password == password
    assert config.account == ""
    other = WebDAVConfig()
    other.update(config.to_partial())
    assert other == config


def test_webdav_repr_hides_password():
    password = "password"
    config = WebDAVConfig(password=password)
    assert "password" not in repr(config)


def test_local_save_config_update_ignores_none():
    config = LocalSaveConfig(destination_dir="keep")
    config.update(PartialLocalSaveConfig())
    assert config.to_partial() == PartialLocalSaveConfig(destination_dir="keep")


@pytest.mark.parametrize(
    "data",
    [
        {"storage_destination": "Dropbox"},
        {"storage_destination": 3},
        {"save_to_local_per_update": -1},
        {"save_to_local_per_update": True},
        {"save_to_local_per_update": "4"},
        {"local_save_config": {"destination_dir": 5}},
        {"webdav_save_config": ["not", "an", "object"]},
        ["not", "a", "mapping"],
    ],
)
def test_from_dict_rejects_invalid(data):
    with pytest.raises(SerdeError):
        PartialLocalConfig.from_dict(data)