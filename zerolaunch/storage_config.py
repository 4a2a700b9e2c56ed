"""Configuration of where the synchronised data is stored."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import asdict, dataclass, field, fields
from enum import Enum
from typing import Any

from zerolaunch.errors import SerdeError
from zerolaunch.fsutils import get_default_remote_data_dir_path

_U32_MAX = 0xFFFFFFFF


class StorageDestination(Enum):
    """Backend that holds the synchronised data."""

    WEBDAV = "WebDAV"
    LOCAL = "Local"
    ONEDRIVE = "OneDrive"


@dataclass
class PartialLocalSaveConfig:
    """Optional overrides for the local-directory backend."""

    destination_dir: str | None = None


@dataclass
class LocalSaveConfig:
    """Settings of the local-directory backend."""

    destination_dir: str = field(default_factory=get_default_remote_data_dir_path)

    def update(self, partial: PartialLocalSaveConfig) -> None:
        """Apply the fields that are set in ``partial``."""
        if partial.destination_dir is not None:
            self.destination_dir = partial.destination_dir

    def to_partial(self) -> PartialLocalSaveConfig:
        """Return every field as a partial configuration."""
        return PartialLocalSaveConfig(destination_dir=self.destination_dir)


@dataclass
class PartialWebDAVConfig:
    """Optional overrides for the WebDAV backend."""

    host_url: str | None = None
    account: str | None = None
    password: str | None = field(default=None, repr=False)
    destination_dir: str | None = None


@dataclass
class WebDAVConfig:
    """Settings of the WebDAV backend."""

    host_url: str = ""
    account: str = ""
    password: str = field(default="", repr=False)
    destination_dir: str = ""

    def update(self, partial: PartialWebDAVConfig) -> None:
        """Apply the fields that are set in ``partial``."""
        for item in fields(partial):
            value = getattr(partial, item.name)
            if value is not None:
                setattr(self, item.name, value)

    def to_partial(self) -> PartialWebDAVConfig:
        """Return every field as a partial configuration."""
        return PartialWebDAVConfig(
            host_url=self.host_url,
            account=self.account,
            password=self.password,
            destination_dir=self.destination_dir,
        )


def _invalid(message: str) -> SerdeError:
    return SerdeError(ValueError(message))


def _parse_string_partial(partial_cls: type, data: Any, name: str) -> Any:
    if data is None:
        return None
    if not isinstance(data, Mapping):
        raise _invalid(f"{name}: expected an object")
    values = {}
    for item in fields(partial_cls):
        value = data.get(item.name)
        if value is not None and not isinstance(value, str):
            raise _invalid(f"{name}.{item.name}: expected a string")
        values[item.name] = value
    return partial_cls(**values)


def _parse_destination(value: Any) -> StorageDestination | None:
    if value is None:
        return None
    if not isinstance(value, str):
        raise _invalid("storage_destination: expected a string")
    try:
        return StorageDestination(value)
    except ValueError as exc:
        raise SerdeError(exc) from exc


def _parse_count(value: Any) -> int | None:
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int):
        raise _invalid("save_to_local_per_update: expected an integer")
    if not 0 <= value <= _U32_MAX:
        raise _invalid("save_to_local_per_update: out of range")
    return value


@dataclass
class PartialLocalConfig:
    """Optional overrides for the storage configuration."""

    storage_destination: StorageDestination | None = None
    local_save_config: PartialLocalSaveConfig | None = None
    webdav_save_config: PartialWebDAVConfig | None = None
    save_to_local_per_update: int | None = None

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-ready mapping; unset fields become ``None``."""
        return {
            "storage_destination": (
                self.storage_destination.value
                if self.storage_destination is not None
                else None
            ),
            "local_save_config": (
                asdict(self.local_save_config)
                if self.local_save_config is not None
                else None
            ),
            "webdav_save_config": (
                asdict(self.webdav_save_config)
                if self.webdav_save_config is not None
                else None
            ),
            "save_to_local_per_update": self.save_to_local_per_update,
        }

    @classmethod
    def from_dict(cls, data: Any) -> PartialLocalConfig:
        """Build from a mapping as produced by :meth:`to_dict`."""
        if not isinstance(data, Mapping):
            raise _invalid("expected an object")
        return cls(
            storage_destination=_parse_destination(data.get("storage_destination")),
            local_save_config=_parse_string_partial(
                PartialLocalSaveConfig, data.get("local_save_config"), "local_save_config"
            ),
            webdav_save_config=_parse_string_partial(
                PartialWebDAVConfig, data.get("webdav_save_config"), "webdav_save_config"
            ),
            save_to_local_per_update=_parse_count(data.get("save_to_local_per_update")),
        )


@dataclass
class LocalConfig:
    """Complete storage configuration kept on the local machine."""

    storage_destination: StorageDestination = StorageDestination.LOCAL
    local_save_config: LocalSaveConfig = field(default_factory=LocalSaveConfig)
    webdav_save_config: WebDAVConfig = field(default_factory=WebDAVConfig)
    save_to_local_per_update: int = 4

    def update(self, partial: PartialLocalConfig) -> None:
        """Apply the fields that are set in ``partial``."""
        if partial.storage_destination is not None:
            self.storage_destination = partial.storage_destination
        if partial.local_save_config is not None:
            self.local_save_config.update(partial.local_save_config)
        if partial.webdav_save_config is not None:
            self.webdav_save_config.update(partial.webdav_save_config)
        if partial.save_to_local_per_update is not None:
            self.save_to_local_per_update = partial.save_to_local_per_update

    def to_partial(self) -> PartialLocalConfig:
        """Return every field as a partial configuration."""
        return PartialLocalConfig(
            storage_destination=self.storage_destination,
            local_save_config=self.local_save_config.to_partial(),
            webdav_save_config=self.webdav_save_config.to_partial(),
            save_to_local_per_update=self.save_to_local_per_update,
        )