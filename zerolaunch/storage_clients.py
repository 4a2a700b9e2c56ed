"""Storage backends that hold the synchronised configuration files."""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path, PurePosixPath
from urllib.parse import quote

import requests

from zerolaunch.errors import AppError
from zerolaunch.storage_config import (
    LocalConfig,
    LocalSaveConfig,
    StorageDestination,
    WebDAVConfig,
)

TEST_CONFIG_FILE_NAME = "zerolaunch-test-link.txt"
TEST_CONFIG_FILE_DATA = "当前文件仅用于测试连通性，可以手动删除"

_HTTP_TIMEOUT = 30.0


class StorageError(AppError):
    """A storage backend could not upload or download a file."""


class StorageClient(ABC):
    """A place that files can be uploaded to and downloaded from."""

    @abstractmethod
    def upload(self, file_name: str, data: bytes) -> None:
        """Store ``data`` under ``file_name``; raise :class:`StorageError` on failure."""

    @abstractmethod
    def download(self, file_name: str) -> bytes | None:
        """Return the content of ``file_name``, or ``None`` if it does not exist."""

    @abstractmethod
    def get_target_dir_path(self) -> str:
        """Return the directory the files are stored in."""

    def validate_config(self) -> bool:
        """Check that a test file can be written and read back."""
        try:
            self.upload(TEST_CONFIG_FILE_NAME, TEST_CONFIG_FILE_DATA.encode("utf-8"))
            self.download(TEST_CONFIG_FILE_NAME)
        except StorageError:
            return False
        return True


class LocalStorage(StorageClient):
    """Stores files in a directory on the local filesystem."""

    def __init__(self, config: LocalSaveConfig) -> None:
        self._dir_text = config.destination_dir
        self._root = Path(config.destination_dir)

    def download(self, file_name: str) -> bytes | None:
        target = self._root / file_name
        if not target.exists():
            return None
        try:
            return target.read_bytes()
        except OSError as exc:
            raise StorageError(str(exc)) from exc

    def upload(self, file_name: str, data: bytes) -> None:
        target = self._root / file_name
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise StorageError(f"failed to create directory: {exc}") from exc
        try:
            target.write_bytes(bytes(data))
        except OSError as exc:
            raise StorageError(f"upload failed {target}: {exc}") from exc

    def get_target_dir_path(self) -> str:
        return self._dir_text


class WebDAVStorage(StorageClient):
    """Stores files on a WebDAV server using basic authentication."""

    def __init__(self, config: WebDAVConfig) -> None:
        self._destination_dir = config.destination_dir
        self._host_url = config.host_url
        self._session = requests.Session()
        self._session.auth = (config.account, config.password)

    def _url_for(self, file_name: str) -> str:
        path = str(PurePosixPath(self._destination_dir, file_name))
        return f"{self._host_url.rstrip('/')}/{quote(path.lstrip('/'), safe='/')}"

    def upload(self, file_name: str, data: bytes) -> None:
        url = self._url_for(file_name)
        try:
            response = self._session.put(url, data=bytes(data), timeout=_HTTP_TIMEOUT)
        except requests.RequestException as exc:
            raise StorageError(str(exc)) from exc
        if not response.ok:
            raise StorageError(
                f"server responded with {response.status_code} for {url}"
            )

    def download(self, file_name: str) -> bytes | None:
        url = self._url_for(file_name)
        try:
            response = self._session.get(url, timeout=_HTTP_TIMEOUT)
        except requests.RequestException as exc:
            raise StorageError(str(exc)) from exc
        if response.status_code == 404:
            return None
        if not response.ok:
            raise StorageError(
                f"server responded with {response.status_code} for {url}"
            )
        return response.content

    def get_target_dir_path(self) -> str:
        return self._destination_dir


def create_client(config: LocalConfig) -> StorageClient | None:
    """Build the backend selected by ``config``, or ``None`` if it has none."""
    if config.storage_destination is StorageDestination.LOCAL:
        return LocalStorage(config.local_save_config)
    if config.storage_destination is StorageDestination.WEBDAV:
        return WebDAVStorage(config.webdav_save_config)
    return None