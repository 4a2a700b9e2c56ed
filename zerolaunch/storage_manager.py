"""Storage manager: caches uploads and talks to the configured backend."""

from __future__ import annotations

import json
import logging
import os
import threading
from collections.abc import Callable
from pathlib import Path

from zerolaunch.errors import SerdeError
from zerolaunch.fsutils import read_or_create_str
from zerolaunch.storage_clients import StorageClient, StorageError, create_client
from zerolaunch.storage_config import LocalConfig, PartialLocalConfig

logger = logging.getLogger(__name__)

NOTIFY_TITLE = "zerolaunch-rs"

Notifier = Callable[[str, str], None]


def _log_notification(title: str, message: str) -> None:
    logger.warning("%s: %s", title, message)


class StorageManager:
    """Keeps the storage configuration and moves files to and from the backend.

    Uploads are cached and only sent to the backend once a file has been
    saved ``save_to_local_per_update`` more times; a count of zero sends
    every upload straight away.
    """

    def __init__(
        self,
        local_config_path: str | os.PathLike[str],
        notify: Notifier | None = None,
    ) -> None:
        self._config_path = Path(local_config_path)
        self._notify = notify if notify is not None else _log_notification
        self._lock = threading.RLock()
        self._local_config = LocalConfig()
        self._cached: dict[str, tuple[int, bytes]] = {}
        self._client: StorageClient | None = None

        default_content = json.dumps(
            self._local_config.to_partial().to_dict(), ensure_ascii=False
        )
        text = read_or_create_str(self._config_path, default_content)
        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            raise SerdeError(exc) from exc
        self.update(PartialLocalConfig.from_dict(data))

    def to_partial(self) -> PartialLocalConfig:
        """Return the current storage configuration."""
        with self._lock:
            return self._local_config.to_partial()

    def update(self, partial: PartialLocalConfig) -> None:
        """Apply ``partial``, choose the matching backend and save the configuration."""
        with self._lock:
            self._local_config.update(partial)
            client = create_client(self._local_config)
            if client is not None:
                self._client = client
            self._save_to_local_disk()

    def _save_to_local_disk(self) -> None:
        contents = json.dumps(
            self._local_config.to_partial().to_dict(), ensure_ascii=False
        )
        try:
            self._config_path.write_text(contents, encoding="utf-8")
        except OSError as exc:
            logger.warning("could not save storage configuration: %s", exc)

    def upload_file_str(self, file_name: str, contents: str) -> bool:
        """Upload text content, subject to the caching policy."""
        return self.upload_file_bytes(file_name, contents.encode("utf-8"))

    def download_file_str(self, file_name: str) -> str | None:
        """Download a file as text, preferring the cached content."""
        data = self.download_file_bytes(file_name)
        return None if data is None else data.decode("utf-8", errors="replace")

    def download_file_str_force(self, file_name: str) -> str | None:
        """Download a file as text from the backend, discarding any cached content."""
        data = self.download_file_bytes_force(file_name)
        return None if data is None else data.decode("utf-8", errors="replace")

    def upload_file_bytes(self, file_name: str, contents: bytes) -> bool:
        """Upload binary content, subject to the caching policy."""
        contents = bytes(contents)
        with self._lock:
            save_count = self._local_config.save_to_local_per_update
            if save_count == 0:
                return self.upload_file_bytes_force(file_name, contents)
            entry = self._cached.get(file_name)
            if entry is None:
                self._cached[file_name] = (save_count, contents)
                return True
            counter = entry[0] - 1
            if counter == 0:
                self._upload(file_name, contents)
                self._cached.pop(file_name, None)
            else:
                self._cached[file_name] = (counter, contents)
            return True

    def upload_file_bytes_force(
        self, file_name: str, contents: bytes | None = None
    ) -> bool:
        """Upload now, bypassing the cache.

        Without ``contents`` the cached content is sent; returns ``False`` when
        there is nothing to send.
        """
        with self._lock:
            cached = self._cached.pop(file_name, None)
            if contents is None and cached is not None:
                contents = cached[1]
            if contents is None:
                return False
            self._upload(file_name, bytes(contents))
            return True

    def upload_all_file_force(self) -> None:
        """Upload every cached file and empty the cache."""
        with self._lock:
            pending = [(name, data) for name, (_, data) in self._cached.items()]
            for name, data in pending:
                self._upload(name, data)
            self._cached.clear()

    def download_file_bytes(self, file_name: str) -> bytes | None:
        """Download binary content, preferring the cached content."""
        with self._lock:
            entry = self._cached.get(file_name)
            if entry is not None:
                return entry[1]
            return self._download(file_name)

    def download_file_bytes_force(self, file_name: str) -> bytes | None:
        """Download from the backend, discarding any cached content."""
        with self._lock:
            self._cached.pop(file_name, None)
            return self._download(file_name)

    def get_target_dir_path(self) -> str:
        """Return the backend's target directory, or an empty string without one."""
        with self._lock:
            if self._client is None:
                logger.error("storage client not initialised; no target directory")
                return ""
            return self._client.get_target_dir_path()

    def _reset_to_default(self) -> None:
        self.update(LocalConfig().to_partial())

    def _download(self, file_name: str) -> bytes | None:
        while True:
            if self._client is None:
                logger.warning("storage client not initialised, cannot download %s", file_name)
                self._notify(
                    NOTIFY_TITLE,
                    f"下载文件：{file_name} 失败，客户端未成功初始化，已切换回默认配置",
                )
                error = "storage client not initialised"
            else:
                try:
                    return self._client.download(file_name)
                except StorageError as exc:
                    error = str(exc)
            logger.warning("download of %s failed, using defaults: %s", file_name, error)
            self._notify(
                NOTIFY_TITLE,
                f"下载文件：{file_name} 失败，错误：{error!r}，已切换回默认配置",
            )
            self._reset_to_default()

    def _upload(self, file_name: str, contents: bytes) -> None:
        while True:
            if self._client is None:
                logger.warning("storage client not initialised, cannot upload %s", file_name)
                self._notify(
                    NOTIFY_TITLE, f"存储客户端未初始化，无法上传文件：{file_name}"
                )
                error = "storage client not initialised"
            else:
                try:
                    self._client.upload(file_name, contents)
                    return
                except StorageError as exc:
                    error = str(exc)
            logger.warning("upload of %s failed: %s", file_name, error)
            self._notify(
                NOTIFY_TITLE,
                f"上传文件：{file_name} 失败，错误：{error!r}，已切换回默认配置",
            )
            self._reset_to_default()


def check_validation(partial: PartialLocalConfig) -> PartialLocalConfig | None:
    """Return the full configuration if its backend works, otherwise ``None``."""
    config = LocalConfig()
    config.update(partial)
    client = create_client(config)
    if client is None or not client.validate_config():
        return None
    return config.to_partial()