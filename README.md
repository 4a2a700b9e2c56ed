# zerolaunch

This package holds the support layer of an application launcher. It does three jobs:

- It keeps the launcher's synchronised configuration files in a local directory or on a WebDAV server.
- It remembers which of those two places is in use.
- It loads and processes the icons and background images that the launcher shows.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Storage configuration

`zerolaunch.storage_config` describes where data is stored.

- `LocalConfig` holds four things:
  - a `StorageDestination`, which is one of `LOCAL`, `WEBDAV` or `ONEDRIVE`;
  - a `LocalSaveConfig`;
  - a `WebDAVConfig`;
  - `save_to_local_per_update`, which defaults to 4.
- Every settings class has a partial counterpart whose fields are all optional. These are `PartialLocalConfig`, `PartialLocalSaveConfig` and `PartialWebDAVConfig`.
- `update(partial)` applies the fields that are set in a partial.
- `to_partial()` returns every field as a partial.
- `PartialLocalConfig.to_dict()` and `PartialLocalConfig.from_dict()` convert to and from plain JSON-ready data.
- `from_dict()` raises `SerdeError` on malformed input.

```python
from zerolaunch.storage_config import (
    LocalConfig,
    PartialLocalConfig,
    PartialWebDAVConfig,
    StorageDestination,
)

password = "password"
config = LocalConfig()
config.update(
    PartialLocalConfig(
        storage_destination=StorageDestination.WEBDAV,
        webdav_save_config=PartialWebDAVConfig(
            host_url="https://dav.example.com",
            account="user",
            password=password,
            destination_dir="launcher",
        ),
    )
)
print(config.to_partial().to_dict())
```

By default the local directory is `ZeroLaunch-rs` inside a configuration base directory. That base is `%APPDATA%`, or `$XDG_CONFIG_HOME` if that is not set, or otherwise `~/.config`. `zerolaunch.fsutils.get_default_remote_data_dir_path()` returns this path.

## Storage clients

`zerolaunch.storage_clients` defines the abstract `StorageClient`, which has these methods:

- `upload(file_name, data)`
- `download(file_name)`, which returns `None` when the file does not exist
- `get_target_dir_path()`
- `validate_config()`, which writes a probe file and reads it back

There are two implementations:

- `LocalStorage` reads and writes files under a directory. It creates parent directories as needed.
- `WebDAVStorage` uses HTTP `PUT` and `GET` with basic authentication. A 404 response counts as a missing file.

Failures are raised as `StorageError`. `create_client(config)` builds the client that a `LocalConfig` selects. It returns `None` for `ONEDRIVE`.

## Storage manager

`zerolaunch.storage_manager.StorageManager(local_config_path, notify=None)` reads its configuration from a JSON file at `local_config_path`. If the file does not exist, the manager creates it with the defaults. The manager then talks to the selected client.

- **Cached writes.** `upload_file_bytes` and `upload_file_str` cache each file. The file is sent to the backend only after it has been written `save_to_local_per_update` times. A count of `0` sends every write straight away.
- **Cached reads.** `download_file_bytes` and `download_file_str` return the cached content when there is any.
- **Forced transfers.** The `*_force` variants discard the cache and go to the backend. `upload_all_file_force()` sends every cached file.
- **Saving settings.** `update(partial)` applies new settings, picks the client and writes the configuration file.
- **Failures.** When the backend fails, the manager does two things. It calls `notify(title, message)`, which by default writes a log warning. It then resets to the default local configuration and retries.

`check_validation(partial)` tests a candidate configuration. It returns the full configuration as a partial if the backend passes `validate_config()`, and `None` otherwise.

## Images

`zerolaunch.image_processor` works with images.

- `ImageIdentity(kind, text)` names an image. `kind` is an `ImageKind`, either `FILE` or `WEB`. `hash_key()` gives a stable decimal FNV-1a hash of the text.
- `load_image(identity)` returns PNG bytes, or empty bytes on failure.
  - For `FILE` it reads the picture.
  - For `WEB` it downloads the page's declared favicon, using `fetch_website_favicon(url)`. If the page declares none, it uses `/favicon.ico`.
- `convert_image_to_png(data)` re-encodes any format Pillow reads as PNG.
- `trim_transparent_white_border(png_data)` crops white or transparent rings from a square image. It raises `ValueError` if the image is not square.
- `get_dominant_color(image_data)` returns the `(r, g, b)` centre of the largest colour cluster. It runs k-means in Lab space over the visible pixels.
- `is_program(path)` and `is_white_or_transparent(pixel)` are small helpers that the other functions use.

## Errors

`zerolaunch.errors` defines `AppError` and its subclasses:

- `NotInitializedError`, which has `with_context()`
- `LockError`
- `AutostartError`
- `ConfigError`
- `AppIOError`
- `SerdeError`
- `CustomError`

Each subclass formats its message in a fixed way. `zerolaunch.fsutils` raises `AppIOError` when a filesystem operation fails.

## What this package does not do

This package has no launcher, no window, no command line and no program index.

- **OneDrive.** `ONEDRIVE` can be chosen as a destination, but there is no client for it.
- **Icons of programs and shortcuts.** For `.exe`, `.lnk` and `.url` files, `load_image` returns empty bytes; it does not extract their icons.
- **Autostart.** `AutostartError` exists as an error type, but nothing in the package configures start at login.