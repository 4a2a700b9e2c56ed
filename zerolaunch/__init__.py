"""Storage backends, storage configuration, and image helpers for an application launcher."""

__version__ = "0.1.0"
__all__ = [
    "errors",
    "fsutils",
    "storage_config",
    "storage_clients",
    "storage_manager",
    "image_processor",
]