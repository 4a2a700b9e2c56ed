"""Exception hierarchy used throughout the application."""

from __future__ import annotations


class AppError(Exception):
    """Base class for every application error."""


class NotInitializedError(AppError):
    """A resource was used before it was initialised."""

    def __init__(self, resource: str, context: str | None = None) -> None:
        super().__init__(resource)
        self.resource = resource
        self.context = context

    def with_context(self, context: str) -> NotInitializedError:
        """Attach a context description and return the same error."""
        self.context = context
        return self

    def __str__(self) -> str:
        ctx = self.context if self.context is not None else "no additional context"
        return f"Resource '{self.resource}' not initialized. Context: {ctx}"


class LockError(AppError):
    """Acquiring or using a lock failed."""

    def __init__(self, lock_type: str, source: BaseException | None = None) -> None:
        super().__init__(lock_type)
        self.lock_type = lock_type
        self.source = source
        self.__cause__ = source

    def __str__(self) -> str:
        if self.source is not None:
            return f"LockError on {self.lock_type}: {self.source}"
        return f"LockError on {self.lock_type}: unknown cause"


class _WrappedError(AppError):
    """An application error that wraps a lower-level exception."""

    _label = ""

    def __init__(self, error: BaseException) -> None:
        super().__init__(error)
        self.error = error
        self.__cause__ = error

    def __str__(self) -> str:
        return f"{self._label}: {self.error}"


class AutostartError(_WrappedError):
    """Configuring start at login failed."""

    _label = "AutostartError"


class AppIOError(_WrappedError):
    """A filesystem operation failed."""

    _label = "IOError"


class SerdeError(_WrappedError):
    """Serialising or deserialising data failed."""

    _label = "SerdeError"


class ConfigError(AppError):
    """A configuration section holds an invalid value."""

    def __init__(self, section: str, detail: str) -> None:
        super().__init__(section, detail)
        self.section = section
        self.detail = detail

    def __str__(self) -> str:
        return f"ConfigError in [{self.section}]: {self.detail}"


class CustomError(AppError):
    """A general error carrying a message and a numeric code."""

    def __init__(self, message: str, code: int) -> None:
        super().__init__(message, code)
        self.message = message
        self.code = code

    def __str__(self) -> str:
        return f"CustomError[{self.code}]: {self.message}"