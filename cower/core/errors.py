"""Exception hierarchy for cower. Every failure the core reports is a CowerError."""

from __future__ import annotations


class CowerError(Exception):
    """Base class for all errors raised by cower."""


class EmptyArgumentsError(CowerError):
    def __init__(self) -> None:
        super().__init__("No arguments given.")


class InvalidEndpointError(CowerError):
    def __init__(self, url: str, reason: str = "") -> None:
        self.url = url
        msg = f"Invalid endpoint: {url}"
        if reason:
            msg += f" ({reason})"
        super().__init__(msg)


class InvalidSearchFieldError(CowerError):
    def __init__(self, value: str) -> None:
        self.value = value
        super().__init__(f"Invalid option for 'by': {value}")


class InvalidColorError(CowerError):
    def __init__(self, value: str) -> None:
        self.value = value
        super().__init__(f"Invalid Color Argument: {value}")


class InvalidSortKeyError(CowerError):
    def __init__(self, value: str) -> None:
        self.value = value
        super().__init__(f"Invalid option for 'sort by': {value}")


class InvalidOperationError(CowerError):
    def __init__(self, detail: str = "") -> None:
        super().__init__(f"Invalid Operation: {detail}" if detail else "Invalid Operation")


class InvalidRegexError(CowerError):
    def __init__(self, patterns: list[str]) -> None:
        self.patterns = list(patterns)
        super().__init__("Invalid Regex: " + ", ".join(self.patterns))


class ConfigFileError(CowerError):
    """Raised while loading the config file."""


class TargetDirError(ConfigFileError):
    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"TargetDir {reason}: {path}")


class InvalidIntegerError(ConfigFileError):
    def __init__(self, key: str, value: str) -> None:
        self.key = key
        self.value = value
        super().__init__(f"Invalid {key} Argument: {value}")


class DeserializeError(CowerError):
    """Response body does not match the registry schema.

    ``field`` names the offending key when one can be identified; it is
    ``None`` for syntax errors in the JSON text itself.
    """

    def __init__(self, message: str, field: str | None = None) -> None:
        self.field = field
        if field:
            message = f"{field}: {message}"
        super().__init__(message)


class RegistryError(CowerError):
    """The registry answered, but with an error envelope."""


class TransportError(CowerError):
    """The request never produced a usable response body."""


class DownloadError(CowerError):
    pass
