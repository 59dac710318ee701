"""Fatal build errors. Any of these aborts the run."""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Union


class BuildError(Exception):
    """Base class; carries the source path the failure is about."""

    def __init__(self, message: str, path: Optional[Union[str, Path]] = None):
        self.path = path
        if path is not None:
            message = f"{path}: {message}"
        super().__init__(message)


class ConfigError(BuildError):
    pass


class BuildIOError(BuildError):
    """Unreadable source or unwritable target."""


class MetadataParseError(BuildError):
    """Malformed JSON/YAML, or data that is not a mapping."""


class MissingKeyError(BuildError):
    def __init__(self, key: str, path: Union[str, Path]):
        self.key = key
        super().__init__(f"'{key}' not provided", path)


class RenderError(BuildError):
    """Template failure reported by the rendering service."""


class StoreSealedError(BuildError):
    pass
