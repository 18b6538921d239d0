"""Exceptions raised by frontload.

Fetch failures are never represented here: they are absorbed where fetches
settle (see engine/flush.py). Only structural misuse surfaces to callers.
"""


class FrontloadError(Exception):
    """Base class for frontload errors."""


class ConfigFileError(FrontloadError):
    """Raised when a settings file cannot be loaded.

    Validation failures of the file's *contents* surface as pydantic
    ValidationError instead, so callers can report field-level details.
    """

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Cannot load settings from {path}: {reason}")
