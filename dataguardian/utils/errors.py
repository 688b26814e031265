"""
Exception hierarchy and error message helpers.
"""

from __future__ import annotations


class DataGuardianError(Exception):
    """Base class for errors raised by the DataGuardian core."""


class SettingsPersistenceError(DataGuardianError):
    """A settings write could not be persisted or verified."""


class UnknownSettingError(DataGuardianError):
    """A settings update named a key that is not part of the settings map."""


class SettingKeyCollisionError(DataGuardianError):
    """Two distinct tracker categories derive the same setting key."""


class RuleInstallError(DataGuardianError):
    """The rule installer rejected a remove or add operation."""


def get_error_message(error: BaseException | object) -> str:
    """
    Safely extract an error message from an unknown error type.
    """
    if isinstance(error, Exception):
        return str(error) or type(error).__name__
    return "Unknown error"
