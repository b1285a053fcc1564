"""
Exception and warning types raised (or logged) by the password generator.
"""

from __future__ import annotations

from typing import Iterable


class XKPasswdError(Exception):
    """Base class for every fatal error raised by this package."""


class ConfigValidationError(XKPasswdError):
    """
    A config is missing a required key, holds an out-of-range value, or
    breaks one of the rules that tie several keys together.

    `keys` names the config key(s) involved in the failed rule.
    """

    def __init__(self, message: str, keys: Iterable[str] = ()) -> None:
        super().__init__(message)
        self.keys: tuple[str, ...] = tuple(keys)


class InsufficientWordsError(XKPasswdError):
    """Filtering the dictionary left too few usable words."""

    def __init__(self, message: str, found: int = 0, required: int = 1) -> None:
        super().__init__(message)
        self.found = found
        self.required = required


class DictionaryError(XKPasswdError):
    """A word source could not be loaded."""


class RngError(XKPasswdError):
    """The random number source returned nothing, or returned garbage."""


class EntropyWarning(UserWarning):
    """
    Advisory only: the loaded config + dictionary produce passwords whose
    entropy is below the configured minimum.

    Never raised. Instances are logged and kept on the generator.
    """

    def __init__(self, kind: str, entropy: float, minimum: int) -> None:
        self.kind = kind
        self.entropy = entropy
        self.minimum = minimum
        if kind == "blind":
            attack = "for brute force attacks"
        else:
            attack = "for attacks assuming full knowledge"
        super().__init__(
            f"{attack}, the combination of the loaded config and dictionary "
            f"produces an entropy of {entropy:.2f}bits, below the minimum "
            f"recommended {minimum}bits"
        )
