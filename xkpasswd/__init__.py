"""
Memorable password generator: random dictionary words joined with
separators, digits and padding symbols, with entropy accounting.

Logging goes through loguru and is disabled for this package until
`configure_logging` is called (or `logger.enable("xkpasswd")`).
"""

from loguru import logger

from .cli import generate_password, generate_password_with_meta
from .config import CaseTransform, PaddingType, PasswordConfig, SubstitutionMode
from .dictionary import BasicDictionary, DefaultDictionary, Dictionary, SystemDictionary
from .errors import (
    ConfigValidationError,
    DictionaryError,
    EntropyWarning,
    InsufficientWordsError,
    RngError,
    XKPasswdError,
)
from .generator import PasswordStats, XKPasswd
from .presets import default_config, defined_presets, preset_config
from .rng import RNG, BasicRNG, SystemRNG
from .settings import Settings

__all__ = [
    "BasicDictionary",
    "BasicRNG",
    "CaseTransform",
    "ConfigValidationError",
    "DefaultDictionary",
    "Dictionary",
    "DictionaryError",
    "EntropyWarning",
    "InsufficientWordsError",
    "PaddingType",
    "PasswordConfig",
    "PasswordStats",
    "RNG",
    "RngError",
    "Settings",
    "SubstitutionMode",
    "SystemDictionary",
    "SystemRNG",
    "XKPasswd",
    "XKPasswdError",
    "default_config",
    "defined_presets",
    "generate_password",
    "generate_password_with_meta",
    "preset_config",
]

logger.disable("xkpasswd")
