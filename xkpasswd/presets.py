"""
Built-in named configs.

Preset configs are kept as raw key/value tables and turned into
`PasswordConfig` objects on demand, so `check_presets()` can report every
broken preset rather than failing on the first.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Mapping

from loguru import logger

from .config import PasswordConfig, merge_overrides
from .errors import ConfigValidationError


@dataclass(frozen=True)
class Preset:
    description: str
    config: Mapping[str, Any]


_WEB_PADDING = ["!", "@", "$", "%", "^", "&", "*", "+", "=", ":", "|", "~", "?"]
_WEB_SEPARATORS = ["-", "+", "=", ".", "*", "_", "|", "~", ","]

PRESETS: dict[str, Preset] = {
    "DEFAULT": Preset(
        description=(
            "The default preset resulting in a password consisting of 3 random "
            "words of between 4 and 8 letters with alternating case separated "
            "by a random character, with two random digits before and after, "
            "and padded with two random characters front and back"
        ),
        config={
            "symbol_alphabet": [
                "!", "@", "$", "%", "^", "&", "*", "-", "_",
                "+", "=", ":", "|", "~", "?", "/", ".", ";",
            ],
            "word_length_min": 4,
            "word_length_max": 8,
            "num_words": 3,
            "separator_character": "RANDOM",
            "padding_digits_before": 2,
            "padding_digits_after": 2,
            "padding_type": "FIXED",
            "padding_character": "RANDOM",
            "padding_characters_before": 2,
            "padding_characters_after": 2,
            "case_transform": "ALTERNATE",
            "allow_accents": False,
        },
    ),
    "WEB32": Preset(
        description="A preset for websites that allow passwords up to 32 characters long.",
        config={
            "padding_alphabet": _WEB_PADDING,
            "separator_alphabet": _WEB_SEPARATORS,
            "word_length_min": 4,
            "word_length_max": 5,
            "num_words": 4,
            "separator_character": "RANDOM",
            "padding_digits_before": 2,
            "padding_digits_after": 2,
            "padding_type": "FIXED",
            "padding_character": "RANDOM",
            "padding_characters_before": 1,
            "padding_characters_after": 1,
            "case_transform": "ALTERNATE",
            "allow_accents": False,
        },
    ),
    "WEB16": Preset(
        description="A preset for websites that insist passwords not be longer than 16 characters.",
        config={
            "padding_alphabet": _WEB_PADDING,
            "separator_alphabet": _WEB_SEPARATORS,
            "word_length_min": 4,
            "word_length_max": 4,
            "num_words": 3,
            "separator_character": "RANDOM",
            "padding_digits_before": 0,
            "padding_digits_after": 0,
            "padding_type": "FIXED",
            "padding_character": "RANDOM",
            "padding_characters_before": 1,
            "padding_characters_after": 1,
            "case_transform": "RANDOM",
            "allow_accents": False,
        },
    ),
    "WIFI": Preset(
        description=(
            "A preset for generating 63 character long WPA2 keys (most routers "
            "allow 64 characters, but some only 63, hence the odd length)."
        ),
        config={
            "padding_alphabet": _WEB_PADDING,
            "separator_alphabet": _WEB_SEPARATORS,
            "word_length_min": 4,
            "word_length_max": 8,
            "num_words": 6,
            "separator_character": "RANDOM",
            "padding_digits_before": 4,
            "padding_digits_after": 4,
            "padding_type": "ADAPTIVE",
            "padding_character": "RANDOM",
            "pad_to_length": 63,
            "case_transform": "RANDOM",
            "allow_accents": False,
        },
    ),
    "APPLEID": Preset(
        description=(
            "A preset respecting the many prerequisites Apple places on Apple "
            "ID passwords. The preset also limits itself to symbols found on "
            "the iOS letter and number keyboards (i.e. not the awkward to "
            "reach symbol keyboard)"
        ),
        config={
            "padding_alphabet": ["!", "?", "@", "&"],
            "separator_alphabet": ["-", ":", ".", ","],
            "word_length_min": 5,
            "word_length_max": 7,
            "num_words": 3,
            "separator_character": "RANDOM",
            "padding_digits_before": 2,
            "padding_digits_after": 2,
            "padding_type": "FIXED",
            "padding_character": "RANDOM",
            "padding_characters_before": 1,
            "padding_characters_after": 1,
            "case_transform": "RANDOM",
            "allow_accents": False,
        },
    ),
    "NTLM": Preset(
        description=(
            "A preset for 14 character Windows NTLMv1 password. WARNING - only "
            "use this preset if you have to, it is too short to be acceptably "
            "secure and will always generate entropy warnings for the case "
            "where the config and dictionary are known."
        ),
        config={
            "padding_alphabet": _WEB_PADDING,
            "separator_alphabet": _WEB_SEPARATORS,
            "word_length_min": 5,
            "word_length_max": 5,
            "num_words": 2,
            "separator_character": "RANDOM",
            "padding_digits_before": 1,
            "padding_digits_after": 0,
            "padding_type": "FIXED",
            "padding_character": "RANDOM",
            "padding_characters_before": 0,
            "padding_characters_after": 1,
            "case_transform": "INVERT",
            "allow_accents": False,
        },
    ),
    "SECURITYQ": Preset(
        description="A preset for creating fake answers to security questions.",
        config={
            "word_length_min": 4,
            "word_length_max": 8,
            "num_words": 6,
            "separator_character": " ",
            "padding_digits_before": 0,
            "padding_digits_after": 0,
            "padding_type": "FIXED",
            "padding_character": "RANDOM",
            "padding_alphabet": [".", "!", "?"],
            "padding_characters_before": 0,
            "padding_characters_after": 1,
            "case_transform": "NONE",
            "allow_accents": False,
        },
    ),
    "XKCD": Preset(
        description=(
            "A preset for generating passwords similar to the example in the "
            "original XKCD cartoon, but with a dash to separate the four random "
            "words, and the capitalisation randomised to add sufficient entropy "
            "to avoid warnings."
        ),
        config={
            "word_length_min": 4,
            "word_length_max": 8,
            "num_words": 4,
            "separator_character": "-",
            "padding_digits_before": 0,
            "padding_digits_after": 0,
            "padding_type": "NONE",
            "case_transform": "RANDOM",
            "allow_accents": False,
        },
    ),
}

DEFAULT_PRESET = "DEFAULT"


def defined_presets() -> list[str]:
    return sorted(PRESETS)


def _lookup(name: str | None) -> tuple[str, Preset]:
    key = (name or DEFAULT_PRESET).upper()
    try:
        return key, PRESETS[key]
    except KeyError:
        raise ConfigValidationError(
            f"'{name}' is not a defined preset name (defined presets: "
            f"{', '.join(defined_presets())})"
        ) from None


def preset_description(name: str | None = None) -> str:
    return _lookup(name)[1].description


def preset_config(
    name: str | None = None,
    overrides: Mapping[str, Any] | None = None,
) -> PasswordConfig:
    """
    A fresh config built from the named preset (DEFAULT when no name is
    given), with optional overrides merged on top.
    """
    key, preset = _lookup(name)
    config = PasswordConfig.from_dict(preset.config)
    if overrides:
        try:
            config = merge_overrides(config, overrides)
        except ConfigValidationError as exc:
            raise ConfigValidationError(
                f"the preset '{key}' combined with the specified overrides "
                f"produces an invalid config: {exc}",
                keys=exc.keys,
            ) from exc
    return config


def default_config(overrides: Mapping[str, Any] | None = None) -> PasswordConfig:
    return preset_config(DEFAULT_PRESET, overrides)


def check_presets(presets: Mapping[str, Preset] | None = None) -> dict[str, str]:
    """
    Validate every preset. Returns {name: problem} for each broken one, an
    empty dict when all are fine.
    """
    problems: dict[str, str] = {}
    for name, preset in sorted((presets if presets is not None else PRESETS).items()):
        logger.debug(f"checking preset '{name}'")
        if not preset.description:
            problems[name] = "preset has no description"
            continue
        try:
            PasswordConfig.from_dict(preset.config)
        except ConfigValidationError as exc:
            problems[name] = str(exc)
    for name, problem in problems.items():
        logger.warning(f"preset '{name}' is invalid: {problem}")
    return problems


def presets_json() -> str:
    """The presets, their configs and descriptions as one JSON document."""
    names = defined_presets()
    return json.dumps(
        {
            "defined_presets": names,
            "presets": {name: preset_config(name).to_dict() for name in names},
            "preset_descriptions": {name: PRESETS[name].description for name in names},
        },
        ensure_ascii=False,
    )
