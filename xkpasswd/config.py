"""
Configuration for the word-based password generator.

A config is a closed set of keys. Each key has its own value constraint, and
a handful of rules tie keys together (a RANDOM separator needs an alphabet to
pick from, FIXED padding needs its counts, and so on). `PasswordConfig`
checks all of them when it is built, so an instance is always valid.
"""

from __future__ import annotations

import copy
import json
from dataclasses import dataclass, fields
from enum import StrEnum
from typing import Any, Callable, Iterator, Mapping

import regex
from loguru import logger

from .errors import ConfigValidationError


class CaseTransform(StrEnum):
    NONE = "NONE"
    UPPER = "UPPER"
    LOWER = "LOWER"
    CAPITALISE = "CAPITALISE"
    INVERT = "INVERT"
    ALTERNATE = "ALTERNATE"
    RANDOM = "RANDOM"


class PaddingType(StrEnum):
    NONE = "NONE"
    FIXED = "FIXED"
    ADAPTIVE = "ADAPTIVE"


class SubstitutionMode(StrEnum):
    ALWAYS = "ALWAYS"
    NEVER = "NEVER"
    RANDOM = "RANDOM"


# Special values accepted by separator_character / padding_character in
# place of a literal symbol.
NONE = "NONE"
RANDOM = "RANDOM"
SEPARATOR = "SEPARATOR"

_SYMBOL_RE = regex.compile(r"\P{L}")
_LETTER_RE = regex.compile(r"\p{L}")


# ---------- value checks ----------


def is_symbol(value: Any) -> bool:
    """A single character that is not a letter."""
    return isinstance(value, str) and _SYMBOL_RE.fullmatch(value) is not None


def is_letter(value: Any) -> bool:
    return isinstance(value, str) and _LETTER_RE.fullmatch(value) is not None


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _is_symbol_alphabet(value: Any) -> bool:
    if isinstance(value, str) or not isinstance(value, (list, tuple)):
        return False
    if not all(is_symbol(symbol) for symbol in value):
        return False
    return len(set(value)) >= 2


def _is_true_false(value: Any) -> bool:
    return isinstance(value, bool) or (_is_int(value) and value in (0, 1))


def _is_substitution_map(value: Any) -> bool:
    if not isinstance(value, Mapping):
        return False
    return all(
        is_letter(char) and isinstance(replacement, str)
        for char, replacement in value.items()
    )


def _one_of(*allowed: str) -> Callable[[Any], bool]:
    def check(value: Any) -> bool:
        return isinstance(value, str) and value in allowed

    return check


@dataclass(frozen=True)
class ConfigKey:
    name: str
    required: bool
    expects: str
    check: Callable[[Any], bool]


_WORD_LENGTH = "an integer greater than 3"
_POSITIVE_INT = "an integer greater than or equal to zero"
_SYMBOL_ALPHABET = "a list of at least two distinct Symbols (single non-letter characters)"

CONFIG_KEYS: dict[str, ConfigKey] = {
    key.name: key
    for key in (
        ConfigKey("word_length_min", True, _WORD_LENGTH, lambda v: _is_int(v) and v > 3),
        ConfigKey("word_length_max", True, _WORD_LENGTH, lambda v: _is_int(v) and v > 3),
        ConfigKey(
            "num_words",
            True,
            "an integer greater than or equal to two",
            lambda v: _is_int(v) and v >= 2,
        ),
        ConfigKey(
            "case_transform",
            True,
            "one of the values 'NONE', 'UPPER', 'LOWER', 'CAPITALISE', "
            "'INVERT', 'ALTERNATE', or 'RANDOM'",
            _one_of(*CaseTransform),
        ),
        ConfigKey(
            "separator_character",
            True,
            "a single Symbol or one of the special values: 'NONE' or 'RANDOM'",
            lambda v: is_symbol(v) or v in (NONE, RANDOM),
        ),
        ConfigKey(
            "padding_type",
            True,
            "one of the values 'NONE', 'FIXED', or 'ADAPTIVE'",
            _one_of(*PaddingType),
        ),
        ConfigKey("padding_digits_before", True, _POSITIVE_INT, lambda v: _is_int(v) and v >= 0),
        ConfigKey("padding_digits_after", True, _POSITIVE_INT, lambda v: _is_int(v) and v >= 0),
        ConfigKey(
            "padding_character",
            False,
            "a single Symbol or one of the special values: 'RANDOM' or 'SEPARATOR'",
            lambda v: is_symbol(v) or v in (RANDOM, SEPARATOR),
        ),
        ConfigKey("padding_characters_before", False, _POSITIVE_INT, lambda v: _is_int(v) and v >= 0),
        ConfigKey("padding_characters_after", False, _POSITIVE_INT, lambda v: _is_int(v) and v >= 0),
        ConfigKey(
            "pad_to_length",
            False,
            "an integer greater than or equal to twelve",
            lambda v: _is_int(v) and v >= 12,
        ),
        ConfigKey("symbol_alphabet", False, _SYMBOL_ALPHABET, _is_symbol_alphabet),
        ConfigKey("separator_alphabet", False, _SYMBOL_ALPHABET, _is_symbol_alphabet),
        ConfigKey("padding_alphabet", False, _SYMBOL_ALPHABET, _is_symbol_alphabet),
        ConfigKey(
            "character_substitutions",
            False,
            "a mapping from single letters to their replacement strings",
            _is_substitution_map,
        ),
        ConfigKey(
            "substitution_mode",
            False,
            "one of the values 'ALWAYS', 'NEVER', or 'RANDOM'",
            _one_of(*SubstitutionMode),
        ),
        ConfigKey(
            "allow_accents",
            False,
            "True or False (1 or 0)",
            _is_true_false,
        ),
    )
}


def defined_config_keys() -> list[str]:
    return sorted(CONFIG_KEYS)


def config_key_definition(name: str) -> ConfigKey:
    try:
        return CONFIG_KEYS[name]
    except KeyError:
        raise ConfigValidationError(
            f"'{name}' is not a defined config key", keys=(name,)
        ) from None


def _value_message(key: str, value: Any) -> str:
    return (
        f"{value!r} is not a valid value for the config key '{key}' - "
        f"must be {config_key_definition(key).expects}"
    )


# ---------- the config record ----------


@dataclass
class PasswordConfig:
    word_length_min: int | None = None
    word_length_max: int | None = None
    num_words: int | None = None
    case_transform: CaseTransform | None = None
    separator_character: str | None = None
    padding_type: PaddingType | None = None
    padding_digits_before: int | None = None
    padding_digits_after: int | None = None
    padding_character: str | None = None
    padding_characters_before: int | None = None
    padding_characters_after: int | None = None
    pad_to_length: int | None = None
    symbol_alphabet: list[str] | None = None
    separator_alphabet: list[str] | None = None
    padding_alphabet: list[str] | None = None
    character_substitutions: dict[str, str] | None = None
    substitution_mode: SubstitutionMode = SubstitutionMode.ALWAYS
    allow_accents: bool = False

    def __post_init__(self) -> None:
        validate_config(self)

        self.case_transform = CaseTransform(self.case_transform)
        self.padding_type = PaddingType(self.padding_type)
        self.substitution_mode = SubstitutionMode(
            self.substitution_mode or SubstitutionMode.ALWAYS
        )
        self.allow_accents = bool(self.allow_accents)
        # alphabets are stored de-duplicated, first occurrence wins
        for name in ("symbol_alphabet", "separator_alphabet", "padding_alphabet"):
            alphabet = getattr(self, name)
            if alphabet is not None:
                setattr(self, name, list(dict.fromkeys(alphabet)))
        if self.character_substitutions is not None:
            self.character_substitutions = dict(self.character_substitutions)

    @classmethod
    def from_dict(cls, values: Mapping[str, Any]) -> PasswordConfig:
        """
        Build a config from a plain mapping. Keys outside the defined set are
        rejected, not ignored.
        """
        unknown = sorted(key for key in values if key not in CONFIG_KEYS)
        if unknown:
            raise ConfigValidationError(
                "not a valid config because it contains undefined config "
                "key(s): " + ", ".join(f"'{key}'" for key in unknown),
                keys=unknown,
            )
        return cls(**{key: copy.deepcopy(value) for key, value in values.items()})

    def to_dict(self) -> dict[str, Any]:
        """Flat key/value view with plain values and unset keys left out."""
        out: dict[str, Any] = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if value is None:
                continue
            if isinstance(value, StrEnum):
                value = value.value
            out[f.name] = copy.deepcopy(value)
        return out

    # convenience lookups used by the assembler and the entropy engine

    def separator_choices(self) -> list[str]:
        return list(self.separator_alphabet or self.symbol_alphabet or [])

    def padding_choices(self) -> list[str]:
        return list(self.padding_alphabet or self.symbol_alphabet or [])


# ---------- validation ----------


def _interdependency_problems(values: Mapping[str, Any]) -> Iterator[tuple[str, tuple[str, ...]]]:
    if values["word_length_max"] < values["word_length_min"]:
        yield (
            "the config key 'word_length_max' "
            f"({values['word_length_max']}) cannot be less than the config "
            f"key 'word_length_min' ({values['word_length_min']})",
            ("word_length_min", "word_length_max"),
        )

    if values["separator_character"] == RANDOM:
        if values.get("symbol_alphabet") is None and values.get("separator_alphabet") is None:
            yield (
                "when the config key 'separator_character' is set to 'RANDOM', "
                "a symbol alphabet must be specified with one of the config "
                "keys 'symbol_alphabet' or 'separator_alphabet'",
                ("separator_character", "symbol_alphabet", "separator_alphabet"),
            )

    padding_type = values["padding_type"]
    padding_character = values.get("padding_character")
    if padding_type != PaddingType.NONE:
        if padding_character is None:
            yield (
                "when the config key 'padding_type' is not set to 'NONE', "
                "the config key 'padding_character' must be set",
                ("padding_type", "padding_character"),
            )
        elif padding_character == RANDOM:
            if values.get("symbol_alphabet") is None and values.get("padding_alphabet") is None:
                yield (
                    "when the config key 'padding_character' is set to "
                    "'RANDOM', a symbol alphabet must be specified with one "
                    "of the config keys 'symbol_alphabet' or 'padding_alphabet'",
                    ("padding_character", "symbol_alphabet", "padding_alphabet"),
                )
        elif padding_character == SEPARATOR and values["separator_character"] == NONE:
            yield (
                "the config key 'padding_character' cannot be set to "
                "'SEPARATOR' when the config key 'separator_character' is "
                "set to 'NONE'",
                ("padding_character", "separator_character"),
            )

    if padding_type == PaddingType.FIXED:
        before = values.get("padding_characters_before")
        after = values.get("padding_characters_after")
        if before is None or after is None:
            yield (
                "when the config key 'padding_type' is set to 'FIXED', both "
                "the config keys 'padding_characters_before' and "
                "'padding_characters_after' must be set",
                ("padding_type", "padding_characters_before", "padding_characters_after"),
            )
        elif before + after <= 0:
            yield (
                "when the config key 'padding_type' is set to 'FIXED', at "
                "least one of the config keys 'padding_characters_before' and "
                "'padding_characters_after' must be greater than 0 (to use no "
                "symbol padding set 'padding_type' to 'NONE')",
                ("padding_type", "padding_characters_before", "padding_characters_after"),
            )

    if padding_type == PaddingType.ADAPTIVE and values.get("pad_to_length") is None:
        yield (
            "when the config key 'padding_type' is set to 'ADAPTIVE', the "
            "config key 'pad_to_length' must be set",
            ("padding_type", "pad_to_length"),
        )


def config_problems(values: Mapping[str, Any]) -> Iterator[tuple[str, tuple[str, ...]]]:
    """
    Yield (message, keys) for every broken rule, in the order they are
    checked: missing required keys, bad values, then interdependencies.
    """
    missing = sorted(
        name for name, key in CONFIG_KEYS.items() if key.required and values.get(name) is None
    )
    if missing:
        yield (
            "not a valid config because one or more required config keys "
            "are missing: " + ", ".join(f"'{name}'" for name in missing),
            tuple(missing),
        )
        # interdependency checks need the required keys, stop here
        return

    bad_values = False
    for name, key in CONFIG_KEYS.items():
        value = values.get(name)
        if value is not None and not key.check(value):
            bad_values = True
            yield _value_message(name, value), (name,)
    if bad_values:
        return

    yield from _interdependency_problems(values)


def _as_values(config: PasswordConfig | Mapping[str, Any]) -> Mapping[str, Any]:
    if isinstance(config, PasswordConfig):
        return {f.name: getattr(config, f.name) for f in fields(config)}
    return config


def validate_config(config: PasswordConfig | Mapping[str, Any]) -> None:
    """Raise ConfigValidationError for the first broken rule, if any."""
    for message, keys in config_problems(_as_values(config)):
        raise ConfigValidationError(message, keys=keys)


def is_valid_config(config: PasswordConfig | Mapping[str, Any]) -> bool:
    values = _as_values(config)
    if not isinstance(config, PasswordConfig) and any(key not in CONFIG_KEYS for key in values):
        return False
    return next(config_problems(values), None) is None


def clone_config(config: PasswordConfig) -> PasswordConfig:
    """
    Deep copy: alphabets and the substitution map are not shared.

    The copy is built through the constructor, so a config that was changed
    into an invalid state after construction raises ConfigValidationError.
    """
    return PasswordConfig(
        **{f.name: copy.deepcopy(getattr(config, f.name)) for f in fields(config)}
    )


def distil_to_config_keys(
    values: Mapping[str, Any],
    *,
    suppress_warnings: bool = False,
    warn_invalid_key_names: bool = True,
) -> dict[str, Any]:
    """
    Keep only the defined keys that carry a valid value. Anything dropped is
    logged unless warnings are suppressed.
    """
    if warn_invalid_key_names and not suppress_warnings:
        for key in sorted(k for k in values if k not in CONFIG_KEYS):
            logger.warning(f"distilling out undefined config key '{key}'")

    distilled: dict[str, Any] = {}
    for name, key in CONFIG_KEYS.items():
        value = values.get(name)
        if value is None:
            continue
        if key.check(value):
            distilled[name] = copy.deepcopy(value)
        elif not suppress_warnings:
            logger.warning(
                f"distilling out valid config key '{name}' because of invalid "
                f"value: {_value_message(name, value)}"
            )
    return distilled


def merge_overrides(
    base: PasswordConfig,
    overrides: Mapping[str, Any],
    *,
    suppress_warnings: bool = False,
) -> PasswordConfig:
    """
    Apply overrides on top of `base` and return a new validated config.

    Unknown keys and invalid values are dropped with a warning; the merged
    result must still be valid as a whole or ConfigValidationError is raised.
    `base` is never modified.
    """
    merged = base.to_dict()
    merged.update(
        distil_to_config_keys(overrides, suppress_warnings=suppress_warnings)
    )
    return PasswordConfig.from_dict(merged)


def required_random_draws(config: PasswordConfig) -> int:
    """How many random numbers one password needs under `config`."""
    draws = config.num_words
    if config.case_transform == CaseTransform.RANDOM:
        draws += config.num_words
    if config.separator_character == RANDOM:
        draws += 1
    if config.padding_character == RANDOM:
        draws += 1
    draws += config.padding_digits_before
    draws += config.padding_digits_after
    return draws


# ---------- interchange ----------


def config_to_json(config: PasswordConfig) -> str:
    return json.dumps(config.to_dict(), sort_keys=True, ensure_ascii=False)


def config_from_json(text: str, *, suppress_warnings: bool = False) -> PasswordConfig:
    """
    Parse a JSON config. Unknown keys and invalid values are dropped (with a
    warning), then the remainder must form a valid config.
    """
    try:
        raw = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ConfigValidationError(
            f"failed to parse JSON config string: {exc}"
        ) from exc
    if not isinstance(raw, dict):
        raise ConfigValidationError("a JSON config must be an object of key/value pairs")

    distilled = distil_to_config_keys(raw, suppress_warnings=suppress_warnings)
    try:
        return PasswordConfig.from_dict(distilled)
    except ConfigValidationError as exc:
        raise ConfigValidationError(
            f"config extracted from JSON string is not valid: {exc}", keys=exc.keys
        ) from exc


def config_to_string(config: PasswordConfig) -> str:
    lines = []
    for key, value in sorted(config.to_dict().items()):
        if isinstance(value, list):
            rendered = ", ".join(f"'{item}'" for item in sorted(value))
            lines.append(f"{key}: [{rendered}]")
        elif isinstance(value, dict):
            rendered = ", ".join(f"{k}: '{v}'" for k, v in sorted(value.items()))
            lines.append(f"{key}: {{{rendered}}}")
        else:
            lines.append(f"{key}: '{value}'")
    return "\n".join(lines) + "\n"
