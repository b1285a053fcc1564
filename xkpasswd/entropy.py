"""
Entropy and length statistics for a config + word list pair.

Two attack models are covered:

- blind: the attacker knows nothing and brute-forces over a generic
  alphabet, so only length and character classes matter.
- seen: the attacker knows the config and the dictionary, so only the
  random choices made during generation count.

Permutation counts are exact Python ints; entropies are log2 of those.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

import regex
from loguru import logger

from .config import NONE, RANDOM, CaseTransform, PaddingType, PasswordConfig, SubstitutionMode, required_random_draws
from .errors import EntropyWarning
from .settings import Settings
from .words import WordCache

_NON_ALNUM_RE = regex.compile(r"[^0-9a-zA-Z]")

# alphabet sizes used for the blind model
LOWER_CASE = 26
UPPER_CASE = 26
DIGITS = 10
SYMBOLS = 33


@dataclass(frozen=True)
class ConfigStats:
    length_min: int
    length_max: int
    random_numbers_required: int


@dataclass(frozen=True)
class EntropyStats:
    permutations_blind_min: int
    permutations_blind_max: int
    permutations_blind: int
    entropy_blind_min: float
    entropy_blind_max: float
    entropy_blind: float
    permutations_seen: int
    entropy_seen: float


def config_stats(config: PasswordConfig, suppress_warnings: bool = False) -> ConfigStats:
    """
    Length bounds and random draws for passwords built from `config`.

    Substitutions that replace one letter with several make the real
    maximum longer than reported; a warning is logged for those unless
    suppressed (ADAPTIVE padding fixes the length, so no warning there).
    """
    if config.padding_type == PaddingType.ADAPTIVE:
        length_min = length_max = config.pad_to_length
    else:
        has_separator = config.separator_character != NONE
        base = 0
        if config.padding_type == PaddingType.FIXED:
            base += config.padding_characters_before + config.padding_characters_after
        for digits in (config.padding_digits_before, config.padding_digits_after):
            if digits > 0:
                base += digits + (1 if has_separator else 0)
        if has_separator:
            base += config.num_words - 1
        length_min = base + config.num_words * config.word_length_min
        length_max = base + config.num_words * config.word_length_max

    if config.padding_type != PaddingType.ADAPTIVE and not suppress_warnings:
        substitutions = config.character_substitutions or {}
        if any(len(replacement) > 1 for replacement in substitutions.values()):
            logger.warning(
                "maximum length may be underestimated. The loaded config "
                "contains at least one character substitution which replaces "
                "a single character with multiple characters."
            )

    return ConfigStats(
        length_min=length_min,
        length_max=length_max,
        random_numbers_required=required_random_draws(config),
    )


def _has_symbol(chars: str) -> bool:
    return _NON_ALNUM_RE.search(chars) is not None


def passwords_will_contain_symbol(config: PasswordConfig) -> bool:
    """Whether the padding or separator is sure to put a symbol in."""
    if config.padding_type != PaddingType.NONE:
        if config.padding_character == RANDOM:
            if _has_symbol("".join(config.padding_choices())):
                return True
        elif _has_symbol(config.padding_character):
            return True

    if config.separator_character != NONE:
        if config.separator_character == RANDOM:
            if _has_symbol("".join(config.separator_choices())):
                return True
        elif _has_symbol(config.separator_character):
            return True

    return False


def blind_alphabet_size(config: PasswordConfig, words: WordCache) -> int:
    size = LOWER_CASE
    if config.case_transform in (
        CaseTransform.ALTERNATE,
        CaseTransform.CAPITALISE,
        CaseTransform.INVERT,
        CaseTransform.RANDOM,
    ):
        size += UPPER_CASE
    if config.padding_digits_before > 0 or config.padding_digits_after > 0:
        size += DIGITS
    if passwords_will_contain_symbol(config) or words.contains_accents:
        size += SYMBOLS
    return size


def blind_entropy(config: PasswordConfig, words: WordCache) -> tuple[int, int, int]:
    """Blind permutations for the shortest, longest and average password."""
    stats = config_stats(config, suppress_warnings=True)
    alphabet = blind_alphabet_size(config, words)
    # halves round up
    length_avg = (stats.length_min + stats.length_max + 1) // 2
    return (
        alphabet ** stats.length_min,
        alphabet ** stats.length_max,
        alphabet ** length_avg,
    )


def seen_entropy(config: PasswordConfig, words: WordCache) -> int:
    """Permutations an attacker who knows config and dictionary must try."""
    permutations = len(words.filtered) ** config.num_words

    if config.case_transform == CaseTransform.RANDOM:
        permutations *= 2 ** config.num_words
    elif config.case_transform == CaseTransform.ALTERNATE:
        # one coin flip per password picks the parity
        permutations *= 2

    if config.separator_character == RANDOM:
        permutations *= len(config.separator_choices())

    if config.padding_type != PaddingType.NONE and config.padding_character == RANDOM:
        permutations *= len(config.padding_choices())

    permutations *= 10 ** (config.padding_digits_before + config.padding_digits_after)

    if config.substitution_mode == SubstitutionMode.RANDOM and config.character_substitutions:
        permutations *= 2 ** (config.num_words * len(config.character_substitutions))

    return permutations


def entropy_bits(permutations: int) -> float:
    return math.log2(permutations) if permutations > 0 else 0.0


def calculate_entropy_stats(config: PasswordConfig, words: WordCache) -> EntropyStats:
    blind_min, blind_max, blind_avg = blind_entropy(config, words)
    seen = seen_entropy(config, words)
    stats = EntropyStats(
        permutations_blind_min=blind_min,
        permutations_blind_max=blind_max,
        permutations_blind=blind_avg,
        entropy_blind_min=entropy_bits(blind_min),
        entropy_blind_max=entropy_bits(blind_max),
        entropy_blind=entropy_bits(blind_avg),
        permutations_seen=seen,
        entropy_seen=entropy_bits(seen),
    )
    logger.debug(
        f"entropy: blind {stats.entropy_blind_min:.2f}-{stats.entropy_blind_max:.2f}bits, "
        f"seen {stats.entropy_seen:.2f}bits"
    )
    return stats


def entropy_warnings(stats: EntropyStats, settings: Settings) -> list[EntropyWarning]:
    """
    Low-entropy warnings for `stats` under the settings' thresholds and
    warning level. Each one is logged; none is raised.
    """
    warnings: list[EntropyWarning] = []
    if settings.warn_blind and stats.entropy_blind_min < settings.entropy_min_blind:
        warnings.append(
            EntropyWarning("blind", stats.entropy_blind_min, settings.entropy_min_blind)
        )
    if settings.warn_seen and stats.entropy_seen < settings.entropy_min_seen:
        warnings.append(EntropyWarning("seen", stats.entropy_seen, settings.entropy_min_seen))
    for warning in warnings:
        logger.warning(str(warning))
    return warnings


def render_bigint(value: int) -> str:
    """
    Scientific notation with three significant digits, e.g. 1.23x10^45.
    Numbers under three digits are returned as-is.
    """
    digits = str(value)
    if len(digits) < 3:
        return digits
    return f"{digits[0]}.{digits[1:3]}x10^{len(digits) - 1}"
