"""
Password assembly: turn a config, a word list and a stream of random
numbers into one password string.
"""

from __future__ import annotations

from typing import Sequence

from loguru import logger

from .config import NONE, RANDOM, SEPARATOR, CaseTransform, PaddingType, PasswordConfig, SubstitutionMode
from .random_cache import RandomCache


def random_words(config: PasswordConfig, words: Sequence[str], cache: RandomCache) -> list[str]:
    """`num_words` picks from `words`, with replacement."""
    return [words[cache.next_int(len(words))] for _ in range(config.num_words)]


def transform_case(config: PasswordConfig, words: list[str], cache: RandomCache) -> list[str]:
    transform = config.case_transform
    if transform == CaseTransform.UPPER:
        return [word.upper() for word in words]
    if transform == CaseTransform.LOWER:
        return [word.lower() for word in words]
    if transform == CaseTransform.CAPITALISE:
        return [word[:1].upper() + word[1:].lower() for word in words]
    if transform == CaseTransform.INVERT:
        return [word[:1].lower() + word[1:].upper() for word in words]
    if transform == CaseTransform.ALTERNATE:
        # one draw decides which parity gets upper case
        bias = 1 if cache.next_int(2) % 2 == 0 else 0
        return [
            word.lower() if (i + bias) % 2 == 0 else word.upper()
            for i, word in enumerate(words)
        ]
    if transform == CaseTransform.RANDOM:
        return [
            word.upper() if cache.next_int(2) % 2 == 0 else word.lower()
            for word in words
        ]
    return list(words)


def substitute_characters(config: PasswordConfig, words: list[str], cache: RandomCache) -> list[str]:
    """
    Apply `character_substitutions` according to `substitution_mode`:

    - ALWAYS: every key is replaced throughout every word.
    - NEVER: words are left alone.
    - RANDOM: a coin flip per word per key decides whether that key is
      replaced throughout that word.
    """
    substitutions = config.character_substitutions
    if not substitutions or config.substitution_mode == SubstitutionMode.NEVER:
        return list(words)

    out = []
    for word in words:
        for char in sorted(substitutions):
            if config.substitution_mode == SubstitutionMode.RANDOM and cache.next_int(100) >= 50:
                continue
            word = word.replace(char, substitutions[char])
        out.append(word)
    return out


def choose_separator(config: PasswordConfig, cache: RandomCache) -> str:
    separator = config.separator_character
    if separator == NONE:
        return ""
    if separator == RANDOM:
        choices = config.separator_choices()
        return choices[cache.next_int(len(choices))]
    return separator


def choose_padding_character(config: PasswordConfig, separator: str, cache: RandomCache) -> str:
    if config.padding_type == PaddingType.NONE:
        return ""
    padding = config.padding_character
    if padding == SEPARATOR:
        return separator
    if padding == RANDOM:
        choices = config.padding_choices()
        return choices[cache.next_int(len(choices))]
    return padding


def apply_padding(config: PasswordConfig, password: str, pad_char: str) -> str:
    if config.padding_type == PaddingType.FIXED:
        before = pad_char * config.padding_characters_before
        after = pad_char * config.padding_characters_after
        return before + password + after
    if config.padding_type == PaddingType.ADAPTIVE:
        target = config.pad_to_length
        if len(password) > target:
            # truncation may cut into words or digits
            return password[:target]
        if pad_char:
            return password + pad_char * (target - len(password))
    return password


def assemble_password(config: PasswordConfig, words: Sequence[str], cache: RandomCache) -> str:
    """
    Build one password:

    - Pick the words and apply case transform and substitutions.
    - Pick the separator and padding character.
    - Join the words, then wrap them in digit groups.
    - Pad (or truncate) with the padding character.

    Any RngError from the cache propagates; nothing is returned in that case.
    """
    chosen = random_words(config, words, cache)
    chosen = transform_case(config, chosen, cache)
    chosen = substitute_characters(config, chosen, cache)

    separator = choose_separator(config, cache)
    pad_char = choose_padding_character(config, separator, cache)

    password = separator.join(chosen)
    if config.padding_digits_before > 0:
        password = cache.random_digits(config.padding_digits_before) + separator + password
    if config.padding_digits_after > 0:
        password = password + separator + cache.random_digits(config.padding_digits_after)

    password = apply_padding(config, password, pad_char)
    logger.debug(f"assembled password of length {len(password)}")
    return password
