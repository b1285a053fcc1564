"""
Word filtering: grapheme-aware length limits and accent stripping.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Sequence

import regex
from loguru import logger
from unidecode import unidecode

from .errors import InsufficientWordsError

# Fewest words a filtered list may hold.
MIN_FILTERED_WORDS = 1

_GRAPHEME_RE = regex.compile(r"\X")
_WORD_RE = regex.compile(r"[\p{L}\p{M}]+")


def grapheme_length(text: str) -> int:
    """
    Number of user-perceived characters, so "café" is 4 whether the accent
    is precomposed or a combining mark.
    """
    return len(_GRAPHEME_RE.findall(text))


def is_word(text: object) -> bool:
    """Letters (and combining marks) only."""
    return isinstance(text, str) and _WORD_RE.fullmatch(text) is not None


def strip_accents(word: str) -> str:
    return unidecode(word)


def contains_accents(words: Iterable[str]) -> bool:
    return any(strip_accents(word) != word for word in words)


def distil_to_words(candidates: Iterable[object], *, warn: bool = False) -> list[str]:
    """
    Keep only strings made entirely of letters that are at least four
    graphemes long, without duplicates (first occurrence wins).
    """
    words: list[str] = []
    seen: set[str] = set()
    for candidate in candidates:
        if (
            isinstance(candidate, str)
            and _WORD_RE.fullmatch(candidate)
            and grapheme_length(candidate) >= 4
        ):
            if candidate not in seen:
                seen.add(candidate)
                words.append(candidate)
        elif warn:
            logger.warning(f"skipping invalid word: {candidate!r}")
    return words


def filter_words(
    words: Iterable[str],
    min_len: int,
    max_len: int,
    allow_accents: bool = False,
) -> list[str]:
    """
    Words whose grapheme length lies in [min_len, max_len], with accents
    transliterated away unless `allow_accents` is set.

    Length is measured after transliteration ("straße" becomes the six
    letter "strasse"), and words that stop being letters-only are dropped.

    Raises InsufficientWordsError when nothing usable is left.
    """
    if max_len < min_len:
        raise ValueError(
            f"minimum length ({min_len}) cannot be greater than maximum length ({max_len})"
        )

    filtered: list[str] = []
    for word in words:
        if not allow_accents:
            word = strip_accents(word)
            if not is_word(word):
                continue
        length = grapheme_length(word)
        if length < min_len or length > max_len:
            continue
        filtered.append(word)

    if len(filtered) < MIN_FILTERED_WORDS:
        raise InsufficientWordsError(
            f"found {len(filtered)} words between {min_len} and {max_len} "
            f"letters long, at least {MIN_FILTERED_WORDS} needed",
            found=len(filtered),
            required=MIN_FILTERED_WORDS,
        )
    return filtered


@dataclass
class WordCache:
    """
    The words an instance draws from: everything the source supplied, plus
    the subset that fits the config's length limits.
    """

    source: str
    full: list[str]
    filtered: list[str]
    contains_accents: bool = False
    filter_length_min: int = 0
    filter_length_max: int = 0
    allow_accents: bool = False

    @classmethod
    def build(
        cls,
        source: str,
        words: Sequence[str],
        min_len: int,
        max_len: int,
        allow_accents: bool = False,
    ) -> WordCache:
        full = distil_to_words(words)
        filtered = filter_words(full, min_len, max_len, allow_accents)
        return cls(
            source=source,
            full=full,
            filtered=filtered,
            contains_accents=contains_accents(filtered),
            filter_length_min=min_len,
            filter_length_max=max_len,
            allow_accents=allow_accents,
        )

    def refiltered(self, min_len: int, max_len: int, allow_accents: bool) -> WordCache:
        """Same source words, new length limits / accent policy."""
        if (min_len, max_len, allow_accents) == (
            self.filter_length_min,
            self.filter_length_max,
            self.allow_accents,
        ):
            return self
        filtered = filter_words(self.full, min_len, max_len, allow_accents)
        return WordCache(
            source=self.source,
            full=self.full,
            filtered=filtered,
            contains_accents=contains_accents(filtered),
            filter_length_min=min_len,
            filter_length_max=max_len,
            allow_accents=allow_accents,
        )

    @property
    def percent_available(self) -> int:
        if not self.full:
            return 0
        return int(len(self.filtered) / len(self.full) * 100 + 0.5)
