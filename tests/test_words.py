import pytest

from xkpasswd.errors import InsufficientWordsError
from xkpasswd.words import (
    WordCache,
    contains_accents,
    distil_to_words,
    filter_words,
    grapheme_length,
    is_word,
    strip_accents,
)


@pytest.mark.parametrize(
    "text, expected",
    [
        ("blue", 4),
        ("café", 4),
        ("cafe\u0301", 4),
        ("näive", 5),
        ("", 0),
    ],
)
def test_grapheme_length(text, expected):
    assert grapheme_length(text) == expected


def test_strip_accents():
    assert strip_accents("café") == "cafe"
    assert strip_accents("cafe\u0301") == "cafe"
    assert strip_accents("blue") == "blue"


def test_contains_accents():
    assert contains_accents(["blue", "café"])
    assert not contains_accents(["blue", "ruby"])
    assert not contains_accents([])


@pytest.mark.parametrize("word", ["blue", "Blue", "café", "cafe\u0301"])
def test_is_word(word):
    assert is_word(word)


@pytest.mark.parametrize("word", ["", "blue1", "two words", "semi-final", None, 42])
def test_is_not_word(word):
    assert not is_word(word)


def test_distil_to_words():
    words = distil_to_words(["blue", "red", "blue", "ruby!", 7, "mint", "café"])
    assert words == ["blue", "mint", "café"]


def test_distil_to_words_can_warn(log_messages):
    distil_to_words(["blue", "x1"], warn=True)
    assert any("x1" in message for message in log_messages)


def test_filter_words_by_length():
    words = ["blue", "green", "yellow", "purple", "mint"]
    assert filter_words(words, 5, 6) == ["green", "yellow", "purple"]
    assert filter_words(words, 4, 4) == ["blue", "mint"]


def test_filter_words_strips_accents_unless_allowed():
    words = ["café", "blue"]
    assert filter_words(words, 4, 4) == ["cafe", "blue"]
    assert filter_words(words, 4, 4, allow_accents=True) == ["café", "blue"]


def test_filter_words_measures_transliterated_length():
    words = ["straße", "blue"]
    assert filter_words(words, 7, 7) == ["strasse"]
    assert filter_words(words, 4, 6) == ["blue"]
    assert filter_words(words, 6, 6, allow_accents=True) == ["straße"]


def test_filter_words_drops_words_transliterated_to_non_letters():
    with pytest.raises(InsufficientWordsError):
        filter_words(["北京北京"], 4, 20)
    assert filter_words(["北京北京"], 4, 4, allow_accents=True) == [
        "北京北京"
    ]


def test_filter_words_counts_graphemes():
    assert filter_words(["cafe\u0301"], 4, 4, allow_accents=True) == ["cafe\u0301"]


def test_filter_words_with_nothing_left():
    with pytest.raises(InsufficientWordsError) as exc_info:
        filter_words(["blue", "mint"], 6, 8)
    assert exc_info.value.found == 0
    assert exc_info.value.required == 1


def test_filter_words_rejects_inverted_range():
    with pytest.raises(ValueError):
        filter_words(["blue"], 5, 4)


def test_word_cache_build():
    cache = WordCache.build("test", ["blue", "green", "café", "red"], 4, 4, allow_accents=True)

    assert cache.full == ["blue", "green", "café"]
    assert cache.filtered == ["blue", "café"]
    assert cache.contains_accents
    assert cache.percent_available == 67


def test_word_cache_refiltered():
    cache = WordCache.build("test", ["blue", "green", "yellow"], 4, 8)

    assert cache.refiltered(4, 8, False) is cache

    narrower = cache.refiltered(5, 6, False)
    assert narrower.filtered == ["green", "yellow"]
    assert narrower.full is cache.full
    assert cache.filtered == ["blue", "green", "yellow"]
