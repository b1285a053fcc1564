import math

import pytest

from xkpasswd.config import PasswordConfig
from xkpasswd.entropy import (
    blind_alphabet_size,
    blind_entropy,
    calculate_entropy_stats,
    config_stats,
    entropy_warnings,
    passwords_will_contain_symbol,
    render_bigint,
    seen_entropy,
)
from xkpasswd.presets import preset_config
from xkpasswd.settings import Settings
from xkpasswd.words import WordCache

WORDS = [
    "blue", "ruby", "mint", "jade", "onyx", "opal", "teal", "gold",
    "amber", "coral", "ivory", "lemon", "olive", "peach", "slate",
    "copper", "indigo", "maroon", "orange", "purple", "salmon",
]


def words_for(config, words=WORDS):
    return WordCache.build("test", words, config.word_length_min, config.word_length_max, config.allow_accents)


@pytest.fixture
def simple(simple_config):
    return PasswordConfig.from_dict(simple_config)


def with_overrides(config, **overrides):
    return PasswordConfig.from_dict({**config.to_dict(), **overrides})


def test_config_stats_simple(simple):
    stats = config_stats(simple)
    assert (stats.length_min, stats.length_max, stats.random_numbers_required) == (14, 14, 3)


def test_config_stats_default_preset():
    stats = config_stats(preset_config("DEFAULT"))
    # 2+2 padding, 2+1 and 2+1 for digits, 2 separators, 3 words of 4-8
    assert (stats.length_min, stats.length_max) == (24, 36)
    assert stats.random_numbers_required == 9


def test_config_stats_without_separator(simple):
    config = with_overrides(simple, separator_character="NONE", padding_digits_before=2)
    stats = config_stats(config)
    assert (stats.length_min, stats.length_max) == (14, 14)


def test_config_stats_adaptive():
    stats = config_stats(preset_config("WIFI"))
    assert stats.length_min == stats.length_max == 63


def test_multi_character_substitution_warning(simple, log_messages):
    config = with_overrides(simple, character_substitutions={"e": "33"})

    config_stats(config)
    assert any("underestimated" in message for message in log_messages)

    log_messages.clear()
    config_stats(config, suppress_warnings=True)
    assert log_messages == []


def test_no_substitution_warning_with_adaptive_padding(simple, log_messages):
    config = with_overrides(
        simple,
        character_substitutions={"e": "33"},
        padding_type="ADAPTIVE",
        padding_character="!",
        pad_to_length=20,
    )
    config_stats(config)
    assert log_messages == []


@pytest.mark.parametrize(
    "overrides, expected",
    [
        ({}, True),
        ({"separator_character": "NONE"}, False),
        ({"separator_character": "NONE", "padding_type": "ADAPTIVE", "padding_character": "!", "pad_to_length": 20}, True),
        ({"separator_character": "RANDOM", "separator_alphabet": ["-", "+"]}, True),
    ],
)
def test_passwords_will_contain_symbol(simple, overrides, expected):
    assert passwords_will_contain_symbol(with_overrides(simple, **overrides)) is expected


@pytest.mark.parametrize(
    "overrides, expected",
    [
        ({"separator_character": "NONE"}, 26),
        ({}, 26 + 33),
        ({"separator_character": "NONE", "case_transform": "CAPITALISE"}, 26 + 26),
        ({"separator_character": "NONE", "case_transform": "UPPER"}, 26),
        ({"separator_character": "NONE", "padding_digits_after": 1}, 26 + 10),
        ({"case_transform": "RANDOM", "padding_digits_before": 1}, 26 + 26 + 10 + 33),
    ],
)
def test_blind_alphabet_size(simple, overrides, expected):
    config = with_overrides(simple, **overrides)
    assert blind_alphabet_size(config, words_for(config)) == expected


def test_accented_words_count_as_symbols(simple):
    config = with_overrides(simple, separator_character="NONE", allow_accents=True)
    words = words_for(config, ["blue", "café"])

    assert blind_alphabet_size(config, words) == 26 + 33


def test_blind_entropy_uses_rounded_up_average():
    config = preset_config("DEFAULT")
    blind_min, blind_max, blind_avg = blind_entropy(config, words_for(config))
    alphabet = 26 + 26 + 10 + 33

    assert blind_min == alphabet ** 24
    assert blind_max == alphabet ** 36
    assert blind_avg == alphabet ** 30


def test_seen_entropy_simple(simple, colour_words):
    assert seen_entropy(simple, words_for(simple, colour_words)) == 27


def test_seen_entropy_default_preset():
    config = preset_config("DEFAULT")
    words = words_for(config)
    n = len(words.filtered)

    # alternate coin flip, separator and padding from 18 symbols, 4 digits
    assert seen_entropy(config, words) == n ** 3 * 2 * 18 * 18 * 10 ** 4


def test_seen_entropy_random_case():
    config = preset_config("XKCD")
    words = words_for(config)
    assert seen_entropy(config, words) == len(words.filtered) ** 4 * 2 ** 4


def test_seen_entropy_random_substitutions(simple, colour_words):
    config = with_overrides(
        simple,
        character_substitutions={"e": "3", "u": "_"},
        substitution_mode="RANDOM",
    )
    assert seen_entropy(config, words_for(config, colour_words)) == 27 * 2 ** 6


def test_seen_entropy_ignores_padding_alphabet_without_padding(simple, colour_words):
    config = with_overrides(simple, padding_character="RANDOM", padding_alphabet=["!", "@"])
    assert seen_entropy(config, words_for(config, colour_words)) == 27


def test_more_words_never_lower_seen_entropy(simple):
    for num_words in range(2, 8):
        fewer = with_overrides(simple, word_length_max=8, num_words=num_words)
        more = with_overrides(simple, word_length_max=8, num_words=num_words + 1)
        assert seen_entropy(more, words_for(more)) >= seen_entropy(fewer, words_for(fewer))


def test_narrower_word_range_never_raises_seen_entropy(simple):
    previous = None
    for word_length_min in range(4, 7):
        config = with_overrides(simple, word_length_min=word_length_min, word_length_max=6)
        current = seen_entropy(config, words_for(config))
        if previous is not None:
            assert current <= previous
        previous = current


def test_calculate_entropy_stats(simple, colour_words):
    stats = calculate_entropy_stats(simple, words_for(simple, colour_words))

    assert stats.permutations_seen == 27
    assert stats.entropy_seen == pytest.approx(math.log2(27))
    assert stats.permutations_blind_min == stats.permutations_blind_max == 59 ** 14
    assert stats.entropy_blind == pytest.approx(14 * math.log2(59))


@pytest.mark.parametrize(
    "settings, kinds",
    [
        (Settings(), ["seen"]),
        (Settings(entropy_warnings="NONE"), []),
        (Settings(entropy_warnings="BLIND"), []),
        (Settings(entropy_warnings="SEEN"), ["seen"]),
        (Settings(entropy_min_blind=100), ["blind", "seen"]),
        (Settings(entropy_min_blind=100, entropy_warnings="BLIND"), ["blind"]),
        (Settings(entropy_min_seen=4), []),
    ],
)
def test_entropy_warnings(simple, colour_words, settings, kinds):
    stats = calculate_entropy_stats(simple, words_for(simple, colour_words))
    warnings = entropy_warnings(stats, settings)

    assert [w.kind for w in warnings] == kinds
    for warning in warnings:
        assert warning.entropy < warning.minimum


def test_entropy_warnings_are_logged(simple, colour_words, log_messages):
    stats = calculate_entropy_stats(simple, words_for(simple, colour_words))
    entropy_warnings(stats, Settings(entropy_min_blind=100))

    assert any(m.startswith("for brute force attacks") for m in log_messages)
    assert any(m.startswith("for attacks assuming full knowledge") for m in log_messages)


@pytest.mark.parametrize(
    "value, expected",
    [
        (0, "0"),
        (27, "27"),
        (123, "1.23x10^2"),
        (98765, "9.87x10^4"),
        (2 ** 100, "1.26x10^30"),
    ],
)
def test_render_bigint(value, expected):
    assert render_bigint(value) == expected
