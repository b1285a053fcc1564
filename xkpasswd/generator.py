"""
The password generator instance.

An `XKPasswd` owns one config, one word cache, one random cache and the
entropy snapshot derived from the first two. Every change builds the new
state completely before swapping it in, so a failed change leaves the
instance exactly as it was.
"""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Iterable, Mapping

from loguru import logger

from .assembler import assemble_password
from .config import (
    PasswordConfig,
    clone_config,
    config_from_json,
    config_to_string,
    merge_overrides,
    required_random_draws,
    validate_config,
)
from .dictionary import BasicDictionary, DefaultDictionary, Dictionary
from .entropy import EntropyStats, calculate_entropy_stats, config_stats, entropy_warnings, render_bigint
from .errors import EntropyWarning
from .presets import check_presets, default_config, preset_config
from .random_cache import RandomCache
from .rng import RNG, best_available_rng
from .settings import Settings
from .words import WordCache

DictionarySource = Dictionary | Iterable[str] | str | Path
ConfigSource = PasswordConfig | Mapping[str, Any] | str


@dataclass(frozen=True)
class PasswordStats:
    dictionary_source: str
    dictionary_words_total: int
    dictionary_words_filtered: int
    dictionary_words_percent_available: int
    dictionary_filter_length_min: int
    dictionary_filter_length_max: int
    dictionary_contains_accents: bool
    password_length_min: int
    password_length_max: int
    password_random_numbers_required: int
    password_entropy_blind_min: float
    password_entropy_blind_max: float
    password_entropy_blind: float
    password_entropy_seen: float
    password_permutations_blind_min: int
    password_permutations_blind_max: int
    password_permutations_blind: int
    password_permutations_seen: int
    passwords_generated: int
    randomnumbers_cached: int
    randomnumbers_source: str

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def _as_config(source: ConfigSource) -> PasswordConfig:
    if isinstance(source, PasswordConfig):
        return clone_config(source)
    if isinstance(source, str):
        return config_from_json(source)
    return PasswordConfig.from_dict(source)


def _as_dictionary(source: DictionarySource, encoding: str = "utf-8") -> Dictionary:
    if isinstance(source, Dictionary):
        return source
    return BasicDictionary(source, encoding)


class XKPasswd:
    """
    Generates passwords from one config + dictionary + RNG combination.

    Config sources, in order of precedence: `config`, `config_json`,
    `preset` (with optional `preset_overrides`), else the DEFAULT preset.
    Dictionary sources: `dictionary`, `dictionary_list`, `dictionary_file`,
    else the bundled English list. The RNG defaults to the best one
    available on this machine.
    """

    def __init__(
        self,
        config: PasswordConfig | Mapping[str, Any] | None = None,
        *,
        config_json: str | None = None,
        preset: str | None = None,
        preset_overrides: Mapping[str, Any] | None = None,
        dictionary: Dictionary | None = None,
        dictionary_list: Iterable[str] | None = None,
        dictionary_file: str | Path | None = None,
        dictionary_file_encoding: str = "utf-8",
        rng: RNG | None = None,
        settings: Settings | None = None,
    ) -> None:
        self.settings = settings or Settings()
        if self.settings.debug:
            check_presets()

        if dictionary is not None:
            source = dictionary
        elif dictionary_list is not None:
            source = BasicDictionary(dictionary_list)
        elif dictionary_file is not None:
            source = BasicDictionary(dictionary_file, dictionary_file_encoding)
        else:
            source = DefaultDictionary()

        if config is not None:
            new_config = _as_config(config)
        elif config_json is not None:
            new_config = config_from_json(config_json)
        elif preset is not None:
            new_config = preset_config(preset, preset_overrides)
        else:
            new_config = default_config()

        words = self._build_words(source, new_config)
        self.passwords_generated = 0
        self.entropy_warnings: list[EntropyWarning] = []
        self._random = RandomCache(rng or best_available_rng(), required_random_draws(new_config))
        self._commit(new_config, source, words)
        if self.settings.debug:
            logger.debug(f"instantiated XKPasswd:\n{self.status()}")

    # --- state changes ---

    @staticmethod
    def _build_words(source: Dictionary, config: PasswordConfig) -> WordCache:
        return WordCache.build(
            source.source(),
            source.word_list(),
            config.word_length_min,
            config.word_length_max,
            config.allow_accents,
        )

    def _commit(self, config: PasswordConfig, source: Dictionary, words: WordCache) -> None:
        # everything that can fail happens before the first assignment
        validate_config(config)
        config_stats(config)
        stats = calculate_entropy_stats(config, words)
        warnings = entropy_warnings(stats, self.settings)

        self._config = config
        self._dictionary = source
        self._words = words
        self._entropy = stats
        self.entropy_warnings = warnings
        self._random.batch_size = required_random_draws(config)

    @property
    def config(self) -> PasswordConfig:
        """A copy of the loaded config; changing it does not affect the instance."""
        return clone_config(self._config)

    def set_config(self, config: ConfigSource) -> XKPasswd:
        """
        Load a new config (a PasswordConfig, a mapping or a JSON string).
        The word cache is re-filtered if the length limits or accent policy
        changed.
        """
        new_config = _as_config(config)
        words = self._words.refiltered(
            new_config.word_length_min,
            new_config.word_length_max,
            new_config.allow_accents,
        )
        self._commit(new_config, self._dictionary, words)
        return self

    def update_config(self, overrides: Mapping[str, Any], *, suppress_warnings: bool = False) -> XKPasswd:
        """Apply overrides on top of the loaded config."""
        return self.set_config(
            merge_overrides(self._config, overrides, suppress_warnings=suppress_warnings)
        )

    @property
    def dictionary(self) -> Dictionary:
        return self._dictionary

    def set_dictionary(self, source: DictionarySource, encoding: str = "utf-8") -> XKPasswd:
        """
        Load words from a Dictionary, a list of words or a file path.
        """
        new_source = _as_dictionary(source, encoding)
        words = self._build_words(new_source, self._config)
        self._commit(self._config, new_source, words)
        return self

    @property
    def rng(self) -> RNG:
        return self._random.rng

    @rng.setter
    def rng(self, rng: RNG) -> None:
        self._random.rng = rng

    @property
    def entropy_stats(self) -> EntropyStats:
        return self._entropy

    # --- generation ---

    def password(self) -> str:
        """
        One password. If the RNG fails nothing is returned and the
        generated-passwords counter is not incremented.
        """
        password = assemble_password(self._config, self._words.filtered, self._random)
        self.passwords_generated += 1
        return password

    def passwords(self, count: int) -> list[str]:
        if count < 1:
            raise ValueError(f"count must be at least 1, got {count}")
        return [self.password() for _ in range(count)]

    def passwords_json(self, count: int) -> str:
        """Passwords plus the headline entropy figures as a JSON string."""
        passwords = self.passwords(count)
        stats = self._entropy
        return json.dumps(
            {
                "passwords": passwords,
                "stats": {
                    "password_entropy_blind": stats.entropy_blind,
                    "password_permutations_blind": render_bigint(stats.permutations_blind),
                    "password_entropy_blind_min": stats.entropy_blind_min,
                    "password_permutations_blind_min": render_bigint(stats.permutations_blind_min),
                    "password_entropy_blind_max": stats.entropy_blind_max,
                    "password_permutations_blind_max": render_bigint(stats.permutations_blind_max),
                    "password_entropy_seen": stats.entropy_seen,
                    "password_permutations_seen": render_bigint(stats.permutations_seen),
                },
            },
            ensure_ascii=False,
        )

    # --- reporting ---

    def stats(self) -> PasswordStats:
        lengths = config_stats(self._config, suppress_warnings=True)
        return PasswordStats(
            dictionary_source=self._words.source,
            dictionary_words_total=len(self._words.full),
            dictionary_words_filtered=len(self._words.filtered),
            dictionary_words_percent_available=self._words.percent_available,
            dictionary_filter_length_min=self._words.filter_length_min,
            dictionary_filter_length_max=self._words.filter_length_max,
            dictionary_contains_accents=self._words.contains_accents,
            password_length_min=lengths.length_min,
            password_length_max=lengths.length_max,
            password_random_numbers_required=lengths.random_numbers_required,
            password_entropy_blind_min=self._entropy.entropy_blind_min,
            password_entropy_blind_max=self._entropy.entropy_blind_max,
            password_entropy_blind=self._entropy.entropy_blind,
            password_entropy_seen=self._entropy.entropy_seen,
            password_permutations_blind_min=self._entropy.permutations_blind_min,
            password_permutations_blind_max=self._entropy.permutations_blind_max,
            password_permutations_blind=self._entropy.permutations_blind,
            password_permutations_seen=self._entropy.permutations_seen,
            passwords_generated=self.passwords_generated,
            randomnumbers_cached=len(self._random),
            randomnumbers_source=self._random.rng.source(),
        )

    def status(self) -> str:
        """Multi-line human-readable report on dictionary, config, caches and strength."""
        s = self.stats()
        lines = [
            "*DICTIONARY*",
            f"Source: {s.dictionary_source}",
            f"# words: {s.dictionary_words_total}",
            f"# words of valid length: {s.dictionary_words_filtered} "
            f"({s.dictionary_words_percent_available}%)",
            f"Contains Accented Characters: {'YES' if s.dictionary_contains_accents else 'NO'}",
            "",
            "*CONFIG*",
            config_to_string(self._config).rstrip("\n"),
            "",
            "*RANDOM NUMBER CACHE*",
            f"Random Number Generator: {s.randomnumbers_source}",
            f"# in cache: {s.randomnumbers_cached}",
            "",
            "*PASSWORD STATISTICS*",
        ]
        if s.password_length_min == s.password_length_max:
            lines += [
                f"Password length: {s.password_length_max}",
                "Permutations (brute-force): "
                f"{render_bigint(s.password_permutations_blind_max)}",
            ]
        else:
            lines += [
                f"Password length: between {s.password_length_min} & {s.password_length_max}",
                "Permutations (brute-force): between "
                f"{render_bigint(s.password_permutations_blind_min)} & "
                f"{render_bigint(s.password_permutations_blind_max)} "
                f"(average {render_bigint(s.password_permutations_blind)})",
            ]
        lines.append(
            "Permutations (given dictionary & config): "
            f"{render_bigint(s.password_permutations_seen)}"
        )
        if s.password_length_min == s.password_length_max:
            lines.append(f"Entropy (brute-force): {s.password_entropy_blind_max:.2f}bits")
        else:
            lines.append(
                f"Entropy (brute-force): between {s.password_entropy_blind_min:.2f}bits "
                f"and {s.password_entropy_blind_max:.2f}bits "
                f"(average {s.password_entropy_blind:.2f}bits)"
            )
        lines += [
            f"Entropy (given dictionary & config): {s.password_entropy_seen:.2f}bits",
            f"# Random Numbers needed per-password: {s.password_random_numbers_required}",
            f"Passwords Generated: {s.passwords_generated}",
        ]
        return "\n".join(lines) + "\n"

    def caches_state(self) -> str:
        return (
            f"Loaded Words: {len(self._words.filtered)} "
            f"(out of {len(self._words.full)} loaded from the source)\n"
            f"Cached Random Numbers: {len(self._random)}\n"
        )
