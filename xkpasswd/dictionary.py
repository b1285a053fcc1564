"""
Word sources.

Anything with `word_list()` and `source()` can feed the generator; the
classes here cover the usual cases: an explicit list, a word file, the
system dictionary, and the English list bundled with the package.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from importlib import resources
from pathlib import Path
from typing import Iterable, Sequence

from loguru import logger

from .errors import DictionaryError
from .words import is_word

SYSTEM_DICTIONARY_PATHS = (Path("/usr/share/dict/words"), Path("/usr/dict/words"))


class Dictionary(ABC):
    @abstractmethod
    def word_list(self) -> Sequence[str]:
        """All the words this source supplies."""

    def source(self) -> str:
        return type(self).__name__


def read_word_file(path: Path, encoding: str = "utf-8") -> list[str]:
    """
    One word per line. Blank lines and lines starting with '#' are skipped.
    """
    try:
        text = path.read_text(encoding=encoding)
    except (OSError, UnicodeDecodeError) as exc:
        raise DictionaryError(f"failed to read dictionary file {path}: {exc}") from exc

    words = []
    for line in text.splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        words.append(line)
    if not words:
        raise DictionaryError(f"file {path} contained no valid words")
    return words


class BasicDictionary(Dictionary):
    """
    Words from lists and/or files, de-duplicated. Entries that are not made
    of letters only are skipped with a warning.
    """

    def __init__(
        self,
        words: Iterable[str] | str | Path | None = None,
        encoding: str = "utf-8",
    ) -> None:
        self._words: list[str] = []
        self._seen: set[str] = set()
        self._files: list[str] = []
        self._num_lists = 0
        if words is not None:
            self.add_words(words, encoding)

    def word_list(self) -> list[str]:
        return list(self._words)

    def add_words(self, words: Iterable[str] | str | Path, encoding: str = "utf-8") -> BasicDictionary:
        if isinstance(words, (str, Path)):
            path = Path(words)
            if not path.is_file():
                raise DictionaryError(f"file {path} not found")
            new_words: Iterable[str] = read_word_file(path, encoding)
            self._files.append(str(path))
        else:
            new_words = words
            self._num_lists += 1

        for word in new_words:
            if not is_word(word):
                logger.warning(f"skipping invalid word: {word!r}")
                continue
            if word not in self._seen:
                self._seen.add(word)
                self._words.append(word)
        return self

    def empty(self) -> BasicDictionary:
        self._words = []
        self._seen = set()
        self._files = []
        self._num_lists = 0
        return self

    def source(self) -> str:
        parts = []
        if self._num_lists:
            parts.append(f"{self._num_lists} word list(s)")
        if self._files:
            parts.append("the file(s) " + ", ".join(self._files))
        if not parts:
            return super().source()
        return f"{super().source()} (loaded from: {' and '.join(parts)})"


class SystemDictionary(Dictionary):
    """The first system word list found on this machine."""

    def __init__(self, paths: Sequence[Path] = SYSTEM_DICTIONARY_PATHS) -> None:
        for path in paths:
            if Path(path).is_file():
                self.file_path = Path(path)
                break
        else:
            raise DictionaryError("no system dictionary found")
        self._dictionary = BasicDictionary(self.file_path)

    def word_list(self) -> list[str]:
        return self._dictionary.word_list()

    def source(self) -> str:
        return f"{super().source()} ({self.file_path})"


class DefaultDictionary(Dictionary):
    """The English word list shipped inside the package."""

    RESOURCE = "words_en.txt"

    def __init__(self) -> None:
        data = resources.files("xkpasswd").joinpath("data", self.RESOURCE)
        with resources.as_file(data) as path:
            self._dictionary = BasicDictionary(path)

    def word_list(self) -> list[str]:
        return self._dictionary.word_list()
