import pytest

from xkpasswd.dictionary import BasicDictionary, DefaultDictionary, SystemDictionary, read_word_file
from xkpasswd.errors import DictionaryError


@pytest.fixture
def word_file(tmp_path):
    path = tmp_path / "words.txt"
    path.write_text("# colours\nblue\n\nruby\n  mint  \nblue\n", encoding="utf-8")
    return path


def test_read_word_file_skips_comments_and_blanks(word_file):
    assert read_word_file(word_file) == ["blue", "ruby", "mint", "blue"]


def test_read_word_file_with_no_words(tmp_path):
    path = tmp_path / "empty.txt"
    path.write_text("# nothing here\n\n", encoding="utf-8")

    with pytest.raises(DictionaryError):
        read_word_file(path)


def test_basic_dictionary_from_list(log_messages):
    dictionary = BasicDictionary(["blue", "ruby", "blue", "r2d2", "mint"])

    assert dictionary.word_list() == ["blue", "ruby", "mint"]
    assert any("r2d2" in message for message in log_messages)
    assert dictionary.source() == "BasicDictionary (loaded from: 1 word list(s))"


def test_basic_dictionary_from_file(word_file):
    dictionary = BasicDictionary(word_file)

    assert dictionary.word_list() == ["blue", "ruby", "mint"]
    assert str(word_file) in dictionary.source()


def test_basic_dictionary_file_encoding(tmp_path):
    path = tmp_path / "latin1.txt"
    path.write_bytes("café\nblue\n".encode("latin-1"))

    assert BasicDictionary(path, encoding="latin-1").word_list() == ["café", "blue"]
    with pytest.raises(DictionaryError):
        BasicDictionary(path)


def test_basic_dictionary_missing_file(tmp_path):
    with pytest.raises(DictionaryError):
        BasicDictionary(tmp_path / "nope.txt")


def test_basic_dictionary_add_and_empty(word_file):
    dictionary = BasicDictionary(["jade"])
    dictionary.add_words(word_file).add_words(["ruby", "onyx"])

    assert dictionary.word_list() == ["jade", "blue", "ruby", "mint", "onyx"]
    assert "2 word list(s)" in dictionary.source()

    dictionary.empty()
    assert dictionary.word_list() == []
    assert dictionary.source() == "BasicDictionary"


def test_word_list_is_a_copy():
    dictionary = BasicDictionary(["blue", "ruby"])
    dictionary.word_list().append("mint")
    assert dictionary.word_list() == ["blue", "ruby"]


def test_system_dictionary(tmp_path, word_file):
    dictionary = SystemDictionary([tmp_path / "missing", word_file])

    assert dictionary.word_list() == ["blue", "ruby", "mint"]
    assert str(word_file) in dictionary.source()


def test_system_dictionary_not_found(tmp_path):
    with pytest.raises(DictionaryError):
        SystemDictionary([tmp_path / "missing"])


def test_default_dictionary():
    words = DefaultDictionary().word_list()

    assert len(words) > 1000
    assert len(set(words)) == len(words)
    assert all(word.isalpha() for word in words)
    assert DefaultDictionary().source() == "DefaultDictionary"
