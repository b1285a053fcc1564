import sys

import pytest
from loguru import logger

from xkpasswd.generator import XKPasswd
from xkpasswd.settings import Settings, configure_logging

from .stubs import FixedRNG


@pytest.fixture
def records():
    captured = []
    handler_id = logger.add(lambda message: captured.append(message.record), level="DEBUG")
    yield captured
    logger.remove(handler_id)


@pytest.fixture
def restore_logging():
    yield
    logger.remove()
    logger.add(lambda message: sys.stderr.write(message))
    logger.disable("xkpasswd")


def test_settings_from_environment(monkeypatch):
    monkeypatch.setenv("XKPASSWD_ENTROPY_MIN_SEEN", "60")
    monkeypatch.setenv("XKPASSWD_ENTROPY_WARNINGS", "BLIND")
    settings = Settings()

    assert settings.entropy_min_seen == 60
    assert settings.warn_blind
    assert not settings.warn_seen


def test_library_is_silent_by_default(simple_config, colour_words, records):
    # the low entropy of three colour words would otherwise be warned about
    generator = XKPasswd(
        simple_config,
        dictionary_list=colour_words,
        rng=FixedRNG(0.0),
        settings=Settings(debug=False),
    )
    generator.password()

    assert generator.entropy_warnings
    assert [r for r in records if r["name"].startswith("xkpasswd")] == []


@pytest.mark.usefixtures("restore_logging")
def test_configure_logging_enables_the_package(simple_config, colour_words):
    settings = Settings(debug=True, entropy_warnings="NONE")
    configure_logging(settings)
    captured = []
    logger.add(lambda message: captured.append(message.record["level"].name), level="DEBUG")

    XKPasswd(simple_config, dictionary_list=colour_words, rng=FixedRNG(0.0), settings=settings).password()

    assert "DEBUG" in captured


@pytest.mark.usefixtures("restore_logging")
def test_configure_logging_hides_debug_records_by_default(simple_config, colour_words, capsys):
    settings = Settings(entropy_warnings="NONE")
    configure_logging(settings)

    XKPasswd(simple_config, dictionary_list=colour_words, rng=FixedRNG(0.0), settings=settings).password()

    assert "DEBUG" not in capsys.readouterr().err
