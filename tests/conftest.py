import pytest
from loguru import logger

from xkpasswd.settings import Settings


@pytest.fixture
def quiet_settings():
    return Settings(entropy_warnings="NONE")


@pytest.fixture
def log_messages():
    """Messages logged at WARNING or above while the test runs."""
    messages = []
    logger.enable("xkpasswd")
    handler_id = logger.add(lambda message: messages.append(message.record["message"]), level="WARNING")
    yield messages
    logger.remove(handler_id)
    logger.disable("xkpasswd")


@pytest.fixture
def colour_words():
    return ["blue", "ruby", "mint"]


@pytest.fixture
def simple_config():
    return {
        "num_words": 3,
        "word_length_min": 4,
        "word_length_max": 4,
        "separator_character": "-",
        "padding_type": "NONE",
        "case_transform": "NONE",
        "padding_digits_before": 0,
        "padding_digits_after": 0,
    }
