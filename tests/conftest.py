"""Shared fixtures for the integrity_tool tests."""

import logging
from types import SimpleNamespace

import pytest

from integrity_tool.core.config import Config

FILLER_SENTENCES = [
    "The river ecosystem supports many different species of fish and birds",
    "Local farmers depend on clean water for their crops every single season",
    "Seasonal flooding changes the shape of the riverbank over several years",
    "Volunteers measured water quality at twelve sampling points along the valley",
    "The community meeting discussed practical ways to protect the wetland habitat",
    "Children from nearby schools planted trees beside the eroded northern bank",
    "Water temperature readings were recorded each morning during the summer months",
    "Careful observation showed that insect populations recovered after the cleanup",
]


def make_filler(repeat: int = 2) -> str:
    """Plain text with no plagiarism indicators and even sentence lengths."""
    return " ".join(f"{sentence}." for sentence in FILLER_SENTENCES * repeat)


class FakeChatClient:
    """Stands in for ChatClient: returns canned content or raises."""

    def __init__(self, content: str = "", error: Exception = None):
        self.content = content
        self.error = error
        self.calls = []

    def complete(self, system_prompt: str, user_prompt: str) -> str:
        self.calls.append(SimpleNamespace(system=system_prompt, user=user_prompt))
        if self.error is not None:
            raise self.error
        return self.content


@pytest.fixture
def config():
    """Offline configuration: placeholder embeddings, no model credentials."""
    return Config(openai_api_key="", embedding_provider="hash", retry_delay=0.0)


@pytest.fixture
def filler_text():
    return make_filler()


@pytest.fixture(autouse=True)
def reset_package_logger():
    """Drop handlers the CLI attaches so they never outlive a test's streams."""
    yield
    logger = logging.getLogger('integrity_tool')
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)
