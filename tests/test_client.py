"""Tests for the chat client retry and error handling."""

from types import SimpleNamespace

import httpx
import openai
import pytest

from integrity_tool.core.client import ChatClient, translate_openai_error
from integrity_tool.core.config import Config
from integrity_tool.core.errors import ProviderUnavailableError
from integrity_tool.core.synthesizer import AnalysisSynthesizer, fallback_analysis

from conftest import make_filler

REQUEST = httpx.Request("POST", "https://api.test/v1/chat/completions")


def status_error(cls, status, body=None):
    return cls("request failed", response=httpx.Response(status, request=REQUEST), body=body)


def completion(content):
    return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=content))])


def fake_openai(outcomes):
    """An object shaped like OpenAI() that replays outcomes in order."""
    calls = []

    def create(**kwargs):
        calls.append(kwargs)
        outcome = outcomes[min(len(calls), len(outcomes)) - 1]
        if isinstance(outcome, Exception):
            raise outcome
        return completion(outcome)

    client = SimpleNamespace(chat=SimpleNamespace(completions=SimpleNamespace(create=create)))
    return client, calls


@pytest.fixture
def retry_config():
    return Config(openai_api_key="sk-test-1234", llm_max_retries=2, retry_delay=0.0)


def test_complete_returns_content(retry_config):
    client, calls = fake_openai(['{"status": "ok"}'])
    reply = ChatClient(retry_config, client=client).complete("system", "user")

    assert reply == '{"status": "ok"}'
    assert calls[0]["messages"][0] == {"role": "system", "content": "system"}
    assert calls[0]["response_format"] == {"type": "json_object"}
    assert calls[0]["model"] == retry_config.chat_model


def test_json_mode_off():
    config = Config(openai_api_key="sk-test", json_mode=False)
    client, calls = fake_openai(["{}"])
    ChatClient(config, client=client).complete("system", "user")
    assert "response_format" not in calls[0]


def test_retries_transient_errors(retry_config):
    """A timeout followed by success is retried transparently."""
    client, calls = fake_openai([openai.APITimeoutError(request=REQUEST), "{}"])
    reply = ChatClient(retry_config, client=client).complete("system", "user")

    assert reply == "{}"
    assert len(calls) == 2


def test_gives_up_after_retry_budget(retry_config):
    client, calls = fake_openai([openai.APITimeoutError(request=REQUEST)])

    with pytest.raises(ProviderUnavailableError) as exc_info:
        ChatClient(retry_config, client=client).complete("system", "user")

    assert exc_info.value.reason == "timeout"
    assert len(calls) == retry_config.llm_max_retries + 1


def test_auth_error_not_retried(retry_config):
    client, calls = fake_openai([status_error(openai.AuthenticationError, 401)])

    with pytest.raises(ProviderUnavailableError) as exc_info:
        ChatClient(retry_config, client=client).complete("system", "user")

    assert exc_info.value.reason == "auth"
    assert len(calls) == 1


def test_quota_error_not_retried(retry_config):
    error = status_error(openai.RateLimitError, 429, body={"code": "insufficient_quota"})
    client, calls = fake_openai([error])

    with pytest.raises(ProviderUnavailableError) as exc_info:
        ChatClient(retry_config, client=client).complete("system", "user")

    assert exc_info.value.reason == "quota"
    assert len(calls) == 1


def test_rate_limit_retried(retry_config):
    client, calls = fake_openai([status_error(openai.RateLimitError, 429), "{}"])
    assert ChatClient(retry_config, client=client).complete("system", "user") == "{}"
    assert len(calls) == 2


@pytest.mark.parametrize("error,reason", [
    (status_error(openai.AuthenticationError, 401), "auth"),
    (status_error(openai.PermissionDeniedError, 403), "auth"),
    (status_error(openai.RateLimitError, 429), "rate_limit"),
    (status_error(openai.RateLimitError, 429, body={"code": "insufficient_quota"}), "quota"),
    (status_error(openai.InternalServerError, 500), "api_error"),
    (status_error(openai.BadRequestError, 400), "api_error"),
    (openai.APITimeoutError(request=REQUEST), "timeout"),
    (openai.APIConnectionError(request=REQUEST), "connection"),
])
def test_translate_openai_error(error, reason):
    assert translate_openai_error(error).reason == reason


@pytest.mark.parametrize("reply", [
    SimpleNamespace(choices=[]),
    SimpleNamespace(choices=None),
    SimpleNamespace(choices=[SimpleNamespace(message=None)]),
])
def test_empty_completion_returns_empty_content(retry_config, reply):
    client = SimpleNamespace(chat=SimpleNamespace(completions=SimpleNamespace(create=lambda **kwargs: reply)))
    assert ChatClient(retry_config, client=client).complete("system", "user") == ""


def test_empty_completion_falls_back(retry_config):
    """A completion without choices yields the rule-based analysis."""
    client = SimpleNamespace(chat=SimpleNamespace(completions=SimpleNamespace(
        create=lambda **kwargs: SimpleNamespace(choices=[]))))
    synthesizer = AnalysisSynthesizer(retry_config, client=ChatClient(retry_config, client=client))
    text = make_filler()

    assert synthesizer.synthesize(text, []) == fallback_analysis(len(text.split()))
