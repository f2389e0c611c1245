"""OpenAI-compatible chat client with retry handling and error translation."""

from typing import Optional

import openai
from openai import OpenAI
from tenacity import retry, retry_if_exception, stop_after_attempt, wait_exponential

from .config import Config
from .errors import ProviderUnavailableError
from .log import base_logger

logger = base_logger.getChild('client')

QUOTA_CODES = {"insufficient_quota", "billing_not_active"}


def _is_quota_error(exc: BaseException) -> bool:
    return getattr(exc, 'code', None) in QUOTA_CODES


def is_transient_error(exc: BaseException) -> bool:
    """Whether a failed request is worth retrying."""
    if isinstance(exc, openai.APIConnectionError):
        return True
    if isinstance(exc, openai.RateLimitError):
        return not _is_quota_error(exc)
    return isinstance(exc, openai.InternalServerError)


def translate_openai_error(exc: Exception) -> ProviderUnavailableError:
    """
    Map an exception from the openai client to a ProviderUnavailableError.

    Args:
        exc: Exception raised by the openai client

    Returns:
        ProviderUnavailableError carrying a reason tag
    """
    status_code = getattr(exc, 'status_code', None)

    if _is_quota_error(exc):
        return ProviderUnavailableError(
            "quota", "API quota exceeded. Please check your billing.", status_code)
    if isinstance(exc, (openai.AuthenticationError, openai.PermissionDeniedError)):
        return ProviderUnavailableError(
            "auth", "Invalid API key. Please check your configuration.", status_code)
    if isinstance(exc, openai.RateLimitError):
        return ProviderUnavailableError(
            "rate_limit", "Rate limit exceeded. Please try again shortly.", status_code)
    if isinstance(exc, openai.APITimeoutError):
        return ProviderUnavailableError("timeout", "Request to the model provider timed out.")
    if isinstance(exc, openai.APIConnectionError):
        return ProviderUnavailableError("connection", f"Could not reach the model provider: {exc}")
    return ProviderUnavailableError("api_error", f"Model provider error: {exc}", status_code)


def create_openai_client(config: Config, max_retries: int = 0) -> OpenAI:
    """Build an OpenAI client from configuration."""
    return OpenAI(
        api_key=config.openai_api_key,
        base_url=config.openai_base_url,
        timeout=config.llm_timeout,
        max_retries=max_retries
    )


class ChatClient:
    """Sends one system + user prompt pair to a chat completions endpoint."""

    def __init__(self, config: Config, client: Optional[OpenAI] = None):
        """
        Initialize the chat client.

        Args:
            config: Configuration with API and retry settings
            client: Preconfigured OpenAI client (built from config if omitted)
        """
        self.config = config
        self.model = config.chat_model
        self.client = client or create_openai_client(config)

        api_key_display = ('***' + config.openai_api_key[-4:]
                           if len(config.openai_api_key) > 4
                           else '***')
        logger.debug(f"Chat client for {config.openai_base_url} (model={self.model}, key={api_key_display})")

        self._create_with_retry = retry(
            retry=retry_if_exception(is_transient_error),
            stop=stop_after_attempt(config.llm_max_retries + 1),
            wait=wait_exponential(multiplier=config.retry_delay, max=10),
            before_sleep=self._log_retry,
            reraise=True
        )(self._create)

    @staticmethod
    def _log_retry(retry_state) -> None:
        exc = retry_state.outcome.exception()
        logger.warning(f"Model call failed (attempt {retry_state.attempt_number}): {exc}")

    def _create(self, system_prompt: str, user_prompt: str) -> str:
        kwargs = {}
        if self.config.json_mode:
            kwargs['response_format'] = {"type": "json_object"}

        completion = self.client.chat.completions.create(
            model=self.model,
            messages=[
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt}
            ],
            temperature=self.config.temperature,
            max_tokens=self.config.max_tokens,
            **kwargs
        )
        # Filtered completions can come back without choices
        if not completion.choices or completion.choices[0].message is None:
            logger.warning("Model returned no choices")
            return ""
        return completion.choices[0].message.content or ""

    def complete(self, system_prompt: str, user_prompt: str) -> str:
        """
        Request a completion.

        Args:
            system_prompt: System instruction
            user_prompt: User message

        Returns:
            Raw message content from the model

        Raises:
            ProviderUnavailableError: the provider failed after retries
        """
        try:
            return self._create_with_retry(system_prompt, user_prompt)
        except openai.OpenAIError as e:
            raise translate_openai_error(e) from e
