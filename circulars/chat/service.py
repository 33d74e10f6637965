import threading
import time
from collections.abc import Callable
from typing import Any

from circulars.chat.client_base import BaseChatClient
from circulars.chat.exceptions import (
    InvalidChatRequestError,
    ProviderConfigurationError,
    ProviderError,
)
from circulars.chat.models import ROLES, ChatCompletion, ChatMessage
from circulars.chat.openai_client_adapter import OpenAIChatAdapter
from circulars.chat.retry import RetryPolicy, call_with_retry
from circulars.chat.stub import build_stub_completion
from circulars.config.settings import Settings
from circulars.logging.logger import Log

MISSING_KEY_ERROR = "OpenAI API key is not configured"
MISSING_KEY_HINT = "Please set the OPENAI_API_KEY environment variable in your .env file"


def parse_messages(raw: Any) -> list[ChatMessage]:
    """Validate the wire ``messages`` array.

    Raises:
        InvalidChatRequestError: if it is not a non-empty list of role/content objects.
    """
    if not isinstance(raw, list) or not raw:
        raise InvalidChatRequestError("messages must be a non-empty array")
    messages: list[ChatMessage] = []
    for index, item in enumerate(raw):
        if not isinstance(item, dict):
            raise InvalidChatRequestError(f"message at index {index} must be an object")
        role = item.get("role")
        content = item.get("content")
        if role not in ROLES:
            raise InvalidChatRequestError(f"message at index {index} has invalid role {role!r}")
        if not isinstance(content, str):
            raise InvalidChatRequestError(f"message at index {index} content must be a string")
        messages.append(ChatMessage(role=role, content=content))
    return messages


class ChatProxyService:
    """Forwards chat requests to the provider with a server-held credential."""

    def __init__(
        self,
        settings: Settings,
        *,
        client_factory: Callable[[str], BaseChatClient] | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._settings = settings
        self._client_factory = client_factory or self._default_client_factory
        self._sleep = sleep
        self._client: BaseChatClient | None = None
        self._client_key = ""
        self._lock = threading.Lock()
        self._policy = RetryPolicy(
            max_retries=settings.chat_max_retries,
            base_delay_ms=settings.chat_retry_base_delay_ms,
            max_delay_ms=settings.chat_retry_max_delay_ms,
        )

    @property
    def has_api_key(self) -> bool:
        return bool(self._settings.openai_api_key.strip())

    @property
    def client_ready(self) -> bool:
        return self._client is not None

    def complete(
        self,
        messages: list[ChatMessage],
        *,
        model: str | None = None,
        temperature: float | None = None,
    ) -> ChatCompletion:
        """Run one chat completion.

        Raises:
            InvalidChatRequestError: for an empty message list.
            ProviderConfigurationError: if no API key is configured.
            ProviderError: if the provider fails and dev stubs are disabled.
        """
        if not messages:
            raise InvalidChatRequestError("messages must be a non-empty array")
        if not self.has_api_key:
            raise ProviderConfigurationError(MISSING_KEY_ERROR)

        client = self._get_client()
        model_name = model or self._settings.openai_model_name
        temp = self._settings.openai_temperature if temperature is None else temperature
        try:
            completion = call_with_retry(
                lambda: client.create_chat_completion(
                    model=model_name,
                    temperature=temp,
                    messages=messages,
                ),
                self._policy,
                sleep=self._sleep,
            )
        except ProviderError as exc:
            Log.error(f"OpenAI error: {exc}")
            if self._settings.dev_stub_on_error:
                Log.warning("DEV_STUB_ON_ERROR enabled, returning stub completion")
                return build_stub_completion(messages, str(exc))
            raise
        Log.info(f"Chat completion {completion.id} via {model_name}")
        return completion

    def _get_client(self) -> BaseChatClient:
        # Late init: the key may have been configured after start-up.
        key = self._settings.openai_api_key.strip()
        with self._lock:
            if self._client is None or self._client_key != key:
                self._client = self._client_factory(key)
                self._client_key = key
                Log.info("OpenAI client initialized")
            return self._client

    def _default_client_factory(self, api_key: str) -> BaseChatClient:
        return OpenAIChatAdapter(
            api_key=api_key,
            timeout_seconds=self._settings.openai_timeout_seconds,
        )
