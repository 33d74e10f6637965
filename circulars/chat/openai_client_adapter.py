import httpx
import openai

from circulars.chat.client_base import BaseChatClient
from circulars.chat.exceptions import ProviderError
from circulars.chat.models import ChatCompletion, ChatMessage


class OpenAIChatAdapter(BaseChatClient):
    """Chat client built on the OpenAI chat completions API."""

    def __init__(
        self,
        *,
        api_key: str,
        timeout_seconds: int,
        base_url: str | None = None,
    ) -> None:
        self._client = openai.OpenAI(
            api_key=api_key,
            timeout=timeout_seconds,
            base_url=base_url,
            max_retries=0,
        )

    def create_chat_completion(
        self,
        *,
        model: str,
        temperature: float,
        messages: list[ChatMessage],
    ) -> ChatCompletion:
        try:
            response = self._client.chat.completions.create(
                model=model,
                temperature=temperature,
                messages=[m.to_dict() for m in messages],  # type: ignore[misc]
            )
        except openai.APIStatusError as exc:
            raise ProviderError(exc.message, status_code=exc.status_code) from exc
        except (openai.APIConnectionError, httpx.ConnectError, httpx.TimeoutException) as exc:
            raise ProviderError(f"AI provider network error: {exc}") from exc
        except openai.APIError as exc:
            raise ProviderError(f"AI provider API error: {exc}") from exc

        if not response.choices:
            raise ProviderError("AI returned no choices")
        message = response.choices[0].message
        usage = response.usage.model_dump() if response.usage is not None else None
        return ChatCompletion(
            message=ChatMessage(role=message.role, content=message.content or ""),
            id=response.id,
            usage=usage,
        )
