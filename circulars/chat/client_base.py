from abc import ABC, abstractmethod

from circulars.chat.models import ChatCompletion, ChatMessage


class BaseChatClient(ABC):
    """Contract for provider-specific chat completion clients."""

    @abstractmethod
    def create_chat_completion(
        self,
        *,
        model: str,
        temperature: float,
        messages: list[ChatMessage],
    ) -> ChatCompletion:
        """Return the first choice of the provider response.

        Raises:
            ProviderError: on any provider or network failure.
        """
