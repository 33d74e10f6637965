class ChatProxyError(Exception):
    """Base exception for the model proxy."""


class InvalidChatRequestError(ChatProxyError):
    """Raised when the chat payload is malformed."""


class ProviderConfigurationError(ChatProxyError):
    """Raised when the server-held provider credential is missing."""


class ProviderError(ChatProxyError):
    """Raised when the model provider call fails.

    status_code is the provider's HTTP status, or None for network failures.
    """

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
