class AnalysisError(Exception):
    """Raised when a circular analysis run fails."""


class RateLimitError(AnalysisError):
    """Raised on HTTP 429 from the proxy, after server-side retries ran out.

    Never retried again client-side.
    """


class ConfigurationError(AnalysisError):
    """Raised when the proxy reports a missing provider credential."""


class StubContentDetectedError(AnalysisError):
    """Raised when the response matches a known placeholder pattern."""
