class ProcessorError(Exception):
    """Base exception for pipeline orchestration errors."""


class StaleResultError(ProcessorError):
    """Raised internally when a result belongs to a file the user already replaced."""
