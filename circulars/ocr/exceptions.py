class OcrError(Exception):
    """Raised when optical character recognition fails."""


class OcrEngineNotReadyError(OcrError):
    """Raised when the OCR engine has not finished loading.

    Transient: show a "still loading" state instead of a hard failure.
    """
