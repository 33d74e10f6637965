from dataclasses import dataclass
from enum import Enum


class ExtractionState(str, Enum):
    """States of the two-pass PDF extraction."""

    DIRECT_EXTRACTING = "direct_extracting"
    OCR_FALLBACK = "ocr_fallback"
    DONE = "done"


@dataclass(frozen=True)
class ScanPolicy:
    """Thresholds deciding when a PDF is treated as scanned.

    page_min_chars is the primary signal: any page below it aborts the direct
    pass. document_min_chars only guards documents whose pages could not all
    be vouched for by the per-page check (e.g. zero-page files).
    """

    page_min_chars: int = 50
    document_min_chars: int = 100
    render_scale: float = 2.0

    def page_looks_scanned(self, page_text: str) -> bool:
        return len(page_text.strip()) < self.page_min_chars

    def document_looks_scanned(self, text: str) -> bool:
        return len(text.strip()) < self.document_min_chars


@dataclass(frozen=True)
class DirectPassOutcome:
    text: str
    pages_read: int
    suspected_scanned: bool
    all_pages_cleared: bool


def next_state(
    state: ExtractionState,
    policy: ScanPolicy,
    direct: DirectPassOutcome | None = None,
) -> ExtractionState:
    """Single decision edge of the extraction state machine."""
    if state is ExtractionState.DIRECT_EXTRACTING:
        if direct is None:
            raise ValueError("direct pass outcome is required to leave DIRECT_EXTRACTING")
        if direct.suspected_scanned:
            return ExtractionState.OCR_FALLBACK
        if not direct.all_pages_cleared and policy.document_looks_scanned(direct.text):
            return ExtractionState.OCR_FALLBACK
        return ExtractionState.DONE
    return ExtractionState.DONE
