"""Per-user circular session: upload, extraction, gate, then on-demand analysis.

Each stage either fully succeeds or resets its own output. Selecting a new
file starts a new generation; results that resolve for an older generation
are dropped instead of applied.
"""

import threading
from dataclasses import dataclass
from pathlib import Path

import httpx

from circulars.analysis.client import AnalysisClient
from circulars.analysis.exceptions import AnalysisError, RateLimitError
from circulars.analysis.models import Action, AnalysisOutcome
from circulars.config.settings import Settings
from circulars.documents.exceptions import DocumentValidationError, NotACircularError
from circulars.documents.models import ExtractionResult, UploadedDocument
from circulars.extraction.exceptions import ExtractionError
from circulars.extraction.remote_client import RemoteExtractionClient
from circulars.logging.logger import Log
from circulars.notifications.store import NotificationStore
from circulars.ocr.base import BaseOcrEngine
from circulars.ocr.exceptions import OcrEngineNotReadyError
from circulars.processor.exceptions import StaleResultError
from circulars.processor.processor import (
    Processor,
    build_extraction_engine,
    build_workspace_processor,
)

OCR_LOADING_MESSAGE = "OCR engine is still loading. Please retry in a moment."


@dataclass
class WorkspaceState:
    file_name: str = ""
    extraction: ExtractionResult | None = None
    analysis: AnalysisOutcome | None = None
    error: str = ""
    ocr_loading: bool = False

    @property
    def extracted_text(self) -> str:
        return self.extraction.text if self.extraction is not None else ""

    @property
    def applicable(self) -> bool | None:
        return self.analysis.applicable if self.analysis is not None else None


class CircularWorkspace:
    def __init__(
        self,
        processor: Processor,
        analysis_client: AnalysisClient,
        notifications: NotificationStore,
    ) -> None:
        self._processor = processor
        self._analysis_client = analysis_client
        self._notifications = notifications
        self._lock = threading.Lock()
        self._generation = 0
        self.state = WorkspaceState()

    def select_file(self, document: UploadedDocument) -> int:
        """Start a new generation and clear everything derived from the old file."""
        with self._lock:
            self._generation += 1
            self.state = WorkspaceState(file_name=document.filename)
            return self._generation

    def upload(self, document: UploadedDocument) -> ExtractionResult | None:
        """Select, extract and gate a file. Returns None on rejection or staleness."""
        generation = self.select_file(document)
        return self.run_extraction(generation, document)

    def run_extraction(self, generation: int, document: UploadedDocument) -> ExtractionResult | None:
        try:
            context = self._processor.process(document)
        except (DocumentValidationError, ExtractionError, OcrEngineNotReadyError) as exc:
            self._apply_extraction_failure(generation, exc)
            return None
        try:
            self._apply_extraction(generation, context.extraction)
        except StaleResultError:
            Log.info(f"Discarding stale extraction for '{document.filename}'")
            return None
        self._notifications.add("Circular Detected", "Processing circular document...")
        return context.extraction

    def analyze(self) -> AnalysisOutcome | None:
        """User-triggered analysis; replaces any previous result wholesale."""
        with self._lock:
            generation = self._generation
            text = self.state.extracted_text
            self.state.analysis = None
            self.state.error = ""
        try:
            outcome = self._analysis_client.analyze(text)
        except (AnalysisError, DocumentValidationError) as exc:
            with self._lock:
                if generation == self._generation:
                    self.state.analysis = None
                    self.state.error = str(exc)
            Log.error(f"AI analysis failed: {exc}")
            if not isinstance(exc, RateLimitError):
                # The analysis client already recorded the rate-limit notice.
                self._notifications.add("AI analysis failed", str(exc), type="error")
            return None
        with self._lock:
            if generation != self._generation:
                Log.info("Discarding analysis for a replaced file")
                return None
            self.state.analysis = outcome
        return outcome

    def proposed_actions(self) -> list[Action]:
        """Actions eligible for task creation: structured and applicable only.

        Raises:
            DocumentValidationError: if there is no structured analysis or the
                circular is not applicable.
        """
        analysis = self.state.analysis
        if analysis is None or analysis.structured is None:
            raise DocumentValidationError(
                "Run analysis first: tasks require a structured analysis result."
            )
        if analysis.applicable is not True:
            raise DocumentValidationError("Not Applicable: tasks will not be created.")
        return list(analysis.structured.actions)

    def reset(self) -> None:
        with self._lock:
            self._generation += 1
            self.state = WorkspaceState()

    def _apply_extraction(self, generation: int, extraction: ExtractionResult | None) -> None:
        with self._lock:
            if generation != self._generation:
                raise StaleResultError(f"generation {generation} superseded by {self._generation}")
            self.state.extraction = extraction
            self.state.error = ""

    def _apply_extraction_failure(self, generation: int, exc: Exception) -> None:
        with self._lock:
            if generation != self._generation:
                Log.info(f"Ignoring failure of a replaced file: {exc}")
                return
            self.state.extraction = None
            self.state.analysis = None
            if isinstance(exc, OcrEngineNotReadyError):
                self.state.ocr_loading = True
                self.state.error = OCR_LOADING_MESSAGE
            else:
                self.state.error = str(exc)
            if isinstance(exc, DocumentValidationError):
                # Validation failures reset only the file input.
                self.state.file_name = ""
        Log.warning(f"Upload rejected: {exc}")
        if isinstance(exc, NotACircularError):
            self._notifications.add("Invalid Circular Document", str(exc), type="error")


def build_workspace(
    settings: Settings,
    ocr_engine: BaseOcrEngine,
    *,
    http_client: httpx.Client | None = None,
) -> CircularWorkspace:
    """Client-side session: PDFs and images locally, Word files and analysis via the API."""
    http_client = http_client or httpx.Client(
        base_url=settings.api_base_url,
        timeout=settings.openai_timeout_seconds * (settings.chat_max_retries + 1),
    )
    notifications = NotificationStore(Path(settings.notifications_path))
    engine = build_extraction_engine(settings, ocr_engine, with_word=False)
    processor = build_workspace_processor(engine, RemoteExtractionClient(http_client))
    analysis_client = AnalysisClient(
        http_client,
        model=settings.openai_model_name,
        temperature=settings.openai_temperature,
        max_chars=settings.analysis_max_chars,
        sample_chars=settings.analysis_sample_chars,
        notifications=notifications,
    )
    return CircularWorkspace(processor, analysis_client, notifications)
