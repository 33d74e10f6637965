import json
from pathlib import Path
from unittest.mock import MagicMock

import httpx
import pytest

from circulars.analysis.client import AnalysisClient
from circulars.analysis.exceptions import AnalysisError, RateLimitError
from circulars.analysis.models import (
    Action,
    AnalysisMeta,
    AnalysisOutcome,
    AnalysisResult,
    BankContext,
    UnstructuredAnalysis,
)
from circulars.config.settings import Settings
from circulars.documents.detector import DOCX_MIME_TYPE
from circulars.documents.exceptions import DocumentValidationError, NotACircularError
from circulars.documents.models import ExtractionResult, UploadedDocument
from circulars.extraction.exceptions import EXTRACTION_FAILED_MESSAGE, ExtractionError
from circulars.notifications.store import NotificationStore
from circulars.ocr.base import BaseOcrEngine
from circulars.ocr.exceptions import OcrEngineNotReadyError
from circulars.processor.pipeline import PipelineContext
from circulars.processor.processor import (
    Processor,
    build_extraction_engine,
    build_workspace_processor,
)
from circulars.processor.workspace import OCR_LOADING_MESSAGE, CircularWorkspace, build_workspace


def _document(name: str = "circular.pdf", content: bytes = b"%PDF") -> UploadedDocument:
    return UploadedDocument(content=content, mime_type="application/pdf", filename=name)


def _structured(applicable: bool | None) -> AnalysisOutcome:
    return AnalysisOutcome(
        structured=AnalysisResult(
            meta=AnalysisMeta(regulator="RBI", bank_context=BankContext(applicable=applicable)),
            summary="KYC update",
            actions=[Action(title="Revise KYC policy")],
        )
    )


def _workspace(
    processor: MagicMock | Processor | None = None,
) -> tuple[CircularWorkspace, MagicMock, NotificationStore]:
    analysis = MagicMock(spec=AnalysisClient)
    store = NotificationStore()
    if processor is None:
        processor = MagicMock(spec=Processor)
    return CircularWorkspace(processor, analysis, store), analysis, store


def _processor_returning(text: str) -> MagicMock:
    processor = MagicMock(spec=Processor)
    processor.process.side_effect = lambda document: PipelineContext(
        document=document,
        extraction=ExtractionResult(text=text, page_count=1),
    )
    return processor


class TestUpload:
    def test_native_rbi_circular_end_to_end(self, circular_pdf_bytes: bytes) -> None:
        ocr = MagicMock(spec=BaseOcrEngine)
        processor = build_workspace_processor(build_extraction_engine(Settings(), ocr))
        workspace, _, store = _workspace(processor)

        result = workspace.upload(_document(content=circular_pdf_bytes))

        assert result is not None
        assert result.used_ocr is False
        assert "RESERVE BANK OF INDIA" in workspace.state.extracted_text
        assert workspace.state.error == ""
        assert store.items[0].title == "Circular Detected"
        ocr.recognize.assert_not_called()

    def test_not_a_circular_resets_file_and_notifies(self) -> None:
        processor = MagicMock(spec=Processor)
        processor.process.side_effect = NotACircularError("does not appear to be a circular")
        workspace, _, store = _workspace(processor)

        assert workspace.upload(_document("resume.pdf")) is None

        assert workspace.state.file_name == ""
        assert workspace.state.extraction is None
        assert "does not appear" in workspace.state.error
        assert store.items[0].title == "Invalid Circular Document"

    def test_extraction_failure_surfaces_message(self) -> None:
        processor = MagicMock(spec=Processor)
        processor.process.side_effect = ExtractionError(EXTRACTION_FAILED_MESSAGE)
        workspace, _, store = _workspace(processor)

        workspace.upload(_document())

        assert workspace.state.error == EXTRACTION_FAILED_MESSAGE
        assert workspace.state.extraction is None
        assert workspace.state.file_name == "circular.pdf"
        assert store.items == []

    def test_ocr_not_ready_is_transient(self) -> None:
        processor = MagicMock(spec=Processor)
        processor.process.side_effect = OcrEngineNotReadyError("OCR engine not ready")
        workspace, _, _ = _workspace(processor)

        workspace.upload(_document())

        assert workspace.state.ocr_loading is True
        assert workspace.state.error == OCR_LOADING_MESSAGE

    def test_new_upload_clears_previous_analysis(self) -> None:
        workspace, analysis, _ = _workspace(_processor_returning("Circular text"))
        analysis.analyze.return_value = _structured(True)
        workspace.upload(_document("first.pdf"))
        workspace.analyze()
        assert workspace.state.analysis is not None

        workspace.upload(_document("second.pdf"))
        assert workspace.state.analysis is None
        assert workspace.state.file_name == "second.pdf"


class TestStaleResults:
    def test_result_of_replaced_file_is_dropped(self) -> None:
        processor = MagicMock(spec=Processor)
        workspace, _, store = _workspace(processor)

        first = _document("first.pdf")
        first_generation = workspace.select_file(first)
        second = _document("second.pdf")

        def process(document: UploadedDocument) -> PipelineContext:
            text = "second circular" if document is second else "first circular"
            return PipelineContext(document=document, extraction=ExtractionResult(text=text))

        processor.process.side_effect = process
        workspace.upload(second)
        assert workspace.run_extraction(first_generation, first) is None

        assert workspace.state.file_name == "second.pdf"
        assert workspace.state.extracted_text == "second circular"
        assert len(store.items) == 1

    def test_failure_of_replaced_file_is_ignored(self) -> None:
        processor = MagicMock(spec=Processor)
        workspace, _, _ = _workspace(processor)
        old_generation = workspace.select_file(_document("old.pdf"))
        processor.process.side_effect = lambda d: PipelineContext(
            document=d, extraction=ExtractionResult(text="current circular")
        )
        workspace.upload(_document("current.pdf"))

        processor.process.side_effect = ExtractionError("late failure")
        workspace.run_extraction(old_generation, _document("old.pdf"))

        assert workspace.state.error == ""
        assert workspace.state.extracted_text == "current circular"

    def test_analysis_of_replaced_file_is_dropped(self) -> None:
        workspace, analysis, _ = _workspace(_processor_returning("Circular text"))
        workspace.upload(_document("first.pdf"))

        def analyze(text: str) -> AnalysisOutcome:
            workspace.select_file(_document("second.pdf"))
            return _structured(True)

        analysis.analyze.side_effect = analyze
        assert workspace.analyze() is None
        assert workspace.state.analysis is None


class TestAnalyze:
    def test_replaces_analysis_wholesale(self) -> None:
        workspace, analysis, _ = _workspace(_processor_returning("Circular text"))
        workspace.upload(_document())
        analysis.analyze.return_value = _structured(True)
        workspace.analyze()
        analysis.analyze.return_value = _structured(False)
        workspace.analyze()
        assert workspace.state.applicable is False
        analysis.analyze.assert_called_with("Circular text")

    def test_failure_clears_analysis_and_notifies(self) -> None:
        workspace, analysis, store = _workspace(_processor_returning("Circular text"))
        workspace.upload(_document())
        analysis.analyze.return_value = _structured(True)
        workspace.analyze()

        analysis.analyze.side_effect = AnalysisError("Analysis service unreachable")
        assert workspace.analyze() is None
        assert workspace.state.analysis is None
        assert workspace.state.error == "Analysis service unreachable"
        assert store.items[0].title == "AI analysis failed"

    def test_rate_limit_is_notified_once(self) -> None:
        store = NotificationStore()
        transport = httpx.MockTransport(
            lambda request: httpx.Response(429, json={"error": "Rate limit exceeded"})
        )
        client = AnalysisClient(
            httpx.Client(transport=transport, base_url="http://api.test"),
            notifications=store,
        )
        workspace = CircularWorkspace(_processor_returning("Circular text"), client, store)
        workspace.upload(_document())

        assert workspace.analyze() is None
        assert workspace.state.error == "Rate limit exceeded"
        assert [item.title for item in store.items] == ["OpenAI rate limit"]


class TestProposedActions:
    def test_applicable_structured_analysis(self) -> None:
        workspace, analysis, _ = _workspace(_processor_returning("Circular text"))
        workspace.upload(_document())
        analysis.analyze.return_value = _structured(True)
        workspace.analyze()
        assert [a.title for a in workspace.proposed_actions()] == ["Revise KYC policy"]

    @pytest.mark.parametrize("applicable", [False, None])
    def test_not_applicable_creates_no_tasks(self, applicable: bool | None) -> None:
        workspace, analysis, _ = _workspace(_processor_returning("Circular text"))
        workspace.upload(_document())
        analysis.analyze.return_value = _structured(applicable)
        workspace.analyze()
        with pytest.raises(DocumentValidationError, match="Not Applicable"):
            workspace.proposed_actions()

    def test_unstructured_analysis_creates_no_tasks(self) -> None:
        workspace, analysis, _ = _workspace(_processor_returning("Circular text"))
        workspace.upload(_document())
        analysis.analyze.return_value = AnalysisOutcome(
            unstructured=UnstructuredAnalysis(raw_text="applicable: yes", applicable=True)
        )
        workspace.analyze()
        with pytest.raises(DocumentValidationError, match="structured"):
            workspace.proposed_actions()


class TestReset:
    def test_reset_clears_everything(self) -> None:
        workspace, _, _ = _workspace(_processor_returning("Circular text"))
        workspace.upload(_document())
        workspace.reset()
        assert workspace.state.file_name == ""
        assert workspace.state.extraction is None


class TestBuildWorkspace:
    def test_word_upload_and_analysis_go_through_the_api(self, tmp_path: Path) -> None:
        paths: list[str] = []
        analysis_json = {
            "meta": {"regulator": "SEBI", "bank_context": {"applicable": True}},
            "summary": "Disclosure norms tightened.",
            "actions": [{"title": "Update disclosures"}],
        }

        def handler(request: httpx.Request) -> httpx.Response:
            paths.append(request.url.path)
            if request.url.path == "/api/upload/extract":
                return httpx.Response(
                    200,
                    json={"ok": True, "text": "SEBI circular on disclosures", "usedOcr": False},
                )
            return httpx.Response(
                200,
                json={"message": {"role": "assistant", "content": json.dumps(analysis_json)}, "id": "c"},
            )

        settings = Settings(notifications_path=str(tmp_path / "notifications.json"))
        http = httpx.Client(transport=httpx.MockTransport(handler), base_url="http://backend")
        workspace = build_workspace(settings, MagicMock(spec=BaseOcrEngine), http_client=http)

        workspace.upload(
            UploadedDocument(content=b"docx", mime_type=DOCX_MIME_TYPE, filename="notice.docx")
        )
        outcome = workspace.analyze()

        assert paths == ["/api/upload/extract", "/api/openai/chat"]
        assert outcome is not None
        assert outcome.summary == "Disclosure norms tightened."
        assert [a.title for a in workspace.proposed_actions()] == ["Update disclosures"]
        assert (tmp_path / "notifications.json").exists()
