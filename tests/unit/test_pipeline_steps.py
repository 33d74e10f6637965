from unittest.mock import MagicMock

import pytest

from circulars.documents.detector import DOCX_MIME_TYPE, DocumentFormat
from circulars.documents.exceptions import (
    EmptySelectionError,
    NotACircularError,
    UnsupportedFormatError,
)
from circulars.documents.models import ExtractionResult, UploadedDocument
from circulars.extraction.engine import TextExtractionEngine
from circulars.extraction.exceptions import LegacyWordFormatError
from circulars.extraction.remote_client import RemoteExtractionClient
from circulars.processor.pipeline import PipelineContext
from circulars.processor.steps import (
    NOT_A_CIRCULAR_MESSAGE,
    ClassifyCircularStep,
    DetectFormatStep,
    ExtractTextStep,
)


def _context(
    mime_type: str = "application/pdf",
    filename: str = "a.pdf",
    content: bytes = b"data",
) -> PipelineContext:
    return PipelineContext(
        document=UploadedDocument(content=content, mime_type=mime_type, filename=filename)
    )


class TestDetectFormatStep:
    def test_sets_format(self) -> None:
        context = DetectFormatStep().run(_context())
        assert context.document_format is DocumentFormat.PDF

    def test_empty_selection(self) -> None:
        with pytest.raises(EmptySelectionError, match="No file selected"):
            DetectFormatStep().run(_context(content=b""))

    def test_unsupported(self) -> None:
        with pytest.raises(UnsupportedFormatError):
            DetectFormatStep().run(_context("text/plain", "a.txt"))


class TestExtractTextStep:
    def test_requires_format(self) -> None:
        with pytest.raises(ValueError, match="document_format"):
            ExtractTextStep(MagicMock(spec=TextExtractionEngine)).run(_context())

    def test_local_extraction(self) -> None:
        engine = MagicMock(spec=TextExtractionEngine)
        engine.extract.return_value = ExtractionResult(text="text", page_count=1)
        context = _context()
        context.document_format = DocumentFormat.PDF
        result = ExtractTextStep(engine).run(context)
        assert result.extraction == ExtractionResult(text="text", page_count=1)
        engine.extract.assert_called_once_with(context.document, DocumentFormat.PDF)

    def test_word_goes_to_remote_client(self) -> None:
        engine = MagicMock(spec=TextExtractionEngine)
        remote = MagicMock(spec=RemoteExtractionClient)
        remote.extract.return_value = ExtractionResult(text="from server")
        context = _context(DOCX_MIME_TYPE, "n.docx")
        context.document_format = DocumentFormat.WORD_DOC
        result = ExtractTextStep(engine, remote).run(context)
        assert result.extraction.text == "from server"
        engine.extract.assert_not_called()

    def test_legacy_word_never_leaves_the_client(self) -> None:
        remote = MagicMock(spec=RemoteExtractionClient)
        context = _context("application/msword", "old.doc")
        context.document_format = DocumentFormat.WORD_DOC
        with pytest.raises(LegacyWordFormatError):
            ExtractTextStep(MagicMock(spec=TextExtractionEngine), remote).run(context)
        remote.extract.assert_not_called()


class TestClassifyCircularStep:
    def test_accepts_circular(self) -> None:
        context = _context()
        context.extraction = ExtractionResult(text="Circular to all banks")
        result = ClassifyCircularStep().run(context)
        assert "circular" in result.indicators

    def test_rejects_other_documents(self) -> None:
        context = _context()
        context.extraction = ExtractionResult(text="Grocery list: eggs, milk, bread")
        with pytest.raises(NotACircularError, match=NOT_A_CIRCULAR_MESSAGE):
            ClassifyCircularStep().run(context)

    def test_requires_extraction(self) -> None:
        with pytest.raises(ValueError, match="extraction"):
            ClassifyCircularStep().run(_context())
