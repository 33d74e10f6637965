from circulars.classification.circular_classifier import is_likely_circular, matched_indicators
from circulars.documents.detector import DocumentFormat, ensure_supported, is_legacy_word
from circulars.documents.exceptions import EmptySelectionError, NotACircularError
from circulars.extraction.engine import TextExtractionEngine
from circulars.extraction.exceptions import LegacyWordFormatError
from circulars.extraction.remote_client import RemoteExtractionClient
from circulars.logging.logger import Log
from circulars.processor.pipeline import PipelineContext, PipelineStep

NOT_A_CIRCULAR_MESSAGE = (
    "The uploaded document does not appear to be a circular. "
    "Please upload a valid circular document."
)


class DetectFormatStep(PipelineStep):
    def run(self, context: PipelineContext) -> PipelineContext:
        document = context.document
        if not document.content:
            raise EmptySelectionError("No file selected")
        context.document_format = ensure_supported(document.mime_type, document.filename)
        Log.info(f"Detected {context.document_format.value} upload '{document.filename}'")
        return context


class ExtractTextStep(PipelineStep):
    """Extracts locally, except Word files when a remote extractor is configured."""

    def __init__(
        self,
        engine: TextExtractionEngine,
        remote_client: RemoteExtractionClient | None = None,
    ) -> None:
        self._engine = engine
        self._remote_client = remote_client

    def run(self, context: PipelineContext) -> PipelineContext:
        if context.document_format is None:
            raise ValueError("PipelineContext.document_format must be set before extraction")
        document = context.document
        if context.document_format is DocumentFormat.WORD_DOC and self._remote_client is not None:
            if is_legacy_word(document.mime_type, document.filename):
                raise LegacyWordFormatError()
            context.extraction = self._remote_client.extract(document)
        else:
            context.extraction = self._engine.extract(document, context.document_format)
        return context


class ClassifyCircularStep(PipelineStep):
    def run(self, context: PipelineContext) -> PipelineContext:
        if context.extraction is None:
            raise ValueError("PipelineContext.extraction must be set before classification")
        text = context.extraction.text
        if not is_likely_circular(text):
            Log.warning(f"Rejected '{context.document.filename}': not a circular")
            raise NotACircularError(NOT_A_CIRCULAR_MESSAGE)
        context.indicators = matched_indicators(text)
        Log.info(
            f"Circular detected in '{context.document.filename}' "
            f"(indicators: {', '.join(context.indicators)})"
        )
        return context
