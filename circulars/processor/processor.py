from circulars.config.settings import Settings
from circulars.documents.models import UploadedDocument
from circulars.extraction.engine import TextExtractionEngine
from circulars.extraction.image_extractor import ImageTextExtractor
from circulars.extraction.pdf_text_extractor import PdfTextExtractor
from circulars.extraction.policy import ScanPolicy
from circulars.extraction.remote_client import RemoteExtractionClient
from circulars.extraction.word_extractor import DocxTextExtractor
from circulars.logging.logger import Log
from circulars.ocr.base import BaseOcrEngine
from circulars.pdf.factory import PdfExtractorFactory
from circulars.processor.pipeline import PipelineContext, PipelineStep
from circulars.processor.steps import ClassifyCircularStep, DetectFormatStep, ExtractTextStep


class Processor:
    """Runs an upload through the ingestion steps in order.

    Pipeline: detect format -> extract text -> (optionally) circular gate.
    Any step failure propagates; no partially filled context is returned.
    """

    def __init__(self, steps: list[PipelineStep]) -> None:
        self._steps = steps

    def process(self, document: UploadedDocument) -> PipelineContext:
        Log.info(f"Processing '{document.filename}' ({document.size_bytes} bytes)")
        context = PipelineContext(document=document)
        for step in self._steps:
            context = step.run(context)
        return context


def build_extraction_engine(
    settings: Settings,
    ocr_engine: BaseOcrEngine,
    *,
    with_word: bool = True,
) -> TextExtractionEngine:
    """Build the extraction engine; Word support only exists server-side."""
    policy = ScanPolicy(
        page_min_chars=settings.page_min_chars,
        document_min_chars=settings.document_min_chars,
        render_scale=settings.render_scale,
    )
    pdf_extractor = PdfTextExtractor(
        PdfExtractorFactory.create(settings),
        ocr_engine,
        policy=policy,
        ocr_language=settings.ocr_language,
    )
    return TextExtractionEngine(
        pdf_extractor=pdf_extractor,
        word_extractor=DocxTextExtractor() if with_word else None,
        image_extractor=ImageTextExtractor(ocr_engine, ocr_language=settings.ocr_language),
    )


def build_server_processor(engine: TextExtractionEngine) -> Processor:
    """Extraction only; the circular gate runs on the client side."""
    return Processor([DetectFormatStep(), ExtractTextStep(engine)])


def build_workspace_processor(
    engine: TextExtractionEngine,
    remote_client: RemoteExtractionClient | None = None,
) -> Processor:
    return Processor(
        [
            DetectFormatStep(),
            ExtractTextStep(engine, remote_client),
            ClassifyCircularStep(),
        ]
    )
