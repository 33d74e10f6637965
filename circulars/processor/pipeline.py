from abc import ABC, abstractmethod
from dataclasses import dataclass, field

from circulars.documents.detector import DocumentFormat
from circulars.documents.models import ExtractionResult, UploadedDocument


@dataclass(slots=True)
class PipelineContext:
    document: UploadedDocument
    document_format: DocumentFormat | None = None
    extraction: ExtractionResult | None = None
    indicators: list[str] = field(default_factory=list)


class PipelineStep(ABC):
    @abstractmethod
    def run(self, context: PipelineContext) -> PipelineContext:
        raise NotImplementedError
