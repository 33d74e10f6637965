import io

import docx

from circulars.documents.models import ExtractionResult
from circulars.extraction.exceptions import WordExtractionError
from circulars.logging.logger import Log


class DocxTextExtractor:
    """Extracts raw text from OOXML Word documents with python-docx."""

    def extract(self, docx_bytes: bytes) -> ExtractionResult:
        try:
            document = docx.Document(io.BytesIO(docx_bytes))
        except Exception as exc:
            raise WordExtractionError(f"python-docx could not open document: {exc}") from exc

        parts = [p.text.strip() for p in document.paragraphs if p.text.strip()]
        for table in document.tables:
            for row in table.rows:
                cells = [cell.text.strip() for cell in row.cells if cell.text.strip()]
                if cells:
                    parts.append(" | ".join(cells))

        text = "\n".join(parts).strip()
        Log.info(f"Extracted {len(text)} chars from Word document")
        return ExtractionResult(text=text)
