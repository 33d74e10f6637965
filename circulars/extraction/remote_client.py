from typing import Any

import httpx

from circulars.documents.models import ExtractionResult, UploadedDocument
from circulars.extraction.exceptions import ExtractionError
from circulars.logging.logger import Log

EXTRACT_PATH = "/api/upload/extract"


class RemoteExtractionClient:
    """Delegates extraction to the server (Word documents cannot be parsed client-side)."""

    def __init__(self, http_client: httpx.Client) -> None:
        self._http = http_client

    def extract(self, document: UploadedDocument) -> ExtractionResult:
        files = {
            "file": (
                document.filename,
                document.content,
                document.mime_type or "application/octet-stream",
            )
        }
        try:
            response = self._http.post(EXTRACT_PATH, files=files)
        except httpx.HTTPError as exc:
            raise ExtractionError(f"Upload extract failed: {exc}") from exc

        data = self._json_body(response)
        if not response.is_success:
            error = data.get("error")
            raise ExtractionError(
                error if isinstance(error, str) and error
                else f"Upload extract failed ({response.status_code})"
            )
        text = str(data.get("text") or "").strip()
        Log.info(f"Server extracted {len(text)} chars from '{document.filename}'")
        page_count = data.get("pageCount")
        return ExtractionResult(
            text=text,
            page_count=page_count if isinstance(page_count, int) else None,
            used_ocr=bool(data.get("usedOcr")),
        )

    @staticmethod
    def _json_body(response: httpx.Response) -> dict[str, Any]:
        try:
            data = response.json()
        except ValueError:
            return {}
        return data if isinstance(data, dict) else {}
