"""HTTP surface: health/status probes, the chat proxy and server-side extraction."""

from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Any

from fastapi import FastAPI, File, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from circulars.chat.exceptions import (
    InvalidChatRequestError,
    ProviderConfigurationError,
    ProviderError,
)
from circulars.chat.service import MISSING_KEY_HINT, ChatProxyService, parse_messages
from circulars.config.settings import Settings
from circulars.documents.exceptions import (
    DocumentValidationError,
    EmptySelectionError,
    UnsupportedFormatError,
)
from circulars.documents.models import UploadedDocument
from circulars.extraction.engine import TextExtractionEngine
from circulars.extraction.exceptions import ExtractionError, LegacyWordFormatError
from circulars.logging.logger import Log
from circulars.ocr.exceptions import OcrEngineNotReadyError
from circulars.ocr.loader import OcrEngineLoader
from circulars.ocr.tesseract_adapter import TesseractOcrAdapter, probe_tesseract
from circulars.processor.processor import build_extraction_engine, build_server_processor

SERVICE_NAME = "circulars-backend"
NO_FILE_MESSAGE = "No file uploaded"
OCR_NOT_READY_MESSAGE = "OCR engine is still loading. Please retry in a moment."


class ChatRequest(BaseModel):
    messages: Any = None
    model: str | None = None
    temperature: float | None = None


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _error(status_code: int, error_message: str, /, **extra: Any) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": error_message, **extra})


def create_app(
    settings: Settings,
    *,
    chat_service: ChatProxyService | None = None,
    ocr_loader: OcrEngineLoader | None = None,
    engine: TextExtractionEngine | None = None,
) -> FastAPI:
    """Wire the services and return the application.

    The OCR engine starts loading in the background at application start;
    upload handlers only wait for it within a bounded window.
    """
    chat_service = chat_service or ChatProxyService(settings)
    ocr_loader = ocr_loader or OcrEngineLoader(probe_tesseract)
    if engine is None:
        ocr_engine = TesseractOcrAdapter(
            ocr_loader,
            ready_timeout_seconds=settings.ocr_ready_timeout_seconds,
            poll_interval_seconds=settings.ocr_poll_interval_seconds,
        )
        engine = build_extraction_engine(settings, ocr_engine)
    processor = build_server_processor(engine)

    @asynccontextmanager
    async def lifespan(_: FastAPI):
        ocr_loader.start()
        Log.info(
            f"Service started (env={settings.app_env}, "
            f"openai_key={'set' if chat_service.has_api_key else 'missing'})"
        )
        yield

    app = FastAPI(title="Circulars API", lifespan=lifespan)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/api/health")
    def health():
        return {"ok": True, "service": SERVICE_NAME, "time": _now_iso()}

    @app.get("/api/config/status")
    def config_status():
        return {"ok": True, "hasOpenAIKey": chat_service.has_api_key}

    @app.get("/api/debug/status")
    def debug_status():
        return {
            "ok": True,
            "appEnv": settings.app_env,
            "hasOpenAIKey": chat_service.has_api_key,
            "openaiClientReady": chat_service.client_ready,
            "ocrReady": ocr_loader.is_ready(),
            "ocrError": ocr_loader.failure,
            "time": _now_iso(),
        }

    @app.post("/api/openai/chat")
    def openai_chat(body: ChatRequest):
        try:
            messages = parse_messages(body.messages)
            completion = chat_service.complete(
                messages,
                model=body.model,
                temperature=body.temperature,
            )
        except InvalidChatRequestError as exc:
            return _error(400, str(exc))
        except ProviderConfigurationError as exc:
            Log.error(f"Chat request rejected: {exc}")
            return _error(400, str(exc), message=MISSING_KEY_HINT)
        except ProviderError as exc:
            return _error(exc.status_code or 500, str(exc))
        return completion.to_payload()

    @app.post("/api/upload/extract")
    def upload_extract(file: UploadFile | None = File(None)):
        if file is None:
            return _error(400, NO_FILE_MESSAGE)

        content = file.file.read(settings.upload_max_bytes + 1)
        if len(content) > settings.upload_max_bytes:
            Log.warning(f"Rejected '{file.filename}': larger than {settings.upload_max_bytes} bytes")
            return _error(413, f"File exceeds the {settings.upload_max_bytes} byte upload limit")

        document = UploadedDocument(
            content=content,
            mime_type=file.content_type or "",
            filename=file.filename or "",
        )
        try:
            context = processor.process(document)
        except EmptySelectionError:
            return _error(400, NO_FILE_MESSAGE)
        except UnsupportedFormatError as exc:
            return _error(415, str(exc))
        except DocumentValidationError as exc:
            return _error(400, str(exc))
        except LegacyWordFormatError as exc:
            return _error(415, str(exc))
        except OcrEngineNotReadyError:
            return _error(503, OCR_NOT_READY_MESSAGE)
        except ExtractionError as exc:
            return _error(500, str(exc))

        extraction = context.extraction
        Log.info(
            f"Extracted {len(extraction.text)} chars from '{document.filename}' "
            f"(ocr={extraction.used_ocr}, pages={extraction.page_count})"
        )
        return {
            "ok": True,
            "text": extraction.text,
            "filename": document.filename,
            "mimetype": document.mime_type,
            "usedOcr": extraction.used_ocr,
            "pageCount": extraction.page_count,
        }

    return app
