"""HTTP server for the PDF page extractor using FastAPI."""

import asyncio
import base64
import json
import logging
import time
from typing import Dict, Any, List, Optional, Tuple
from urllib.parse import quote

from fastapi import FastAPI, HTTPException, UploadFile, File, Form
from fastapi.responses import Response
from pydantic import BaseModel, Field

from .backends.base import Backend
from .backends.document_inspection import DocumentInspectionBackend
from .backends.page_extraction import PageExtractionBackend
from .backends.text_extraction import TextExtractionBackend
from .config import get_config
from .errors import (
    EmptyPageRange,
    ExtractionFailure,
    InvalidFileType,
    UnreadableDocument,
)

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

VERSION = "0.1.0"
PDF_MEDIA_TYPE = "application/pdf"

MEDIA_TYPES = {
    "pdf": PDF_MEDIA_TYPE,
    "txt": "text/plain; charset=utf-8",
    "json": "application/json",
}

ERROR_CODES = {
    InvalidFileType: "INVALID_FILE_TYPE",
    UnreadableDocument: "UNREADABLE_DOCUMENT",
    EmptyPageRange: "EMPTY_PAGE_RANGE",
}


# Pydantic models
class ProcessRequest(BaseModel):
    """Request body for POST /process (base64 mode)."""
    operation: str = Field(..., description="Operation: inspect, extract_pages, extract_text")
    data: str = Field(..., description="Base64-encoded PDF data")
    options: Dict[str, str] = Field(default_factory=dict)
    filename: str = Field("", description="Original file name, used for the download name")


class HealthResponse(BaseModel):
    """Response body for GET /health."""
    status: str = "ok"
    operations: List[str]
    version: str = VERSION


def error_detail(code: str, message: str) -> Dict[str, Any]:
    return {"success": False, "error": {"code": code, "message": message}}


def content_disposition(filename: str) -> str:
    """Attachment header value, RFC 5987-encoded when the name is not plain ASCII."""
    quoted = quote(filename)
    if quoted != filename:
        return f"attachment; filename*=utf-8''{quoted}"
    return f'attachment; filename="{filename}"'


def check_file_size(size: int) -> None:
    config = get_config()
    max_bytes = config.extraction.max_file_size_mb * 1024 * 1024
    if size > max_bytes:
        raise HTTPException(
            status_code=400,
            detail=error_detail(
                "FILE_TOO_LARGE",
                f"File exceeds {config.extraction.max_file_size_mb}MB limit",
            ),
        )


def ensure_pdf(file: UploadFile) -> None:
    if file.content_type != PDF_MEDIA_TYPE:
        raise InvalidFileType(
            f"Please select a valid PDF file ({file.filename!r} is {file.content_type})"
        )


async def read_pdf_upload(file: UploadFile) -> bytes:
    """Read an uploaded file, rejecting non-PDF and oversized uploads."""
    try:
        ensure_pdf(file)
    except InvalidFileType as e:
        logger.info(f"Rejected upload: {e}")
        raise HTTPException(
            status_code=400, detail=error_detail(ERROR_CODES[InvalidFileType], str(e))
        )

    pdf_data = await file.read()
    check_file_size(len(pdf_data))
    return pdf_data


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title="PDF Page Extractor",
        description="Extract a subset of PDF pages as a new PDF or as plain text using PyMuPDF",
        version=VERSION,
    )

    backends: List[Backend] = [
        DocumentInspectionBackend(),
        PageExtractionBackend(),
        TextExtractionBackend(),
    ]

    supported_operations = set()
    for backend in backends:
        supported_operations.update(backend.SUPPORTED_OPERATIONS)

    def find_backend(operation: str) -> Optional[Backend]:
        for backend in backends:
            if backend.supports(operation):
                return backend
        return None

    async def run_operation(
        operation: str, data: bytes, options: Dict[str, str]
    ) -> Tuple[bytes, str, Dict[str, Any]]:
        """Run a backend off the event loop, mapping failures to HTTP errors."""
        backend = find_backend(operation)
        if backend is None:
            raise HTTPException(
                status_code=400,
                detail={
                    "success": False,
                    "error": {
                        "code": "INVALID_OPERATION",
                        "message": f"Operation '{operation}' is not supported",
                        "details": {"supported_operations": sorted(list(supported_operations))},
                    }
                }
            )

        logger.info(f"Processing: operation={operation}, size={len(data)} bytes")

        try:
            return await asyncio.to_thread(backend.process, data, operation, options)
        except ValueError as e:
            code = ERROR_CODES.get(type(e), "VALIDATION_ERROR")
            logger.info(f"{operation} rejected ({code}): {e}")
            raise HTTPException(status_code=400, detail=error_detail(code, str(e)))
        except ExtractionFailure as e:
            logger.exception(f"{operation} failed: {e}")
            raise HTTPException(
                status_code=500, detail=error_detail("EXTRACTION_FAILED", str(e))
            )
        except Exception as e:
            logger.exception(f"Processing error: {e}")
            raise HTTPException(
                status_code=500, detail=error_detail("PROCESSING_FAILED", str(e))
            )

    def download_response(
        output_data: bytes, fmt: str, metadata: Dict[str, Any], start_time: float
    ) -> Response:
        processing_time_ms = int((time.time() - start_time) * 1000)
        logger.info(
            f"Completed in {processing_time_ms}ms: "
            f"output_size={len(output_data)} bytes, file={metadata['filename']}"
        )
        return Response(
            content=output_data,
            media_type=MEDIA_TYPES[fmt],
            headers={
                "Content-Disposition": content_disposition(metadata["filename"]),
                "X-Pages": metadata["pages"],
                "X-Total-Pages": metadata["total_pages"],
                "X-Processing-Time-Ms": str(processing_time_ms),
            },
        )

    @app.get("/health", response_model=HealthResponse)
    async def health_check() -> HealthResponse:
        return HealthResponse(
            status="ok",
            operations=sorted(list(supported_operations)),
            version=VERSION,
        )

    @app.get("/ready")
    async def readiness_check():
        return {"status": "ready"}

    @app.post("/api/inspect")
    async def inspect(file: UploadFile = File(...)):
        """Report the page count and default range of an uploaded PDF."""
        start_time = time.time()
        pdf_data = await read_pdf_upload(file)

        output_data, _, metadata = await run_operation("inspect", pdf_data, {})
        return {
            "success": True,
            "result": json.loads(output_data.decode("utf-8")),
            "metadata": metadata,
            "processing_time_ms": int((time.time() - start_time) * 1000),
        }

    @app.post("/api/extract-pages")
    async def extract_pages(
        file: UploadFile = File(...),
        pages: str = Form(""),
    ):
        """Download a new PDF holding the selected pages."""
        start_time = time.time()
        pdf_data = await read_pdf_upload(file)

        output_data, fmt, metadata = await run_operation(
            "extract_pages", pdf_data, {"pages": pages, "filename": file.filename or ""}
        )
        return download_response(output_data, fmt, metadata, start_time)

    @app.post("/api/extract-text")
    async def extract_text(
        file: UploadFile = File(...),
        pages: str = Form(""),
    ):
        """Download the text of the selected pages."""
        start_time = time.time()
        pdf_data = await read_pdf_upload(file)

        output_data, fmt, metadata = await run_operation(
            "extract_text", pdf_data, {"pages": pages, "filename": file.filename or ""}
        )
        return download_response(output_data, fmt, metadata, start_time)

    @app.post("/process")
    async def process_document(request: ProcessRequest) -> Dict[str, Any]:
        """Process a PDF via base64-encoded payload."""
        start_time = time.time()

        try:
            document_data = base64.b64decode(request.data, validate=True)
        except Exception as e:
            raise HTTPException(
                status_code=400, detail=error_detail("INVALID_BASE64", str(e))
            )

        check_file_size(len(document_data))

        options = dict(request.options)
        if request.filename:
            options["filename"] = request.filename

        output_data, output_format, metadata = await run_operation(
            request.operation, document_data, options
        )
        processing_time_ms = int((time.time() - start_time) * 1000)

        if output_format == "json":
            result = json.loads(output_data.decode("utf-8"))
        elif output_format == "pdf":
            result = base64.b64encode(output_data).decode("ascii")
        else:
            result = output_data.decode("utf-8")

        return {
            "success": True,
            "result": result,
            "format": MEDIA_TYPES[output_format],
            "metadata": {str(k): str(v) for k, v in metadata.items()},
            "processing_time_ms": processing_time_ms,
        }

    return app


# Create app instance for uvicorn
app = create_app()


def run_server():
    """Run the HTTP server."""
    import uvicorn
    config = get_config()
    logger.info(f"Starting HTTP server on {config.server.host}:{config.server.port}")
    uvicorn.run(
        "src.http_server:app",
        host=config.server.host,
        port=config.server.port,
        log_level=config.server.log_level,
    )


if __name__ == "__main__":
    run_server()
