"""HTTP server for the PDF composition service using FastAPI."""

import asyncio
import base64
import binascii
import json
import logging
import time
from typing import Dict, Any, List, Optional, Tuple

from fastapi import FastAPI, File, Form, HTTPException, Response, UploadFile
from pydantic import BaseModel, Field

from .backends.base import Backend
from .backends.images_to_pdf import ImagesToPdfBackend
from .backends.info import InfoBackend
from .backends.merge import MergeBackend
from .backends.split import SplitBackend
from .config import get_config
from .core.outcomes import CompositionError, UnprocessableSourceError
from .core.sources import SourceFile

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

VERSION = "1.0.0"
SERVICE_NAME = "pdf-service"

# Response header name for each backend metadata key
_HEADER_NAMES = {
    "total_pages": "X-Total-Pages",
    "source_files": "X-Source-Files",
    "source_pages": "X-Source-Pages",
    "source_images": "X-Source-Images",
    "skipped_images": "X-Skipped-Images",
}


# Pydantic models
class EncodedFile(BaseModel):
    """One base64-encoded input for POST /process."""
    name: str = Field(..., description="File name reported in errors")
    data: str = Field(..., description="Base64-encoded file data")


class ProcessRequest(BaseModel):
    """Request body for POST /process (base64 mode)."""
    operation: str = Field(..., description="Operation: merge, split, images_to_pdf, info")
    files: List[EncodedFile] = Field(..., description="Inputs, in order")
    options: Dict[str, str] = Field(default_factory=dict)


class HealthResponse(BaseModel):
    """Response body for GET /health."""
    status: str = "ok"
    service: str = SERVICE_NAME
    operations: List[str]
    version: str = VERSION


def _error_detail(code: str, message: str, **extra: Any) -> Dict[str, Any]:
    error = {"code": code, "message": message}
    error.update(extra)
    return {"success": False, "error": error}


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title="PDF Composition Service",
        description="PDF merge, split, images-to-PDF and document info using PyMuPDF",
        version=VERSION,
    )

    backends: List[Backend] = [
        MergeBackend(),
        SplitBackend(),
        ImagesToPdfBackend(),
        InfoBackend(),
    ]

    supported_operations = set()
    for backend in backends:
        supported_operations.update(backend.SUPPORTED_OPERATIONS)

    def find_backend(operation: str) -> Optional[Backend]:
        for backend in backends:
            if backend.supports(operation):
                return backend
        return None

    def check_size(source: SourceFile) -> None:
        config = get_config()
        if source.size > config.composer.max_file_size_bytes:
            raise HTTPException(
                status_code=400,
                detail=_error_detail(
                    "FILE_TOO_LARGE",
                    f"File size exceeds {config.composer.max_file_size_mb}MB limit",
                    source=source.name,
                ),
            )

    async def read_uploads(
        uploads: List[UploadFile], pdf_only: bool = False
    ) -> List[SourceFile]:
        sources = []
        for index, upload in enumerate(uploads, start=1):
            if pdf_only and upload.content_type != "application/pdf":
                raise HTTPException(
                    status_code=400,
                    detail=_error_detail(
                        "INVALID_FILE_TYPE",
                        "Invalid file type. Only PDF files are allowed.",
                        source=upload.filename,
                    ),
                )
            source = SourceFile(
                name=upload.filename or f"source-{index}",
                data=await upload.read(),
            )
            check_size(source)
            sources.append(source)
        return sources

    async def run_backend(
        operation: str, files: List[SourceFile], options: Dict[str, str]
    ) -> Tuple[bytes, str, Dict[str, Any]]:
        backend = find_backend(operation)
        if backend is None:
            raise HTTPException(
                status_code=400,
                detail=_error_detail(
                    "INVALID_OPERATION",
                    f"Operation '{operation}' is not supported",
                    details={"supported_operations": sorted(supported_operations)},
                ),
            )

        try:
            return await asyncio.to_thread(backend.process, files, operation, options)
        except UnprocessableSourceError as e:
            logger.warning(f"{operation} rejected: {e}")
            raise HTTPException(
                status_code=400,
                detail=_error_detail(e.code, str(e), source=e.source, reason=e.reason),
            )
        except CompositionError as e:
            logger.warning(f"{operation} rejected: {e}")
            raise HTTPException(status_code=400, detail=_error_detail(e.code, str(e)))
        except ValueError as e:
            raise HTTPException(
                status_code=400, detail=_error_detail("VALIDATION_ERROR", str(e))
            )
        except Exception as e:
            logger.exception(f"{operation} failed: {e}")
            raise HTTPException(
                status_code=500, detail=_error_detail("PROCESSING_FAILED", str(e))
            )

    def pdf_response(output_data: bytes, metadata: Dict[str, Any]) -> Response:
        headers = {
            "Content-Disposition": f'attachment; filename="{metadata.get("filename", "output.pdf")}"',
        }
        for key, header in _HEADER_NAMES.items():
            if key in metadata:
                headers[header] = str(metadata[key])
        return Response(content=output_data, media_type="application/pdf", headers=headers)

    @app.get("/health", response_model=HealthResponse)
    async def health_check() -> HealthResponse:
        return HealthResponse(
            status="ok",
            service=SERVICE_NAME,
            operations=sorted(supported_operations),
            version=VERSION,
        )

    @app.get("/ready")
    async def readiness_check():
        return {"status": "ready"}

    @app.post("/merge-pdf")
    async def merge_pdf(files: List[UploadFile] = File(...)):
        """Merge two or more PDFs, in upload order."""
        sources = await read_uploads(files, pdf_only=True)
        output_data, _, metadata = await run_backend("merge", sources, {})
        return pdf_response(output_data, metadata)

    @app.post("/split-pdf")
    async def split_pdf(
        file: UploadFile = File(...),
        pageRanges: str = Form(""),
    ):
        """Extract the pages named by a range expression such as "1-3,5,7-9"."""
        sources = await read_uploads([file], pdf_only=True)
        output_data, _, metadata = await run_backend(
            "split", sources, {"pageRanges": pageRanges}
        )
        return pdf_response(output_data, metadata)

    @app.post("/images-to-pdf")
    async def images_to_pdf(images: List[UploadFile] = File(...)):
        """Render each uploaded image onto its own page."""
        sources = await read_uploads(images)
        output_data, _, metadata = await run_backend("images_to_pdf", sources, {})
        return pdf_response(output_data, metadata)

    @app.post("/pdf-info")
    async def pdf_info(file: UploadFile = File(...)):
        """Report page count, document metadata and first-page size."""
        sources = await read_uploads([file], pdf_only=True)
        output_data, _, _ = await run_backend("info", sources, {})
        return json.loads(output_data.decode("utf-8"))

    @app.post("/process")
    async def process_document(request: ProcessRequest) -> Dict[str, Any]:
        """Run an operation over base64-encoded inputs and return a JSON envelope."""
        start_time = time.time()

        sources = []
        for index, encoded in enumerate(request.files, start=1):
            try:
                data = base64.b64decode(encoded.data, validate=True)
            except (binascii.Error, ValueError) as e:
                raise HTTPException(
                    status_code=400,
                    detail=_error_detail("INVALID_BASE64", str(e), source=encoded.name),
                )
            source = SourceFile(name=encoded.name or f"source-{index}", data=data)
            check_size(source)
            sources.append(source)

        output_data, output_format, metadata = await run_backend(
            request.operation, sources, request.options
        )
        processing_time_ms = int((time.time() - start_time) * 1000)

        if output_format == "json":
            result: Any = json.loads(output_data.decode("utf-8"))
            content_type = "application/json"
        else:
            result = base64.b64encode(output_data).decode("utf-8")
            content_type = "application/pdf"

        return {
            "success": True,
            "result": result,
            "format": content_type,
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
        "propdf.http_server:app",
        host=config.server.host,
        port=config.server.port,
        log_level="info",
    )


if __name__ == "__main__":
    run_server()
