import asyncio
import logging
from typing import Any

from fastapi import APIRouter, Body, File, HTTPException, UploadFile, status
from fastapi.responses import Response

from app.core.config import settings
from app.parsing.file_security import validate_upload_signature
from app.parsing.parse import extract_text
from app.schemas.resume import ParseResumeResponse
from app.services.export_service import export_content_disposition, render_export
from app.services.resume_service import analyze_resume

router = APIRouter()
logger = logging.getLogger(__name__)


async def _read_upload(file: UploadFile) -> bytes:
    chunks: list[bytes] = []
    total = 0
    while True:
        chunk = await file.read(1024 * 64)
        if not chunk:
            break
        total += len(chunk)
        if total > settings.max_upload_bytes:
            raise HTTPException(
                status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
                detail=f"File too large. Maximum allowed size is {settings.max_upload_bytes // (1024 * 1024)} MB.",
            )
        chunks.append(chunk)
    return b"".join(chunks)


@router.post("/parse-resume", response_model=ParseResumeResponse)
async def parse_resume(file: UploadFile | None = File(default=None)):
    if file is None or not file.filename:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No file uploaded")

    filename = file.filename
    content = await _read_upload(file)
    if not content:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Uploaded file is empty")

    try:
        validate_upload_signature(filename=filename, content=content)
        parsed_doc = await asyncio.to_thread(extract_text, filename, content)
    except ValueError as exc:
        # UnsupportedFileType, ExtractionError and signature mismatches
        logger.info("resume_upload_rejected filename=%s: %s", filename, exc)
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc

    logger.info(
        "resume_extracted doc_id=%s source_type=%s text_len=%s bytes=%s",
        parsed_doc.doc_id,
        parsed_doc.source_type,
        len(parsed_doc.text),
        len(content),
    )

    try:
        analysis = await analyze_resume(parsed_doc.text)
    except Exception as exc:
        logger.exception("resume_parse_failed doc_id=%s", parsed_doc.doc_id)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to parse resume",
        ) from exc

    return ParseResumeResponse(data=analysis.model_dump(by_alias=True))


@router.post("/export")
async def export_results(data: dict[str, Any] = Body(...)):
    return Response(
        content=render_export(data),
        media_type="application/json",
        headers={"Content-Disposition": export_content_disposition(data)},
    )
