from __future__ import annotations

import hashlib
import logging
from io import BytesIO

from docx import Document
from pypdf import PdfReader
from pypdf.errors import PdfReadError

from .file_security import file_extension
from .models import ExtractionError, ParsedBlock, ParsedDoc, UnsupportedFileType

logger = logging.getLogger(__name__)


def _compute_doc_id(text: str, filename: str) -> str:
    seed = text if text.strip() else filename
    digest = hashlib.sha256(seed.encode("utf-8", errors="ignore")).hexdigest()
    return digest[:16]


def _parse_txt(content: bytes) -> tuple[str, list[ParsedBlock], list[str]]:
    text = content.decode("utf-8-sig", errors="replace")
    warnings: list[str] = []
    if "�" in text:
        warnings.append("Some bytes were not valid UTF-8 and were replaced.")
    return text, [], warnings


def _parse_pdf(content: bytes) -> tuple[str, list[ParsedBlock], list[str]]:
    warnings: list[str] = []
    blocks: list[ParsedBlock] = []

    try:
        reader = PdfReader(BytesIO(content))
        text_parts: list[str] = []
        for index, page in enumerate(reader.pages, start=1):
            page_text = (page.extract_text() or "").strip()
            if page_text:
                text_parts.append(page_text)
                blocks.append(ParsedBlock(page=index, text=page_text))
    except (PdfReadError, ValueError, KeyError) as exc:
        raise ExtractionError("Unable to extract text from this PDF file.") from exc

    if not text_parts:
        warnings.append("No extractable text found in PDF.")
    return "\n".join(text_parts), blocks, warnings


def _parse_docx(content: bytes) -> tuple[str, list[ParsedBlock], list[str]]:
    warnings: list[str] = []

    try:
        document = Document(BytesIO(content))
    except Exception as exc:  # noqa: BLE001
        raise ExtractionError("Unable to extract text from this Word document.") from exc

    paragraphs = [p.text.strip() for p in document.paragraphs if p.text and p.text.strip()]
    blocks = [ParsedBlock(page=None, text=paragraph_text) for paragraph_text in paragraphs]
    if not paragraphs:
        warnings.append("No extractable text found in Word document.")
    return "\n".join(paragraphs), blocks, warnings


def extract_text(filename: str, content: bytes) -> ParsedDoc:
    extension = file_extension(filename)
    if extension == "txt":
        source_type = "txt"
        text, blocks, warnings = _parse_txt(content)
    elif extension == "pdf":
        source_type = "pdf"
        text, blocks, warnings = _parse_pdf(content)
    elif extension in {"doc", "docx"}:
        source_type = "docx"
        text, blocks, warnings = _parse_docx(content)
    else:
        raise UnsupportedFileType("Unsupported file format")

    for warning in warnings:
        logger.info("resume_extract_warning file_ext=%s warning=%s", extension, warning)

    return ParsedDoc(
        doc_id=_compute_doc_id(text=text, filename=filename),
        source_type=source_type,
        filename=filename,
        text=text,
        blocks=blocks,
        parsing_warnings=warnings,
    )
