"""Utilities for working with uploaded PDF documents."""
from __future__ import annotations

import io
from time import perf_counter
from typing import Optional

from fastapi import HTTPException
from pypdf import PdfReader
from pypdf.errors import PdfReadError

from .files import PDF_SIGNATURE, decode_base64_payload
from .logging_config import get_logger

logger = get_logger(__name__)

PDF_FORMAT_MESSAGE = "Pouze PDF formát je povolen"


def inspect_pdf(file_bytes: bytes, label: str = "PDF") -> int:
    """Check that the payload is a readable PDF and return its page count."""

    if not file_bytes.startswith(PDF_SIGNATURE):
        raise HTTPException(status_code=400, detail=PDF_FORMAT_MESSAGE)

    start = perf_counter()
    try:
        pdf = PdfReader(io.BytesIO(file_bytes))
        page_count = len(pdf.pages)
    except (PdfReadError, ValueError, OSError) as exc:
        logger.warning("inspect_pdf: %s is not readable: %s", label, exc)
        raise HTTPException(status_code=400, detail=PDF_FORMAT_MESSAGE) from exc

    if page_count == 0:
        raise HTTPException(status_code=400, detail=PDF_FORMAT_MESSAGE)

    logger.info(
        "inspect_pdf: %s has %d pages (%d bytes), checked in %.3fs",
        label,
        page_count,
        len(file_bytes),
        perf_counter() - start,
    )
    return page_count


def decode_pdf(payload: str, label: str = "PDF") -> bytes:
    data = decode_base64_payload(payload, label)
    inspect_pdf(data, label)
    return data


def decode_optional_pdf(payload: Optional[str], label: str) -> Optional[bytes]:
    if not payload:
        return None
    return decode_pdf(payload, label)


__all__ = ["inspect_pdf", "decode_pdf", "decode_optional_pdf", "PDF_FORMAT_MESSAGE"]
