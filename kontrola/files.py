"""Decoding and guarding of base64 uploads sent by the browser."""
from __future__ import annotations

import base64
import binascii
import io
import json
from time import perf_counter
from typing import Any, Dict, Iterable, List, Optional

from fastapi import HTTPException, Request
from PIL import Image, UnidentifiedImageError

from .config import (
    ALLOWED_IMAGE_FORMATS,
    IMAGE_JPEG_QUALITY,
    IMAGE_MAX_SIDE,
    MAX_PHOTOS,
    MAX_UPLOAD_BYTES,
)
from .logging_config import get_logger

logger = get_logger(__name__)

PDF_SIGNATURE = b"%PDF"
PDF_BASE64_PREFIX = "JVBER"

FILE_TOO_LARGE_MESSAGE = "Soubor je příliš velký (max 10MB)"
IMAGE_FORMAT_MESSAGE = "Pouze JPG a PNG formáty jsou povoleny"
TOO_MANY_PHOTOS_MESSAGE = f"Maximální počet souborů je {MAX_PHOTOS}"
INVALID_BODY_MESSAGE = "Neplatný požadavek"


async def read_json_body(request: Request) -> Dict[str, Any]:
    """Parse the request body as a JSON object or fail with 400."""

    try:
        body = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise HTTPException(status_code=400, detail=INVALID_BODY_MESSAGE) from exc
    if not isinstance(body, dict):
        raise HTTPException(status_code=400, detail=INVALID_BODY_MESSAGE)
    return body


def _strip_data_url(value: str) -> str:
    if value.startswith("data:") and "," in value:
        return value.split(",", 1)[1]
    return value


def decode_base64_payload(value: str, label: str = "soubor") -> bytes:
    """Decode raw base64 or a ``data:`` URL, enforcing the per-file size limit."""

    if not isinstance(value, str) or not value.strip():
        raise HTTPException(status_code=400, detail=f"Neplatný soubor: {label} je prázdný")
    payload = _strip_data_url(value.strip())
    # 4 znaky base64 = 3 bajty; hrubá kontrola ještě před dekódováním
    if len(payload) * 3 // 4 > MAX_UPLOAD_BYTES + 3:
        raise HTTPException(status_code=400, detail=FILE_TOO_LARGE_MESSAGE)
    try:
        data = base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise HTTPException(status_code=400, detail=f"Neplatný soubor: {label} ({exc})") from exc
    if not data:
        raise HTTPException(status_code=400, detail=f"Neplatný soubor: {label} je prázdný")
    if len(data) > MAX_UPLOAD_BYTES:
        raise HTTPException(status_code=400, detail=FILE_TOO_LARGE_MESSAGE)
    return data


def is_pdf_payload(value: Any) -> bool:
    """Detect a base64 encoded PDF by its magic number."""

    if not isinstance(value, str):
        return False
    return _strip_data_url(value.strip()).startswith(PDF_BASE64_PREFIX)


def optimize_image(data: bytes, label: str = "fotografie") -> Image.Image:
    """Open a JPEG/PNG upload and shrink it so the longest side fits ``IMAGE_MAX_SIDE``."""

    try:
        image = Image.open(io.BytesIO(data))
        image_format = image.format
        image.load()
    except (UnidentifiedImageError, OSError) as exc:
        logger.info("optimize_image: %s could not be decoded: %s", label, exc)
        raise HTTPException(status_code=400, detail=IMAGE_FORMAT_MESSAGE) from exc

    if image_format not in ALLOWED_IMAGE_FORMATS:
        logger.info("optimize_image: %s has unsupported format %s", label, image_format)
        raise HTTPException(status_code=400, detail=IMAGE_FORMAT_MESSAGE)

    original_size = image.size
    if image.mode != "RGB":
        image = image.convert("RGB")
    image.thumbnail((IMAGE_MAX_SIDE, IMAGE_MAX_SIDE))

    buffer = io.BytesIO()
    try:
        image.save(buffer, format="JPEG", quality=IMAGE_JPEG_QUALITY)
        buffer.seek(0)
        optimized = Image.open(buffer)
        optimized.load()
    finally:
        buffer.close()
    logger.debug("optimize_image: %s %s -> %s", label, original_size, optimized.size)
    return optimized


def decode_images(payloads: Iterable[str], label: str = "fotografie") -> List[Image.Image]:
    """Decode a batch of base64 photos into downsized PIL images."""

    start = perf_counter()
    items = list(payloads)
    if len(items) > MAX_PHOTOS:
        raise HTTPException(status_code=400, detail=TOO_MANY_PHOTOS_MESSAGE)

    images: List[Image.Image] = []
    total_bytes = 0
    for index, payload in enumerate(items, start=1):
        name = f"{label} {index}"
        data = decode_base64_payload(payload, name)
        total_bytes += len(data)
        images.append(optimize_image(data, name))

    logger.info(
        "decode_images: decoded %d %s (bytes=%d) in %.3fs",
        len(images),
        label,
        total_bytes,
        perf_counter() - start,
    )
    return images


def decode_optional_image(payload: Optional[str], label: str) -> Optional[Image.Image]:
    if not payload:
        return None
    return optimize_image(decode_base64_payload(payload, label), label)


__all__ = [
    "PDF_SIGNATURE",
    "read_json_body",
    "decode_base64_payload",
    "is_pdf_payload",
    "optimize_image",
    "decode_images",
    "decode_optional_image",
]
