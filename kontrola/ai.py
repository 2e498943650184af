"""Gemini integration helpers."""
from __future__ import annotations

import json
import re
from time import perf_counter
from typing import Any, Dict, List, Optional, Sequence, Tuple

import google.generativeai as genai
from google.api_core import exceptions as google_exceptions
from PIL import Image

from .config import API_KEY, GEN_CFG, MODEL_NAME
from .logging_config import get_logger
from .prompts import build_form_prompt, build_pdf_prompt
from .schemas import PhotoSet, PropertyFormData

logger = get_logger(__name__)

if API_KEY:
    genai.configure(api_key=API_KEY)
else:
    logger.warning("GEMINI_API_KEY is not set; analysis requests will fail until it is configured.")

JSON_OBJECT_RE = re.compile(r"\{[\s\S]*\}")

QUOTA_MESSAGE = "Překročen limit požadavků. Zkuste to za chvíli."
INVALID_KEY_MESSAGE = "Neplatný API klíč."
NO_TEXT_MESSAGE = "Model nevrátil žádnou textovou odpověď."
INVALID_JSON_MESSAGE = "Neplatná JSON odpověď modelu."


class AIServiceError(RuntimeError):
    """Raised when the model call or its reply cannot be used; the message is user-facing."""


def pdf_part(data: bytes) -> Dict[str, Any]:
    return {"mime_type": "application/pdf", "data": data}


def extract_json_object(text: str) -> Dict[str, Any]:
    """Pick the outermost ``{...}`` from the reply and parse it.

    The parsed object is returned as-is; its shape is not checked against the
    response contract requested in the prompt.
    """

    match = JSON_OBJECT_RE.search(text or "")
    if not match:
        raise AIServiceError(INVALID_JSON_MESSAGE)
    try:
        result = json.loads(match.group(0))
    except json.JSONDecodeError as exc:
        raise AIServiceError(f"{INVALID_JSON_MESSAGE[:-1]}: {exc}") from exc
    if not isinstance(result, dict):
        raise AIServiceError(INVALID_JSON_MESSAGE)
    return result


def _usage_metadata(response: Any) -> Dict[str, Optional[int]]:
    usage = getattr(response, "usage_metadata", None)
    if usage is None:
        return {}
    return {
        "prompt_tokens": getattr(usage, "prompt_token_count", None),
        "candidates_tokens": getattr(usage, "candidates_token_count", None),
        "total_tokens": getattr(usage, "total_token_count", None),
    }


def call_gemini(prompt: str, attachments: Sequence[Any]) -> Tuple[str, Dict[str, Any]]:
    """Send the attachments followed by the prompt in one request; return reply text and call metadata."""

    if not API_KEY:
        raise AIServiceError(INVALID_KEY_MESSAGE)

    content_parts: List[Any] = list(attachments)
    content_parts.append(prompt)

    start = perf_counter()
    try:
        model = genai.GenerativeModel(MODEL_NAME, generation_config=GEN_CFG)
        response = model.generate_content(content_parts)
    except google_exceptions.ResourceExhausted as exc:
        logger.warning("call_gemini: quota exhausted: %s", exc)
        raise AIServiceError(QUOTA_MESSAGE) from exc
    except (google_exceptions.Unauthenticated, google_exceptions.PermissionDenied) as exc:
        logger.error("call_gemini: credentials rejected: %s", exc)
        raise AIServiceError(INVALID_KEY_MESSAGE) from exc
    except google_exceptions.GoogleAPIError as exc:
        logger.error("call_gemini: API error: %s", exc)
        raise AIServiceError(f"API Error: {exc}") from exc
    duration = perf_counter() - start

    # A blocked prompt has no candidates and ``response.parts`` raises ValueError.
    if not response.candidates:
        feedback = getattr(response, "prompt_feedback", None)
        logger.warning("call_gemini: no candidates (block_reason=%s)", getattr(feedback, "block_reason", None))
        raise AIServiceError(NO_TEXT_MESSAGE)
    try:
        parts = response.parts
    except ValueError as exc:
        logger.warning("call_gemini: reply has no readable parts: %s", exc)
        raise AIServiceError(NO_TEXT_MESSAGE) from exc
    if not parts:
        logger.warning("call_gemini: empty reply (finish_reason=%s)", response.candidates[0].finish_reason)
        raise AIServiceError(NO_TEXT_MESSAGE)

    text = "".join(part.text for part in parts if getattr(part, "text", None))
    if not text.strip():
        raise AIServiceError(NO_TEXT_MESSAGE)

    metadata = {
        "model": MODEL_NAME,
        "duration": round(duration, 3),
        "attachments": len(attachments),
        "usage": _usage_metadata(response),
    }
    logger.info(
        "call_gemini: model=%s attachments=%d duration=%.3fs tokens=%s",
        MODEL_NAME,
        len(attachments),
        duration,
        metadata["usage"].get("total_tokens") or "—",
    )
    return text, metadata


def analyze_property(
    form: PropertyFormData,
    photos: Dict[str, List[Image.Image]],
    cadastral_map: Optional[Image.Image] = None,
    project_doc: Optional[bytes] = None,
) -> Dict[str, Any]:
    """Form flow: check the declared values against the categorised photos."""

    attachments: List[Any] = []
    if project_doc is not None:
        attachments.append(pdf_part(project_doc))
    for category in PhotoSet.model_fields:
        attachments.extend(photos.get(category, []))
    if cadastral_map is not None:
        attachments.append(cadastral_map)

    prompt = build_form_prompt(form, has_project_doc=project_doc is not None)
    text, _ = call_gemini(prompt, attachments)
    return extract_json_object(text)


def analyze_property_from_pdf(
    pdf_bytes: bytes,
    photos: List[Image.Image],
    cadastral_map: Optional[Image.Image] = None,
    technical_doc: Optional[Any] = None,
) -> Dict[str, Any]:
    """PDF flow: the model reads the appraisal form itself and checks it against the photos.

    ``technical_doc`` is either the raw bytes of a PDF or an already decoded image.
    """

    attachments: List[Any] = [pdf_part(pdf_bytes)]
    attachments.extend(photos)
    if cadastral_map is not None:
        attachments.append(cadastral_map)
    if isinstance(technical_doc, (bytes, bytearray)):
        attachments.append(pdf_part(bytes(technical_doc)))
    elif technical_doc is not None:
        attachments.append(technical_doc)

    text, _ = call_gemini(build_pdf_prompt(), attachments)
    return extract_json_object(text)


__all__ = [
    "AIServiceError",
    "extract_json_object",
    "call_gemini",
    "analyze_property",
    "analyze_property_from_pdf",
]
