"""Application routes for the property check UI and API."""
from __future__ import annotations

import time
from typing import Any, Dict, List

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import HTMLResponse, JSONResponse, Response
from PIL import Image
from pydantic import ValidationError

from .ai import AIServiceError, analyze_property, analyze_property_from_pdf
from .config import MAX_PHOTOS, MIN_EXTERIOR_PHOTOS, MIN_INTERIOR_PHOTOS, MIN_PDF_FLOW_PHOTOS
from .files import (
    TOO_MANY_PHOTOS_MESSAGE,
    decode_images,
    decode_optional_image,
    is_pdf_payload,
    read_json_body,
)
from .frontend import build_homepage, build_login_page
from .logging_config import get_logger
from .parsers import decode_optional_pdf, decode_pdf
from .rate_limit import RateLimiter, client_key, get_rate_limiter
from .report import generate_results_pdf
from .schemas import GeneratePdfPayload, PhotoSet, PropertyFormData, first_error_message

logger = get_logger(__name__)

RATE_LIMIT_MESSAGE = "Překročen limit požadavků. Zkuste to za chvíli."
PDF_REQUIRED_MESSAGE = "PDF formulář je povinný"
PDF_FLOW_PHOTOS_MESSAGE = f"Musí být nahráno minimálně {MIN_PDF_FLOW_PHOTOS} fotografií"
EXTERIOR_PHOTOS_MESSAGE = "Musí být nahrány minimálně 4 fotografie exteriéru + číslo popisné (celkem 5 fotek)"
INTERIOR_PHOTOS_MESSAGE = "Musí být nahrány minimálně 3 fotografie interiéru (kuchyň, koupelna, chodba)"
UNKNOWN_ANALYSIS_ERROR = "Neznámá chyba při analýze"
MISSING_RESULTS_MESSAGE = "Chybí výsledky kontroly"
TECHNICAL_DOC_MESSAGE = "Neplatný soubor: technická dokumentace musí být PDF nebo obrázek v base64"

frontend_router = APIRouter()
api_router = APIRouter(prefix="/api")


@frontend_router.get("/", response_class=HTMLResponse)
def homepage() -> HTMLResponse:
    """Serve the SPA frontend."""

    return HTMLResponse(build_homepage())


@frontend_router.get("/login", response_class=HTMLResponse)
def login_page() -> HTMLResponse:
    return HTMLResponse(build_login_page())


def _enforce_rate_limit(request: Request, limiter: RateLimiter) -> str:
    key = client_key(request)
    if not limiter.check(key):
        logger.warning("rate limit: rejected request from %s to %s", key, request.url.path)
        raise HTTPException(status_code=429, detail=RATE_LIMIT_MESSAGE)
    return key


async def _run_analysis(name: str, func, *args: Any) -> Dict[str, Any]:
    """Run the blocking model call off the event loop and map its failures to 500."""

    start = time.perf_counter()
    try:
        result = await run_in_threadpool(func, *args)
    except AIServiceError as exc:
        logger.warning("%s: analysis failed: %s", name, exc)
        raise HTTPException(status_code=500, detail=str(exc)) from exc
    except Exception as exc:
        logger.exception("%s: unexpected error during analysis", name)
        raise HTTPException(status_code=500, detail=str(exc) or UNKNOWN_ANALYSIS_ERROR) from exc
    logger.info(
        "%s: finished (recommendation=%s) in %.3fs",
        name,
        result.get("recommendation", "—"),
        time.perf_counter() - start,
    )
    return result


def _technical_doc(payload: Any) -> Any:
    if payload is None or payload == "":
        return None
    if not isinstance(payload, str):
        raise HTTPException(status_code=400, detail=TECHNICAL_DOC_MESSAGE)
    if is_pdf_payload(payload):
        return decode_optional_pdf(payload, "technická dokumentace")
    return decode_optional_image(payload, "technická dokumentace")


@api_router.post("/analyze-property")
async def analyze_property_endpoint(
    request: Request, limiter: RateLimiter = Depends(get_rate_limiter)
) -> JSONResponse:
    """Form flow: the client's declared values are checked against categorised photos."""

    caller = _enforce_rate_limit(request, limiter)
    body = await read_json_body(request)

    raw_form = body.get("formData")
    if not isinstance(raw_form, dict):
        raise HTTPException(status_code=400, detail="Neplatná data formuláře: Povinné pole")
    raw_photos = body.get("photos") or {}
    if not isinstance(raw_photos, dict):
        raise HTTPException(status_code=400, detail=EXTERIOR_PHOTOS_MESSAGE)
    try:
        form = PropertyFormData.model_validate(raw_form)
        photo_set = PhotoSet.model_validate(raw_photos)
    except ValidationError as exc:
        raise HTTPException(
            status_code=400, detail=f"Neplatná data formuláře: {first_error_message(exc)}"
        ) from exc

    if len(photo_set.exterior) < MIN_EXTERIOR_PHOTOS:
        raise HTTPException(status_code=400, detail=EXTERIOR_PHOTOS_MESSAGE)
    if len(photo_set.interior) < MIN_INTERIOR_PHOTOS:
        raise HTTPException(status_code=400, detail=INTERIOR_PHOTOS_MESSAGE)
    total = len(photo_set.exterior) + len(photo_set.interior) + len(photo_set.additional)
    if total > MAX_PHOTOS:
        raise HTTPException(status_code=400, detail=TOO_MANY_PHOTOS_MESSAGE)

    photos: Dict[str, List[Image.Image]] = {
        "exterior": decode_images(photo_set.exterior, "fotografie exteriéru"),
        "interior": decode_images(photo_set.interior, "fotografie interiéru"),
        "additional": decode_images(photo_set.additional, "další fotografie"),
    }
    cadastral_map = decode_optional_image(body.get("cadastralMap"), "katastrální mapa")
    project_doc = decode_optional_pdf(body.get("projectDoc"), "projektová dokumentace")

    logger.info(
        "analyze_property: caller=%s layout=%s photos=%d cadastral_map=%s project_doc=%s",
        caller,
        form.layout,
        total,
        cadastral_map is not None,
        project_doc is not None,
    )
    result = await _run_analysis("analyze_property", analyze_property, form, photos, cadastral_map, project_doc)
    return JSONResponse({"success": True, "data": result})


@api_router.post("/analyze-property-pdf")
async def analyze_property_pdf_endpoint(
    request: Request, limiter: RateLimiter = Depends(get_rate_limiter)
) -> JSONResponse:
    """PDF flow: the model reads the appraisal form and checks it against the photos."""

    caller = _enforce_rate_limit(request, limiter)
    body = await read_json_body(request)

    pdf_payload = body.get("pdfBase64")
    if not pdf_payload or not isinstance(pdf_payload, str):
        raise HTTPException(status_code=400, detail=PDF_REQUIRED_MESSAGE)
    photo_payloads = body.get("photos")
    if not isinstance(photo_payloads, list) or len(photo_payloads) < MIN_PDF_FLOW_PHOTOS:
        raise HTTPException(status_code=400, detail=PDF_FLOW_PHOTOS_MESSAGE)

    pdf_bytes = decode_pdf(pdf_payload, "PDF formulář")
    photos = decode_images(photo_payloads, "fotografie")
    cadastral_map = decode_optional_image(body.get("cadastralMap"), "katastrální mapa")
    technical_doc = _technical_doc(body.get("technicalDoc"))

    logger.info(
        "analyze_property_pdf: caller=%s pdf_bytes=%d photos=%d cadastral_map=%s technical_doc=%s",
        caller,
        len(pdf_bytes),
        len(photos),
        cadastral_map is not None,
        technical_doc is not None,
    )
    result = await _run_analysis(
        "analyze_property_pdf", analyze_property_from_pdf, pdf_bytes, photos, cadastral_map, technical_doc
    )
    return JSONResponse({"success": True, "data": result})


@api_router.post("/generate-pdf")
async def generate_pdf_endpoint(request: Request) -> Response:
    """Render the (possibly reviewer-edited) result as a downloadable PDF."""

    body = await read_json_body(request)
    try:
        payload = GeneratePdfPayload.model_validate(body)
    except ValidationError as exc:
        raise HTTPException(status_code=400, detail=MISSING_RESULTS_MESSAGE) from exc

    form_data = payload.form_data
    if form_data is None:
        extracted = payload.validation_results.get("extractedData")
        form_data = extracted if isinstance(extracted, dict) else {}

    try:
        pdf_bytes = await run_in_threadpool(
            generate_results_pdf,
            form_data,
            payload.validation_results,
            payload.manual_edits,
            payload.bank_officer_note,
        )
    except Exception as exc:
        logger.exception("generate_pdf: report rendering failed")
        raise HTTPException(status_code=500, detail=f"Chyba při generování PDF: {exc}") from exc

    filename = f"vysledek-kontroly-{int(time.time() * 1000)}.pdf"
    return Response(
        content=pdf_bytes,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


__all__ = ["frontend_router", "api_router"]
