from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .auth import auth_router, session_gate
from .logging_config import get_logger, setup_logging
from .routes import api_router, frontend_router
from .schemas import REQUIRED_FIELD_MESSAGE

setup_logging()
logger = get_logger(__name__)

# Create the FastAPI app instance
app = FastAPI(title="Kontrola nemovitostí")
app.middleware("http")(session_gate)


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    detail = exc.detail if isinstance(exc.detail, str) else str(exc.detail)
    return JSONResponse({"success": False, "error": detail}, status_code=exc.status_code, headers=exc.headers)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.info("validation_error_handler: %s %s", request.url.path, exc.errors()[:1])
    return JSONResponse({"success": False, "error": REQUIRED_FIELD_MESSAGE}, status_code=400)


# Include the routers
app.include_router(auth_router)
app.include_router(api_router)
app.include_router(frontend_router)

__all__ = ["app"]
