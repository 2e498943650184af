"""Shared-password gate: login/logout endpoints and the page redirect middleware."""
from __future__ import annotations

import secrets
from typing import Any, Awaitable, Callable

from fastapi import APIRouter, HTTPException, Request
from fastapi.responses import JSONResponse, RedirectResponse, Response

from .config import (
    ACCESS_PASSWORD,
    SESSION_COOKIE_NAME,
    SESSION_COOKIE_SECURE,
    SESSION_COOKIE_VALUE,
    SESSION_MAX_AGE,
)
from .files import read_json_body
from .logging_config import get_logger
from .rate_limit import client_key

logger = get_logger(__name__)

LOGIN_PATH = "/login"
UNPROTECTED_PREFIXES = ("/api/", "/static/")
UNPROTECTED_PATHS = {"/favicon.ico"}

auth_router = APIRouter(prefix="/api/auth")


def password_matches(candidate: Any) -> bool:
    """Exact comparison against the configured secret; anything but a string fails."""

    if not isinstance(candidate, str):
        return False
    return secrets.compare_digest(candidate.encode("utf-8"), ACCESS_PASSWORD.encode("utf-8"))


def has_session(request: Request) -> bool:
    return request.cookies.get(SESSION_COOKIE_NAME) == SESSION_COOKIE_VALUE


@auth_router.post("/login")
async def login(request: Request) -> JSONResponse:
    body = await read_json_body(request)
    password = body.get("password")
    if not password_matches(password):
        logger.info("login: rejected password from %s", client_key(request))
        raise HTTPException(status_code=401, detail="Nesprávné heslo")

    response = JSONResponse({"success": True})
    response.set_cookie(
        SESSION_COOKIE_NAME,
        SESSION_COOKIE_VALUE,
        max_age=SESSION_MAX_AGE,
        path="/",
        httponly=True,
        secure=SESSION_COOKIE_SECURE,
        samesite="strict",
    )
    logger.info("login: session opened for %s", client_key(request))
    return response


@auth_router.post("/logout")
async def logout() -> JSONResponse:
    response = JSONResponse({"success": True})
    response.delete_cookie(
        SESSION_COOKIE_NAME,
        path="/",
        httponly=True,
        secure=SESSION_COOKIE_SECURE,
        samesite="strict",
    )
    return response


def _is_page_request(path: str) -> bool:
    if path in UNPROTECTED_PATHS:
        return False
    return not any(path.startswith(prefix) for prefix in UNPROTECTED_PREFIXES)


async def session_gate(request: Request, call_next: Callable[[Request], Awaitable[Response]]) -> Response:
    """Send page loads without the session flag to the login screen (API routes pass through)."""

    path = request.url.path
    if _is_page_request(path):
        authenticated = has_session(request)
        if not authenticated and path != LOGIN_PATH:
            return RedirectResponse(LOGIN_PATH, status_code=307)
        if authenticated and path == LOGIN_PATH:
            return RedirectResponse("/", status_code=307)
    return await call_next(request)


__all__ = ["auth_router", "session_gate", "password_matches", "has_session", "LOGIN_PATH"]
