"""Application configuration and constants."""
from __future__ import annotations

import os

from dotenv import load_dotenv

load_dotenv()

API_KEY = os.environ.get("GEMINI_API_KEY")

MODEL_NAME = os.environ.get("GEMINI_MODEL", "gemini-2.5-pro")

GEN_CFG = {
    "temperature": float(os.environ.get("GEMINI_TEMPERATURE", 0.0)),
    "top_p": float(os.environ.get("GEMINI_TOP_P", 0.9)),
    "max_output_tokens": int(os.environ.get("GEMINI_MAX_TOKENS", 8192)),
    "response_mime_type": "application/json",
}

# Sdílené heslo pro přístup do aplikace (žádné uživatelské účty)
ACCESS_PASSWORD = os.environ.get("KONTROLA_PASSWORD", "sporka2025")
ENVIRONMENT = os.environ.get("KONTROLA_ENV", "development")

SESSION_COOKIE_NAME = "session"
SESSION_COOKIE_VALUE = "authenticated"
SESSION_MAX_AGE = 60 * 60 * 24
SESSION_COOKIE_SECURE = ENVIRONMENT == "production"

RATE_LIMIT_MAX_REQUESTS = int(os.environ.get("RATE_LIMIT_MAX_REQUESTS", 5))
RATE_LIMIT_WINDOW_SECONDS = float(os.environ.get("RATE_LIMIT_WINDOW_SECONDS", 60))
RATE_LIMIT_MAX_KEYS = int(os.environ.get("RATE_LIMIT_MAX_KEYS", 500))

MAX_UPLOAD_BYTES = 10 * 1024 * 1024
MAX_PHOTOS = 30
ALLOWED_IMAGE_FORMATS = ("JPEG", "PNG")
IMAGE_MAX_SIDE = 1024
IMAGE_JPEG_QUALITY = 85

MIN_PDF_FLOW_PHOTOS = 8
MIN_EXTERIOR_PHOTOS = 5
MIN_INTERIOR_PHOTOS = 3


__all__ = [
    "API_KEY",
    "MODEL_NAME",
    "GEN_CFG",
    "ACCESS_PASSWORD",
    "ENVIRONMENT",
    "SESSION_COOKIE_NAME",
    "SESSION_COOKIE_VALUE",
    "SESSION_MAX_AGE",
    "SESSION_COOKIE_SECURE",
    "RATE_LIMIT_MAX_REQUESTS",
    "RATE_LIMIT_WINDOW_SECONDS",
    "RATE_LIMIT_MAX_KEYS",
    "MAX_UPLOAD_BYTES",
    "MAX_PHOTOS",
    "ALLOWED_IMAGE_FORMATS",
    "IMAGE_MAX_SIDE",
    "IMAGE_JPEG_QUALITY",
    "MIN_PDF_FLOW_PHOTOS",
    "MIN_EXTERIOR_PHOTOS",
    "MIN_INTERIOR_PHOTOS",
]
