import base64
import io
from typing import Any, Dict

import fitz
import pytest
from fastapi.testclient import TestClient
from PIL import Image

from kontrola import app
from kontrola.config import SESSION_COOKIE_NAME, SESSION_COOKIE_VALUE
from kontrola.rate_limit import RateLimiter, get_rate_limiter


def image_base64(size=(64, 48), color="red", fmt="JPEG") -> str:
    buffer = io.BytesIO()
    Image.new("RGB", size, color).save(buffer, format=fmt)
    return base64.b64encode(buffer.getvalue()).decode("ascii")


def pdf_bytes(text: str = "Ocenění rodinného domu") -> bytes:
    doc = fitz.open()
    page = doc.new_page()
    page.insert_text((72, 72), text)
    data = doc.tobytes()
    doc.close()
    return data


@pytest.fixture
def limiter():
    fresh = RateLimiter()
    app.dependency_overrides[get_rate_limiter] = lambda: fresh
    yield fresh
    app.dependency_overrides.pop(get_rate_limiter, None)


@pytest.fixture
def client(limiter):
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def logged_in_client(client):
    client.cookies.set(SESSION_COOKIE_NAME, SESSION_COOKIE_VALUE)
    return client


@pytest.fixture
def photo_b64() -> str:
    return image_base64()


@pytest.fixture
def pdf_b64() -> str:
    return base64.b64encode(pdf_bytes()).decode("ascii")


@pytest.fixture
def form_data() -> Dict[str, Any]:
    return {
        "address": {"street": "Květinová", "houseNumber": "12", "city": "Brno", "zipCode": "60200"},
        "cadastral": {
            "region": "Jihomoravský",
            "district": "Brno-město",
            "municipality": "Brno",
            "cadastralArea": "Žabovřesky",
            "landRegistryNumber": "1234",
        },
        "propertyCondition": "dobře udržovaný",
        "layout": "4+1",
        "numberOfFloors": 2,
        "hasAttic": True,
        "atticHabitable": False,
        "hasBasement": False,
        "roofType": "valbová",
        "landArea": 850,
        "builtUpArea": 110.0,
        "totalFloorArea": 120.5,
        "constructionYear": 1995,
        "constructionType": "zděná",
        "garageCount": 1,
        "utilities": {
            "water": "síť",
            "electricity": "síť",
            "sewage": "spádová kanalizace",
            "gas": True,
            "heating": "plynový kotel",
        },
    }


@pytest.fixture
def ai_result() -> Dict[str, Any]:
    return {
        "validation": {
            "propertyCondition": {"matches": True, "confidence": "high", "note": "Odpovídá", "color": "green"},
            "layout": {"matches": True, "confidence": "medium", "note": "4 pokoje viditelné", "color": "green"},
            "numberOfFloors": {"matches": True, "confidence": "high", "note": "", "color": "green"},
            "hasAttic": {"matches": True, "confidence": "high", "note": "", "color": "green"},
            "atticHabitable": {"matches": False, "confidence": "low", "note": "Chybí fotky podkroví", "color": "yellow"},
            "hasBasement": {"matches": True, "confidence": "high", "note": "", "color": "green"},
            "roofType": {"matches": True, "confidence": "high", "note": "", "color": "green"},
            "landArea": {"matches": True, "confidence": "medium", "note": "", "color": "green"},
            "builtUpArea": {"matches": True, "confidence": "medium", "note": "", "color": "green"},
            "totalFloorArea": {"matches": False, "confidence": "medium", "note": "Odhad nižší", "color": "red"},
        },
        "floorAreaEstimate": {
            "calculated": 112,
            "confidence": 70,
            "method": "interiorPhotos",
            "details": "Součet místností z fotografií",
            "matchesClientData": False,
            "difference": 8.5,
        },
        "cadastralMapCheck": {"available": False, "landAreaMatches": None, "buildingLocationCorrect": None, "notes": ""},
        "issues": {
            "underConstruction": False,
            "severelyDamaged": False,
            "visibleCracks": False,
            "facadeDamagePercent": 0,
            "missingPhotos": [],
            "photosOutdated": False,
        },
        "recommendation": "approved",
        "summary": "Nemovitost odpovídá údajům klienta.",
    }
