"""Pydantic request models and the form validation rules."""
from __future__ import annotations

import re
from datetime import date
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic.alias_generators import to_camel

PropertyCondition = Literal[
    "novostavba",
    "výborně udržovaný",
    "dobře udržovaný",
    "neudržovaný k celkové rekonstrukci",
]
Layout = Literal["1kk", "1+1", "2+1", "3+1", "4+1", "5+1", "6+1", "7+1", "jiný"]
RoofType = Literal["valbová", "mansardová", "plochá", "pultová", "stanová", "věžová", "polovalbová"]

REQUIRED_FIELD_MESSAGE = "Povinné pole"
ZIP_CODE_RE = re.compile(r"^\d{5}$")


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


class Address(_CamelModel):
    street: str = Field(..., min_length=1)
    house_number: str = Field(..., min_length=1)
    city: str = Field(..., min_length=1)
    zip_code: str

    @field_validator("zip_code")
    @classmethod
    def _check_zip_code(cls, value: str) -> str:
        if not ZIP_CODE_RE.match(value):
            raise ValueError("Neplatné PSČ (formát: 12345)")
        return value


class Cadastral(_CamelModel):
    region: str = Field(..., min_length=1)
    district: str = Field(..., min_length=1)
    municipality: str = Field(..., min_length=1)
    cadastral_area: str = Field(..., min_length=1)
    land_registry_number: str = Field(..., min_length=1)


class Utilities(_CamelModel):
    water: Literal["síť", "studna"]
    electricity: Literal["síť", "ostrovní"]
    sewage: Literal["tlaková kanalizace", "spádová kanalizace", "ČOV (čistička odpadních vod)"]
    gas: bool
    heating: str = Field(..., min_length=1)


class PropertyFormData(_CamelModel):
    """Údaje o rodinném domě vyplněné klientem."""

    address: Address
    cadastral: Cadastral

    property_condition: PropertyCondition
    layout: Layout
    number_of_floors: Literal[1, 2]
    has_attic: bool
    attic_habitable: bool
    has_basement: bool
    roof_type: RoofType

    land_area: float
    built_up_area: float
    total_floor_area: float

    construction_year: int
    construction_type: str = Field(..., min_length=1)
    garage_count: int

    utilities: Utilities

    @field_validator("land_area")
    @classmethod
    def _check_land_area(cls, value: float) -> float:
        if value <= 0:
            raise ValueError("Plocha pozemku musí být kladné číslo")
        return value

    @field_validator("built_up_area")
    @classmethod
    def _check_built_up_area(cls, value: float) -> float:
        if value <= 0:
            raise ValueError("Zastavěná plocha musí být kladné číslo")
        return value

    @field_validator("total_floor_area")
    @classmethod
    def _check_total_floor_area(cls, value: float) -> float:
        if value <= 0:
            raise ValueError("Celková plocha musí být kladné číslo")
        return value

    @field_validator("construction_year")
    @classmethod
    def _check_construction_year(cls, value: int) -> int:
        if value < 1800:
            raise ValueError("Rok výstavby musí být po roce 1800")
        if value > date.today().year + 2:
            raise ValueError("Rok výstavby nemůže být v budoucnosti")
        return value

    @field_validator("garage_count")
    @classmethod
    def _check_garage_count(cls, value: int) -> int:
        if value < 0:
            raise ValueError("Počet garáží nemůže být záporný")
        return value


class PhotoSet(BaseModel):
    exterior: List[str] = Field(default_factory=list)
    interior: List[str] = Field(default_factory=list)
    additional: List[str] = Field(default_factory=list)


class GeneratePdfPayload(BaseModel):
    """Body of the report export; the AI result itself is never type-checked."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    validation_results: Dict[str, Any]
    form_data: Optional[Dict[str, Any]] = None
    manual_edits: Optional[Dict[str, Any]] = None
    bank_officer_note: Optional[str] = None


def first_error_message(exc: ValidationError) -> str:
    """Return the first validation problem as a human readable Czech string."""

    errors = exc.errors()
    if not errors:
        return "Neznámá chyba"
    error = errors[0]
    error_type = error.get("type", "")
    if error_type == "value_error":
        ctx_error = (error.get("ctx") or {}).get("error")
        if ctx_error is not None:
            return str(ctx_error)
    if error_type in {"missing", "string_too_short"}:
        return REQUIRED_FIELD_MESSAGE
    location = ".".join(str(part) for part in error.get("loc", ()))
    if error_type in {"literal_error", "enum"}:
        return f"Neplatná hodnota pole {location}"
    return f"{location}: {error.get('msg', 'neplatná hodnota')}"


def required_rooms_count(layout: str) -> int:
    mapping = {
        "1kk": 1,
        "1+1": 1,
        "2+1": 2,
        "3+1": 3,
        "4+1": 4,
        "5+1": 5,
        "6+1": 6,
        "7+1": 7,
        "jiný": 1,
    }
    return mapping.get(layout, 1)


def required_photo_counts(layout: str, garage_count: int) -> Dict[str, Any]:
    """Minimum photo documentation for a layout: four sides plus the house number outside."""

    return {
        "exterior": 5,
        "interior": {
            "kitchen": 1,
            "bathroom": 1,
            "hallway": 1,
            "rooms": required_rooms_count(layout),
        },
        "garage": garage_count,
    }


__all__ = [
    "Address",
    "Cadastral",
    "Utilities",
    "PropertyFormData",
    "PhotoSet",
    "GeneratePdfPayload",
    "first_error_message",
    "required_rooms_count",
    "required_photo_counts",
]
