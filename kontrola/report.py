"""PDF report of a property check, rendered with PyMuPDF."""
from __future__ import annotations

import textwrap
from datetime import datetime
from time import perf_counter
from typing import Any, Dict, List, Optional, Sequence, Tuple

import fitz  # PyMuPDF

from .logging_config import get_logger

logger = get_logger(__name__)

PAGE_WIDTH = 595
PAGE_HEIGHT = 842
MARGIN = 50
FONT_SIZE = 10
LINE_HEIGHT = 15
# Souřadnice PyMuPDF rostou směrem dolů; pod touto hranicí začíná nová stránka
BOTTOM_LIMIT = PAGE_HEIGHT - 100
FOOTER_TOP = PAGE_HEIGHT - 45

SUMMARY_WRAP = 80
NOTE_WRAP = 52
NOTE_OFFSET = 200
VALUE_CELL_WIDTH = NOTE_OFFSET - 30

Color = Tuple[float, float, float]

COLORS: Dict[str, Color] = {
    "green": (0.0, 0.78, 0.33),
    "red": (1.0, 0.23, 0.19),
    "yellow": (1.0, 0.72, 0.0),
}
NEUTRAL: Color = (0.5, 0.5, 0.5)
BLACK: Color = (0.0, 0.0, 0.0)
ISSUE_RED: Color = (1.0, 0.0, 0.0)
ISSUE_ORANGE: Color = (1.0, 0.5, 0.0)

RECOMMENDATION_COLORS = {"approved": "green", "rejected": "red", "manualReview": "yellow"}
RECOMMENDATION_LABELS = {
    "approved": "SCHVÁLENO",
    "rejected": "ZAMÍTNUTO",
    "manualReview": "MANUÁLNÍ KONTROLA",
}

METHOD_LABELS = {
    "technicalDocumentation": "technická dokumentace",
    "projectDocumentation": "projektová dokumentace",
    "pdfDocument": "PDF formulář",
    "interiorPhotos": "fotografie interiéru",
    "exteriorEstimate": "odhad z exteriéru",
}

DIRECTION_LABELS = {"north": "sever", "south": "jih", "east": "východ", "west": "západ"}

# (klíč, popisek, druh hodnoty)
REPORT_FIELDS: Sequence[Tuple[str, str, str]] = (
    ("propertyCondition", "Stav nemovitosti", "text"),
    ("layout", "Dispozice", "text"),
    ("numberOfFloors", "Počet podlaží", "number"),
    ("hasAttic", "Podkroví", "bool"),
    ("atticHabitable", "Obytné podkroví", "bool"),
    ("hasBasement", "Sklep", "bool"),
    ("roofType", "Typ střechy", "text"),
    ("landArea", "Plocha pozemku", "area"),
    ("builtUpArea", "Zastavěná plocha", "area"),
    ("totalFloorArea", "Celková plocha", "area"),
)


def format_number(value: Any) -> str:
    if value is None or value == "":
        return "—"
    if isinstance(value, bool):
        return "Ano" if value else "Ne"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def format_field_value(value: Any, kind: str) -> str:
    if value is None or value == "":
        return "—"
    if kind == "bool" and isinstance(value, bool):
        return "Ano" if value else "Ne"
    if kind == "area":
        return f"{format_number(value)} m²"
    if kind == "number":
        return format_number(value)
    return str(value)


def format_timestamp(moment: datetime) -> str:
    """Czech locale style, e.g. ``19. 10. 2026 9:05:07``."""

    return f"{moment.day}. {moment.month}. {moment.year} {moment.hour}:{moment.minute:02d}:{moment.second:02d}"


def wrap_lines(text: Any, width: int) -> List[str]:
    content = str(text or "").strip()
    if not content:
        return []
    lines: List[str] = []
    for paragraph in content.splitlines():
        lines.extend(textwrap.wrap(paragraph, width) or [""])
    return lines


def _tint(color: Color) -> Color:
    red, green, blue = color
    return (min(1.0, red + 0.8), min(1.0, green + 0.8), min(1.0, blue + 0.8))


def fit_to_width(text: str, width: float, font: fitz.Font, fontsize: float = FONT_SIZE) -> List[str]:
    """Greedy word wrap by measured text width; a single overlong word keeps its own line."""

    lines: List[str] = []
    current = ""
    for word in text.split():
        candidate = f"{current} {word}" if current else word
        if current and font.text_length(candidate, fontsize=fontsize) > width:
            lines.append(current)
            current = word
        else:
            current = candidate
    if current:
        lines.append(current)
    return lines or [""]


class _ReportWriter:
    """Keeps the cursor position and starts new pages as content runs down.

    Text is collected per page and colour and written once in ``finish`` so that
    every font ends up embedded a single time in the document.
    """

    def __init__(self) -> None:
        self.doc = fitz.open()
        self.regular = fitz.Font("helv")
        self.bold = fitz.Font("hebo")
        self._texts: Dict[Tuple[int, Color], fitz.TextWriter] = {}
        self.page: Optional[fitz.Page] = None
        self.y = float(MARGIN)
        self.new_page()

    def new_page(self) -> None:
        self.page = self.doc.new_page(width=PAGE_WIDTH, height=PAGE_HEIGHT)
        self.y = float(MARGIN)

    def ensure_space(self, height: float) -> None:
        if self.y + height > BOTTOM_LIMIT:
            self.new_page()

    def text_at(
        self,
        page: fitz.Page,
        x: float,
        y: float,
        text: str,
        *,
        bold: bool = False,
        color: Optional[Color] = None,
    ) -> None:
        key = (page.number, color or BLACK)
        writer = self._texts.get(key)
        if writer is None:
            writer = self._texts[key] = fitz.TextWriter(page.rect)
        font = self.bold if bold else self.regular
        writer.append(fitz.Point(x, y + FONT_SIZE), text, font=font, fontsize=FONT_SIZE)

    def line(self, text: str, *, x: float = MARGIN, bold: bool = False, color: Optional[Color] = None) -> None:
        self.ensure_space(LINE_HEIGHT)
        self.text_at(self.page, x, self.y, text, bold=bold, color=color)
        self.y += LINE_HEIGHT

    def heading(self, text: str) -> None:
        self.line(text, bold=True)

    def paragraph(self, text: Any, width: int = SUMMARY_WRAP) -> None:
        for wrapped in wrap_lines(text, width) or ["—"]:
            self.line(wrapped)

    def gap(self, lines: float = 1) -> None:
        self.y += LINE_HEIGHT * lines

    def box(self, x: float, y: float, width: float, height: float, color: Color) -> None:
        self.page.draw_rect(
            fitz.Rect(x, y, x + width, y + height),
            color=color,
            fill=_tint(color),
            width=2,
            fill_opacity=0.3,
        )

    def finish(self, footer_lines: Sequence[str]) -> bytes:
        for page in self.doc:
            for index, text in enumerate(footer_lines):
                self.text_at(page, MARGIN, FOOTER_TOP + index * LINE_HEIGHT, text)
        for (number, color), writer in self._texts.items():
            writer.write_text(self.doc[number], color=color)
        # garbage=4 also merges identical streams
        data = self.doc.tobytes(garbage=4, deflate=True)
        self.doc.close()
        return data


def merge_manual_edits(
    validation_results: Dict[str, Any], manual_edits: Optional[Dict[str, Any]]
) -> Dict[str, Any]:
    """Reviewer edits replace whole top-level sections of the AI result."""

    if not manual_edits:
        return dict(validation_results)
    merged = dict(validation_results)
    merged.update(manual_edits)
    return merged


def _draw_recommendation(writer: _ReportWriter, recommendation: Any) -> None:
    key = str(recommendation or "")
    color = COLORS.get(RECOMMENDATION_COLORS.get(key, ""), NEUTRAL)
    label = RECOMMENDATION_LABELS.get(key, key.upper() or "—")
    writer.ensure_space(40)
    writer.box(MARGIN, writer.y, PAGE_WIDTH - 2 * MARGIN, 30, color)
    writer.text_at(writer.page, MARGIN + 10, writer.y + 8, f"DOPORUČENÍ: {label}", bold=True)
    writer.y += 50


def _draw_basic_data(writer: _ReportWriter, form_data: Dict[str, Any]) -> None:
    address = form_data.get("address") or {}
    cadastral = form_data.get("cadastral") or {}

    writer.heading("ZÁKLADNÍ ÚDAJE")
    street = " ".join(str(part) for part in (address.get("street"), address.get("houseNumber")) if part)
    city = address.get("city") or ""
    writer.line(f"Adresa: {street}, {city}" if city else f"Adresa: {street or '—'}")
    writer.line(f"PSČ: {address.get('zipCode') or '—'}")

    cadastral_parts = [
        ("k.ú.", cadastral.get("cadastralArea")),
        ("LV", cadastral.get("landRegistryNumber")),
        ("obec", cadastral.get("municipality")),
        ("okres", cadastral.get("district")),
        ("kraj", cadastral.get("region")),
    ]
    present = [f"{label} {value}" for label, value in cadastral_parts if value]
    if present:
        writer.line("Katastr: " + ", ".join(present))
    writer.gap()


def _draw_validation_rows(writer: _ReportWriter, form_data: Dict[str, Any], results: Dict[str, Any]) -> None:
    validation = results.get("validation") or {}
    writer.heading("VÝSLEDKY KONTROLY POLÍ")

    for key, label, kind in REPORT_FIELDS:
        entry = validation.get(key) or {}
        color = COLORS.get(str(entry.get("color", "")), NEUTRAL)
        note_lines = wrap_lines(entry.get("note"), NOTE_WRAP)
        note_lines = [f"({line})" if len(note_lines) == 1 else line for line in note_lines]
        value = format_field_value(form_data.get(key), kind)
        value_lines = fit_to_width(f"{label}: {value}", VALUE_CELL_WIDTH, writer.regular)
        row_height = LINE_HEIGHT * max(len(value_lines), len(note_lines))

        writer.ensure_space(row_height)
        top = writer.y
        writer.box(MARGIN, top + 1, 20, 12, color)
        for index, text in enumerate(value_lines):
            writer.text_at(writer.page, MARGIN + 25, top + index * LINE_HEIGHT, text)
        for index, note in enumerate(note_lines):
            writer.text_at(writer.page, MARGIN + NOTE_OFFSET, top + index * LINE_HEIGHT, note)
        writer.y = top + row_height
    writer.gap()


def _draw_floor_area(writer: _ReportWriter, form_data: Dict[str, Any], results: Dict[str, Any]) -> None:
    estimate = results.get("floorAreaEstimate") or {}
    method = estimate.get("method")

    writer.heading("VÝPOČET PODLAHOVÉ PLOCHY")
    writer.line(f"Klient uvedl: {format_field_value(form_data.get('totalFloorArea'), 'area')}")
    writer.line(f"AI vypočítala: {format_field_value(estimate.get('calculated'), 'area')}")
    writer.line(f"Jistota: {format_number(estimate.get('confidence'))}%")
    writer.line(f"Metoda: {METHOD_LABELS.get(method, method) if method else '—'}")
    if estimate.get("matchesClientData") is False and estimate.get("difference") not in (None, 0):
        writer.line(f"Rozdíl: {format_field_value(estimate.get('difference'), 'area')}")
    details = wrap_lines(f"Detail: {estimate.get('details') or '—'}", SUMMARY_WRAP)
    for line in details:
        writer.line(line)
    writer.gap()


def _yes_no_unknown(value: Any) -> str:
    if value is True:
        return "souhlasí"
    if value is False:
        return "nesouhlasí"
    return "neověřeno"


def _draw_cadastral_check(writer: _ReportWriter, results: Dict[str, Any]) -> None:
    check = results.get("cadastralMapCheck") or {}
    if not check.get("available"):
        return
    writer.heading("KONTROLA KATASTRÁLNÍ MAPY")
    writer.line(f"Rozloha pozemku: {_yes_no_unknown(check.get('landAreaMatches'))}")
    writer.line(f"Umístění stavby: {_yes_no_unknown(check.get('buildingLocationCorrect'))}")
    if check.get("notes"):
        for line in wrap_lines(f"Poznámka: {check['notes']}", SUMMARY_WRAP):
            writer.line(line)
    writer.gap()


def collect_issue_lines(issues: Dict[str, Any]) -> List[Tuple[str, Color]]:
    """Turn the AI issue flags into report lines; an empty list means no issues section."""

    lines: List[Tuple[str, Color]] = []
    if issues.get("underConstruction"):
        lines.append(("• Nemovitost je v rekonstrukci", ISSUE_RED))
    if issues.get("severelyDamaged"):
        lines.append(("• Výrazné poškození nemovitosti", ISSUE_RED))
    if issues.get("visibleCracks"):
        lines.append(("• Viditelné praskliny", ISSUE_RED))

    facade = issues.get("facadeDamagePercent") or 0
    if isinstance(facade, (int, float)) and not isinstance(facade, bool) and facade > 0:
        lines.append((f"• Poškození fasády: {format_number(facade)}%", ISSUE_RED))

    if issues.get("photosOutdated"):
        lines.append(("• Fotografie jsou zjevně neaktuální", ISSUE_ORANGE))

    coverage = issues.get("incompleteExteriorCoverage") or {}
    directions = [DIRECTION_LABELS.get(str(item), str(item)) for item in coverage.get("missingDirections") or []]
    severity = coverage.get("severity")
    if directions and severity in {"critical", "acceptable"}:
        suffix = " (řadový dům, tolerováno)" if severity == "acceptable" else ""
        color = ISSUE_RED if severity == "critical" else ISSUE_ORANGE
        lines.append((f"• Chybí pohled ze stran: {', '.join(directions)}{suffix}", color))

    missing = [str(item) for item in issues.get("missingPhotos") or [] if str(item).strip()]
    if missing:
        lines.append(("• Chybějící fotografie:", ISSUE_ORANGE))
        lines.extend((f"  - {item}", BLACK) for item in missing)
    return lines


def _draw_issues(writer: _ReportWriter, results: Dict[str, Any]) -> None:
    lines = collect_issue_lines(results.get("issues") or {})
    if not lines:
        return
    writer.heading("NALEZENÉ PROBLÉMY")
    for text, color in lines:
        indent = 10 if text.startswith("  -") else 0
        for index, wrapped in enumerate(wrap_lines(text, SUMMARY_WRAP)):
            writer.line(wrapped if index == 0 else f"  {wrapped}", x=MARGIN + indent, color=color)
    writer.gap()


def generate_results_pdf(
    form_data: Optional[Dict[str, Any]],
    validation_results: Dict[str, Any],
    manual_edits: Optional[Dict[str, Any]] = None,
    bank_officer_note: Optional[str] = None,
    generated_at: Optional[datetime] = None,
) -> bytes:
    """Lay out the check result as an A4 PDF and return its bytes."""

    start = perf_counter()
    form = form_data or {}
    results = merge_manual_edits(validation_results, manual_edits)

    writer = _ReportWriter()
    writer.line("VÝSLEDEK KONTROLY NEMOVITOSTI", bold=True)
    writer.line("AI Automatická Kontrola")
    writer.gap()

    _draw_recommendation(writer, results.get("recommendation"))
    _draw_basic_data(writer, form)
    _draw_validation_rows(writer, form, results)
    _draw_floor_area(writer, form, results)
    _draw_cadastral_check(writer, results)
    _draw_issues(writer, results)

    writer.heading("SHRNUTÍ")
    writer.paragraph(results.get("summary"))
    writer.gap()

    if bank_officer_note and bank_officer_note.strip():
        writer.heading("POZNÁMKA BANKÉŘE")
        writer.paragraph(bank_officer_note)

    page_count = len(writer.doc)
    moment = generated_at or datetime.now()
    data = writer.finish(
        [
            f"Datum kontroly: {format_timestamp(moment)}",
            "Zpracováno pomocí umělé inteligence (Google Gemini)",
        ]
    )
    logger.info(
        "generate_results_pdf: rendered %d pages (%d bytes, manual_edits=%s) in %.3fs",
        page_count,
        len(data),
        bool(manual_edits),
        perf_counter() - start,
    )
    return data


__all__ = [
    "generate_results_pdf",
    "merge_manual_edits",
    "collect_issue_lines",
    "format_field_value",
    "format_timestamp",
    "wrap_lines",
    "fit_to_width",
]
