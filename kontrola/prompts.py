"""Prompt builders for Gemini interactions."""
from __future__ import annotations

from datetime import date
from typing import Optional

from .schemas import PropertyFormData, required_photo_counts

VALIDATED_FIELDS = (
    "propertyCondition",
    "layout",
    "numberOfFloors",
    "hasAttic",
    "atticHabitable",
    "hasBasement",
    "roofType",
    "landArea",
    "builtUpArea",
    "totalFloorArea",
)

REJECTION_CRITERIA = """
1. ❌ REKONSTRUKCE: nemovitost je v aktivní rekonstrukci (bourání, lešení, rozestavěné části) → OKAMŽITĚ ZAMÍTNOUT
2. ❌ VÝRAZNÉ POŠKOZENÍ: nemovitost nelze užívat (zřícené části, chybějící střecha) → OKAMŽITĚ ZAMÍTNOUT
3. ❌ PRASKLINY: na JAKÉKOLIV fotce jsou viditelné praskliny v konstrukci → OKAMŽITĚ ZAMÍTNOUT
4. ❌ FASÁDA: chybí více než 20 % fasády → OKAMŽITĚ ZAMÍTNOUT
""".strip()

RECOMMENDATION_RULES = """
FINÁLNÍ DOPORUČENÍ:
- Je-li splněno JAKÉKOLIV odmítací kritérium → "recommendation": "rejected"
- Nejsi-li si jistý u více než 3 polí → "recommendation": "manualReview"
- Pokud data převážně souhlasí a žádné odmítací kritérium neplatí → "recommendation": "approved"
- "summary": 2–3 věty shrnující výsledek kontroly
""".strip()


def _bool_text(value: bool) -> str:
    return "true" if value else "false"


def _field_contract(with_extracted_value: bool) -> str:
    extracted = '"extractedValue": string, ' if with_extracted_value else ""
    rows = ",\n".join(
        f'    "{name}": {{ {extracted}"matches": boolean, "confidence": string, "note": string, "color": string }}'
        for name in VALIDATED_FIELDS
    )
    return "{\n" + rows + "\n  }"


def _floor_rules() -> str:
    return """
Do započitatelné podlahové plochy ZAHRNUJ přízemí, patro a obytné podkroví.
NEZAHRNUJ sklep (ani částečně nad terénem), neobytné podkroví (půdu), garáž a technické zázemí.
Sklep se NIKDY nepočítá do numberOfFloors; podkroví se do numberOfFloors také nepočítá.
""".strip()


def build_form_prompt(form: PropertyFormData, has_project_doc: bool, today: Optional[date] = None) -> str:
    """Instruction for the form flow: compare the client's declared values with the photos."""

    today_text = (today or date.today()).isoformat()
    required = required_photo_counts(form.layout, form.garage_count)
    interior = required["interior"]
    garage_line = (
        f"- Garáž/stodola: {required['garage']} fotek" if required["garage"] > 0 else "- Vedlejší stavby: nejsou uvedeny"
    )

    return f"""
Jsi expert na oceňování nemovitostí pro Českou spořitelnu.

TVŮJ ÚKOL:
Analyzuj přiloženou fotodokumentaci a porovnej ji s údaji, které vyplnil klient. Buď PŘÍSNÝ a DŮSLEDNÝ.

PRIORITNÍ KONTROLA – ODMÍTACÍ KRITÉRIA:
{REJECTION_CRITERIA}
5. ❌ NEKOMPLETNÍ FOTODOKUMENTACE: chybí požadované fotky podle dispozice → OKAMŽITĚ ZAMÍTNOUT

POŽADOVANÁ FOTODOKUMENTACE:
Exteriér ({required['exterior']} fotek): přední strana s viditelným číslem popisným, zadní strana, levá strana, pravá strana, celkový pohled.
Interiér podle dispozice "{form.layout}": kuchyň ({interior['kitchen']}), koupelna ({interior['bathroom']}+), chodba ({interior['hallway']}), pokoje ({interior['rooms']}).
{garage_line}

POLE KE KONTROLE (hodnota uvedená klientem):
1. propertyCondition: "{form.property_condition}" – odpovídá skutečný stav?
2. layout: "{form.layout}" – spočítej pokoje z fotek interiéru
3. numberOfFloors: {form.number_of_floors} – spočítej nadzemní obytná podlaží z exteriéru
4. hasAttic: {_bool_text(form.has_attic)}
5. atticHabitable: {_bool_text(form.attic_habitable)} – je podkroví obytné (okna, dokončené povrchy)?
6. hasBasement: {_bool_text(form.has_basement)}
7. roofType: "{form.roof_type}"
8. landArea: {form.land_area} m² – ověř z katastrální mapy, je-li přiložena
9. builtUpArea: {form.built_up_area} m²
10. totalFloorArea: {form.total_floor_area} m² – VYPOČÍTEJ (viz níže)

Pro každé pole vrať "matches" (souhlasí?), "confidence" ("high" | "medium" | "low"),
"note" (stručné vysvětlení, max 100 znaků) a "color" ("green" = souhlasí s vysokou jistotou,
"red" = nesouhlasí, "yellow" = nejisté).

VÝPOČET PODLAHOVÉ PLOCHY – priorita zdrojů:
1. Projektová dokumentace ({'K DISPOZICI' if has_project_doc else 'NENÍ K DISPOZICI'})
2. Fotografie interiéru (rozměry místností, nábytek jako měřítko)
3. Exteriér (zastavěná plocha × počet podlaží)
{_floor_rules()}

AKTUÁLNOST FOTEK:
Porovnej roční období na fotkách s dnešním datem ({today_text}). Zjevně staré fotky označ ("photosOutdated": true).

{RECOMMENDATION_RULES}

FORMÁT ODPOVĚDI:
Vrať POUZE jeden validní JSON objekt, žádný další text:
{{
  "validation": {_field_contract(False)},
  "floorAreaEstimate": {{
    "calculated": number, "confidence": number, "method": "projectDocumentation" | "interiorPhotos" | "exteriorEstimate",
    "details": string, "matchesClientData": boolean, "difference": number
  }},
  "cadastralMapCheck": {{
    "available": boolean, "landAreaMatches": boolean | null, "buildingLocationCorrect": boolean | null, "notes": string
  }},
  "issues": {{
    "underConstruction": boolean, "severelyDamaged": boolean, "visibleCracks": boolean,
    "facadeDamagePercent": number, "missingPhotos": [string], "photosOutdated": boolean
  }},
  "recommendation": "approved" | "rejected" | "manualReview",
  "summary": string
}}
""".strip()


def build_pdf_prompt(today: Optional[date] = None) -> str:
    """Instruction for the PDF flow: read the appraisal form, then check it against the photos."""

    today_text = (today or date.today()).isoformat()

    return f"""
Jsi expert na oceňování nemovitostí.

TVŮJ ÚKOL:
1. PŘEČTI přiložený PDF formulář "Ocenění rodinného domu" a EXTRAHUJ všechny údaje.
2. ZKONTROLUJ extrahované údaje oproti přiloženým fotografiím.
3. Buď PŘÍSNÝ a DŮSLEDNÝ.

STRUKTURA FORMULÁŘE:
adresa; katastrální údaje (kraj, okres, obec, k.ú., LV); stav domu; konstrukce; dispozice; počet podlaží;
podkroví a jeho využití; typ střechy (valbová, mansardová, plochá, pultová, stanová, věžová, polovalbová);
podsklepení; počet garáží; plocha pozemku, zastavěná plocha a celková podlahová plocha (m²);
přípojky (voda ze sítě/studny, elektřina ze sítě/ostrovní, kanalizace tlaková/spádová/ČOV, plyn, vytápění).

ODMÍTACÍ KRITÉRIA:
{REJECTION_CRITERIA}
5. ❌ NEKOMPLETNÍ FOTODOKUMENTACE: musí být doloženy fotky domu ze VŠECH světových stran (sever, jih, východ, západ).
   U ŘADOVÉHO domu, kde některou stranu nelze vyfotit, to toleruj a poznamenej ("severity": "acceptable").
   U SAMOSTATNÉHO domu s chybějícími stranami → OKAMŽITĚ ZAMÍTNOUT ("severity": "critical").

KONTROLA POLÍ:
Pro každé pole uveď "extractedValue" (hodnota z PDF), "matches", "confidence" ("high" | "medium" | "low"),
"note" (max 100 znaků) a "color" ("green" = souhlasí, "red" = nesouhlasí, "yellow" = nejisté).

POČET PODLAŽÍ, SKLEP A PODKROVÍ:
Počítej pouze OBYTNÁ NADZEMNÍ podlaží.
- Přízemí → numberOfFloors 1
- Sklep + přízemí → numberOfFloors 1, hasBasement true
- Přízemí + patro → numberOfFloors 2
- Přízemí + obytné podkroví → numberOfFloors 1, hasAttic true, atticHabitable true
Sklep poznáš podle oken u terénu nebo pod ním, schodů dolů, technického zázemí (kotelna, prádelna).

PŘÍSNÁ KONTROLA OBYTNÉHO PODKROVÍ:
- Prioritní důkazy: fotky zkosených stropů, obytné místnosti se šikmými stěnami, dokončené povrchy → "green", "high"
- Sekundární důkazy: schodiště do podkroví, pohled z vyššího patra, střešní okna zevnitř → "yellow", "medium"
- NESTAČÍ okna podkroví viditelná zvenku ani půda bez úprav → "red", note "Chybí fotky interiéru podkroví"

VÝPOČET PODLAHOVÉ PLOCHY – priorita zdrojů:
1. Technická dokumentace (je-li přiložena)
2. Hodnota z PDF jako základ
3. Fotografie interiéru
4. Exteriér (zastavěná plocha × počet podlaží)
{_floor_rules()}
Pokud plocha z PDF zjevně zahrnuje sklep, uveď to jako nesrovnalost.

KATASTRÁLNÍ MAPA (je-li přiložena):
ověř rozlohu pozemku a umístění stavby na pozemku, nesrovnalosti poznamenej (max 150 znaků).

AKTUÁLNOST FOTEK:
Porovnej roční období na fotkách s dnešním datem ({today_text}). Zjevně staré fotky označ.

{RECOMMENDATION_RULES}

FORMÁT ODPOVĚDI:
Vrať POUZE jeden validní JSON objekt, žádný další text:
{{
  "extractedData": {{
    "address": {{ "street": string, "houseNumber": string, "city": string, "zipCode": string }},
    "cadastral": {{ "region": string, "district": string, "municipality": string, "cadastralArea": string, "landRegistryNumber": string }},
    "propertyCondition": string, "construction": string, "layout": string, "numberOfFloors": number,
    "hasAttic": boolean, "atticHabitable": boolean, "hasBasement": boolean, "roofType": string,
    "garageCount": number, "landArea": number, "builtUpArea": number, "totalFloorArea": number,
    "utilities": {{ "water": string, "electricity": string, "sewage": string, "gas": boolean, "heating": string }}
  }},
  "validation": {_field_contract(True)},
  "floorAreaEstimate": {{
    "pdfValue": number, "calculated": number, "confidence": number,
    "method": "technicalDocumentation" | "pdfDocument" | "interiorPhotos" | "exteriorEstimate",
    "details": string, "matchesClientData": boolean, "difference": number
  }},
  "cadastralMapCheck": {{
    "available": boolean, "landAreaMatches": boolean | null, "buildingLocationCorrect": boolean | null, "notes": string
  }},
  "issues": {{
    "underConstruction": boolean, "severelyDamaged": boolean, "visibleCracks": boolean,
    "facadeDamagePercent": number, "missingPhotos": [string], "photosOutdated": boolean,
    "incompleteExteriorCoverage": {{
      "isRowHouse": boolean, "missingDirections": ["north" | "south" | "east" | "west"],
      "severity": "critical" | "acceptable" | "complete"
    }}
  }},
  "recommendation": "approved" | "rejected" | "manualReview",
  "summary": string
}}
""".strip()


__all__ = ["VALIDATED_FIELDS", "build_form_prompt", "build_pdf_prompt"]
