import base64
from unittest.mock import patch

import pytest
from PIL import Image

from kontrola.ai import QUOTA_MESSAGE, AIServiceError
from kontrola.conftest import image_base64, pdf_bytes
from kontrola.routes import EXTERIOR_PHOTOS_MESSAGE, TECHNICAL_DOC_MESSAGE
from kontrola.schemas import PropertyFormData


@pytest.fixture
def mock_pdf_analysis():
    with patch("kontrola.routes.analyze_property_from_pdf") as mocked:
        mocked.return_value = {"recommendation": "approved", "summary": "OK"}
        yield mocked


@pytest.fixture
def mock_form_analysis():
    with patch("kontrola.routes.analyze_property") as mocked:
        mocked.return_value = {"recommendation": "manualReview", "summary": "Nejisté"}
        yield mocked


# --- PDF flow ---------------------------------------------------------------


def test_seven_photos_are_rejected_before_the_model_call(client, mock_pdf_analysis, pdf_b64, photo_b64):
    response = client.post("/api/analyze-property-pdf", json={"pdfBase64": pdf_b64, "photos": [photo_b64] * 7})

    assert response.status_code == 400
    assert response.json() == {"success": False, "error": "Musí být nahráno minimálně 8 fotografií"}
    mock_pdf_analysis.assert_not_called()


def test_missing_pdf(client, mock_pdf_analysis, photo_b64):
    response = client.post("/api/analyze-property-pdf", json={"photos": [photo_b64] * 8})

    assert response.status_code == 400
    assert response.json()["error"] == "PDF formulář je povinný"
    mock_pdf_analysis.assert_not_called()


def test_photos_must_be_a_list(client, mock_pdf_analysis, pdf_b64, photo_b64):
    response = client.post("/api/analyze-property-pdf", json={"pdfBase64": pdf_b64, "photos": photo_b64})

    assert response.status_code == 400
    assert response.json()["error"] == "Musí být nahráno minimálně 8 fotografií"


def test_successful_pdf_analysis(client, mock_pdf_analysis, pdf_b64, photo_b64):
    response = client.post(
        "/api/analyze-property-pdf",
        json={"pdfBase64": "data:application/pdf;base64," + pdf_b64, "photos": [photo_b64] * 8},
    )

    assert response.status_code == 200
    assert response.json() == {"success": True, "data": {"recommendation": "approved", "summary": "OK"}}

    mock_pdf_analysis.assert_called_once()
    sent_pdf, sent_photos, cadastral_map, technical_doc = mock_pdf_analysis.call_args.args
    assert sent_pdf.startswith(b"%PDF")
    assert len(sent_photos) == 8
    assert all(isinstance(photo, Image.Image) for photo in sent_photos)
    assert cadastral_map is None
    assert technical_doc is None


def test_large_photos_are_downsized(client, mock_pdf_analysis, pdf_b64, photo_b64):
    big = image_base64(size=(2000, 1000), fmt="PNG")
    client.post("/api/analyze-property-pdf", json={"pdfBase64": pdf_b64, "photos": [big] + [photo_b64] * 7})

    sent_photos = mock_pdf_analysis.call_args.args[1]
    assert sent_photos[0].size == (1024, 512)
    assert sent_photos[0].format == "JPEG"


def test_technical_doc_as_pdf_or_image(client, mock_pdf_analysis, pdf_b64, photo_b64):
    body = {"pdfBase64": pdf_b64, "photos": [photo_b64] * 8, "cadastralMap": photo_b64, "technicalDoc": pdf_b64}
    client.post("/api/analyze-property-pdf", json=body)
    _, _, cadastral_map, technical_doc = mock_pdf_analysis.call_args.args
    assert isinstance(cadastral_map, Image.Image)
    assert isinstance(technical_doc, bytes) and technical_doc.startswith(b"%PDF")

    body["technicalDoc"] = photo_b64
    client.post("/api/analyze-property-pdf", json=body)
    assert isinstance(mock_pdf_analysis.call_args.args[3], Image.Image)


@pytest.mark.parametrize("technical_doc", [{"a": 1}, ["JVBERi0="], 42, True])
def test_technical_doc_of_wrong_type(client, mock_pdf_analysis, pdf_b64, photo_b64, technical_doc):
    body = {"pdfBase64": pdf_b64, "photos": [photo_b64] * 8, "technicalDoc": technical_doc}
    response = client.post("/api/analyze-property-pdf", json=body)

    assert response.status_code == 400
    assert response.headers["content-type"].startswith("application/json")
    assert response.json() == {"success": False, "error": TECHNICAL_DOC_MESSAGE}
    mock_pdf_analysis.assert_not_called()


def test_unsupported_photo_format(client, mock_pdf_analysis, pdf_b64, photo_b64):
    gif = image_base64(fmt="GIF")
    response = client.post("/api/analyze-property-pdf", json={"pdfBase64": pdf_b64, "photos": [gif] + [photo_b64] * 7})

    assert response.status_code == 400
    assert response.json()["error"] == "Pouze JPG a PNG formáty jsou povoleny"
    mock_pdf_analysis.assert_not_called()


def test_form_that_is_not_a_pdf(client, mock_pdf_analysis, photo_b64):
    fake_pdf = base64.b64encode(b"just some text").decode("ascii")
    response = client.post("/api/analyze-property-pdf", json={"pdfBase64": fake_pdf, "photos": [photo_b64] * 8})

    assert response.status_code == 400
    assert response.json()["error"] == "Pouze PDF formát je povolen"


def test_undecodable_base64(client, mock_pdf_analysis, pdf_b64):
    response = client.post("/api/analyze-property-pdf", json={"pdfBase64": pdf_b64, "photos": ["***"] * 8})

    assert response.status_code == 400
    assert response.json()["error"].startswith("Neplatný soubor")


def test_too_many_photos(client, mock_pdf_analysis, pdf_b64, photo_b64):
    response = client.post("/api/analyze-property-pdf", json={"pdfBase64": pdf_b64, "photos": [photo_b64] * 31})

    assert response.status_code == 400
    assert response.json()["error"] == "Maximální počet souborů je 30"


def test_oversized_upload(client, mock_pdf_analysis, photo_b64):
    oversized = base64.b64encode(pdf_bytes() + b"\0" * (10 * 1024 * 1024)).decode("ascii")
    response = client.post("/api/analyze-property-pdf", json={"pdfBase64": oversized, "photos": [photo_b64] * 8})

    assert response.status_code == 400
    assert response.json()["error"] == "Soubor je příliš velký (max 10MB)"


def test_model_failure_maps_to_500(client, mock_pdf_analysis, pdf_b64, photo_b64):
    mock_pdf_analysis.side_effect = AIServiceError(QUOTA_MESSAGE)
    response = client.post("/api/analyze-property-pdf", json={"pdfBase64": pdf_b64, "photos": [photo_b64] * 8})

    assert response.status_code == 500
    assert response.json() == {"success": False, "error": QUOTA_MESSAGE}


def test_unexpected_failure_without_message(client, mock_pdf_analysis, pdf_b64, photo_b64):
    mock_pdf_analysis.side_effect = RuntimeError()
    response = client.post("/api/analyze-property-pdf", json={"pdfBase64": pdf_b64, "photos": [photo_b64] * 8})

    assert response.status_code == 500
    assert response.json()["error"] == "Neznámá chyba při analýze"


# --- form flow --------------------------------------------------------------


def _form_body(form_data, exterior, interior, **extra):
    body = {"formData": form_data, "photos": {"exterior": exterior, "interior": interior, "additional": []}}
    body.update(extra)
    return body


def test_form_flow_success(client, mock_form_analysis, form_data, photo_b64):
    response = client.post("/api/analyze-property", json=_form_body(form_data, [photo_b64] * 5, [photo_b64] * 3))

    assert response.status_code == 200
    assert response.json()["data"]["recommendation"] == "manualReview"
    form, photos, cadastral_map, project_doc = mock_form_analysis.call_args.args
    assert isinstance(form, PropertyFormData)
    assert form.total_floor_area == 120.5
    assert form.address.zip_code == "60200"
    assert len(photos["exterior"]) == 5
    assert len(photos["interior"]) == 3
    assert photos["additional"] == []
    assert cadastral_map is None and project_doc is None


def test_form_flow_needs_five_exterior_photos(client, mock_form_analysis, form_data, photo_b64):
    response = client.post("/api/analyze-property", json=_form_body(form_data, [photo_b64] * 4, [photo_b64] * 3))

    assert response.status_code == 400
    assert response.json()["error"] == (
        "Musí být nahrány minimálně 4 fotografie exteriéru + číslo popisné (celkem 5 fotek)"
    )
    mock_form_analysis.assert_not_called()


def test_form_flow_needs_three_interior_photos(client, mock_form_analysis, form_data, photo_b64):
    response = client.post("/api/analyze-property", json=_form_body(form_data, [photo_b64] * 5, [photo_b64] * 2))

    assert response.status_code == 400
    assert response.json()["error"] == "Musí být nahrány minimálně 3 fotografie interiéru (kuchyň, koupelna, chodba)"
    mock_form_analysis.assert_not_called()


@pytest.mark.parametrize("photos", [["a"] * 8, "exterior", 5])
def test_form_flow_photos_not_grouped(client, mock_form_analysis, form_data, photos):
    response = client.post("/api/analyze-property", json=_form_body(form_data, [], [], photos=photos))

    assert response.status_code == 400
    assert response.json()["error"] == EXTERIOR_PHOTOS_MESSAGE
    mock_form_analysis.assert_not_called()


@pytest.mark.parametrize(
    "mutate, message",
    [
        (lambda form: form["address"].update(zipCode="602 00"), "Neplatné PSČ (formát: 12345)"),
        (lambda form: form.update(landArea=0), "Plocha pozemku musí být kladné číslo"),
        (lambda form: form.update(constructionYear=1700), "Rok výstavby musí být po roce 1800"),
        (lambda form: form.update(garageCount=-1), "Počet garáží nemůže být záporný"),
        (lambda form: form["address"].update(street=""), "Povinné pole"),
        (lambda form: form.pop("cadastral"), "Povinné pole"),
    ],
)
def test_form_validation_messages(client, mock_form_analysis, form_data, photo_b64, mutate, message):
    mutate(form_data)
    response = client.post("/api/analyze-property", json=_form_body(form_data, [photo_b64] * 5, [photo_b64] * 3))

    assert response.status_code == 400
    assert response.json()["error"] == f"Neplatná data formuláře: {message}"
    mock_form_analysis.assert_not_called()


def test_form_flow_with_project_documentation(client, mock_form_analysis, form_data, photo_b64, pdf_b64):
    body = _form_body(form_data, [photo_b64] * 5, [photo_b64] * 3, cadastralMap=photo_b64, projectDoc=pdf_b64)
    response = client.post("/api/analyze-property", json=body)

    assert response.status_code == 200
    _, _, cadastral_map, project_doc = mock_form_analysis.call_args.args
    assert isinstance(cadastral_map, Image.Image)
    assert project_doc.startswith(b"%PDF")
