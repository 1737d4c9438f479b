# tests/server/test_analysis_router.py
import io
import json

import pytest

from mail_auditor.model import AnalysisOptions
from mail_auditor.server.app import create_app

EMAIL = b'<html><body><img src="hero.png"><p>the the end</p><td>No period</td></body></html>'


@pytest.fixture
def client(tmp_path, offline_options):
    app = create_app(options=offline_options, upload_dir=tmp_path / "uploads")
    app.config["TESTING"] = True
    return app.test_client()


def upload(client, data=EMAIL, filename="mail.html"):
    return client.post(
        "/api/upload",
        data={"file": (io.BytesIO(data), filename)},
        content_type="multipart/form-data",
    )


def test_upload_then_analyze(client):
    """Test van de volledige flow: uploaden en daarna op bestandsnaam analyseren."""
    response = upload(client)
    assert response.status_code == 200
    filename = response.get_json()["filename"]
    assert filename == "mail.html"

    response = client.post("/api/analyze", json={"filename": filename})
    assert response.status_code == 200
    body = response.get_json()
    assert body["success"] is True
    assert body["analysis"]["imagesWithoutAlt"][0]["name"] == "hero.png"
    assert body["analysis"]["repeatedWords"] == ["the the"]


def test_analyze_html_content(client):
    response = client.post("/api/analyze", json={"htmlContent": "<td>Hello</td>"})

    assert response.status_code == 200
    assert response.get_json()["analysis"]["tdsWithoutPeriod"] == ["Hello"]


def test_analyze_multipart_file(client):
    response = client.post(
        "/api/analyze",
        data={"htmlFile": (io.BytesIO(b"<td>Direct</td>"), "direct.html")},
        content_type="multipart/form-data",
    )
    assert response.status_code == 200
    assert response.get_json()["analysis"]["tdsWithoutPeriod"] == ["Direct"]


def test_upload_without_file(client):
    response = client.post("/api/upload", data={}, content_type="multipart/form-data")
    assert response.status_code == 400
    assert response.get_json()["error"] == "No file uploaded"


def test_upload_filename_is_sanitised(client):
    response = upload(client, filename="../../evil.html")
    assert response.status_code == 200
    assert response.get_json()["filename"] == "evil.html"


def test_analyze_unknown_file(client):
    """Onbekende bestanden geven de foutvorm voor invoerfouten."""
    response = client.post("/api/analyze", json={"filename": "../settings.json"})
    assert response.status_code == 400
    body = response.get_json()
    assert body["error"] == "Invalid input"
    assert "details" in body


def test_analyze_without_input(client):
    response = client.post("/api/analyze", json={})
    assert response.status_code == 400
    assert response.get_json()["error"] == "Invalid input"


def test_dictionary_error_shape(tmp_path):
    """Een woordenboekfout geeft een eigen foutmelding met status 500."""
    options = AnalysisOptions(
        dictionary_path=str(tmp_path / "missing"),
        probe_links=False,
        resolve_image_sizes=False,
    )
    app = create_app(options=options, upload_dir=tmp_path / "uploads")
    response = app.test_client().post("/api/analyze", json={"htmlContent": "<p>Hi</p>"})

    assert response.status_code == 500
    assert response.get_json()["error"] == "Spelling dictionary could not be loaded"


def test_index_page(client):
    response = client.get("/")
    assert response.status_code == 200
    assert b'name="htmlFile"' in response.data


def test_report_page_renders_sections(client):
    """Het rapport toont elke sectie, met 'Nothing found.' voor lege lijsten."""
    response = client.post("/report", data={"htmlContent": "<td>Hello</td>"})

    assert response.status_code == 200
    page = response.get_data(as_text=True)
    assert "Table cells without final period (1)" in page
    assert "Hello" in page
    assert "Nothing found." in page


def test_report_page_without_input(client):
    response = client.post("/report", data={"htmlContent": ""})
    assert response.status_code == 400
    assert "No HTML content provided" in response.get_data(as_text=True)


@pytest.mark.parametrize("body", [["x"], "just a string", 42, None])
def test_analyze_rejects_non_object_json(client, body):
    """Een JSON-body die geen object is geeft de gewone 400-foutvorm."""
    response = client.post("/api/analyze", data=json.dumps(body), content_type="application/json")

    assert response.status_code == 400
    payload = response.get_json()
    assert payload["error"] == "Invalid input"
    assert "details" in payload
