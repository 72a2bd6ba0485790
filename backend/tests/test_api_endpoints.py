"""
API endpoint integration tests: FastAPI endpoints with the JSON store in a temp dir and Ollama mocked.
Run from backend: python -m pytest tests/test_api_endpoints.py -v
"""
import json
import tempfile
from io import BytesIO
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest
import requests
from fastapi.testclient import TestClient

USER = {"X-User-Id": "user-1"}
OTHER = {"X-User-Id": "user-2"}


@pytest.fixture
def client():
    """Test client backed by a throwaway assessments file."""
    with tempfile.TemporaryDirectory() as tmp:
        with patch.dict("os.environ", {
            "ASSESSMENTS_PATH": str(Path(tmp) / "assessments.json"),
            "ASSESSMENT_STORE": "json",
        }):
            from app import app
            yield TestClient(app)


def _ollama(payload):
    resp = MagicMock(status_code=200, json=lambda: {"response": json.dumps(payload)})
    resp.raise_for_status = MagicMock()
    return resp


def _png_bytes():
    from PIL import Image
    buf = BytesIO()
    Image.new("RGB", (8, 8)).save(buf, format="PNG")
    return buf.getvalue()


# --- catalog ---

def test_health(client):
    assert client.get("/").json()["status"] == "ok"
    assert client.get("/api/health").status_code == 200


def test_categories_and_sections(client):
    cats = client.get("/api/categories").json()["categories"]
    assert cats[0]["id"] == "snacks"
    assert cats[-1]["id"] == "other"
    body = client.get("/api/sections").json()
    assert body["answer_options"] == ["yes", "no", "partial", "notApplicable"]
    assert [s["id"] for s in body["sections"]] == [
        "labeling", "facility", "safety", "usda", "coldChain", "shelfLife",
    ]


# --- preview ---

def test_preview_labeling_scenario(client):
    resp = client.post("/api/assessments/preview", json={
        "mode": "manual",
        "main_category": "snacks",
        "sub_category": "chips",
        "answers": {
            "nutritionFacts": "yes",
            "ingredientList": "yes",
            "allergenDeclaration": "partial",
            "netQuantity": "no",
            "manufacturerInfo": "yes",
            "countryOfOrigin": "notApplicable",
        },
    })
    assert resp.status_code == 200
    body = resp.json()
    assert body["productCategory"] == "snacks:chips"
    assert body["sections"] == ["labeling", "facility", "safety", "shelfLife"]
    assert body["steps"][:2] == ["mode", "category"]
    assert body["labels"][-1] == "common.save"
    assert body["canAdvance"]["labeling"] is True
    assert body["canAdvance"]["facility"] is False
    labeling = body["breakdown"][0]
    assert (labeling["percentage"], labeling["status"]) == (71, "partial")


def test_preview_meat_inquiry_drives_usda(client):
    base = {"mode": "upload", "main_category": "convenience", "sub_category": "canned_food"}
    body = client.post("/api/assessments/preview", json=base).json()
    assert "meatInquiry" in body["steps"] and "upload" in body["steps"]
    assert "usda" not in body["sections"]
    body = client.post("/api/assessments/preview", json=dict(base, contains_meat=True)).json()
    assert "usda" in body["sections"]


def test_preview_incomplete_classification(client):
    body = client.post("/api/assessments/preview", json={"main_category": "dairy"}).json()
    assert body["productCategory"] is None
    assert "coldChain" in body["sections"]
    assert body["canAdvance"]["category"] is False


def test_preview_rejects_bad_input(client):
    assert client.post("/api/assessments/preview", json={
        "main_category": "dairy", "sub_category": "chips",
    }).status_code == 400
    assert client.post("/api/assessments/preview", json={
        "main_category": "snacks", "custom_name": "x",
    }).status_code == 400
    assert client.post("/api/assessments/preview", json={
        "answers": {"nutritionFacts": "maybe"},
    }).status_code == 400


# --- stored assessments ---

def test_create_requires_user(client):
    resp = client.post("/api/assessments", json={"productCategory": "snacks:chips", "answers": {}})
    assert resp.status_code == 401


def test_create_recomputes_score(client):
    answers = {q: "yes" for q in ["nutritionFacts", "ingredientList", "allergenDeclaration"]}
    resp = client.post("/api/assessments", headers=USER, json={
        "productCategory": "snacks:chips",
        "answers": answers,
        "score": 100,
        "status": "passed",
    })
    assert resp.status_code == 201
    body = resp.json()
    assert body["id"] == 1
    assert body["userId"] == "user-1"
    # 50 of labeling 80 + facility 60 + safety 60 + shelfLife 40
    assert body["score"] == 21
    assert body["status"] == "failed"


def test_create_rejects_malformed_token_and_answers(client):
    assert client.post("/api/assessments", headers=USER, json={
        "productCategory": "custom:", "answers": {},
    }).status_code == 400
    assert client.post("/api/assessments", headers=USER, json={
        "productCategory": "snacks:chips", "answers": {"nutritionFacts": "maybe"},
    }).status_code == 400


def _all_answers(usda_value):
    from core.checklist import all_sections
    return {
        q.id: usda_value if s.id == "usda" else "yes"
        for s in all_sections() if s.id != "coldChain" for q in s.questions
    }


def test_create_drops_answers_outside_meat_answer(client):
    """Stored score and the GET breakdown agree after a "no meat" answer."""
    created = client.post("/api/assessments", headers=USER, json={
        "productCategory": "convenience:canned_food",
        "containsMeat": False,
        "answers": _all_answers("no"),
    }).json()
    assert created["containsMeat"] is False
    assert "labelApproval" not in created["answers"]
    assert (created["score"], created["status"]) == (100, "passed")

    detail = client.get(f"/api/assessments/{created['id']}", headers=USER).json()
    assert "usda" not in [s["section_id"] for s in detail["sections"]]
    assert all(s["percentage"] == 100 for s in detail["sections"])


def test_create_meat_answer_keeps_usda_without_answers(client):
    created = client.post("/api/assessments", headers=USER, json={
        "productCategory": "convenience:canned_food",
        "containsMeat": True,
        "answers": {"nutritionFacts": "yes"},
    }).json()
    detail = client.get(f"/api/assessments/{created['id']}", headers=USER).json()
    assert "usda" in [s["section_id"] for s in detail["sections"]]


@pytest.mark.parametrize("token", ["snacks:milk", "foo:bar", "other", "foo"])
def test_create_rejects_tokens_outside_catalog(client, token):
    resp = client.post("/api/assessments", headers=USER, json={"productCategory": token, "answers": {}})
    assert resp.status_code == 400
    assert client.get("/api/assessments", headers=USER).json() == []


def test_get_list_delete_ownership(client):
    created = client.post("/api/assessments", headers=USER, json={
        "productCategory": "snacks:jerky",
        "answers": {"nutritionFacts": "no", "labelApproval": "yes"},
    }).json()
    aid = created["id"]

    assert [a["id"] for a in client.get("/api/assessments", headers=USER).json()] == [aid]
    assert client.get("/api/assessments", headers=OTHER).json() == []

    detail = client.get(f"/api/assessments/{aid}", headers=USER).json()
    assert detail["categoryDisplay"] == "categories.main.snacks > categories.sub.jerky"
    assert [s["section_id"] for s in detail["sections"]] == [
        "labeling", "facility", "safety", "usda", "shelfLife",
    ]
    first_item = detail["sections"][0]["items"][0]
    assert first_item["recommendation_key"] == "recommendations.nutritionFacts"

    assert client.get(f"/api/assessments/{aid}", headers=OTHER).status_code == 403
    assert client.get("/api/assessments/999", headers=USER).status_code == 404
    assert client.delete(f"/api/assessments/{aid}", headers=OTHER).status_code == 404
    assert client.delete(f"/api/assessments/{aid}", headers=USER).status_code == 200
    assert client.get(f"/api/assessments/{aid}", headers=USER).status_code == 404


def test_custom_category_display(client):
    created = client.post("/api/assessments", headers=USER, json={
        "productCategory": "custom:Artisan Spice Mix", "answers": {},
    }).json()
    detail = client.get(f"/api/assessments/{created['id']}", headers=USER).json()
    assert detail["categoryDisplay"] == "Artisan Spice Mix"


# --- AI endpoints ---

@patch("core.ai.ollama_client.requests.post")
def test_stored_summary_uses_failed_questions(mock_post, client):
    mock_post.return_value = _ollama({
        "overview": "Fix labeling.",
        "priorityActions": [{"item": "Net quantity", "priority": "high", "action": "Add units"}],
        "detailedSteps": ["Update artwork"],
        "estimatedEffort": "1 week",
    })
    created = client.post("/api/assessments", headers=USER, json={
        "productCategory": "dairy:milk",
        "answers": {"netQuantity": "no", "temperatureControl": "no", "haccp": "partial"},
    }).json()
    resp = client.post(f"/api/assessments/{created['id']}/summary", headers=USER, json={"language": "en"})
    assert resp.status_code == 200
    assert resp.json()["summary"]["priorityActions"][0]["priority"] == "high"
    prompt = mock_post.call_args.kwargs["json"]["prompt"]
    assert "Net quantity in metric and US customary units" in prompt
    assert "Temperature-controlled storage and transport" in prompt
    assert "HACCP plan" not in prompt
    assert "categories.main.dairy > categories.sub.milk" in prompt


def test_stored_summary_nothing_failed_is_400(client):
    created = client.post("/api/assessments", headers=USER, json={
        "productCategory": "snacks:chips", "answers": {"nutritionFacts": "yes"},
    }).json()
    resp = client.post(f"/api/assessments/{created['id']}/summary", headers=USER, json={})
    assert resp.status_code == 400


def test_summarize_results_endpoint_errors(client):
    body = {"productCategory": "snacks:chips", "failedItems": [], "score": 40}
    assert client.post("/api/ai/summarize-results", json=body).status_code == 400
    with patch("core.ai.ollama_client.requests.post", side_effect=requests.ConnectionError("down")):
        resp = client.post("/api/ai/summarize-results", json=dict(body, failedItems=["HACCP plan"]))
    assert resp.status_code == 502


@patch("core.ai.ollama_client.requests.post")
def test_analyze_packaging_endpoint(mock_post, client):
    mock_post.return_value = _ollama({
        "answers": {"nutritionFacts": "yes", "countryOfOrigin": "notVisible"},
        "confidence": {"nutritionFacts": "high", "countryOfOrigin": "low"},
        "observations": {},
        "overallNotes": "ok",
    })
    resp = client.post(
        "/api/ai/analyze-packaging",
        files={"image": ("label.png", _png_bytes(), "image/png")},
        data={"language": "zh"},
    )
    assert resp.status_code == 200
    analysis = resp.json()["analysis"]
    assert analysis["answers"] == {"nutritionFacts": "yes", "countryOfOrigin": "notApplicable"}
    assert "Chinese (Simplified)" in mock_post.call_args.kwargs["json"]["prompt"]


def test_analyze_packaging_rejects_bad_upload(client):
    resp = client.post(
        "/api/ai/analyze-packaging",
        files={"image": ("label.pdf", b"%PDF-1.4", "application/pdf")},
    )
    assert resp.status_code == 400


@patch("core.ai.ollama_client.requests.post")
def test_analyze_packaging_model_failure_is_502(mock_post, client):
    mock_post.return_value = _ollama({"answers": {"nutritionFacts": "unsure"}})
    resp = client.post(
        "/api/ai/analyze-packaging",
        files={"image": ("label.png", _png_bytes(), "image/png")},
    )
    assert resp.status_code == 502


@patch("core.ai.ollama_client.requests.post")
def test_analyze_packaging_malformed_confidence_is_502(mock_post, client):
    mock_post.return_value = _ollama({"answers": {"nutritionFacts": "yes"}, "confidence": ["high"]})
    resp = client.post(
        "/api/ai/analyze-packaging",
        files={"image": ("label.png", _png_bytes(), "image/png")},
    )
    assert resp.status_code == 502
