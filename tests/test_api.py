import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from hospital_care.data.directory import CsvDirectory
from hospital_care.service.api import ERROR_REPLY, app as default_app, create_app


def test_fastapi_app_instantiates():
    assert isinstance(default_app, FastAPI)


def test_health(client):
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok", "directory": "memory"}


@pytest.mark.parametrize("message,intent", [
    ("I want to book an appointment", "book_appointment"),
    ("I have severe chest pain and need an appointment", "emergency"),
    ("hello", "greeting"),
    ("when do you open", "faq_hours"),
    ("xyz nonsense", "fallback"),
])
def test_chat_intent(client, message, intent):
    resp = client.post("/chat-intent", json={"message": message, "userId": "u-1"})
    assert resp.status_code == 200
    body = resp.json()
    assert body["intent"] == intent
    assert isinstance(body["response"], str) and body["response"]
    assert set(body) == {"intent", "response"}


@pytest.mark.parametrize("payload", [{}, {"message": ""}, {"message": "   "}, {"userId": "u-1"}, {"message": 42}])
def test_chat_intent_requires_message(client, payload):
    resp = client.post("/chat-intent", json=payload)
    assert resp.status_code == 400
    assert resp.json() == {"error": "Message is required"}


def test_chat_intent_rejects_non_json_body(client):
    resp = client.post("/chat-intent", content=b"not json", headers={"content-type": "application/json"})
    assert resp.status_code == 400
    assert resp.json() == {"error": "Message is required"}


def test_chat_intent_internal_fault(directory):
    class Exploding:
        def handle(self, message):
            raise RuntimeError("boom")

    app = create_app(directory)
    app.state.engine = Exploding()
    with TestClient(app) as c:
        resp = c.post("/chat-intent", json={"message": "hello"})
    assert resp.status_code == 500
    assert resp.json() == {"error": "boom", "intent": "error", "response": ERROR_REPLY}


def test_chat_intent_directory_failure_is_not_an_error(broken_directory):
    with TestClient(create_app(broken_directory)) as c:
        resp = c.post("/chat-intent", json={"message": "I want to book an appointment"})
    assert resp.status_code == 200
    assert "no doctors available" in resp.json()["response"]


def test_cors_preflight(client):
    resp = client.options(
        "/chat-intent",
        headers={
            "Origin": "https://portal.example.com",
            "Access-Control-Request-Method": "POST",
            "Access-Control-Request-Headers": "authorization, x-client-info, apikey, content-type",
        },
    )
    assert resp.status_code == 200
    assert resp.headers["access-control-allow-origin"] == "*"
    allowed = resp.headers["access-control-allow-headers"].lower()
    for header in ("authorization", "x-client-info", "apikey", "content-type"):
        assert header in allowed


def test_cors_header_on_simple_request(client):
    resp = client.post(
        "/chat-intent", json={"message": "hi"}, headers={"Origin": "https://portal.example.com"}
    )
    assert resp.headers["access-control-allow-origin"] == "*"


def test_doctors_listing(client):
    resp = client.get("/doctors")
    assert resp.status_code == 200
    names = [d["name"] for d in resp.json()]
    assert names == sorted(names)
    assert len(names) == 5

    resp = client.get("/doctors", params={"specialty": "ortho"})
    assert [d["name"] for d in resp.json()] == ["Dr. Michael Chen"]


def test_doctors_listing_survives_directory_failure(broken_directory):
    with TestClient(create_app(broken_directory)) as c:
        resp = c.get("/doctors")
    assert resp.status_code == 200
    assert resp.json() == []


def test_admin_summary(client):
    payload = {
        "appointments": [
            {"id": "1", "appointment_date": "2025-11-20", "appointment_time": "09:30",
             "status": "pending", "patient_name": "Ann", "doctor_name": "Dr. Sarah Johnson",
             "specialty": "Cardiology"},
            {"id": "2", "appointment_date": "2025-11-22", "appointment_time": "10:00",
             "status": "completed", "doctor_name": "Dr. Michael Chen", "specialty": "Orthopedics"},
        ],
        "conversations": [
            {"id": "c1", "title": "New Conversation", "created_at": "2025-11-13T05:17:21Z", "user_name": "Ann"},
        ],
    }
    resp = client.post("/admin/summary", json=payload)
    assert resp.status_code == 200
    body = resp.json()
    assert body["totals"] == {"appointments": 2, "pending": 1, "completed": 1, "conversations": 1}
    assert body["appointments"][0]["id"] == "2"
    assert body["appointments"][0]["patient_name"] == "Unknown"
    assert body["by_specialty"] == {"Cardiology": 1, "Orthopedics": 1}


def test_admin_summary_empty(client):
    resp = client.post("/admin/summary", json={})
    assert resp.status_code == 200
    assert resp.json()["totals"] == {"appointments": 0, "pending": 0, "completed": 0, "conversations": 0}


def test_chat_intent_with_malformed_csv_directory(tmp_path):
    bad_cell = tmp_path / "bad_cell.csv"
    bad_cell.write_text("name,specialty,days,start_hour,end_hour\nAmy Fox,Cardiology,Monday,nine,17\n")
    with TestClient(create_app(CsvDirectory(str(bad_cell)))) as c:
        resp = c.post("/chat-intent", json={"message": "I want to book an appointment"})
    assert resp.status_code == 200
    assert "no doctors available" in resp.json()["response"]

    bad_bytes = tmp_path / "bad_bytes.csv"
    bad_bytes.write_bytes(b"name,specialty,days,start_hour,end_hour\n\x80\x81,\xff\xfe,Monday,9,17\n")
    with TestClient(create_app(CsvDirectory(str(bad_bytes)))) as c:
        resp = c.post("/chat-intent", json={"message": "find me a cardiologist"})
        listing = c.get("/doctors")
    assert resp.status_code == 200
    assert resp.json()["intent"] == "doctor_search"
    assert resp.json()["response"].startswith("I couldn't find any doctors")
    assert listing.json() == []


def test_admin_summary_with_non_iso_date(client):
    payload = {"appointments": [
        {"id": "1", "appointment_date": "11/20/2025", "status": "pending"},
        {"id": "2", "appointment_date": "2025-11-18", "status": "completed"},
    ]}
    resp = client.post("/admin/summary", json=payload)
    assert resp.status_code == 200
    rows = resp.json()["appointments"]
    assert [r["id"] for r in rows] == ["2", "1"]
    assert rows[1]["appointment_date"] == ""
