import random

import pytest

from leadscan.server import create_app

from conftest import CONTACT_PAGE, FakeResponse, FakeSession


@pytest.fixture
def client(cfg):
    session = FakeSession({"https://www.aspendental.com": FakeResponse(200, CONTACT_PAGE)})
    app = create_app(cfg, session=session, rng=random.Random(3))
    app.config["TESTING"] = True
    return app.test_client()


def test_health(client):
    resp = client.get("/api/health")
    assert resp.status_code == 200
    assert resp.get_json()["status"] == "OK"


def test_scan_url(client):
    resp = client.post("/api/scan-url", json={"url": "https://www.aspendental.com"})
    body = resp.get_json()
    assert resp.status_code == 200
    assert body["success"] is True
    assert body["lead"]["hasChat"] is True
    assert body["lead"]["phones"] == ["2125550134"]
    assert body["lead"]["score"] == 25


def test_scan_url_requires_url(client):
    resp = client.post("/api/scan-url", json={})
    assert resp.status_code == 400
    assert resp.get_json()["success"] is False


def test_scan_industry_mixes_real_and_sample_leads(client):
    resp = client.post("/api/scan-industry", json={"industry": "dental", "location": "Austin"})
    body = resp.get_json()
    assert resp.status_code == 200
    assert body["success"] is True
    leads = body["leads"]
    assert len(leads) == 15
    assert body["scanInfo"]["realScans"] == 3
    assert body["scanInfo"]["query"] == "best dental Austin"
    assert body["stats"]["total"] == 15
    assert body["stats"]["sponsored"] == 2
    assert body["stats"]["top3"] == 3
    assert body["stats"]["firstPage"] == 8
    scores = [l["score"] for l in leads]
    assert scores == sorted(scores, reverse=True)
    assert [l["googlePosition"] for l in leads] == list(range(1, 16))
    # the two unreachable real sites land at the bottom with score 0
    assert [l["error"] for l in leads[-2:]] == ["HTTP 404", "HTTP 404"]
    aspen = next(l for l in leads if l["name"] == "Aspen Dental")
    assert aspen["score"] == 20


def test_scan_industry_caps_batch(cfg):
    cfg["app"]["max_leads"] = 5
    app = create_app(cfg, session=FakeSession(), rng=random.Random(0))
    body = app.test_client().post("/api/scan-industry", json={"industry": "lawyer", "location": "Miami"}).get_json()
    assert len(body["leads"]) == 5


def test_debug_scan(client):
    body = client.post("/api/debug-scan", json={"industry": "mortgage", "location": "Denver"}).get_json()
    assert len(body["allLeads"]) == 3
    assert body["sampleLead"]["googlePosition"] == 1


def test_export_csv_rejects_missing_leads(client):
    resp = client.post("/api/export-csv", json={"industry": "dental"})
    assert resp.status_code == 400
    assert resp.get_json()["error"] == "Invalid leads data"


def test_export_csv_rejects_malformed_lead(client):
    resp = client.post("/api/export-csv", json={"leads": ["nope"]})
    assert resp.status_code == 400


def test_export_csv(client):
    lead = {
        "name": "Acme",
        "website": "https://acme.test",
        "location": "NYC",
        "score": 17,
        "hasChat": True,
        "hasForm": False,
        "phones": ["2125550134", "2125550199"],
        "emails": ["info@acme.io"],
        "description": "Real dental business",
    }
    resp = client.post("/api/export-csv", json={"leads": [lead], "industry": "dental"})
    assert resp.status_code == 200
    assert resp.mimetype == "text/csv"
    assert "leads-dental-" in resp.headers["Content-Disposition"]
    lines = resp.get_data(as_text=True).splitlines()
    assert lines[0].startswith('"Name","Website","Location","Lead Score"')
    assert lines[1].startswith('"Acme","https://acme.test","NYC","17","Yes","No","2125550134; 2125550199","info@acme.io"')


@pytest.mark.parametrize(
    "path, payload",
    [
        ("/api/scan-industry", {"industry": 5, "location": "Austin"}),
        ("/api/scan-industry", {"industry": "dental", "location": ["Austin"]}),
        ("/api/scan-url", {"url": 42}),
        ("/api/debug-scan", {"industry": "dental", "location": None}),
    ],
)
def test_non_string_fields_are_client_errors(client, path, payload):
    resp = client.post(path, json=payload)
    assert resp.status_code == 400
    assert resp.get_json()["success"] is False


@pytest.mark.parametrize("key", ["formsCount", "contactFormsCount", "score"])
def test_export_csv_rejects_non_numeric_counts(client, key):
    resp = client.post("/api/export-csv", json={"leads": [{"name": "a", key: "x"}]})
    assert resp.status_code == 400
    assert key in resp.get_json()["error"]
