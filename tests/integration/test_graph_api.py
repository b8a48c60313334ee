import pytest

from fastapi.testclient import TestClient

from api.main import app
from config.settings import settings
from knowledge.entity_models import EntityType

OTHER_TEXT = "北京和上海都是大城市。"


@pytest.fixture
def client():
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def documents(sample_text):
    return [
        {"id": 1, "title": "华为", "content": sample_text},
        {"id": 2, "title": "城市", "content": OTHER_TEXT},
        {"id": 3, "title": "空", "content": ""},
    ]


@pytest.mark.integration
def test_health(client):
    resp = client.get("/api/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "healthy"}


@pytest.mark.integration
def test_analyze_returns_graph(client, documents):
    resp = client.post("/api/graph/analyze", json={"documents": documents})
    assert resp.status_code == 200
    data = resp.json()

    node_ids = {node["id"] for node in data["nodes"]}
    assert "Organization:华为公司" in node_ids
    assert "Location:北京" in node_ids

    beijing = next(node for node in data["nodes"] if node["id"] == "Location:北京")
    assert beijing["type"] == "Location"
    assert beijing["color"] == "#45B7D1"
    assert set(beijing["documentIds"]) == {"doc-1", "doc-2"}

    assert any(link["type"] == "Located" for link in data["links"])
    assert set(data["type_counts"]) == {t.value for t in EntityType}
    assert data["stats"]["node_count"] == len(data["nodes"])
    assert data["stats"]["edge_count"] == len(data["links"])


@pytest.mark.integration
def test_analyze_filters(client, documents):
    full = client.post("/api/graph/analyze", json={"documents": documents}).json()

    resp = client.post(
        "/api/graph/analyze",
        json={"documents": documents, "entity_type": "Organization"},
    )
    assert resp.status_code == 200
    data = resp.json()
    assert data["nodes"]
    assert all(node["type"] == "Organization" for node in data["nodes"])
    node_ids = {node["id"] for node in data["nodes"]}
    assert all(link["source"] in node_ids and link["target"] in node_ids for link in data["links"])
    # counts describe the whole corpus, not the filtered view
    assert data["type_counts"] == full["type_counts"]

    data = client.post(
        "/api/graph/analyze",
        json={"documents": documents, "document_id": "doc-2"},
    ).json()
    assert data["nodes"]
    assert all("doc-2" in node["documentIds"] for node in data["nodes"])

    data = client.post(
        "/api/graph/analyze",
        json={"documents": documents, "search": "华为"},
    ).json()
    assert all("华为" in node["name"] for node in data["nodes"])


@pytest.mark.integration
def test_repeated_analysis_is_stable(client, documents):
    first = client.post("/api/graph/analyze", json={"documents": documents}).json()
    second = client.post("/api/graph/analyze", json={"documents": documents}).json()

    assert {n["id"]: n["val"] for n in first["nodes"]} == {n["id"]: n["val"] for n in second["nodes"]}


@pytest.mark.integration
def test_analyze_rejects_unknown_entity_type(client, documents):
    resp = client.post(
        "/api/graph/analyze",
        json={"documents": documents, "entity_type": "Planet"},
    )
    assert resp.status_code == 422


@pytest.mark.integration
def test_extract_single_document(client, sample_text):
    resp = client.post(
        "/api/graph/extract",
        json={"content": sample_text, "document_id": "note-42"},
    )
    assert resp.status_code == 200
    data = resp.json()

    huawei = next(e for e in data["entities"] if e["id"] == "Organization:华为公司")
    assert huawei["documentIds"] == ["note-42"]
    assert huawei["frequency"] >= 1
    assert all(r["documentId"] == "note-42" for r in data["relations"])
    assert any(r["type"] == "Located" for r in data["relations"])


@pytest.mark.integration
def test_clear_cache(client, documents):
    client.post("/api/graph/analyze", json={"documents": documents})

    resp = client.delete("/api/graph/cache")
    assert resp.status_code == 200
    assert resp.json() == {"status": "cleared", "cleared": 2}

    assert client.delete("/api/graph/cache").json() == {"status": "cleared", "cleared": 0}


@pytest.mark.integration
def test_clear_cache_when_disabled(client, monkeypatch):
    monkeypatch.setattr(settings, "analysis_cache_enabled", False)
    resp = client.delete("/api/graph/cache")
    assert resp.status_code == 200
    assert resp.json() == {"status": "disabled", "cleared": 0}
