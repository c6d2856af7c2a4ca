"""Tests for the FastAPI application.

HOW: fastapi.testclient.TestClient drives the app in-process; no server
is started.
"""

import pytest
from fastapi.testclient import TestClient

from tenten_compiler import __version__
from tenten_compiler.report import validate_report
from tenten_compiler.server.app import app


@pytest.fixture
def client():
    return TestClient(app)


class TestCompileEndpoint:
    """POST /compile."""

    def test_success(self, client, basic_source):
        response = client.post("/compile", json={"source": basic_source, "target": "rs"})
        assert response.status_code == 200
        data = response.json()
        validate_report(data)
        assert data["success"] is True
        assert data["target"] == "rust"
        assert "#![no_std]" in data["output"]
        assert data["patterns"] == ["kickp"]

    def test_defaults_apply(self, client, basic_source):
        data = client.post("/compile", json={"source": basic_source}).json()
        assert data["target"] == "mtmc16"
        assert data["output"].startswith("; Untitled\n")

    def test_labels_and_clear_rests(self, client, basic_source):
        data = client.post("/compile", json={
            "source": basic_source,
            "target": "c",
            "title": "Groove",
            "clear_rests": True,
        }).json()
        assert " * Groove\n" in data["output"]
        assert "0x1001) = 0;" in data["output"]

    def test_failure_is_still_200(self, client):
        response = client.post("/compile", json={"source": "@scene a\nkick: ghost"})
        assert response.status_code == 200
        data = response.json()
        validate_report(data)
        assert data["success"] is False
        assert data["output"] is None
        assert data["errors"] == [
            {"line": 1, "col": None, "msg": "Undefined pattern: ghost", "phase": "linter"},
        ]

    def test_ir_in_response(self, client):
        data = client.post("/compile", json={"source": "@tempo 100"}).json()
        assert data["ir"] == [
            {"op": "TEMPO", "args": [100]},
            {"op": "WRITE", "args": [0x1501, 100]},
        ]

    def test_missing_source_is_422(self, client):
        assert client.post("/compile", json={"target": "c"}).status_code == 422


class TestCatalogEndpoints:
    """Targets, packs and health."""

    def test_targets(self, client):
        data = client.get("/targets").json()
        assert [t["key"] for t in data] == ["mtmc16", "wasm", "c", "rust", "hex"]
        rust = data[3]
        assert rust["aliases"] == ["rs"]
        assert rust["suffix"] == ".rs"
        assert rust["media_type"] == "text/x-rust"

    def test_packs(self, client):
        data = client.get("/packs").json()
        assert [p["name"] for p in data["synth"]] == ["TB-303", "JUNO-106"]
        assert data["drums"][0]["year"] == 1980

    def test_pack_source(self, client):
        response = client.get("/packs/TR-909/Techno/source")
        assert response.status_code == 200
        data = response.json()
        assert data["pack"] == "TR-909"
        assert data["pattern"] == "Techno"
        assert "@tempo 138" in data["source"]

    def test_pack_source_round_trips_through_compile(self, client):
        source = client.get("/packs/Jungle/Amen/source").json()["source"]
        data = client.post("/compile", json={"source": source, "target": "hex"}).json()
        assert data["success"] is True
        assert data["warnings"] == []

    @pytest.mark.parametrize("path,detail", [
        ("/packs/TR-1000/Techno/source", "Pack not found: TR-1000"),
        ("/packs/TR-909/Polka/source", "Pattern not found: TR-909/Polka"),
    ])
    def test_pack_source_404(self, client, path, detail):
        response = client.get(path)
        assert response.status_code == 404
        assert response.json()["detail"] == detail

    def test_health(self, client):
        assert client.get("/health").json() == {"status": "ok", "version": __version__}
