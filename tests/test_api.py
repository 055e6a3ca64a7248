import io
import zipfile

import httpx
from fastapi.testclient import TestClient

from projectide import main

REPLY = (
    "projectName: demo\n"
    "filename: src/util.ts\n"
    "version: 1.0.9\n"
    "```ts\n"
    "export const v = 9;\n"
    "```\n"
    "end of file: src/util.ts\n"
    "projectName: demo\n"
    "filename: src/util.ts\n"
    "version: 1.0.10\n"
    "```ts\n"
    "export const v = 10;\n"
    "```\n"
    "end of file: src/util.ts\n"
)


def _install_fake_gemini(monkeypatch, text):
    def handler(request):
        return httpx.Response(
            200, json={"candidates": [{"content": {"parts": [{"text": text}]}}]}
        )

    monkeypatch.setattr(main, "GEMINI_API_KEY", "")
    monkeypatch.setattr(main, "gemini_transport", httpx.MockTransport(handler))


def test_submit_then_list_export_import(monkeypatch):
    _install_fake_gemini(monkeypatch, REPLY)
    with TestClient(main.app) as client:
        r = client.post("/api/staging/submit", json={"prompt": "make util"})
        assert r.status_code == 400
        assert "API Key not set" in r.json()["error"]

        assert client.put("/api/gemini/key", json={"api_key": "k"}).json() == {"configured": True}

        r = client.post("/api/staging/submit", json={"prompt": "make util", "profile": "Coder"})
        assert r.status_code == 200
        assert [f["version"] for f in r.json()["files"]] == ["1.0.9", "1.0.10"]

        r = client.get("/api/generated")
        body = r.json()
        assert body["total"] == 2
        versions = [f["version"] for f in body["projects"]["demo"]["src/util.ts"]]
        assert versions == ["1.0.10", "1.0.9"]

        r = client.get("/api/generated/export")
        assert r.status_code == 200
        assert r.headers["content-type"] == "application/zip"
        names = zipfile.ZipFile(io.BytesIO(r.content)).namelist()
        assert sorted(names) == ["demo/src/util-v1.0.10.ts", "demo/src/util-v1.0.9.ts"]

        ref = {"project_name": "demo", "file_name": "src/util.ts", "version": "1.0.10"}
        r = client.post("/api/generated/import", json=ref)
        assert r.status_code == 200
        assert r.json()["path"] == "downloads/util-v1.0.10.ts"
        assert r.json()["content"] == "export const v = 10;"

        r = client.post("/api/generated/stage", json=ref)
        assert "version: 1.0.10" in r.json()["context"]

        r = client.post("/api/generated/download", json=ref)
        assert r.status_code == 200
        assert r.headers["content-type"].startswith("text/plain")
        assert r.headers["content-disposition"] == "attachment; filename=util-v1.0.10.ts"
        assert r.text == "export const v = 10;"

        unknown = dict(ref, file_name="src/other.ts")
        r = client.post("/api/generated/download", json=unknown)
        assert r.status_code == 404
        assert "src/other.ts" in r.json()["error"]

        history = client.get("/api/history").json()
        assert len(history) == 2
        assert history[0]["response"] == REPLY

        assert client.delete("/api/generated").json()["total"] == 0
        assert client.get("/api/generated/export").status_code == 404

        missing = dict(ref, version="9.9.9")
        assert client.post("/api/generated/import", json=missing).status_code == 404


def test_file_tree_endpoints():
    with TestClient(main.app) as client:
        listing = client.get("/api/files").json()
        assert listing["active_file_id"] == "3"

        r = client.post("/api/files", json={"path": "src/welcome.js", "content": "x"})
        created = r.json()
        assert created["path"] == "src/welcome-1.js"

        r = client.put(f"/api/files/{created['id']}", json={"content": "y"})
        assert r.json()["content"] == "y"

        r = client.post(f"/api/files/{created['id']}/close")
        assert created["id"] not in r.json()["open_file_ids"]

        assert client.get("/api/files/nope").status_code == 404
        assert client.post("/api/files", json={"path": " "}).status_code == 400

        r = client.get("/api/files/export")
        names = zipfile.ZipFile(io.BytesIO(r.content)).namelist()
        assert "src/welcome-1.js" in names


def test_staging_context_endpoints():
    with TestClient(main.app) as client:
        client.put("/api/staging/context", json={"context": "base"})
        r = client.post("/api/staging/attach/1")
        assert r.json()["context"].startswith("base\n\n// --- START OF FILE: src/welcome.js ---")

        r = client.post(
            "/api/staging/upload",
            files={"upload": ("notes.txt", b"remember this", "text/plain")},
        )
        assert "remember this" in r.json()["context"]

        r = client.post(
            "/api/staging/upload",
            files={"upload": ("blob.bin", b"\xff\xfe\x00", "application/octet-stream")},
        )
        assert r.status_code == 400

        r = client.post("/api/staging/send_to_editor", json={"content": "function f() {}"})
        assert r.json()["path"].endswith(".ts")

        assert client.delete("/api/staging/context").json() == {"context": ""}


def test_profiles_and_health():
    with TestClient(main.app) as client:
        names = [p["name"] for p in client.get("/api/profiles").json()]
        assert names[0] == "Coder"
        assert len(names) == 4
        assert client.get("/health").json()["status"] == "ok"


def test_startup_client_uses_injected_transport_and_closes(monkeypatch):
    _install_fake_gemini(monkeypatch, "plain reply")
    with TestClient(main.app) as client:
        startup_client = main.ai_client
        assert main.conversation.ai_client is startup_client

        client.put("/api/gemini/key", json={"api_key": "k"})
        r = client.post("/api/staging/submit", json={"prompt": "hello"})
        assert r.json()["files"][0]["content"] == "plain reply"

    assert startup_client.client.is_closed
