from pathlib import Path
from typing import List

import httpx
import pytest

from repcon import upload


def _client(handler) -> httpx.Client:
    return httpx.Client(transport=httpx.MockTransport(handler))


@pytest.fixture()
def container(tmp_path: Path) -> Path:
    path = tmp_path / "repcon_1.txt"
    path.write_text("# repcon_file_name: a.txt\n", encoding="utf-8")
    return path


def test_resolve_api_key_prefers_explicit(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("OPENAI_API_KEY", "env-key")
    assert upload.resolve_api_key("explicit", requested=True) == "explicit"


def test_resolve_api_key_falls_back_to_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("OPENAI_API_KEY", "env-key")
    assert upload.resolve_api_key(None, requested=True) == "env-key"


def test_resolve_api_key_skips_when_not_requested(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("OPENAI_API_KEY", "env-key")
    assert upload.resolve_api_key(None, requested=False) is None


def test_resolve_api_key_skips_without_any_key(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    assert upload.resolve_api_key(None, requested=True) is None


def test_upload_file_posts_multipart_with_bearer_auth(container: Path) -> None:
    seen: List[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"id": "file-abc123", "object": "file"})

    with _client(handler) as client:
        result = upload.upload_file(container, "sk-test", client=client)

    assert result.ok is True
    assert result.file_id == "file-abc123"
    [request] = seen
    assert str(request.url) == upload.OPENAI_FILES_URL
    assert request.headers["Authorization"] == "Bearer sk-test"
    body = request.read()
    assert b'name="purpose"' in body
    assert b"assistants" in body
    assert b'filename="repcon_1.txt"' in body
    assert b"# repcon_file_name: a.txt" in body


def test_upload_file_reports_http_error(container: Path) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(401, json={"error": {"message": "bad key"}})

    with _client(handler) as client:
        result = upload.upload_file(container, "sk-bad", client=client)

    assert result.ok is False
    assert result.detail is not None and "401" in result.detail


def test_upload_file_reports_transport_error(container: Path) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with _client(handler) as client:
        result = upload.upload_file(container, "sk-test", client=client)

    assert result.ok is False
    assert "connection refused" in (result.detail or "")


def test_upload_files_uploads_each_container(tmp_path: Path) -> None:
    paths = []
    for number in (1, 2):
        path = tmp_path / f"repcon_{number}.txt"
        path.write_text(f"container {number}\n", encoding="utf-8")
        paths.append(path)
    counter = {"calls": 0}

    def handler(request: httpx.Request) -> httpx.Response:
        counter["calls"] += 1
        return httpx.Response(200, json={"id": f"file-{counter['calls']}"})

    with _client(handler) as client:
        results = upload.upload_files(paths, "sk-test", purpose="fine-tune", client=client)

    assert [result.file_id for result in results] == ["file-1", "file-2"]
    assert [result.path for result in results] == paths
