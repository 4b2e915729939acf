"""
API-tester för transform-endpoints.
Kör med: pytest -v
"""
from io import BytesIO
from pathlib import Path

import pytest
from httpx import AsyncClient, ASGITransport


@pytest.fixture
def upload_dir(tmp_path, monkeypatch):
    from keyshift.config import settings
    monkeypatch.setattr(settings, "UPLOAD_DIR", str(tmp_path))
    return tmp_path


@pytest.fixture
def fake_render(monkeypatch):
    """Ersätter ffmpeg: skriver en dummy-fil och sparar anropen."""
    from keyshift.core import render

    calls = []

    def _render(input_path, output_path, plan, settings=None):
        calls.append((Path(input_path), Path(output_path), plan))
        Path(output_path).write_bytes(b"rendered")
        return output_path

    monkeypatch.setattr(render, "render", _render)
    return calls


@pytest.fixture
async def client(upload_dir):
    from keyshift.main import app

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


def _upload(filename, content_type="audio/mpeg", target_key="a minor", target_bpm="90"):
    return {
        "files": {"audioFile": (filename, BytesIO(b"fake audio"), content_type)},
        "data": {"targetKey": target_key, "targetBpm": target_bpm},
    }


@pytest.mark.asyncio
async def test_health(client):
    """API ska svara på /health."""
    response = await client.get("/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ok"
    assert "version" in data


@pytest.mark.asyncio
async def test_root(client):
    """Root endpoint ska returnera API-info."""
    response = await client.get("/")
    assert response.status_code == 200
    assert "docs" in response.json()


@pytest.mark.asyncio
async def test_list_keys(client):
    response = await client.get("/api/v1/transform/keys")
    assert response.status_code == 200
    keys = response.json()["keys"]
    assert "c major" in keys
    assert "bb minor" in keys
    assert keys.count("bb minor") == 1


@pytest.mark.asyncio
async def test_plan_endpoint(client):
    response = await client.post("/api/v1/transform/plan", json={
        "filename": "Song_Cmajor_120.mp3",
        "target_key": "A Minor",
        "target_bpm": 90,
    })
    assert response.status_code == 200
    data = response.json()
    assert data["source"] == {"key": "c major", "bpm": 120}
    assert data["target_key"] == "a minor"
    assert data["semitones"] == 0
    assert data["pitch_factor"] == 1.0
    assert data["tempo_stages"] == [0.75]
    assert data["filters"] == ["rubberband=pitch=1.0", "atempo=0.75"]


@pytest.mark.asyncio
async def test_plan_endpoint_unknown_target_key(client):
    response = await client.post("/api/v1/transform/plan", json={
        "filename": "Song_Cmajor_120.mp3",
        "target_key": "h major",
        "target_bpm": 90,
    })
    assert response.status_code == 400
    assert "Invalid key or BPM" in response.json()["detail"]


@pytest.mark.asyncio
async def test_process_invalid_format(client, fake_render):
    """Uppladdning med fel filformat ska ge 400."""
    response = await client.post("/api/v1/transform/process", **_upload("test.txt", "text/plain"))
    assert response.status_code == 400
    assert "Only .mp3 and .wav" in response.json()["detail"]
    assert fake_render == []


@pytest.mark.asyncio
async def test_process_missing_metadata(client, fake_render, upload_dir):
    """Filnamn utan tonart/BPM ska avvisas innan något skrivs till disk."""
    response = await client.post(
        "/api/v1/transform/process", **_upload("track_without_metadata.wav", "audio/wav"),
    )
    assert response.status_code == 400
    assert "Invalid key or BPM" in response.json()["detail"]
    assert fake_render == []
    assert list(upload_dir.iterdir()) == []


@pytest.mark.asyncio
async def test_process_unknown_target_key(client, fake_render):
    response = await client.post(
        "/api/v1/transform/process", **_upload("Song_Cmajor_128.mp3", target_key="x major"),
    )
    assert response.status_code == 400
    assert fake_render == []


@pytest.mark.asyncio
async def test_process_returns_rendered_file(client, fake_render, upload_dir):
    response = await client.post(
        "/api/v1/transform/process",
        **_upload("Song_Gmajor_128.mp3", target_key="c major", target_bpm="64"),
    )
    assert response.status_code == 200
    assert response.content == b"rendered"
    assert "processed_c_major_64.mp3" in response.headers["content-disposition"]

    (input_path, output_path, plan), = fake_render
    assert input_path.suffix == ".mp3"
    assert plan.semitones == 5
    assert plan.tempo_stages == (0.5,)

    # båda temporära filerna ska vara borta
    assert not input_path.exists()
    assert not output_path.exists()
    assert list(upload_dir.iterdir()) == []


@pytest.mark.asyncio
async def test_process_render_failure(client, upload_dir, monkeypatch):
    from keyshift.core import render
    from keyshift.core.errors import RenderError

    def _broken(input_path, output_path, plan, settings=None):
        raise RenderError("ffmpeg failed with exit 1: boom")

    monkeypatch.setattr(render, "render", _broken)

    response = await client.post("/api/v1/transform/process", **_upload("Song_Cmajor_128.mp3"))
    assert response.status_code == 500
    assert response.json()["detail"].startswith("Error processing audio:")
    assert list(upload_dir.iterdir()) == []


@pytest.mark.asyncio
async def test_process_too_large(client, fake_render, monkeypatch):
    from keyshift.config import settings
    monkeypatch.setattr(settings, "MAX_UPLOAD_SIZE_MB", 0)

    response = await client.post("/api/v1/transform/process", **_upload("Song_Cmajor_128.mp3"))
    assert response.status_code == 413
    assert fake_render == []
