import io
import pytest
from fastapi.testclient import TestClient

from app.core.config import get_settings
from app.main import create_app

# PNG 1x1 minimal (le contenu n'est pas décodé, seul le type compte)
PNG_BYTES = (
    b"\x89PNG\r\n\x1a\n\x00\x00\x00\rIHDR\x00\x00\x00\x01\x00\x00\x00\x01"
    b"\x08\x06\x00\x00\x00\x1f\x15\xc4\x89\x00\x00\x00\nIDATx\x9cc\x00\x01"
    b"\x00\x00\x05\x00\x01\r\n-\xb4\x00\x00\x00\x00IEND\xaeB`\x82"
)


def image_file(name="cat.png", content=PNG_BYTES, content_type="image/png"):
    return {"image": (name, io.BytesIO(content), content_type)}


@pytest.fixture
def uploads_dir(tmp_path):
    return tmp_path / "uploads"


@pytest.fixture
def public_dir(tmp_path):
    d = tmp_path / "public"
    d.mkdir()
    (d / "index.html").write_text("<!DOCTYPE html><title>Schede</title><div id=\"app\"></div>", encoding="utf-8")
    (d / "app.js").write_text("console.log('schede');", encoding="utf-8")
    return d


@pytest.fixture
def test_client(uploads_dir, public_dir, monkeypatch):
    """
    Crée un TestClient avec des dossiers uploads/public temporaires (isolés)
    et un store vide.
    """
    monkeypatch.setenv("APP_ENV", "test")
    monkeypatch.setenv("APP_NAME", "Card Board API (tests)")
    monkeypatch.setenv("UPLOADS_PATH", str(uploads_dir))
    monkeypatch.setenv("PUBLIC_PATH", str(public_dir))
    monkeypatch.setenv("MAX_UPLOAD_MB", "10")
    monkeypatch.setenv("CORS_ORIGINS", "*")

    # IMPORTANT: vider le cache des settings pour prendre en compte les env
    get_settings.cache_clear()

    app = create_app(get_settings())
    with TestClient(app) as client:
        yield client

    get_settings.cache_clear()


@pytest.fixture
def create_card(test_client):
    def _create(title="Cat", name="cat.png", **fields):
        r = test_client.post(
            "/api/cards",
            files=image_file(name),
            data={"title": title, **fields},
        )
        assert r.status_code == 201, r.text
        return r.json()

    return _create
