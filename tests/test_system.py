def test_health(test_client):
    r = test_client.get("/health")
    assert r.status_code == 200
    data = r.json()
    assert data["status"] == "ok"
    assert "version" in data
    assert data["cards"] == 0

def test_version(test_client):
    r = test_client.get("/version")
    assert r.status_code == 200
    data = r.json()
    assert data["name"] == "Card Board API (tests)"
    assert data["env"] == "test"
    assert "version" in data

def test_uploads_dir_created_at_startup(test_client, uploads_dir):
    assert uploads_dir.is_dir()

def test_create_app_uses_given_settings_and_defers_uploads_dir(tmp_path):
    from fastapi.testclient import TestClient

    from app.core.config import Settings
    from app.main import create_app

    uploads = tmp_path / "uploads"
    app = create_app(Settings(APP_NAME="Explicit", UPLOADS_PATH=str(uploads), PUBLIC_PATH=str(tmp_path)))
    assert not uploads.exists()

    with TestClient(app) as client:
        assert uploads.is_dir()
        assert client.get("/version").json()["name"] == "Explicit"
