import io
import os
import tempfile

# Configure before any app module reads the environment
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["UPLOAD_DIR"] = tempfile.mkdtemp(prefix="gorillaflix-uploads-")
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["MAX_UPLOAD_SIZE"] = str(1024 * 1024)

import pytest
from fastapi.testclient import TestClient
from PIL import Image

from db.database import Base, SessionLocal, engine
from main import app

UPLOAD_DIR = os.environ["UPLOAD_DIR"]
PASSWORD = "secret123"

# Minimal container headers that libmagic identifies as video
MP4_BYTES = b"\x00\x00\x00\x20ftypisom\x00\x00\x02\x00isomiso2avc1mp41\x00\x00\x00\x08free"
MKV_BYTES = b"\x1a\x45\xdf\xa3\x93\x42\x82\x88matroska\x42\x87\x81\x04\x42\x85\x81\x02" + b"\x00" * 16


def png_bytes(size=(64, 36), color=(200, 30, 30)) -> bytes:
    buffer = io.BytesIO()
    Image.new("RGB", size, color).save(buffer, format="PNG")
    return buffer.getvalue()


def register(client, username, password=PASSWORD):
    response = client.post("/api/register", json={"username": username, "password": password})
    assert response.status_code == 201, response.text
    body = response.json()
    return body["user"], {"Authorization": f"Bearer {body['access_token']}"}


def upload_video(client, headers, title="Gorilla Tag Speedrun", description="Fast climbing",
                 category="Gameplay", featured=False):
    response = client.post(
        "/api/videos",
        data={
            "title": title,
            "description": description,
            "category": category,
            "featured": "true" if featured else "false",
        },
        files={
            "video": ("clip.mp4", MP4_BYTES, "video/mp4"),
            "thumbnail": ("thumb.png", png_bytes(), "image/png"),
        },
        headers=headers,
    )
    assert response.status_code == 201, response.text
    return response.json()


def stored_files():
    return set(os.listdir(UPLOAD_DIR))


@pytest.fixture(autouse=True)
def fresh_tables():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def db_session():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def admin(client):
    """First account registered on a fresh database"""
    return register(client, "gorilladev")


@pytest.fixture
def uploader(client, admin):
    return register(client, "uploader")


@pytest.fixture
def viewer(client, admin):
    return register(client, "viewer")


@pytest.fixture
def video(client, uploader):
    _, headers = uploader
    return upload_video(client, headers)
