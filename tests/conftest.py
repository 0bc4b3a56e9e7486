import os
import tempfile

import pytest
from fastapi.testclient import TestClient

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("DB_AUTO_CREATE", "1")
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("REFRESH_SECRET_KEY", "test-refresh-secret-key")
os.environ.setdefault("RATE_LIMIT_ENABLED", "0")
os.environ.setdefault("MEDIA_UPLOAD_DIR", tempfile.mkdtemp(prefix="vidtube-media-"))

from src.main import app  # noqa: E402


@pytest.fixture(scope="session")
def client():
    with TestClient(app) as c:
        yield c
