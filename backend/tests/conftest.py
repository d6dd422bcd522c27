import importlib
import os
import sys
from pathlib import Path

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from jose import jwt

# Ensure project root is on sys.path
PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from app.core.config import get_settings
from app.schemas.media import StoredObject
from app.services import media_store
from app.services.ingestion import UploadIngestor

FIXED_TIMESTAMP = 1700000000000


class DummyStore(media_store.MediaStore):
    """Records uploads instead of sending them to ImageKit."""

    def __init__(self) -> None:
        super().__init__(get_settings())
        self.uploads: list[tuple[bytes, str, str]] = []
        self.error: Exception | None = None

    async def upload(self, data: bytes, file_name: str, folder: str) -> StoredObject:  # type: ignore[override]
        self.uploads.append((data, file_name, folder))
        if self.error is not None:
            raise self.error
        name = file_name.rsplit("/", 1)[-1]
        return StoredObject(
            url=f"https://ik.imagekit.io/test{folder}/{name}",
            file_id="file-123",
            name=name,
            width=640,
            height=480,
            size=len(data),
        )


@pytest.fixture(scope="session", autouse=True)
def configure_environment():
    os.environ["ENV"] = "test"
    os.environ["IMAGEKIT_PUBLIC_KEY"] = "public_test"
    os.environ["IMAGEKIT_PRIVATE_KEY"] = "private_test"
    os.environ["IMAGEKIT_URL_ENDPOINT"] = "https://ik.imagekit.io/test"
    os.environ["AUTH_JWT_KEY"] = "test-secret"
    os.environ["AUTH_JWT_ALGORITHM"] = "HS256"
    get_settings.cache_clear()
    media_store.reset_media_store()


@pytest.fixture
def store():
    return DummyStore()


@pytest.fixture
def app_instance(configure_environment, store):
    from app import main as app_module

    importlib.reload(app_module)
    app = app_module.app

    # Setup state for tests, mimicking lifespan events
    app.state.media_store = store
    app.state.upload_ingestor = UploadIngestor(store, clock=lambda: FIXED_TIMESTAMP)
    return app


@pytest_asyncio.fixture
async def client(app_instance):
    transport = ASGITransport(app=app_instance)
    async with AsyncClient(transport=transport, base_url="http://testserver") as client:
        yield client


def make_token(subject: str | None = "u1", key: str = "test-secret") -> str:
    claims = {} if subject is None else {"sub": subject}
    return jwt.encode(claims, key, algorithm="HS256")


@pytest.fixture
def auth_headers():
    return {"Authorization": f"Bearer {make_token()}"}


@pytest.fixture
def token_factory():
    return make_token
