"""
Pytest configuration and fixtures for photoshelf tests.
"""

from collections.abc import Generator
from datetime import UTC, datetime
from pathlib import Path
from zoneinfo import ZoneInfo

import pytest

from photoshelf.config import get_config
from photoshelf.models.image_record import ImageRecord
from photoshelf.services.auth import AuthService
from photoshelf.services.backend import reset_backend_client
from photoshelf.services.metadata import MetadataService
from photoshelf.services.storage import StorageService
from tests.fakes import FakeSupabaseClient

TEST_ENV = {
    "SUPABASE_URL": "https://test-project.supabase.co",
    "SUPABASE_ANON_KEY": "test-anon-key",
    "PHOTOSHELF_TIMEZONE": "Asia/Tokyo",
    "ENVIRONMENT": "development",
}


@pytest.fixture(autouse=True)
def test_environment(monkeypatch) -> Generator[None, None, None]:
    """Known backend settings, fresh config cache and no shared client."""
    for key in ("VITE_SUPABASE_URL", "VITE_SUPABASE_ANON_KEY", "SUPABASE_STORAGE_BUCKET",
                "SUPABASE_METADATA_TABLE", "PHOTOSHELF_EXPORT_DIR"):
        monkeypatch.delenv(key, raising=False)
    for key, value in TEST_ENV.items():
        monkeypatch.setenv(key, value)

    get_config().clear_cache()
    reset_backend_client()
    yield
    get_config().clear_cache()
    reset_backend_client()


@pytest.fixture
def tz() -> ZoneInfo:
    """Display timezone used across tests (UTC+9, no DST)."""
    return ZoneInfo("Asia/Tokyo")


@pytest.fixture
def backend() -> FakeSupabaseClient:
    return FakeSupabaseClient()


@pytest.fixture
def storage_service(backend) -> StorageService:
    return StorageService(backend, "images")


@pytest.fixture
def metadata_service(backend) -> MetadataService:
    return MetadataService(backend, "image_metadata")


@pytest.fixture
def auth_service(backend) -> AuthService:
    return AuthService(backend)


@pytest.fixture
def export_root(tmp_path) -> Path:
    return tmp_path / "exports"


@pytest.fixture
def sample_image_data() -> bytes:
    """Header of a 1x1 PNG, enough to stand in for image bytes."""
    return b"\x89PNG\r\n\x1a\n\x00\x00\x00\rIHDR\x00\x00\x00\x01\x00\x00\x00\x01\x08\x02\x00\x00\x00"


class RecordFactory:
    """Builds ImageRecord instances with sensible defaults."""

    def __init__(self) -> None:
        self._next_id = 1

    def create(
        self,
        storage_path: str = "images/2025/03/1741000000000_abc123.jpg",
        created_at: datetime | None = None,
        original_name: str = "photo.jpg",
        record_id: int | None = None,
    ) -> ImageRecord:
        if record_id is None:
            record_id = self._next_id
            self._next_id += 1
        filename = storage_path.rsplit("/", 1)[-1]
        return ImageRecord(
            id=record_id,
            filename=filename,
            original_name=original_name,
            storage_path=storage_path,
            public_url=f"https://fake.supabase.co/storage/v1/object/public/images/{storage_path}",
            size=1024,
            mime_type="image/jpeg",
            created_at=created_at or datetime(2025, 3, 10, 12, 0, tzinfo=UTC),
        )


@pytest.fixture
def record_factory() -> RecordFactory:
    return RecordFactory()
