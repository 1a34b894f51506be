"""Shared test fixtures."""

import io
import struct
import zipfile

import pytest
from fastapi.testclient import TestClient

from api.app import create_app
from api.config import Settings
from ingestion.schema import ensure_prices_schema
from pricedb import create_service

SAMPLE_CSV = (
    "id,name,category,price,create_date\n"
    "1,Widget,Tools,9.99,2024-01-01\n"
    "2,Gadget,Tools,19.5,2024-01-02\n"
)


def build_zip(entries: dict[str, bytes | str]) -> bytes:
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w", compression=zipfile.ZIP_DEFLATED) as zf:
        for name, content in entries.items():
            zf.writestr(name, content)
    return buffer.getvalue()


def corrupt_archives(archive: bytes) -> dict[str, bytes]:
    """Variants of a single-entry zip with damaged header fields."""
    cd = archive.rfind(b"PK\x01\x02")
    eocd = archive.rfind(b"PK\x05\x06")

    future_version = bytearray(archive)
    future_version[cd + 6] = 155

    bad_cd_size = bytearray(archive)
    struct.pack_into("<L", bad_cd_size, eocd + 12, 0x7FFFFFF0)

    bad_cd_offset = bytearray(archive)
    struct.pack_into("<L", bad_cd_offset, eocd + 16, 0x7FFFFFF0)

    bad_utf8_name = bytearray(archive.replace(b"prices.csv", b"prices.\x8asv"))
    (flags,) = struct.unpack_from("<H", bad_utf8_name, cd + 8)
    struct.pack_into("<H", bad_utf8_name, cd + 8, flags | 0x800)

    bad_local_header = bytearray(archive)
    bad_local_header[0:4] = b"XXXX"

    return {
        "future_version": bytes(future_version),
        "bad_cd_size": bytes(bad_cd_size),
        "bad_cd_offset": bytes(bad_cd_offset),
        "bad_utf8_name": bytes(bad_utf8_name),
        "bad_local_header": bytes(bad_local_header),
        "truncated_tail": archive[:-1],
        "truncated_half": archive[: len(archive) // 2],
    }


@pytest.fixture
def db_service(tmp_path):
    """Provide a fresh SQLite DatabaseService for each test."""
    db_path = tmp_path / "test.db"
    service = create_service(f"sqlite:///{db_path}")
    service.connect()
    yield service
    service.close()


@pytest.fixture
def prices_service(db_service):
    """SQLite DatabaseService with the prices table created."""
    ensure_prices_schema(db_service)
    return db_service


@pytest.fixture
def make_zip():
    """Build an in-memory zip from {entry name: content}."""
    return build_zip


@pytest.fixture
def sample_zip():
    return build_zip({"prices.csv": SAMPLE_CSV})


@pytest.fixture
def client(tmp_path):
    """TestClient around an app backed by a fresh SQLite file."""
    db_url = f"sqlite:///{tmp_path / 'api.db'}"
    settings = Settings(db_url=db_url, upload_spool_max_bytes=1024)
    app = create_app(create_service(db_url), settings)
    with TestClient(app) as c:
        yield c


@pytest.fixture
def damaged_zips(sample_zip):
    """{label: archive} for sample_zip with damaged header fields."""
    return corrupt_archives(sample_zip)
