"""Zip archive codec: pull a CSV out of an upload, pack a CSV into a download."""

import io
import logging
import lzma
import struct
import tempfile
import zipfile
import zlib
from contextlib import contextmanager
from typing import BinaryIO, Iterator, TextIO

from pricedb.exceptions import MalformedArchiveError, NotFoundError

logger = logging.getLogger(__name__)

EXPORT_ENTRY_NAME = "data.csv"
DEFAULT_SPOOL_MAX_BYTES = 8 * 1024 * 1024

# Corrupt central directories surface as more than BadZipFile: negative
# seeks (ValueError), unsupported versions (NotImplementedError) and
# UTF-8-flagged names that do not decode.
_OPEN_ERRORS = (
    zipfile.BadZipFile,
    OSError,
    ValueError,
    NotImplementedError,
    UnicodeDecodeError,
    EOFError,
)
_ENTRY_OPEN_ERRORS = _OPEN_ERRORS + (RuntimeError,)

# Raised by zipfile and its decompressors while an entry is being read, not
# when it is opened. bz2 reports bad streams as OSError.
_READ_ERRORS = (
    zipfile.BadZipFile,
    zlib.error,
    lzma.LZMAError,
    struct.error,
    OSError,
    EOFError,
    UnicodeDecodeError,
    ValueError,
)


@contextmanager
def spooled_upload(max_size: int = DEFAULT_SPOOL_MAX_BYTES) -> Iterator[BinaryIO]:
    """Stage an inbound body in memory, spilling to a temp file past max_size.

    The buffer (and any file it spilled to) is gone once the block exits.
    """
    with tempfile.SpooledTemporaryFile(max_size=max_size, mode="w+b") as staged:
        yield staged


def find_csv_entry(zf: zipfile.ZipFile) -> zipfile.ZipInfo | None:
    """Return the first entry whose base name ends with .csv."""
    for info in zf.infolist():
        base_name = info.filename.rsplit("/", 1)[-1]
        if base_name.endswith(".csv"):
            return info
    return None


@contextmanager
def open_csv_entry(archive: bytes | BinaryIO) -> Iterator[TextIO]:
    """Open the first .csv entry of a zip archive as a text stream.

    Accepts raw bytes or a seekable binary file. Raises MalformedArchiveError
    if the archive (or the entry's data) is unreadable and NotFoundError if
    no .csv entry exists.
    """
    source = io.BytesIO(archive) if isinstance(archive, (bytes, bytearray)) else archive
    try:
        zf = zipfile.ZipFile(source)
    except _OPEN_ERRORS as e:
        raise MalformedArchiveError("open zip archive") from e

    with zf:
        entry = find_csv_entry(zf)
        if entry is None:
            raise NotFoundError("CSV file not found in archive")
        logger.debug("Reading %s (%d bytes) from archive", entry.filename, entry.file_size)

        try:
            raw = zf.open(entry)
        except _ENTRY_OPEN_ERRORS as e:
            raise MalformedArchiveError(f"open {entry.filename} in zip") from e

        with raw, io.TextIOWrapper(raw, encoding="utf-8", newline="") as text:
            try:
                yield text
            except _READ_ERRORS as e:
                raise MalformedArchiveError(f"read {entry.filename} in zip") from e


def package_csv(payload: bytes, entry_name: str = EXPORT_ENTRY_NAME) -> bytes:
    """Wrap a CSV payload into a zip holding a single entry."""
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w", compression=zipfile.ZIP_DEFLATED) as zf:
        zf.writestr(entry_name, payload)
    return buffer.getvalue()
