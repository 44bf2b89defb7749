"""Zip archive helpers for code, module and file payloads."""

from __future__ import annotations

import io
import zipfile
import zlib
from pathlib import Path

from pydantic import BaseModel, Field

from .exceptions import DecodeError


class ExtractedFile(BaseModel):
    """One entry from a downloaded archive."""

    folder: bool = Field(..., description="True for directory entries")
    name: str = Field(..., description="Path of the entry inside the archive")
    buffer: bytes | None = Field(None, description="File contents; None for directories")


def extract(buffer: bytes) -> list[ExtractedFile]:
    """Unpack a zip archive held in memory.

    Every file entry is CRC-checked as it is read. Entries are returned in
    the archive's own directory order.

    Args:
        buffer: Raw zip bytes.

    Returns:
        The archive entries.

    Raises:
        DecodeError: If the buffer is not a zip archive or a CRC check fails.
    """
    try:
        with zipfile.ZipFile(io.BytesIO(buffer)) as zf:
            return [
                ExtractedFile(
                    folder=info.is_dir(),
                    name=info.filename,
                    buffer=None if info.is_dir() else zf.read(info),
                )
                for info in zf.infolist()
            ]
    except (zipfile.BadZipFile, zlib.error, EOFError) as e:
        raise DecodeError(f"Unable to extract archive: {e}", e) from e


def compress_directory(source_path: Path) -> bytes:
    """Zip a directory tree into an in-memory buffer.

    Paths inside the archive are relative to source_path.

    Args:
        source_path: Directory to archive.

    Returns:
        The zip archive bytes.
    """
    out = io.BytesIO()
    with zipfile.ZipFile(out, "w", zipfile.ZIP_DEFLATED) as zf:
        for item in sorted(source_path.rglob("*")):
            if item.is_file():
                zf.write(item, arcname=item.relative_to(source_path).as_posix())
    return out.getvalue()
