"""File fingerprinting for notarization.

The ledger keys every record by the SHA-256 hex digest of the file bytes.
"""

from __future__ import annotations

import hashlib
import mimetypes
from pathlib import Path

from releasenotary.models.artifacts import LocalArtifact

_CHUNK_SIZE = 1024 * 1024
DEFAULT_CONTENT_TYPE = "application/octet-stream"


def sha256_file(path: Path) -> tuple[str, int]:
    """Hash a file in chunks and return ``(hex_digest, size_in_bytes)``."""
    digest = hashlib.sha256()
    size = 0
    with open(path, "rb") as fh:
        for chunk in iter(lambda: fh.read(_CHUNK_SIZE), b""):
            digest.update(chunk)
            size += len(chunk)
    return digest.hexdigest(), size


def guess_content_type(name: str) -> str:
    """Best-effort media type from the file name."""
    if name.endswith(".tar.gz") or name.endswith(".tgz"):
        return "application/gzip"
    content_type, _ = mimetypes.guess_type(name)
    return content_type or DEFAULT_CONTENT_TYPE


def fingerprint_file(path: Path, name: str = "") -> LocalArtifact:
    """Build the ``LocalArtifact`` submitted to the ledger for *path*."""
    path = Path(path)
    name = name or path.name
    digest, size = sha256_file(path)
    return LocalArtifact(
        name=name,
        hash=digest,
        size=size,
        content_type=guess_content_type(name),
        path=path,
    )
