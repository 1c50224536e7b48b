"""Release asset and notarized artifact models."""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ArtifactStatus(str, Enum):
    """Trust status recorded by the ledger for a notarized artifact.

    The numeric codes are the ledger's wire form, in declaration order.
    """

    TRUSTED = "TRUSTED"
    UNTRUSTED = "UNTRUSTED"
    UNKNOWN = "UNKNOWN"
    UNSUPPORTED = "UNSUPPORTED"
    REVOKED = "REVOKED"

    @classmethod
    def from_code(cls, code: int) -> ArtifactStatus:
        members = list(cls)
        if 0 <= code < len(members):
            return members[code]
        raise ValueError(f"unknown artifact status code {code}")


class Asset(BaseModel):
    """A notarizable release file and the identity responsible for it."""

    model_config = ConfigDict(frozen=True)

    name: str
    url: str
    identity: str
    is_source_archive: bool = False


class DownloadedAsset(BaseModel):
    """An asset whose content has been streamed to local storage."""

    model_config = ConfigDict(frozen=True)

    asset: Asset
    path: Path


class LocalArtifact(BaseModel):
    """Fingerprint of a downloaded asset, as submitted to the ledger."""

    model_config = ConfigDict(frozen=True)

    name: str
    hash: str  # SHA-256 hex of the file content
    size: int
    content_type: str = "application/octet-stream"
    path: Path | None = None
    metadata: dict[str, Any] = {}


class NotarizedArtifact(BaseModel):
    """The ledger's record of a notarized artifact."""

    model_config = ConfigDict(frozen=True)

    name: str
    hash: str
    size: int = 0
    content_type: str = ""
    timestamp: datetime
    signer: str = ""
    status: ArtifactStatus = ArtifactStatus.UNKNOWN
    revoked: datetime | None = None

    @field_validator("status", mode="before")
    @classmethod
    def _status_from_wire(cls, value: Any) -> Any:
        if isinstance(value, int) and not isinstance(value, bool):
            return ArtifactStatus.from_code(value)
        return value

    def is_revoked(self, now: datetime | None = None) -> bool:
        """Whether the signing credential was revoked at or before *now*.

        A missing timestamp, or the ledger's zero timestamp (year 1), means
        the credential is not revoked.  A timestamp in the future means the
        revocation has not taken effect yet.
        """
        if self.revoked is None or self.revoked.year <= 1:
            return False
        now = now or datetime.now(timezone.utc)
        revoked = self.revoked
        if revoked.tzinfo is None:
            revoked = revoked.replace(tzinfo=timezone.utc)
        return revoked <= now


class LedgerRecord(BaseModel):
    """Result of looking an artifact up on the ledger by its hash."""

    model_config = ConfigDict(frozen=True)

    artifact: NotarizedArtifact
    verified: bool = Field(default=False)
