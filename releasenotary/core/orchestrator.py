"""Notarization orchestrator — sign each asset, then read it back.

For every downloaded asset:

1. Fingerprint the file (SHA-256, size, content type).
2. Sign the fingerprint on the ledger with the credential resolved for
   the asset's identity.
3. Look the fingerprint up again and check the ledger's answer:

   - no record        -> ``NotarizedArtifactMissingError``
   - lookup failure   -> ``LedgerIntegrityError`` (ledger might be compromised)
   - ``verified`` off -> ``LedgerIntegrityError`` (ledger might be compromised)
   - other hash       -> ``LedgerIntegrityError`` (ledger might be compromised)
   - credential revoked in the past -> status becomes ``REVOKED``

Assets are processed one at a time, in collection order.  Any error ends
the run; nothing moves on to the next asset.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime, timezone
from typing import Protocol

from releasenotary.bridge.http import TransportError
from releasenotary.bridge.ledger import LedgerSession
from releasenotary.core.hasher import fingerprint_file
from releasenotary.models.artifacts import (
    ArtifactStatus,
    DownloadedAsset,
    LocalArtifact,
    NotarizedArtifact,
)
from releasenotary.models.credentials import Credential

logger = logging.getLogger(__name__)


class NotarizationError(RuntimeError):
    """Raised when an asset cannot be fingerprinted or signed."""


class LedgerIntegrityError(RuntimeError):
    """Raised when a signed artifact does not read back as expected.

    The signing call succeeded, so any mismatch on read-back means the
    ledger's state cannot be trusted.  The process must not continue.
    """


class NotarizedArtifactMissingError(LedgerIntegrityError):
    """Raised when the ledger has no record of an artifact it just signed."""


class LedgerConnector(Protocol):
    """Opens ledger sessions bound to a credential."""

    def connect(self, credential: Credential) -> LedgerSession: ...


class NotarizationOrchestrator:
    """Signs and verifies assets, one ledger session per credential.

    Sessions are opened lazily and reused for every asset signed with the
    same credential.  ``close()`` (or leaving the ``with`` block) closes
    all of them.

    Parameters
    ----------
    connector:
        Opens a ``LedgerSession`` for a credential.
    clock:
        Returns the current UTC time; used for revocation checks.
    """

    def __init__(
        self,
        connector: LedgerConnector,
        *,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._connector = connector
        self._clock = clock or (lambda: datetime.now(timezone.utc))
        self._sessions: dict[str, LedgerSession] = {}

    def __enter__(self) -> NotarizationOrchestrator:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    @property
    def session_count(self) -> int:
        return len(self._sessions)

    def session_for(self, credential: Credential) -> LedgerSession:
        """Return the open session for *credential*, connecting on first use."""
        session = self._sessions.get(credential.id)
        if session is None:
            session = self._connector.connect(credential)
            self._sessions[credential.id] = session
        return session

    def close(self) -> None:
        """Close every session; failures are logged, not raised."""
        sessions, self._sessions = self._sessions, {}
        for credential_id, session in sessions.items():
            try:
                session.close()
            except Exception as exc:  # close failures are non-fatal
                logger.warning(
                    "error disconnecting ledger session for API key %s: %s",
                    credential_id,
                    exc,
                )

    # ------------------------------------------------------------------
    # Notarize + verify
    # ------------------------------------------------------------------

    def process(self, downloaded: DownloadedAsset, credential: Credential) -> NotarizedArtifact:
        """Notarize *downloaded* with *credential* and return the verified record."""
        name = downloaded.asset.name
        try:
            artifact = fingerprint_file(downloaded.path, name)
        except OSError as exc:
            raise NotarizationError(
                f"error creating artifact from asset file {downloaded.path}: {exc}"
            ) from exc

        session = self.session_for(credential)
        logger.info("Signing %s (sha256 %s) as %s.", name, artifact.hash, credential.name)
        try:
            session.sign(artifact, ArtifactStatus.TRUSTED)
        except TransportError as exc:
            raise NotarizationError(f"error signing artifact {name}: {exc}") from exc

        return self.verify(session, artifact)

    def verify(self, session: LedgerSession, artifact: LocalArtifact) -> NotarizedArtifact:
        """Read *artifact* back from the ledger and check the record."""
        try:
            record = session.load_artifact(artifact.hash)
        except TransportError as exc:
            raise LedgerIntegrityError(
                f"{artifact.name} was notarized without errors, but there was an error "
                f"when verifying it: ledger might be compromised: {exc}"
            ) from exc

        if record is None:
            raise NotarizedArtifactMissingError(
                f"{artifact.name} was notarized without error, but there was an error "
                "when verifying it: artifact not found"
            )

        if not record.verified:
            raise LedgerIntegrityError(
                f"{artifact.name} was notarized without errors, but there was an error "
                'when verifying it: ledger might be compromised: verification status is "false"'
            )

        notarized = record.artifact
        if notarized.hash != artifact.hash:
            raise LedgerIntegrityError(
                f"{artifact.name} was notarized without errors, but there was an error "
                "when verifying it: ledger might be compromised: returned record hash "
                f"{notarized.hash} does not match {artifact.hash}"
            )

        if notarized.is_revoked(self._clock()):
            logger.warning(
                "Signer %s of %s has a revoked API key (revoked at %s).",
                notarized.signer,
                artifact.name,
                notarized.revoked,
            )
            notarized = notarized.model_copy(update={"status": ArtifactStatus.REVOKED})
        return notarized
