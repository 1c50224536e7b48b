"""Unit tests for the notarization orchestrator — notarize, then verify."""

from __future__ import annotations

import hashlib
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

from releasenotary.bridge.http import TransportError
from releasenotary.core.orchestrator import (
    LedgerIntegrityError,
    NotarizationError,
    NotarizationOrchestrator,
    NotarizedArtifactMissingError,
)
from releasenotary.models.artifacts import (
    ArtifactStatus,
    Asset,
    DownloadedAsset,
    LedgerRecord,
    LocalArtifact,
    NotarizedArtifact,
)
from releasenotary.models.credentials import Credential

NOW = datetime(2026, 10, 19, 8, 0, tzinfo=timezone.utc)
ALICE = Credential(id="k-alice", key="s-alice", name="alice@github")
BOB = Credential(id="k-bob", key="s-bob", name="bob@github")


class _FakeLedgerSession:
    """In-memory ledger session.  ``verify_result`` overrides the read-back."""

    _UNSET = object()

    def __init__(self, credential: Credential) -> None:
        self.credential = credential
        self.signed: list[tuple[LocalArtifact, ArtifactStatus]] = []
        self.closed = False
        self.sign_error: Exception | None = None
        self.load_error: Exception | None = None
        self.verify_result: object = self._UNSET
        self.close_error: Exception | None = None

    def sign(self, artifact: LocalArtifact, status: ArtifactStatus) -> None:
        if self.sign_error is not None:
            raise self.sign_error
        self.signed.append((artifact, status))

    def load_artifact(self, artifact_hash: str) -> LedgerRecord | None:
        if self.load_error is not None:
            raise self.load_error
        if self.verify_result is not self._UNSET:
            return self.verify_result  # type: ignore[return-value]
        for artifact, status in self.signed:
            if artifact.hash == artifact_hash:
                return LedgerRecord(
                    artifact=NotarizedArtifact(
                        name=artifact.name,
                        hash=artifact.hash,
                        size=artifact.size,
                        content_type=artifact.content_type,
                        timestamp=NOW,
                        signer=self.credential.name,
                        status=status,
                    ),
                    verified=True,
                )
        return None

    def close(self) -> None:
        if self.close_error is not None:
            raise self.close_error
        self.closed = True


class _FakeConnector:
    def __init__(self) -> None:
        self.sessions: dict[str, _FakeLedgerSession] = {}
        self.connects: list[str] = []

    def connect(self, credential: Credential) -> _FakeLedgerSession:
        self.connects.append(credential.id)
        session = _FakeLedgerSession(credential)
        self.sessions[credential.id] = session
        return session


@pytest.fixture
def downloaded(tmp_path: Path) -> DownloadedAsset:
    path = tmp_path / "widget-v1.2.0.zip"
    path.write_bytes(b"PK\x03\x04 release archive")
    asset = Asset(name=path.name, url="https://example/zipball", identity="alice@github")
    return DownloadedAsset(asset=asset, path=path)


@pytest.fixture
def connector() -> _FakeConnector:
    return _FakeConnector()


@pytest.fixture
def orchestrator(connector: _FakeConnector) -> NotarizationOrchestrator:
    return NotarizationOrchestrator(connector, clock=lambda: NOW)


def _content_hash(downloaded: DownloadedAsset) -> str:
    return hashlib.sha256(downloaded.path.read_bytes()).hexdigest()


def _record(
    artifact_hash: str,
    status=ArtifactStatus.TRUSTED,
    *,
    verified=True,
    revoked=None,
) -> LedgerRecord:
    return LedgerRecord(
        artifact=NotarizedArtifact(
            name="widget-v1.2.0.zip",
            hash=artifact_hash,
            size=22,
            timestamp=NOW,
            signer="alice@github",
            status=status,
            revoked=revoked,
        ),
        verified=verified,
    )


# ---------------------------------------------------------------------------
# Happy path
# ---------------------------------------------------------------------------


class TestProcess:
    def test_signs_sha256_of_file_content(self, orchestrator, connector, downloaded):
        result = orchestrator.process(downloaded, ALICE)

        expected = hashlib.sha256(downloaded.path.read_bytes()).hexdigest()
        signed, status = connector.sessions["k-alice"].signed[0]
        assert signed.hash == expected
        assert signed.size == downloaded.path.stat().st_size
        assert signed.content_type == "application/zip"
        assert status is ArtifactStatus.TRUSTED
        assert result.hash == expected
        assert result.signer == "alice@github"

    @pytest.mark.parametrize(
        "status",
        [ArtifactStatus.TRUSTED, ArtifactStatus.UNTRUSTED, ArtifactStatus.UNKNOWN, ArtifactStatus.UNSUPPORTED],
    )
    def test_status_passes_through_when_not_revoked(self, orchestrator, connector, downloaded, status):
        orchestrator.session_for(ALICE).verify_result = _record(_content_hash(downloaded), status)
        assert orchestrator.process(downloaded, ALICE).status is status

    def test_past_revocation_overrides_status(self, orchestrator, downloaded):
        orchestrator.session_for(ALICE).verify_result = _record(
            _content_hash(downloaded), ArtifactStatus.UNTRUSTED, revoked=NOW - timedelta(days=1)
        )
        result = orchestrator.process(downloaded, ALICE)
        assert result.status is ArtifactStatus.REVOKED

    def test_future_revocation_is_ignored(self, orchestrator, downloaded):
        orchestrator.session_for(ALICE).verify_result = _record(
            _content_hash(downloaded), revoked=NOW + timedelta(days=1)
        )
        assert orchestrator.process(downloaded, ALICE).status is ArtifactStatus.TRUSTED


# ---------------------------------------------------------------------------
# Failure classes
# ---------------------------------------------------------------------------


class TestFailures:
    def test_sign_failure(self, orchestrator, downloaded):
        orchestrator.session_for(ALICE).sign_error = TransportError("POST /artifacts error: 500")
        with pytest.raises(NotarizationError, match="error signing artifact widget-v1.2.0.zip"):
            orchestrator.process(downloaded, ALICE)

    def test_sign_failure_is_not_an_integrity_error(self, orchestrator, downloaded):
        orchestrator.session_for(ALICE).sign_error = TransportError("boom")
        with pytest.raises(NotarizationError) as excinfo:
            orchestrator.process(downloaded, ALICE)
        assert not isinstance(excinfo.value, LedgerIntegrityError)

    def test_missing_after_sign(self, orchestrator, downloaded):
        orchestrator.session_for(ALICE).verify_result = None
        with pytest.raises(NotarizedArtifactMissingError, match="artifact not found"):
            orchestrator.process(downloaded, ALICE)

    def test_lookup_error_flags_compromise(self, orchestrator, downloaded):
        orchestrator.session_for(ALICE).load_error = TransportError("GET /artifacts error: 502")
        with pytest.raises(LedgerIntegrityError, match="ledger might be compromised: GET") as excinfo:
            orchestrator.process(downloaded, ALICE)
        assert not isinstance(excinfo.value, NotarizedArtifactMissingError)

    def test_unverified_flags_compromise(self, orchestrator, downloaded):
        orchestrator.session_for(ALICE).verify_result = _record(_content_hash(downloaded), verified=False)
        with pytest.raises(LedgerIntegrityError, match='verification status is "false"'):
            orchestrator.process(downloaded, ALICE)

    def test_record_for_other_hash_flags_compromise(self, orchestrator, downloaded):
        orchestrator.session_for(ALICE).verify_result = _record("ff" * 32)
        with pytest.raises(LedgerIntegrityError, match="does not match") as excinfo:
            orchestrator.process(downloaded, ALICE)
        assert not isinstance(excinfo.value, NotarizedArtifactMissingError)

    def test_unreadable_file(self, orchestrator, tmp_path):
        asset = Asset(name="gone.bin", url="https://example/gone", identity="alice@github")
        missing = DownloadedAsset(asset=asset, path=tmp_path / "gone.bin")
        with pytest.raises(NotarizationError, match="error creating artifact"):
            orchestrator.process(missing, ALICE)


# ---------------------------------------------------------------------------
# Session lifecycle
# ---------------------------------------------------------------------------


class TestSessions:
    def test_one_session_per_credential(self, orchestrator, connector, downloaded):
        orchestrator.process(downloaded, ALICE)
        orchestrator.process(downloaded, ALICE)
        orchestrator.process(downloaded, BOB)

        assert connector.connects == ["k-alice", "k-bob"]
        assert orchestrator.session_count == 2

    def test_context_manager_closes_all_sessions(self, connector, downloaded):
        with NotarizationOrchestrator(connector, clock=lambda: NOW) as orchestrator:
            orchestrator.process(downloaded, ALICE)
            orchestrator.process(downloaded, BOB)

        assert all(s.closed for s in connector.sessions.values())
        assert orchestrator.session_count == 0

    def test_sessions_closed_on_error(self, connector, downloaded):
        with pytest.raises(NotarizedArtifactMissingError):
            with NotarizationOrchestrator(connector) as orchestrator:
                orchestrator.session_for(ALICE).verify_result = None
                orchestrator.process(downloaded, ALICE)
        assert connector.sessions["k-alice"].closed is True

    def test_close_failure_only_logged(self, orchestrator, connector, caplog):
        orchestrator.session_for(ALICE).close_error = OSError("socket already gone")
        orchestrator.session_for(BOB)

        orchestrator.close()

        assert "error disconnecting ledger session" in caplog.text
        assert connector.sessions["k-bob"].closed is True
