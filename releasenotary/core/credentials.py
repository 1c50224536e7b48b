"""Credential resolver — one fresh signing key per identity per run.

For every distinct identity the resolver makes exactly one trip to the
credential service:

1. Look the identity up.
2. Found: rotate the key (same id, new secret).  Not found: create one
   named after the identity.
3. Cache the result; later occurrences of the identity reuse the same
   ``Credential`` instance without another network call.

Any failure aborts the whole batch.  There is no retry.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Protocol

from releasenotary.bridge.http import TransportError
from releasenotary.models.credentials import Credential

logger = logging.getLogger(__name__)


class CredentialResolutionError(RuntimeError):
    """Raised when a key cannot be looked up, created or rotated for an identity."""

    def __init__(self, identity: str, cause: Exception) -> None:
        super().__init__(
            f"error getting or creating / rotating API key for signer ID {identity}: {cause}"
        )
        self.identity = identity


class CredentialStore(Protocol):
    """The credential service operations the resolver depends on."""

    def lookup(self, identity: str) -> Credential | None: ...

    def create(self, identity: str) -> Credential: ...

    def rotate(self, credential: Credential) -> Credential: ...


class CredentialResolver:
    """Resolves identities to credentials, memoizing per identity.

    The memo table belongs to this instance; build one resolver per run.

    Parameters
    ----------
    store:
        Credential service client.
    """

    def __init__(self, store: CredentialStore) -> None:
        self._store = store
        self._resolved: dict[str, Credential] = {}

    @property
    def resolved(self) -> dict[str, Credential]:
        """Identity -> credential mapping built so far."""
        return dict(self._resolved)

    def resolve(self, identity: str) -> Credential:
        """Return the run's credential for *identity*, resolving it on first use."""
        cached = self._resolved.get(identity)
        if cached is not None:
            return cached

        try:
            existing = self._store.lookup(identity)
            if existing is None:
                credential = self._store.create(identity)
            else:
                credential = self._store.rotate(existing)
        except TransportError as exc:
            raise CredentialResolutionError(identity, exc) from exc

        self._resolved[identity] = credential
        logger.debug(
            "Resolved credential %s for identity %s (%s).",
            credential.id,
            identity,
            "rotated" if existing is not None else "created",
        )
        return credential

    def resolve_all(self, identities: Sequence[str]) -> list[Credential]:
        """Resolve *identities* in order; the result is aligned by position.

        Duplicate identities map to the identical ``Credential`` instance.
        """
        return [self.resolve(identity) for identity in identities]
