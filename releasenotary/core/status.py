"""Status classifier — maps ledger trust status to a presentation tier."""

from __future__ import annotations

from enum import Enum

from releasenotary.models.artifacts import ArtifactStatus


class PresentationTier(str, Enum):
    """How loudly a status should be shown to the operator."""

    NORMAL = "normal"
    CAUTION = "caution"
    ALARM = "alarm"


_ALARM_STATUSES = frozenset(
    {ArtifactStatus.UNTRUSTED, ArtifactStatus.UNKNOWN, ArtifactStatus.UNSUPPORTED}
)


def classify(status: ArtifactStatus | str) -> PresentationTier:
    """Return the tier for *status*; unrecognized values are ``NORMAL``."""
    try:
        status = ArtifactStatus(status)
    except ValueError:
        return PresentationTier.NORMAL
    if status in _ALARM_STATUSES:
        return PresentationTier.ALARM
    if status is ArtifactStatus.REVOKED:
        return PresentationTier.CAUTION
    return PresentationTier.NORMAL
