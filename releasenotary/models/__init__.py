"""releasenotary data models — all Pydantic v2, all frozen (immutable)."""

from releasenotary.models.artifacts import (
    ArtifactStatus,
    Asset,
    DownloadedAsset,
    LedgerRecord,
    LocalArtifact,
    NotarizedArtifact,
)
from releasenotary.models.credentials import (
    ApiKeyCreateRequest,
    ApiKeyResponse,
    ApiKeysPage,
    Credential,
)
from releasenotary.models.release import (
    GitHubRelease,
    ReleaseAsset,
    ReleaseAssetUploader,
    ReleaseAuthor,
    ReleaseValidationError,
    parse_release,
)

__all__ = [
    # artifacts
    "ArtifactStatus",
    "Asset",
    "DownloadedAsset",
    "LocalArtifact",
    "NotarizedArtifact",
    "LedgerRecord",
    # credentials
    "Credential",
    "ApiKeyResponse",
    "ApiKeysPage",
    "ApiKeyCreateRequest",
    # release
    "GitHubRelease",
    "ReleaseAsset",
    "ReleaseAssetUploader",
    "ReleaseAuthor",
    "ReleaseValidationError",
    "parse_release",
]
