"""GitHub release metadata models.

Only the fields the notarizer needs are declared; anything else in the
GitHub response is ignored.  Every declared string is required and must be
non-empty once surrounding whitespace is stripped.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator


class ReleaseValidationError(ValueError):
    """Raised when release metadata is missing or malformed."""


class ReleaseAuthor(BaseModel):
    """The account that published the release."""

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    login: str = Field(min_length=1)


class ReleaseAssetUploader(BaseModel):
    """The account that uploaded a release asset."""

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    login: str = Field(min_length=1)


class ReleaseAsset(BaseModel):
    """An uploaded release file."""

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    url: str = Field(min_length=1)
    name: str = Field(min_length=1)
    uploader: ReleaseAssetUploader

    @field_validator("name")
    @classmethod
    def _plain_file_name(cls, value: str) -> str:
        if "/" in value or "\\" in value or value in (".", ".."):
            raise ValueError(f"asset name {value!r} is not a plain file name")
        return value


class GitHubRelease(BaseModel):
    """A GitHub release as returned by ``GET /repos/{owner}/{repo}/releases/...``."""

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    tarball_url: str = Field(min_length=1)
    zipball_url: str = Field(min_length=1)
    tag_name: str = Field(min_length=1)
    author: ReleaseAuthor
    assets: list[ReleaseAsset] = []


def parse_release(payload: object) -> GitHubRelease:
    """Validate a decoded JSON payload into a ``GitHubRelease``.

    Raises
    ------
    ReleaseValidationError
        If a required field is missing, empty, or of the wrong type.
    """
    try:
        return GitHubRelease.model_validate(payload)
    except ValidationError as exc:
        raise ReleaseValidationError(
            f"validation of the release details failed: {exc}"
        ) from exc
