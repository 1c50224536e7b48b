"""Asset collector — turns release metadata into notarizable assets.

Every release yields its two auto-generated source archives first, both
owned by the release author, followed by the uploaded files in the order
GitHub lists them, each owned by its uploader.
"""

from __future__ import annotations

from urllib.parse import urlsplit

from releasenotary.models.artifacts import Asset
from releasenotary.models.release import GitHubRelease, ReleaseValidationError


def make_identity(login: str, suffix: str = "@github") -> str:
    """Signer identity for a GitHub login, e.g. ``alice`` -> ``alice@github``."""
    return f"{login}{suffix}"


def repository_name(zipball_url: str) -> str:
    """Extract the repository name from a release zipball URL.

    Expects ``<scheme>://<host>/[<prefix>/]repos/<owner>/<repo>/zipball/...``
    as served by github.com and GitHub Enterprise.
    """
    parts = urlsplit(zipball_url.strip())
    segments = [segment for segment in parts.path.split("/") if segment]
    if not parts.scheme or not parts.netloc or "repos" not in segments:
        raise ReleaseValidationError(
            f"cannot derive the repository name from zipball URL {zipball_url!r}"
        )
    index = segments.index("repos")
    if len(segments) < index + 3:
        raise ReleaseValidationError(
            f"cannot derive the repository name from zipball URL {zipball_url!r}"
        )
    return segments[index + 2]


def collect(release: GitHubRelease, identity_suffix: str = "@github") -> list[Asset]:
    """Return the release's source archives and uploaded files as assets.

    The result always holds ``len(release.assets) + 2`` entries.
    """
    repo_and_tag = f"{repository_name(release.zipball_url)}-{release.tag_name}"
    author = make_identity(release.author.login, identity_suffix)

    assets = [
        Asset(
            name=f"{repo_and_tag}.zip",
            url=release.zipball_url,
            identity=author,
            is_source_archive=True,
        ),
        Asset(
            name=f"{repo_and_tag}.tar.gz",
            url=release.tarball_url,
            identity=author,
            is_source_archive=True,
        ),
    ]
    for uploaded in release.assets:
        assets.append(
            Asset(
                name=uploaded.name,
                url=uploaded.url,
                identity=make_identity(uploaded.uploader.login, identity_suffix),
            )
        )
    return assets
