"""Release metadata provider — fetches a GitHub release description."""

from __future__ import annotations

import logging

from releasenotary.bridge.http import HttpClient
from releasenotary.models.release import GitHubRelease, parse_release

logger = logging.getLogger(__name__)


def github_auth_headers(token: str) -> dict[str, str]:
    """Return the ``Authorization`` header for *token*, or nothing if empty."""
    if token:
        return {"Authorization": f"token {token}"}
    return {}


class ReleaseProvider:
    """Loads and validates release metadata from the GitHub REST API.

    Parameters
    ----------
    http:
        Shared HTTP client.
    token:
        Optional GitHub token, needed for private repositories.
    accept:
        Media type requested from the API.
    """

    def __init__(
        self,
        http: HttpClient,
        token: str = "",
        *,
        accept: str = "application/vnd.github.v3+json",
    ) -> None:
        self._http = http
        self._token = token
        self._accept = accept

    def fetch(self, release_url: str) -> GitHubRelease:
        """Fetch the release at *release_url*.

        Raises ``TransportError`` on network, status, or JSON failure and
        ``ReleaseValidationError`` when required fields are missing.
        """
        headers = {"Accept": self._accept, **github_auth_headers(self._token)}
        payload = self._http.fetch_json(release_url, headers=headers)
        release = parse_release(payload)
        logger.info(
            "Fetched release %s with %d uploaded asset(s).",
            release.tag_name,
            len(release.assets),
        )
        return release
