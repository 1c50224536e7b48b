"""Release notarization pipeline — the fixed, sequential run order.

1. Fetch and validate the release metadata.
2. Collect the assets (source archives + uploaded files).
3. Download every asset into a temporary workspace.
4. Resolve one credential per distinct signer identity.
5. Notarize and verify each asset, in collection order.

The workspace and all ledger sessions are released on every exit path.
Any error propagates to the caller and ends the run.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Protocol

from releasenotary.bridge.transfer import AssetTransfer, asset_workspace
from releasenotary.core.assets import collect
from releasenotary.core.credentials import CredentialResolver
from releasenotary.core.orchestrator import LedgerConnector, NotarizationOrchestrator
from releasenotary.models.artifacts import NotarizedArtifact
from releasenotary.models.release import GitHubRelease
from releasenotary.report.renderer import ReportRenderer

logger = logging.getLogger(__name__)


class ReleaseSource(Protocol):
    """Anything that can fetch release metadata by URL."""

    def fetch(self, release_url: str) -> GitHubRelease: ...


class ReleaseNotarizer:
    """Runs the whole notarization of one release.

    Parameters
    ----------
    releases:
        Release metadata provider.
    transfer:
        Downloads asset content.
    resolver:
        Resolves signer identities to credentials (one resolver per run).
    connector:
        Opens ledger sessions for credentials.
    renderer:
        Progress and result output.  Silent if not provided.
    identity_suffix:
        Appended to GitHub logins to form signer identities.
    workspace_prefix, workspace_parent:
        Where the temporary download directory is created.
    """

    def __init__(
        self,
        releases: ReleaseSource,
        transfer: AssetTransfer,
        resolver: CredentialResolver,
        connector: LedgerConnector,
        *,
        renderer: ReportRenderer | None = None,
        identity_suffix: str = "@github",
        workspace_prefix: str = "notarize-release-assets-",
        workspace_parent: Path | None = None,
    ) -> None:
        self._releases = releases
        self._transfer = transfer
        self._resolver = resolver
        self._connector = connector
        self._renderer = renderer
        self._identity_suffix = identity_suffix
        self._workspace_prefix = workspace_prefix
        self._workspace_parent = workspace_parent

    def run(self, release_url: str) -> list[NotarizedArtifact]:
        """Notarize every asset of the release at *release_url*."""
        release = self._releases.fetch(release_url)
        assets = collect(release, self._identity_suffix)
        if self._renderer:
            self._renderer.print_release(release, assets)

        results: list[NotarizedArtifact] = []
        with asset_workspace(self._workspace_prefix, self._workspace_parent) as workspace:
            downloaded = self._transfer.download_all(
                assets,
                workspace,
                on_download=self._renderer.print_download if self._renderer else None,
            )

            if self._renderer:
                self._renderer.print_notarizing_start(len(downloaded))

            credentials = self._resolver.resolve_all([asset.identity for asset in assets])

            with NotarizationOrchestrator(self._connector) as orchestrator:
                for item, credential in zip(downloaded, credentials):
                    if self._renderer:
                        self._renderer.print_notarizing(item.asset)
                    notarized = orchestrator.process(item, credential)
                    if self._renderer:
                        self._renderer.print_notarized(notarized)
                    results.append(notarized)

        logger.info(
            "Notarized %d asset(s) with %d credential(s).",
            len(results),
            len(self._resolver.resolved),
        )
        return results
