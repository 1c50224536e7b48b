"""File transfer layer — streams release assets into a run-scoped workspace.

All downloads of a run share one temporary directory.  It is created
before the first download and removed recursively when the run ends,
whether the run succeeded or not.  Failing to remove it, or failing to
close a file or response, is logged and never aborts the run.
"""

from __future__ import annotations

import logging
import shutil
import tempfile
from collections.abc import Callable, Iterator, Sequence
from contextlib import contextmanager
from pathlib import Path

import requests

from releasenotary.bridge.github import github_auth_headers
from releasenotary.bridge.http import HttpClient, TransportError, close_response
from releasenotary.models.artifacts import Asset, DownloadedAsset

logger = logging.getLogger(__name__)


def workspace_file_name(index: int, name: str) -> str:
    """Local file name for the *index*-th asset of a run.

    Asset names come from release metadata and may collide or carry path
    components, so only the last component is kept, behind the index.
    """
    base = name.replace("\\", "/").rsplit("/", 1)[-1].strip()
    if base in ("", ".", ".."):
        base = "asset"
    return f"{index:03d}-{base}"


@contextmanager
def asset_workspace(
    prefix: str = "notarize-release-assets-",
    parent: Path | None = None,
) -> Iterator[Path]:
    """Create a temporary download directory and remove it on exit."""
    try:
        if parent is not None:
            Path(parent).mkdir(parents=True, exist_ok=True)
        workspace = Path(tempfile.mkdtemp(prefix=prefix, dir=parent))
    except OSError as exc:
        raise TransportError(
            f"error creating temp dir for storing downloaded assets: {exc}"
        ) from exc
    logger.debug("Created asset workspace %s.", workspace)
    try:
        yield workspace
    finally:
        try:
            shutil.rmtree(workspace)
        except OSError as exc:
            logger.warning("error deleting temp dir %s: %s", workspace, exc)


class AssetTransfer:
    """Downloads assets over HTTP, one at a time.

    Parameters
    ----------
    http:
        Shared HTTP client.
    token:
        Optional GitHub token sent with every download.
    chunk_size:
        Size of each streamed chunk in bytes.
    """

    def __init__(
        self,
        http: HttpClient,
        token: str = "",
        *,
        chunk_size: int = 1024 * 1024,
    ) -> None:
        self._http = http
        self._token = token
        self._chunk_size = chunk_size

    def download_all(
        self,
        assets: Sequence[Asset],
        directory: Path,
        *,
        on_download: Callable[[Asset, Path], None] | None = None,
    ) -> list[DownloadedAsset]:
        """Download every asset into *directory*, in order.

        The first failure aborts the batch.
        """
        downloaded: list[DownloadedAsset] = []
        for index, asset in enumerate(assets):
            target = Path(directory) / workspace_file_name(index, asset.name)
            if on_download is not None:
                on_download(asset, target)
            downloaded.append(self.download(asset, target))
        return downloaded

    def download(self, asset: Asset, target: Path) -> DownloadedAsset:
        """Stream *asset* to *target* and return where it landed."""
        url = asset.url.strip()
        if not url:
            raise TransportError(f"empty download URL for asset {asset.name}")

        headers = github_auth_headers(self._token)
        if not asset.is_source_archive:
            headers["Accept"] = "application/octet-stream"

        logger.info("Downloading asset %s to temp file %s.", url, target)
        response = self._http.request("GET", url, headers=headers, stream=True)
        try:
            if not 200 <= response.status_code < 300:
                raise TransportError(
                    f"error downloading asset from URL {url}: "
                    f"expected a 2xx HTTP code, got {response.status_code}",
                    method="GET",
                    url=url,
                    status_code=response.status_code,
                )
            try:
                with open(target, "wb") as fh:
                    for chunk in response.iter_content(chunk_size=self._chunk_size):
                        if chunk:
                            fh.write(chunk)
            except requests.RequestException as exc:
                raise TransportError(
                    f"error downloading asset from URL {url}: {exc}",
                    method="GET",
                    url=url,
                    status_code=response.status_code,
                ) from exc
            except OSError as exc:
                raise TransportError(
                    f"error saving downloaded asset {asset.name} to temp file {target}: {exc}"
                ) from exc
        finally:
            close_response(response, f"downloading asset {asset.name}")

        return DownloadedAsset(asset=asset, path=target)
