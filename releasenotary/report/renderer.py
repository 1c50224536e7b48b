"""Rich terminal renderer for notarization runs.

Color scheme (by ``PresentationTier``)
--------------------------------------
- bold green  : NORMAL  (trusted)
- bold yellow : CAUTION (signer's API key revoked)
- bold red    : ALARM   (untrusted, unknown, unsupported) and aborts
"""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

from rich.console import Console
from rich.filesize import decimal
from rich.markup import escape
from rich.text import Text

from releasenotary.core.status import PresentationTier, classify
from releasenotary.models.artifacts import ArtifactStatus, Asset, NotarizedArtifact
from releasenotary.models.release import GitHubRelease

# Same layout as the ``date`` command's default output.
UNIX_DATE_FORMAT = "%a %b %d %H:%M:%S %Z %Y"

TIER_STYLES: dict[PresentationTier, str] = {
    PresentationTier.NORMAL: "bold green",
    PresentationTier.CAUTION: "bold yellow",
    PresentationTier.ALARM: "bold red",
}


def mask_secret(value: str) -> str:
    """Hide all but the last four characters of a secret."""
    if len(value) <= 4:
        return "*" * len(value)
    return "*" * (len(value) - 4) + value[-4:]


class ReportRenderer:
    """Prints run progress and results to a Rich console.

    Parameters
    ----------
    console:
        Rich Console instance.  A new one is created if not provided.
    """

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console(highlight=False)

    # ------------------------------------------------------------------
    # Startup
    # ------------------------------------------------------------------

    def print_argument(self, name: str, value: str, *, secret: bool = False) -> None:
        shown = mask_secret(value) if secret else value
        self.console.print(f"  - {escape(name)}: {escape(shown)} (length: {len(value)})")

    def print_release(self, release: GitHubRelease, assets: Sequence[Asset]) -> None:
        self.console.print(
            f"Release [bold]{escape(release.tag_name)}[/bold] by "
            f"{escape(release.author.login)}: {len(assets)} asset(s) to notarize."
        )

    def print_download(self, asset: Asset, target: Path) -> None:
        self.console.print(f"Downloading asset {escape(asset.url)} to temp file {escape(str(target))} ...")

    # ------------------------------------------------------------------
    # Notarization
    # ------------------------------------------------------------------

    def print_notarizing_start(self, count: int) -> None:
        self.console.print(f"\nNotarizing {count} release assets ...\n")

    def print_notarizing(self, asset: Asset) -> None:
        self.console.print(f"Notarizing asset {escape(asset.name)} ...")

    def render_status(self, status: ArtifactStatus | str) -> Text:
        """Return *status* as Text styled by its presentation tier."""
        label = status.value if isinstance(status, ArtifactStatus) else str(status)
        return Text(label, style=TIER_STYLES[classify(status)])

    def render_artifact(self, artifact: NotarizedArtifact) -> Text:
        """Render the details block of a notarized artifact."""
        timestamp = artifact.timestamp.strftime(UNIX_DATE_FORMAT).strip()
        rows = [
            ("Name", artifact.name),
            ("Hash", artifact.hash),
            ("Size", decimal(artifact.size)),
            ("Timestamp", timestamp),
            ("ContentType", artifact.content_type),
            ("SignerID", artifact.signer),
        ]
        text = Text()
        for label, value in rows:
            text.append(f"\t{label + ':':<14}{value}\n")
        text.append(f"\t{'Status:':<14}")
        text.append_text(self.render_status(artifact.status))
        text.append("\n")
        return text

    def print_notarized(self, artifact: NotarizedArtifact) -> None:
        self.console.print(
            Text(f"Successfully notarized asset {artifact.name}: ", style="bold green")
        )
        self.console.print(self.render_artifact(artifact))

    def print_success(self, count: int) -> None:
        self.console.print(
            f"[bold green]All {count} release assets have been successfully notarized.[/bold green]"
        )

    def print_abort(self, message: str) -> None:
        self.console.print(f"[bold red]ABORTING: {escape(message)}[/bold red]")
