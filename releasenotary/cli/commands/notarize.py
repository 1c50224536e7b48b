"""``releasenotary URL TOKEN HOST PORT NO_TLS LEDGER RELEASE [GITHUB_TOKEN]``.

Notarizes every asset of a GitHub release, source archives included, on
the ledger, then verifies each record.  Exits 0 only when every asset was
notarized and verified; any failure aborts the run with exit code 1.
"""

from __future__ import annotations

import typer
from rich.console import Console

from releasenotary.bridge.credential_service import CredentialService
from releasenotary.bridge.github import ReleaseProvider
from releasenotary.bridge.http import HttpClient, TransportError
from releasenotary.bridge.ledger import LedgerClient
from releasenotary.bridge.transfer import AssetTransfer
from releasenotary.cli.arguments import ArgumentValidationError, NotarizeArguments
from releasenotary.config import NotaryConfig, config
from releasenotary.core.credentials import CredentialResolutionError, CredentialResolver
from releasenotary.core.orchestrator import LedgerIntegrityError, NotarizationError
from releasenotary.core.pipeline import ReleaseNotarizer
from releasenotary.models.release import ReleaseValidationError
from releasenotary.report.renderer import ReportRenderer

console = Console(highlight=False)

# Every error class a run can end with.
FATAL_ERRORS = (
    TransportError,
    ReleaseValidationError,
    CredentialResolutionError,
    NotarizationError,
    LedgerIntegrityError,
)


def build_notarizer(
    args: NotarizeArguments,
    http: HttpClient,
    settings: NotaryConfig,
    renderer: ReportRenderer,
) -> ReleaseNotarizer:
    """Wire the production collaborators for one run."""
    credentials = CredentialService(
        http, args.ledger_api_url, args.ledger_api_token, args.ledger_id
    )
    return ReleaseNotarizer(
        ReleaseProvider(http, args.github_token, accept=settings.release_accept_header),
        AssetTransfer(http, args.github_token, chunk_size=settings.download_chunk_size),
        CredentialResolver(credentials),
        LedgerClient(http, args.ledger_host, args.ledger_port, no_tls=args.ledger_no_tls),
        renderer=renderer,
        identity_suffix=settings.identity_suffix,
        workspace_prefix=settings.workspace_prefix,
        workspace_parent=settings.workspace_parent,
    )


def notarize_cmd(
    ledger_api_url: str = typer.Argument("", help="Ledger REST API URL."),
    ledger_api_token: str = typer.Argument("", help="Ledger REST API personal token."),
    ledger_host: str = typer.Argument("", help="Ledger API host."),
    ledger_port: str = typer.Argument("", help="Ledger API port."),
    ledger_no_tls: str = typer.Argument("", help="Disable TLS for the ledger API (true/false)."),
    ledger_id: str = typer.Argument("", help="Ledger ID to create signer API keys in."),
    release_url: str = typer.Argument("", help="GitHub API URL of the release."),
    github_token: str = typer.Argument("", help="GitHub token for private repositories."),
) -> None:
    """Notarize and verify all assets of a GitHub release."""
    renderer = ReportRenderer(console=console)
    settings = config

    try:
        args = NotarizeArguments.from_values(
            [
                ledger_api_url,
                ledger_api_token,
                ledger_host,
                ledger_port,
                ledger_no_tls,
                ledger_id,
                release_url,
                github_token,
            ],
            renderer=renderer,
        )
    except ArgumentValidationError as exc:
        renderer.print_abort(str(exc))
        raise typer.Exit(code=1)
    console.print()

    with HttpClient(settings.http_timeout_seconds) as http:
        notarizer = build_notarizer(args, http, settings, renderer)
        try:
            results = notarizer.run(args.release_url)
        except FATAL_ERRORS as exc:
            renderer.print_abort(str(exc))
            raise typer.Exit(code=1)

    renderer.print_success(len(results))
