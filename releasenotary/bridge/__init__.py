"""Bridge layer between releasenotary and the services it depends on.

Modules
-------
http
    Shared ``requests`` session with a single timeout and ``TransportError``.
github
    Fetches and validates release metadata from the GitHub REST API.
transfer
    Streams release assets into a run-scoped temporary workspace.
credential_service
    Looks up, creates and rotates signer API keys.
ledger
    Submits artifact fingerprints to the notarization ledger and reads
    them back for verification.

Nothing here retries.  Every failure is raised to the caller, except
cleanup failures, which are logged as warnings.
"""
