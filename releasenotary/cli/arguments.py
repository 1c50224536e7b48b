"""Positional argument validation for the ``releasenotary`` command.

The command takes eight positional values, in this order:

1. ledger REST API URL            (required)
2. ledger REST API token          (required)
3. ledger host                    (required)
4. ledger port                    (required)
5. ledger "no TLS" flag           (optional, defaults to false)
6. ledger ID                      (required)
7. release URL                    (required)
8. GitHub token                   (optional)

CI systems pass every slot, leaving optional ones as empty strings, so
each value is trimmed and checked individually with its own message.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from releasenotary.report.renderer import ReportRenderer

_TRUE_VALUES = frozenset({"1", "t", "T", "TRUE", "true", "True"})
_FALSE_VALUES = frozenset({"0", "f", "F", "FALSE", "false", "False"})


class ArgumentValidationError(ValueError):
    """Raised when a command-line value is missing or malformed."""


def parse_bool(value: str) -> bool:
    """Parse the boolean spellings accepted by CI tooling."""
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ValueError(f"invalid syntax for a boolean: {value!r}")


def read_argument(
    value: str | None,
    name: str,
    *,
    required: bool,
    secret: bool = False,
    renderer: ReportRenderer | None = None,
) -> str:
    """Trim, echo and check one positional value."""
    value = (value or "").strip()
    if renderer is not None:
        renderer.print_argument(name, value, secret=secret)
    if required and not value:
        raise ArgumentValidationError(f"required argument {name} value is empty")
    return value


class NotarizeArguments(BaseModel):
    """Validated command-line values for one run."""

    model_config = ConfigDict(frozen=True)

    ledger_api_url: str
    ledger_api_token: str
    ledger_host: str
    ledger_port: str
    ledger_no_tls: bool = False
    ledger_id: str
    release_url: str
    github_token: str = ""

    @classmethod
    def from_values(
        cls,
        values: list[str | None],
        *,
        renderer: ReportRenderer | None = None,
    ) -> NotarizeArguments:
        """Validate the eight positional *values* in declaration order."""
        padded = list(values) + [None] * (8 - len(values))
        api_url = read_argument(padded[0], "ledger REST API URL", required=True, renderer=renderer)
        api_token = read_argument(
            padded[1], "ledger REST API personal token", required=True, secret=True, renderer=renderer
        )
        host = read_argument(padded[2], "ledger API host", required=True, renderer=renderer)
        port = read_argument(padded[3], "ledger API port", required=True, renderer=renderer)
        no_tls_raw = read_argument(padded[4], "ledger API no TLS", required=False, renderer=renderer)
        ledger_id = read_argument(padded[5], "ledger ID", required=True, renderer=renderer)
        release_url = read_argument(padded[6], "Release URL", required=True, renderer=renderer)
        github_token = read_argument(
            padded[7], "GitHub token", required=False, secret=True, renderer=renderer
        )

        no_tls = False
        if no_tls_raw:
            try:
                no_tls = parse_bool(no_tls_raw)
            except ValueError as exc:
                raise ArgumentValidationError(
                    f'error parsing the "no TLS" argument value "{no_tls_raw}": {exc}'
                ) from exc

        return cls(
            ledger_api_url=api_url.rstrip("/"),
            ledger_api_token=api_token,
            ledger_host=host,
            ledger_port=port,
            ledger_no_tls=no_tls,
            ledger_id=ledger_id,
            release_url=release_url,
            github_token=github_token,
        )
