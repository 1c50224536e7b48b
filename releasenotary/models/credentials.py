"""Credential service models (API keys bound to a signer identity)."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class Credential(BaseModel):
    """A signing API key issued by the credential service.

    ``name`` is the identity the key is bound to.  ``key`` is the secret
    and is kept out of ``repr`` so it never lands in logs.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    key: str = Field(repr=False)
    name: str = ""


class ApiKeyResponse(BaseModel):
    """Body returned by the create and rotate endpoints."""

    id: str
    key: str = Field(repr=False)


class ApiKeysPage(BaseModel):
    """Paginated body returned by the lookup-by-identity endpoint."""

    total: int = 0
    items: list[ApiKeyResponse] = []


class ApiKeyCreateRequest(BaseModel):
    """Body sent to the create endpoint."""

    name: str
    read_only: bool = False
