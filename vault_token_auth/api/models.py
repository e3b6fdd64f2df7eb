"""Request and response shapes for the token auth backend.

Attribute names are Python-style; the wire names are pydantic aliases and
both are accepted on input. ``null`` in a response is read as "absent" so
every attribute keeps a usable zero value.

Token roles keep a quirk of the server API: ``period`` is written as a string
(``TokenRoleOptions``) but read back as an integer (``LookedUpTokenRole``).
"""

from __future__ import annotations

from datetime import timedelta
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_serializer, model_validator

from ..utils.helpers import whole_seconds


class _WireModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    @model_validator(mode="before")
    @classmethod
    def _drop_nulls(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return {k: v for k, v in data.items() if v is not None}
        return data


class TokenOptions(_WireModel):
    """Properties of a token being created.

    Durations accept ``timedelta`` or seconds and are sent as whole seconds.
    Empty values are left out of the request body so the server applies
    its own defaults.
    """

    policies: list[str] = Field(default_factory=list)
    no_default_policy: bool = False
    orphan: bool = Field(default=False, alias="no_parent")
    renewable: bool = False
    display_name: str = ""
    max_uses: int = Field(default=0, ge=0, alias="num_uses")
    ttl: timedelta | None = None
    max_ttl: timedelta | None = Field(default=None, alias="explicit_max_ttl")
    period: timedelta | None = None

    @field_serializer("ttl", "max_ttl", "period")
    def _seconds(self, value: timedelta | None) -> int | None:
        return None if value is None else whole_seconds(value)

    def to_payload(self) -> dict[str, Any]:
        """Wire representation with empty fields omitted."""
        return {k: v for k, v in self.model_dump(by_alias=True).items() if v}


class CreatedToken(_WireModel):
    """Result of creating a token; ``id`` is the secret token value itself."""

    id: str = Field(default="", alias="client_token", repr=False)
    policies: list[str] = Field(default_factory=list)
    metadata: dict[str, str] = Field(default_factory=dict)
    lease_duration: int = 0
    renewable: bool = False


class LookedUpToken(_WireModel):
    """Server-side description of an existing token."""

    id: str = Field(default="", repr=False)
    accessor: str = ""
    creation_time: int = 0
    creation_ttl: int = 0
    display_name: str = ""
    max_ttl: int = Field(default=0, alias="explicit_max_ttl")
    num_uses: int = 0
    orphan: bool = False
    path: str = ""
    policies: list[str] = Field(default_factory=list)
    ttl: int = 0


class RenewedToken(_WireModel):
    """Result of renewing a token."""

    client_token: str = Field(default="", repr=False)
    accessor: str = ""
    policies: list[str] = Field(default_factory=list)
    lease_duration: int = 0
    renewable: bool = False


class TokenRoleOptions(_WireModel):
    """Definition of a token role; ``name`` is both body field and path segment.

    Every field is sent, matching what the server stores for the role.
    """

    name: str = Field(min_length=1, alias="role_name")
    allowed_policies: str = ""
    disallowed_policies: str = ""
    orphan: bool = False
    period: str = ""
    renewable: bool = False
    explicit_max_ttl: int = 0
    path_suffix: str = ""
    bound_cidrs: list[str] | None = None

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)


class LookedUpTokenRole(_WireModel):
    """A token role as stored by the server."""

    allowed_policies: list[str] = Field(default_factory=list)
    disallowed_policies: list[str] = Field(default_factory=list)
    explicit_max_ttl: int = 0
    name: str = ""
    orphan: bool = False
    path_suffix: str = ""
    period: int = 0
    renewable: bool = False


__all__ = [
    "CreatedToken",
    "LookedUpToken",
    "LookedUpTokenRole",
    "RenewedToken",
    "TokenOptions",
    "TokenRoleOptions",
]
