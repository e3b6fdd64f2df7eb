from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from ..constants import (
    DEFAULT_MAX_RETRY_ATTEMPTS,
    DEFAULT_VAULT_ADDR,
    HTTP_REQUEST_TIMEOUT_SECONDS,
)
from ..errors.internal import ConfigError


class ClientConfig(BaseModel):
    """Connection settings for a Vault server.

    Attributes:
        address: Base URL of the server, without trailing slash.
        token: Token sent as ``X-Vault-Token``; never shown in ``repr``.
        namespace: Optional namespace sent as ``X-Vault-Namespace``.
        timeout: Total per-request timeout in seconds.
        max_retries: Attempts for GET/LIST on transient failures.
        tls_verify: Verify the server certificate.
        ca_cert: Optional CA bundle used for verification.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    address: str = DEFAULT_VAULT_ADDR
    token: str | None = Field(default=None, repr=False)
    namespace: str | None = None
    timeout: float = Field(default=HTTP_REQUEST_TIMEOUT_SECONDS, gt=0)
    max_retries: int = Field(default=DEFAULT_MAX_RETRY_ATTEMPTS, ge=1)
    tls_verify: bool = True
    ca_cert: str | None = None

    @field_validator("address", mode="before")
    @classmethod
    def validate_address(cls, v: Any) -> str:
        """Require an http(s) URL and strip trailing slashes."""
        if not isinstance(v, str):
            raise ValueError("address must be a string")
        address = v.strip().rstrip("/")
        if not address.startswith(("http://", "https://")):
            raise ValueError("address must start with http:// or https://")
        return address

    @field_validator("token", "namespace", "ca_cert", mode="before")
    @classmethod
    def blank_as_none(cls, v: Any) -> Any:
        if isinstance(v, str):
            v = v.strip()
            return v or None
        return v

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> ClientConfig:
        """Create a ClientConfig from a dictionary.

        Raises:
            ConfigError: If any value fails validation. Only field names are
                reported so a bad token never reaches the message.
        """
        try:
            return cls.model_validate(dict(data))
        except ValidationError as e:
            fields = ", ".join(
                ".".join(str(p) for p in err["loc"]) or "config" for err in e.errors()
            )
            raise ConfigError(f"invalid client configuration: {fields}") from e
