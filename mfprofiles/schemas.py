"""Property schemas describing the well-known keys of each profile type."""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping


@dataclass(frozen=True, slots=True)
class PropertySpec:
    """Describes one profile property."""

    type: str
    secure: bool = False
    description: str = ""


@dataclass(frozen=True, slots=True)
class ProfileTypeSchema:
    """Known properties for a profile type."""

    type: str
    properties: Mapping[str, PropertySpec] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "properties", MappingProxyType(dict(self.properties)))

    @property
    def known_keys(self) -> frozenset[str]:
        return frozenset(self.properties)

    @property
    def secure_keys(self) -> frozenset[str]:
        return frozenset(name for name, spec in self.properties.items() if spec.secure)


_CONNECTION_PROPERTIES: dict[str, PropertySpec] = {
    "host": PropertySpec("string", description="Host name of the service on the mainframe."),
    "port": PropertySpec("number", description="Port number of the service."),
    "user": PropertySpec("string", secure=True, description="User name to authenticate with."),
    "password": PropertySpec("string", secure=True, description="Password to authenticate with."),
    "rejectUnauthorized": PropertySpec("boolean", description="Reject self-signed certificates."),
    "certFile": PropertySpec("existingLocalFile", description="Path to a PEM certificate file."),
    "certKeyFile": PropertySpec("existingLocalFile", description="Path to a PEM private key file."),
}

_TOKEN_PROPERTIES: dict[str, PropertySpec] = {
    "tokenType": PropertySpec("string", description="Type of token to get and use for the API."),
    "tokenValue": PropertySpec("string", secure=True, description="Value of the token for the API."),
}

ZOSMF_SCHEMA = ProfileTypeSchema(
    type="zosmf",
    properties={
        **_CONNECTION_PROPERTIES,
        "basePath": PropertySpec("string", description="Base path prepended to every request."),
        "protocol": PropertySpec("string", description="Protocol used for requests (http or https)."),
        "encoding": PropertySpec("string", description="Default encoding for data set and file transfers."),
        "responseTimeout": PropertySpec("number", description="Seconds the service waits before timing out."),
        **_TOKEN_PROPERTIES,
    },
)

SSH_SCHEMA = ProfileTypeSchema(
    type="ssh",
    properties={
        "host": PropertySpec("string", description="Host name of the SSH service."),
        "port": PropertySpec("number", description="Port of the SSH service."),
        "user": PropertySpec("string", secure=True, description="User name for the SSH service."),
        "password": PropertySpec("string", secure=True, description="Password for the SSH service."),
        "privateKey": PropertySpec("string", description="Path to a private key for SSH authentication."),
        "keyPassphrase": PropertySpec("string", secure=True, description="Passphrase for the private key."),
        "handshakeTimeout": PropertySpec("number", description="Milliseconds to wait for the SSH handshake."),
    },
)

TSO_SCHEMA = ProfileTypeSchema(
    type="tso",
    properties={
        "account": PropertySpec("string", description="Accounting information for the TSO session."),
        "characterSet": PropertySpec("string", description="Character set for the TSO address space."),
        "codePage": PropertySpec("string", description="Code page for the TSO address space."),
        "columns": PropertySpec("number", description="Number of columns on the TSO screen."),
        "logonProcedure": PropertySpec("string", description="Logon procedure used to start TSO."),
        "regionSize": PropertySpec("number", description="Region size for the TSO address space."),
        "rows": PropertySpec("number", description="Number of rows on the TSO screen."),
    },
)

BASE_SCHEMA = ProfileTypeSchema(
    type="base",
    properties={**_CONNECTION_PROPERTIES, **_TOKEN_PROPERTIES},
)

BUILTIN_SCHEMAS: tuple[ProfileTypeSchema, ...] = (ZOSMF_SCHEMA, SSH_SCHEMA, TSO_SCHEMA, BASE_SCHEMA)


__all__ = [
    "BASE_SCHEMA",
    "BUILTIN_SCHEMAS",
    "ProfileTypeSchema",
    "PropertySpec",
    "SSH_SCHEMA",
    "TSO_SCHEMA",
    "ZOSMF_SCHEMA",
]
