"""
Data models for credential specs, request descriptors, and host items.
"""

from __future__ import annotations

import base64
import dataclasses
import mimetypes
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping, Optional, Union


class CredentialSource(str, Enum):
    """Where a node takes its credentials from."""
    STATIC = "static"
    DYNAMIC = "dynamic"


class CredentialType(str, Enum):
    """Values of the ``credentialType`` discriminator parameter."""
    OAUTH2 = "oauth2"
    API_KEY = "apiKey"
    BASIC = "basic"


class ApiKeyLocation(str, Enum):
    """Where an API key is placed on the outgoing request."""
    HEADER = "header"
    QUERY = "query"


# ---------------------------------------------------------------------------
# Credential specs
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class OAuth2Credential:
    """
    An OAuth2 access token obtained upstream.

    ``token_prefix`` is prepended verbatim to the token in the
    ``Authorization`` header. Use ``""`` for APIs that expect the bare token.
    """
    access_token: str
    token_prefix: str = "Bearer "

    @property
    def credential_type(self) -> CredentialType:
        return CredentialType.OAUTH2

    def authorization_header(self) -> str:
        return f"{self.token_prefix}{self.access_token}"

    def as_dict(self) -> dict[str, Any]:
        return {"accessToken": self.access_token}


@dataclass(frozen=True)
class ApiKeyCredential:
    """An API key sent either as a header or as a query parameter."""
    key: str
    location: ApiKeyLocation = ApiKeyLocation.HEADER
    name: str = "X-API-Key"

    @property
    def credential_type(self) -> CredentialType:
        return CredentialType.API_KEY

    def as_dict(self) -> dict[str, Any]:
        return {"apiKey": self.key}


@dataclass(frozen=True)
class BasicAuthCredential:
    """Username/password pair for HTTP basic authentication."""
    username: str
    password: str

    @property
    def credential_type(self) -> CredentialType:
        return CredentialType.BASIC

    def encoded(self) -> str:
        raw = f"{self.username}:{self.password}".encode("utf-8")
        return base64.b64encode(raw).decode("ascii")

    def authorization_header(self) -> str:
        return f"Basic {self.encoded()}"

    def as_dict(self) -> dict[str, Any]:
        return {"username": self.username, "password": self.password}


CredentialSpec = Union[OAuth2Credential, ApiKeyCredential, BasicAuthCredential]


# ---------------------------------------------------------------------------
# Zammad credentials
# ---------------------------------------------------------------------------

class ZammadAuthentication(str, Enum):
    """Values of the Zammad authentication discriminator."""
    BASIC_AUTH = "basicAuth"
    TOKEN_AUTH = "tokenAuth"


@dataclass(frozen=True)
class ZammadTokenCredential:
    """Zammad API token, sent as ``Authorization: Token token=<value>``."""
    access_token: str

    def authorization_header(self) -> str:
        return f"Token token={self.access_token}"


@dataclass(frozen=True)
class ZammadCredentials:
    """Resolved Zammad connection settings for one item."""
    base_url: str
    allow_unauthorized_certs: bool
    credential: Union[BasicAuthCredential, ZammadTokenCredential]

    @property
    def authentication(self) -> ZammadAuthentication:
        if isinstance(self.credential, BasicAuthCredential):
            return ZammadAuthentication.BASIC_AUTH
        return ZammadAuthentication.TOKEN_AUTH

    def as_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "baseUrl": self.base_url,
            "allowUnauthorizedCerts": self.allow_unauthorized_certs,
        }
        if isinstance(self.credential, BasicAuthCredential):
            data.update(self.credential.as_dict())
        else:
            data["accessToken"] = self.credential.access_token
        return data


# ---------------------------------------------------------------------------
# Request descriptor
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class BasicAuthPair:
    """Auth sub-structure handed to the HTTP client instead of a header."""
    username: str
    password: str


@dataclass(frozen=True)
class RequestDescriptor:
    """
    Structured representation of an outbound HTTP call before execution.

    Descriptors are treated as values: every ``with_*``/``replace`` call
    returns a new descriptor whose maps are fresh copies, so the original is
    never touched.
    """
    method: str = "GET"
    uri: str = ""
    headers: dict[str, str] = field(default_factory=dict)
    query: dict[str, Any] = field(default_factory=dict)
    body: Any = None
    auth: Optional[BasicAuthPair] = None
    verify_tls: bool = True

    def replace(self, **changes: Any) -> RequestDescriptor:
        changes.setdefault("headers", dict(self.headers))
        changes.setdefault("query", dict(self.query))
        return dataclasses.replace(self, **changes)

    def with_headers(self, headers: Mapping[str, str]) -> RequestDescriptor:
        merged = dict(self.headers)
        merged.update(headers)
        return self.replace(headers=merged)

    def with_query(self, query: Mapping[str, Any]) -> RequestDescriptor:
        merged = dict(self.query)
        merged.update(query)
        return self.replace(query=merged)


# ---------------------------------------------------------------------------
# Host items
# ---------------------------------------------------------------------------

@dataclass
class BinaryData:
    """Binary payload attached to a workflow item (base64 encoded)."""
    data: str
    file_name: str | None = None
    mime_type: str = "application/octet-stream"
    file_extension: str | None = None
    file_size: int = 0

    @classmethod
    def from_bytes(
        cls,
        content: bytes,
        file_name: str | None = None,
        mime_type: str | None = None,
    ) -> BinaryData:
        if not mime_type and file_name:
            mime_type = mimetypes.guess_type(file_name)[0]
        extension = None
        if file_name and "." in file_name:
            extension = file_name.rsplit(".", 1)[1]
        return cls(
            data=base64.b64encode(content).decode("ascii"),
            file_name=file_name,
            mime_type=mime_type or "application/octet-stream",
            file_extension=extension,
            file_size=len(content),
        )

    def content(self) -> bytes:
        return base64.b64decode(self.data)


@dataclass
class NodeItem:
    """A single item flowing between workflow nodes."""
    json: dict[str, Any] = field(default_factory=dict)
    binary: Optional[dict[str, BinaryData]] = None
