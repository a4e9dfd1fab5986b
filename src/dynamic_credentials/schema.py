"""
Node property definitions for dynamic credentials.

These are plain data consumed by the host's parameter renderer. The helper
functions add them to an existing node description and mark the node's
stored credentials as optional, since a dynamic-credential run does not need
them.
"""

from __future__ import annotations

import copy
from typing import Any, Mapping, Sequence

_SHOW_DYNAMIC = {"show": {"useDynamicCredentials": [True]}}


def _show_for(discriminator: str, *values: str) -> dict[str, Any]:
    return {"show": {"useDynamicCredentials": [True], discriminator: list(values)}}


DYNAMIC_CREDENTIALS_PROPERTIES: list[dict[str, Any]] = [
    {
        "displayName": "Use Dynamic Credentials",
        "name": "useDynamicCredentials",
        "type": "boolean",
        "default": False,
        "description": "Whether to use credentials from a previous node instead of stored credentials",
    },
    {
        "displayName": "Credential Type",
        "name": "credentialType",
        "type": "options",
        "displayOptions": _SHOW_DYNAMIC,
        "options": [
            {"name": "OAuth2", "value": "oauth2"},
            {"name": "API Key", "value": "apiKey"},
            {"name": "Basic Auth", "value": "basic"},
        ],
        "default": "oauth2",
        "description": "Type of credential to use from the input data",
    },
    {
        "displayName": "Access Token",
        "name": "credentialPath",
        "type": "string",
        "displayOptions": _show_for("credentialType", "oauth2"),
        "default": "",
        "description": "Access token for OAuth2 authentication",
    },
    {
        "displayName": "API Key",
        "name": "credentialPath",
        "type": "string",
        "displayOptions": _show_for("credentialType", "apiKey"),
        "default": "",
        "description": "API key for authentication",
    },
    {
        "displayName": "Username",
        "name": "basicUsername",
        "type": "string",
        "displayOptions": _show_for("credentialType", "basic"),
        "default": "",
        "description": "Username for basic authentication",
    },
    {
        "displayName": "Password",
        "name": "basicPassword",
        "type": "string",
        "typeOptions": {"password": True},
        "displayOptions": _show_for("credentialType", "basic"),
        "default": "",
        "description": "Password for basic authentication",
    },
    {
        "displayName": "API Key Location",
        "name": "apiKeyLocation",
        "type": "options",
        "displayOptions": _show_for("credentialType", "apiKey"),
        "options": [
            {"name": "Header", "value": "header"},
            {"name": "Query Parameter", "value": "query"},
        ],
        "default": "header",
        "description": "Where to add the API key in the request",
    },
    {
        "displayName": "API Key Name",
        "name": "apiKeyName",
        "type": "string",
        "displayOptions": _show_for("credentialType", "apiKey"),
        "default": "X-API-Key",
        "description": "Name of the header or query parameter for the API key",
    },
]


ZAMMAD_DYNAMIC_CREDENTIALS_PROPERTIES: list[dict[str, Any]] = [
    {
        "displayName": "Use Dynamic Credentials",
        "name": "useDynamicCredentials",
        "type": "boolean",
        "default": False,
        "description": "Whether to use credentials from a previous node instead of stored credentials",
    },
    {
        "displayName": "Authentication",
        "name": "dynamicAuthentication",
        "type": "options",
        "displayOptions": _SHOW_DYNAMIC,
        "options": [
            {"name": "Basic Auth", "value": "basicAuth"},
            {"name": "Token Auth", "value": "tokenAuth"},
        ],
        "default": "tokenAuth",
    },
    {
        "displayName": "Base URL",
        "name": "baseUrl",
        "type": "string",
        "displayOptions": _SHOW_DYNAMIC,
        "default": "",
        "description": "Base URL of the Zammad instance, e.g. https://your-domain.zammad.com",
        "placeholder": "e.g. https://your-domain.zammad.com or {{ $json.credentials.baseUrl }}",
    },
    {
        "displayName": "Allow Unauthorized Certificates",
        "name": "allowUnauthorizedCerts",
        "type": "boolean",
        "displayOptions": _SHOW_DYNAMIC,
        "default": False,
        "description": "Whether to connect even if SSL certificate is not trusted",
    },
    {
        "displayName": "Username",
        "name": "username",
        "type": "string",
        "displayOptions": _show_for("dynamicAuthentication", "basicAuth"),
        "default": "",
        "description": "Username for basic authentication",
        "placeholder": "e.g. admin@example.com or {{ $json.credentials.username }}",
    },
    {
        "displayName": "Password",
        "name": "password",
        "type": "string",
        "typeOptions": {"password": True},
        "displayOptions": _show_for("dynamicAuthentication", "basicAuth"),
        "default": "",
        "description": "Password for basic authentication",
        "placeholder": "e.g. password123 or {{ $json.credentials.password }}",
    },
    {
        "displayName": "Access Token",
        "name": "accessToken",
        "type": "string",
        "typeOptions": {"password": True},
        "displayOptions": _show_for("dynamicAuthentication", "tokenAuth"),
        "default": "",
        "description": "Access token for token authentication",
        "placeholder": "e.g. abcdef1234567890 or {{ $json.credentials.accessToken }}",
    },
]


def _with_properties(
    node_description: Mapping[str, Any],
    properties: Sequence[Mapping[str, Any]],
) -> dict[str, Any]:
    description = copy.deepcopy(dict(node_description))
    description["properties"] = copy.deepcopy(list(properties)) + list(
        description.get("properties") or []
    )
    if description.get("credentials"):
        description["credentials"] = [
            {**credential, "required": False} for credential in description["credentials"]
        ]
    return description


def add_dynamic_credentials_properties(node_description: Mapping[str, Any]) -> dict[str, Any]:
    """Return a copy of ``node_description`` offering dynamic credentials."""
    return _with_properties(node_description, DYNAMIC_CREDENTIALS_PROPERTIES)


def add_dynamic_credentials_to_zammad(node_description: Mapping[str, Any]) -> dict[str, Any]:
    """Return a copy of a Zammad node description offering dynamic credentials."""
    return _with_properties(node_description, ZAMMAD_DYNAMIC_CREDENTIALS_PROPERTIES)
