"""
Custom exception hierarchy for dynamic-credentials.
"""

from __future__ import annotations

from typing import Any


class DynamicCredentialsError(Exception):
    """Base exception for all dynamic-credentials errors."""
    pass


# === Parameter Errors ===

class ParameterError(DynamicCredentialsError):
    """Base exception for parameter store lookups."""
    def __init__(self, message: str, name: str = "", item_index: int = 0):
        self.name = name
        self.item_index = item_index
        super().__init__(message)


class ParameterNotFoundError(ParameterError):
    """A required node parameter is absent and no default was given."""
    def __init__(self, name: str, item_index: int = 0):
        super().__init__(
            f"Parameter '{name}' not found for item {item_index}",
            name=name,
            item_index=item_index,
        )


class ParameterTypeError(ParameterError):
    """A node parameter holds a value of the wrong type."""
    def __init__(self, name: str, item_index: int, expected: str, actual: Any):
        self.expected = expected
        self.actual = type(actual).__name__
        super().__init__(
            f"Parameter '{name}' for item {item_index} must be {expected}, got {self.actual}",
            name=name,
            item_index=item_index,
        )


# === Resolution Errors ===

class NotEnabledError(DynamicCredentialsError):
    """Dynamic credentials were requested but the node has them switched off."""
    def __init__(self, message: str = "Dynamic credentials are not enabled for this node"):
        super().__init__(message)


class UnsupportedCredentialTypeError(DynamicCredentialsError):
    """The credential discriminator matches no known credential variant."""
    def __init__(self, credential_type: Any):
        self.credential_type = credential_type
        super().__init__(f"Unsupported credential type: {credential_type}")


class CredentialResolutionError(DynamicCredentialsError):
    """Reading the credential fields failed after dynamic mode was confirmed."""
    def __init__(self, cause: Exception):
        self.cause = cause
        super().__init__(f"Failed to get dynamic credentials: {cause}")


# === HTTP Errors ===

class HttpRequestError(DynamicCredentialsError):
    """An outbound request failed (transport error or non-2xx response)."""
    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        description: str = "",
    ):
        self.message = message
        self.status_code = status_code
        self.description = description
        super().__init__(message)


class GraphApiError(HttpRequestError):
    """Microsoft Graph returned a structured error payload."""
    def __init__(self, message: str, status_code: int | None = None, code: str = ""):
        self.code = code
        super().__init__(message, status_code=status_code)


# === Config Errors ===

class ConfigError(DynamicCredentialsError):
    """Configuration error."""
    pass
