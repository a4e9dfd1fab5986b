"""
Credential providers with dynamic-first, static-fallback precedence.

Request-building code receives a ``CredentialProvider`` (or the plain lookup
callable returned by ``with_dynamic_credentials``) instead of calling the
host's credential store directly. When dynamic credentials are enabled they
win; any failure while resolving them falls back to the static store so a
node that worked with stored credentials keeps working.

Callers that need strict dynamic semantics use
``CredentialResolver.resolve_credential_spec`` directly, which raises.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any, Callable

from dynamic_credentials.resolver import CredentialResolver

logger = logging.getLogger(__name__)

StaticLookup = Callable[[str], Any]


class CredentialProvider(ABC):
    """Source of credentials for a named credential type."""

    @abstractmethod
    def get_credentials(self, credential_type_name: str, item_index: int = 0) -> Any:
        raise NotImplementedError


class StaticCredentialProvider(CredentialProvider):
    """Wraps the host's stored-credential lookup."""

    def __init__(self, lookup: StaticLookup):
        self._lookup = lookup

    def get_credentials(self, credential_type_name: str, item_index: int = 0) -> Any:
        return self._lookup(credential_type_name)


class DynamicFallbackProvider(CredentialProvider):
    """
    Prefer the resolver's dynamic credentials, fall back to static ones.

    The static lookup is called at most once per ``get_credentials`` call and
    its result is returned unchanged.
    """

    def __init__(self, resolver: CredentialResolver, static: StaticLookup | CredentialProvider):
        self.resolver = resolver
        if isinstance(static, CredentialProvider):
            self.static = static
        else:
            self.static = StaticCredentialProvider(static)

    def get_credentials(self, credential_type_name: str, item_index: int = 0) -> Any:
        try:
            if self.resolver.is_dynamic_enabled(item_index):
                return self.resolver.resolve_credential_spec(item_index)
        except Exception as e:
            logger.warning(
                "Dynamic credentials failed for item %d, using stored %s credentials: %s",
                item_index,
                credential_type_name,
                e,
            )
        return self.static.get_credentials(credential_type_name, item_index)


def with_dynamic_credentials(
    static_lookup: StaticLookup,
    resolver: CredentialResolver,
    item_index: int = 0,
) -> StaticLookup:
    """
    Return a drop-in replacement for the host's ``get_credentials(name)``.

    Example:
        >>> get_credentials = with_dynamic_credentials(host.get_credentials, resolver)
        >>> creds = get_credentials("httpHeaderAuth")
    """
    provider = DynamicFallbackProvider(resolver, static_lookup)

    def get_credentials(credential_type_name: str) -> Any:
        return provider.get_credentials(credential_type_name, item_index)

    return get_credentials
