"""
Zammad-specific dynamic credentials.

Same contract as ``CredentialResolver`` with two additions: the instance
base URL comes from node parameters (the request URI is rebuilt around the
API version prefix), and TLS verification can be turned off per item.
"""

from __future__ import annotations

import logging
import re

from dynamic_credentials.config.settings import ZammadResolverConfig
from dynamic_credentials.exceptions import (
    CredentialResolutionError,
    NotEnabledError,
    UnsupportedCredentialTypeError,
)
from dynamic_credentials.models import (
    BasicAuthCredential,
    BasicAuthPair,
    RequestDescriptor,
    ZammadAuthentication,
    ZammadCredentials,
    ZammadTokenCredential,
)
from dynamic_credentials.parameters import ParameterStore

logger = logging.getLogger(__name__)


def rewrite_base_url(uri: str, base_url: str, api_prefix: str = "/api/v1") -> str:
    """
    Move ``uri`` onto ``base_url``, keeping everything after ``api_prefix``.

    >>> rewrite_base_url("https://old.example.com/api/v1/tickets/5", "https://new.example.com/")
    'https://new.example.com/api/v1/tickets/5'
    """
    if base_url.endswith("/"):
        base_url = base_url[:-1]
    endpoint = ""
    match = re.search(re.escape(api_prefix) + r"(.*)$", uri or "")
    if match:
        endpoint = match.group(1)
    return f"{base_url}{api_prefix}{endpoint}"


class ZammadCredentialResolver:
    """Resolve Zammad credentials from node parameters and apply them to requests."""

    def __init__(self, parameters: ParameterStore, config: ZammadResolverConfig | None = None):
        self.parameters = parameters
        self.config = config or ZammadResolverConfig()

    def is_dynamic_enabled(self, item_index: int = 0) -> bool:
        return self.parameters.get_bool(self.config.flag_parameter, item_index, False)

    def get_authentication_type(self, item_index: int = 0) -> ZammadAuthentication:
        raw = self.parameters.get_parameter(self.config.authentication_parameter, item_index)
        try:
            return ZammadAuthentication(raw)
        except ValueError:
            raise UnsupportedCredentialTypeError(raw) from None

    def resolve_credentials(self, item_index: int = 0) -> ZammadCredentials:
        """
        Build the Zammad credentials for an item.

        Raises:
            NotEnabledError: dynamic credentials are off for this item.
            UnsupportedCredentialTypeError: unknown authentication value.
            CredentialResolutionError: a parameter could not be read.
        """
        if not self.is_dynamic_enabled(item_index):
            raise NotEnabledError()

        cfg = self.config
        params = self.parameters
        try:
            authentication = self.get_authentication_type(item_index)
            base_url = params.get_string(cfg.base_url_parameter, item_index, "")
            allow_unauthorized = params.get_bool(
                cfg.allow_unauthorized_certs_parameter, item_index, False
            )
            if authentication is ZammadAuthentication.BASIC_AUTH:
                credential = BasicAuthCredential(
                    username=params.get_string(cfg.username_parameter, item_index),
                    password=params.get_string(cfg.password_parameter, item_index),
                )
            else:
                credential = ZammadTokenCredential(
                    access_token=params.get_string(cfg.access_token_parameter, item_index),
                )
        except UnsupportedCredentialTypeError:
            raise
        except Exception as e:
            raise CredentialResolutionError(e) from e

        logger.debug("Resolved Zammad %s credentials for item %d", authentication.value, item_index)
        return ZammadCredentials(
            base_url=base_url,
            allow_unauthorized_certs=allow_unauthorized,
            credential=credential,
        )

    def apply(self, descriptor: RequestDescriptor, credentials: ZammadCredentials) -> RequestDescriptor:
        """Return a copy of ``descriptor`` pointed at the resolved instance."""
        result = descriptor.replace()

        if credentials.base_url:
            result = result.replace(
                uri=rewrite_base_url(descriptor.uri, credentials.base_url, self.config.api_prefix)
            )

        credential = credentials.credential
        if isinstance(credential, BasicAuthCredential):
            if credential.username and credential.password:
                result = result.replace(
                    auth=BasicAuthPair(username=credential.username, password=credential.password)
                )
        elif credential.access_token:
            result = result.with_headers({"Authorization": credential.authorization_header()})

        return result.replace(verify_tls=not credentials.allow_unauthorized_certs)

    def apply_dynamic_credentials(
        self, descriptor: RequestDescriptor, item_index: int = 0
    ) -> RequestDescriptor:
        if not self.is_dynamic_enabled(item_index):
            return descriptor
        return self.apply(descriptor, self.resolve_credentials(item_index))
