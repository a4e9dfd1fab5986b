"""
Dynamic credential resolution for outbound requests.

``CredentialResolver`` decides whether a node runs with dynamic credentials
for a given item, builds the matching credential spec from node parameters,
and applies it to a ``RequestDescriptor``. The descriptor passed in is never
modified; a new one is returned.

Reads happen in a fixed order for each item: the enabling flag, then the
``credentialType`` discriminator, then the fields of the selected variant.
"""

from __future__ import annotations

import logging

from dynamic_credentials.config.settings import ResolverConfig
from dynamic_credentials.exceptions import (
    CredentialResolutionError,
    NotEnabledError,
    UnsupportedCredentialTypeError,
)
from dynamic_credentials.models import (
    ApiKeyCredential,
    ApiKeyLocation,
    BasicAuthCredential,
    CredentialSpec,
    CredentialType,
    OAuth2Credential,
    RequestDescriptor,
)
from dynamic_credentials.parameters import ParameterStore

logger = logging.getLogger(__name__)


class CredentialResolver:
    """
    Resolve per-item dynamic credentials and apply them to requests.

    Example:
        >>> resolver = CredentialResolver(store)
        >>> if resolver.is_dynamic_enabled(0):
        ...     spec = resolver.resolve_credential_spec(0)
        ...     descriptor = resolver.apply(descriptor, spec)
    """

    def __init__(self, parameters: ParameterStore, config: ResolverConfig | None = None):
        self.parameters = parameters
        self.config = config or ResolverConfig()

    def is_dynamic_enabled(self, item_index: int = 0) -> bool:
        """Whether dynamic credentials are switched on for this item. Never raises."""
        return self.parameters.get_bool(self.config.flag_parameter, item_index, False)

    def resolve_credential_spec(self, item_index: int = 0) -> CredentialSpec:
        """
        Build the credential spec for an item from node parameters.

        Raises:
            NotEnabledError: dynamic credentials are off for this item.
            UnsupportedCredentialTypeError: unknown ``credentialType`` value.
            CredentialResolutionError: a parameter could not be read.
        """
        if not self.is_dynamic_enabled(item_index):
            raise NotEnabledError()

        cfg = self.config
        params = self.parameters
        try:
            raw_type = params.get_parameter(cfg.type_parameter, item_index)
            try:
                credential_type = CredentialType(raw_type)
            except ValueError:
                raise UnsupportedCredentialTypeError(raw_type) from None

            if credential_type is CredentialType.BASIC:
                spec: CredentialSpec = BasicAuthCredential(
                    username=params.get_string(cfg.username_parameter, item_index),
                    password=params.get_string(cfg.password_parameter, item_index),
                )
            elif credential_type is CredentialType.OAUTH2:
                spec = OAuth2Credential(
                    access_token=params.get_string(cfg.token_parameter, item_index),
                    token_prefix=cfg.oauth2_token_prefix,
                )
            else:
                key = params.get_string(cfg.token_parameter, item_index)
                location = params.get_string(
                    cfg.api_key_location_parameter, item_index, cfg.default_api_key_location
                )
                name = params.get_string(
                    cfg.api_key_name_parameter, item_index, cfg.default_api_key_name
                )
                try:
                    spec = ApiKeyCredential(key=key, location=ApiKeyLocation(location), name=name)
                except ValueError as e:
                    raise CredentialResolutionError(e) from e
        except (UnsupportedCredentialTypeError, CredentialResolutionError):
            raise
        except Exception as e:
            raise CredentialResolutionError(e) from e

        logger.debug(
            "Resolved dynamic %s credentials for item %d", credential_type.value, item_index
        )
        return spec

    @staticmethod
    def apply(descriptor: RequestDescriptor, spec: CredentialSpec) -> RequestDescriptor:
        """Return a copy of ``descriptor`` carrying ``spec``."""
        if isinstance(spec, OAuth2Credential):
            return descriptor.with_headers({"Authorization": spec.authorization_header()})
        if isinstance(spec, ApiKeyCredential):
            if spec.location is ApiKeyLocation.QUERY:
                return descriptor.with_query({spec.name: spec.key})
            return descriptor.with_headers({spec.name: spec.key})
        if isinstance(spec, BasicAuthCredential):
            return descriptor.with_headers({"Authorization": spec.authorization_header()})
        raise UnsupportedCredentialTypeError(type(spec).__name__)

    def apply_dynamic_credentials(
        self, descriptor: RequestDescriptor, item_index: int = 0
    ) -> RequestDescriptor:
        """Apply the item's dynamic credentials, or return ``descriptor`` as-is when off."""
        if not self.is_dynamic_enabled(item_index):
            return descriptor
        return self.apply(descriptor, self.resolve_credential_spec(item_index))
