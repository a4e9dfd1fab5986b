"""
dynamic-credentials - per-item credential injection for workflow nodes.

This package lets a workflow node authenticate outbound HTTP calls with
credentials taken from upstream data instead of the host's stored
credentials:
- Resolve OAuth2, API key or basic-auth credentials from node parameters
- Apply them to immutable request descriptors
- Zammad variant with base-URL rewriting and TLS options
- Dynamic-first providers that fall back to stored credentials
- Microsoft Graph (Outlook) helpers with pagination and attachments

Example:
    from dynamic_credentials import (
        CredentialResolver,
        ItemParameterStore,
        RequestDescriptor,
    )

    store = ItemParameterStore({
        "useDynamicCredentials": True,
        "credentialType": "apiKey",
        "credentialPath": "abc",
        "apiKeyLocation": "query",
    })
    resolver = CredentialResolver(store)
    request = resolver.apply_dynamic_credentials(
        RequestDescriptor(method="GET", uri="https://api.example.com/items"),
        item_index=0,
    )
"""

__version__ = "0.1.0"

from dynamic_credentials.config.settings import (
    DynamicCredentialsConfig,
    GraphConfig,
    HttpConfig,
    ResolverConfig,
    ZammadResolverConfig,
)
from dynamic_credentials.exceptions import (
    ConfigError,
    CredentialResolutionError,
    DynamicCredentialsError,
    GraphApiError,
    HttpRequestError,
    NotEnabledError,
    ParameterError,
    ParameterNotFoundError,
    ParameterTypeError,
    UnsupportedCredentialTypeError,
)
from dynamic_credentials.models import (
    ApiKeyCredential,
    ApiKeyLocation,
    BasicAuthCredential,
    BasicAuthPair,
    BinaryData,
    CredentialSource,
    CredentialSpec,
    CredentialType,
    NodeItem,
    OAuth2Credential,
    RequestDescriptor,
    ZammadAuthentication,
    ZammadCredentials,
    ZammadTokenCredential,
)
from dynamic_credentials.parameters import ItemParameterStore, ParameterStore
from dynamic_credentials.resolver import CredentialResolver
from dynamic_credentials.zammad import ZammadCredentialResolver, rewrite_base_url
from dynamic_credentials.provider import (
    CredentialProvider,
    DynamicFallbackProvider,
    StaticCredentialProvider,
    with_dynamic_credentials,
)
from dynamic_credentials.schema import (
    DYNAMIC_CREDENTIALS_PROPERTIES,
    ZAMMAD_DYNAMIC_CREDENTIALS_PROPERTIES,
    add_dynamic_credentials_properties,
    add_dynamic_credentials_to_zammad,
)
from dynamic_credentials.transport import HttpClient, HttpResponse, RequestsHttpClient
from dynamic_credentials.outlook import MicrosoftGraphClient

__all__ = [
    # Version
    "__version__",
    # Config
    "DynamicCredentialsConfig",
    "GraphConfig",
    "HttpConfig",
    "ResolverConfig",
    "ZammadResolverConfig",
    # Errors
    "ConfigError",
    "CredentialResolutionError",
    "DynamicCredentialsError",
    "GraphApiError",
    "HttpRequestError",
    "NotEnabledError",
    "ParameterError",
    "ParameterNotFoundError",
    "ParameterTypeError",
    "UnsupportedCredentialTypeError",
    # Models
    "ApiKeyCredential",
    "ApiKeyLocation",
    "BasicAuthCredential",
    "BasicAuthPair",
    "BinaryData",
    "CredentialSource",
    "CredentialSpec",
    "CredentialType",
    "NodeItem",
    "OAuth2Credential",
    "RequestDescriptor",
    "ZammadAuthentication",
    "ZammadCredentials",
    "ZammadTokenCredential",
    # Parameters
    "ItemParameterStore",
    "ParameterStore",
    # Resolvers
    "CredentialResolver",
    "ZammadCredentialResolver",
    "rewrite_base_url",
    # Providers
    "CredentialProvider",
    "DynamicFallbackProvider",
    "StaticCredentialProvider",
    "with_dynamic_credentials",
    # Schema
    "DYNAMIC_CREDENTIALS_PROPERTIES",
    "ZAMMAD_DYNAMIC_CREDENTIALS_PROPERTIES",
    "add_dynamic_credentials_properties",
    "add_dynamic_credentials_to_zammad",
    # HTTP
    "HttpClient",
    "HttpResponse",
    "RequestsHttpClient",
    "MicrosoftGraphClient",
]
