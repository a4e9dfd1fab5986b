"""
Configuration module for dynamic-credentials.

Provides configuration management for:
- Resolver parameter names and the OAuth2 token prefix
- Zammad resolver parameter names
- HTTP transport and Microsoft Graph settings
"""

from dynamic_credentials.config.settings import (
    DynamicCredentialsConfig,
    GraphConfig,
    HttpConfig,
    ResolverConfig,
    ZammadResolverConfig,
    load_config_from_env,
)

__all__ = [
    "DynamicCredentialsConfig",
    "GraphConfig",
    "HttpConfig",
    "ResolverConfig",
    "ZammadResolverConfig",
    "load_config_from_env",
]
