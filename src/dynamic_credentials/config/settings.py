"""
Configuration settings for dynamic-credentials.

This module provides configuration management through environment variables
and programmatic configuration. A ``.env`` file in the working directory is
loaded on import.
"""

import os
import logging
from dataclasses import dataclass, field

from dotenv import load_dotenv

from dynamic_credentials.exceptions import ConfigError

logger = logging.getLogger(__name__)

load_dotenv()


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError as e:
        raise ConfigError(f"{name} must be an integer, got {raw!r}") from e


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    try:
        return float(raw)
    except ValueError as e:
        raise ConfigError(f"{name} must be a number, got {raw!r}") from e


@dataclass
class ResolverConfig:
    """
    Parameter names and defaults for the generic dynamic-credential resolver.

    Environment Variables:
        DYNAMIC_CREDENTIALS_FLAG: Name of the boolean enabling parameter
        DYNAMIC_CREDENTIALS_OAUTH2_PREFIX: Prefix placed before OAuth2 tokens
            in the Authorization header ("Bearer " by default, "" for bare tokens)
    """
    flag_parameter: str = "useDynamicCredentials"
    type_parameter: str = "credentialType"
    token_parameter: str = "credentialPath"
    username_parameter: str = "basicUsername"
    password_parameter: str = "basicPassword"
    api_key_location_parameter: str = "apiKeyLocation"
    api_key_name_parameter: str = "apiKeyName"
    default_api_key_location: str = "header"
    default_api_key_name: str = "X-API-Key"
    oauth2_token_prefix: str = "Bearer "

    @classmethod
    def from_env(cls) -> "ResolverConfig":
        """Load configuration from environment variables."""
        return cls(
            flag_parameter=os.getenv("DYNAMIC_CREDENTIALS_FLAG", "useDynamicCredentials"),
            oauth2_token_prefix=os.getenv("DYNAMIC_CREDENTIALS_OAUTH2_PREFIX", "Bearer "),
        )


@dataclass
class ZammadResolverConfig:
    """
    Parameter names for the Zammad dynamic-credential resolver.

    Environment Variables:
        ZAMMAD_DYNAMIC_CREDENTIALS_FLAG: Name of the boolean enabling parameter
        ZAMMAD_API_PREFIX: API version prefix kept when rewriting URIs
    """
    flag_parameter: str = "useDynamicCredentials"
    authentication_parameter: str = "dynamicAuthentication"
    base_url_parameter: str = "baseUrl"
    allow_unauthorized_certs_parameter: str = "allowUnauthorizedCerts"
    username_parameter: str = "username"
    password_parameter: str = "password"
    access_token_parameter: str = "accessToken"
    api_prefix: str = "/api/v1"

    @classmethod
    def from_env(cls) -> "ZammadResolverConfig":
        """Load configuration from environment variables."""
        return cls(
            flag_parameter=os.getenv("ZAMMAD_DYNAMIC_CREDENTIALS_FLAG", "useDynamicCredentials"),
            api_prefix=os.getenv("ZAMMAD_API_PREFIX", "/api/v1"),
        )


@dataclass
class HttpConfig:
    """
    Settings for the requests-based transport.

    Environment Variables:
        DYNAMIC_CREDENTIALS_HTTP_TIMEOUT: Request timeout in seconds
    """
    timeout: float = 60.0

    @classmethod
    def from_env(cls) -> "HttpConfig":
        """Load configuration from environment variables."""
        return cls(timeout=_env_float("DYNAMIC_CREDENTIALS_HTTP_TIMEOUT", 60.0))


@dataclass
class GraphConfig:
    """
    Settings for the Microsoft Graph / Outlook helper.

    Environment Variables:
        MICROSOFT_GRAPH_BASE_URL: Graph API root
        MICROSOFT_GRAPH_PAGE_SIZE: ``$top`` used while paginating
    """
    base_url: str = "https://graph.microsoft.com/v1.0"
    page_size: int = 100
    credential_type_name: str = "microsoftOutlookOAuth2Api"
    source_parameter: str = "credentialsSource"
    credentials_parameter: str = "credentialsParameterName"
    default_credentials_key: str = "credentials"

    @classmethod
    def from_env(cls) -> "GraphConfig":
        """Load configuration from environment variables."""
        return cls(
            base_url=os.getenv("MICROSOFT_GRAPH_BASE_URL", "https://graph.microsoft.com/v1.0"),
            page_size=_env_int("MICROSOFT_GRAPH_PAGE_SIZE", 100),
        )


@dataclass
class DynamicCredentialsConfig:
    """
    Main configuration for dynamic-credentials.

    Example:
        >>> config = DynamicCredentialsConfig.from_env()
        >>> config.configure_logging()
        >>> resolver = CredentialResolver(store, config=config.resolver)

    Environment Variables:
        LOG_LEVEL: Logging level (default INFO)
        See ResolverConfig, ZammadResolverConfig, HttpConfig and GraphConfig.
    """
    resolver: ResolverConfig = field(default_factory=ResolverConfig)
    zammad: ZammadResolverConfig = field(default_factory=ZammadResolverConfig)
    http: HttpConfig = field(default_factory=HttpConfig)
    graph: GraphConfig = field(default_factory=GraphConfig)
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "DynamicCredentialsConfig":
        """Load complete configuration from environment variables."""
        return cls(
            resolver=ResolverConfig.from_env(),
            zammad=ZammadResolverConfig.from_env(),
            http=HttpConfig.from_env(),
            graph=GraphConfig.from_env(),
            log_level=os.getenv("LOG_LEVEL", "INFO"),
        )

    def configure_logging(self):
        """Configure logging based on settings."""
        logging.basicConfig(
            level=getattr(logging, self.log_level.upper(), logging.INFO),
            format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        )


def load_config_from_env() -> DynamicCredentialsConfig:
    """
    Convenience function to load configuration from environment.

    Returns:
        DynamicCredentialsConfig loaded from environment variables
    """
    return DynamicCredentialsConfig.from_env()
