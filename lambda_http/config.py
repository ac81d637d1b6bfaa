"""
Bridge configuration definition.

Loads configuration from environment variables and provides an immutable
Pydantic model. Uses pydantic-settings for type safety and defaults.
"""

from typing import Optional, Tuple

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .core.mangle import DEFAULT_MANGLE, REMAP_PREFIX


class BridgeConfig(BaseSettings):
    """
    Configuration for the invocation bridge.

    Built once before serving starts and never mutated afterwards.
    """

    LOG_LEVEL: str = Field(default="INFO", description="Log level")
    LOG_CONFIG_PATH: str = Field(
        default="config/logging.yml", description="YAML logging configuration path"
    )

    # Response post-processing
    FIX_RELATIVE_REDIRECT: bool = Field(
        default=True, description="Prefix root-relative redirects with the stage name"
    )
    PLATFORM_DOMAIN_SUFFIX: str = Field(
        default=".amazonaws.com", description="Host suffix of the default API Gateway domain"
    )
    PANIC_MESSAGE: str = Field(
        default="Function panic", description="Body of the 500 response after a handler fault"
    )
    DEFAULT_CONTENT_TYPE: str = Field(
        default="text/plain", description="Content-Type used when the handler sets none"
    )
    MULTI_VALUE_HEADERS: bool = Field(
        default=False, description="Also emit multiValueHeaders in the response envelope"
    )

    # Header remapping
    DEMANGLE_INPUT_HEADERS: bool = Field(
        default=False, description="Copy X-Amzn-Remapped-* request headers to their plain names"
    )
    MANGLE_OUTPUT_HEADERS: bool = Field(
        default=False, description="Duplicate remappable response headers as X-Amzn-Remapped-*"
    )
    REMAP_PREFIX: str = Field(default=REMAP_PREFIX, description="Remapped header name prefix")
    MANGLE_HEADERS: Tuple[str, ...] = Field(
        default=DEFAULT_MANGLE, description="Header names eligible for mangling"
    )
    DEMANGLE_HEADERS: Optional[Tuple[str, ...]] = Field(
        default=None, description="Prefixed header names to demangle (derived when unset)"
    )

    # Serving
    AWS_LAMBDA_RUNTIME_API: str = Field(default="", description="Lambda Runtime API host:port")
    LOCAL_HOST: str = Field(default="localhost", description="Local test server host")
    LOCAL_PORT: int = Field(default=0, description="Local test server port (0 = ephemeral)")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
        frozen=True,
    )
