"""
Runtime Configuration for the Proof Ingestor

A pydantic-settings model populated from the process environment and an
optional .env file. Missing mandatory values stop the process before any
network connection is opened.

Usage:
    from config.settings import get_settings

    settings = get_settings()
    print(settings.interval_ms)

    # Override via environment:
    # export INTERVAL_MS=10000
"""

from typing import Optional

from pydantic import Field, SecretStr, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from config.constants import (
    DEFAULT_PROOF_BASE_URL,
    DEFAULT_INTERVAL_MS,
    DEFAULT_HTTP_TIMEOUT_SEC,
    DEFAULT_RPC_TIMEOUT_SEC,
    DEFAULT_AWS_REGION,
    LOG_LEVEL,
    LOG_FILE_PATH,
    STRUCTURED_LOGGING,
)
from utils.exceptions import ConfigurationError, DataValidationError
from utils.helpers import validate_ethereum_address
from utils.logger import get_logger


logger = get_logger(__name__)


class IngestorSettings(BaseSettings):
    """
    Proof ingestor configuration

    All parameters can be overridden via environment variables.
    Example: INTERVAL_MS=10000 proof-ingestor
    """

    model_config = SettingsConfigDict(
        env_file='.env',
        env_file_encoding='utf-8',
        case_sensitive=False,
        extra='ignore'
    )

    # ============================================================================
    # CHAIN
    # ============================================================================

    rpc_url: str = Field(
        ...,
        min_length=1,
        description="JSON-RPC endpoint of the target chain"
    )

    contract_addr: str = Field(
        ...,
        description="Address of the contract exposing ingestProof(bytes)"
    )

    private_key: Optional[SecretStr] = Field(
        default=None,
        description="Hex private key of the submitting wallet (or use AWS_SECRET_ID)"
    )

    rpc_timeout_sec: float = Field(
        default=DEFAULT_RPC_TIMEOUT_SEC,
        description="Per-request timeout for JSON-RPC calls",
        gt=0.0
    )

    # ============================================================================
    # PROOF SERVICE
    # ============================================================================

    proof_base_url: str = Field(
        default=DEFAULT_PROOF_BASE_URL,
        min_length=1,
        description="Proof endpoint, queried as <base>?pairs=<ids>"
    )

    http_timeout_sec: float = Field(
        default=DEFAULT_HTTP_TIMEOUT_SEC,
        description="Total timeout for one proof request",
        gt=0.0
    )

    # ============================================================================
    # SCHEDULING
    # ============================================================================

    interval_ms: int = Field(
        default=DEFAULT_INTERVAL_MS,
        description="Delay between the end of one tick and the next (before jitter)",
        gt=0
    )

    asset_ids_override: str = Field(
        default="",
        description="""
        Monitored identifiers instead of the full catalog.
        Comma-separated ids or inclusive ranges, e.g. "0-17,5000-5600,6000-6060".
        Empty means the built-in catalog.
        """
    )

    # ============================================================================
    # SECRETS
    # ============================================================================

    aws_secret_id: Optional[str] = Field(
        default=None,
        description="Secrets Manager id holding WALLET_PRIVATE_KEY (used when PRIVATE_KEY is unset)"
    )

    aws_region: str = Field(
        default=DEFAULT_AWS_REGION,
        description="Region of the Secrets Manager secret"
    )

    # ============================================================================
    # LOGGING
    # ============================================================================

    log_level: str = Field(default=LOG_LEVEL)
    log_file: str = Field(default=LOG_FILE_PATH)
    structured_logging: bool = Field(default=STRUCTURED_LOGGING)

    # ============================================================================
    # VALIDATORS
    # ============================================================================

    @field_validator('contract_addr')
    @classmethod
    def validate_contract_addr(cls, v: str) -> str:
        try:
            validate_ethereum_address(v)
        except DataValidationError as e:
            raise ValueError(e.message)
        return v

    @field_validator('asset_ids_override')
    @classmethod
    def strip_override(cls, v: str) -> str:
        return v.strip()

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in {'DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'}:
            raise ValueError(f"invalid log level {v!r}")
        return level

    @property
    def override_spec(self) -> Optional[str]:
        """Identifier override, or None when the full catalog should be used"""
        return self.asset_ids_override or None


def load_settings(**overrides) -> IngestorSettings:
    """
    Build settings from the environment, raising ConfigurationError on any
    missing or invalid value.

    Args:
        **overrides: Field values taking precedence over the environment

    Returns:
        IngestorSettings: Validated settings
    """
    try:
        return IngestorSettings(**overrides)
    except ValidationError as e:
        problems = []
        for error in e.errors():
            field = '.'.join(str(part) for part in error.get('loc', ())) or '<model>'
            problems.append(f"{field.upper()}: {error.get('msg')}")
        raise ConfigurationError(
            "Invalid configuration: " + "; ".join(problems),
            error_code='INVALID_SETTINGS',
            original_error=e
        )


def resolve_private_key(settings: IngestorSettings) -> str:
    """
    Signing key from PRIVATE_KEY, falling back to AWS Secrets Manager.

    Raises:
        ConfigurationError: If no source provides a key
    """
    if settings.private_key is not None and settings.private_key.get_secret_value():
        return settings.private_key.get_secret_value()

    if settings.aws_secret_id:
        # boto3 is only imported when the secret source is in use
        from config.aws_config import AWSConfig

        logger.info(f"PRIVATE_KEY not set, loading signing key from secret {settings.aws_secret_id}")
        return AWSConfig(
            region=settings.aws_region,
            secret_id=settings.aws_secret_id
        ).get_wallet_private_key()

    raise ConfigurationError(
        "Missing signing credential: set PRIVATE_KEY or AWS_SECRET_ID",
        error_code='MISSING_PRIVATE_KEY'
    )


# Singleton instance
_settings: Optional[IngestorSettings] = None


def get_settings() -> IngestorSettings:
    """
    Get singleton settings instance.

    Returns:
        IngestorSettings: Configured settings instance

    Raises:
        ConfigurationError: If mandatory settings are missing
    """
    global _settings
    if _settings is None:
        _settings = load_settings()
    return _settings


def reload_settings() -> IngestorSettings:
    """Force reload settings from environment."""
    global _settings
    _settings = load_settings()
    return _settings


__all__ = [
    'IngestorSettings',
    'get_settings',
    'reload_settings',
    'load_settings',
    'resolve_private_key',
]
