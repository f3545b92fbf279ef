"""
AWS Configuration Module
Loads the wallet signing key from AWS Secrets Manager
"""

import json
from typing import Dict, Any, Optional
import boto3
from botocore.exceptions import ClientError

from config.constants import SECRET_PRIVATE_KEY_FIELD
from utils.logger import get_logger
from utils.exceptions import ConfigurationError


logger = get_logger(__name__)


class AWSConfig:
    """
    Retrieves and caches the JSON secret that holds the signing key
    """

    def __init__(self, region: str, secret_id: str):
        self.region = region
        self.secret_id = secret_id
        self._secrets_client = None
        self._secrets_cache: Optional[Dict[str, Any]] = None
        logger.info(f"AWS Config initialized for region: {self.region}")

    @property
    def secrets_client(self):
        """Lazy initialization of Secrets Manager client"""
        if self._secrets_client is None:
            try:
                self._secrets_client = boto3.client(
                    'secretsmanager',
                    region_name=self.region
                )
                logger.debug("AWS Secrets Manager client initialized")
            except Exception as e:
                logger.error(f"Failed to initialize Secrets Manager client: {e}")
                raise ConfigurationError(
                    f"AWS Secrets Manager client initialization failed: {e}",
                    original_error=e
                )
        return self._secrets_client

    def get_secrets(self, force_refresh: bool = False) -> Dict[str, Any]:
        """
        Retrieve secrets from AWS Secrets Manager with caching

        Args:
            force_refresh: Force refresh cached secrets

        Returns:
            Dictionary containing secret key-value pairs

        Raises:
            ConfigurationError: If secrets cannot be retrieved
        """
        if self._secrets_cache is not None and not force_refresh:
            logger.debug("Returning cached secrets")
            return self._secrets_cache

        try:
            logger.info(f"Retrieving secrets from AWS Secrets Manager: {self.secret_id}")
            response = self.secrets_client.get_secret_value(SecretId=self.secret_id)
        except ClientError as e:
            error_code = e.response['Error']['Code']
            error_message = e.response['Error']['Message']
            logger.error(f"AWS Secrets Manager error: {error_code} - {error_message}")

            if error_code == 'ResourceNotFoundException':
                message = f"Secret '{self.secret_id}' not found in region '{self.region}'"
            elif error_code == 'AccessDeniedException':
                message = f"Access denied to secret '{self.secret_id}'. Check IAM permissions."
            else:
                message = f"Failed to retrieve secrets: {error_code} - {error_message}"
            raise ConfigurationError(message, error_code=error_code, original_error=e)

        if 'SecretString' not in response:
            raise ConfigurationError("Binary secrets not supported")

        try:
            secrets = json.loads(response['SecretString'])
        except json.JSONDecodeError as e:
            logger.error(f"Failed to parse secret JSON: {e}")
            raise ConfigurationError(f"Secret value is not valid JSON: {e}", original_error=e)

        self._validate_secrets(secrets)
        self._secrets_cache = secrets
        logger.info("Secrets successfully retrieved and cached")
        return secrets

    def _validate_secrets(self, secrets: Any) -> None:
        """
        Raises:
            ConfigurationError: If the signing key is missing
        """
        if not isinstance(secrets, dict) or not secrets.get(SECRET_PRIVATE_KEY_FIELD):
            raise ConfigurationError(
                f"Missing required secret key: {SECRET_PRIVATE_KEY_FIELD}"
            )

    def get_wallet_private_key(self) -> str:
        """Convenience method to get wallet private key"""
        return self.get_secrets()[SECRET_PRIVATE_KEY_FIELD]

    def clear_cache(self) -> None:
        """Clear cached secrets (useful for testing or forced refresh)"""
        self._secrets_cache = None
        logger.debug("Secrets cache cleared")
