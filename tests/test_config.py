"""
Tests for Configuration Module
"""

import json

import pytest
from unittest.mock import Mock, patch
from botocore.exceptions import ClientError

from config.aws_config import AWSConfig
from config.constants import DEFAULT_INTERVAL_MS, DEFAULT_PROOF_BASE_URL, SECRET_PRIVATE_KEY_FIELD
from config.settings import load_settings, resolve_private_key
from utils.exceptions import ConfigurationError


CONTRACT = '0x5967c88F93f202D595B9A47496b53E28cD61F4C3'
TEST_KEY = '0x' + '11' * 32


@pytest.fixture
def minimal_env(clean_env):
    clean_env.setenv('RPC_URL', 'http://localhost:8545')
    clean_env.setenv('CONTRACT_ADDR', CONTRACT)
    return clean_env


def secret_response(payload):
    return {'SecretString': json.dumps(payload)}


def client_error(code, message="denied"):
    return ClientError({'Error': {'Code': code, 'Message': message}}, 'GetSecretValue')


@pytest.mark.unit
class TestLoadSettings:

    def test_defaults(self, minimal_env):
        settings = load_settings(_env_file=None)

        assert settings.rpc_url == 'http://localhost:8545'
        assert settings.contract_addr == CONTRACT
        assert settings.proof_base_url == DEFAULT_PROOF_BASE_URL
        assert settings.interval_ms == DEFAULT_INTERVAL_MS
        assert settings.private_key is None
        assert settings.override_spec is None

    def test_environment_overrides(self, minimal_env):
        minimal_env.setenv('INTERVAL_MS', '12000')
        minimal_env.setenv('PROOF_BASE_URL', 'https://proof.example.org/proof')
        minimal_env.setenv('ASSET_IDS_OVERRIDE', ' 0-17,6000-6060 ')
        minimal_env.setenv('LOG_LEVEL', 'debug')

        settings = load_settings(_env_file=None)

        assert settings.interval_ms == 12000
        assert settings.proof_base_url == 'https://proof.example.org/proof'
        assert settings.override_spec == '0-17,6000-6060'
        assert settings.log_level == 'DEBUG'

    def test_blank_override_means_full_catalog(self, minimal_env):
        minimal_env.setenv('ASSET_IDS_OVERRIDE', '   ')
        assert load_settings(_env_file=None).override_spec is None

    def test_missing_rpc_url(self, clean_env):
        clean_env.setenv('CONTRACT_ADDR', CONTRACT)

        with pytest.raises(ConfigurationError, match="RPC_URL") as exc_info:
            load_settings(_env_file=None)

        assert exc_info.value.error_code == 'INVALID_SETTINGS'

    def test_missing_contract(self, clean_env):
        clean_env.setenv('RPC_URL', 'http://localhost:8545')

        with pytest.raises(ConfigurationError, match="CONTRACT_ADDR"):
            load_settings(_env_file=None)

    @pytest.mark.parametrize("address", ['0x1234', 'not-an-address'])
    def test_bad_contract_address(self, minimal_env, address):
        minimal_env.setenv('CONTRACT_ADDR', address)

        with pytest.raises(ConfigurationError, match="CONTRACT_ADDR"):
            load_settings(_env_file=None)

    @pytest.mark.parametrize("value", ['0', '-5', 'soon'])
    def test_bad_interval(self, minimal_env, value):
        minimal_env.setenv('INTERVAL_MS', value)

        with pytest.raises(ConfigurationError, match="INTERVAL_MS"):
            load_settings(_env_file=None)

    def test_private_key_not_echoed(self, minimal_env):
        minimal_env.setenv('PRIVATE_KEY', TEST_KEY)

        settings = load_settings(_env_file=None)

        assert TEST_KEY not in repr(settings)


@pytest.mark.unit
class TestResolvePrivateKey:

    def test_from_environment(self, minimal_env):
        minimal_env.setenv('PRIVATE_KEY', TEST_KEY)
        assert resolve_private_key(load_settings(_env_file=None)) == TEST_KEY

    @patch('boto3.client')
    def test_from_secrets_manager(self, mock_boto_client, minimal_env):
        minimal_env.setenv('AWS_SECRET_ID', 'ingestor/prod/wallet')
        mock_boto_client.return_value.get_secret_value.return_value = secret_response(
            {SECRET_PRIVATE_KEY_FIELD: TEST_KEY}
        )

        key = resolve_private_key(load_settings(_env_file=None))

        assert key == TEST_KEY
        mock_boto_client.assert_called_once_with('secretsmanager', region_name='eu-central-1')
        mock_boto_client.return_value.get_secret_value.assert_called_once_with(
            SecretId='ingestor/prod/wallet'
        )

    def test_environment_wins_over_secret(self, minimal_env):
        minimal_env.setenv('PRIVATE_KEY', TEST_KEY)
        minimal_env.setenv('AWS_SECRET_ID', 'ingestor/prod/wallet')

        with patch('boto3.client') as mock_boto_client:
            assert resolve_private_key(load_settings(_env_file=None)) == TEST_KEY
            mock_boto_client.assert_not_called()

    def test_no_source(self, minimal_env):
        with pytest.raises(ConfigurationError) as exc_info:
            resolve_private_key(load_settings(_env_file=None))

        assert exc_info.value.error_code == 'MISSING_PRIVATE_KEY'


@pytest.mark.unit
class TestAWSConfig:

    @patch('boto3.client')
    def test_secrets_cached(self, mock_boto_client):
        client = mock_boto_client.return_value
        client.get_secret_value.return_value = secret_response({SECRET_PRIVATE_KEY_FIELD: TEST_KEY})
        config = AWSConfig(region='eu-central-1', secret_id='wallet')

        config.get_secrets()
        config.get_secrets()

        assert client.get_secret_value.call_count == 1

        config.clear_cache()
        config.get_secrets()
        assert client.get_secret_value.call_count == 2

    @pytest.mark.parametrize("code, fragment", [
        ('ResourceNotFoundException', "not found"),
        ('AccessDeniedException', "Access denied"),
        ('InternalServiceError', "Failed to retrieve"),
    ])
    def test_client_errors_mapped(self, code, fragment):
        config = AWSConfig(region='eu-central-1', secret_id='wallet')
        config._secrets_client = Mock()
        config._secrets_client.get_secret_value.side_effect = client_error(code)

        with pytest.raises(ConfigurationError, match=fragment) as exc_info:
            config.get_secrets()

        assert exc_info.value.error_code == code

    @pytest.mark.parametrize("response", [
        {'SecretBinary': b'\x00'},
        {'SecretString': 'not json'},
        {'SecretString': json.dumps({'OTHER': 'x'})},
        {'SecretString': json.dumps(['list'])},
    ])
    def test_unusable_secret(self, response):
        config = AWSConfig(region='eu-central-1', secret_id='wallet')
        config._secrets_client = Mock()
        config._secrets_client.get_secret_value.return_value = response

        with pytest.raises(ConfigurationError):
            config.get_wallet_private_key()
