"""
Tests for the chain client and the retrying submitter
"""

import pytest
from unittest.mock import AsyncMock, Mock
from web3 import Web3

from core.chain_client import ChainClient, TransactionHandle
from core.submitter import ProofSubmitter
from utils.exceptions import ConfigurationError, SubmissionError
from utils.helpers import RetryPolicy


CONTRACT = '0x5967c88f93f202d595b9a47496b53e28cd61f4c3'
TEST_KEY = '0x' + '11' * 32
TX_HASH = bytes.fromhex('ab' * 32)

NO_WAIT = RetryPolicy(retries=2, base_delay_sec=0.0, multiplier=1.5, max_delay_sec=0.0)


class FakeEth:
    """Just enough of web3.eth for the client"""

    def __init__(self, chain_id=31337, reachable=True):
        self._chain_id = chain_id
        self._reachable = reachable
        self.contract = Mock()
        self.get_transaction_count = Mock(return_value=7)
        self.send_raw_transaction = Mock(return_value=TX_HASH)

    @property
    def chain_id(self):
        if not self._reachable:
            raise ConnectionError("connection refused")
        return self._chain_id


def make_chain_client(eth=None):
    web3 = Mock()
    web3.eth = eth or FakeEth()
    client = ChainClient(
        rpc_url='http://localhost:8545',
        contract_address=CONTRACT,
        private_key=TEST_KEY,
        web3=web3
    )
    client._account = Mock(address='0x19E7E376E7C213B7E7e7e46cc70A5dD086DAff2A')
    client._account.sign_transaction.return_value = Mock(raw_transaction=b'\x02signed')
    return client, web3.eth


@pytest.mark.unit
class TestChainClient:

    def test_contract_address_checksummed(self):
        client, eth = make_chain_client()

        assert client.contract_address.lower() == CONTRACT
        assert Web3.is_checksum_address(client.contract_address)
        eth.contract.assert_called_once()
        assert eth.contract.call_args.kwargs['address'] == client.contract_address

    def test_invalid_key_is_configuration_error(self):
        with pytest.raises(ConfigurationError) as exc_info:
            ChainClient('http://localhost:8545', CONTRACT, 'not-a-key', web3=Mock())
        assert 'not-a-key' not in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_connect_caches_chain_id(self):
        client, _ = make_chain_client()

        assert await client.connect() == 31337
        assert client.chain_id == 31337

    @pytest.mark.asyncio
    async def test_connect_unreachable(self):
        client, _ = make_chain_client(FakeEth(reachable=False))

        with pytest.raises(ConfigurationError, match="Cannot reach RPC"):
            await client.connect()

    @pytest.mark.asyncio
    async def test_submit_builds_signs_and_sends(self):
        client, eth = make_chain_client()
        await client.connect()
        function = eth.contract.return_value.functions.ingestProof
        function.return_value.build_transaction.return_value = {'to': CONTRACT, 'data': '0x'}

        handle = await client.submit_proof(b'\xca\xfe')

        assert handle == TransactionHandle(tx_hash='0x' + 'ab' * 32, nonce=7)
        function.assert_called_once_with(b'\xca\xfe')
        params = function.return_value.build_transaction.call_args.args[0]
        assert params == {'from': client.wallet_address, 'nonce': 7, 'chainId': 31337}
        eth.get_transaction_count.assert_called_once_with(client.wallet_address, 'pending')
        eth.send_raw_transaction.assert_called_once_with(b'\x02signed')

    @pytest.mark.asyncio
    async def test_submit_failure_wrapped(self):
        client, eth = make_chain_client()
        await client.connect()
        eth.send_raw_transaction.side_effect = ValueError("execution reverted")

        with pytest.raises(SubmissionError, match="execution reverted") as exc_info:
            await client.submit_proof(b'\x01')

        assert isinstance(exc_info.value.original_error, ValueError)

    @pytest.mark.asyncio
    async def test_submit_before_connect(self):
        client, _ = make_chain_client()

        with pytest.raises(SubmissionError, match="not connected"):
            await client.submit_proof(b'\x01')


@pytest.mark.unit
class TestProofSubmitter:

    @pytest.mark.asyncio
    async def test_success_first_attempt(self):
        chain = Mock()
        chain.submit_proof = AsyncMock(return_value=TransactionHandle('0x01', 1))

        handle = await ProofSubmitter(chain, retry_policy=NO_WAIT).submit(b'\x01')

        assert handle.tx_hash == '0x01'
        chain.submit_proof.assert_awaited_once_with(b'\x01')

    @pytest.mark.asyncio
    async def test_retries_then_succeeds(self):
        chain = Mock()
        chain.submit_proof = AsyncMock(side_effect=[
            SubmissionError("nonce too low"),
            TransactionHandle('0x02', 2),
        ])

        handle = await ProofSubmitter(chain, retry_policy=NO_WAIT).submit(b'\x01')

        assert handle.tx_hash == '0x02'
        assert chain.submit_proof.await_count == 2

    @pytest.mark.asyncio
    async def test_exhausts_three_attempts(self):
        chain = Mock()
        chain.submit_proof = AsyncMock(side_effect=SubmissionError("reverted"))

        with pytest.raises(SubmissionError):
            await ProofSubmitter(chain, retry_policy=NO_WAIT).submit(b'\x01')

        assert chain.submit_proof.await_count == 3

    @pytest.mark.asyncio
    async def test_foreign_errors_become_submission_errors(self):
        chain = Mock()
        chain.submit_proof = AsyncMock(side_effect=[
            TimeoutError("rpc timeout"),
            TransactionHandle('0x03', 3),
        ])

        handle = await ProofSubmitter(chain, retry_policy=NO_WAIT).submit(b'\x01')

        assert handle.tx_hash == '0x03'
        assert chain.submit_proof.await_count == 2
