"""
Chain Client
Signs and broadcasts ingestProof(bytes) transactions

web3.py is synchronous; every RPC round-trip runs in a worker thread via
asyncio.to_thread so the event loop keeps servicing the scheduler.
Gas and fee fields are filled in by web3 when the transaction is built.
"""

import asyncio
from dataclasses import dataclass
from typing import Optional

from eth_account import Account
from web3 import Web3

from config.constants import DEFAULT_RPC_TIMEOUT_SEC, INGEST_PROOF_ABI
from utils.exceptions import ConfigurationError, SubmissionError
from utils.logger import get_logger


logger = get_logger(__name__)


@dataclass(frozen=True)
class TransactionHandle:
    """Result of a broadcast; confirmation is not tracked"""
    tx_hash: str
    nonce: int


class ChainClient:
    """
    Thin wrapper around a Web3 provider, a local signer and the target contract
    """

    def __init__(
        self,
        rpc_url: str,
        contract_address: str,
        private_key: str,
        rpc_timeout_sec: float = DEFAULT_RPC_TIMEOUT_SEC,
        web3: Optional[Web3] = None
    ):
        """
        Args:
            rpc_url: JSON-RPC endpoint
            contract_address: Contract exposing ingestProof(bytes)
            private_key: Hex signing key (with or without 0x)
            rpc_timeout_sec: Per-request HTTP timeout
            web3: Pre-built instance (tests)

        Raises:
            ConfigurationError: If the key cannot be loaded
        """
        self.rpc_url = rpc_url
        self._web3 = web3 or Web3(Web3.HTTPProvider(
            rpc_url,
            request_kwargs={'timeout': rpc_timeout_sec}
        ))

        try:
            self._account = Account.from_key(private_key)
        except Exception as e:
            # Never echo the key itself
            raise ConfigurationError(
                f"Failed to create account from private key: {e.__class__.__name__}",
                error_code='INVALID_PRIVATE_KEY'
            )

        self.contract_address = Web3.to_checksum_address(contract_address)
        self._contract = self._web3.eth.contract(
            address=self.contract_address,
            abi=INGEST_PROOF_ABI
        )
        self.chain_id: Optional[int] = None

    @property
    def wallet_address(self) -> str:
        return self._account.address

    async def connect(self) -> int:
        """
        Check the RPC endpoint and cache the chain id.

        Returns:
            Chain id reported by the node

        Raises:
            ConfigurationError: If the endpoint is unreachable
        """
        try:
            self.chain_id = await asyncio.to_thread(lambda: self._web3.eth.chain_id)
        except Exception as e:
            logger.error(f"RPC endpoint unreachable: {e}")
            raise ConfigurationError(
                f"Cannot reach RPC endpoint {self.rpc_url}: {e}",
                error_code='RPC_UNREACHABLE',
                original_error=e
            )
        logger.info(f"Connected to chain {self.chain_id} as {self.wallet_address}")
        return self.chain_id

    async def submit_proof(self, payload: bytes) -> TransactionHandle:
        """
        Sign and broadcast ingestProof(payload).

        Raises:
            SubmissionError: On any RPC, estimation, signing or broadcast failure
        """
        if self.chain_id is None:
            raise SubmissionError("Chain client not connected. Call connect() first.")

        try:
            return await asyncio.to_thread(self._build_sign_send, payload)
        except SubmissionError:
            raise
        except Exception as e:
            raise SubmissionError(
                f"ingestProof failed: {e.__class__.__name__}: {e}",
                details={'payload_bytes': len(payload)},
                original_error=e
            )

    def _build_sign_send(self, payload: bytes) -> TransactionHandle:
        nonce = self._web3.eth.get_transaction_count(self.wallet_address, 'pending')
        tx = self._contract.functions.ingestProof(payload).build_transaction({
            'from': self.wallet_address,
            'nonce': nonce,
            'chainId': self.chain_id,
        })
        signed = self._account.sign_transaction(tx)
        tx_hash = self._web3.eth.send_raw_transaction(signed.raw_transaction)
        return TransactionHandle(tx_hash=Web3.to_hex(tx_hash), nonce=nonce)
