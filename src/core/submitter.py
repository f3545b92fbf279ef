"""
Retrying proof submitter.

Each retry re-sends the state-mutating call. No idempotency key is attached,
so an attempt that landed on-chain but failed locally can be followed by a
second transaction; the contract is expected to tolerate duplicates.
"""

from typing import Any, Awaitable, Callable, Optional

from config.constants import (
    SUBMIT_RETRIES,
    SUBMIT_BASE_DELAY_SEC,
    SUBMIT_BACKOFF_MULTIPLIER,
    SUBMIT_MAX_DELAY_SEC,
)
from core.chain_client import ChainClient, TransactionHandle
from utils.exceptions import SubmissionError
from utils.helpers import RetryPolicy, retry_async


SUBMIT_RETRY_POLICY = RetryPolicy(
    retries=SUBMIT_RETRIES,
    base_delay_sec=SUBMIT_BASE_DELAY_SEC,
    multiplier=SUBMIT_BACKOFF_MULTIPLIER,
    max_delay_sec=SUBMIT_MAX_DELAY_SEC,
)


class ProofSubmitter:

    def __init__(
        self,
        chain_client: ChainClient,
        retry_policy: RetryPolicy = SUBMIT_RETRY_POLICY,
        sleep: Optional[Callable[[float], Awaitable[Any]]] = None
    ):
        self._chain = chain_client
        self.retry_policy = retry_policy
        self._sleep = sleep

    async def submit(self, payload: bytes) -> TransactionHandle:
        """
        Raises:
            SubmissionError: After all attempts failed (last error)
        """
        return await retry_async(
            lambda: self._submit_once(payload),
            self.retry_policy,
            retry_on=(SubmissionError,),
            description=f"Proof submission ({len(payload)} bytes)",
            sleep=self._sleep
        )

    async def _submit_once(self, payload: bytes) -> TransactionHandle:
        try:
            return await self._chain.submit_proof(payload)
        except SubmissionError:
            raise
        except Exception as e:
            raise SubmissionError(
                f"Chain client error: {e.__class__.__name__}: {e}",
                original_error=e
            )
