"""
Validators and Helper Utilities for the Proof Ingestor

Provides:
- Address validation (Ethereum-compatible chains)
- Retry policy with capped exponential backoff for async operations

The retry policy is shared by the proof fetch and the on-chain submission;
each call site passes its own RetryPolicy instance.
"""

import re
import asyncio
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Optional, Tuple, Type

from utils.logger import get_logger
from utils.exceptions import DataValidationError


logger = get_logger(__name__)


# ============================================================================
# 1. ADDRESS VALIDATION
# ============================================================================

def validate_ethereum_address(address: str) -> bool:
    """
    Validate Ethereum address format (0x prefixed hex).

    Args:
        address: Address string to validate

    Returns:
        True if valid

    Raises:
        DataValidationError: If address is malformed
    """
    if not isinstance(address, str):
        raise DataValidationError(
            f"Address must be string, got {type(address).__name__}",
            details={'address': str(address)}
        )

    # 0x followed by 40 hex characters (20 bytes)
    if not re.match(r'^0x[0-9a-fA-F]{40}$', address):
        raise DataValidationError(
            "Invalid Ethereum address format",
            error_code='INVALID_ADDRESS_FORMAT',
            details={'address': address, 'expected_format': '0x + 40 hex chars'}
        )

    return True


# ============================================================================
# 2. RETRY WITH BACKOFF
# ============================================================================

@dataclass(frozen=True)
class RetryPolicy:
    """
    Capped exponential backoff.

    Attributes:
        retries: Retries after the first attempt (total attempts = retries + 1)
        base_delay_sec: Wait before the first retry
        multiplier: Growth factor applied per retry
        max_delay_sec: Upper bound for any single wait
    """

    retries: int
    base_delay_sec: float
    multiplier: float
    max_delay_sec: float

    def __post_init__(self):
        if self.retries < 0:
            raise ValueError(f"retries must be >= 0, got {self.retries}")
        if self.base_delay_sec < 0 or self.max_delay_sec < 0:
            raise ValueError("delays must be non-negative")
        if self.multiplier < 1:
            raise ValueError(f"multiplier must be >= 1, got {self.multiplier}")

    @property
    def max_attempts(self) -> int:
        return self.retries + 1

    def delay_for(self, retry_number: int) -> float:
        """
        Wait (seconds) before the given retry.

        delay(n) = min(base * multiplier^(n-1), max)   for n = 1, 2, ...
        """
        if retry_number < 1:
            raise ValueError(f"retry_number must be >= 1, got {retry_number}")
        delay = self.base_delay_sec * (self.multiplier ** (retry_number - 1))
        return min(delay, self.max_delay_sec)


async def retry_async(
    operation: Callable[[], Awaitable[Any]],
    policy: RetryPolicy,
    retry_on: Tuple[Type[BaseException], ...] = (Exception,),
    description: str = "operation",
    sleep: Optional[Callable[[float], Awaitable[Any]]] = None,
) -> Any:
    """
    Await `operation` until it succeeds or the policy is exhausted.

    Only exceptions matching `retry_on` are retried; anything else propagates
    on the spot. After the last attempt the final error is re-raised as-is.

    Args:
        operation: Zero-argument coroutine factory, called once per attempt
        policy: Backoff parameters
        retry_on: Exception types that trigger a retry
        description: Label used in log lines
        sleep: Awaitable sleep, defaults to asyncio.sleep

    Returns:
        Whatever the successful attempt returned
    """
    sleep = sleep or asyncio.sleep

    for attempt in range(1, policy.max_attempts + 1):
        try:
            return await operation()
        except retry_on as e:
            if attempt >= policy.max_attempts:
                logger.error(
                    f"{description} failed after {attempt} attempts: {e}",
                    extra={'attempts': attempt, 'error': str(e)}
                )
                raise

            delay = policy.delay_for(attempt)
            logger.warning(
                f"{description} attempt {attempt}/{policy.max_attempts} failed, "
                f"retrying in {delay:.2f}s: {e}",
                extra={
                    'attempt': attempt,
                    'max_attempts': policy.max_attempts,
                    'delay_sec': delay,
                    'error': str(e)
                }
            )
            await sleep(delay)

    # max_attempts >= 1, so the loop always returns or raises
    raise RuntimeError("unreachable")
