"""
Proof Service Client
Fetches the signed price proof for a batch of pair identifiers

Request:  GET <base_url>?pairs=<id,id,...>
Response: {"proof": "0x<hex>"}

Every failure (transport, status, body shape) surfaces as ProofFetchError and
is retried with capped exponential backoff before reaching the caller.
"""

import asyncio
import json
from typing import Any, Awaitable, Callable, Optional, Sequence

import aiohttp

from config.constants import (
    DEFAULT_HTTP_TIMEOUT_SEC,
    HTTP_POOL_LIMIT,
    HTTP_USER_AGENT,
    PROOF_QUERY_PARAM,
    PROOF_RESPONSE_FIELD,
    PROOF_HEX_PREFIX,
    PROOF_FETCH_RETRIES,
    PROOF_FETCH_BASE_DELAY_SEC,
    PROOF_FETCH_BACKOFF_MULTIPLIER,
    PROOF_FETCH_MAX_DELAY_SEC,
)
from utils.exceptions import ProofFetchError
from utils.helpers import RetryPolicy, retry_async
from utils.logger import get_logger


logger = get_logger(__name__)


PROOF_FETCH_RETRY_POLICY = RetryPolicy(
    retries=PROOF_FETCH_RETRIES,
    base_delay_sec=PROOF_FETCH_BASE_DELAY_SEC,
    multiplier=PROOF_FETCH_BACKOFF_MULTIPLIER,
    max_delay_sec=PROOF_FETCH_MAX_DELAY_SEC,
)


def decode_proof(body: Any) -> bytes:
    """
    Extract the proof bytes from a decoded JSON body.

    Raises:
        ProofFetchError: If the field is missing, not a 0x-prefixed string,
            empty, or not valid hex
    """
    if not isinstance(body, dict):
        raise ProofFetchError(
            f"Invalid response: expected JSON object, got {type(body).__name__}",
            error_code='INVALID_BODY'
        )

    proof = body.get(PROOF_RESPONSE_FIELD)
    if not isinstance(proof, str) or not proof.startswith(PROOF_HEX_PREFIX):
        raise ProofFetchError(
            f"Invalid response: '{PROOF_RESPONSE_FIELD}' missing or malformed",
            error_code='INVALID_PROOF',
            response_data={'keys': sorted(body)}
        )

    hex_part = proof[len(PROOF_HEX_PREFIX):]
    if not hex_part:
        raise ProofFetchError(
            f"Invalid response: '{PROOF_RESPONSE_FIELD}' is empty",
            error_code='EMPTY_PROOF'
        )

    try:
        return bytes.fromhex(hex_part)
    except ValueError as e:
        raise ProofFetchError(
            f"Invalid response: '{PROOF_RESPONSE_FIELD}' is not valid hex",
            error_code='INVALID_PROOF',
            original_error=e
        )


class ProofClient:
    """
    Retrying HTTP client for the proof service.
    One pooled aiohttp session lives for the whole process.
    """

    def __init__(
        self,
        base_url: str,
        timeout_sec: float = DEFAULT_HTTP_TIMEOUT_SEC,
        retry_policy: RetryPolicy = PROOF_FETCH_RETRY_POLICY,
        session: Optional[aiohttp.ClientSession] = None,
        sleep: Optional[Callable[[float], Awaitable[Any]]] = None
    ):
        """
        Args:
            base_url: Proof endpoint without query string
            timeout_sec: Total timeout per request
            retry_policy: Backoff for failed attempts
            session: Pre-built session (tests); created in initialize() otherwise
            sleep: Awaitable sleep used between retries
        """
        self.base_url = base_url
        self.timeout_sec = timeout_sec
        self.retry_policy = retry_policy
        self._session = session
        self._owns_session = session is None
        self._sleep = sleep

    async def initialize(self) -> None:
        """Open the pooled HTTP session"""
        if self._session is not None:
            return

        connector = aiohttp.TCPConnector(
            limit=HTTP_POOL_LIMIT,
            ttl_dns_cache=300,
            enable_cleanup_closed=True
        )
        self._session = aiohttp.ClientSession(
            connector=connector,
            timeout=aiohttp.ClientTimeout(total=self.timeout_sec),
            headers={
                "User-Agent": HTTP_USER_AGENT,
                "Accept": "application/json"
            }
        )
        self._owns_session = True
        logger.info(f"Proof client ready: {self.base_url} (timeout {self.timeout_sec}s)")

    async def close(self) -> None:
        """Close the HTTP session if this client opened it"""
        if self._owns_session and self._session is not None and not self._session.closed:
            await self._session.close()
            logger.info("Closed proof service session")
        self._session = None

    async def fetch_proof(self, batch: Sequence[int]) -> bytes:
        """
        Fetch the proof covering `batch`.

        Returns:
            Decoded proof bytes

        Raises:
            ProofFetchError: After all attempts failed (last error)
        """
        return await retry_async(
            lambda: self._fetch_once(batch),
            self.retry_policy,
            retry_on=(ProofFetchError,),
            description=f"Proof fetch ({len(batch)} pairs)",
            sleep=self._sleep
        )

    async def _fetch_once(self, batch: Sequence[int]) -> bytes:
        if self._session is None:
            raise ProofFetchError("Proof client not initialized. Call initialize() first.")

        params = {PROOF_QUERY_PARAM: ",".join(str(i) for i in batch)}

        try:
            async with self._session.get(self.base_url, params=params) as response:
                if not 200 <= response.status < 300:
                    raise ProofFetchError(
                        f"HTTP {response.status}",
                        status_code=response.status,
                        error_code='HTTP_STATUS'
                    )
                try:
                    body = await response.json(content_type=None)
                except (aiohttp.ContentTypeError, json.JSONDecodeError, ValueError) as e:
                    raise ProofFetchError(
                        f"Response body is not valid JSON: {e}",
                        status_code=response.status,
                        error_code='INVALID_BODY',
                        original_error=e
                    )
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise ProofFetchError(
                f"Transport error: {e.__class__.__name__}: {e}",
                error_code='TRANSPORT',
                original_error=e
            )

        return decode_proof(body)
