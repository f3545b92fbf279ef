"""
Tick Scheduler
Runs the eligibility -> batch -> fetch -> submit cycle on a jittered interval

States:
    Idle    -> Running   when a tick is triggered and no tick is in progress
    Running -> Idle      when the tick finishes, on every exit path

A trigger that arrives while Running is dropped, not queued. Batches within a
tick run strictly in ascending-id order; the first batch that fails aborts the
rest of the tick. Already-submitted batches are never rolled back.
"""

import asyncio
import random
import time
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Awaitable, Callable, List, Optional, Sequence

from config.constants import (
    MAX_BATCH_SIZE,
    BATCH_PACING_MIN_SEC,
    BATCH_PACING_MAX_SEC,
    REARM_JITTER_MAX_MS,
    LOG_SAMPLE_SIZE,
)
from core.batcher import chunk
from core.calendar_policy import is_eligible
from core.catalog import IdentifierCatalog
from core.chain_client import TransactionHandle
from core.proof_client import ProofClient
from core.submitter import ProofSubmitter
from utils.exceptions import ProofIngestorError, UnexpectedError
from utils.logger import get_logger


logger = get_logger(__name__)


@dataclass
class BatchOutcome:
    identifiers: List[int]
    tx_hash: str


@dataclass
class TickResult:
    """Outcome log of one tick"""
    started_at: datetime
    eligible: List[int] = field(default_factory=list)
    batch_count: int = 0
    submitted: List[BatchOutcome] = field(default_factory=list)
    error: Optional[ProofIngestorError] = None
    duration_ms: float = 0.0

    @property
    def succeeded(self) -> bool:
        return self.error is None


def _sample(identifiers: Sequence[int]) -> str:
    head = ",".join(str(i) for i in identifiers[:LOG_SAMPLE_SIZE])
    return head + ("..." if len(identifiers) > LOG_SAMPLE_SIZE else "")


class TickScheduler:
    """
    Owns the monitored set and the busy flag.
    Nothing outside trigger() reads or writes the flag.
    """

    def __init__(
        self,
        catalog: IdentifierCatalog,
        monitored_ids: Sequence[int],
        proof_client: ProofClient,
        submitter: ProofSubmitter,
        interval_ms: int,
        max_batch_size: int = MAX_BATCH_SIZE,
        clock: Optional[Callable[[], datetime]] = None,
        rng: Optional[random.Random] = None,
        sleep: Optional[Callable[[float], Awaitable[Any]]] = None
    ):
        """
        Args:
            catalog: Id -> category lookup
            monitored_ids: Ids watched for the process lifetime
            proof_client: Retrying proof fetcher
            submitter: Retrying on-chain submitter
            interval_ms: Base delay between ticks
            max_batch_size: Ids per proof request
            clock: Returns the current aware instant (UTC by default)
            rng: Source of pacing and jitter randomness
            sleep: Awaitable sleep used for inter-batch pacing
        """
        if max_batch_size < 1:
            raise ValueError(f"max_batch_size must be >= 1, got {max_batch_size}")

        self.catalog = catalog
        self.monitored_ids: List[int] = sorted(set(monitored_ids))
        self.interval_ms = interval_ms
        self.max_batch_size = max_batch_size
        self._proof_client = proof_client
        self._submitter = submitter
        self._clock = clock or (lambda: datetime.now(timezone.utc))
        self._rng = rng or random.Random()
        self._sleep = sleep or asyncio.sleep

        self._busy = False

        # Lifetime counters for the shutdown summary
        self.ticks_run = 0
        self.ticks_skipped = 0
        self.ticks_failed = 0
        self.batches_submitted = 0

    @property
    def is_busy(self) -> bool:
        return self._busy

    def eligible_ids(self, instant: datetime) -> List[int]:
        """Monitored ids tradable at `instant`, ascending"""
        return [
            identifier for identifier in self.monitored_ids
            if is_eligible(self.catalog.category_of(identifier), instant)
        ]

    def next_delay_sec(self) -> float:
        """Interval plus uniform jitter in [0, REARM_JITTER_MAX_MS]"""
        jitter_ms = self._rng.uniform(0, REARM_JITTER_MAX_MS)
        return (self.interval_ms + jitter_ms) / 1000.0

    @contextmanager
    def _busy_guard(self):
        self._busy = True
        try:
            yield
        finally:
            self._busy = False

    async def trigger(self) -> Optional[TickResult]:
        """
        Scheduling event: run one tick unless one is already running.

        Returns:
            TickResult, or None when the event was dropped
        """
        # Check-and-set happens without an await in between, so it is atomic
        # with respect to the event loop
        if self._busy:
            self.ticks_skipped += 1
            logger.debug("Tick already running, dropping scheduling event")
            return None

        with self._busy_guard():
            return await self._run_tick()

    async def _run_tick(self) -> TickResult:
        started = time.monotonic()
        result = TickResult(started_at=self._clock())
        self.ticks_run += 1

        try:
            result.eligible = self.eligible_ids(result.started_at)
            if not result.eligible:
                logger.info("No eligible identifiers right now, skipping tick")
                return result

            batches = chunk(result.eligible, self.max_batch_size)
            result.batch_count = len(batches)

            for index, batch in enumerate(batches, start=1):
                payload = await self._proof_client.fetch_proof(batch)
                handle: TransactionHandle = await self._submitter.submit(payload)

                result.submitted.append(BatchOutcome(identifiers=batch, tx_hash=handle.tx_hash))
                self.batches_submitted += 1
                logger.info(
                    f"Tx sent: {handle.tx_hash} | pairs={len(batch)} [ex: {_sample(batch)}]",
                    extra={
                        'tx_hash': handle.tx_hash,
                        'batch_index': index,
                        'batch_count': len(batches),
                        'pairs': len(batch),
                    }
                )

                if index < len(batches):
                    await self._sleep(
                        self._rng.uniform(BATCH_PACING_MIN_SEC, BATCH_PACING_MAX_SEC)
                    )

        except ProofIngestorError as e:
            result.error = e
            self.ticks_failed += 1
            logger.error(
                f"Tick aborted after {len(result.submitted)}/{result.batch_count} batches: {e}"
            )
        except Exception as e:
            result.error = UnexpectedError(
                f"{e.__class__.__name__}: {e}",
                original_error=e
            )
            self.ticks_failed += 1
            logger.error(
                f"Unexpected error, tick aborted after "
                f"{len(result.submitted)}/{result.batch_count} batches: {e}",
                exc_info=True
            )
        finally:
            result.duration_ms = (time.monotonic() - started) * 1000.0
            if result.duration_ms > self.interval_ms:
                logger.warning(
                    f"Tick took {result.duration_ms:.0f}ms (> {self.interval_ms}ms interval)"
                )

        return result

    async def run_forever(self, stop_event: asyncio.Event) -> None:
        """
        Tick immediately, then re-arm after each tick until `stop_event` is set.
        """
        logger.info(
            f"Scheduler started: {len(self.monitored_ids)} monitored ids, "
            f"interval {self.interval_ms}ms + up to {REARM_JITTER_MAX_MS}ms jitter"
        )

        while not stop_event.is_set():
            await self.trigger()

            try:
                await asyncio.wait_for(stop_event.wait(), timeout=self.next_delay_sec())
            except asyncio.TimeoutError:
                # Normal timeout, next tick
                continue

        logger.info("Scheduler stopped")
