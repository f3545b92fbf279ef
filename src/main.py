"""
Main Entry Point for the Proof Ingestor
Long-running process that pushes price proofs on-chain on a jittered interval
"""

import os
import sys
import signal
import asyncio
from datetime import datetime
from typing import Optional

# Add src to path for imports
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from config.assets import ASSETS
from config.constants import REARM_JITTER_MAX_MS, VENUE_TIMEZONE
from config.settings import IngestorSettings, load_settings, resolve_private_key
from core.catalog import IdentifierCatalog, format_id_ranges
from core.chain_client import ChainClient
from core.proof_client import ProofClient
from core.scheduler import TickScheduler
from core.submitter import ProofSubmitter
from utils.exceptions import ConfigurationError, ProofIngestorError
from utils.logger import get_logger, setup_logging


logger = get_logger(__name__)


class ProofIngestor:
    """
    Wires settings, catalog, clients and scheduler together
    and manages the process lifecycle
    """

    def __init__(self, settings: IngestorSettings):
        self.settings = settings
        self.catalog: Optional[IdentifierCatalog] = None
        self.chain_client: Optional[ChainClient] = None
        self.proof_client: Optional[ProofClient] = None
        self.scheduler: Optional[TickScheduler] = None
        self.start_time: Optional[datetime] = None
        self._shutdown_event = asyncio.Event()

    def _signal_handler(self, signum, frame):
        """Handle shutdown signals gracefully"""
        signal_name = signal.Signals(signum).name
        logger.info(f"Received {signal_name} signal, initiating graceful shutdown...")
        if not self._shutdown_event.is_set():
            self._shutdown_event.set()

    def install_signal_handlers(self) -> None:
        signal.signal(signal.SIGINT, self._signal_handler)
        signal.signal(signal.SIGTERM, self._signal_handler)

    async def initialize(self) -> None:
        """
        Build every component. Fails fast (ConfigurationError) before any
        tick runs if the catalog, credentials or RPC endpoint are unusable.
        """
        logger.info("Initializing proof ingestor components...")

        self.catalog = IdentifierCatalog.from_mapping(ASSETS)
        monitored = self.catalog.monitored_set(self.settings.override_spec)
        if not monitored:
            logger.warning("Monitored set is empty, every tick will be a no-op")

        private_key = resolve_private_key(self.settings)
        self.chain_client = ChainClient(
            rpc_url=self.settings.rpc_url,
            contract_address=self.settings.contract_addr,
            private_key=private_key,
            rpc_timeout_sec=self.settings.rpc_timeout_sec
        )
        chain_id = await self.chain_client.connect()

        self.proof_client = ProofClient(
            base_url=self.settings.proof_base_url,
            timeout_sec=self.settings.http_timeout_sec
        )
        await self.proof_client.initialize()

        self.scheduler = TickScheduler(
            catalog=self.catalog,
            monitored_ids=monitored,
            proof_client=self.proof_client,
            submitter=ProofSubmitter(self.chain_client),
            interval_ms=self.settings.interval_ms
        )

        logger.info("=" * 80)
        logger.info(f"Proof Ingestor started | chainId={chain_id}")
        logger.info(f"RPC={self.settings.rpc_url}")
        logger.info(f"Contract={self.chain_client.contract_address}")
        logger.info(f"Signer={self.chain_client.wallet_address}")
        logger.info(f"Proof endpoint={self.settings.proof_base_url}")
        logger.info(
            f"Monitored IDs ({len(monitored)}"
            f"{', override' if self.settings.override_spec else ', catalog'})="
            f"{format_id_ranges(monitored)}"
        )
        logger.info(
            f"Interval={self.settings.interval_ms}ms (+0-{REARM_JITTER_MAX_MS}ms jitter) | "
            f"TZ={VENUE_TIMEZONE} for schedule"
        )
        logger.info("=" * 80)

    async def start(self) -> None:
        """Run ticks until a shutdown signal arrives"""
        if self.scheduler is None:
            raise ConfigurationError("Ingestor not initialized. Call initialize() first.")

        self.start_time = datetime.now()
        try:
            await self.scheduler.run_forever(self._shutdown_event)
        finally:
            await self.shutdown()

    def stop(self) -> None:
        self._shutdown_event.set()

    async def shutdown(self) -> None:
        """Release the HTTP session and log final statistics"""
        logger.info("Shutting down proof ingestor...")
        if self.proof_client:
            try:
                await self.proof_client.close()
            except Exception as e:
                logger.error(f"Error closing proof client: {e}")
        self._log_final_stats()
        logger.info("Shutdown complete")

    def _log_final_stats(self) -> None:
        if not self.start_time or not self.scheduler:
            return

        logger.info("=" * 80)
        logger.info("PROOF INGESTOR FINAL STATISTICS")
        logger.info("=" * 80)
        logger.info(f"Runtime: {datetime.now() - self.start_time}")
        logger.info(f"Ticks run: {self.scheduler.ticks_run}")
        logger.info(f"Ticks skipped (busy): {self.scheduler.ticks_skipped}")
        logger.info(f"Ticks failed: {self.scheduler.ticks_failed}")
        logger.info(f"Batches submitted: {self.scheduler.batches_submitted}")
        logger.info("=" * 80)


async def main() -> int:
    """
    Main entry point

    Returns:
        Process exit status
    """
    try:
        settings = load_settings()
    except ConfigurationError as e:
        setup_logging()
        logger.critical(f"Configuration error: {e}")
        return 1

    setup_logging(
        log_level=settings.log_level,
        log_file=settings.log_file,
        structured=settings.structured_logging
    )

    ingestor = ProofIngestor(settings)
    ingestor.install_signal_handlers()

    try:
        await ingestor.initialize()
    except ConfigurationError as e:
        logger.critical(f"Configuration error: {e}")
        await ingestor.shutdown()
        return 1
    except Exception as e:
        logger.critical(f"Failed to initialize: {e}", exc_info=True)
        await ingestor.shutdown()
        return 1

    # start() shuts down on its own exit paths
    try:
        await ingestor.start()
    except ProofIngestorError as e:
        logger.error(f"Ingestor error: {e}")
        return 1
    except Exception as e:
        logger.critical(f"Unexpected error: {e}", exc_info=True)
        return 1

    return 0


def run() -> None:
    """Console-script entry point"""
    try:
        sys.exit(asyncio.run(main()))
    except KeyboardInterrupt:
        logger.info("Proof ingestor stopped by user")


if __name__ == "__main__":
    """
    Entry point for production deployment
    Run with: python src/main.py
    """
    run()
