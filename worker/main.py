"""
Headless refresh worker - keeps the dashboard model fresh without the API.

Run with: python -m worker.main
"""

import asyncio
import logging
import signal
import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from app.config import get_settings
from app.core.logging_config import setup_worker_logging
from app.schemas.pipeline import SessionStatus
from app.services.scheduler import RefreshScheduler
from app.services.session import DashboardSession

settings = get_settings()
logger = logging.getLogger("worker")


class Worker:
    """
    Connects a dashboard session and refreshes it on a fixed interval.

    Reconnects after the session drops into the error state.
    """

    def __init__(self):
        self.running = True
        self.session = DashboardSession(settings.connection_config(), settings=settings)
        self.scheduler = RefreshScheduler(self.session, settings.REFRESH_INTERVAL_SECONDS)

    async def run(self):
        """Main worker loop."""
        setup_worker_logging()
        logger.info("=" * 50)
        logger.info("Worker starting...")
        logger.info(f"Database: {settings.DB_DIALECT} {settings.DB_HOST}/{settings.DB_NAME}")
        logger.info(f"Model: {settings.AI_MODEL} at {settings.AI_ENDPOINT}")
        logger.info(f"Refresh interval: {settings.REFRESH_INTERVAL_SECONDS}s")
        logger.info("=" * 50)

        # Setup signal handlers for graceful shutdown
        self._setup_signal_handlers()

        self.scheduler.start()
        try:
            while self.running:
                try:
                    await self._ensure_connected()
                except Exception as e:
                    logger.error(f"Worker error: {e}", exc_info=True)
                await asyncio.sleep(settings.REFRESH_INTERVAL_SECONDS)
        finally:
            await self.scheduler.stop()
            await self.session.close()

        logger.info("Worker stopped")

    async def _ensure_connected(self):
        """Connect (or reconnect) the session when it is not connected."""
        if self.session.is_connected:
            return

        status = await self.session.connect()
        if status == SessionStatus.CONNECTED:
            logger.info(f"Connected with {len(self.session.schema.tables)} table(s)")
            await self.scheduler.trigger()
        else:
            logger.warning(f"Connection failed: {self.session.status_message}")

    def _setup_signal_handlers(self):
        """Setup handlers for graceful shutdown."""

        def signal_handler(signum, frame):
            logger.info(f"Received signal {signum}, initiating shutdown...")
            self.running = False

        # Handle SIGINT (Ctrl+C) and SIGTERM
        signal.signal(signal.SIGINT, signal_handler)
        signal.signal(signal.SIGTERM, signal_handler)


def main():
    """Entry point for worker."""
    worker = Worker()

    try:
        asyncio.run(worker.run())
    except KeyboardInterrupt:
        logger.info("Worker interrupted")
    except Exception as e:
        logger.exception(f"Worker crashed: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
