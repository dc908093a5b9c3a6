#!/usr/bin/env python3
"""
Main entry point for the inspecting relay.

This script listens for one game client, connects it to the configured
server and logs every message passing through in both directions.
Configuration is loaded from environment variables.
"""

import asyncio
import signal
import sys
import os

from config.settings import Config
from relay.relay import Relay
from utils.logging import setup_logging, get_logger
from utils.exceptions import ConfigurationError, TransportError

logger = get_logger(__name__)


class RelayApplication:
    """Main application class for the relay."""

    def __init__(self):
        """Initialize application."""
        self.config = Config()
        self.relay: Relay = None
        self.shutdown_event = asyncio.Event()

    async def run(self) -> None:
        """
        Run the relay application.

        Loads configuration, starts the relay and waits until either the
        session ends or a shutdown signal arrives.
        """
        try:
            logger.info("Loading configuration...")
            relay_config = self.config.load_relay_config()

            logger.info(
                f"Configuration loaded: "
                f"listen={relay_config.host}:{relay_config.port}, "
                f"server={relay_config.server_host}:{relay_config.server_port}"
            )

            self.relay = Relay(relay_config)
            relay_task = asyncio.create_task(self.relay.start())
            shutdown_task = asyncio.create_task(self.shutdown_event.wait())

            logger.info("Relay application started successfully")
            logger.info("Press Ctrl+C to stop")

            await asyncio.wait(
                {relay_task, shutdown_task}, return_when=asyncio.FIRST_COMPLETED
            )

            if shutdown_task.done():
                logger.info("Shutdown signal received, stopping...")
                await self.relay.stop()
            else:
                shutdown_task.cancel()

            # Surfaces transport errors raised while relaying
            if not relay_task.cancelled():
                relay_task.result()

            logger.info("Relay application stopped successfully")
            sys.exit(0)

        except ConfigurationError as e:
            logger.error(f"Configuration error: {e}")
            logger.error(
                "Please check your environment variables. "
                "See .env.example for available configuration."
            )
            sys.exit(1)
        except TransportError as e:
            logger.error(f"Relay failed: {e}")
            sys.exit(1)
        except Exception as e:
            logger.error(f"Unexpected error: {e}", exc_info=True)
            sys.exit(1)

    def handle_shutdown(self, signum, frame):
        """
        Handle shutdown signals.

        Args:
            signum: Signal number
            frame: Current stack frame
        """
        logger.info(f"Received signal {signum}")
        self.shutdown_event.set()


async def main():
    """Main entry point."""
    try:
        setup_logging(os.getenv('LOG_LEVEL', 'INFO'))
    except ConfigurationError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        sys.exit(1)

    logger.info("Starting relay application...")

    app = RelayApplication()

    loop = asyncio.get_event_loop()
    for sig in (signal.SIGTERM, signal.SIGINT):
        loop.add_signal_handler(
            sig,
            lambda s=sig: app.handle_shutdown(s, None)
        )

    await app.run()


def run() -> None:
    """Console script entry point."""
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        print("\nShutdown complete")
        sys.exit(0)


if __name__ == '__main__':
    run()
