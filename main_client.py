#!/usr/bin/env python3
"""
Main entry point for the handshake client.

This script registers with a game server over TCP and UDP, announces a
player with a ConnectPacket and then logs whatever the server sends.
Configuration is loaded from environment variables.
"""

import asyncio
import signal
import sys
import os

from config.settings import Config
from client.handshake import HandshakeClient
from utils.logging import setup_logging, get_logger
from utils.exceptions import ConfigurationError, HandshakeError, TransportError

logger = get_logger(__name__)


class ClientApplication:
    """Main application class for the handshake client."""

    def __init__(self):
        """Initialize application."""
        self.config = Config()
        self.client: HandshakeClient = None
        self.shutdown_event = asyncio.Event()

    async def run(self) -> None:
        """
        Run the client application.

        Loads configuration, performs the handshake and listens until the
        server disconnects or a shutdown signal arrives.
        """
        try:
            logger.info("Loading configuration...")
            client_config = self.config.load_client_config()

            logger.info(
                f"Configuration loaded: "
                f"server={client_config.server_host}:{client_config.server_port}, "
                f"player={client_config.player_name}"
            )

            self.client = HandshakeClient(client_config)

            handshake_task = asyncio.create_task(self.client.handshake())
            if not await self._until_shutdown(handshake_task):
                logger.info("Shutdown signal received during handshake, stopping...")
                sys.exit(0)
            connection_id = handshake_task.result()
            logger.info(f"Handshake complete, connection id {connection_id}")

            listen_task = asyncio.create_task(self.client.listen())
            if await self._until_shutdown(listen_task):
                # Surfaces read errors raised while listening
                listen_task.result()
            else:
                logger.info("Shutdown signal received, stopping...")

            logger.info("Client application stopped successfully")
            sys.exit(0)

        except ConfigurationError as e:
            logger.error(f"Configuration error: {e}")
            logger.error(
                "Please check your environment variables. "
                "See .env.example for available configuration."
            )
            sys.exit(1)
        except (HandshakeError, TransportError) as e:
            logger.error(f"Handshake failed: {e}")
            sys.exit(1)
        except Exception as e:
            logger.error(f"Unexpected error: {e}", exc_info=True)
            sys.exit(1)
        finally:
            if self.client:
                await self.client.close()

    async def _until_shutdown(self, task: asyncio.Task) -> bool:
        """
        Wait for a task or a shutdown signal, whichever comes first.

        Args:
            task: Running client step

        Returns:
            True if the task finished, False if shutdown won and the task
            was cancelled
        """
        shutdown_task = asyncio.create_task(self.shutdown_event.wait())
        try:
            await asyncio.wait(
                {task, shutdown_task}, return_when=asyncio.FIRST_COMPLETED
            )
        finally:
            shutdown_task.cancel()
            await asyncio.gather(shutdown_task, return_exceptions=True)

        if task.done():
            return True

        task.cancel()
        await asyncio.gather(task, return_exceptions=True)
        return False

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

    logger.info("Starting client application...")

    app = ClientApplication()

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
