"""Inspecting relay server.

The relay listens on one port for both TCP and UDP, exactly like a game
server would. When a client connects it opens its own TCP connection to
the real server and hands all three sockets to a :class:`RelaySession`.
"""

from typing import Callable, List, Optional
import asyncio
import socket

from config.settings import RelayConfig
from relay.session import RelaySession, TrafficRecord
from utils.exceptions import SocketConnectError
from utils.logging import get_logger
from utils.sockets import Address, AsyncSocket

logger = get_logger(__name__)


class Relay:
    """
    Relay a single game client to the configured server.

    Only one client session is supported at a time: datagrams on the shared
    UDP socket are told apart purely by whether they come from the server.
    """

    def __init__(self, config: RelayConfig):
        """
        Initialize the relay.

        Args:
            config: Relay configuration including listen and server addresses
        """
        self._config: RelayConfig = config
        self._session: Optional[RelaySession] = None
        self._observers: List[Callable[[TrafficRecord], None]] = []
        self._task: Optional[asyncio.Task] = None
        self._running: bool = False

        logger.info(
            f"Relay initialized with listen={config.host}:{config.port}, "
            f"server={config.server_host}:{config.server_port}"
        )

    @property
    def session(self) -> Optional[RelaySession]:
        return self._session

    def on_message(self, callback: Callable[[TrafficRecord], None]) -> None:
        """Register a callback for every message the session inspects."""
        self._observers.append(callback)

    async def start(self) -> None:
        """
        Accept one client and relay it until either side disconnects.

        Raises:
            SocketConnectError: If binding, accepting or connecting fails
            SocketReceiveError: If a read fails while relaying
            SocketSendError: If a write fails while relaying
        """
        if self._running:
            logger.warning("Relay is already running")
            return

        self._running = True
        self._task = asyncio.current_task()

        listener: Optional[AsyncSocket] = None
        udp: Optional[AsyncSocket] = None
        client: Optional[AsyncSocket] = None
        server: Optional[AsyncSocket] = None

        try:
            server_address = await self._resolve(
                self._config.server_host, self._config.server_port
            )

            udp = self._bind(socket.SOCK_DGRAM, "udp bind")
            listener = self._bind(socket.SOCK_STREAM, "tcp bind")
            listener.sock.listen()

            logger.info(
                f"Relay listening on {self._config.host}:{self._config.port} (TCP and UDP)"
            )

            try:
                client, client_address = await listener.accept()
            except OSError as e:
                raise SocketConnectError("tcp accept", e) from e
            logger.info(f"Client connected from {client_address}")

            server = AsyncSocket(socket.socket(socket.AF_INET, socket.SOCK_STREAM))
            try:
                await server.connect(server_address)
            except OSError as e:
                raise SocketConnectError("tcp server connect", e) from e
            logger.info(f"Connected to server {server_address}")

            self._session = RelaySession(
                client,
                server,
                udp,
                client_address=client_address,
                server_address=server_address,
                buffer_size=self._config.buffer_size,
            )
            for callback in self._observers:
                self._session.on_message(callback)

            # The session owns and closes the sockets from here on
            client = server = udp = None
            await self._session.run()

        except asyncio.CancelledError:
            logger.info("Relay cancelled")
            raise

        finally:
            for sock in (listener, client, server, udp):
                if sock is not None:
                    try:
                        await sock.close()
                    except Exception as e:
                        logger.warning(f"Error closing socket: {e}")
            self._running = False
            self._task = None

    async def stop(self) -> None:
        """Cancel a running relay and wait for its sockets to close."""
        if not self._running or self._task is None:
            logger.warning("Relay is not running")
            return

        logger.info("Stopping relay")
        task = self._task
        task.cancel()
        await asyncio.gather(task, return_exceptions=True)

    def _bind(self, sock_type: int, operation: str) -> AsyncSocket:
        sock = socket.socket(socket.AF_INET, sock_type)
        try:
            if sock_type == socket.SOCK_STREAM:
                sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
            sock.bind((self._config.host, self._config.port))
        except OSError as e:
            sock.close()
            raise SocketConnectError(operation, e) from e
        return AsyncSocket(sock)

    async def _resolve(self, host: str, port: int) -> Address:
        """Resolve the server to the (ip, port) form datagram sources arrive in."""
        loop = asyncio.get_event_loop()
        try:
            infos = await loop.getaddrinfo(
                host, port, family=socket.AF_INET, type=socket.SOCK_DGRAM
            )
        except OSError as e:
            raise SocketConnectError("server resolve", e) from e
        return infos[0][4]
