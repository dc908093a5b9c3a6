"""One relay session between a game client and the real server.

A session owns three sockets: the accepted client TCP connection, the TCP
connection to the server and the UDP socket shared by both UDP legs. It
forwards every byte unchanged and decodes each complete message on the way
through so the traffic can be inspected.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, List, Optional
import asyncio

from protocol.constants import DEFAULT_BUFFER_SIZE
from protocol.framing import FrameAssembler
from protocol.messages import AnyMessage, decode_message
from utils.exceptions import SocketReceiveError, SocketSendError
from utils.logging import format_hex, get_logger
from utils.sockets import Address, AsyncSocket

logger = get_logger(__name__)

CLIENT_TO_SERVER = "client -> server"
SERVER_TO_CLIENT = "server -> client"


class RelayState(Enum):
    """Lifecycle of a relay session."""

    WAITING = "waiting"
    RELAYING = "relaying"
    CLOSED = "closed"


class Source(Enum):
    """Read sources watched while relaying."""

    CLIENT_TCP = "tcp client"
    SERVER_TCP = "tcp server"
    UDP = "udp"


@dataclass
class TrafficRecord:
    """One message seen by the relay, decoded if possible."""

    protocol: str
    direction: str
    raw: bytes
    message: Optional[AnyMessage]


class RelaySession:
    """
    Multiplex the client TCP, server TCP and shared UDP sockets.

    A single task waits on all three sources at once and handles exactly
    one completed read per iteration. The session ends when either TCP peer
    closes its stream or any socket operation fails; failures propagate out
    of :meth:`run` as :class:`TransportError` subclasses.
    """

    def __init__(
        self,
        client: AsyncSocket,
        server: AsyncSocket,
        udp: AsyncSocket,
        client_address: Address,
        server_address: Address,
        buffer_size: int = DEFAULT_BUFFER_SIZE,
    ):
        """
        Initialize a session over already connected sockets.

        Args:
            client: Accepted TCP connection from the game client
            server: TCP connection to the game server
            udp: UDP socket the client sends its datagrams to
            client_address: TCP peer address of the client, used as the UDP
                destination until the client sends its own datagram
            server_address: Address of the game server, for both TCP and UDP
            buffer_size: Maximum bytes per socket read
        """
        self._client = client
        self._server = server
        self._udp = udp
        self._server_address = server_address
        self._client_udp_address = client_address
        self._buffer_size = buffer_size
        self._assemblers: Dict[str, FrameAssembler] = {
            CLIENT_TO_SERVER: FrameAssembler(),
            SERVER_TO_CLIENT: FrameAssembler(),
        }
        self._observers: List[Callable[[TrafficRecord], None]] = []
        self._state = RelayState.WAITING

    @property
    def state(self) -> RelayState:
        return self._state

    @property
    def client_udp_address(self) -> Address:
        """Where datagrams from the server are currently forwarded."""
        return self._client_udp_address

    def on_message(self, callback: Callable[[TrafficRecord], None]) -> None:
        """Register a callback for every message passing through the relay."""
        self._observers.append(callback)

    async def run(self) -> None:
        """
        Relay traffic until the session closes.

        Raises:
            SocketReceiveError: If reading from any socket fails
            SocketSendError: If forwarding to any peer fails
        """
        if self._state is not RelayState.WAITING:
            raise RuntimeError(f"Relay session cannot run from state {self._state.value}")

        self._state = RelayState.RELAYING
        logger.info(
            f"Relaying client {self._client_udp_address} <-> server {self._server_address}"
        )

        reads: Dict[Source, asyncio.Task] = {}
        try:
            while self._state is RelayState.RELAYING:
                for source in Source:
                    if source not in reads:
                        reads[source] = asyncio.create_task(self._read(source))

                await asyncio.wait(set(reads.values()), return_when=asyncio.FIRST_COMPLETED)

                # Handle one completed read; any others wait for the next pass
                source = next(s for s, task in reads.items() if task.done())
                result = reads.pop(source).result()
                await self._handle(source, result)
        finally:
            self._state = RelayState.CLOSED

            for task in reads.values():
                task.cancel()
            await asyncio.gather(*reads.values(), return_exceptions=True)

            await self._close()
            logger.info("Relay session closed")

    async def _read(self, source: Source) -> Any:
        try:
            if source is Source.UDP:
                return await self._udp.recvfrom(self._buffer_size)
            if source is Source.CLIENT_TCP:
                return await self._client.recv(self._buffer_size)
            return await self._server.recv(self._buffer_size)
        except OSError as e:
            raise SocketReceiveError(f"{source.value} read", e) from e

    async def _handle(self, source: Source, result: Any) -> None:
        if source is Source.CLIENT_TCP:
            if not result:
                logger.info("Client disconnected")
                self._state = RelayState.CLOSED
                return
            await self._forward_tcp(self._server, result, "tcp server write")
            self._inspect_stream(CLIENT_TO_SERVER, result)

        elif source is Source.SERVER_TCP:
            if not result:
                logger.info("Server closed the connection")
                self._state = RelayState.CLOSED
                return
            await self._forward_tcp(self._client, result, "tcp client write")
            self._inspect_stream(SERVER_TO_CLIENT, result)

        else:
            data, address = result
            if address == self._server_address:
                await self._forward_udp(data, self._client_udp_address, "udp client write")
                self._inspect("UDP", SERVER_TO_CLIENT, data)
            else:
                # Anything not from the server is taken to be the client
                self._client_udp_address = address
                await self._forward_udp(data, self._server_address, "udp server write")
                self._inspect("UDP", CLIENT_TO_SERVER, data)

    async def _forward_tcp(self, dst: AsyncSocket, data: bytes, operation: str) -> None:
        try:
            await dst.sendall(data)
        except OSError as e:
            raise SocketSendError(operation, e) from e

    async def _forward_udp(self, data: bytes, address: Address, operation: str) -> None:
        try:
            await self._udp.sendto(data, address)
        except OSError as e:
            raise SocketSendError(operation, e) from e

    def _inspect_stream(self, direction: str, data: bytes) -> None:
        """Feed forwarded TCP bytes to the reassembler and inspect whole frames."""
        for frame in self._assemblers[direction].feed(data):
            self._inspect("TCP", direction, frame)

    def _inspect(self, protocol: str, direction: str, raw: bytes) -> None:
        message = decode_message(raw)

        lines = [f"{protocol} {direction}", f"\traw: {format_hex(raw)}"]
        if message is not None:
            lines.append(f"\tparsed: {message!r}")
        logger.info("\n".join(lines))

        record = TrafficRecord(protocol=protocol, direction=direction, raw=raw, message=message)
        for callback in self._observers:
            try:
                callback(record)
            except Exception as e:
                logger.error(f"Traffic observer error: {e}", exc_info=True)

    async def _close(self) -> None:
        for name, sock in (("client", self._client), ("server", self._server), ("udp", self._udp)):
            try:
                await sock.close()
            except Exception as e:
                logger.warning(f"Error closing {name} socket: {e}")
