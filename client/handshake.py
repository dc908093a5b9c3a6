"""Handshake client that registers with a game server and announces a player.

The registration sequence is fixed:

1. ``DiscoverHost`` over UDP
2. server assigns a connection id with ``RegisterTCP`` over TCP
3. ``RegisterUDP`` with that id over UDP
4. server acknowledges with ``RegisterUDP`` over TCP
5. ``ConnectPacket`` over TCP

After that :meth:`HandshakeClient.listen` logs whatever the server sends
until it closes the connection.
"""

from collections import deque
from typing import Deque, Optional, Type, TypeVar
import asyncio
import socket
import uuid

from config.settings import ClientConfig
from protocol.constants import DEFAULT_BUFFER_SIZE
from protocol.data import Framework
from protocol.framework import DiscoverHost, RegisterTCP, RegisterUDP
from protocol.framing import FrameAssembler
from protocol.messages import (
    AnyMessage,
    FrameworkMessage,
    PacketMessage,
    decode_message,
    encode_tcp,
    encode_udp,
)
from protocol.packets import ConnectPacket
from utils.exceptions import (
    HandshakeError,
    SocketConnectError,
    SocketReceiveError,
    SocketSendError,
)
from utils.logging import format_hex, get_logger
from utils.sockets import AsyncSocket

logger = get_logger(__name__)

F = TypeVar('F', bound=Framework)


class HandshakeClient:
    """Minimal game client speaking only the registration handshake."""

    def __init__(self, config: ClientConfig):
        """
        Initialize the client.

        Args:
            config: Server address and the player details to announce
        """
        self._config: ClientConfig = config
        self._tcp: Optional[AsyncSocket] = None
        self._udp: Optional[AsyncSocket] = None
        self._frames = FrameAssembler()
        self._pending: Deque[bytes] = deque()
        self.connection_id: Optional[int] = None

    async def connect(self) -> int:
        """
        Open both channels and register them with the server.

        Returns:
            Connection id assigned by the server

        Raises:
            SocketConnectError: If the server cannot be reached
            HandshakeError: If the server closes the stream mid-handshake
        """
        address = (self._config.server_host, self._config.server_port)
        logger.info(f"Connecting to {address[0]}:{address[1]}")

        try:
            udp_sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
            udp_sock.bind(('0.0.0.0', self._config.udp_port))
            self._udp = AsyncSocket(udp_sock)
            await self._udp.connect(address)

            self._tcp = AsyncSocket(socket.socket(socket.AF_INET, socket.SOCK_STREAM))
            await self._tcp.connect(address)
        except OSError as e:
            await self.close()
            raise SocketConnectError("connect", e) from e

        await self.send_udp(FrameworkMessage(DiscoverHost()))

        register_tcp = await self._expect(RegisterTCP)
        self.connection_id = register_tcp.id
        logger.info(f"Server assigned connection id {self.connection_id}")

        await self.send_udp(FrameworkMessage(RegisterUDP(id=self.connection_id)))
        await self._expect(RegisterUDP)
        logger.info("UDP channel registered")

        return self.connection_id

    def build_connect_packet(self) -> ConnectPacket:
        """Build the ConnectPacket announcing the configured player."""
        return ConnectPacket(
            version_build=self._config.version_build,
            version_type=self._config.version_type,
            player_name=self._config.player_name,
            locale=self._config.locale,
            usid=self._config.usid,
            uuid=uuid.uuid4(),
            mobile=self._config.mobile,
            color=self._config.color,
        )

    async def send_connect(self, packet: Optional[ConnectPacket] = None) -> ConnectPacket:
        """
        Send a ConnectPacket over TCP.

        Args:
            packet: Packet to send; built from configuration when omitted

        Returns:
            The packet that was sent
        """
        if packet is None:
            packet = self.build_connect_packet()
        await self.send_tcp(PacketMessage(packet, compressed=self._config.compress))
        logger.info(f"Sent connect packet for player {packet.player_name}")
        return packet

    async def handshake(self) -> int:
        """Register both channels and announce the player."""
        connection_id = await self.connect()
        await self.send_connect()
        return connection_id

    async def send_tcp(self, message: AnyMessage) -> None:
        """Send a message as a length-prefixed TCP frame."""
        if self._tcp is None:
            raise HandshakeError("TCP channel is not open")
        try:
            await self._tcp.sendall(encode_tcp(message))
        except OSError as e:
            raise SocketSendError("tcp write", e) from e

    async def send_udp(self, message: AnyMessage) -> None:
        """Send a message as a single UDP datagram."""
        if self._udp is None:
            raise HandshakeError("UDP channel is not open")
        try:
            await self._udp.send(encode_udp(message))
        except OSError as e:
            raise SocketSendError("udp write", e) from e

    async def listen(self) -> None:
        """Log incoming TCP and UDP messages until the server closes TCP."""
        tcp_task = asyncio.create_task(self._listen_tcp())
        udp_task = asyncio.create_task(self._listen_udp())
        try:
            await tcp_task
        finally:
            udp_task.cancel()
            await asyncio.gather(udp_task, return_exceptions=True)

    async def close(self) -> None:
        """Close both channels. Safe to call more than once."""
        for sock in (self._tcp, self._udp):
            if sock is not None:
                try:
                    await sock.close()
                except Exception as e:
                    logger.warning(f"Error closing socket: {e}")
        self._tcp = None
        self._udp = None

    async def _listen_tcp(self) -> None:
        while True:
            frame = await self._next_frame()
            if frame is None:
                logger.info("Server closed the connection")
                return
            self._log("TCP", frame)

    async def _listen_udp(self) -> None:
        try:
            while True:
                data = await self._udp.recv(DEFAULT_BUFFER_SIZE)
                self._log("UDP", data)
        except OSError as e:
            logger.warning(f"UDP channel stopped: {e}")

    async def _next_frame(self) -> Optional[bytes]:
        """Return the next TCP frame payload, or None at end of stream."""
        while not self._pending:
            try:
                data = await self._tcp.recv(DEFAULT_BUFFER_SIZE)
            except OSError as e:
                raise SocketReceiveError("tcp read", e) from e
            if not data:
                return None
            self._pending.extend(self._frames.feed(data))
        return self._pending.popleft()

    async def _expect(self, kind: Type[F]) -> F:
        """Read TCP frames until a framework message of the given kind arrives."""
        while True:
            frame = await self._next_frame()
            if frame is None:
                raise HandshakeError(
                    f"Server closed the connection while waiting for {kind.__name__}"
                )
            message = self._log("TCP", frame)
            if isinstance(message, FrameworkMessage) and isinstance(message.inner, kind):
                return message.inner

    def _log(self, protocol: str, raw: bytes) -> Optional[AnyMessage]:
        message = decode_message(raw)
        if message is None:
            logger.info(f"{protocol} server -> client (undecoded): {format_hex(raw)}")
        else:
            logger.info(f"{protocol} server -> client: {message!r}")
        return message
