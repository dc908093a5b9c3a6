"""Tests for the handshake client against an in-process fake server."""

import asyncio
import signal
import socket

import pytest

from client.handshake import HandshakeClient
from config.settings import ClientConfig
from main_client import ClientApplication
from protocol.framework import DiscoverHost, RegisterTCP, RegisterUDP
from protocol.framing import FrameAssembler
from protocol.messages import FrameworkMessage, PacketMessage, decode_message, encode_tcp
from protocol.packets import ConnectPacket
from utils.exceptions import HandshakeError
from utils.sockets import AsyncSocket

TIMEOUT = 5.0
CONNECTION_ID = 42


class FakeServer:
    """Game server stand-in listening for TCP and UDP on one port."""

    def __init__(self):
        udp = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
        udp.bind(('127.0.0.1', 0))
        self.port = udp.getsockname()[1]

        tcp = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        tcp.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        tcp.bind(('127.0.0.1', self.port))
        tcp.listen()

        self.udp = AsyncSocket(udp)
        self.listener = AsyncSocket(tcp)
        self.datagrams = []
        self.frames = []

    def config(self, **overrides) -> ClientConfig:
        return ClientConfig(server_host='127.0.0.1', server_port=self.port, **overrides)

    async def serve_handshake(self) -> None:
        conn, _ = await self.listener.accept()
        try:
            await conn.sendall(encode_tcp(FrameworkMessage(RegisterTCP(id=CONNECTION_ID))))

            for _ in range(2):
                data, _ = await self.udp.recvfrom(1024)
                self.datagrams.append(decode_message(data))

            await conn.sendall(encode_tcp(FrameworkMessage(RegisterUDP(id=CONNECTION_ID))))

            assembler = FrameAssembler()
            while not self.frames:
                data = await conn.recv(4096)
                assert data, "client closed before sending ConnectPacket"
                self.frames.extend(assembler.feed(data))
        finally:
            await conn.close()

    async def close(self) -> None:
        await self.udp.close()
        await self.listener.close()


def test_handshake_sequence():
    server = FakeServer()
    client = HandshakeClient(server.config(player_name='tester', color=0xFF00FFFF))

    async def scenario():
        serve_task = asyncio.create_task(server.serve_handshake())
        try:
            connection_id = await client.handshake()
            await serve_task
        finally:
            await client.close()
            await server.close()
        return connection_id

    connection_id = asyncio.run(asyncio.wait_for(scenario(), TIMEOUT))

    assert connection_id == CONNECTION_ID
    assert client.connection_id == CONNECTION_ID
    assert server.datagrams == [
        FrameworkMessage(DiscoverHost()),
        FrameworkMessage(RegisterUDP(id=CONNECTION_ID)),
    ]

    message = decode_message(server.frames[0])
    assert isinstance(message, PacketMessage)
    assert message.compressed is False
    packet = message.packet
    assert isinstance(packet, ConnectPacket)
    assert packet.player_name == 'tester'
    assert packet.color == 0xFF00FFFF
    assert packet.version_build == 135
    assert packet.version_type == 'official'


def test_compressed_connect_packet():
    server = FakeServer()
    client = HandshakeClient(server.config(compress=True))

    async def scenario():
        serve_task = asyncio.create_task(server.serve_handshake())
        try:
            await client.handshake()
            await serve_task
        finally:
            await client.close()
            await server.close()

    asyncio.run(asyncio.wait_for(scenario(), TIMEOUT))

    message = decode_message(server.frames[0])
    assert message.compressed is True
    assert message.packet.player_name == 'robot'


def test_server_closing_mid_handshake():
    server = FakeServer()
    client = HandshakeClient(server.config())

    async def hang_up():
        conn, _ = await server.listener.accept()
        await conn.close()

    async def scenario():
        hang_up_task = asyncio.create_task(hang_up())
        try:
            with pytest.raises(HandshakeError):
                await client.connect()
            await hang_up_task
        finally:
            await client.close()
            await server.close()

    asyncio.run(asyncio.wait_for(scenario(), TIMEOUT))
    assert client.connection_id is None


def test_send_before_connect():
    client = HandshakeClient(ClientConfig())

    async def scenario():
        with pytest.raises(HandshakeError):
            await client.send_connect()

    asyncio.run(scenario())


def test_build_connect_packet_uses_config():
    client = HandshakeClient(ClientConfig(player_name='alice', locale='de', mobile=True, usid='abc'))
    first = client.build_connect_packet()
    second = client.build_connect_packet()

    assert first.player_name == 'alice'
    assert first.locale == 'de'
    assert first.mobile is True
    assert first.usid == 'abc'
    assert first.uuid != second.uuid


def test_shutdown_signal_during_handshake(monkeypatch):
    server = FakeServer()
    monkeypatch.setenv('SERVER_HOST', '127.0.0.1')
    monkeypatch.setenv('SERVER_PORT', str(server.port))
    monkeypatch.delenv('CLIENT_UDP_PORT', raising=False)
    app = ClientApplication()
    accepted = []

    async def scenario():
        main_task = asyncio.current_task()

        async def signal_after_accept():
            # Accept the connection but never send RegisterTCP
            conn, _ = await server.listener.accept()
            accepted.append(conn)
            await asyncio.sleep(0.2)
            app.handle_shutdown(signal.SIGTERM, None)
            await asyncio.sleep(TIMEOUT)
            main_task.cancel()

        helper = asyncio.create_task(signal_after_accept())
        try:
            await app.run()
        finally:
            helper.cancel()
            await asyncio.gather(helper, return_exceptions=True)
            for conn in accepted:
                await conn.close()
            await server.close()

    with pytest.raises(SystemExit) as exc_info:
        asyncio.run(scenario())

    assert exc_info.value.code == 0
    assert len(accepted) == 1
    assert app.client.connection_id is None
