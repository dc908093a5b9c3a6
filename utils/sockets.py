"""Async wrapper around standard sockets."""

from typing import Tuple
import asyncio
import socket

Address = Tuple[str, int]


class AsyncSocket:
    """
    Wrapper for standard socket to provide async interface.

    This class wraps a socket and provides async methods using asyncio's
    event loop integration. The wrapped socket is switched to non-blocking
    mode, as required by the loop's ``sock_*`` methods. Both stream and
    datagram sockets are supported.
    """

    def __init__(self, sock: socket.socket):
        """
        Initialize AsyncSocket wrapper.

        Args:
            sock: Standard socket to wrap
        """
        sock.setblocking(False)
        self.sock = sock

    @property
    def address(self) -> Address:
        """Local address the socket is bound to."""
        return self.sock.getsockname()

    async def connect(self, address: Address) -> None:
        """
        Connect the socket to a remote address.

        For a datagram socket this only fixes the default destination.

        Args:
            address: Remote (host, port) tuple
        """
        loop = asyncio.get_event_loop()
        await loop.sock_connect(self.sock, address)

    async def accept(self) -> Tuple['AsyncSocket', Address]:
        """
        Accept one connection on a listening socket.

        Returns:
            Tuple of (connection, peer address)
        """
        loop = asyncio.get_event_loop()
        conn, addr = await loop.sock_accept(self.sock)
        return AsyncSocket(conn), addr

    async def recv(self, n: int) -> bytes:
        """
        Receive up to n bytes asynchronously.

        Args:
            n: Maximum number of bytes to receive

        Returns:
            Received data, empty on end of stream
        """
        loop = asyncio.get_event_loop()
        return await loop.sock_recv(self.sock, n)

    async def sendall(self, data: bytes) -> None:
        """
        Send all data asynchronously.

        Args:
            data: Data to send
        """
        loop = asyncio.get_event_loop()
        return await loop.sock_sendall(self.sock, data)

    async def recvfrom(self, n: int) -> Tuple[bytes, Address]:
        """
        Receive one datagram asynchronously.

        Args:
            n: Maximum datagram size

        Returns:
            Tuple of (payload, source address)
        """
        loop = asyncio.get_event_loop()
        return await loop.sock_recvfrom(self.sock, n)

    async def sendto(self, data: bytes, address: Address) -> int:
        """
        Send one datagram asynchronously.

        Args:
            data: Datagram payload
            address: Destination (host, port) tuple

        Returns:
            Number of bytes sent
        """
        loop = asyncio.get_event_loop()
        return await loop.sock_sendto(self.sock, data, address)

    async def send(self, data: bytes) -> None:
        """Send one datagram to the address the socket is connected to."""
        loop = asyncio.get_event_loop()
        await loop.sock_sendall(self.sock, data)

    async def close(self) -> None:
        """Close the socket."""
        return self.sock.close()

