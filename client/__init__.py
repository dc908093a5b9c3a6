"""Handshake client for registering with a game server."""

from client.handshake import HandshakeClient

__all__ = ['HandshakeClient']
