"""
Websocket transport using aiohttp.

This module provides the transport implementation for talking to the heat
pump controller over its websocket interface.

Connection settings:
- URL: ws://<host>:8214
- Sub-protocol: Lux_WS (the controller rejects other handshakes)
- Text frames only; binary frames are decoded as UTF-8

A background reader task consumes incoming messages and emits them as
MessageReceived events. aiohttp joins continuation frames itself, so each
message reaches the MessageAssembler as one final chunk. When the device
closes the socket or the read fails, a single Closed or Failed event is
emitted and the reader stops. Aborting the transport emits nothing.

Example:
    >>> transport = WebSocketTransport("ws://192.168.1.20:8214")
    >>> transport.set_listener(queue.put_nowait)
    >>> await transport.connect()
    >>> await transport.send_text("LOGIN;0")
"""

from __future__ import annotations

import asyncio
import logging
from contextlib import suppress

import aiohttp

from luxconnect.exceptions import ConnectionError, TimeoutError, TransportError
from luxconnect.protocol.constants import ProtocolConstants
from luxconnect.protocol.message_reader import MessageAssembler
from luxconnect.transport.abc import AbstractTransport, Closed, Failed, MessageReceived, Opened

# Module logger
logger = logging.getLogger(__name__)


class WebSocketTransport(AbstractTransport):
    """
    Async websocket transport using aiohttp.

    Attributes:
        endpoint: Websocket URL of the controller.
        is_open: Whether the websocket is currently open.

    Example:
        >>> transport = WebSocketTransport("ws://192.168.1.20:8214", connect_timeout=10.0)
        >>> async with transport:
        ...     await transport.send_text("REFRESH")
    """

    def __init__(
        self,
        url: str,
        sub_protocol: str = ProtocolConstants.SUB_PROTOCOL,
        connect_timeout: float = ProtocolConstants.DEFAULT_CONNECT_TIMEOUT,
    ) -> None:
        """
        Initialize the websocket transport.

        Args:
            url: Websocket URL (e.g., "ws://192.168.1.20:8214").
            sub_protocol: Websocket sub-protocol to negotiate (default: Lux_WS).
            connect_timeout: Seconds to wait for the handshake (default: 30.0).
        """
        super().__init__()
        self._url = url
        self._sub_protocol = sub_protocol
        self._connect_timeout = connect_timeout
        self._session: aiohttp.ClientSession | None = None
        self._ws: aiohttp.ClientWebSocketResponse | None = None
        self._reader_task: asyncio.Task[None] | None = None
        self._assembler = MessageAssembler()

    @property
    def is_open(self) -> bool:
        """Check if the websocket is currently open."""
        return self._ws is not None and not self._ws.closed

    @property
    def endpoint(self) -> str:
        """Get the websocket URL."""
        return self._url

    async def connect(self) -> None:
        """
        Open the websocket and start the reader task.

        Any previous connection is aborted first.

        Raises:
            ConnectionError: If the handshake fails.
            TimeoutError: If the handshake does not complete within the
                connect timeout.
        """
        await self.abort()

        session = aiohttp.ClientSession()
        self._session = session
        logger.debug("Connecting to %s (%s)", self._url, self._sub_protocol)

        try:
            ws = await asyncio.wait_for(
                session.ws_connect(self._url, protocols=(self._sub_protocol,), autoclose=True),
                timeout=self._connect_timeout,
            )
        except asyncio.TimeoutError:
            await self._close_session()
            raise TimeoutError(
                f"Timeout connecting to {self._url}",
                timeout_seconds=self._connect_timeout,
            ) from None
        except aiohttp.ClientError as e:
            await self._close_session()
            raise ConnectionError(f"Failed to connect to {self._url}: {e}") from e
        except OSError as e:
            await self._close_session()
            raise ConnectionError(f"OS error connecting to {self._url}: {e}") from e
        except asyncio.CancelledError:
            await self._close_session()
            raise

        self._ws = ws
        self._assembler.reset()
        self._reader_task = asyncio.create_task(self._read_loop(ws))
        logger.info("Opened websocket connection to %s", self._url)
        self.emit(Opened())

    async def send_text(self, text: str) -> None:
        """
        Send one text frame.

        Args:
            text: Command to send.

        Raises:
            TransportError: If the websocket is not open or the send fails.
        """
        if not self.is_open:
            raise TransportError(f"Websocket to {self._url} is not open")

        logger.debug("Sending %r", text)
        try:
            await self._ws.send_str(text)
        except (aiohttp.ClientError, ConnectionResetError, RuntimeError) as e:
            raise TransportError(f"Send failed: {e}") from e

    async def abort(self) -> None:
        """
        Tear down the websocket and its session.

        The reader task is cancelled before the socket is closed, so no
        Closed event is emitted.
        """
        reader, self._reader_task = self._reader_task, None
        if reader is not None and reader is not asyncio.current_task():
            reader.cancel()
            with suppress(asyncio.CancelledError):
                await reader

        ws, self._ws = self._ws, None
        if ws is not None and not ws.closed:
            with suppress(aiohttp.ClientError, RuntimeError):
                await ws.close(code=aiohttp.WSCloseCode.GOING_AWAY)

        await self._close_session()
        self._assembler.reset()

    async def _close_session(self) -> None:
        session, self._session = self._session, None
        if session is not None and not session.closed:
            await session.close()

    async def _read_loop(self, ws: aiohttp.ClientWebSocketResponse) -> None:
        """Consume frames until the socket closes or fails."""
        try:
            async for msg in ws:
                if msg.type == aiohttp.WSMsgType.TEXT:
                    self._deliver(msg.data)
                elif msg.type == aiohttp.WSMsgType.BINARY:
                    try:
                        text = msg.data.decode("utf-8")
                    except UnicodeDecodeError:
                        logger.debug("Ignoring undecodable binary frame (%d bytes)", len(msg.data))
                        continue
                    self._deliver(text)
                elif msg.type == aiohttp.WSMsgType.ERROR:
                    error = ws.exception() or TransportError("Websocket error")
                    logger.warning("Websocket error on %s: %s", self._url, error)
                    self.emit(Failed(error))
                    return
        except (aiohttp.ClientError, ConnectionResetError) as e:
            logger.warning("Websocket read failed on %s: %s", self._url, e)
            self.emit(Failed(TransportError(f"Read failed: {e}")))
            return

        reason = f"code {ws.close_code}" if ws.close_code is not None else "closed by peer"
        logger.info("Websocket connection to %s closed (%s)", self._url, reason)
        self.emit(Closed(reason))

    def _deliver(self, text: str) -> None:
        message = self._assembler.feed(text, final=True)
        if message is not None:
            self.emit(MessageReceived(message.body))

    def __repr__(self) -> str:
        return f"WebSocketTransport(url={self._url!r}, open={self.is_open})"
