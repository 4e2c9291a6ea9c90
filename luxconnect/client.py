"""
Heat pump session.

This module provides the session that keeps a connection to the heat pump
controller, drives its login handshake and keeps the published snapshot
up to date.

The session implements a state machine driven from two sides:

    drive() (periodic)               transport events (queued)
    -------------------              -------------------------
    NEW           connect            Opened        -> OPEN, send LOGIN
    OPEN          send LOGIN         Navigation    -> LOGGED_IN, send GET
    LOGGED_IN     send GET;<addr>    Content       -> DATA_SELECTED, publish
    DATA_SELECTED send REFRESH       Values        -> merge into snapshot
    ERROR         count down         Failed/Closed -> NEW, or ERROR at threshold

drive() performs exactly one step and never waits for the reply; replies
arrive later as transport events. Events are queued and applied by a single
consumer (run_events or process_pending_events), so session state is only
touched from one asyncio loop. Every connect attempt starts a new
connection generation; events from older generations are discarded.

Example:
    >>> import asyncio
    >>> from luxconnect import HeatpumpSession, SessionConfig
    >>>
    >>> async def main(locale):
    ...     config = SessionConfig(host="192.168.1.20")
    ...     session = HeatpumpSession.from_config(config, locale)
    ...     task = asyncio.create_task(session.run())
    ...     await asyncio.to_thread(session.store.wait_for_data, 60)
    ...     print(session.store.snapshot().as_dict())
    ...     await session.shutdown()
"""

from __future__ import annotations

import asyncio
import logging
from contextlib import suppress
from dataclasses import dataclass
from enum import Enum, auto
from typing import TYPE_CHECKING

from luxconnect.config import SessionConfig
from luxconnect.exceptions import LuxConnectError, MalformedMessageError
from luxconnect.models.snapshot import SnapshotStore
from luxconnect.parsers.field_registry import create_default_registry
from luxconnect.parsers.message_parser import parse_content, parse_navigation, parse_values
from luxconnect.protocol.constants import Command, MessageKind
from luxconnect.transport.abc import Closed, Failed, MessageReceived, Opened
from luxconnect.transport.websocket import WebSocketTransport

if TYPE_CHECKING:
    from luxconnect.parsers.field_registry import FieldRegistry
    from luxconnect.transport.abc import AbstractTransport, TransportEvent
    from luxconnect.translations import LocaleLookup

# Module logger
logger = logging.getLogger(__name__)


class SessionState(Enum):
    """Heat pump session states."""

    NEW = auto()
    """No connection; the next drive connects."""

    OPEN = auto()
    """Connected, not logged in."""

    LOGGED_IN = auto()
    """Logged in; data-set address known."""

    DATA_SELECTED = auto()
    """Data set selected and snapshot published; refreshing."""

    ERROR = auto()
    """Too many consecutive transport errors; cooling down."""


@dataclass(frozen=True)
class QueuedEvent:
    """A transport event stamped with the connection generation it belongs to."""

    generation: int
    event: TransportEvent


class HeatpumpSession:
    """
    Persistent session with one heat pump controller.

    Attributes:
        state: Current protocol state.
        error_count: Consecutive transport errors.
        cooldown: Drive cycles left before leaving ERROR.
        address: Data-set address from the navigation reply.
        store: Snapshot store read by consumers.
        is_active: False once shutdown() was called.
    """

    def __init__(
        self,
        transport: AbstractTransport,
        registry: FieldRegistry,
        locale: LocaleLookup,
        config: SessionConfig,
        store: SnapshotStore | None = None,
    ) -> None:
        """
        Initialize the session.

        Args:
            transport: Transport to the controller.
            registry: Field registry for resolving labels.
            locale: Translation table for value decoding.
            config: Session settings.
            store: Snapshot store to publish into; a new one by default.
        """
        self._transport = transport
        self._registry = registry
        self._locale = locale
        self._config = config
        self._store = store if store is not None else SnapshotStore()

        self._state = SessionState.NEW
        self._error_count = 0
        self._cooldown = config.error_cooldown_cycles
        self._address: str | None = None
        self._active = True
        self._generation = 0
        self._connect_task: asyncio.Task[None] | None = None
        self._queue: asyncio.Queue[QueuedEvent] = asyncio.Queue()
        self._stopped = asyncio.Event()

        logger.info("Initializing session for %s with state %s", transport.endpoint, self._state.name)

    @classmethod
    def from_config(
        cls,
        config: SessionConfig,
        locale: LocaleLookup,
        registry: FieldRegistry | None = None,
    ) -> HeatpumpSession:
        """
        Create a session with a websocket transport.

        Args:
            config: Session settings.
            locale: Translation table matching the controller's language.
            registry: Field registry; built from the locale by default.

        Raises:
            MissingTranslationError: If the locale lacks a label the default
                registry needs.
        """
        transport = WebSocketTransport(
            config.url,
            sub_protocol=config.sub_protocol,
            connect_timeout=config.connect_timeout,
        )
        if registry is None:
            registry = create_default_registry(locale)
        return cls(transport, registry, locale, config)

    @property
    def state(self) -> SessionState:
        """Get the current protocol state."""
        return self._state

    @property
    def error_count(self) -> int:
        return self._error_count

    @property
    def cooldown(self) -> int:
        return self._cooldown

    @property
    def address(self) -> str | None:
        """Get the selected data-set address."""
        return self._address

    @property
    def store(self) -> SnapshotStore:
        """Get the snapshot store."""
        return self._store

    @property
    def is_active(self) -> bool:
        """Check if the session has not been shut down."""
        return self._active

    @property
    def transport(self) -> AbstractTransport:
        """Get the underlying transport."""
        return self._transport

    @property
    def config(self) -> SessionConfig:
        return self._config

    async def drive(self) -> None:
        """
        Perform one step appropriate to the current state.

        Never waits for a reply. Calling it again before the reply arrives
        repeats the step; only a received reply advances the state. A no-op
        after shutdown.
        """
        if not self._active:
            return

        match self._state:
            case SessionState.NEW:
                self._start_connect()
            case SessionState.OPEN:
                await self._send(Command.LOGIN)
            case SessionState.LOGGED_IN:
                # An address is always set on entering LOGGED_IN
                await self._send(Command.select_data(self._address or ""))
            case SessionState.DATA_SELECTED:
                await self._send(Command.REFRESH)
            case SessionState.ERROR:
                self._cool_down()

    async def run_events(self) -> None:
        """Consume transport events until cancelled."""
        while True:
            queued = await self._queue.get()
            try:
                await self._dispatch(queued)
            finally:
                self._queue.task_done()

    async def process_pending_events(self) -> int:
        """
        Apply all events queued so far.

        Yields to the loop once first, so connect tasks and transport
        callbacks that are ready can post their events.

        Returns:
            Number of events taken from the queue.
        """
        await asyncio.sleep(0)
        count = 0
        while not self._queue.empty():
            queued = self._queue.get_nowait()
            try:
                await self._dispatch(queued)
            finally:
                self._queue.task_done()
            count += 1
        return count

    async def run(self, interval: float | None = None) -> None:
        """
        Run the event consumer and drive periodically until shutdown.

        Args:
            interval: Seconds between drives; defaults to the configured
                drive interval.
        """
        interval = interval if interval is not None else self._config.drive_interval
        consumer = asyncio.create_task(self.run_events())
        logger.info("Running session for %s every %.1fs", self._transport.endpoint, interval)

        try:
            while self._active:
                await self.drive()
                with suppress(asyncio.TimeoutError):
                    await asyncio.wait_for(self._stopped.wait(), timeout=interval)
        finally:
            consumer.cancel()
            with suppress(asyncio.CancelledError):
                await consumer

    async def shutdown(self) -> None:
        """
        Stop the session.

        Further drives are no-ops, queued and late events are ignored and
        send failures are no longer reported. The connection is aborted.
        """
        if not self._active:
            return

        logger.info("Terminating session for %s", self._transport.endpoint)
        self._active = False
        self._stopped.set()
        self._transport.set_listener(None)

        task, self._connect_task = self._connect_task, None
        if task is not None and not task.done():
            task.cancel()
            with suppress(asyncio.CancelledError):
                await task

        await self._transport.abort()

    # Event handling

    def _post(self, generation: int, event: TransportEvent) -> None:
        self._queue.put_nowait(QueuedEvent(generation, event))

    async def _dispatch(self, queued: QueuedEvent) -> None:
        if not self._active:
            return
        if queued.generation != self._generation:
            logger.debug("Ignoring %r from stale connection %d", queued.event, queued.generation)
            return

        try:
            match queued.event:
                case Opened():
                    await self._on_open()
                case MessageReceived(text=text):
                    await self._on_message(text)
                case Failed(error=error):
                    await self._on_error(f"connection failed: {error}")
                case Closed(reason=reason):
                    await self._on_error(f"connection closed: {reason}")
        except LuxConnectError as e:
            logger.error(
                "Failed to handle %s in state %s: %s", type(queued.event).__name__, self._state.name, e
            )

    async def _on_open(self) -> None:
        logger.info("Opened connection to %s", self._transport.endpoint)
        self._transition(SessionState.OPEN)
        await self._send(Command.LOGIN)

    async def _on_message(self, text: str) -> None:
        kind = MessageKind.classify(text)
        logger.debug("Handling %s message in state %s", kind.name, self._state.name)

        try:
            match kind:
                case MessageKind.NAVIGATION:
                    await self._on_navigation(text)
                case MessageKind.CONTENT:
                    self._on_content(text)
                case MessageKind.VALUES:
                    self._on_values(text)
                case MessageKind.UNKNOWN:
                    logger.debug("Ignoring unknown message: %.40r", text)
        except MalformedMessageError as e:
            logger.warning("Skipping malformed message: %s", e)

    async def _on_navigation(self, text: str) -> None:
        if self._state is not SessionState.OPEN:
            logger.debug("Ignoring navigation reply in state %s", self._state.name)
            return

        address = parse_navigation(text)
        if address is None:
            logger.warning("Navigation reply carries no data-set address, retrying login")
            return

        self._address = address
        self._transition(SessionState.LOGGED_IN)
        await self._send(Command.select_data(address))

    def _on_content(self, text: str) -> None:
        if self._state not in (SessionState.LOGGED_IN, SessionState.DATA_SELECTED):
            logger.debug("Ignoring content reply in state %s", self._state.name)
            return

        tree = parse_content(text, self._registry, self._locale)
        self._store.publish(tree)
        self._transition(SessionState.DATA_SELECTED)
        self._error_count = 0

    def _on_values(self, text: str) -> None:
        if self._state is not SessionState.DATA_SELECTED:
            logger.debug("Ignoring values reply in state %s", self._state.name)
            return

        values = parse_values(text)
        self._store.merge(values, self._locale)

    async def _on_error(self, reason: str) -> None:
        self._error_count += 1
        self._address = None
        # Anything still queued from the failed connection is stale now
        self._generation += 1
        await self._transport.abort()

        if self._error_count >= self._config.error_threshold:
            logger.error(
                "Giving up on %s after %d consecutive errors (%s), cooling down for %d cycles",
                self._transport.endpoint,
                self._error_count,
                reason,
                self._config.error_cooldown_cycles,
            )
            self._cooldown = self._config.error_cooldown_cycles
            self._transition(SessionState.ERROR)
        else:
            logger.warning(
                "Error %d/%d on %s: %s",
                self._error_count,
                self._config.error_threshold,
                self._transport.endpoint,
                reason,
            )
            self._transition(SessionState.NEW)

    # Steps

    def _start_connect(self) -> None:
        if self._connect_task is not None and not self._connect_task.done():
            logger.debug("Connect already in progress")
            return

        self._generation += 1
        generation = self._generation
        self._transport.set_listener(lambda event: self._post(generation, event))
        logger.debug("Connecting to %s (generation %d)", self._transport.endpoint, generation)
        self._connect_task = asyncio.create_task(self._connect(generation))

    async def _connect(self, generation: int) -> None:
        try:
            await self._transport.connect()
        except LuxConnectError as e:
            self._post(generation, Failed(e))

    def _cool_down(self) -> None:
        if self._cooldown > 0:
            self._cooldown -= 1
            logger.debug("Cooling down, %d cycles left", self._cooldown)
            return

        self._error_count = 0
        self._cooldown = self._config.error_cooldown_cycles
        self._transition(SessionState.NEW)

    async def _send(self, command: str) -> None:
        """Send a command, waiting at most the send timeout."""
        try:
            await asyncio.wait_for(
                self._transport.send_text(command),
                timeout=self._config.send_timeout,
            )
        except asyncio.TimeoutError:
            if self._active:
                logger.warning(
                    "Sending %r timed out after %.1fs", command, self._config.send_timeout
                )
        except LuxConnectError as e:
            if self._active:
                logger.warning("Sending %r failed: %s", command, e)

    def _transition(self, state: SessionState) -> None:
        if state is not self._state:
            logger.info("State %s -> %s", self._state.name, state.name)
        self._state = state

    async def __aenter__(self) -> HeatpumpSession:
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.shutdown()

    def __repr__(self) -> str:
        return (
            f"HeatpumpSession(endpoint={self._transport.endpoint!r}, "
            f"state={self._state.name}, errors={self._error_count})"
        )
