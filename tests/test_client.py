"""Tests for HeatpumpSession."""

import asyncio

import pytest

from luxconnect import HeatpumpSession, SessionState
from luxconnect.config import SessionConfig
from luxconnect.exceptions import ConnectionError, TransportError
from luxconnect.transport.mock import MockTransport
from luxconnect.transport.websocket import WebSocketTransport


class TestHeatpumpSession:
    """Tests for the session handshake."""

    @pytest.fixture
    def mock_transport(self):
        """Create a MockTransport instance."""
        return MockTransport()

    @pytest.fixture
    def session(self, mock_transport, registry, locale, config):
        """Create a HeatpumpSession with mock transport."""
        return HeatpumpSession(mock_transport, registry, locale, config)

    async def logged_in(self, session, mock_transport, navigation_xml):
        await session.drive()
        await session.process_pending_events()
        mock_transport.inject_message(navigation_xml)
        await session.process_pending_events()

    async def data_selected(self, session, mock_transport, navigation_xml, content_xml):
        await self.logged_in(session, mock_transport, navigation_xml)
        mock_transport.inject_message(content_xml)
        await session.process_pending_events()

    def test_initial_state(self, session, config):
        """Test session starts in NEW with a full cooldown."""
        assert session.state == SessionState.NEW
        assert session.error_count == 0
        assert session.cooldown == config.error_cooldown_cycles
        assert session.address is None
        assert session.is_active is True
        assert session.store.has_data is False

    @pytest.mark.asyncio
    async def test_drive_connects(self, session, mock_transport):
        """Test driving in NEW opens the transport and logs in."""
        await session.drive()
        processed = await session.process_pending_events()

        assert processed == 1
        assert mock_transport.connect_calls == 1
        assert session.state == SessionState.OPEN
        assert mock_transport.sent == ["LOGIN;0"]

    @pytest.mark.asyncio
    async def test_navigation_selects_data(self, session, mock_transport, navigation_xml):
        """Test the navigation reply selects the data set immediately."""
        await self.logged_in(session, mock_transport, navigation_xml)

        assert session.state == SessionState.LOGGED_IN
        assert session.address == "0x4e9b0"
        assert mock_transport.sent == ["LOGIN;0", "GET;0x4e9b0"]

    @pytest.mark.asyncio
    async def test_navigation_without_address_stays_open(self, session, mock_transport):
        """Test an empty navigation reply keeps the session OPEN."""
        await session.drive()
        await session.process_pending_events()
        mock_transport.inject_message("<Navigation></Navigation>")
        await session.process_pending_events()

        assert session.state == SessionState.OPEN
        assert session.address is None

        await session.drive()
        mock_transport.assert_sent("LOGIN;0")

    @pytest.mark.asyncio
    async def test_content_publishes_snapshot(
        self, session, mock_transport, navigation_xml, content_xml
    ):
        """Test the content reply publishes the tree."""
        await self.data_selected(session, mock_transport, navigation_xml, content_xml)

        assert session.state == SessionState.DATA_SELECTED
        assert session.store.has_data is True
        assert len(session.store.snapshot()) == 13

    @pytest.mark.asyncio
    async def test_refresh_merges_values(
        self, session, mock_transport, navigation_xml, content_xml, values_xml
    ):
        """Test refresh replies merge into the published tree."""
        await self.data_selected(session, mock_transport, navigation_xml, content_xml)
        tree = session.store.items()

        await session.drive()
        mock_transport.assert_sent("REFRESH")
        mock_transport.inject_message(values_xml)
        await session.process_pending_events()

        assert session.state == SessionState.DATA_SELECTED
        assert session.store.items() is tree
        assert tree.find("0x11").value == pytest.approx(32.0)

    @pytest.mark.asyncio
    async def test_duplicate_drive_does_not_advance(self, session, mock_transport):
        """Test repeated drives without a reply only repeat the step."""
        await session.drive()
        await session.drive()
        await session.process_pending_events()

        assert mock_transport.connect_calls == 1

        await session.drive()
        await session.drive()
        await session.process_pending_events()

        assert session.state == SessionState.OPEN
        assert mock_transport.sent == ["LOGIN;0", "LOGIN;0", "LOGIN;0"]

    @pytest.mark.asyncio
    async def test_replies_out_of_state_ignored(self, session, mock_transport, values_xml, content_xml):
        """Test content and values are ignored before login."""
        await session.drive()
        await session.process_pending_events()

        mock_transport.inject_message(values_xml)
        mock_transport.inject_message(content_xml)
        await session.process_pending_events()

        assert session.state == SessionState.OPEN
        assert session.store.has_data is False

    @pytest.mark.asyncio
    async def test_malformed_message_keeps_state(
        self, session, mock_transport, navigation_xml, content_xml
    ):
        """Test a malformed message is skipped without leaving the state."""
        await self.data_selected(session, mock_transport, navigation_xml, content_xml)

        mock_transport.inject_message("<values><item id=")
        await session.process_pending_events()

        assert session.state == SessionState.DATA_SELECTED
        assert session.error_count == 0

    @pytest.mark.asyncio
    async def test_unknown_message_ignored(self, session, mock_transport):
        """Test messages of unknown kind are ignored."""
        await session.drive()
        await session.process_pending_events()
        mock_transport.inject_message("<Status>ok</Status>")
        await session.process_pending_events()

        assert session.state == SessionState.OPEN


class TestErrorHandling:
    """Tests for the error path and cooldown."""

    @pytest.fixture
    def mock_transport(self):
        return MockTransport()

    @pytest.fixture
    def session(self, mock_transport, registry, locale, config):
        return HeatpumpSession(mock_transport, registry, locale, config)

    @pytest.mark.asyncio
    async def test_close_returns_to_new(self, session, mock_transport):
        """Test a close below the threshold returns to NEW."""
        await session.drive()
        await session.process_pending_events()

        mock_transport.inject_close()
        await session.process_pending_events()

        assert session.state == SessionState.NEW
        assert session.error_count == 1
        assert mock_transport.abort_calls == 1

    @pytest.mark.asyncio
    async def test_three_errors_enter_error(self, session, mock_transport):
        """Test three consecutive errors drive the session to ERROR."""
        for _ in range(3):
            await session.drive()
            await session.process_pending_events()
            mock_transport.inject_error(TransportError("reset"))
            await session.process_pending_events()

        assert session.state == SessionState.ERROR
        assert session.error_count == 3

    @pytest.mark.asyncio
    async def test_connect_failures_count(self, session, mock_transport):
        """Test failed connects take the error path."""
        mock_transport.fail_connect = ConnectionError("refused")

        for expected in (SessionState.NEW, SessionState.NEW, SessionState.ERROR):
            await session.drive()
            await session.process_pending_events()
            assert session.state == expected

        assert mock_transport.connect_calls == 3

    @pytest.mark.asyncio
    async def test_cooldown_returns_to_new(self, session, mock_transport, config):
        """Test the session leaves ERROR on the drive after the cooldown reaches zero."""
        mock_transport.fail_connect = ConnectionError("refused")
        for _ in range(3):
            await session.drive()
            await session.process_pending_events()
        assert session.state == SessionState.ERROR

        for remaining in range(config.error_cooldown_cycles - 1, -1, -1):
            await session.drive()
            assert session.state == SessionState.ERROR
            assert session.cooldown == remaining

        await session.drive()

        assert session.state == SessionState.NEW
        assert session.error_count == 0
        assert session.cooldown == config.error_cooldown_cycles
        assert mock_transport.connect_calls == 3

    @pytest.mark.asyncio
    async def test_content_resets_error_count(
        self, session, mock_transport, navigation_xml, content_xml
    ):
        """Test a successful data selection clears earlier errors."""
        await session.drive()
        await session.process_pending_events()
        mock_transport.inject_close()
        await session.process_pending_events()
        assert session.error_count == 1

        await session.drive()
        await session.process_pending_events()
        mock_transport.inject_message(navigation_xml)
        await session.process_pending_events()
        mock_transport.inject_message(content_xml)
        await session.process_pending_events()

        assert session.state == SessionState.DATA_SELECTED
        assert session.error_count == 0

    @pytest.mark.asyncio
    async def test_stale_events_ignored(self, session, mock_transport, navigation_xml):
        """Test events from a dead connection are dropped."""
        await session.drive()
        await session.process_pending_events()

        mock_transport.inject_close()
        mock_transport.inject_message(navigation_xml)
        await session.process_pending_events()

        assert session.state == SessionState.NEW
        assert session.address is None

    @pytest.mark.asyncio
    async def test_handler_error_keeps_consuming(
        self, registry, locale, config, mock_transport, navigation_xml, content_xml, caplog
    ):
        """Test a failing reply is logged and later events are still handled."""
        del locale["data.mode.list"]
        session = HeatpumpSession(mock_transport, registry, locale, config)
        await session.drive()
        await session.process_pending_events()
        mock_transport.inject_message(navigation_xml)
        await session.process_pending_events()

        mock_transport.inject_message(content_xml)
        mock_transport.inject_close()
        processed = await session.process_pending_events()

        assert processed == 2
        assert "Missing translation for key 'data.mode.list'" in caplog.text
        assert session.store.has_data is False
        assert session.state == SessionState.NEW
        assert session.error_count == 1

    @pytest.mark.asyncio
    async def test_send_failure_logged(self, session, mock_transport, caplog):
        """Test send failures are logged and do not change state."""
        await session.drive()
        await session.process_pending_events()
        mock_transport.fail_send = TransportError("broken pipe")

        await session.drive()

        assert session.state == SessionState.OPEN
        assert "Sending 'LOGIN;0' failed" in caplog.text


class TestShutdown:
    """Tests for shutdown behavior."""

    @pytest.fixture
    def mock_transport(self):
        return MockTransport()

    @pytest.fixture
    def session(self, mock_transport, registry, locale, config):
        return HeatpumpSession(mock_transport, registry, locale, config)

    @pytest.mark.asyncio
    async def test_shutdown_aborts(self, session, mock_transport):
        """Test shutdown aborts the transport and deactivates the session."""
        await session.drive()
        await session.process_pending_events()

        await session.shutdown()

        assert session.is_active is False
        assert mock_transport.abort_calls == 1
        assert mock_transport.is_open is False

    @pytest.mark.asyncio
    async def test_drive_after_shutdown_is_noop(self, session, mock_transport):
        """Test drive does nothing once shut down."""
        await session.shutdown()
        await session.drive()
        await session.process_pending_events()

        assert mock_transport.connect_calls == 0
        assert session.state == SessionState.NEW

    @pytest.mark.asyncio
    async def test_close_after_shutdown_not_counted(self, session, mock_transport):
        """Test closes caused by shutdown do not take the error path."""
        await session.drive()
        await session.process_pending_events()
        mock_transport.inject_close()

        await session.shutdown()
        await session.process_pending_events()

        assert session.error_count == 0
        assert session.state == SessionState.OPEN

    @pytest.mark.asyncio
    async def test_send_failure_silent_after_shutdown(self, session, mock_transport, caplog):
        """Test send failures are not reported once inactive."""
        await session.drive()
        await session.process_pending_events()
        await session.shutdown()

        await session._send("REFRESH")

        assert "failed" not in caplog.text

    @pytest.mark.asyncio
    async def test_context_manager(self, mock_transport, registry, locale, config):
        """Test leaving the context shuts the session down."""
        async with HeatpumpSession(mock_transport, registry, locale, config) as session:
            await session.drive()
            await session.process_pending_events()

        assert session.is_active is False

    @pytest.mark.asyncio
    async def test_run_until_shutdown(self, session, mock_transport, navigation_xml, content_xml):
        """Test run drives the handshake and stops on shutdown."""
        runner = asyncio.create_task(session.run(interval=0.01))
        await asyncio.sleep(0.05)
        mock_transport.inject_message(navigation_xml)
        await asyncio.sleep(0.05)
        mock_transport.inject_message(content_xml)
        await asyncio.sleep(0.05)

        assert session.state == SessionState.DATA_SELECTED
        assert "REFRESH" in mock_transport.sent

        await session.shutdown()
        await asyncio.wait_for(runner, timeout=1.0)
        assert runner.done()


class TestFromConfig:
    """Tests for building a session from configuration."""

    def test_websocket_transport(self, locale):
        """Test the session talks to the configured URL."""
        session = HeatpumpSession.from_config(SessionConfig(host="heatpump.local"), locale)

        assert isinstance(session.transport, WebSocketTransport)
        assert session.transport.endpoint == "ws://heatpump.local:8214"
        assert session.transport.is_open is False
        assert session.state == SessionState.NEW
