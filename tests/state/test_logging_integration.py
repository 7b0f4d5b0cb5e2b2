"""Tests for audit logging of windows and state transitions."""

from unittest.mock import Mock, patch

from token_reconciler.config.defaults import LoggingParams
from token_reconciler.config.loader import ConfigLoader
from token_reconciler.logging.config import (
    configure_logging, get_state_logger, log_state_transition, log_window_change, setup_logging
)
from token_reconciler.state.machine import TokenStateMachine
from token_reconciler.utils.time import FakeClock


def _bind_kwargs(mock_logger):
    return [c.kwargs for c in mock_logger.bind.call_args_list]


class TestLoggingIntegration:
    """Test logging performed by the state machine."""

    def setup_method(self):
        """Set up a machine whose logger is captured."""
        configure_logging(level="DEBUG", format_json=True)
        self.clock = FakeClock(1_000)
        self.machine = TokenStateMachine(now_fn=self.clock, session_id="log-test")
        self.mock_logger = Mock()
        self.machine.logger = self.mock_logger

    def test_recorder_logs_window_change(self):
        self.machine.record_secure_set()

        kwargs = _bind_kwargs(self.mock_logger)
        assert len(kwargs) == 1
        assert kwargs[0]['action'] == 'record_secure_set'
        assert kwargs[0]['secure_assume_until'] == 4_000
        assert kwargs[0]['legacy_override'] == 'suppress'
        assert kwargs[0]['legacy_until'] == 6_000
        self.mock_logger.bind.return_value.info.assert_called_once_with("Grace windows updated")

    def test_transition_logged_with_trigger(self):
        self.machine.record_migration_keep()
        self.mock_logger.reset_mock()

        self.machine.derive_token_state(True, False)

        kwargs = _bind_kwargs(self.mock_logger)
        assert kwargs[0]['from_state'] == 'unknown'
        assert kwargs[0]['to_state'] == 'BOTH'
        assert kwargs[0]['trigger'] == 'record_migration_keep'
        assert kwargs[0]['session_id'] == 'log-test'

    def test_unchanged_state_not_logged(self):
        self.machine.derive_token_state(False, False)
        self.mock_logger.reset_mock()

        self.machine.derive_token_state(False, False)

        self.mock_logger.bind.assert_not_called()

    def test_expired_window_transition_trigger(self):
        self.machine.record_secure_set()
        self.machine.derive_token_state(False, False)
        self.clock.advance(10_000)
        self.mock_logger.reset_mock()

        self.machine.derive_token_state(False, True)

        kwargs = _bind_kwargs(self.mock_logger)
        assert len(kwargs) == 1
        assert kwargs[0]['from_state'] == 'SECURE_ONLY'
        assert kwargs[0]['to_state'] == 'LEGACY_ONLY'
        assert kwargs[0]['trigger'] == 'window_expired'

    def test_keep_during_suppress_warns(self):
        self.machine.record_secure_set()
        self.machine.record_migration_keep()

        self.mock_logger.warning.assert_called_once()
        args, kwargs = self.mock_logger.warning.call_args
        assert "suppress" in args[0]
        assert kwargs['suppress_remaining'] == 5000


class TestLogHelpers:
    """Test standalone logging helpers."""

    def test_log_state_transition_binds_context(self):
        mock_logger = Mock()
        log_state_transition(mock_logger, "s1", "NONE", "SECURE_ONLY", "record_secure_set",
                             context={"secure_assumed": True})

        mock_logger.bind.assert_called_once_with(
            session_id="s1", from_state="NONE", to_state="SECURE_ONLY",
            trigger="record_secure_set",
        )
        mock_logger.bind.return_value.bind.assert_called_once_with(
            context={"secure_assumed": True}
        )

    def test_log_window_change(self):
        mock_logger = Mock()
        log_window_change(mock_logger, "s1", "reset", 0, "none", 0)

        mock_logger.bind.return_value.info.assert_called_once_with("Grace windows updated")

    def test_state_logger_usable(self):
        configure_logging(level="INFO", format_json=False)
        logger = get_state_logger(__name__)
        logger.info("Token state logger ready", check=True)

    def test_setup_logging_uses_logging_params(self):
        with patch("token_reconciler.logging.config.configure_logging") as configure:
            setup_logging(LoggingParams(level="DEBUG", format_json=True))

        configure.assert_called_once_with(level="DEBUG", format_json=True)

    def test_setup_logging_from_loaded_config(self, tmp_path):
        config = ConfigLoader.create(tmp_path).load(
            {"logging": {"level": "WARNING", "format_json": True}}
        )

        with patch("token_reconciler.logging.config.configure_logging") as configure:
            setup_logging(config.logging)

        configure.assert_called_once_with(level="WARNING", format_json=True)

    def test_setup_logging_defaults(self):
        with patch("token_reconciler.logging.config.configure_logging") as configure:
            setup_logging()

        configure.assert_called_once_with(level="INFO", format_json=False)
