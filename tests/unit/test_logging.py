"""
Unit tests for logging helpers.
"""

import logging
from collections.abc import Iterator

import pytest
import structlog

from shared.logging import censor_secrets, get_logger, setup_logging
from shared.logging.logger import REDACTED


class TestCensorSecrets:
    """Tests for the redaction processor."""

    def test_signatures_redacted(self) -> None:
        """Test signature keys are hidden."""
        event = censor_secrets(
            None,
            "info",
            {"event": "proof_modified", "signature": "c2ln", "wallet_signature": "d2Fs"},
        )

        assert event["event"] == "proof_modified"
        assert event["signature"] == REDACTED
        assert event["wallet_signature"] == REDACTED

    def test_nested_redacted(self) -> None:
        """Test nested dicts are censored."""
        event = censor_secrets(
            None,
            "info",
            {"extra": {"signature": "c2ln", "note": "ok"}, "identity": "octocat"},
        )

        assert event["extra"] == {"signature": REDACTED, "note": "ok"}
        assert event["identity"] == "octocat"

    def test_sign_payload_kept(self) -> None:
        """Test the unsigned payload body is not treated as a secret."""
        event = censor_secrets(None, "debug", {"sign_payload": '{"action": "create"}'})

        assert event["sign_payload"] == '{"action": "create"}'


class TestSetupLogging:
    """Tests for logging setup."""

    @pytest.fixture
    def restore_logging(self) -> Iterator[None]:
        """Put structlog and the root logger back as they were."""
        root_logger = logging.getLogger()
        handlers = list(root_logger.handlers)
        level = root_logger.level
        structlog_config = structlog.get_config()

        yield

        structlog.reset_defaults()
        structlog.configure(**structlog_config)
        root_logger.handlers[:] = handlers
        root_logger.setLevel(level)

    def test_json_logs(self, capsys, restore_logging: None) -> None:
        """Test JSON output carries service context."""
        setup_logging(log_level="INFO", json_logs=True, service_name="proof-test")

        get_logger("tests.logging").info("proof_bound", identity="octocat")

        out = capsys.readouterr().out
        assert '"event": "proof_bound"' in out
        assert '"service": "proof-test"' in out
