# Copyright 2025 Loopper-AI
# Tests for the process entry point

from __future__ import annotations

from unittest.mock import MagicMock, patch

import pytest

REQUIRED_ENV = {
    "SQS_ACCESS_KEY_ID": "AKIAEXAMPLE",
    "SQS_SECRET_ACCESS_KEY": "secret",
    "SQS_QUEUE_URL": "https://sqs.us-east-1.amazonaws.com/123456789012/test-queue",
    "HTTP_URL": "http://x/ingest",
}


class TestMain:
    """Test suite for main."""

    @patch("sqs_forwarder.__main__.SQSService")
    def test_missing_config_fails_before_polling(self, mock_sqs, tmp_path):
        from sqs_forwarder.__main__ import main
        from sqs_forwarder.config import MissingConfigurationError

        with patch.dict("os.environ", {}, clear=True):
            with pytest.raises(MissingConfigurationError):
                main(["--config", str(tmp_path / "appsettings.json")])

        mock_sqs.from_settings.assert_not_called()

    @patch.dict("os.environ", REQUIRED_ENV, clear=True)
    @patch("sqs_forwarder.__main__.Forwarder")
    @patch("sqs_forwarder.__main__.SQSService")
    def test_once(self, mock_sqs, mock_forwarder, tmp_path):
        from sqs_forwarder.__main__ import main

        forwarder = MagicMock()
        mock_forwarder.return_value = forwarder

        assert main(["--config", str(tmp_path / "appsettings.json"), "--once"]) == 0

        mock_sqs.from_settings.assert_called_once()
        forwarder.run.assert_called_once_with(max_cycles=1)

    @patch.dict("os.environ", REQUIRED_ENV, clear=True)
    @patch("sqs_forwarder.__main__.Forwarder")
    @patch("sqs_forwarder.__main__.SQSService")
    def test_interrupt_exits_cleanly(self, mock_sqs, mock_forwarder, tmp_path):
        from sqs_forwarder.__main__ import main

        mock_forwarder.return_value.run.side_effect = KeyboardInterrupt

        assert main(["--config", str(tmp_path / "appsettings.json")]) == 0
        mock_forwarder.return_value.run.assert_called_once_with(max_cycles=None)

    @patch.dict("os.environ", REQUIRED_ENV, clear=True)
    @patch("sqs_forwarder.__main__.Forwarder")
    @patch("sqs_forwarder.__main__.SQSService")
    def test_fatal_error_logged_once_without_traceback(self, mock_sqs, mock_forwarder, tmp_path, caplog):
        from sqs_forwarder.__main__ import main
        from sqs_forwarder.forwarder import InvalidMessageError

        mock_forwarder.return_value.run.side_effect = InvalidMessageError("msg-001", "Expecting value")

        with pytest.raises(InvalidMessageError):
            main(["--config", str(tmp_path / "appsettings.json")])

        fatal = [r for r in caplog.records if r.levelname == "ERROR"]
        assert len(fatal) == 1
        assert "msg-001" in fatal[0].getMessage()
        assert fatal[0].exc_info is None

    def test_config_error_logged_without_traceback(self, tmp_path, caplog):
        from sqs_forwarder.__main__ import main
        from sqs_forwarder.config import MissingConfigurationError

        with patch.dict("os.environ", {}, clear=True):
            with pytest.raises(MissingConfigurationError):
                main(["--config", str(tmp_path / "appsettings.json")])

        errors = [r for r in caplog.records if r.levelname == "ERROR"]
        assert len(errors) == 1
        assert "SQS_QUEUE_URL" in errors[0].getMessage()
        assert errors[0].exc_info is None
