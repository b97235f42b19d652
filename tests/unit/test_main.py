import signal
from unittest.mock import MagicMock, patch

import pytest

from resume_worker.exceptions import ConfigurationError
from resume_worker.main import install_signal_handlers, main


class TestSignalHandlers:
    @patch("resume_worker.main.signal.signal")
    def test_registers_sigterm_and_sigint(self, mock_signal: MagicMock) -> None:
        install_signal_handlers(MagicMock())

        registered = {c.args[0] for c in mock_signal.call_args_list}
        assert registered == {signal.SIGTERM, signal.SIGINT}

    @patch("resume_worker.main.signal.signal")
    def test_handler_requests_stop(self, mock_signal: MagicMock) -> None:
        pool = MagicMock()
        install_signal_handlers(pool)

        handler = mock_signal.call_args_list[0].args[1]
        handler(signal.SIGTERM, None)

        pool.request_stop.assert_called_once()
        pool.stop.assert_not_called()


class TestMain:
    @patch("resume_worker.main.Database")
    @patch("resume_worker.main.Settings")
    def test_missing_infrastructure_fails_before_connecting(
        self, mock_settings_cls: MagicMock, mock_database_cls: MagicMock
    ) -> None:
        settings = mock_settings_cls.return_value
        settings.log_level = "INFO"
        settings.require_infrastructure.side_effect = ConfigurationError("Missing QUEUE_URL")

        with pytest.raises(ConfigurationError):
            main()

        mock_database_cls.assert_not_called()

    @patch("resume_worker.main.install_signal_handlers")
    @patch("resume_worker.main.build_worker_pool")
    @patch("resume_worker.main.S3ArtifactStore")
    @patch("resume_worker.main.Database")
    @patch("resume_worker.main.Settings")
    def test_closes_pools_after_run(
        self,
        mock_settings_cls: MagicMock,
        mock_database_cls: MagicMock,
        mock_store_cls: MagicMock,
        mock_build_pool: MagicMock,
        _mock_signals: MagicMock,
    ) -> None:
        settings = mock_settings_cls.return_value
        settings.log_level = "INFO"
        settings.apply_schema_on_startup = True
        settings.worker_pool_size = 2
        databases = [MagicMock(), MagicMock()]
        mock_database_cls.side_effect = databases

        main()

        mock_store_cls.from_settings.return_value.check_connection.assert_called_once()
        mock_build_pool.return_value.run.assert_called_once()
        for database in databases:
            database.open.assert_called_once()
            database.apply_schema.assert_called_once()
            database.close.assert_called_once()
