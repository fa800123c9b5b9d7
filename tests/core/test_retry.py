"""Tests for retry utilities."""

from unittest.mock import MagicMock, patch

import pytest

from fare_engine.core.exceptions import InvalidRequest, SnapshotContention, TransientError
from fare_engine.core.retry import RetryConfig, with_retry_sync


@pytest.mark.unit
class TestRetryConfig:
    """Test RetryConfig defaults and customization."""

    def test_default_config(self):
        config = RetryConfig()
        assert config.max_attempts == 3
        assert config.base_delay == 0.5
        assert config.multiplier == 2.0
        assert config.max_delay == 30.0
        assert config.retryable_exceptions == (TransientError,)

    def test_custom_config(self):
        config = RetryConfig(max_attempts=5, base_delay=0.0, retryable_exceptions=(ValueError,))
        assert config.max_attempts == 5
        assert config.base_delay == 0.0
        assert config.retryable_exceptions == (ValueError,)


@pytest.mark.unit
class TestWithRetrySync:
    def test_returns_on_first_success(self):
        operation = MagicMock(return_value="ok")
        assert with_retry_sync(operation) == "ok"
        assert operation.call_count == 1

    @patch("fare_engine.core.retry.time.sleep")
    def test_retries_transient_errors_until_success(self, mock_sleep):
        operation = MagicMock(side_effect=[SnapshotContention("a"), SnapshotContention("b"), "ok"])
        config = RetryConfig(max_attempts=3, base_delay=0.1, multiplier=2.0)

        assert with_retry_sync(operation, config) == "ok"
        assert operation.call_count == 3
        assert [call.args[0] for call in mock_sleep.call_args_list] == pytest.approx([0.1, 0.2])

    @patch("fare_engine.core.retry.time.sleep")
    def test_reraises_after_max_attempts(self, mock_sleep):
        operation = MagicMock(side_effect=SnapshotContention("lost"))

        with pytest.raises(SnapshotContention):
            with_retry_sync(operation, RetryConfig(max_attempts=4, base_delay=0.01))

        assert operation.call_count == 4
        assert mock_sleep.call_count == 3

    def test_permanent_errors_are_not_retried(self):
        operation = MagicMock(side_effect=InvalidRequest("bad"))

        with pytest.raises(InvalidRequest):
            with_retry_sync(operation, RetryConfig(max_attempts=3, base_delay=0.0))

        assert operation.call_count == 1

    @patch("fare_engine.core.retry.time.sleep")
    def test_zero_delay_does_not_sleep(self, mock_sleep):
        operation = MagicMock(side_effect=[SnapshotContention("a"), "ok"])
        with_retry_sync(operation, RetryConfig(base_delay=0.0))
        mock_sleep.assert_not_called()

    def test_delay_capped_at_max_delay(self):
        config = RetryConfig(max_attempts=3, base_delay=10.0, multiplier=10.0, max_delay=15.0)
        operation = MagicMock(side_effect=[SnapshotContention("a"), SnapshotContention("b"), "ok"])

        with patch("fare_engine.core.retry.time.sleep") as mock_sleep:
            with_retry_sync(operation, config)

        assert [call.args[0] for call in mock_sleep.call_args_list] == [10.0, 15.0]
