"""
Tests for the retry utilities with exponential backoff.

This module tests the retry decorator to ensure it rides out transient
failures with the expected backoff for both plain and async functions.
"""

from unittest.mock import AsyncMock, Mock, patch

import pytest

from pokescan.utils.error_handler import NetworkError
from pokescan.utils.retry import _backoff_delay, retry


class TestRetryDecorator:
    """Test the basic retry decorator functionality."""

    def test_retry_success_on_first_attempt(self):
        """Test that function succeeds on first attempt without retries."""
        @retry(max_attempts=3, base_delay=0.1)
        def test_func():
            return "success"

        assert test_func() == "success"

    def test_retry_success_after_failures(self):
        """Test that function succeeds after some failures."""
        attempt_count = 0

        @retry(max_attempts=3, base_delay=0.1, jitter=False)
        def test_func():
            nonlocal attempt_count
            attempt_count += 1
            if attempt_count < 3:
                raise ValueError("Temporary failure")
            return "success"

        with patch('pokescan.utils.retry.time.sleep') as mock_sleep:
            assert test_func() == "success"

        assert attempt_count == 3
        assert [c.args[0] for c in mock_sleep.call_args_list] == [0.1, 0.2]

    def test_retry_max_attempts_exceeded(self):
        """Test that retry stops after max attempts."""
        attempt_count = 0

        @retry(max_attempts=3, base_delay=0.1)
        def test_func():
            nonlocal attempt_count
            attempt_count += 1
            raise ValueError("Persistent failure")

        with patch('pokescan.utils.retry.time.sleep'):
            with pytest.raises(ValueError) as exc_info:
                test_func()

        assert str(exc_info.value) == "Persistent failure"
        assert attempt_count == 3

    def test_retry_ignores_unexpected_exceptions(self):
        """Exceptions outside the configured types are raised immediately."""
        attempt_count = 0

        @retry(max_attempts=3, exceptions=NetworkError)
        def test_func():
            nonlocal attempt_count
            attempt_count += 1
            raise KeyError("not retryable")

        with pytest.raises(KeyError):
            test_func()
        assert attempt_count == 1

    def test_retry_logs_attempts(self):
        logger = Mock()

        @retry(max_attempts=2, base_delay=0.1, logger=logger)
        def test_func():
            raise NetworkError("down")

        with patch('pokescan.utils.retry.time.sleep'):
            with pytest.raises(NetworkError):
                test_func()

        logger.warning.assert_called_once()
        logger.error.assert_called_once()
        assert logger.error.call_args.kwargs["attempts"] == 2


class TestAsyncRetry:
    """Test retry on coroutine functions."""

    @pytest.mark.asyncio
    async def test_async_retry_success_after_failure(self):
        calls = 0

        @retry(max_attempts=3, base_delay=0.5, exceptions=NetworkError)
        async def fetch():
            nonlocal calls
            calls += 1
            if calls == 1:
                raise NetworkError("flaky")
            return {"ok": True}

        with patch('pokescan.utils.retry.asyncio.sleep', new_callable=AsyncMock) as mock_sleep:
            assert await fetch() == {"ok": True}

        assert calls == 2
        mock_sleep.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_async_retry_exhausted(self):
        @retry(max_attempts=2, base_delay=0.1, exceptions=NetworkError)
        async def fetch():
            raise NetworkError("down")

        with patch('pokescan.utils.retry.asyncio.sleep', new_callable=AsyncMock):
            with pytest.raises(NetworkError):
                await fetch()


class TestBackoffDelay:

    def test_exponential_growth(self):
        assert _backoff_delay(1, 1.0, 60.0, 2.0, jitter=False) == 1.0
        assert _backoff_delay(3, 1.0, 60.0, 2.0, jitter=False) == 4.0

    def test_max_delay_cap(self):
        assert _backoff_delay(10, 1.0, 5.0, 2.0, jitter=False) == 5.0

    def test_jitter_range(self):
        for _ in range(20):
            assert 0.5 <= _backoff_delay(1, 1.0, 60.0, 2.0, jitter=True) <= 1.0
