"""Unit tests for consumer configuration."""

import pytest

from src.big_payload.consumer.config import ConsumerConfig, get_consumer_config
from src.big_payload.shared.errors import ConfigurationError


class TestConsumerConfig:
    """Tests for ConsumerConfig validation."""

    def test_defaults(self):
        config = ConsumerConfig(queue_url="https://queue")
        assert config.batch_size == 10
        assert config.wait_time_seconds == 20
        assert config.visibility_timeout is None
        assert config.connection_error_timeout_seconds == 10.0
        assert config.poll_error_timeout_seconds == 1.0
        assert not config.get_payload_from_s3

    def test_queue_url_required(self):
        with pytest.raises(ConfigurationError, match="queue_url"):
            ConsumerConfig(queue_url="")

    @pytest.mark.parametrize("batch_size", [0, 11])
    def test_batch_size_bounds(self, batch_size):
        with pytest.raises(ConfigurationError, match="batch_size"):
            ConsumerConfig(queue_url="https://queue", batch_size=batch_size)

    @pytest.mark.parametrize("wait", [-1, 21])
    def test_wait_time_bounds(self, wait):
        with pytest.raises(ConfigurationError, match="wait_time_seconds"):
            ConsumerConfig(queue_url="https://queue", wait_time_seconds=wait)

    def test_negative_visibility_timeout(self):
        with pytest.raises(ConfigurationError, match="visibility_timeout"):
            ConsumerConfig(queue_url="https://queue", visibility_timeout=-5)

    def test_negative_poll_error_timeout(self):
        with pytest.raises(ConfigurationError, match="poll_error_timeout_seconds"):
            ConsumerConfig(queue_url="https://queue", poll_error_timeout_seconds=-1)


class TestGetConsumerConfig:
    def test_loads_environment(self, monkeypatch):
        monkeypatch.setenv("BIG_PAYLOAD_QUEUE_URL", "https://queue")
        monkeypatch.setenv("BIG_PAYLOAD_BATCH_SIZE", "5")
        monkeypatch.setenv("BIG_PAYLOAD_WAIT_TIME_SECONDS", "0")
        monkeypatch.setenv("BIG_PAYLOAD_VISIBILITY_TIMEOUT", "120")
        monkeypatch.setenv("BIG_PAYLOAD_GET_PAYLOAD_FROM_S3", "true")
        monkeypatch.setenv("BIG_PAYLOAD_EXTENDED_COMPATIBILITY", "1")
        monkeypatch.setenv("BIG_PAYLOAD_CONNECTION_ERROR_TIMEOUT", "2.5")
        monkeypatch.setenv("BIG_PAYLOAD_POLL_ERROR_TIMEOUT", "0.5")

        config = get_consumer_config()

        assert config.batch_size == 5
        assert config.wait_time_seconds == 0
        assert config.visibility_timeout == 120
        assert config.get_payload_from_s3
        assert config.extended_library_compatibility
        assert config.connection_error_timeout_seconds == 2.5
        assert config.poll_error_timeout_seconds == 0.5

    def test_missing_queue_url(self, monkeypatch):
        monkeypatch.delenv("BIG_PAYLOAD_QUEUE_URL", raising=False)
        with pytest.raises(ConfigurationError):
            get_consumer_config()

    def test_invalid_connection_timeout(self, monkeypatch):
        monkeypatch.setenv("BIG_PAYLOAD_QUEUE_URL", "https://queue")
        monkeypatch.setenv("BIG_PAYLOAD_CONNECTION_ERROR_TIMEOUT", "soon")
        with pytest.raises(ConfigurationError, match="must be a number"):
            get_consumer_config()
