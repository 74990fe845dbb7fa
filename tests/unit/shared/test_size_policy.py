"""Unit tests for the size policy."""

import pytest

from src.big_payload.shared.size_policy import (
    OffloadMode,
    SizeDecision,
    SizePolicy,
    message_size,
)


class TestMessageSize:
    def test_ascii(self):
        assert message_size("abc") == 3

    def test_multibyte_counts_utf8_bytes(self):
        assert message_size("é") == 2
        assert message_size("日本") == 6


class TestSizePolicyDecide:
    """Tests for SizePolicy.decide."""

    def test_inline_at_threshold(self):
        policy = SizePolicy(threshold_bytes=1024, offload_large_only=True)
        assert policy.decide(1024) == SizeDecision.SEND_INLINE

    def test_offload_above_threshold_when_large_only(self):
        policy = SizePolicy(threshold_bytes=1024, offload_large_only=True)
        assert policy.decide(1025) == SizeDecision.OFFLOAD_TO_STORE

    def test_reject_above_threshold_when_off(self):
        policy = SizePolicy(threshold_bytes=1024)
        assert policy.decide(1025) == SizeDecision.REJECT_TOO_LARGE

    def test_inline_below_threshold_when_off(self):
        assert SizePolicy(threshold_bytes=1024).decide(10) == SizeDecision.SEND_INLINE

    @pytest.mark.parametrize("size", [0, 2, 1024, 10_000_000])
    def test_offload_all_wins(self, size):
        policy = SizePolicy(threshold_bytes=1024, offload_all=True)
        assert policy.decide(size) == SizeDecision.OFFLOAD_TO_STORE


class TestFromMode:
    @pytest.mark.parametrize(
        ("mode", "large_only", "offload_all", "enabled"),
        [
            (OffloadMode.OFF, False, False, False),
            (OffloadMode.LARGE_ONLY, True, False, True),
            (OffloadMode.ALL, False, True, True),
        ],
    )
    def test_flags(self, mode, large_only, offload_all, enabled):
        policy = SizePolicy.from_mode(mode, 2048)
        assert policy.threshold_bytes == 2048
        assert policy.offload_large_only is large_only
        assert policy.offload_all is offload_all
        assert policy.offload_enabled is enabled
