"""Shared building blocks: wire constants, envelope codec, size policy,
errors, models and AWS access."""
