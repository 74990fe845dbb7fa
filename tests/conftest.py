"""
Pytest Configuration and Shared Fixtures
=========================================

Common fixtures used across all test modules.

Test Environment Separation:
    - LOCAL/DEV: Mocked AWS (moto or MagicMock) - runs with `pytest -m "not preprod"`
    - PREPROD: Real queues and buckets - runs with `pytest -m "preprod"`

    Files with "preprod" in their name are auto-marked with the `preprod` marker.

For On-Call Engineers:
    If tests fail with AWS credential errors:
    1. Ensure moto is properly mocking (check the mock_aws context)
    2. Verify AWS env vars are set in fixtures

For Developers:
    - Unit tests inject MagicMock clients (see sqs_client / s3_client below)
    - Integration tests use moto's mock_aws and real boto3 clients
    - Use assert_warning_logged / assert_error_logged with caplog for
      expected log lines
"""

import io
import logging
import os
from pathlib import Path
from unittest.mock import MagicMock

import pytest

# =============================================================================
# Pytest Marker Registration
# =============================================================================


def pytest_configure(config):
    """Register custom markers to avoid warnings."""
    config.addinivalue_line(
        "markers",
        "preprod: marks tests that require real AWS resources (deselect with '-m \"not preprod\"')",
    )
    config.addinivalue_line(
        "markers",
        "integration: marks end-to-end tests against moto-mocked AWS",
    )


def pytest_collection_modifyitems(config, items):
    """Auto-mark preprod tests based on their file name."""
    preprod_marker = pytest.mark.preprod

    for item in items:
        test_file = Path(item.fspath)
        if "preprod" in test_file.name.lower():
            item.add_marker(preprod_marker)


# Set default test environment variables at module load time.
# setdefault() only sets if NOT already present, so CI values take precedence.
os.environ.setdefault("AWS_ACCESS_KEY_ID", "testing")
os.environ.setdefault("AWS_SECRET_ACCESS_KEY", "testing")
os.environ.setdefault("AWS_REGION", "us-east-1")
os.environ.setdefault("AWS_DEFAULT_REGION", "us-east-1")


@pytest.fixture(autouse=True)
def reset_env_vars():
    """
    Reset environment variables after each test.

    Ensures tests don't pollute each other's environment.
    """
    original_env = os.environ.copy()

    yield

    os.environ.clear()
    os.environ.update(original_env)


@pytest.fixture
def aws_credentials():
    """
    Set up mock AWS credentials for moto.

    Use this fixture when testing AWS SDK calls.
    """
    os.environ["AWS_ACCESS_KEY_ID"] = "testing"
    os.environ["AWS_SECRET_ACCESS_KEY"] = "testing"
    os.environ["AWS_SECURITY_TOKEN"] = "testing"
    os.environ["AWS_SESSION_TOKEN"] = "testing"
    os.environ["AWS_REGION"] = "us-east-1"
    os.environ["AWS_DEFAULT_REGION"] = "us-east-1"

    yield


# =============================================================================
# Mock AWS clients
# =============================================================================


@pytest.fixture
def sqs_client():
    """MagicMock SQS client; send_message returns a fixed MessageId."""
    client = MagicMock()
    client.send_message.return_value = {"MessageId": "msg-123"}
    client.receive_message.return_value = {"Messages": []}
    return client


@pytest.fixture
def sns_client():
    """MagicMock SNS client; publish returns a fixed MessageId."""
    client = MagicMock()
    client.publish.return_value = {"MessageId": "sns-msg-123"}
    return client


@pytest.fixture
def s3_client():
    """MagicMock S3 client behaving like an in-memory bucket.

    put_object stores bodies in ``client.objects`` keyed by (bucket, key);
    get_object and head_object read them back.
    """
    client = MagicMock()
    client.meta.endpoint_url = "https://s3.amazonaws.com"
    client.meta.region_name = "us-east-1"
    client.objects = {}

    def put_object(Bucket, Key, Body, **kwargs):
        client.objects[(Bucket, Key)] = Body
        return {"ETag": '"etag-123"'}

    def get_object(Bucket, Key):
        return {"Body": io.BytesIO(client.objects[(Bucket, Key)])}

    def head_object(Bucket, Key):
        return {"ContentLength": len(client.objects[(Bucket, Key)])}

    client.put_object.side_effect = put_object
    client.get_object.side_effect = get_object
    client.head_object.side_effect = head_object
    return client


# =============================================================================
# Log Validation Helpers
# =============================================================================


def assert_error_logged(caplog, pattern: str):
    """
    Assert an ERROR log matching pattern was captured.

    Example:
        def test_missing_queue(caplog):
            consumer.run_once()
            assert_error_logged(caplog, "Polling failed")
    """
    assert any(
        pattern in record.message
        for record in caplog.records
        if record.levelno >= logging.ERROR
    ), f"Expected ERROR log matching '{pattern}' not found"


def assert_warning_logged(caplog, pattern: str):
    """Assert a WARNING log matching pattern was captured."""
    assert any(
        pattern in record.message
        for record in caplog.records
        if record.levelno == logging.WARNING
    ), f"Expected WARNING log matching '{pattern}' not found"
