"""Unit tests for S3PayloadStore."""

from unittest.mock import MagicMock

import pytest
from botocore.exceptions import ClientError, EndpointConnectionError

from src.big_payload.shared.errors import PayloadFetchError, UploadError
from src.big_payload.shared.payload_store import S3PayloadStore


def _client_error(code: str, operation: str) -> ClientError:
    return ClientError({"Error": {"Code": code, "Message": code}}, operation)


class TestPut:
    """Tests for S3PayloadStore.put."""

    def test_uploads_utf8_bytes(self, s3_client):
        store = S3PayloadStore(s3_client)
        result = store.put("bucket", "dir/key.json", '{"a":"é"}')

        call_kwargs = s3_client.put_object.call_args[1]
        assert call_kwargs["Bucket"] == "bucket"
        assert call_kwargs["Key"] == "dir/key.json"
        assert call_kwargs["Body"] == '{"a":"é"}'.encode()
        assert call_kwargs["ContentType"] == "application/json"
        assert result.etag == '"etag-123"'

    def test_location_virtual_hosted_on_aws(self, s3_client):
        result = S3PayloadStore(s3_client).put("bucket", "dir/key.json", "{}")
        assert result.location == "https://bucket.s3.us-east-1.amazonaws.com/dir/key.json"

    def test_location_path_style_on_custom_endpoint(self, s3_client):
        s3_client.meta.endpoint_url = "http://localhost:4566/"
        result = S3PayloadStore(s3_client).put("bucket", "key", "{}")
        assert result.location == "http://localhost:4566/bucket/key"

    def test_client_error_becomes_upload_error(self):
        s3 = MagicMock()
        s3.put_object.side_effect = _client_error("AccessDenied", "PutObject")

        with pytest.raises(UploadError) as exc_info:
            S3PayloadStore(s3).put("bucket", "key", "{}")

        assert exc_info.value.bucket == "bucket"
        assert isinstance(exc_info.value.__cause__, ClientError)

    def test_connection_error_becomes_upload_error(self):
        s3 = MagicMock()
        s3.put_object.side_effect = EndpointConnectionError(endpoint_url="http://s3")

        with pytest.raises(UploadError):
            S3PayloadStore(s3).put("bucket", "key", "{}")


class TestGet:
    """Tests for S3PayloadStore.get and size."""

    def test_returns_stored_bytes(self, s3_client):
        store = S3PayloadStore(s3_client)
        store.put("bucket", "key", "payload")
        assert store.get("bucket", "key") == b"payload"

    def test_missing_object_raises_fetch_error(self):
        s3 = MagicMock()
        s3.get_object.side_effect = _client_error("NoSuchKey", "GetObject")

        with pytest.raises(PayloadFetchError) as exc_info:
            S3PayloadStore(s3).get("bucket", "gone")

        assert exc_info.value.key == "gone"

    def test_size_uses_head_object(self, s3_client):
        store = S3PayloadStore(s3_client)
        store.put("bucket", "key", "x" * 1025)
        assert store.size("bucket", "key") == 1025

    def test_size_failure_raises_fetch_error(self):
        s3 = MagicMock()
        s3.head_object.side_effect = _client_error("404", "HeadObject")

        with pytest.raises(PayloadFetchError):
            S3PayloadStore(s3).size("bucket", "key")
