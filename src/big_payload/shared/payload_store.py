"""S3 storage for offloaded payloads.

Architecture:
    producer --> S3PayloadStore.put --> S3 <-- S3PayloadStore.get <-- consumer
"""

import logging
from typing import Any
from urllib.parse import quote

from botocore.exceptions import BotoCoreError, ClientError

from src.big_payload.shared.constants import PAYLOAD_CONTENT_TYPE
from src.big_payload.shared.errors import PayloadFetchError, UploadError
from src.big_payload.shared.logging_utils import get_safe_error_info
from src.big_payload.shared.models import UploadResult

logger = logging.getLogger(__name__)


class S3PayloadStore:
    """Uploads and downloads payload objects.

    Usage:
        store = S3PayloadStore(s3_client=boto3.client("s3"))
        result = store.put("my-bucket", "queue-big-payload/abc.json", body)
        body = store.get(result.bucket, result.key)
    """

    def __init__(self, s3_client: Any) -> None:
        """Initialize S3PayloadStore.

        Args:
            s3_client: boto3 S3 client (injected for testing)
        """
        self._s3 = s3_client

    def put(
        self,
        bucket: str,
        key: str,
        body: str | bytes,
        content_type: str = PAYLOAD_CONTENT_TYPE,
    ) -> UploadResult:
        """Store a payload object.

        Raises:
            UploadError: If S3 rejects the upload or cannot be reached
        """
        data = body.encode("utf-8") if isinstance(body, str) else body
        try:
            response = self._s3.put_object(
                Bucket=bucket,
                Key=key,
                Body=data,
                ContentType=content_type,
            )
        except (ClientError, BotoCoreError) as e:
            logger.error(
                "Payload upload failed",
                extra={"bucket": bucket, "key": key, **get_safe_error_info(e)},
            )
            raise UploadError(bucket, key, str(e)) from e

        result = UploadResult(
            bucket=bucket,
            key=key,
            location=self.location(bucket, key),
            etag=response.get("ETag"),
        )
        logger.info(
            "Payload uploaded",
            extra={"bucket": bucket, "key": key, "size_bytes": len(data)},
        )
        return result

    def get(self, bucket: str, key: str) -> bytes:
        """Download a payload object.

        Raises:
            PayloadFetchError: If the object is missing or S3 cannot be reached
        """
        try:
            response = self._s3.get_object(Bucket=bucket, Key=key)
            return response["Body"].read()
        except (ClientError, BotoCoreError) as e:
            logger.warning(
                "Payload download failed",
                extra={"bucket": bucket, "key": key, **get_safe_error_info(e)},
            )
            raise PayloadFetchError(bucket, key, str(e)) from e

    def size(self, bucket: str, key: str) -> int:
        """Return the stored object's size in bytes.

        Raises:
            PayloadFetchError: If the object cannot be inspected
        """
        try:
            response = self._s3.head_object(Bucket=bucket, Key=key)
        except (ClientError, BotoCoreError) as e:
            raise PayloadFetchError(bucket, key, str(e)) from e
        return int(response["ContentLength"])

    def location(self, bucket: str, key: str) -> str:
        """Object URL, virtual-hosted on AWS and path-style on custom endpoints."""
        quoted_key = quote(key, safe="/")
        endpoint = getattr(self._s3.meta, "endpoint_url", None) or ""
        if not endpoint or "amazonaws.com" in endpoint:
            region = getattr(self._s3.meta, "region_name", None) or "us-east-1"
            return f"https://{bucket}.s3.{region}.amazonaws.com/{quoted_key}"
        return f"{endpoint.rstrip('/')}/{bucket}/{quoted_key}"
