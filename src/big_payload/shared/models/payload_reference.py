"""PayloadReference model: pointer to an offloaded payload in S3."""

from pydantic import BaseModel, ConfigDict, Field

from src.big_payload.shared.constants import (
    NATIVE_BUCKET_FIELD,
    NATIVE_ID_FIELD,
    NATIVE_KEY_FIELD,
    NATIVE_LOCATION_FIELD,
)


class PayloadReference(BaseModel):
    """Identifies the S3 object holding an offloaded payload.

    Serialized on the native wire under its aliases (Id, Bucket, Key,
    Location). Accepts either field names or aliases on construction, so a
    reference read off a received message can be passed straight back to
    send_reference() for relaying.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    id: str = Field(..., alias=NATIVE_ID_FIELD, description="Payload identifier")
    bucket: str = Field(..., alias=NATIVE_BUCKET_FIELD, min_length=1)
    key: str = Field(..., alias=NATIVE_KEY_FIELD, min_length=1)
    location: str | None = Field(
        default=None, alias=NATIVE_LOCATION_FIELD, description="Object URL if known"
    )

    def to_wire(self) -> dict:
        """Native envelope representation (unset location omitted)."""
        return self.model_dump(by_alias=True, exclude_none=True)

    @property
    def s3_uri(self) -> str:
        return f"s3://{self.bucket}/{self.key}"
