"""Results returned by the producers."""

from typing import Any

from pydantic import BaseModel, Field


class UploadResult(BaseModel):
    """Where an offloaded payload was stored."""

    bucket: str
    key: str
    location: str
    etag: str | None = None


class SendResult(BaseModel):
    """Outcome of one send or publish call.

    s3_response is None when the body was sent inline or a pre-existing
    reference was relayed.
    """

    transport_response: dict[str, Any] = Field(default_factory=dict)
    s3_response: UploadResult | None = None

    @property
    def message_id(self) -> str | None:
        return self.transport_response.get("MessageId")

    @property
    def offloaded(self) -> bool:
        return self.s3_response is not None
