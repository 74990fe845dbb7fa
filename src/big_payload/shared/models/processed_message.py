"""ProcessedMessage model: a received message after payload resolution."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from src.big_payload.shared.models.payload_reference import PayloadReference


class ProcessedMessage(BaseModel):
    """Pipeline output for one received message.

    Handed to the user handler and emitted with message_parsed and
    message_processed events.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    message: dict[str, Any] = Field(..., description="Raw SQS message")
    payload: Any = None
    s3_payload_meta: PayloadReference | None = None

    @property
    def message_id(self) -> str | None:
        return self.message.get("MessageId")

    @property
    def receipt_handle(self) -> str | None:
        return self.message.get("ReceiptHandle")
