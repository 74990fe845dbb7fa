"""
Envelope Codec
==============

Pure translation between a PayloadReference and the message body that
carries it. No I/O.

Two wire variants:
    native      {"S3Payload": {"Id": ..., "Bucket": ..., "Key": ..., "Location": ...}}
    compatible  ["software.amazon.payloadoffloading.PayloadS3Pointer",
                 {"s3BucketName": ..., "s3Key": ...}]

The compatible variant is what the Amazon SQS Extended Client library
writes and reads. It is serialized with compact separators so the body is
byte-identical to the one that library produces.

For Developers:
    - decode() is strict: it raises a MalformedEnvelopeError subclass
      carrying the parsed structure.
    - detect_envelope() answers "is this an envelope at all?" first and only
      then decodes strictly, so plain payloads never raise.
"""

import json
from dataclasses import dataclass
from enum import Enum
from typing import Any

from src.big_payload.shared.constants import (
    EXTENDED_CLIENT_BUCKET_FIELD,
    EXTENDED_CLIENT_KEY_FIELD,
    EXTENDED_CLIENT_POINTER_MARKER,
    NATIVE_BUCKET_FIELD,
    NATIVE_ENVELOPE_FIELD,
    NATIVE_ID_FIELD,
    NATIVE_KEY_FIELD,
    NATIVE_LOCATION_FIELD,
)
from src.big_payload.shared.errors import (
    MalformedArrayShapeError,
    MalformedNativeEnvelopeError,
    MissingRequiredFieldsError,
)
from src.big_payload.shared.models import PayloadReference

_COMPACT = (",", ":")


class EnvelopeVariant(str, Enum):
    """Wire variant of an offload envelope."""

    NATIVE = "native"
    COMPATIBLE = "compatible"


@dataclass(frozen=True)
class DetectedEnvelope:
    """Result of envelope detection.

    variant is None when the body is a plain inline payload.
    """

    variant: EnvelopeVariant | None
    reference: PayloadReference | None = None

    @property
    def is_offloaded(self) -> bool:
        return self.reference is not None


def encode_native(reference: PayloadReference) -> str:
    """Serialize a reference as a native envelope."""
    return json.dumps({NATIVE_ENVELOPE_FIELD: reference.to_wire()}, separators=_COMPACT)


def encode_compatible(reference: PayloadReference) -> str:
    """Serialize a reference as an Extended Client pointer array."""
    return json.dumps(
        [
            EXTENDED_CLIENT_POINTER_MARKER,
            {
                EXTENDED_CLIENT_BUCKET_FIELD: reference.bucket,
                EXTENDED_CLIENT_KEY_FIELD: reference.key,
            },
        ],
        separators=_COMPACT,
    )


def encode(reference: PayloadReference, variant: EnvelopeVariant) -> str:
    if variant == EnvelopeVariant.COMPATIBLE:
        return encode_compatible(reference)
    return encode_native(reference)


def decode(body: str, mode: EnvelopeVariant) -> PayloadReference:
    """Decode an envelope body in the given variant.

    Args:
        body: Message body
        mode: Expected envelope variant

    Returns:
        The decoded PayloadReference

    Raises:
        MalformedNativeEnvelopeError: Native body without a usable S3Payload
        MalformedArrayShapeError: Compatible body is not a 2-element array
        MissingRequiredFieldsError: Compatible pointer lacks s3BucketName/s3Key
    """
    if mode == EnvelopeVariant.COMPATIBLE:
        return _decode_compatible(_parse(body, MalformedArrayShapeError))
    return _decode_native(_parse(body, MalformedNativeEnvelopeError))


def detect_envelope(
    body: str,
    *,
    compatibility: bool = False,
    has_size_attribute: bool = False,
) -> DetectedEnvelope:
    """Classify a received body as native, compatible or inline.

    Attempts run in order:
        1. compatible, when compatibility is on and the message carries the
           size attribute or the body is an array opening with the marker
        2. native, when the body is an object holding an S3Payload key
        3. inline otherwise

    A body that matched step 1 or 2 is decoded strictly and raises on
    invalid content. A body that matched neither never raises.
    """
    try:
        parsed = json.loads(body)
    except (TypeError, ValueError):
        parsed = None
        is_json = False
    else:
        is_json = True

    if compatibility and (has_size_attribute or _starts_with_marker(parsed)):
        if not is_json:
            raise MalformedArrayShapeError(body)
        return DetectedEnvelope(
            variant=EnvelopeVariant.COMPATIBLE, reference=_decode_compatible(parsed)
        )

    if isinstance(parsed, dict) and NATIVE_ENVELOPE_FIELD in parsed:
        return DetectedEnvelope(
            variant=EnvelopeVariant.NATIVE, reference=_decode_native(parsed)
        )

    return DetectedEnvelope(variant=None)


def _parse(body: str, error_cls: type) -> Any:
    try:
        return json.loads(body)
    except (TypeError, ValueError) as e:
        raise error_cls(body) from e


def _starts_with_marker(parsed: Any) -> bool:
    return (
        isinstance(parsed, list)
        and len(parsed) > 0
        and parsed[0] == EXTENDED_CLIENT_POINTER_MARKER
    )


def _decode_compatible(parsed: Any) -> PayloadReference:
    if not isinstance(parsed, list) or len(parsed) != 2:
        raise MalformedArrayShapeError(parsed)

    pointer = parsed[1]
    if not isinstance(pointer, dict):
        raise MissingRequiredFieldsError(parsed)

    bucket = pointer.get(EXTENDED_CLIENT_BUCKET_FIELD)
    key = pointer.get(EXTENDED_CLIENT_KEY_FIELD)
    # Presence and truthiness: "" fails the same way a missing field does
    if not bucket or not key or not isinstance(bucket, str) or not isinstance(key, str):
        raise MissingRequiredFieldsError(parsed)

    return PayloadReference(id=key.rsplit("/", 1)[-1], bucket=bucket, key=key)


def _decode_native(parsed: Any) -> PayloadReference:
    if not isinstance(parsed, dict):
        raise MalformedNativeEnvelopeError(parsed)

    meta = parsed.get(NATIVE_ENVELOPE_FIELD)
    if not isinstance(meta, dict):
        raise MalformedNativeEnvelopeError(parsed)

    bucket = meta.get(NATIVE_BUCKET_FIELD)
    key = meta.get(NATIVE_KEY_FIELD)
    if not bucket or not key or not isinstance(bucket, str) or not isinstance(key, str):
        raise MalformedNativeEnvelopeError(parsed)

    payload_id = meta.get(NATIVE_ID_FIELD)
    location = meta.get(NATIVE_LOCATION_FIELD)
    # Optional fields, but a present value must still be a string
    if not isinstance(payload_id, (str, type(None))) or not isinstance(
        location, (str, type(None))
    ):
        raise MalformedNativeEnvelopeError(parsed)

    return PayloadReference(
        id=payload_id or key.rsplit("/", 1)[-1],
        bucket=bucket,
        key=key,
        location=location,
    )
