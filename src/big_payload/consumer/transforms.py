"""Body transforms applied before envelope detection.

A queue subscribed to an SNS topic without raw message delivery receives
the published body wrapped in an SNS notification document. Pass
unwrap_sns_notification as transform_message_body to consume it.

raw_message_from_lambda_record adapts SQS-triggered Lambda records so they
can go through SqsConsumer.process_message.
"""

import json
from typing import Any

SNS_NOTIFICATION_TYPE = "Notification"


def unwrap_sns_notification(body: str) -> str:
    """Return the published message from an SNS notification body.

    Bodies that are not SNS notifications are returned unchanged.

    Example:
        >>> unwrap_sns_notification('{"Type": "Notification", "Message": "{\\"a\\": 1}"}')
        '{"a": 1}'
    """
    try:
        notification = json.loads(body)
    except (TypeError, ValueError):
        return body

    if (
        isinstance(notification, dict)
        and notification.get("Type", SNS_NOTIFICATION_TYPE) == SNS_NOTIFICATION_TYPE
        and isinstance(notification.get("Message"), str)
        and "TopicArn" in notification
    ):
        return notification["Message"]
    return body


def raw_message_from_lambda_record(record: dict[str, Any]) -> dict[str, Any]:
    """Normalize an SQS event record delivered to Lambda to receive_message shape.

    Lambda uses camelCase keys (messageId, body, messageAttributes with
    stringValue/dataType). The consumer pipeline reads the boto3 shape.
    """
    attributes: dict[str, dict[str, str]] = {}
    for name, value in (record.get("messageAttributes") or {}).items():
        attribute = {"DataType": value.get("dataType", "String")}
        if value.get("stringValue") is not None:
            attribute["StringValue"] = value["stringValue"]
        if value.get("binaryValue") is not None:
            attribute["BinaryValue"] = value["binaryValue"]
        attributes[name] = attribute

    return {
        "MessageId": record.get("messageId"),
        "ReceiptHandle": record.get("receiptHandle"),
        "Body": record.get("body", ""),
        "Attributes": record.get("attributes") or {},
        "MessageAttributes": attributes,
    }
