"""
Wire Format Constants
=====================

Single source of truth for every byte-exact value shared by producers and
consumers. The compatible-envelope values must match the Amazon SQS Extended
Client library (and the other libraries built on its payload-offloading
package) character for character.

For Developers:
    - Never inline these strings elsewhere; import them from here.
    - Changing MARKER or the attribute name breaks interoperability with
      every deployed Extended Client producer and consumer.
"""

# First element of the compatible envelope array
EXTENDED_CLIENT_POINTER_MARKER = "software.amazon.payloadoffloading.PayloadS3Pointer"

# Compatible envelope object field names
EXTENDED_CLIENT_BUCKET_FIELD = "s3BucketName"
EXTENDED_CLIENT_KEY_FIELD = "s3Key"

# Out-of-band attribute carrying the original payload size (compatible mode)
LARGE_PAYLOAD_SIZE_ATTRIBUTE = "SQSLargePayloadSize"
LARGE_PAYLOAD_SIZE_DATA_TYPE = "Number"

# Native envelope field names
NATIVE_ENVELOPE_FIELD = "S3Payload"
NATIVE_ID_FIELD = "Id"
NATIVE_BUCKET_FIELD = "Bucket"
NATIVE_KEY_FIELD = "Key"
NATIVE_LOCATION_FIELD = "Location"

# SQS and SNS both cap a message at 256 KiB
DEFAULT_MAX_MESSAGE_SIZE = 256 * 1024

# Offloaded object layout
PAYLOAD_CONTENT_TYPE = "application/json"
NATIVE_KEY_SUFFIX = ".json"
DEFAULT_SQS_KEY_PREFIX = "queue-big-payload/"
DEFAULT_SNS_KEY_PREFIX = ""

# SQS receive limits
MAX_RECEIVE_BATCH_SIZE = 10
MAX_WAIT_TIME_SECONDS = 20
