"""Integration test configuration.

Provides moto-backed AWS resources for producer/consumer round trips.
Every fixture runs inside a single mock_aws context, so resources exist
only for the duration of one test.

Usage:
    def test_round_trip(sqs_queue_url, payload_bucket, moto_sqs, moto_s3):
        producer = SqsProducer(config, sqs_client=moto_sqs, s3_client=moto_s3)
"""

import boto3
import pytest
from moto import mock_aws

AWS_REGION = "us-east-1"
PAYLOAD_BUCKET = "message-payload"


@pytest.fixture
def mocked_aws(aws_credentials):
    """Activate moto for the whole test."""
    with mock_aws():
        yield


@pytest.fixture
def moto_sqs(mocked_aws):
    return boto3.client("sqs", region_name=AWS_REGION)


@pytest.fixture
def moto_sns(mocked_aws):
    return boto3.client("sns", region_name=AWS_REGION)


@pytest.fixture
def moto_s3(mocked_aws):
    return boto3.client("s3", region_name=AWS_REGION)


@pytest.fixture
def payload_bucket(moto_s3):
    moto_s3.create_bucket(Bucket=PAYLOAD_BUCKET)
    return PAYLOAD_BUCKET


@pytest.fixture
def sqs_queue_url(moto_sqs):
    return moto_sqs.create_queue(QueueName="big-payload-queue")["QueueUrl"]


@pytest.fixture
def relay_queue_url(moto_sqs):
    return moto_sqs.create_queue(QueueName="big-payload-relay")["QueueUrl"]

