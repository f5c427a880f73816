"""Testing utilities and fakes for the thumbnail pipeline."""

from .fakes import (
    FakeDynamoDBClient,
    FakeLogger,
    FakeS3Client,
    S3Bucket,
    S3Object,
    create_test_image,
    make_client_error,
    setup_test_environment,
)

__all__ = [
    "FakeS3Client",
    "FakeDynamoDBClient",
    "FakeLogger",
    "S3Object",
    "S3Bucket",
    "create_test_image",
    "make_client_error",
    "setup_test_environment",
]
