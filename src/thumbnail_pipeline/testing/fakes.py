"""Fake implementations for testing purposes."""

import io
import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

from botocore.exceptions import ClientError
from PIL import Image


def make_client_error(code: str, message: str, operation_name: str) -> ClientError:
    """Build a botocore ClientError the way boto3 raises it."""
    return ClientError(
        {
            "Error": {"Code": code, "Message": message},
            "ResponseMetadata": {"HTTPStatusCode": 400},
        },
        operation_name,
    )


@dataclass
class S3Object:
    """Fake S3 object for testing."""

    key: str
    body: bytes
    content_type: str = "image/jpeg"
    metadata: Dict[str, str] = field(default_factory=dict)
    size: int = 0

    def __post_init__(self):
        if self.size == 0:
            self.size = len(self.body)


@dataclass
class S3Bucket:
    """Fake S3 bucket for testing."""

    name: str
    objects: Dict[str, S3Object] = field(default_factory=dict)

    def add_object(
        self,
        key: str,
        body: bytes,
        content_type: str = "image/jpeg",
        metadata: Optional[Dict[str, str]] = None,
    ) -> None:
        """Add object to bucket."""
        self.objects[key] = S3Object(
            key=key, body=body, content_type=content_type, metadata=dict(metadata or {})
        )

    def get_object(self, key: str) -> Optional[S3Object]:
        """Get object from bucket."""
        return self.objects.get(key)


class FailureMode:
    """Shared failure switch for the fake AWS clients."""

    def __init__(self):
        self.should_fail = False
        self.error_code = "InternalError"
        self.failure_message = "Simulated failure"
        self.operations: Optional[Sequence[str]] = None

    def set_failure_mode(
        self,
        should_fail: bool,
        message: str = "Simulated failure",
        code: str = "InternalError",
        operations: Optional[Sequence[str]] = None,
    ) -> None:
        """Fail every call, or only the named operations, with a ClientError."""
        self.should_fail = should_fail
        self.failure_message = message
        self.error_code = code
        self.operations = operations

    def check(self, operation_name: str) -> None:
        if not self.should_fail:
            return
        if self.operations is not None and operation_name not in self.operations:
            return
        raise make_client_error(self.error_code, self.failure_message, operation_name)


class FakeS3Client(FailureMode):
    """Fake S3 client for testing."""

    def __init__(self):
        super().__init__()
        self.buckets: Dict[str, S3Bucket] = {}
        self.operation_count = 0
        self.calls: List[Dict[str, Any]] = []

    def create_bucket(self, name: str) -> S3Bucket:
        """Create a new bucket."""
        bucket = S3Bucket(name=name)
        self.buckets[name] = bucket
        return bucket

    def get_bucket(self, name: str) -> Optional[S3Bucket]:
        """Get bucket by name."""
        return self.buckets.get(name)

    def get_object(self, Bucket: str, Key: str) -> Dict[str, Any]:
        """Get object from S3."""
        self.operation_count += 1
        self.calls.append({"operation": "GetObject", "Bucket": Bucket, "Key": Key})
        self.check("GetObject")

        bucket = self.buckets.get(Bucket)
        if not bucket:
            raise make_client_error(
                "NoSuchBucket", f"Bucket {Bucket} not found", "GetObject"
            )

        obj = bucket.get_object(Key)
        if not obj:
            raise make_client_error(
                "NoSuchKey", f"Object {Key} not found in bucket {Bucket}", "GetObject"
            )

        return {
            "Body": io.BytesIO(obj.body),
            "ContentType": obj.content_type,
            "ContentLength": obj.size,
            "Metadata": dict(obj.metadata),
        }

    def put_object(
        self,
        Bucket: str,
        Key: str,
        Body: bytes,
        ContentType: str,
        Metadata: Optional[Dict[str, str]] = None,
    ) -> Dict[str, Any]:
        """Put object to S3."""
        self.operation_count += 1
        self.calls.append({"operation": "PutObject", "Bucket": Bucket, "Key": Key})
        self.check("PutObject")

        bucket = self.buckets.get(Bucket)
        if not bucket:
            raise make_client_error(
                "NoSuchBucket", f"Bucket {Bucket} not found", "PutObject"
            )

        bucket.add_object(Key, Body, ContentType, Metadata)

        return {
            "ETag": f'"fake-etag-{Key}"',
            "ResponseMetadata": {"HTTPStatusCode": 200},
        }


class FakeDynamoDBClient(FailureMode):
    """Fake low-level DynamoDB client storing items by their hash key."""

    def __init__(self, key_attribute: str = "name"):
        super().__init__()
        self.key_attribute = key_attribute
        self.tables: Dict[str, Dict[str, Dict[str, Dict[str, str]]]] = {}
        self.operation_count = 0

    def create_table(self, name: str) -> None:
        self.tables[name] = {}

    def put_item(
        self, TableName: str, Item: Dict[str, Dict[str, str]]
    ) -> Dict[str, Any]:
        """Create or replace an item."""
        self.operation_count += 1
        self.check("PutItem")

        table = self.tables.get(TableName)
        if table is None:
            raise make_client_error(
                "ResourceNotFoundException",
                f"Requested resource not found: Table: {TableName} not found",
                "PutItem",
            )

        table[Item[self.key_attribute]["S"]] = dict(Item)
        return {"ResponseMetadata": {"HTTPStatusCode": 200}}

    def get_item(self, table_name: str, key: str) -> Optional[Dict[str, Dict[str, str]]]:
        """Return a stored item, or None."""
        return self.tables.get(table_name, {}).get(key)


class FakeLogger:
    """Fake logger for testing with support for LogContext."""

    def __init__(self, name: str = "test_logger"):
        self.name = name
        self.logs: List[Dict[str, Any]] = []

    def _log(
        self, level: str, message: str, context: Any = None, **kwargs: Any
    ) -> None:
        log_entry = {
            "level": level,
            "message": message,
            "timestamp": time.time(),
            **kwargs,
        }

        if context is not None:
            log_entry["correlation_id"] = context.correlation_id
            log_entry["operation"] = context.operation
            log_entry["component"] = context.component
            log_entry.update(context.metadata)

        self.logs.append(log_entry)

    def debug(self, message: str, context: Any = None, **kwargs: Any) -> None:
        self._log("DEBUG", message, context, **kwargs)

    def info(self, message: str, context: Any = None, **kwargs: Any) -> None:
        self._log("INFO", message, context, **kwargs)

    def warning(self, message: str, context: Any = None, **kwargs: Any) -> None:
        self._log("WARNING", message, context, **kwargs)

    def error(self, message: str, context: Any = None, **kwargs: Any) -> None:
        self._log("ERROR", message, context, **kwargs)

    def get_logs(self, level: Optional[str] = None) -> List[Dict[str, Any]]:
        """Get logged messages, optionally filtered by level."""
        if level:
            return [log for log in self.logs if log["level"] == level]
        return self.logs.copy()


def create_test_image(
    width: int = 100, height: int = 100, format: str = "JPEG", mode: str = "RGB"
) -> bytes:
    """Create a test image in memory."""
    if mode in ("RGB", "RGBA"):
        color = (255, 0, 0, 255)[: len(mode)]
    else:
        bands = Image.getmodebands(mode)
        color = 128 if bands == 1 else (128,) * bands
    image = Image.new(mode, (width, height), color=color)

    img_bytes = io.BytesIO()
    image.save(img_bytes, format=format)
    return img_bytes.getvalue()


def setup_test_environment(table_name: str = "images"):
    """Set up fake S3 and DynamoDB clients with sample data."""
    s3_client = FakeS3Client()
    dynamodb_client = FakeDynamoDBClient()
    dynamodb_client.create_table(table_name)

    bucket = s3_client.create_bucket("test-uploads")
    bucket.add_object("photos/cat.jpg", create_test_image(800, 600))
    bucket.add_object(
        "photos/dog.png",
        create_test_image(300, 600, format="PNG"),
        content_type="image/png",
        metadata={"author": "Jane", "title": "Dog", "description": "A dog"},
    )
    bucket.add_object(
        "photos/wide.jpg",
        create_test_image(1000, 250),
        metadata={"width": "100", "title": "Panorama", "camera": "x100"},
    )
    bucket.add_object("docs/readme.jpg", b"This is not an image")

    return s3_client, dynamodb_client
