"""Protocol definitions for dependency injection and testability."""

from abc import ABC, abstractmethod
from typing import Any, Dict, Mapping, Protocol

from .models import FetchedObject, ThumbnailRecord


class S3ClientProtocol(Protocol):
    """Protocol for the S3 client operations the pipeline uses."""

    def get_object(self, Bucket: str, Key: str) -> Dict[str, Any]:
        """Get object from S3."""
        ...

    def put_object(
        self,
        Bucket: str,
        Key: str,
        Body: bytes,
        ContentType: str,
        Metadata: Dict[str, str],
    ) -> Dict[str, Any]:
        """Put object to S3."""
        ...


class DynamoDBClientProtocol(Protocol):
    """Protocol for the low-level DynamoDB client operations the pipeline uses."""

    def put_item(
        self, TableName: str, Item: Dict[str, Dict[str, str]]
    ) -> Dict[str, Any]:
        """Create or replace an item."""
        ...


class LoggerProtocol(Protocol):
    """Protocol for logging operations."""

    def debug(self, message: str, context: Any = None, **kwargs: Any) -> None:
        ...

    def info(self, message: str, context: Any = None, **kwargs: Any) -> None:
        ...

    def warning(self, message: str, context: Any = None, **kwargs: Any) -> None:
        ...

    def error(self, message: str, context: Any = None, **kwargs: Any) -> None:
        ...


class StorageGateway(ABC):
    """Blob store access by bucket and key."""

    @abstractmethod
    def fetch(self, bucket: str, key: str) -> FetchedObject:
        """Read an object with its content type and user metadata."""
        ...

    @abstractmethod
    def put(
        self,
        bucket: str,
        key: str,
        body: bytes,
        content_type: str,
        metadata: Mapping[str, str],
    ) -> Dict[str, Any]:
        """Write an object, replacing any existing one."""
        ...


class MetadataRepository(ABC):
    """Store of thumbnail records keyed by source key."""

    @abstractmethod
    def upsert(self, record: ThumbnailRecord) -> Dict[str, Any]:
        """Create or replace the record for record.name."""
        ...
