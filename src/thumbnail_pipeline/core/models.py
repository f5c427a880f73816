"""Shared data models for the thumbnail pipeline."""

import re
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, PositiveInt

from .exceptions import InvalidDimensions, ValidationError

DEFAULT_MAX_WIDTH = 200
DEFAULT_MAX_HEIGHT = 200
DEFAULT_TABLE_NAME = "images"
DEFAULT_THUMBNAIL_PREFIX = "thumbs/"

_EXTENSION_RE = re.compile(r"\.([^.]*)$")


class ImageType(str, Enum):
    """Image encodings accepted for routing and output."""

    JPG = "jpg"
    PNG = "png"

    @property
    def pil_format(self) -> str:
        """Format name understood by Pillow."""
        return "JPEG" if self is ImageType.JPG else "PNG"

    @property
    def content_type(self) -> str:
        """MIME type for the encoded output."""
        return "image/jpeg" if self is ImageType.JPG else "image/png"


def get_image_type(key: str) -> ImageType:
    """
    Derive the image type from the text after the final '.' in an object key.

    Args:
        key: Source object key

    Returns:
        The matching ImageType

    Raises:
        ValidationError: If the key has no extension or it is not jpg/png
    """
    match = _EXTENSION_RE.search(key)
    if not match:
        raise ValidationError(f"Could not determine the image type for key {key}")

    extension = match.group(1)
    try:
        return ImageType(extension)
    except ValueError:
        raise ValidationError(f"Unsupported image type: {extension}") from None


class PipelineConfig(BaseModel):
    """Configuration for the thumbnail pipeline."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    table_name: str = DEFAULT_TABLE_NAME
    thumbnail_prefix: str = DEFAULT_THUMBNAIL_PREFIX
    default_max_width: PositiveInt = DEFAULT_MAX_WIDTH
    default_max_height: PositiveInt = DEFAULT_MAX_HEIGHT
    jpeg_quality: int = Field(default=95, ge=1, le=100)


class SourceObject(BaseModel):
    """An uploaded object that triggered a pipeline run."""

    model_config = ConfigDict(frozen=True)

    bucket: str
    key: str

    @property
    def image_type(self) -> ImageType:
        return get_image_type(self.key)

    def destination_key(self, prefix: str = DEFAULT_THUMBNAIL_PREFIX) -> str:
        """Thumbnail key in the same bucket."""
        return f"{prefix}{self.key}"


class SizeHint(BaseModel):
    """Bounding box the thumbnail must fit in."""

    model_config = ConfigDict(frozen=True)

    max_width: float = DEFAULT_MAX_WIDTH
    max_height: float = DEFAULT_MAX_HEIGHT

    @classmethod
    def from_metadata(
        cls,
        metadata: "DescriptiveMetadata",
        default_width: float = DEFAULT_MAX_WIDTH,
        default_height: float = DEFAULT_MAX_HEIGHT,
    ) -> "SizeHint":
        """Build a hint from object metadata; each missing axis uses its default."""
        return cls(
            max_width=_parse_bound("width", metadata.width, default_width),
            max_height=_parse_bound("height", metadata.height, default_height),
        )


def _parse_bound(name: str, raw: Optional[str], default: float) -> float:
    if raw is None:
        return default
    try:
        value = float(raw)
    except ValueError:
        raise InvalidDimensions(f"Metadata {name}={raw!r} is not a number") from None
    if not value > 0:
        raise InvalidDimensions(f"Metadata {name}={raw!r} must be positive")
    return value


class ImageBuffer(BaseModel):
    """Decoded image bytes with their intrinsic size."""

    model_config = ConfigDict(frozen=True)

    data: bytes
    width: int
    height: int
    format: str = "unknown"


class DescriptiveMetadata(BaseModel):
    """User metadata carried from the source object to the thumbnail and record."""

    model_config = ConfigDict(frozen=True)

    author: Optional[str] = None
    title: Optional[str] = None
    description: Optional[str] = None
    width: Optional[str] = None
    height: Optional[str] = None
    raw: Dict[str, str] = Field(default_factory=dict)

    @classmethod
    def from_mapping(cls, mapping: Optional[Mapping[str, str]]) -> "DescriptiveMetadata":
        raw = dict(mapping or {})
        return cls(
            author=raw.get("author"),
            title=raw.get("title"),
            description=raw.get("description"),
            width=raw.get("width"),
            height=raw.get("height"),
            raw=raw,
        )

    def to_mapping(self) -> Dict[str, str]:
        """The original mapping, recognized and unrecognized keys alike."""
        return dict(self.raw)


class FetchedObject(BaseModel):
    """Body and headers returned by the storage gateway."""

    body: bytes
    content_type: str = ""
    metadata: Dict[str, str] = Field(default_factory=dict)


def utc_timestamp() -> str:
    """ISO-8601 UTC timestamp with millisecond precision."""
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


class ThumbnailRecord(BaseModel):
    """Lookup entry stored for every thumbnail, keyed by source key."""

    name: str
    thumbnail: str
    timestamp: str = Field(default_factory=utc_timestamp)
    author: Optional[str] = None
    title: Optional[str] = None
    description: Optional[str] = None

    @classmethod
    def for_thumbnail(
        cls, source_key: str, destination_key: str, metadata: DescriptiveMetadata
    ) -> "ThumbnailRecord":
        """Create a record, copying only the descriptive fields present in metadata."""
        optional = {
            field: metadata.raw[field]
            for field in ("author", "title", "description")
            if field in metadata.raw
        }
        return cls(name=source_key, thumbnail=destination_key, **optional)

    def to_item(self) -> Dict[str, str]:
        """Attribute mapping with absent optional fields omitted."""
        return self.model_dump(exclude_none=True)


class PipelineState(str, Enum):
    """Stages of a single pipeline run."""

    INIT = "init"
    FETCHED = "fetched"
    SIZED = "sized"
    ENCODED = "encoded"
    UPLOADED = "uploaded"
    RECORDED = "recorded"
    DONE = "done"
    FAILED = "failed"


class PipelineResult(BaseModel):
    """Outcome of one pipeline run."""

    source_bucket: str
    source_key: str
    dest_key: str = ""
    state: PipelineState = PipelineState.INIT
    failed_stage: Optional[PipelineState] = None
    error: str = ""
    error_type: str = ""
    target_width: Optional[int] = None
    target_height: Optional[int] = None
    processing_time: float = 0.0

    @property
    def success(self) -> bool:
        return self.state is PipelineState.DONE

    def summary(self) -> Dict[str, Any]:
        return self.model_dump(mode="json")
