"""Core utilities and shared components for the thumbnail pipeline."""

from .image_utils import compute_target_size, probe_image, resize_image
from .logging_config import bind_request_id, get_logger, setup_logger
from .exceptions import (
    AccessDenied,
    ConfigurationError,
    CorruptImage,
    DecodeError,
    EncodingFailure,
    FetchError,
    InvalidDimensions,
    ObjectNotFound,
    PersistenceFailure,
    ThumbnailPipelineError,
    UnsupportedFormat,
    UploadError,
    ValidationError,
    WriteFailure,
)
from .models import (
    DescriptiveMetadata,
    ImageBuffer,
    ImageType,
    PipelineConfig,
    PipelineResult,
    PipelineState,
    SizeHint,
    SourceObject,
    ThumbnailRecord,
    get_image_type,
)

__all__ = [
    "compute_target_size",
    "probe_image",
    "resize_image",
    "bind_request_id",
    "get_logger",
    "setup_logger",
    "ThumbnailPipelineError",
    "ValidationError",
    "ConfigurationError",
    "FetchError",
    "ObjectNotFound",
    "AccessDenied",
    "DecodeError",
    "UnsupportedFormat",
    "CorruptImage",
    "InvalidDimensions",
    "EncodingFailure",
    "UploadError",
    "WriteFailure",
    "PersistenceFailure",
    "DescriptiveMetadata",
    "ImageBuffer",
    "ImageType",
    "PipelineConfig",
    "PipelineResult",
    "PipelineState",
    "SizeHint",
    "SourceObject",
    "ThumbnailRecord",
    "get_image_type",
]
