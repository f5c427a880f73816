"""Custom exceptions for the thumbnail pipeline."""


class ThumbnailPipelineError(Exception):
    """Base exception for all thumbnail pipeline errors."""


class ValidationError(ThumbnailPipelineError):
    """Error raised for a missing or unsupported image type, before any I/O."""


class ConfigurationError(ThumbnailPipelineError):
    """Error raised for invalid configuration options."""


class FetchError(ThumbnailPipelineError):
    """Error raised when the source object cannot be read."""


class ObjectNotFound(FetchError):
    """The source bucket or key does not exist."""


class AccessDenied(FetchError):
    """The source object exists but may not be read."""


class DecodeError(ThumbnailPipelineError):
    """Error raised when image bytes cannot be decoded."""


class UnsupportedFormat(DecodeError):
    """The bytes are not a JPEG or PNG image."""


class CorruptImage(DecodeError):
    """The bytes carry a supported signature but the payload is malformed."""


class InvalidDimensions(ThumbnailPipelineError):
    """Error raised for a zero-sized image or an unusable bounding box."""


class EncodingFailure(ThumbnailPipelineError):
    """Error raised when resizing or re-encoding the image fails."""


class UploadError(ThumbnailPipelineError):
    """Error raised when the thumbnail cannot be written."""


class WriteFailure(UploadError):
    """The blob store rejected the put (quota, permission, network)."""


class PersistenceFailure(ThumbnailPipelineError):
    """Error raised when the thumbnail record cannot be stored."""
