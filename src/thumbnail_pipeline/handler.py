"""
S3 object-created trigger for the thumbnail pipeline.

Every invocation is acknowledged: failures are logged and reported in the
returned payload instead of raised, so the event is not delivered again.
"""

import json
from functools import lru_cache
from typing import Any, Dict
from urllib.parse import unquote_plus

from .core import SourceObject, ValidationError, bind_request_id, get_logger
from .core.factories import ThumbnailPipelineFactory
from .core.services import ThumbnailPipeline


def parse_trigger_event(event: Dict[str, Any]) -> SourceObject:
    """
    Extract the source bucket and key from an S3 notification.

    Only the first record is read. Keys arrive URL-encoded and are decoded.

    Raises:
        ValidationError: If the event does not carry a bucket name and key
    """
    try:
        s3_info = event["Records"][0]["s3"]
        bucket = s3_info["bucket"]["name"]
        key = s3_info["object"]["key"]
    except (KeyError, IndexError, TypeError) as e:
        raise ValidationError(f"Malformed S3 event, missing {e}") from e

    return SourceObject(bucket=bucket, key=unquote_plus(key))


@lru_cache(maxsize=1)
def get_pipeline() -> ThumbnailPipeline:
    """Pipeline shared by all invocations in this process."""
    return ThumbnailPipelineFactory.create_pipeline()


def process_event(event: Dict[str, Any], pipeline: ThumbnailPipeline) -> Dict[str, Any]:
    """Run the pipeline for one notification and build the acknowledgment."""
    logger = get_logger("thumbnail-pipeline.handler")

    try:
        source = parse_trigger_event(event)
        result = pipeline.run(source)
    except ValidationError as e:
        logger.error(f"Rejected event: {e}")
        return {"status": "rejected", "error": str(e), "error_type": type(e).__name__}

    if result.success:
        return {"status": "done", **result.summary()}
    return {"status": "failed", **result.summary()}


def lambda_handler(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    bind_request_id(context)
    logger = get_logger("thumbnail-pipeline.handler")
    logger.info(f"Reading options from event: {json.dumps(event, default=str)}")

    try:
        pipeline = get_pipeline()
    except Exception as e:
        logger.error(f"Could not build pipeline: {e}", exc_info=True)
        return {"status": "failed", "error": str(e), "error_type": type(e).__name__}

    return process_event(event, pipeline)
