"""Service implementations for the thumbnail pipeline."""

import time
from contextlib import contextmanager
from typing import Any, Dict, Iterator, Mapping, Optional

from .error_handling import fetch_errors, persistence_errors, upload_errors
from .image_utils import compute_target_size, probe_image, resize_image, to_pixels
from .models import (
    DescriptiveMetadata,
    FetchedObject,
    ImageBuffer,
    ImageType,
    PipelineConfig,
    PipelineResult,
    PipelineState,
    SizeHint,
    SourceObject,
    ThumbnailRecord,
)
from .observability import LogContext, MetricsCollector, timed_stage
from .protocols import (
    DynamoDBClientProtocol,
    LoggerProtocol,
    MetadataRepository,
    S3ClientProtocol,
    StorageGateway,
)


class ImageProcessorService:
    """Pure image processing service with no I/O dependencies."""

    def __init__(self, jpeg_quality: int = 95):
        self._jpeg_quality = jpeg_quality

    def probe(self, image_bytes: bytes) -> ImageBuffer:
        """Decode bytes and report their intrinsic size."""
        return probe_image(image_bytes)

    def resize(
        self,
        buffer: ImageBuffer,
        target_width: float,
        target_height: float,
        output_type: ImageType,
    ) -> bytes:
        """Resize and encode as output_type."""
        return resize_image(
            buffer, target_width, target_height, output_type, quality=self._jpeg_quality
        )


class S3StorageGateway(StorageGateway):
    """Storage gateway backed by an S3 client. Failures are never retried here."""

    def __init__(self, s3_client: S3ClientProtocol):
        self._s3_client = s3_client

    @fetch_errors
    def fetch(self, bucket: str, key: str) -> FetchedObject:
        response = self._s3_client.get_object(Bucket=bucket, Key=key)
        return FetchedObject(
            body=response["Body"].read(),
            content_type=response.get("ContentType", ""),
            metadata=response.get("Metadata") or {},
        )

    @upload_errors
    def put(
        self,
        bucket: str,
        key: str,
        body: bytes,
        content_type: str,
        metadata: Mapping[str, str],
    ) -> Dict[str, Any]:
        return self._s3_client.put_object(
            Bucket=bucket,
            Key=key,
            Body=body,
            ContentType=content_type,
            Metadata=dict(metadata),
        )


class DynamoDBMetadataRepository(MetadataRepository):
    """Writes thumbnail records as string attributes with put_item."""

    def __init__(self, dynamodb_client: DynamoDBClientProtocol, table_name: str):
        self._dynamodb_client = dynamodb_client
        self._table_name = table_name

    @staticmethod
    def serialize(record: ThumbnailRecord) -> Dict[str, Dict[str, str]]:
        """Convert a record to DynamoDB attribute values, skipping absent fields."""
        return {name: {"S": value} for name, value in record.to_item().items()}

    @persistence_errors
    def upsert(self, record: ThumbnailRecord) -> Dict[str, Any]:
        return self._dynamodb_client.put_item(
            TableName=self._table_name, Item=self.serialize(record)
        )


class ThumbnailPipeline:
    """
    Runs fetch → size → encode → upload → record for one source object.

    Stages run strictly in order. The first failure moves the run to FAILED
    and skips every later stage; completed writes are not undone.
    """

    def __init__(
        self,
        storage: StorageGateway,
        repository: MetadataRepository,
        image_processor: ImageProcessorService,
        logger: LoggerProtocol,
        config: Optional[PipelineConfig] = None,
        metrics_collector: Optional[MetricsCollector] = None,
    ):
        self._storage = storage
        self._repository = repository
        self._image_processor = image_processor
        self._logger = logger
        self._config = config or PipelineConfig()
        self._metrics_collector = metrics_collector

    @property
    def config(self) -> PipelineConfig:
        return self._config

    @contextmanager
    def _stage(
        self, state: PipelineState, result: PipelineResult, log_context: LogContext
    ) -> Iterator[None]:
        stage_context = log_context.with_operation(state.value)
        self._logger.debug(f"Entering stage {state.value}", stage_context)
        with timed_stage(
            state.value, self._metrics_collector, source_key=result.source_key
        ):
            yield
        result.state = state

    def run(self, source: SourceObject) -> PipelineResult:
        """
        Produce and record the thumbnail for source.

        Raises:
            ValidationError: If the key has no jpg/png extension. Nothing is
                fetched or written in that case.

        Every other failure is logged and returned as a FAILED result.
        """
        image_type = source.image_type
        dest_key = source.destination_key(self._config.thumbnail_prefix)

        log_context = LogContext(
            correlation_id=f"thumb_{source.key}_{int(time.time() * 1000)}",
            operation="run",
            component="thumbnail_pipeline",
        ).with_metadata(
            bucket=source.bucket, source_key=source.key, dest_key=dest_key
        )

        result = PipelineResult(
            source_bucket=source.bucket, source_key=source.key, dest_key=dest_key
        )
        start_time = time.time()

        try:
            with self._stage(PipelineState.FETCHED, result, log_context):
                fetched = self._storage.fetch(source.bucket, source.key)
                metadata = DescriptiveMetadata.from_mapping(fetched.metadata)
                self._logger.debug(
                    "Fetched source object", log_context, metadata=metadata.raw
                )

            with self._stage(PipelineState.SIZED, result, log_context):
                buffer = self._image_processor.probe(fetched.body)
                hint = SizeHint.from_metadata(
                    metadata,
                    self._config.default_max_width,
                    self._config.default_max_height,
                )
                target_width, target_height = compute_target_size(
                    buffer.width, buffer.height, hint.max_width, hint.max_height
                )
                result.target_width, result.target_height = to_pixels(
                    target_width, target_height
                )

            with self._stage(PipelineState.ENCODED, result, log_context):
                thumbnail = self._image_processor.resize(
                    buffer, target_width, target_height, image_type
                )

            with self._stage(PipelineState.UPLOADED, result, log_context):
                self._storage.put(
                    source.bucket,
                    dest_key,
                    thumbnail,
                    image_type.content_type,
                    metadata.to_mapping(),
                )

            with self._stage(PipelineState.RECORDED, result, log_context):
                record = ThumbnailRecord.for_thumbnail(source.key, dest_key, metadata)
                self._repository.upsert(record)

        except Exception as e:
            result.failed_stage = result.state
            result.state = PipelineState.FAILED
            result.error = str(e)
            result.error_type = type(e).__name__
            result.processing_time = time.time() - start_time

            error_context = log_context.with_metadata(
                stage=result.failed_stage.value, error_type=result.error_type
            )
            self._logger.error(f"Thumbnail pipeline failed: {e}", error_context, exc_info=True)
            return result

        result.state = PipelineState.DONE
        result.processing_time = time.time() - start_time
        self._logger.info(
            f"Successfully resized {source.bucket}/{source.key} "
            f"and uploaded to {source.bucket}/{dest_key}",
            log_context,
            processing_time_ms=result.processing_time * 1000,
        )
        return result
