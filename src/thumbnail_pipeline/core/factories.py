"""Factory classes for creating configured service instances."""

from typing import Any, Dict, Optional

import boto3
from pydantic import ValidationError as PydanticValidationError

from .exceptions import ConfigurationError
from .models import PipelineConfig
from .observability import MetricsCollector, StructuredLogger
from .protocols import DynamoDBClientProtocol, LoggerProtocol, S3ClientProtocol
from .services import (
    DynamoDBMetadataRepository,
    ImageProcessorService,
    S3StorageGateway,
    ThumbnailPipeline,
)


class LoggerFactory:
    """Factory for creating logger instances."""

    @staticmethod
    def create_logger(name: str, level: Optional[str] = None) -> LoggerProtocol:
        """Create a context-aware logger on top of the shared logging setup."""
        return StructuredLogger.named(name, level=level)


class S3ClientFactory:
    """Factory for creating S3 client instances."""

    @staticmethod
    def create_s3_client(**kwargs: Any) -> S3ClientProtocol:
        """Create S3 client with optional configuration."""
        session = boto3.Session()
        return session.client("s3", **kwargs)  # type: ignore


class DynamoDBClientFactory:
    """Factory for creating DynamoDB client instances."""

    @staticmethod
    def create_dynamodb_client(**kwargs: Any) -> DynamoDBClientProtocol:
        session = boto3.Session()
        return session.client("dynamodb", **kwargs)  # type: ignore


def build_config(config_overrides: Optional[Dict[str, Any]] = None) -> PipelineConfig:
    """Merge overrides into the default configuration."""
    try:
        return PipelineConfig(**(config_overrides or {}))
    except PydanticValidationError as e:
        raise ConfigurationError(f"Invalid pipeline configuration: {e}") from e


class ThumbnailPipelineFactory:
    """Factory for creating the complete thumbnail pipeline."""

    @staticmethod
    def create_pipeline(
        s3_client: Optional[S3ClientProtocol] = None,
        dynamodb_client: Optional[DynamoDBClientProtocol] = None,
        logger: Optional[LoggerProtocol] = None,
        metrics_collector: Optional[MetricsCollector] = None,
        config_overrides: Optional[Dict[str, Any]] = None,
    ) -> ThumbnailPipeline:
        """Create a fully configured thumbnail pipeline."""
        config = build_config(config_overrides)

        # Create default dependencies if not provided
        if s3_client is None:
            s3_client = S3ClientFactory.create_s3_client()

        if dynamodb_client is None:
            dynamodb_client = DynamoDBClientFactory.create_dynamodb_client()

        if logger is None:
            logger = LoggerFactory.create_logger("thumbnail-pipeline")

        return ThumbnailPipeline(
            storage=S3StorageGateway(s3_client),
            repository=DynamoDBMetadataRepository(dynamodb_client, config.table_name),
            image_processor=ImageProcessorService(jpeg_quality=config.jpeg_quality),
            logger=logger,
            config=config,
            metrics_collector=metrics_collector,
        )
