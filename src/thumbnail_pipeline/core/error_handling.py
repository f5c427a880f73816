# src/thumbnail_pipeline/core/error_handling.py

import functools
from typing import Any, Callable, Dict, Optional, Type, TypeVar

from botocore.exceptions import BotoCoreError, ClientError

from .exceptions import (
    AccessDenied,
    FetchError,
    ObjectNotFound,
    PersistenceFailure,
    ThumbnailPipelineError,
    WriteFailure,
)
from .logging_config import get_logger

F = TypeVar("F", bound=Callable[..., Any])

NOT_FOUND_ERROR_CODES = ("NoSuchKey", "NoSuchBucket", "NotFound", "404")
ACCESS_DENIED_ERROR_CODES = ("AccessDenied", "403")

FETCH_ERROR_MAP: Dict[str, Type[ThumbnailPipelineError]] = {
    **{code: ObjectNotFound for code in NOT_FOUND_ERROR_CODES},
    **{code: AccessDenied for code in ACCESS_DENIED_ERROR_CODES},
}

logger = get_logger("thumbnail-pipeline.store")


def client_error_code(error: ClientError) -> str:
    """Return the AWS error code carried by a botocore ClientError."""
    return str(error.response.get("Error", {}).get("Code", ""))


def with_storage_errors(
    default_error: Type[ThumbnailPipelineError],
    error_map: Optional[Dict[str, Type[ThumbnailPipelineError]]] = None,
) -> Callable[[F], F]:
    """
    Translate botocore failures raised by a store call into pipeline errors.

    ClientError codes found in error_map raise the mapped class; any other
    ClientError or BotoCoreError raises default_error. Pipeline errors and
    unrelated exceptions pass through untouched. Nothing is retried.

    The translation is traced at debug level only; the caller that handles
    the raised error owns the error log.
    """
    codes = error_map or {}

    def decorator(func: F) -> F:
        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            try:
                return func(*args, **kwargs)
            except ClientError as e:
                code = client_error_code(e)
                error_cls = codes.get(code, default_error)
                logger.debug(
                    f"Store call '{func.__name__}' failed with {code or 'unknown code'}, "
                    f"raising {error_cls.__name__}"
                )
                raise error_cls(f"{func.__name__} failed ({code}): {e}") from e
            except BotoCoreError as e:
                logger.debug(
                    f"Store call '{func.__name__}' failed: {e}, raising {default_error.__name__}"
                )
                raise default_error(f"{func.__name__} failed: {e}") from e

        return wrapper  # type: ignore[return-value]

    return decorator


fetch_errors = with_storage_errors(FetchError, FETCH_ERROR_MAP)
upload_errors = with_storage_errors(WriteFailure)
persistence_errors = with_storage_errors(PersistenceFailure)
