"""
Logging setup for the thumbnail pipeline.

Every pipeline logger writes to stdout, where the Lambda runtime forwards it to
CloudWatch. Records carry the AWS request id of the invocation that emitted
them so interleaved warm-container output can be told apart.
"""

import os
import sys
import logging
from contextvars import ContextVar
from typing import Any, List, Optional

NO_REQUEST_ID = "-"
HANDLER_NAME = "thumbnail-pipeline-stdout"

_request_id: ContextVar[str] = ContextVar("aws_request_id", default=NO_REQUEST_ID)

STRUCTURED_FORMAT = (
    "%(asctime)s | %(aws_request_id)s | %(name)s | %(levelname)-8s | "
    "%(filename)s:%(lineno)d | %(funcName)s() | %(message)s"
)
SIMPLE_FORMAT = "%(asctime)s - %(aws_request_id)s - %(levelname)s - %(message)s"


class RequestIdFilter(logging.Filter):
    """Stamp each record with the request id bound for the current invocation."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.aws_request_id = _request_id.get()
        return True


def bind_request_id(context: Any) -> str:
    """
    Bind the request id of a Lambda context object to subsequent log records.

    Local runs and tests pass no context; their records show NO_REQUEST_ID.
    """
    request_id = getattr(context, "aws_request_id", None) or NO_REQUEST_ID
    _request_id.set(request_id)
    return request_id


def current_request_id() -> str:
    return _request_id.get()


def pipeline_handlers(logger: logging.Logger) -> List[logging.Handler]:
    """Handlers attached by setup_logger, ignoring any added by a test harness."""
    return [h for h in logger.handlers if h.get_name() == HANDLER_NAME]


def setup_logger(
    name: str = "thumbnail-pipeline",
    level: Optional[str] = None,
    format_type: str = "structured",
) -> logging.Logger:
    """
    Configure a pipeline logger from the environment.

    Args:
        name: Logger name
        level: Log level override (defaults to LOG_LEVEL or INFO)
        format_type: "structured" or "simple"; LOG_FORMAT takes precedence

    Returns:
        Logger with a single stdout handler that does not propagate to the
        root logger the Lambda runtime installs.
    """
    logger = logging.getLogger(name)

    if level:
        log_level = getattr(logging, level.upper(), logging.INFO)
    else:
        env_level = os.getenv("LOG_LEVEL", "INFO").upper()
        log_level = getattr(logging, env_level, logging.INFO)

    logger.setLevel(log_level)

    # Warm invocations reuse the module state, so only attach once
    if not pipeline_handlers(logger):
        handler = logging.StreamHandler(sys.stdout)
        handler.set_name(HANDLER_NAME)
        env_format = os.getenv("LOG_FORMAT", format_type).lower()
        fmt = STRUCTURED_FORMAT if env_format == "structured" else SIMPLE_FORMAT
        handler.setFormatter(logging.Formatter(fmt, datefmt="%Y-%m-%d %H:%M:%S"))
        handler.addFilter(RequestIdFilter())
        logger.addHandler(handler)

    logger.propagate = False
    return logger


def get_logger(name: str = "thumbnail-pipeline") -> logging.Logger:
    """Return a logger configured by setup_logger."""
    return setup_logger(name)
