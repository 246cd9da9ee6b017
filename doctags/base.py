"""
Tools Base Interface

This module defines the common interface that the doc tag tools follow.
Every tool wraps a plain function from the core and turns its outcome into a
ToolResult, so the boundary layer can decide how to fail without catching
exceptions itself.
"""

import json
import uuid
from abc import ABC, abstractmethod
from dataclasses import asdict, dataclass
from datetime import UTC, datetime
from enum import Enum
from typing import Any, Generic, TypeVar

from loguru import logger

from doctags.errors import (
    ConfigurationError,
    GitHubAPIError,
    MalformedTagError,
    RevisionSwitchError,
)

# Generic type for tool input/output
InputT = TypeVar("InputT")
OutputT = TypeVar("OutputT")


class ToolStatus(Enum):
    """Tool execution status values."""

    SUCCESS = "success"
    ERROR = "error"


class ToolErrorCode(Enum):
    """Standard tool error codes."""

    SUCCESS = "SUCCESS"
    INVALID_INPUT = "INVALID_INPUT"
    MALFORMED_TAG = "MALFORMED_TAG"
    REVISION_SWITCH_FAILED = "REVISION_SWITCH_FAILED"
    NETWORK_ERROR = "NETWORK_ERROR"
    FILE_NOT_FOUND = "FILE_NOT_FOUND"
    PERMISSION_ERROR = "PERMISSION_ERROR"
    PROCESSING_ERROR = "PROCESSING_ERROR"


@dataclass
class ToolMetrics:
    """Tool execution performance metrics."""

    processing_time_ms: int
    files_processed: int | None = None
    additional_metrics: dict[str, Any] | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return asdict(self)


@dataclass
class ToolResult(Generic[OutputT]):
    """Standard structure for tool execution results."""

    status: ToolStatus
    output: OutputT | None = None
    error_code: ToolErrorCode | None = None
    error_message: str | None = None
    metrics: ToolMetrics | None = None

    def __post_init__(self) -> None:
        """Validate result data."""
        if self.status == ToolStatus.ERROR and not self.error_code:
            raise ValueError("error_code is required when status is ERROR")

    @property
    def ok(self) -> bool:
        return self.status == ToolStatus.SUCCESS

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        result = asdict(self)
        result["status"] = self.status.value
        if self.error_code:
            result["error_code"] = self.error_code.value
        return result

    def to_json(self) -> str:
        """Convert to JSON string."""
        return json.dumps(self.to_dict(), indent=2, default=str)

    @classmethod
    def success(
        cls,
        output: OutputT,
        metrics: ToolMetrics | None = None,
    ) -> "ToolResult[OutputT]":
        """Create success result."""
        return cls(
            status=ToolStatus.SUCCESS,
            output=output,
            metrics=metrics,
        )

    @classmethod
    def error(
        cls,
        error_code: ToolErrorCode,
        error_message: str,
        metrics: ToolMetrics | None = None,
    ) -> "ToolResult[OutputT]":
        """Create error result."""
        return cls(
            status=ToolStatus.ERROR,
            error_code=error_code,
            error_message=error_message,
            metrics=metrics,
        )


class BaseTool(ABC, Generic[InputT, OutputT]):
    """
    Base class for all tools.

    Subclasses implement `execute` and let it raise; `run` handles logging,
    metrics and the translation of exceptions into error results.
    """

    def __init__(self, tool_name: str) -> None:
        """Initialize the tool."""
        self.tool_name = tool_name
        self.tool_id = f"{tool_name}_{uuid.uuid4().hex[:8]}"
        self.start_time: datetime | None = None

    @abstractmethod
    def execute(self, input_data: InputT) -> ToolResult[OutputT]:
        """
        Main method for tool execution.

        Args:
            input_data: Input data required for tool execution

        Returns:
            Tool execution result
        """
        pass

    def _start_execution(self) -> None:
        """Record execution start time."""
        self.start_time = datetime.now(UTC)

    def _end_execution(self) -> int:
        """Calculate processing time in milliseconds."""
        if not self.start_time:
            return 0

        end_time = datetime.now(UTC)
        duration = (end_time - self.start_time).total_seconds() * 1000
        return int(duration)

    def _create_metrics(self, **kwargs: Any) -> ToolMetrics:
        """Create metrics object."""
        processing_time = self._end_execution()
        return ToolMetrics(processing_time_ms=processing_time, **kwargs)

    def _log_execution_start(self, input_data: InputT) -> None:
        """Log execution start."""
        logger.info(f"Tool {self.tool_name} execution started: {self.tool_id}")
        logger.debug(f"Input data: {input_data}")

    def _log_execution_success(self, result: ToolResult[OutputT]) -> None:
        """Log execution success."""
        logger.info(f"Tool {self.tool_name} execution successful: {self.tool_id}")
        if result.metrics:
            logger.debug(f"Processing time: {result.metrics.processing_time_ms}ms")

    def _log_execution_error(self, error: Exception, error_code: ToolErrorCode) -> None:
        """Log execution error."""
        logger.error(f"Tool {self.tool_name} execution failed: {self.tool_id}")
        logger.error(f"Error code: {error_code.value}")
        logger.error(f"Error message: {str(error)}")

    def run(self, input_data: InputT) -> ToolResult[OutputT]:
        """
        Wrapper method for tool execution.

        Args:
            input_data: Input data required for tool execution

        Returns:
            Tool execution result; never raises for errors raised by `execute`
        """
        try:
            self._start_execution()
            self._log_execution_start(input_data)

            result = self.execute(input_data)

            if not result.metrics:
                result.metrics = self._create_metrics()

            self._log_execution_success(result)
            return result

        except Exception as e:
            error_code = self._classify_error(e)
            error_result: ToolResult[OutputT] = ToolResult.error(
                error_code=error_code,
                error_message=str(e),
                metrics=self._create_metrics(),
            )

            self._log_execution_error(e, error_code)
            return error_result

    def _classify_error(self, error: Exception) -> ToolErrorCode:
        """Classify error into standard error codes."""

        if isinstance(error, MalformedTagError):
            return ToolErrorCode.MALFORMED_TAG
        elif isinstance(error, RevisionSwitchError):
            return ToolErrorCode.REVISION_SWITCH_FAILED
        elif isinstance(error, GitHubAPIError):
            return ToolErrorCode.NETWORK_ERROR
        elif isinstance(error, ConfigurationError | ValueError | TypeError):
            return ToolErrorCode.INVALID_INPUT
        elif isinstance(error, FileNotFoundError):
            return ToolErrorCode.FILE_NOT_FOUND
        elif isinstance(error, PermissionError):
            return ToolErrorCode.PERMISSION_ERROR
        else:
            return ToolErrorCode.PROCESSING_ERROR
