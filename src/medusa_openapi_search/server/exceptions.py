"""Tool-layer exceptions and error reporting.

Errors follow JSON-RPC 2.0: standard codes for invalid input and internal
failures, custom negative codes for domain errors.
"""

import time
from typing import Any, Dict, List, Optional

from structlog.types import FilteringBoundLogger


class MCPServerError(Exception):
    """Base exception for tool server errors with JSON-RPC 2.0 compliance."""

    def __init__(
        self, code: int, message: str, data: Optional[Dict[str, Any]] = None
    ):
        """Initialize tool server error.

        Args:
            code: JSON-RPC 2.0 error code
            message: Human-readable error message
            data: Additional error context and debugging information
        """
        super().__init__(message)
        self.code = code
        self.message = message
        self.data = data or {}
        self.timestamp = time.time()

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to JSON-RPC 2.0 error response format."""
        error_dict = {"code": self.code, "message": self.message}
        if self.data:
            error_dict["data"] = self.data
        return error_dict


class ValidationError(MCPServerError):
    """Tool argument validation error (-32602 Invalid params)."""

    def __init__(
        self,
        parameter: str,
        message: str,
        value: Any = None,
        suggestions: Optional[List[str]] = None,
    ):
        """Initialize validation error.

        Args:
            parameter: Name of the invalid argument
            message: Specific validation error message
            value: The invalid value that caused the error
            suggestions: List of suggested valid values
        """
        data = {"parameter": parameter, "error_type": "validation_error"}
        if value is not None:
            data["value"] = str(value)
        if suggestions:
            data["suggestions"] = suggestions

        super().__init__(
            code=-32602,
            message=f"Invalid parameter '{parameter}': {message}",
            data=data,
        )


class ResourceNotFoundError(MCPServerError):
    """Resource not found error (custom code -1001)."""

    def __init__(
        self,
        resource_type: str,
        identifier: str,
        suggestions: Optional[List[str]] = None,
    ):
        """Initialize resource not found error.

        Args:
            resource_type: Type of resource (operation, tool, ...)
            identifier: Resource identifier that was not found
            suggestions: List of similar resources that exist
        """
        data = {
            "error_type": "not_found_error",
            "resource_type": resource_type,
            "identifier": identifier,
        }
        if suggestions:
            data["suggestions"] = suggestions

        super().__init__(
            code=-1001,
            message=f"Unknown {resource_type}: {identifier}",
            data=data,
        )


class ErrorLogger:
    """Structured error logging for tool calls."""

    def __init__(self, logger: FilteringBoundLogger):
        self.logger = logger

    def log_error(
        self,
        error: MCPServerError,
        context: Optional[Dict[str, Any]] = None,
        request_id: Optional[str] = None,
    ) -> None:
        """Log a tool server error at a level matching its severity.

        Args:
            error: Tool server error to log
            context: Additional context information
            request_id: Request ID for correlation
        """
        log_data = {
            "error_code": error.code,
            "error_message": error.message,
            "error_type": error.data.get("error_type", "unknown"),
            "timestamp": error.timestamp,
        }
        if request_id:
            log_data["request_id"] = request_id
        if context:
            log_data.update(context)

        # Invalid requests and unknown resources are the caller's problem
        if error.code in (-32600, -32601, -32602, -1001):
            self.logger.warning("Tool client error", **log_data)
        else:
            self.logger.error("Tool server error", **log_data)

    def log_operation_error(
        self,
        operation: str,
        error: Exception,
        context: Optional[Dict[str, Any]] = None,
        request_id: Optional[str] = None,
    ) -> None:
        """Log an unexpected failure with its traceback."""
        log_data = {
            "operation": operation,
            "error_message": str(error),
            "error_type": type(error).__name__,
        }
        if request_id:
            log_data["request_id"] = request_id
        if context:
            log_data.update(context)

        self.logger.error("Operation failed", exc_info=True, **log_data)


def create_mcp_error_response(
    error: MCPServerError, request_id: Optional[str] = None
) -> Dict[str, Any]:
    """Create a JSON-RPC 2.0 error envelope.

    Args:
        error: Tool server error
        request_id: Request ID from original request

    Returns:
        JSON-RPC 2.0 error response dictionary
    """
    response = {"jsonrpc": "2.0", "error": error.to_dict()}
    if request_id is not None:
        response["id"] = request_id
    return response


def sanitize_error_data(data: Dict[str, Any]) -> Dict[str, Any]:
    """Remove sensitive keys and truncate long strings before logging.

    Args:
        data: Raw argument or error data dictionary

    Returns:
        Sanitized copy safe for logs and clients
    """
    sensitive_keys = {
        "password",
        "token",
        "secret",
        "key",
        "auth",
        "credential",
    }

    sanitized = {}
    for key, value in data.items():
        if any(sensitive in key.lower() for sensitive in sensitive_keys):
            continue

        if isinstance(value, dict):
            sanitized[key] = sanitize_error_data(value)
        elif isinstance(value, str) and len(value) > 500:
            sanitized[key] = value[:500] + "... (truncated)"
        else:
            sanitized[key] = value

    return sanitized
