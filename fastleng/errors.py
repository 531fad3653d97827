"""
fastleng Error Classes - Standardized exceptions and error handling

Usage:
    from fastleng.errors import (
        FastlengError, SourceUnavailableError, DecodeError,
        OutputUnwritableError, handle_error
    )

    try:
        counts = gather_multifastx_stats(filenames)
    except FastlengError as e:
        handle_error(e, verbose=args.verbose)
"""

import sys
import traceback
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional


# Process exit codes used by the CLI
EXIT_SUCCESS = 0
EXIT_FAILURE = 1
EXIT_USAGE = 2
EXIT_SOURCE_UNAVAILABLE = 3
EXIT_OUTPUT_UNWRITABLE = 4
EXIT_DECODE_FAILURE = 5


class ErrorSeverity(Enum):
    """Severity levels for errors"""
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(Enum):
    """Categories for error classification"""
    CONFIGURATION = "configuration"
    INPUT = "input"
    DECODE = "decode"
    OUTPUT = "output"
    UNKNOWN = "unknown"


@dataclass
class ErrorContext:
    """Context information for an error"""
    timestamp: str = field(default_factory=lambda: datetime.now().isoformat())
    operation: Optional[str] = None
    file_path: Optional[str] = None
    record_index: Optional[int] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        result = {"timestamp": self.timestamp}
        if self.operation:
            result["operation"] = self.operation
        if self.file_path:
            result["file_path"] = self.file_path
        if self.record_index is not None:
            result["record_index"] = self.record_index
        if self.extra:
            result.update(self.extra)
        return result


class FastlengError(Exception):
    """
    Base exception for all fastleng errors.

    Provides structured error information including:
    - Error message
    - Error code
    - Severity level
    - Category
    - Context information
    - Suggested fixes
    - Process exit code for the CLI
    """

    default_code = "FASTLENG_ERROR"
    default_category = ErrorCategory.UNKNOWN
    default_severity = ErrorSeverity.ERROR
    exit_code = EXIT_FAILURE

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        severity: Optional[ErrorSeverity] = None,
        category: Optional[ErrorCategory] = None,
        details: Optional[Dict[str, Any]] = None,
        context: Optional[ErrorContext] = None,
        suggestions: Optional[List[str]] = None,
        cause: Optional[Exception] = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code
        self.severity = severity or self.default_severity
        self.category = category or self.default_category
        self.details = details or {}
        self.context = context or ErrorContext()
        self.suggestions = suggestions or []
        self.cause = cause

    def __str__(self) -> str:
        return self.message

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code!r}, message={self.message!r})"

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary for JSON serialization"""
        result = {
            "error": self.__class__.__name__,
            "code": self.code,
            "message": self.message,
            "severity": self.severity.value,
            "category": self.category.value,
            "exit_code": self.exit_code,
        }
        if self.details:
            result["details"] = self.details
        if self.context:
            result["context"] = self.context.to_dict()
        if self.suggestions:
            result["suggestions"] = self.suggestions
        if self.cause:
            result["cause"] = str(self.cause)
        return result

    def format_message(self, verbose: bool = False) -> str:
        """Format error message for display"""
        lines = [f"[{self.code}] {self.message}"]

        if verbose:
            if self.details:
                lines.append("Details:")
                for key, value in self.details.items():
                    lines.append(f"  {key}: {value}")

            if self.suggestions:
                lines.append("Suggestions:")
                for suggestion in self.suggestions:
                    lines.append(f"  - {suggestion}")

            if self.cause:
                lines.append(f"Caused by: {self.cause}")

        return "\n".join(lines)


class ConfigurationError(FastlengError):
    """Error in configuration settings"""
    default_code = "CONFIG_ERROR"
    default_category = ErrorCategory.CONFIGURATION

    def __init__(
        self,
        message: str,
        config_key: Optional[str] = None,
        config_file: Optional[str] = None,
        **kwargs
    ):
        details = kwargs.pop("details", {})
        if config_key:
            details["config_key"] = config_key
        if config_file:
            details["config_file"] = config_file
        super().__init__(message, details=details, **kwargs)


class SourceUnavailableError(FastlengError):
    """An input file could not be opened (missing, unreadable, unknown format)"""
    default_code = "SOURCE_UNAVAILABLE"
    default_category = ErrorCategory.INPUT
    exit_code = EXIT_SOURCE_UNAVAILABLE

    def __init__(
        self,
        message: str,
        path: Optional[str] = None,
        file_format: Optional[str] = None,
        **kwargs
    ):
        details = kwargs.pop("details", {})
        if path:
            details["path"] = path
        if file_format:
            details["format"] = file_format
        kwargs.setdefault("context", ErrorContext(operation="open", file_path=path))
        super().__init__(message, details=details, **kwargs)
        self.path = path


class DecodeError(FastlengError):
    """A record in the middle of an input file could not be parsed"""
    default_code = "DECODE_ERROR"
    default_category = ErrorCategory.DECODE
    exit_code = EXIT_DECODE_FAILURE

    def __init__(
        self,
        message: str,
        path: Optional[str] = None,
        record_index: Optional[int] = None,
        **kwargs
    ):
        details = kwargs.pop("details", {})
        if path:
            details["path"] = path
        if record_index is not None:
            details["record_index"] = record_index
        kwargs.setdefault(
            "context",
            ErrorContext(operation="decode", file_path=path, record_index=record_index)
        )
        super().__init__(message, details=details, **kwargs)
        self.path = path
        self.record_index = record_index


class OutputUnwritableError(FastlengError):
    """A report or distribution destination cannot be created"""
    default_code = "OUTPUT_UNWRITABLE"
    default_category = ErrorCategory.OUTPUT
    exit_code = EXIT_OUTPUT_UNWRITABLE

    def __init__(
        self,
        message: str,
        path: Optional[str] = None,
        **kwargs
    ):
        details = kwargs.pop("details", {})
        if path:
            details["path"] = path
        super().__init__(message, details=details, **kwargs)
        self.path = path


# Error handling utilities

def format_exception(exc: Exception, verbose: bool = False) -> str:
    """Format an exception for display"""
    if isinstance(exc, FastlengError):
        return exc.format_message(verbose=verbose)

    if verbose:
        return "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
    return str(exc)


def handle_error(
    exc: Exception,
    exit_code: Optional[int] = None,
    verbose: bool = False,
    raise_error: bool = False
) -> None:
    """
    Standard error handler for the CLI.

    Args:
        exc: The exception to handle
        exit_code: Exit code override (default: the error's own exit code)
        verbose: Whether to show verbose output
        raise_error: If True, re-raise instead of exiting
    """
    message = format_exception(exc, verbose=verbose)

    if isinstance(exc, FastlengError):
        # format_message already carries the code
        prefix = "Error"
        code = exc.exit_code if exit_code is None else exit_code
    else:
        prefix = f"Error [{type(exc).__name__}]"
        code = EXIT_FAILURE if exit_code is None else exit_code

    print(f"{prefix}: {message}", file=sys.stderr)

    if raise_error:
        raise exc
    sys.exit(code)
