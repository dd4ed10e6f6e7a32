"""Error classification system for yumldot.

Defines the exceptions raised while compiling a diagram and classifies any
exception into a category with an actionable suggestion for the CLI.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional
import structlog

log = structlog.get_logger()


class ErrorCategory(Enum):
    """Categories of errors for reporting decisions."""

    EXPRESSION = "expression"  # Token matches no production of the grammar
    DIRECTIVE = "directive"    # Bad or missing header directive
    RENDER = "render"          # External renderer failed
    IO = "io"                  # Reading or writing files


class YumlError(Exception):
    """Base class for all diagram compilation errors."""

    category = ErrorCategory.EXPRESSION


class ExpressionError(YumlError):
    """A token could not be classified in the active grammar."""

    category = ErrorCategory.EXPRESSION

    def __init__(self, token: str, reason: str = "invalid expression"):
        self.token = token
        self.reason = reason
        super().__init__(f"{reason}: {token!r}")


class DirectiveError(YumlError):
    """A recognised directive key carries a value it does not accept."""

    category = ErrorCategory.DIRECTIVE

    def __init__(self, key: str, value: str):
        self.key = key
        self.value = value
        super().__init__(f"invalid value for '{key}': {value}")


class MissingTypeError(YumlError):
    """The document has no ``// {type:...}`` directive."""

    category = ErrorCategory.DIRECTIVE

    def __init__(self):
        super().__init__("Missing mandatory 'type' directive")


class RenderError(YumlError):
    """The Graphviz renderer could not produce output."""

    category = ErrorCategory.RENDER


@dataclass
class ClassifiedError:
    """A classified error with reporting metadata."""

    category: ErrorCategory
    message: str
    suggestion: Optional[str] = None
    original_exception: Optional[Exception] = None

    def __str__(self) -> str:
        """Human-readable error representation."""
        parts = [self.message]
        if self.suggestion:
            parts.append(f"Suggestion: {self.suggestion}")
        return " | ".join(parts)


# Suggestions for common error patterns
ERROR_SUGGESTIONS = {
    "missing mandatory 'type'": "Add a header line such as: // {type:activity}",
    "invalid value for 'type'": "Use one of: class, usecase, activity, state, deployment, package, sequence",
    "invalid value for 'direction'": "Use one of: leftToRight, rightToLeft, topDown",
    "invalid value for 'generate'": "Use true or false",
    "invalid expression": "Check brackets and arrows; escape literal brackets with a backslash",
    "not found on path": "Install Graphviz (https://graphviz.org) or set renderer.binary in yumldot.toml",
    "timed out": "Increase renderer.timeout_s or simplify the diagram",
    "no such file": "Check the input path",
    "permission denied": "Check file permissions or try a different location",
    "is a directory": "Expected a file path, not a directory",
    "codec can't decode": "Input must be UTF-8 text",
}


# Fixed suggestions for file problems, checked before message patterns
IO_SUGGESTIONS = [
    (FileNotFoundError, "Check the input path"),
    (PermissionError, "Check file permissions or try a different location"),
    (UnicodeDecodeError, "Input must be UTF-8 text"),
]


def classify_error(error: Exception) -> ClassifiedError:
    """Classify an exception for reporting.

    YumlError subclasses keep their own category. OS and decoding errors
    are IO errors; anything else is reported as an expression error.

    Args:
        error: The exception to classify

    Returns:
        ClassifiedError with category and suggestion
    """
    message = str(error)

    if isinstance(error, YumlError):
        category = error.category
        suggestion = _get_suggestion(message.lower())
    elif isinstance(error, (OSError, UnicodeDecodeError)):
        category = ErrorCategory.IO
        suggestion = next(
            (text for kind, text in IO_SUGGESTIONS if isinstance(error, kind)),
            None,
        ) or _get_suggestion(message.lower())
    else:
        log.debug("unclassified_error", error_type=type(error).__name__)
        category = ErrorCategory.EXPRESSION
        suggestion = _get_suggestion(message.lower())

    return ClassifiedError(category, message, suggestion, original_exception=error)


def _get_suggestion(error_msg: str) -> Optional[str]:
    """Get a suggestion for an error message.

    Args:
        error_msg: Lowercase error message

    Returns:
        Suggestion string or None
    """
    for pattern, suggestion in ERROR_SUGGESTIONS.items():
        if pattern in error_msg:
            return suggestion
    return None


def get_error_suggestion(error: Exception) -> Optional[str]:
    """Get a suggestion for handling an error.

    Args:
        error: The exception to get suggestion for

    Returns:
        Suggestion string or None
    """
    return classify_error(error).suggestion
