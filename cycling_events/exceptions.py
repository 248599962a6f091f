"""Exception hierarchy for the cycling events aggregator.

Each exception carries structured context and a correction hint so that a
failed source can be logged with enough detail to fix its scraper.
"""

from typing import Any


class CyclingEventsError(Exception):
    """Base exception for all aggregator errors.

    Attributes:
        message: Human-readable error message.
        error_data: Structured error information.
        suggestion: Hint for how to resolve the error.
    """

    def __init__(
        self,
        message: str,
        error_data: dict[str, Any] | None = None,
        suggestion: str | None = None,
    ):
        """Initialize the error.

        Args:
            message: Human-readable error message.
            error_data: Structured context (URLs, sources, fields, etc.).
            suggestion: Actionable correction hint.
        """
        super().__init__(message)
        self.message = message
        self.error_data = error_data or {}
        self.suggestion = suggestion

    def __str__(self) -> str:
        """Return formatted error message with suggestion if available."""
        base = self.message
        if self.suggestion:
            return f"{base}\nSuggestion: {self.suggestion}"
        return base

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to structured dictionary for logging.

        Returns:
            Dictionary with error type, message, data, and suggestion.
        """
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "error_data": self.error_data,
            "suggestion": self.suggestion,
        }


class NetworkError(CyclingEventsError):
    """HTTP/connection failures while fetching a source document.

    Examples:
        - Connection timeout
        - HTTP 4xx/5xx responses
        - DNS resolution failures
    """

    def __init__(
        self,
        message: str,
        url: str | None = None,
        status_code: int | None = None,
        error_data: dict[str, Any] | None = None,
        suggestion: str | None = None,
    ):
        """Initialize network error.

        Args:
            message: Human-readable error message.
            url: The URL that failed.
            status_code: HTTP status code if a response was received.
            error_data: Additional context.
            suggestion: How to resolve the error.
        """
        data = error_data or {}
        data.update({"url": url, "status_code": status_code})

        default_suggestion = suggestion or (
            "The source answered with an error status. "
            "Check that the listing URL and its query parameters are still valid."
            if status_code is not None
            else "Check network connectivity. The source may be temporarily unavailable."
        )

        super().__init__(message, data, default_suggestion)
        self.url = url
        self.status_code = status_code


class ParseError(CyclingEventsError):
    """HTML processing failures (document could not be turned into events).

    A selector that matches nothing is not a ParseError; it only means the
    field is absent.
    """

    def __init__(
        self,
        message: str,
        source: str | None = None,
        selector: str | None = None,
        html_snippet: str | None = None,
        error_data: dict[str, Any] | None = None,
        suggestion: str | None = None,
    ):
        """Initialize parse error.

        Args:
            message: Human-readable error message.
            source: Source tag being parsed.
            selector: CSS selector that was being evaluated.
            html_snippet: Relevant HTML snippet (truncated).
            error_data: Additional context.
            suggestion: How to resolve the error.
        """
        data = error_data or {}
        data.update(
            {
                "source": source,
                "selector": selector,
                "html_snippet": html_snippet[:500] if html_snippet else None,
            }
        )

        default_suggestion = suggestion or (
            f"The page structure may have changed. "
            f"Check the selector '{selector}' against the source page."
            if selector
            else "The page structure may have changed. Review the listing layout."
        )

        super().__init__(message, data, default_suggestion)
        self.source = source
        self.selector = selector


class ValidationError(CyclingEventsError):
    """Request parameters that cannot be turned into an aggregation request.

    Examples:
        - Non-numeric latitude or radius
        - Unknown source name
    """

    def __init__(
        self,
        message: str,
        field: str | None = None,
        expected: str | None = None,
        received: Any = None,
        error_data: dict[str, Any] | None = None,
        suggestion: str | None = None,
    ):
        """Initialize validation error.

        Args:
            message: Human-readable error message.
            field: Field name that failed validation.
            expected: Expected data type or format.
            received: Actual value received.
            error_data: Additional context.
            suggestion: How to resolve the error.
        """
        data = error_data or {}
        data.update(
            {
                "field": field,
                "expected": expected,
                "received": str(received)[:200] if received else None,
            }
        )

        default_suggestion = suggestion or (
            f"Expected {expected} for field '{field}', but received: {received}."
            if field and expected
            else "Check the request parameters."
        )

        super().__init__(message, data, default_suggestion)
        self.field = field
        self.expected = expected
        self.received = received


class ConfigurationError(CyclingEventsError):
    """Missing or invalid configuration for a source.

    Examples:
        - Source needs an API token that was not supplied
        - Invalid timeout in the environment
    """

    def __init__(
        self,
        message: str,
        parameter: str | None = None,
        expected_format: str | None = None,
        example: str | None = None,
        error_data: dict[str, Any] | None = None,
        suggestion: str | None = None,
    ):
        """Initialize configuration error.

        Args:
            message: Human-readable error message.
            parameter: Parameter name that's missing or invalid.
            expected_format: Expected format for the parameter.
            example: Example of valid value.
            error_data: Additional context.
            suggestion: How to resolve the error.
        """
        data = error_data or {}
        data.update(
            {
                "parameter": parameter,
                "expected_format": expected_format,
                "example": example,
            }
        )

        default_suggestion = suggestion or (
            f"Parameter '{parameter}' must be in format: {expected_format}. "
            f"Example: {example}"
            if parameter and expected_format and example
            else "Check the environment configuration."
        )

        super().__init__(message, data, default_suggestion)
        self.parameter = parameter
        self.expected_format = expected_format
        self.example = example
