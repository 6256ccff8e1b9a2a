"""
QA Extractor: Custom Exception Hierarchy
===========================================

What:  Application-specific exceptions for each failure the extraction
       pipeline can report.
How:   Each exception carries a message and an optional context dict.
       Exception handlers registered in main.py translate them into JSON
       error responses exactly once, at the HTTP boundary.
Who:   Raised by services and route handlers; caught by global handlers.

Exception Hierarchy:
    QAExtractorError (base)
    ├── ValidationError          → 400 {"error": "No valid image provided"}
    ├── ImageNotFoundError       → 400 {"error": "Image file not found"}
    ├── ImageReadError           → 500 Internal server error
    ├── ImageDecodeError         → 500 Internal server error
    └── ModelInvocationError     → 500 Internal server error
"""

from typing import Any, Dict, Optional


class QAExtractorError(Exception):
    """
    Base exception for all QA Extractor application errors.

    Attributes:
        message:  Human-readable description (returned in API responses)
        context:  Additional debug info (logged but NOT returned to client)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(QAExtractorError):
    """
    Raised when the request carries no usable image source.

    When:    Neither an `image` upload nor an `image_path` field is present,
             or the JSON body cannot be decoded.
    HTTP:    400 Bad Request
    """

    def __init__(
        self,
        message: str = "No valid image provided",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class ImageNotFoundError(QAExtractorError, FileNotFoundError):
    """
    Raised when a path-based image source does not resolve on disk.

    Also a FileNotFoundError so callers outside the HTTP layer can catch it
    with the builtin type.
    HTTP:    400 Bad Request
    """

    def __init__(
        self,
        path: str = "",
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        ctx["path"] = path
        QAExtractorError.__init__(self, message="Image file not found", context=ctx)
        self.path = path

    def __str__(self) -> str:
        return self.message


class ImageReadError(QAExtractorError):
    """
    Raised when a path exists but its bytes cannot be read.

    When:    The path is a directory, or permissions deny access.
    HTTP:    500 Internal Server Error
    """

    def __init__(
        self,
        message: str = "Could not read image file",
        path: str = "",
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        ctx["path"] = path
        super().__init__(message=message, context=ctx)
        self.path = path


class ImageDecodeError(QAExtractorError):
    """
    Raised when input bytes are not a decodable image.

    When:    Empty upload, truncated file, unsupported format (e.g. a PDF).
    HTTP:    500 Internal Server Error
    """

    def __init__(
        self,
        message: str = "Could not decode image data",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class ModelInvocationError(QAExtractorError):
    """
    Raised when the generative model call fails.

    What:    Wraps transport, authentication, quota and malformed-response
             failures from the Gemini SDK. The original exception is chained
             as __cause__ and its text is included in the message.
    HTTP:    500 Internal Server Error
    """

    def __init__(
        self,
        message: str = "Generative model call failed",
        attempts: int = 1,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        ctx["attempts"] = attempts
        super().__init__(message=message, context=ctx)
        self.attempts = attempts
