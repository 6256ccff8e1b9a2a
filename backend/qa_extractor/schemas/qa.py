"""
QA Extractor: Pydantic Request/Response Schemas
==================================================

What:  Pydantic models defining the HTTP contract of the service.
How:   FastAPI uses these models to serialize responses and generate the
       OpenAPI documentation. Request bodies for /extract_qa are parsed by
       hand (multipart OR JSON), then validated with ExtractQARequest.
"""

from typing import List, Optional

from pydantic import BaseModel, Field


# ══════════════════════════════════════════════════════════════════════════
# Domain Models
# ══════════════════════════════════════════════════════════════════════════


class QAPair(BaseModel):
    """
    One extracted question/answer pair.

    Both fields are non-empty after trimming; the parser never builds a pair
    that violates this.
    """
    question: str = Field(min_length=1, description="Question text")
    answer: str = Field(min_length=1, description="Answer text")

    model_config = {"frozen": True}


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class ExtractQARequest(BaseModel):
    """
    JSON body accepted by POST /extract_qa when no file is uploaded.

    Example:
        {"image_path": "/data/scans/quiz-01.png"}
    """
    image_path: Optional[str] = Field(
        default=None,
        description="Filesystem path to an image readable by the server",
    )

    model_config = {"extra": "ignore"}


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class WelcomeResponse(BaseModel):
    message: str = Field(default="Welcome to the API!")


class ExtractQAResponse(BaseModel):
    """
    What:  Response after successfully extracting pairs from an image.
    Who:   Returned by POST /extract_qa with HTTP 200.

    Never empty: when nothing could be parsed it holds the single sentinel
    pair ("No questions detected" / "No answers detected").
    """
    questions_answers: List[QAPair] = Field(
        description="Pairs in order of appearance in the image",
    )


class ClientErrorResponse(BaseModel):
    """Body of every 400 response."""
    error: str = Field(description="'No valid image provided' or 'Image file not found'")


class ServerErrorResponse(BaseModel):
    """
    Body of every 500 response.

    Example:
        {
            "error": "Internal server error",
            "message": "Failed to process image: 429 Resource has been exhausted",
        }
    """
    error: str = Field(default="Internal server error")
    message: str = Field(description="Underlying error message")
    stack: Optional[str] = Field(
        default=None,
        description="Stack trace (development mode only)",
    )


class HealthResponse(BaseModel):
    """
    What:  Health check response showing service and dependency status.
    Who:   Returned by GET /health for monitoring probes.
    """
    status: str = Field(description="Overall service status: healthy, degraded")
    version: str = Field(description="Application version")
    model: str = Field(description="Generative model status: available, unavailable")
    uptime_seconds: float = Field(description="Seconds since service started")
