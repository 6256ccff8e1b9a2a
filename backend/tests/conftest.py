"""
QA Extractor: Test Configuration (conftest.py)
=================================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixture Inventory:
    ├── test_settings: Settings with a fake API key, single model attempt
    ├── fake_model_client: ModelClient returning canned text (no network)
    ├── make_image_bytes: Factory for real PNG/JPEG bytes of a given size
    ├── app: FastAPI app wired with the fake model client
    └── test_client: HTTPX AsyncClient for API endpoint testing
"""

import io
import os
from typing import List, Optional

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from PIL import Image

# Override settings for testing BEFORE any app imports
os.environ["GOOGLE_API_KEY"] = "test-key-not-real"
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["ENVIRONMENT"] = "test"

from qa_extractor.config import Settings  # noqa: E402
from qa_extractor.exceptions import ModelInvocationError  # noqa: E402
from qa_extractor.services.image_service import NormalizedImage  # noqa: E402
from qa_extractor.services.llm_base import ModelClient  # noqa: E402


class FakeModelClient(ModelClient):
    """
    In-memory ModelClient.

    Returns `reply` from extract_text(), or raises `error` wrapped in
    ModelInvocationError the way GeminiClient does. Records every image it
    receives.
    """

    def __init__(self, reply: str = "", error: Optional[Exception] = None, healthy: bool = True):
        self.reply = reply
        self.error = error
        self.healthy = healthy
        self.calls: List[NormalizedImage] = []
        self.prompts: List[str] = []

    async def extract_text(self, image: NormalizedImage, prompt: str = "") -> str:
        self.calls.append(image)
        self.prompts.append(prompt)
        if self.error is not None:
            raise ModelInvocationError(message=f"Failed to process image: {self.error}") from self.error
        return self.reply.strip()

    async def health_check(self) -> bool:
        return self.healthy


@pytest.fixture
def test_settings():
    """Settings isolated from the developer's environment and .env file."""
    return Settings(
        _env_file=None,
        google_api_key="test-key-not-real",
        environment="test",
        log_level="WARNING",
        model_max_attempts=1,
    )


@pytest.fixture
def fake_model_client():
    return FakeModelClient(reply="Q1: What is 2+2?\nA1: 4\nQ2: Capital of France?\nA2: Paris")


@pytest.fixture
def make_image_bytes():
    """
    Factory for real encoded images.

    Usage:
        png = make_image_bytes(2048, 1024)
        jpeg = make_image_bytes(300, 200, fmt="JPEG", mode="RGB")
    """

    def _make(width: int = 64, height: int = 48, fmt: str = "PNG", mode: str = "RGB") -> bytes:
        color = (200, 30, 30, 128) if mode == "RGBA" else 120 if mode in ("L", "P") else (200, 30, 30)
        buffer = io.BytesIO()
        Image.new(mode, (width, height), color).save(buffer, format=fmt)
        return buffer.getvalue()

    return _make


@pytest.fixture
def app(test_settings, fake_model_client):
    from qa_extractor.main import create_app

    return create_app(test_settings, model_client=fake_model_client)


@pytest_asyncio.fixture
async def test_client(app):
    """
    HTTPX AsyncClient routed directly to the app (no server, no lifespan).

    raise_app_exceptions=False: Starlette re-raises errors that reach the
    catch-all handler after sending the 500; tests assert on the response.
    """
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
