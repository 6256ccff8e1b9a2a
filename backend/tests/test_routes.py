"""
QA Extractor: HTTP Endpoint Tests
====================================

What:  End-to-end tests of the HTTP surface with the model faked.
How:   httpx AsyncClient over ASGITransport (conftest.test_client).

What we test:
    ✅ GET / welcome message
    ✅ POST /extract_qa via multipart upload and via JSON image_path
    ✅ Upload wins over image_path
    ✅ 400 bodies for missing input and missing files
    ✅ 500 bodies for decode and model failures (stack only in development)
    ✅ X-Request-ID header
    ✅ GET /health
"""

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from qa_extractor.main import create_app

from conftest import FakeModelClient

EXPECTED_PAIRS = [
    {"question": "What is 2+2?", "answer": "4"},
    {"question": "Capital of France?", "answer": "Paris"},
]
SENTINEL = [{"question": "No questions detected", "answer": "No answers detected"}]


class TestRoot:

    @pytest.mark.asyncio
    async def test_welcome(self, test_client):
        response = await test_client.get("/")
        assert response.status_code == 200
        assert response.json() == {"message": "Welcome to the API!"}


class TestExtractQASuccess:

    @pytest.mark.asyncio
    async def test_multipart_upload(self, test_client, make_image_bytes):
        files = {"image": ("quiz.png", make_image_bytes(1600, 1200), "image/png")}

        response = await test_client.post("/extract_qa", files=files)

        assert response.status_code == 200
        assert response.json() == {"questions_answers": EXPECTED_PAIRS}

    @pytest.mark.asyncio
    async def test_json_image_path(self, test_client, tmp_path, make_image_bytes):
        image_file = tmp_path / "quiz.jpg"
        image_file.write_bytes(make_image_bytes(300, 300, fmt="JPEG"))

        response = await test_client.post("/extract_qa", json={"image_path": str(image_file)})

        assert response.status_code == 200
        assert response.json() == {"questions_answers": EXPECTED_PAIRS}

    @pytest.mark.asyncio
    async def test_form_image_path_field(self, test_client, tmp_path, make_image_bytes):
        image_file = tmp_path / "quiz.png"
        image_file.write_bytes(make_image_bytes())

        response = await test_client.post("/extract_qa", data={"image_path": str(image_file)})

        assert response.status_code == 200
        assert response.json()["questions_answers"] == EXPECTED_PAIRS

    @pytest.mark.asyncio
    async def test_upload_takes_precedence_over_path(self, test_client, make_image_bytes):
        """A bogus image_path is never consulted when a file is uploaded."""
        response = await test_client.post(
            "/extract_qa",
            files={"image": ("quiz.png", make_image_bytes(), "image/png")},
            data={"image_path": "/definitely/not/here.png"},
        )

        assert response.status_code == 200
        assert response.json()["questions_answers"] == EXPECTED_PAIRS

    @pytest.mark.asyncio
    async def test_unparsable_reply_returns_sentinel(self, test_client, fake_model_client, make_image_bytes):
        fake_model_client.reply = "Q1: Hello\nrandom line\nA1: World"

        response = await test_client.post(
            "/extract_qa", files={"image": ("x.png", make_image_bytes(), "image/png")}
        )

        assert response.status_code == 200
        assert response.json() == {"questions_answers": SENTINEL}


class TestExtractQAClientErrors:

    @pytest.mark.asyncio
    async def test_no_input(self, test_client):
        response = await test_client.post("/extract_qa", json={})
        assert response.status_code == 400
        assert response.json() == {"error": "No valid image provided"}

    @pytest.mark.asyncio
    async def test_empty_body(self, test_client):
        response = await test_client.post("/extract_qa")
        assert response.status_code == 400
        assert response.json() == {"error": "No valid image provided"}

    @pytest.mark.asyncio
    async def test_invalid_json(self, test_client):
        response = await test_client.post(
            "/extract_qa",
            content=b"{not json",
            headers={"Content-Type": "application/json"},
        )
        assert response.status_code == 400
        assert response.json() == {"error": "No valid image provided"}

    @pytest.mark.asyncio
    async def test_empty_image_path(self, test_client):
        response = await test_client.post("/extract_qa", json={"image_path": ""})
        assert response.status_code == 400
        assert response.json() == {"error": "No valid image provided"}

    @pytest.mark.asyncio
    async def test_multipart_without_image_field(self, test_client):
        response = await test_client.post(
            "/extract_qa", files={"document": ("a.png", b"abc", "image/png")}
        )
        assert response.status_code == 400
        assert response.json() == {"error": "No valid image provided"}

    @pytest.mark.asyncio
    async def test_missing_file(self, test_client, tmp_path, fake_model_client):
        response = await test_client.post(
            "/extract_qa", json={"image_path": str(tmp_path / "missing.png")}
        )

        assert response.status_code == 400
        assert response.json() == {"error": "Image file not found"}
        assert fake_model_client.calls == []

    @pytest.mark.asyncio
    async def test_unknown_user_home_path(self, test_client, fake_model_client):
        response = await test_client.post(
            "/extract_qa", json={"image_path": "~nosuchuser_zz/x.png"}
        )

        assert response.status_code == 400
        assert response.json() == {"error": "Image file not found"}
        assert "X-Request-ID" in response.headers
        assert fake_model_client.calls == []


class TestExtractQAServerErrors:

    @pytest.mark.asyncio
    async def test_model_failure(self, test_client, fake_model_client, make_image_bytes):
        fake_model_client.error = ConnectionError("upstream connect error")

        response = await test_client.post(
            "/extract_qa", files={"image": ("x.png", make_image_bytes(), "image/png")}
        )

        assert response.status_code == 500
        body = response.json()
        assert body["error"] == "Internal server error"
        assert "upstream connect error" in body["message"]
        assert "stack" not in body

    @pytest.mark.asyncio
    async def test_undecodable_upload(self, test_client, fake_model_client):
        response = await test_client.post(
            "/extract_qa", files={"image": ("x.png", b"not an image", "image/png")}
        )

        assert response.status_code == 500
        assert response.json()["error"] == "Internal server error"
        assert "decode" in response.json()["message"]
        assert fake_model_client.calls == []

    @pytest.mark.asyncio
    async def test_unreadable_path(self, test_client, tmp_path):
        """A directory exists but can't be read as a file."""
        response = await test_client.post("/extract_qa", json={"image_path": str(tmp_path)})

        assert response.status_code == 500
        assert response.json()["error"] == "Internal server error"
        assert "Could not read image file" in response.json()["message"]
        assert "X-Request-ID" in response.headers


class TestDevelopmentMode:

    @pytest_asyncio.fixture
    async def dev_client(self, test_settings):
        dev_settings = test_settings.model_copy(update={"environment": "development"})
        app = create_app(dev_settings, model_client=FakeModelClient(error=TimeoutError("deadline")))
        transport = ASGITransport(app=app, raise_app_exceptions=False)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            yield client

    @pytest.mark.asyncio
    async def test_stack_included_in_development(self, dev_client, make_image_bytes):
        response = await dev_client.post(
            "/extract_qa", files={"image": ("x.png", make_image_bytes(), "image/png")}
        )

        assert response.status_code == 500
        body = response.json()
        assert "deadline" in body["message"]
        assert "ModelInvocationError" in body["stack"]
        assert "Traceback" in body["stack"]


class TestRequestId:

    @pytest.mark.asyncio
    async def test_generated_when_absent(self, test_client):
        response = await test_client.get("/")
        assert len(response.headers["X-Request-ID"]) == 8

    @pytest.mark.asyncio
    async def test_client_value_echoed(self, test_client):
        response = await test_client.get("/", headers={"X-Request-ID": "trace-123"})
        assert response.headers["X-Request-ID"] == "trace-123"


class TestHealth:

    @pytest.mark.asyncio
    async def test_healthy(self, test_client):
        response = await test_client.get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["model"] == "available"
        assert body["uptime_seconds"] >= 0

    @pytest.mark.asyncio
    async def test_degraded(self, test_client, fake_model_client):
        fake_model_client.healthy = False

        response = await test_client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "degraded"
        assert response.json()["model"] == "unavailable"
