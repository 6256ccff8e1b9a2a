"""
QA Extractor: Google Gemini Client Implementation
====================================================

What:  ModelClient backed by the Google Gemini content-generation API.
How:   Sends [prompt, inline JPEG blob] to generate_content_async and returns
       the reply text. The SDK base64-encodes the inline blob on the wire.
Who:   Built once by create_app() from Settings; injected into
       ExtractionService for every request.

Call Policy:
    - settings.model_max_attempts attempts (default 1 = no retry)
    - Exponential backoff with jitter between attempts (tenacity)
    - Optional per-call timeout (settings.model_timeout)
    - The last failure is wrapped in ModelInvocationError
"""

import logging
import time
import uuid
from typing import Any, Dict, Optional

import google.generativeai as genai
from tenacity import (
    AsyncRetrying,
    before_sleep_log,
    stop_after_attempt,
    wait_exponential_jitter,
)

from qa_extractor.config import Settings
from qa_extractor.exceptions import ModelInvocationError
from qa_extractor.services.image_service import NormalizedImage
from qa_extractor.services.llm_base import EXTRACTION_PROMPT, ModelClient

logger = logging.getLogger(__name__)


def to_generative_part(data: bytes, mime_type: str) -> Dict[str, Any]:
    """Inline blob part in the shape the Gemini SDK accepts."""
    return {"mime_type": mime_type, "data": data}


class GeminiClient(ModelClient):
    """
    Google Gemini implementation of ModelClient.

    Holds only immutable configuration (model handle, retry bounds); it is
    safe to share between concurrent requests.
    """

    def __init__(self, settings: Settings):
        if settings.google_api_key:
            genai.configure(api_key=settings.google_api_key)

        self.model_name = settings.gemini_model
        self.model = genai.GenerativeModel(settings.gemini_model)
        self.max_attempts = settings.model_max_attempts
        self.retry_min_wait = settings.model_retry_min_wait
        self.retry_max_wait = settings.model_retry_max_wait
        self.timeout: Optional[float] = settings.model_timeout

        logger.info(
            "GeminiClient initialized with model=%s, max_attempts=%d, timeout=%s",
            self.model_name,
            self.max_attempts,
            self.timeout if self.timeout is not None else "sdk-default",
        )

    async def extract_text(self, image: NormalizedImage, prompt: str = EXTRACTION_PROMPT) -> str:
        """
        Run the extraction prompt against one image.

        Raises:
            ModelInvocationError: after the last attempt failed.
        """
        # Short per-call ID for correlating the log lines of one call
        call_id = str(uuid.uuid4())[:8]
        contents = [prompt, to_generative_part(image.data, image.mime_type)]

        logger.info(
            "[%s] Starting Gemini extraction for %dx%d image (%d bytes)",
            call_id,
            image.width,
            image.height,
            len(image.data),
        )

        retrying = AsyncRetrying(
            stop=stop_after_attempt(self.max_attempts),
            wait=wait_exponential_jitter(
                initial=self.retry_min_wait,
                max=self.retry_max_wait,
                jitter=1,
            ),
            before_sleep=before_sleep_log(logger, logging.WARNING),
            reraise=True,
        )

        try:
            async for attempt in retrying:
                with attempt:
                    return await self._generate(contents, call_id)
        except Exception as e:
            logger.error(
                "[%s] Gemini extraction failed after %d attempt(s): %s",
                call_id,
                self.max_attempts,
                str(e),
            )
            raise ModelInvocationError(
                message=f"Failed to process image: {e}",
                attempts=self.max_attempts,
                context={"call_id": call_id, "error_type": type(e).__name__},
            ) from e

    async def _generate(self, contents: list, call_id: str) -> str:
        """One content-generation round trip; exceptions propagate to the retry loop."""
        start_time = time.time()
        request_options = {"timeout": self.timeout} if self.timeout is not None else None

        try:
            response = await self.model.generate_content_async(
                contents,
                request_options=request_options,
            )
            # .text raises ValueError when the reply has no text part (e.g. blocked)
            text = response.text
        except Exception as e:
            duration_ms = (time.time() - start_time) * 1000
            logger.warning(
                "[%s] Gemini API call failed after %.0fms: %s",
                call_id,
                duration_ms,
                str(e),
            )
            raise

        duration_ms = (time.time() - start_time) * 1000
        extracted_text = text.strip() if text else ""

        logger.info(
            "[%s] Gemini extraction completed in %.0fms, extracted %d chars",
            call_id,
            duration_ms,
            len(extracted_text),
        )
        return extracted_text

    async def health_check(self) -> bool:
        """
        Check if the Gemini API is reachable by listing models.
        """
        try:
            model_names = [m.name for m in genai.list_models()]
            target = f"models/{self.model_name}"
            if target not in model_names:
                logger.warning("Configured model %s not found in available models", target)
            return True
        except Exception as e:
            logger.warning("Gemini health check failed: %s", str(e))
            return False
