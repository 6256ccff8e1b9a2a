"""
QA Extractor: Extraction Service (Business Logic Orchestrator)
=================================================================

What:  Runs the extraction pipeline for one image.
How:   Normalizer → ModelClient → parser, in sequence, with no partial
       results. Failures propagate unchanged to the HTTP layer.
Who:   Called by the POST /extract_qa route handler.

Workflow:
    ImageBuffer
      │  ImageNormalizer.normalize()   (threadpool; ImageDecodeError)
      ▼
    NormalizedImage
      │  ModelClient.extract_text()    (network; ModelInvocationError)
      ▼
    ExtractedText
      │  parse_qa_text()               (never fails, never empty)
      ▼
    List[QAPair]
"""

import logging
import time
from typing import List

from starlette.concurrency import run_in_threadpool

from qa_extractor.services.image_service import ImageBuffer, ImageNormalizer
from qa_extractor.services.llm_base import EXTRACTION_PROMPT, ModelClient
from qa_extractor.services.qa_parser import parse_qa_text
from qa_extractor.schemas.qa import QAPair

logger = logging.getLogger(__name__)


class ExtractionService:
    """
    Stateless pipeline over injected collaborators.

    Args:
        model_client: Any ModelClient (GeminiClient in production).
        normalizer: ImageNormalizer configured with the size bound.
        prompt: Instruction sent with every image.
    """

    def __init__(
        self,
        model_client: ModelClient,
        normalizer: ImageNormalizer,
        prompt: str = EXTRACTION_PROMPT,
    ):
        self.model_client = model_client
        self.normalizer = normalizer
        self.prompt = prompt

    async def extract(self, image: ImageBuffer) -> List[QAPair]:
        """
        Extract question/answer pairs from one image.

        Returns:
            Pairs in order of appearance; the sentinel pair if none.

        Raises:
            ImageDecodeError: image bytes could not be decoded.
            ModelInvocationError: the model call failed.
        """
        start_time = time.perf_counter()

        # Pillow work is CPU-bound
        normalized = await run_in_threadpool(self.normalizer.normalize, image)

        extracted_text = await self.model_client.extract_text(normalized, self.prompt)

        pairs = parse_qa_text(extracted_text)

        logger.info(
            "Extraction finished in %.0fms: %d pair(s) from %d chars of model output",
            (time.perf_counter() - start_time) * 1000,
            len(pairs),
            len(extracted_text),
        )
        return pairs
