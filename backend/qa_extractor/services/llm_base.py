"""
QA Extractor: Abstract Model Client Interface
================================================

What:  Contract for the multimodal model that reads question/answer text
       out of an image.
How:   Concrete implementations inherit from ModelClient and implement
       extract_text() and health_check().
Who:   Called by ExtractionService; GeminiClient is the production
       implementation, tests pass fakes.
"""

from abc import ABC, abstractmethod

from qa_extractor.services.image_service import NormalizedImage

# Static, single-turn instruction. The parser depends on the Q<n>/A<n> line
# format requested here.
EXTRACTION_PROMPT = """Extract all question-answer pairs from the image.
Return the output in this structured format:
Q1: <question>
A1: <answer>
Q2: <question>
A2: <answer>
Continue this format for all questions."""


class ModelClient(ABC):
    """
    Abstract interface for image-to-text model calls.

    Contract:
        - extract_text() returns the model's reply as trimmed plain text
        - Every provider-specific failure is wrapped in ModelInvocationError
        - Implementations hold no per-request state
    """

    @abstractmethod
    async def extract_text(self, image: NormalizedImage, prompt: str = EXTRACTION_PROMPT) -> str:
        """
        Send one image plus the instruction prompt to the model.

        Args:
            image: JPEG produced by ImageNormalizer.
            prompt: Instruction text placed before the image.

        Returns:
            The model's reply, stripped. Empty string when the model
            answered with nothing.

        Raises:
            ModelInvocationError: transport, auth, quota or response failure.
        """
        ...

    @abstractmethod
    async def health_check(self) -> bool:
        """
        Lightweight reachability test that does NOT consume generation quota.
        Returns True if the service is reachable, False otherwise. Never raises.
        """
        ...
