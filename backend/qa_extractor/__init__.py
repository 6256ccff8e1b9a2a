"""
QA Extractor: Application Package Initializer
================================================

What:  HTTP service that reads question/answer pairs out of images with a
       multimodal generative model.

Architecture Note:
    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │         Services (Pipeline)         │  ← normalize → model → parse
    ├─────────────────────────────────────┤
    │           Schemas (Data)            │  ← Pydantic API contracts
    ├─────────────────────────────────────┤
    │     Google Gemini (External API)    │  ← content generation
    └─────────────────────────────────────┘

    No layer holds state across requests.
"""

__version__ = "1.0.0"
