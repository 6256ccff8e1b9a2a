"""
QA Extractor: FastAPI Dependency Providers
=============================================

What:  Hands route handlers the collaborators built by create_app().
How:   Each provider reads from request.app.state; tests swap any of them
       with app.dependency_overrides.
"""

from fastapi import Request

from qa_extractor.services.extraction_service import ExtractionService
from qa_extractor.services.file_service import FileService
from qa_extractor.services.llm_base import ModelClient


def get_model_client(request: Request) -> ModelClient:
    return request.app.state.model_client


def get_extraction_service(request: Request) -> ExtractionService:
    return request.app.state.extraction_service


def get_file_service(request: Request) -> FileService:
    return request.app.state.file_service
