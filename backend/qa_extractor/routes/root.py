"""
QA Extractor: Root Route
===========================

What:  GET / greeting, used by clients as a liveness probe.
"""

from fastapi import APIRouter

from qa_extractor.schemas.qa import WelcomeResponse

router = APIRouter(tags=["Root"])


@router.get("/", response_model=WelcomeResponse, summary="Welcome message")
async def welcome() -> WelcomeResponse:
    return WelcomeResponse(message="Welcome to the API!")
