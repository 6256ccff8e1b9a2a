"""
QA Extractor: Extraction Route Handler
=========================================

What:  Handles POST /extract_qa: image in, question/answer pairs out.
How:   Resolves the image source, delegates to ExtractionService, returns
       the pairs. Errors are raised, never formatted here; the handlers
       registered in main.py map them to status codes.
Who:   Called by API clients with either an upload or a server-side path.

Input Resolution (exactly one source is used):
    1. multipart/form-data with an `image` file  → upload wins
    2. `image_path` in a JSON body (or a form text field)
    3. neither                                    → 400 "No valid image provided"
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Request
from pydantic import ValidationError as PydanticValidationError
from starlette.datastructures import UploadFile

from qa_extractor.dependencies import get_extraction_service, get_file_service
from qa_extractor.exceptions import ValidationError
from qa_extractor.schemas.qa import (
    ClientErrorResponse,
    ExtractQARequest,
    ExtractQAResponse,
    ServerErrorResponse,
)
from qa_extractor.services.extraction_service import ExtractionService
from qa_extractor.services.file_service import FileService
from qa_extractor.services.image_service import ImageBuffer

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Extraction"])

_FORM_CONTENT_TYPES = ("multipart/form-data", "application/x-www-form-urlencoded")


async def _image_path_from_json(request: Request) -> Optional[str]:
    try:
        body = await request.json()
    except ValueError:
        # Empty or non-JSON body
        return None
    if not isinstance(body, dict):
        return None
    try:
        return ExtractQARequest.model_validate(body).image_path
    except PydanticValidationError:
        return None


async def resolve_image_source(request: Request, file_service: FileService) -> ImageBuffer:
    """
    Pick the request's image source and load it.

    Raises:
        ValidationError: no upload and no image_path.
        ImageNotFoundError: image_path does not exist.
    """
    content_type = request.headers.get("content-type", "")
    image_path: Optional[str] = None

    if content_type.startswith(_FORM_CONTENT_TYPES):
        form = await request.form()
        upload = form.get("image")
        if isinstance(upload, UploadFile):
            try:
                content = await upload.read()
            finally:
                await upload.close()
            return file_service.from_upload(
                content=content,
                filename=upload.filename,
                content_type=upload.content_type,
            )
        path_field = form.get("image_path")
        if isinstance(path_field, str):
            image_path = path_field
    else:
        image_path = await _image_path_from_json(request)

    if image_path:
        return await file_service.from_path(image_path)

    raise ValidationError(
        message="No valid image provided",
        field="image",
        context={"content_type": content_type},
    )


@router.post(
    "/extract_qa",
    response_model=ExtractQAResponse,
    responses={
        200: {"description": "Pairs extracted", "model": ExtractQAResponse},
        400: {"description": "No image supplied or image path not found", "model": ClientErrorResponse},
        500: {"description": "Image decoding or model call failed", "model": ServerErrorResponse},
    },
    summary="Extract question/answer pairs from an image",
    description=(
        "Send an image either as multipart field `image` or as a JSON body "
        "`{\"image_path\": \"...\"}` naming a file on the server. The image is "
        "resized to fit 1024x1024, sent to Google Gemini, and the reply is "
        "parsed into question/answer pairs."
    ),
)
async def extract_qa(
    request: Request,
    service: ExtractionService = Depends(get_extraction_service),
    file_service: FileService = Depends(get_file_service),
) -> ExtractQAResponse:
    image = await resolve_image_source(request, file_service)
    pairs = await service.extract(image)
    return ExtractQAResponse(questions_answers=pairs)
