"""Item suggestion route.

Proxies one photo to the configured SuggestionProvider. The photo is
shrunk to JPEG first so large camera images stay under the model's
request limits.
"""

import binascii
from uuid import uuid4

from fastapi import APIRouter, Depends, HTTPException
from PIL import Image, UnidentifiedImageError

from lookbook.api.dependencies import get_suggestion_provider
from lookbook.api.schemas import ErrorResponse, SuggestRequest, SuggestResponse
from lookbook.core.errors import classify_error, is_retryable
from lookbook.core.image_utils import compress_image, split_data_url
from lookbook.core.logging import get_logger, log_context
from lookbook.core.providers import SuggestionProvider
from lookbook.providers.groq_provider import GroqAPIError

logger = get_logger(__name__)

MISSING_FIELDS_DETAIL = "imageBase64 and mediaType are required"

router = APIRouter(tags=["suggestions"])


@router.post(
    "/suggest",
    response_model=SuggestResponse,
    responses={
        400: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
        502: {"model": ErrorResponse},
        503: {"model": ErrorResponse},
    },
)
async def suggest_item(
    request: SuggestRequest,
    provider: SuggestionProvider = Depends(get_suggestion_provider),
) -> SuggestResponse:
    """Suggest a name, description and size for an item photo.

    400 for a missing field or an unreadable photo, 503 when the model is
    temporarily unavailable, 502 for any other upstream failure.
    """
    header_type, payload = split_data_url(request.image_base64)
    media_type = header_type or request.media_type

    with log_context(request_id=uuid4().hex[:12], media_type=media_type):
        try:
            image_b64 = compress_image(payload)
        except (
            binascii.Error,
            UnidentifiedImageError,
            Image.DecompressionBombError,
            ValueError,
            OSError,
        ) as ex:
            logger.warning("suggest_invalid_image", error=str(ex))
            raise HTTPException(
                status_code=400, detail="imageBase64 is not a readable image"
            ) from ex

        logger.info("suggestion_requested", payload_chars=len(image_b64))
        try:
            suggestion = await provider.suggest(image_b64, "image/jpeg")
        except GroqAPIError as ex:
            category = classify_error(ex)
            status = 503 if is_retryable(category) else 502
            logger.error("suggest_upstream_failed", category=category.name, status=status)
            raise HTTPException(status_code=status, detail=str(ex)) from ex

    return SuggestResponse(**suggestion.to_dict())
