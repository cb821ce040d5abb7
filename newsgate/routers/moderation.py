"""Automated image/text consistency check for article submissions."""

import logging

from fastapi import APIRouter, Depends, Request, status

from newsgate.adapters.inference import InferenceClient, InferenceError
from newsgate.config import settings
from newsgate.dependencies import get_inference_client
from newsgate.errors import BadRequest, InternalError
from newsgate.middleware.rate_limit import limiter
from newsgate.schemas.collaborators import ModerateArticleRequest, ModerateArticleResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/moderation", tags=["Moderation"])


@router.post(
    "/moderate-article",
    response_model=ModerateArticleResponse,
    status_code=status.HTTP_200_OK,
)
@limiter.limit(settings.forwarding_rate_limit)
async def moderate_article(
    request: Request,
    data: ModerateArticleRequest,
    inference: InferenceClient = Depends(get_inference_client),
) -> ModerateArticleResponse:
    """Score how well the article image matches its text."""
    if not data.text or not data.image_url:
        raise BadRequest("Missing text or image_url")

    try:
        result = await inference.clip_match(data.text, data.image_url)
    except InferenceError as e:
        logger.error("Clip-check failed for %s: %s", data.image_url, e)
        raise InternalError("Moderation API failed")

    return ModerateArticleResponse(**result)
