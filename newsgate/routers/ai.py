"""AI router: article summarization."""

import logging

from fastapi import APIRouter, Depends, Request, status

from newsgate.adapters.inference import InferenceClient, InferenceError
from newsgate.config import settings
from newsgate.dependencies import get_inference_client
from newsgate.errors import BadRequest, InternalError
from newsgate.middleware.rate_limit import limiter
from newsgate.schemas.collaborators import SummaryRequest, SummaryResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/ai", tags=["AI"])


@router.post(
    "/generate-summary",
    response_model=SummaryResponse,
    status_code=status.HTTP_200_OK,
)
@limiter.limit(settings.forwarding_rate_limit)
async def generate_summary(
    request: Request,
    data: SummaryRequest,
    inference: InferenceClient = Depends(get_inference_client),
) -> SummaryResponse:
    if not data.text or not data.text.strip():
        raise BadRequest("No text provided")

    try:
        summary = await inference.summarize(data.text)
    except InferenceError as e:
        logger.error("Summarization failed: %s", e)
        raise InternalError("Failed to generate summary")

    return SummaryResponse(summary=summary)
