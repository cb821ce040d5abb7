"""View counting schemas."""

from pydantic import BaseModel


class RecordViewRequest(BaseModel):
    """
    A page view. Signed-in readers are identified by their bearer token;
    anonymous readers send a stable device id.
    """

    article_id: int
    device_id: str | None = None


class RecordViewResponse(BaseModel):
    message: str
    recorded: bool


class ArticleStatsResponse(BaseModel):
    total_views: int
    total_comments: int
