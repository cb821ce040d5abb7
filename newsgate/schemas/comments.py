"""Comment schemas."""

from pydantic import BaseModel, field_validator

from newsgate.models.comment import Comment


class CreateCommentRequest(BaseModel):
    article_id: int
    content: str

    @field_validator("content")
    @classmethod
    def validate_content(cls, v: str) -> str:
        """Validate comment length."""
        if not v.strip():
            raise ValueError("Comment cannot be empty")
        if len(v) > 5000:
            raise ValueError("Comment must be 5000 characters or less")
        return v


class CommentResponse(BaseModel):
    id: int
    article_id: int
    user_id: str | None
    author: str | None
    comment_text: str
    comment_date: str
    flagged: bool

    @classmethod
    def from_comment(cls, comment: Comment) -> "CommentResponse":
        return cls(
            id=comment.id,
            article_id=comment.article_id,
            user_id=str(comment.user_id) if comment.user_id else None,
            author=comment.author.display_name if comment.author else None,
            comment_text=comment.comment_text,
            comment_date=comment.comment_date.isoformat(),
            flagged=comment.flagged,
        )
