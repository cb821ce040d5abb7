"""Initial schema."""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa

revision = "20261019_01_initial"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("auth_id", sa.String(64), nullable=False),
        sa.Column("email", sa.String(), nullable=True),
        sa.Column("display_name", sa.Text(), nullable=True),
        sa.Column("role", sa.String(32), nullable=False),
        sa.Column("ban_status", sa.String(32), nullable=False),
        sa.Column("ban_end_date", sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column("created_at", sa.TIMESTAMP(timezone=True), nullable=False),
        sa.Column("updated_at", sa.TIMESTAMP(timezone=True), nullable=True),
        sa.UniqueConstraint("auth_id", name="uq_users_auth_id"),
        sa.UniqueConstraint("email", name="uq_users_email"),
    )
    op.execute("CREATE INDEX idx_users_created ON users (created_at DESC)")

    op.create_table(
        "categories",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(100), nullable=False),
        sa.UniqueConstraint("name", name="uq_categories_name"),
    )

    op.create_table(
        "article",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("title", sa.Text(), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column(
            "category_id",
            sa.Integer(),
            sa.ForeignKey("categories.id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column("publication_date", sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column("status", sa.String(32), nullable=False),
        sa.Column("flagged", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("priority", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column(
            "published_by",
            sa.Uuid(),
            sa.ForeignKey("users.id", ondelete="SET NULL"),
            nullable=True,
        ),
    )
    op.create_index("idx_article_status_publication", "article", ["status", "publication_date"])
    op.create_index("idx_article_flagged", "article", ["flagged", "status"])

    op.create_table(
        "news_images",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("article_id", sa.Integer(), sa.ForeignKey("article.id"), nullable=False),
        sa.Column("image_url", sa.Text(), nullable=False),
        sa.Column("created_at", sa.TIMESTAMP(timezone=True), nullable=True),
    )
    op.create_index("idx_news_images_article", "news_images", ["article_id"])

    op.create_table(
        "comment",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("article_id", sa.Integer(), sa.ForeignKey("article.id"), nullable=False),
        sa.Column(
            "user_id",
            sa.Uuid(),
            sa.ForeignKey("users.id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column("comment_text", sa.Text(), nullable=False),
        sa.Column("comment_date", sa.TIMESTAMP(timezone=True), nullable=False),
        sa.Column("flagged", sa.Boolean(), nullable=False, server_default=sa.false()),
    )
    op.create_index("idx_comment_article", "comment", ["article_id", "comment_date"])
    op.create_index("idx_comment_flagged", "comment", ["flagged"])

    op.create_table(
        "interaction",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("article_id", sa.Integer(), sa.ForeignKey("article.id"), nullable=False),
        sa.Column(
            "user_id",
            sa.Uuid(),
            sa.ForeignKey("users.id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column("device_id", sa.String(128), nullable=True),
        sa.Column("interaction_type", sa.String(32), nullable=False),
        sa.Column("interaction_date", sa.TIMESTAMP(timezone=True), nullable=False),
    )
    op.create_index(
        "idx_interaction_user_dedup",
        "interaction",
        ["article_id", "interaction_type", "user_id", "interaction_date"],
    )
    op.create_index(
        "idx_interaction_device_dedup",
        "interaction",
        ["article_id", "interaction_type", "device_id", "interaction_date"],
    )

    op.create_table(
        "plan",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("stripe_price_id", sa.String(255), nullable=False),
        sa.Column("duration_days", sa.Integer(), nullable=False),
        sa.UniqueConstraint("stripe_price_id", name="uq_plan_stripe_price_id"),
    )

    op.create_table(
        "subscriptions",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(
            "user_id",
            sa.Uuid(),
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("plan_id", sa.Integer(), sa.ForeignKey("plan.id"), nullable=False),
        sa.Column("start_date", sa.TIMESTAMP(timezone=True), nullable=False),
        sa.Column("end_date", sa.TIMESTAMP(timezone=True), nullable=False),
        sa.Column("status", sa.String(32), nullable=False),
        sa.Column("created_at", sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column("updated_at", sa.TIMESTAMP(timezone=True), nullable=True),
    )
    op.create_index(
        "idx_subscriptions_user_status",
        "subscriptions",
        ["user_id", "status", "end_date"],
    )

    op.create_table(
        "site_settings",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "maintenance_mode", sa.Boolean(), nullable=False, server_default=sa.false()
        ),
        sa.Column("updated_at", sa.TIMESTAMP(timezone=True), nullable=True),
    )

    op.create_table(
        "processed_webhook_events",
        sa.Column("event_id", sa.String(255), primary_key=True),
        sa.Column("event_type", sa.String(100), nullable=False),
        sa.Column("processed_at", sa.TIMESTAMP(timezone=True), nullable=False),
    )
    op.create_index(
        "idx_webhook_events_processed", "processed_webhook_events", ["processed_at"]
    )

    op.create_table(
        "moderation_log",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(
            "moderator_id",
            sa.Uuid(),
            sa.ForeignKey("users.id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column("action", sa.String(32), nullable=False),
        sa.Column("target_type", sa.String(20), nullable=False),
        sa.Column("target_id", sa.String(64), nullable=False),
        sa.Column("request_id", sa.String(64), nullable=True),
        sa.Column("extra_data", sa.JSON(), nullable=True),
        sa.Column("created_at", sa.TIMESTAMP(timezone=True), nullable=False),
    )
    op.create_index(
        "idx_moderation_log_target",
        "moderation_log",
        ["target_type", "target_id", "created_at"],
    )
    op.create_index(
        "idx_moderation_log_moderator", "moderation_log", ["moderator_id", "created_at"]
    )


def downgrade() -> None:
    op.drop_index("idx_moderation_log_moderator", table_name="moderation_log")
    op.drop_index("idx_moderation_log_target", table_name="moderation_log")
    op.drop_table("moderation_log")

    op.drop_index("idx_webhook_events_processed", table_name="processed_webhook_events")
    op.drop_table("processed_webhook_events")

    op.drop_table("site_settings")

    op.drop_index("idx_subscriptions_user_status", table_name="subscriptions")
    op.drop_table("subscriptions")
    op.drop_table("plan")

    op.drop_index("idx_interaction_device_dedup", table_name="interaction")
    op.drop_index("idx_interaction_user_dedup", table_name="interaction")
    op.drop_table("interaction")

    op.drop_index("idx_comment_flagged", table_name="comment")
    op.drop_index("idx_comment_article", table_name="comment")
    op.drop_table("comment")

    op.drop_index("idx_news_images_article", table_name="news_images")
    op.drop_table("news_images")

    op.drop_index("idx_article_flagged", table_name="article")
    op.drop_index("idx_article_status_publication", table_name="article")
    op.drop_table("article")

    op.drop_table("categories")

    op.execute("DROP INDEX IF EXISTS idx_users_created")
    op.drop_table("users")
