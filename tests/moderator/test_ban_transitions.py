"""
Tests for moderator ban-state endpoints:
- PUT /api/v1/moderator/users/{id}/ban
- PUT /api/v1/moderator/users/{id}/unban
- PUT /api/v1/moderator/users/{id}/soft-ban
- PUT /api/v1/moderator/users/{id}/unsoft-ban
"""

import uuid
from datetime import timedelta

import pytest
from httpx import AsyncClient
from sqlalchemy import Update, select
from sqlalchemy.ext.asyncio import AsyncSession

from factories import make_user
from newsgate.adapters.email import EmailDeliveryError
from newsgate.database import utcnow
from newsgate.dependencies import get_notifier
from newsgate.main import app
from newsgate.models import BanStatus, ModerationAction, Role
from newsgate.models.activity import ModerationLog
from newsgate.services.notifications import NotificationDispatcher


class RecordingNotifier:
    def __init__(self):
        self.ban_changes = []

    async def notify_ban_change(self, email, display_name, action, ban_end_date):
        self.ban_changes.append((email, action, ban_end_date))


class BrokenEmail:
    async def send_moderation_notice(self, *args, **kwargs):
        raise EmailDeliveryError("provider down")


@pytest.fixture
def notifier():
    recorder = RecordingNotifier()
    app.dependency_overrides[get_notifier] = lambda: recorder
    yield recorder
    app.dependency_overrides.pop(get_notifier, None)


async def _user_with_status(db_session, status: BanStatus, role: Role = Role.USER):
    suffix = uuid.uuid4().hex[:8]
    return await make_user(
        db_session, f"target-{suffix}", f"target-{suffix}@example.com", role=role, ban_status=status
    )


class TestBan:
    """PUT /api/v1/moderator/users/{id}/ban tests."""

    async def test_ban_active_user(
        self, async_client: AsyncClient, db_session: AsyncSession,
        test_moderator: dict, test_user: dict, auth_headers, notifier,
    ):
        """Active user becomes hard_banned with a 30 day end date."""
        response = await async_client.put(
            f"/api/v1/moderator/users/{test_user['user_id']}/ban",
            headers=auth_headers(test_moderator),
        )
        assert response.status_code == 200
        data = response.json()
        assert data["user"]["ban_status"] == "hard_banned"

        user = test_user["model"]
        await db_session.refresh(user)
        assert user.ban_status == BanStatus.HARD_BANNED
        expected = utcnow() + timedelta(days=30)
        assert abs((user.ban_end_date - expected).total_seconds()) < 60

    async def test_ban_soft_banned_user_escalates(
        self, async_client: AsyncClient, db_session: AsyncSession,
        test_moderator: dict, auth_headers, notifier,
    ):
        target = await _user_with_status(db_session, BanStatus.SOFT_BANNED)
        response = await async_client.put(
            f"/api/v1/moderator/users/{target['user_id']}/ban",
            headers=auth_headers(test_moderator),
        )
        assert response.status_code == 200
        assert response.json()["user"]["ban_status"] == "hard_banned"

    async def test_ban_admin_returns_403(
        self, async_client: AsyncClient, test_moderator: dict, test_admin: dict,
        auth_headers, notifier,
    ):
        """Admins cannot be banned."""
        response = await async_client.put(
            f"/api/v1/moderator/users/{test_admin['user_id']}/ban",
            headers=auth_headers(test_moderator),
        )
        assert response.status_code == 403
        assert response.json()["detail"]["error"]["code"] == "FORBIDDEN"
        assert notifier.ban_changes == []

    async def test_ban_already_banned_returns_403(
        self, async_client: AsyncClient, db_session: AsyncSession,
        test_moderator: dict, auth_headers, notifier,
    ):
        target = await _user_with_status(db_session, BanStatus.HARD_BANNED)
        response = await async_client.put(
            f"/api/v1/moderator/users/{target['user_id']}/ban",
            headers=auth_headers(test_moderator),
        )
        assert response.status_code == 403

    async def test_ban_nonexistent_user_returns_404(
        self, async_client: AsyncClient, test_moderator: dict, auth_headers, notifier,
    ):
        response = await async_client.put(
            f"/api/v1/moderator/users/{uuid.uuid4()}/ban",
            headers=auth_headers(test_moderator),
        )
        assert response.status_code == 404

    async def test_ban_queues_notification(
        self, async_client: AsyncClient, test_moderator: dict, test_user: dict,
        auth_headers, notifier,
    ):
        """The banned user is notified after the change is committed."""
        await async_client.put(
            f"/api/v1/moderator/users/{test_user['user_id']}/ban",
            headers=auth_headers(test_moderator),
        )
        assert len(notifier.ban_changes) == 1
        email, action, ban_end_date = notifier.ban_changes[0]
        assert email == test_user["email"]
        assert action == "ban"
        assert ban_end_date is not None

    async def test_ban_writes_audit_entry(
        self, async_client: AsyncClient, db_session: AsyncSession,
        test_moderator: dict, test_user: dict, auth_headers, notifier,
    ):
        await async_client.put(
            f"/api/v1/moderator/users/{test_user['user_id']}/ban",
            headers=auth_headers(test_moderator),
        )
        result = await db_session.execute(
            select(ModerationLog).where(ModerationLog.target_id == test_user["user_id"])
        )
        entry = result.scalar_one()
        assert entry.action == ModerationAction.BAN
        assert str(entry.moderator_id) == test_moderator["user_id"]
        assert entry.extra_data == {"from": "active", "to": "hard_banned"}

    async def test_notification_failure_does_not_fail_ban(
        self, async_client: AsyncClient, test_moderator: dict, test_user: dict,
        auth_headers,
    ):
        """Email provider errors are logged, not returned to the moderator."""
        app.dependency_overrides[get_notifier] = lambda: NotificationDispatcher(
            email=BrokenEmail(), alerts=None
        )
        response = await async_client.put(
            f"/api/v1/moderator/users/{test_user['user_id']}/ban",
            headers=auth_headers(test_moderator),
        )
        assert response.status_code == 200

    async def test_ban_requires_moderator(
        self, async_client: AsyncClient, test_user: dict, second_user: dict, auth_headers,
    ):
        response = await async_client.put(
            f"/api/v1/moderator/users/{second_user['user_id']}/ban",
            headers=auth_headers(test_user),
        )
        assert response.status_code == 403

    async def test_ban_without_token_returns_401(
        self, async_client: AsyncClient, test_user: dict,
    ):
        response = await async_client.put(f"/api/v1/moderator/users/{test_user['user_id']}/ban")
        assert response.status_code == 401

    @pytest.mark.parametrize(
        "failure",
        [{"fail_commit": True}, {"fail_on": lambda stmt: isinstance(stmt, Update)}],
        ids=["commit", "update"],
    )
    async def test_storage_failure_returns_500_without_notice(
        self, async_client: AsyncClient, db_session: AsyncSession,
        test_moderator: dict, test_user: dict, auth_headers, notifier, faulty_db, failure,
    ):
        """A failed write leaves the user unchanged and sends nothing."""
        faulty_db(**failure)
        response = await async_client.put(
            f"/api/v1/moderator/users/{test_user['user_id']}/ban",
            headers=auth_headers(test_moderator),
        )
        assert response.status_code == 500
        assert response.json()["detail"]["error"]["code"] == "INTERNAL_ERROR"
        assert notifier.ban_changes == []

        user = test_user["model"]
        await db_session.refresh(user)
        assert user.ban_status == BanStatus.ACTIVE
        assert user.ban_end_date is None

    async def test_moderator_cannot_ban_self(
        self, async_client: AsyncClient, test_moderator: dict, auth_headers, notifier,
    ):
        response = await async_client.put(
            f"/api/v1/moderator/users/{test_moderator['user_id']}/ban",
            headers=auth_headers(test_moderator),
        )
        assert response.status_code == 403
        assert notifier.ban_changes == []


class TestBannedModerator:
    """A hard-banned moderator loses moderator access."""

    async def test_cannot_lift_own_ban(
        self, async_client: AsyncClient, db_session: AsyncSession, auth_headers, notifier,
    ):
        banned = await _user_with_status(db_session, BanStatus.HARD_BANNED, role=Role.MODERATOR)
        response = await async_client.put(
            f"/api/v1/moderator/users/{banned['user_id']}/unban",
            headers=auth_headers(banned),
        )
        assert response.status_code == 403
        assert response.json()["detail"]["error"]["message"] == "Your account is banned"

        user = banned["model"]
        await db_session.refresh(user)
        assert user.ban_status == BanStatus.HARD_BANNED
        assert notifier.ban_changes == []

    async def test_cannot_ban_others(
        self, async_client: AsyncClient, db_session: AsyncSession,
        test_user: dict, auth_headers, notifier,
    ):
        banned = await _user_with_status(db_session, BanStatus.HARD_BANNED, role=Role.MODERATOR)
        response = await async_client.put(
            f"/api/v1/moderator/users/{test_user['user_id']}/ban",
            headers=auth_headers(banned),
        )
        assert response.status_code == 403

    async def test_cannot_read_queues(
        self, async_client: AsyncClient, db_session: AsyncSession, auth_headers,
    ):
        banned = await _user_with_status(db_session, BanStatus.HARD_BANNED, role=Role.MODERATOR)
        response = await async_client.get(
            "/api/v1/moderator/comments/flagged", headers=auth_headers(banned)
        )
        assert response.status_code == 403

    async def test_soft_banned_moderator_keeps_access(
        self, async_client: AsyncClient, db_session: AsyncSession, auth_headers,
    ):
        """Soft bans only restrict commenting."""
        restricted = await _user_with_status(db_session, BanStatus.SOFT_BANNED, role=Role.MODERATOR)
        response = await async_client.get(
            "/api/v1/moderator/comments/flagged", headers=auth_headers(restricted)
        )
        assert response.status_code == 200


class TestUnban:
    """PUT /api/v1/moderator/users/{id}/unban tests."""

    async def test_unban_restores_active(
        self, async_client: AsyncClient, db_session: AsyncSession,
        test_moderator: dict, auth_headers, notifier,
    ):
        target = await _user_with_status(db_session, BanStatus.HARD_BANNED)
        response = await async_client.put(
            f"/api/v1/moderator/users/{target['user_id']}/unban",
            headers=auth_headers(test_moderator),
        )
        assert response.status_code == 200

        user = target["model"]
        await db_session.refresh(user)
        assert user.ban_status == BanStatus.ACTIVE
        assert user.ban_end_date is None
        assert notifier.ban_changes[0][1] == "unban"

    async def test_unban_twice_returns_404(
        self, async_client: AsyncClient, db_session: AsyncSession,
        test_moderator: dict, auth_headers, notifier,
    ):
        """The second unban finds no banned user and changes nothing."""
        target = await _user_with_status(db_session, BanStatus.HARD_BANNED)
        url = f"/api/v1/moderator/users/{target['user_id']}/unban"

        first = await async_client.put(url, headers=auth_headers(test_moderator))
        second = await async_client.put(url, headers=auth_headers(test_moderator))

        assert first.status_code == 200
        assert second.status_code == 404
        assert len(notifier.ban_changes) == 1

    async def test_unban_active_user_returns_404(
        self, async_client: AsyncClient, test_moderator: dict, test_user: dict,
        auth_headers, notifier,
    ):
        """Unbanning someone who isn't banned is reported as not found."""
        response = await async_client.put(
            f"/api/v1/moderator/users/{test_user['user_id']}/unban",
            headers=auth_headers(test_moderator),
        )
        assert response.status_code == 404
        assert notifier.ban_changes == []

    async def test_unban_soft_banned_user_returns_404(
        self, async_client: AsyncClient, db_session: AsyncSession,
        test_moderator: dict, auth_headers, notifier,
    ):
        target = await _user_with_status(db_session, BanStatus.SOFT_BANNED)
        response = await async_client.put(
            f"/api/v1/moderator/users/{target['user_id']}/unban",
            headers=auth_headers(test_moderator),
        )
        assert response.status_code == 404


class TestSoftBan:
    """PUT /api/v1/moderator/users/{id}/soft-ban tests."""

    async def test_soft_ban_reader(
        self, async_client: AsyncClient, db_session: AsyncSession,
        test_moderator: dict, test_user: dict, auth_headers, notifier,
    ):
        response = await async_client.put(
            f"/api/v1/moderator/users/{test_user['user_id']}/soft-ban",
            headers=auth_headers(test_moderator),
        )
        assert response.status_code == 200

        user = test_user["model"]
        await db_session.refresh(user)
        assert user.ban_status == BanStatus.SOFT_BANNED
        expected = utcnow() + timedelta(days=7)
        assert abs((user.ban_end_date - expected).total_seconds()) < 60

    async def test_soft_ban_journalist(
        self, async_client: AsyncClient, test_moderator: dict, test_journalist: dict,
        auth_headers, notifier,
    ):
        response = await async_client.put(
            f"/api/v1/moderator/users/{test_journalist['user_id']}/soft-ban",
            headers=auth_headers(test_moderator),
        )
        assert response.status_code == 200

    async def test_soft_ban_moderator_returns_403(
        self, async_client: AsyncClient, db_session: AsyncSession,
        test_moderator: dict, auth_headers, notifier,
    ):
        other = await _user_with_status(db_session, BanStatus.ACTIVE, role=Role.MODERATOR)
        response = await async_client.put(
            f"/api/v1/moderator/users/{other['user_id']}/soft-ban",
            headers=auth_headers(test_moderator),
        )
        assert response.status_code == 403

    async def test_soft_ban_admin_returns_403(
        self, async_client: AsyncClient, test_moderator: dict, test_admin: dict,
        auth_headers, notifier,
    ):
        response = await async_client.put(
            f"/api/v1/moderator/users/{test_admin['user_id']}/soft-ban",
            headers=auth_headers(test_moderator),
        )
        assert response.status_code == 403

    @pytest.mark.parametrize("status", [BanStatus.SOFT_BANNED, BanStatus.HARD_BANNED])
    async def test_soft_ban_restricted_user_returns_403(
        self, async_client: AsyncClient, db_session: AsyncSession,
        test_moderator: dict, auth_headers, notifier, status,
    ):
        """Only active users can be soft-banned."""
        target = await _user_with_status(db_session, status)
        response = await async_client.put(
            f"/api/v1/moderator/users/{target['user_id']}/soft-ban",
            headers=auth_headers(test_moderator),
        )
        assert response.status_code == 403

        user = target["model"]
        await db_session.refresh(user)
        assert user.ban_status == status


class TestUnsoftBan:
    """PUT /api/v1/moderator/users/{id}/unsoft-ban tests."""

    async def test_unsoft_ban_restores_active(
        self, async_client: AsyncClient, db_session: AsyncSession,
        test_moderator: dict, auth_headers, notifier,
    ):
        target = await _user_with_status(db_session, BanStatus.SOFT_BANNED)
        response = await async_client.put(
            f"/api/v1/moderator/users/{target['user_id']}/unsoft-ban",
            headers=auth_headers(test_moderator),
        )
        assert response.status_code == 200
        assert response.json()["user"]["ban_status"] == "active"
        assert response.json()["user"]["ban_end_date"] is None

    async def test_unsoft_ban_hard_banned_returns_404(
        self, async_client: AsyncClient, db_session: AsyncSession,
        test_moderator: dict, auth_headers, notifier,
    ):
        target = await _user_with_status(db_session, BanStatus.HARD_BANNED)
        response = await async_client.put(
            f"/api/v1/moderator/users/{target['user_id']}/unsoft-ban",
            headers=auth_headers(test_moderator),
        )
        assert response.status_code == 404

        user = target["model"]
        await db_session.refresh(user)
        assert user.ban_status == BanStatus.HARD_BANNED
