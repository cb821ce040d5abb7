"""Unit tests for the user restriction flag."""

import pytest

from newsgate.models import BanStatus, User


class TestIsRestricted:
    def test_active_user_unrestricted(self):
        assert User(auth_id="a", ban_status=BanStatus.ACTIVE).is_restricted is False

    @pytest.mark.parametrize("status", [BanStatus.SOFT_BANNED, BanStatus.HARD_BANNED])
    def test_banned_user_restricted(self, status):
        assert User(auth_id="a", ban_status=status).is_restricted is True
