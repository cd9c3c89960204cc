"""
Tests for admin login, fallback on login and the inactivity timeout
"""
from unittest.mock import AsyncMock

import pytest

from app.datastore.errors import BackendError
from app.datastore.records import BackendKind

MINUTE_MS = 60 * 1000


class TestLogin:
    """Test logging in against the active backend"""

    async def test_firestore_login(self, admin_session, selector, state, firestore_admin):
        await selector.initialize()

        result = await admin_session.login(firestore_admin["username"], firestore_admin["password"], now=1000)

        assert result.success is True
        assert result.backend is BackendKind.FIRESTORE
        assert result.warning is None
        assert state.is_admin_logged_in is True
        assert state.last_activity == 1000

    async def test_firestore_wrong_password(self, admin_session, selector, state, firestore_admin):
        await selector.initialize()

        result = await admin_session.login(firestore_admin["username"], "wrong")

        assert result.success is False
        assert state.is_admin_logged_in is False

    async def test_rest_login(self, admin_session, selector, state):
        await selector.initialize()
        await selector.switch_database(BackendKind.MONGO)

        result = await admin_session.login("admin@college.edu", "admin123")

        assert result.success is True
        assert result.backend is BackendKind.MONGO

    async def test_rest_wrong_password(self, admin_session, selector):
        await selector.initialize()
        await selector.switch_database(BackendKind.MONGO)

        result = await admin_session.login("admin@college.edu", "nope")

        assert result.success is False
        assert result.backend is BackendKind.MONGO

    async def test_unreachable_rest_falls_back_to_firestore(
        self, admin_session, selector, state, rest_backend, firestore_admin
    ):
        await selector.initialize()
        await selector.switch_database(BackendKind.MONGO)
        rest_backend.authenticate = AsyncMock(
            side_effect=BackendError("connection refused", backend=BackendKind.MONGO)
        )

        result = await admin_session.login(firestore_admin["username"], firestore_admin["password"])

        assert result.success is True
        assert result.backend is BackendKind.FIRESTORE
        assert "connection refused" in result.warning
        assert selector.active is BackendKind.FIRESTORE
        assert state.active_database == "firestore"

    async def test_firestore_failure_is_raised(self, admin_session, selector, firestore_backend):
        await selector.initialize()
        firestore_backend.authenticate = AsyncMock(
            side_effect=BackendError("unavailable", backend=BackendKind.FIRESTORE)
        )

        with pytest.raises(BackendError):
            await admin_session.login("admin", "secret")


class TestInactivityTimeout:
    """Test session expiry"""

    async def test_active_session(self, admin_session, selector, firestore_admin):
        await selector.initialize()
        await admin_session.login(firestore_admin["username"], firestore_admin["password"], now=0)

        assert admin_session.is_authenticated(now=29 * MINUTE_MS) is True

    async def test_touch_extends_session(self, admin_session, selector, firestore_admin):
        await selector.initialize()
        await admin_session.login(firestore_admin["username"], firestore_admin["password"], now=0)

        admin_session.touch(now=20 * MINUTE_MS)

        assert admin_session.is_authenticated(now=45 * MINUTE_MS) is True

    async def test_expired_session_logs_out(self, admin_session, selector, state, firestore_admin):
        await selector.initialize()
        await admin_session.login(firestore_admin["username"], firestore_admin["password"], now=0)

        assert admin_session.is_authenticated(now=31 * MINUTE_MS) is False
        assert state.is_admin_logged_in is False
        assert state.last_activity is None

    def test_not_logged_in(self, admin_session):
        assert admin_session.is_authenticated(now=0) is False

    async def test_logout(self, admin_session, selector, firestore_admin):
        await selector.initialize()
        await admin_session.login(firestore_admin["username"], firestore_admin["password"], now=0)

        admin_session.logout()

        assert admin_session.is_authenticated(now=1) is False
