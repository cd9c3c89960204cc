"""
Unit tests for the prober, client state and active-backend selector
"""
import httpx
import pytest

from app.datastore.errors import ConfirmationDeclined
from app.datastore.prober import BackendProber
from app.datastore.records import BackendKind
from app.datastore.selector import ActiveBackendSelector
from app.datastore.state import ClientState
from tests.fakes import FakeProber


def _prober_answering(handler) -> BackendProber:
    return BackendProber("http://rest.local/api", transport=httpx.MockTransport(handler))


class TestBackendProber:
    """Test REST reachability checks"""

    async def test_success_status_is_available(self):
        seen = []

        def handler(request):
            seen.append(str(request.url))
            return httpx.Response(200, json={"success": True, "data": []})

        assert await _prober_answering(handler).probe() is True
        assert seen == ["http://rest.local/api/students"]

    async def test_error_status_is_unavailable(self):
        prober = _prober_answering(lambda request: httpx.Response(500, json={"success": False}))
        assert await prober.probe() is False

    async def test_timeout_is_unavailable(self):
        def handler(request):
            raise httpx.ConnectTimeout("timed out", request=request)

        assert await _prober_answering(handler).probe() is False

    async def test_connection_refused_is_unavailable(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        assert await _prober_answering(handler).probe() is False


class TestClientState:
    """Test the JSON-file client state"""

    def test_defaults_without_file(self, tmp_path):
        state = ClientState(tmp_path / "missing.json")

        assert state.active_database is None
        assert state.is_admin_logged_in is False
        assert state.last_activity is None

    def test_values_survive_a_new_instance(self, tmp_path):
        path = tmp_path / "state.json"
        ClientState(path).active_database = "mongodb"

        assert ClientState(path).active_database == "mongodb"

    def test_corrupt_file_falls_back_to_defaults(self, tmp_path):
        path = tmp_path / "state.json"
        path.write_text("{not json", encoding="utf-8")

        assert ClientState(path).active_database is None

    def test_remove_resets_keys(self, state):
        state.set("isAdminLoggedIn", True)
        state.set("lastActivity", 123)
        state.remove("isAdminLoggedIn", "lastActivity")

        assert state.is_admin_logged_in is False
        assert state.last_activity is None


class TestInitialize:
    """Test restoring the persisted backend preference"""

    async def test_no_preference_uses_firestore(self, state, prober):
        selector = ActiveBackendSelector(state, prober)

        assert await selector.initialize() is BackendKind.FIRESTORE
        assert state.active_database == "firestore"
        assert prober.calls == 0

    async def test_saved_mongo_kept_when_reachable(self, state):
        state.active_database = "mongodb"
        selector = ActiveBackendSelector(state, FakeProber(available=True))

        assert await selector.initialize() is BackendKind.MONGO
        assert state.active_database == "mongodb"

    async def test_saved_mongo_reverts_when_unreachable(self, state):
        state.active_database = "mongodb"
        selector = ActiveBackendSelector(state, FakeProber(available=False))

        assert await selector.initialize() is BackendKind.FIRESTORE
        assert state.active_database == "firestore"

    async def test_unknown_saved_value_uses_firestore(self, state, prober):
        state.active_database = "postgres"
        selector = ActiveBackendSelector(state, prober)

        assert await selector.initialize() is BackendKind.FIRESTORE
        assert state.active_database == "firestore"


class TestSwitchDatabase:
    """Test confirmed switching and listeners"""

    async def test_confirmed_switch(self, selector, state):
        await selector.initialize()

        assert await selector.switch_database(BackendKind.MONGO) is True
        assert selector.active is BackendKind.MONGO
        assert state.active_database == "mongodb"

    async def test_declined_switch_changes_nothing(self, state, prober):
        prompts = []

        def decline(message):
            prompts.append(message)
            return False

        selector = ActiveBackendSelector(state, prober, confirm=decline)
        await selector.initialize()

        assert await selector.switch_database(BackendKind.MONGO) is False
        assert selector.active is BackendKind.FIRESTORE
        assert state.active_database == "firestore"
        assert "MONGODB" in prompts[0]

    async def test_confirmation_declined_exception_is_a_no_op(self, state, prober):
        def cancel(message):
            raise ConfirmationDeclined(BackendKind.MONGO)

        selector = ActiveBackendSelector(state, prober, confirm=cancel)
        await selector.initialize()

        assert await selector.switch_database(BackendKind.MONGO) is False
        assert selector.active is BackendKind.FIRESTORE

    async def test_async_confirm(self, state, prober):
        async def confirm(message):
            return True

        selector = ActiveBackendSelector(state, prober, confirm=confirm)
        await selector.initialize()

        assert await selector.switch_database("mongodb") is True
        assert selector.active is BackendKind.MONGO

    async def test_default_confirm_declines(self, state, prober):
        selector = ActiveBackendSelector(state, prober)
        await selector.initialize()

        assert await selector.switch_database(BackendKind.MONGO) is False

    async def test_same_target_is_not_prompted(self, state, prober):
        prompts = []
        selector = ActiveBackendSelector(state, prober, confirm=lambda m: prompts.append(m) or True)
        await selector.initialize()

        assert await selector.switch_database(BackendKind.FIRESTORE) is False
        assert prompts == []

    async def test_listeners_notified_on_change_only(self, selector):
        await selector.initialize()
        seen = []
        unsubscribe = selector.subscribe(seen.append)

        await selector.switch_database(BackendKind.MONGO)
        await selector.switch_database(BackendKind.MONGO)
        unsubscribe()
        await selector.switch_database(BackendKind.FIRESTORE)

        assert seen == [BackendKind.MONGO]

    async def test_fall_back_reverts_and_persists(self, selector, state):
        await selector.initialize()
        await selector.switch_database(BackendKind.MONGO)
        seen = []
        selector.subscribe(seen.append)

        warning = selector.fall_back("connection refused")

        assert selector.active is BackendKind.FIRESTORE
        assert state.active_database == "firestore"
        assert seen == [BackendKind.FIRESTORE]
        assert "connection refused" in warning

    async def test_unknown_target_rejected(self, selector):
        with pytest.raises(ValueError):
            await selector.switch_database("postgres")
