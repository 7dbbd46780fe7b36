from src.inside_notes.domain.models.user import User, UserRole
from src.inside_notes.services.session.service import (
    SESSION_KEY,
    InMemorySessionStore,
    JsonFileSessionStore,
    SessionManager,
)

TECH = User(id=2, name="Ronaldo Costa", email="ronaldo.costa@inside.com.br", role=UserRole.STANDARD)


def test_login_persists_and_init_restores(tmp_path):
    path = tmp_path / "session.json"
    SessionManager(JsonFileSessionStore(path)).login(TECH)

    restored = SessionManager(JsonFileSessionStore(path))
    assert restored.current_user is None
    assert restored.init() == TECH
    assert restored.current_user == TECH
    assert SESSION_KEY in path.read_text(encoding="utf-8")


def test_logout_clears_the_slot(tmp_path):
    path = tmp_path / "session.json"
    manager = SessionManager(JsonFileSessionStore(path))
    manager.login(TECH)

    manager.logout()

    assert manager.current_user is None
    assert SessionManager(JsonFileSessionStore(path)).init() is None


def test_unreadable_slot_is_cleared_on_init(tmp_path):
    path = tmp_path / "session.json"
    path.write_text("{not json", encoding="utf-8")
    manager = SessionManager(JsonFileSessionStore(path))

    assert manager.init() is None
    assert manager.current_user is None
    assert not path.exists()


def test_undecodable_user_is_discarded():
    store = InMemorySessionStore(raw='{"id": "x"}')
    manager = SessionManager(store)

    assert manager.init() is None
    assert store.load() is None


def test_teardown_drops_in_memory_user():
    manager = SessionManager(InMemorySessionStore())
    manager.init()
    manager.login(TECH)

    manager.teardown()

    assert manager.current_user is None
    assert manager.init() == TECH
