from wedding_seat_manager.models import ViewMode
from wedding_seat_manager.session import AppSession


def test_defaults_from_empty_storage():
    session = AppSession.load({})
    assert not session.is_authenticated
    assert session.view_mode is ViewMode.GRID


def test_login_save_load_roundtrip():
    storage = {}
    session = AppSession()
    session.login(is_admin=True, session_id="abc")
    session.set_view_mode("list")
    session.save(storage)
    assert storage == {"isAuthenticated": "true", "isAdmin": "true", "sessionId": "abc", "viewMode": "list"}
    loaded = AppSession.load(storage)
    assert loaded == session


def test_logout_clears_auth_but_keeps_view_mode():
    storage = {"isAuthenticated": "true", "isAdmin": "false", "sessionId": "abc", "viewMode": "list"}
    session = AppSession.load(storage)
    session.logout()
    session.save(storage)
    assert storage == {"viewMode": "list"}


def test_invalid_persisted_values_are_ignored():
    session = AppSession.load({"isAuthenticated": "yes", "isAdmin": "true", "viewMode": "carousel"})
    assert not session.is_authenticated
    assert not session.is_admin
    assert session.view_mode is ViewMode.GRID
    session.set_view_mode("tiles")
    assert session.view_mode is ViewMode.GRID


def test_fresh_storage_after_reload_is_logged_out():
    storage = {}
    session = AppSession()
    session.login(is_admin=False, session_id="abc")
    session.set_view_mode(ViewMode.LIST)
    session.save(storage)
    assert AppSession.load(storage).is_authenticated

    # A browser reload hands the app a new, empty session_state.
    reloaded = AppSession.load({})
    assert not reloaded.is_authenticated
    assert reloaded.session_id is None
    assert reloaded.view_mode is ViewMode.GRID
