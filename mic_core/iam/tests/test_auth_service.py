# mic_core/iam/tests/test_auth_service.py
import pytest

from mic_core.common import events
from mic_core.common.permissions import ROLE_MEDEWERKER, ROLE_SUPER_ADMIN
from mic_core.iam.services.session import SESSION_CHANGED, AuthService, SessionState


def _resolver(roles):
    return lambda user_id: roles.get(user_id, ROLE_MEDEWERKER)


def test_unresolved_until_initialized():
    service = AuthService(session_loader=lambda: 1, role_resolver=_resolver({}))
    assert service.snapshot.state is SessionState.UNRESOLVED
    assert service.snapshot.is_loading
    assert service.role is None


def test_initialize_with_persisted_session_resolves_role():
    service = AuthService(session_loader=lambda: 5, role_resolver=_resolver({5: ROLE_SUPER_ADMIN}))
    sub = service.initialize()
    try:
        assert service.snapshot.is_authenticated
        assert service.snapshot.user_id == 5
        assert service.role == ROLE_SUPER_ADMIN
    finally:
        sub.dispose()


def test_initialize_without_session_is_anonymous():
    service = AuthService(session_loader=lambda: None, role_resolver=_resolver({}))
    sub = service.initialize()
    try:
        assert service.snapshot.state is SessionState.ANONYMOUS
        assert service.role is None
    finally:
        sub.dispose()


def test_failing_session_loader_is_anonymous():
    def loader():
        raise RuntimeError("storage unavailable")

    service = AuthService(session_loader=loader, role_resolver=_resolver({}))
    sub = service.initialize()
    try:
        assert service.snapshot.state is SessionState.ANONYMOUS
    finally:
        sub.dispose()


def test_role_is_never_exposed_before_resolution():
    seen = []

    service = None

    def resolver(user_id):
        # called while the service is mid-transition
        seen.append((service.snapshot.state, service.role))
        return ROLE_SUPER_ADMIN

    service = AuthService(session_loader=lambda: 3, role_resolver=resolver)
    sub = service.initialize()
    try:
        assert seen == [(SessionState.UNRESOLVED, None)]
        assert service.role == ROLE_SUPER_ADMIN
    finally:
        sub.dispose()


def test_session_change_events_update_state():
    service = AuthService(
        session_loader=lambda: None,
        role_resolver=_resolver({8: ROLE_SUPER_ADMIN}),
        session_key="tab-1",
    )
    sub = service.initialize()
    try:
        events.publish(SESSION_CHANGED, {"user_id": 8, "session_key": "tab-1"})
        assert service.snapshot.is_authenticated
        assert service.role == ROLE_SUPER_ADMIN

        events.publish(SESSION_CHANGED, {"user_id": None, "session_key": "tab-1"})
        assert service.snapshot.state is SessionState.ANONYMOUS
    finally:
        sub.dispose()


def test_events_for_other_sessions_are_ignored():
    service = AuthService(
        session_loader=lambda: 4,
        role_resolver=_resolver({8: ROLE_SUPER_ADMIN}),
        session_key="tab-1",
    )
    sub = service.initialize()
    try:
        events.publish(SESSION_CHANGED, {"user_id": 8, "session_key": "tab-2"})
        events.publish(SESSION_CHANGED, {"user_id": 8})
        assert service.snapshot.user_id == 4
        assert service.role == ROLE_MEDEWERKER

        events.publish(SESSION_CHANGED, {"user_id": None, "session_key": "tab-2"})
        assert service.snapshot.is_authenticated
    finally:
        sub.dispose()


def test_failing_role_resolver_falls_back_to_medewerker():
    def resolver(user_id):
        raise RuntimeError("profile table unavailable")

    service = AuthService(session_loader=lambda: 6, role_resolver=resolver)
    sub = service.initialize()
    try:
        assert service.snapshot.state is SessionState.AUTHENTICATED
        assert not service.snapshot.is_loading
        assert service.snapshot.user_id == 6
        assert service.role == ROLE_MEDEWERKER
    finally:
        sub.dispose()


def test_dispose_stops_listening():
    service = AuthService(session_loader=lambda: None, role_resolver=_resolver({}), session_key="tab-1")
    sub = service.initialize()
    sub.dispose()
    sub.dispose()

    events.publish(SESSION_CHANGED, {"user_id": 8, "session_key": "tab-1"})
    assert service.snapshot.state is SessionState.ANONYMOUS
    assert sub.disposed


def test_initialize_twice_returns_same_subscription():
    service = AuthService(session_loader=lambda: None, role_resolver=_resolver({}))
    first = service.initialize()
    try:
        assert service.initialize() is first
    finally:
        first.dispose()


@pytest.mark.django_db
def test_sign_in_and_out_notify_other_listeners(user):
    watcher = AuthService(session_loader=lambda: None, role_resolver=_resolver({}), session_key="tab-1")
    actor = AuthService(session_loader=lambda: None, role_resolver=_resolver({}), session_key="tab-1")
    stranger = AuthService(session_loader=lambda: None, role_resolver=_resolver({}))
    stranger_sub = stranger.initialize()
    watcher_sub = watcher.initialize()
    actor_sub = actor.initialize()
    try:
        snap = actor.sign_in(username="medewerker@example.com", password="testpass")
        assert snap.is_authenticated
        assert snap.user_id == user.id
        assert watcher.snapshot.user_id == user.id
        assert stranger.snapshot.state is SessionState.ANONYMOUS
        assert stranger.snapshot.user_id is None

        actor.sign_out()
        assert actor.snapshot.state is SessionState.ANONYMOUS
        assert watcher.snapshot.state is SessionState.ANONYMOUS
    finally:
        watcher_sub.dispose()
        actor_sub.dispose()
        stranger_sub.dispose()


@pytest.mark.django_db
def test_sign_in_with_wrong_password_raises(user):
    service = AuthService(session_loader=lambda: None, role_resolver=_resolver({}))
    with pytest.raises(ValueError):
        service.sign_in(username="medewerker@example.com", password="wrong")
    assert service.snapshot.state is SessionState.UNRESOLVED
