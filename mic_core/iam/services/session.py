# mic_core/iam/services/session.py
from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, Optional

from django.contrib.auth import authenticate

from mic_core.common import events
from mic_core.common.permissions import ROLE_MEDEWERKER
from mic_core.iam.services.role_resolution import resolve_role

logger = logging.getLogger("mic.iam.session")

SESSION_CHANGED = "auth.session_changed"

# JWT claim carrying the login session key; access and refresh tokens share it.
SESSION_CLAIM = "sid"


class SessionState(str, Enum):
    UNRESOLVED = "unresolved"
    AUTHENTICATED = "authenticated"
    ANONYMOUS = "anonymous"


@dataclass(frozen=True)
class SessionSnapshot:
    state: SessionState
    user_id: Optional[int] = None
    role: Optional[str] = None

    @property
    def is_loading(self) -> bool:
        return self.state is SessionState.UNRESOLVED

    @property
    def is_authenticated(self) -> bool:
        return self.state is SessionState.AUTHENTICATED


UNRESOLVED = SessionSnapshot(state=SessionState.UNRESOLVED)
ANONYMOUS = SessionSnapshot(state=SessionState.ANONYMOUS)


class Subscription:
    """Handle returned by AuthService.initialize(); dispose() detaches the listener."""

    def __init__(self, event_name: str, handler: Callable[[Dict[str, Any]], None]):
        self._event_name = event_name
        self._handler = handler
        self.disposed = False

    def dispose(self) -> None:
        if self.disposed:
            return
        events.unsubscribe(self._event_name, self._handler)
        self.disposed = True


class AuthService:
    """
    Session state machine: UNRESOLVED -> AUTHENTICATED(role) | ANONYMOUS.

    Nothing happens on construction. initialize() reads the persisted session
    through `session_loader` and starts listening to auth.session_changed;
    the returned Subscription must be disposed by whoever owns the service.

    Only events carrying the same `session_key` are applied, so a login or
    logout in another user's session never touches this one. Without a key
    the service gets a private one and hears nobody but its peers sharing it.
    """

    def __init__(
        self,
        *,
        session_loader: Callable[[], Optional[int]],
        role_resolver: Callable[[int], str] = resolve_role,
        session_key: str | None = None,
    ):
        self._session_loader = session_loader
        self._role_resolver = role_resolver
        self._snapshot = UNRESOLVED
        self._subscription: Subscription | None = None
        self._token = uuid.uuid4().hex
        self._session_key = session_key or uuid.uuid4().hex

    @property
    def snapshot(self) -> SessionSnapshot:
        return self._snapshot

    @property
    def role(self) -> str | None:
        return self._snapshot.role

    def initialize(self) -> Subscription:
        if self._subscription is not None and not self._subscription.disposed:
            return self._subscription

        events.subscribe(SESSION_CHANGED)(self._on_session_changed)
        self._subscription = Subscription(SESSION_CHANGED, self._on_session_changed)

        try:
            user_id = self._session_loader()
        except Exception:
            logger.warning("Loading persisted session failed; treating as anonymous", exc_info=True)
            user_id = None

        self._apply(user_id)
        return self._subscription

    def sign_in(self, *, username: str, password: str) -> SessionSnapshot:
        user = authenticate(username=username, password=password)
        if user is None or not user.is_active:
            raise ValueError("Ongeldige inloggegevens.")

        self._apply(user.pk)
        self._announce(user.pk)
        return self._snapshot

    def sign_out(self) -> SessionSnapshot:
        self._apply(None)
        self._announce(None)
        return self._snapshot

    def _announce(self, user_id: Optional[int]) -> None:
        events.publish(
            SESSION_CHANGED,
            {"user_id": user_id, "session_key": self._session_key, "source": self._token},
        )

    def _on_session_changed(self, payload: Dict[str, Any]) -> None:
        if payload.get("session_key") != self._session_key:
            return
        if payload.get("source") == self._token:
            return
        self._apply(payload.get("user_id"))

    def _apply(self, user_id: Optional[int]) -> None:
        if user_id is None:
            self._snapshot = ANONYMOUS
            return

        # Hold UNRESOLVED until the role is known, never flash a default role.
        self._snapshot = UNRESOLVED
        try:
            role = self._role_resolver(user_id)
        except Exception:
            logger.warning("Role resolution failed for user_id=%s; using medewerker", user_id, exc_info=True)
            role = ROLE_MEDEWERKER
        self._snapshot = SessionSnapshot(
            state=SessionState.AUTHENTICATED,
            user_id=user_id,
            role=role,
        )
        logger.debug("Session resolved user_id=%s role=%s", user_id, role)
