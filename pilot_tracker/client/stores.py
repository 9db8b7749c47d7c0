"""
In-memory client state: active sessions and program/site selection.

Stores notify subscribers after every change. Subscribers are plain
callables taking the store.
"""
import logging
from typing import Any, Callable, Optional

from pilot_tracker.models.enums import TERMINAL_SESSION_STATUSES, SessionStatus

logger = logging.getLogger(__name__)

Listener = Callable[[Any], None]


class _Observable:
    def __init__(self):
        self._listeners: list[Listener] = []

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a listener; returns a function that unregisters it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener(self)


def is_active_session(session: dict[str, Any]) -> bool:
    """False for cancelled and expired sessions."""
    return SessionStatus(session["session_status"]) not in TERMINAL_SESSION_STATUSES


class ActiveSessionStore(_Observable):
    """
    Sessions the user is working on, keyed by ``session_id``.

    Terminal sessions never enter the store: they are dropped on replace
    and add, and an update moving a session to a terminal state removes it.
    """

    def __init__(self):
        super().__init__()
        self._sessions: dict[str, dict[str, Any]] = {}
        self.current_session_id: Optional[str] = None
        self.is_loading = False
        self.error: Optional[str] = None

    @property
    def sessions(self) -> list[dict[str, Any]]:
        return list(self._sessions.values())

    def get(self, session_id: str) -> Optional[dict[str, Any]]:
        return self._sessions.get(str(session_id))

    def set_sessions(self, sessions: list[dict[str, Any]]) -> None:
        """Replace all sessions."""
        self._sessions = {
            str(s["session_id"]): s for s in sessions if is_active_session(s)
        }
        if self.current_session_id not in self._sessions:
            self.current_session_id = None
        self._notify()

    def add_session(self, session: dict[str, Any]) -> None:
        if not is_active_session(session):
            logger.debug(f"Ignoring terminal session {session['session_id']}")
            return
        self._sessions[str(session["session_id"])] = session
        self._notify()

    def update_session(self, session_id: str, **changes: Any) -> None:
        key = str(session_id)
        existing = self._sessions.get(key)
        if existing is None:
            return

        updated = {**existing, **changes}
        if is_active_session(updated):
            self._sessions[key] = updated
            self._notify()
        else:
            self.remove_session(key)

    def remove_session(self, session_id: str) -> None:
        key = str(session_id)
        if self._sessions.pop(key, None) is None:
            return
        if self.current_session_id == key:
            self.current_session_id = None
        self._notify()

    def set_current_session(self, session_id: Optional[str]) -> None:
        self.current_session_id = str(session_id) if session_id is not None else None
        self._notify()

    def set_loading(self, is_loading: bool) -> None:
        self.is_loading = is_loading
        self._notify()

    def set_error(self, error: Optional[str]) -> None:
        self.error = error
        self._notify()

    def clear(self) -> None:
        self._sessions = {}
        self.current_session_id = None
        self.error = None
        self._notify()


class ProgramSelectionStore(_Observable):
    """Programs and sites loaded for the user, and what is selected."""

    def __init__(self):
        super().__init__()
        self.programs: list[dict[str, Any]] = []
        self.sites: list[dict[str, Any]] = []
        self.selected_program: Optional[dict[str, Any]] = None
        self.selected_site: Optional[dict[str, Any]] = None

    def set_programs(self, programs: list[dict[str, Any]]) -> None:
        self.programs = list(programs)
        self._notify()

    def set_sites(self, sites: list[dict[str, Any]]) -> None:
        self.sites = list(sites)
        self._notify()

    def select_program(self, program: Optional[dict[str, Any]]) -> None:
        """Select a program; a different program resets the site selection."""
        previous_id = self.selected_program["id"] if self.selected_program else None
        new_id = program["id"] if program else None
        self.selected_program = program
        if new_id != previous_id:
            self.selected_site = None
            self.sites = []
        self._notify()

    def select_site(self, site: Optional[dict[str, Any]]) -> None:
        self.selected_site = site
        self._notify()

    def reset(self) -> None:
        self.programs = []
        self.sites = []
        self.selected_program = None
        self.selected_site = None
        self._notify()
