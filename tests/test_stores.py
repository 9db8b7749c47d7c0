from pilot_tracker.client.stores import ActiveSessionStore, ProgramSelectionStore


def _session(session_id: str, status: str = "Opened") -> dict:
    return {
        "session_id": session_id,
        "submission_id": f"sub-{session_id}",
        "site_name": "North House",
        "session_status": status,
        "percentage_complete": 0,
    }


def test_set_sessions_drops_terminal_states():
    store = ActiveSessionStore()
    store.set_sessions([
        _session("a"),
        _session("b", "Cancelled"),
        _session("c", "Expired"),
        _session("d", "Expired-Complete"),
        _session("e", "Expired-Incomplete"),
        _session("f", "Shared"),
    ])

    assert [s["session_id"] for s in store.sessions] == ["a", "f"]


def test_add_ignores_terminal_session():
    store = ActiveSessionStore()
    store.add_session(_session("a", "Expired"))

    assert store.sessions == []


def test_update_to_terminal_state_removes_session():
    store = ActiveSessionStore()
    store.add_session(_session("a"))
    store.set_current_session("a")

    store.update_session("a", session_status="Cancelled")

    assert store.get("a") is None
    assert store.current_session_id is None


def test_update_keeps_active_session():
    store = ActiveSessionStore()
    store.add_session(_session("a"))

    store.update_session("a", session_status="Working", percentage_complete=40)

    assert store.get("a")["session_status"] == "Working"
    assert store.get("a")["percentage_complete"] == 40


def test_removing_current_session_clears_it():
    store = ActiveSessionStore()
    store.set_sessions([_session("a"), _session("b")])
    store.set_current_session("a")

    store.remove_session("b")
    assert store.current_session_id == "a"

    store.remove_session("a")
    assert store.current_session_id is None


def test_replace_clears_current_session_that_disappeared():
    store = ActiveSessionStore()
    store.set_sessions([_session("a")])
    store.set_current_session("a")

    store.set_sessions([_session("a", "Expired"), _session("b")])

    assert store.current_session_id is None


def test_subscribers_notified_until_unsubscribed():
    store = ActiveSessionStore()
    seen = []
    unsubscribe = store.subscribe(lambda s: seen.append(len(s.sessions)))

    store.add_session(_session("a"))
    store.add_session(_session("b"))
    unsubscribe()
    store.clear()

    assert seen == [1, 2]


def test_selecting_new_program_resets_site():
    store = ProgramSelectionStore()
    store.select_program({"id": "p1", "name": "Spring"})
    store.set_sites([{"id": "s1"}])
    store.select_site({"id": "s1"})

    store.select_program({"id": "p1", "name": "Spring"})
    assert store.selected_site == {"id": "s1"}

    store.select_program({"id": "p2", "name": "Summer"})
    assert store.selected_site is None
    assert store.sites == []
