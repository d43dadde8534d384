from lockerhub.core.session import SessionStore

USER = {"_id": "u1", "firstName": "Ada"}


def test_session_round_trips_through_disk(tmp_path):
    path = tmp_path / "nested" / "session.json"
    SessionStore(path).save("tok-1", USER)

    reopened = SessionStore(path)
    assert reopened.token == "tok-1"
    assert reopened.user == USER
    assert not path.with_suffix(".tmp").exists()


def test_save_user_keeps_token(session):
    session.save("tok-1", USER)
    session.save_user({"_id": "u1", "firstName": "Augusta"})

    assert session.token == "tok-1"
    assert session.user["firstName"] == "Augusta"


def test_clear_notifies_subscribers_until_unsubscribed(session):
    events = []
    unsubscribe = session.subscribe(events.append)
    session.save("tok-1", USER)

    session.clear(reason="unauthorized")
    unsubscribe()
    session.clear()

    assert [e.reason for e in events] == ["unauthorized"]
    assert session.token is None


def test_unreadable_session_file_reads_as_empty(tmp_path):
    path = tmp_path / "session.json"
    path.write_text("{not json", encoding="utf-8")

    assert SessionStore(path).token is None
    assert SessionStore(path).user is None
