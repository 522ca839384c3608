"""
Unit tests for InMemorySessionStore.
"""

import uuid
from concurrent.futures import ThreadPoolExecutor

from projectvault.adapters.session import InMemorySessionStore

EMAIL = "22-ORG045@students.example.edu"


class TestSessionLifecycle:
    """Tests for create / get / destroy."""

    def test_create_binds_handle_to_profile(self, sessions: InMemorySessionStore, clock) -> None:
        profile_id = uuid.uuid4()
        session = sessions.create(profile_id, EMAIL)

        assert session.profile_id == profile_id
        assert session.email == EMAIL
        assert session.created_at == clock.now()
        assert sessions.get(session.handle) == session

    def test_handles_are_opaque_and_unique(self, sessions: InMemorySessionStore) -> None:
        handles = {sessions.create(uuid.uuid4(), EMAIL).handle for _ in range(100)}
        assert len(handles) == 100
        assert all(len(h) >= 40 for h in handles)

    def test_unknown_handle_is_none(self, sessions: InMemorySessionStore) -> None:
        assert sessions.get("no-such-handle") is None

    def test_destroy_removes_session(self, sessions: InMemorySessionStore) -> None:
        session = sessions.create(uuid.uuid4(), EMAIL)

        assert sessions.destroy(session.handle) is True
        assert sessions.get(session.handle) is None

    def test_destroy_twice_reports_nothing_to_destroy(self, sessions: InMemorySessionStore) -> None:
        session = sessions.create(uuid.uuid4(), EMAIL)
        sessions.destroy(session.handle)
        assert sessions.destroy(session.handle) is False

    def test_concurrent_creates_are_all_kept(self, sessions: InMemorySessionStore) -> None:
        with ThreadPoolExecutor(max_workers=8) as executor:
            list(executor.map(lambda _: sessions.create(uuid.uuid4(), EMAIL), range(200)))
        assert len(sessions) == 200
