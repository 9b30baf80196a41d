"""Unit tests for SessionStore invariants and handle release."""

from collections import Counter

import pytest
import pytest_check as check

from reportchat.models.schemas import (
    DocumentArtifact,
    DocumentType,
    HtmlArtifact,
    Message,
    Sender,
    Session,
    TextArtifact,
)
from reportchat.rendering.resources import ResourceRegistry
from reportchat.session.store import SessionNotFoundError, SessionStore


def _text(content: str, sender: Sender = Sender.USER) -> Message:
    return Message(sender=sender, artifact=TextArtifact(content=content))


def _document(resources: ResourceRegistry, file_name: str = "q1.pdf") -> Message:
    handle = resources.allocate(b"%PDF", "application/pdf", file_name)
    return Message(
        sender=Sender.ASSISTANT,
        artifact=DocumentArtifact(
            document_type=DocumentType.PDF,
            handle=handle,
            file_name=file_name,
            media_type="application/pdf",
        ),
    )


class TestCreateAndSelect:
    """Tests for session creation and selection."""

    def test_create_session_appends_and_activates(self, store: SessionStore) -> None:
        first = store.create_session()
        second = store.create_session()

        check.equal([s.id for s in store.sessions], [first.id, second.id])
        check.equal(store.active_session_id, second.id)
        check.equal(store.active_session, second)

    def test_default_names_follow_session_count(self, store: SessionStore) -> None:
        names = [store.create_session().display_name for _ in range(3)]

        assert names == ["New Session 1", "New Session 2", "New Session 3"]

    def test_explicit_display_name(self, store: SessionStore) -> None:
        assert store.create_session("Budget review").display_name == "Budget review"

    def test_session_ids_are_unique(self, store: SessionStore) -> None:
        ids = {store.create_session().id for _ in range(20)}

        assert len(ids) == 20

    def test_select_existing_session(self, store: SessionStore) -> None:
        first = store.create_session()
        store.create_session()

        check.is_true(store.select_session(first.id))
        check.equal(store.active_session_id, first.id)

    def test_select_unknown_session_keeps_active(self, store: SessionStore) -> None:
        """Stale ids are ignored without raising."""
        current = store.create_session()

        check.is_false(store.select_session("does-not-exist"))
        check.equal(store.active_session_id, current.id)

    def test_empty_store_has_no_active_session(self, store: SessionStore) -> None:
        check.is_none(store.active_session_id)
        check.is_none(store.active_session)
        check.equal(store.messages(), ())


class TestMessages:
    """Tests for the append-only message logs."""

    def test_append_preserves_order(self, store: SessionStore) -> None:
        session = store.create_session()
        messages = [_text("one"), _text("two", Sender.ASSISTANT), _text("three")]

        for message in messages:
            store.append_message(session.id, message)

        assert store.messages(session.id) == tuple(messages)

    def test_messages_default_to_active_session(self, store: SessionStore) -> None:
        first = store.create_session()
        store.append_message(first.id, _text("in first"))
        store.create_session()

        check.equal(store.messages(), ())
        store.select_session(first.id)
        check.equal([m.artifact.content for m in store.messages()], ["in first"])

    def test_logs_are_independent(self, store: SessionStore) -> None:
        a = store.create_session()
        b = store.create_session()
        store.append_message(a.id, _text("for a"))

        check.equal(len(store.messages(a.id)), 1)
        check.equal(store.messages(b.id), ())

    def test_append_to_unknown_session_raises(self, store: SessionStore) -> None:
        with pytest.raises(SessionNotFoundError) as exc_info:
            store.append_message("gone", _text("late"))

        assert exc_info.value.session_id == "gone"

    def test_reads_return_snapshots(self, store: SessionStore) -> None:
        """Read accessors return tuples that later appends do not change."""
        session = store.create_session()
        snapshot = store.messages(session.id)
        sessions = store.sessions

        store.append_message(session.id, _text("new"))
        store.create_session()

        check.equal(snapshot, ())
        check.equal(len(sessions), 1)


class TestDeleteSession:
    """Tests for deletion and cascading handle release."""

    def test_delete_active_clears_selection_and_log(self, store: SessionStore) -> None:
        session = store.create_session()
        store.append_message(session.id, _text("hi"))

        check.is_true(store.delete_session(session.id))
        check.is_none(store.active_session_id)
        check.equal(store.messages(), ())
        check.equal(store.sessions, ())

    def test_delete_inactive_keeps_selection(self, store: SessionStore) -> None:
        first = store.create_session()
        second = store.create_session()

        store.delete_session(first.id)

        check.equal(store.active_session_id, second.id)
        check.equal([s.id for s in store.sessions], [second.id])

    def test_delete_unknown_is_noop(self, store: SessionStore) -> None:
        session = store.create_session()

        check.is_false(store.delete_session("missing"))
        check.equal(store.active_session_id, session.id)

    def test_delete_releases_each_handle_once(
        self, store: SessionStore, resources: ResourceRegistry, release_calls: Counter[str]
    ) -> None:
        session = store.create_session()
        docs = [_document(resources, "a.pdf"), _document(resources, "b.pdf")]
        store.append_message(session.id, _text("make reports"))
        for doc in docs:
            store.append_message(session.id, doc)
        handles = [doc.artifact.handle for doc in docs]

        store.delete_session(session.id)
        store.delete_session(session.id)

        check.equal([release_calls[h] for h in handles], [1, 1])
        check.equal(len(resources), 0)

    def test_delete_leaves_other_sessions_handles(
        self, store: SessionStore, resources: ResourceRegistry, release_calls: Counter[str]
    ) -> None:
        a = store.create_session()
        b = store.create_session()
        doc_a = _document(resources)
        doc_b = _document(resources)
        store.append_message(a.id, doc_a)
        store.append_message(b.id, doc_b)

        store.delete_session(a.id)

        check.is_none(resources.get(doc_a.artifact.handle))
        check.is_not_none(resources.get(doc_b.artifact.handle))
        check.equal(release_calls[doc_b.artifact.handle], 0)


class TestHydrationAndTeardown:
    """Tests for add_session, listeners and close."""

    def test_add_session_keeps_active_selection(self, store: SessionStore) -> None:
        current = store.create_session()
        loaded = Session(id="remote-1", display_name="Q1")

        check.is_true(store.add_session(loaded, [_text("old")]))
        check.equal(store.active_session_id, current.id)
        check.equal(len(store.messages("remote-1")), 1)

    def test_add_session_skips_existing_id(self, store: SessionStore) -> None:
        loaded = Session(id="remote-1", display_name="Q1")
        store.add_session(loaded, [_text("old")])

        check.is_false(store.add_session(Session(id="remote-1", display_name="dup")))
        check.equal(store.get_session("remote-1").display_name, "Q1")

    def test_listeners_notified_on_mutation(self, store: SessionStore) -> None:
        calls: list[int] = []
        unsubscribe = store.subscribe(lambda: calls.append(1))

        session = store.create_session()
        store.append_message(session.id, _text("x"))
        store.select_session(session.id)  # already active, no change
        store.delete_session(session.id)
        check.equal(len(calls), 3)

        unsubscribe()
        store.create_session()
        check.equal(len(calls), 3)

    def test_close_releases_everything(
        self, store: SessionStore, resources: ResourceRegistry, release_calls: Counter[str]
    ) -> None:
        a = store.create_session()
        b = store.create_session()
        doc_a = _document(resources)
        doc_b = _document(resources)
        store.append_message(a.id, doc_a)
        store.append_message(b.id, doc_b)
        html = Message(sender=Sender.ASSISTANT, artifact=HtmlArtifact(content="<p>x</p>"))
        store.append_message(b.id, html)

        store.close()

        check.equal(release_calls[doc_a.artifact.handle], 1)
        check.equal(release_calls[doc_b.artifact.handle], 1)
        check.equal(store.sessions, ())
        check.is_none(store.active_session_id)
