"""Tests for the edit session state machine."""

import threading

import pytest

pytestmark = pytest.mark.unit

from pageomatic.exceptions import (
    EditNotAllowedError,
    LoadFailedError,
    MissingActorError,
    ValidationError,
)
from pageomatic.sections.registry import create_default
from pageomatic.sections.types import MediaSlot
from pageomatic.services.document import PageDocument
from pageomatic.services.edit_session import EditorState, EditSession
from pageomatic.services.page_service import PageService
from pageomatic.storage.repositories import PageComponentRepository


def _seed(db, page_slug, *tags):
    sections = [create_default(tag, f"s{index}") for index, tag in enumerate(tags)]
    with db.session() as session:
        PageService(session).save(page_slug, PageDocument(sections=sections, dirty=True), "seed")


@pytest.fixture
def editing(temp_db):
    """A mounted session on a seeded page, in edit mode."""
    _seed(temp_db, "landing", "hero", "text", "feature-card-grid")
    session = EditSession("landing", temp_db)
    assert session.mount()
    session.enter_edit()
    return session


class TestMount:
    """Tests for loading a session."""

    def test_mount_loads_stored_page(self, temp_db):
        _seed(temp_db, "landing", "hero", "text")
        session = EditSession("landing", temp_db)
        assert session.mount() is True
        assert session.document.section_ids() == ["s0", "s1"]
        assert session.versions == {"sections": 1, "page_properties": 1}
        assert session.state is EditorState.VIEWING
        assert not session.is_dirty

    def test_fresh_page_gets_initial_sections(self, temp_db):
        session = EditSession("about", temp_db)
        assert session.mount() is True
        assert [s["type"] for s in session.document.sections] == ["hero-responsive", "text"]
        assert not session.is_dirty

    def test_load_failure_falls_back(self, temp_db, monkeypatch):
        """Test that a failed load keeps the default document and records the error."""

        def broken(self, page_slug, profile=None):
            raise LoadFailedError(page_slug)

        monkeypatch.setattr(PageService, "load", broken)
        session = EditSession("home", temp_db)
        assert session.mount() is False
        assert isinstance(session.last_error, LoadFailedError)
        assert [s["type"] for s in session.document.sections][0] == "hero-responsive"

        session.enter_edit()
        session.insert("cta")
        assert session.is_dirty


class TestModes:
    """Tests for viewing, editing and preview."""

    def test_mutations_require_edit_mode(self, temp_db):
        session = EditSession("landing", temp_db)
        session.mount()
        with pytest.raises(EditNotAllowedError):
            session.insert("text")
        with pytest.raises(EditNotAllowedError):
            session.set_preview(True)

    def test_preview_blocks_mutations_without_touching_dirty(self, editing):
        editing.patch(0, {"title": "Draft"})
        editing.set_preview(True)
        assert not editing.is_editable
        with pytest.raises(EditNotAllowedError):
            editing.remove(0)
        with pytest.raises(EditNotAllowedError):
            editing.request_media(0, MediaSlot.BACKGROUND)
        assert editing.is_dirty
        assert not editing.is_saving

        editing.set_preview(False)
        editing.remove(0)
        assert len(editing.document) == 2

    def test_leave_clean_session(self, editing):
        assert editing.leave_edit() is True
        assert editing.state is EditorState.VIEWING

    def test_leave_dirty_session_declined(self, editing):
        editing.insert("cta")
        assert editing.leave_edit(confirm=lambda: False) is False
        assert editing.leave_edit() is False
        assert editing.state is EditorState.EDITING
        assert len(editing.document) == 4

    def test_leave_dirty_session_confirmed(self, editing):
        """Test that confirming discards changes back to the saved snapshot."""
        asked = []
        editing.insert("cta")
        editing.set_preview(True)

        assert editing.leave_edit(confirm=lambda: asked.append(True) or True) is True
        assert asked == [True]
        assert editing.state is EditorState.VIEWING
        assert editing.preview is False
        assert not editing.is_dirty
        assert editing.document.section_ids() == ["s0", "s1", "s2"]

    def test_mutation_wrappers(self, editing):
        editing.move(0, "down")
        editing.set_visible(0, False)
        editing.duplicate(1)
        editing.update_properties({"pageTitle": "Landing"})
        editing.set_auxiliary("section_order", ["s1", "s0"])
        doc = editing.document
        assert doc.section_ids()[:2] == ["s1", "s0"]
        assert doc.sections[0]["visible"] is False
        assert len(doc) == 4
        assert doc.properties.page_title == "Landing"
        assert doc.auxiliary["section_order"] == ["s1", "s0"]


class TestSave:
    """Tests for saving from a session."""

    def test_save_clears_dirty(self, editing, temp_db):
        editing.patch(1, {"content": "Hello"})
        result = editing.save("user-1")

        assert result.ok
        assert not editing.is_dirty
        assert editing.state is EditorState.EDITING
        assert editing.versions["sections"] == 2
        assert editing.last_error is None

        reloaded = EditSession("landing", temp_db)
        reloaded.mount()
        assert reloaded.document.sections[1]["content"] == "Hello"

    def test_save_requires_edit_mode(self, temp_db):
        session = EditSession("landing", temp_db)
        with pytest.raises(EditNotAllowedError):
            session.save("user-1")

    def test_missing_actor_propagates(self, editing):
        editing.insert("cta")
        with pytest.raises(MissingActorError):
            editing.save(None)
        assert editing.is_dirty
        assert editing.state is EditorState.EDITING
        assert isinstance(editing.last_error, MissingActorError)

    def test_invalid_document_propagates(self, editing):
        editing.set_auxiliary("sections", [])
        with pytest.raises(ValidationError):
            editing.save("user-1")
        assert editing.is_dirty

    def test_partial_failure_keeps_dirty(self, editing, monkeypatch):
        original = PageComponentRepository.upsert

        def flaky(self, page_slug, component_type, *args, **kwargs):
            if component_type == "sections":
                raise RuntimeError("timeout")
            return original(self, page_slug, component_type, *args, **kwargs)

        monkeypatch.setattr(PageComponentRepository, "upsert", flaky)
        editing.insert("cta")
        result = editing.save("user-1")

        assert result.failed_components == ["sections"]
        assert editing.is_dirty
        assert editing.last_error is result.failures["sections"]
        assert editing.versions == {"sections": 1, "page_properties": 2}
        assert len(editing.document) == 4

    def test_conflict_surfaces(self, editing, temp_db):
        """Test that another editor's save makes ours fail with a conflict."""
        other = EditSession("landing", temp_db)
        other.mount()
        other.enter_edit()
        other.insert("divider")
        assert other.save("user-2").ok

        editing.insert("cta")
        result = editing.save("user-1")
        assert "sections" in result.conflicts
        assert editing.is_dirty

    def test_change_during_save_stays_dirty(self, editing, monkeypatch):
        """Test that an edit made while saving is not marked clean."""
        original = PageService.save

        def save_with_concurrent_edit(self, *args, **kwargs):
            result = original(self, *args, **kwargs)
            if editing.document.index_of("late") is None:
                assert editing.is_saving
                editing.patch(0, {"title": "late"})
                editing.document = editing.document.with_changes(
                    sections=editing.document.sections + [create_default("quote", "late")]
                )
            return result

        monkeypatch.setattr(PageService, "save", save_with_concurrent_edit)
        editing.insert("cta")
        result = editing.save("user-1")

        assert result.ok
        assert editing.is_dirty
        assert editing.document.index_of("late") is not None

    def test_overlapping_save_is_coalesced(self, editing, monkeypatch):
        """Test that a save requested mid-flight runs as one follow-up pass."""
        original = PageService.save
        calls = []
        nested = []

        def save_and_retrigger(self, *args, **kwargs):
            calls.append(args[1])
            result = original(self, *args, **kwargs)
            if len(calls) == 1:
                editing.patch(0, {"title": "second pass"})
                nested.append(editing.save("user-1"))
            return result

        monkeypatch.setattr(PageService, "save", save_and_retrigger)
        editing.insert("cta")
        result = editing.save("user-1")

        assert nested == [None]
        assert len(calls) == 2
        assert calls[1].sections[0]["title"] == "second pass"
        assert result.ok
        assert not editing.is_dirty
        assert editing.versions["sections"] == 3

    def test_request_from_other_thread_while_finishing(self, editing, monkeypatch):
        """Test that a save requested from another thread as a pass ends still runs."""
        original = PageService.save
        calls = []
        first_written = threading.Event()
        resume = threading.Event()

        def slow_save(self, *args, **kwargs):
            calls.append(args[1])
            result = original(self, *args, **kwargs)
            if len(calls) == 1:
                first_written.set()
                assert resume.wait(timeout=5)
            return result

        monkeypatch.setattr(PageService, "save", slow_save)
        editing.insert("cta")
        results = []
        saver = threading.Thread(target=lambda: results.append(editing.save("user-1")))
        saver.start()
        assert first_written.wait(timeout=5)

        # Hold the session lock so the running save is parked on its way out
        with editing._lock:
            resume.set()
            editing.patch(0, {"title": "late"})
            assert editing.save("user-1") is None
        saver.join(timeout=5)

        assert not saver.is_alive()
        assert len(calls) == 2
        assert calls[1].sections[0]["title"] == "late"
        assert results[0].ok
        assert not editing.is_dirty
        assert not editing.is_saving


class TestMediaRequests:
    """Tests for the per-session media picker flow."""

    def test_request_and_complete(self, editing):
        request = editing.request_media(2, MediaSlot.MEDIA, card_id="card-2", accept="image")
        assert editing.pending_media is request

        assert editing.complete_media(request.request_id, "https://x/a.png", "image") is True
        assert editing.pending_media is None
        assert editing.document.sections[2]["cards"][1]["mediaUrl"] == "https://x/a.png"
        assert editing.is_dirty

    def test_result_consumed_once(self, editing):
        request = editing.request_media(1)
        assert editing.complete_media(request.request_id, "https://x/a.png", "image")
        assert editing.complete_media(request.request_id, "https://x/b.png", "image") is False
        assert editing.document.sections[1]["mediaUrl"] == "https://x/a.png"

    def test_stale_request_ignored(self, editing):
        first = editing.request_media(1)
        second = editing.request_media(0, MediaSlot.BACKGROUND)

        assert editing.complete_media(first.request_id, "https://x/old.png", "image") is False
        assert editing.pending_media is second
        assert editing.document.sections[1]["mediaUrl"] == ""

    def test_cancel(self, editing):
        request = editing.request_media(1)
        editing.cancel_media(request.request_id + 1000)
        assert editing.pending_media is request
        editing.cancel_media(request.request_id)
        assert editing.pending_media is None
        assert not editing.is_dirty

    def test_unroutable_result_clears_request(self, editing):
        request = editing.request_media(0, MediaSlot.THUMBNAIL)
        assert editing.complete_media(request.request_id, "https://x/a.png", "image") is False
        assert editing.pending_media is None
        assert not editing.is_dirty

    def test_sessions_do_not_share_requests(self, temp_db, editing):
        other = EditSession("landing", temp_db)
        other.mount()
        other.enter_edit()
        mine = editing.request_media(1)
        theirs = other.request_media(1)

        assert other.complete_media(mine.request_id, "https://x/a.png", "image") is False
        assert other.pending_media is theirs
        assert editing.pending_media is mine

    def test_leaving_edit_drops_request(self, editing):
        request = editing.request_media(1)
        editing.leave_edit()
        assert editing.pending_media is None
        assert editing.complete_media(request.request_id, "https://x/a.png", "image") is False

    def test_result_follows_moved_section(self, temp_db):
        """Test that a result reaches its section after the list is reordered."""
        _seed(temp_db, "story", "media-text-left", "text", "feature-card-grid")
        editor = EditSession("story", temp_db)
        editor.mount()
        editor.enter_edit()

        request = editor.request_media(0)
        editor.move(0, "down")
        assert editor.complete_media(request.request_id, "https://x/y.png", "image") is True

        assert editor.document.section_ids() == ["s1", "s0", "s2"]
        assert editor.document.sections[1]["mediaUrl"] == "https://x/y.png"
        assert editor.document.sections[0]["mediaUrl"] == ""

    def test_result_for_removed_section_dropped(self, editing):
        request = editing.request_media(1)
        editing.remove(1)
        before = editing.document

        assert editing.complete_media(request.request_id, "https://x/a.png", "image") is False
        assert editing.pending_media is None
        assert editing.document is before

    def test_request_out_of_range(self, editing):
        with pytest.raises(ValidationError) as exc_info:
            editing.request_media(7)
        assert exc_info.value.field == "section_index"
        assert editing.pending_media is None


class RecordingRenderer:
    """Renderer double that records what it was handed."""

    def __init__(self):
        self.calls = []

    def render(self, section, is_editable, on_change, on_media_request):
        self.calls.append((section, is_editable, on_change, on_media_request))
        return section["id"]


class TestRender:
    """Tests for the renderer boundary."""

    def test_render_hands_out_sections(self, editing):
        renderer = RecordingRenderer()
        assert editing.render(renderer) == ["s0", "s1", "s2"]
        assert all(call[1] is True for call in renderer.calls)

        editing.set_preview(True)
        renderer = RecordingRenderer()
        editing.render(renderer)
        assert all(call[1] is False for call in renderer.calls)

    def test_callbacks_follow_section_after_reorder(self, editing):
        renderer = RecordingRenderer()
        editing.render(renderer)
        section, _, on_change, on_media_request = renderer.calls[1]

        editing.move(1, "up")
        on_change({**section, "content": "Edited"})
        assert editing.document.sections[0]["content"] == "Edited"
        assert editing.document.sections[0]["id"] == "s1"

        request = on_media_request(MediaSlot.MEDIA)
        assert request.target.section_id == "s1"

    def test_callbacks_for_removed_section(self, editing):
        renderer = RecordingRenderer()
        editing.render(renderer)
        section, _, on_change, on_media_request = renderer.calls[2]

        editing.remove(2)
        on_change({**section, "numCards": 9})
        assert on_media_request("media", "card-1") is None
        assert len(editing.document) == 2
