"""Edit session: the save/edit state machine around one page document.

An ``EditSession`` owns the in-memory document of one editor, decides when
mutations are allowed, runs saves through the page service, and keeps the
pending media-picker request. Nothing here is global: two sessions on the
same page never see each other's pending state.
"""

import logging
import threading
from dataclasses import replace as dataclass_replace
from enum import Enum
from typing import Any, Callable, Optional, Protocol

from pageomatic.exceptions import DatabaseError, EditNotAllowedError, PageServiceError, ValidationError
from pageomatic.sections.types import Direction, MediaKind, MediaSlot, Section, SectionType
from pageomatic.services import composition
from pageomatic.services.document import PageDocument
from pageomatic.services.media_router import MediaRequest, MediaTarget, new_media_request, route_media
from pageomatic.services.page.profiles import SECTIONS_COMPONENT, PageProfile, get_profile
from pageomatic.services.page_service import PageService, SaveResult
from pageomatic.storage.database import Database

logger = logging.getLogger(__name__)


class EditorState(str, Enum):
    VIEWING = "viewing"
    EDITING = "editing"
    SAVING = "saving"


class SectionRenderer(Protocol):
    """Presentation collaborator: draws one section and reports edits back."""

    def render(
        self,
        section: Section,
        is_editable: bool,
        on_change: Callable[[Section], None],
        on_media_request: Callable[..., Optional[MediaRequest]],
    ) -> Any:
        ...


class EditSession:
    """State machine for one editor working on one page."""

    def __init__(self, page_slug: str, db: Database, profile: Optional[PageProfile] = None):
        """
        Initialize an edit session. Call ``mount()`` to load the stored page.

        Args:
            page_slug: Page identifier
            db: Database used for loads and saves
            profile: Page profile. If None, resolved from the slug.
        """
        self.page_slug = page_slug
        self.db = db
        self.profile = profile or get_profile(page_slug)

        self.document: PageDocument = self.profile.default_document()
        self.state = EditorState.VIEWING
        self.preview = False
        self.versions: dict[str, int] = {}
        self.last_error: Optional[PageServiceError] = None
        self.last_result: Optional[SaveResult] = None

        self._saved = self.document.snapshot()
        self._pending_media: Optional[MediaRequest] = None
        self._lock = threading.RLock()
        self._save_running = False
        self._save_requested = False

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def is_dirty(self) -> bool:
        return self.document.dirty

    @property
    def is_saving(self) -> bool:
        return self.state is EditorState.SAVING

    @property
    def is_editable(self) -> bool:
        return self.state is not EditorState.VIEWING and not self.preview

    @property
    def pending_media(self) -> Optional[MediaRequest]:
        return self._pending_media

    def mount(self) -> bool:
        """
        Load the stored page into the session.

        A failed load keeps the current document (the profile default on a
        fresh session) and records the error instead of raising.

        Returns:
            True if the stored page was loaded
        """
        try:
            with self.db.session() as session:
                loaded = PageService(session).load(self.page_slug, profile=self.profile)
        except PageServiceError as e:
            logger.warning("Falling back to the current document for %s: %s", self.page_slug, e)
            self.last_error = e
            return False

        document = loaded.document
        if not loaded.has_sections:
            document = dataclass_replace(document, sections=self.profile.default_document().sections)

        with self._lock:
            self.document = document
            self._saved = document.snapshot()
            # Core components not stored yet must still be absent when we save
            self.versions = {
                SECTIONS_COMPONENT: 0,
                self.profile.properties_component: 0,
                **loaded.versions,
            }
            self.last_error = None
        return True

    def enter_edit(self) -> None:
        """Switch from viewing to editing."""
        with self._lock:
            if self.state is EditorState.VIEWING:
                self.state = EditorState.EDITING

    def set_preview(self, enabled: bool) -> None:
        """Toggle preview; only meaningful while editing."""
        with self._lock:
            if self.state is EditorState.VIEWING:
                raise EditNotAllowedError("Preview is only available while editing")
            self.preview = bool(enabled)

    def leave_edit(self, confirm: Optional[Callable[[], bool]] = None) -> bool:
        """
        Return to viewing, discarding unsaved changes if the user confirms.

        Args:
            confirm: Asked only when there are unsaved changes; returning False
                     keeps the session in edit mode

        Returns:
            True if the session is now viewing
        """
        with self._lock:
            if self.state is EditorState.VIEWING:
                return True
            if self.state is EditorState.SAVING:
                return False
            if self.is_dirty:
                if confirm is None or not confirm():
                    return False
                self.document = self._saved.snapshot()
            self.state = EditorState.VIEWING
            self.preview = False
            self._pending_media = None
            return True

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def _mutate(self, operation: Callable[[PageDocument], PageDocument]) -> PageDocument:
        with self._lock:
            if not self.is_editable:
                raise EditNotAllowedError(f"Page '{self.page_slug}' is not in edit mode")
            self.document = operation(self.document)
            return self.document

    def insert(self, tag: SectionType | str, after_index: Optional[int] = None) -> PageDocument:
        return self._mutate(lambda doc: composition.insert(doc, tag, after_index))

    def remove(self, index: int) -> PageDocument:
        return self._mutate(lambda doc: composition.remove(doc, index))

    def move(self, index: int, direction: Direction | str) -> PageDocument:
        return self._mutate(lambda doc: composition.move(doc, index, direction))

    def set_visible(self, index: int, visible: bool) -> PageDocument:
        return self._mutate(lambda doc: composition.set_visible(doc, index, visible))

    def patch(self, index: int, partial: dict[str, Any]) -> PageDocument:
        return self._mutate(lambda doc: composition.patch(doc, index, partial))

    def replace(self, index: int, section: Section) -> PageDocument:
        return self._mutate(lambda doc: composition.replace(doc, index, section))

    def duplicate(self, index: int) -> PageDocument:
        return self._mutate(lambda doc: composition.duplicate(doc, index))

    def update_properties(self, partial: dict[str, Any]) -> PageDocument:
        return self._mutate(lambda doc: composition.update_properties(doc, partial))

    def set_auxiliary(self, component_type: str, content: Any) -> PageDocument:
        return self._mutate(lambda doc: composition.set_auxiliary(doc, component_type, content))

    # ------------------------------------------------------------------
    # Media picker
    # ------------------------------------------------------------------

    def request_media(
        self,
        section_index: int,
        slot: MediaSlot | str = MediaSlot.MEDIA,
        card_id: Optional[str] = None,
        accept: str = "all",
    ) -> MediaRequest:
        """
        Record where the next picker result should go.

        The target is the section's id, so the result still reaches it if the
        list is reordered while the picker is open. A newer request replaces an
        older one that has not come back yet.

        Raises:
            EditNotAllowedError: If the session is not editable
            ValidationError: If section_index is out of range
        """
        with self._lock:
            if not self.is_editable:
                raise EditNotAllowedError(f"Page '{self.page_slug}' is not in edit mode")
            if not self.document.in_range(section_index):
                raise ValidationError(
                    f"Section index {section_index} is out of range", "section_index"
                )
            section_id = self.document.sections[section_index].get("id")
            request = new_media_request(MediaTarget(section_id, MediaSlot(slot), card_id), accept)
            self._pending_media = request
            return request

    def complete_media(self, request_id: int, url: str, kind: MediaKind | str) -> bool:
        """
        Route a picker result to its pending target.

        Results for a request that is no longer pending are ignored. The pending
        request is cleared whether or not the media could be routed, including
        when its section has been removed meanwhile.

        Returns:
            True if a section field was updated
        """
        with self._lock:
            pending = self._pending_media
            if pending is None or pending.request_id != request_id:
                logger.debug("Ignoring media result for stale request %s", request_id)
                return False
            self._pending_media = None

            index = self.document.index_of(pending.target.section_id)
            if not self.is_editable or index is None:
                return False
            section = self.document.sections[index]
            updated = route_media(section, pending.target, url, kind)
            if updated is section:
                return False
            sections = list(self.document.sections)
            sections[index] = updated
            self.document = self.document.with_changes(sections=sections)
            return True

    def cancel_media(self, request_id: Optional[int] = None) -> None:
        """Clear the pending request (only if it matches ``request_id`` when given)."""
        with self._lock:
            pending = self._pending_media
            if pending is not None and (request_id is None or pending.request_id == request_id):
                self._pending_media = None

    # ------------------------------------------------------------------
    # Saving
    # ------------------------------------------------------------------

    def save(self, actor_id: str | None) -> Optional[SaveResult]:
        """
        Save the current document through the page service.

        Only one save runs per session. A save requested while another is in
        flight is coalesced: the running save makes one more pass if the
        document changed meanwhile, and the coalesced call returns None.

        Returns:
            Result of the last pass, or None if the request was coalesced

        Raises:
            EditNotAllowedError: If the session is not editing
            MissingActorError: If actor_id is missing
            ValidationError: If the document is invalid
            DatabaseError: If the store cannot be reached at all
        """
        if self.state is EditorState.VIEWING:
            raise EditNotAllowedError(f"Page '{self.page_slug}' is not in edit mode")
        with self._lock:
            if self._save_running:
                self._save_requested = True
                logger.info("Save of %s already in flight; coalescing", self.page_slug)
                return None
            self._save_running = True
            self._save_requested = False

        try:
            while True:
                result = self._save_once(actor_id)
                # Decide and release under one lock so no request slips between
                with self._lock:
                    if not (self._save_requested and self.is_dirty and result.ok):
                        self._save_running = False
                        return result
                    self._save_requested = False
        except Exception:
            with self._lock:
                self._save_running = False
                if self.state is EditorState.SAVING:
                    self.state = EditorState.EDITING
            raise

    def _save_once(self, actor_id: str | None) -> SaveResult:
        with self._lock:
            snapshot = self.document.snapshot()
            self.state = EditorState.SAVING

        try:
            with self.db.session() as session:
                result = PageService(session).save(
                    self.page_slug,
                    snapshot,
                    actor_id,
                    expected_versions=dict(self.versions),
                    profile=self.profile,
                )
        except PageServiceError as e:
            self.last_error = e
            raise
        except Exception as e:
            error = DatabaseError(f"Failed to save page: {str(e)}", e)
            self.last_error = error
            raise error from e

        with self._lock:
            self.versions.update(result.saved)
            self.last_result = result
            if result.ok:
                self._saved = snapshot.mark_clean()
                if self.document == snapshot:
                    self.document = self.document.mark_clean()
                self.last_error = None
            else:
                self.last_error = next(iter(result.failures.values()))
                if not self.document.dirty:
                    self.document = self.document.with_changes()
            self.state = EditorState.EDITING
        return result

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def render(self, renderer: SectionRenderer) -> list[Any]:
        """
        Hand every section to ``renderer`` with callbacks bound to that section.

        Callbacks find their section by id, so they stay correct after the
        list is reordered.
        """
        outputs = []
        for section in list(self.document.sections):
            section_id = section.get("id")
            outputs.append(
                renderer.render(
                    section,
                    self.is_editable,
                    self._change_callback(section_id),
                    self._media_callback(section_id),
                )
            )
        return outputs

    def _change_callback(self, section_id: str) -> Callable[[Section], None]:
        def on_change(updated: Section) -> None:
            index = self.document.index_of(section_id)
            if index is not None:
                self.replace(index, updated)

        return on_change

    def _media_callback(self, section_id: str) -> Callable[..., Optional[MediaRequest]]:
        def on_media_request(slot: MediaSlot | str, card_id: Optional[str] = None) -> Optional[MediaRequest]:
            index = self.document.index_of(section_id)
            if index is None:
                return None
            return self.request_media(index, slot, card_id)

        return on_media_request
