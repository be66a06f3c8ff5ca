"""Page service layer: persistence of page documents as component records."""

import logging
import time
from dataclasses import dataclass, field
from typing import Any, Optional

from sqlalchemy.orm import Session

from pageomatic.config import get_settings
from pageomatic.exceptions import (
    ComponentSaveFailedError,
    ConflictError,
    DatabaseError,
    LoadFailedError,
    MissingActorError,
    ValidationError,
)
from pageomatic.sections.validation import SectionValidator
from pageomatic.services.document import PageDocument
from pageomatic.services.page.profiles import SECTIONS_COMPONENT, PageProfile, get_profile
from pageomatic.services.page.serialization import decode_components, encode_components
from pageomatic.storage.repositories import PageComponentRepository

logger = logging.getLogger(__name__)


@dataclass
class LoadedPage:
    """A page read back from the component store.

    Attributes:
        page_slug: Page identifier
        document: Decoded, clean document
        versions: Stored version per component kind, for optimistic saves
        has_sections: False if the page has never saved a sections component
    """

    page_slug: str
    document: PageDocument
    versions: dict[str, int] = field(default_factory=dict)
    has_sections: bool = False


@dataclass
class SaveResult:
    """Outcome of one page save; partial success is possible."""

    page_slug: str
    saved: dict[str, int] = field(default_factory=dict)
    failures: dict[str, ComponentSaveFailedError] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.failures

    @property
    def partial(self) -> bool:
        return bool(self.saved) and bool(self.failures)

    @property
    def failed_components(self) -> list[str]:
        return list(self.failures)

    @property
    def conflicts(self) -> list[str]:
        return [name for name, error in self.failures.items() if isinstance(error, ConflictError)]


class PageService:
    """Service layer for loading and saving page documents with validation and error handling."""

    # Validation constants
    SLUG_MAX_LENGTH = 255

    def __init__(self, session: Session, save_timeout_seconds: float | None = None):
        """
        Initialize page service with database session.

        Args:
            session: SQLAlchemy database session
            save_timeout_seconds: Deadline for one save. If None, uses settings.
        """
        self.session = session
        self.component_repo = PageComponentRepository(session)
        self.validator = SectionValidator()
        if save_timeout_seconds is None:
            save_timeout_seconds = get_settings().save_timeout_seconds
        self.save_timeout_seconds = save_timeout_seconds

    def load(self, page_slug: str, profile: Optional[PageProfile] = None) -> LoadedPage:
        """
        Load all active components of a page and decode them into a document.

        Args:
            page_slug: Page identifier
            profile: Page profile. If None, resolved from the slug.

        Returns:
            Loaded page with its document and component versions

        Raises:
            ValidationError: If page_slug is invalid
            LoadFailedError: If the store cannot be read or holds malformed payloads
        """
        self._validate_slug(page_slug)
        profile = profile or get_profile(page_slug)

        try:
            records = self.component_repo.get_active_by_page(page_slug)
        except Exception as e:
            logger.exception("Failed to read components for page %s", page_slug)
            raise LoadFailedError(page_slug, e) from e

        components = {record.component_type: record.content for record in records}
        versions = {record.component_type: record.version for record in records}

        try:
            document = decode_components(components, profile)
        except ValidationError as e:
            logger.error("Stored components for page %s are malformed: %s", page_slug, e)
            raise LoadFailedError(page_slug, e) from e

        logger.info("Loaded page %s (%d sections)", page_slug, len(document.sections))
        return LoadedPage(
            page_slug=page_slug,
            document=document,
            versions=versions,
            has_sections=SECTIONS_COMPONENT in components,
        )

    def save(
        self,
        page_slug: str,
        document: PageDocument,
        actor_id: str | None,
        expected_versions: dict[str, int] | None = None,
        profile: Optional[PageProfile] = None,
    ) -> SaveResult:
        """
        Upsert every component of a document, one independent write per component.

        A failing component does not stop the others from being attempted. The
        result lists what was saved (with its new version) and what failed.

        Args:
            page_slug: Page identifier
            document: Document to persist
            actor_id: Identity of the acting user (required)
            expected_versions: Versions last observed per component. A mismatch fails
                               that component with ConflictError. Kinds missing from
                               the mapping are written without a check.
            profile: Page profile. If None, resolved from the slug.

        Returns:
            Save result with per-component outcomes

        Raises:
            MissingActorError: If actor_id is missing; nothing is written
            ValidationError: If page_slug or the document is invalid; nothing is written
        """
        if not isinstance(actor_id, str) or not actor_id.strip():
            raise MissingActorError(page_slug)
        self._validate_slug(page_slug)
        profile = profile or get_profile(page_slug)

        self.validator.validate_sections(document.sections)
        components = encode_components(document, profile)
        for component_type, content in components.items():
            self.validator.validate_json_compatible(content, component_type)

        expected_versions = expected_versions or {}
        result = SaveResult(page_slug=page_slug)
        deadline = time.monotonic() + self.save_timeout_seconds

        for component_type, content in components.items():
            if time.monotonic() >= deadline:
                result.failures[component_type] = ComponentSaveFailedError(
                    component_type, "save deadline exceeded", TimeoutError()
                )
                continue
            try:
                component = self.component_repo.upsert(
                    page_slug,
                    component_type,
                    content,
                    updated_by=actor_id,
                    expected_version=expected_versions.get(component_type),
                )
                self.session.commit()
                result.saved[component_type] = component.version
                logger.debug("Saved %s/%s at version %d", page_slug, component_type, component.version)
            except ConflictError as e:
                self.session.rollback()
                result.failures[component_type] = e
            except Exception as e:
                self.session.rollback()
                result.failures[component_type] = ComponentSaveFailedError(component_type, str(e), e)

        for component_type, error in result.failures.items():
            logger.warning("Page %s: %s", page_slug, error)
        logger.info(
            "Saved page %s by %s: %d saved, %d failed",
            page_slug,
            actor_id,
            len(result.saved),
            len(result.failures),
        )
        return result

    def deactivate_component(self, page_slug: str, component_type: str, actor_id: str | None) -> bool:
        """
        Soft-delete one component of a page.

        Returns:
            True if the component existed, False otherwise

        Raises:
            MissingActorError: If actor_id is missing
            ValidationError: If page_slug is invalid
            DatabaseError: If database operation fails
        """
        if not isinstance(actor_id, str) or not actor_id.strip():
            raise MissingActorError(page_slug)
        self._validate_slug(page_slug)

        try:
            deactivated = self.component_repo.deactivate(page_slug, component_type, actor_id)
            self.session.commit()
            return deactivated
        except Exception as e:
            self.session.rollback()
            raise DatabaseError(f"Failed to deactivate component: {str(e)}", e) from e

    def list_pages(self) -> list[str]:
        """
        List slugs of pages with at least one active component.

        Raises:
            DatabaseError: If database operation fails
        """
        try:
            return self.component_repo.list_page_slugs()
        except Exception as e:
            raise DatabaseError(f"Failed to list pages: {str(e)}", e) from e

    def _validate_slug(self, page_slug: Any) -> None:
        """Validate page slug."""
        if not isinstance(page_slug, str):
            raise ValidationError("Page slug must be a string", "page_slug")
        if not page_slug or not page_slug.strip():
            raise ValidationError("Page slug cannot be empty", "page_slug")
        if len(page_slug) > self.SLUG_MAX_LENGTH:
            raise ValidationError(
                f"Page slug must be at most {self.SLUG_MAX_LENGTH} characters", "page_slug"
            )
