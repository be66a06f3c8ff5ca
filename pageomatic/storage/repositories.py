"""Repository pattern implementation for data access layer."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Optional

from sqlalchemy import and_, func, select
from sqlalchemy.orm import Session

from pageomatic.exceptions import ConflictError
from pageomatic.models.component import PageComponent


class PageComponentRepository:
    """Repository for page component records keyed by (page_slug, component_type)."""

    def __init__(self, session: Session):
        """Initialize repository with a database session."""
        self.session = session

    def get_by_key(self, page_slug: str, component_type: str) -> Optional[PageComponent]:
        """Get a component by its unique key, active or not."""
        stmt = select(PageComponent).where(
            and_(
                PageComponent.page_slug == page_slug,
                PageComponent.component_type == component_type,
            )
        )
        return self.session.scalar(stmt)

    def get_active_by_page(self, page_slug: str) -> list[PageComponent]:
        """Get all active components for a page."""
        stmt = (
            select(PageComponent)
            .where(
                and_(
                    PageComponent.page_slug == page_slug,
                    PageComponent.is_active.is_(True),
                )
            )
            .order_by(PageComponent.component_type)
        )
        return list(self.session.scalars(stmt))

    def list_page_slugs(self) -> list[str]:
        """List slugs that own at least one active component."""
        stmt = (
            select(PageComponent.page_slug)
            .where(PageComponent.is_active.is_(True))
            .distinct()
            .order_by(PageComponent.page_slug)
        )
        return list(self.session.scalars(stmt))

    def count(self, page_slug: Optional[str] = None) -> int:
        """Count component records, optionally for a single page."""
        query = select(func.count(PageComponent.id))
        if page_slug:
            query = query.where(PageComponent.page_slug == page_slug)
        return self.session.scalar(query) or 0

    def upsert(
        self,
        page_slug: str,
        component_type: str,
        content: Any,
        updated_by: str,
        expected_version: Optional[int] = None,
    ) -> PageComponent:
        """Insert or update the component stored under (page_slug, component_type).

        Args:
            page_slug: Page identifier
            component_type: Component kind
            content: JSON-compatible payload
            updated_by: Acting user identity
            expected_version: Version the caller last observed. None skips the check,
                              0 means the caller expects no active row yet.

        Returns:
            The written component

        Raises:
            ConflictError: If expected_version does not match the stored version
        """
        component = self.get_by_key(page_slug, component_type)
        now = datetime.now(timezone.utc)

        if expected_version is not None:
            actual_version = component.version if component is not None and component.is_active else 0
            if actual_version != expected_version:
                raise ConflictError(component_type, expected_version, actual_version)

        if component is None:
            component = PageComponent(
                page_slug=page_slug,
                component_type=component_type,
                content=content,
                is_active=True,
                version=1,
                updated_by=updated_by,
                created_at=now,
                updated_at=now,
            )
            self.session.add(component)
        else:
            component.content = content
            component.is_active = True
            component.version = component.version + 1
            component.updated_by = updated_by
            component.updated_at = now

        self.session.flush()
        return component

    def deactivate(self, page_slug: str, component_type: str, updated_by: str) -> bool:
        """Soft-delete a component. Returns False if it does not exist."""
        component = self.get_by_key(page_slug, component_type)
        if component is None:
            return False
        component.is_active = False
        component.version = component.version + 1
        component.updated_by = updated_by
        component.updated_at = datetime.now(timezone.utc)
        self.session.flush()
        return True
