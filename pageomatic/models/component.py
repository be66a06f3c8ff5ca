"""Page component model: one named payload per (page_slug, component_type)."""

from typing import Any, Optional

from sqlalchemy import JSON, Boolean, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from pageomatic.models.base import Base, TimestampMixin


class PageComponent(Base, TimestampMixin):
    """A persisted component record (sections, page properties, slider, ...)."""

    __tablename__ = "page_components"
    __table_args__ = (
        UniqueConstraint("page_slug", "component_type", name="uq_page_components_slug_type"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    page_slug: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    component_type: Mapped[str] = mapped_column(String(100), nullable=False)
    content: Mapped[Any] = mapped_column(JSON, nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True, index=True)
    # Bumped on every write; compared against the caller's expected version
    version: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    updated_by: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    def __repr__(self) -> str:
        return (
            f"<PageComponent(page_slug={self.page_slug!r}, "
            f"component_type={self.component_type!r}, version={self.version!r})>"
        )
