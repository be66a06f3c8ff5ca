"""Page document value types: ordered sections, page properties, auxiliary blobs."""

import copy
from dataclasses import dataclass, field, replace
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict
from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel

from pageomatic.exceptions import ValidationError
from pageomatic.sections.types import Section


class PageProperties(BaseModel):
    """Document-wide appearance, layout, pagination and metadata settings.

    Stored as a camelCase payload. Keys this model does not know about are
    kept as extra fields and written back unchanged.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
        frozen=True,
    )

    # Appearance
    background_color: str = "#ffffff"
    background_opacity: float = 1.0
    background_image: str = ""
    background_video: str = ""
    font_family: str = "sans-serif"
    text_color: str = "#000000"
    link_color: str = "#2563eb"
    text_shadow: str = "0 0 0 transparent"
    line_height: float = 1.5
    letter_spacing: float = 0

    # Layout
    max_width: str = "1200px"
    is_full_width: bool = False
    section_spacing: float = 2

    # Pagination reveal
    show_more_enabled: bool = True
    visible_count: int = 30

    # Metadata
    page_title: str = ""
    meta_description: str = ""
    language: str = "en"

    @property
    def extra(self) -> dict[str, Any]:
        """Stored keys without a declared field."""
        return dict(self.model_extra or {})

    def to_payload(self) -> dict[str, Any]:
        """Serialize to the stored camelCase payload."""
        return copy.deepcopy(self.model_dump(by_alias=True))

    @classmethod
    def from_payload(cls, payload: Optional[dict[str, Any]]) -> "PageProperties":
        """
        Build from a stored payload, filling defaults for missing keys.

        Raises:
            ValidationError: If the payload is not a dictionary or a known key
                             holds a value of the wrong type
        """
        if payload is None:
            return cls()
        if not isinstance(payload, dict):
            raise ValidationError("Page properties must be a dictionary", "properties")
        try:
            return cls.model_validate(copy.deepcopy(payload))
        except PydanticValidationError as e:
            error = e.errors()[0]
            location = ".".join(str(part) for part in error["loc"])
            raise ValidationError(
                f"Invalid page property '{location}': {error['msg']}",
                f"properties.{location}",
            ) from e

    def merged(self, partial: dict[str, Any]) -> "PageProperties":
        """Return a copy with a camelCase partial payload merged in."""
        payload = self.to_payload()
        payload.update(partial)
        return PageProperties.from_payload(payload)


@dataclass(frozen=True)
class PageDocument:
    """An ordered list of sections plus page properties for one page.

    Attributes:
        sections: Sections in render order
        properties: Document-wide page properties
        auxiliary: Page-specific named blobs (hero, slider, section_order, ...)
        dirty: True if the document has changes not yet saved
    """

    sections: list[Section] = field(default_factory=list)
    properties: PageProperties = field(default_factory=PageProperties)
    auxiliary: dict[str, Any] = field(default_factory=dict)
    dirty: bool = False

    def __len__(self) -> int:
        return len(self.sections)

    def section_ids(self) -> list[str]:
        return [section.get("id") for section in self.sections]

    def index_of(self, section_id: str) -> Optional[int]:
        """Position of a section by id, or None."""
        for index, section in enumerate(self.sections):
            if section.get("id") == section_id:
                return index
        return None

    def in_range(self, index: int) -> bool:
        return isinstance(index, int) and 0 <= index < len(self.sections)

    def with_changes(self, **changes: Any) -> "PageDocument":
        """Copy with fields replaced; the result is marked dirty unless overridden."""
        changes.setdefault("dirty", True)
        return replace(self, **changes)

    def mark_clean(self) -> "PageDocument":
        return replace(self, dirty=False)

    def snapshot(self) -> "PageDocument":
        """Deep copy, detached from any caller-held section dicts."""
        return copy.deepcopy(self)

    def to_payload(self) -> dict[str, Any]:
        return {
            "sections": copy.deepcopy(self.sections),
            "properties": self.properties.to_payload(),
            "auxiliary": copy.deepcopy(self.auxiliary),
        }


def is_visible(section: Section) -> bool:
    """A section without a ``visible`` field is visible."""
    return section.get("visible", True) is not False
