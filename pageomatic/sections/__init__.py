"""Section type system: tags, defaults and the registry."""

from pageomatic.sections.registry import (
    MediaTargetSpec,
    SectionSpec,
    create_default,
    get_spec,
    is_known_type,
    list_section_types,
    media_targets,
)
from pageomatic.sections.types import Card, Direction, MediaKind, MediaSlot, Section, SectionType
from pageomatic.sections.validation import SectionValidator

__all__ = [
    "Card",
    "Direction",
    "MediaKind",
    "MediaSlot",
    "MediaTargetSpec",
    "Section",
    "SectionSpec",
    "SectionType",
    "SectionValidator",
    "create_default",
    "get_spec",
    "is_known_type",
    "list_section_types",
    "media_targets",
]
