"""Composition engine: pure operations over a page document.

Every operation takes a ``PageDocument`` and returns a new one; the input is
never mutated. Out-of-range indices are ignored and the input document is
returned as-is, so late UI events racing a state update cannot corrupt the
section list.
"""

import copy
import logging
from typing import Any, Optional

from pageomatic.sections.registry import create_default, new_section_id
from pageomatic.sections.types import MEDIA_TEXT_POSITIONS, Direction, Section, SectionType
from pageomatic.services.document import PageDocument, is_visible

logger = logging.getLogger(__name__)

# Fields a patch may never change
IMMUTABLE_FIELDS = ("id", "type")

# Reveal-all value used when pagination is switched off
REVEAL_ALL = 1000


def _merge(section: Section, partial: dict[str, Any]) -> Section:
    merged = {**section, **partial}
    for name in IMMUTABLE_FIELDS:
        if name in section:
            merged[name] = section[name]
        else:
            merged.pop(name, None)
    position = MEDIA_TEXT_POSITIONS.get(merged.get("type"))
    if position is not None:
        merged["mediaPosition"] = position
    return merged


def insert(doc: PageDocument, tag: SectionType | str, after_index: Optional[int] = None) -> PageDocument:
    """
    Insert a default section of ``tag`` right after ``after_index``.

    Omitted or out-of-range ``after_index`` appends at the end.

    Raises:
        UnknownSectionTypeError: If the tag is not registered
    """
    section = create_default(tag)
    sections = list(doc.sections)
    if after_index is not None and doc.in_range(after_index):
        sections.insert(after_index + 1, section)
    else:
        sections.append(section)
    logger.debug("Inserted %s section %s", section["type"], section["id"])
    return doc.with_changes(sections=sections)


def remove(doc: PageDocument, index: int) -> PageDocument:
    """Delete the section at ``index``."""
    if not doc.in_range(index):
        return doc
    sections = list(doc.sections)
    del sections[index]
    return doc.with_changes(sections=sections)


def move(doc: PageDocument, index: int, direction: Direction | str) -> PageDocument:
    """
    Swap the section at ``index`` with its neighbour in ``direction``.

    At the boundary nothing moves, but the document is still marked dirty.
    """
    if not doc.in_range(index):
        return doc
    direction = Direction(direction)
    sections = list(doc.sections)
    target = index - 1 if direction is Direction.UP else index + 1
    if 0 <= target < len(sections):
        sections[index], sections[target] = sections[target], sections[index]
    return doc.with_changes(sections=sections)


def set_visible(doc: PageDocument, index: int, visible: bool) -> PageDocument:
    """
    Set the ``visible`` flag of the section at ``index``.

    A section value that carries no ``visible`` field is left as it is; the
    document is still marked dirty.
    """
    if not doc.in_range(index):
        return doc
    sections = list(doc.sections)
    if "visible" in sections[index]:
        sections[index] = {**sections[index], "visible": bool(visible)}
    return doc.with_changes(sections=sections)


def patch(doc: PageDocument, index: int, partial: dict[str, Any]) -> PageDocument:
    """Shallow-merge ``partial`` into the section at ``index``, keeping id and type."""
    if not doc.in_range(index):
        return doc
    sections = list(doc.sections)
    sections[index] = _merge(sections[index], partial)
    return doc.with_changes(sections=sections)


def replace(doc: PageDocument, index: int, section: Section) -> PageDocument:
    """Replace the section at ``index`` with an edited copy from a renderer.

    Fields missing from ``section`` are dropped; id and type stay as stored.
    """
    if not doc.in_range(index):
        return doc
    current = doc.sections[index]
    updated = _merge({name: current[name] for name in IMMUTABLE_FIELDS if name in current}, section)
    sections = list(doc.sections)
    sections[index] = updated
    return doc.with_changes(sections=sections)


def duplicate(doc: PageDocument, index: int) -> PageDocument:
    """Insert a deep copy of the section at ``index`` right after it, with a new id."""
    if not doc.in_range(index):
        return doc
    clone = copy.deepcopy(doc.sections[index])
    clone["id"] = new_section_id()
    sections = list(doc.sections)
    sections.insert(index + 1, clone)
    return doc.with_changes(sections=sections)


def update_properties(doc: PageDocument, partial: dict[str, Any]) -> PageDocument:
    """
    Merge a camelCase partial into the page properties.

    Switching ``showMoreEnabled`` off also reveals every section.
    """
    properties = doc.properties
    if properties.show_more_enabled and partial.get("showMoreEnabled") is False:
        partial = {**partial, "visibleCount": REVEAL_ALL}
    return doc.with_changes(properties=properties.merged(partial))


def set_auxiliary(doc: PageDocument, component_type: str, content: Any) -> PageDocument:
    """Store a page-specific named blob (slider, hero, section_order, ...)."""
    auxiliary = dict(doc.auxiliary)
    auxiliary[component_type] = copy.deepcopy(content)
    return doc.with_changes(auxiliary=auxiliary)


def visible_sections(doc: PageDocument) -> list[Section]:
    """Visible sections inside the reveal window, in render order."""
    shown = [section for section in doc.sections if is_visible(section)]
    if doc.properties.show_more_enabled:
        return shown[: max(doc.properties.visible_count, 0)]
    return shown


def reveal_more(doc: PageDocument, step: int = 2) -> PageDocument:
    """Grow the reveal window by ``step`` sections, capped at the section count.

    Revealing is a viewer action, so the dirty flag is left as it was.
    """
    count = min(doc.properties.visible_count + step, len(doc.sections))
    if count == doc.properties.visible_count:
        return doc
    return doc.with_changes(
        properties=doc.properties.merged({"visibleCount": count}), dirty=doc.dirty
    )
