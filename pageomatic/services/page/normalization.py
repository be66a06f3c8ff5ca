"""Load-time normalisation rules for stored sections.

These rules repair data written by older editors. They run when a page is
read back, never as a user-visible mutation.
"""

import logging

from pageomatic.sections.registry import is_known_type
from pageomatic.sections.types import FOOTER_TYPES, MEDIA_TEXT_POSITIONS, Section

logger = logging.getLogger(__name__)


def backfill_media_position(section: Section) -> Section:
    """Give legacy media-text sections the mediaPosition their tag implies."""
    position = MEDIA_TEXT_POSITIONS.get(section.get("type"))
    if position is None or section.get("mediaPosition"):
        return section
    return {**section, "mediaPosition": position}


def drop_footers(sections: list[Section]) -> list[Section]:
    """Remove persisted footer sections on pages that render a global footer."""
    kept = [section for section in sections if section.get("type") not in FOOTER_TYPES]
    if len(kept) != len(sections):
        logger.info("Dropped %d stored footer section(s)", len(sections) - len(kept))
    return kept


def drop_unusable(sections: list) -> list[Section]:
    """Skip entries that are not sections of a registered type."""
    usable = []
    for entry in sections:
        if not isinstance(entry, dict):
            logger.warning("Skipping stored section that is not an object: %r", entry)
            continue
        if not is_known_type(entry.get("type", "")):
            logger.warning(
                "Skipping stored section %s of unknown type %r", entry.get("id"), entry.get("type")
            )
            continue
        usable.append(entry)
    return usable


def normalize_sections(sections: list, strip_footers: bool = False) -> list[Section]:
    """Apply every load-time rule to a stored section list."""
    normalized = [backfill_media_position(section) for section in drop_unusable(sections)]
    if strip_footers:
        normalized = drop_footers(normalized)
    return normalized
