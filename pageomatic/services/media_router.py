"""Media target router: send a picked media asset to the field that asked for it.

The picker returns asynchronously, so the initiating action records a
``MediaTarget`` first and the result is routed against it afterwards. Which
fields can receive media is declared in the section registry; this module only
applies those declarations.
"""

import itertools
import logging
from dataclasses import dataclass
from typing import Optional

from pageomatic.sections.registry import find_media_target
from pageomatic.sections.types import MediaKind, MediaSlot, Section, coerce_media_kind

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MediaTarget:
    """Where a pending media selection should land.

    Attributes:
        section_id: Id of the section the picker was opened for
        slot: Target slot (media, thumbnail, profile-image, ...)
        card_id: Card inside the section, for card-owning sections
    """

    section_id: str
    slot: MediaSlot = MediaSlot.MEDIA
    card_id: Optional[str] = None


@dataclass(frozen=True)
class MediaRequest:
    """A media-picker request issued by one edit session.

    Attributes:
        request_id: Session-unique id the picker result must quote
        target: Where the result goes
        accept: Kind of media the picker should offer (image, video or all)
    """

    request_id: int
    target: MediaTarget
    accept: str = "all"


_request_ids = itertools.count(1)


def new_media_request(target: MediaTarget, accept: str = "all") -> MediaRequest:
    return MediaRequest(request_id=next(_request_ids), target=target, accept=accept)


def route_media(
    section: Section,
    target: MediaTarget,
    url: str,
    kind: MediaKind | str = MediaKind.IMAGE,
) -> Section:
    """
    Return a copy of ``section`` with the targeted media field set.

    Combinations the registry does not declare (unknown slot for this type, a
    card id on a section without cards, a card id that does not exist) leave
    the section unchanged and the URL is dropped.

    Args:
        section: Section the picker was opened for
        target: Pending media target
        url: Selected asset URL
        kind: Selected asset kind; anything but video is stored as image

    Returns:
        Updated section, or the input section when nothing matched
    """
    spec = find_media_target(section.get("type", ""), target.slot, target.card_id is not None)
    if spec is None:
        logger.debug(
            "Dropping media for %s section: no %s target (card=%s)",
            section.get("type"),
            getattr(target.slot, "value", target.slot),
            target.card_id,
        )
        return section

    updates = {spec.url_field: url}
    if spec.kind_field:
        updates[spec.kind_field] = coerce_media_kind(kind)

    if not spec.card_scoped:
        return {**section, **updates}

    cards = section.get("cards")
    if not isinstance(cards, list) or not any(
        isinstance(card, dict) and card.get("id") == target.card_id for card in cards
    ):
        logger.debug("Dropping media: card %s not found in %s", target.card_id, section.get("id"))
        return section

    updated_cards = [
        {**card, **updates} if isinstance(card, dict) and card.get("id") == target.card_id else card
        for card in cards
    ]
    return {**section, "cards": updated_cards}
