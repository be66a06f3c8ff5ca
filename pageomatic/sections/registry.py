"""Section registry: the single table mapping each tag to its behaviour.

The registry drives default construction (``create_default``) and media
routing (``media_targets``). It is data, not a switch statement, so every
page profile shares the same definitions.
"""

import uuid
from dataclasses import dataclass, field
from typing import Callable, Optional

from pageomatic.exceptions import UnknownSectionTypeError
from pageomatic.sections import defaults
from pageomatic.sections.types import MediaSlot, Section, SectionType


@dataclass(frozen=True)
class MediaTargetSpec:
    """A field of a section (or of each of its cards) that can receive routed media.

    Attributes:
        slot: Slot tag the initiating UI action uses
        url_field: Field that receives the URL
        kind_field: Field that receives the media kind, if the shape pairs one
        card_scoped: True if the field lives on ``cards[]`` entries
    """

    slot: MediaSlot
    url_field: str
    kind_field: Optional[str] = None
    card_scoped: bool = False


@dataclass(frozen=True)
class SectionSpec:
    """Registry entry for one section tag."""

    tag: SectionType
    label: str
    factory: Callable[[str], Section]
    media_targets: tuple[MediaTargetSpec, ...] = field(default_factory=tuple)

    @property
    def owns_cards(self) -> bool:
        return any(target.card_scoped for target in self.media_targets)


_TOP_MEDIA = MediaTargetSpec(MediaSlot.MEDIA, "mediaUrl", "mediaType")
_HERO_BACKGROUND = MediaTargetSpec(MediaSlot.BACKGROUND, "backgroundMedia", "mediaType")
_CARD_MEDIA = MediaTargetSpec(MediaSlot.MEDIA, "mediaUrl", "mediaType", card_scoped=True)
_CARD_THUMBNAIL = MediaTargetSpec(MediaSlot.THUMBNAIL, "thumbnailUrl", card_scoped=True)

_SPECS: tuple[SectionSpec, ...] = (
    SectionSpec(SectionType.HERO, "Hero Section", defaults.hero, (_HERO_BACKGROUND,)),
    SectionSpec(
        SectionType.HERO_RESPONSIVE,
        "Hero Section (Responsive)",
        defaults.hero_responsive,
        (_HERO_BACKGROUND,),
    ),
    SectionSpec(
        SectionType.HERO_PROMO_SPLIT,
        "Hero Promo Split",
        defaults.hero_promo_split,
        (
            MediaTargetSpec(MediaSlot.PROFILE_IMAGE, "profileImageUrl"),
            MediaTargetSpec(
                MediaSlot.BACKGROUND_LEFT_MEDIA, "backgroundLeftMedia", "backgroundLeftMediaType"
            ),
        ),
    ),
    SectionSpec(SectionType.TEXT, "Text Section", defaults.text, (_TOP_MEDIA,)),
    SectionSpec(SectionType.CONTENT, "Content Section", defaults.content),
    SectionSpec(
        SectionType.MEDIA_TEXT_LEFT, "Media/Text (Left)", defaults.media_text_left, (_TOP_MEDIA,)
    ),
    SectionSpec(
        SectionType.MEDIA_TEXT_RIGHT, "Media/Text (Right)", defaults.media_text_right, (_TOP_MEDIA,)
    ),
    SectionSpec(SectionType.DIVIDER, "Divider", defaults.divider),
    SectionSpec(SectionType.HEADING, "Heading", defaults.heading),
    SectionSpec(SectionType.QUOTE, "Quote", defaults.quote),
    SectionSpec(SectionType.CTA, "Call-to-Action", defaults.cta),
    SectionSpec(SectionType.GALLERY, "Gallery", defaults.gallery),
    SectionSpec(SectionType.MEDIA_TEXT_COLUMNS, "Media/Text Columns", defaults.media_text_columns),
    SectionSpec(SectionType.TWO_COLUMN_TEXT, "Two Column Text", defaults.two_column_text),
    SectionSpec(SectionType.FEATURE, "Feature Section", defaults.feature),
    SectionSpec(SectionType.SLIDER, "Slider Section", defaults.slider),
    SectionSpec(
        SectionType.FEATURE_CARD_GRID,
        "Feature Card Grid",
        defaults.feature_card_grid,
        (_CARD_MEDIA,),
    ),
    SectionSpec(SectionType.ADVANCED_SLIDER, "Advanced Slider Section", defaults.advanced_slider),
    SectionSpec(SectionType.INFO_CARD, "Info Card Grid", defaults.info_card, (_CARD_MEDIA,)),
    SectionSpec(SectionType.PRIVACY, "Privacy Section", defaults.privacy),
    SectionSpec(SectionType.CUSTOM_CODE, "Custom Code", defaults.custom_code),
    SectionSpec(
        SectionType.MEDIA_PLACEHOLDER,
        "Media Placeholder",
        defaults.media_placeholder,
        (_CARD_MEDIA,),
    ),
    SectionSpec(SectionType.EDITABLE_TITLE, "Editable Page Title", defaults.editable_title),
    SectionSpec(
        SectionType.TEXT_WITH_VIDEO_LEFT, "Text with Video (Left)", defaults.text_with_video_left
    ),
    SectionSpec(
        SectionType.TEXT_WITH_VIDEO_RIGHT, "Text with Video (Right)", defaults.text_with_video_right
    ),
    SectionSpec(
        SectionType.PRODUCT_PACKAGE_LEFT, "Product Package (Left)", defaults.product_package_left
    ),
    SectionSpec(
        SectionType.PRODUCT_PACKAGE_RIGHT, "Product Package (Right)", defaults.product_package_right
    ),
    SectionSpec(
        SectionType.MEDIA_STORY_CARDS,
        "Media Story Cards",
        defaults.media_story_cards,
        (_CARD_MEDIA, _CARD_THUMBNAIL),
    ),
    SectionSpec(SectionType.FOOTER, "Footer", defaults.footer),
    SectionSpec(SectionType.SIMPLE_FOOTER, "Simple Footer", defaults.simple_footer),
    SectionSpec(
        SectionType.MINI_CARD_GRID, "Mini Card Grid", defaults.mini_card_grid, (_CARD_THUMBNAIL,)
    ),
    SectionSpec(SectionType.CONTACT_FORM, "Contact Form", defaults.contact_form),
    SectionSpec(SectionType.ADVANCED_FORM, "Advanced Form", defaults.advanced_form),
)

REGISTRY: dict[str, SectionSpec] = {spec.tag.value: spec for spec in _SPECS}

_missing = {tag.value for tag in SectionType} - REGISTRY.keys()
if _missing or len(REGISTRY) != len(_SPECS):
    raise RuntimeError(f"Section registry is incomplete or has duplicates: {sorted(_missing)}")


def new_section_id() -> str:
    """Generate a fresh section id."""
    return str(uuid.uuid4())


def _tag_value(tag: SectionType | str) -> str:
    return tag.value if isinstance(tag, SectionType) else tag


def is_known_type(tag: SectionType | str) -> bool:
    """Check whether a tag belongs to the closed set."""
    value = _tag_value(tag)
    return isinstance(value, str) and value in REGISTRY


def get_spec(tag: SectionType | str) -> SectionSpec:
    """
    Look up the registry entry for a tag.

    Raises:
        UnknownSectionTypeError: If the tag is not registered
    """
    if not is_known_type(tag):
        raise UnknownSectionTypeError(str(_tag_value(tag)))
    return REGISTRY[_tag_value(tag)]


def list_section_types() -> list[SectionSpec]:
    """All registry entries, in declaration order."""
    return list(_SPECS)


def create_default(tag: SectionType | str, section_id: str | None = None) -> Section:
    """
    Build a render-ready section of the given type.

    Args:
        tag: Section type tag
        section_id: Optional id. If not provided, generates a UUID.

    Returns:
        New section with placeholder content and ``visible`` set

    Raises:
        UnknownSectionTypeError: If the tag is not registered
    """
    spec = get_spec(tag)
    return spec.factory(section_id or new_section_id())


def media_targets(tag: SectionType | str) -> tuple[MediaTargetSpec, ...]:
    """Media routing targets declared for a tag (empty for unknown tags)."""
    if not is_known_type(tag):
        return ()
    return REGISTRY[_tag_value(tag)].media_targets


def find_media_target(
    tag: SectionType | str, slot: MediaSlot | str, card_scoped: bool
) -> Optional[MediaTargetSpec]:
    """Resolve the target a (slot, card/no card) request maps to, if any."""
    slot_value = slot.value if isinstance(slot, MediaSlot) else slot
    for target in media_targets(tag):
        if target.slot.value == slot_value and target.card_scoped == card_scoped:
            return target
    return None
