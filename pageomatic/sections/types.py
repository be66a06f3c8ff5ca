"""Section tags, media slots and the shared value aliases."""

from enum import Enum
from typing import Any

# Sections and cards are JSON-compatible mappings, persisted verbatim
Section = dict[str, Any]
Card = dict[str, Any]


class SectionType(str, Enum):
    """Closed set of section tags. Values are the persisted wire tags."""

    HERO = "hero"
    HERO_RESPONSIVE = "hero-responsive"
    HERO_PROMO_SPLIT = "hero-promo-split"
    TEXT = "text"
    CONTENT = "content"
    MEDIA_TEXT_LEFT = "media-text-left"
    MEDIA_TEXT_RIGHT = "media-text-right"
    DIVIDER = "divider"
    HEADING = "heading"
    QUOTE = "quote"
    CTA = "cta"
    GALLERY = "gallery"
    MEDIA_TEXT_COLUMNS = "mediaTextColumns"
    TWO_COLUMN_TEXT = "twoColumnText"
    FEATURE = "feature"
    SLIDER = "slider"
    FEATURE_CARD_GRID = "feature-card-grid"
    ADVANCED_SLIDER = "advanced-slider"
    INFO_CARD = "info-card"
    PRIVACY = "privacy"
    CUSTOM_CODE = "custom-code"
    MEDIA_PLACEHOLDER = "media-placeholder"
    EDITABLE_TITLE = "editable-title"
    TEXT_WITH_VIDEO_LEFT = "text-with-video-left"
    TEXT_WITH_VIDEO_RIGHT = "text-with-video-right"
    PRODUCT_PACKAGE_LEFT = "product-package-left"
    PRODUCT_PACKAGE_RIGHT = "product-package-right"
    MEDIA_STORY_CARDS = "media-story-cards"
    FOOTER = "footer"
    SIMPLE_FOOTER = "simple-footer"
    MINI_CARD_GRID = "mini-card-grid"
    CONTACT_FORM = "contact-form"
    ADVANCED_FORM = "fluxedita_advanced_form"


class MediaSlot(str, Enum):
    """Which field of a section (or card) an incoming media selection targets."""

    MEDIA = "media"
    THUMBNAIL = "thumbnail"
    PROFILE_IMAGE = "profile-image"
    BACKGROUND_LEFT_MEDIA = "background-left-media"
    BACKGROUND = "background"


class MediaKind(str, Enum):
    IMAGE = "image"
    VIDEO = "video"


class Direction(str, Enum):
    UP = "up"
    DOWN = "down"


# Tags whose shape carries a mediaPosition that must agree with the tag
MEDIA_TEXT_POSITIONS: dict[str, str] = {
    SectionType.MEDIA_TEXT_LEFT.value: "left",
    SectionType.MEDIA_TEXT_RIGHT.value: "right",
}

FOOTER_TYPES: frozenset[str] = frozenset(
    {SectionType.FOOTER.value, SectionType.SIMPLE_FOOTER.value}
)


def coerce_media_kind(kind: Any) -> str:
    """Map a picker-reported kind onto image/video, defaulting to image."""
    value = kind.value if isinstance(kind, Enum) else kind
    if value == MediaKind.VIDEO.value:
        return MediaKind.VIDEO.value
    return MediaKind.IMAGE.value
