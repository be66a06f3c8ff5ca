"""Tests for routing picked media into section fields."""

import copy

import pytest

pytestmark = pytest.mark.unit

from pageomatic.sections.registry import create_default
from pageomatic.sections.types import MediaSlot
from pageomatic.services.media_router import MediaTarget, new_media_request, route_media

URL = "https://x/y.png"


class TestTopLevelMedia:
    """Tests for sections with a single top-level media field."""

    def test_media_text_left(self):
        """Test routing into a media-text section keeps its position."""
        section = {"id": "a", "type": "media-text-left", "mediaPosition": "left", "mediaUrl": ""}
        routed = route_media(section, MediaTarget("s0"), URL, "image")
        assert routed == {**section, "mediaUrl": URL, "mediaType": "image"}
        assert section["mediaUrl"] == ""

    def test_text_video(self):
        section = create_default("text", "t")
        routed = route_media(section, MediaTarget("s0"), "https://x/clip.mp4", "video")
        assert routed["mediaUrl"] == "https://x/clip.mp4"
        assert routed["mediaType"] == "video"

    def test_unknown_kind_is_stored_as_image(self):
        section = create_default("media-text-right", "m")
        routed = route_media(section, MediaTarget("s0"), URL, "gif")
        assert routed["mediaType"] == "image"

    def test_hero_background(self):
        section = create_default("hero-responsive", "h")
        routed = route_media(section, MediaTarget("s0", MediaSlot.BACKGROUND), URL, "video")
        assert routed["backgroundMedia"] == URL
        assert routed["mediaType"] == "video"


class TestCardMedia:
    """Tests for card-owning sections."""

    def test_thumbnail_on_second_card(self):
        """Test that only card-2's thumbnail changes."""
        section = create_default("media-story-cards", "stories")
        before = copy.deepcopy(section)

        routed = route_media(section, MediaTarget("s0", MediaSlot.THUMBNAIL, "card-2"), URL, "image")

        assert routed["cards"][1]["thumbnailUrl"] == URL
        assert routed["cards"][1]["mediaUrl"] == before["cards"][1]["mediaUrl"]
        assert routed["cards"][1]["mediaType"] == before["cards"][1]["mediaType"]
        assert routed["cards"][0] == before["cards"][0]
        assert routed["cards"][2] == before["cards"][2]
        assert section == before

    def test_card_media(self):
        section = create_default("feature-card-grid", "grid")
        routed = route_media(section, MediaTarget("s0", MediaSlot.MEDIA, "card-3"), URL, "video")
        assert routed["cards"][2]["mediaUrl"] == URL
        assert routed["cards"][2]["mediaType"] == "video"
        assert routed["cards"][0]["mediaUrl"] == ""

    def test_missing_card_is_dropped(self):
        section = create_default("info-card", "info")
        assert route_media(section, MediaTarget("s0", MediaSlot.MEDIA, "card-9"), URL) is section

    def test_mini_card_media_slot_is_dropped(self):
        section = create_default("mini-card-grid", "mini")
        assert route_media(section, MediaTarget("s0", MediaSlot.MEDIA, "card-1"), URL) is section


class TestHeroPromoSplit:
    """Tests for the split hero's media slots."""

    def test_profile_image(self):
        section = create_default("hero-promo-split", "promo")
        routed = route_media(section, MediaTarget("s0", MediaSlot.PROFILE_IMAGE), URL, "image")
        assert routed["profileImageUrl"] == URL
        assert routed["backgroundLeftMedia"] == ""

    def test_background_left_media(self):
        section = create_default("hero-promo-split", "promo")
        routed = route_media(
            section, MediaTarget("s0", MediaSlot.BACKGROUND_LEFT_MEDIA), "https://x/bg.mp4", "video"
        )
        assert routed["backgroundLeftMedia"] == "https://x/bg.mp4"
        assert routed["backgroundLeftMediaType"] == "video"
        assert routed["profileImageUrl"] == ""


class TestDroppedCombinations:
    """Tests for combinations the registry does not declare."""

    def test_card_id_on_section_without_cards(self):
        section = create_default("text", "t")
        assert route_media(section, MediaTarget("s0", MediaSlot.MEDIA, "card-1"), URL) is section

    def test_section_without_media(self):
        section = create_default("divider", "d")
        assert route_media(section, MediaTarget("s0"), URL) is section

    def test_request_ids_are_unique(self):
        first = new_media_request(MediaTarget("s0"))
        second = new_media_request(MediaTarget("s0"))
        assert first.request_id != second.request_id
        assert first.accept == "all"
