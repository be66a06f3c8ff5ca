"""Page profiles: the per-page naming differences of the component store.

Pages share one composition engine and one component table; they differ only
in what their components are called, which auxiliary blobs they keep, and
what a fresh page starts with.
"""

from dataclasses import dataclass, replace
from typing import Optional

from pageomatic.sections.registry import create_default
from pageomatic.sections.types import SectionType
from pageomatic.services.document import PageDocument

SECTIONS_COMPONENT = "sections"
PAGE_PROPERTIES_COMPONENT = "page_properties"


@dataclass(frozen=True)
class PageProfile:
    """How one page maps onto component records.

    Attributes:
        slug: Page identifier (None for the catch-all custom-page profile)
        properties_component: Component kind holding the page properties
        auxiliary_components: Allowed auxiliary kinds; None allows any
        strip_footers: Drop stored footer sections on load (page has a global footer)
        initial_sections: Section tags a page starts with before its first save
    """

    slug: Optional[str] = None
    properties_component: str = PAGE_PROPERTIES_COMPONENT
    auxiliary_components: Optional[frozenset[str]] = None
    strip_footers: bool = False
    initial_sections: tuple[SectionType, ...] = ()

    @property
    def reserved_components(self) -> frozenset[str]:
        return frozenset({SECTIONS_COMPONENT, self.properties_component})

    def allows_auxiliary(self, component_type: str) -> bool:
        if component_type in self.reserved_components:
            return False
        return self.auxiliary_components is None or component_type in self.auxiliary_components

    def default_document(self) -> PageDocument:
        """A clean document holding this page's initial sections."""
        return PageDocument(sections=[create_default(tag) for tag in self.initial_sections])


DEFAULT_PROFILE = PageProfile()

PROFILES: dict[str, PageProfile] = {
    "home": PageProfile(
        slug="home",
        auxiliary_components=frozenset({"hero", "slider", "hero_slider", "section_order"}),
        strip_footers=True,
        initial_sections=(
            SectionType.HERO_RESPONSIVE,
            SectionType.CTA,
            SectionType.FEATURE_CARD_GRID,
            SectionType.MEDIA_STORY_CARDS,
            SectionType.DIVIDER,
        ),
    ),
    "about": PageProfile(
        slug="about",
        auxiliary_components=frozenset(),
        initial_sections=(SectionType.HERO_RESPONSIVE, SectionType.TEXT),
    ),
    "products": PageProfile(
        slug="products",
        properties_component="properties",
        auxiliary_components=frozenset(),
        initial_sections=(SectionType.HERO_RESPONSIVE, SectionType.FEATURE_CARD_GRID),
    ),
}


def get_profile(page_slug: str) -> PageProfile:
    """Profile for a slug; unknown slugs are custom pages."""
    profile = PROFILES.get(page_slug)
    if profile is not None:
        return profile
    return replace(DEFAULT_PROFILE, slug=page_slug)
