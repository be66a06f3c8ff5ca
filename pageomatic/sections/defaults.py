"""Default-value factories for every section type.

Each factory receives the new section id and returns a render-ready section
with conservative placeholder content. Factories never share mutable state:
every call builds fresh lists and dicts.
"""

from typing import Any

from pageomatic.sections.types import Card, Section, SectionType


def _base(section_id: str, tag: SectionType, **fields: Any) -> Section:
    section: Section = {
        "id": section_id,
        "type": tag.value,
        "visible": True,
        "enableSpeech": False,
    }
    section.update(fields)
    return section


def _video_settings() -> dict[str, bool]:
    return {"muted": True, "autoplay": False, "loop": False, "controls": True}


def hero(section_id: str) -> Section:
    return _base(
        section_id,
        SectionType.HERO,
        title="New Hero Section",
        description="",
        backgroundImage="",
        backgroundMedia="",
        mediaType="image",
        height="50vh",
        width="100%",
        enableTitleSpeech=False,
        enableDescriptionSpeech=False,
        objectFit="cover",
        objectPosition="center",
    )


def hero_responsive(section_id: str) -> Section:
    return _base(
        section_id,
        SectionType.HERO_RESPONSIVE,
        title="New Responsive Hero Section",
        description="",
        buttonText="",
        buttonUrl="",
        backgroundImage="",
        backgroundMedia="",
        mediaType="image",
        overlayColor="rgba(0,0,0,0.5)",
        textColor="#ffffff",
        enableTitleSpeech=False,
        enableDescriptionSpeech=False,
        height="50vh",
        objectFit="cover",
        objectPosition="center",
        textVerticalAlign="middle",
        textHorizontalAlign="center",
    )


def hero_promo_split(section_id: str) -> Section:
    return _base(
        section_id,
        SectionType.HERO_PROMO_SPLIT,
        headline="Amazing Headline",
        badgeText="Join Us",
        title="Your Title Here",
        subtitle="Your Subtitle",
        description="Add your description here",
        bulletPoints=["Feature 1", "Feature 2", "Feature 3"],
        buttonLabel="Get Started",
        buttonUrl="/",
        contactPhone="",
        contactEmail="",
        profileImageUrl="",
        fullWidth=False,
        backgroundLeftMedia="",
        backgroundLeftMediaType="image",
        theme={
            "backgroundLeft": "from-blue-700 to-blue-900",
            "backgroundRight": "bg-white",
            "textColor": "text-white",
            "buttonColor": "bg-blue-600 hover:bg-blue-700",
        },
    )


def text(section_id: str) -> Section:
    return _base(
        section_id,
        SectionType.TEXT,
        content="Enter your text content here...",
        alignment="left",
        fontSize="1rem",
        fontColor="#222",
        backgroundColor="#fff",
        padding="1rem",
        margin="1rem 0",
        mediaUrl="",
        mediaType="image",
        mediaPosition="top",
        mediaWidth="100%",
        mediaHeight="auto",
        textStyle={},
    )


def content(section_id: str) -> Section:
    return _base(
        section_id,
        SectionType.CONTENT,
        content="This is the default content section. You can edit this to add your own content.",
        alignment="left",
        fontSize="16px",
        fontColor="#333333",
        backgroundColor="transparent",
        padding="16px",
        margin="16px 0",
        textStyle={"fontStyle": "normal", "fontColor": "#333333", "fontSize": "16px"},
    )


def _media_text(section_id: str, tag: SectionType, position: str) -> Section:
    return _base(
        section_id,
        tag,
        title="New Media Text Section",
        description="",
        mediaUrl="",
        mediaType="image",
        mediaPosition=position,
        enableTitleSpeech=False,
        enableDescriptionSpeech=False,
    )


def media_text_left(section_id: str) -> Section:
    return _media_text(section_id, SectionType.MEDIA_TEXT_LEFT, "left")


def media_text_right(section_id: str) -> Section:
    return _media_text(section_id, SectionType.MEDIA_TEXT_RIGHT, "right")


def divider(section_id: str) -> Section:
    return _base(
        section_id,
        SectionType.DIVIDER,
        style="solid",
        color="#e5e7eb",
        thickness="2px",
        width="100%",
        margin="2rem 0",
        alignment="center",
    )


def heading(section_id: str) -> Section:
    return _base(
        section_id,
        SectionType.HEADING,
        text="New Heading",
        level="h2",
        alignment="center",
        fontSize="2rem",
        fontColor="#222",
    )


def quote(section_id: str) -> Section:
    return _base(
        section_id,
        SectionType.QUOTE,
        text="Add a memorable quote here.",
        author="",
        alignment="center",
        fontSize="1.25rem",
        fontColor="#222",
    )


def cta(section_id: str) -> Section:
    return _base(
        section_id,
        SectionType.CTA,
        title="New CTA Section",
        description="",
        buttonText="Click Me",
        buttonUrl="/",
        backgroundColor="#ffffff",
        textColor="#000000",
        enableTitleSpeech=False,
        enableDescriptionSpeech=False,
    )


def gallery(section_id: str) -> Section:
    return _base(
        section_id,
        SectionType.GALLERY,
        title="New Gallery",
        description="",
        images=[],
        layout="grid",
        enableTitleSpeech=False,
        enableDescriptionSpeech=False,
        enableImageSpeech=False,
    )


def media_text_columns(section_id: str) -> Section:
    return _base(
        section_id,
        SectionType.MEDIA_TEXT_COLUMNS,
        title="",
        description="",
        mediaUrl="",
        mediaType="image",
        mediaPosition="left",
        enableTitleSpeech=False,
        enableDescriptionSpeech=False,
    )


def two_column_text(section_id: str) -> Section:
    return _base(
        section_id,
        SectionType.TWO_COLUMN_TEXT,
        leftColumn="",
        rightColumn="",
        enableLeftColumnSpeech=False,
        enableRightColumnSpeech=False,
    )


def feature(section_id: str) -> Section:
    return _base(
        section_id,
        SectionType.FEATURE,
        title="New Feature Section",
        description="",
        features=[],
        layout="grid",
        enableTitleSpeech=False,
        enableDescriptionSpeech=False,
        enableFeatureSpeech=False,
    )


def slider(section_id: str) -> Section:
    return _base(
        section_id,
        SectionType.SLIDER,
        slides=[],
        autoplay=False,
        autoplayDelay=3000,
        showNavigation=True,
        showPagination=True,
        effect="slide",
        loop=False,
        height="400px",
        width="100%",
        enableTitleSpeech=False,
        enableDescriptionSpeech=False,
    )


def _feature_card(index: int) -> Card:
    return {
        "id": f"card-{index}",
        "mediaUrl": "",
        "mediaType": "image",
        "title": f"Card {index}",
        "description": "Describe this card.",
        "ctaText": "Learn More",
        "ctaUrl": "/",
        "ctaOpenInNewTab": False,
    }


def feature_card_grid(section_id: str) -> Section:
    return _base(
        section_id,
        SectionType.FEATURE_CARD_GRID,
        numCards=3,
        cards=[_feature_card(i) for i in range(1, 4)],
    )


def advanced_slider(section_id: str) -> Section:
    return _base(
        section_id,
        SectionType.ADVANCED_SLIDER,
        slides=[],
        autoplay=True,
        autoplayDelay=5000,
        showNavigation=True,
        showPagination=True,
        effect="fade",
        loop=True,
        height="500px",
        width="100%",
    )


def info_card(section_id: str) -> Section:
    card = _feature_card(1)
    card.update(title="Card Title", description="Card description goes here", ctaUrl="#", textStyle={})
    return _base(
        section_id,
        SectionType.INFO_CARD,
        backgroundUrl="",
        numCards=1,
        cards=[card],
    )


def privacy(section_id: str) -> Section:
    return _base(
        section_id,
        SectionType.PRIVACY,
        title="Privacy",
        content=(
            "<p>We respect your privacy and are committed to protecting your personal data. "
            'For the full policy, please see our <a href="/privacy">Privacy Policy</a> page.</p>'
        ),
    )


def custom_code(section_id: str) -> Section:
    return _base(section_id, SectionType.CUSTOM_CODE, code="")


def media_placeholder(section_id: str) -> Section:
    return _base(
        section_id,
        SectionType.MEDIA_PLACEHOLDER,
        cards=[
            {
                "id": "card-1",
                "title": "Sample Media Card",
                "description": "This is a sample media card. You can add more cards and customize them.",
                "mediaUrl": "",
                "mediaType": "image",
            }
        ],
        visibleCount=3,
        currentPage=0,
    )


def editable_title(section_id: str) -> Section:
    return _base(
        section_id,
        SectionType.EDITABLE_TITLE,
        title="New Page Title",
        slug="new-page-title",
        alignment="center",
    )


def _text_with_video(section_id: str, tag: SectionType) -> Section:
    return _base(
        section_id,
        tag,
        title="Text with Video",
        tagline="Your Tagline",
        description="Add a description for this section.",
        videoId="",
        buttonText="Watch Tutorial",
        horizontalPadding=0,
        verticalPadding=0,
    )


def text_with_video_left(section_id: str) -> Section:
    return _text_with_video(section_id, SectionType.TEXT_WITH_VIDEO_LEFT)


def text_with_video_right(section_id: str) -> Section:
    return _text_with_video(section_id, SectionType.TEXT_WITH_VIDEO_RIGHT)


def _product_package(section_id: str, tag: SectionType) -> Section:
    return _base(
        section_id,
        tag,
        name="Product Name",
        subtitle="Product Subtitle",
        description="Describe your product package here.",
        badge="",
        features=["Feature 1", "Feature 2"],
        perfectFor=["Use 1", "Use 2"],
        color="from-blue-500 to-blue-700",
        imageSrc="",
        imageAlt="",
        horizontalPadding=0,
        verticalPadding=0,
    )


def product_package_left(section_id: str) -> Section:
    return _product_package(section_id, SectionType.PRODUCT_PACKAGE_LEFT)


def product_package_right(section_id: str) -> Section:
    return _product_package(section_id, SectionType.PRODUCT_PACKAGE_RIGHT)


def media_story_cards(section_id: str) -> Section:
    return _base(
        section_id,
        SectionType.MEDIA_STORY_CARDS,
        title="Featured Stories",
        cards=[
            {
                "id": f"card-{i}",
                "title": f"Story {i}",
                "tagline": f"A short description of story {i}",
                "mediaUrl": "",
                "mediaType": "image",
                "thumbnailUrl": "",
                "linkUrl": "#",
                "linkTarget": "_self",
            }
            for i in range(1, 4)
        ],
        columns=3,
    )


def footer(section_id: str) -> Section:
    return _base(
        section_id,
        SectionType.FOOTER,
        numColumns=3,
        columns=[],
        backgroundColor="#f8f9fa",
        textColor="#333333",
        padding="2rem",
    )


def simple_footer(section_id: str) -> Section:
    return _base(
        section_id,
        SectionType.SIMPLE_FOOTER,
        columns=[{"title": "About", "content": ""}],
        backgroundColor="#f8f9fa",
        textColor="#333333",
        width="100%",
    )


def mini_card_grid(section_id: str) -> Section:
    return _base(
        section_id,
        SectionType.MINI_CARD_GRID,
        cards=[
            {
                "id": f"card-{i}",
                "title": "Title",
                "tagline": "Tagline",
                "thumbnailUrl": "",
                "linkUrl": "#",
                "sponsored": False,
            }
            for i in range(1, 5)
        ],
        cardsAlignment="left",
    )


def contact_form(section_id: str) -> Section:
    return _base(
        section_id,
        SectionType.CONTACT_FORM,
        formAction="/api/contact",
        formMethod="POST",
        fields=[
            {"id": "name", "name": "name", "label": "Name", "type": "text", "required": True, "placeholder": "Your name"},
            {"id": "email", "name": "email", "label": "Email", "type": "email", "required": True, "placeholder": "you@example.com"},
            {"id": "message", "name": "message", "label": "Message", "type": "textarea", "required": True, "placeholder": "Your message"},
        ],
    )


def advanced_form(section_id: str) -> Section:
    return _base(section_id, SectionType.ADVANCED_FORM)
