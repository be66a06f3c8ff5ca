"""Translate between a page document and its component payloads."""

import copy
from typing import Any

from pageomatic.exceptions import ValidationError
from pageomatic.services.document import PageDocument, PageProperties
from pageomatic.services.page.normalization import normalize_sections
from pageomatic.services.page.profiles import SECTIONS_COMPONENT, PageProfile


def encode_components(document: PageDocument, profile: PageProfile) -> dict[str, Any]:
    """
    Split a document into one payload per component kind.

    Sections come first, then page properties, then auxiliary blobs in name
    order, which is also the order they are written in.

    Raises:
        ValidationError: If an auxiliary kind is not allowed for the page
    """
    components: dict[str, Any] = {
        SECTIONS_COMPONENT: copy.deepcopy(document.sections),
        profile.properties_component: document.properties.to_payload(),
    }
    for component_type in sorted(document.auxiliary):
        if not profile.allows_auxiliary(component_type):
            raise ValidationError(
                f"Component '{component_type}' is not allowed on page '{profile.slug}'",
                "auxiliary",
            )
        components[component_type] = copy.deepcopy(document.auxiliary[component_type])
    return components


def decode_sections(content: Any, strip_footers: bool = False) -> list[dict[str, Any]]:
    """
    Decode a stored sections payload, applying load-time normalisation.

    Raises:
        ValidationError: If the payload is not a list
    """
    if content is None:
        return []
    if not isinstance(content, list):
        raise ValidationError("Stored sections must be a list", SECTIONS_COMPONENT)
    return normalize_sections(copy.deepcopy(content), strip_footers=strip_footers)


def decode_components(components: dict[str, Any], profile: PageProfile) -> PageDocument:
    """
    Rebuild a clean document from component payloads keyed by kind.

    Raises:
        ValidationError: If the sections or properties payload is malformed
    """
    sections = decode_sections(
        components.get(SECTIONS_COMPONENT), strip_footers=profile.strip_footers
    )
    properties = PageProperties.from_payload(components.get(profile.properties_component))
    auxiliary = {
        component_type: copy.deepcopy(content)
        for component_type, content in components.items()
        if profile.allows_auxiliary(component_type)
    }
    return PageDocument(sections=sections, properties=properties, auxiliary=auxiliary)
